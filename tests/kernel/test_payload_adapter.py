"""Tests for FormPayload, the request-shaped structured payload."""

import pytest

from mapper_kernel import Mapper
from mapper_kernel.adapters.payload import FormPayload
from mapper_kernel.domain.protocols import ExportsAll
from mapper_kernel.exceptions import MalformedSourceError
from tests.dummies import Airport


class TestCreate:
    def test_get_merges_data_into_query(self):
        payload = FormPayload.create("/airports?code=LPK", "get", {"city": "Lipetsk"})

        assert payload.method == "GET"
        assert payload.path == "/airports"
        assert payload.query == {"code": "LPK", "city": "Lipetsk"}
        assert payload.body == {}
        assert payload.content_type is None

    def test_post_data_becomes_body(self):
        payload = FormPayload.create("/airports", "POST", {"code": "LPK"})

        assert payload.query == {}
        assert payload.body == {"code": "LPK"}
        assert payload.content_type == "application/x-www-form-urlencoded"

    def test_keys_are_stripped(self):
        payload = FormPayload.create("/", "POST", {" code ": "LPK", 1: "dropped"})

        assert payload.body == {"code": "LPK"}

    def test_body_wins_over_query(self):
        payload = FormPayload.create("/airports?code=OLD&city=Lipetsk", "POST", {"code": "LPK"})

        assert payload.export_all() == {"code": "LPK", "city": "Lipetsk"}


class TestFromRaw:
    def test_json_body(self):
        payload = FormPayload.from_raw(
            "/airports", "post", b'{"code": "LPK"}', "application/json; charset=utf-8"
        )

        assert payload.body == {"code": "LPK"}
        assert payload.content_type == "application/json"

    def test_json_array_body_is_ignored(self):
        payload = FormPayload.from_raw("/", "POST", "[1, 2]", "application/json")

        assert payload.body == {}

    def test_empty_json_body(self):
        assert FormPayload.from_raw("/", "POST", b"", "application/json").body == {}

    def test_malformed_json_body(self):
        with pytest.raises(MalformedSourceError):
            FormPayload.from_raw("/", "POST", '{"code": ', "application/json")

    def test_form_body(self):
        payload = FormPayload.from_raw(
            "/airports", "PUT", b"code=LPK&city=Lipetsk", "application/x-www-form-urlencoded"
        )

        assert payload.body == {"code": "LPK", "city": "Lipetsk"}

    def test_unknown_content_type_has_no_body(self):
        payload = FormPayload.from_raw("/?code=LPK", "POST", "raw", "text/plain")

        assert payload.export_all() == {"code": "LPK"}


class TestAsSource:
    def test_is_a_structured_payload(self):
        assert isinstance(FormPayload(), ExportsAll)

    def test_normalized_at_construction(self):
        payload = FormPayload.create("/airports", "POST", {"code": "LPK", "city": "Lipetsk"})

        mapper = Mapper.map(payload)

        assert mapper.source == {"code": "LPK", "city": "Lipetsk"}

    def test_maps_to_target(self):
        payload = FormPayload.create("/airports?city=Lipetsk", "POST", {"code": "LPK"})

        airport = Mapper.map(payload).to(Airport)

        assert (airport.code, airport.city) == ("LPK", "Lipetsk")
