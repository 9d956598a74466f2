"""Target, source and mapper types shared by the mapper kernel tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from mapper_kernel.db.base import Base


class Airport:
    code: str | None = None
    city: str | None = None


class PlainAirport:
    """Fields declared as plain class attributes, no annotations."""

    code = None
    city = None
    runways = 0

    def describe(self):
        return f"{self.code} ({self.city})"

    @staticmethod
    def kind():
        return "airport"

    @classmethod
    def build(cls):
        return cls()


class Clock:
    def version(self) -> str:
        return "11.0"


class AirportWithClock(Airport):
    """Target whose constructor needs a dependency and sets a field."""

    version: str | None

    def __init__(self, clock: Clock):
        self.version = clock.version()


class AirportWithDefaults:
    """Fields declared only by the constructor."""

    def __init__(self):
        self.code = "XXX"
        self.city = "unknown"
        self._internal = "hidden"


class SlottedAirport:
    __slots__ = ("code", "city", "_cache")

    def __init__(self):
        self.code = None
        self.city = None


class DeclaredAirport:
    """Explicit field declaration: only ``code`` is assignable."""

    __mapped_fields__ = ("code",)

    code: str | None = None
    city: str | None = None


class AirportWithConstants:
    REGION: ClassVar[str] = "EU"

    code: str | None = None

    @property
    def label(self) -> str:
        return f"{self.code}/{self.REGION}"


@dataclass
class AirportDTO:
    code: str | None = None
    city: str | None = None


class AirportRecord(Base):
    __tablename__ = "airports"
    __fillable__ = ("code", "city")

    code: Mapped[str | None] = mapped_column(String(3))
    city: Mapped[str | None] = mapped_column(String(100))
    internal_note: Mapped[str | None] = mapped_column(String(200))


class GuardedAirportRecord(Base):
    __tablename__ = "guarded_airports"
    __guarded__ = ("id", "internal_note")

    code: Mapped[str | None] = mapped_column(String(3))
    city: Mapped[str | None] = mapped_column(String(100))
    internal_note: Mapped[str | None] = mapped_column(String(200))


class CustomAirportMapper:
    """Named mapper: ignores the item, returns a marker airport."""

    def map(self, item, target_type):
        airport = target_type()
        airport.code = "custom-mapped"
        airport.city = "custom-mapped"
        return airport


class UppercaseAirportMapper:
    def map(self, item, target_type):
        airport = target_type()
        airport.code = item["code"].upper()
        airport.city = item["city"]
        return airport


class CountingMapper:
    """Records every call so tests can see which chain entries ran."""

    calls: ClassVar[list[str]] = []

    def map(self, item, target_type):
        CountingMapper.calls.append(item["code"])
        return {"counted": item["code"]}


class ClockAwareMapper:
    def __init__(self, clock: Clock):
        self.clock = clock

    def map(self, item, target_type):
        return f"{item['code']}@{self.clock.version()}"


class NotAMapper:
    """Resolvable, but has no map()."""

    def transform(self, item):
        return item


class AirportPayload:
    """Structured payload exposing export_all()."""

    def __init__(self, **fields):
        self._fields = fields

    def export_all(self):
        return dict(self._fields)
