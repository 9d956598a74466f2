"""Structured payload adapters (no I/O)."""

from mapper_kernel.adapters.payload import FormPayload

__all__ = ["FormPayload"]
