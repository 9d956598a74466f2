"""SQLAlchemy integration: fillable declarative models."""

from mapper_kernel.db.base import Base, FillableMixin, UUIDString

__all__ = ["Base", "FillableMixin", "UUIDString"]
