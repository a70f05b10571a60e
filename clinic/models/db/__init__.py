from clinic.models.db.base import NAMING_CONVENTION, Base, TimestampMixin, utcnow

__all__ = ["Base", "NAMING_CONVENTION", "TimestampMixin", "utcnow"]
