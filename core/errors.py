# core/errors.py
"""
Error taxonomy shared by the record store, the asset registry and both
workflows.

Each error carries a stable, human-readable message; the HTTP layer turns
it into the uniform ``{success, message, data}`` envelope.
"""


class AssetTrackerError(Exception):
    """Base class for every failure reported to callers."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AssetTrackerError):
    """A required field is missing or empty."""

    kind = "validation"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field

    @classmethod
    def missing(cls, field: str) -> "ValidationError":
        return cls(f"Missing required field: {field}", field=field)


class DuplicateError(AssetTrackerError):
    """A uniqueness rule (serial number) would be violated."""

    kind = "duplicate"


class NotFoundError(AssetTrackerError):
    """Unknown asset, employee, form, disposal, collection or column."""

    kind = "not_found"


class ConflictError(AssetTrackerError):
    """The operation is not permitted in the record's current state."""

    kind = "conflict"


class DependencyError(AssetTrackerError):
    """A collaborator on the critical path failed mid-operation."""

    kind = "dependency"


def require_fields(data: dict, fields: tuple[str, ...] | list[str]) -> None:
    """Raise ValidationError naming the first missing or blank field."""
    for field in fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError.missing(field)
