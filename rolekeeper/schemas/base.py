"""Shared base for strict request payloads and the response envelope."""

from collections.abc import Mapping
from typing import Any, Generic, Self, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from rolekeeper.core.errors import CorruptData, ValidationError

T = TypeVar("T")


class StrictPayload(BaseModel):
    """
    Request body that must carry exactly its declared fields.

    Extra keys (e.g. a client-supplied id or role) are rejected, and values are
    not coerced across types.
    """

    model_config = ConfigDict(extra="forbid", strict=True)

    @classmethod
    def parse(cls, data: Any) -> Self:
        """Validate a raw body; raise ValidationError with a readable message on failure."""
        if isinstance(data, cls):
            return data
        if not isinstance(data, Mapping):
            raise ValidationError("Invalid request: body must be a JSON object")
        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid request: {_summarize(e)}") from e


def _summarize(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "body"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


class Envelope(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint."""

    success: bool = True
    data: T | None = None


class StoredRecord(BaseModel):
    """Shape every persisted record must have; unknown extra fields are kept."""

    model_config = ConfigDict(extra="allow", strict=True)

    id: int


def check_records(
    model: type[StoredRecord], records: list[dict[str, Any]], collection: str
) -> list[dict[str, Any]]:
    """Raise CorruptData if any stored record does not match ``model``."""
    for position, record in enumerate(records):
        try:
            model.model_validate(record)
        except PydanticValidationError as e:
            raise CorruptData(
                f"Collection '{collection}' record {position} is malformed: {_summarize(e)}"
            ) from e
    return records
