"""Schema validation for untyped book documents.

``validate_document`` never raises. It returns ``Valid`` carrying the typed
payload, or ``Invalid`` carrying one message per violation in the order
pydantic reports them (declared field order, then unexpected fields).
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from pydantic import ValidationError as PydanticValidationError

from src.domain.books.schemas import BookCreate, BookEdit

ROOT_LOCATION = "body"


class SchemaKind(Enum):
    """Which payload schema a document is checked against."""

    CREATE = "create"
    EDIT = "edit"


SCHEMAS: dict[SchemaKind, type[BookEdit]] = {
    SchemaKind.CREATE: BookCreate,
    SchemaKind.EDIT: BookEdit,
}


@dataclass(frozen=True, slots=True)
class Valid:
    """The document satisfied the schema."""

    payload: BookEdit


@dataclass(frozen=True, slots=True)
class Invalid:
    """The document violated the schema."""

    messages: tuple[str, ...]


type ValidationResult = Valid | Invalid


def _format_error(location: tuple[int | str, ...], message: str) -> str:
    field = ".".join(str(part) for part in location) or ROOT_LOCATION
    return f"{field}: {message}"


def validate_document(document: object, kind: SchemaKind) -> ValidationResult:
    """Validate an untyped document against the create or edit schema.

    An absent document (``None``, as for an empty request body) is checked
    as an empty mapping so that every missing field is reported.

    Args:
        document: Decoded request body.
        kind: Schema to validate against.

    Returns:
        ValidationResult: ``Valid`` with the typed payload, or ``Invalid``
            with the ordered violation messages.
    """
    if document is None:
        document = {}

    if not isinstance(document, Mapping):
        return Invalid(
            (_format_error((), f"Expected an object, got {type(document).__name__}"),)
        )

    try:
        payload = SCHEMAS[kind].model_validate(dict(document))
    except PydanticValidationError as exc:
        return Invalid(
            tuple(_format_error(error["loc"], error["msg"]) for error in exc.errors())
        )

    return Valid(payload)
