from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic_core import PydanticCustomError
from collections.abc import Mapping
from typing import ClassVar, Final
from markupsafe import escape
import datetime
import re
import uuid

from catalog.models.author import NAME_MAX_LENGTH

AUTHOR_FIELDS: Final[tuple[str, ...]] = (
    "first_name",
    "family_name",
    "date_of_birth",
    "date_of_death",
)

# field -> (required, too long, alphanumeric) messages
_NAME_MESSAGES: Final[dict[str, tuple[str, str, str]]] = {
    "first_name": (
        "名を指定してください。",
        f"名は{NAME_MAX_LENGTH}文字以内で指定してください。",
        "名は半角アルファベットで指定してください。",
    ),
    "family_name": (
        "氏を指定してください。",
        f"氏は{NAME_MAX_LENGTH}文字以内で指定してください。",
        "氏は半角アルファベットで指定してください。",
    ),
}
_DATE_MESSAGES: Final[dict[str, str]] = {
    "date_of_birth": "無効な生年月日です。",
    "date_of_death": "無効な没年月日です。",
}
_ALPHANUMERIC = re.compile(r"[0-9A-Za-z]+")


def sanitize_name(value: object) -> str:
    """Trim and HTML-escape a submitted name for safe redisplay."""
    if value is None:
        return ""
    return str(escape(str(value).strip()))


def parse_iso_date(value: str) -> datetime.date:
    """
    ISO-8601 calendar date, or a full ISO date-time reduced to its date.
    Raises ValueError for anything else (bare numbers included).
    """
    text = value.strip()
    try:
        return datetime.date.fromisoformat(text)
    except ValueError:
        return datetime.datetime.fromisoformat(text).date()


def _lenient_date(value: object) -> datetime.date | None:
    if isinstance(value, datetime.date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        return None


# Submitted author form
class AuthorForm(BaseModel):
    """
    Field rules run in declaration order. Every field is checked; within a
    field the first failing rule wins, so a field yields at most one error.
    """
    first_name: str
    family_name: str
    date_of_birth: datetime.date | None = None
    date_of_death: datetime.date | None = None

    @field_validator("first_name", "family_name", mode="before")
    @classmethod
    def trim_and_escape(cls, v: object) -> str:
        return sanitize_name(v)

    @field_validator("first_name", "family_name")
    @classmethod
    def required_alphanumeric(cls, v: str, info: ValidationInfo) -> str:
        required, too_long, alphanumeric = _NAME_MESSAGES[info.field_name]
        if not v:
            raise PydanticCustomError("required", required)
        if len(v) > NAME_MAX_LENGTH:
            raise PydanticCustomError("too_long", too_long)
        if not _ALPHANUMERIC.fullmatch(v):
            raise PydanticCustomError("alphanumeric", alphanumeric)
        return v

    @field_validator("date_of_birth", "date_of_death", mode="wrap")
    @classmethod
    def optional_iso_date(
        cls, v: object, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> datetime.date | None:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        if not isinstance(v, str):
            return handler(v)
        try:
            return parse_iso_date(v)
        except ValueError:
            raise PydanticCustomError("iso_date", _DATE_MESSAGES[info.field_name]) from None


# One failed rule
class FieldError(BaseModel):
    field: str
    message: str


class ValidationResult(BaseModel):
    errors: list[FieldError] = []

    def is_empty(self) -> bool:
        return not self.errors

    def array(self) -> list[FieldError]:
        return list(self.errors)


# Author as rebuilt from a submission (valid or not)
class AuthorCandidate(BaseModel):
    id: uuid.UUID | None = None
    first_name: str = ""
    family_name: str = ""
    date_of_birth: datetime.date | None = None
    date_of_death: datetime.date | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True)

    def values(self) -> dict[str, object]:
        """Stored fields, without the identity."""
        return self.model_dump(exclude={"id"})


def validate_author_form(
    data: Mapping[str, object],
) -> tuple[AuthorCandidate, ValidationResult]:
    """
    Run all field rules over a submission. The candidate is always built
    from the sanitized values; invalid dates are left empty.
    """
    raw = {field: data.get(field) or "" for field in AUTHOR_FIELDS}
    try:
        form = AuthorForm.model_validate(raw)
    except ValidationError as exc:
        errors = [
            FieldError(field=str(err["loc"][0]), message=err["msg"])
            for err in exc.errors()
        ]
        candidate = AuthorCandidate(
            first_name=sanitize_name(raw["first_name"]),
            family_name=sanitize_name(raw["family_name"]),
            date_of_birth=_lenient_date(raw["date_of_birth"]),
            date_of_death=_lenient_date(raw["date_of_death"]),
        )
        return candidate, ValidationResult(errors=errors)

    return AuthorCandidate(**form.model_dump()), ValidationResult()
