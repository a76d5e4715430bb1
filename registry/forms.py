"""Profile form schema, validation and payload building."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from registry.schema import GENDER_OPTIONS, is_blank, to_utc_timestamp

MIN_BIRTH_DATE = date(1900, 1, 1)

OPTIONAL_TEXT_FIELDS = (
    "language_spoken",
    "physical_identifiers",
    "mode_of_entry",
    "entry_point",
    "assisting_network",
    "last_known_address",
    "current_location",
    "migration_pattern",
    "associated_locations",
    "current_occupation",
    "cover_identity",
    "support_network",
    "criminal_background",
    "case_registered",
    "detained_by",
    "court_proceedings_status",
    "seized_ids",
    "intelligence_dossier",
)


class ProfileForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str = Field(default="", validate_default=True)
    gender: Optional[str] = Field(default=None, validate_default=True)
    date_of_birth: Optional[date] = Field(default=None, validate_default=True)

    language_spoken: Optional[str] = None
    physical_identifiers: Optional[str] = None
    mode_of_entry: Optional[str] = None
    entry_point: Optional[str] = None
    date_of_entry: Optional[date] = None
    assisting_network: Optional[str] = None
    last_known_address: Optional[str] = None
    current_location: Optional[str] = None
    migration_pattern: Optional[str] = None
    associated_locations: Optional[str] = None
    current_occupation: Optional[str] = None
    cover_identity: Optional[str] = None
    support_network: Optional[str] = None
    criminal_background: Optional[str] = None
    case_registered: Optional[str] = None
    detained_by: Optional[str] = None
    court_proceedings_status: Optional[str] = None
    embassy_contacted: bool = False
    seized_ids: Optional[str] = None
    intelligence_dossier: Optional[str] = None

    @field_validator(*OPTIONAL_TEXT_FIELDS, "date_of_entry", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return None if is_blank(value) else value

    @field_validator("name", mode="before")
    @classmethod
    def _name_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("name")
    @classmethod
    def _name_length(cls, value: str) -> str:
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters.")
        return value

    @field_validator("gender", mode="before")
    @classmethod
    def _gender_selected(cls, value: Any) -> str:
        if is_blank(value):
            raise ValueError("Please select a gender.")
        value = str(value).strip()
        if value not in GENDER_OPTIONS:
            raise ValueError(f"Gender must be one of: {', '.join(GENDER_OPTIONS)}.")
        return value

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _dob_present(cls, value: Any) -> Any:
        if is_blank(value):
            raise ValueError("Date of birth is required.")
        return value

    @field_validator("date_of_birth")
    @classmethod
    def _dob_range(cls, value: date) -> date:
        if value > date.today() or value < MIN_BIRTH_DATE:
            raise ValueError("Date of birth must be between 1900-01-01 and today.")
        return value

    @field_validator("date_of_entry")
    @classmethod
    def _entry_not_future(cls, value: Optional[date]) -> Optional[date]:
        if value is not None and value > date.today():
            raise ValueError("Date of entry cannot be in the future.")
        return value


def _error_message(err: Dict[str, Any]) -> str:
    ctx = err.get("ctx") or {}
    if err.get("type") == "value_error" and ctx.get("error") is not None:
        return str(ctx["error"])
    return str(err.get("msg", "Invalid value."))


def validate_form(raw: Mapping[str, Any]) -> Tuple[Optional[ProfileForm], Dict[str, str]]:
    """Validate raw form input; returns the model or per-field error messages."""
    try:
        return ProfileForm.model_validate(dict(raw)), {}
    except ValidationError as exc:
        errors: Dict[str, str] = {}
        for err in exc.errors():
            loc = err.get("loc") or ("__all__",)
            errors.setdefault(str(loc[0]), _error_message(err))
        return None, errors


PHOTO_MAX_BYTES = 5 * 1024 * 1024
PHOTO_TYPES = ("jpg", "jpeg", "png", "gif")


@dataclass(frozen=True)
class PhotoUpload:
    content: bytes
    filename: str
    content_type: str = "application/octet-stream"

    @property
    def extension(self) -> str:
        if "." not in self.filename:
            return ""
        return self.filename.rsplit(".", 1)[-1].lower()


def photo_error(photo: Optional[PhotoUpload]) -> Optional[str]:
    if photo is None:
        return None
    if photo.extension not in PHOTO_TYPES:
        return "Photo must be a JPG, PNG or GIF image."
    if len(photo.content) > PHOTO_MAX_BYTES:
        return "Photo must be 5MB or smaller."
    return None


def compute_age(date_of_birth: date, today: Optional[date] = None) -> int:
    today = today or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def _form_values(form: ProfileForm) -> Dict[str, Any]:
    values = form.model_dump()
    for field in ("date_of_birth", "date_of_entry"):
        if values.get(field) is not None:
            values[field] = values[field].isoformat()
    return values


def to_insert_payload(form: ProfileForm, photo_url: Optional[str] = None, today: Optional[date] = None) -> Dict[str, Any]:
    payload = _form_values(form)
    payload["age"] = compute_age(form.date_of_birth, today)
    payload["photo_url"] = photo_url
    return payload


def to_update_payload(form: ProfileForm, photo_url: Optional[str] = None) -> Dict[str, Any]:
    # Age is fixed at creation; edits never recompute it.
    payload = _form_values(form)
    if photo_url is not None:
        payload["photo_url"] = photo_url
    return payload


def form_defaults(profile: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Widget-ready values for the create (empty) or edit (stored record) form."""
    profile = profile or {}
    values: Dict[str, Any] = {
        "name": profile.get("name") or "",
        "gender": profile.get("gender") or None,
        "embassy_contacted": bool(profile.get("embassy_contacted") or False),
    }
    for field in ("date_of_birth", "date_of_entry"):
        ts = to_utc_timestamp(profile.get(field))
        values[field] = ts.date() if ts is not None else None
    for field in OPTIONAL_TEXT_FIELDS:
        values[field] = profile.get(field) or ""
    return values
