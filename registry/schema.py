"""Profile field schema and display helpers shared by every view."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

PROFILE_COLUMNS: List[str] = [
    "id",
    "created_at",
    "name",
    "gender",
    "age",
    "date_of_birth",
    "photo_url",
    "language_spoken",
    "physical_identifiers",
    "mode_of_entry",
    "entry_point",
    "date_of_entry",
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
    "embassy_contacted",
    "seized_ids",
    "intelligence_dossier",
]

REQUIRED_FIELDS = ("name", "gender", "date_of_birth")
GENDER_OPTIONS = ("Male", "Female", "Other")
DATE_FIELDS = ("date_of_birth", "date_of_entry")
BOOLEAN_FIELDS = ("embassy_contacted",)

# Free-text columns matched by the search box.
SEARCHABLE_FIELDS: Tuple[str, ...] = (
    "name",
    "current_location",
    "current_occupation",
    "language_spoken",
    "mode_of_entry",
    "entry_point",
    "assisting_network",
    "last_known_address",
    "migration_pattern",
    "associated_locations",
    "cover_identity",
    "support_network",
    "criminal_background",
    "case_registered",
    "detained_by",
    "court_proceedings_status",
    "seized_ids",
    "intelligence_dossier",
)

EXPORT_FIELDS: List[str] = [
    "name",
    "gender",
    "age",
    "date_of_birth",
    "language_spoken",
    "mode_of_entry",
    "entry_point",
    "date_of_entry",
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
    "embassy_contacted",
    "seized_ids",
    "intelligence_dossier",
]

TABLE_COLUMNS: List[str] = [
    "name",
    "gender",
    "age",
    "current_location",
    "current_occupation",
    "date_of_entry",
]

FIELD_LABELS: Dict[str, str] = {
    "id": "ID",
    "created_at": "Created",
    "name": "Name (Declared / Alias)",
    "gender": "Gender",
    "age": "Age",
    "date_of_birth": "Date of Birth",
    "photo_url": "Photograph",
    "language_spoken": "Language Spoken",
    "physical_identifiers": "Physical Identifiers",
    "mode_of_entry": "Mode of Entry",
    "entry_point": "Entry Point (Location / Sector)",
    "date_of_entry": "Date of Entry",
    "assisting_network": "Assisting Network (Name / Org)",
    "last_known_address": "Last Known Address",
    "current_location": "Current Location (GPS / Locality)",
    "migration_pattern": "Migration Pattern",
    "associated_locations": "Associated Locations (States / Districts)",
    "current_occupation": "Current Occupation",
    "cover_identity": "Cover Identity (Fake Docs / IDs)",
    "support_network": "Support Network (Political / NGO / Others)",
    "criminal_background": "Criminal Background",
    "case_registered": "Case Registered (Details)",
    "detained_by": "Detained By (Agency / Police Station)",
    "court_proceedings_status": "Court Proceedings Status",
    "embassy_contacted": "Embassy Contacted",
    "seized_ids": "Seized IDs",
    "intelligence_dossier": "Intelligence Dossier / Interrogation Summary",
}

TABLE_HEADERS: Dict[str, str] = {
    "name": "Name",
    "gender": "Gender",
    "age": "Age",
    "current_location": "Current Location",
    "current_occupation": "Occupation",
    "date_of_entry": "Entry Date",
}

# Section title -> fields, in the order the detail and form views lay them out.
DETAIL_SECTIONS: List[Tuple[str, List[str]]] = [
    ("Personal Information", ["date_of_birth", "language_spoken", "physical_identifiers"]),
    ("Entry Information", ["mode_of_entry", "entry_point", "date_of_entry", "assisting_network", "migration_pattern"]),
    ("Location Information", ["last_known_address", "current_location", "associated_locations"]),
    ("Identity Information", ["current_occupation", "cover_identity", "support_network", "seized_ids"]),
    ("Legal Information", ["criminal_background", "case_registered", "detained_by", "court_proceedings_status", "embassy_contacted"]),
]

LONG_TEXT_FIELDS = {
    "physical_identifiers",
    "migration_pattern",
    "last_known_address",
    "associated_locations",
    "cover_identity",
    "support_network",
    "seized_ids",
    "criminal_background",
    "case_registered",
    "court_proceedings_status",
    "intelligence_dossier",
}


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def initials(name: Optional[str]) -> str:
    parts = [p for p in (name or "").split(" ") if p]
    return "".join(p[0] for p in parts).upper()[:2]


def to_utc_timestamp(value: Any) -> Optional[pd.Timestamp]:
    if is_blank(value):
        return None
    ts = pd.to_datetime(value, errors="coerce", utc=True)
    if ts is None or pd.isna(ts):
        return None
    return ts


_ORDINAL_SUFFIX = {1: "st", 2: "nd", 3: "rd"}


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return f"{day}th"
    return f"{day}{_ORDINAL_SUFFIX.get(day % 10, 'th')}"


def format_long_date(value: Any) -> str:
    """Render a date as e.g. ``October 17th, 2026``; ``N/A`` when absent or unparseable."""
    ts = to_utc_timestamp(value)
    if ts is None:
        return "N/A"
    return f"{ts.strftime('%B')} {_ordinal(ts.day)}, {ts.year}"


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" + ("" if n == 1 else "s")


def format_relative(value: Any, now: Any) -> str:
    ts = to_utc_timestamp(value)
    ref = to_utc_timestamp(now)
    if ts is None or ref is None:
        return ""
    seconds = (ref - ts).total_seconds()
    if seconds < 60:
        return "less than a minute ago"
    minutes = int(seconds // 60)
    if minutes < 60:
        return f"{_plural(minutes, 'minute')} ago"
    hours = minutes // 60
    if hours < 24:
        return f"about {_plural(hours, 'hour')} ago"
    days = hours // 24
    if days < 30:
        return f"{_plural(days, 'day')} ago"
    if days < 365:
        return f"{_plural(days // 30, 'month')} ago"
    return f"{_plural(days // 365, 'year')} ago"


def display_value(field: str, value: Any) -> str:
    if field in BOOLEAN_FIELDS or isinstance(value, bool):
        return "Yes" if bool(value) else "No"
    if field in DATE_FIELDS:
        return format_long_date(value)
    if is_blank(value):
        return "N/A"
    return str(value)
