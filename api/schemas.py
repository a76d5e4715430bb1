from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel


class SearchFiltersModel(BaseModel):
    term: str = ""
    gender: Optional[str] = None
    location: Optional[str] = None
    occupation: Optional[str] = None


class FilterOptionsResponse(BaseModel):
    genders: List[str]
    locations: List[str]
    occupations: List[str]


class CountResponse(BaseModel):
    count: int


class FormErrorsResponse(BaseModel):
    errors: Dict[str, str]
