from __future__ import annotations

import logging
import math
from typing import Any, Dict

import numpy as np
import pandas as pd
from fastapi import Body, FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import CountResponse, FilterOptionsResponse, FormErrorsResponse, SearchFiltersModel
from registry.config import configure_logging, get_settings
from registry.data import ProfileStore, get_store
from registry.errors import BackendError
from registry.export import (
    CSV_MIME,
    export_filename,
    profile_export_filename,
    profile_to_csv_text,
    to_csv_bytes,
    to_csv_text,
)
from registry.filters import build_search_query, normalize_search
from registry.forms import validate_form
from registry.metrics_dashboard import compute_dashboard
from registry.schema import EXPORT_FIELDS, GENDER_OPTIONS, TABLE_COLUMNS

configure_logging()
app = FastAPI(title="Profile Registry API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:8501", "http://127.0.0.1:8501"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _store() -> ProfileStore:
    return get_store()


def _json(data: object, status_code: int = 200) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        ),
    )


def _error(exc: Exception, status_code: int = 500) -> JSONResponse:
    message = exc.user_message if isinstance(exc, BackendError) else str(exc)
    return JSONResponse(status_code=status_code, content={"error": message, "type": type(exc).__name__})


def _csv(text: str, filename: str) -> Response:
    return Response(
        content=to_csv_bytes(text),
        media_type=CSV_MIME,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/profiles")
def list_profiles():
    try:
        return _json({"profiles": _store().fetch_all()})
    except Exception as exc:
        logger.exception("list_profiles failed")
        return _error(exc)


@app.get("/profiles/{profile_id}")
def get_profile(profile_id: str):
    try:
        profile = _store().fetch_one(profile_id)
    except Exception as exc:
        logger.exception("get_profile failed")
        return _error(exc)
    if profile is None:
        return JSONResponse(status_code=404, content={"error": "Profile not found.", "type": "NotFound"})
    return _json(profile)


@app.post("/profiles")
def create_profile(payload: Dict[str, Any] = Body(...)):
    form, errors = validate_form(payload)
    if form is None:
        return JSONResponse(status_code=422, content=FormErrorsResponse(errors=errors).model_dump())
    try:
        return _json(_store().create_profile(form), status_code=201)
    except Exception as exc:
        logger.exception("create_profile failed")
        return _error(exc)


@app.put("/profiles/{profile_id}")
def update_profile(profile_id: str, payload: Dict[str, Any] = Body(...)):
    form, errors = validate_form(payload)
    if form is None:
        return JSONResponse(status_code=422, content=FormErrorsResponse(errors=errors).model_dump())
    try:
        return _json(_store().update_profile(profile_id, form))
    except Exception as exc:
        logger.exception("update_profile failed")
        return _error(exc)


@app.delete("/profiles/{profile_id}")
def delete_profile(profile_id: str):
    try:
        _store().delete_profile(profile_id)
        return _json({"deleted": profile_id})
    except Exception as exc:
        logger.exception("delete_profile failed")
        return _error(exc)


@app.post("/search")
def search(filters: SearchFiltersModel):
    try:
        f = normalize_search(filters.model_dump())
        results = _store().search(build_search_query(f))
        return _json({"results": results, "count": len(results)})
    except Exception as exc:
        logger.exception("search failed")
        return _error(exc)


@app.get("/meta/filter-options")
def filter_options():
    try:
        store = _store()
        options = FilterOptionsResponse(
            genders=list(GENDER_OPTIONS),
            locations=store.distinct_values("current_location"),
            occupations=store.distinct_values("current_occupation"),
        )
        return _json(options.model_dump())
    except Exception as exc:
        logger.exception("filter_options failed")
        return _error(exc)


@app.get("/meta/count")
def meta_count():
    try:
        return _json(CountResponse(count=_store().count()).model_dump())
    except Exception as exc:
        logger.exception("meta_count failed")
        return _error(exc)


@app.get("/dashboard")
def dashboard():
    try:
        records = _store().fetch_all()
        return _json(compute_dashboard(records, recent_days=get_settings().recent_days))
    except Exception as exc:
        logger.exception("dashboard failed")
        return _error(exc)


@app.get("/export/profiles")
def export_profiles():
    try:
        records = _store().fetch_all()
    except Exception as exc:
        logger.exception("export_profiles failed")
        return _error(exc)
    return _csv(to_csv_text(TABLE_COLUMNS, records), export_filename("profiles-export"))


@app.post("/export/search")
def export_search(filters: SearchFiltersModel):
    try:
        f = normalize_search(filters.model_dump())
        results = _store().search(build_search_query(f))
    except Exception as exc:
        logger.exception("export_search failed")
        return _error(exc)
    return _csv(to_csv_text(EXPORT_FIELDS, results), export_filename("search-results"))


@app.get("/export/profiles/{profile_id}")
def export_profile(profile_id: str):
    try:
        profile = _store().fetch_one(profile_id)
    except Exception as exc:
        logger.exception("export_profile failed")
        return _error(exc)
    if profile is None:
        return JSONResponse(status_code=404, content={"error": "Profile not found.", "type": "NotFound"})
    return _csv(profile_to_csv_text(profile), profile_export_filename(profile))
