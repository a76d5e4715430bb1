"""
Profile persistence over the managed Supabase backend.

All reads and writes go through ``ProfileStore``; there is no local cache.
Every failure surfaces as ``BackendError`` so views can show one generic
"please try again" notification.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from datetime import date
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Optional, Tuple

from supabase import Client, create_client

from registry.config import Settings, get_settings, require_backend
from registry.errors import BackendError
from registry.filters import SearchFilters, SearchQuery, build_search_query
from registry.forms import PhotoUpload, ProfileForm, to_insert_payload, to_update_payload

logger = logging.getLogger(__name__)


@contextmanager
def backend_call(action: str) -> Iterator[None]:
    try:
        yield
    except BackendError:
        raise
    except Exception as exc:
        raise BackendError(action, str(exc)) from exc


class ProfileStore:
    def __init__(self, client: Client, *, table: str = "profiles", bucket: str = "profile-photos") -> None:
        self.client = client
        self.table_name = table
        self.bucket = bucket

    def _table(self):
        return self.client.table(self.table_name)

    def _photos(self):
        return self.client.storage.from_(self.bucket)

    # ---------------- reads ----------------
    def fetch_all(self) -> List[Dict[str, Any]]:
        with backend_call("load profiles"):
            resp = self._table().select("*").order("created_at", desc=True).execute()
        return list(resp.data or [])

    def fetch_one(self, profile_id: str) -> Optional[Dict[str, Any]]:
        with backend_call("load profile"):
            resp = self._table().select("*").eq("id", profile_id).limit(1).execute()
        rows = resp.data or []
        return rows[0] if rows else None

    def fetch_recent(self, limit: int = 5) -> List[Dict[str, Any]]:
        with backend_call("load recent profiles"):
            resp = self._table().select("*").order("created_at", desc=True).limit(limit).execute()
        return list(resp.data or [])

    def count(self) -> int:
        with backend_call("count profiles"):
            resp = self._table().select("id", count="exact").execute()
        if resp.count is not None:
            return int(resp.count)
        return len(resp.data or [])

    def distinct_values(self, column: str) -> List[str]:
        with backend_call(f"load {column.replace('_', ' ')} options"):
            resp = self._table().select(column).not_.is_(column, "null").execute()
        # Kept verbatim; the search view matches them with eq.
        values = {str(row.get(column)) for row in (resp.data or []) if row.get(column)}
        return sorted(v for v in values if v.strip())

    def search(self, query: Optional[SearchQuery]) -> List[Dict[str, Any]]:
        if query is None:
            return []
        with backend_call("search profiles"):
            builder = self._table().select("*")
            if query.or_filter:
                builder = builder.or_(query.or_filter)
            for column, value in query.equals:
                builder = builder.eq(column, value)
            resp = builder.order(query.order_column, desc=query.order_desc).execute()
        return list(resp.data or [])

    def search_profiles(self, filters: SearchFilters) -> List[Dict[str, Any]]:
        return self.search(build_search_query(filters))

    # ---------------- writes ----------------
    def insert(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        with backend_call("create profile"):
            resp = self._table().insert(payload).execute()
        rows = resp.data or []
        if not rows:
            raise BackendError("create profile", "backend returned no row")
        return rows[0]

    def update(self, profile_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        with backend_call("update profile"):
            resp = self._table().update(changes).eq("id", profile_id).execute()
        rows = resp.data or []
        if not rows:
            raise BackendError("update profile", f"profile {profile_id} not found")
        return rows[0]

    def delete(self, profile_id: str) -> None:
        with backend_call("delete profile"):
            self._table().delete().eq("id", profile_id).execute()

    # ---------------- photos ----------------
    def upload_photo(self, photo: PhotoUpload) -> Tuple[str, str]:
        ext = photo.extension or "jpg"
        path = f"photos/{uuid.uuid4().hex}.{ext}"
        with backend_call("upload photo"):
            self._photos().upload(path, photo.content, {"content-type": photo.content_type})
            url = self._photos().get_public_url(path)
        return path, str(url)

    def remove_photo(self, path: str) -> None:
        with backend_call("remove photo"):
            self._photos().remove([path])

    def _discard_photo(self, path: str) -> None:
        try:
            self.remove_photo(path)
        except BackendError:
            logger.warning("Uploaded photo %s could not be removed and is orphaned", path, exc_info=True)

    # ---------------- form workflows ----------------
    def create_profile(self, form: ProfileForm, photo: Optional[PhotoUpload] = None, today: Optional[date] = None) -> Dict[str, Any]:
        """Upload the photo (if any), then insert; a failed insert removes the uploaded photo."""
        path, url = (None, None)
        if photo is not None:
            path, url = self.upload_photo(photo)
        try:
            row = self.insert(to_insert_payload(form, url, today))
        except BackendError:
            if path:
                self._discard_photo(path)
            raise
        logger.info("Created profile %s", row.get("id"))
        return row

    def update_profile(self, profile_id: str, form: ProfileForm, photo: Optional[PhotoUpload] = None) -> Dict[str, Any]:
        path, url = (None, None)
        if photo is not None:
            path, url = self.upload_photo(photo)
        try:
            row = self.update(profile_id, to_update_payload(form, url))
        except BackendError:
            if path:
                self._discard_photo(path)
            raise
        logger.info("Updated profile %s", profile_id)
        return row

    def delete_profile(self, profile_id: str) -> None:
        self.delete(profile_id)
        logger.info("Deleted profile %s", profile_id)


def build_store(settings: Settings) -> ProfileStore:
    require_backend(settings)
    client = create_client(settings.supabase_url, settings.supabase_key)
    return ProfileStore(client, table=settings.profile_table, bucket=settings.photo_bucket)


@lru_cache(maxsize=1)
def get_store() -> ProfileStore:
    return build_store(get_settings())
