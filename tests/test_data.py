"""Tests for ProfileStore against the in-memory Supabase fake."""

from datetime import date

import pytest

from registry.data import ProfileStore, backend_call, build_store
from registry.config import Settings
from registry.errors import BackendError
from registry.filters import SearchFilters, build_search_query
from registry.forms import PhotoUpload, validate_form


def _form(**overrides):
    raw = {"name": "Amina Sheikh", "gender": "Female", "date_of_birth": "1990-10-18", "current_location": "Delhi"}
    raw.update(overrides)
    form, errors = validate_form(raw)
    assert errors == {}
    return form


class TestReads:
    """Reads go straight to the backend with the expected query shape."""

    def test_fetch_all_orders_newest_first(self, store, fake_client):
        rows = store.fetch_all()

        assert len(rows) == 3
        query = fake_client.queries[-1]
        assert ("order", "created_at", True) in query.ops
        assert fake_client.tables == ["profiles"]

    def test_fetch_one_returns_row_or_none(self, store):
        assert store.fetch_one("2")["name"] == "Fatima Begum"
        assert store.fetch_one("missing") is None

    def test_fetch_recent_limits(self, store, fake_client):
        rows = store.fetch_recent(limit=2)

        assert len(rows) == 2
        assert ("limit", 2) in fake_client.queries[-1].ops

    def test_count_uses_exact_count(self, store, fake_client):
        assert store.count() == 3
        assert fake_client.queries[-1].ops[0] == ("select", ("id",), "exact")

    def test_distinct_values_sorted_and_unique(self, store, fake_client):
        assert store.distinct_values("current_location") == ["Delhi", "Kolkata"]
        assert store.distinct_values("current_occupation") == ["Driver", "Tailor"]
        assert ("not_is", "current_occupation", "null") in fake_client.queries[-1].ops

    def test_read_failure_becomes_backend_error(self, store, fake_client):
        fake_client.fail_on.add("select")

        with pytest.raises(BackendError) as exc_info:
            store.fetch_all()

        assert exc_info.value.user_message == "Failed to load profiles. Please try again."
        assert "select failed" in str(exc_info.value)


class TestSearch:
    def test_empty_query_makes_no_backend_call(self, store, fake_client):
        assert store.search(None) == []
        assert store.search_profiles(SearchFilters()) == []
        assert fake_client.queries == []

    def test_term_and_filters_compose(self, store, fake_client):
        query = build_search_query(SearchFilters(term="kol", location="Kolkata", gender="Male"))

        results = store.search(query)

        ops = fake_client.queries[-1].op_names()
        assert ops[0] == "select"
        assert "or" in ops
        assert ("eq", "gender", "Male") in fake_client.queries[-1].ops
        assert ("eq", "current_location", "Kolkata") in fake_client.queries[-1].ops
        assert ("order", "created_at", True) in fake_client.queries[-1].ops
        assert [r["id"] for r in results] == ["1"]

    def test_filter_only_search_skips_or_clause(self, store, fake_client):
        store.search_profiles(SearchFilters(gender="Female"))

        assert "or" not in fake_client.queries[-1].op_names()


class TestCreateProfile:
    def test_insert_payload_carries_age_and_no_photo(self, store, fake_client):
        row = store.create_profile(_form(), today=date(2026, 10, 17))

        assert row["id"] == "100"
        assert row["age"] == 35
        assert row["photo_url"] is None
        assert row["date_of_birth"] == "1990-10-18"
        assert fake_client.uploads == []

    def test_photo_uploaded_before_insert(self, store, fake_client):
        photo = PhotoUpload(b"\x89PNG", "face.PNG", "image/png")

        row = store.create_profile(_form(), photo)

        path, content, options = fake_client.uploads[0]
        assert path.startswith("photos/") and path.endswith(".png")
        assert options == {"content-type": "image/png"}
        assert row["photo_url"] == f"https://cdn.test/profile-photos/{path}"

    def test_failed_insert_removes_uploaded_photo(self, store, fake_client):
        fake_client.fail_on.add("insert")
        photo = PhotoUpload(b"gif", "a.gif", "image/gif")

        with pytest.raises(BackendError):
            store.create_profile(_form(), photo)

        assert fake_client.removed == [fake_client.uploads[0][0]]
        assert len(fake_client.rows) == 3

    def test_failed_upload_skips_insert(self, store, fake_client):
        fake_client.fail_on.add("upload")

        with pytest.raises(BackendError) as exc_info:
            store.create_profile(_form(), PhotoUpload(b"x", "a.jpg"))

        assert exc_info.value.action == "upload photo"
        assert all(q.ops[0][0] != "insert" for q in fake_client.queries)

    def test_cleanup_failure_still_raises_original_error(self, store, fake_client):
        fake_client.fail_on.update({"insert", "remove"})

        with pytest.raises(BackendError) as exc_info:
            store.create_profile(_form(), PhotoUpload(b"x", "a.jpg"))

        assert exc_info.value.action == "create profile"


class TestUpdateAndDelete:
    def test_update_does_not_touch_age(self, store, fake_client):
        row = store.update_profile("1", _form(name="Rahim K."))

        assert row["name"] == "Rahim K."
        assert row["age"] == 34
        update_payload = fake_client.queries[-1].ops[0][1]
        assert "age" not in update_payload
        assert "photo_url" not in update_payload

    def test_update_with_new_photo_sets_url(self, store, fake_client):
        row = store.update_profile("1", _form(), PhotoUpload(b"x", "new.jpeg", "image/jpeg"))

        assert row["photo_url"].startswith("https://cdn.test/profile-photos/photos/")

    def test_update_missing_profile_raises(self, store):
        with pytest.raises(BackendError) as exc_info:
            store.update_profile("nope", _form())

        assert "not found" in exc_info.value.detail

    def test_delete_removes_row(self, store, fake_client):
        store.delete_profile("3")

        assert [r["id"] for r in fake_client.rows] == ["1", "2"]

    def test_delete_failure_raises(self, store, fake_client):
        fake_client.fail_on.add("delete")

        with pytest.raises(BackendError) as exc_info:
            store.delete_profile("1")

        assert exc_info.value.user_message == "Failed to delete profile. Please try again."
        assert len(fake_client.rows) == 3


class TestStoreConstruction:
    def test_backend_call_passes_through_backend_errors(self):
        original = BackendError("load profile")

        with pytest.raises(BackendError) as exc_info:
            with backend_call("something else"):
                raise original

        assert exc_info.value is original

    def test_build_store_requires_credentials(self):
        with pytest.raises(RuntimeError, match="SUPABASE_URL"):
            build_store(Settings())

    def test_table_and_bucket_are_configurable(self, fake_client):
        store = ProfileStore(fake_client, table="people", bucket="pics")

        store.fetch_all()
        row = store.create_profile(_form(), PhotoUpload(b"x", "a.jpg"))

        assert fake_client.tables[0] == "people"
        assert "/pics/" in row["photo_url"]


class TestVerbatimFilterValues:
    """Filter options are stored values as-is so equality filters still match them."""

    def test_option_with_trailing_space_matches_its_row(self, store, fake_client):
        fake_client.rows = [{"id": "1", "current_location": "Delhi "}, {"id": "2", "current_location": "   "}]

        options = store.distinct_values("current_location")
        results = store.search_profiles(SearchFilters(location=options[0]))

        assert options == ["Delhi "]
        assert [r["id"] for r in results] == ["1"]
