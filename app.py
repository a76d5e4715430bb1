import logging
import time
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

import altair as alt
import pandas as pd
import streamlit as st

from registry.config import configure_logging, get_settings
from registry.data import ProfileStore, get_store
from registry.errors import BackendError, Notification
from registry.export import (
    CSV_MIME,
    export_filename,
    profile_export_filename,
    profile_to_csv_text,
    to_csv_bytes,
    to_csv_text,
)
from registry.filters import Debouncer, SearchFilters, build_search_query
from registry.forms import MIN_BIRTH_DATE, PhotoUpload, form_defaults, photo_error, validate_form
from registry.markup import avatar_html, card_header_html, chip_row_html, field_error_html, field_label_html, page_header_html
from registry.metrics_dashboard import compute_dashboard
from registry.schema import (
    DETAIL_SECTIONS,
    EXPORT_FIELDS,
    FIELD_LABELS,
    GENDER_OPTIONS,
    LONG_TEXT_FIELDS,
    TABLE_HEADERS,
    display_value,
    format_long_date,
    format_relative,
)
from registry.scope import RequestScope
from registry.table import (
    TableState,
    apply_table_state,
    profiles_frame,
    remove_profile,
    set_name_filter,
    toggle_column,
    toggle_sort,
)

configure_logging()
logger = logging.getLogger("app")
alt.data_transformers.disable_max_rows()
settings = get_settings()


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .card-actions {font-size: 0.9rem;color: #2563eb;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        .avatar {display: inline-flex;align-items: center;justify-content: center;border-radius: 50%;
                 background: #e5e7eb;color: #374151;font-weight: 600;}
        .field-label {color: #6b7280;font-size: 0.85rem;font-weight: 500;margin-bottom: 0;}
        .field-error {color: #dc2626;font-size: 0.85rem;margin-top: -8px;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str, actions: Optional[str] = None):
    container = st.container()
    container.markdown(card_header_html(title, actions), unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def render_page_header(title: str, breadcrumb: str, chip_labels: Optional[List[str]] = None, export_text: Optional[str] = None, export_name: str = "export.csv"):
    inject_base_styles()
    top = st.container()
    c1, c2 = top.columns([7, 3])
    with c1:
        st.markdown(page_header_html(title, breadcrumb), unsafe_allow_html=True)
    with c2:
        btn_cols = st.columns(2)
        if btn_cols[0].button("Refresh", key=f"refresh_{title}"):
            reset_view_state()
            st.rerun()
        if export_text is not None:
            btn_cols[1].download_button(
                "Export CSV",
                data=to_csv_bytes(export_text),
                file_name=export_name,
                mime=CSV_MIME,
                key=f"export_{title}",
            )
    if chip_labels:
        st.markdown(chip_row_html(chip_labels), unsafe_allow_html=True)


def avatar(profile: Dict[str, Any], size: int = 40):
    url = profile.get("photo_url")
    if url:
        st.image(url, width=size)
    else:
        st.markdown(avatar_html(profile.get("name"), size), unsafe_allow_html=True)


def notify(note: Notification):
    icon = "⚠️" if note.is_error else "✅"
    st.toast(f"**{note.title}**: {note.message}", icon=icon)


def report_failure(exc: BackendError, context: str):
    logger.exception("Error %s", context)
    notify(Notification.error(exc.user_message))


def flash(note: Notification):
    """Queue a notification to show after the next rerun."""
    st.session_state.setdefault("_flash", []).append(note)


def show_flashed():
    for note in st.session_state.pop("_flash", []):
        notify(note)


# ---------- routing / view lifetime ----------
NAV = {"Dashboard": "dashboard", "Profiles": "profiles", "Search": "search", "New Profile": "new"}
NAV_BY_PAGE = {v: k for k, v in NAV.items()}


def current_route() -> Dict[str, Optional[str]]:
    params = st.query_params
    page = params.get("page") or "dashboard"
    return {"page": page, "id": params.get("id"), "mode": params.get("mode")}


def go(page: str, profile_id: Optional[str] = None, mode: Optional[str] = None):
    params = {"page": page}
    if profile_id:
        params["id"] = str(profile_id)
    if mode:
        params["mode"] = mode
    st.session_state["_nav_pending"] = NAV_BY_PAGE.get(page, "Profiles")
    st.query_params.from_dict(params)
    st.rerun()


def _on_nav():
    st.query_params.from_dict({"page": NAV[st.session_state["nav"]]})


def view_scope() -> RequestScope:
    scope = st.session_state.get("_scope")
    if scope is None:
        scope = RequestScope()
        st.session_state["_scope"] = scope
    return scope


def reset_view_state():
    for key in [k for k in st.session_state.keys() if str(k).startswith("view_")]:
        del st.session_state[key]


def mount(route: Dict[str, Optional[str]]):
    """Entering a different view drops the previous view's state and cancels its requests."""
    route_key = f"{route['page']}:{route['id']}:{route['mode']}"
    if st.session_state.get("_route") == route_key:
        return
    old = st.session_state.get("_scope")
    if old is not None:
        old.close()
    st.session_state["_scope"] = RequestScope()
    reset_view_state()
    st.session_state["_route"] = route_key


def load_store() -> Optional[ProfileStore]:
    try:
        return get_store()
    except RuntimeError as exc:
        st.error(f"Backend is not configured: {exc}")
        return None


# ----- Page renderers -----

def render_dashboard_page(store: ProfileStore):
    render_page_header("Dashboard", "Home / Dashboard")
    if "view_dashboard" not in st.session_state:
        token = view_scope().begin()
        try:
            with st.spinner("Loading..."):
                records = store.fetch_all()
        except BackendError as exc:
            report_failure(exc, "fetching stats")
            records = []
        if view_scope().is_current(token):
            st.session_state["view_dashboard"] = compute_dashboard(
                records, now=datetime.now(timezone.utc), recent_days=settings.recent_days
            )
    summary = st.session_state.get("view_dashboard")
    if summary is None:
        return

    genders = summary["gender"]
    with card("Overview"):
        cols = st.columns(4)
        cols[0].metric(
            "Total Profiles",
            f"{summary['total']:,}",
            help=f"{genders['Male']} male, {genders['Female']} female, {genders['Other']} other",
        )
        cols[0].caption(f"{genders['Male']} male, {genders['Female']} female, {genders['Other']} other")
        cols[1].metric("Top Location", summary["top_location"], help="Most common current location")
        cols[2].metric("Top Occupation", summary["top_occupation"], help="Most common occupation")
        cols[3].metric(
            "Recent Entries",
            f"{summary['recent_entries']:,}",
            help=f"Profiles with a date of entry in the last {summary['recent_days']} days",
        )

    chart_cols = st.columns(2)
    with chart_cols[0]:
        with card("Gender distribution"):
            st.vega_lite_chart(summary["charts"]["gender"], use_container_width=True)
    with chart_cols[1]:
        with card("Top locations"):
            if "top_locations" in summary["charts"]:
                st.vega_lite_chart(summary["charts"]["top_locations"], use_container_width=True)
            else:
                st.info("No locations recorded yet.")

    with card("Recent Profiles", "The latest profiles added to the system"):
        recent = summary["recent_profiles"]
        if not recent:
            st.info("No profiles found")
        now = datetime.now(timezone.utc)
        for profile in recent:
            row = st.columns([1, 5, 2, 3, 2])
            with row[0]:
                avatar(profile)
            row[1].markdown(f"**{profile.get('name')}**  \n{profile.get('current_location') or 'Unknown location'}")
            row[2].markdown(chip_row_html([profile.get("gender")]), unsafe_allow_html=True)
            row[3].caption(format_relative(profile.get("created_at"), now))
            if row[4].button("View", key=f"recent_{profile.get('id')}"):
                go("detail", profile.get("id"))


def _table_state() -> TableState:
    state = st.session_state.get("table_state")
    if state is None:
        state = TableState(page_size=settings.page_size)
        st.session_state["table_state"] = state
    return state


def _set_table_state(state: TableState):
    st.session_state["table_state"] = state


@st.dialog("Are you absolutely sure?")
def confirm_table_delete(store: ProfileStore, profile: Dict[str, Any]):
    st.write(f"This will permanently delete **{profile.get('name')}** and all associated data.")
    cols = st.columns(2)
    if cols[0].button("Cancel", key="dlg_cancel"):
        st.rerun()
    if cols[1].button("Delete", type="primary", key="dlg_delete"):
        records, note = remove_profile(store, st.session_state.get("view_records", []), str(profile.get("id")))
        st.session_state["view_records"] = records
        flash(note)
        st.rerun()


def render_profiles_page(store: ProfileStore):
    if "view_records" not in st.session_state:
        token = view_scope().begin()
        try:
            with st.spinner("Loading profiles..."):
                records = store.fetch_all()
        except BackendError as exc:
            report_failure(exc, "fetching profiles")
            records = []
        if view_scope().is_current(token):
            st.session_state["view_records"] = records
    records: List[Dict[str, Any]] = st.session_state.get("view_records", [])

    state = _table_state()
    df = profiles_frame(records)
    view = apply_table_state(df, state)
    export_rows = view.filtered[view.columns].astype(object).where(view.filtered[view.columns].notna(), None).to_dict(orient="records")

    render_page_header(
        "Profiles",
        "Home / Profiles",
        chip_labels=[f"{view.filtered_rows} of {view.total_rows} profiles"],
        export_text=to_csv_text(view.columns, export_rows),
        export_name=export_filename("profiles-export"),
    )

    with card("Profiles", "Select a row for actions"):
        controls = st.columns([4, 4, 2])
        name_filter = controls[0].text_input("Filter by name...", value=state.name_filter, key="table_name_filter")
        if name_filter != state.name_filter:
            state = set_name_filter(state, name_filter)
            _set_table_state(state)
            view = apply_table_state(df, state)
        shown = controls[1].multiselect(
            "Columns",
            options=list(TABLE_HEADERS.keys()),
            default=view.columns,
            format_func=lambda c: TABLE_HEADERS.get(c, c),
            key="table_columns",
        )
        for col in TABLE_HEADERS:
            state = toggle_column(state, col, col in shown)
        _set_table_state(state)
        view = apply_table_state(df, state)
        if controls[2].button("Add New Profile", type="primary"):
            go("new")

        sort_cols = st.columns(len(view.columns))
        for i, col in enumerate(view.columns):
            arrow = ""
            if state.sort_column == col:
                arrow = " ▼" if state.sort_desc else " ▲"
            if sort_cols[i].button(f"{TABLE_HEADERS.get(col, col)}{arrow}", key=f"sort_{col}", use_container_width=True):
                _set_table_state(toggle_sort(state, col))
                st.rerun()

        if view.filtered.empty:
            st.info("No profiles found.")
            return

        display = view.page[view.columns].copy()
        if "date_of_entry" in display.columns:
            display["date_of_entry"] = display["date_of_entry"].apply(format_long_date)
        display = display.rename(columns=TABLE_HEADERS)
        event = st.dataframe(
            display,
            hide_index=True,
            use_container_width=True,
            on_select="rerun",
            selection_mode="single-row",
            key=f"profiles_table_{view.page_index}",
        )

        pager = st.columns([6, 2, 2])
        pager[0].caption(f"Page {view.page_index + 1} of {view.page_count} · {view.filtered_rows} of {view.total_rows} row(s)")
        if pager[1].button("Previous", disabled=not view.can_previous):
            _set_table_state(replace(state, page_index=view.page_index - 1))
            st.rerun()
        if pager[2].button("Next", disabled=not view.can_next):
            _set_table_state(replace(state, page_index=view.page_index + 1))
            st.rerun()

        selected = event.selection.rows if event is not None else []
        if selected:
            profile = view.page.iloc[selected[0]].to_dict()
            match = next((r for r in records if str(r.get("id")) == str(profile.get("id"))), profile)
            st.markdown(f"**Actions** for {match.get('name')}")
            actions = st.columns(4)
            if actions[0].button("View details"):
                go("detail", match.get("id"))
            if actions[1].button("Edit"):
                go("detail", match.get("id"), mode="edit")
            actions[2].download_button(
                "Export row",
                data=to_csv_bytes(profile_to_csv_text(match)),
                file_name=profile_export_filename(match),
                mime=CSV_MIME,
            )
            if actions[3].button("Delete", type="primary"):
                confirm_table_delete(store, match)


@st.dialog("Are you absolutely sure?")
def confirm_detail_delete(store: ProfileStore, profile: Dict[str, Any]):
    st.write("This action cannot be undone. This will permanently delete the profile and all associated data.")
    cols = st.columns(2)
    if cols[0].button("Cancel", key="detail_cancel"):
        st.rerun()
    if cols[1].button("Delete", type="primary", key="detail_delete"):
        try:
            with st.spinner("Deleting..."):
                store.delete_profile(str(profile.get("id")))
        except BackendError as exc:
            report_failure(exc, "deleting profile")
            return
        flash(Notification.success("Profile deleted successfully"))
        go("profiles")


def _load_detail(store: ProfileStore, profile_id: str) -> Optional[Dict[str, Any]]:
    if "view_detail" not in st.session_state:
        token = view_scope().begin()
        try:
            with st.spinner("Loading profile..."):
                profile = store.fetch_one(profile_id)
        except BackendError as exc:
            report_failure(exc, "fetching profile")
            profile = None
        if view_scope().is_current(token):
            st.session_state["view_detail"] = profile
    return st.session_state.get("view_detail")


def render_profile_detail_page(store: ProfileStore, profile_id: str):
    profile = _load_detail(store, profile_id)
    if profile is None:
        render_page_header("Profile Details", "Home / Profiles / Not found")
        st.error("Profile not found.")
        if st.button("Back to profiles"):
            go("profiles")
        return

    render_page_header(
        "Profile Details",
        f"Home / Profiles / {profile.get('name')}",
        export_text=profile_to_csv_text(profile),
        export_name=profile_export_filename(profile),
    )
    actions = st.columns([6, 2, 2])
    if actions[1].button("Edit", use_container_width=True):
        go("detail", profile_id, mode="edit")
    if actions[2].button("Delete", type="primary", use_container_width=True):
        confirm_detail_delete(store, profile)

    with card(profile.get("name") or ""):
        head = st.columns([1, 9])
        with head[0]:
            avatar(profile, size=64)
        badges = [profile.get("gender") or "", f"{profile.get('age')} years old", profile.get("current_occupation") or ""]
        head[1].markdown(chip_row_html(badges), unsafe_allow_html=True)

    section_cols = st.columns(2)
    for i, (title, fields) in enumerate(DETAIL_SECTIONS):
        with section_cols[i % 2]:
            with card(title):
                for field in fields:
                    st.markdown(field_label_html(FIELD_LABELS[field]), unsafe_allow_html=True)
                    st.write(display_value(field, profile.get(field)))

    with card("Intelligence Dossier"):
        st.text(profile.get("intelligence_dossier") or "No intelligence dossier available.")


def _field_error(errors: Dict[str, str], field: str):
    if field in errors:
        st.markdown(field_error_html(errors[field]), unsafe_allow_html=True)


def _text_field(values: Dict[str, Any], errors: Dict[str, str], field: str, key_prefix: str) -> str:
    label = FIELD_LABELS[field]
    widget = st.text_area if field in LONG_TEXT_FIELDS else st.text_input
    kwargs = {"height": 200} if field == "intelligence_dossier" else {}
    value = widget(label, value=values.get(field) or "", placeholder=f"Enter {label.split(' (')[0].lower()}", key=f"{key_prefix}_{field}", **kwargs)
    _field_error(errors, field)
    return value


FORM_SECTIONS = [
    ("Personal Information", ["language_spoken", "physical_identifiers"]),
    ("Entry Information", ["mode_of_entry", "entry_point", "assisting_network", "migration_pattern"]),
    ("Location Information", ["last_known_address", "current_location", "associated_locations"]),
    ("Identity Information", ["current_occupation", "cover_identity", "support_network", "seized_ids"]),
    ("Legal Information", ["criminal_background", "case_registered", "detained_by", "court_proceedings_status"]),
]


def render_profile_form_page(store: ProfileStore, profile: Optional[Dict[str, Any]] = None):
    editing = profile is not None
    title = "Edit Profile" if editing else "Add New Profile"
    render_page_header(title, "Home / Profiles / " + ("Edit" if editing else "New"))
    values = form_defaults(profile)
    errors: Dict[str, str] = st.session_state.get("view_form_errors", {})
    key_prefix = f"form_{profile.get('id') if editing else 'new'}"

    with st.form(key_prefix):
        raw: Dict[str, Any] = {}
        with card("Personal Information"):
            left, right = st.columns(2)
            with left:
                raw["name"] = st.text_input(FIELD_LABELS["name"], value=values["name"], placeholder="Enter name", key=f"{key_prefix}_name")
                _field_error(errors, "name")
                gender_index = GENDER_OPTIONS.index(values["gender"]) if values["gender"] in GENDER_OPTIONS else None
                raw["gender"] = st.selectbox("Gender", GENDER_OPTIONS, index=gender_index, placeholder="Select gender", key=f"{key_prefix}_gender")
                _field_error(errors, "gender")
                raw["date_of_birth"] = st.date_input(
                    "Date of Birth",
                    value=values["date_of_birth"],
                    min_value=MIN_BIRTH_DATE,
                    max_value=date.today(),
                    key=f"{key_prefix}_dob",
                )
                _field_error(errors, "date_of_birth")
            with right:
                photo_file = st.file_uploader("Photograph", type=["jpg", "jpeg", "png", "gif"], help="JPG, PNG or GIF. Max 5MB.", key=f"{key_prefix}_photo")
                if photo_file is not None:
                    st.image(photo_file, width=128)
                elif editing and profile.get("photo_url"):
                    st.image(profile["photo_url"], width=128)
                _field_error(errors, "photo")

        for section, fields in FORM_SECTIONS:
            with card(section):
                cols = st.columns(2)
                for i, field in enumerate(fields):
                    with cols[i % 2]:
                        raw[field] = _text_field(values, errors, field, key_prefix)
                        if field == "entry_point":
                            raw["date_of_entry"] = st.date_input("Date of Entry", value=values["date_of_entry"], max_value=date.today(), key=f"{key_prefix}_doe")
                            _field_error(errors, "date_of_entry")
                if section == "Legal Information":
                    raw["embassy_contacted"] = st.checkbox(
                        "Embassy Contacted", value=values["embassy_contacted"], help="Check if embassy has been contacted", key=f"{key_prefix}_embassy"
                    )

        with card("Additional Information"):
            raw["intelligence_dossier"] = _text_field(values, errors, "intelligence_dossier", key_prefix)

        submitted = st.form_submit_button("Save Profile", type="primary")

    if not submitted:
        return

    photo = None
    if photo_file is not None:
        photo = PhotoUpload(content=photo_file.getvalue(), filename=photo_file.name, content_type=photo_file.type or "application/octet-stream")
    form, errors = validate_form(raw)
    photo_msg = photo_error(photo)
    if photo_msg:
        errors["photo"] = photo_msg
    if form is None or photo_msg:
        st.session_state["view_form_errors"] = errors
        st.rerun()
    st.session_state.pop("view_form_errors", None)

    try:
        with st.spinner("Saving..."):
            if editing:
                saved = store.update_profile(str(profile.get("id")), form, photo)
            else:
                saved = store.create_profile(form, photo)
    except BackendError as exc:
        report_failure(exc, "saving profile")
        return
    flash(Notification.success("Profile updated successfully" if editing else "Profile created successfully"))
    go("detail", saved.get("id"))


def _search_options(store: ProfileStore) -> Dict[str, List[str]]:
    if "view_search_options" not in st.session_state:
        options = {"locations": [], "occupations": []}
        try:
            options["locations"] = store.distinct_values("current_location")
            options["occupations"] = store.distinct_values("current_occupation")
        except BackendError:
            logger.exception("Error fetching filter options")
        st.session_state["view_search_options"] = options
    return st.session_state["view_search_options"]


def _debouncer() -> Debouncer:
    deb = st.session_state.get("search_debouncer")
    if deb is None:
        deb = Debouncer(settings.search_debounce_s)
        st.session_state["search_debouncer"] = deb
    return deb


def render_search_page(store: ProfileStore):
    options = _search_options(store)
    inject_base_styles()
    top = st.columns([5, 2, 2, 2])
    term = top[0].text_input("Search", placeholder="Search profiles by any field...", key="search_term", label_visibility="collapsed")
    gender = top[1].selectbox("Gender", ["All Genders", *GENDER_OPTIONS], key="search_gender", label_visibility="collapsed")
    location = top[2].selectbox("Location", ["All Locations", *options["locations"]], key="search_location", label_visibility="collapsed")
    occupation = top[3].selectbox("Occupation", ["All Occupations", *options["occupations"]], key="search_occupation", label_visibility="collapsed")

    # Wait for the term to settle; a newer keystroke reruns the script and abandons this wait.
    deb = _debouncer()
    wait = deb.remaining(term.strip(), time.monotonic())
    if wait > 0:
        time.sleep(wait)
        deb.remaining(term.strip(), time.monotonic())
    filters = SearchFilters(
        term=deb.settled_value or "",
        gender=None if gender == "All Genders" else gender,
        location=None if location == "All Locations" else location,
        occupation=None if occupation == "All Occupations" else occupation,
    )

    if st.session_state.get("view_search_filters") != filters:
        token = view_scope().begin()
        results: List[Dict[str, Any]] = []
        try:
            with st.spinner("Searching profiles..."):
                results = store.search(build_search_query(filters))
        except BackendError as exc:
            report_failure(exc, "searching profiles")
        if view_scope().is_current(token):
            st.session_state["view_search_filters"] = filters
            st.session_state["view_search_results"] = results
    results = st.session_state.get("view_search_results", [])

    render_page_header(
        "Search",
        "Home / Search",
        chip_labels=[f"Term: {filters.term}" if filters.term else "", filters.gender or "", filters.location or "", filters.occupation or ""],
        export_text=to_csv_text(EXPORT_FIELDS, results) if results else None,
        export_name=export_filename("search-results"),
    )

    with card("Results"):
        if not results:
            if filters.is_empty():
                st.info("Enter a search term or select filters to find profiles.")
            else:
                st.info("No profiles found matching your search criteria.")
            return
        df = pd.DataFrame(results)
        for col in ["name", "gender", "age", "current_location", "current_occupation", "date_of_entry"]:
            if col not in df.columns:
                df[col] = None
        display = pd.DataFrame(
            {
                "Name": df["name"],
                "Gender": df["gender"],
                "Age": df["age"],
                "Location": df["current_location"].fillna("N/A"),
                "Occupation": df["current_occupation"].fillna("N/A"),
                "Entry Date": df["date_of_entry"].apply(format_long_date),
            }
        )
        event = st.dataframe(display, hide_index=True, use_container_width=True, on_select="rerun", selection_mode="single-row", key="search_table")
        st.caption(f"Showing {len(results)} result{'s' if len(results) != 1 else ''}")
        selected = event.selection.rows if event is not None else []
        if selected:
            go("detail", results[selected[0]].get("id"))


# ---------- UI setup ----------
st.set_page_config(page_title="Profile Registry", layout="wide")
inject_base_styles()
show_flashed()

route = current_route()
mount(route)

with st.sidebar:
    st.markdown("## Pravaasi")
    pending = st.session_state.pop("_nav_pending", None)
    if pending:
        st.session_state["nav"] = pending
    elif "nav" not in st.session_state:
        st.session_state["nav"] = NAV_BY_PAGE.get(route["page"], "Profiles")
    st.radio("Navigate", list(NAV.keys()), key="nav", on_change=_on_nav)
    st.markdown("---")
    st.caption("Records are read from and written to the managed backend on every view.")

store = load_store()
if store is None:
    st.stop()

current_page = route["page"]
if current_page == "dashboard":
    render_dashboard_page(store)
elif current_page == "profiles":
    render_profiles_page(store)
elif current_page == "search":
    render_search_page(store)
elif current_page == "new":
    render_profile_form_page(store)
elif current_page == "detail" and route["id"]:
    if route["mode"] == "edit":
        existing = _load_detail(store, route["id"])
        if existing is None:
            st.error("Profile not found.")
        else:
            render_profile_form_page(store, existing)
    else:
        render_profile_detail_page(store, route["id"])
else:
    render_dashboard_page(store)
