"""Core (UI-agnostic) profile registry logic.

This package contains:
- settings and logging setup
- the profile field schema and display helpers
- form validation (pydantic)
- search query construction and table view state
- CSV export and dashboard aggregation (pandas)
- chart helpers (Altair -> Vega-Lite spec dict)
- escaped HTML fragments for the Streamlit views
- the Supabase-backed profile store
"""
