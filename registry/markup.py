"""HTML fragments for the Streamlit views.

Record values are user-entered text and always go through ``html.escape``
before they reach ``unsafe_allow_html`` markup.
"""

from __future__ import annotations

import html
from typing import Any, Iterable, Optional

from registry.schema import initials


def _text(value: Any) -> str:
    return html.escape("" if value is None else str(value))


def chips_html(labels: Iterable[Any]) -> str:
    return "".join(f"<span class='chip'>{_text(txt)}</span>" for txt in labels if txt)


def chip_row_html(labels: Iterable[Any]) -> str:
    return f"<div class='chip-row'>{chips_html(labels)}</div>"


def card_header_html(title: Any, actions: Optional[Any] = None) -> str:
    return (
        "<div class='card'><div class='card-header'>"
        f"<div class='card-title'>{_text(title)}</div>"
        f"<div class='card-actions'>{_text(actions)}</div>"
        "</div>"
    )


def page_header_html(title: Any, breadcrumb: Any) -> str:
    return (
        f"<div class='app-top-bar'><div class='breadcrumb'>{_text(breadcrumb)}</div>"
        f"<div class='page-title'>{_text(title)}</div></div>"
    )


def avatar_html(name: Optional[str], size: int = 40) -> str:
    size = int(size)
    return f"<div class='avatar' style='width:{size}px;height:{size}px;'>{_text(initials(name))}</div>"


def field_label_html(label: Any) -> str:
    return f"<p class='field-label'>{_text(label)}</p>"


def field_error_html(message: Any) -> str:
    return f"<p class='field-error'>{_text(message)}</p>"
