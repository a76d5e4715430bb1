"""Tests for the HTML fragments the Streamlit views render with unsafe_allow_html."""

from registry.markup import (
    avatar_html,
    card_header_html,
    chip_row_html,
    chips_html,
    field_error_html,
    field_label_html,
    page_header_html,
)

HOSTILE = "<img src=x onerror=alert(1)>"


class TestEscaping:
    """Stored record text is rendered as text, never as markup."""

    def test_chips_escape_labels_and_skip_blanks(self):
        out = chips_html([HOSTILE, "", None, "Male"])

        assert "<img" not in out
        assert "&lt;img src=x onerror=alert(1)&gt;" in out
        assert out.count("<span class='chip'>") == 2
        assert chip_row_html(["Male"]) == "<div class='chip-row'><span class='chip'>Male</span></div>"

    def test_card_title_escaped(self):
        out = card_header_html(HOSTILE, 'say "hi" & bye')

        assert "<img" not in out
        assert "say &quot;hi&quot; &amp; bye" in out
        assert out.startswith("<div class='card'>")

    def test_page_header_breadcrumb_escaped(self):
        out = page_header_html("Profile Details", f"Home / Profiles / {HOSTILE}")

        assert "<img" not in out
        assert "Home / Profiles / &lt;img" in out

    def test_avatar_initials_escaped(self):
        out = avatar_html("<b Bold", size=64)

        assert "&lt;B" in out
        assert "width:64px;height:64px;" in out

    def test_field_fragments_escaped(self):
        assert field_label_html("A & B") == "<p class='field-label'>A &amp; B</p>"
        assert "<script>" not in field_error_html("<script>x</script>")
