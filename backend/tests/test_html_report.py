import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from selectcheck.checker.analyzer import check_markup
from selectcheck.config import get_options
from selectcheck.models import FindingCategory
from selectcheck.reports.html_report import render_report, render_message, render_sections, TIPS

SOURCE = '<label for="x">Color &amp; <b>shade</b></label>\n<select id="x"><hr><option value="1">Red</option></select>'


def _render(source=SOURCE):
    code, result = check_markup(source, get_options("strict"))
    return result, render_report(result, code)


def test_finding_messages_are_escaped():
    result, html = _render()
    assert "contains an &lt;hr&gt; element" in html
    assert "contains an <hr> element" not in html


def test_sections_only_for_non_empty_categories():
    result, html = _render()
    assert 'class="findings-issue"' in html
    assert 'class="findings-success"' in html
    # strict profile, but no critical finding for a labelled select
    assert 'class="findings-critical"' not in html


def test_section_badge_counts():
    result, _ = _render()
    sections = render_sections(result)
    issues = len(result.of(FindingCategory.ISSUE))
    assert issues > 0
    assert '<span class="badge badge-error">{}</span>'.format(issues) in sections


def test_preview_is_verbatim():
    _, html = _render()
    assert '<div class="preview-wrap">' + SOURCE + "</div>" in html


def test_details_block_per_element():
    _, html = _render()
    assert html.count("<details>") == 1
    assert 'Select #1 (id="x")' in html
    assert "present, not exposed to assistive technology" in html


def test_label_text_escaped_in_details():
    _, html = _render()
    assert '"Color &amp; shade"' in html


def test_tips_keep_emphasis_markup():
    _, html = _render()
    assert TIPS[0] in html
    assert "<strong>" in html


def test_render_message_escapes():
    html = render_message("Parse error: <broken>", css="error")
    assert "&lt;broken&gt;" in html
    assert 'class="error"' in html
