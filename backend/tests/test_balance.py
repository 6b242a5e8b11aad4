import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from selectcheck.checker.balance import check_balance
from selectcheck.models import FindingCategory


def test_balanced_markup_has_no_findings():
    assert check_balance("<div><p>Hi</p></div>") == []


def test_void_tags_are_never_pushed():
    assert check_balance('<br><img src="a.png"><input type="text"><hr>') == []


def test_tag_names_compare_case_insensitively():
    assert check_balance("<DIV><Span>x</span></div>") == []


def test_single_unmatched_closing_tag():
    findings = check_balance("<select></select>\n</div>")
    assert len(findings) == 1
    f = findings[0]
    assert f.code == "unmatched_closing_tag"
    assert f.line == 2
    assert "</div>" in f.message
    assert f.message.startswith("Line 2:")


def test_mismatch_reports_both_names_and_closing_line():
    findings = check_balance("<div>\n<span>\n</div>")
    assert findings[0].code == "tag_mismatch"
    assert findings[0].line == 3
    assert "<span>" in findings[0].message and "</div>" in findings[0].message
    # the mismatch leaves both entries open
    assert [(f.code, f.line) for f in findings] == [
        ("tag_mismatch", 3), ("unclosed_tag", 1), ("unclosed_tag", 2)]


def test_stray_closing_tag_does_not_blame_parent():
    findings = check_balance("<div></span></div>")
    assert [f.code for f in findings] == ["tag_mismatch"]
    assert "</span>" in findings[0].message


def test_unclosed_tags_use_their_open_line():
    findings = check_balance("<select>\n<option>A")
    assert [(f.code, f.line) for f in findings] == [("unclosed_tag", 1), ("unclosed_tag", 2)]
    assert "<select>" in findings[0].message


def test_all_problems_are_reported():
    findings = check_balance("</a>\n</b>\n<c>")
    assert len(findings) == 3


def test_limit_keeps_first_problem_only():
    findings = check_balance("</a>\n</b>\n<c>", limit=1)
    assert len(findings) == 1
    assert findings[0].line == 1


def test_category_is_configurable():
    findings = check_balance("</a>", category=FindingCategory.CRITICAL)
    assert findings[0].category == FindingCategory.CRITICAL
