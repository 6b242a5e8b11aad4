import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from selectcheck.checker.source_lines import resolve_line, line_at


def test_line_at_counts_newlines():
    assert line_at("a\nb\nc", 0) == 1
    assert line_at("a\nb\nc", 4) == 3


def test_id_strategy():
    source = '<div>\n<select id="country">\n</select></div>'
    assert resolve_line(source, "select", element_id="country") == 2


def test_id_strategy_single_quotes_and_case():
    source = "<p></p>\n\n<SELECT ID='q'></SELECT>"
    assert resolve_line(source, "select", element_id="q") == 3


def test_id_does_not_match_other_attributes():
    source = '<select data-id="x"></select>\n<select id="x"></select>'
    assert resolve_line(source, "select", element_id="x") == 2


def test_class_strategy():
    source = '<p>\n\n<select class="big wide"></select>'
    assert resolve_line(source, "select", class_name="big wide") == 3


def test_ordinal_strategy():
    source = "<select></select>\n<label>x</label>\n<select></select>"
    assert resolve_line(source, "select", ordinal=1) == 3


def test_ordinal_ignores_longer_tag_names():
    source = "<selectx></selectx>\n<select></select>"
    assert resolve_line(source, "select", ordinal=0) == 2


def test_occurrence_picks_nth_match():
    source = '<select id="d"></select>\n<select id="d"></select>'
    assert resolve_line(source, "select", element_id="d", occurrence=1) == 2


def test_miss_is_not_retried_with_another_strategy():
    source = '<select class="c"></select>'
    assert resolve_line(source, "select", element_id="zz", class_name="c", ordinal=0) is None


def test_no_strategy_returns_none():
    assert resolve_line("<select></select>", "select") is None
