import sys
import os
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from selectcheck.checker import markup
from selectcheck.checker.markup import MarkupDocument, EmptyMarkupError, MarkupParseError, normalize_input

SAMPLE = (
    '<label for="c">Color</label>\n'
    '<label>Size <select id="s" name="size"><option value="1">Small</option></select></label>\n'
    '<select id="c" name="color"><option value="r">Red</option></select>'
)


def test_normalize_input_trims():
    assert normalize_input("  <select></select>\n ") == "<select></select>"


@pytest.mark.parametrize("raw", ["", "   \n\t", None])
def test_normalize_input_rejects_empty(raw):
    with pytest.raises(EmptyMarkupError):
        normalize_input(raw)


def test_query_all_in_document_order():
    doc = MarkupDocument.parse(SAMPLE)
    selects = doc.query_all("select")
    assert [MarkupDocument.attr(s, "id") for s in selects] == ["s", "c"]


def test_query_with_attribute():
    doc = MarkupDocument.parse(SAMPLE)
    assert len(doc.query_with_attribute("for")) == 1
    assert len(doc.query_with_attribute("id")) == 2


def test_get_element_by_id_and_text_content():
    doc = MarkupDocument.parse(SAMPLE)
    element = doc.get_element_by_id("c")
    assert MarkupDocument.tag_name(element) == "select"
    assert MarkupDocument.text_content(element) == "Red"
    assert doc.get_element_by_id("nope") is None


def test_labels_for():
    doc = MarkupDocument.parse(SAMPLE)
    labels = doc.labels_for("c")
    assert len(labels) == 1
    assert MarkupDocument.text_content(labels[0]) == "Color"


def test_closest_ancestor():
    doc = MarkupDocument.parse(SAMPLE)
    size_select, color_select = doc.query_all("select")
    parent = MarkupDocument.closest(size_select, "label")
    assert parent is not None
    assert MarkupDocument.text_content(parent) == "Size Small"
    assert MarkupDocument.closest(color_select, "label") is None


def test_attribute_helpers():
    doc = MarkupDocument.parse('<select required aria-label="Pick"></select>')
    select = doc.query_all("select")[0]
    assert MarkupDocument.has_attr(select, "required")
    assert MarkupDocument.attr(select, "required") == ""
    assert MarkupDocument.attr(select, "aria-label") == "Pick"
    assert not MarkupDocument.has_attr(select, "name")


def test_position_in():
    doc = MarkupDocument.parse(SAMPLE)
    selects = list(doc.query_all("select"))
    assert MarkupDocument.position_in(selects[1], selects) == 1


def test_parser_failure_is_wrapped(monkeypatch):
    def broken(*args, **kwargs):
        raise ValueError("bad markup")

    monkeypatch.setattr(markup, "Selector", broken)
    with pytest.raises(MarkupParseError) as excinfo:
        MarkupDocument.parse("<select>")
    assert "bad markup" in str(excinfo.value)
