"""Markup fragment parsing.

Wraps a scrapy Selector (lxml underneath) around a user supplied fragment and
exposes the handful of DOM-style queries the select analyzer needs.
"""
import logging
from typing import Optional, List
from lxml import etree
from scrapy.selector import Selector, SelectorList

logger = logging.getLogger(__name__)


class EmptyMarkupError(ValueError):
    """The submitted fragment is empty after trimming."""


class MarkupParseError(ValueError):
    """The fragment could not be turned into a document tree."""


def normalize_input(raw: Optional[str]) -> str:
    """Trim user input; raise EmptyMarkupError when nothing is left."""
    code = (raw or "").strip()
    if not code:
        raise EmptyMarkupError("Please enter HTML code.")
    return code


class MarkupDocument:
    def __init__(self, selector: Selector, source: str):
        self.selector = selector
        self.source = source

    @classmethod
    def parse(cls, fragment: str) -> "MarkupDocument":
        """Parse `fragment` inside a minimal <body> wrapper."""
        try:
            sel = Selector(text="<body>{}</body>".format(fragment), type="html")
        except (ValueError, etree.LxmlError) as e:
            logger.warning("Markup parse failed: %s", e)
            raise MarkupParseError(str(e) or "Markup could not be parsed") from e
        if sel.xpath("//parsererror"):
            detail = " ".join(sel.xpath("//parsererror//text()").getall()).strip()
            raise MarkupParseError(detail or "Markup could not be parsed")
        body = sel.xpath("//body")
        if not body:
            raise MarkupParseError("Markup could not be parsed: no document body")
        return cls(body[0], fragment)

    # ------------------------------------------------------------------
    # Document-wide queries
    # ------------------------------------------------------------------
    def query_all(self, tag: str) -> SelectorList:
        return self.selector.xpath(".//*[local-name()=$tag]", tag=tag.lower())

    def query_with_attribute(self, attr: str) -> SelectorList:
        return self.selector.xpath(".//*[@*[local-name()=$attr]]", attr=attr)

    def get_element_by_id(self, element_id: str) -> Optional[Selector]:
        found = self.selector.xpath(".//*[@id=$id]", id=element_id)
        return found[0] if found else None

    def labels_for(self, element_id: str) -> SelectorList:
        return self.selector.xpath(".//label[@for=$id]", id=element_id)

    # ------------------------------------------------------------------
    # Element helpers
    # ------------------------------------------------------------------
    @staticmethod
    def closest(element: Selector, tag: str) -> Optional[Selector]:
        found = element.xpath("ancestor::*[local-name()=$tag][1]", tag=tag.lower())
        return found[0] if found else None

    @staticmethod
    def descendants(element: Selector, tag: str) -> SelectorList:
        return element.xpath(".//*[local-name()=$tag]", tag=tag.lower())

    @staticmethod
    def text_content(element: Selector) -> str:
        return (element.xpath("string()").get() or "").strip()

    @staticmethod
    def tag_name(element: Selector) -> str:
        return element.root.tag.lower() if isinstance(element.root.tag, str) else ""

    @staticmethod
    def has_attr(element: Selector, name: str) -> bool:
        return name in element.attrib

    @staticmethod
    def attr(element: Selector, name: str, default: str = "") -> str:
        value = element.attrib.get(name)
        return default if value is None else value

    @staticmethod
    def same_element(a: Selector, b: Selector) -> bool:
        return a.root is b.root

    @staticmethod
    def position_in(element: Selector, elements: List[Selector]) -> Optional[int]:
        """0-based position of `element` inside an already computed list."""
        for i, other in enumerate(elements):
            if other.root is element.root:
                return i
        return None
