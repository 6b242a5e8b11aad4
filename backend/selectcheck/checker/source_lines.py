"""Best-effort mapping of parsed elements back to source lines.

The parser does not hand us positions for the original fragment, so the
opening tag is searched for in the raw text. One strategy is picked up front
(id, then class, then ordinal) and a miss is final.
"""
import re
import logging
from typing import Optional

logger = logging.getLogger(__name__)

OPEN_TAG_TEMPLATE = r"<{tag}(?=[\s/>])[^>]*>"


def line_at(source: str, offset: int) -> int:
    """1-based line of `offset` inside `source`."""
    return source.count("\n", 0, offset) + 1


def _attr_pattern(tag: str, attr: str, value: str) -> "re.Pattern":
    # attribute value may be double quoted, single quoted or bare
    return re.compile(
        r"<{tag}(?=[\s/>])[^>]*?\s{attr}\s*=\s*(?:\"{v}\"|'{v}'|{v}(?=[\s/>]))[^>]*>".format(
            tag=re.escape(tag), attr=re.escape(attr), v=re.escape(value)),
        re.IGNORECASE,
    )


def _class_pattern(tag: str, class_name: str) -> "re.Pattern":
    return re.compile(
        r"<{tag}(?=[\s/>])[^>]*?\sclass\s*=\s*(?:\"{v}\"|'{v}'|{v}(?=[\s/>]))[^>]*>".format(
            tag=re.escape(tag), v=re.escape(class_name)),
        re.IGNORECASE,
    )


def _nth_match(pattern: "re.Pattern", source: str, n: int) -> Optional[int]:
    for i, m in enumerate(pattern.finditer(source)):
        if i == n:
            return m.start()
    return None


def resolve_line(
    source: str,
    tag: str,
    element_id: Optional[str] = None,
    class_name: Optional[str] = None,
    ordinal: Optional[int] = None,
    occurrence: int = 0,
) -> Optional[int]:
    """Locate an element's opening tag in `source` and return its line.

    element_id: id attribute value; searched first when given.
    class_name: full class attribute value; used when there is no id.
    ordinal: 0-based position of the element among the same-tag elements of
        the parsed tree; used when neither attribute is present.
    occurrence: which match of the id/class pattern to take (for values that
        appear more than once, e.g. duplicate ids).
    """
    tag = tag.lower()
    if element_id:
        offset = _nth_match(_attr_pattern(tag, "id", element_id), source, occurrence)
        strategy = "id"
    elif class_name:
        offset = _nth_match(_class_pattern(tag, class_name), source, occurrence)
        strategy = "class"
    elif ordinal is not None:
        generic = re.compile(OPEN_TAG_TEMPLATE.format(tag=re.escape(tag)), re.IGNORECASE)
        offset = _nth_match(generic, source, ordinal)
        strategy = "ordinal"
    else:
        return None

    if offset is None:
        logger.debug("No source line for <%s> (strategy=%s)", tag, strategy)
        return None
    return line_at(source, offset)
