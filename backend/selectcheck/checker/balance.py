import re
from typing import List, Optional
from ..models import FindingCategory
from ..schemas import Finding
from .source_lines import line_at

VOID_TAGS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
}

TAG_TOKEN = re.compile(r"<(/?)([a-zA-Z0-9]+)([^>]*)>")


def check_balance(
    source: str,
    category: FindingCategory = FindingCategory.ISSUE,
    limit: Optional[int] = None,
) -> List[Finding]:
    """Report open/close tag symmetry problems in raw markup.

    Only balance is checked, never whether an element may appear inside its
    parent. Every problem is reported unless `limit` caps the list.
    """
    findings: List[Finding] = []
    stack = []

    def add(code, line, message):
        findings.append(Finding(
            category=category, code=code, line=line,
            message="Line {}: {}".format(line, message),
        ))

    for m in TAG_TOKEN.finditer(source):
        closing = m.group(1) == "/"
        name = m.group(2).lower()
        line = line_at(source, m.start())

        if not closing:
            if name not in VOID_TAGS:
                stack.append({"name": name, "offset": m.start(), "line": line})
            continue

        if not stack:
            add("unmatched_closing_tag", line,
                "closing tag </{}> has no matching open tag.".format(name))
        elif stack[-1]["name"] != name:
            top = stack[-1]
            add("tag_mismatch", line,
                "tag mismatch: <{}> (opened on line {}) is closed by </{}>.".format(
                    top["name"], top["line"], name))
        else:
            stack.pop()

    for entry in stack:
        add("unclosed_tag", entry["line"],
            "<{}> is never closed.".format(entry["name"]))

    if limit is not None:
        return findings[:limit]
    return findings
