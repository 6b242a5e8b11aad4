from html import escape
from typing import List
from ..models import FindingCategory, CATEGORY_ORDER, MECHANISM_DESCRIPTIONS, LabelMechanism
from ..schemas import AnalysisResult, ElementRecord, Finding

SECTION_TITLES = {
    FindingCategory.CRITICAL: ("Critical problems", "badge-critical", "critical"),
    FindingCategory.ISSUE: ("Accessibility issues", "badge-error", "error"),
    FindingCategory.WARNING: ("Warnings", "badge-warning", "warning"),
    FindingCategory.SUCCESS: ("Implemented correctly", "badge-success", "success"),
}

# Static authoring tips; <strong> is intentional markup.
TIPS = [
    "<strong>Label required:</strong> every select needs a name from a label, "
    "aria-label or aria-labelledby.",
    "<strong>id and name:</strong> id connects the label, name is needed to submit the form.",
    "<strong>hr elements:</strong> an &lt;hr&gt; inside a select is not announced by screen readers.",
    "<strong>optgroup:</strong> with many options, optgroup with a label makes navigation easier.",
    "<strong>Placeholder option:</strong> offer an empty \"Please choose\" option first.",
    "<strong>Keyboard:</strong> native selects are keyboard accessible; keep it that way when styling them.",
]

STYLE = """
  body { font-family: Arial, sans-serif; max-width: 900px; margin: 0 auto; padding: 24px; color: #1f2937; }
  h2 { color: #374151; }
  .badge { padding: 2px 8px; border-radius: 4px; font-size: 13px; }
  .badge-critical { background: #fee2e2; color: #7f1d1d; }
  .badge-error { background: #fee2e2; color: #b91c1c; }
  .badge-warning { background: #fef9c3; color: #854d0e; }
  .badge-success { background: #dcfce7; color: #166534; }
  .issue-item { padding: 8px 12px; margin: 4px 0; border-radius: 4px; background: #f9fafb; }
  .issue-item.critical, .issue-item.error { border-left: 4px solid #b91c1c; }
  .issue-item.warning { border-left: 4px solid #ca8a04; }
  .issue-item.success { border-left: 4px solid #16a34a; }
  .metric { display: flex; gap: 8px; padding: 2px 0; }
  .metric-label { color: #6b7280; min-width: 220px; }
  .ok { color: #166534; } .warn { color: #b91c1c; } .info { color: #1d4ed8; }
  .preview-wrap { border: 1px dashed #d1d5db; padding: 16px; }
"""


def _finding_line(finding: Finding, css: str) -> str:
    return '<div class="issue-item {}">{}</div>\n'.format(css, escape(finding.message))


def _metric(label: str, value: str, css: str = "") -> str:
    return (
        '<div class="metric"><span class="metric-label">{}</span>'
        '<span class="metric-value {}">{}</span></div>\n'
    ).format(escape(label), css, value)


def render_sections(result: AnalysisResult) -> str:
    html = ""
    for category in CATEGORY_ORDER:
        items = result.findings.get(category) or []
        if not items:
            continue
        title, badge, css = SECTION_TITLES[category]
        rows = "".join(_finding_line(f, css) for f in items)
        html += (
            '<section class="findings-{cat}">\n'
            '<h2>{title} <span class="badge {badge}">{count}</span></h2>\n'
            "{rows}</section>\n"
        ).format(cat=category.value, title=title, badge=badge, count=len(items), rows=rows)
    return html


def render_element_details(record: ElementRecord) -> str:
    ns = record.name_sources
    label = record.resolved_label
    summary = "Select #{} {}".format(
        record.index, '(id="{}")'.format(escape(record.id)) if record.id else "(no id)")
    if record.line_number is not None:
        summary += " line {}".format(record.line_number)

    body = _metric("id attribute:", escape(record.id) if record.has_id else "missing",
                   "ok" if record.has_id else "warn")
    body += _metric("name attribute:", escape(record.name) if record.has_name else "missing",
                    "ok" if record.has_name else "warn")
    has_label = label.mechanism != LabelMechanism.NONE
    body += _metric("Label source:", escape(MECHANISM_DESCRIPTIONS[label.mechanism]),
                    "ok" if has_label else "warn")
    if label.text:
        body += _metric("Label text:", '"{}"'.format(escape(label.text)))
    if ns.aria_label:
        body += _metric("aria-label:", '"{}"'.format(escape(ns.aria_label_text)))
    if ns.aria_labelledby:
        body += _metric("aria-labelledby:", '"{}"'.format(escape(ns.aria_labelledby_text)))
    body += _metric("Optgroups:", "{}".format(record.optgroups_count) if record.optgroups_count else "not used",
                    "info" if record.optgroups_count else "")
    body += _metric("Required:", "required" if record.is_required else "optional")
    if record.has_separator_child:
        body += _metric("hr element:", "present, not exposed to assistive technology", "warn")
    if record.duplicate_redundant_attributes:
        pairs = ", ".join("{} + {}".format(a, b) for a, b in record.duplicate_redundant_attributes)
        body += _metric("Redundant attributes:", escape(pairs), "warn")
    if record.is_disabled:
        body += _metric("Disabled:", "the whole select is disabled", "warn")
    if record.disabled_options_count > 0:
        body += _metric("Disabled options:", "{}".format(record.disabled_options_count))

    return (
        "<details>\n<summary>{summary}</summary>\n"
        '<div style="padding: 1rem 0;">\n{body}</div>\n</details>\n'
    ).format(summary=summary, body=body)


def render_tips(tips: List[str] = None) -> str:
    items = "".join("<li>{}</li>\n".format(t) for t in (tips or TIPS))
    return "<section>\n<h2>Tips: accessibility checklist</h2>\n<ul>\n{}</ul>\n</section>\n".format(items)


def render_report(result: AnalysisResult, source: str) -> str:
    """Render the full result view.

    Finding messages and record values are escaped; `source` is inserted
    verbatim as the live preview.
    """
    details = ""
    if result.element_records:
        details = "<section>\n<h2>Details</h2>\n{}</section>\n".format(
            "".join(render_element_details(r) for r in result.element_records))

    return """<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8">
<title>Select accessibility report</title>
<style>{style}</style></head>
<body>
<div id="result">
{sections}{details}<section>
<h2>Code preview</h2>
<div class="preview-wrap">{preview}</div>
</section>
{tips}</div>
</body></html>""".format(
        style=STYLE,
        sections=render_sections(result),
        details=details,
        preview=source,
        tips=render_tips(),
    )


def render_message(message: str, css: str = "warn") -> str:
    """Single-line view used for the empty-input prompt and parse errors."""
    return '<div id="result"><span class="{}">{}</span></div>'.format(css, escape(message))
