import re
import logging
from collections import defaultdict
from typing import List, Dict, Optional, Tuple
from scrapy.selector import Selector
from ..config import AnalyzerOptions
from ..models import FindingCategory, LabelMechanism, MECHANISM_DESCRIPTIONS, CATEGORY_ORDER
from ..schemas import Finding, ElementRecord, AnalysisResult
from .balance import check_balance
from .markup import MarkupDocument, normalize_input
from .source_lines import resolve_line

logger = logging.getLogger(__name__)

MISSING_REFERENCE_TEXT = "[element not found]"

# attribute pairs whose semantics overlap on a <select>
REDUNDANT_ATTRIBUTE_PAIRS = (
    ("required", "aria-required"),
    ("disabled", "aria-disabled"),
)


def _where(index: int, line: Optional[int]) -> str:
    if line is None:
        return "Select #{}".format(index)
    return "Select #{} (line {})".format(index, line)


def _parse_size(raw: str) -> int:
    m = re.match(r"\s*(\d+)", raw or "")
    size = int(m.group(1)) if m else 0
    return size or 1


class SelectAnalyzer:
    """Accessibility analysis of <select> elements in a markup fragment.

    Every check is a method that returns the findings it produced; `analyze`
    concatenates them in a fixed order and partitions the result by
    category at the end.
    """

    def __init__(self, options: Optional[AnalyzerOptions] = None):
        self.options = options or AnalyzerOptions()

    def _finding(self, preferred: FindingCategory, code: str, message: str,
                 index: Optional[int] = None, line: Optional[int] = None) -> Finding:
        return Finding(
            category=self.options.category(preferred), code=code,
            message=message, element_index=index, line=line,
        )

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------
    def analyze(self, doc: MarkupDocument, source: str) -> AnalysisResult:
        findings: List[Finding] = []
        findings += self.check_markup_balance(source)

        selects = list(doc.query_all("select"))
        if not selects:
            findings.append(self._finding(
                FindingCategory.ISSUE, "no_select", "No valid <select> element found."))
            return self._result([], findings)

        findings += self.check_duplicate_ids(doc, source)

        records: List[ElementRecord] = []
        for select in selects:
            record, element_findings = self.analyze_select(doc, source, select, selects)
            records.append(record)
            findings += element_findings

        result = self._result(records, findings)
        logger.info("Analyzed %d select element(s): %s", len(records), result.counts())
        return result

    def _result(self, records: List[ElementRecord], findings: List[Finding]) -> AnalysisResult:
        in_use = [c for c in CATEGORY_ORDER if self.options.category(c) == c]
        partitioned: Dict[FindingCategory, List[Finding]] = {c: [] for c in in_use}
        for f in findings:
            partitioned.setdefault(f.category, []).append(f)
        return AnalysisResult(element_records=records, findings=partitioned)

    # ------------------------------------------------------------------
    # Document level checks
    # ------------------------------------------------------------------
    def check_markup_balance(self, source: str) -> List[Finding]:
        return check_balance(
            source,
            category=self.options.category(self.options.balance_category),
            limit=self.options.balance_limit,
        )

    def check_duplicate_ids(self, doc: MarkupDocument, source: str) -> List[Finding]:
        registry: Dict[str, List[Selector]] = defaultdict(list)
        for element in doc.query_with_attribute("id"):
            value = MarkupDocument.attr(element, "id")
            if value.strip():
                registry[value].append(element)

        findings = []
        for value, elements in registry.items():
            if len(elements) < 2:
                continue
            lines = []
            seen_tags: Dict[str, int] = defaultdict(int)
            for element in elements:
                tag = MarkupDocument.tag_name(element)
                line = resolve_line(source, tag, element_id=value, occurrence=seen_tags[tag])
                seen_tags[tag] += 1
                if line is not None:
                    lines.append(line)
            message = 'Duplicate id "{}" is used by {} elements'.format(value, len(elements))
            if lines:
                message += " (lines {})".format(", ".join(str(n) for n in lines))
            findings.append(self._finding(
                FindingCategory.ISSUE, "duplicate_id", message + ".",
                line=lines[0] if lines else None))
        return findings

    # ------------------------------------------------------------------
    # Per element analysis
    # ------------------------------------------------------------------
    def _element_line(self, source: str, element: Selector, same_tag: List[Selector]) -> Optional[int]:
        # unstripped, to match the source text as written
        element_id = MarkupDocument.attr(element, "id")
        class_name = MarkupDocument.attr(element, "class")
        if not element_id.strip():
            element_id = None
        if not class_name.strip():
            class_name = None
        position = MarkupDocument.position_in(element, same_tag)
        earlier = same_tag[:position] if position is not None else []
        if element_id:
            occurrence = sum(1 for e in earlier if MarkupDocument.attr(e, "id") == element_id)
        elif class_name:
            occurrence = sum(1 for e in earlier if MarkupDocument.attr(e, "class") == class_name)
        else:
            occurrence = 0
        return resolve_line(
            source, MarkupDocument.tag_name(element),
            element_id=element_id,
            class_name=class_name,
            ordinal=position,
            occurrence=occurrence,
        )

    def analyze_select(self, doc: MarkupDocument, source: str, select: Selector,
                       selects: List[Selector]) -> Tuple[ElementRecord, List[Finding]]:
        index = MarkupDocument.position_in(select, selects) + 1
        record = ElementRecord(index=index, line_number=self._element_line(source, select, selects))
        where = _where(index, record.line_number)

        self._read_attributes(select, record)
        findings: List[Finding] = []
        findings += self.resolve_references(doc, select, record, where)
        findings += self.resolve_label(doc, select, record, where)
        findings += self.check_separator(select, record, where)
        self._collect_options(select, record)
        findings += self.check_optgroups(select, record, where)
        findings += self.check_state_attributes(select, record, where)
        findings += self.classify_label(record, where)
        if self.options.check_form_attributes:
            findings += self.check_form_structure(doc, record, where)
        return record, findings

    def _read_attributes(self, select: Selector, record: ElementRecord) -> None:
        ns = record.name_sources
        record.has_id = MarkupDocument.has_attr(select, "id")
        record.id = MarkupDocument.attr(select, "id")
        record.has_name = MarkupDocument.has_attr(select, "name")
        record.name = MarkupDocument.attr(select, "name")
        record.has_class = MarkupDocument.has_attr(select, "class")
        record.class_name = MarkupDocument.attr(select, "class")
        record.is_multiple = MarkupDocument.has_attr(select, "multiple")
        record.size = _parse_size(MarkupDocument.attr(select, "size"))
        record.is_required = MarkupDocument.has_attr(select, "required")
        record.is_disabled = MarkupDocument.has_attr(select, "disabled")
        record.form_id = MarkupDocument.attr(select, "form")
        if MarkupDocument.has_attr(select, "aria-required"):
            record.aria_required = MarkupDocument.attr(select, "aria-required")
        if MarkupDocument.has_attr(select, "aria-invalid"):
            record.aria_invalid = MarkupDocument.attr(select, "aria-invalid")

        ns.aria_label = MarkupDocument.has_attr(select, "aria-label")
        ns.aria_label_text = MarkupDocument.attr(select, "aria-label").strip()
        ns.aria_labelledby = MarkupDocument.has_attr(select, "aria-labelledby")
        ns.aria_labelledby_ids = MarkupDocument.attr(select, "aria-labelledby").split()
        ns.aria_describedby = MarkupDocument.has_attr(select, "aria-describedby")
        ns.aria_describedby_ids = MarkupDocument.attr(select, "aria-describedby").split()
        ns.title = MarkupDocument.has_attr(select, "title")
        ns.title_text = MarkupDocument.attr(select, "title").strip()

    def resolve_references(self, doc: MarkupDocument, select: Selector,
                           record: ElementRecord, where: str) -> List[Finding]:
        """Resolve aria-labelledby / aria-describedby id references."""
        ns = record.name_sources
        findings = []

        texts = []
        for ref in ns.aria_labelledby_ids:
            target = doc.get_element_by_id(ref)
            if target is None:
                ns.aria_labelledby_unresolved.append(ref)
                texts.append(MISSING_REFERENCE_TEXT)
                findings.append(self._finding(
                    FindingCategory.ISSUE, "aria_labelledby_missing_ref",
                    '{}: aria-labelledby references nonexistent id "{}".'.format(where, ref),
                    record.index, record.line_number))
            else:
                texts.append(MarkupDocument.text_content(target))
        ns.aria_labelledby_text = " ".join(texts).strip()

        for ref in ns.aria_describedby_ids:
            if doc.get_element_by_id(ref) is None:
                ns.aria_describedby_unresolved.append(ref)
                findings.append(self._finding(
                    FindingCategory.WARNING, "aria_describedby_missing_ref",
                    '{}: aria-describedby references nonexistent id "{}".'.format(where, ref),
                    record.index, record.line_number))
        return findings

    def resolve_label(self, doc: MarkupDocument, select: Selector,
                      record: ElementRecord, where: str) -> List[Finding]:
        """Pick the accessible name by strict precedence; first match wins."""
        ns = record.name_sources
        label = record.resolved_label
        findings = []

        if record.id.strip():
            labels = doc.labels_for(record.id)
            record.label_count = len(labels)
            if labels:
                ns.explicit_label = True
                label.mechanism = LabelMechanism.FOR_ATTRIBUTE
                label.text = MarkupDocument.text_content(labels[0])
            if len(labels) > 1:
                findings.append(self._finding(
                    FindingCategory.WARNING, "multiple_labels_for_id",
                    '{}: {} <label> elements reference id "{}"; only the first one is used.'.format(
                        where, len(labels), record.id),
                    record.index, record.line_number))

        if not ns.explicit_label:
            parent = MarkupDocument.closest(select, "label")
            if parent is not None:
                ns.implicit_label = True
                own_text = MarkupDocument.text_content(select)
                text = MarkupDocument.text_content(parent)
                if own_text:
                    text = text.replace(own_text, "", 1)
                label.mechanism = LabelMechanism.ANCESTOR
                label.text = text.strip()

        if label.mechanism == LabelMechanism.NONE:
            if ns.aria_labelledby:
                label.mechanism = LabelMechanism.ARIA_LABELLEDBY
                label.text = ns.aria_labelledby_text
            elif ns.aria_label:
                label.mechanism = LabelMechanism.ARIA_LABEL
                label.text = ns.aria_label_text
            elif ns.title and self.options.title_counts_as_label:
                label.mechanism = LabelMechanism.TITLE
                label.text = ns.title_text

        label.valid = bool(label.text)
        # every reference dangling: the text is only placeholders
        if (label.mechanism == LabelMechanism.ARIA_LABELLEDBY and ns.aria_labelledby_ids
                and len(ns.aria_labelledby_unresolved) == len(ns.aria_labelledby_ids)):
            label.valid = False
        return findings

    def check_separator(self, select: Selector, record: ElementRecord, where: str) -> List[Finding]:
        record.has_separator_child = bool(MarkupDocument.descendants(select, "hr"))
        if not record.has_separator_child:
            return []
        return [self._finding(
            FindingCategory.ISSUE, "separator_in_select",
            "{}: contains an <hr> element. <hr> inside <select> is not exposed to "
            "assistive technology and should be removed.".format(where),
            record.index, record.line_number)]

    def _is_placeholder_text(self, text: str) -> bool:
        return text == "" or any(m in text for m in self.options.placeholder_markers)

    def _collect_options(self, select: Selector, record: ElementRecord) -> None:
        options = MarkupDocument.descendants(select, "option")
        record.options_count = len(options)
        for option in options:
            if not MarkupDocument.attr(option, "value"):
                if self._is_placeholder_text(MarkupDocument.text_content(option)):
                    record.empty_option_present = True
                else:
                    record.options_without_value_count += 1
            if MarkupDocument.has_attr(option, "disabled"):
                record.disabled_options_count += 1

    def check_optgroups(self, select: Selector, record: ElementRecord, where: str) -> List[Finding]:
        findings = []
        groups = MarkupDocument.descendants(select, "optgroup")
        record.optgroups_count = len(groups)
        for position, group in enumerate(groups, start=1):
            if MarkupDocument.attr(group, "label").strip():
                continue
            record.unlabeled_optgroups.append(position)
            findings.append(self._finding(
                FindingCategory.ISSUE, "optgroup_missing_label",
                "{}: optgroup #{} has no label attribute.".format(where, position),
                record.index, record.line_number))
        return findings

    def check_state_attributes(self, select: Selector, record: ElementRecord, where: str) -> List[Finding]:
        findings = []
        for native, aria in REDUNDANT_ATTRIBUTE_PAIRS:
            if MarkupDocument.has_attr(select, native) and MarkupDocument.has_attr(select, aria):
                record.duplicate_redundant_attributes.append((native, aria))
                findings.append(self._finding(
                    FindingCategory.WARNING, "redundant_attributes",
                    "{}: both {} and {} are set; use only one of them.".format(where, native, aria),
                    record.index, record.line_number))

        if self.options.strict_required and record.is_required:
            if record.aria_required is None:
                findings.append(self._finding(
                    FindingCategory.ISSUE, "aria_required_missing",
                    '{}: required is set but aria-required="true" is missing.'.format(where),
                    record.index, record.line_number))
            elif record.aria_required.strip().lower() != "true":
                findings.append(self._finding(
                    FindingCategory.ISSUE, "aria_required_mismatch",
                    '{}: required is set but aria-required is "{}" instead of "true".'.format(
                        where, record.aria_required),
                    record.index, record.line_number))
            else:
                findings.append(self._finding(
                    FindingCategory.SUCCESS, "aria_required_ok",
                    '{}: required is mirrored by aria-required="true".'.format(where),
                    record.index, record.line_number))

        if (record.aria_invalid or "").strip().lower() == "true":
            findings.append(self._finding(
                FindingCategory.WARNING, "aria_invalid_static",
                '{}: aria-invalid="true" is hard-coded; set and clear the validation '
                "state explicitly when the value is checked.".format(where),
                record.index, record.line_number))
        return findings

    def classify_label(self, record: ElementRecord, where: str) -> List[Finding]:
        mechanisms = [
            m for m in record.mechanisms_present
            if m != LabelMechanism.TITLE or self.options.title_counts_as_label
        ]
        label = record.resolved_label

        if not mechanisms:
            return [self._finding(
                FindingCategory.CRITICAL, "select_missing_label",
                "{}: no accessible label. A <select> must have one of label, "
                "aria-label or aria-labelledby.".format(where),
                record.index, record.line_number)]

        description = MECHANISM_DESCRIPTIONS[label.mechanism]
        if label.text:
            message = '{}: accessible name provided via {} ("{}").'.format(where, description, label.text)
        else:
            message = "{}: accessible name provided via {}.".format(where, description)
        findings = [self._finding(
            FindingCategory.SUCCESS, "label_ok", message, record.index, record.line_number)]

        if not label.valid:
            findings.append(self._finding(
                FindingCategory.WARNING, "empty_accessible_name",
                "{}: the accessible name from {} is empty.".format(where, description),
                record.index, record.line_number))
        if label.mechanism == LabelMechanism.TITLE:
            findings.append(self._finding(
                FindingCategory.WARNING, "title_only_label",
                "{}: the title attribute is the only name source. It is a weak fallback; "
                "prefer a visible <label>.".format(where),
                record.index, record.line_number))
        if len(mechanisms) > 1:
            findings.append(self._finding(
                FindingCategory.WARNING, "multiple_label_mechanisms",
                "{}: {} labeling mechanisms are used ({}); use exactly one.".format(
                    where, len(mechanisms), ", ".join(m.value for m in mechanisms)),
                record.index, record.line_number))
        return findings

    def check_form_structure(self, doc: MarkupDocument, record: ElementRecord, where: str) -> List[Finding]:
        findings = []

        def add(preferred, code, message):
            findings.append(self._finding(
                preferred, code, "{}: {}".format(where, message), record.index, record.line_number))

        if not record.has_id:
            add(FindingCategory.ISSUE, "missing_id",
                "no id attribute. An id is needed to associate a <label>.")
        if not record.has_name:
            add(FindingCategory.ISSUE, "missing_name",
                "no name attribute. It is needed for form submission.")
        if record.is_required and not record.empty_option_present:
            add(FindingCategory.ISSUE, "required_without_placeholder",
                "required is set but there is no empty placeholder option.")
        if record.options_without_value_count > 0:
            add(FindingCategory.ISSUE, "options_without_value",
                "{} option(s) have no value attribute.".format(record.options_without_value_count))
        if record.options_count == 0:
            add(FindingCategory.ISSUE, "no_options", "contains no options.")
        if record.form_id and doc.get_element_by_id(record.form_id) is None:
            add(FindingCategory.WARNING, "form_missing_ref",
                'form attribute references nonexistent id "{}".'.format(record.form_id))
        if record.is_multiple:
            add(FindingCategory.SUCCESS, "multiple_selection",
                "the multiple attribute allows selecting several options.")
        if record.optgroups_count > 0:
            add(FindingCategory.SUCCESS, "optgroups_used",
                "optgroup is used to group the options.")
        return findings


def check_markup(raw: Optional[str], options: Optional[AnalyzerOptions] = None) -> Tuple[str, AnalysisResult]:
    """Trim, parse and analyze user supplied markup.

    Returns the trimmed source together with the result. Raises
    EmptyMarkupError / MarkupParseError before any analysis happens.
    """
    code = normalize_input(raw)
    doc = MarkupDocument.parse(code)
    return code, SelectAnalyzer(options).analyze(doc, code)
