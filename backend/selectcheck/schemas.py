from typing import Optional, List, Dict, Tuple
from pydantic import BaseModel, Field
from .models import FindingCategory, LabelMechanism, CATEGORY_ORDER


class Finding(BaseModel):
    category: FindingCategory
    code: str
    message: str
    element_index: Optional[int] = None
    line: Optional[int] = None
    model_config = {"frozen": True}


class NameSources(BaseModel):
    explicit_label: bool = False
    implicit_label: bool = False
    aria_label: bool = False
    aria_label_text: str = ""
    aria_labelledby: bool = False
    aria_labelledby_ids: List[str] = []
    aria_labelledby_text: str = ""
    aria_labelledby_unresolved: List[str] = []
    aria_describedby: bool = False
    aria_describedby_ids: List[str] = []
    aria_describedby_unresolved: List[str] = []
    title: bool = False
    title_text: str = ""


class ResolvedLabel(BaseModel):
    mechanism: LabelMechanism = LabelMechanism.NONE
    text: str = ""
    valid: bool = False


class ElementRecord(BaseModel):
    index: int
    line_number: Optional[int] = None
    has_id: bool = False
    id: str = ""
    has_name: bool = False
    name: str = ""
    has_class: bool = False
    class_name: str = ""
    name_sources: NameSources = Field(default_factory=NameSources)
    resolved_label: ResolvedLabel = Field(default_factory=ResolvedLabel)
    label_count: int = 0
    has_separator_child: bool = False
    is_multiple: bool = False
    size: int = 1
    is_required: bool = False
    is_disabled: bool = False
    aria_required: Optional[str] = None
    aria_invalid: Optional[str] = None
    form_id: str = ""
    options_count: int = 0
    optgroups_count: int = 0
    unlabeled_optgroups: List[int] = []
    empty_option_present: bool = False
    options_without_value_count: int = 0
    disabled_options_count: int = 0
    duplicate_redundant_attributes: List[Tuple[str, str]] = []

    @property
    def mechanisms_present(self) -> List[LabelMechanism]:
        """Distinct labeling mechanisms found on the element, title included."""
        ns = self.name_sources
        found = []
        if ns.explicit_label:
            found.append(LabelMechanism.FOR_ATTRIBUTE)
        elif ns.implicit_label:
            found.append(LabelMechanism.ANCESTOR)
        if ns.aria_labelledby:
            found.append(LabelMechanism.ARIA_LABELLEDBY)
        if ns.aria_label:
            found.append(LabelMechanism.ARIA_LABEL)
        if ns.title:
            found.append(LabelMechanism.TITLE)
        return found


class AnalysisResult(BaseModel):
    element_records: List[ElementRecord] = []
    findings: Dict[FindingCategory, List[Finding]] = {}

    def of(self, category: FindingCategory) -> List[Finding]:
        return list(self.findings.get(category, []))

    def messages(self, category: FindingCategory) -> List[str]:
        return [f.message for f in self.findings.get(category, [])]

    def counts(self) -> Dict[str, int]:
        return {c.value: len(self.findings.get(c, [])) for c in CATEGORY_ORDER}

    def all_findings(self) -> List[Finding]:
        out = []
        for c in CATEGORY_ORDER:
            out.extend(self.findings.get(c, []))
        return out

    @property
    def has_problems(self) -> bool:
        return bool(self.findings.get(FindingCategory.CRITICAL) or self.findings.get(FindingCategory.ISSUE))


# API schemas

class AnalyzeRequest(BaseModel):
    markup: str
    profile: Optional[str] = None


class AnalysisResponse(BaseModel):
    profile: str
    element_records: List[ElementRecord]
    findings: Dict[FindingCategory, List[Finding]]
    counts: Dict[str, int]


class ProfileInfo(BaseModel):
    name: str
    use_critical: bool
    use_warning: bool
    title_counts_as_label: bool
    strict_required: bool
    balance_category: FindingCategory
    balance_limit: Optional[int] = None
    check_form_attributes: bool
    placeholder_markers: List[str]


class ProfileListResponse(BaseModel):
    default: str
    profiles: List[ProfileInfo]
