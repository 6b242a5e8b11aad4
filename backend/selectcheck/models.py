import enum


class FindingCategory(str, enum.Enum):
    CRITICAL = "critical"
    ISSUE = "issue"
    WARNING = "warning"
    SUCCESS = "success"


# Display / flattening order
CATEGORY_ORDER = (
    FindingCategory.CRITICAL,
    FindingCategory.ISSUE,
    FindingCategory.WARNING,
    FindingCategory.SUCCESS,
)


class LabelMechanism(str, enum.Enum):
    NONE = "none"
    FOR_ATTRIBUTE = "for-attribute"
    ANCESTOR = "ancestor"
    ARIA_LABELLEDBY = "aria-labelledby"
    ARIA_LABEL = "aria-label"
    TITLE = "title"


MECHANISM_DESCRIPTIONS = {
    LabelMechanism.NONE: "no label",
    LabelMechanism.FOR_ATTRIBUTE: "<label for> association",
    LabelMechanism.ANCESTOR: "implicit association (inside <label>)",
    LabelMechanism.ARIA_LABELLEDBY: "aria-labelledby",
    LabelMechanism.ARIA_LABEL: "aria-label",
    LabelMechanism.TITLE: "title attribute",
}
