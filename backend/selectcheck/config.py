import os
import logging
from typing import Optional, Tuple, Dict, List
from pydantic import BaseModel
from .models import FindingCategory

logger = logging.getLogger(__name__)

VERSION = "0.3.0"

DEFAULT_PLACEHOLDER_MARKERS = ("--", "선택")


class UnknownProfileError(KeyError):
    """Raised when an analyzer profile name is not registered."""


class AnalyzerOptions(BaseModel):
    """Behaviour switches of the select analyzer.

    use_critical / use_warning: whether those categories exist. Findings that
        would land in a disabled category are reported as `issue` instead.
    title_counts_as_label: treat the title attribute as the weakest naming
        mechanism (earliest rule set). Off by default.
    strict_required: `required` must be mirrored by aria-required="true".
    balance_category: category used for tag-balance problems.
    balance_limit: how many balance problems are kept (None = all).
    check_form_attributes: id / name / option structure checks.
    placeholder_markers: substrings marking a "please choose" option.
    """
    use_critical: bool = True
    use_warning: bool = True
    title_counts_as_label: bool = False
    strict_required: bool = False
    balance_category: FindingCategory = FindingCategory.ISSUE
    balance_limit: Optional[int] = None
    check_form_attributes: bool = True
    placeholder_markers: Tuple[str, ...] = DEFAULT_PLACEHOLDER_MARKERS
    model_config = {"frozen": True}

    def category(self, preferred: FindingCategory) -> FindingCategory:
        """Map a preferred category onto the categories this profile uses."""
        if preferred == FindingCategory.CRITICAL and not self.use_critical:
            return FindingCategory.ISSUE
        if preferred == FindingCategory.WARNING and not self.use_warning:
            return FindingCategory.ISSUE
        return preferred


PROFILES: Dict[str, AnalyzerOptions] = {
    "basic": AnalyzerOptions(
        use_critical=False,
        use_warning=False,
        title_counts_as_label=True,
        strict_required=False,
        balance_limit=1,
    ),
    "standard": AnalyzerOptions(
        use_critical=False,
        use_warning=True,
    ),
    "strict": AnalyzerOptions(
        use_critical=True,
        use_warning=True,
        strict_required=True,
        balance_category=FindingCategory.CRITICAL,
    ),
}


def _env_placeholder_markers() -> Optional[Tuple[str, ...]]:
    raw = os.getenv("SELECTCHECK_PLACEHOLDER_MARKERS", "")
    markers = tuple(m.strip() for m in raw.split(",") if m.strip())
    return markers or None


def default_profile_name() -> str:
    name = os.getenv("SELECTCHECK_PROFILE", "strict").strip().lower()
    if name not in PROFILES:
        logger.warning("Unknown SELECTCHECK_PROFILE %r, falling back to 'strict'", name)
        return "strict"
    return name


def get_options(profile: Optional[str] = None) -> AnalyzerOptions:
    """Resolve a profile name (or the configured default) to its options."""
    name = (profile or default_profile_name()).strip().lower()
    if name not in PROFILES:
        raise UnknownProfileError(name)
    options = PROFILES[name]
    markers = _env_placeholder_markers()
    if markers:
        options = options.model_copy(update={"placeholder_markers": markers})
    return options


def profile_names() -> List[str]:
    return list(PROFILES)


def log_level() -> int:
    level = os.getenv("SELECTCHECK_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level, logging.INFO)


def get_cors_origins() -> list:
    """Build CORS origins list from environment.
    Supports wildcard '*' for development or proxied deployments.
    """
    cors_env = os.getenv("CORS_ORIGINS", "")
    if cors_env == "*":
        return ["*"]
    origins = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]
    if cors_env:
        for o in cors_env.split(","):
            o = o.strip()
            if o and o not in origins:
                origins.append(o)
    frontend_url = os.getenv("FRONTEND_URL", "")
    if frontend_url and frontend_url not in origins:
        origins.append(frontend_url)
    return origins
