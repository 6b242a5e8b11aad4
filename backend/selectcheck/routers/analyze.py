import logging
from typing import Tuple
from fastapi import APIRouter, HTTPException
from fastapi.responses import HTMLResponse
from ..config import AnalyzerOptions, UnknownProfileError, get_options, default_profile_name, profile_names
from ..checker.analyzer import check_markup
from ..checker.markup import EmptyMarkupError, MarkupParseError
from ..reports.html_report import render_report, render_message
from ..schemas import AnalyzeRequest, AnalysisResponse, ProfileInfo, ProfileListResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/select-check", tags=["select-check"])


def _options_for(profile) -> Tuple[str, AnalyzerOptions]:
    name = (profile or default_profile_name()).strip().lower()
    try:
        return name, get_options(name)
    except UnknownProfileError:
        raise HTTPException(
            status_code=400,
            detail="Unknown profile '{}'. Available: {}".format(name, ", ".join(profile_names())),
        )


@router.get("/profiles", response_model=ProfileListResponse)
def list_profiles():
    """Available analyzer profiles and their option switches."""
    profiles = [
        ProfileInfo(name=name, **get_options(name).model_dump())
        for name in profile_names()
    ]
    return ProfileListResponse(default=default_profile_name(), profiles=profiles)


@router.post("/analyze", response_model=AnalysisResponse)
def analyze_markup(payload: AnalyzeRequest):
    """Analyze a markup fragment and return the findings as JSON."""
    name, options = _options_for(payload.profile)
    try:
        _, result = check_markup(payload.markup, options)
    except EmptyMarkupError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except MarkupParseError as e:
        logger.warning("Rejected unparsable markup: %s", e)
        raise HTTPException(status_code=422, detail="Parse error: {}".format(str(e)))

    return AnalysisResponse(
        profile=name,
        element_records=result.element_records,
        findings=result.findings,
        counts=result.counts(),
    )


@router.post("/report", response_class=HTMLResponse)
def analyze_markup_report(payload: AnalyzeRequest):
    """Analyze a markup fragment and return the rendered HTML view."""
    _, options = _options_for(payload.profile)
    try:
        code, result = check_markup(payload.markup, options)
    except EmptyMarkupError as e:
        return HTMLResponse(content=render_message(str(e)))
    except MarkupParseError as e:
        logger.warning("Rejected unparsable markup: %s", e)
        return HTMLResponse(
            content=render_message("Parse error: {}".format(str(e)), css="error"),
            status_code=422,
        )
    return HTMLResponse(content=render_report(result, code))
