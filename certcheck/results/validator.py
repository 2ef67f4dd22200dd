"""Builds an AnalysisResult from a decoded response body.

The service wraps the verdict as ``{"subcast_legal_analysis": {...},
"processed_at": "..."}``. The flat form, with ``processed_at`` inside the
verdict object, is accepted as well.
"""

from typing import Any

from certcheck.analysis.exceptions import MalformedResponseError
from certcheck.results.models import AnalysisResult, LegalAnalysis, LegalPrecedent

_WRAPPER_KEY = "subcast_legal_analysis"
_REQUIRED_FIELDS = (
    "applicant_id",
    "claimed_subcast",
    "supporting_precedents",
    "contradicting_precedents",
    "legal_analysis",
    "draft_suggestions",
)


def validate_and_build(data: Any) -> AnalysisResult:
    """Validate a decoded response body and build an AnalysisResult.

    Raises:
        MalformedResponseError: on any missing field or wrong type.
    """
    if not isinstance(data, dict):
        raise MalformedResponseError("Response body must be a JSON object")
    body = data.get(_WRAPPER_KEY, data)
    if not isinstance(body, dict):
        raise MalformedResponseError(f"'{_WRAPPER_KEY}' must be an object")
    for name in _REQUIRED_FIELDS:
        if name not in body:
            raise MalformedResponseError(f"Missing required field: {name}")

    return AnalysisResult(
        applicant_id=_require_str(body, "applicant_id"),
        claimed_subcast=_require_str(body, "claimed_subcast"),
        supporting_precedents=_build_precedents(
            body["supporting_precedents"], "supporting_precedents"
        ),
        contradicting_precedents=_build_precedents(
            body["contradicting_precedents"], "contradicting_precedents"
        ),
        legal_analysis=_build_legal_analysis(body["legal_analysis"]),
        draft_suggestions=_str_tuple(body["draft_suggestions"], "draft_suggestions"),
        processed_at=_build_processed_at(data, body),
    )


def _build_processed_at(data: dict[str, Any], body: dict[str, Any]) -> str:
    raw = data.get("processed_at", body.get("processed_at"))
    if not isinstance(raw, str) or not raw:
        raise MalformedResponseError("'processed_at' must be a non-empty string")
    return raw


def _build_legal_analysis(raw: Any) -> LegalAnalysis:
    if not isinstance(raw, dict):
        raise MalformedResponseError("'legal_analysis' must be an object")
    for name in (
        "current_applicant_strengths",
        "current_applicant_weaknesses",
        "probability_assessment",
    ):
        if name not in raw:
            raise MalformedResponseError(f"Missing required field: legal_analysis.{name}")
    return LegalAnalysis(
        current_applicant_strengths=_str_tuple(
            raw["current_applicant_strengths"], "legal_analysis.current_applicant_strengths"
        ),
        current_applicant_weaknesses=_str_tuple(
            raw["current_applicant_weaknesses"], "legal_analysis.current_applicant_weaknesses"
        ),
        probability_assessment=_require_str(
            raw, "probability_assessment", "legal_analysis.probability_assessment"
        ),
    )


def _build_precedents(raw: Any, path: str) -> tuple[LegalPrecedent, ...]:
    if not isinstance(raw, list):
        raise MalformedResponseError(f"'{path}' must be a list")
    # Server order is kept as-is.
    return tuple(_build_precedent(item, f"{path}[{i}]") for i, item in enumerate(raw))


def _build_precedent(raw: Any, path: str) -> LegalPrecedent:
    if not isinstance(raw, dict):
        raise MalformedResponseError(f"'{path}' must be an object")
    score = raw.get("relevance_score")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise MalformedResponseError(f"'{path}.relevance_score' must be a number")
    return LegalPrecedent(
        case_title=_require_str(raw, "case_title", f"{path}.case_title"),
        court=_require_str(raw, "court", f"{path}.court"),
        date=_require_str(raw, "date", f"{path}.date"),
        document_url=_require_str(raw, "document_url", f"{path}.document_url"),
        relevance_score=float(score),
        outcome=_require_str(raw, "outcome", f"{path}.outcome"),
        key_similarities=_optional_str_tuple(
            raw.get("key_similarities"), f"{path}.key_similarities"
        ),
        key_differences=_optional_str_tuple(
            raw.get("key_differences"), f"{path}.key_differences"
        ),
    )


def _require_str(raw: dict[str, Any], key: str, path: str | None = None) -> str:
    value = raw.get(key)
    if not isinstance(value, str):
        raise MalformedResponseError(f"'{path or key}' must be a string")
    return value


def _str_tuple(raw: Any, path: str) -> tuple[str, ...]:
    if not isinstance(raw, list):
        raise MalformedResponseError(f"'{path}' must be a list")
    for i, item in enumerate(raw):
        if not isinstance(item, str):
            raise MalformedResponseError(f"'{path}[{i}]' must be a string")
    return tuple(raw)


def _optional_str_tuple(raw: Any, path: str) -> tuple[str, ...] | None:
    if raw is None:
        return None
    return _str_tuple(raw, path)
