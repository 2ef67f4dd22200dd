"""Side-effect-free formatting used by the result and profile views."""

from dataclasses import dataclass
from datetime import date, datetime

from certcheck.results.models import AnalysisResult

_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


@dataclass(frozen=True)
class SummaryCounts:
    supporting: int
    challenging: int
    recommendations: int


def humanize(token: str) -> str:
    """``"ST_KOLI_MAHADEV"`` -> ``"ST KOLI MAHADEV"``; casing is left alone."""
    return token.replace("_", " ")


def display_name(email: str, name: str | None = None) -> str:
    """Return the explicit name, or one derived from the email's local part."""
    if name:
        return name
    local_part = email.split("@")[0]
    words = local_part.replace(".", " ").replace("_", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def initials(name: str) -> str:
    """Up to two upper-case initials for the avatar."""
    return "".join(word[:1] for word in name.split(" ")).upper()[:2]


def format_long_date(value: str) -> str:
    """Format an ISO date or timestamp as ``"July 22, 2020"``.

    Anything that does not parse is returned unchanged.
    """
    try:
        parsed = datetime.fromisoformat(value.strip())
    except (ValueError, AttributeError):
        return value
    return _long_form(parsed.date())


def summary_counts(result: AnalysisResult) -> SummaryCounts:
    return SummaryCounts(
        supporting=len(result.supporting_precedents),
        challenging=len(result.contradicting_precedents),
        recommendations=len(result.draft_suggestions),
    )


def draft_filename(result: AnalysisResult) -> str:
    return f"improvement-draft-{result.applicant_id}.txt"


def render_draft_document(result: AnalysisResult, generated_on: date | None = None) -> str:
    """Serialize the improvement draft offered for download as plain text."""
    generated_on = generated_on or date.today()
    analysis = result.legal_analysis
    sections = [
        "DOCUMENT VERIFICATION IMPROVEMENT DRAFT",
        "=====================================",
        "",
        f"Application ID: {result.applicant_id}",
        f"Claimed Subcaste: {humanize(result.claimed_subcast)}",
        f"Assessment: {analysis.probability_assessment}",
        "",
        "CURRENT STRENGTHS:",
        *_numbered(analysis.current_applicant_strengths),
        "",
        "AREAS FOR IMPROVEMENT:",
        *_numbered(analysis.current_applicant_weaknesses),
        "",
        "RECOMMENDED ACTIONS:",
        *_numbered(result.draft_suggestions),
        "",
        "---",
        f"Generated on: {_long_form(generated_on)}",
        "Document Verification System",
    ]
    return "\n".join(sections)


def _numbered(items: tuple[str, ...]) -> list[str]:
    return [f"{i}. {item}" for i, item in enumerate(items, start=1)]


def _long_form(value: date) -> str:
    return f"{_MONTHS[value.month - 1]} {value.day}, {value.year}"
