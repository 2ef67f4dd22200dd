from dataclasses import dataclass, field


@dataclass(frozen=True)
class LegalPrecedent:
    """A past case cited for or against the claimed subcast.

    ``relevance_score`` is whatever ranking signal the service produced; it is
    not guaranteed to fall in [0, 1].
    """

    case_title: str
    court: str
    date: str
    document_url: str
    relevance_score: float
    outcome: str
    key_similarities: tuple[str, ...] | None = None
    key_differences: tuple[str, ...] | None = None


@dataclass(frozen=True)
class LegalAnalysis:
    """Assessment of the current applicant against the precedents."""

    current_applicant_strengths: tuple[str, ...] = ()
    current_applicant_weaknesses: tuple[str, ...] = ()
    probability_assessment: str = ""


@dataclass(frozen=True)
class AnalysisResult:
    """Verdict returned by the analysis service for one submitted draft."""

    applicant_id: str
    claimed_subcast: str
    legal_analysis: LegalAnalysis
    processed_at: str
    supporting_precedents: tuple[LegalPrecedent, ...] = field(default_factory=tuple)
    contradicting_precedents: tuple[LegalPrecedent, ...] = field(default_factory=tuple)
    draft_suggestions: tuple[str, ...] = field(default_factory=tuple)
