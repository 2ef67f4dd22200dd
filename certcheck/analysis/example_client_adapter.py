"""Example analysis client adapter.

Returns a fixed verdict without any network call. Useful for local runs of
the workflow and for tests that exercise the Results stage.
"""

from typing import ClassVar

from certcheck.analysis.base import BaseAnalysisClient
from certcheck.analysis.models import AnalysisInput
from certcheck.results.models import AnalysisResult
from certcheck.results.validator import validate_and_build


class ExampleAnalysisClient(BaseAnalysisClient):
    """Adapter that answers every submission with the same sample verdict."""

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "subcast_legal_analysis": {
            "applicant_id": "APP-2025-001",
            "claimed_subcast": "ST_KOLI_MAHADEV",
            "supporting_precedents": [],
            "contradicting_precedents": [
                {
                    "case_title": "Ramesh Koli vs Scrutiny Committee",
                    "court": "Bombay High Court",
                    "date": "2020-07-22",
                    "document_url": "https://drive.google.xy/view?usp=drive_link",
                    "relevance_score": 0.12,
                    "key_similarities": None,
                    "key_differences": [
                        "No parental tribal certificate",
                        "School records showed only 'Koli' without 'Mahadev'",
                        "Birth outside designated areas",
                    ],
                    "outcome": "REJECTED - Certificate invalidated",
                }
            ],
            "legal_analysis": {
                "current_applicant_strengths": [
                    "Consistent documentation across records",
                ],
                "current_applicant_weaknesses": [
                    "Missing parental certificate (common rejection reason)",
                    "School records not verified (critical requirement)",
                    "Birth location outside designated areas",
                ],
                "probability_assessment": "Low - contradictory precedent evidence",
            },
            "draft_suggestions": [
                "Obtain parental tribal certificate documentation",
                "Verify school records show consistent caste entry",
                "Provide birth certificate from designated tribal area",
                "Document traditional occupation evidence (fishing/agriculture)",
                "Provide evidence of traditional Koli occupations in family",
            ],
        },
        "processed_at": "2025-09-25T13:34:11.200541",
    }

    def __init__(self) -> None:
        self.submissions: list[AnalysisInput] = []

    async def submit(self, payload: AnalysisInput) -> AnalysisResult:
        self.submissions.append(payload)
        return validate_and_build(self.DEFAULT_RESPONSE)
