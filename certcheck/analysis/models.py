import time
from dataclasses import dataclass, field

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@dataclass(frozen=True)
class UploadedDocument:
    """A single draft document selected for analysis."""

    name: str
    content: bytes = field(repr=False)
    mime_hint: str = DOCX_MIME_TYPE

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @property
    def size_megabytes(self) -> str:
        """Size formatted the way the upload view shows it, e.g. ``"1.2 MB"``."""
        return f"{self.size_bytes / 1024 / 1024:.1f} MB"


@dataclass(frozen=True)
class DocumentSummary:
    doc_id: str
    summary: str


DEFAULT_DOCUMENTS = (
    DocumentSummary(doc_id="1", summary="Birth certificate from Thane showing Koli caste"),
    DocumentSummary(doc_id="2", summary="School records"),
)


@dataclass(frozen=True)
class ApplicantProfile:
    """Structured applicant data for the profile evaluation endpoint.

    Missing identity fields fall back to placeholders when the request
    payload is built.
    """

    claimed_subcast: str
    first_name: str | None = None
    last_name: str | None = None
    birth_place: str | None = None
    family_occupation: str | None = None
    father_name: str | None = None
    documents: tuple[DocumentSummary, ...] | None = None

    def to_payload(self, application_id: str) -> dict[str, object]:
        """Build the JSON body for ``POST /subcast/evaluate``."""
        documents = self.documents if self.documents else DEFAULT_DOCUMENTS
        return {
            "applicant_profile": {
                "application_id": application_id,
                "applicant": {
                    "first_name": self.first_name or "Test",
                    "last_name": self.last_name or "User",
                    "birth_place": self.birth_place or "Thane district",
                    "family_occupation": self.family_occupation or "Traditional fishing",
                    "father_name": self.father_name or "Test Father",
                },
                "documents": [
                    {"doc_id": doc.doc_id, "summary": doc.summary} for doc in documents
                ],
            },
            "validation_report": {
                "application_id": application_id,
                "checks": [],
                "overall_status": "passed",
            },
            "claimed_subcast": self.claimed_subcast,
        }


AnalysisInput = UploadedDocument | ApplicantProfile


class ApplicationIdGenerator:
    """Issues ``APP-<millis>`` tokens that strictly increase within a process."""

    def __init__(self, prefix: str = "APP") -> None:
        self._prefix = prefix
        self._last = 0

    def next_id(self) -> str:
        value = max(time.time_ns() // 1_000_000, self._last + 1)
        self._last = value
        return f"{self._prefix}-{value}"
