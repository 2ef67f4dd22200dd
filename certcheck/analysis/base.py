from abc import ABC, abstractmethod

from certcheck.analysis.models import AnalysisInput
from certcheck.results.models import AnalysisResult


class BaseAnalysisClient(ABC):
    """Contract for all analysis service adapters."""

    @abstractmethod
    async def submit(self, payload: AnalysisInput) -> AnalysisResult:
        """Send one document or applicant profile for legal-precedent analysis.

        Args:
            payload: An UploadedDocument (multipart upload) or an
                     ApplicantProfile (JSON evaluation request).

        Returns:
            The fully parsed AnalysisResult.

        Raises:
            AnalysisError: on any failure. No retries are attempted.
        """

    async def aclose(self) -> None:
        """Release transport resources. Adapters without any keep the default."""
