import json

import httpx

from certcheck.analysis.base import BaseAnalysisClient
from certcheck.analysis.exceptions import (
    AnalysisNetworkError,
    AnalysisRequestError,
    MalformedResponseError,
)
from certcheck.analysis.models import (
    AnalysisInput,
    ApplicantProfile,
    ApplicationIdGenerator,
    UploadedDocument,
)
from certcheck.logging.logger import Log
from certcheck.results.models import AnalysisResult
from certcheck.results.validator import validate_and_build


class HttpAnalysisClient(BaseAnalysisClient):
    """Analysis client that talks to the draft review service over HTTP."""

    UPLOAD_PATH = "/draft/upload"
    EVALUATE_PATH = "/subcast/evaluate"

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float | None = None,
        id_generator: ApplicationIdGenerator | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
        )
        self._ids = id_generator or ApplicationIdGenerator()

    async def submit(self, payload: AnalysisInput) -> AnalysisResult:
        if isinstance(payload, UploadedDocument):
            Log.info(f"Uploading draft '{payload.name}' ({payload.size_bytes} bytes)")
            request = self._client.build_request(
                "POST",
                self.UPLOAD_PATH,
                files={"file": (payload.name, payload.content, payload.mime_hint)},
            )
        elif isinstance(payload, ApplicantProfile):
            application_id = self._ids.next_id()
            Log.info(f"Submitting applicant profile {application_id}")
            request = self._client.build_request(
                "POST",
                self.EVALUATE_PATH,
                json=payload.to_payload(application_id),
            )
        else:
            raise TypeError(f"Unsupported analysis payload: {type(payload).__name__}")

        response = await self._send(request)
        if not response.is_success:
            raise self._request_error(response)
        return self._parse_result(response)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, request: httpx.Request) -> httpx.Response:
        try:
            return await self._client.send(request)
        except httpx.HTTPError as exc:
            raise AnalysisNetworkError(f"Analysis service unreachable: {exc}") from exc

    @staticmethod
    def _request_error(response: httpx.Response) -> AnalysisRequestError:
        status = response.status_code
        try:
            detail = response.json().get("detail")
        except (json.JSONDecodeError, UnicodeDecodeError, AttributeError):
            detail = None
        if not isinstance(detail, str) or not detail:
            Log.warning(
                f"Analysis service returned {status} without a readable detail",
                status_code=status,
            )
            return AnalysisRequestError(f"Request failed with status {status}", status)
        Log.warning(f"Analysis service returned {status}: {detail}", status_code=status)
        return AnalysisRequestError(detail, status)

    @staticmethod
    def _parse_result(response: httpx.Response) -> AnalysisResult:
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise MalformedResponseError(f"Invalid JSON response: {exc}") from exc
        result = validate_and_build(data)
        Log.info(
            f"Analysis received for {result.applicant_id}: "
            f"{len(result.supporting_precedents)} supporting, "
            f"{len(result.contradicting_precedents)} contradicting precedents"
        )
        return result
