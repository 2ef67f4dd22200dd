import json
import logging
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from certcheck.analysis.exceptions import (
    AnalysisNetworkError,
    AnalysisRequestError,
    MalformedResponseError,
)
from certcheck.analysis.http_client_adapter import HttpAnalysisClient
from certcheck.analysis.models import ApplicantProfile, ApplicationIdGenerator, UploadedDocument
from certcheck.results.models import AnalysisResult

Handler = Callable[[httpx.Request], httpx.Response]


def _make_client(handler: Handler) -> HttpAnalysisClient:
    return HttpAnalysisClient(
        base_url="http://analysis.test",
        transport=httpx.MockTransport(handler),
    )


class TestDocumentUpload:
    @pytest.mark.asyncio
    async def test_posts_multipart_file(
        self, analysis_payload: dict[str, Any], draft_document: UploadedDocument
    ) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=analysis_payload)

        client = _make_client(handler)
        result = await client.submit(draft_document)
        await client.aclose()

        assert isinstance(result, AnalysisResult)
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/draft/upload"
        assert request.headers["content-type"].startswith("multipart/form-data")
        body = request.content
        assert b'name="file"' in body
        assert b'filename="caste_certificate_draft.docx"' in body
        assert b"PK\x03\x04draft" in body

    @pytest.mark.asyncio
    async def test_returns_parsed_result(
        self, analysis_payload: dict[str, Any], draft_document: UploadedDocument
    ) -> None:
        client = _make_client(lambda _: httpx.Response(200, json=analysis_payload))
        result = await client.submit(draft_document)
        assert result.applicant_id == "APP-2025-001"
        assert len(result.supporting_precedents) == 1
        assert len(result.draft_suggestions) == 5


class TestProfileEvaluation:
    @pytest.mark.asyncio
    async def test_posts_json_profile(self, analysis_payload: dict[str, Any]) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=analysis_payload)

        generator = ApplicationIdGenerator()
        client = HttpAnalysisClient(
            base_url="http://analysis.test",
            id_generator=generator,
            transport=httpx.MockTransport(handler),
        )
        await client.submit(ApplicantProfile(claimed_subcast="ST_KOLI_MAHADEV", first_name="Asha"))

        request = seen[0]
        assert request.url.path == "/subcast/evaluate"
        body = json.loads(request.content)
        assert body["claimed_subcast"] == "ST_KOLI_MAHADEV"
        assert body["applicant_profile"]["applicant"]["first_name"] == "Asha"
        app_id = body["applicant_profile"]["application_id"]
        assert app_id.startswith("APP-")
        assert body["validation_report"]["application_id"] == app_id

    @pytest.mark.asyncio
    async def test_each_request_gets_a_new_application_id(
        self, analysis_payload: dict[str, Any]
    ) -> None:
        ids: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            ids.append(json.loads(request.content)["applicant_profile"]["application_id"])
            return httpx.Response(200, json=analysis_payload)

        client = _make_client(handler)
        profile = ApplicantProfile(claimed_subcast="ST_KOLI_MAHADEV")
        await client.submit(profile)
        await client.submit(profile)
        assert len(set(ids)) == 2

    @pytest.mark.asyncio
    async def test_rejects_unknown_payload(self) -> None:
        client = _make_client(lambda _: httpx.Response(200))
        with pytest.raises(TypeError):
            await client.submit("draft.docx")  # type: ignore[arg-type]


class TestErrorResponses:
    @pytest.mark.asyncio
    async def test_uses_detail_message(self, draft_document: UploadedDocument) -> None:
        client = _make_client(lambda _: httpx.Response(400, json={"detail": "bad file"}))
        with pytest.raises(AnalysisRequestError) as exc_info:
            await client.submit(draft_document)
        assert str(exc_info.value) == "bad file"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_logs_status_code(
        self, draft_document: UploadedDocument, caplog: pytest.LogCaptureFixture
    ) -> None:
        client = _make_client(lambda _: httpx.Response(503, text="down"))
        with caplog.at_level(logging.WARNING, logger="certcheck"):
            with pytest.raises(AnalysisRequestError):
                await client.submit(draft_document)
        assert caplog.records[-1].status_code == 503  # type: ignore[attr-defined]

    @pytest.mark.asyncio
    async def test_generic_message_without_detail(
        self, draft_document: UploadedDocument
    ) -> None:
        client = _make_client(lambda _: httpx.Response(502, text="<html>Bad Gateway</html>"))
        with pytest.raises(AnalysisRequestError, match="Request failed with status 502") as exc_info:
            await client.submit(draft_document)
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_generic_message_for_non_string_detail(
        self, draft_document: UploadedDocument
    ) -> None:
        body = {"detail": [{"loc": ["body", "file"], "msg": "field required"}]}
        client = _make_client(lambda _: httpx.Response(422, json=body))
        with pytest.raises(AnalysisRequestError, match="status 422"):
            await client.submit(draft_document)

    @pytest.mark.asyncio
    async def test_connection_failure(self, draft_document: UploadedDocument) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _make_client(handler)
        with pytest.raises(AnalysisNetworkError, match="unreachable"):
            await client.submit(draft_document)

    @pytest.mark.asyncio
    async def test_invalid_json_on_success(self, draft_document: UploadedDocument) -> None:
        client = _make_client(lambda _: httpx.Response(200, text="not json"))
        with pytest.raises(MalformedResponseError, match="Invalid JSON"):
            await client.submit(draft_document)

    @pytest.mark.asyncio
    async def test_incompatible_body_on_success(
        self, draft_document: UploadedDocument
    ) -> None:
        client = _make_client(lambda _: httpx.Response(200, json={"status": "ok"}))
        with pytest.raises(MalformedResponseError, match="Missing required field"):
            await client.submit(draft_document)

    @pytest.mark.asyncio
    async def test_does_not_retry(self, draft_document: UploadedDocument) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500, json={"detail": "boom"})

        client = _make_client(handler)
        with pytest.raises(AnalysisRequestError):
            await client.submit(draft_document)
        assert len(calls) == 1
