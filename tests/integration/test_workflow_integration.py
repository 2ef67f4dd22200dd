"""End-to-end workflow runs against the HTTP client over a mock transport."""

from functools import partial
from typing import Any

import httpx
import pytest

from certcheck.analysis.http_client_adapter import HttpAnalysisClient
from certcheck.analysis.models import UploadedDocument
from certcheck.config.settings import Settings
from certcheck.presentation.formatting import display_name, initials, render_draft_document
from certcheck.progress.factory import ProgressSourceFactory
from certcheck.results.validator import validate_and_build
from certcheck.workflow.controller import WorkflowController
from certcheck.workflow.models import Stage


def _build(clock: Any, settings: Settings, response: httpx.Response) -> WorkflowController:
    client = HttpAnalysisClient(
        base_url="http://analysis.test",
        transport=httpx.MockTransport(lambda _: response),
    )
    return WorkflowController(
        client,
        partial(ProgressSourceFactory.create, settings, sleep=clock.sleep),
        settle_seconds=settings.progress_settle_ms / 1000,
        sleep=clock.sleep,
    )


@pytest.mark.parametrize("progress_source", ["simulated", "server"])
class TestWorkflowOverHttp:
    @pytest.mark.asyncio
    async def test_full_pass_to_results_and_back(
        self,
        clock: Any,
        progress_source: str,
        analysis_payload: dict[str, Any],
        draft_document: UploadedDocument,
    ) -> None:
        settings = Settings(progress_source=progress_source)
        controller = _build(clock, settings, httpx.Response(200, json=analysis_payload))

        assert controller.submit_credentials("john.doe@example.com", "secret")
        session = controller.session
        assert session is not None
        name = display_name(session.email, session.display_name)
        assert (name, initials(name)) == ("John Doe", "JD")

        extra = UploadedDocument(name="second.docx", content=b"PK")
        assert controller.select_files([draft_document, extra])
        assert controller.submit_document()
        assert controller.stage is Stage.PROCESSING

        assert await controller.wait_until_settled() is Stage.RESULTS
        assert controller.result == validate_and_build(analysis_payload)
        assert controller.document == draft_document
        assert controller.progress is not None
        assert controller.progress.statuses == ("completed",) * 4

        text = render_draft_document(controller.result)
        assert "Claimed Subcaste: ST KOLI MAHADEV" in text

        controller.start_new()
        assert controller.stage is Stage.UPLOAD
        assert controller.session == session
        assert controller.result is None
        await controller.aclose()

    @pytest.mark.asyncio
    async def test_error_detail_returns_to_upload(
        self,
        clock: Any,
        progress_source: str,
        draft_document: UploadedDocument,
    ) -> None:
        settings = Settings(progress_source=progress_source)
        controller = _build(clock, settings, httpx.Response(400, json={"detail": "bad file"}))
        controller.submit_credentials("john.doe@example.com", "secret")
        controller.submit_document(draft_document)

        assert await controller.wait_until_settled() is Stage.UPLOAD
        assert controller.error == "bad file"
        assert controller.document is None
        assert controller.upload_gate.selection is None
        await controller.aclose()

    @pytest.mark.asyncio
    async def test_malformed_success_returns_to_upload(
        self,
        clock: Any,
        progress_source: str,
        draft_document: UploadedDocument,
    ) -> None:
        settings = Settings(progress_source=progress_source)
        controller = _build(clock, settings, httpx.Response(200, text="<html></html>"))
        controller.submit_credentials("john.doe@example.com", "secret")
        controller.submit_document(draft_document)

        assert await controller.wait_until_settled() is Stage.UPLOAD
        assert controller.error is not None
        assert controller.error.startswith("Invalid JSON response")
        assert controller.result is None
        await controller.aclose()
