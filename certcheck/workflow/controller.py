"""Workflow state machine: login -> upload -> processing -> results.

Every public transition is synchronous and never raises. A call made from
the wrong stage is logged and ignored; user-facing problems are stored in
``error`` for the current view to show.
"""

import asyncio
from collections.abc import Callable
from functools import partial

from certcheck.analysis.base import BaseAnalysisClient
from certcheck.analysis.exceptions import AnalysisError
from certcheck.analysis.factory import AnalysisClientFactory
from certcheck.analysis.models import AnalysisInput, ApplicantProfile, UploadedDocument
from certcheck.config.settings import Settings
from certcheck.logging.logger import Log
from certcheck.progress.base import ProgressSource, Sleep
from certcheck.progress.factory import ProgressSourceFactory
from certcheck.progress.monitor import ProcessingMonitor, ProgressSnapshot
from certcheck.results.models import AnalysisResult
from certcheck.workflow.exceptions import InputValidationError, WorkflowError
from certcheck.workflow.models import Session, Stage
from certcheck.workflow.upload_gate import UploadGate

ProgressFactory = Callable[["asyncio.Future[object]"], ProgressSource]
Listener = Callable[["WorkflowController"], None]


class WorkflowController:
    """Owns the session, the uploaded draft and the analysis result."""

    def __init__(
        self,
        client: BaseAnalysisClient,
        progress_factory: ProgressFactory,
        *,
        settle_seconds: float = 1.0,
        sleep: Sleep = asyncio.sleep,
        upload_gate: UploadGate | None = None,
    ) -> None:
        self._client = client
        self._progress_factory = progress_factory
        self._settle_seconds = settle_seconds
        self._sleep = sleep
        self._gate = upload_gate or UploadGate()
        self._stage = Stage.LOGIN
        self._session: Session | None = None
        self._document: UploadedDocument | None = None
        self._result: AnalysisResult | None = None
        self._error: str | None = None
        self._monitor: ProcessingMonitor[AnalysisResult] | None = None
        self._request: asyncio.Task[None] | None = None
        self._submission = 0
        self._listeners: list[Listener] = []
        self._settled = asyncio.Event()

    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def document(self) -> UploadedDocument | None:
        return self._document

    @property
    def result(self) -> AnalysisResult | None:
        return self._result

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def upload_gate(self) -> UploadGate:
        return self._gate

    @property
    def progress(self) -> ProgressSnapshot | None:
        return self._monitor.snapshot() if self._monitor is not None else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)
        return partial(self._listeners.remove, listener)

    # Login

    def submit_credentials(
        self,
        email: str,
        password: str,
        name: str | None = None,
        is_signup: bool = False,
    ) -> bool:
        if not self._expect(Stage.LOGIN, "submit_credentials"):
            return False
        if not email or not email.strip() or not password or not password.strip():
            self._report(InputValidationError("Email and password are required."))
            return False
        self._session = Session(
            email=email.strip(),
            password=password,
            display_name=name.strip() if name and name.strip() else None,
            is_signup=is_signup,
        )
        self._error = None
        Log.info(f"Session started for {self._session.email}")
        self._set_stage(Stage.UPLOAD)
        return True

    # Upload

    def select_files(self, files: list[UploadedDocument]) -> bool:
        if not self._expect(Stage.UPLOAD, "select_files"):
            return False
        try:
            self._gate.offer(files)
        except WorkflowError as exc:
            self._report(exc)
            return False
        self._error = None
        self._notify()
        return True

    def submit_document(self, document: UploadedDocument | None = None) -> bool:
        """Send the selected draft for analysis and move to Processing.

        Must be called from a running event loop; the request and the
        progress timer run as background tasks.
        """
        if not self._expect(Stage.UPLOAD, "submit_document"):
            return False
        if document is not None and not self.select_files([document]):
            return False
        selected = self._gate.selection
        if selected is None:
            self._report(InputValidationError("Select a .docx draft before submitting."))
            return False
        self._document = selected
        return self._begin_processing(selected)

    def submit_profile(self, profile: ApplicantProfile) -> bool:
        """Send a structured applicant profile instead of a draft document."""
        if not self._expect(Stage.UPLOAD, "submit_profile"):
            return False
        if not profile.claimed_subcast.strip():
            self._report(InputValidationError("A claimed subcast is required."))
            return False
        return self._begin_processing(profile)

    # Processing

    def analysis_succeeded(self, result: AnalysisResult) -> None:
        if not self._expect(Stage.PROCESSING, "analysis_succeeded"):
            return
        Log.info(f"Analysis ready for {result.applicant_id}, waiting for progress to finish")
        self._result = result
        if self._monitor is not None:
            self._monitor.arm(result)

    def analysis_failed(self, error: Exception) -> None:
        if not self._expect(Stage.PROCESSING, "analysis_failed"):
            return
        Log.error(f"Analysis failed: {error}", error_type=type(error).__name__)
        if self._monitor is not None:
            self._monitor.cancel()
        self._monitor = None
        self._request = None
        self._document = None
        self._gate.remove()
        self._error = str(error) or "Analysis failed."
        self._set_stage(Stage.UPLOAD)

    def back_to_upload(self) -> None:
        """Leave Processing without a result; the gate keeps the selection."""
        if not self._expect(Stage.PROCESSING, "back_to_upload"):
            return
        self._discard_processing()
        self._document = None
        self._set_stage(Stage.UPLOAD)

    # Results

    def start_new(self) -> None:
        if not self._expect(Stage.RESULTS, "start_new"):
            return
        self._discard_processing()
        self._document = None
        self._result = None
        self._error = None
        self._gate.remove()
        self._set_stage(Stage.UPLOAD)

    # Any stage

    def back_to_login(self) -> None:
        self._discard_processing()
        if self._session is not None:
            Log.info(f"Session ended for {self._session.email}")
        self._session = None
        self._document = None
        self._result = None
        self._error = None
        self._gate.remove()
        self._set_stage(Stage.LOGIN)

    logout = back_to_login

    async def wait_until_settled(self) -> Stage:
        """Wait until the workflow leaves Processing and return the new stage."""
        while self._stage is Stage.PROCESSING:
            self._settled.clear()
            await self._settled.wait()
        return self._stage

    async def aclose(self) -> None:
        self._discard_processing()
        await self._client.aclose()

    def _begin_processing(self, payload: AnalysisInput) -> bool:
        self._submission += 1
        token = self._submission
        self._error = None
        self._result = None
        request = asyncio.create_task(self._run_analysis(payload, token))
        try:
            source = self._progress_factory(request)
        except Exception as exc:
            self._submission += 1
            request.cancel()
            self._document = None
            self._report(WorkflowError(f"Cannot track analysis progress: {exc}"))
            return False
        self._request = request
        self._monitor = ProcessingMonitor(
            settle_seconds=self._settle_seconds,
            sleep=self._sleep,
            on_update=self._on_progress,
            on_complete=partial(self._on_processing_complete, token),
        )
        self._set_stage(Stage.PROCESSING)
        self._monitor.start(source)
        return True

    async def _run_analysis(self, payload: AnalysisInput, token: int) -> None:
        try:
            result = await self._client.submit(payload)
        except AnalysisError as exc:
            if token == self._submission:
                self.analysis_failed(exc)
            return
        except Exception as exc:
            Log.error(f"Unexpected error during analysis: {exc!r}")
            if token == self._submission:
                self.analysis_failed(AnalysisError(f"Unexpected error: {exc}"))
            return
        if token == self._submission:
            self.analysis_succeeded(result)
        else:
            Log.debug(f"Discarded late analysis result for {result.applicant_id}")

    def _on_progress(self, snapshot: ProgressSnapshot) -> None:
        _ = snapshot
        self._notify()

    def _on_processing_complete(self, token: int, result: AnalysisResult) -> None:
        if token != self._submission or self._stage is not Stage.PROCESSING:
            return
        self._result = result
        self._request = None
        Log.info(f"Results ready for {result.applicant_id}", applicant_id=result.applicant_id)
        self._set_stage(Stage.RESULTS)

    def _discard_processing(self) -> None:
        self._submission += 1
        if self._monitor is not None:
            self._monitor.cancel()
            self._monitor = None
        if self._request is not None and not self._request.done():
            self._request.cancel()
            Log.info("Cancelled in-flight analysis request")
        self._request = None

    def _expect(self, stage: Stage, action: str) -> bool:
        if self._stage is stage:
            return True
        Log.debug(f"Ignored {action} in stage {self._stage.value}")
        return False

    def _report(self, exc: WorkflowError) -> None:
        self._error = str(exc)
        Log.warning(f"{type(exc).__name__}: {exc}", stage=self._stage.value)
        self._notify()

    def _set_stage(self, stage: Stage) -> None:
        if stage is not self._stage:
            Log.info(
                f"Stage {self._stage.value} -> {stage.value}",
                previous_stage=self._stage.value,
                stage=stage.value,
            )
        self._stage = stage
        if stage is not Stage.PROCESSING:
            self._settled.set()
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as exc:
                Log.error(f"Listener {listener!r} failed: {exc!r}", stage=self._stage.value)


def build_controller(settings: Settings, sleep: Sleep = asyncio.sleep) -> WorkflowController:
    """Build a WorkflowController with the adapters named in settings."""
    client = AnalysisClientFactory.create(settings)
    return WorkflowController(
        client,
        partial(ProgressSourceFactory.create, settings, sleep=sleep),
        settle_seconds=settings.progress_settle_ms / 1000,
        sleep=sleep,
    )
