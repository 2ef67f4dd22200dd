import argparse
import asyncio
import mimetypes
import sys
from collections.abc import Sequence
from pathlib import Path

from certcheck.analysis.models import DOCX_MIME_TYPE, ApplicantProfile, UploadedDocument
from certcheck.config.settings import Settings
from certcheck.logging.logger import Log
from certcheck.presentation.formatting import (
    display_name,
    draft_filename,
    format_long_date,
    humanize,
    render_draft_document,
    summary_counts,
)
from certcheck.progress.phases import PHASES
from certcheck.results.models import AnalysisResult
from certcheck.workflow.controller import WorkflowController, build_controller
from certcheck.workflow.models import Stage


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="certcheck",
        description="Submit a draft caste-certificate document for precedent analysis.",
    )
    parser.add_argument(
        "files", nargs="*", type=Path, help="draft documents (.docx); unused in profile mode"
    )
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--name", default=None)
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("."),
        help="directory for the improvement draft (default: current directory)",
    )
    return parser.parse_args(argv)


def load_document(path: Path) -> UploadedDocument:
    mime_hint, _ = mimetypes.guess_type(path.name)
    return UploadedDocument(
        name=path.name,
        content=path.read_bytes(),
        mime_hint=mime_hint or DOCX_MIME_TYPE,
    )


class PhaseLogger:
    """Logs each processing phase once, as the bar enters it."""

    def __init__(self) -> None:
        self._last_phase = -1

    def __call__(self, controller: WorkflowController) -> None:
        snapshot = controller.progress
        if controller.stage is not Stage.PROCESSING or snapshot is None:
            self._last_phase = -1
            return
        if snapshot.phase_index != self._last_phase:
            self._last_phase = snapshot.phase_index
            phase = PHASES[snapshot.phase_index]
            Log.info(f"[{snapshot.percent:.0f}%] {phase.title}: {phase.description}")


def print_verdict(result: AnalysisResult) -> None:
    counts = summary_counts(result)
    print(f"Application {result.applicant_id}: {humanize(result.claimed_subcast)}")
    print(f"Assessment: {result.legal_analysis.probability_assessment}")
    print(
        f"Supporting cases: {counts.supporting}, "
        f"challenging cases: {counts.challenging}, "
        f"recommendations: {counts.recommendations}"
    )
    for label, precedents in (
        ("Supporting", result.supporting_precedents),
        ("Challenging", result.contradicting_precedents),
    ):
        for precedent in precedents:
            print(
                f"  {label}: {precedent.case_title} ({precedent.court}, "
                f"{format_long_date(precedent.date)}) score {precedent.relevance_score} "
                f"- {precedent.outcome}"
            )


def submit(controller: WorkflowController, args: argparse.Namespace, settings: Settings) -> bool:
    if settings.analysis_mode == "profile":
        return controller.submit_profile(ApplicantProfile(claimed_subcast=settings.claimed_subcast))
    if settings.analysis_mode != "document":
        raise ValueError(
            f"Unknown analysis mode '{settings.analysis_mode}'. Choose from: ['document', 'profile']"
        )
    documents = [load_document(path) for path in args.files]
    return controller.select_files(documents) and controller.submit_document()


async def run(args: argparse.Namespace, settings: Settings) -> int:
    controller = build_controller(settings)
    controller.subscribe(PhaseLogger())
    try:
        if not controller.submit_credentials(args.email, args.password, args.name):
            Log.error(controller.error or "Login failed")
            return 1
        session = controller.session
        if session is not None:
            Log.info(f"Signed in as {display_name(session.email, session.display_name)}")

        if not submit(controller, args, settings):
            Log.error(controller.error or "Upload failed")
            return 1

        stage = await controller.wait_until_settled()
        result = controller.result
        if stage is not Stage.RESULTS or result is None:
            Log.error(controller.error or "Analysis did not complete")
            return 1

        print_verdict(result)
        args.output.mkdir(parents=True, exist_ok=True)
        draft_path = args.output / draft_filename(result)
        draft_path.write_text(render_draft_document(result), encoding="utf-8")
        Log.info(f"Improvement draft written to {draft_path}")
        return 0
    finally:
        await controller.aclose()


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: load settings -> configure logging -> run one workflow pass."""
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    try:
        return asyncio.run(run(args, settings))
    except OSError as exc:
        Log.error(f"Cannot read draft: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
