from collections.abc import Sequence

from certcheck.analysis.models import UploadedDocument
from certcheck.logging.logger import Log
from certcheck.workflow.exceptions import UploadRejectedError


class UploadGate:
    """Holds at most one accepted .docx draft and the drag-hover state.

    Only the file extension is checked; document contents are left to the
    analysis service.
    """

    ALLOWED_SUFFIX = ".docx"
    REJECTION_MESSAGE = "Only Word documents (.docx) are allowed."

    def __init__(self) -> None:
        self._selection: UploadedDocument | None = None
        self._active = False

    @property
    def selection(self) -> UploadedDocument | None:
        return self._selection

    @property
    def active(self) -> bool:
        return self._active

    def offer(self, files: Sequence[UploadedDocument]) -> UploadedDocument:
        """Accept the first .docx file from ``files``; the rest are dropped.

        Raises:
            UploadRejectedError: if no file matches. The previous selection
                                 is kept.
        """
        accepted = [f for f in files if self.is_allowed(f.name)]
        if not accepted:
            Log.warning(f"Rejected {len(files)} file(s): no .docx document")
            raise UploadRejectedError(self.REJECTION_MESSAGE)
        self._selection = accepted[0]
        if len(files) > 1:
            Log.debug(f"Kept '{self._selection.name}', ignored {len(files) - 1} other file(s)")
        return self._selection

    def remove(self) -> None:
        self._selection = None

    def drag_enter(self) -> None:
        self._active = True

    def drag_over(self) -> None:
        self._active = True

    def drag_leave(self) -> None:
        self._active = False

    def drop(self, files: Sequence[UploadedDocument]) -> UploadedDocument:
        self._active = False
        return self.offer(files)

    @classmethod
    def is_allowed(cls, filename: str) -> bool:
        return filename.lower().endswith(cls.ALLOWED_SUFFIX)
