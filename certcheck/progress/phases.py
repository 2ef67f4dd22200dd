from dataclasses import dataclass
from typing import Literal

PhaseStatus = Literal["completed", "processing", "pending"]


@dataclass(frozen=True)
class Phase:
    """One named step shown while a draft is being analysed."""

    title: str
    description: str


PHASES: tuple[Phase, ...] = (
    Phase("Document Upload", "Files received and validated"),
    Phase("Document Analysis", "Extracting and verifying document content"),
    Phase("Legal Precedent Check", "Searching relevant legal cases and precedents"),
    Phase("Final Verification", "Generating analysis report and recommendations"),
)

# Percentage at which each phase after the first begins.
PHASE_THRESHOLDS: tuple[int, ...] = (25, 50, 75)


def phase_index_for(percent: float) -> int:
    """Return the 0-based phase index a percentage falls into."""
    return sum(1 for threshold in PHASE_THRESHOLDS if percent >= threshold)


def phase_statuses(phase_index: int, percent: float) -> tuple[PhaseStatus, ...]:
    """Derive the display status of every phase from the current position."""
    if percent >= 100:
        return tuple("completed" for _ in PHASES)
    statuses: list[PhaseStatus] = []
    for i in range(len(PHASES)):
        if i < phase_index:
            statuses.append("completed")
        elif i == phase_index:
            statuses.append("processing")
        else:
            statuses.append("pending")
    return tuple(statuses)
