import pytest

from certcheck.progress.phases import PHASES, phase_index_for, phase_statuses


class TestPhases:
    def test_four_fixed_phases(self) -> None:
        assert [p.title for p in PHASES] == [
            "Document Upload",
            "Document Analysis",
            "Legal Precedent Check",
            "Final Verification",
        ]


class TestPhaseIndex:
    @pytest.mark.parametrize(
        ("percent", "expected"),
        [(0, 0), (24, 0), (25, 1), (49.9, 1), (50, 2), (74, 2), (75, 3), (100, 3)],
    )
    def test_thresholds(self, percent: float, expected: int) -> None:
        assert phase_index_for(percent) == expected


class TestPhaseStatuses:
    def test_start(self) -> None:
        assert phase_statuses(0, 0) == ("processing", "pending", "pending", "pending")

    def test_middle(self) -> None:
        assert phase_statuses(2, 60) == ("completed", "completed", "processing", "pending")

    def test_last_phase_before_completion(self) -> None:
        assert phase_statuses(3, 98) == ("completed", "completed", "completed", "processing")

    def test_all_completed_at_100(self) -> None:
        assert phase_statuses(3, 100) == ("completed",) * 4
