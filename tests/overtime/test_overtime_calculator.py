from __future__ import annotations

from datetime import datetime, time

import pytest

from activity_tracker.core.exceptions import ValidationError
from activity_tracker.overtime.calculator import OvertimeCalculator
from activity_tracker.overtime.factory import OvertimeStrategyFactory
from activity_tracker.overtime.strategies.scheduled_strategy import ScheduledStrategy
from activity_tracker.overtime.strategies.unscheduled_strategy import UnscheduledStrategy
from activity_tracker.shifts.model import ShiftWindow

DAY_SHIFT = ShiftWindow(employee_id=1, check_in_time=time(9, 0), check_out_time=time(18, 0))
NIGHT_SHIFT = ShiftWindow(employee_id=1, check_in_time=time(22, 0), check_out_time=time(6, 0))


def test_early_and_late_overtime_without_breaks():
    calc = OvertimeCalculator()
    result = calc.calculate(
        start=datetime(2026, 3, 2, 8, 50),
        end=datetime(2026, 3, 2, 18, 20),
        break_seconds=0,
        shift=DAY_SHIFT,
    )

    assert result.overtime_early == 600
    assert result.overtime_late == 1200
    assert result.total_overtime == 1800
    assert result.undertime == 0
    assert result.shift_hours == 9 * 3600


def test_short_day_with_break_is_undertime():
    calc = OvertimeCalculator()
    result = calc.calculate(
        start=datetime(2026, 3, 2, 9, 10),
        end=datetime(2026, 3, 2, 17, 0),
        break_seconds=30 * 60,
        shift=DAY_SHIFT,
    )

    assert result.undertime == 6000
    assert result.total_overtime == 0


def test_session_inside_window_has_no_overtime():
    result = OvertimeCalculator().calculate(
        start=datetime(2026, 3, 2, 9, 0),
        end=datetime(2026, 3, 2, 18, 0),
        break_seconds=0,
        shift=DAY_SHIFT,
    )

    assert (result.overtime_early, result.overtime_late, result.undertime) == (0, 0, 0)


def test_no_schedule_yields_zeros():
    result = OvertimeCalculator().calculate(
        start=datetime(2026, 3, 2, 6, 0),
        end=datetime(2026, 3, 2, 23, 0),
        break_seconds=0,
        shift=None,
    )

    assert result.shift_hours == 0
    assert result.undertime == 0
    assert result.total_overtime == 0


def test_session_entirely_before_shift_counts_only_its_own_length():
    result = OvertimeCalculator().calculate(
        start=datetime(2026, 3, 2, 6, 0),
        end=datetime(2026, 3, 2, 7, 0),
        break_seconds=0,
        shift=DAY_SHIFT,
    )

    assert result.overtime_early == 3600
    assert result.overtime_late == 0
    assert result.undertime == 8 * 3600


def test_overnight_shift_wraps_to_next_day():
    assert NIGHT_SHIFT.length_seconds == 8 * 3600

    result = OvertimeCalculator().calculate(
        start=datetime(2026, 3, 2, 21, 30),
        end=datetime(2026, 3, 3, 6, 15),
        break_seconds=0,
        shift=NIGHT_SHIFT,
    )

    assert result.overtime_early == 1800
    assert result.overtime_late == 900
    assert result.undertime == 0


def test_fractional_seconds_are_truncated():
    result = OvertimeCalculator().calculate(
        start=datetime(2026, 3, 2, 8, 59, 59, 900000),
        end=datetime(2026, 3, 2, 18, 0, 0, 999999),
        break_seconds=0,
        shift=DAY_SHIFT,
    )

    assert result.overtime_early == 0
    assert result.overtime_late == 0


def test_end_before_start_is_rejected():
    with pytest.raises(ValidationError):
        OvertimeCalculator().calculate(
            start=datetime(2026, 3, 2, 10, 0),
            end=datetime(2026, 3, 2, 9, 0),
            break_seconds=0,
            shift=DAY_SHIFT,
        )


def test_factory_picks_strategy_from_schedule():
    factory = OvertimeStrategyFactory()

    assert isinstance(factory.for_shift(DAY_SHIFT), ScheduledStrategy)
    assert isinstance(factory.for_shift(None), UnscheduledStrategy)
