from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..common.datetime_utils import time_to_seconds
from ..core.constants import SECONDS_PER_DAY


@dataclass(frozen=True)
class ShiftWindow:
    """Configured check-in/check-out times of one employee."""

    employee_id: int
    check_in_time: time
    check_out_time: time

    @property
    def is_overnight(self) -> bool:
        return self.check_out_time <= self.check_in_time

    @property
    def length_seconds(self) -> int:
        """Shift length, wrapped to the next day when check-out is not after check-in."""
        seconds = time_to_seconds(self.check_out_time) - time_to_seconds(self.check_in_time)
        if seconds <= 0:
            seconds += SECONDS_PER_DAY
        return seconds
