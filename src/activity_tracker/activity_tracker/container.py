from __future__ import annotations

from dataclasses import dataclass

from .activity.aggregator import DailyActivityAggregator
from .attendance.mysql_unit_of_work import MySQLUnitOfWorkFactory
from .attendance.service import AttendanceService
from .attendance.unit_of_work import UnitOfWorkFactory
from .common.locks import KeyedLock
from .core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .overtime.calculator import OvertimeCalculator
from .overtime.factory import OvertimeStrategyFactory
from .shifts.mysql_shift_repository import MySQLShiftScheduleProvider
from .shifts.repository import ShiftScheduleProvider


@dataclass(frozen=True)
class Container:
    uow_factory: UnitOfWorkFactory
    shifts: ShiftScheduleProvider
    attendance_service: AttendanceService


def build_attendance_service(
    uow_factory: UnitOfWorkFactory,
    shifts: ShiftScheduleProvider,
    *,
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
) -> AttendanceService:
    return AttendanceService(
        uow_factory,
        shifts,
        calculator=OvertimeCalculator(OvertimeStrategyFactory()),
        aggregator=DailyActivityAggregator(),
        locks=KeyedLock(timeout=lock_timeout),
    )


def build_container(*, db_config: dict, lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    uow_factory = MySQLUnitOfWorkFactory(conn, lock_timeout=lock_timeout)
    shifts = MySQLShiftScheduleProvider(conn)

    return Container(
        uow_factory=uow_factory,
        shifts=shifts,
        attendance_service=build_attendance_service(uow_factory, shifts, lock_timeout=lock_timeout),
    )
