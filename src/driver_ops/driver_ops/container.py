from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import StatusPolicyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository, MySQLRouteCompletionRepository
from .attendance.service import AttendanceTracker, RouteCompletionService
from .clock.mysql_time_interval_repository import MySQLTimeIntervalRepository
from .clock.service import ClockSessionController
from .common.locks import KeyedLock
from .core.constants import (
    DEFAULT_GEOLOCATION_TIMEOUT_SECONDS,
    DEFAULT_INSPECTION_HISTORY_DAYS,
    DEFAULT_WEEK_DISPLAY_DAYS,
    DEFAULT_WEEK_STARTS_ON,
)
from .core.enums import Weekday
from .database.connection import DBConfig, DatabaseConnection
from .directory.mysql_directory_repository import MySQLDirectoryRepository
from .drivers.mysql_driver_repository import MySQLDriverRepository
from .inspections.mysql_inspection_repository import MySQLInspectionRepository
from .inspections.service import InspectionService
from .routes.itinerary import ItineraryBuilder
from .routes.mysql_route_repository import MySQLRouteRepository, MySQLRouteStopRepository
from .routes.service import DriverDayService, RouteStopService
from .timecards.aggregator import TimecardAggregator


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    drivers_repo: MySQLDriverRepository
    directory_repo: MySQLDirectoryRepository
    intervals_repo: MySQLTimeIntervalRepository
    inspections_repo: MySQLInspectionRepository
    routes_repo: MySQLRouteRepository
    stops_repo: MySQLRouteStopRepository
    attendance_repo: MySQLAttendanceRepository
    completions_repo: MySQLRouteCompletionRepository

    clock_controller: ClockSessionController
    timecard_aggregator: TimecardAggregator
    inspection_service: InspectionService
    route_stop_service: RouteStopService
    driver_day_service: DriverDayService
    attendance_tracker: AttendanceTracker
    route_completion_service: RouteCompletionService

    week_starts_on: Weekday = Weekday.SUNDAY
    week_display_days: int = DEFAULT_WEEK_DISPLAY_DAYS


def build_container(
    *,
    db_config: dict,
    strict_status_validation: bool = False,
    geolocation_timeout_seconds: float = DEFAULT_GEOLOCATION_TIMEOUT_SECONDS,
    inspection_history_days: int = DEFAULT_INSPECTION_HISTORY_DAYS,
    week_starts_on: str = DEFAULT_WEEK_STARTS_ON,
    week_display_days: int = DEFAULT_WEEK_DISPLAY_DAYS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    if not 1 <= int(week_display_days) <= 7:
        raise ValueError(f"WEEK_DISPLAY_DAYS must be between 1 and 7, got {week_display_days}")

    drivers_repo = MySQLDriverRepository(conn)
    directory_repo = MySQLDirectoryRepository(conn)
    intervals_repo = MySQLTimeIntervalRepository(conn)
    inspections_repo = MySQLInspectionRepository(conn)
    routes_repo = MySQLRouteRepository(conn)
    stops_repo = MySQLRouteStopRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    completions_repo = MySQLRouteCompletionRepository(conn)

    itinerary = ItineraryBuilder(stops_repo, directory_repo)

    clock_controller = ClockSessionController(intervals_repo, locks=KeyedLock())
    timecard_aggregator = TimecardAggregator(intervals_repo, drivers_repo)
    inspection_service = InspectionService(inspections_repo, clock_controller, history_days=inspection_history_days)
    route_stop_service = RouteStopService(routes_repo, stops_repo, directory_repo)
    driver_day_service = DriverDayService(routes_repo, itinerary, attendance_repo, completions_repo)
    attendance_tracker = AttendanceTracker(
        attendance_repo,
        stops_repo,
        policy=StatusPolicyFactory().for_settings(strict_status_validation=strict_status_validation),
        geolocation_timeout=geolocation_timeout_seconds,
    )
    route_completion_service = RouteCompletionService(
        routes_repo,
        itinerary,
        attendance_repo,
        completions_repo,
        locks=KeyedLock(),
    )

    return Container(
        conn=conn,
        drivers_repo=drivers_repo,
        directory_repo=directory_repo,
        intervals_repo=intervals_repo,
        inspections_repo=inspections_repo,
        routes_repo=routes_repo,
        stops_repo=stops_repo,
        attendance_repo=attendance_repo,
        completions_repo=completions_repo,
        clock_controller=clock_controller,
        timecard_aggregator=timecard_aggregator,
        inspection_service=inspection_service,
        route_stop_service=route_stop_service,
        driver_day_service=driver_day_service,
        attendance_tracker=attendance_tracker,
        route_completion_service=route_completion_service,
        week_starts_on=Weekday(str(week_starts_on).strip().lower()),
        week_display_days=int(week_display_days),
    )
