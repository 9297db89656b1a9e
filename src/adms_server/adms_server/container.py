from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.policy import AttendancePolicy
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceAggregator
from .common.background import BackgroundWriter
from .core.constants import BACKGROUND_WRITER_WORKERS, DEFAULT_PRESENT_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .devices.cache import DeviceCache
from .devices.monitor import DeviceMonitor
from .devices.mysql_device_repository import MySQLDeviceRepository
from .devices.repository import DeviceRepository
from .devices.service import DeviceLivenessTracker
from .ingestion.service import IngestionService
from .notifications.sink import NotificationSink, build_notification_sink
from .punches.mysql_punch_repository import MySQLPunchRepository
from .punches.repository import PunchRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    punches_repo: PunchRepository
    attendance_repo: AttendanceRepository
    devices_repo: DeviceRepository

    notifier: NotificationSink
    device_cache: DeviceCache
    writer: BackgroundWriter

    aggregator: AttendanceAggregator
    ingestion_service: IngestionService
    liveness_tracker: DeviceLivenessTracker
    device_monitor: DeviceMonitor

    def shutdown(self) -> None:
        self.device_monitor.stop(timeout=1.0)
        self.writer.shutdown(wait_for_pending=True)


def wire_container(
    *,
    punches_repo: PunchRepository,
    attendance_repo: AttendanceRepository,
    devices_repo: DeviceRepository,
    present_minutes: int = DEFAULT_PRESENT_MINUTES,
    notifier: Optional[NotificationSink] = None,
    callback_url: Optional[str] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    notifier = notifier or build_notification_sink(callback_url)
    device_cache = DeviceCache()
    writer = BackgroundWriter(max_workers=BACKGROUND_WRITER_WORKERS)

    aggregator = AttendanceAggregator(
        punches_repo,
        attendance_repo,
        policy=AttendancePolicy(present_minutes=int(present_minutes)),
        notifier=notifier,
    )
    ingestion_service = IngestionService(punches_repo, aggregator)
    liveness_tracker = DeviceLivenessTracker(devices_repo, device_cache, writer)
    device_monitor = DeviceMonitor(liveness_tracker)

    return Container(
        conn=conn,
        punches_repo=punches_repo,
        attendance_repo=attendance_repo,
        devices_repo=devices_repo,
        notifier=notifier,
        device_cache=device_cache,
        writer=writer,
        aggregator=aggregator,
        ingestion_service=ingestion_service,
        liveness_tracker=liveness_tracker,
        device_monitor=device_monitor,
    )


def build_container(
    *,
    db_config: dict,
    present_minutes: int = DEFAULT_PRESENT_MINUTES,
    callback_url: Optional[str] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        punches_repo=MySQLPunchRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        devices_repo=MySQLDeviceRepository(conn),
        present_minutes=present_minutes,
        callback_url=callback_url,
        conn=conn,
    )
