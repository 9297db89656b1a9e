from datetime import date, datetime, timezone

from src.adms_server.adms_server.attendance.service import AttendanceAggregator
from src.adms_server.adms_server.core.enums import AttendanceStatus
from src.adms_server.adms_server.notifications.sink import NotifyResult
from src.adms_server.adms_server.punches.model import PunchRecord

DAY = date(2024, 3, 5)


def _punch(identity, hour, minute=0, second=0, day=DAY):
    ts = datetime(day.year, day.month, day.day, hour, minute, second, tzinfo=timezone.utc)
    return PunchRecord(identity=identity, timestamp=ts, raw_line=f"{identity}\t{ts:%Y-%m-%d %H:%M:%S}")


def test_full_day_is_present(punches_repo, attendance_repo, notifier, fixed_now):
    punches_repo.append(_punch("A", 8))
    punches_repo.append(_punch("A", 12))
    punches_repo.append(_punch("A", 16, 30))

    agg = AttendanceAggregator(punches_repo, attendance_repo, notifier=notifier)
    results = agg.compute_attendance_for_day(DAY, now=fixed_now)

    assert len(results) == 1
    rec = results[0]
    assert rec.duration_minutes == 510
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.first_timestamp.hour == 8
    assert rec.last_timestamp.hour == 16
    assert rec.updated_at == fixed_now
    assert attendance_repo.find_by_identity_and_day("A", DAY) == rec


def test_single_punch_is_absent(punches_repo, attendance_repo, fixed_now):
    punches_repo.append(_punch("B", 9))

    rec = AttendanceAggregator(punches_repo, attendance_repo).compute_attendance_for_day(DAY, now=fixed_now)[0]

    assert rec.duration_minutes == 0
    assert rec.status == AttendanceStatus.ABSENT
    assert rec.first_timestamp == rec.last_timestamp


def test_short_day_below_threshold(punches_repo, attendance_repo, fixed_now):
    punches_repo.append(_punch("C", 8))
    punches_repo.append(_punch("C", 13, 59, 59))

    rec = AttendanceAggregator(punches_repo, attendance_repo).compute_attendance_for_day(DAY, now=fixed_now)[0]

    assert rec.duration_minutes == 359
    assert rec.status == AttendanceStatus.SHORT


def test_recompute_converges_after_new_punches(punches_repo, attendance_repo, fixed_now):
    agg = AttendanceAggregator(punches_repo, attendance_repo)
    punches_repo.append(_punch("D", 8))
    agg.compute_attendance_for_day(DAY, now=fixed_now)

    punches_repo.append(_punch("D", 15))
    agg.compute_attendance_for_day(DAY, now=fixed_now)

    assert len(attendance_repo.by_key) == 1
    rec = attendance_repo.find_by_identity_and_day("D", DAY)
    assert rec.duration_minutes == 420
    assert rec.status == AttendanceStatus.PRESENT


def test_rerun_is_idempotent(punches_repo, attendance_repo, fixed_now):
    punches_repo.append(_punch("E", 8))
    punches_repo.append(_punch("E", 9))
    agg = AttendanceAggregator(punches_repo, attendance_repo)

    first = agg.compute_attendance_for_day(DAY, now=fixed_now)
    second = agg.compute_attendance_for_day(DAY, now=fixed_now)

    assert first == second
    assert len(attendance_repo.by_key) == 1


def test_punches_from_other_days_are_ignored(punches_repo, attendance_repo, fixed_now):
    punches_repo.append(_punch("F", 23, 59, 59, day=date(2024, 3, 4)))
    punches_repo.append(_punch("F", 0, 0, 0))
    punches_repo.append(_punch("F", 7))
    punches_repo.append(_punch("F", 0, 0, 0, day=date(2024, 3, 6)))

    rec = AttendanceAggregator(punches_repo, attendance_repo).compute_attendance_for_day(DAY, now=fixed_now)[0]

    assert rec.duration_minutes == 420


def test_each_identity_gets_a_row_and_a_notification(punches_repo, attendance_repo, notifier, fixed_now):
    punches_repo.append(_punch("Z", 8))
    punches_repo.append(_punch("M", 8))
    punches_repo.append(_punch("M", 9))

    results = AttendanceAggregator(punches_repo, attendance_repo, notifier=notifier).compute_attendance_for_day(
        DAY, now=fixed_now
    )

    assert [r.identity for r in results] == ["M", "Z"]
    assert [r.identity for r in notifier.sent] == ["M", "Z"]


def test_day_without_punches_yields_nothing(punches_repo, attendance_repo, notifier, fixed_now):
    results = AttendanceAggregator(punches_repo, attendance_repo, notifier=notifier).compute_attendance_for_day(
        DAY, now=fixed_now
    )

    assert results == []
    assert attendance_repo.upserts == 0
    assert notifier.sent == []


def test_failed_notification_does_not_affect_result(punches_repo, attendance_repo, fixed_now):
    class UndeliverableSink:
        def __init__(self):
            self.calls = 0

        def notify(self, record):
            self.calls += 1
            return NotifyResult(delivered=False, error="connection refused")

    sink = UndeliverableSink()
    punches_repo.append(_punch("G", 8))

    results = AttendanceAggregator(punches_repo, attendance_repo, notifier=sink).compute_attendance_for_day(
        DAY, now=fixed_now
    )

    assert len(results) == 1
    assert sink.calls == 1
    assert attendance_repo.find_by_identity_and_day("G", DAY) is not None


def test_to_dict_uses_canonical_text(punches_repo, attendance_repo, fixed_now):
    punches_repo.append(_punch("H", 8))

    data = AttendanceAggregator(punches_repo, attendance_repo).compute_attendance_for_day(DAY, now=fixed_now)[0].to_dict()

    assert data["day"] == "2024-03-05"
    assert data["first_timestamp"] == "2024-03-05T08:00:00.000Z"
    assert data["status"] == "ABSENT"
    assert data["updated_at"] == "2024-03-05T18:00:00.000Z"


def test_raising_sink_does_not_skip_remaining_identities(punches_repo, attendance_repo, fixed_now):
    class ExplodingSink:
        def __init__(self):
            self.seen = []

        def notify(self, record):
            self.seen.append(record.identity)
            raise RuntimeError("sink broke")

    sink = ExplodingSink()
    punches_repo.append(_punch("A", 8))
    punches_repo.append(_punch("B", 8))

    results = AttendanceAggregator(punches_repo, attendance_repo, notifier=sink).compute_attendance_for_day(
        DAY, now=fixed_now
    )

    assert [r.identity for r in results] == ["A", "B"]
    assert sink.seen == ["A", "B"]
    assert attendance_repo.upserts == 2


def test_aggregation_only_writes_attendance(punches_repo, attendance_repo, fixed_now, monkeypatch):
    def no_lookup(identity, day):
        raise AssertionError("attendance lookup during aggregation")

    monkeypatch.setattr(attendance_repo, "find_by_identity_and_day", no_lookup)
    punches_repo.append(_punch("A", 8))
    punches_repo.append(_punch("A", 9))

    results = AttendanceAggregator(punches_repo, attendance_repo).compute_attendance_for_day(DAY, now=fixed_now)

    assert len(results) == 1
    assert attendance_repo.upserts == 1
