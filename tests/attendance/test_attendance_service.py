from __future__ import annotations

import threading
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from src.hr_ledger.hr_ledger.attendance.model import AttendanceRecord, worked_hours
from src.hr_ledger.hr_ledger.attendance.service import AttendanceService
from src.hr_ledger.hr_ledger.core.enums import AttendanceStatus
from src.hr_ledger.hr_ledger.core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    AuthorizationError,
    NoCheckInError,
    NotFoundError,
    ValidationError,
)

ALICE = 100


@pytest.fixture
def service(attendance_repo, employees, clock):
    return AttendanceService(attendance_repo, employees, clock=clock)


def test_full_day_is_eight_and_a_half_hours(service):
    service.check_in(ALICE, at=datetime(2025, 3, 3, 9, 0))
    rec = service.check_out(ALICE, at=datetime(2025, 3, 3, 17, 30))

    assert rec.computed_hours == Decimal("8.50")
    assert rec.status == AttendanceStatus.PRESENT


def test_check_in_records_location_and_present_status(service, clock):
    rec = service.check_in(ALICE, location=" HQ ")

    assert rec.work_date == clock().date()
    assert rec.check_in == clock()
    assert rec.check_in_location == "HQ"
    assert rec.computed_hours == Decimal("0.00")


def test_second_check_in_same_day_is_rejected(service):
    service.check_in(ALICE, at=datetime(2025, 3, 3, 9, 0))
    with pytest.raises(AlreadyCheckedInError):
        service.check_in(ALICE, at=datetime(2025, 3, 3, 9, 5))


def test_check_out_requires_check_in(service):
    with pytest.raises(NoCheckInError):
        service.check_out(ALICE, at=datetime(2025, 3, 3, 17, 0))


def test_check_out_twice_is_rejected(service):
    service.check_in(ALICE, at=datetime(2025, 3, 3, 9, 0))
    service.check_out(ALICE, at=datetime(2025, 3, 3, 17, 0))
    with pytest.raises(AlreadyCheckedOutError):
        service.check_out(ALICE, at=datetime(2025, 3, 3, 18, 0))


def test_check_out_before_check_in_is_rejected(service):
    service.check_in(ALICE, at=datetime(2025, 3, 3, 9, 0))
    with pytest.raises(ValidationError):
        service.check_out(ALICE, at=datetime(2025, 3, 3, 8, 0))


def test_unknown_employee_cannot_check_in(service):
    with pytest.raises(NotFoundError):
        service.check_in(999)


def test_concurrent_check_ins_leave_exactly_one_record(service, attendance_repo):
    barrier = threading.Barrier(12)
    results: list[str] = []
    lock = threading.Lock()

    def worker():
        barrier.wait()
        try:
            service.check_in(ALICE, at=datetime(2025, 3, 3, 9, 0))
            outcome = "ok"
        except AlreadyCheckedInError:
            outcome = "dup"
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=worker) for _ in range(12)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count("ok") == 1
    assert results.count("dup") == 11
    assert len(attendance_repo.all()) == 1


def test_mark_attendance_requires_reviewer(service, alice):
    with pytest.raises(AuthorizationError):
        service.mark_attendance(alice, employee_id=ALICE, work_date=date(2025, 3, 3), status="Present")


def test_mark_attendance_keeps_stored_times_and_recomputes(service, hr):
    service.check_in(ALICE, at=datetime(2025, 3, 3, 9, 0))

    rec = service.mark_attendance(
        hr,
        employee_id=ALICE,
        work_date=date(2025, 3, 3),
        status=AttendanceStatus.LATE,
        check_out=datetime(2025, 3, 3, 18, 0),
        notes="Traffic",
    )

    assert rec.check_in == datetime(2025, 3, 3, 9, 0)
    assert rec.computed_hours == Decimal("9.00")
    assert rec.status == AttendanceStatus.LATE
    assert rec.notes == "Traffic"


def test_mark_attendance_creates_missing_day(service, admin):
    rec = service.mark_attendance(admin, employee_id=ALICE, work_date=date(2025, 3, 4), status="Holiday")

    assert rec.attendance_id is not None
    assert rec.status == AttendanceStatus.HOLIDAY
    assert rec.computed_hours == Decimal("0.00")


def test_mark_attendance_validates_status_and_employee(service, admin):
    with pytest.raises(ValidationError):
        service.mark_attendance(admin, employee_id=ALICE, work_date=date(2025, 3, 4), status="Sleeping")
    with pytest.raises(NotFoundError):
        service.mark_attendance(admin, employee_id=999, work_date=date(2025, 3, 4), status="Present")


def test_mark_attendance_rejects_stamps_from_another_day(service, hr, attendance_repo):
    with pytest.raises(ValidationError):
        service.mark_attendance(
            hr,
            employee_id=ALICE,
            work_date=date(2025, 6, 3),
            status="Present",
            check_in=datetime(2025, 6, 9, 9, 0),
            check_out=datetime(2025, 6, 10, 17, 0),
        )
    with pytest.raises(ValidationError):
        service.mark_attendance(
            hr, employee_id=ALICE, work_date=date(2025, 6, 3), status="Present", check_out=datetime(2025, 6, 4, 1, 0)
        )

    assert attendance_repo.get_for_employee_and_date(ALICE, date(2025, 6, 3)) is None


def test_mark_attendance_allows_overnight_check_out(service, hr):
    rec = service.mark_attendance(
        hr,
        employee_id=ALICE,
        work_date=date(2025, 6, 3),
        status="Present",
        check_in=datetime(2025, 6, 3, 22, 0),
        check_out=datetime(2025, 6, 4, 6, 30),
    )

    assert rec.work_date == date(2025, 6, 3)
    assert rec.computed_hours == Decimal("8.50")


def test_mark_attendance_check_out_cannot_precede_stored_check_in(service, hr):
    service.check_in(ALICE, at=datetime(2025, 3, 3, 9, 0))

    with pytest.raises(ValidationError):
        service.mark_attendance(
            hr, employee_id=ALICE, work_date=date(2025, 3, 3), status="Present", check_out=datetime(2025, 3, 3, 8, 0)
        )


def test_offset_aware_stamps_are_rejected(service, hr):
    aware = datetime(2025, 6, 2, 9, 0, tzinfo=timezone(timedelta(hours=7)))

    with pytest.raises(ValidationError):
        service.check_in(ALICE, at=aware)
    with pytest.raises(ValidationError):
        service.mark_attendance(
            hr,
            employee_id=ALICE,
            work_date=date(2025, 6, 2),
            status="Present",
            check_in=aware,
            check_out=datetime(2025, 6, 2, 17, 0),
        )


def test_non_text_location_is_rejected_before_any_write(service, attendance_repo, clock):
    with pytest.raises(ValidationError):
        service.check_in(ALICE, location={"lat": 1, "lng": 2})

    assert attendance_repo.get_for_employee_and_date(ALICE, clock().date()) is None


def test_monthly_summary_counts_calendar_days(service, hr):
    for day, status in [(2, "Present"), (3, "Present"), (4, "Absent"), (5, "Leave"), (6, "Half Day")]:
        service.mark_attendance(
            hr,
            employee_id=ALICE,
            work_date=date(2025, 6, day),
            status=status,
            check_in=datetime(2025, 6, day, 9, 0) if status == "Present" else None,
            check_out=datetime(2025, 6, day, 17, 15) if status == "Present" else None,
        )
    service.mark_attendance(hr, employee_id=ALICE, work_date=date(2025, 7, 1), status="Present")

    s = service.summary(ALICE, month=6, year=2025)

    assert s.total_days == 30
    assert s.present_days == 2
    assert s.absent_days == 1
    assert s.leaves == 1
    assert s.half_days == 1
    assert s.late_days == 0
    assert s.total_hours == Decimal("16.50")


def test_today_uses_clock(service, clock):
    assert service.today(ALICE) is None
    service.check_in(ALICE)
    assert service.today(ALICE).check_in == clock()


def test_list_records_paginates_newest_first(service, hr):
    for day in (3, 4, 5):
        service.mark_attendance(hr, employee_id=ALICE, work_date=date(2025, 3, day), status="Present")

    page = service.list_records(employee_id=ALICE, page=1, limit=2)

    assert [r.work_date.day for r in page.items] == [5, 4]
    assert page.total == 3
    assert page.has_next
    assert page.pagination()["total"] == 2


def test_worked_hours_rounds_half_up():
    # 20 minutes and 6 seconds = 0.335 h
    assert worked_hours(datetime(2025, 3, 3, 9, 0, 0), datetime(2025, 3, 3, 9, 20, 6)) == Decimal("0.34")
    assert worked_hours(datetime(2025, 3, 3, 9, 0), None) == Decimal("0.00")


def test_record_defaults_are_absent_and_zero_hours():
    rec = AttendanceRecord(attendance_id=None, employee_id=ALICE, work_date=date(2025, 3, 3))
    assert rec.status == AttendanceStatus.ABSENT
    assert rec.computed_hours == Decimal("0.00")
