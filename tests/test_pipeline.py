from datetime import datetime, time, timedelta, timezone

import pytest

from attendguard.core.clock import FixedClock
from attendguard.core.exceptions import AlreadyMarked
from attendguard.schemas.enrollment import EnrollmentCreate
from attendguard.schemas.session import SessionCreate
from attendguard.services.attendance import (
    advance_session_status,
    create_session,
    enroll_student,
    mark_attendance,
    synthesize_absences,
)
from attendguard.services.qr import issue_token
from tests.conftest import NOW, new_id

EARLY = datetime(2025, 3, 10, 9, 10, tzinfo=timezone.utc)


@pytest.fixture()
def seated(make_session, make_enrollment):
    session = make_session()
    enrollment = make_enrollment()
    return session, enrollment.student_id


def _scan(store, session_id, student_id, now, token="issue", method="qr_code"):
    if token == "issue":
        token = issue_token(session_id, now)
    return mark_attendance(store, session_id, student_id, token, method, now)


# ---------------------------------------------------------------------------
# markAttendance
# ---------------------------------------------------------------------------

def test_mark_present_within_late_threshold(store, seated):
    session, student = seated
    result = _scan(store, session.id, student, EARLY)
    assert result.ok, result.error
    assert result.error is None
    assert result.attendance.status == "present"
    assert result.attendance.method_used == "qr_code"
    assert store.get_attendance(session.id, student) is not None


def test_mark_late_after_threshold(store, seated):
    session, student = seated
    result = _scan(store, session.id, student, datetime(2025, 3, 10, 9, 20, tzinfo=timezone.utc))
    assert result.ok
    assert result.attendance.status == "late"


def test_second_mark_is_rejected_and_first_kept(store, seated):
    session, student = seated
    first = _scan(store, session.id, student, EARLY)
    second = _scan(store, session.id, student, EARLY + timedelta(minutes=30))

    assert first.ok
    assert not second.ok
    assert second.error.code == "ALREADY_MARKED"
    assert second.error.retryable is False
    assert second.error.suggested_action == "View your attendance record"

    kept = store.get_attendance(session.id, student)
    assert kept.id == first.attendance.id
    assert kept.status == "present"


def test_expired_token(store, seated):
    session, student = seated
    stale = issue_token(session.id, NOW - timedelta(seconds=200))
    result = _scan(store, session.id, student, NOW, token=stale)
    assert not result.ok
    assert result.error.code == "TOKEN_EXPIRED"
    assert result.error.message.startswith("QR code expired (")
    assert "Please scan the current QR code" in result.error.message
    assert result.error.retryable is False
    assert store.get_attendance(session.id, student) is None


def test_token_for_another_session(store, seated):
    session, student = seated
    result = _scan(store, session.id, student, NOW, token=issue_token(new_id(), NOW))
    assert not result.ok
    assert result.error.code == "TOKEN_SESSION_MISMATCH"
    assert result.error.message == "Invalid QR code - session mismatch"


def test_garbage_token(store, seated):
    session, student = seated
    result = _scan(store, session.id, student, NOW, token="not-base64!!")
    assert result.error.code == "TOKEN_MALFORMED_TOKEN"


def test_qr_requires_a_token(store, seated):
    session, student = seated
    result = _scan(store, session.id, student, NOW, token=None)
    assert not result.ok
    assert result.error.code == "TOKEN_MISSING"
    assert result.error.category == "validation"


def test_facial_recognition_needs_no_token(store, seated):
    session, student = seated
    result = _scan(store, session.id, student, NOW, token=None, method="facial_recognition")
    assert result.ok
    assert result.attendance.method_used == "facial_recognition"


def test_unknown_method_is_invalid_input(store, seated):
    session, student = seated
    result = _scan(store, session.id, student, NOW, token=None, method="fingerprint")
    assert not result.ok
    assert result.error.code == "INVALID_INPUT"
    assert "Method must be qr_code or facial_recognition" in result.error.details


def test_cancelled_session(store, make_session, make_enrollment):
    session = make_session(status="cancelled")
    student = make_enrollment().student_id
    result = _scan(store, session.id, student, NOW)
    assert not result.ok
    assert result.error.details == "Session has been cancelled"
    assert result.error.suggested_action == "Contact your lecturer for alternative arrangements"


def test_missing_session_is_retryable(store, make_enrollment):
    student = make_enrollment().student_id
    result = _scan(store, new_id(), student, NOW)
    assert not result.ok
    assert result.error.category == "not_found"
    assert result.error.retryable is True


def test_student_not_enrolled(store, make_session):
    session = make_session()
    result = _scan(store, session.id, new_id(), NOW)
    assert not result.ok
    assert result.error.category == "authorization"
    assert result.error.details == "Student is not enrolled in this section"
    assert result.error.retryable is False


def test_inactive_enrollment_does_not_admit(store, make_session, make_enrollment):
    session = make_session()
    student = make_enrollment(status="withdrawn").student_id
    result = _scan(store, session.id, student, NOW)
    assert result.error.details == "Student is not enrolled in this section"


@pytest.mark.parametrize("start,end,reason", [
    (time(11, 0), time(12, 0), "Session has not started yet"),
    (time(7, 0), time(8, 0), "Session has already ended"),
])
def test_outside_session_window(store, make_session, make_enrollment, start, end, reason):
    session = make_session(start_time=start, end_time=end)
    student = make_enrollment().student_id
    result = _scan(store, session.id, student, NOW)
    assert not result.ok
    assert result.error.details == reason
    assert store.get_attendance(session.id, student) is None


def test_unique_constraint_backs_the_precheck(store, seated):
    session, student = seated
    store.insert_attendance(session_id=session.id, student_id=student, status="present",
                            method_used="qr_code", marked_at=NOW)
    with pytest.raises(AlreadyMarked):
        store.insert_attendance(session_id=session.id, student_id=student, status="late",
                                method_used="qr_code", marked_at=NOW)
    assert store.get_attendance(session.id, student).status == "present"


# ---------------------------------------------------------------------------
# createSession
# ---------------------------------------------------------------------------

def _descriptor(section_id, **overrides):
    data = {
        "course_id": new_id(),
        "section_id": section_id,
        "session_name": "Lab",
        "session_date": "2025-03-10",
        "start_time": "11:00",
        "end_time": "12:00",
        "location": "Room 101",
    }
    data.update(overrides)
    return SessionCreate(**data)


def test_create_session(store, clock, section_id):
    result = create_session(store, _descriptor(section_id), clock)
    assert result.ok, result.error
    assert result.session.status == "scheduled"
    assert result.session.start_time == time(11, 0)
    assert store.get_session(result.session.id) is not None


def test_overlap_names_the_existing_session(store, clock, section_id, make_session):
    make_session(session_name="Morning lecture")
    result = create_session(store, _descriptor(section_id, start_time="10:30", end_time="11:30"), clock)
    assert not result.ok
    assert result.error.code == "SESSION_CONFLICT"
    assert result.error.details == "Time conflict with existing session: Morning lecture"


def test_back_to_back_sessions_do_not_conflict(store, clock, section_id, make_session):
    make_session()
    assert create_session(store, _descriptor(section_id), clock).ok


def test_cancelled_sessions_do_not_block_the_slot(store, clock, section_id, make_session):
    make_session(status="cancelled")
    result = create_session(store, _descriptor(section_id, start_time="09:00", end_time="10:00"), clock)
    assert result.ok


def test_other_sections_do_not_conflict(store, clock, make_session):
    make_session()
    result = create_session(store, _descriptor(new_id(), start_time="09:00", end_time="10:00"), clock)
    assert result.ok


def test_large_capacity_warns_once(store, clock, section_id):
    result = create_session(store, _descriptor(section_id, capacity=250), clock)
    assert result.ok
    assert result.warnings == ["Very large capacity (250) - consider if this is realistic"]


def test_invalid_descriptor_collects_every_error(store, clock, section_id):
    result = create_session(store, _descriptor(section_id, session_date="2024-02-30",
                                               session_name="", end_time="10:00"), clock)
    assert not result.ok
    assert result.error.code == "INVALID_INPUT"
    assert "Session date has invalid day for the month" in result.error.details
    assert "Session name is required" in result.error.details
    assert "End time must be after start time" in result.error.details
    assert store.list_sessions_for_section_day(section_id, NOW.date()) == []


# ---------------------------------------------------------------------------
# enrollment + ciclo de vida da sessão
# ---------------------------------------------------------------------------

def test_enroll_student(store, clock, section_id):
    result = enroll_student(store, EnrollmentCreate(student_id=new_id(), section_id=section_id,
                                                    enrollment_date="2025-01-15"), clock)
    assert result.ok
    assert result.enrollment.status == "active"
    assert result.warnings == []


def test_enroll_future_date_warns(store, clock, section_id):
    result = enroll_student(store, EnrollmentCreate(student_id=new_id(), section_id=section_id,
                                                    enrollment_date="2025-04-01"), clock)
    assert result.ok
    assert result.warnings == ["Enrollment date is in the future"]


def test_duplicate_active_enrollment(store, clock, section_id, make_enrollment):
    student = make_enrollment().student_id
    result = enroll_student(store, EnrollmentCreate(student_id=student, section_id=section_id), clock)
    assert not result.ok
    assert result.error.code == "DUPLICATE_ENROLLMENT"


def test_full_section(store, clock, section_id, make_enrollment):
    make_enrollment()
    make_enrollment()
    result = enroll_student(store, EnrollmentCreate(student_id=new_id(), section_id=section_id),
                            clock, section_capacity=2)
    assert not result.ok
    assert result.error.code == "SECTION_FULL"
    assert result.error.details == "Section is full (2/2)"


def test_completing_a_session_marks_absentees(store, clock, make_session, make_enrollment):
    session = make_session()
    present = make_enrollment().student_id
    make_enrollment()
    make_enrollment()
    make_enrollment(status="withdrawn")
    assert _scan(store, session.id, present, EARLY).ok

    result = advance_session_status(store, session.id, "completed", clock)
    assert result.ok, result.error
    assert result.session.status == "completed"
    assert result.absent_marked == 2
    assert store.get_attendance(session.id, present).status == "present"

    # segunda passada não cria nada
    assert synthesize_absences(store, store.get_session(session.id), NOW) == 0


def test_invalid_status_transition(store, clock, make_session):
    session = make_session(status="completed")
    result = advance_session_status(store, session.id, "active", clock)
    assert not result.ok
    assert result.error.details == "Cannot change session status from completed to active"
    assert store.get_session(session.id).status == "completed"


def test_scheduled_session_can_start(store, make_session):
    session = make_session(status="scheduled")
    result = advance_session_status(store, session.id, "active", FixedClock(NOW))
    assert result.ok
    assert result.absent_marked == 0


def test_naive_now_is_treated_as_utc(store, seated):
    session, student = seated
    naive = datetime(2025, 3, 10, 10, 0)
    token = issue_token(session.id, NOW)
    result = mark_attendance(store, session.id, student, token, "qr_code", naive)
    assert result.ok, result.error
    assert result.attendance.status == "late"


def test_marks_after_completion_are_rejected(store, clock, seated):
    session, student = seated
    assert advance_session_status(store, session.id, "completed", clock).ok
    result = _scan(store, session.id, student, NOW)
    assert not result.ok
    assert result.error.details == "Session has already been completed"
    assert store.get_attendance(session.id, student).status == "absent"
