"""Tests for the availability service."""

import pytest

from medibook.availability import NO_SCHEDULE_MESSAGE, AvailabilityService
from medibook.booking import BookingService
from medibook.errors import ScheduleFormatError
from medibook.lifecycle import LifecycleManager

from conftest import SCHEDULE_DATE


@pytest.fixture
def service(db):
    return AvailabilityService(db)


class TestGetAvailability:
    """Tests for get_availability."""

    def test_open_schedule_lists_every_slot(self, service, doctor, schedule):
        result = service.get_availability(doctor.id, SCHEDULE_DATE)
        assert result.available is True
        assert result.slots == ["9:00 AM", "9:30 AM", "10:00 AM", "10:30 AM"]
        assert result.message is None

    def test_booked_slot_is_excluded(self, db, service, doctor, patient, schedule):
        BookingService(db).book_appointment(patient.id, doctor.id, SCHEDULE_DATE, "9:30 AM")

        result = service.get_availability(doctor.id, SCHEDULE_DATE)
        assert result.slots == ["9:00 AM", "10:00 AM", "10:30 AM"]

    def test_no_schedule_is_unavailable_not_an_error(self, service):
        result = service.get_availability(7, SCHEDULE_DATE)
        assert result.available is False
        assert result.slots == []
        assert result.to_dict() == {"available": False, "slots": [], "message": NO_SCHEDULE_MESSAGE}

    def test_other_dates_are_unaffected(self, service, doctor, schedule):
        assert service.get_availability(doctor.id, "2024-05-02").available is False

    def test_cancelled_appointment_frees_its_slot(self, db, service, doctor, patient, schedule):
        appointment = BookingService(db).book_appointment(patient.id, doctor.id, SCHEDULE_DATE, "10:00 AM")
        assert "10:00 AM" not in service.get_availability(doctor.id, SCHEDULE_DATE).slots

        LifecycleManager(db).cancel_appointment(appointment.id)
        assert "10:00 AM" in service.get_availability(doctor.id, SCHEDULE_DATE).slots

    @pytest.mark.parametrize("status", ["completed", "no-show"])
    def test_non_cancelled_statuses_keep_slot_taken(self, db, service, doctor, patient, schedule, status):
        appointment = BookingService(db).book_appointment(patient.id, doctor.id, SCHEDULE_DATE, "10:00 AM")
        LifecycleManager(db).update_appointment_status(appointment.id, status)

        assert "10:00 AM" not in service.get_availability(doctor.id, SCHEDULE_DATE).slots

    def test_repeated_calls_are_identical(self, service, doctor, schedule):
        first = service.get_availability(doctor.id, SCHEDULE_DATE)
        second = service.get_availability(doctor.id, SCHEDULE_DATE)
        assert first == second

    def test_first_schedule_wins_when_several_exist(self, db, service, doctor, schedule):
        with db.connect() as conn:
            conn.execute(
                """INSERT INTO doctor_schedules (doctor_id, date, start_time, end_time, slot_duration)
                   VALUES (?, ?, '2:00 PM', '3:00 PM', 30)""",
                (doctor.id, SCHEDULE_DATE),
            )

        assert service.get_availability(doctor.id, SCHEDULE_DATE).slots[0] == "9:00 AM"

    def test_corrupted_schedule_raises_format_error(self, db, service, doctor):
        with db.connect() as conn:
            conn.execute(
                """INSERT INTO doctor_schedules (doctor_id, date, start_time, end_time, slot_duration)
                   VALUES (?, ?, '09:00', '5pm', 30)""",
                (doctor.id, SCHEDULE_DATE),
            )

        with pytest.raises(ScheduleFormatError):
            service.get_availability(doctor.id, SCHEDULE_DATE)

    @pytest.mark.parametrize("duration", [0, -15, None])
    def test_bad_slot_duration_raises_format_error(self, db, service, doctor, duration):
        with db.connect() as conn:
            conn.execute(
                """INSERT INTO doctor_schedules (doctor_id, date, start_time, end_time, slot_duration)
                   VALUES (?, ?, '9:00 AM', '5:00 PM', ?)""",
                (doctor.id, SCHEDULE_DATE, duration),
            )

        with pytest.raises(ScheduleFormatError, match="Invalid schedule slot duration"):
            service.get_availability(doctor.id, SCHEDULE_DATE)
