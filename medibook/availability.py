"""Doctor availability: free slots for a date from the schedule and bookings."""

import logging
import sqlite3
from dataclasses import dataclass, field

from medibook.errors import FormatError, ScheduleFormatError
from medibook.hospital.database import AppointmentRepository, Database, DoctorRepository
from medibook.hospital.database.doctor_repository import Schedule
from medibook.slot_generator import generate_slots
from medibook.time_utils import parse_clock_time

logger = logging.getLogger(__name__)

NO_SCHEDULE_MESSAGE = "No schedule for this date"


@dataclass
class Availability:
    available: bool
    slots: list[str] = field(default_factory=list)
    message: str | None = None

    def to_dict(self) -> dict:
        data = {"available": self.available, "slots": self.slots}
        if self.message:
            data["message"] = self.message
        return data


def schedule_window(schedule: Schedule) -> tuple[int, int, int]:
    """Parse a stored schedule into (start, end, duration) in minutes."""
    try:
        start, end = parse_clock_time(schedule.start_time), parse_clock_time(schedule.end_time)
    except FormatError as exc:
        logger.error(
            "Schedule %s for doctor %s has invalid times %r-%r",
            schedule.id, schedule.doctor_id, schedule.start_time, schedule.end_time,
        )
        raise ScheduleFormatError("Invalid schedule time format") from exc

    duration = schedule.slot_duration
    if not isinstance(duration, int) or isinstance(duration, bool) or duration <= 0:
        logger.error(
            "Schedule %s for doctor %s has invalid slot duration %r",
            schedule.id, schedule.doctor_id, duration,
        )
        raise ScheduleFormatError("Invalid schedule slot duration")

    return start, end, duration


class AvailabilityService:
    """Computes bookable slots for a doctor on a date."""

    def __init__(self, db: Database):
        self.db = db
        self.doctors = DoctorRepository(db)
        self.appointments = AppointmentRepository(db)

    def get_availability(
        self,
        doctor_id: int,
        date: str,
        conn: sqlite3.Connection | None = None,
    ) -> Availability:
        """Look up the schedule and bookings for a date and return the free slots.

        A date without a schedule is not an error; it is reported as
        unavailable with no slots.
        """
        schedule = self.doctors.get_schedule(doctor_id, date, conn=conn)
        if not schedule:
            return Availability(available=False, slots=[], message=NO_SCHEDULE_MESSAGE)

        return Availability(available=True, slots=self.free_slots(schedule, conn=conn))

    def free_slots(self, schedule: Schedule, conn: sqlite3.Connection | None = None) -> list[str]:
        """Slots of a schedule not held by a non-cancelled appointment."""
        start, end, duration = schedule_window(schedule)
        booked = self.appointments.booked_times(schedule.doctor_id, schedule.date, conn=conn)
        return generate_slots(start, end, duration, booked)
