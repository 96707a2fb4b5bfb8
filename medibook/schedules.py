"""Doctor schedule management."""

import logging
from datetime import datetime

from medibook.errors import FormatError, NotFoundError, ValidationError
from medibook.hospital.database import Database, DoctorRepository
from medibook.hospital.database.doctor_repository import Schedule
from medibook.time_utils import format_clock_time, parse_clock_time

logger = logging.getLogger(__name__)

DEFAULT_SLOT_DURATION = 30


class ScheduleService:
    """Creates, lists and deletes per-date working windows for doctors.

    Schedules are never edited in place; a doctor deletes one and adds another.
    """

    def __init__(self, db: Database):
        self.doctors = DoctorRepository(db)

    def add_schedule(
        self,
        doctor_id: int,
        date: str | None,
        start_time: str | None,
        end_time: str | None,
        slot_duration: int | None = None,
    ) -> Schedule:
        """Validate and store a schedule with canonical time labels."""
        if not date or not start_time or not end_time:
            raise ValidationError("Date, start time and end time are required")

        try:
            datetime.strptime(date, "%Y-%m-%d")
        except ValueError as exc:
            raise ValidationError(f"Invalid date: {date!r}, expected YYYY-MM-DD") from exc

        try:
            start = parse_clock_time(start_time)
            end = parse_clock_time(end_time)
        except FormatError as exc:
            raise ValidationError(str(exc)) from exc

        if start >= end:
            raise ValidationError("End time must be after start time")

        if slot_duration is None:
            slot_duration = DEFAULT_SLOT_DURATION
        if slot_duration <= 0:
            raise ValidationError("Slot duration must be positive")

        if not self.doctors.get_by_id(doctor_id):
            raise NotFoundError("Doctor not found")

        schedule = self.doctors.create_schedule(
            Schedule(
                id=None,
                doctor_id=doctor_id,
                date=date,
                start_time=format_clock_time(start),
                end_time=format_clock_time(end),
                slot_duration=slot_duration,
            )
        )
        logger.info(
            "Doctor %s scheduled %s %s-%s every %d min",
            doctor_id, date, schedule.start_time, schedule.end_time, slot_duration,
        )
        return schedule

    def list_schedules(self, doctor_id: int) -> list[Schedule]:
        return self.doctors.list_schedules(doctor_id)

    def delete_schedule(self, doctor_id: int, schedule_id: int) -> None:
        if not self.doctors.delete_schedule(doctor_id, schedule_id):
            raise NotFoundError("Schedule not found")
        logger.info("Deleted schedule %s of doctor %s", schedule_id, doctor_id)
