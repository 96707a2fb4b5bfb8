"""Appointment booking with double-booking protection."""

import logging
import sqlite3

from medibook.availability import AvailabilityService
from medibook.errors import FormatError, NoScheduleError, SlotTakenError, ValidationError
from medibook.hospital.database import AppointmentRepository, Database, DoctorRepository
from medibook.hospital.database.appointment_repository import Appointment
from medibook.time_utils import canonical_clock_time

logger = logging.getLogger(__name__)


class BookingService:
    """Books appointments so that a (doctor, date, time) slot is held at most once.

    The schedule lookup, the free-slot check and the insert all run in one
    BEGIN IMMEDIATE transaction, so concurrent requests for the same slot are
    serialized by SQLite's write lock. The partial unique index on live
    appointments backs this up at the storage layer.
    """

    def __init__(self, db: Database):
        self.db = db
        self.availability = AvailabilityService(db)
        self.doctors = DoctorRepository(db)
        self.appointments = AppointmentRepository(db)

    def book_appointment(
        self,
        patient_id: int | None,
        doctor_id: int | None,
        date: str | None,
        time: str | None,
        reason: str | None = None,
    ) -> Appointment:
        """Book a slot and return the new appointment.

        Raises:
            ValidationError: a required field is missing, or time is malformed
                on a date the doctor is scheduled
            NoScheduleError: the doctor has no schedule on that date
            SlotTakenError: the slot is already booked or not on the schedule
        """
        if not patient_id or not doctor_id or not date or not time:
            raise ValidationError("Missing required fields")

        with self.db.transaction() as conn:
            schedule = self.doctors.get_schedule(doctor_id, date, conn=conn)
            if not schedule:
                logger.warning("Doctor %s has no schedule on %s", doctor_id, date)
                raise NoScheduleError("Doctor is not available on this date")

            try:
                slot = canonical_clock_time(time)
            except FormatError as exc:
                raise ValidationError(f"Invalid time: {time!r}") from exc

            if slot not in self.availability.free_slots(schedule, conn=conn):
                logger.warning("Slot %s %s for doctor %s is not free", date, slot, doctor_id)
                raise SlotTakenError("This time slot is already booked")

            try:
                appointment = self.appointments.insert(
                    conn, patient_id, doctor_id, date, slot, reason
                )
            except sqlite3.IntegrityError as exc:
                if "UNIQUE" in str(exc):
                    raise SlotTakenError("This time slot is already booked") from exc
                raise ValidationError("Patient or doctor does not exist") from exc

        logger.info(
            "Booked appointment %s: patient %s with doctor %s on %s at %s",
            appointment.id, patient_id, doctor_id, date, slot,
        )
        return appointment
