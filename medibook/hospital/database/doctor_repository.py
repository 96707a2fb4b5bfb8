"""Doctor and schedule repository."""

import sqlite3
from dataclasses import dataclass

from .connection import Repository


@dataclass
class Doctor:
    id: int
    name: str
    email: str | None = None
    phone: str | None = None
    specialization: str | None = None


@dataclass
class Schedule:
    id: int | None
    doctor_id: int
    date: str
    start_time: str
    end_time: str
    slot_duration: int = 30


class DoctorRepository(Repository):
    """Repository for doctors and their per-date schedules."""

    def find_doctors(self, specialization: str | None = None) -> list[Doctor]:
        """List doctors, optionally filtered by specialization."""
        query = "SELECT * FROM users WHERE role = 'doctor'"
        params = []

        if specialization:
            query += " AND specialization = ?"
            params.append(specialization)

        query += " ORDER BY name"

        with self.db.connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_doctor(row) for row in rows]

    def get_by_id(self, doctor_id: int) -> Doctor | None:
        """Get a doctor by ID."""
        with self.db.connect() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE id = ? AND role = 'doctor'", (doctor_id,)
            ).fetchone()
        return self._row_to_doctor(row) if row else None

    # Schedule methods

    def get_schedule(
        self,
        doctor_id: int,
        date: str,
        conn: sqlite3.Connection | None = None,
    ) -> Schedule | None:
        """Get the doctor's schedule for a date (the earliest one if several)."""
        with self._use(conn) as c:
            row = c.execute(
                """SELECT * FROM doctor_schedules
                   WHERE doctor_id = ? AND date = ?
                   ORDER BY id
                   LIMIT 1""",
                (doctor_id, date),
            ).fetchone()
        return self._row_to_schedule(row) if row else None

    def list_schedules(self, doctor_id: int) -> list[Schedule]:
        """List a doctor's schedules ordered by date, then creation order."""
        with self.db.connect() as conn:
            rows = conn.execute(
                """SELECT * FROM doctor_schedules
                   WHERE doctor_id = ?
                   ORDER BY date, id""",
                (doctor_id,),
            ).fetchall()
        return [self._row_to_schedule(row) for row in rows]

    def create_schedule(self, schedule: Schedule) -> Schedule:
        """Insert a schedule row and return it with its ID."""
        with self.db.connect() as conn:
            cursor = conn.execute(
                """INSERT INTO doctor_schedules (doctor_id, date, start_time, end_time, slot_duration)
                   VALUES (?, ?, ?, ?, ?)""",
                (
                    schedule.doctor_id,
                    schedule.date,
                    schedule.start_time,
                    schedule.end_time,
                    schedule.slot_duration,
                ),
            )
            schedule.id = cursor.lastrowid
        return schedule

    def delete_schedule(self, doctor_id: int, schedule_id: int) -> bool:
        """Delete a schedule. Returns False if no row matched."""
        with self.db.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM doctor_schedules WHERE id = ? AND doctor_id = ?",
                (schedule_id, doctor_id),
            )
        return cursor.rowcount > 0

    def _row_to_doctor(self, row) -> Doctor:
        """Convert a database row to a Doctor object."""
        return Doctor(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            phone=row["phone"],
            specialization=row["specialization"],
        )

    def _row_to_schedule(self, row) -> Schedule:
        """Convert a database row to a Schedule object."""
        return Schedule(
            id=row["id"],
            doctor_id=row["doctor_id"],
            date=row["date"],
            start_time=row["start_time"],
            end_time=row["end_time"],
            slot_duration=row["slot_duration"],
        )
