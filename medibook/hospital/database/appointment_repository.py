"""Appointment repository with booking and status queries."""

import sqlite3
from dataclasses import dataclass

from .connection import Repository


@dataclass
class Appointment:
    id: int
    patient_id: int
    doctor_id: int
    date: str
    time: str
    reason: str | None = None
    status: str = "scheduled"
    created_at: str | None = None


class AppointmentRepository(Repository):
    """Repository for appointment rows.

    Inserts and status changes take the caller's connection so they can run
    inside a transaction opened by the booking or lifecycle services.
    """

    def booked_times(
        self,
        doctor_id: int,
        date: str,
        conn: sqlite3.Connection | None = None,
    ) -> set[str]:
        """Slot labels held by the doctor's non-cancelled appointments on a date."""
        with self._use(conn) as c:
            rows = c.execute(
                """SELECT time FROM appointments
                   WHERE doctor_id = ? AND date = ? AND status != 'cancelled'""",
                (doctor_id, date),
            ).fetchall()
        return {row["time"] for row in rows}

    def insert(
        self,
        conn: sqlite3.Connection,
        patient_id: int,
        doctor_id: int,
        date: str,
        time: str,
        reason: str | None = None,
    ) -> Appointment:
        """Insert a scheduled appointment and return the stored row."""
        cursor = conn.execute(
            """INSERT INTO appointments (patient_id, doctor_id, date, time, reason, status)
               VALUES (?, ?, ?, ?, ?, 'scheduled')""",
            (patient_id, doctor_id, date, time, reason),
        )
        return self.get_by_id(cursor.lastrowid, conn=conn)

    def update_status(self, conn: sqlite3.Connection, appointment_id: int, status: str) -> bool:
        """Set an appointment's status. Returns False if no row matched."""
        cursor = conn.execute(
            "UPDATE appointments SET status = ? WHERE id = ?",
            (status, appointment_id),
        )
        return cursor.rowcount > 0

    def get_by_id(
        self,
        appointment_id: int,
        conn: sqlite3.Connection | None = None,
    ) -> Appointment | None:
        """Get an appointment by ID."""
        with self._use(conn) as c:
            row = c.execute(
                "SELECT * FROM appointments WHERE id = ?", (appointment_id,)
            ).fetchone()
        return self._row_to_appointment(row) if row else None

    def get_details(self, appointment_id: int) -> dict | None:
        """Get an appointment with patient and doctor contact details."""
        with self.db.connect() as conn:
            row = conn.execute(
                """SELECT a.id, a.patient_id, a.doctor_id, a.date, a.time, a.reason, a.status,
                          a.created_at,
                          p.name AS patient_name, p.email AS patient_email, p.phone AS patient_phone,
                          d.name AS doctor_name, d.specialization
                   FROM appointments a
                   JOIN users p ON a.patient_id = p.id
                   JOIN users d ON a.doctor_id = d.id
                   WHERE a.id = ?""",
                (appointment_id,),
            ).fetchone()
        return dict(row) if row else None

    def list_for_patient(self, patient_id: int) -> list[dict]:
        """Get a patient's appointments with doctor names."""
        with self.db.connect() as conn:
            rows = conn.execute(
                """SELECT a.id, a.doctor_id, a.date, a.time, a.reason, a.status,
                          u.name AS doctor_name, u.specialization
                   FROM appointments a
                   JOIN users u ON a.doctor_id = u.id
                   WHERE a.patient_id = ?
                   ORDER BY a.date, a.id""",
                (patient_id,),
            ).fetchall()
        return [dict(row) for row in rows]

    def list_for_doctor(self, doctor_id: int, date: str | None = None) -> list[dict]:
        """Get a doctor's appointments with patient names, optionally for one date."""
        query = """SELECT a.id, a.patient_id, a.date, a.time, a.reason, a.status,
                          u.name AS patient_name
                   FROM appointments a
                   JOIN users u ON a.patient_id = u.id
                   WHERE a.doctor_id = ?"""
        params = [doctor_id]

        if date:
            query += " AND a.date = ?"
            params.append(date)

        query += " ORDER BY a.date, a.id"

        with self.db.connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [dict(row) for row in rows]

    def list_upcoming(self, doctor_id: int, after_date: str, limit: int = 10) -> list[dict]:
        """A doctor's appointments dated after after_date, soonest first."""
        with self.db.connect() as conn:
            rows = conn.execute(
                """SELECT a.id, a.patient_id, a.date, a.time, a.reason, a.status,
                          u.name AS patient_name
                   FROM appointments a
                   JOIN users u ON a.patient_id = u.id
                   WHERE a.doctor_id = ? AND a.date > ?
                   ORDER BY a.date, a.id
                   LIMIT ?""",
                (doctor_id, after_date, limit),
            ).fetchall()
        return [dict(row) for row in rows]

    def list_pending_prescriptions(self, doctor_id: int, today: str, limit: int = 10) -> list[dict]:
        """Appointments up to today that still have no prescription.

        Cancelled and no-show appointments never get one and are left out.
        """
        with self.db.connect() as conn:
            rows = conn.execute(
                """SELECT a.id AS appointment_id, a.date AS appointment_date, a.time, a.reason,
                          a.status, a.patient_id, u.name AS patient_name
                   FROM appointments a
                   JOIN users u ON a.patient_id = u.id
                   LEFT JOIN prescriptions p ON a.id = p.appointment_id
                   WHERE a.doctor_id = ? AND p.id IS NULL AND a.date <= ?
                     AND a.status NOT IN ('cancelled', 'no-show')
                   ORDER BY a.date DESC, a.id
                   LIMIT ?""",
                (doctor_id, today, limit),
            ).fetchall()
        return [dict(row) for row in rows]

    def list_recent_patients(self, doctor_id: int, limit: int = 10) -> list[dict]:
        """Distinct patients the doctor has appointments with, latest visit first."""
        with self.db.connect() as conn:
            rows = conn.execute(
                """SELECT u.id, u.name, u.email, u.phone, MAX(a.date) AS last_visit
                   FROM appointments a
                   JOIN users u ON a.patient_id = u.id
                   WHERE a.doctor_id = ?
                   GROUP BY u.id
                   ORDER BY last_visit DESC, u.id
                   LIMIT ?""",
                (doctor_id, limit),
            ).fetchall()
        return [dict(row) for row in rows]

    def list_for_doctor_patient(self, doctor_id: int, patient_id: int) -> list[dict]:
        """Every appointment between one doctor and one patient, newest first."""
        with self.db.connect() as conn:
            rows = conn.execute(
                """SELECT id, date, time, reason, status
                   FROM appointments
                   WHERE doctor_id = ? AND patient_id = ?
                   ORDER BY date DESC, id DESC""",
                (doctor_id, patient_id),
            ).fetchall()
        return [dict(row) for row in rows]

    def _row_to_appointment(self, row) -> Appointment:
        """Convert a database row to an Appointment object."""
        return Appointment(
            id=row["id"],
            patient_id=row["patient_id"],
            doctor_id=row["doctor_id"],
            date=row["date"],
            time=row["time"],
            reason=row["reason"],
            status=row["status"],
            created_at=row["created_at"],
        )
