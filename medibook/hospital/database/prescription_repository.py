"""Prescription repository: prescriptions and their medicine lines."""

import sqlite3
from dataclasses import dataclass, field

from .connection import Repository


@dataclass
class PrescribedMedicine:
    medicine_id: int
    dosage: str = ""
    morning: bool = False
    afternoon: bool = False
    evening: bool = False
    night: bool = False
    before_meal: bool = False
    after_meal: bool = False
    comments: str = ""


@dataclass
class Prescription:
    id: int | None
    appointment_id: int
    doctor_id: int
    patient_id: int
    diagnosis: str | None = None
    comments: str | None = None
    medicines: list[PrescribedMedicine] = field(default_factory=list)
    created_at: str | None = None


# Columns shared by every medicine-line query
LINE_COLUMNS = """pm.medicine_id, pm.dosage, pm.morning, pm.afternoon, pm.evening, pm.night,
                  pm.before_meal, pm.after_meal, pm.comments"""


class PrescriptionRepository(Repository):
    """Repository for prescriptions. Writes run on the caller's transaction."""

    def insert(self, conn: sqlite3.Connection, prescription: Prescription) -> Prescription:
        """Insert a prescription row and all of its medicine lines."""
        cursor = conn.execute(
            """INSERT INTO prescriptions (appointment_id, doctor_id, patient_id, diagnosis, comments)
               VALUES (?, ?, ?, ?, ?)""",
            (
                prescription.appointment_id,
                prescription.doctor_id,
                prescription.patient_id,
                prescription.diagnosis,
                prescription.comments,
            ),
        )
        prescription.id = cursor.lastrowid

        conn.executemany(
            """INSERT INTO prescription_medicines
               (prescription_id, medicine_id, dosage, morning, afternoon, evening, night,
                before_meal, after_meal, comments)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            [
                (
                    prescription.id,
                    line.medicine_id,
                    line.dosage or "",
                    int(line.morning),
                    int(line.afternoon),
                    int(line.evening),
                    int(line.night),
                    int(line.before_meal),
                    int(line.after_meal),
                    line.comments or "",
                )
                for line in prescription.medicines
            ],
        )
        return prescription

    def get_details(self, prescription_id: int) -> dict | None:
        """Get a prescription with doctor, patient, appointment and medicine details."""
        with self.db.connect() as conn:
            row = conn.execute(
                """SELECT p.id, p.appointment_id, p.doctor_id, p.patient_id, p.diagnosis,
                          p.comments, p.created_at,
                          d.name AS doctor_name, d.specialization AS doctor_specialization,
                          pt.name AS patient_name,
                          a.date AS appointment_date, a.time AS appointment_time
                   FROM prescriptions p
                   JOIN users d ON p.doctor_id = d.id
                   JOIN users pt ON p.patient_id = pt.id
                   JOIN appointments a ON p.appointment_id = a.id
                   WHERE p.id = ?""",
                (prescription_id,),
            ).fetchone()
            if not row:
                return None

            prescription = dict(row)
            prescription["medicines"] = self._get_lines(conn, prescription_id)
        return prescription

    def get_for_appointment(self, appointment_id: int) -> dict | None:
        """Get the prescription issued for an appointment, if any."""
        with self.db.connect() as conn:
            row = conn.execute(
                """SELECT id, appointment_id, diagnosis, comments, created_at
                   FROM prescriptions
                   WHERE appointment_id = ?
                   ORDER BY id
                   LIMIT 1""",
                (appointment_id,),
            ).fetchone()
            if not row:
                return None

            prescription = dict(row)
            prescription["medicines"] = self._get_lines(conn, row["id"])
        return prescription

    def list_for_doctor(self, doctor_id: int) -> list[dict]:
        """Prescriptions written by a doctor, newest first."""
        with self.db.connect() as conn:
            rows = conn.execute(
                """SELECT p.id, p.appointment_id, p.patient_id, p.diagnosis, p.created_at,
                          pt.name AS patient_name,
                          a.date AS appointment_date, a.time AS appointment_time
                   FROM prescriptions p
                   JOIN users pt ON p.patient_id = pt.id
                   JOIN appointments a ON p.appointment_id = a.id
                   WHERE p.doctor_id = ?
                   ORDER BY p.created_at DESC, p.id DESC""",
                (doctor_id,),
            ).fetchall()
        return [dict(row) for row in rows]

    def list_for_patient(self, patient_id: int) -> list[dict]:
        """Prescriptions issued to a patient, newest first."""
        with self.db.connect() as conn:
            rows = conn.execute(
                """SELECT p.id, p.appointment_id, p.doctor_id, p.diagnosis, p.created_at,
                          d.name AS doctor_name, d.specialization,
                          a.date AS appointment_date, a.time AS appointment_time
                   FROM prescriptions p
                   JOIN users d ON p.doctor_id = d.id
                   JOIN appointments a ON p.appointment_id = a.id
                   WHERE p.patient_id = ?
                   ORDER BY p.created_at DESC, p.id DESC""",
                (patient_id,),
            ).fetchall()
        return [dict(row) for row in rows]

    def list_for_doctor_patient(self, doctor_id: int, patient_id: int) -> list[dict]:
        """Prescriptions one doctor wrote for one patient, with their medicine lines."""
        with self.db.connect() as conn:
            rows = conn.execute(
                """SELECT p.id, p.appointment_id, p.diagnosis, p.comments, p.created_at,
                          a.date AS appointment_date, a.time AS appointment_time
                   FROM prescriptions p
                   JOIN appointments a ON p.appointment_id = a.id
                   WHERE p.doctor_id = ? AND p.patient_id = ?
                   ORDER BY p.created_at DESC, p.id DESC""",
                (doctor_id, patient_id),
            ).fetchall()

            prescriptions = []
            for row in rows:
                prescription = dict(row)
                prescription["medicines"] = self._get_lines(conn, row["id"])
                prescriptions.append(prescription)
        return prescriptions

    def _get_lines(self, conn: sqlite3.Connection, prescription_id: int) -> list[dict]:
        """Medicine lines of a prescription joined with catalogue data."""
        rows = conn.execute(
            f"""SELECT pm.id, {LINE_COLUMNS},
                       m.name AS medicine_name, m.description, m.category, m.price
                FROM prescription_medicines pm
                JOIN medicines m ON pm.medicine_id = m.id
                WHERE pm.prescription_id = ?
                ORDER BY pm.id""",
            (prescription_id,),
        ).fetchall()
        return [self._row_to_line(row) for row in rows]

    def _row_to_line(self, row) -> dict:
        """Convert a medicine-line row to a dict with boolean flags."""
        line = dict(row)
        for flag in ("morning", "afternoon", "evening", "night", "before_meal", "after_meal"):
            line[flag] = bool(line[flag])
        return line
