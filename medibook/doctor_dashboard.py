"""Read-only views a doctor works from: the dashboard and a patient's history."""

from datetime import date as Date

from medibook.errors import NotFoundError
from medibook.hospital.database import (
    AppointmentRepository,
    Database,
    DoctorRepository,
    PrescriptionRepository,
    UserRepository,
)


class DoctorDashboard:
    """Aggregates appointment and prescription reads for one doctor."""

    def __init__(self, db: Database):
        self.doctors = DoctorRepository(db)
        self.users = UserRepository(db)
        self.appointments = AppointmentRepository(db)
        self.prescriptions = PrescriptionRepository(db)

    def summary(self, doctor_id: int, today: str | None = None) -> dict:
        """Today's and upcoming appointments, recent patients, and past
        appointments still waiting for a prescription."""
        if not self.doctors.get_by_id(doctor_id):
            raise NotFoundError("Doctor not found")

        today = today or Date.today().isoformat()
        return {
            "today_appointments": self.appointments.list_for_doctor(doctor_id, today),
            "upcoming_appointments": self.appointments.list_upcoming(doctor_id, today),
            "recent_patients": self.appointments.list_recent_patients(doctor_id),
            "pending_prescriptions": self.appointments.list_pending_prescriptions(doctor_id, today),
        }

    def patient_history(self, doctor_id: int, patient_id: int) -> dict:
        """A patient's appointments and prescriptions with this doctor."""
        patient = self.users.get_patient(patient_id)
        if not patient:
            raise NotFoundError("Patient not found")

        return {
            "patient": {
                "id": patient.id,
                "name": patient.name,
                "email": patient.email,
                "phone": patient.phone,
            },
            "appointments": self.appointments.list_for_doctor_patient(doctor_id, patient_id),
            "prescriptions": self.prescriptions.list_for_doctor_patient(doctor_id, patient_id),
        }
