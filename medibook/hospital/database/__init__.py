from .connection import Database
from .appointment_repository import AppointmentRepository
from .doctor_repository import DoctorRepository
from .medicine_repository import MedicineRepository
from .order_repository import OrderRepository
from .prescription_repository import PrescriptionRepository
from .user_repository import UserRepository

__all__ = [
    "Database",
    "AppointmentRepository",
    "DoctorRepository",
    "MedicineRepository",
    "OrderRepository",
    "PrescriptionRepository",
    "UserRepository",
]
