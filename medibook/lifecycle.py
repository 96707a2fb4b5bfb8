"""Status lifecycle for appointments and orders, and the compound writes.

Statuses are checked for membership in a fixed set only. Any listed status can
be set from any other (e.g. an administrative "completed" -> "scheduled").
Prescription and order creation are the only multi-row writes; each runs in a
single transaction and either fully commits or leaves no trace.
"""

import logging
import sqlite3
from enum import Enum

from medibook.errors import NotFoundError, SlotTakenError, ValidationError
from medibook.hospital.database import AppointmentRepository, Database, OrderRepository, PrescriptionRepository
from medibook.hospital.database.order_repository import Order, OrderItem
from medibook.hospital.database.prescription_repository import PrescribedMedicine, Prescription

logger = logging.getLogger(__name__)


class AppointmentStatus(Enum):
    """States of an appointment."""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


class OrderStatus(Enum):
    """States of a medicine order."""
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


def parse_status(status_type: type[Enum], value) -> Enum:
    """Return the enum member for value, or raise ValidationError."""
    try:
        return status_type(value)
    except ValueError as exc:
        raise ValidationError("Invalid status") from exc


class LifecycleManager:
    """Owns status changes and the prescription/order compound writes."""

    def __init__(self, db: Database):
        self.db = db
        self.appointments = AppointmentRepository(db)
        self.prescriptions = PrescriptionRepository(db)
        self.orders = OrderRepository(db)

    # Appointments

    def update_appointment_status(self, appointment_id: int, status: str) -> AppointmentStatus:
        """Set an appointment's status to any valid value."""
        new_status = parse_status(AppointmentStatus, status)

        with self.db.transaction() as conn:
            try:
                updated = self.appointments.update_status(conn, appointment_id, new_status.value)
            except sqlite3.IntegrityError as exc:
                # Reviving a cancelled appointment whose slot was rebooked
                raise SlotTakenError("This time slot is already booked") from exc
            if not updated:
                raise NotFoundError("Appointment not found")

        logger.info("Appointment %s status set to %s", appointment_id, new_status.value)
        return new_status

    def cancel_appointment(self, appointment_id: int) -> None:
        """Cancel an appointment, keeping the row and freeing its slot."""
        self.update_appointment_status(appointment_id, AppointmentStatus.CANCELLED.value)

    # Prescriptions

    def create_prescription(
        self,
        appointment_id: int | None,
        doctor_id: int | None,
        patient_id: int | None,
        medicines: list[PrescribedMedicine] | None,
        diagnosis: str | None = None,
        comments: str | None = None,
    ) -> Prescription:
        """Create a prescription and mark its appointment completed, atomically."""
        if not appointment_id or not doctor_id or not patient_id or not medicines:
            raise ValidationError("Missing required fields")
        if any(not line.medicine_id for line in medicines):
            raise ValidationError("Every medicine needs a medicine id")

        prescription = Prescription(
            id=None,
            appointment_id=appointment_id,
            doctor_id=doctor_id,
            patient_id=patient_id,
            diagnosis=diagnosis,
            comments=comments,
            medicines=list(medicines),
        )

        with self.db.transaction() as conn:
            try:
                completed = self.appointments.update_status(
                    conn, appointment_id, AppointmentStatus.COMPLETED.value
                )
            except sqlite3.IntegrityError as exc:
                raise SlotTakenError("This time slot is already booked") from exc
            if not completed:
                raise NotFoundError("Appointment not found")
            try:
                self.prescriptions.insert(conn, prescription)
            except sqlite3.IntegrityError as exc:
                raise ValidationError("Doctor, patient or medicine does not exist") from exc

        logger.info(
            "Created prescription %s with %d medicine(s) for appointment %s",
            prescription.id, len(prescription.medicines), appointment_id,
        )
        return prescription

    # Orders

    def create_order(
        self,
        patient_id: int | None,
        items: list[OrderItem] | None,
        total_amount: float | None,
        address: str | None,
        payment_method: str | None = None,
    ) -> Order:
        """Create an order and all of its items, atomically."""
        if not patient_id or not items or total_amount is None or not address:
            raise ValidationError("Missing required fields")
        if total_amount < 0:
            raise ValidationError("Total amount must be non-negative")
        for item in items:
            if not item.medicine_id or item.quantity is None or item.price is None:
                raise ValidationError("Every item needs a medicine id, quantity and price")
            if item.quantity <= 0 or item.price < 0:
                raise ValidationError("Item quantity must be positive and price non-negative")

        order = Order(
            id=None,
            patient_id=patient_id,
            total_amount=total_amount,
            address=address,
            payment_method=payment_method,
            status=OrderStatus.PENDING.value,
            items=list(items),
        )

        with self.db.transaction() as conn:
            try:
                self.orders.insert(conn, order)
            except sqlite3.IntegrityError as exc:
                raise ValidationError("Patient or medicine does not exist") from exc

        logger.info("Created order %s with %d item(s) for patient %s", order.id, len(order.items), patient_id)
        return order

    def update_order_status(self, order_id: int, status: str) -> OrderStatus:
        """Set an order's status to any valid value."""
        new_status = parse_status(OrderStatus, status)

        with self.db.transaction() as conn:
            if not self.orders.update_status(conn, order_id, new_status.value):
                raise NotFoundError("Order not found")

        logger.info("Order %s status set to %s", order_id, new_status.value)
        return new_status
