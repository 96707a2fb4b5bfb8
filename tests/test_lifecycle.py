"""Tests for status changes and the prescription/order compound writes."""

import pytest

from medibook.booking import BookingService
from medibook.errors import NotFoundError, SlotTakenError, ValidationError
from medibook.hospital.database import AppointmentRepository, OrderRepository, PrescriptionRepository
from medibook.hospital.database.order_repository import OrderItem
from medibook.hospital.database.prescription_repository import PrescribedMedicine
from medibook.lifecycle import AppointmentStatus, LifecycleManager, OrderStatus, parse_status

from conftest import SCHEDULE_DATE


@pytest.fixture
def manager(db):
    return LifecycleManager(db)


@pytest.fixture
def appointment(db, doctor, patient, schedule):
    return BookingService(db).book_appointment(patient.id, doctor.id, SCHEDULE_DATE, "9:00 AM", "Fever")


def count_rows(db, table):
    with db.connect() as conn:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


class TestParseStatus:
    """Statuses are checked against a fixed set only."""

    def test_known_values(self):
        assert parse_status(AppointmentStatus, "no-show") is AppointmentStatus.NO_SHOW
        assert parse_status(OrderStatus, "shipped") is OrderStatus.SHIPPED

    @pytest.mark.parametrize("value", ["done", "Scheduled", "", None])
    def test_unknown_values(self, value):
        with pytest.raises(ValidationError, match="Invalid status"):
            parse_status(AppointmentStatus, value)


class TestAppointmentStatus:
    """Tests for update_appointment_status and cancel_appointment."""

    @pytest.mark.parametrize("status", ["completed", "cancelled", "no-show"])
    def test_set_status(self, db, manager, appointment, status):
        manager.update_appointment_status(appointment.id, status)
        assert AppointmentRepository(db).get_by_id(appointment.id).status == status

    def test_any_status_can_follow_any_other(self, db, manager, appointment):
        manager.update_appointment_status(appointment.id, "completed")
        manager.update_appointment_status(appointment.id, "scheduled")
        assert AppointmentRepository(db).get_by_id(appointment.id).status == "scheduled"

    def test_invalid_status(self, db, manager, appointment):
        with pytest.raises(ValidationError):
            manager.update_appointment_status(appointment.id, "postponed")
        assert AppointmentRepository(db).get_by_id(appointment.id).status == "scheduled"

    def test_missing_appointment(self, manager):
        with pytest.raises(NotFoundError):
            manager.update_appointment_status(999, "completed")

    def test_cancel_keeps_row(self, db, manager, appointment):
        manager.cancel_appointment(appointment.id)
        assert AppointmentRepository(db).get_by_id(appointment.id).status == "cancelled"

    def test_reviving_cancelled_appointment_whose_slot_was_rebooked(
        self, db, manager, appointment, doctor, other_patient
    ):
        manager.cancel_appointment(appointment.id)
        BookingService(db).book_appointment(other_patient.id, doctor.id, SCHEDULE_DATE, "9:00 AM")

        with pytest.raises(SlotTakenError):
            manager.update_appointment_status(appointment.id, "scheduled")
        assert AppointmentRepository(db).get_by_id(appointment.id).status == "cancelled"


class TestCreatePrescription:
    """Prescription creation and the appointment status change commit together."""

    def test_creates_prescription_and_completes_appointment(self, db, manager, appointment, medicines):
        prescription = manager.create_prescription(
            appointment_id=appointment.id,
            doctor_id=appointment.doctor_id,
            patient_id=appointment.patient_id,
            medicines=[
                PrescribedMedicine(medicine_id=medicines[0].id, dosage="500mg", morning=True, after_meal=True),
                PrescribedMedicine(medicine_id=medicines[1].id, dosage="250mg", night=True),
            ],
            diagnosis="Viral fever",
        )

        details = PrescriptionRepository(db).get_details(prescription.id)
        assert details["diagnosis"] == "Viral fever"
        assert [m["medicine_name"] for m in details["medicines"]] == ["Paracetamol", "Amoxicillin"]
        assert details["medicines"][0]["morning"] is True
        assert details["medicines"][0]["night"] is False
        assert AppointmentRepository(db).get_by_id(appointment.id).status == "completed"

    def test_empty_medicines_leaves_appointment_unchanged(self, db, manager, appointment):
        with pytest.raises(ValidationError):
            manager.create_prescription(appointment.id, appointment.doctor_id, appointment.patient_id, [])

        assert AppointmentRepository(db).get_by_id(appointment.id).status == "scheduled"
        assert count_rows(db, "prescriptions") == 0

    def test_line_without_medicine_id(self, manager, appointment):
        with pytest.raises(ValidationError, match="medicine id"):
            manager.create_prescription(
                appointment.id, appointment.doctor_id, appointment.patient_id,
                [PrescribedMedicine(medicine_id=None)],
            )

    def test_missing_appointment(self, db, manager, doctor, patient, medicines):
        with pytest.raises(NotFoundError):
            manager.create_prescription(999, doctor.id, patient.id, [PrescribedMedicine(medicines[0].id)])
        assert count_rows(db, "prescriptions") == 0

    def test_failing_line_rolls_back_everything(self, db, manager, appointment, medicines):
        with pytest.raises(ValidationError):
            manager.create_prescription(
                appointment.id, appointment.doctor_id, appointment.patient_id,
                [PrescribedMedicine(medicines[0].id), PrescribedMedicine(medicine_id=999)],
            )

        assert count_rows(db, "prescriptions") == 0
        assert count_rows(db, "prescription_medicines") == 0
        assert AppointmentRepository(db).get_by_id(appointment.id).status == "scheduled"

    def test_lookup_by_appointment(self, db, manager, appointment, medicines):
        prescription = manager.create_prescription(
            appointment.id, appointment.doctor_id, appointment.patient_id,
            [PrescribedMedicine(medicines[2].id, dosage="10mg")],
        )

        found = PrescriptionRepository(db).get_for_appointment(appointment.id)
        assert found["id"] == prescription.id
        assert found["medicines"][0]["dosage"] == "10mg"


class TestCreateOrder:
    """Order creation writes the order and all items, or nothing."""

    def test_creates_order_with_items(self, db, manager, patient, medicines):
        order = manager.create_order(
            patient_id=patient.id,
            items=[OrderItem(medicines[0].id, 2, 5.99), OrderItem(medicines[1].id, 1, 12.99)],
            total_amount=24.97,
            address="123 Main St",
            payment_method="cod",
        )

        details = OrderRepository(db).get_details(order.id)
        assert details["status"] == "pending"
        assert details["patient_name"] == "Test Patient"
        assert [(i["medicine_name"], i["quantity"]) for i in details["items"]] == [
            ("Paracetamol", 2),
            ("Amoxicillin", 1),
        ]

    def test_price_is_a_snapshot(self, db, manager, patient, medicines):
        order = manager.create_order(patient.id, [OrderItem(medicines[0].id, 1, 4.50)], 4.50, "1 Elm St")
        with db.connect() as conn:
            conn.execute("UPDATE medicines SET price = 9.99 WHERE id = ?", (medicines[0].id,))

        assert OrderRepository(db).get_details(order.id)["items"][0]["price"] == 4.50

    @pytest.mark.parametrize("field", ["patient_id", "items", "total_amount", "address"])
    def test_missing_field(self, db, manager, patient, medicines, field):
        request = {
            "patient_id": patient.id,
            "items": [OrderItem(medicines[0].id, 1, 5.99)],
            "total_amount": 5.99,
            "address": "123 Main St",
        }
        request[field] = None if field != "items" else []

        with pytest.raises(ValidationError):
            manager.create_order(**request)
        assert count_rows(db, "orders") == 0

    def test_negative_total(self, db, manager, patient, medicines):
        with pytest.raises(ValidationError, match="Total amount must be non-negative"):
            manager.create_order(patient.id, [OrderItem(medicines[0].id, 1, 5.99)], -5.99, "1 Elm St")
        assert count_rows(db, "orders") == 0

    def test_zero_total(self, db, manager, patient, medicines):
        order = manager.create_order(patient.id, [OrderItem(medicines[0].id, 1, 0)], 0, "1 Elm St")
        assert OrderRepository(db).get_details(order.id)["total_amount"] == 0

    @pytest.mark.parametrize("quantity,price", [(0, 5.99), (-1, 5.99), (1, -0.01)])
    def test_bad_item_values(self, manager, patient, medicines, quantity, price):
        with pytest.raises(ValidationError):
            manager.create_order(patient.id, [OrderItem(medicines[0].id, quantity, price)], 5.99, "1 Elm St")

    def test_failing_item_rolls_back_everything(self, db, manager, patient, medicines):
        with pytest.raises(ValidationError):
            manager.create_order(
                patient.id,
                [OrderItem(medicines[0].id, 1, 5.99), OrderItem(999, 1, 1.00)],
                6.99,
                "123 Main St",
            )

        assert count_rows(db, "orders") == 0
        assert count_rows(db, "order_items") == 0


class TestOrderStatus:
    """Tests for update_order_status."""

    @pytest.fixture
    def order(self, manager, patient, medicines):
        return manager.create_order(patient.id, [OrderItem(medicines[0].id, 1, 5.99)], 5.99, "1 Elm St")

    @pytest.mark.parametrize("status", ["processing", "shipped", "delivered", "cancelled", "pending"])
    def test_set_status(self, db, manager, order, status):
        manager.update_order_status(order.id, status)
        assert OrderRepository(db).get_details(order.id)["status"] == status

    def test_invalid_status(self, manager, order):
        with pytest.raises(ValidationError):
            manager.update_order_status(order.id, "lost")

    def test_missing_order(self, manager):
        with pytest.raises(NotFoundError):
            manager.update_order_status(999, "shipped")
