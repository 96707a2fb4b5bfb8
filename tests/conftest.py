"""Shared pytest fixtures."""

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from medibook.api import create_app
from medibook.hospital.database import Database, MedicineRepository, UserRepository
from medibook.hospital.database.medicine_repository import Medicine
from medibook.hospital.database.user_repository import User
from medibook.prescription_scanner import PrescriptionScanner
from medibook.schedules import ScheduleService

SCHEDULE_DATE = "2024-05-01"


@pytest.fixture
def db(tmp_path):
    """A fresh database file for each test."""
    database = Database(tmp_path / "hospital.db", busy_timeout=10)
    database.init()
    return database


@pytest.fixture
def users(db):
    return UserRepository(db)


@pytest.fixture
def doctor(users):
    """A doctor with no schedules."""
    return users.create(
        User(id=None, name="Dr. Test Doctor", email="doctor@test.com", role="doctor",
             phone="555-0201", specialization="General Medicine"),
        password="secret",
    )


@pytest.fixture
def patient(users):
    return users.create(
        User(id=None, name="Test Patient", email="patient@test.com", role="patient", phone="555-0101"),
        password="secret",
    )


@pytest.fixture
def other_patient(users):
    return users.create(
        User(id=None, name="Other Patient", email="other@test.com", role="patient"),
        password="secret",
    )


@pytest.fixture
def schedule(db, doctor):
    """9:00 AM - 11:00 AM in 30 minute slots on SCHEDULE_DATE."""
    return ScheduleService(db).add_schedule(doctor.id, SCHEDULE_DATE, "9:00 AM", "11:00 AM", 30)


@pytest.fixture
def medicines(db):
    """A small catalogue: Paracetamol, Amoxicillin, Cetirizine."""
    repo = MedicineRepository(db)
    return [
        repo.create(Medicine(id=None, name="Paracetamol", price=5.99,
                             description="For fever and pain relief", category="Pain Relief")),
        repo.create(Medicine(id=None, name="Amoxicillin", price=12.99,
                             description="Antibiotic for bacterial infections", category="Antibiotics")),
        repo.create(Medicine(id=None, name="Cetirizine", price=7.29,
                             description="Antihistamine for allergies", category="Allergy")),
    ]


@pytest.fixture
def scanner():
    """Scanner stand-in so no test calls OpenAI."""
    return MagicMock(spec=PrescriptionScanner)


@pytest.fixture
def client(db, scanner, tmp_path):
    """API client bound to the test database."""
    app = create_app(db, scanner=scanner, upload_dir=tmp_path / "uploads")
    with TestClient(app) as test_client:
        yield test_client
