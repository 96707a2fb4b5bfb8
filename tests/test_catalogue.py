"""Tests for medicine catalogue management."""

import pytest

from medibook.catalogue import CatalogueService
from medibook.errors import NotFoundError, ValidationError
from medibook.hospital.database import MedicineRepository
from medibook.hospital.database.order_repository import OrderItem
from medibook.lifecycle import LifecycleManager


@pytest.fixture
def service(db):
    return CatalogueService(db)


class TestAddMedicine:

    def test_adds_with_defaults(self, db, service):
        medicine = service.add_medicine(" Ibuprofen ", 6.49, category="Pain Relief")

        stored = MedicineRepository(db).get_by_id(medicine.id)
        assert stored.name == "Ibuprofen"
        assert stored.price == 6.49
        assert stored.in_stock is True
        assert stored.image_url is None

    def test_free_medicine_allowed(self, service):
        assert service.add_medicine("Saline", 0).price == 0

    @pytest.mark.parametrize("name,price", [(None, 5.0), ("  ", 5.0), ("Ibuprofen", None)])
    def test_missing_name_or_price(self, db, service, name, price):
        with pytest.raises(ValidationError, match="Name and price are required"):
            service.add_medicine(name, price)
        assert MedicineRepository(db).count() == 0

    def test_negative_price(self, service):
        with pytest.raises(ValidationError, match="non-negative"):
            service.add_medicine("Ibuprofen", -1)


class TestUpdateMedicine:

    def test_changes_only_given_fields(self, db, service, medicines):
        updated = service.update_medicine(medicines[0].id, price=6.25, in_stock=False)

        assert updated.price == 6.25
        assert updated.in_stock is False
        assert updated.name == "Paracetamol"
        assert updated.category == "Pain Relief"

    def test_no_changes_returns_current(self, service, medicines):
        assert service.update_medicine(medicines[1].id).name == "Amoxicillin"

    def test_invalid_values(self, service, medicines):
        with pytest.raises(ValidationError):
            service.update_medicine(medicines[0].id, name=" ")
        with pytest.raises(ValidationError):
            service.update_medicine(medicines[0].id, price=-2)

    @pytest.mark.parametrize("changes", [{"price": 1.0}, {}])
    def test_missing_medicine(self, service, changes):
        with pytest.raises(NotFoundError, match="Medicine not found"):
            service.update_medicine(999, **changes)


class TestDeleteMedicine:

    def test_deletes_unreferenced(self, db, service, medicines):
        service.delete_medicine(medicines[2].id)

        assert MedicineRepository(db).get_by_id(medicines[2].id) is None
        assert MedicineRepository(db).count() == 2

    def test_referenced_medicine_is_kept(self, db, service, patient, medicines):
        LifecycleManager(db).create_order(patient.id, [OrderItem(medicines[0].id, 1, 5.99)], 5.99, "1 Elm St")

        with pytest.raises(ValidationError, match="existing prescriptions or orders"):
            service.delete_medicine(medicines[0].id)
        assert MedicineRepository(db).get_by_id(medicines[0].id) is not None

    def test_missing_medicine(self, service):
        with pytest.raises(NotFoundError):
            service.delete_medicine(999)
