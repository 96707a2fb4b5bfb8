"""Medicine catalogue management."""

import logging

from medibook.errors import NotFoundError, ValidationError
from medibook.hospital.database import Database, MedicineRepository
from medibook.hospital.database.medicine_repository import Medicine

logger = logging.getLogger(__name__)


def _check_price(price: float | None) -> None:
    if price is not None and price < 0:
        raise ValidationError("Price must be non-negative")


class CatalogueService:
    """Adds, edits and removes medicines.

    A medicine that appears on a prescription or an order cannot be deleted;
    mark it out of stock instead so history stays intact.
    """

    def __init__(self, db: Database):
        self.db = db
        self.medicines = MedicineRepository(db)

    def add_medicine(
        self,
        name: str | None,
        price: float | None,
        description: str | None = None,
        category: str | None = None,
        in_stock: bool | None = None,
        image_url: str | None = None,
    ) -> Medicine:
        if not name or not name.strip() or price is None:
            raise ValidationError("Name and price are required")
        _check_price(price)

        medicine = self.medicines.create(
            Medicine(
                id=None,
                name=name.strip(),
                price=price,
                description=description,
                category=category,
                in_stock=True if in_stock is None else in_stock,
                image_url=image_url,
            )
        )
        logger.info("Added medicine %s (%s)", medicine.id, medicine.name)
        return medicine

    def update_medicine(self, medicine_id: int, **changes) -> Medicine:
        """Change the given fields; fields passed as None are left alone."""
        changes = {key: value for key, value in changes.items() if value is not None}
        if "name" in changes:
            if not changes["name"].strip():
                raise ValidationError("Name cannot be empty")
            changes["name"] = changes["name"].strip()
        _check_price(changes.get("price"))

        if not self.medicines.update(medicine_id, changes):
            raise NotFoundError("Medicine not found")

        logger.info("Updated medicine %s: %s", medicine_id, ", ".join(sorted(changes)) or "no changes")
        return self.medicines.get_by_id(medicine_id)

    def delete_medicine(self, medicine_id: int) -> None:
        with self.db.transaction() as conn:
            if self.medicines.reference_count(conn, medicine_id):
                raise ValidationError("Medicine is on existing prescriptions or orders")
            if not self.medicines.delete(conn, medicine_id):
                raise NotFoundError("Medicine not found")

        logger.info("Deleted medicine %s", medicine_id)
