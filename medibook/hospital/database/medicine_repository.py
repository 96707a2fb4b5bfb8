"""Medicine catalogue repository."""

import sqlite3
from dataclasses import dataclass

from .connection import Repository

UPDATABLE_COLUMNS = ("name", "description", "price", "category", "in_stock", "image_url")


@dataclass
class Medicine:
    id: int | None
    name: str
    price: float
    description: str | None = None
    category: str | None = None
    in_stock: bool = True
    image_url: str | None = None
    created_at: str | None = None


class MedicineRepository(Repository):
    """Repository for the medicine catalogue."""

    def find_medicines(
        self,
        category: str | None = None,
        search: str | None = None,
    ) -> list[Medicine]:
        """List medicines, filtered by category and/or a name/description search."""
        query = "SELECT * FROM medicines WHERE 1 = 1"
        params = []

        if category:
            query += " AND category = ?"
            params.append(category)

        if search:
            query += " AND (name LIKE ? OR description LIKE ?)"
            params.extend([f"%{search}%", f"%{search}%"])

        query += " ORDER BY name"

        with self.db.connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_medicine(row) for row in rows]

    def get_by_id(self, medicine_id: int) -> Medicine | None:
        """Get a medicine by ID."""
        with self.db.connect() as conn:
            row = conn.execute("SELECT * FROM medicines WHERE id = ?", (medicine_id,)).fetchone()
        return self._row_to_medicine(row) if row else None

    def get_categories(self) -> list[str]:
        """Distinct medicine categories in alphabetical order."""
        with self.db.connect() as conn:
            rows = conn.execute(
                """SELECT DISTINCT category FROM medicines
                   WHERE category IS NOT NULL
                   ORDER BY category"""
            ).fetchall()
        return [row["category"] for row in rows]

    def create(self, medicine: Medicine) -> Medicine:
        """Add a medicine to the catalogue."""
        with self.db.connect() as conn:
            cursor = conn.execute(
                """INSERT INTO medicines (name, description, price, category, in_stock, image_url)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    medicine.name,
                    medicine.description,
                    medicine.price,
                    medicine.category,
                    int(medicine.in_stock),
                    medicine.image_url,
                ),
            )
            medicine.id = cursor.lastrowid
        return medicine

    def count(self) -> int:
        with self.db.connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM medicines").fetchone()[0]

    def update(self, medicine_id: int, changes: dict) -> bool:
        """Apply column changes to a medicine. Returns False if no row matched."""
        columns = [column for column in UPDATABLE_COLUMNS if column in changes]
        if not columns:
            return self.get_by_id(medicine_id) is not None

        assignments = ", ".join(f"{column} = ?" for column in columns)
        params = [int(changes[c]) if c == "in_stock" else changes[c] for c in columns]
        params.append(medicine_id)

        with self.db.connect() as conn:
            cursor = conn.execute(f"UPDATE medicines SET {assignments} WHERE id = ?", params)
        return cursor.rowcount > 0

    def reference_count(self, conn: sqlite3.Connection, medicine_id: int) -> int:
        """Prescription lines and order items that point at a medicine."""
        return conn.execute(
            """SELECT (SELECT COUNT(*) FROM prescription_medicines WHERE medicine_id = ?)
                    + (SELECT COUNT(*) FROM order_items WHERE medicine_id = ?)""",
            (medicine_id, medicine_id),
        ).fetchone()[0]

    def delete(self, conn: sqlite3.Connection, medicine_id: int) -> bool:
        """Delete a medicine on the caller's connection. Returns False if no row matched."""
        cursor = conn.execute("DELETE FROM medicines WHERE id = ?", (medicine_id,))
        return cursor.rowcount > 0

    def _row_to_medicine(self, row) -> Medicine:
        """Convert a database row to a Medicine object."""
        return Medicine(
            id=row["id"],
            name=row["name"],
            price=row["price"],
            description=row["description"],
            category=row["category"],
            in_stock=bool(row["in_stock"]),
            image_url=row["image_url"],
            created_at=row["created_at"],
        )
