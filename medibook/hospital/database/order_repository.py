"""Order repository: medicine orders and their items."""

import sqlite3
from dataclasses import dataclass, field

from .connection import Repository


@dataclass
class OrderItem:
    medicine_id: int
    quantity: int
    price: float


@dataclass
class Order:
    id: int | None
    patient_id: int
    total_amount: float
    address: str
    payment_method: str | None = None
    status: str = "pending"
    items: list[OrderItem] = field(default_factory=list)
    created_at: str | None = None


class OrderRepository(Repository):
    """Repository for orders. Writes run on the caller's connection."""

    def insert(self, conn: sqlite3.Connection, order: Order) -> Order:
        """Insert an order row and all of its items."""
        cursor = conn.execute(
            """INSERT INTO orders (patient_id, total_amount, status, address, payment_method)
               VALUES (?, ?, ?, ?, ?)""",
            (order.patient_id, order.total_amount, order.status, order.address, order.payment_method),
        )
        order.id = cursor.lastrowid

        conn.executemany(
            """INSERT INTO order_items (order_id, medicine_id, quantity, price)
               VALUES (?, ?, ?, ?)""",
            [(order.id, item.medicine_id, item.quantity, item.price) for item in order.items],
        )
        return order

    def update_status(self, conn: sqlite3.Connection, order_id: int, status: str) -> bool:
        """Set an order's status. Returns False if no row matched."""
        cursor = conn.execute("UPDATE orders SET status = ? WHERE id = ?", (status, order_id))
        return cursor.rowcount > 0

    def get_details(self, order_id: int) -> dict | None:
        """Get an order with the patient name and its items."""
        with self.db.connect() as conn:
            row = conn.execute(
                """SELECT o.id, o.patient_id, o.total_amount, o.status, o.address,
                          o.payment_method, o.created_at,
                          u.name AS patient_name
                   FROM orders o
                   JOIN users u ON o.patient_id = u.id
                   WHERE o.id = ?""",
                (order_id,),
            ).fetchone()
            if not row:
                return None

            order = dict(row)
            items = conn.execute(
                """SELECT oi.id, oi.medicine_id, oi.quantity, oi.price,
                          m.name AS medicine_name, m.description, m.category
                   FROM order_items oi
                   JOIN medicines m ON oi.medicine_id = m.id
                   WHERE oi.order_id = ?
                   ORDER BY oi.id""",
                (order_id,),
            ).fetchall()
            order["items"] = [dict(item) for item in items]
        return order

    def list_for_patient(self, patient_id: int) -> list[dict]:
        """A patient's orders, newest first."""
        with self.db.connect() as conn:
            rows = conn.execute(
                """SELECT id, total_amount, status, address, payment_method, created_at
                   FROM orders
                   WHERE patient_id = ?
                   ORDER BY created_at DESC, id DESC""",
                (patient_id,),
            ).fetchall()
        return [dict(row) for row in rows]

    def list_all(self) -> list[dict]:
        """Every order with the patient's name and email, newest first."""
        with self.db.connect() as conn:
            rows = conn.execute(
                """SELECT o.id, o.patient_id, o.total_amount, o.status, o.address,
                          o.payment_method, o.created_at,
                          u.name AS patient_name, u.email AS patient_email
                   FROM orders o
                   JOIN users u ON o.patient_id = u.id
                   ORDER BY o.created_at DESC, o.id DESC"""
            ).fetchall()
        return [dict(row) for row in rows]
