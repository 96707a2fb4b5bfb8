"""User repository: accounts that appointments, prescriptions and orders refer to."""

from dataclasses import dataclass

from passlib.context import CryptContext

from .connection import Repository

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

ROLES = ("patient", "doctor", "admin")


@dataclass
class User:
    id: int | None
    name: str
    email: str
    role: str
    phone: str | None = None
    specialization: str | None = None
    created_at: str | None = None


class UserRepository(Repository):
    """Repository for user accounts. Passwords are stored hashed."""

    def create(self, user: User, password: str) -> User:
        """Create a user and return it with its ID."""
        if user.role not in ROLES:
            raise ValueError(f"Unknown role: {user.role!r}")

        with self.db.connect() as conn:
            cursor = conn.execute(
                """INSERT INTO users (name, email, password, phone, role, specialization)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    user.name,
                    user.email,
                    pwd_context.hash(password),
                    user.phone,
                    user.role,
                    user.specialization,
                ),
            )
            user.id = cursor.lastrowid
        return user

    def get_by_email(self, email: str) -> User | None:
        """Get a user by email address."""
        with self.db.connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        return self._row_to_user(row) if row else None

    def get_patient(self, patient_id: int) -> User | None:
        """Get a patient by ID. Other roles are not returned."""
        with self.db.connect() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE id = ? AND role = 'patient'", (patient_id,)
            ).fetchone()
        return self._row_to_user(row) if row else None

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user whose credentials match, or None."""
        with self.db.connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        if not row or not pwd_context.verify(password, row["password"]):
            return None
        return self._row_to_user(row)

    def _row_to_user(self, row) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            role=row["role"],
            phone=row["phone"],
            specialization=row["specialization"],
            created_at=row["created_at"],
        )
