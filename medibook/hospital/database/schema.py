"""
Hospital Services Database Schema
Supports doctor schedules, appointments, prescriptions and medicine orders.
"""

SCHEMA = """
-- =============================================================================
-- 1. USERS - Patients, doctors and admins
-- =============================================================================
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    email TEXT UNIQUE NOT NULL,
    password TEXT NOT NULL,
    phone TEXT,

    -- Role: patient, doctor, admin
    role TEXT NOT NULL,
    specialization TEXT,

    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_users_role ON users(role);


-- =============================================================================
-- 2. DOCTOR_SCHEDULES - One working window per doctor per date
-- =============================================================================
CREATE TABLE IF NOT EXISTS doctor_schedules (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    doctor_id INTEGER NOT NULL,

    date TEXT NOT NULL,        -- "2024-05-01"
    start_time TEXT NOT NULL,  -- "9:00 AM"
    end_time TEXT NOT NULL,    -- "5:00 PM"
    slot_duration INTEGER DEFAULT 30,

    FOREIGN KEY (doctor_id) REFERENCES users(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_schedules_doctor_date ON doctor_schedules(doctor_id, date);


-- =============================================================================
-- 3. APPOINTMENTS - Booked slots
-- =============================================================================
CREATE TABLE IF NOT EXISTS appointments (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    patient_id INTEGER NOT NULL,
    doctor_id INTEGER NOT NULL,

    -- Scheduling ("time" is a canonical slot label, e.g. "9:30 AM")
    date TEXT NOT NULL,
    time TEXT NOT NULL,
    reason TEXT,

    -- Status: scheduled, completed, cancelled, no-show
    status TEXT DEFAULT 'scheduled',

    created_at TEXT DEFAULT CURRENT_TIMESTAMP,

    FOREIGN KEY (patient_id) REFERENCES users(id) ON DELETE CASCADE,
    FOREIGN KEY (doctor_id) REFERENCES users(id) ON DELETE CASCADE
);

-- Cancelled rows are kept for history and no longer hold their slot
CREATE UNIQUE INDEX IF NOT EXISTS idx_appointments_live_slot
    ON appointments(doctor_id, date, time) WHERE status != 'cancelled';
CREATE INDEX IF NOT EXISTS idx_appointments_patient ON appointments(patient_id);
CREATE INDEX IF NOT EXISTS idx_appointments_doctor_date ON appointments(doctor_id, date);


-- =============================================================================
-- 4. MEDICINES - Pharmacy catalogue
-- =============================================================================
CREATE TABLE IF NOT EXISTS medicines (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT,
    price REAL NOT NULL,
    category TEXT,
    in_stock INTEGER DEFAULT 1,
    image_url TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_medicines_category ON medicines(category);


-- =============================================================================
-- 5. PRESCRIPTIONS - Issued by a doctor for one appointment
-- =============================================================================
CREATE TABLE IF NOT EXISTS prescriptions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    appointment_id INTEGER NOT NULL,
    doctor_id INTEGER NOT NULL,
    patient_id INTEGER NOT NULL,
    diagnosis TEXT,
    comments TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,

    FOREIGN KEY (appointment_id) REFERENCES appointments(id) ON DELETE CASCADE,
    FOREIGN KEY (doctor_id) REFERENCES users(id) ON DELETE CASCADE,
    FOREIGN KEY (patient_id) REFERENCES users(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_prescriptions_appointment ON prescriptions(appointment_id);
CREATE INDEX IF NOT EXISTS idx_prescriptions_doctor ON prescriptions(doctor_id);
CREATE INDEX IF NOT EXISTS idx_prescriptions_patient ON prescriptions(patient_id);

CREATE TABLE IF NOT EXISTS prescription_medicines (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    prescription_id INTEGER NOT NULL,
    medicine_id INTEGER NOT NULL,
    dosage TEXT,

    -- Time-of-day flags
    morning INTEGER DEFAULT 0,
    afternoon INTEGER DEFAULT 0,
    evening INTEGER DEFAULT 0,
    night INTEGER DEFAULT 0,

    before_meal INTEGER DEFAULT 0,
    after_meal INTEGER DEFAULT 0,
    comments TEXT,

    FOREIGN KEY (prescription_id) REFERENCES prescriptions(id) ON DELETE CASCADE,
    FOREIGN KEY (medicine_id) REFERENCES medicines(id) ON DELETE CASCADE
);


-- =============================================================================
-- 6. ORDERS - Medicine orders with a unit-price snapshot per item
-- =============================================================================
CREATE TABLE IF NOT EXISTS orders (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    patient_id INTEGER NOT NULL,
    total_amount REAL NOT NULL,

    -- Status: pending, processing, shipped, delivered, cancelled
    status TEXT DEFAULT 'pending',

    address TEXT,
    payment_method TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,

    FOREIGN KEY (patient_id) REFERENCES users(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_orders_patient ON orders(patient_id);

CREATE TABLE IF NOT EXISTS order_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    order_id INTEGER NOT NULL,
    medicine_id INTEGER NOT NULL,
    quantity INTEGER NOT NULL,
    price REAL NOT NULL,

    FOREIGN KEY (order_id) REFERENCES orders(id) ON DELETE CASCADE,
    FOREIGN KEY (medicine_id) REFERENCES medicines(id) ON DELETE CASCADE
);
"""
