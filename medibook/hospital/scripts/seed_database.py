"""Seed the database with mock doctors, patients, schedules and medicines."""

from dataclasses import replace
from datetime import datetime, timedelta

from medibook.hospital.database import Database, MedicineRepository, UserRepository
from medibook.hospital.database.medicine_repository import Medicine
from medibook.hospital.database.user_repository import User
from medibook.schedules import ScheduleService


MOCK_DOCTORS = [
    User(id=None, name="Dr. Sarah Chen", email="dr.chen@medibook.com", role="doctor",
         phone="415-555-0201", specialization="General Medicine"),
    User(id=None, name="Dr. Michael Roberts", email="dr.roberts@medibook.com", role="doctor",
         phone="510-555-0202", specialization="Cardiology"),
    User(id=None, name="Dr. Emily Watson", email="dr.watson@medibook.com", role="doctor",
         phone="408-555-0203", specialization="Dermatology"),
    User(id=None, name="Dr. James Park", email="dr.park@medibook.com", role="doctor",
         phone="510-555-0204", specialization="Orthopedics"),
]

MOCK_PATIENTS = [
    User(id=None, name="John Smith", email="john.smith@email.com", role="patient", phone="555-0101"),
    User(id=None, name="Sarah Johnson", email="sarah.j@email.com", role="patient", phone="555-0102"),
    User(id=None, name="Michael Chen", email="m.chen@email.com", role="patient", phone="555-0103"),
]

MOCK_ADMIN = User(id=None, name="Admin", email="admin@medibook.com", role="admin")

# (start, end, slot minutes) per doctor, by position in MOCK_DOCTORS
WORKING_HOURS = [
    ("9:00 AM", "5:00 PM", 30),
    ("8:00 AM", "12:00 PM", 20),
    ("10:00 AM", "4:00 PM", 30),
    ("1:00 PM", "6:00 PM", 45),
]

SAMPLE_MEDICINES = [
    ("Paracetamol", "For fever and pain relief", 5.99, "Pain Relief"),
    ("Amoxicillin", "Antibiotic for bacterial infections", 12.99, "Antibiotics"),
    ("Omeprazole", "For acid reflux and ulcers", 8.49, "Stomach"),
    ("Cetirizine", "Antihistamine for allergies", 7.29, "Allergy"),
    ("Aspirin", "Blood thinner and pain reliever", 4.59, "Pain Relief"),
    ("Albuterol", "For asthma and COPD", 15.99, "Respiratory"),
    ("Metformin", "For type 2 diabetes", 9.99, "Diabetes"),
    ("Atorvastatin", "For high cholesterol", 14.29, "Cholesterol"),
    ("Lisinopril", "For high blood pressure", 10.99, "Blood Pressure"),
    ("Sertraline", "For depression and anxiety", 18.49, "Mental Health"),
    ("Ibuprofen", "For pain and inflammation", 6.79, "Pain Relief"),
    ("Levothyroxine", "For thyroid disorders", 12.59, "Thyroid"),
    ("Simvastatin", "For high cholesterol", 13.79, "Cholesterol"),
    ("Metoprolol", "For high blood pressure and heart conditions", 11.99, "Blood Pressure"),
    ("Losartan", "For high blood pressure", 10.49, "Blood Pressure"),
    ("Allopurinol", "For gout and kidney stones", 8.99, "Gout"),
    ("Furosemide", "Diuretic for fluid retention", 7.49, "Diuretic"),
    ("Fluoxetine", "For depression and OCD", 16.99, "Mental Health"),
    ("Warfarin", "Blood thinner", 9.29, "Blood Thinner"),
    ("Ciprofloxacin", "Antibiotic for bacterial infections", 13.99, "Antibiotics"),
    ("Ranitidine", "For stomach acid reduction", 7.99, "Stomach"),
    ("Escitalopram", "For depression and anxiety", 17.29, "Mental Health"),
    ("Loratadine", "For allergies", 6.29, "Allergy"),
    ("Montelukast", "For asthma and allergies", 14.79, "Respiratory"),
    ("Doxycycline", "Antibiotic for various infections", 11.29, "Antibiotics"),
    ("Gabapentin", "For nerve pain and seizures", 13.49, "Pain Relief"),
    ("Hydrochlorothiazide", "Diuretic for high blood pressure", 8.79, "Blood Pressure"),
    ("Tramadol", "For moderate to severe pain", 12.29, "Pain Relief"),
    ("Azithromycin", "Antibiotic for bacterial infections", 15.49, "Antibiotics"),
    ("Prednisone", "Corticosteroid for inflammation", 9.79, "Anti-inflammatory"),
]

DEFAULT_PASSWORD = "password123"


def seed_users(users: UserRepository, mock_users: list[User]) -> list[User]:
    """Create users that don't exist yet and return all of them with IDs."""
    seeded = []
    for user in mock_users:
        existing = users.get_by_email(user.email)
        if existing:
            print(f"  Skipping {user.name} (already exists)")
            seeded.append(existing)
        else:
            seeded.append(users.create(replace(user), DEFAULT_PASSWORD))
            print(f"  Created {user.name}")
    return seeded


def seed_database(db: Database | None = None, days: int = 14):
    """Initialize and seed the database with mock data."""
    db = db or Database()
    print("Initializing database...")
    db.init()

    users = UserRepository(db)
    medicines = MedicineRepository(db)
    schedules = ScheduleService(db)

    print("Creating mock doctors...")
    doctors = seed_users(users, MOCK_DOCTORS)

    print("Creating mock patients...")
    seed_users(users, MOCK_PATIENTS)
    seed_users(users, [MOCK_ADMIN])

    # Sample catalogue only goes into an empty table
    print("Creating sample medicines...")
    if medicines.count() > 0:
        print(f"  Skipping medicines ({medicines.count()} already exist)")
    else:
        for name, description, price, category in SAMPLE_MEDICINES:
            medicines.create(Medicine(id=None, name=name, price=price,
                                      description=description, category=category))
        print(f"  Created {len(SAMPLE_MEDICINES)} medicines")

    # Weekday schedules for the next `days` days
    print("Creating doctor schedules...")
    start_date = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
    total_schedules = 0

    for doctor, (start_time, end_time, duration) in zip(doctors, WORKING_HOURS):
        if schedules.list_schedules(doctor.id):
            print(f"  Skipping schedules for {doctor.name} (already exist)")
            continue

        created = 0
        current = start_date
        for _ in range(days):
            if current.weekday() < 5:
                schedules.add_schedule(
                    doctor.id, current.strftime("%Y-%m-%d"), start_time, end_time, duration
                )
                created += 1
            current += timedelta(days=1)
        total_schedules += created
        print(f"  Created {created} schedules for {doctor.name}")

    print("\nDatabase seeded successfully!")
    print(f"  - {len(MOCK_DOCTORS)} doctors")
    print(f"  - {len(MOCK_PATIENTS)} patients")
    print(f"  - {medicines.count()} medicines")
    print(f"  - {total_schedules} schedules")


if __name__ == "__main__":
    seed_database()
