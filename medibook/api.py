"""HTTP API for availability, booking, prescriptions and medicine orders."""

import logging
from contextlib import asynccontextmanager
from dataclasses import asdict
from pathlib import Path

from fastapi import APIRouter, Depends, FastAPI, File, Form, Query, Request, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from medibook import config
from medibook.availability import AvailabilityService
from medibook.booking import BookingService
from medibook.catalogue import CatalogueService
from medibook.doctor_dashboard import DoctorDashboard
from medibook.errors import MediBookError, NotFoundError, StoreError, ValidationError, public_message
from medibook.hospital.database import (
    AppointmentRepository,
    Database,
    DoctorRepository,
    MedicineRepository,
    OrderRepository,
    PrescriptionRepository,
)
from medibook.lifecycle import LifecycleManager
from medibook.prescription_scanner import PrescriptionScanner, store_upload
from medibook.schedules import ScheduleService
from medibook.schemas import BookingRequest, OrderCreate, PrescriptionCreate, ScheduleCreate, StatusUpdate

logger = logging.getLogger(__name__)

# =============================================================================
# Dependencies
# =============================================================================

def get_db(request: Request) -> Database:
    return request.app.state.db

def get_availability_service(db: Database = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)

def get_booking_service(db: Database = Depends(get_db)) -> BookingService:
    return BookingService(db)

def get_lifecycle_manager(db: Database = Depends(get_db)) -> LifecycleManager:
    return LifecycleManager(db)

def get_schedule_service(db: Database = Depends(get_db)) -> ScheduleService:
    return ScheduleService(db)

def get_catalogue_service(db: Database = Depends(get_db)) -> CatalogueService:
    return CatalogueService(db)

def get_doctor_dashboard(db: Database = Depends(get_db)) -> DoctorDashboard:
    return DoctorDashboard(db)

def get_scanner(request: Request) -> PrescriptionScanner:
    return request.app.state.scanner

# =============================================================================
# Availability and appointments
# =============================================================================

appointments_router = APIRouter(tags=["Appointments"])

@appointments_router.get("/availability")
def get_availability(
    doctor_id: int | None = Query(None, alias="doctorId"),
    date: str | None = Query(None),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Free slots for a doctor on a date."""
    if not doctor_id or not date:
        raise ValidationError("Doctor ID and date are required")
    return service.get_availability(doctor_id, date).to_dict()

@appointments_router.post("/appointments", status_code=201)
def book_appointment(
    body: BookingRequest,
    service: BookingService = Depends(get_booking_service),
):
    appointment = service.book_appointment(
        patient_id=body.patient_id,
        doctor_id=body.doctor_id,
        date=body.date,
        time=body.time,
        reason=body.reason,
    )
    return asdict(appointment)

@appointments_router.get("/appointments/patient/{patient_id}")
def list_patient_appointments(patient_id: int, db: Database = Depends(get_db)):
    return AppointmentRepository(db).list_for_patient(patient_id)

@appointments_router.get("/appointments/doctor/{doctor_id}")
def list_doctor_appointments(
    doctor_id: int,
    date: str | None = Query(None),
    db: Database = Depends(get_db),
):
    return AppointmentRepository(db).list_for_doctor(doctor_id, date)

@appointments_router.get("/appointments/{appointment_id}")
def get_appointment(appointment_id: int, db: Database = Depends(get_db)):
    appointment = AppointmentRepository(db).get_details(appointment_id)
    if not appointment:
        raise NotFoundError("Appointment not found")
    return appointment

@appointments_router.put("/appointments/{appointment_id}/status")
def update_appointment_status(
    appointment_id: int,
    body: StatusUpdate,
    manager: LifecycleManager = Depends(get_lifecycle_manager),
):
    status = manager.update_appointment_status(appointment_id, body.status)
    return {"message": "Appointment status updated", "status": status.value}

@appointments_router.delete("/appointments/{appointment_id}")
def cancel_appointment(
    appointment_id: int,
    manager: LifecycleManager = Depends(get_lifecycle_manager),
):
    manager.cancel_appointment(appointment_id)
    return {"message": "Appointment cancelled successfully"}

# =============================================================================
# Doctors and schedules
# =============================================================================

doctors_router = APIRouter(prefix="/doctors", tags=["Doctors"])

@doctors_router.get("")
def list_doctors(
    specialization: str | None = Query(None),
    db: Database = Depends(get_db),
):
    return [asdict(d) for d in DoctorRepository(db).find_doctors(specialization)]

@doctors_router.get("/{doctor_id}")
def get_doctor(doctor_id: int, db: Database = Depends(get_db)):
    doctor = DoctorRepository(db).get_by_id(doctor_id)
    if not doctor:
        raise NotFoundError("Doctor not found")
    return asdict(doctor)

@doctors_router.get("/{doctor_id}/dashboard")
def get_dashboard(
    doctor_id: int,
    date: str | None = Query(None),
    dashboard: DoctorDashboard = Depends(get_doctor_dashboard),
):
    """Today's and upcoming appointments, recent patients and pending prescriptions."""
    return dashboard.summary(doctor_id, today=date)

@doctors_router.get("/{doctor_id}/patient-history/{patient_id}")
def get_patient_history(
    doctor_id: int,
    patient_id: int,
    dashboard: DoctorDashboard = Depends(get_doctor_dashboard),
):
    return dashboard.patient_history(doctor_id, patient_id)

@doctors_router.get("/{doctor_id}/schedules")
def list_schedules(doctor_id: int, service: ScheduleService = Depends(get_schedule_service)):
    return [asdict(s) for s in service.list_schedules(doctor_id)]

@doctors_router.post("/{doctor_id}/schedules", status_code=201)
def add_schedule(
    doctor_id: int,
    body: ScheduleCreate,
    service: ScheduleService = Depends(get_schedule_service),
):
    schedule = service.add_schedule(
        doctor_id,
        date=body.date,
        start_time=body.start_time,
        end_time=body.end_time,
        slot_duration=body.slot_duration,
    )
    return asdict(schedule)

@doctors_router.delete("/{doctor_id}/schedules/{schedule_id}")
def delete_schedule(
    doctor_id: int,
    schedule_id: int,
    service: ScheduleService = Depends(get_schedule_service),
):
    service.delete_schedule(doctor_id, schedule_id)
    return {"message": "Schedule deleted successfully"}

# =============================================================================
# Prescriptions
# =============================================================================

prescriptions_router = APIRouter(prefix="/prescriptions", tags=["Prescriptions"])

@prescriptions_router.post("", status_code=201)
def create_prescription(
    body: PrescriptionCreate,
    manager: LifecycleManager = Depends(get_lifecycle_manager),
):
    prescription = manager.create_prescription(
        appointment_id=body.appointment_id,
        doctor_id=body.doctor_id,
        patient_id=body.patient_id,
        medicines=[m.to_line() for m in body.medicines or []],
        diagnosis=body.diagnosis,
        comments=body.comments,
    )
    return {"id": prescription.id, "message": "Prescription created successfully"}

@prescriptions_router.get("/appointment/{appointment_id}")
def get_appointment_prescription(appointment_id: int, db: Database = Depends(get_db)):
    return PrescriptionRepository(db).get_for_appointment(appointment_id)

@prescriptions_router.get("/doctor/{doctor_id}")
def list_doctor_prescriptions(doctor_id: int, db: Database = Depends(get_db)):
    return PrescriptionRepository(db).list_for_doctor(doctor_id)

@prescriptions_router.get("/patient/{patient_id}")
def list_patient_prescriptions(patient_id: int, db: Database = Depends(get_db)):
    return PrescriptionRepository(db).list_for_patient(patient_id)

@prescriptions_router.get("/{prescription_id}")
def get_prescription(prescription_id: int, db: Database = Depends(get_db)):
    prescription = PrescriptionRepository(db).get_details(prescription_id)
    if not prescription:
        raise NotFoundError("Prescription not found")
    return prescription

# =============================================================================
# Orders
# =============================================================================

orders_router = APIRouter(prefix="/orders", tags=["Orders"])

@orders_router.post("", status_code=201)
def create_order(
    body: OrderCreate,
    manager: LifecycleManager = Depends(get_lifecycle_manager),
):
    order = manager.create_order(
        patient_id=body.patient_id,
        items=[i.to_item() for i in body.items or []],
        total_amount=body.total_amount,
        address=body.address,
        payment_method=body.payment_method,
    )
    return {"id": order.id, "message": "Order created successfully"}

@orders_router.get("/patient/{patient_id}")
def list_patient_orders(patient_id: int, db: Database = Depends(get_db)):
    return OrderRepository(db).list_for_patient(patient_id)

@orders_router.get("/{order_id}")
def get_order(order_id: int, db: Database = Depends(get_db)):
    order = OrderRepository(db).get_details(order_id)
    if not order:
        raise NotFoundError("Order not found")
    return order

@orders_router.put("/{order_id}/status")
def update_order_status(
    order_id: int,
    body: StatusUpdate,
    manager: LifecycleManager = Depends(get_lifecycle_manager),
):
    status = manager.update_order_status(order_id, body.status)
    return {"message": "Order status updated", "status": status.value}

# =============================================================================
# Medicines
# =============================================================================

medicines_router = APIRouter(prefix="/medicines", tags=["Medicines"])

@medicines_router.get("")
def list_medicines(
    category: str | None = Query(None),
    search: str | None = Query(None),
    db: Database = Depends(get_db),
):
    return [asdict(m) for m in MedicineRepository(db).find_medicines(category, search)]

@medicines_router.get("/categories/all")
def list_categories(db: Database = Depends(get_db)):
    return MedicineRepository(db).get_categories()

@medicines_router.get("/{medicine_id}")
def get_medicine(medicine_id: int, db: Database = Depends(get_db)):
    medicine = MedicineRepository(db).get_by_id(medicine_id)
    if not medicine:
        raise NotFoundError("Medicine not found")
    return asdict(medicine)

@medicines_router.post("/extract-prescription")
def extract_prescription(
    request: Request,
    image: UploadFile | None = File(None, alias="prescriptionImage"),
    db: Database = Depends(get_db),
    scanner: PrescriptionScanner = Depends(get_scanner),
):
    """Read a prescription image and return the catalogue medicines it names."""
    if image is None:
        raise ValidationError("No image uploaded")

    data = image.file.read()
    image_url = store_upload(data, image.filename, request.app.state.upload_dir)
    result = scanner.scan(data, MedicineRepository(db).find_medicines(), image.content_type or "image/png")
    return {
        "success": True,
        "image_url": image_url,
        "extracted_text": result.extracted_text,
        "matched_medicines": result.matched_medicines,
    }

# =============================================================================
# Admin
# =============================================================================

admin_router = APIRouter(prefix="/admin", tags=["Admin"])

@admin_router.get("/orders")
def list_all_orders(db: Database = Depends(get_db)):
    """Every order, newest first, with the patient's name and email."""
    return OrderRepository(db).list_all()

@admin_router.post("/medicines", status_code=201)
def add_medicine(
    request: Request,
    name: str | None = Form(None),
    price: float | None = Form(None),
    description: str | None = Form(None),
    category: str | None = Form(None),
    in_stock: bool | None = Form(None, alias="inStock"),
    image: UploadFile | None = File(None),
    service: CatalogueService = Depends(get_catalogue_service),
):
    image_url = None
    if image is not None:
        image_url = store_upload(image.file.read(), image.filename, request.app.state.upload_dir)

    medicine = service.add_medicine(
        name=name,
        price=price,
        description=description,
        category=category,
        in_stock=in_stock,
        image_url=image_url,
    )
    return asdict(medicine)

@admin_router.put("/medicines/{medicine_id}")
def update_medicine(
    medicine_id: int,
    request: Request,
    name: str | None = Form(None),
    price: float | None = Form(None),
    description: str | None = Form(None),
    category: str | None = Form(None),
    in_stock: bool | None = Form(None, alias="inStock"),
    image: UploadFile | None = File(None),
    service: CatalogueService = Depends(get_catalogue_service),
):
    """Change the submitted fields of a medicine; omitted fields keep their value."""
    image_url = None
    if image is not None:
        image_url = store_upload(image.file.read(), image.filename, request.app.state.upload_dir)

    medicine = service.update_medicine(
        medicine_id,
        name=name,
        price=price,
        description=description,
        category=category,
        in_stock=in_stock,
        image_url=image_url,
    )
    return asdict(medicine)

@admin_router.delete("/medicines/{medicine_id}")
def delete_medicine(medicine_id: int, service: CatalogueService = Depends(get_catalogue_service)):
    service.delete_medicine(medicine_id)
    return {"message": "Medicine deleted successfully"}

# =============================================================================
# Application
# =============================================================================

def create_app(
    db: Database | None = None,
    scanner: PrescriptionScanner | None = None,
    upload_dir: Path | None = None,
) -> FastAPI:
    """Build the API around one Database handle for the app's lifetime."""
    db = db or Database()
    upload_dir = upload_dir or config.UPLOAD_DIR

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application starting up...")
        db.init()
        yield
        logger.info("Application shutting down...")

    app = FastAPI(title="MediBook API", version="1.0.0", lifespan=lifespan)
    app.state.db = db
    app.state.scanner = scanner or PrescriptionScanner()
    app.state.upload_dir = upload_dir

    @app.exception_handler(MediBookError)
    async def service_error_handler(request: Request, exc: MediBookError):
        # Store failures were already logged with their traceback
        if exc.status_code >= 500 and not isinstance(exc, StoreError):
            logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"message": public_message(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error for %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
        )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(appointments_router)
    app.include_router(doctors_router)
    app.include_router(prescriptions_router)
    app.include_router(orders_router)
    app.include_router(medicines_router)
    app.include_router(admin_router)
    app.mount("/uploads", StaticFiles(directory=upload_dir, check_dir=False), name="uploads")

    return app
