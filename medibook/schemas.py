"""Request bodies for the HTTP API.

Fields are optional at this layer so that missing values reach the services,
which report them as 400s in a fixed order.
"""

from pydantic import BaseModel, ConfigDict, Field

from medibook.hospital.database.order_repository import OrderItem
from medibook.hospital.database.prescription_repository import PrescribedMedicine


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class BookingRequest(CamelModel):
    patient_id: int | None = Field(None, alias="patientId")
    doctor_id: int | None = Field(None, alias="doctorId")
    date: str | None = None
    time: str | None = None
    reason: str | None = None


class StatusUpdate(CamelModel):
    status: str | None = None


class ScheduleCreate(CamelModel):
    date: str | None = None
    start_time: str | None = Field(None, alias="startTime")
    end_time: str | None = Field(None, alias="endTime")
    slot_duration: int | None = Field(None, alias="slotDuration")


class PrescribedMedicineIn(CamelModel):
    medicine_id: int | None = Field(None, alias="medicineId")
    dosage: str | None = ""
    morning: bool | None = False
    afternoon: bool | None = False
    evening: bool | None = False
    night: bool | None = False
    before_meal: bool | None = Field(False, alias="beforeMeal")
    after_meal: bool | None = Field(False, alias="afterMeal")
    comments: str | None = ""

    def to_line(self) -> PrescribedMedicine:
        return PrescribedMedicine(
            medicine_id=self.medicine_id,
            dosage=self.dosage or "",
            morning=bool(self.morning),
            afternoon=bool(self.afternoon),
            evening=bool(self.evening),
            night=bool(self.night),
            before_meal=bool(self.before_meal),
            after_meal=bool(self.after_meal),
            comments=self.comments or "",
        )


class PrescriptionCreate(CamelModel):
    appointment_id: int | None = Field(None, alias="appointmentId")
    doctor_id: int | None = Field(None, alias="doctorId")
    patient_id: int | None = Field(None, alias="patientId")
    diagnosis: str | None = None
    comments: str | None = None
    medicines: list[PrescribedMedicineIn] | None = None


class OrderItemIn(CamelModel):
    medicine_id: int | None = Field(None, alias="medicineId")
    quantity: int | None = None
    price: float | None = None

    def to_item(self) -> OrderItem:
        return OrderItem(medicine_id=self.medicine_id, quantity=self.quantity, price=self.price)


class OrderCreate(CamelModel):
    patient_id: int | None = Field(None, alias="patientId")
    items: list[OrderItemIn] | None = None
    total_amount: float | None = Field(None, alias="totalAmount")
    address: str | None = None
    payment_method: str | None = Field(None, alias="paymentMethod")
