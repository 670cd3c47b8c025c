"""Pydantic request/response schemas for the MediQuick API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Request Schemas ---


class SelectRoleRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"role": "customer", "name": "Ayesha Khan", "contact_number": "+92-300-1234567"}]
        }
    }

    role: str = Field(..., max_length=20)
    name: str | None = Field(None, max_length=255)
    contact_number: str | None = Field(None, max_length=50)
    address: str | None = Field(None, max_length=500)
    age: int | None = Field(None, ge=0)
    specialty: str | None = Field(None, max_length=255)


class ApproveSalespersonRequest(BaseModel):
    user_id: str = Field(..., max_length=255)
    name: str = Field(..., max_length=255)
    contact_number: str | None = Field(None, max_length=50)
    bank_details: str | None = Field(None, max_length=255)
    address: str | None = Field(None, max_length=500)
    age: int | None = Field(None, ge=0)
    cnic: str | None = Field(None, max_length=50)


class ApproveInstitutionRequest(BaseModel):
    user_id: str = Field(..., max_length=255)
    name: str = Field(..., max_length=255)
    contact_number: str | None = Field(None, max_length=50)
    bank_details: str | None = Field(None, max_length=255)
    address: str | None = Field(None, max_length=500)
    manager_id: str | None = Field(None, max_length=255)


class AddProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"name": "Paracetamol 500mg", "price": 10.0, "serial_number": "PX-500", "coins_assigned": 5}]
        }
    }

    name: str = Field(..., max_length=255)
    price: float = Field(..., ge=0)
    serial_number: str | None = Field(None, max_length=100)
    coins_assigned: int = Field(0, ge=0)


class PlaceOrderRequest(BaseModel):
    product_id: str


class IssueTokenRequest(BaseModel):
    """Only needed when a customer hands an order to a salesperson for pickup."""

    salesperson_id: str | None = None


class RequestCheckupRequest(BaseModel):
    doctor_id: str
    reason: str = Field(..., min_length=1)


class PresentTokenRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"token": '{"orderId":"ord-1","salespersonId":"sp-1"}'}]}}

    token: str


class DonateRequest(BaseModel):
    institution_id: str
    amount: int


# --- Response Schemas ---


class IdResponse(BaseModel):
    id: str


class TokenResponse(BaseModel):
    token: str


class AcceptCheckupResponse(BaseModel):
    status: str
    token: str


class HandoffResponse(BaseModel):
    record_kind: str
    record_id: str
    status: str


class ProfileResponse(BaseModel):
    user_id: str
    role: str
    name: str | None = None
    contact_number: str | None = None
    address: str | None = None
    specialty: str | None = None
    approved: bool = False
    coins: int | None = None


class ProductResponse(BaseModel):
    id: str
    name: str
    price: float
    serial_number: str | None = None
    coins_assigned: int = 0


class OrderResponse(BaseModel):
    id: str
    product_id: str
    product_name: str | None = None
    price: float | None = None
    customer_id: str
    salesperson_id: str | None = None
    status: str
    order_date: datetime | None = None
    picked_up_at: datetime | None = None
    delivered_date: datetime | None = None
    qr_content: str | None = None


class AppointmentResponse(BaseModel):
    id: str
    patient_id: str
    doctor_id: str
    reason: str
    status: str
    salesperson_id: str | None = None
    offered_on: datetime | None = None
    accepted_on: datetime | None = None
    picked_up_at: datetime | None = None
    completed_on: datetime | None = None
    payment_confirmed: bool = False
    qr_content: str | None = None


class TransactionResponse(BaseModel):
    id: str
    type: str
    amount: int
    source_id: str
    target_id: str
    date: datetime
    description: str | None = None
    order_id: str | None = None
    patient_offer_id: str | None = None


class ReconciliationResponse(BaseModel):
    user_id: str
    balance: int
    ledger_total: int
    balanced: bool


class ErrorResponse(BaseModel):
    error: str
    messages: dict[str, list[str]]
