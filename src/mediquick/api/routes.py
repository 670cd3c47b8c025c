"""FastAPI endpoints for the MediQuick domain.

Thin adapters that translate HTTP requests into domain commands and queries.
The caller is identified by the ``X-User-Id`` header set by the identity
provider in front of this service.
"""

from fastapi import APIRouter, Header, Query
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from mediquick.api.schemas import (
    AcceptCheckupResponse,
    AddProductRequest,
    AppointmentResponse,
    ApproveInstitutionRequest,
    ApproveSalespersonRequest,
    DonateRequest,
    HandoffResponse,
    IdResponse,
    IssueTokenRequest,
    OrderResponse,
    PlaceOrderRequest,
    PresentTokenRequest,
    ProductResponse,
    ProfileResponse,
    ReconciliationResponse,
    RequestCheckupRequest,
    SelectRoleRequest,
    TokenResponse,
    TransactionResponse,
)
from mediquick.appointment.acceptance import AcceptCheckup
from mediquick.appointment.appointment import AppointmentStatus
from mediquick.appointment.request import RequestCheckup
from mediquick.handoff.dispatch import claim_with_token, confirm_with_token
from mediquick.handoff.issuance import issue_token
from mediquick.ledger.donation import Donate
from mediquick.ledger.history import appointments_for, coin_history, order_history, reconcile
from mediquick.ledger.transaction import TransactionType
from mediquick.order.placement import PlaceOrder, PurchaseAsDoctor
from mediquick.product.creation import AddProduct, search_products
from mediquick.profile.access import find_profile
from mediquick.profile.approval import ApproveInstitution, ApproveSalesperson
from mediquick.profile.directory import approved_institutions, doctors
from mediquick.profile.profile import Profile, Role
from mediquick.profile.registration import SelectRole
from mediquick.utils.logging import bind_requester

profile_router = APIRouter(prefix="/profiles", tags=["profiles"])
product_router = APIRouter(prefix="/products", tags=["products"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
appointment_router = APIRouter(prefix="/appointments", tags=["appointments"])
handoff_router = APIRouter(prefix="/handoffs", tags=["handoffs"])
ledger_router = APIRouter(tags=["ledger"])


def _profile_response(profile) -> ProfileResponse:
    return ProfileResponse(
        user_id=str(profile.user_id),
        role=profile.role,
        name=profile.name,
        contact_number=profile.contact_number,
        address=profile.address,
        specialty=profile.specialty,
        approved=bool(profile.approved),
        coins=profile.coins,
    )


def _order_response(order) -> OrderResponse:
    return OrderResponse(
        id=str(order.id),
        product_id=str(order.product_id),
        product_name=order.product_name,
        price=order.price,
        customer_id=str(order.customer_id),
        salesperson_id=str(order.salesperson_id) if order.salesperson_id else None,
        status=order.status,
        order_date=order.order_date,
        picked_up_at=order.picked_up_at,
        delivered_date=order.delivered_date,
        qr_content=order.qr_content,
    )


def _appointment_response(appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=str(appointment.id),
        patient_id=str(appointment.patient_id),
        doctor_id=str(appointment.doctor_id),
        reason=appointment.reason,
        status=appointment.status,
        salesperson_id=str(appointment.salesperson_id) if appointment.salesperson_id else None,
        offered_on=appointment.offered_on,
        accepted_on=appointment.accepted_on,
        picked_up_at=appointment.picked_up_at,
        completed_on=appointment.completed_on,
        payment_confirmed=bool(appointment.payment_confirmed),
        qr_content=appointment.qr_content,
    )


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------
@profile_router.post("/role", status_code=201, response_model=IdResponse)
async def select_role(body: SelectRoleRequest, x_user_id: str = Header(...)) -> IdResponse:
    bind_requester(x_user_id)
    command = SelectRole(
        user_id=x_user_id,
        role=body.role,
        name=body.name,
        contact_number=body.contact_number,
        address=body.address,
        age=body.age,
        specialty=body.specialty,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@profile_router.post("/salespersons", status_code=201, response_model=IdResponse)
async def approve_salesperson(body: ApproveSalespersonRequest, x_user_id: str = Header(...)) -> IdResponse:
    bind_requester(x_user_id)
    command = ApproveSalesperson(
        admin_id=x_user_id,
        user_id=body.user_id,
        name=body.name,
        contact_number=body.contact_number,
        bank_details=body.bank_details,
        address=body.address,
        age=body.age,
        cnic=body.cnic,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@profile_router.post("/institutions", status_code=201, response_model=IdResponse)
async def approve_institution(body: ApproveInstitutionRequest, x_user_id: str = Header(...)) -> IdResponse:
    bind_requester(x_user_id)
    command = ApproveInstitution(
        admin_id=x_user_id,
        user_id=body.user_id,
        name=body.name,
        contact_number=body.contact_number,
        bank_details=body.bank_details,
        address=body.address,
        manager_id=body.manager_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@profile_router.get("/institutions", response_model=list[ProfileResponse])
async def list_institutions() -> list[ProfileResponse]:
    return [_profile_response(p) for p in approved_institutions()]


@profile_router.get("/doctors", response_model=list[ProfileResponse])
async def list_doctors() -> list[ProfileResponse]:
    return [_profile_response(p) for p in doctors()]


@profile_router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(user_id: str) -> ProfileResponse:
    profile = current_domain.repository_for(Profile).get(user_id)
    return _profile_response(profile)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
@product_router.post("", status_code=201, response_model=IdResponse)
async def add_product(body: AddProductRequest, x_user_id: str = Header(...)) -> IdResponse:
    bind_requester(x_user_id)
    command = AddProduct(
        admin_id=x_user_id,
        name=body.name,
        price=body.price,
        serial_number=body.serial_number,
        coins_assigned=body.coins_assigned,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@product_router.get("", response_model=list[ProductResponse])
async def list_products(name: str | None = None) -> list[ProductResponse]:
    return [
        ProductResponse(
            id=str(p.id),
            name=p.name,
            price=p.price,
            serial_number=p.serial_number,
            coins_assigned=p.coins_assigned or 0,
        )
        for p in search_products(name)
    ]


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
@order_router.post("", status_code=201, response_model=IdResponse)
async def place_order(body: PlaceOrderRequest, x_user_id: str = Header(...)) -> IdResponse:
    bind_requester(x_user_id)
    result = current_domain.process(
        PlaceOrder(customer_id=x_user_id, product_id=body.product_id),
        asynchronous=False,
    )
    return IdResponse(id=result)


@order_router.post("/doctor-purchase", status_code=201, response_model=IdResponse)
async def purchase_as_doctor(body: PlaceOrderRequest, x_user_id: str = Header(...)) -> IdResponse:
    bind_requester(x_user_id)
    result = current_domain.process(
        PurchaseAsDoctor(doctor_id=x_user_id, product_id=body.product_id),
        asynchronous=False,
    )
    return IdResponse(id=result)


@order_router.post("/{order_id}/tokens", response_model=TokenResponse)
async def issue_order_token(order_id: str, body: IssueTokenRequest, x_user_id: str = Header(...)) -> TokenResponse:
    bind_requester(x_user_id)
    return TokenResponse(token=issue_token("order", order_id, x_user_id, body.salesperson_id))


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(x_user_id: str = Header(...)) -> list[OrderResponse]:
    return [_order_response(order) for order in order_history(x_user_id)]


# ---------------------------------------------------------------------------
# Appointments
# ---------------------------------------------------------------------------
@appointment_router.post("", status_code=201, response_model=IdResponse)
async def request_checkup(body: RequestCheckupRequest, x_user_id: str = Header(...)) -> IdResponse:
    bind_requester(x_user_id)
    result = current_domain.process(
        RequestCheckup(patient_id=x_user_id, doctor_id=body.doctor_id, reason=body.reason),
        asynchronous=False,
    )
    return IdResponse(id=result)


@appointment_router.put("/{appointment_id}/accept", response_model=AcceptCheckupResponse)
async def accept_checkup(appointment_id: str, x_user_id: str = Header(...)) -> AcceptCheckupResponse:
    bind_requester(x_user_id)
    token = current_domain.process(
        AcceptCheckup(appointment_id=appointment_id, doctor_id=x_user_id),
        asynchronous=False,
    )
    return AcceptCheckupResponse(status=AppointmentStatus.ACCEPTED.value, token=token)


@appointment_router.post("/{appointment_id}/tokens", response_model=TokenResponse)
async def issue_appointment_token(appointment_id: str, x_user_id: str = Header(...)) -> TokenResponse:
    bind_requester(x_user_id)
    return TokenResponse(token=issue_token("appointment", appointment_id, x_user_id))


@appointment_router.get("", response_model=list[AppointmentResponse])
async def list_appointments(x_user_id: str = Header(...)) -> list[AppointmentResponse]:
    profile = find_profile(x_user_id)
    if profile is None:
        return []
    return [_appointment_response(a) for a in appointments_for(x_user_id, Role(profile.role))]


# ---------------------------------------------------------------------------
# Hand-offs
# ---------------------------------------------------------------------------
@handoff_router.post("/claim", response_model=HandoffResponse)
async def claim(body: PresentTokenRequest, x_user_id: str = Header(...)) -> HandoffResponse:
    bind_requester(x_user_id)
    token, status = claim_with_token(body.token, x_user_id)
    return HandoffResponse(record_kind=token.record_kind, record_id=token.record_id, status=status)


@handoff_router.post("/confirm", response_model=HandoffResponse)
async def confirm(body: PresentTokenRequest, x_user_id: str = Header(...)) -> HandoffResponse:
    bind_requester(x_user_id)
    token, status = confirm_with_token(body.token, x_user_id)
    return HandoffResponse(record_kind=token.record_kind, record_id=token.record_id, status=status)


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------
@ledger_router.post("/donations", status_code=201, response_model=IdResponse)
async def donate(body: DonateRequest, x_user_id: str = Header(...)) -> IdResponse:
    bind_requester(x_user_id)
    result = current_domain.process(
        Donate(donor_id=x_user_id, institution_id=body.institution_id, amount=body.amount),
        asynchronous=False,
    )
    return IdResponse(id=result)


@ledger_router.get("/ledger/history", response_model=list[TransactionResponse])
async def ledger_history(
    x_user_id: str = Header(...),
    type_filter: str | None = Query(None, alias="type"),
) -> list[TransactionResponse]:
    try:
        transaction_type = TransactionType(type_filter) if type_filter else None
    except ValueError:
        raise ValidationError({"type": [f"Unknown transaction type {type_filter}"]}) from None
    return [
        TransactionResponse(
            id=str(t.id),
            type=t.transaction_type,
            amount=t.amount,
            source_id=str(t.source_id),
            target_id=str(t.target_id),
            date=t.date,
            description=t.description,
            order_id=str(t.order_id) if t.order_id else None,
            patient_offer_id=str(t.patient_offer_id) if t.patient_offer_id else None,
        )
        for t in coin_history(x_user_id, transaction_type)
    ]


@ledger_router.get("/ledger/reconciliation", response_model=ReconciliationResponse)
async def ledger_reconciliation(x_user_id: str = Header(...)) -> ReconciliationResponse:
    report = reconcile(x_user_id)
    return ReconciliationResponse(
        user_id=report.user_id,
        balance=report.balance,
        ledger_total=report.ledger_total,
        balanced=report.balanced,
    )
