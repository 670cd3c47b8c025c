from datetime import UTC, datetime

import pytest
from protean import current_domain


@pytest.fixture(scope="session")
def _mediquick_domain():
    """Initialize the mediquick domain once per session."""
    from mediquick.domain import mediquick

    mediquick.init()
    return mediquick


@pytest.fixture(scope="session", autouse=True)
def setup_db(_mediquick_domain):
    from mediquick.utils.db import drop_db, setup_db

    setup_db(_mediquick_domain)

    yield

    drop_db(_mediquick_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_mediquick_domain):
    """Push domain context before each test, cleanup after."""
    from mediquick.shared.clock import reset_clock

    ctx = _mediquick_domain.domain_context()
    ctx.push()

    yield

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    reset_clock()
    ctx.pop()


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------
@pytest.fixture()
def clock():
    from mediquick.shared.clock import FixedClock, set_clock

    fixed = FixedClock(datetime(2025, 3, 10, 9, 0, tzinfo=UTC))
    set_clock(fixed)
    return fixed


# ---------------------------------------------------------------------------
# Parties
# ---------------------------------------------------------------------------
@pytest.fixture()
def admin():
    from mediquick.profile.registration import GrantAdmin

    return current_domain.process(GrantAdmin(user_id="admin-1", name="Root"), asynchronous=False)


@pytest.fixture()
def customer():
    from mediquick.profile.registration import SelectRole

    return current_domain.process(
        SelectRole(user_id="cust-1", role="customer", name="Ayesha Khan"),
        asynchronous=False,
    )


@pytest.fixture()
def other_customer():
    from mediquick.profile.registration import SelectRole

    return current_domain.process(
        SelectRole(user_id="cust-2", role="customer", name="Bilal Ahmed"),
        asynchronous=False,
    )


@pytest.fixture()
def doctor():
    from mediquick.profile.registration import SelectRole

    return current_domain.process(
        SelectRole(user_id="doc-1", role="doctor", name="Dr. Sana Malik", specialty="Cardiology"),
        asynchronous=False,
    )


def _approve_salesperson(admin_id, user_id, name):
    from mediquick.profile.approval import ApproveSalesperson

    return current_domain.process(
        ApproveSalesperson(admin_id=admin_id, user_id=user_id, name=name, cnic="35202-0000000-1"),
        asynchronous=False,
    )


@pytest.fixture()
def salesperson(admin):
    return _approve_salesperson(admin, "sp-1", "Usman Tariq")


@pytest.fixture()
def other_salesperson(admin):
    return _approve_salesperson(admin, "sp-2", "Hina Raza")


@pytest.fixture()
def institution(admin):
    from mediquick.profile.approval import ApproveInstitution

    return current_domain.process(
        ApproveInstitution(admin_id=admin, user_id="inst-1", name="Edhi Foundation"),
        asynchronous=False,
    )


@pytest.fixture()
def product(admin):
    from mediquick.product.creation import AddProduct

    return current_domain.process(
        AddProduct(admin_id=admin, name="Paracetamol 500mg", price=10.0, serial_number="PX-500", coins_assigned=5),
        asynchronous=False,
    )


@pytest.fixture()
def free_product(admin):
    from mediquick.product.creation import AddProduct

    return current_domain.process(
        AddProduct(admin_id=admin, name="Face Mask", price=2.5, coins_assigned=0),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Records part-way through their lifecycle
# ---------------------------------------------------------------------------
@pytest.fixture()
def placed_order(customer, product):
    from mediquick.order.placement import PlaceOrder

    return current_domain.process(PlaceOrder(customer_id=customer, product_id=product), asynchronous=False)


@pytest.fixture()
def pickup_token(placed_order, customer, salesperson):
    from mediquick.handoff.issuance import issue_token

    return issue_token("order", placed_order, customer, salesperson)


@pytest.fixture()
def order_in_delivery(placed_order, pickup_token, salesperson):
    from mediquick.order.pickup import ClaimOrder

    current_domain.process(
        ClaimOrder(order_id=placed_order, salesperson_id=salesperson, token=pickup_token),
        asynchronous=False,
    )
    return placed_order


@pytest.fixture()
def delivery_token(order_in_delivery, salesperson):
    from mediquick.handoff.issuance import issue_token

    return issue_token("order", order_in_delivery, salesperson)


@pytest.fixture()
def pending_appointment(customer, doctor):
    from mediquick.appointment.request import RequestCheckup

    return current_domain.process(
        RequestCheckup(patient_id=customer, doctor_id=doctor, reason="Chest pain"),
        asynchronous=False,
    )


@pytest.fixture()
def accepted_appointment(pending_appointment, doctor):
    """An accepted appointment id together with the doctor's claim token."""
    from mediquick.appointment.acceptance import AcceptCheckup

    token = current_domain.process(
        AcceptCheckup(appointment_id=pending_appointment, doctor_id=doctor),
        asynchronous=False,
    )
    return pending_appointment, token


@pytest.fixture()
def assigned_appointment(accepted_appointment, salesperson):
    from mediquick.appointment.assignment import ClaimAppointment

    appointment_id, doctor_token = accepted_appointment
    current_domain.process(
        ClaimAppointment(appointment_id=appointment_id, salesperson_id=salesperson, token=doctor_token),
        asynchronous=False,
    )
    return appointment_id


@pytest.fixture()
def completion_token(assigned_appointment, salesperson):
    from mediquick.handoff.issuance import issue_token

    return issue_token("appointment", assigned_appointment, salesperson)
