"""Shared BDD fixtures and step definitions for the MediQuick domain."""

import pytest
from mediquick.ledger.transaction import Transaction
from mediquick.product.creation import AddProduct
from mediquick.profile.access import find_profile
from mediquick.profile.approval import ApproveInstitution, ApproveSalesperson
from mediquick.profile.registration import GrantAdmin, SelectRole
from protean import current_domain
from pytest_bdd import given, parsers, then

ADMIN_ID = "admin-bdd"


@pytest.fixture()
def error():
    """Container for the error raised by the last When step."""
    return {"exc": None}


@pytest.fixture()
def scene():
    """Ids and tokens handed from one step to the next."""
    return {"products": {}, "tokens": {}}


def process(command):
    return current_domain.process(command, asynchronous=False)


def _admin():
    if find_profile(ADMIN_ID) is None:
        process(GrantAdmin(user_id=ADMIN_ID, name="Operator"))
    return ADMIN_ID


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a customer "{user_id}"'))
def a_customer(user_id):
    process(SelectRole(user_id=user_id, role="customer", name=user_id))


@given(parsers.cfparse('a doctor "{user_id}"'))
def a_doctor(user_id):
    process(SelectRole(user_id=user_id, role="doctor", name=user_id))


@given(parsers.cfparse('an approved salesperson "{user_id}"'))
def an_approved_salesperson(user_id):
    process(ApproveSalesperson(admin_id=_admin(), user_id=user_id, name=user_id))


@given(parsers.cfparse('an approved institution "{user_id}"'))
def an_approved_institution(user_id):
    process(ApproveInstitution(admin_id=_admin(), user_id=user_id, name=user_id))


@given(parsers.cfparse('a product "{name}" priced {price:f} worth {coins:d} coins'))
def a_product(scene, name, price, coins):
    scene["products"][name] = process(AddProduct(admin_id=_admin(), name=name, price=price, coins_assigned=coins))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the request succeeds")
def request_succeeds(error):
    assert error["exc"] is None, f"Unexpected error: {error['exc']!r}"


@then(parsers.cfparse('the request fails with "{error_name}"'))
def request_fails(error, error_name):
    assert error["exc"] is not None, "Expected the request to fail"
    assert type(error["exc"]).__name__ == error_name


@then(parsers.cfparse('"{user_id}" has {coins:d} coins'))
def has_coins(user_id, coins):
    assert find_profile(user_id).coins == coins


@then(parsers.cfparse('the ledger holds {count:d} "{kind}" entries for "{user_id}"'))
def ledger_holds(count, kind, user_id):
    entries = current_domain.repository_for(Transaction)._dao.query.filter(target_id=user_id).all().items
    assert len([e for e in entries if e.transaction_type == kind]) == count
