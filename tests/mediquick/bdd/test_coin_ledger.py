"""BDD tests for donations and coin history."""

from mediquick.ledger.donation import Donate
from mediquick.ledger.history import coin_history
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/coin_ledger.feature")


@given(parsers.cfparse('"{donor_id}" donated {amount:d} coins to "{institution_id}" {days:d} days ago'))
def donated_earlier(clock, donor_id, amount, institution_id, days):
    today = clock.now()
    clock.advance(days=-days)
    current_domain.process(
        Donate(donor_id=donor_id, institution_id=institution_id, amount=amount),
        asynchronous=False,
    )
    clock.set(today)


@when(parsers.cfparse('"{donor_id}" donates {amount:d} coins to "{institution_id}"'))
def donates(error, donor_id, amount, institution_id):
    try:
        current_domain.process(
            Donate(donor_id=donor_id, institution_id=institution_id, amount=amount),
            asynchronous=False,
        )
    except ValidationError as exc:
        error["exc"] = exc


@then(parsers.cfparse('the coin history of "{user_id}" lists {amounts}'))
def history_lists(user_id, amounts):
    expected = [int(a) for a in amounts.split(",")]
    assert [t.amount for t in coin_history(user_id)] == expected
