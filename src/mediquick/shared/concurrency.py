"""Exclusive writes for fulfillment records and balances.

Orders, appointments and profiles use Protean's aggregate ``_version``. A
write that loaded an older version than the one stored fails with
``ExpectedVersionError``, which surfaces here as ``Conflict``, or as
``AlreadyAssigned`` when a claim lost to another salesperson.

The version check and the write only form one step while nobody else can
change the record in between:

- SQL providers: ``lock_for_update`` takes the row lock before the record is
  loaded and holds it until the unit of work commits.
- Memory provider: a unit of work runs on a snapshot of the whole store that
  replaces the store on commit, so ``exclusive`` runs write commands one at a
  time, unit of work included.
"""

import functools
import threading

from protean import UnitOfWork, current_uow
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.reflection import id_field

from mediquick.shared.errors import AlreadyAssigned, Conflict
from mediquick.utils.logging import get_logger

logger = get_logger(__name__)

_memory_writes = threading.RLock()


def _uses_memory_store(aggregate_cls=None) -> bool:
    if aggregate_cls is None:
        provider = current_domain.providers["default"]
    else:
        provider = current_domain.repository_for(aggregate_cls)._dao.provider
    return provider.__database__ == "memory"


def exclusive(handler):
    """Serialize a command handler, including its unit of work, on the memory provider.

    Stack it above ``@handle``; ``functools.wraps`` carries the handler's
    command registration across.
    """

    @functools.wraps(handler)
    def wrapper(instance, command):
        if not _uses_memory_store():
            return handler(instance, command)
        with _memory_writes:
            return handler(instance, command)

    return wrapper


def lock_for_update(aggregate_cls, identifier: str) -> None:
    """Hold the stored row of ``identifier`` until the current unit of work ends.

    Call before loading a record that is about to change. Does nothing on
    the memory provider or outside a unit of work.
    """
    if not (current_uow and current_uow.in_progress) or _uses_memory_store(aggregate_cls):
        return

    dao = current_domain.repository_for(aggregate_cls)._dao
    session = dao._get_session()
    key = id_field(aggregate_cls).attribute_name
    session.query(dao.database_model_cls).filter_by(**{key: identifier}).with_for_update().first()


def load_for_update(aggregate_cls, identifier: str):
    lock_for_update(aggregate_cls, identifier)
    return current_domain.repository_for(aggregate_cls).get(identifier)


def save_versioned(aggregate, claim: bool = False) -> None:
    """Persist ``aggregate`` unless the stored version moved on since it was loaded.

    ``claim`` marks first-claim-wins edges: losing against a record that now
    has a salesperson raises ``AlreadyAssigned`` rather than ``Conflict``.
    """
    repo = current_domain.repository_for(type(aggregate))
    identifier = str(getattr(aggregate, id_field(aggregate).field_name))
    loaded_version = aggregate._version

    try:
        if current_uow and current_uow.in_progress:
            repo.add(aggregate)
        else:
            with UnitOfWork():
                repo.add(aggregate)
    except ExpectedVersionError as exc:
        logger.warning(
            "stale_write_rejected",
            aggregate=type(aggregate).__name__,
            identifier=identifier,
            loaded_version=loaded_version,
        )
        if claim and _claimed_by_someone(repo, identifier):
            raise AlreadyAssigned(
                {"salesperson_id": ["Record has already been claimed by another salesperson"]}
            ) from exc
        raise Conflict({"_version": [f"Record {identifier} was modified concurrently ({exc})"]}) from exc


def _claimed_by_someone(repo, identifier: str) -> bool:
    try:
        stored = repo._dao.get(identifier)
    except ObjectNotFoundError:
        return False
    return bool(getattr(stored, "salesperson_id", None))
