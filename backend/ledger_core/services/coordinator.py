import logging
from functools import wraps

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from ..exceptions import (InvalidInputError, LedgerError, NotFoundError,
                          PersistenceError)

logger = logging.getLogger(__name__)


# ------------------------------------------------------
# One atomic unit per ledger write:
# movement row + balance update + audit row, or nothing
# ------------------------------------------------------
def atomically(fn, *args, **kwargs):
    """
    Run ``fn`` inside transaction.atomic() and translate failures.

    LedgerError subclasses propagate unchanged, model ValidationError
    (raised by full_clean in save()) becomes InvalidInputError and any
    DatabaseError becomes PersistenceError. Nothing is retried here.
    """
    name = getattr(fn, "__name__", repr(fn))
    try:
        with transaction.atomic():
            return fn(*args, **kwargs)
    except LedgerError as exc:
        logger.info("%s rejected: %s: %s", name, exc.kind, exc.message)
        raise
    except ValidationError as exc:
        detail = {}
        if hasattr(exc, "error_dict"):
            detail["field"] = next(iter(exc.error_dict))
        message = "; ".join(exc.messages)
        logger.info("%s rejected: validation_error: %s", name, message)
        raise InvalidInputError(message, **detail) from exc
    except DatabaseError as exc:
        logger.exception("%s failed in the database, rolled back", name)
        raise PersistenceError(
            "The operation could not be saved; nothing was committed.") from exc


def atomic_unit(fn):
    """Decorator form of atomically()."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        return atomically(fn, *args, **kwargs)
    return wrapper


def lock_active(model, company, **lookup):
    """
    Fetch and row-lock one active record of ``company``.

    The lock is held until the surrounding transaction ends; it is what
    serializes concurrent movements against the same balance.
    """
    try:
        return model.objects.select_for_update().get(
            company=company, is_active=True, **lookup)
    except model.DoesNotExist:
        wanted = ", ".join(f"{key}={value}" for key, value in lookup.items())
        raise NotFoundError(
            f"No active {model._meta.verbose_name} with {wanted} in this company.",
            entity=model.__name__, **lookup)


def resolve_active(model, company, value, field):
    """Accept an instance or a pk of an active ``model`` row of ``company``."""
    if value is None:
        return None
    pk = value.pk if isinstance(value, model) else value
    try:
        return model.objects.active(company).get(pk=pk)
    except (model.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(
            f"No active {model._meta.verbose_name} with id {pk} in this company.",
            entity=model.__name__, field=field, value=pk)
