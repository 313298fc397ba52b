import datetime
from decimal import Decimal

from ..models import AuditLog


def _jsonable(value):
    # JSONField can't store Decimal / date, keep their exact text
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (Decimal, datetime.date)):
        return str(value)
    return value


def log_action(*, action: str, instance, user=None, company=None, changes=None):
    """
    Append one AuditLog row for a ledger write.

    Must run inside the same atomic unit as the write it describes:
    a rolled back movement leaves no audit row behind.
    """
    AuditLog.objects.create(
        company=company or instance.company,
        user=user,
        action=action,
        object_type=type(instance).__name__,
        object_id=str(instance.pk),
        changes=_jsonable(changes) if changes else None,
    )
