from django.core.exceptions import ValidationError
from django.db.models import QuerySet
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .models import Company, Payment, PettyCashTransaction, StockMovement

""" Movements are the ledger: once written they are never deleted.
    Payments are undone by cancel_payment, stock and petty cash by a
    correcting movement. Balance entities themselves are protected by
    their PROTECT foreign keys and are soft deleted via is_active. """


def _tenant_teardown(origin):
    # Deleting a whole company takes its ledgers with it
    if isinstance(origin, QuerySet):
        return origin.model is Company
    return isinstance(origin, Company)


# pre_delete signal auto-fires just before Django deletes a model instance
@receiver(pre_delete, sender=StockMovement)
@receiver(pre_delete, sender=Payment)
@receiver(pre_delete, sender=PettyCashTransaction)
def prevent_delete_movement(sender, instance, origin=None, **kwargs):
    if _tenant_teardown(origin):
        return
    raise ValidationError(
        f"{sender.__name__} {instance} is part of the ledger and cannot be deleted.")
