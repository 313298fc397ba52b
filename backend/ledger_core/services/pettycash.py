import logging
from decimal import Decimal

from django.utils import timezone

from ..exceptions import InvalidInputError, NotFoundError
from ..models import Location, PettyCashAccount, PettyCashTransaction
from .audit_helper import log_action
from .codes import next_code
from .coordinator import atomic_unit, lock_active, resolve_active
from .validation import next_petty_cash_balance, to_decimal

logger = logging.getLogger(__name__)

# Optional keyword arguments copied onto the transaction row
TRANSACTION_METADATA_FIELDS = {
    "description", "category", "recipient_name", "receipt_number",
    "receipt_url", "approved_by", "notes",
}
# What update_petty_cash_account may change; balances are never edited
ACCOUNT_EDITABLE_FIELDS = {
    "name", "description", "max_limit", "min_balance", "location",
    "custodian", "custodian_name", "is_active",
}


def _optional_amount(value, field):
    if value is None or value == "":
        return None
    value = to_decimal(value, field)
    if value < 0:
        raise InvalidInputError(f"{field} cannot be negative.", field=field, value=value)
    return value


# ----------------------------
# Accounts
# ----------------------------
@atomic_unit
def create_petty_cash_account(company, name, *, user=None, initial_balance=0,
                              max_limit=None, min_balance=None, location=None,
                              custodian=None, custodian_name="", description="",
                              currency=None):
    initial = _optional_amount(initial_balance, "initial_balance") or Decimal("0.00")
    max_limit = _optional_amount(max_limit, "max_limit")
    min_balance = _optional_amount(min_balance, "min_balance")
    if max_limit is not None and initial > max_limit:
        raise InvalidInputError(
            f"Initial balance {initial} is above the max limit of {max_limit}.",
            field="initial_balance", value=initial)

    account = PettyCashAccount.objects.create(
        company=company,
        account_code=next_code(company, "PCA", width=3),
        name=name,
        description=description,
        currency=currency or company.currency_code,
        location=resolve_active(Location, company, location, "location"),
        initial_balance=initial,
        current_balance=initial,
        max_limit=max_limit,
        min_balance=min_balance,
        custodian=custodian,
        custodian_name=custodian_name or (custodian.get_full_name() if custodian else ""),
    )
    log_action(action="create", instance=account, user=user,
               changes={"initial_balance": initial})
    logger.info("Opened petty cash %s with %s", account.account_code, initial)
    return account


@atomic_unit
def update_petty_cash_account(company, account_code, *, user=None, **changes):
    """Edit account settings. Inactive accounts can be found here to reactivate them."""
    unknown = set(changes) - ACCOUNT_EDITABLE_FIELDS
    if unknown:
        raise InvalidInputError(
            f"Cannot update {', '.join(sorted(unknown))} on a petty cash account.",
            field=sorted(unknown)[0])

    account = (PettyCashAccount.objects.for_company(company)
               .select_for_update().filter(account_code=account_code).first())
    if account is None:
        raise NotFoundError(
            f"No petty cash account {account_code} in this company.",
            entity="PettyCashAccount", account_code=account_code)

    if "max_limit" in changes:
        changes["max_limit"] = _optional_amount(changes["max_limit"], "max_limit")
    if "min_balance" in changes:
        changes["min_balance"] = _optional_amount(changes["min_balance"], "min_balance")
    if "location" in changes:
        changes["location"] = resolve_active(Location, company, changes["location"], "location")

    for field, value in changes.items():
        setattr(account, field, value)
    account.save()

    log_action(action="update", instance=account, user=user,
               changes={key: str(value) for key, value in changes.items()})
    return account


# ----------------------------
# Transactions
# ----------------------------
@atomic_unit
def create_petty_cash_transaction(company, account_code, transaction_type, amount, *,
                                  user=None, transaction_date=None, **metadata):
    """
    Append one PettyCashTransaction and move the account balance with it.

    Returns ``(transaction, warning)``; ``warning`` is a message when the
    new balance sits below the account's min_balance, otherwise None.
    """
    unknown = set(metadata) - TRANSACTION_METADATA_FIELDS
    if unknown:
        raise InvalidInputError(
            f"Unexpected petty cash fields: {', '.join(sorted(unknown))}.",
            field=sorted(unknown)[0])

    # Row lock: two disbursements can't both spend the same balance
    account = lock_active(PettyCashAccount, company, account_code=account_code)
    before = account.current_balance
    after, warning = next_petty_cash_balance(
        transaction_type, before, amount,
        max_limit=account.max_limit, min_balance=account.min_balance,
    )

    txn = PettyCashTransaction.objects.create(
        company=company,
        transaction_code=next_code(company, "PCT"),
        account=account,
        transaction_type=transaction_type,
        # stored positive, the snapshot carries the direction
        amount=abs(to_decimal(amount)),
        balance_before=before,
        balance_after=after,
        transaction_date=transaction_date or timezone.localdate(),
        recorded_by=user,
        **{key: value for key, value in metadata.items() if value is not None},
    )

    account.current_balance = after
    account.save(update_fields=["current_balance", "updated_at"])

    log_action(
        action="record_petty_cash",
        instance=txn,
        user=user,
        changes={
            "account": account.account_code,
            "transaction_type": transaction_type,
            "amount": txn.amount,
            "balance_before": before,
            "balance_after": after,
        },
    )
    logger.info(
        "%s %s %s on %s: %s -> %s",
        txn.transaction_code, transaction_type, txn.amount, account.account_code, before, after,
    )
    if warning:
        logger.warning("%s: %s", account.account_code, warning)
    return txn, warning
