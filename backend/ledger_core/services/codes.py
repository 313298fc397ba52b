from ..models import CodeSequence


# ----------------------------------------
# Sequential human-readable codes per tenant
# ----------------------------------------
def next_code(company, prefix: str, width: int = 4) -> str:
    """
    Issue the next code for ``prefix`` in ``company`` (e.g. "PAY0007").

    Must run inside transaction.atomic(): the counter row stays locked
    until the caller's transaction ends, so concurrent callers queue on it
    and a rolled back movement gives its number back.
    """
    seq, _ = CodeSequence.objects.select_for_update().get_or_create(
        company=company, prefix=prefix
    )
    seq.last_value += 1
    seq.save(update_fields=["last_value"])
    return f"{prefix}{seq.last_value:0{width}d}"
