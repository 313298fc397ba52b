import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task
def verify_company_ledgers(company_id):
    """Recompute one company's balances from movements and log any drift."""
    # import lazily to avoid circular imports at module import time
    from .models import Company
    from .services import verify_ledgers

    company = Company.objects.get(pk=company_id)
    problems = verify_ledgers(company)
    if problems:
        logger.warning("Company %s has %s ledger discrepancies", company.slug, len(problems))
    else:
        logger.info("Company %s ledgers balance", company.slug)
    # Celery results must be serializable
    return [
        {key: str(value) for key, value in problem.items()}
        for problem in problems
    ]


@shared_task
def verify_all_ledgers():
    """Fan out one verification task per active company."""
    from .models import Company

    company_ids = list(Company.objects.filter(is_active=True).values_list("pk", flat=True))
    for company_id in company_ids:
        verify_company_ledgers.delay(company_id)
    return len(company_ids)


@shared_task
def mark_overdue_documents(company_id):
    """Move unpaid invoices and bills past their due date to OVERDUE."""
    from .models import Company
    from .services import mark_overdue

    return mark_overdue(Company.objects.get(pk=company_id))


@shared_task
def mark_all_overdue_documents():
    from .models import Company

    company_ids = list(Company.objects.filter(is_active=True).values_list("pk", flat=True))
    for company_id in company_ids:
        mark_overdue_documents.delay(company_id)
    return len(company_ids)
