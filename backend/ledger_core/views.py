import json

from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from . import operations
from .exceptions import LedgerError


def _payload(request):
    # JSON body from API clients, form-encoded body from plain HTML forms
    if request.method == "GET":
        return request.GET.dict()
    if request.content_type == "application/json":
        try:
            return json.loads(request.body or b"{}")
        except ValueError:
            return None
    return request.POST.dict()


def _run(request, operation):
    # request.company is attached by CurrentCompanyMiddleware
    company = getattr(request, "company", None)
    if company is None:
        return JsonResponse(
            {"ok": False, "error": {"kind": "forbidden",
                                    "message": "No active company for this user."}},
            status=403)

    payload = _payload(request)
    if not isinstance(payload, dict):
        return JsonResponse(
            {"ok": False, "error": {"kind": "validation_error",
                                    "message": "Request body must be a JSON object."}},
            status=400)

    # call the operation and map ledger errors to their status codes
    try:
        result = operation(company.pk, payload, user_id=request.user.pk)
    except LedgerError as e:
        return JsonResponse({"ok": False, "error": e.as_dict()}, status=e.status_code)
    return JsonResponse({"ok": True, **result})


@require_POST
def record_movement_view(request):
    return _run(request, operations.record_movement)


@require_POST
def record_payment_view(request):
    return _run(request, operations.record_payment)


@require_POST
def cancel_payment_view(request):
    return _run(request, operations.cancel_payment)


@require_POST
def petty_cash_transaction_view(request):
    return _run(request, operations.create_petty_cash_transaction)


@require_POST
def expense_status_view(request):
    return _run(request, operations.update_expense_status)


@require_GET
def summary_view(request, report):
    # report name comes from the URL, filters from the query string
    def summarize(company_id, payload, user_id=None):
        return operations.summarize(company_id, {**payload, "report": report}, user_id)
    return _run(request, summarize)
