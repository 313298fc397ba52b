from django.urls import path

from . import views

app_name = "ledger"

urlpatterns = [
    path("movements/", views.record_movement_view, name="record-movement"),
    path("payments/", views.record_payment_view, name="record-payment"),
    path("payments/cancel/", views.cancel_payment_view, name="cancel-payment"),
    path("petty-cash/transactions/", views.petty_cash_transaction_view,
         name="petty-cash-transaction"),
    path("expenses/status/", views.expense_status_view, name="expense-status"),
    path("summaries/<slug:report>/", views.summary_view, name="summary"),
]
