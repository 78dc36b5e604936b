from django.urls import path

from .views import BankAccountListView, PaymentRejectView, PaymentVerifyView, PendingPaymentsView

urlpatterns = [
    path('pending', PendingPaymentsView.as_view(), name='payments-pending'),
    path('bank-accounts', BankAccountListView.as_view(), name='payments-bank-accounts'),
    path('<int:payment_id>/verify', PaymentVerifyView.as_view(), name='payment-verify'),
    path('<int:payment_id>/reject', PaymentRejectView.as_view(), name='payment-reject'),
]
