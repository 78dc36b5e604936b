from __future__ import annotations

from rest_framework import views
from rest_framework.response import Response

from accounts.permissions import Capability, capability_permission
from core.pagination import StandardResultsSetPagination

from .models import BankAccount
from .serializers import (
    BankAccountSerializer,
    PaymentRejectSerializer,
    PaymentSerializer,
    PaymentVerifySerializer,
)
from .services.payment_service import pending_payments, reject_payment, verify_payment

CanVerifyPayments = capability_permission(Capability.VERIFY_PAYMENTS)


class PendingPaymentsView(views.APIView):
    """Verification queue, oldest first."""
    permission_classes = [CanVerifyPayments]

    def get(self, request):
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(pending_payments(), request, view=self)
        return paginator.get_paginated_response(PaymentSerializer(page, many=True).data)


class BankAccountListView(views.APIView):
    permission_classes = [CanVerifyPayments]

    def get(self, request):
        accounts = BankAccount.objects.filter(is_active=True)
        return Response(BankAccountSerializer(accounts, many=True).data)


class PaymentVerifyView(views.APIView):
    permission_classes = [CanVerifyPayments]

    def post(self, request, payment_id: int):
        ser = PaymentVerifySerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        payment = verify_payment(
            payment_id,
            deposit_account=ser.validated_data.get("deposit_account"),
            verified_by=request.user,
            notes=ser.validated_data.get("notes"),
        )
        return Response(PaymentSerializer(payment).data)


class PaymentRejectView(views.APIView):
    permission_classes = [CanVerifyPayments]

    def post(self, request, payment_id: int):
        ser = PaymentRejectSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        payment = reject_payment(payment_id, rejected_by=request.user, reason=ser.validated_data["reason"])
        return Response(PaymentSerializer(payment).data)
