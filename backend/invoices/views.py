from __future__ import annotations

from rest_framework import status, views
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import Capability, capability_permission, require
from core.errors import AuthorizationDenied, NotFound
from core.pagination import StandardResultsSetPagination
from payments.serializers import PaymentSerializer, PaymentSubmitSerializer
from payments.services.payment_service import submit_payment

from .serializers import (
    InvoiceCreateSerializer,
    InvoiceItemSerializer,
    InvoiceSerializer,
    InvoiceStatusSerializer,
)
from .services.invoice_service import (
    add_invoice_item,
    create_invoice,
    remove_invoice_item,
    update_invoice_status,
    visible_invoices,
)


def _visible_invoice(user, invoice_id: int):
    invoice = visible_invoices(user).filter(pk=invoice_id).first()
    if invoice is None:
        raise NotFound(f"Invoice {invoice_id} not found")
    return invoice


class InvoiceListView(views.APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = visible_invoices(request.user).prefetch_related("items")
        status_filter = request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        agent_id = request.query_params.get("agent")
        if agent_id and agent_id.isdigit():
            qs = qs.filter(agent_id=int(agent_id))

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        return paginator.get_paginated_response(InvoiceSerializer(page, many=True).data)

    def post(self, request):
        require(request.user, Capability.MANAGE_INVOICES)
        ser = InvoiceCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        agent = data.get("agent")
        # agents raise invoices only on their own account
        if request.user.role == "agent":
            if agent is not None and agent.pk != request.user.pk:
                raise AuthorizationDenied("Agents can only create their own invoices")
            agent = request.user
        invoice = create_invoice(
            currency=data["currency"],
            items=data["items"],
            created_by=request.user,
            customer=data.get("customer"),
            agent=agent,
            shipment=data.get("shipment"),
            invoice_type=data["invoice_type"],
            invoice_direction=data.get("invoice_direction"),
            due_date=data.get("due_date"),
            notes=data.get("notes"),
        )
        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)


class InvoiceDetailView(views.APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, invoice_id: int):
        return Response(InvoiceSerializer(_visible_invoice(request.user, invoice_id)).data)


class InvoiceStatusView(views.APIView):
    permission_classes = [capability_permission(Capability.MANAGE_INVOICES)]

    def post(self, request, invoice_id: int):
        ser = InvoiceStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        invoice = update_invoice_status(
            _visible_invoice(request.user, invoice_id), ser.validated_data["status"], user=request.user
        )
        return Response(InvoiceSerializer(invoice).data)


class InvoiceItemsView(views.APIView):
    permission_classes = [capability_permission(Capability.MANAGE_INVOICES)]

    def post(self, request, invoice_id: int):
        invoice = _visible_invoice(request.user, invoice_id)
        ser = InvoiceItemSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        item = add_invoice_item(invoice, **ser.validated_data)
        return Response(InvoiceItemSerializer(item).data, status=status.HTTP_201_CREATED)

    def delete(self, request, invoice_id: int, item_id: int):
        remove_invoice_item(_visible_invoice(request.user, invoice_id), item_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class InvoicePaymentView(views.APIView):
    permission_classes = [capability_permission(Capability.SUBMIT_PAYMENTS)]

    def post(self, request, invoice_id: int):
        invoice = _visible_invoice(request.user, invoice_id)
        ser = PaymentSubmitSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        payment = submit_payment(invoice, payer=request.user, **ser.validated_data)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)
