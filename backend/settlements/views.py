from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models import Q
from rest_framework import status, views
from rest_framework.response import Response

from accounts.permissions import Capability, capability_permission
from core.errors import NotFound, ValidationFailure
from core.pagination import StandardResultsSetPagination
from invoices.serializers import InvoiceSerializer

from .serializers import SettlementCreateSerializer, SettlementSerializer, SettlementStatusSerializer
from .services.settlement_service import (
    create_settlement,
    unsettled_invoices,
    update_settlement_status,
    visible_settlements,
)

CanManageSettlements = capability_permission(Capability.MANAGE_SETTLEMENTS)


class SettlementListView(views.APIView):
    permission_classes = [CanManageSettlements]

    def get(self, request):
        qs = visible_settlements(request.user).prefetch_related("items__invoice")
        status_filter = request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        agent_filter = request.query_params.get("agent")
        if agent_filter and agent_filter.isdigit():
            qs = qs.filter(agent_id=int(agent_filter))
        search = (request.query_params.get("search") or "").strip()
        if search:
            qs = qs.filter(
                Q(settlement_number__icontains=search)
                | Q(agent__username__icontains=search)
                | Q(agent__first_name__icontains=search)
                | Q(agent__last_name__icontains=search)
            )
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        return paginator.get_paginated_response(SettlementSerializer(page, many=True).data)

    def post(self, request):
        ser = SettlementCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        settlement = create_settlement(
            data["agent"],
            data["invoice_ids"],
            created_by=request.user,
            settlement_type=data["settlement_type"],
            currency=data.get("currency"),
            period_start=data.get("period_start"),
            period_end=data.get("period_end"),
            notes=data.get("notes"),
        )
        return Response(SettlementSerializer(settlement).data, status=status.HTTP_201_CREATED)


class UnsettledInvoicesView(views.APIView):
    """Paid invoices of one agent that no open settlement holds yet."""
    permission_classes = [CanManageSettlements]

    def get(self, request):
        if request.user.role == "agent":
            agent = request.user
        else:
            agent_id = request.query_params.get("agent")
            if not agent_id or not agent_id.isdigit():
                raise ValidationFailure("agent query parameter is required")
            agent = get_user_model().objects.filter(pk=int(agent_id), role="agent").first()
            if agent is None:
                raise NotFound(f"Agent {agent_id} not found")
        return Response(InvoiceSerializer(unsettled_invoices(agent), many=True).data)


class SettlementStatusView(views.APIView):
    permission_classes = [capability_permission(Capability.APPROVE_SETTLEMENTS)]

    def post(self, request, settlement_id: int):
        settlement = visible_settlements(request.user).filter(pk=settlement_id).first()
        if settlement is None:
            raise NotFound(f"Settlement {settlement_id} not found")
        ser = SettlementStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        settlement = update_settlement_status(
            settlement,
            ser.validated_data["status"],
            user=request.user,
            payment_reference=ser.validated_data.get("payment_reference"),
        )
        return Response(SettlementSerializer(settlement).data)
