from __future__ import annotations

from rest_framework import status, views
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import Capability, capability_permission, require
from core.errors import NotFound
from core.pagination import StandardResultsSetPagination
from invoices.serializers import InvoiceSerializer

from .serializers import (
    EstimateCreateSerializer,
    EstimateResponseSerializer,
    EstimateSerializer,
    EstimateStatusSerializer,
    EstimateUpdateSerializer,
)
from .services.conversion import convert_estimate_to_invoice
from .services.estimate_service import (
    create_estimate,
    delete_estimate,
    respond_to_estimate,
    set_estimate_status,
    update_estimate,
    visible_estimates,
)


def _visible_estimate(user, estimate_id: int):
    estimate = visible_estimates(user).filter(pk=estimate_id).first()
    if estimate is None:
        raise NotFound(f"Estimate {estimate_id} not found")
    return estimate


class EstimateListView(views.APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        qs = visible_estimates(request.user)
        status_filter = request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        customer_id = request.query_params.get("customer")
        if customer_id and customer_id.isdigit():
            qs = qs.filter(customer_id=int(customer_id))

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(qs.select_related("converted_to_invoice"), request, view=self)
        return paginator.get_paginated_response(EstimateSerializer(page, many=True).data)

    def post(self, request):
        require(request.user, Capability.MANAGE_ESTIMATES)
        ser = EstimateCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        estimate = create_estimate(ser.to_input(), created_by=request.user)
        return Response(EstimateSerializer(estimate).data, status=status.HTTP_201_CREATED)


class EstimateDetailView(views.APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, estimate_id: int):
        return Response(EstimateSerializer(_visible_estimate(request.user, estimate_id)).data)

    def patch(self, request, estimate_id: int):
        require(request.user, Capability.MANAGE_ESTIMATES)
        estimate = _visible_estimate(request.user, estimate_id)
        ser = EstimateUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        estimate = update_estimate(estimate, **ser.validated_data)
        return Response(EstimateSerializer(estimate).data)

    def delete(self, request, estimate_id: int):
        require(request.user, Capability.MANAGE_ESTIMATES)
        delete_estimate(_visible_estimate(request.user, estimate_id))
        return Response(status=status.HTTP_204_NO_CONTENT)


class EstimateStatusView(views.APIView):
    permission_classes = [capability_permission(Capability.MANAGE_ESTIMATES)]

    def post(self, request, estimate_id: int):
        ser = EstimateStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        estimate = set_estimate_status(
            _visible_estimate(request.user, estimate_id), ser.validated_data["status"], user=request.user
        )
        return Response(EstimateSerializer(estimate).data)


class EstimateConvertView(views.APIView):
    permission_classes = [capability_permission(Capability.CONVERT_ESTIMATES)]

    def post(self, request, estimate_id: int):
        invoice = convert_estimate_to_invoice(estimate_id, user=request.user, path="staff")
        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)


class EstimateRespondView(views.APIView):
    permission_classes = [capability_permission(Capability.RESPOND_TO_ESTIMATES)]

    def post(self, request, estimate_id: int):
        ser = EstimateResponseSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        estimate, invoice = respond_to_estimate(
            _visible_estimate(request.user, estimate_id),
            ser.validated_data["response"],
            user=request.user,
            comments=ser.validated_data.get("comments"),
        )
        body = {"estimate": EstimateSerializer(estimate).data}
        if invoice is not None:
            body["invoice"] = InvoiceSerializer(invoice).data
        return Response(body)
