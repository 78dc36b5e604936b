from __future__ import annotations

from rest_framework import views
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import is_staff_user

from .models import ContainerPricing, RegionPricing, VehiclePricing
from .serializers import (
    ContainerPricingSerializer,
    DutyRequestSerializer,
    QuoteRequestSerializer,
    RegionPricingSerializer,
    VehiclePricingSerializer,
    money_repr,
)
from .services.duty_calculator import calculate_duties, load_duty_rates
from .services.pricing_service import outlier_guard, quote_shipping, quote_unit_price


class ShippingQuoteView(views.APIView):
    """Public shipping calculator, per kg or a flat price per container or vehicle."""
    permission_classes = [AllowAny]

    def post(self, request):
        ser = QuoteRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        if data.get("weight_kg") is None:
            return Response(self._unit_quote(data))

        audience = data["audience"]
        # agent rates are only shown to agents and staff
        if audience == "agent" and not (getattr(request.user, "role", "") == "agent" or is_staff_user(request.user)):
            audience = "customer"

        cost = quote_shipping(data["region"], data["weight_kg"], audience=audience)
        ccy = cost.currency
        body = {
            "region": data["region"],
            "weight_kg": str(cost.weight_kg),
            "rate_per_kg": money_repr(cost.rate_per_kg, ccy),
            "subtotal": money_repr(cost.subtotal, ccy),
            "handling_fee": money_repr(cost.handling_fee, ccy),
            "total": money_repr(cost.total, ccy),
        }
        warning = outlier_guard(cost.rate_per_kg)
        if warning and is_staff_user(request.user):
            body["warnings"] = [warning]
        return Response(body)

    @staticmethod
    def _unit_quote(data) -> dict:
        quote = quote_unit_price(
            data["region"],
            container_size=data.get("container_size"),
            vehicle_type=data.get("vehicle_type"),
            shipping_method=data["shipping_method"],
        )
        body = {"region": data["region"], "unit": quote.unit}
        if quote.unit == "container":
            body["container_size"] = data["container_size"]
        else:
            body["vehicle_type"] = data["vehicle_type"]
            body["shipping_method"] = data["shipping_method"]
        body["total"] = money_repr(quote.rate_per_unit, quote.currency)
        return body


class DutyCalculatorView(views.APIView):
    """Public vehicle import duty calculator (amounts in home currency)."""
    permission_classes = [AllowAny]

    def post(self, request):
        ser = DutyRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        calc = calculate_duties(
            data["cif_value"],
            engine_cc=data.get("engine_cc"),
            vehicle_year=data.get("vehicle_year"),
            is_utility=data["is_utility"],
            rates=load_duty_rates(),
        )
        return Response({
            "cif_value": str(calc.cif_value),
            "import_duty": str(calc.import_duty),
            "excise_duty": str(calc.excise_duty),
            "old_vehicle_fee": str(calc.old_vehicle_fee),
            "dutiable_value": str(calc.dutiable_value),
            "vat": str(calc.vat),
            "registration_fees": str(calc.registration_fees),
            "total_duties": str(calc.total_duties),
            "total_landed_cost": str(calc.total_landed_cost),
            "breakdown": [
                {
                    "name": line.name,
                    "amount": str(line.amount),
                    "rate": str(line.rate) if line.rate is not None else None,
                }
                for line in calc.breakdown
            ],
        })


class RegionRatesView(views.APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        regions = RegionPricing.objects.filter(is_active=True, region__is_active=True).select_related("region")
        containers = ContainerPricing.objects.filter(is_active=True).select_related("region")
        vehicles = VehiclePricing.objects.filter(is_active=True).select_related("region")
        body = {
            "regions": RegionPricingSerializer(regions.order_by("region__display_order"), many=True).data,
            "containers": ContainerPricingSerializer(containers, many=True).data,
            "vehicles": VehiclePricingSerializer(vehicles, many=True).data,
        }
        if not is_staff_user(request.user) and request.user.role != "agent":
            for row in body["regions"]:
                row.pop("agent_rate_per_kg", None)
        return Response(body)
