from __future__ import annotations

import logging

import requests
from django.shortcuts import get_object_or_404

from rest_framework import status, views
from rest_framework.response import Response

from accounts.permissions import Capability, capability_permission
from billing_engine.fx import parse_codes, refresh_fx
from billing_engine.fx_providers import load as load_fx_provider

from .errors import ValidationFailure
from .models import CurrencyExchangeRate
from .serializers import CurrencyExchangeRateSerializer, FxRefreshRequestSerializer

logger = logging.getLogger(__name__)

CanManageRates = capability_permission(Capability.MANAGE_EXCHANGE_RATES)


class ExchangeRateListView(views.APIView):
    permission_classes = [CanManageRates]

    def get(self, request):
        rates = CurrencyExchangeRate.objects.select_related("updated_by")
        return Response(CurrencyExchangeRateSerializer(rates, many=True).data)

    def post(self, request):
        ser = CurrencyExchangeRateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        rate = ser.save(source="manual", updated_by=request.user)
        logger.info("Exchange rate %s = %s added by %s", rate.currency_code, rate.rate_to_home, request.user.username)
        return Response(CurrencyExchangeRateSerializer(rate).data, status=status.HTTP_201_CREATED)


class ExchangeRateDetailView(views.APIView):
    permission_classes = [CanManageRates]

    def patch(self, request, rate_id: int):
        rate = get_object_or_404(CurrencyExchangeRate, pk=rate_id)
        ser = CurrencyExchangeRateSerializer(rate, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        rate = ser.save(source="manual", updated_by=request.user)
        logger.info("Exchange rate %s set to %s by %s", rate.currency_code, rate.rate_to_home, request.user.username)
        return Response(CurrencyExchangeRateSerializer(rate).data)

    def delete(self, request, rate_id: int):
        rate = get_object_or_404(CurrencyExchangeRate, pk=rate_id)
        code = rate.currency_code
        rate.delete()
        logger.info("Exchange rate %s deleted by %s", code, request.user.username)
        return Response(status=status.HTTP_204_NO_CONTENT)


class FxRefreshView(views.APIView):
    permission_classes = [CanManageRates]

    def post(self, request):
        ser = FxRefreshRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        try:
            codes = parse_codes(data["codes"])
            provider = load_fx_provider(data["provider"])
        except ValueError as exc:
            raise ValidationFailure(str(exc)) from exc
        if not codes:
            raise ValidationFailure("codes is required, e.g., ['USD','EUR']")

        try:
            summary = refresh_fx(codes, provider, updated_by=request.user)
        except (requests.RequestException, RuntimeError) as exc:
            logger.warning("FX provider %s failed: %s", data["provider"], exc)
            return Response(
                {"detail": f"FX provider {data['provider']} failed: {exc}"},
                status=status.HTTP_502_BAD_GATEWAY,
            )
        return Response({"updated": summary}, status=status.HTTP_200_OK)
