from django.urls import path

from .views import ExchangeRateDetailView, ExchangeRateListView, FxRefreshView

urlpatterns = [
    path('rates', ExchangeRateListView.as_view(), name='fx-rates'),
    path('rates/<int:rate_id>', ExchangeRateDetailView.as_view(), name='fx-rate-detail'),
    path('refresh', FxRefreshView.as_view(), name='fx-refresh'),
]
