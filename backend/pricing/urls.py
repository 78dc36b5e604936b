from django.urls import path

from .views import DutyCalculatorView, RegionRatesView, ShippingQuoteView

urlpatterns = [
    path('quote', ShippingQuoteView.as_view(), name='pricing-quote'),
    path('duties', DutyCalculatorView.as_view(), name='pricing-duties'),
    path('region-rates', RegionRatesView.as_view(), name='pricing-region-rates'),
]
