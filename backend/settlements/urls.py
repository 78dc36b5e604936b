from django.urls import path

from .views import SettlementListView, SettlementStatusView, UnsettledInvoicesView

urlpatterns = [
    path('', SettlementListView.as_view(), name='settlement-list'),
    path('unsettled', UnsettledInvoicesView.as_view(), name='settlement-unsettled'),
    path('<int:settlement_id>/status', SettlementStatusView.as_view(), name='settlement-status'),
]
