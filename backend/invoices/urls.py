from django.urls import path

from .views import (
    InvoiceDetailView,
    InvoiceItemsView,
    InvoiceListView,
    InvoicePaymentView,
    InvoiceStatusView,
)

urlpatterns = [
    path('', InvoiceListView.as_view(), name='invoice-list'),
    path('<int:invoice_id>/', InvoiceDetailView.as_view(), name='invoice-detail'),
    path('<int:invoice_id>/status', InvoiceStatusView.as_view(), name='invoice-status'),
    path('<int:invoice_id>/items', InvoiceItemsView.as_view(), name='invoice-items'),
    path('<int:invoice_id>/items/<int:item_id>', InvoiceItemsView.as_view(), name='invoice-item-delete'),
    path('<int:invoice_id>/payments', InvoicePaymentView.as_view(), name='invoice-payments'),
]
