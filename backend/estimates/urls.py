from django.urls import path

from .views import (
    EstimateConvertView,
    EstimateDetailView,
    EstimateListView,
    EstimateRespondView,
    EstimateStatusView,
)

urlpatterns = [
    path('', EstimateListView.as_view(), name='estimate-list'),
    path('<int:estimate_id>/', EstimateDetailView.as_view(), name='estimate-detail'),
    path('<int:estimate_id>/status', EstimateStatusView.as_view(), name='estimate-status'),
    path('<int:estimate_id>/convert', EstimateConvertView.as_view(), name='estimate-convert'),
    path('<int:estimate_id>/respond', EstimateRespondView.as_view(), name='estimate-respond'),
]
