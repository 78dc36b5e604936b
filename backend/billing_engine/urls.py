from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/pricing/', include('pricing.urls')),
    path('api/estimates/', include('estimates.urls')),
    path('api/invoices/', include('invoices.urls')),
    path('api/payments/', include('payments.urls')),
    path('api/settlements/', include('settlements.urls')),
    path('api/performance/', include('performance.urls')),
    path('api/fx/', include('core.urls')),
]
