# reports/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import ReportExportViewSet, OrdersAndFulfillmentsReportView

app_name = 'reports'

router = DefaultRouter()
router.register(r'exports', ReportExportViewSet, basename='export')

urlpatterns = [
    path('', include(router.urls)),
    path(
        'orders_and_fulfillments/',
        OrdersAndFulfillmentsReportView.as_view(),
        name='orders-and-fulfillments'
    ),
]
