from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import OrderCycleViewSet

app_name = 'order_cycles'

router = SimpleRouter()
router.register(r'', OrderCycleViewSet, basename='order-cycle')

urlpatterns = [
    path('', include(router.urls)),
]
