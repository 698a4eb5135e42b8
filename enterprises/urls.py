# enterprises/urls.py
from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import EnterpriseViewSet, CustomerViewSet

app_name = 'enterprises'

router = SimpleRouter()
router.register(r'customers', CustomerViewSet, basename='customer')
router.register(r'', EnterpriseViewSet, basename='enterprise')

urlpatterns = [
    path('', include(router.urls)),
]
