from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'users', views.AdminUserViewSet, basename='admin-user')

app_name = 'authentication'

urlpatterns = [
    path('', include(router.urls)),
]
