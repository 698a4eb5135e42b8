# tag_rules/urls.py
from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import TagRuleViewSet

app_name = 'tag_rules'

router = SimpleRouter()
router.register(r'', TagRuleViewSet, basename='tag-rule')

urlpatterns = [
    path('', include(router.urls)),
]
