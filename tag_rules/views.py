# tag_rules/views.py
from rest_framework.viewsets import ModelViewSet
from rest_framework.permissions import IsAuthenticated
from utils.helpers import parse_uuid_list
from utils.permissions import IsEnterpriseManager, ManagesObjectEnterprise
from .models import TagRule
from .serializers import TagRuleSerializer


class TagRuleViewSet(ModelViewSet):
    """Tag rules of the enterprises the requesting user manages"""
    serializer_class = TagRuleSerializer
    permission_classes = [IsAuthenticated, IsEnterpriseManager, ManagesObjectEnterprise]

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return TagRule.objects.none()

        queryset = TagRule.objects.select_related('enterprise').filter(
            enterprise__in=self.request.user.managed_enterprises()
        )
        enterprise_ids = parse_uuid_list(self.request.query_params.getlist('enterprise_id'))
        if enterprise_ids:
            queryset = queryset.filter(enterprise_id__in=enterprise_ids)
        return queryset
