# enterprises/views.py
from rest_framework import status
from rest_framework.viewsets import ModelViewSet
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from catalog.criteria import TagsIntersect
from utils.helpers import parse_uuid_list
from utils.permissions import IsAdmin, IsAdminOrReadOnly, IsEnterpriseManager, ManagesObjectEnterprise
from .models import Enterprise, EnterpriseRole, Customer
from .serializers import (
    EnterpriseSerializer,
    EnterpriseCreateUpdateSerializer,
    ManagerAssignmentSerializer,
    CustomerSerializer,
)
import logging

logger = logging.getLogger(__name__)


class EnterpriseViewSet(ModelViewSet):
    queryset = Enterprise.objects.select_related('owner').all()
    permission_classes = [IsAdminOrReadOnly]

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return EnterpriseCreateUpdateSerializer
        if self.action in ['assign_manager', 'unassign_manager']:
            return ManagerAssignmentSerializer
        return EnterpriseSerializer

    def create(self, request, *args, **kwargs):
        serializer = EnterpriseCreateUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        enterprise = serializer.save()
        logger.info(f"Enterprise {enterprise.name} created by {request.user.email}")
        return Response(EnterpriseSerializer(enterprise).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = EnterpriseCreateUpdateSerializer(self.get_object(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        enterprise = serializer.save()
        return Response(EnterpriseSerializer(enterprise).data)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def assign_manager(self, request, pk=None):
        enterprise = self.get_object()
        serializer = ManagerAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data['user_id']

        _, created = EnterpriseRole.objects.get_or_create(user=user, enterprise=enterprise)
        if not created:
            return Response(
                {"error": "User already manages this enterprise"},
                status=status.HTTP_400_BAD_REQUEST
            )

        logger.info(f"{user.email} assigned as manager of {enterprise.name}")
        return Response({"message": "Manager assigned successfully"}, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], permission_classes=[IsAdmin])
    def unassign_manager(self, request, pk=None):
        enterprise = self.get_object()
        serializer = ManagerAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data['user_id']

        deleted, _ = EnterpriseRole.objects.filter(user=user, enterprise=enterprise).delete()
        if not deleted:
            return Response(
                {"error": "User does not manage this enterprise"},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response({"message": "Manager unassigned successfully"}, status=status.HTTP_200_OK)


class CustomerViewSet(ModelViewSet):
    """Customers of the enterprises the requesting user manages"""
    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated, IsEnterpriseManager, ManagesObjectEnterprise]

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return Customer.objects.none()

        queryset = Customer.objects.select_related('enterprise', 'user').filter(
            enterprise__in=self.request.user.managed_enterprises()
        )
        enterprise_ids = parse_uuid_list(self.request.query_params.getlist('enterprise_id'))
        if enterprise_ids:
            queryset = queryset.filter(enterprise_id__in=enterprise_ids)
        tags = self.request.query_params.get('tags')
        if tags:
            queryset = queryset.filter(TagsIntersect(tags).to_q())
        return queryset
