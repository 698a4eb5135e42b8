# authentication/views.py
from rest_framework.viewsets import ModelViewSet
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework import status
from rest_framework_simplejwt.tokens import RefreshToken
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db.models import Q, ProtectedError
from django.utils.translation import gettext as _
from authentication.exceptions import DestroyWithOrdersError
from authentication.filters import UserFilterSet
from authentication.serializers import (
    UserBasicSerializer, UserSerializer, UserDetailSerializer, UserCreateUpdateSerializer
)
from utils.constants import DEFAULT_USER_SEARCH_LIMIT
from utils.permissions import IsAdmin
import logging

logger = logging.getLogger(__name__)

User = get_user_model()


class AdminUsersPagination(PageNumberPagination):
    page_size = settings.ADMIN_USERS_PER_PAGE
    page_size_query_param = 'per_page'
    max_page_size = 100


class AdminUserViewSet(ModelViewSet):
    """
    Platform user management for admins.

    The list endpoint serves two callers: the admin users page (registered
    users, filtered and paginated) and AJAX autocompletion widgets, which
    send `q` with an X-Requested-With header and get a short prefix search.
    """
    permission_classes = [IsAdmin]
    filterset_class = UserFilterSet
    pagination_class = AdminUsersPagination
    http_method_names = ['get', 'post', 'put', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        if getattr(self, 'swagger_fake_view', False):
            return User.objects.none()

        queryset = User.objects.select_related(
            'bill_address__state', 'bill_address__country',
            'ship_address__state', 'ship_address__country',
        ).prefetch_related('spree_roles')

        if self.action == 'list':
            return queryset.registered()
        return queryset

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return UserCreateUpdateSerializer
        if self.action == 'list':
            return self.json_serializer_class()
        return UserDetailSerializer

    def is_autocomplete_request(self):
        requested_with = self.request.headers.get('X-Requested-With', '')
        return requested_with == 'XMLHttpRequest' and bool(self.request.query_params.get('q', '').strip())

    def json_serializer_class(self):
        json_format = self.request.query_params.get('json_format') or 'default'
        if json_format == 'basic':
            return UserBasicSerializer
        return UserSerializer

    def search_collection(self):
        search = self.request.query_params.get('q', '').strip()
        try:
            limit = int(self.request.query_params.get('limit', DEFAULT_USER_SEARCH_LIMIT))
        except (TypeError, ValueError):
            limit = DEFAULT_USER_SEARCH_LIMIT

        users = User.objects.select_related(
            'bill_address__state', 'bill_address__country',
            'ship_address__state', 'ship_address__country',
        ).filter(
            Q(email__istartswith=search)
            | Q(bill_address__firstname__istartswith=search)
            | Q(bill_address__lastname__istartswith=search)
            | Q(ship_address__firstname__istartswith=search)
            | Q(ship_address__lastname__istartswith=search)
        ).distinct().order_by('email')

        return users[:max(limit, 0)]

    def list(self, request, *args, **kwargs):
        serializer_class = self.json_serializer_class()

        if self.is_autocomplete_request():
            users = self.search_collection()
            return Response(serializer_class(users, many=True).data)

        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(serializer_class(page, many=True).data)

    def create(self, request, *args, **kwargs):
        serializer = UserCreateUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = serializer.save()
        logger.info(f"User {user.email} created by {request.user.email}")

        return Response({
            'message': _('Created successfully'),
            'user': UserDetailSerializer(user).data
        }, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        user = self.get_object()
        previous_email = user.email

        serializer = UserCreateUpdateSerializer(user, data=request.data, partial=partial)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = serializer.save()

        if user.email != previous_email:
            message = _('Email updated')
        else:
            message = _('Account updated')

        data = {
            'message': message,
            'user': UserDetailSerializer(user).data
        }

        # Acting user changed their own password: issue tokens for the new credentials
        if request.user.pk == user.pk and request.data.get('password'):
            refresh = RefreshToken.for_user(user)
            data['refresh'] = str(refresh)
            data['access'] = str(refresh.access_token)

        return Response(data, status=status.HTTP_200_OK)

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        try:
            user.delete()
        except DestroyWithOrdersError as e:
            logger.warning(f"Refused to delete user {user.email}: {e}")
            return Response({"error": str(e)}, status=status.HTTP_403_FORBIDDEN)
        except ProtectedError:
            logger.warning(f"Refused to delete user {user.email}: owns enterprises")
            return Response(
                {"error": _("Users who own enterprises may not be deleted")},
                status=status.HTTP_403_FORBIDDEN
            )

        logger.info(f"User {user.email} deleted by {request.user.email}")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def generate_api_key(self, request, pk=None):
        user = self.get_object()
        user.generate_spree_api_key()
        logger.info(f"API key generated for {user.email} by {request.user.email}")
        return Response({
            'message': _('API key generated'),
            'user': UserDetailSerializer(user).data
        }, status=status.HTTP_200_OK)

    @action(detail=True, methods=['post'])
    def clear_api_key(self, request, pk=None):
        user = self.get_object()
        user.clear_spree_api_key()
        return Response({
            'message': _('API key cleared'),
            'user': UserDetailSerializer(user).data
        }, status=status.HTTP_200_OK)
