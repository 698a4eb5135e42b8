from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsAdminOrReadOnly(BasePermission):
    """
    Allow read-only access to all authenticated users.
    Only admins can create, update, delete.
    """

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return request.user.is_authenticated
        return request.user.is_authenticated and request.user.is_admin


class IsAdmin(BasePermission):
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_admin)


class IsEnterpriseManager(BasePermission):
    """Admins, or users who own or manage at least one enterprise"""

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return user.is_admin or user.managed_enterprises().exists()


class ManagesObjectEnterprise(BasePermission):
    def has_object_permission(self, request, view, obj):
        if request.user.is_admin:
            return True
        enterprise = getattr(obj, 'enterprise', None)
        return enterprise is not None and request.user.manages(enterprise)
