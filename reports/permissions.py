# reports/permissions.py
from rest_framework import permissions


class CanGenerateReports(permissions.BasePermission):
    """
    Permission to generate reports.
    Allowed: admins and anyone managing an enterprise.
    """
    def has_permission(self, request, view):
        user = request.user
        return bool(
            user and
            user.is_authenticated and
            (user.is_admin or user.managed_enterprises().exists())
        )
