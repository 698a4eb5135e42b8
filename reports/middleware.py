# reports/middleware.py
import logging
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)


def describe_user(request):
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return user.email
    return 'anonymous'


class ReportAccessLogMiddleware(MiddlewareMixin):
    """
    Log report access and downloads for audit purposes
    """

    def process_request(self, request):
        if request.path.startswith('/api/reports/orders_and_fulfillments/'):
            logger.info(f"Report generation request: {request.method} {request.path} by user {describe_user(request)}")

        if '/download/' in request.path and '/api/reports/exports/' in request.path:
            logger.info(f"Report download: {request.path} by user {describe_user(request)}")

        return None

    def process_response(self, request, response):
        if request.path.startswith('/api/reports/') and response.status_code >= 400:
            logger.warning(
                f"Report operation failed: {request.method} {request.path} "
                f"Status: {response.status_code} "
                f"User: {describe_user(request)}"
            )

        return response
