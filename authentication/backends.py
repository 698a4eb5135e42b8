from django.contrib.auth import get_user_model
from rest_framework import authentication, exceptions
import logging

logger = logging.getLogger(__name__)
User = get_user_model()


class ApiKeyAuthentication(authentication.BaseAuthentication):
    """
    Authenticate API requests with a user's Spree API key, passed either in
    the X-Spree-Token header or as a `token` query parameter.
    """
    header = 'HTTP_X_SPREE_TOKEN'

    def authenticate(self, request):
        token = request.META.get(self.header) or request.query_params.get('token')
        if not token:
            return None

        try:
            user = User.objects.get(spree_api_key=token)
        except User.DoesNotExist:
            logger.warning("Rejected request with unknown API key")
            raise exceptions.AuthenticationFailed('Invalid API key')

        if not user.is_active:
            raise exceptions.AuthenticationFailed('User inactive or deleted')

        return user, token

    def authenticate_header(self, request):
        return 'X-Spree-Token'
