"""
Auth Service - bearer token login/logout and the current user's profile.
"""
import logging

from django.contrib.auth.models import update_last_login
from rest_framework_simplejwt.settings import api_settings as jwt_settings

from ..dto import LoginData
from ..exceptions import InvalidCredentials, InvalidToken
from ..repositories import UserRepository
from ..tokens import BlacklistableAccessToken

logger = logging.getLogger(__name__)

PERMISSION_APP_LABEL = 'commissions'


def user_has_permission(user, permission):
    """True when the user holds `permission` directly or through a role."""
    if user is None or not user.is_authenticated:
        return False
    return user.has_perm(f"{PERMISSION_APP_LABEL}.{permission}")


class AuthService:

    def __init__(self, user_repository=None):
        self.users = user_repository or UserRepository()

    def profile(self, user):
        return {
            'id': user.pk,
            'name': user.get_full_name() or user.get_username(),
            'email': user.email,
            'roles': self.users.get_roles(user),
            'permissions': self.users.get_permissions(user),
        }

    def login(self, data: LoginData):
        user = self.users.find_by_email(data.email) if data.email else None
        if user is None or not user.check_password(data.password):
            logger.warning("Failed login attempt email=%s", data.email)
            raise InvalidCredentials()

        token = BlacklistableAccessToken.for_user(user)
        update_last_login(None, user)
        logger.info("User logged in user_id=%s", user.pk)

        return {
            'access_token': str(token),
            'token_type': 'bearer',
            'expires_in': int(jwt_settings.ACCESS_TOKEN_LIFETIME.total_seconds()),
            'user': self.profile(user),
        }

    def user(self, user):
        if user is None or not user.is_authenticated:
            raise InvalidToken()
        return {'user': self.profile(user)}

    def logout(self, token):
        """Revoke the presented access token."""
        if token is None:
            raise InvalidToken()
        if not isinstance(token, BlacklistableAccessToken):
            token = BlacklistableAccessToken(str(token))
        token.blacklist()
        logger.info("User logged out user_id=%s", token.get(jwt_settings.USER_ID_CLAIM))
        return True
