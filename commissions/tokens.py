from rest_framework_simplejwt.tokens import AccessToken, BlacklistMixin


class BlacklistableAccessToken(BlacklistMixin, AccessToken):
    """Access token that is tracked in the blacklist app so logout can revoke it."""
