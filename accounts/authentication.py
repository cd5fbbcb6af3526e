from rest_framework_simplejwt.authentication import JWTAuthentication

from core.exceptions import AccountInactive


class HeaderJWTAuthentication(JWTAuthentication):
    """
    JWT auth that reads the Authorization header via request.headers and
    refuses tokens belonging to deactivated accounts.
    """

    def get_header(self, request):
        auth = request.headers.get("Authorization")

        if isinstance(auth, str):
            auth = auth.encode("iso-8859-1")

        return auth

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if not getattr(user, "is_account_active", True):
            raise AccountInactive()
        return user
