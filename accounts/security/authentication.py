from django.contrib.auth import get_user_model
from jwt import PyJWTError
from rest_framework.authentication import BaseAuthentication
from rest_framework import exceptions
from .app_jwt import verify_app_jwt
from ..models import profile_for


class AppJWTAuthentication(BaseAuthentication):
    keyword = "Bearer"

    def authenticate(self, request):
        # 1) no Authorization header -> let other authenticators try
        auth = request.META.get("HTTP_AUTHORIZATION", "")
        if not auth:
            return None

        # 2) not a Bearer token -> None, so DRF answers 401 cleanly
        if not auth.lower().startswith("bearer "):
            return None

        token = auth.split(" ", 1)[1].strip()
        if not token:
            raise exceptions.AuthenticationFailed("Empty token")

        # 3) signature / expiry
        try:
            payload = verify_app_jwt(token)
        except PyJWTError:
            raise exceptions.AuthenticationFailed("Invalid token")

        # 4) sub is the user pk
        user = get_user_model().objects.filter(pk=payload.get("sub"), is_active=True).first()
        if not user:
            raise exceptions.AuthenticationFailed("User not found")

        # 5) revoked by logout
        if payload.get("ver", 0) != profile_for(user).token_version:
            raise exceptions.AuthenticationFailed("Session has ended, please log in again")

        return (user, payload)

    def authenticate_header(self, request):
        return self.keyword
