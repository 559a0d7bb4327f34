# accounts/views/auth_views.py
import logging

from django.contrib.auth import authenticate, get_user_model
from django.db import transaction
from django.db.models import F
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status, permissions

from accounts.serializers.auth_serializers import LoginSerializer, ProfileSerializer, RegisterSerializer
from accounts.models import Profile, profile_for
from accounts.security.app_jwt import issue_app_jwt
logger = logging.getLogger(__name__)


def session_payload(user, profile):
    """What the client keeps as its session: the token plus who it belongs to."""
    return {
        "jwt": issue_app_jwt(user.id, profile.token_version),
        "user": {
            "id": user.id,
            "email": user.email,
            "displayName": profile.display_name,
        },
    }


class RegisterView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        ser = RegisterSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        email = ser.validated_data["email"]

        with transaction.atomic():
            user = get_user_model().objects.create_user(
                username=email,
                email=email,
                password=ser.validated_data["password"],
            )
            profile = Profile.objects.create(
                user=user,
                display_name=ser.validated_data.get("display_name", ""),
            )

        logger.info("[accounts] registered user=%s", user.id)
        return Response(session_payload(user, profile), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        ser = LoginSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        user = authenticate(
            request,
            username=ser.validated_data["email"].strip().lower(),
            password=ser.validated_data["password"],
        )
        if user is None:
            return Response(
                {"detail": "Email or password is incorrect.", "code": "invalid_credentials"},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        return Response(session_payload(user, profile_for(user)), status=status.HTTP_200_OK)


class LogoutView(APIView):
    def post(self, request):
        # every token issued so far carries the old version
        Profile.objects.filter(user=request.user).update(token_version=F("token_version") + 1)
        logger.info("[accounts] logout user=%s", request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeView(APIView):
    def get(self, request):
        return Response(ProfileSerializer(profile_for(request.user)).data, status=200)

    def patch(self, request):
        ser = ProfileSerializer(profile_for(request.user), data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        ser.save()
        return Response(ser.data, status=200)
