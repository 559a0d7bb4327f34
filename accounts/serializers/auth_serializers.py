from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from accounts.models import Profile

class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    display_name = serializers.CharField(required=False, allow_blank=True, max_length=100)

    def validate_email(self, value):
        value = value.strip().lower()
        if get_user_model().objects.filter(username=value).exists():
            raise serializers.ValidationError("This email is already registered.")
        return value

    def validate_password(self, value):
        validate_password(value)
        return value

class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

class ProfileSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source="user.email", read_only=True)
    values = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    interests = serializers.ListField(child=serializers.CharField(max_length=50), required=False)

    class Meta:
        model = Profile
        fields = ["email", "display_name", "bio", "values", "interests", "goals"]
