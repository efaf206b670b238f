import logging

import bleach
from django.contrib.auth import get_user_model
from rest_framework import serializers
from rolepermissions.roles import get_user_roles

logger = logging.getLogger(__name__)
User = get_user_model()

PASSWORD_MIN_LENGTH = 8


def _plain_text(value):
    return bleach.clean(value.strip(), tags=[], strip=True)


class UserRegistrationSerializer(serializers.ModelSerializer):
    """
    Sign-up payload. Passwords need at least eight characters, one capital
    letter and one digit, and must be typed twice.
    """
    password = serializers.CharField(write_only=True, min_length=PASSWORD_MIN_LENGTH, style={'input_type': 'password'})
    confirm_password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    class Meta:
        model = User
        fields = ['id', 'email', 'name', 'password', 'confirm_password']
        read_only_fields = ['id']

    def validate_email(self, value):
        email = _plain_text(value).lower()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("An account with this email already exists.")
        return email

    def validate_name(self, value):
        return _plain_text(value)

    def validate_password(self, value):
        problems = []
        if not any(char.isupper() for char in value):
            problems.append("Include at least one capital letter.")
        if not any(char.isdigit() for char in value):
            problems.append("Include at least one digit.")
        if problems:
            raise serializers.ValidationError(problems)
        return value

    def validate(self, attrs):
        if attrs['password'] != attrs.pop('confirm_password'):
            raise serializers.ValidationError({"confirm_password": "The two passwords differ."})
        return attrs

    def create(self, validated_data):
        user = User.objects.create_user(**validated_data)
        logger.info(f"Registered {user.email}")
        return user


class UserSerializer(serializers.ModelSerializer):
    roles = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'email', 'name', 'avatar', 'roles', 'date_joined']
        read_only_fields = ['id', 'email', 'roles', 'date_joined']

    def get_roles(self, obj) -> list[str]:
        return [role.get_name() for role in get_user_roles(obj)]

    def validate_name(self, value):
        return _plain_text(value)
