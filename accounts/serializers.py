"""
Accounts Serializers - Registration, login and user representation.

Passwords are write-only everywhere; the stored hash is never serialized.
"""

from django.contrib.auth import get_user_model, password_validation
from django.contrib.auth.hashers import make_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from api.exceptions import AuthenticationFailedError

User = get_user_model()

REGISTER_REQUIRED = _("Please provide name, email, password, and role")
LOGIN_REQUIRED = _("Please provide email and password")
INVALID_CREDENTIALS = _("Invalid email or password")
DUPLICATE_EMAIL = _("User already exists with this email")


def _required(message):
    return {'required': message, 'blank': message, 'null': message}


class UserSerializer(serializers.ModelSerializer):
    """Public representation of a user."""

    createdAt = serializers.DateTimeField(source='date_joined', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'role', 'createdAt', 'updatedAt']
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """Embedded buyer/seller summary."""

    class Meta:
        model = User
        fields = ['id', 'name', 'email']
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    """
    User registration serializer.

    Rejects duplicate emails (exact match) and roles other than BUYER or
    SELLER, and passwords failing AUTH_PASSWORD_VALIDATORS; the password is
    hashed by ``create_user``.
    """

    name = serializers.CharField(max_length=255, error_messages=_required(REGISTER_REQUIRED))
    email = serializers.EmailField(error_messages=_required(REGISTER_REQUIRED))
    password = serializers.CharField(
        write_only=True,
        style={'input_type': 'password'},
        trim_whitespace=False,
        error_messages=_required(REGISTER_REQUIRED),
    )
    role = serializers.ChoiceField(
        choices=User.Role.choices,
        error_messages={
            **_required(REGISTER_REQUIRED),
            'invalid_choice': _("Role must be either BUYER or SELLER"),
        },
    )

    def validate_email(self, value):
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError(DUPLICATE_EMAIL)
        return value

    def validate_password(self, value):
        try:
            password_validation.validate_password(value)
        except DjangoValidationError as exc:
            raise serializers.ValidationError(list(exc.messages)) from exc
        return value

    def create(self, validated_data):
        # The unique index decides between concurrent registrations
        try:
            with transaction.atomic():
                return User.objects.create_user(
                    email=validated_data['email'],
                    password=validated_data['password'],
                    name=validated_data['name'],
                    role=validated_data['role'],
                )
        except IntegrityError:
            raise serializers.ValidationError({'email': [DUPLICATE_EMAIL]}) from None


class LoginSerializer(serializers.Serializer):
    """
    User login serializer.

    Unknown email and wrong password fail with the same message so the
    endpoint cannot be used to discover accounts.
    """

    email = serializers.CharField(error_messages=_required(LOGIN_REQUIRED))
    password = serializers.CharField(
        write_only=True,
        style={'input_type': 'password'},
        trim_whitespace=False,
        error_messages=_required(LOGIN_REQUIRED),
    )

    def validate(self, attrs):
        user = User.objects.filter(email=attrs['email']).first()

        if user is None:
            # Hash anyway so response timing matches the wrong-password path
            make_password(attrs['password'])
            raise AuthenticationFailedError(str(INVALID_CREDENTIALS))

        if not user.check_password(attrs['password']) or not user.is_active:
            raise AuthenticationFailedError(str(INVALID_CREDENTIALS))

        attrs['user'] = user
        return attrs
