"""
Serializers for shop owner registration and profile.

Related files:
    - views.py: RegisterView, ShopProfileView
"""

from rest_framework import serializers

from authentication.models import User


class UserSerializer(serializers.ModelSerializer):
    """Read/update representation of the signed-in shop owner."""

    class Meta:
        model = User
        fields = ["id", "email", "shop_name", "phone", "date_joined"]
        read_only_fields = ["id", "email", "date_joined"]


class RegisterSerializer(serializers.Serializer):
    """
    Serializer for shop owner registration.

    Handles email/password registration; JWT tokens are obtained
    afterwards from /api/v1/auth/token/.
    """

    email = serializers.EmailField(required=True)
    shop_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    password1 = serializers.CharField(
        write_only=True,
        min_length=8,
        style={"input_type": "password"},
        help_text="Password must be at least 8 characters.",
    )
    password2 = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
        help_text="Confirm your password.",
    )

    def validate_email(self, value):
        """Validate that email is not already in use."""
        email = value.lower().strip()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return email

    def validate(self, attrs):
        """Validate that passwords match."""
        if attrs["password1"] != attrs["password2"]:
            raise serializers.ValidationError({"password2": "Passwords do not match."})
        return attrs

    def create(self, validated_data):
        return User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password1"],
            shop_name=validated_data.get("shop_name", ""),
            phone=validated_data.get("phone", ""),
        )
