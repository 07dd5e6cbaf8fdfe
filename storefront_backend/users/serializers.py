from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from users.models import ROLE_CUSTOMER, Address

User = get_user_model()


# ---------------- REGISTER ----------------
class RegisterSerializer(serializers.ModelSerializer):
    """
    Public self-registration always creates customers.
    Staff accounts are created from the admin.
    """

    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={"input_type": "password"},
    )

    class Meta:
        model = User
        fields = [
            "email",
            "password",
            "first_name",
            "last_name",
            "mobile_number",
        ]

    def create(self, validated_data):
        return User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            first_name=validated_data.get("first_name", ""),
            last_name=validated_data.get("last_name", ""),
            mobile_number=validated_data.get("mobile_number", ""),
            role=ROLE_CUSTOMER,
        )


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption.
    """

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "first_name",
            "last_name",
            "mobile_number",
            "role",
        ]
        read_only_fields = fields


# ---------------- ADDRESS BOOK ----------------
class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = [
            "id",
            "address_type",
            "full_name",
            "mobile_number",
            "house_number",
            "address_line1",
            "address_line2",
            "city",
            "state",
            "pincode",
            "country",
            "is_default",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def validate(self, attrs):
        for field in ("full_name", "address_line1", "city", "state"):
            if field in attrs and not str(attrs[field] or "").strip():
                raise serializers.ValidationError({field: "This field may not be blank."})
        return attrs
