"""
API Serializers for sellers, sales and authentication.

Input serializers only validate request shape; business rules (positive
amount, existing seller, unique email) are enforced by the services.
"""
from decimal import Decimal

from rest_framework import serializers

from ..models import Sale, Seller


# ============================================================
# INPUT
# ============================================================

class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)


class SellerCreateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=255)
    email = serializers.EmailField(max_length=255)

    def validate_email(self, value):
        return value.strip().lower()


class SaleCreateSerializer(serializers.Serializer):
    seller_id = serializers.IntegerField()
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.01")
    )
    sold_at = serializers.DateTimeField()


class DateFilterSerializer(serializers.Serializer):
    """Optional ?date= / {"date": ...} filter."""
    date = serializers.DateField(required=False, allow_null=True)


class PaginationSerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    per_page = serializers.IntegerField(min_value=1, max_value=100, required=False, default=20)


# ============================================================
# OUTPUT
# ============================================================

def _is_prefetched(instance, relation):
    return relation in getattr(instance, "_prefetched_objects_cache", {})


class SellerSerializer(serializers.ModelSerializer):
    """Seller data; `sales` is included only when it was prefetched."""

    class Meta:
        model = Seller
        fields = ["id", "name", "email", "created_at", "updated_at"]
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if _is_prefetched(instance, "sales") and not self.context.get("nested"):
            data["sales"] = SaleSerializer(
                instance.sales.all(), many=True, context={**self.context, "nested": True}
            ).data
        return data


class SaleSerializer(serializers.ModelSerializer):
    """Sale data; `seller` is included only when it was loaded with the sale."""

    seller_id = serializers.IntegerField(read_only=True)
    amount = serializers.FloatField(read_only=True)
    commission_amount = serializers.FloatField(read_only=True)

    class Meta:
        model = Sale
        fields = [
            "id", "seller_id", "amount", "commission_amount",
            "sold_at", "created_at", "updated_at",
        ]
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if Sale._meta.get_field("seller").is_cached(instance) and not self.context.get("nested"):
            data["seller"] = SellerSerializer(
                instance.seller, context={**self.context, "nested": True}
            ).data
        return data
