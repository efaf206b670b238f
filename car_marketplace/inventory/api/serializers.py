from rest_framework import serializers
from ..models import Car
import bleach


def _clean(value):
    return bleach.clean(value.strip(), tags=[], strip=True)


class CarSerializer(serializers.ModelSerializer):
    """
    Full car listing.

    ``average_rating`` and ``review_count`` are cached from the car's active
    reviews and are never writable through the API.
    """
    average_rating = serializers.FloatField(read_only=True)
    review_count = serializers.IntegerField(read_only=True)
    discount_amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Car
        fields = [
            'id', 'name', 'brand', 'model', 'year', 'price', 'original_price',
            'discount_percentage', 'discount_amount', 'description', 'category',
            'condition', 'availability', 'fuel_type', 'transmission', 'engine',
            'mileage', 'features', 'dealer_name', 'dealer_location', 'dealer_phone',
            'dealer_email', 'average_rating', 'review_count', 'views',
            'is_featured', 'is_active', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id',
            'average_rating',
            'review_count',
            'views',
            'is_active',
            'created_at',
            'updated_at',
        ]

    def validate_name(self, value):
        cleaned = _clean(value)
        if not cleaned:
            raise serializers.ValidationError("Name is required.")
        return cleaned

    def validate_brand(self, value):
        cleaned = _clean(value)
        if not cleaned:
            raise serializers.ValidationError("Brand is required.")
        return cleaned

    def validate_model(self, value):
        cleaned = _clean(value)
        if not cleaned:
            raise serializers.ValidationError("Model is required.")
        return cleaned

    def validate_description(self, value):
        cleaned = _clean(value)
        if not cleaned:
            raise serializers.ValidationError("Description is required.")
        return cleaned

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Price cannot be negative.")
        return value

    def validate_features(self, value):
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise serializers.ValidationError("Features must be a list of strings.")
        return [_clean(item) for item in value if item.strip()]

    def validate(self, attrs):
        original_price = attrs.get('original_price', getattr(self.instance, 'original_price', None))
        price = attrs.get('price', getattr(self.instance, 'price', None))
        if original_price is not None and price is not None and original_price < price:
            raise serializers.ValidationError(
                {"original_price": "Original price cannot be lower than the current price."}
            )
        return attrs


class CarMiniSerializer(serializers.ModelSerializer):
    class Meta:
        model = Car
        fields = ['id', 'name', 'brand', 'model']
        read_only_fields = fields


class RatingAggregateSerializer(serializers.Serializer):
    car = serializers.IntegerField()
    average_rating = serializers.FloatField()
    review_count = serializers.IntegerField()


class FilterOptionsSerializer(serializers.Serializer):
    brands = serializers.ListField(child=serializers.CharField())
    categories = serializers.ListField(child=serializers.CharField())
    conditions = serializers.ListField(child=serializers.CharField())
    fuel_types = serializers.ListField(child=serializers.CharField())
    price_range = serializers.DictField(child=serializers.DecimalField(max_digits=12, decimal_places=2))
    year_range = serializers.DictField(child=serializers.IntegerField())


class SuggestionQuerySerializer(serializers.Serializer):
    q = serializers.CharField(max_length=100)
    limit = serializers.IntegerField(min_value=1, max_value=50, default=5)


class PopularQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=50, default=10)


class SuggestionsSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    results = serializers.ListField(child=serializers.CharField())


class PopularCarSerializer(serializers.ModelSerializer):
    term = serializers.CharField(source='name', read_only=True)

    class Meta:
        model = Car
        fields = ['id', 'term', 'brand', 'model', 'views']
        read_only_fields = fields
