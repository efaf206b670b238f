from rest_framework import serializers
from ..models import Review
from car_marketplace.common.serializers import UserLiteSerializer
from car_marketplace.inventory.api.serializers import CarMiniSerializer
import bleach


def _clean(value):
    return bleach.clean(value.strip(), tags=[], strip=True)


class ReviewSerializer(serializers.Serializer):
    """
    Input for creating a review. The author is the requesting user.
    """
    car = serializers.IntegerField(min_value=1)
    rating = serializers.IntegerField(min_value=Review.MIN_RATING, max_value=Review.MAX_RATING)
    title = serializers.CharField(max_length=Review.TITLE_MAX_LENGTH)
    text = serializers.CharField(max_length=Review.TEXT_MAX_LENGTH)

    def validate_title(self, value):
        cleaned = _clean(value)
        if not cleaned:
            raise serializers.ValidationError("Title is required.")
        return cleaned

    def validate_text(self, value):
        cleaned = _clean(value)
        if not cleaned:
            raise serializers.ValidationError("Review text is required.")
        return cleaned


class ReviewUpdateSerializer(ReviewSerializer):
    car = None


class ReviewReadSerializer(serializers.ModelSerializer):
    user = UserLiteSerializer(read_only=True)
    car = CarMiniSerializer(read_only=True)

    class Meta:
        model = Review
        fields = [
            'id',
            'car',
            'user',
            'rating',
            'title',
            'text',
            'is_verified',
            'helpful_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class HelpfulCountSerializer(serializers.Serializer):
    helpful_count = serializers.IntegerField()


class RatingStatsSerializer(serializers.Serializer):
    total_reviews = serializers.IntegerField()
    average_rating = serializers.FloatField()
    rating_counts = serializers.DictField(child=serializers.IntegerField())
