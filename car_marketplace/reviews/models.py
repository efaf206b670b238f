from django.conf import settings
from django.db import models
from car_marketplace.inventory.models import Car


class Review(models.Model):
    TITLE_MAX_LENGTH = 100
    TEXT_MAX_LENGTH = 1000
    MIN_RATING = 1
    MAX_RATING = 5

    car = models.ForeignKey(Car, on_delete=models.CASCADE, related_name='reviews')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='reviews')
    rating = models.PositiveSmallIntegerField()  # 1 to 5
    title = models.CharField(max_length=TITLE_MAX_LENGTH)
    text = models.TextField(max_length=TEXT_MAX_LENGTH)
    is_verified = models.BooleanField(default=False)
    # False marks a soft-deleted review: kept in storage, left out of the car's rating
    is_active = models.BooleanField(default=True)
    helpful_count = models.PositiveIntegerField(default=0)
    report_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            # One review per user per car, soft-deleted ones included
            models.UniqueConstraint(fields=['car', 'user'], name='unique_car_user_review'),
            models.CheckConstraint(condition=models.Q(rating__gte=1, rating__lte=5), name='review_valid_rating_range'),
        ]
        indexes = [
            models.Index(fields=['car', 'is_active'], name='idx_review_car_active'),
            models.Index(fields=['user'], name='idx_review_user'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.rating}/5 for {self.car} by {self.user.email}"
