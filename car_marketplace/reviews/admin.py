from django.contrib import admin
from .models import Review
from .services.review_service import ReviewService


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ['id', 'car', 'user', 'rating', 'title', 'is_active', 'helpful_count', 'report_count', 'created_at']
    list_filter = ['is_active', 'is_verified', 'rating']
    search_fields = ['title', 'text', 'user__email', 'car__name', 'car__brand']
    raw_id_fields = ['car', 'user']
    readonly_fields = ['helpful_count', 'report_count', 'created_at', 'updated_at']
    actions = ['soft_delete_reviews']

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        if not change or {'rating', 'is_active', 'car'} & set(form.changed_data):
            service = ReviewService()
            service.schedule_rating_refresh(obj.car_id)
            if 'car' in form.changed_data and form.initial.get('car'):
                service.schedule_rating_refresh(form.initial['car'])

    def delete_model(self, request, obj):
        ReviewService().hard_delete_review(obj)

    def delete_queryset(self, request, queryset):
        service = ReviewService()
        for review in queryset:
            service.hard_delete_review(review)

    @admin.action(description="Soft delete selected reviews")
    def soft_delete_reviews(self, request, queryset):
        service = ReviewService()
        count = 0
        for review in queryset.filter(is_active=True):
            service.delete_review(review, request.user)
            count += 1
        self.message_user(request, f"{count} review(s) soft deleted.")
