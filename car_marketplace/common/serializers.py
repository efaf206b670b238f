from rest_framework import serializers
from car_marketplace.users.models import User


class UserLiteSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'name', 'avatar']
        read_only_fields = fields
