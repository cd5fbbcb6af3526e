from django.utils import timezone
from rest_framework import serializers

from .enums import Category, DeliveryMethod
from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    time_ago = serializers.SerializerMethodField()
    is_read = serializers.BooleanField(read_only=True)

    class Meta:
        model = Notification
        fields = [
            "id",
            "category",
            "delivery_method",
            "status",
            "title",
            "message",
            "data",
            "locale",
            "is_read",
            "read_at",
            "sent_at",
            "created_at",
            "time_ago",
        ]
        read_only_fields = fields

    def get_time_ago(self, obj):
        delta = timezone.now() - obj.created_at
        seconds = max(0, int(delta.total_seconds()))
        if seconds < 60:
            return f"{seconds}s"
        minutes = seconds // 60
        if minutes < 60:
            return f"{minutes}m"
        hours = minutes // 60
        if hours < 24:
            return f"{hours}h"
        return f"{hours // 24}d"


class BroadcastSerializer(serializers.Serializer):
    user_ids = serializers.ListField(child=serializers.IntegerField(), required=False, allow_empty=True)
    role = serializers.CharField(required=False)
    title = serializers.CharField(max_length=200)
    message = serializers.CharField()
    category = serializers.ChoiceField(choices=Category.choices, default=Category.SYSTEM)
    delivery_method = serializers.ChoiceField(choices=DeliveryMethod.choices, default=DeliveryMethod.IN_APP)

    def validate(self, attrs):
        if not attrs.get("user_ids") and not attrs.get("role"):
            raise serializers.ValidationError("Provide user_ids or role.")
        return attrs
