from django.db.models import Count
from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsAdmin
from .enums import NotificationStatus
from .models import Notification
from .permissions import IsOwner
from .serializers import BroadcastSerializer, NotificationSerializer
from .services.notify import notify_role, send_bulk_notification

class NotificationViewSet(viewsets.GenericViewSet,
                          mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          mixins.DestroyModelMixin):
    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated, IsOwner]

    def get_permissions(self):
        if self.action == "broadcast":
            return [IsAdmin()]
        return super().get_permissions()

    def get_queryset(self):
        q = Notification.objects.filter(user=self.request.user)
        # filters: category, delivery_method, unread
        category = self.request.query_params.get("category")
        method = self.request.query_params.get("delivery_method")
        unread = self.request.query_params.get("unread")
        if category:
            q = q.filter(category=category)
        if method:
            q = q.filter(delivery_method=method)
        if unread is not None and unread.lower() in ("1", "true", "yes"):
            q = q.unread()
        return q

    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        n = self.get_object()
        n.mark_read()
        return Response(self.get_serializer(n).data)

    @action(detail=False, methods=["post"])
    def read_all(self, request):
        updated = Notification.objects.filter(user=request.user).mark_read()
        return Response({"updated": updated})

    @action(detail=False, methods=["get"])
    def stats(self, request):
        q = Notification.objects.filter(user=request.user)
        by_category = {
            row["category"]: row["n"] for row in q.values("category").annotate(n=Count("id"))
        }
        return Response({
            "total": q.count(),
            "unread": q.unread().count(),
            "failed": q.filter(status=NotificationStatus.FAILED).count(),
            "by_category": by_category,
        })

    @action(detail=False, methods=["post"])
    def broadcast(self, request):
        s = BroadcastSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        d = s.validated_data
        common = dict(
            title=d["title"],
            message=d["message"],
            category=d["category"],
            delivery_method=d["delivery_method"],
        )
        if d.get("user_ids"):
            sent = send_bulk_notification(user_ids=d["user_ids"], **common)
        else:
            sent = notify_role(role=d["role"], **common)
        return Response({"sent": len(sent)}, status=status.HTTP_201_CREATED)
