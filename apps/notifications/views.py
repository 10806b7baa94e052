from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from .models import Notification
from .serializers import NotificationSerializer


def recipient_for(user):
    """Map the authenticated user onto the (recipient_type, recipient_id) notifications use."""
    if hasattr(user, 'worker'):
        return 'worker', user.worker.id
    if hasattr(user, 'employer'):
        return 'employer', user.employer.id
    raise PermissionDenied("User has no worker or employer profile")


def notifications_for(user):
    recipient_type, recipient_id = recipient_for(user)
    return Notification.objects.filter(recipient_type=recipient_type, recipient_id=recipient_id)


class NotificationListView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="List notifications for the authenticated worker or employer.",
        manual_parameters=[
            openapi.Parameter('unread', openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        ],
        responses={200: NotificationSerializer(many=True)}
    )
    def get(self, request):
        queryset = notifications_for(request.user)
        unread_count = queryset.filter(is_read=False).count()
        if request.query_params.get('unread') in ('1', 'true', 'True'):
            queryset = queryset.filter(is_read=False)
        try:
            limit = int(request.query_params.get('limit', 20))
        except ValueError:
            limit = 20
        serializer = NotificationSerializer(queryset[:max(limit, 1)], many=True)
        return Response({
            'notifications': serializer.data,
            'unread_count': unread_count,
        })


class NotificationReadView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Mark a single notification as read.",
        responses={200: NotificationSerializer, 404: 'Not Found'}
    )
    def patch(self, request, notification_id):
        try:
            notification = notifications_for(request.user).get(pk=notification_id)
        except Notification.DoesNotExist:
            raise NotFound("Notification not found")
        notification.mark_as_read()
        return Response(NotificationSerializer(notification).data)


class NotificationReadAllView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Mark every notification of the authenticated user as read.",
        responses={200: openapi.Response('Updated count')}
    )
    def patch(self, request):
        updated = notifications_for(request.user).filter(is_read=False).update(is_read=True)
        return Response({'updated': updated})
