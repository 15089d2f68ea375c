from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.generics import ListAPIView
from rest_framework.response import Response
from rest_framework.views import APIView

from internportal.attachments import Attachment, attachment_response
from internportal.pagination import WindowPagination
from internportal.permissions import IsAdminOrSuperadmin, IsPortalUser

from . import dispatch
from .models import Message, Notification
from .serializers import BroadcastSerializer, MessageSerializer, NotificationSerializer


class NotificationListView(ListAPIView):
    """The logged-in principal's inbox, newest first, with an optional ?filter=unread."""

    permission_classes = [IsPortalUser]
    serializer_class = NotificationSerializer
    pagination_class = WindowPagination

    def get_queryset(self):
        principal = self.request.user
        queryset = Notification.objects.filter(
            recipient_id=principal.id,
            recipient_role=principal.recipient_role,
        )
        if self.request.query_params.get('filter') == 'unread':
            queryset = queryset.filter(is_read=False)
        return queryset.order_by('-created_at', '-id')

    def list(self, request, *args, **kwargs):
        rows = self.paginate_queryset(self.get_queryset())

        message_ids = [n.entity_id for n in rows if n.section == 'messages' and n.entity_id]
        messages = Message.objects.defer('file_data').in_bulk(message_ids) if message_ids else {}

        serializer = self.get_serializer(rows, many=True, context={**self.get_serializer_context(), 'messages': messages})
        return self.paginator.get_paginated_response(
            serializer.data,
            unread_count=dispatch.unread_count(request.user),
        )


class MarkNotificationReadView(APIView):
    permission_classes = [IsPortalUser]

    def post(self, request, pk):
        if not dispatch.mark_read(request.user, pk):
            raise NotFound('Notification not found.')
        return Response({'success': True, 'message': 'Notification marked as read.'})


class MarkAllNotificationsReadView(APIView):
    permission_classes = [IsPortalUser]

    def post(self, request):
        updated = dispatch.mark_all_read(request.user)
        return Response({'success': True, 'message': f'{updated} notification(s) marked as read.', 'updated': updated})


class MessageListCreateView(APIView):
    """Admins list past broadcasts and send new ones to every approved intern."""

    permission_classes = [IsAdminOrSuperadmin]

    def get(self, request):
        paginator = WindowPagination()
        queryset = Message.objects.defer('file_data').select_related('created_by').order_by('-created_at', '-id')
        rows = paginator.paginate_queryset(queryset, request, view=self)
        return paginator.get_paginated_response(MessageSerializer(rows, many=True).data)

    def post(self, request):
        serializer = BroadcastSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        attachment = Attachment.from_upload(request.FILES.get('file'))

        message, recipients = dispatch.broadcast_message(
            request.user,
            title=serializer.validated_data['title'],
            body=serializer.validated_data['body'],
            attachment=attachment,
        )
        return Response({
            'success': True,
            'message': f'Message sent to {recipients} intern(s).',
            'message_id': message.pk,
            'recipients': recipients,
        }, status=status.HTTP_201_CREATED)


class MessageDetailView(APIView):
    permission_classes = [IsPortalUser]

    def get(self, request, pk):
        message = get_object_or_404(Message.objects.defer('file_data').select_related('created_by'), pk=pk)
        return Response({'success': True, 'data': MessageSerializer(message).data})


class MessageAttachmentView(APIView):
    permission_classes = [IsPortalUser]

    def get(self, request, pk):
        message = get_object_or_404(Message, pk=pk)
        return attachment_response(message.attachment)
