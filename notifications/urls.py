from django.urls import path

from .views import (
    MarkAllNotificationsReadView, MarkNotificationReadView, MessageAttachmentView,
    MessageDetailView, MessageListCreateView, NotificationListView,
)

app_name = 'notifications'

# Mounted under /api/notifications/
urlpatterns = [
    path('', NotificationListView.as_view(), name='list'),
    path('<int:pk>/read/', MarkNotificationReadView.as_view(), name='mark_read'),
    path('mark-all-read/', MarkAllNotificationsReadView.as_view(), name='mark_all_read'),
]

# Mounted under /api/messages/
message_urlpatterns = [
    path('', MessageListCreateView.as_view(), name='message_list'),
    path('<int:pk>/', MessageDetailView.as_view(), name='message_detail'),
    path('<int:pk>/attachment/', MessageAttachmentView.as_view(), name='message_attachment'),
]
