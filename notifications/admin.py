from django.contrib import admin

from .models import Message, Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('id', 'recipient_role', 'recipient_id', 'section', 'message', 'is_read', 'created_at')
    list_filter = ('is_read', 'recipient_role', 'section')
    search_fields = ('message',)


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'created_by', 'created_at')
    search_fields = ('title', 'body')
    exclude = ('file_data',)
