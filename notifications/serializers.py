from rest_framework import serializers

from .models import Message, Notification


class NotificationSerializer(serializers.ModelSerializer):
    # Filled in for section='messages' rows from the ``messages`` context map
    broadcast = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = [
            'id', 'recipient_id', 'recipient_role', 'sender_id', 'message', 'section',
            'entity_id', 'link', 'is_read', 'created_at', 'broadcast',
        ]

    def get_broadcast(self, obj):
        if obj.section != 'messages' or obj.entity_id is None:
            return None
        message = self.context.get('messages', {}).get(obj.entity_id)
        if message is None:
            return None
        return {'title': message.title, 'body': message.body, 'has_file': message.has_file}


class MessageSerializer(serializers.ModelSerializer):
    has_file = serializers.BooleanField(read_only=True)
    created_by = serializers.SerializerMethodField()

    class Meta:
        model = Message
        fields = ['id', 'title', 'body', 'file_mime_type', 'file_name', 'has_file', 'created_by', 'created_at']

    def get_created_by(self, obj):
        return obj.created_by.full_name if obj.created_by else None


class BroadcastSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    body = serializers.CharField()
