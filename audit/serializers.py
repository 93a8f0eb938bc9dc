from rest_framework import serializers

from .models import AuditLog


class AuditUserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.EmailField()


class AuditLogSerializer(serializers.ModelSerializer):
    userId = AuditUserSerializer(source='user', read_only=True, allow_null=True)
    ipAddress = serializers.CharField(source='ip_address', read_only=True)
    userAgent = serializers.CharField(source='user_agent', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = AuditLog
        fields = ('id', 'action', 'userId', 'details', 'ipAddress', 'userAgent', 'createdAt')
        read_only_fields = fields
