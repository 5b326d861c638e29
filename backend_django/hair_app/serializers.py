import json

from rest_framework import serializers

from .application.use_cases.submit_hair_analysis import MAX_HAIR_PHOTOS, MAX_PRODUCT_PHOTOS
from .models import ChatConversation, Submission, SupportTicket

MAX_UPLOAD_BYTES = 20 * 1024 * 1024
MAX_PRODUCT_NAME_LENGTH = 100


def _text(max_length, label):
    return serializers.CharField(
        required=False,
        allow_blank=True,
        default='',
        max_length=max_length,
        error_messages={'max_length': f'{label} must be less than {max_length} characters'},
    )


def _photos(max_items, label):
    return serializers.ListField(
        child=serializers.FileField(allow_empty_file=False),
        required=False,
        default=list,
        max_length=max_items,
        error_messages={'max_length': f'You can upload at most {max_items} {label}.'},
    )


class SubmissionCreateSerializer(serializers.Serializer):
    """Multipart intake form for POST /api/submit (camelCase keys as sent by the SPA)."""
    hairProblem = _text(500, 'Hair problem')
    allergies = _text(500, 'Allergies')
    medication = _text(500, 'Medication')
    dyed = _text(100, 'Dyed')
    washFrequency = _text(100, 'Wash frequency')
    additionalConcerns = _text(1000, 'Additional concerns')
    productNames = serializers.CharField(required=False, allow_blank=True, default='')
    hairPhotos = _photos(MAX_HAIR_PHOTOS, 'hair photos')
    productImages = _photos(MAX_PRODUCT_PHOTOS, 'product images')

    def validate_productNames(self, value):
        if not value:
            return []
        try:
            names = json.loads(value)
        except ValueError:
            raise serializers.ValidationError('Product names must be a valid JSON array')
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise serializers.ValidationError('Product names must be a JSON array of strings')
        if any(len(n) > MAX_PRODUCT_NAME_LENGTH for n in names):
            raise serializers.ValidationError(
                f'Each product name must be at most {MAX_PRODUCT_NAME_LENGTH} characters'
            )
        return [n.strip() for n in names]

    def _check_sizes(self, files):
        for f in files:
            if f.size > MAX_UPLOAD_BYTES:
                raise serializers.ValidationError(f'{f.name} exceeds the 20MB limit')
        return files

    def validate_hairPhotos(self, value):
        return self._check_sizes(value)

    def validate_productImages(self, value):
        return self._check_sizes(value)


class SubmissionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Submission
        fields = (
            'id', 'user_id', 'original_user_id',
            'hair_problem', 'allergies', 'medication', 'dyed', 'wash_frequency', 'additional_concerns',
            'product_names', 'hair_photos', 'hair_photo_analysis',
            'product_images', 'product_image_analysis',
            'analysis', 'created_at', 'updated_at',
        )
        read_only_fields = fields


class ChatMessageSerializer(serializers.Serializer):
    """One chat message. The SPA sends ``type``; ``role`` is accepted too."""
    role = serializers.ChoiceField(choices=['user', 'ai'])
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)
    timestamp = serializers.CharField(required=False, allow_blank=True, default='')

    def to_internal_value(self, data):
        if isinstance(data, dict) and 'role' not in data and 'type' in data:
            data = {**data, 'role': data['type']}
        if isinstance(data, dict) and data.get('role') == 'assistant':
            data = {**data, 'role': 'ai'}
        return super().to_internal_value(data)


class ChatRequestSerializer(serializers.Serializer):
    message = serializers.CharField(error_messages={
        'required': 'Message is required',
        'blank': 'Message is required',
    })
    analysisData = serializers.DictField(required=False, allow_null=True, default=None)
    submissionData = serializers.DictField(required=False, allow_null=True, default=None)
    chatHistory = ChatMessageSerializer(many=True, required=False, default=list)

    def validate_analysisData(self, value):
        if not value:
            return value
        for key in ('metrics', 'haircareRoutine'):
            if value.get(key) is not None and not isinstance(value[key], dict):
                raise serializers.ValidationError(f'{key} must be an object')
        products = value.get('productSuggestions')
        if products is not None and not isinstance(products, list):
            raise serializers.ValidationError('productSuggestions must be a list')
        return value


class ChatSaveSerializer(serializers.Serializer):
    submissionId = serializers.UUIDField()
    messages = ChatMessageSerializer(many=True, allow_empty=False)
    title = serializers.CharField(required=False, max_length=200, default='Hair Analysis Chat')


class ChatConversationSerializer(serializers.ModelSerializer):
    submissionId = serializers.UUIDField(source='submission_id', read_only=True)
    lastMessageAt = serializers.DateTimeField(source='last_message_at', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    messageCount = serializers.SerializerMethodField()

    class Meta:
        model = ChatConversation
        fields = ('id', 'title', 'submissionId', 'lastMessageAt', 'createdAt', 'updatedAt', 'messageCount')

    def get_messageCount(self, obj):
        return len(obj.messages or [])


class SupportTicketSerializer(serializers.ModelSerializer):
    userEmail = serializers.EmailField(source='user_email', required=False, allow_blank=True)

    class Meta:
        model = SupportTicket
        fields = (
            'id', 'subject', 'message', 'priority', 'status', 'userEmail',
            'admin_response', 'admin_responded_at', 'created_at', 'updated_at',
        )
        read_only_fields = ('id', 'status', 'admin_response', 'admin_responded_at', 'created_at', 'updated_at')


class AdminSupportTicketSerializer(SupportTicketSerializer):
    class Meta(SupportTicketSerializer.Meta):
        fields = SupportTicketSerializer.Meta.fields + ('user_id',)


class TicketStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[c[0] for c in SupportTicket.STATUS_CHOICES])


class TicketResponseSerializer(serializers.Serializer):
    response = serializers.CharField()
