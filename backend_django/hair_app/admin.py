from django.contrib import admin
from django.utils.html import format_html, format_html_join

from .domain.response_parser import strip_emphasis
from .models import ChatConversation, Submission, SupportTicket


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    """Submission admin"""
    list_display = ('id', 'user_id', 'hair_problem_short', 'moisture', 'photo_count', 'created_at')
    list_filter = ('created_at',)
    search_fields = ('id', 'user_id', 'original_user_id', 'hair_problem')
    readonly_fields = ('id', 'created_at', 'updated_at', 'photo_preview', 'description_preview')
    ordering = ('-created_at',)

    fieldsets = (
        ('Basic Info', {
            'fields': ('id', 'user_id', 'original_user_id', 'created_at', 'updated_at')
        }),
        ('Questionnaire', {
            'fields': ('hair_problem', 'allergies', 'medication', 'dyed', 'wash_frequency',
                       'additional_concerns', 'product_names')
        }),
        ('Photos', {
            'fields': ('hair_photos', 'photo_preview', 'product_images', 'product_image_analysis')
        }),
        ('Analysis', {
            'fields': ('description_preview', 'analysis', 'hair_photo_analysis')
        }),
    )

    def hair_problem_short(self, obj):
        return (obj.hair_problem or '')[:60]
    hair_problem_short.short_description = 'Concern'

    def moisture(self, obj):
        return ((obj.analysis or {}).get('metrics') or {}).get('moisture')
    moisture.short_description = 'Moisture'

    def photo_count(self, obj):
        return len(obj.hair_photos or [])
    photo_count.short_description = 'Hair photos'

    def photo_preview(self, obj):
        if not obj.hair_photos:
            return "No photos"
        return format_html_join(
            '',
            '<img src="{}" style="max-width: 150px; max-height: 150px; margin-right: 4px;" />',
            ((url,) for url in obj.hair_photos),
        )
    photo_preview.short_description = 'Photo Preview'

    def description_preview(self, obj):
        text = strip_emphasis((obj.analysis or {}).get('detailedAnalysis', ''))
        return format_html('<div style="white-space: pre-wrap; max-width: 700px;">{}</div>', text)
    description_preview.short_description = 'Description'


@admin.register(ChatConversation)
class ChatConversationAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'user_id', 'submission', 'last_message_at')
    search_fields = ('user_id', 'title')
    readonly_fields = ('id', 'created_at', 'updated_at')
    ordering = ('-updated_at',)


@admin.register(SupportTicket)
class SupportTicketAdmin(admin.ModelAdmin):
    list_display = ('subject', 'user_email', 'priority', 'status', 'created_at')
    list_filter = ('status', 'priority', 'created_at')
    search_fields = ('subject', 'message', 'user_email', 'user_id')
    readonly_fields = ('id', 'created_at', 'updated_at', 'admin_responded_at')
    ordering = ('-created_at',)
