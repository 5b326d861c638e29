import uuid
from django.db import models


class Submission(models.Model):
    """One hair analysis request and its result.

    user_id is the Supabase auth uid. It is null for rows imported from the
    legacy store until the owner signs in and the row is linked through
    original_user_id.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.CharField(max_length=128, null=True, blank=True, db_index=True)
    original_user_id = models.CharField(max_length=128, null=True, blank=True, db_index=True)

    # Questionnaire
    hair_problem = models.TextField(blank=True, default='')
    allergies = models.TextField(blank=True, default='')
    medication = models.TextField(blank=True, default='')
    dyed = models.CharField(max_length=100, blank=True, default='')
    wash_frequency = models.CharField(max_length=100, blank=True, default='')
    additional_concerns = models.TextField(blank=True, default='')
    product_names = models.JSONField(default=list, blank=True)

    # Photos (public URLs) and per-photo analysis text
    hair_photos = models.JSONField(default=list, blank=True)
    hair_photo_analysis = models.JSONField(default=list, blank=True)
    product_images = models.JSONField(default=list, blank=True)
    product_image_analysis = models.JSONField(default=list, blank=True)

    # Structured analysis (camelCase keys, see domain.analysis.Analysis.to_dict)
    analysis = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'submissions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user_id', '-created_at'], name='submissions_user_created_idx'),
        ]

    def __str__(self):
        return f"Submission {self.id} - {self.user_id or self.original_user_id}"


class ChatConversation(models.Model):
    """Saved analyst chat for one submission. One per (user, submission)."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.CharField(max_length=128, db_index=True)
    submission = models.ForeignKey(Submission, on_delete=models.CASCADE, related_name='chat_conversations')
    title = models.CharField(max_length=200, default='Hair Analysis Chat')
    messages = models.JSONField(default=list, blank=True)
    last_message_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'chat_conversations'
        ordering = ['-updated_at']
        constraints = [
            models.UniqueConstraint(fields=['user_id', 'submission'], name='unique_chat_per_submission'),
        ]

    def __str__(self):
        return f"{self.title} ({self.user_id})"


class SupportTicket(models.Model):
    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('normal', 'Normal'),
        ('high', 'High'),
        ('urgent', 'Urgent'),
    ]
    STATUS_CHOICES = [
        ('open', 'Open'),
        ('in_progress', 'In progress'),
        ('resolved', 'Resolved'),
        ('closed', 'Closed'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.CharField(max_length=128, db_index=True)
    user_email = models.EmailField(blank=True, default='')
    subject = models.CharField(max_length=200)
    message = models.TextField()
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='normal')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='open')
    admin_response = models.TextField(blank=True, default='')
    admin_responded_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'support_tickets'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='support_tickets_status_idx'),
        ]

    def __str__(self):
        return f"[{self.status}] {self.subject}"
