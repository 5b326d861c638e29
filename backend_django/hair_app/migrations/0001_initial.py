import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Submission',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('user_id', models.CharField(blank=True, db_index=True, max_length=128, null=True)),
                ('original_user_id', models.CharField(blank=True, db_index=True, max_length=128, null=True)),
                ('hair_problem', models.TextField(blank=True, default='')),
                ('allergies', models.TextField(blank=True, default='')),
                ('medication', models.TextField(blank=True, default='')),
                ('dyed', models.CharField(blank=True, default='', max_length=100)),
                ('wash_frequency', models.CharField(blank=True, default='', max_length=100)),
                ('additional_concerns', models.TextField(blank=True, default='')),
                ('product_names', models.JSONField(blank=True, default=list)),
                ('hair_photos', models.JSONField(blank=True, default=list)),
                ('hair_photo_analysis', models.JSONField(blank=True, default=list)),
                ('product_images', models.JSONField(blank=True, default=list)),
                ('product_image_analysis', models.JSONField(blank=True, default=list)),
                ('analysis', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'submissions',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['user_id', '-created_at'], name='submissions_user_created_idx')],
            },
        ),
        migrations.CreateModel(
            name='SupportTicket',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('user_id', models.CharField(db_index=True, max_length=128)),
                ('user_email', models.EmailField(blank=True, default='', max_length=254)),
                ('subject', models.CharField(max_length=200)),
                ('message', models.TextField()),
                ('priority', models.CharField(choices=[('low', 'Low'), ('normal', 'Normal'), ('high', 'High'), ('urgent', 'Urgent')], default='normal', max_length=10)),
                ('status', models.CharField(choices=[('open', 'Open'), ('in_progress', 'In progress'), ('resolved', 'Resolved'), ('closed', 'Closed')], default='open', max_length=20)),
                ('admin_response', models.TextField(blank=True, default='')),
                ('admin_responded_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'support_tickets',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status'], name='support_tickets_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='ChatConversation',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('user_id', models.CharField(db_index=True, max_length=128)),
                ('title', models.CharField(default='Hair Analysis Chat', max_length=200)),
                ('messages', models.JSONField(blank=True, default=list)),
                ('last_message_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('submission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='chat_conversations', to='hair_app.submission')),
            ],
            options={
                'db_table': 'chat_conversations',
                'ordering': ['-updated_at'],
                'constraints': [models.UniqueConstraint(fields=('user_id', 'submission'), name='unique_chat_per_submission')],
            },
        ),
    ]
