from django.urls import path

from . import views

app_name = 'hair_app'

urlpatterns = [
    path('submit', views.SubmitView.as_view(), name='submit'),
    path('submissions', views.SubmissionListView.as_view(), name='submissions'),
    path('account-stats', views.AccountStatsView.as_view(), name='account_stats'),

    # Analyst chat
    path('chat-analyst', views.ChatAnalystView.as_view(), name='chat_analyst'),
    path('chat/save', views.ChatSaveView.as_view(), name='chat_save'),
    path('chat/history', views.ChatHistoryView.as_view(), name='chat_history'),
    path('chat/<uuid:submission_id>', views.ChatConversationView.as_view(), name='chat_conversation'),

    # Support
    path('support/ticket', views.SupportTicketListCreateView.as_view(), name='support_ticket'),
    path('support/tickets', views.SupportTicketListCreateView.as_view(), name='support_tickets'),
    path('admin/support-tickets', views.AdminSupportTicketListView.as_view(), name='admin_tickets'),
    path('admin/support-tickets/<uuid:pk>/status', views.AdminTicketStatusView.as_view(), name='admin_ticket_status'),
    path('admin/support-tickets/<uuid:pk>/respond', views.AdminTicketRespondView.as_view(), name='admin_ticket_respond'),
]
