import logging
import os

from django.conf import settings
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from .application.errors import IntakeValidationError, StorageError, VisionAPIError
from .application.use_cases.chat_with_analyst import ChatInput
from .application.use_cases.submit_hair_analysis import PhotoUpload, SubmissionInput
from .config import container
from .domain.analysis import UserAnswers
from .models import SupportTicket
from .permissions import HasAdminKey
from .serializers import (
    AdminSupportTicketSerializer,
    ChatConversationSerializer,
    ChatRequestSerializer,
    ChatSaveSerializer,
    SubmissionCreateSerializer,
    SubmissionSerializer,
    SupportTicketSerializer,
    TicketResponseSerializer,
    TicketStatusSerializer,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = 'Failed to save submission due to an internal error.'


def _photo(upload):
    return PhotoUpload(
        filename=upload.name,
        content_type=getattr(upload, 'content_type', '') or '',
        data=upload.read(),
    )


@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def api_root(request):
    """Liveness check"""
    return Response({'status': 'API is running', 'message': 'Welcome to Hairalyze API'})


@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def debug_info(request):
    """Configuration flags (never values) and database health."""
    return Response({
        'database': 'connected' if container.get_submission_repo().health_check() else 'unavailable',
        'storage': settings.HAIR_STORAGE,
        'supabaseConfigured': bool(os.getenv('SUPABASE_URL')),
        'visionApiConfigured': bool(os.getenv('XAI_API_KEY')),
        'frontendUrl': settings.FRONTEND_URL,
        'debug': settings.DEBUG,
    })


@api_view(['GET'])
def test_auth(request):
    return Response({
        'message': 'Authentication successful',
        'user': {'uid': request.user.uid, 'email': request.user.email},
    })


class SubmitView(APIView):
    """Photos + questionnaire -> analysis. Database failures degrade to a warning."""
    parser_classes = [MultiPartParser, FormParser]
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = SubmissionCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        answers = UserAnswers(
            hair_problem=data['hairProblem'],
            allergies=data['allergies'],
            medication=data['medication'],
            dyed=data['dyed'],
            wash_frequency=data['washFrequency'],
            additional_concerns=data['additionalConcerns'],
            product_names=data['productNames'],
        )
        inp = SubmissionInput(
            user_id=request.user.uid,
            answers=answers,
            hair_photos=[_photo(f) for f in data['hairPhotos']],
            product_photos=[_photo(f) for f in data['productImages']],
        )

        try:
            outcome = container.get_submission_use_case().execute(inp)
        except IntakeValidationError as e:
            return Response({'errors': e.errors}, status=status.HTTP_400_BAD_REQUEST)
        except VisionAPIError as e:
            logger.error("Vision analysis failed for user %s: %s", request.user.uid, e)
            return Response({'error': e.user_message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        except StorageError as e:
            logger.error("Upload failed for user %s: %s", request.user.uid, e)
            return Response({'error': INTERNAL_ERROR_MESSAGE}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        except Exception:
            logger.exception("Submission failed for user %s", request.user.uid)
            return Response({'error': INTERNAL_ERROR_MESSAGE}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        analysis = outcome.analysis.to_dict()
        resp = {
            'message': outcome.message,
            'hairAnalysis': analysis['detailedAnalysis'],
            'metrics': analysis['metrics'],
            'haircareRoutine': analysis['haircareRoutine'],
            'routineSchedule': analysis['routineSchedule'],
            'productSuggestions': analysis['productSuggestions'],
            'aiBonusTips': analysis['aiBonusTips'],
        }
        if outcome.saved:
            resp['submissionId'] = outcome.submission_id
        if outcome.warning:
            resp['warning'] = outcome.warning
        return Response(resp, status=status.HTTP_200_OK)


class SubmissionListView(generics.ListAPIView):
    """Caller's submissions, newest first"""
    serializer_class = SubmissionSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        repo = container.get_submission_repo()
        # Rows imported before the user's first sign-in are linked on first read
        repo.claim_orphaned(self.request.user.uid)
        return repo.list_by_user(self.request.user.uid)


class AccountStatsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        submissions = container.get_submission_repo().list_by_user(request.user.uid)
        return Response({
            'message': 'Account stats retrieved successfully',
            'stats': {
                'totalAnalyses': len(submissions),
                'lastAnalysis': submissions[0].created_at.isoformat() if submissions else None,
                'joinDate': request.user.created_at,
            },
        })


class ChatAnalystView(APIView):
    parser_classes = [JSONParser]
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = ChatRequestSerializer(data=request.data)
        if not serializer.is_valid():
            error = 'Message is required' if 'message' in serializer.errors else 'Invalid chat request'
            return Response({'error': error, 'errors': serializer.errors},
                            status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data
        try:
            reply = container.get_chat_use_case().execute(ChatInput(
                message=data['message'],
                analysis=data.get('analysisData'),
                submission=data.get('submissionData'),
                history=list(data.get('chatHistory') or []),
            ))
        except VisionAPIError as e:
            logger.error("Chat request failed for user %s: %s", request.user.uid, e)
            return Response({
                'error': 'Failed to process chat request',
                'message': 'I apologize, but I had trouble processing your question. Please try again in a moment.',
            }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response({'response': reply.response, 'timestamp': reply.timestamp})


class ChatSaveView(APIView):
    parser_classes = [JSONParser]
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = ChatSaveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        uid = request.user.uid

        submission = container.get_submission_repo().get_for_user(data['submissionId'], uid)
        if submission is None:
            return Response({'error': 'Submission not found'}, status=status.HTTP_404_NOT_FOUND)

        conversation, created = container.get_chat_repo().save_conversation(
            user_id=uid,
            submission=submission,
            messages=[dict(m) for m in data['messages']],
            title=data['title'],
        )
        return Response({
            'success': True,
            'conversationId': str(conversation.id),
            'message': 'Conversation saved successfully' if created else 'Conversation updated successfully',
        })


class ChatHistoryView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        conversations = container.get_chat_repo().list_for_user(request.user.uid, limit=50)
        return Response({
            'success': True,
            'conversations': ChatConversationSerializer(conversations, many=True).data,
        })


class ChatConversationView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, submission_id):
        conversation = container.get_chat_repo().get_for_submission(request.user.uid, submission_id)
        if conversation is None:
            return Response({'success': True, 'conversation': None, 'messages': []})
        return Response({
            'success': True,
            'conversation': ChatConversationSerializer(conversation).data,
            'messages': conversation.messages or [],
        })


class SupportTicketListCreateView(generics.ListCreateAPIView):
    serializer_class = SupportTicketSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        return SupportTicket.objects.filter(user_id=self.request.user.uid).order_by('-created_at')

    def perform_create(self, serializer):
        email = serializer.validated_data.get('user_email') or self.request.user.email or ''
        ticket = serializer.save(user_id=self.request.user.uid, user_email=email)
        logger.info("Support ticket %s created by %s", ticket.id, self.request.user.uid)


class AdminSupportTicketListView(generics.ListAPIView):
    """All tickets, optionally filtered with ?status="""
    serializer_class = AdminSupportTicketSerializer
    authentication_classes = []
    permission_classes = [HasAdminKey]
    pagination_class = None

    def get_queryset(self):
        qs = SupportTicket.objects.all().order_by('-created_at')
        wanted = self.request.query_params.get('status')
        if wanted:
            qs = qs.filter(status=wanted)
        return qs


class AdminTicketStatusView(APIView):
    authentication_classes = []
    permission_classes = [HasAdminKey]

    def patch(self, request, pk):
        ticket = get_object_or_404(SupportTicket, pk=pk)
        serializer = TicketStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ticket.status = serializer.validated_data['status']
        ticket.save(update_fields=['status', 'updated_at'])
        return Response({'success': True, 'ticket': AdminSupportTicketSerializer(ticket).data})


class AdminTicketRespondView(APIView):
    authentication_classes = []
    permission_classes = [HasAdminKey]

    def post(self, request, pk):
        ticket = get_object_or_404(SupportTicket, pk=pk)
        serializer = TicketResponseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        ticket.admin_response = serializer.validated_data['response']
        ticket.admin_responded_at = timezone.now()
        if ticket.status == 'open':
            ticket.status = 'in_progress'
        ticket.save(update_fields=['admin_response', 'admin_responded_at', 'status', 'updated_at'])
        return Response({'success': True, 'ticket': AdminSupportTicketSerializer(ticket).data})
