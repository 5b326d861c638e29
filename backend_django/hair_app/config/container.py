from __future__ import annotations

from django.conf import settings

from ..adapters.ai.grok_vision import GrokVisionClient
from ..adapters.auth.supabase_auth import SupabaseAuthProvider
from ..adapters.repositories.orm_repositories import DjangoChatRepo, DjangoSubmissionRepo
from ..adapters.storage.file_storage import MediaFileStorage
from ..adapters.storage.supabase_storage import SupabaseFileStorage
from ..application.use_cases.chat_with_analyst import ChatWithAnalyst
from ..application.use_cases.submit_hair_analysis import SubmitHairAnalysis

_auth_provider = None


def get_storage():
    storage_kind = str(getattr(settings, 'HAIR_STORAGE', 'media')).strip().lower()
    if storage_kind in ('supabase', 'supabase_storage'):
        return SupabaseFileStorage()
    return MediaFileStorage()


def get_vision_client() -> GrokVisionClient:
    return GrokVisionClient()


def get_auth_provider() -> SupabaseAuthProvider:
    # One client per process; it holds no per-request state
    global _auth_provider
    if _auth_provider is None:
        _auth_provider = SupabaseAuthProvider()
    return _auth_provider


def get_submission_repo() -> DjangoSubmissionRepo:
    return DjangoSubmissionRepo()


def get_chat_repo() -> DjangoChatRepo:
    return DjangoChatRepo()


def get_submission_use_case() -> SubmitHairAnalysis:
    return SubmitHairAnalysis(
        repo=get_submission_repo(),
        storage=get_storage(),
        analyzer=get_vision_client(),
    )


def get_chat_use_case() -> ChatWithAnalyst:
    return ChatWithAnalyst(analyzer=get_vision_client())
