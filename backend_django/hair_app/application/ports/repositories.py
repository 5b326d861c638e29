from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple


@dataclass
class SubmissionCreate:
    user_id: Optional[str]
    hair_problem: str = ''
    allergies: str = ''
    medication: str = ''
    dyed: str = ''
    wash_frequency: str = ''
    additional_concerns: str = ''
    product_names: List[str] = field(default_factory=list)
    hair_photos: List[str] = field(default_factory=list)
    hair_photo_analysis: List[str] = field(default_factory=list)
    product_images: List[str] = field(default_factory=list)
    product_image_analysis: List[str] = field(default_factory=list)
    analysis: Dict[str, Any] = field(default_factory=dict)
    original_user_id: Optional[str] = None
    created_at: Any = None


class SubmissionRepo(Protocol):
    def create(self, payload: SubmissionCreate) -> Any:
        ...

    def list_by_user(self, user_id: str) -> List[Any]:
        """Newest first."""
        ...

    def claim_orphaned(self, user_id: str) -> int:
        """Attach rows imported without an owner whose legacy id equals ``user_id``."""
        ...

    def link_original(self, original_user_id: str, new_user_id: str) -> int:
        ...

    def bulk_create(self, payloads: Iterable[SubmissionCreate]) -> int:
        ...

    def get_for_user(self, submission_id: Any, user_id: str) -> Optional[Any]:
        ...

    def health_check(self) -> bool:
        ...


class ChatRepo(Protocol):
    def save_conversation(
        self,
        user_id: str,
        submission: Any,
        messages: List[Dict[str, Any]],
        title: str,
    ) -> Tuple[Any, bool]:
        """Upsert the single conversation for (user, submission). Returns (conversation, created)."""
        ...

    def get_for_submission(self, user_id: str, submission_id: Any) -> Optional[Any]:
        ...

    def list_for_user(self, user_id: str, limit: int = 50) -> List[Any]:
        ...
