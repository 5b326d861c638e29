from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timezone as dt_timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from django.db import DatabaseError, connection, transaction
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from ...application.ports.repositories import ChatRepo, SubmissionCreate, SubmissionRepo
from ...models import ChatConversation, Submission

logger = logging.getLogger(__name__)


def _fields(payload: SubmissionCreate) -> Dict[str, Any]:
	data = asdict(payload)
	data.pop('created_at', None)
	return data


def _as_datetime(value: Any) -> Optional[datetime]:
	if isinstance(value, datetime):
		dt = value
	elif isinstance(value, str) and value:
		dt = parse_datetime(value.replace('Z', '+00:00'))
	else:
		return None
	if dt is not None and timezone.is_naive(dt):
		dt = timezone.make_aware(dt, dt_timezone.utc)
	return dt


class DjangoSubmissionRepo(SubmissionRepo):
	def create(self, payload: SubmissionCreate) -> Submission:
		with transaction.atomic():
			return Submission.objects.create(**_fields(payload))

	def list_by_user(self, user_id: str) -> List[Submission]:
		return list(Submission.objects.filter(user_id=user_id).order_by('-created_at'))

	def get_for_user(self, submission_id: Any, user_id: str) -> Optional[Submission]:
		return Submission.objects.filter(pk=submission_id, user_id=user_id).first()

	def claim_orphaned(self, user_id: str) -> int:
		count = Submission.objects.filter(user_id__isnull=True, original_user_id=user_id).update(user_id=user_id)
		if count:
			logger.info("Linked %d orphaned submission(s) to user %s", count, user_id)
		return count

	def link_original(self, original_user_id: str, new_user_id: str) -> int:
		return Submission.objects.filter(original_user_id=original_user_id).update(user_id=new_user_id)

	def bulk_create(self, payloads: Iterable[SubmissionCreate]) -> int:
		# auto_now_add overwrites created_at on insert; legacy timestamps are restored afterwards
		payloads = list(payloads)
		with transaction.atomic():
			rows = Submission.objects.bulk_create([Submission(**_fields(p)) for p in payloads])
			for row, payload in zip(rows, payloads):
				created_at = _as_datetime(payload.created_at)
				if created_at is not None:
					Submission.objects.filter(pk=row.pk).update(created_at=created_at)
		return len(rows)

	def health_check(self) -> bool:
		try:
			with connection.cursor() as c:
				c.execute('SELECT 1')
				c.fetchone()
			return True
		except DatabaseError:
			logger.exception("Database health check failed")
			return False


class DjangoChatRepo(ChatRepo):
	def save_conversation(
		self,
		user_id: str,
		submission: Submission,
		messages: List[Dict[str, Any]],
		title: str,
	) -> Tuple[ChatConversation, bool]:
		with transaction.atomic():
			return ChatConversation.objects.update_or_create(
				user_id=user_id,
				submission=submission,
				defaults={
					'messages': list(messages),
					'title': title,
					'last_message_at': timezone.now(),
				},
			)

	def get_for_submission(self, user_id: str, submission_id: Any) -> Optional[ChatConversation]:
		return ChatConversation.objects.filter(user_id=user_id, submission_id=submission_id).first()

	def list_for_user(self, user_id: str, limit: int = 50) -> List[ChatConversation]:
		return list(
			ChatConversation.objects.filter(user_id=user_id)
			.select_related('submission')
			.order_by('-updated_at')[:limit]
		)
