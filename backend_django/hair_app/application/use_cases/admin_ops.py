"""Admin and migration operations.

Each function returns one of the variants in ``application.results`` and
never lets an expected failure escape as an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..errors import AuthUserExists, AuthUserNotFound
from ..ports.auth import AuthAdmin
from ..ports.repositories import SubmissionCreate, SubmissionRepo
from ..results import Conflict, InternalError, NotFound, Ok, OpResult

logger = logging.getLogger(__name__)

IMPORT_BATCH_SIZE = 10


@dataclass
class ImportSummary:
    total: int = 0
    imported: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)


def link_submissions(repo: SubmissionRepo, original_user_id: str, new_user_id: str) -> OpResult:
    """Give every submission carrying the legacy owner id to the new auth user."""
    try:
        count = repo.link_original(original_user_id, new_user_id)
    except Exception as e:
        logger.exception("Linking submissions failed")
        return InternalError(f"Linking failed: {e}")
    if count == 0:
        return NotFound(f"No submissions found for original user id {original_user_id}")
    logger.info("Linked %d submission(s) from %s to %s", count, original_user_id, new_user_id)
    return Ok(count)


def _as_list(value: Any) -> List[str]:
    if isinstance(value, list):
        return [str(v) for v in value]
    if value in (None, ''):
        return []
    return [str(value)]


def record_to_payload(record: Dict[str, Any]) -> SubmissionCreate:
    """Map one exported legacy document onto a submission without an owner.

    The legacy owner id moves to ``original_user_id`` so the row can be
    linked once the user signs in with the new auth provider.
    """
    analysis = record.get('analysis')
    return SubmissionCreate(
        user_id=None,
        original_user_id=record.get('userId') or record.get('user_id'),
        hair_problem=record.get('hairProblem') or record.get('hair_problem') or '',
        allergies=record.get('allergies') or '',
        medication=record.get('medication') or '',
        dyed=record.get('dyed') or '',
        wash_frequency=record.get('washFrequency') or record.get('wash_frequency') or '',
        additional_concerns=record.get('additionalConcerns') or record.get('additional_concerns') or '',
        product_names=_as_list(record.get('productNames', record.get('product_names'))),
        hair_photos=_as_list(record.get('hairPhotos', record.get('hair_photos'))),
        hair_photo_analysis=_as_list(record.get('hairPhotoAnalysis', record.get('hair_photo_analysis'))),
        product_images=_as_list(record.get('productImages', record.get('product_images'))),
        product_image_analysis=_as_list(record.get('productImageAnalysis', record.get('product_image_analysis'))),
        analysis=analysis if isinstance(analysis, dict) else {},
        created_at=record.get('createdAt') or record.get('created_at'),
    )


def import_submissions(repo: SubmissionRepo, records: Any, batch_size: int = IMPORT_BATCH_SIZE) -> OpResult:
    if not isinstance(records, list):
        return InternalError("Export data must be a list of submissions")
    summary = ImportSummary(total=len(records))
    for start in range(0, len(records), batch_size):
        batch = records[start:start + batch_size]
        number = start // batch_size + 1
        try:
            summary.imported += repo.bulk_create(record_to_payload(r) for r in batch)
        except Exception as e:
            logger.exception("Import batch %d failed", number)
            summary.failed += len(batch)
            summary.errors.append(f"Batch {number}: {e}")
    logger.info("Import finished: %d imported, %d failed", summary.imported, summary.failed)
    return Ok(summary)


def create_auth_user(admin: AuthAdmin, email: str, password: str) -> OpResult:
    try:
        return Ok(admin.create_user(email, password))
    except AuthUserExists:
        return Conflict(f"User {email} is already registered")
    except Exception as e:
        logger.exception("Creating auth user failed")
        return InternalError(str(e))


def set_user_password(admin: AuthAdmin, user_id: str, password: str) -> OpResult:
    try:
        return Ok(admin.set_password(user_id, password))
    except AuthUserNotFound:
        return NotFound(f"User {user_id} not found")
    except Exception as e:
        logger.exception("Updating password failed")
        return InternalError(str(e))
