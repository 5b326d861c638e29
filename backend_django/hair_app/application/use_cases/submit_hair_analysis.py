from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from PIL import Image, UnidentifiedImageError

from ..errors import IntakeValidationError
from ..ports.ai_services import VisionAnalyzer
from ..ports.repositories import SubmissionCreate, SubmissionRepo
from ..ports.storage import FileStorage
from ...domain.analysis import Analysis, UserAnswers
from ...domain.prompts import NO_HAIR_PHOTOS_TEXT, PRODUCT_PLACEHOLDER_TEXT, build_hair_analysis_prompt
from ...domain.response_parser import parse_analysis

logger = logging.getLogger(__name__)

MAX_HAIR_PHOTOS = 3
MAX_PRODUCT_PHOTOS = 5
HAIR_PHOTOS_FOLDER = 'hair-photos'
PRODUCT_IMAGES_FOLDER = 'product-images'
PRODUCT_CONTENT_TYPES = {'image/jpeg', 'image/jpg', 'image/png'}
_PILLOW_FORMATS = {'JPEG': 'image/jpeg', 'PNG': 'image/png'}

SAVED_MESSAGE = 'Submission saved successfully'
UNSAVED_MESSAGE = 'Analysis completed but could not save to database. Your results are still available.'
UNSAVED_WARNING = 'Your submission could not be permanently saved due to a database issue.'


@dataclass
class PhotoUpload:
    filename: str
    content_type: str
    data: bytes


@dataclass
class SubmissionInput:
    user_id: str
    answers: UserAnswers
    hair_photos: List[PhotoUpload] = field(default_factory=list)
    product_photos: List[PhotoUpload] = field(default_factory=list)


@dataclass
class SubmissionOutcome:
    analysis: Analysis
    message: str
    submission_id: Optional[str] = None
    warning: Optional[str] = None
    record: Any = None
    hair_photo_urls: List[str] = field(default_factory=list)
    product_image_urls: List[str] = field(default_factory=list)

    @property
    def saved(self) -> bool:
        return self.submission_id is not None


def product_content_type(photo: PhotoUpload) -> Optional[str]:
    """JPEG/PNG content type of a product photo, or None when it is neither.

    The declared type is trusted when it is one of the accepted ones;
    otherwise the bytes are sniffed with Pillow.
    """
    declared = (photo.content_type or '').lower()
    if declared in PRODUCT_CONTENT_TYPES:
        return 'image/jpeg' if declared == 'image/jpg' else declared
    try:
        with Image.open(io.BytesIO(photo.data)) as img:
            return _PILLOW_FORMATS.get(img.format or '')
    except (UnidentifiedImageError, OSError):
        return None


class SubmitHairAnalysis:
    """Upload photos, analyze them once, parse the answer and persist the submission.

    Storage and vision failures propagate to the caller. A failed database
    write does not: the outcome then carries the analysis and a warning.
    """

    def __init__(
        self,
        repo: SubmissionRepo,
        storage: FileStorage,
        analyzer: VisionAnalyzer,
    ) -> None:
        self.repo = repo
        self.storage = storage
        self.analyzer = analyzer

    def execute(self, inp: SubmissionInput) -> SubmissionOutcome:
        self._check_limits(inp)

        hair_urls = []
        for photo in inp.hair_photos:
            hair_urls.append(self.storage.upload(photo.data, photo.filename, photo.content_type, HAIR_PHOTOS_FOLDER))
        logger.info("Uploaded %d hair photo(s) for user %s", len(hair_urls), inp.user_id)

        if hair_urls:
            raw_text = self.analyzer.analyze_images(hair_urls, build_hair_analysis_prompt(inp.answers))
        else:
            raw_text = NO_HAIR_PHOTOS_TEXT

        product_urls = []
        product_analysis = []
        for photo in inp.product_photos:
            content_type = product_content_type(photo)
            if content_type is None:
                logger.info("Skipping product photo %r with unsupported type %r", photo.filename, photo.content_type)
                continue
            product_urls.append(self.storage.upload(photo.data, photo.filename, content_type, PRODUCT_IMAGES_FOLDER))
            product_analysis.append(PRODUCT_PLACEHOLDER_TEXT)

        analysis = parse_analysis(raw_text, inp.answers)

        outcome = SubmissionOutcome(
            analysis=analysis,
            message=SAVED_MESSAGE,
            hair_photo_urls=hair_urls,
            product_image_urls=product_urls,
        )
        answers = inp.answers
        try:
            record = self.repo.create(SubmissionCreate(
                user_id=inp.user_id,
                hair_problem=answers.hair_problem,
                allergies=answers.allergies,
                medication=answers.medication,
                dyed=answers.dyed,
                wash_frequency=answers.wash_frequency,
                additional_concerns=answers.additional_concerns,
                product_names=list(answers.product_names),
                hair_photos=hair_urls,
                hair_photo_analysis=[raw_text],
                product_images=product_urls,
                product_image_analysis=product_analysis,
                analysis=analysis.to_dict(),
            ))
        except Exception:
            logger.exception("Could not persist submission for user %s", inp.user_id)
            outcome.message = UNSAVED_MESSAGE
            outcome.warning = UNSAVED_WARNING
            return outcome

        outcome.record = record
        outcome.submission_id = str(record.id)
        return outcome

    def _check_limits(self, inp: SubmissionInput) -> None:
        errors = {}
        if len(inp.hair_photos) > MAX_HAIR_PHOTOS:
            errors['hairPhotos'] = [f'You can upload at most {MAX_HAIR_PHOTOS} hair photos.']
        if len(inp.product_photos) > MAX_PRODUCT_PHOTOS:
            errors['productImages'] = [f'You can upload at most {MAX_PRODUCT_PHOTOS} product images.']
        if errors:
            raise IntakeValidationError(errors)
