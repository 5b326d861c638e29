"""
Unit tests for the submission pipeline, wired with in-memory fakes.
"""

import io
import uuid
from types import SimpleNamespace

import pytest
from PIL import Image

from hair_app.application.errors import IntakeValidationError, StorageError, VisionRateLimitError
from hair_app.application.use_cases.submit_hair_analysis import (
    SAVED_MESSAGE,
    UNSAVED_MESSAGE,
    UNSAVED_WARNING,
    PhotoUpload,
    SubmissionInput,
    SubmitHairAnalysis,
    product_content_type,
)
from hair_app.domain.analysis import UserAnswers
from hair_app.domain.prompts import NO_HAIR_PHOTOS_TEXT, PRODUCT_PLACEHOLDER_TEXT

from .conftest import FakeAnalyzer, FakeStorage


class FakeRepo:
    def __init__(self, error=None):
        self.created = []
        self.error = error

    def create(self, payload):
        if self.error is not None:
            raise self.error
        self.created.append(payload)
        return SimpleNamespace(id=uuid.uuid4(), payload=payload)


def _png_bytes():
    buf = io.BytesIO()
    Image.new('RGB', (2, 2), color=(200, 10, 10)).save(buf, 'PNG')
    return buf.getvalue()


def _photo(name='hair.jpg', content_type='image/jpeg', data=b'\xff\xd8\xff fake jpeg'):
    return PhotoUpload(filename=name, content_type=content_type, data=data)


def _input(hair=1, products=(), answers=None):
    return SubmissionInput(
        user_id='user-1',
        answers=answers or UserAnswers(hair_problem='Frizz', product_names=['Argan oil']),
        hair_photos=[_photo(f'hair-{i}.jpg') for i in range(hair)],
        product_photos=list(products),
    )


@pytest.fixture
def repo():
    return FakeRepo()


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def fake_analyzer():
    return FakeAnalyzer()


@pytest.fixture
def use_case(repo, fake_storage, fake_analyzer):
    return SubmitHairAnalysis(repo, fake_storage, fake_analyzer)


class TestSubmitHairAnalysis:
    """Happy paths."""

    def test_single_vision_call_with_every_url(self, use_case, fake_storage, fake_analyzer, repo) -> None:
        outcome = use_case.execute(_input(hair=3))

        assert len(fake_analyzer.image_calls) == 1
        assert fake_analyzer.image_calls[0] == [
            'https://cdn.test/hair-photos/hair-0.jpg',
            'https://cdn.test/hair-photos/hair-1.jpg',
            'https://cdn.test/hair-photos/hair-2.jpg',
        ]
        assert 'Frizz' in fake_analyzer.prompts[0]
        assert [c[0] for c in fake_storage.calls] == ['hair-photos'] * 3
        assert outcome.saved
        assert outcome.message == SAVED_MESSAGE
        assert outcome.warning is None
        assert repo.created[0].hair_photo_analysis == [fake_analyzer.text]
        assert repo.created[0].analysis['metrics']['moisture'] == outcome.analysis.metrics.moisture

    def test_no_hair_photos_skips_vision(self, use_case, fake_analyzer, repo) -> None:
        outcome = use_case.execute(_input(hair=0, answers=UserAnswers()))

        assert fake_analyzer.image_calls == []
        assert outcome.analysis.raw_analysis == NO_HAIR_PHOTOS_TEXT
        assert outcome.analysis.metrics.to_dict() == {
            'moisture': 50, 'strength': 60, 'elasticity': 60, 'scalpHealth': 70,
        }
        assert repo.created[0].hair_photos == []
        assert repo.created[0].hair_photo_analysis == [NO_HAIR_PHOTOS_TEXT]

    def test_answers_are_persisted(self, use_case, repo) -> None:
        use_case.execute(_input())

        payload = repo.created[0]
        assert payload.user_id == 'user-1'
        assert payload.hair_problem == 'Frizz'
        assert payload.product_names == ['Argan oil']

    def test_product_photos_get_placeholder_analysis(self, use_case, fake_storage, repo) -> None:
        products = [
            _photo('front.jpg'),
            _photo('label.png', content_type='image/png', data=_png_bytes()),
        ]
        outcome = use_case.execute(_input(products=products))

        assert outcome.product_image_urls == [
            'https://cdn.test/product-images/front.jpg',
            'https://cdn.test/product-images/label.png',
        ]
        assert repo.created[0].product_image_analysis == [PRODUCT_PLACEHOLDER_TEXT] * 2

    def test_unsupported_product_photos_are_skipped(self, use_case, fake_storage, repo) -> None:
        products = [
            _photo('anim.gif', content_type='image/gif', data=b'GIF89a not really'),
            _photo('notes.txt', content_type='text/plain', data=b'hello'),
        ]
        outcome = use_case.execute(_input(products=products))

        assert outcome.product_image_urls == []
        assert all(c[0] == 'hair-photos' for c in fake_storage.calls)
        assert repo.created[0].product_image_analysis == []


class TestSubmitFailures:
    """Abort and degrade behaviour."""

    def test_too_many_photos_rejected_before_upload(self, use_case, fake_storage, fake_analyzer, repo) -> None:
        with pytest.raises(IntakeValidationError) as exc:
            use_case.execute(_input(hair=4))

        assert 'hairPhotos' in exc.value.errors
        assert fake_storage.calls == []
        assert fake_analyzer.image_calls == []
        assert repo.created == []

    def test_too_many_product_photos(self, use_case, fake_storage) -> None:
        with pytest.raises(IntakeValidationError) as exc:
            use_case.execute(_input(products=[_photo(f'p{i}.jpg') for i in range(6)]))

        assert 'productImages' in exc.value.errors
        assert fake_storage.calls == []

    def test_upload_failure_aborts(self, repo, fake_analyzer) -> None:
        use_case = SubmitHairAnalysis(repo, FakeStorage(fail_on=2), fake_analyzer)

        with pytest.raises(StorageError):
            use_case.execute(_input(hair=3))

        assert fake_analyzer.image_calls == []
        assert repo.created == []

    def test_vision_failure_aborts(self, repo, fake_storage) -> None:
        analyzer = FakeAnalyzer(error=VisionRateLimitError("429"))
        use_case = SubmitHairAnalysis(repo, fake_storage, analyzer)

        with pytest.raises(VisionRateLimitError):
            use_case.execute(_input(hair=2))

        assert repo.created == []

    def test_database_failure_keeps_analysis(self, fake_storage, fake_analyzer) -> None:
        use_case = SubmitHairAnalysis(FakeRepo(error=RuntimeError("db down")), fake_storage, fake_analyzer)

        outcome = use_case.execute(_input(hair=1))

        assert not outcome.saved
        assert outcome.submission_id is None
        assert outcome.message == UNSAVED_MESSAGE
        assert outcome.warning == UNSAVED_WARNING
        assert outcome.analysis.product_suggestions == [
            "Sulfate-free moisturizing shampoo",
            "Silicone-free conditioner",
        ]


class TestProductContentType:

    @pytest.mark.parametrize("declared,expected", [
        ('image/jpeg', 'image/jpeg'),
        ('image/JPG', 'image/jpeg'),
        ('image/png', 'image/png'),
    ])
    def test_declared_type_trusted(self, declared, expected) -> None:
        assert product_content_type(_photo(content_type=declared, data=b'')) == expected

    def test_generic_type_sniffed(self) -> None:
        photo = _photo('blob', content_type='application/octet-stream', data=_png_bytes())

        assert product_content_type(photo) == 'image/png'

    def test_garbage_rejected(self) -> None:
        assert product_content_type(_photo(content_type='', data=b'\x00\x01\x02')) is None
