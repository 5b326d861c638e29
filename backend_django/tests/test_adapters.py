"""
Storage and auth adapters with the Supabase client mocked out.
"""

import os
from datetime import datetime, timezone as dt_timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from hair_app.adapters.auth.supabase_auth import SupabaseAuthProvider
from hair_app.adapters.storage.file_storage import MediaFileStorage
from hair_app.adapters.storage.supabase_common import get_public_url, object_key
from hair_app.adapters.storage.supabase_storage import SupabaseFileStorage
from hair_app.application.errors import AuthUserExists, AuthUserNotFound, StorageError
from hair_app.application.ports.auth import AuthIdentity


class SupabaseAPIError(Exception):
    def __init__(self, message, code=None, status=None):
        super().__init__(message)
        self.code = code
        self.status = status


class TestObjectKey:

    def test_layout(self) -> None:
        assert object_key('hair-photos', 'front.jpg', now_ms=1700000000000, token='ab12cd34') == \
            'hair-photos/1700000000000-ab12cd34-front.jpg'

    def test_unsafe_names(self) -> None:
        assert object_key('/product-images/', '../../etc/my photo (1).png', now_ms=1, token='t') == \
            'product-images/1-t-my_photo_1_.png'
        assert object_key('hair-photos', '', now_ms=1, token='t') == 'hair-photos/1-t-upload'

    def test_same_name_same_millisecond_differs(self) -> None:
        first = object_key('hair-photos', 'image.jpg', now_ms=1)
        second = object_key('hair-photos', 'image.jpg', now_ms=1)

        assert first != second
        assert first.endswith('-image.jpg') and second.endswith('-image.jpg')


class TestMediaFileStorage:

    def test_same_filename_twice_keeps_both(self, settings, tmp_path) -> None:
        settings.MEDIA_ROOT = str(tmp_path)
        settings.SITE_URL = ''

        storage = MediaFileStorage()
        first = storage.upload(b'first', 'image.jpg', 'image/jpeg', 'hair-photos')
        second = storage.upload(b'second', 'image.jpg', 'image/jpeg', 'hair-photos')

        assert first != second
        assert sorted(p.read_bytes() for p in (tmp_path / 'hair-photos').iterdir()) == [b'first', b'second']

    def test_writes_under_media_root(self, settings, tmp_path) -> None:
        settings.MEDIA_ROOT = str(tmp_path)
        settings.MEDIA_URL = '/media/'
        settings.SITE_URL = 'http://localhost:8000/'

        url = MediaFileStorage().upload(b'jpeg-bytes', 'front.jpg', 'image/jpeg', 'hair-photos')

        assert url.startswith('http://localhost:8000/media/hair-photos/')
        assert url.endswith('-front.jpg')
        rel = url.split('/media/', 1)[1]
        with open(os.path.join(tmp_path, *rel.split('/')), 'rb') as f:
            assert f.read() == b'jpeg-bytes'

    def test_unwritable_root(self, settings, tmp_path) -> None:
        blocker = tmp_path / 'file'
        blocker.write_text('not a directory')
        settings.MEDIA_ROOT = str(blocker)

        with pytest.raises(StorageError):
            MediaFileStorage().upload(b'x', 'a.jpg', 'image/jpeg', 'hair-photos')


class TestSupabaseFileStorage:

    def _client(self, public_url='https://proj.supabase.co/storage/v1/object/public/hair-uploads/x.jpg?'):
        client = MagicMock()
        client.storage.from_.return_value.get_public_url.return_value = public_url
        return client

    def test_upload(self) -> None:
        client = self._client()
        storage = SupabaseFileStorage(bucket='hair-uploads', client=client)

        url = storage.upload(b'png', 'label.png', 'image/png', 'product-images')

        assert url == 'https://proj.supabase.co/storage/v1/object/public/hair-uploads/x.jpg'
        client.storage.from_.assert_called_with('hair-uploads')
        path, data, options = client.storage.from_.return_value.upload.call_args[0]
        assert path.startswith('product-images/')
        assert path.endswith('-label.png')
        assert data == b'png'
        assert options == {'content-type': 'image/png', 'upsert': 'false'}

    def test_bucket_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv('HAIR_UPLOADS_BUCKET', 'custom-bucket')

        assert SupabaseFileStorage(client=self._client()).bucket == 'custom-bucket'

    def test_failure_is_storage_error(self) -> None:
        client = self._client()
        client.storage.from_.return_value.upload.side_effect = SupabaseAPIError("Duplicate", status=409)

        with pytest.raises(StorageError):
            SupabaseFileStorage(client=client).upload(b'x', 'a.jpg', 'image/jpeg', 'hair-photos')

    def test_public_url_dict_shape(self) -> None:
        client = self._client(public_url={'data': {'publicUrl': 'https://cdn/x.jpg'}})

        assert get_public_url(client, 'hair-uploads', 'x.jpg') == 'https://cdn/x.jpg'

    def test_public_url_fallback(self, monkeypatch) -> None:
        monkeypatch.setenv('SUPABASE_URL', 'https://proj.supabase.co/')
        client = self._client(public_url=None)

        assert get_public_url(client, 'hair-uploads', 'hair-photos/1-a.jpg') == \
            'https://proj.supabase.co/storage/v1/object/public/hair-uploads/hair-photos/1-a.jpg'


def _user(uid='uid-1', email='ana@example.com'):
    return SimpleNamespace(id=uid, email=email, created_at=datetime(2024, 1, 15, 10, tzinfo=dt_timezone.utc))


class TestSupabaseAuthProvider:

    def test_verify_token(self) -> None:
        client = MagicMock()
        client.auth.get_user.return_value = SimpleNamespace(user=_user())

        identity = SupabaseAuthProvider(client=client).verify_token('jwt')

        client.auth.get_user.assert_called_once_with('jwt')
        assert identity == AuthIdentity(uid='uid-1', email='ana@example.com', created_at='2024-01-15T10:00:00+00:00')

    def test_verify_rejected_token(self) -> None:
        client = MagicMock()
        client.auth.get_user.side_effect = SupabaseAPIError("invalid JWT", status=401)

        assert SupabaseAuthProvider(client=client).verify_token('expired') is None

    def test_verify_without_user(self) -> None:
        client = MagicMock()
        client.auth.get_user.return_value = SimpleNamespace(user=None)

        assert SupabaseAuthProvider(client=client).verify_token('jwt') is None

    def test_create_user(self) -> None:
        client = MagicMock()
        client.auth.admin.create_user.return_value = SimpleNamespace(user=_user(uid='new'))

        identity = SupabaseAuthProvider(client=client).create_user('ana@example.com', 'pw')

        assert identity.uid == 'new'
        sent = client.auth.admin.create_user.call_args[0][0]
        assert sent == {'email': 'ana@example.com', 'password': 'pw', 'email_confirm': True}

    @pytest.mark.parametrize("error", [
        SupabaseAPIError("A user with this email address has already been registered", code='email_exists'),
        SupabaseAPIError("exists", status=422),
    ])
    def test_create_existing_user(self, error) -> None:
        client = MagicMock()
        client.auth.admin.create_user.side_effect = error

        with pytest.raises(AuthUserExists):
            SupabaseAuthProvider(client=client).create_user('ana@example.com', 'pw')

    def test_create_user_other_error_propagates(self) -> None:
        client = MagicMock()
        client.auth.admin.create_user.side_effect = SupabaseAPIError("boom", status=500)

        with pytest.raises(SupabaseAPIError):
            SupabaseAuthProvider(client=client).create_user('ana@example.com', 'pw')

    def test_set_password_unknown_user(self) -> None:
        client = MagicMock()
        client.auth.admin.update_user_by_id.side_effect = SupabaseAPIError("User not found", code='user_not_found')

        with pytest.raises(AuthUserNotFound):
            SupabaseAuthProvider(client=client).set_password('uid-x', 'pw')
