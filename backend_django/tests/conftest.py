import pytest
from rest_framework.test import APIClient

from hair_app.application.errors import StorageError
from hair_app.application.ports.auth import AuthIdentity

USER = AuthIdentity(uid='user-1', email='ana@example.com', created_at='2024-01-15T10:00:00+00:00')
OTHER_USER = AuthIdentity(uid='user-2', email='ben@example.com', created_at='2024-02-01T10:00:00+00:00')

SAMPLE_ANALYSIS = (
    "**AI Description**\n"
    "Your hair is wavy, medium thickness, and very dry at the ends with some split ends.\n\n"
    "**Hair Care Routine**\n"
    "1. **Cleansing:** Use a sulfate-free shampoo twice a week.\n"
    "2. **Conditioning:** Condition after every wash, mid-lengths to ends.\n"
    "3. **Treatments:** Weekly hydrating mask with shea butter.\n"
    "4. **Styling:** Air dry and use a heat protectant.\n\n"
    "**Daily/Weekly Hair Care Schedule**\n"
    "**DAILY ROUTINE:**\n"
    "Morning:\n"
    "• Step 1: Mist hair with water\n"
    "• Step 2: Apply leave-in conditioner\n\n"
    "Evening:\n"
    "• Step 1: Sleep on a silk pillowcase\n\n"
    "**WEEKLY ROUTINE:**\n"
    "Wash Days (2 times per week):\n"
    "• Step 1: Pre-poo with coconut oil\n"
    "• Step 2: Shampoo the scalp only\n\n"
    "Weekly Treatments:\n"
    "• Deep Conditioning: Once weekly for 20 minutes\n"
    "• Scalp Care: Massage with rosemary oil\n"
    "• Special Treatments: Protein treatment monthly\n\n"
    "**Product Suggestions**\n"
    "- Sulfate-free moisturizing shampoo\n"
    "- Silicone-free conditioner\n\n"
    "**AI Bonus Tips**\n"
    "1. Drink plenty of water\n"
    "2. Trim every 8 weeks\n"
)


class FakeAuthProvider:
    def __init__(self):
        self.tokens = {'good-token': USER, 'other-token': OTHER_USER}
        self.verified = []

    def verify_token(self, token):
        self.verified.append(token)
        return self.tokens.get(token)


class FakeStorage:
    def __init__(self, fail_on=None):
        self.calls = []
        self.fail_on = fail_on

    def upload(self, data, filename, content_type, folder):
        self.calls.append((folder, filename, content_type, len(data)))
        if self.fail_on is not None and len(self.calls) == self.fail_on:
            raise StorageError(f"upload {len(self.calls)} failed")
        return f"https://cdn.test/{folder}/{filename}"


class FakeAnalyzer:
    def __init__(self, text=SAMPLE_ANALYSIS, error=None):
        self.text = text
        self.error = error
        self.image_calls = []
        self.prompts = []

    def analyze_images(self, image_urls, prompt):
        self.image_calls.append(list(image_urls))
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text

    def complete(self, prompt, max_tokens=500, timeout=30.0):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture(autouse=True)
def auth_provider(monkeypatch):
    from hair_app.config import container

    provider = FakeAuthProvider()
    monkeypatch.setattr(container, 'get_auth_provider', lambda: provider)
    return provider


@pytest.fixture
def storage(monkeypatch):
    from hair_app.config import container

    fake = FakeStorage()
    monkeypatch.setattr(container, 'get_storage', lambda: fake)
    return fake


@pytest.fixture
def analyzer(monkeypatch):
    from hair_app.config import container

    fake = FakeAnalyzer()
    monkeypatch.setattr(container, 'get_vision_client', lambda: fake)
    return fake


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client():
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION='Bearer good-token')
    return client


@pytest.fixture
def other_client():
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION='Bearer other-token')
    return client
