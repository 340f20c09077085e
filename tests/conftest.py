import pytest

from integrations.postmark_client import PostmarkClient
from tests.fake_postmark import FakePostmarkServer, SERVER_TOKEN

BASE_URL = "https://api.postmark.test"


@pytest.fixture
def fake_server() -> FakePostmarkServer:
    """Fresh in-memory Postmark server per test"""
    return FakePostmarkServer()


@pytest.fixture
def client(fake_server) -> PostmarkClient:
    """Client wired to the fake server"""
    return PostmarkClient(
        server_token=SERVER_TOKEN,
        base_url=BASE_URL,
        transport=fake_server.transport,
    )


@pytest.fixture
def make_template(client):
    """Factory creating a template with the bodies most tests use"""

    async def _make(name: str = "welcome", **fields):
        defaults = {
            "subject": "A subject",
            "html_body": "<b>Hello, {{name}}</b>",
            "text_body": "Hello, {{name}}!",
        }
        defaults.update(fields)
        return await client.create_template(name, **defaults)

    return _make
