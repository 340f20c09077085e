"""Tests for the template teardown helper."""

import httpx
import pytest

from integrations.postmark_client import PostmarkClient
from tests.fake_postmark import SERVER_TOKEN
from utils.template_cleanup import delete_all_templates


@pytest.mark.asyncio
async def test_delete_all_templates_empties_listing(client, fake_server, make_template):
    created = [await make_template(f"cleanup {i}") for i in range(4)]

    deleted = await delete_all_templates(client)

    assert sorted(deleted) == sorted(t.template_id for t in created)
    listing = await client.get_templates()
    assert listing.total_count == 0
    # soft delete keeps the records
    assert len(fake_server.templates) == 4


@pytest.mark.asyncio
async def test_delete_all_templates_with_nothing_to_do(client, fake_server):
    assert await delete_all_templates(client) == []
    assert len(fake_server.requests) == 1


@pytest.mark.asyncio
async def test_delete_all_templates_skips_failed_delete(fake_server, make_template):
    created = [await make_template(f"cleanup {i}") for i in range(3)]
    failing_id = created[1].template_id

    def handler(request):
        if request.method == "DELETE" and request.url.path == f"/templates/{failing_id}":
            return httpx.Response(500, json={"ErrorCode": 0, "Message": "Internal error"})
        return fake_server.handle(request)

    flaky_client = PostmarkClient(
        server_token=SERVER_TOKEN,
        base_url="https://api.postmark.test",
        transport=httpx.MockTransport(handler),
    )

    deleted = await delete_all_templates(flaky_client)

    assert sorted(deleted) == sorted([created[0].template_id, created[2].template_id])
    assert fake_server.templates[failing_id]["Active"] is True
