import asyncio
from typing import List
from integrations.postmark_client import PostmarkClient, MAX_PAGE_SIZE
from utils.logger import logger


async def delete_all_templates(client: PostmarkClient) -> List[int]:
    """
    Deactivate every active template on the client's server

    Lists the first page of templates and deletes them concurrently.
    Deactivated templates drop out of the listing, so repeated calls
    converge on an empty server.

    Args:
        client: Client bound to the server to clean

    Returns:
        Ids of the templates that were deleted
    """
    listing = await client.get_templates(count=MAX_PAGE_SIZE)
    template_ids = [t.template_id for t in listing.templates if t.active]
    if not template_ids:
        return []

    results = await asyncio.gather(
        *(client.delete_template(template_id) for template_id in template_ids),
        return_exceptions=True
    )

    deleted = []
    for template_id, result in zip(template_ids, results):
        if isinstance(result, Exception):
            logger.warning(f"Failed to delete template {template_id}: {result}")
        else:
            deleted.append(template_id)

    logger.info(f"Cleaned up {len(deleted)} of {len(template_ids)} templates")
    return deleted
