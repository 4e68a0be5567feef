"""Social post tool — post a status to X (Twitter) with caller-supplied keys.

Credentials are request-scoped: they arrive with each call and are never
stored by the server.
"""
import logging
from functools import partial
from typing import Any, Dict, Optional

from tweepy.asynchronous import AsyncClient

from ..registry import ToolDef, ToolName, ToolParam, ToolResult

logger = logging.getLogger(__name__)

CREDENTIAL_FIELDS = ("apiKey", "apiSecret", "accessToken", "accessSecret")

MISSING_CREDENTIALS_TEXT = "Twitter credentials are missing. Please configure your Twitter API keys."


def credentials_complete(credentials: Optional[Dict[str, Any]]) -> bool:
    return bool(credentials) and all(credentials.get(f) for f in CREDENTIAL_FIELDS)


class SocialPoster:
    """Posts statuses through the X API v2."""

    async def post(self, text: str, credentials: Dict[str, str]) -> Optional[str]:
        """Publish text, returning the new post id. Raises on API failure."""
        client = AsyncClient(
            consumer_key=credentials["apiKey"],
            consumer_secret=credentials["apiSecret"],
            access_token=credentials["accessToken"],
            access_token_secret=credentials["accessSecret"],
        )
        resp = await client.create_tweet(text=text)
        data = getattr(resp, "data", None) or {}
        return data.get("id")


async def create_post(status: str, credentials: Optional[Dict[str, Any]] = None,
                      poster: SocialPoster = None, **kwargs) -> ToolResult:
    if not credentials_complete(credentials):
        return ToolResult(text=MISSING_CREDENTIALS_TEXT, ok=False)

    try:
        post_id = await poster.post(status, credentials)
    except Exception as e:
        logger.error(f"Post failed: {e}")
        return ToolResult(text=f"Failed to tweet: {e}", ok=False)

    logger.info(f"Posted status id={post_id} ({len(status)} chars)")
    return ToolResult(text=f'Successfully tweeted: "{status}"')


def make_post_tool(poster: SocialPoster) -> ToolDef:
    return ToolDef(
        name=ToolName.CREATE_POST,
        description="Create a post on X (formerly Twitter)",
        params=[
            ToolParam("status", description="text of the post"),
            ToolParam(
                "credentials",
                type="object",
                description="X API credentials; supplied by the server when posting from chat",
                required=False,
                properties=[ToolParam(f) for f in CREDENTIAL_FIELDS],
            ),
        ],
        handler=partial(create_post, poster=poster),
        needs_credentials=True,
    )
