"""Dictionary tool — look up a word via the Free Dictionary API."""
import logging
from functools import partial
from typing import Optional
from urllib.parse import quote

import httpx

from ..registry import ToolDef, ToolName, ToolParam, ToolResult

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.dictionaryapi.dev/api/v2/entries/en"


class DictionaryNotFound(Exception):
    """The dictionary has no entry for the word."""


class DictionaryClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: float = 10.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def lookup(self, word: str) -> Optional[str]:
        """First sense's definition, or None when the entry has no definitions.

        Raises DictionaryNotFound for unknown words and httpx errors for
        transport or server failures.
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            resp = await client.get(f"{self.base_url}/{quote(word, safe='')}")
            if resp.status_code == 404:
                raise DictionaryNotFound(word)
            resp.raise_for_status()
            data = resp.json()

        try:
            return data[0]["meanings"][0]["definitions"][0]["definition"] or None
        except (IndexError, KeyError, TypeError):
            return None


async def define_word(word: str, dictionary: DictionaryClient = None, **kwargs) -> ToolResult:
    try:
        definition = await dictionary.lookup(word)
    except DictionaryNotFound:
        return ToolResult(text=f'Could not find definition for "{word}"', ok=False)
    except httpx.HTTPStatusError as e:
        logger.error(f"Dictionary API error for '{word}': {e}")
        return ToolResult(text=f'Could not find definition for "{word}"', ok=False)
    except Exception as e:
        logger.error(f"Dictionary lookup failed for '{word}': {e}")
        return ToolResult(text=f'Error looking up "{word}": {e}', ok=False)

    if not definition:
        return ToolResult(text=f'No definition found for "{word}"', ok=False)
    return ToolResult(text=f"{word}: {definition}")


def make_define_tool(dictionary: DictionaryClient) -> ToolDef:
    return ToolDef(
        name=ToolName.DEFINE_WORD,
        description="Look up the definition of an English word",
        params=[ToolParam("word", description="word to define")],
        handler=partial(define_word, dictionary=dictionary),
    )
