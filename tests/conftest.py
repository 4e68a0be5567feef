"""Shared fixtures: fake collaborators, registry, session store, orchestrator."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from toolbridge.llm import LanguageModel, ModelReply
from toolbridge.pipeline import TurnOrchestrator
from toolbridge.schemas import SocialCredentials
from toolbridge.session import SessionStore
from toolbridge.tools import DictionaryClient, SocialPoster, build_registry


@pytest.fixture
def dictionary():
    client = MagicMock(spec=DictionaryClient)
    client.lookup = AsyncMock(return_value="a greeting or expression of goodwill")
    return client


@pytest.fixture
def poster():
    p = MagicMock(spec=SocialPoster)
    p.post = AsyncMock(return_value="1850000000000000000")
    return p


@pytest.fixture
def registry(dictionary, poster):
    return build_registry(dictionary=dictionary, poster=poster)


@pytest.fixture
def sessions():
    return SessionStore(max_sessions=10, ttl_seconds=3600)


@pytest.fixture
def model():
    m = MagicMock(spec=LanguageModel)
    m.generate = AsyncMock(return_value=ModelReply(text="Hi! How can I help?"))
    return m


@pytest.fixture
def orchestrator(registry, sessions, model):
    return TurnOrchestrator(registry, sessions, model, model_timeout=1.0, tool_timeout=1.0)


@pytest.fixture
def full_credentials():
    return SocialCredentials(
        api_key="ck-test", api_secret="cs-test",
        access_token="at-test", access_secret="as-test",
    )
