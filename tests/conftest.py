from unittest.mock import AsyncMock, MagicMock

import pytest

from blogforge.config.settings import Settings
from blogforge.llm.client import CompletionClient
from blogforge.llm.transport import BaseTransport
from blogforge.models import CompletionResult


class ScriptedTransport(BaseTransport):
	"""Replays queued results in order; the last one repeats once the queue is drained."""

	def __init__(self, *results: CompletionResult):
		self.results = list(results)
		self.requests = []

	async def send(self, request):
		self.requests.append(request)
		if len(self.results) > 1:
			return self.results.pop(0)
		return self.results[0]


class SleepRecorder:
	"""Stands in for the backoff and pacing sleeps; records every delay instead of waiting."""

	def __init__(self):
		self.delays = []

	async def __call__(self, token, seconds):
		token.raise_if_cancelled()
		self.delays.append(seconds)


def japanese_text(length: int) -> str:
	"""A single terminated paragraph of exactly ``length`` characters."""
	return 'あ' * (length - 1) + '。'


@pytest.fixture
def config():
	return Settings(
		_env_file=None,
		COMPLETION_BACKEND='proxy',
		MAX_RETRIES=3,
		RETRY_BASE_DELAY=1.0,
		REFINE_ATTEMPTS=3,
		SECTION_MIN_LENGTH=800,
		SECTION_MAX_LENGTH=1200,
		PACING_DELAY=1.0,
		ARTICLE_LANGUAGE='Japanese',
		DEFAULT_TEMPERATURE=0.7,
		DEFAULT_MAX_TOKENS=1000,
	)


@pytest.fixture
def sleep_recorder():
	return SleepRecorder()


@pytest.fixture
def scripted_transport():
	return ScriptedTransport


@pytest.fixture
def make_client(sleep_recorder):
	def _make(transport, max_retries=3, base_delay=1.0, **kwargs):
		return CompletionClient(transport, max_retries=max_retries, base_delay=base_delay, sleep=sleep_recorder, **kwargs)

	return _make


@pytest.fixture
def mock_llm_client():
	client = MagicMock(spec=CompletionClient)
	client.complete = AsyncMock(return_value=japanese_text(900))
	return client


@pytest.fixture
def text_of_length():
	return japanese_text
