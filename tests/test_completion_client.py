import asyncio

import pytest

from blogforge.config.settings import Settings
from blogforge.core.cancellation import CancellationToken
from blogforge.core.errors import (
	FatalServiceError,
	GenerationCancelled,
	MalformedResponseError,
	RateLimitedError,
	TransientServiceError,
)
from blogforge.llm.client import CompletionClient, create_completion_client, create_transport
from blogforge.llm.transport import BaseTransport, OpenAITransport, ProxyTransport
from blogforge.models import CompletionOptions, CompletionResult, FailureKind, Message

MESSAGES = [Message.system('You are a writer.'), Message.user('Write something.')]


def transient():
	return CompletionResult.error(FailureKind.TRANSIENT, 'Service unavailable')


def test_retries_with_exponential_backoff(make_client, scripted_transport, sleep_recorder):
	transport = scripted_transport(transient(), transient(), transient(), CompletionResult.success('done'))
	client = make_client(transport)

	text = asyncio.run(client.complete(MESSAGES))

	assert text == 'done'
	assert len(transport.requests) == 4
	# 1s, 2s, 4s before retries one to three
	assert [d * 1000 for d in sleep_recorder.delays] == [1000, 2000, 4000]
	assert client.get_usage_stats()['retries'] == 3


def test_gives_up_after_retry_budget(make_client, scripted_transport, sleep_recorder):
	transport = scripted_transport(CompletionResult.error(FailureKind.RATE_LIMITED, 'Slow down', code='rate_limit_exceeded'))
	client = make_client(transport)

	with pytest.raises(RateLimitedError) as exc_info:
		asyncio.run(client.complete(MESSAGES))

	assert exc_info.value.code == 'rate_limit_exceeded'
	assert len(transport.requests) == 4
	assert sleep_recorder.delays == [1.0, 2.0, 4.0]


def test_zero_retries_fails_on_first_error(make_client, scripted_transport, sleep_recorder):
	transport = scripted_transport(transient())
	client = make_client(transport, max_retries=0)

	with pytest.raises(TransientServiceError):
		asyncio.run(client.complete(MESSAGES))

	assert len(transport.requests) == 1
	assert sleep_recorder.delays == []


def test_fatal_error_is_not_retried(make_client, scripted_transport, sleep_recorder):
	transport = scripted_transport(CompletionResult.error(FailureKind.FATAL, 'Bad key', code='invalid_api_key'))
	client = make_client(transport)

	with pytest.raises(FatalServiceError):
		asyncio.run(client.complete(MESSAGES))

	assert len(transport.requests) == 1
	assert sleep_recorder.delays == []


def test_malformed_response_is_not_retried(make_client, scripted_transport, sleep_recorder):
	transport = scripted_transport(CompletionResult.error(FailureKind.MALFORMED, 'Response is missing the content field'))
	client = make_client(transport)

	with pytest.raises(MalformedResponseError):
		asyncio.run(client.complete(MESSAGES))

	assert len(transport.requests) == 1


def test_cancelled_token_skips_the_request(make_client, scripted_transport):
	transport = scripted_transport(CompletionResult.success('never'))
	client = make_client(transport)
	token = CancellationToken()
	token.cancel()

	with pytest.raises(GenerationCancelled):
		asyncio.run(client.complete(MESSAGES, cancellation_token=token))

	assert transport.requests == []


def test_cancellation_interrupts_backoff(scripted_transport):
	transport = scripted_transport(transient())
	# Real cancellable sleep with a delay long enough to notice if it is not interrupted
	client = CompletionClient(transport, max_retries=3, base_delay=30.0)

	async def scenario():
		token = CancellationToken()
		asyncio.get_running_loop().call_later(0.05, token.cancel)
		await asyncio.wait_for(client.complete(MESSAGES, cancellation_token=token), timeout=5)

	with pytest.raises(GenerationCancelled):
		asyncio.run(scenario())

	assert len(transport.requests) == 1


def test_response_after_cancellation_is_discarded(make_client):
	token = CancellationToken()

	class CancellingTransport(BaseTransport):
		def __init__(self):
			self.calls = 0

		async def send(self, request):
			self.calls += 1
			token.cancel()
			return CompletionResult.success('too late')

	transport = CancellingTransport()
	client = make_client(transport)

	with pytest.raises(GenerationCancelled):
		asyncio.run(client.complete(MESSAGES, cancellation_token=token))

	assert transport.calls == 1


def test_options_fall_back_to_defaults(make_client, scripted_transport):
	transport = scripted_transport(CompletionResult.success('ok'))
	client = make_client(transport, default_options=CompletionOptions(max_output_tokens=1000, temperature=0.7))

	asyncio.run(client.complete(MESSAGES, CompletionOptions(temperature=0.2)))

	payload = transport.requests[0].to_payload()
	assert payload['temperature'] == 0.2
	assert payload['max_tokens'] == 1000
	assert 'presence_penalty' not in payload
	assert payload['messages'][0] == {'role': 'system', 'content': 'You are a writer.'}


def test_usage_stats_accumulate(make_client, scripted_transport):
	transport = scripted_transport(CompletionResult.success('ok', input_tokens=12, output_tokens=30))
	client = make_client(transport)

	asyncio.run(client.complete(MESSAGES))
	asyncio.run(client.complete(MESSAGES))

	stats = client.get_usage_stats()
	assert stats['requests'] == 2
	assert stats['input_tokens'] == 24
	assert stats['output_tokens'] == 60
	assert stats['total_tokens'] == 84


def test_openai_backend_requires_api_key():
	config = Settings(_env_file=None, COMPLETION_BACKEND='openai', OPENAI_API_KEY=None)

	with pytest.raises(FatalServiceError) as exc_info:
		create_transport(config)

	assert exc_info.value.code == 'configuration_error'


def test_backend_selection():
	proxy = create_transport(Settings(_env_file=None, COMPLETION_BACKEND='proxy'))
	openai_transport = create_transport(Settings(_env_file=None, COMPLETION_BACKEND='openai', OPENAI_API_KEY='sk-test'))

	assert isinstance(proxy, ProxyTransport)
	assert isinstance(openai_transport, OpenAITransport)


def test_client_uses_configured_budget(config):
	client = create_completion_client(config)

	assert client.max_retries == 3
	assert client.base_delay == 1.0
	assert client.default_options.max_output_tokens == 1000
	assert client.default_options.temperature == 0.7
