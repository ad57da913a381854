from collections.abc import Sequence

from tenacity import RetryCallState

from blogforge.config.settings import CompletionBackend, Settings
from blogforge.core.cancellation import CancellationToken, ensure_token
from blogforge.core.errors import CompletionError, FatalServiceError, error_from_failure
from blogforge.llm.retry import SleepFunc, backoff_retrying
from blogforge.llm.transport import BaseTransport, OpenAITransport, ProxyTransport
from blogforge.models import CompletionOptions, CompletionRequest, Message
from blogforge.utils.logger import logger


def _is_retryable(exc: BaseException) -> bool:
	return isinstance(exc, CompletionError) and exc.retryable


class CompletionClient:
	def __init__(
		self,
		transport: BaseTransport,
		max_retries: int = 3,
		base_delay: float = 1.0,
		default_options: CompletionOptions | None = None,
		sleep: SleepFunc | None = None,
	):
		self.transport = transport
		self.max_retries = max_retries
		self.base_delay = base_delay
		self.default_options = default_options or CompletionOptions()
		self._sleep = sleep

		self.total_requests = 0
		self.total_retries = 0
		self.total_input_tokens = 0
		self.total_output_tokens = 0

	async def complete(
		self,
		messages: Sequence[Message],
		options: CompletionOptions | None = None,
		cancellation_token: CancellationToken | None = None,
	) -> str:
		token = ensure_token(cancellation_token)
		request = CompletionRequest(
			messages=list(messages),
			options=(options or CompletionOptions()).merged_with(self.default_options),
		)

		retrying = backoff_retrying(
			self.max_retries,
			self.base_delay,
			token,
			should_retry=_is_retryable,
			sleep=self._sleep,
			before_sleep=self._log_retry,
		)

		try:
			async for attempt in retrying:
				with attempt:
					return await self._attempt(request, token)
		except CompletionError as e:
			logger.error(f'Completion failed: {e}')
			raise

		raise FatalServiceError('Retry loop ended without a result')

	async def _attempt(self, request: CompletionRequest, token: CancellationToken) -> str:
		token.raise_if_cancelled()

		self.total_requests += 1
		result = await self.transport.send(request)

		token.raise_if_cancelled()

		if not result.ok:
			raise error_from_failure(result.failure)

		self.total_input_tokens += result.input_tokens
		self.total_output_tokens += result.output_tokens
		return result.text

	def _log_retry(self, retry_state: RetryCallState):
		self.total_retries += 1
		exc = retry_state.outcome.exception() if retry_state.outcome else None
		delay = retry_state.next_action.sleep if retry_state.next_action else 0
		logger.warning(
			f'Attempt {retry_state.attempt_number}/{self.max_retries + 1} failed ({exc}); retrying in {delay:.1f}s'
		)

	def get_usage_stats(self) -> dict[str, int]:
		"""Get request and token usage statistics."""
		return {
			'requests': self.total_requests,
			'retries': self.total_retries,
			'input_tokens': self.total_input_tokens,
			'output_tokens': self.total_output_tokens,
			'total_tokens': self.total_input_tokens + self.total_output_tokens,
		}

	async def aclose(self):
		await self.transport.aclose()


def create_transport(config: Settings) -> BaseTransport:
	if config.backend == CompletionBackend.OPENAI:
		if not config.OPENAI_API_KEY:
			raise FatalServiceError('OPENAI_API_KEY is not set', code='configuration_error')
		return OpenAITransport(
			api_key=config.OPENAI_API_KEY,
			model=config.WRITING_MODEL,
			base_url=config.OPENAI_BASE_URL,
			timeout=config.REQUEST_TIMEOUT,
		)
	return ProxyTransport(config.COMPLETION_URL, timeout=config.REQUEST_TIMEOUT)


def create_completion_client(config: Settings) -> CompletionClient:
	client = CompletionClient(
		transport=create_transport(config),
		max_retries=config.MAX_RETRIES,
		base_delay=config.RETRY_BASE_DELAY,
		default_options=CompletionOptions(
			max_output_tokens=config.DEFAULT_MAX_TOKENS,
			temperature=config.DEFAULT_TEMPERATURE,
		),
	)
	logger.info(f'Completion client initialized: {config.backend.value}')
	return client
