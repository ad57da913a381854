from tenacity import RetryCallState

from blogforge.config.defaults import REQUIRED_TITLE_COUNT, TITLE_MAX_TOKENS, TITLE_TEMPERATURE
from blogforge.config.settings import Settings
from blogforge.core.cancellation import CancellationToken, ensure_token
from blogforge.core.errors import MalformedResponseError, ValidationError
from blogforge.generators.base import BaseGenerator
from blogforge.llm.client import CompletionClient
from blogforge.llm.retry import SleepFunc, backoff_retrying
from blogforge.models import CompletionOptions
from blogforge.prompts import build_title_messages
from blogforge.utils.logger import logger
from blogforge.validation import validate_titles


def _is_shape_failure(exc: BaseException) -> bool:
	return isinstance(exc, (ValidationError, MalformedResponseError))


class TitleGenerator(BaseGenerator):
	def __init__(
		self,
		llm_client: CompletionClient,
		config: Settings,
		max_retries: int | None = None,
		sleep: SleepFunc | None = None,
	):
		super().__init__(llm_client, config)
		self.max_retries = config.MAX_RETRIES if max_retries is None else max_retries
		self._sleep = sleep

	async def generate(
		self,
		theme: str | None = None,
		content: str | None = None,
		cancellation_token: CancellationToken | None = None,
	) -> list[str]:
		if not theme and not content:
			raise ValueError('A theme or content is required')

		token = ensure_token(cancellation_token)
		messages = build_title_messages(theme, content, self.language)
		options = CompletionOptions(max_output_tokens=TITLE_MAX_TOKENS, temperature=TITLE_TEMPERATURE)

		retrying = backoff_retrying(
			self.max_retries,
			self.config.RETRY_BASE_DELAY,
			token,
			should_retry=_is_shape_failure,
			sleep=self._sleep,
			before_sleep=self._log_retry,
		)

		async for attempt in retrying:
			with attempt:
				raw = await self._complete(messages, token, options)
				titles = validate_titles(raw, REQUIRED_TITLE_COUNT)
				logger.info(f'Generated titles: {titles}')
				return titles

		raise ValidationError('Title generation ended without a result', count=0)

	def _log_retry(self, retry_state: RetryCallState):
		exc = retry_state.outcome.exception() if retry_state.outcome else None
		logger.warning(f'Title generation attempt {retry_state.attempt_number} failed ({exc}); regenerating')
