from collections.abc import Sequence

from blogforge.config.settings import Settings
from blogforge.core.cancellation import CancellationToken
from blogforge.llm.client import CompletionClient
from blogforge.models import CompletionOptions, LengthRange, Message


class BaseGenerator:
	def __init__(self, llm_client: CompletionClient, config: Settings):
		self.llm_client = llm_client
		self.config = config

	@property
	def language(self) -> str:
		return self.config.ARTICLE_LANGUAGE

	@property
	def default_target(self) -> LengthRange:
		return LengthRange(min=self.config.SECTION_MIN_LENGTH, max=self.config.SECTION_MAX_LENGTH)

	def _content_options(self, target: LengthRange, temperature: float | None = None) -> CompletionOptions:
		# Roughly one token per character for Japanese text, with headroom
		return CompletionOptions(
			max_output_tokens=max(self.config.DEFAULT_MAX_TOKENS, target.max * 2),
			temperature=temperature,
		)

	async def _complete(
		self,
		messages: Sequence[Message],
		token: CancellationToken,
		options: CompletionOptions | None = None,
	) -> str:
		text = await self.llm_client.complete(messages, options, token)
		return text.strip()
