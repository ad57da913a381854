from blogforge.config.defaults import DEFAULT_TONE
from blogforge.core.cancellation import CancellationToken, ensure_token
from blogforge.core.errors import ValidationError
from blogforge.generators.base import BaseGenerator
from blogforge.models import CompletionOptions, Outline
from blogforge.prompts import build_outline_messages
from blogforge.utils.logger import logger
from blogforge.validation import validate_outline


class OutlineGenerator(BaseGenerator):
	async def generate(
		self, theme: str, tone: str = DEFAULT_TONE, cancellation_token: CancellationToken | None = None
	) -> Outline:
		if not theme or not theme.strip():
			raise ValueError('A theme is required')

		token = ensure_token(cancellation_token)
		messages = build_outline_messages(theme, tone, self.language)
		raw = await self._complete(messages, token, CompletionOptions(temperature=self.config.DEFAULT_TEMPERATURE))

		# A wrongly shaped outline is surfaced, not repaired
		try:
			outline = validate_outline(raw)
		except ValidationError as e:
			logger.warning(f'Rejected outline for "{theme}": {e}')
			raise

		logger.info(f'Generated outline with {len(outline.sections)} sections for "{theme}"')
		return outline
