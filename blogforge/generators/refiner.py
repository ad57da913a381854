from collections.abc import Sequence

from blogforge.core.cancellation import CancellationToken, ensure_token
from blogforge.core.errors import CompletionError, FatalServiceError
from blogforge.generators.base import BaseGenerator
from blogforge.models import LengthRange, Message
from blogforge.prompts import build_consistency_messages, build_paragraph_fix_messages, build_resize_messages
from blogforge.utils.logger import logger
from blogforge.validation import ContentValidator, check_length, check_paragraph_endings

REVISION_TEMPERATURE = 0.5


class ContentRefiner(BaseGenerator):
	"""
	Bring generated text inside its length window and fix unterminated paragraphs.

	Each re-prompt spends one attempt from ``attempts_remaining``. When the
	budget runs out the current text is returned as-is: an unmet target is
	never an error here.
	"""

	async def refine(
		self,
		text: str,
		target: LengthRange | None = None,
		attempts_remaining: int | None = None,
		cancellation_token: CancellationToken | None = None,
		section_title: str = '',
	) -> str:
		token = ensure_token(cancellation_token)
		target = target or self.default_target
		attempts = self.config.REFINE_ATTEMPTS if attempts_remaining is None else attempts_remaining

		while attempts > 0:
			adjusted = False

			if check_length(text, target) and attempts > 0:
				revised = await self._revise(build_resize_messages(text, target, section_title, self.language), target, token)
				attempts -= 1
				if revised is None:
					return text
				text, adjusted = revised, True

			if check_paragraph_endings(text) and attempts > 0:
				revised = await self._revise(build_paragraph_fix_messages(text, self.language), target, token)
				attempts -= 1
				if revised is None:
					return text
				text, adjusted = revised, True

			if not adjusted:
				break

			if attempts > 0:
				revised = await self._revise(build_consistency_messages(text, target, self.language), target, token)
				attempts -= 1
				if revised is None:
					return text
				text = revised

			if not ContentValidator(target).validate(text):
				break

		issues = ContentValidator(target).validate(text)
		if issues:
			logger.warning(f'Refinement budget spent for "{section_title}"; keeping best effort: {issues[0].message}')
		return text

	async def _revise(self, messages: Sequence[Message], target: LengthRange, token: CancellationToken) -> str | None:
		token.raise_if_cancelled()

		try:
			revised = await self._complete(messages, token, self._content_options(target, REVISION_TEMPERATURE))
		except FatalServiceError:
			raise
		except CompletionError as e:
			logger.warning(f'Failed to refine content: {e}')
			return None

		if not revised:
			logger.warning('Refinement returned empty text; keeping previous version')
			return None
		return revised
