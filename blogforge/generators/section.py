from blogforge.config.defaults import DEFAULT_TONE
from blogforge.config.settings import Settings
from blogforge.core.cancellation import CancellationToken, ensure_token
from blogforge.generators.base import BaseGenerator
from blogforge.generators.refiner import ContentRefiner
from blogforge.llm.client import CompletionClient
from blogforge.models import LengthRange
from blogforge.prompts import (
	PrecedingSections,
	build_contextual_section_messages,
	build_section_messages,
	section_position,
)
from blogforge.utils.logger import logger


class SectionGenerator(BaseGenerator):
	def __init__(self, llm_client: CompletionClient, config: Settings, refiner: ContentRefiner | None = None):
		super().__init__(llm_client, config)
		self.refiner = refiner or ContentRefiner(llm_client, config)

	async def _refine(self, text: str, target: LengthRange, token: CancellationToken, section_title: str) -> str:
		refined = await self.refiner.refine(text, target, self.config.REFINE_ATTEMPTS, token, section_title)
		logger.info(f'Section "{section_title}" generated ({len(refined)} characters, target {target})')
		return refined


class SimpleSectionGenerator(SectionGenerator):
	"""One self-contained prompt per section."""

	async def generate(
		self,
		theme: str,
		section_title: str,
		cancellation_token: CancellationToken | None = None,
		tone: str = DEFAULT_TONE,
		target: LengthRange | None = None,
	) -> str:
		token = ensure_token(cancellation_token)
		target = target or self.default_target

		messages = build_section_messages(theme, section_title, tone, target, self.language)
		text = await self._complete(messages, token, self._content_options(target))
		return await self._refine(text, target, token, section_title)


class ContextualSectionGenerator(SectionGenerator):
	"""Each section is written on top of every section before it."""

	async def generate(
		self,
		theme: str,
		section_title: str,
		preceding_sections: PrecedingSections,
		is_final_section: bool,
		cancellation_token: CancellationToken | None = None,
		tone: str = DEFAULT_TONE,
		target: LengthRange | None = None,
	) -> str:
		token = ensure_token(cancellation_token)
		target = target or self.default_target
		position = section_position(len(preceding_sections), is_final_section)

		messages = build_contextual_section_messages(
			theme, section_title, preceding_sections, position, tone, target, self.language
		)
		text = await self._complete(messages, token, self._content_options(target))
		return await self._refine(text, target, token, section_title)
