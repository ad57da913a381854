from collections.abc import Sequence

from blogforge.config.defaults import (
	DEFAULT_CONCLUSION_LENGTH,
	DEFAULT_CONCLUSION_TITLE,
	DEFAULT_INTRODUCTION_LENGTH,
	DEFAULT_INTRODUCTION_TITLE,
	DEFAULT_TONE,
)
from blogforge.config.settings import Settings
from blogforge.core.cancellation import CancellationToken, ensure_token
from blogforge.core.errors import ValidationError
from blogforge.generators import OutlineGenerator, TitleGenerator
from blogforge.generators.base import BaseGenerator
from blogforge.llm.client import CompletionClient
from blogforge.llm.retry import SleepFunc, cancellable_sleep
from blogforge.models import (
	ArticleSection,
	ArticleStructure,
	GeneratedArticle,
	LengthRange,
	OutlineSection,
	SectionKind,
)
from blogforge.prompts import build_conclusion_messages, build_introduction_messages, build_main_section_messages
from blogforge.utils.logger import logger


def build_structure(skeletons: Sequence[OutlineSection]) -> ArticleStructure:
	main = [s for s in skeletons if s.kind == SectionKind.MAIN]
	if not main:
		raise ValidationError('An article needs at least one main section')

	introduction = ArticleSection(
		title=DEFAULT_INTRODUCTION_TITLE, target_length=LengthRange.from_dict(DEFAULT_INTRODUCTION_LENGTH)
	)

	conclusions = [s for s in skeletons if s.kind == SectionKind.CONCLUSION]
	if conclusions:
		conclusion = ArticleSection(title=conclusions[-1].title, target_length=conclusions[-1].recommended_length)
	else:
		conclusion = ArticleSection(
			title=DEFAULT_CONCLUSION_TITLE, target_length=LengthRange.from_dict(DEFAULT_CONCLUSION_LENGTH)
		)

	return ArticleStructure(
		introduction=introduction,
		main_sections=[ArticleSection(title=s.title, target_length=s.recommended_length) for s in main],
		conclusion=conclusion,
	)


class ArticleOrchestrator(BaseGenerator):
	"""
	Generate a whole article unattended.

	Introduction, then main sections in order (each built on the one before),
	then the conclusion built on everything so far. Lengths are checked once
	at the end and any miss fails the whole run; there is no refinement here.
	"""

	def __init__(self, llm_client: CompletionClient, config: Settings, sleep: SleepFunc | None = None):
		super().__init__(llm_client, config)
		self.pacing_delay = config.PACING_DELAY
		self._sleep = sleep or cancellable_sleep

	async def generate(
		self,
		title: str,
		theme: str,
		section_skeletons: Sequence[OutlineSection],
		tone: str = DEFAULT_TONE,
		cancellation_token: CancellationToken | None = None,
	) -> GeneratedArticle:
		token = ensure_token(cancellation_token)
		structure = build_structure(section_skeletons)
		logger.info(f'=== Generating article: {title} ({len(structure.sections)} sections) ===')

		intro = structure.introduction
		intro.content = await self._complete(
			build_introduction_messages(title, theme, intro.title, tone, intro.target_length, self.language),
			token,
			self._content_options(intro.target_length),
		)
		logger.info(f'✓ Completed: {intro.title}')

		previous = intro
		for position, section in enumerate(structure.main_sections):
			if position > 0:
				# Pacing between requests, outside the retry budget
				await self._sleep(token, self.pacing_delay)

			section.content = await self._complete(
				build_main_section_messages(
					title,
					theme,
					section.title,
					(previous.title, previous.content),
					tone,
					section.target_length,
					self.language,
				),
				token,
				self._content_options(section.target_length),
			)
			logger.info(f'✓ Completed: {section.title}')
			previous = section

		conclusion = structure.conclusion
		conclusion.full_context = '\n\n'.join(s.content for s in [intro, *structure.main_sections])
		conclusion.content = await self._complete(
			build_conclusion_messages(
				title, theme, conclusion.title, conclusion.full_context, tone, conclusion.target_length, self.language
			),
			token,
			self._content_options(conclusion.target_length),
		)
		logger.info(f'✓ Completed: {conclusion.title}')

		self._validate_lengths(structure)

		article = GeneratedArticle(title=title, structure=structure)
		summary = article.get_summary()
		logger.info(f'Article complete: {summary["total_sections"]} sections, {summary["total_length"]:,} characters')
		return article

	def _validate_lengths(self, structure: ArticleStructure):
		violations = [
			f'{s.title} ({s.length} characters, target {s.target_length})'
			for s in structure.sections
			if not s.target_length.contains(s.length)
		]
		if violations:
			logger.error(f'Article rejected, sections outside their target length: {violations}')
			raise ValidationError(
				f'{len(violations)} section(s) outside their target length: {"; ".join(violations)}',
				count=len(violations),
			)

	async def run(
		self, theme: str, tone: str = DEFAULT_TONE, cancellation_token: CancellationToken | None = None
	) -> GeneratedArticle:
		"""Full flow: titles, outline, then the article under the first title."""
		token = ensure_token(cancellation_token)

		titles = await TitleGenerator(self.llm_client, self.config).generate(theme, cancellation_token=token)
		outline = await OutlineGenerator(self.llm_client, self.config).generate(theme, tone, cancellation_token=token)

		return await self.generate(titles[0], theme, outline.sections, tone, token)
