from blogforge.config.settings import Settings
from blogforge.generators.base import BaseGenerator
from blogforge.generators.outline import OutlineGenerator
from blogforge.generators.refiner import ContentRefiner
from blogforge.generators.section import ContextualSectionGenerator, SectionGenerator, SimpleSectionGenerator
from blogforge.generators.titles import TitleGenerator
from blogforge.llm.client import CompletionClient
from blogforge.models import GenerationMode


class GeneratorFactory:
	def __init__(self, llm_client: CompletionClient, config: Settings):
		self.llm_client = llm_client
		self.config = config
		self.refiner = ContentRefiner(llm_client, config)

		self._generators: dict[GenerationMode, SectionGenerator] = {}

	def get_section_generator(self, mode: GenerationMode) -> SectionGenerator:
		if mode in self._generators:
			return self._generators[mode]

		if mode == GenerationMode.SIMPLE:
			generator = SimpleSectionGenerator(self.llm_client, self.config, self.refiner)
		elif mode == GenerationMode.CONTEXTUAL:
			generator = ContextualSectionGenerator(self.llm_client, self.config, self.refiner)
		else:
			raise ValueError(f'Unknown generation mode: {mode}')

		self._generators[mode] = generator
		return generator

	def get_title_generator(self) -> TitleGenerator:
		return TitleGenerator(self.llm_client, self.config)

	def get_outline_generator(self) -> OutlineGenerator:
		return OutlineGenerator(self.llm_client, self.config)


__all__ = [
	'GeneratorFactory',
	'BaseGenerator',
	'ContentRefiner',
	'SectionGenerator',
	'SimpleSectionGenerator',
	'ContextualSectionGenerator',
	'TitleGenerator',
	'OutlineGenerator',
]
