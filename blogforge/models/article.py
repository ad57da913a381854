from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SectionKind(Enum):
	MAIN = 'main'
	CONCLUSION = 'conclusion'


@dataclass(frozen=True)
class LengthRange:
	min: int
	max: int

	def contains(self, length: int) -> bool:
		return self.min <= length <= self.max

	def __str__(self) -> str:
		return f'{self.min}-{self.max}'

	@classmethod
	def from_dict(cls, data: dict[str, int]) -> 'LengthRange':
		return cls(min=data['min'], max=data['max'])


@dataclass(frozen=True)
class OutlineSection:
	title: str
	description: str
	recommended_length: LengthRange
	kind: SectionKind = SectionKind.MAIN

	def to_dict(self) -> dict[str, Any]:
		return {
			'title': self.title,
			'description': self.description,
			'recommendedLength': {'min': self.recommended_length.min, 'max': self.recommended_length.max},
			'type': self.kind.value,
		}


@dataclass(frozen=True)
class Outline:
	sections: list[OutlineSection]
	estimated_total_length: int | None = None
	estimated_reading_time: str | None = None
	target_audience: str | None = None
	keywords: list[str] = field(default_factory=list)

	@property
	def conclusion(self) -> OutlineSection:
		return self.sections[-1]

	def to_dict(self) -> dict[str, Any]:
		return {
			'sections': [s.to_dict() for s in self.sections],
			'estimatedTotalLength': self.estimated_total_length,
			'estimatedReadingTime': self.estimated_reading_time,
			'targetAudience': self.target_audience,
			'keywords': list(self.keywords),
		}


@dataclass
class ArticleSection:
	title: str
	target_length: LengthRange
	content: str = ''
	# Only set on the conclusion; prompt input, never rendered
	full_context: str | None = None

	@property
	def length(self) -> int:
		return len(self.content.strip())


@dataclass
class ArticleStructure:
	introduction: ArticleSection
	main_sections: list[ArticleSection]
	conclusion: ArticleSection

	@property
	def sections(self) -> list[ArticleSection]:
		return [self.introduction, *self.main_sections, self.conclusion]


@dataclass
class GeneratedArticle:
	title: str
	structure: ArticleStructure

	@property
	def sections(self) -> list[ArticleSection]:
		return self.structure.sections

	@property
	def full_text(self) -> str:
		parts = [self.title]
		for section in self.sections:
			parts.append(f'{section.title}\n\n{section.content.strip()}')
		return '\n\n'.join(parts)

	def get_summary(self) -> dict[str, Any]:
		return {
			'title': self.title,
			'total_sections': len(self.sections),
			'total_length': sum(s.length for s in self.sections),
			'sections': {s.title: s.length for s in self.sections},
		}
