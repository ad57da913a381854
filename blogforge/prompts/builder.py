"""
Prompt construction.

Every builder is a pure function from task parameters to an ordered list of
messages, system message first. Nothing here touches the network.
"""

from collections.abc import Sequence
from enum import Enum

from blogforge.config.defaults import DEFAULT_TONE, MAX_TITLE_LENGTH, REQUIRED_TITLE_COUNT, TONE_DESCRIPTIONS
from blogforge.models import LengthRange, Message

PrecedingSections = Sequence[tuple[str, str]]


class SectionPosition(Enum):
	INTRODUCTION = 'introduction'
	INTERIOR = 'interior'
	CLOSING = 'closing'


def section_position(index: int, is_final_section: bool) -> SectionPosition:
	if is_final_section:
		return SectionPosition.CLOSING
	if index == 0:
		return SectionPosition.INTRODUCTION
	return SectionPosition.INTERIOR


def describe_tone(tone: str) -> str:
	return TONE_DESCRIPTIONS.get(tone, TONE_DESCRIPTIONS[DEFAULT_TONE])


def format_preceding_sections(preceding: PrecedingSections) -> str:
	return '\n\n'.join(f'## {title}\n{content.strip()}' for title, content in preceding)


def _writing_rules(tone: str, target: LengthRange, language: str) -> str:
	return f"""- Write in {language}
- Tone: {describe_tone(tone)}
- Length: {target.min}-{target.max} characters
- Use Markdown; do not repeat the section title as a heading
- End every paragraph with a complete sentence
- Include concrete examples and explanations"""


def build_title_messages(theme: str | None, content: str | None, language: str) -> list[Message]:
	excerpt = f'{content[:500]}...' if content else 'not specified'
	system = (
		'You are an expert at writing blog article titles. '
		f'Suggest {REQUIRED_TITLE_COUNT} attractive, search-friendly titles.'
	)
	user = f"""Suggest {REQUIRED_TITLE_COUNT} titles for a blog article.

Theme: {theme or 'not specified'}
Content excerpt: {excerpt}

Requirements:
- Catch the reader's interest
- Be easy to find through search
- At most {MAX_TITLE_LENGTH} characters each
- Convey the value of the article
- Write in {language}

Format:
1. [title 1]
2. [title 2]
3. [title 3]"""
	return [Message.system(system), Message.user(user)]


def build_outline_messages(theme: str, tone: str, language: str) -> list[Message]:
	system = (
		'You are an expert at structuring blog articles. '
		'Propose an outline that is easy for readers to follow and effective for search.'
	)
	user = f"""Propose an outline for a blog article.

Theme: {theme}
Tone: {describe_tone(tone)}
Language: {language}

Requirements:
- A clear flow for the reader
- 3 to 5 sections
- A recommended length range in characters for each section
- Descriptions of at most 100 characters
- The last section must be the conclusion, with "type": "conclusion"; every other section uses "type": "main"

Return ONLY valid JSON (no markdown, no explanations):
{{
  "sections": [
    {{
      "title": "Section title",
      "description": "What the section covers",
      "recommendedLength": {{"min": 800, "max": 1200}},
      "type": "main"
    }}
  ],
  "estimatedTotalLength": 4000,
  "estimatedReadingTime": "8 minutes",
  "targetAudience": "Intended readers",
  "keywords": ["keyword 1", "keyword 2"]
}}"""
	return [Message.system(system), Message.user(user)]


def build_section_messages(
	theme: str, section_title: str, tone: str, target: LengthRange, language: str
) -> list[Message]:
	system = f"""You write the content of one blog article section.
Follow these rules:
{_writing_rules(tone, target, language)}"""
	user = f"""Theme: {theme}
Section title: {section_title}

Write the content of this section based on the theme and section title."""
	return [Message.system(system), Message.user(user)]


_POSITION_INSTRUCTIONS = {
	SectionPosition.INTRODUCTION: (
		'This is the opening section. Give the reader background on the theme, '
		'explain why it matters and preview what the article will cover.'
	),
	SectionPosition.INTERIOR: (
		'This section continues the article. Build on the previous sections without repeating them '
		'and make the transition from the preceding section natural.'
	),
	SectionPosition.CLOSING: (
		'This is the closing section. Summarize the key points of the whole article '
		'and finish with a clear call to action for the reader.'
	),
}


def build_contextual_section_messages(
	theme: str,
	section_title: str,
	preceding: PrecedingSections,
	position: SectionPosition,
	tone: str,
	target: LengthRange,
	language: str,
) -> list[Message]:
	system = f"""You write one section of a blog article that is generated section by section.
{_POSITION_INSTRUCTIONS[position]}
Follow these rules:
{_writing_rules(tone, target, language)}"""

	context = format_preceding_sections(preceding) if preceding else 'None yet. This is the first section.'
	user = f"""Theme: {theme}
Section title: {section_title}

### PREVIOUS SECTIONS
{context}

Write the content of this section now. Begin directly with the section body."""
	return [Message.system(system), Message.user(user)]


def build_introduction_messages(
	article_title: str, theme: str, section_title: str, tone: str, target: LengthRange, language: str
) -> list[Message]:
	system = f"""You write the introduction of a blog article.
{_POSITION_INSTRUCTIONS[SectionPosition.INTRODUCTION]}
Follow these rules:
{_writing_rules(tone, target, language)}"""
	user = f"""Article title: {article_title}
Theme: {theme}
Section title: {section_title}

Write the introduction now."""
	return [Message.system(system), Message.user(user)]


def build_main_section_messages(
	article_title: str,
	theme: str,
	section_title: str,
	previous: tuple[str, str],
	tone: str,
	target: LengthRange,
	language: str,
) -> list[Message]:
	system = f"""You write one main section of a blog article.
{_POSITION_INSTRUCTIONS[SectionPosition.INTERIOR]}
Follow these rules:
{_writing_rules(tone, target, language)}"""
	user = f"""Article title: {article_title}
Theme: {theme}
Section title: {section_title}

### PREVIOUS SECTION
{format_preceding_sections([previous])}

Write this section now."""
	return [Message.system(system), Message.user(user)]


def build_conclusion_messages(
	article_title: str,
	theme: str,
	section_title: str,
	full_context: str,
	tone: str,
	target: LengthRange,
	language: str,
) -> list[Message]:
	system = f"""You write the conclusion of a blog article.
{_POSITION_INSTRUCTIONS[SectionPosition.CLOSING]}
Follow these rules:
{_writing_rules(tone, target, language)}"""
	user = f"""Article title: {article_title}
Theme: {theme}
Section title: {section_title}

### ARTICLE SO FAR
{full_context}

Write the conclusion now."""
	return [Message.system(system), Message.user(user)]


_EDITOR_SYSTEM = 'You are a careful blog editor. Return only the revised text, with no preamble or commentary.'


def build_resize_messages(text: str, target: LengthRange, section_title: str, language: str) -> list[Message]:
	current = len(text.strip())
	action = 'Expand' if current < target.min else 'Condense'
	detail = (
		'Add detail, examples and explanation'
		if current < target.min
		else 'Keep the most important points and remove redundancy'
	)
	user = f"""{action} this "{section_title}" section to {target.min}-{target.max} characters.
{detail} while keeping the text coherent. Write in {language}.

CURRENT TEXT ({current} characters):
{text}

REVISED VERSION:"""
	return [Message.system(_EDITOR_SYSTEM), Message.user(user)]


def build_paragraph_fix_messages(text: str, language: str) -> list[Message]:
	user = f"""Some paragraphs in this text end in the middle of a sentence.
Fix ONLY the paragraph endings so that every paragraph ends with a complete sentence.
Leave list items, code blocks and headings exactly as they are. Do not change anything else. Write in {language}.

TEXT:
{text}

REVISED VERSION:"""
	return [Message.system(_EDITOR_SYSTEM), Message.user(user)]


def build_consistency_messages(text: str, target: LengthRange, language: str) -> list[Message]:
	user = f"""Check this text one final time and return a corrected version.
- The length must be {target.min}-{target.max} characters
- Every paragraph must end with a complete sentence (list items, code blocks and headings excepted)
- The text must read as one coherent whole
Write in {language}.

TEXT ({len(text.strip())} characters):
{text}

FINAL VERSION:"""
	return [Message.system(_EDITOR_SYSTEM), Message.user(user)]
