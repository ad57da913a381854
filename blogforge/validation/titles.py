import re

from blogforge.config.defaults import MAX_TITLE_LENGTH, REQUIRED_TITLE_COUNT
from blogforge.core.errors import ValidationError

# "1. ", "2) ", "- ", "* ", "・"
_LINE_PREFIX = re.compile(r'^\s*(?:\d+[.)、]\s*|[-*・]\s*)')
_WRAPPERS = ('[]', '「」', '『』', '""', '“”', "''")


def _clean_line(line: str) -> str:
	text = _LINE_PREFIX.sub('', line).strip()
	for opening, closing in _WRAPPERS:
		if len(text) >= 2 and text.startswith(opening) and text.endswith(closing):
			text = text[1:-1].strip()
	return text


def extract_titles(raw: str, max_length: int = MAX_TITLE_LENGTH) -> list[str]:
	"""All non-empty candidate lines of at most ``max_length`` characters."""
	titles = []
	for line in raw.splitlines():
		title = _clean_line(line)
		# "Here are three titles:" style preambles
		if title.endswith((':', '：')):
			continue
		if title and len(title) <= max_length:
			titles.append(title)
	return titles


def validate_titles(raw: str, required: int = REQUIRED_TITLE_COUNT) -> list[str]:
	titles = extract_titles(raw)
	if len(titles) < required:
		raise ValidationError(
			f'Expected {required} titles of at most {MAX_TITLE_LENGTH} characters, got {len(titles)}',
			count=len(titles),
		)
	return titles[:required]
