import re

from blogforge.config.defaults import CODE_FENCE_MARKERS, HEADING_MARKER, LIST_MARKERS, SENTENCE_TERMINATORS
from blogforge.models import IssueType, LengthRange, Severity, ValidationIssue

_NUMBERED_ITEM = re.compile(r'^\d+[.)]\s')


def text_length(text: str) -> int:
	return len(text.strip())


def check_length(text: str, target: LengthRange) -> ValidationIssue | None:
	length = text_length(text)
	if target.contains(length):
		return None

	direction = 'short' if length < target.min else 'long'
	return ValidationIssue(
		issue_type=IssueType.LENGTH,
		severity=Severity.WARNING,
		message=f'Text is too {direction}: {length} characters, target {target}',
		suggestion=f'Resize the text to between {target.min} and {target.max} characters.',
	)


def split_paragraphs(text: str) -> list[str]:
	"""Split on blank lines; a fenced code block stays one paragraph even if it contains blank lines."""
	paragraphs = []
	current: list[str] = []
	in_fence = False

	for line in text.splitlines():
		if line.lstrip().startswith(CODE_FENCE_MARKERS):
			in_fence = not in_fence
		if not line.strip() and not in_fence:
			if current:
				paragraphs.append('\n'.join(current).strip())
				current = []
			continue
		current.append(line)

	if current:
		paragraphs.append('\n'.join(current).strip())
	return [p for p in paragraphs if p]


def is_exempt_paragraph(paragraph: str) -> bool:
	"""Lists, code blocks and headings do not need sentence-final punctuation."""
	stripped = paragraph.lstrip()
	if stripped.startswith(LIST_MARKERS) or _NUMBERED_ITEM.match(stripped):
		return True
	if stripped.startswith(CODE_FENCE_MARKERS):
		return True
	return stripped.startswith(HEADING_MARKER)


def find_unterminated_paragraphs(text: str) -> list[str]:
	return [
		p for p in split_paragraphs(text) if not is_exempt_paragraph(p) and not p.rstrip().endswith(SENTENCE_TERMINATORS)
	]


def check_paragraph_endings(text: str) -> ValidationIssue | None:
	unterminated = find_unterminated_paragraphs(text)
	if not unterminated:
		return None

	return ValidationIssue(
		issue_type=IssueType.PARAGRAPH_ENDING,
		severity=Severity.WARNING,
		message=f'{len(unterminated)} paragraph(s) do not end with sentence-final punctuation',
		suggestion='Complete the final sentence of each paragraph.',
	)


class ContentValidator:
	def __init__(self, target: LengthRange):
		self.target = target

	def validate(self, text: str) -> list[ValidationIssue]:
		issues = []
		for check in (check_length(text, self.target), check_paragraph_endings(text)):
			if check is not None:
				issues.append(check)
		return issues
