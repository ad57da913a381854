from .content import (
	ContentValidator,
	check_length,
	check_paragraph_endings,
	find_unterminated_paragraphs,
	is_exempt_paragraph,
	split_paragraphs,
	text_length,
)
from .outline import OutlineDecodeResult, clean_json, decode_outline, validate_outline
from .titles import extract_titles, validate_titles


__all__ = [
	'ContentValidator',
	'check_length',
	'check_paragraph_endings',
	'find_unterminated_paragraphs',
	'is_exempt_paragraph',
	'split_paragraphs',
	'text_length',
	'OutlineDecodeResult',
	'clean_json',
	'decode_outline',
	'validate_outline',
	'extract_titles',
	'validate_titles',
]
