import json
from dataclasses import dataclass
from typing import Any

from blogforge.core.errors import ValidationError
from blogforge.models import LengthRange, Outline, OutlineSection, SectionKind


@dataclass(frozen=True)
class OutlineDecodeResult:
	outline: Outline | None = None
	error: str | None = None

	@property
	def ok(self) -> bool:
		return self.outline is not None


def clean_json(text: str) -> str:
	text = text.strip()
	if text.startswith('```json'):
		text = text[7:]
	if text.startswith('```'):
		text = text[3:]
	if text.endswith('```'):
		text = text[:-3]
	return text.strip()


def _decode_length(value: Any, position: int) -> LengthRange:
	if not isinstance(value, dict):
		raise ValueError(f'section {position}: recommendedLength must be an object with min and max')

	low, high = value.get('min'), value.get('max')
	if not all(isinstance(v, int) and not isinstance(v, bool) for v in (low, high)):
		raise ValueError(f'section {position}: recommendedLength min/max must be integers')
	if low > high:
		raise ValueError(f'section {position}: recommendedLength min {low} exceeds max {high}')

	return LengthRange(min=low, max=high)


def _decode_section(data: Any, position: int) -> OutlineSection:
	if not isinstance(data, dict):
		raise ValueError(f'section {position} is not an object')

	title = data.get('title')
	if not isinstance(title, str) or not title.strip():
		raise ValueError(f'section {position} has no title')

	raw_kind = data.get('type')
	try:
		kind = SectionKind(raw_kind)
	except ValueError:
		raise ValueError(f'section {position} has unknown type {raw_kind!r}') from None

	description = data.get('description') or ''
	if not isinstance(description, str):
		raise ValueError(f'section {position}: description must be a string')

	return OutlineSection(
		title=title.strip(),
		description=description.strip(),
		recommended_length=_decode_length(data.get('recommendedLength'), position),
		kind=kind,
	)


def decode_outline(raw: str) -> OutlineDecodeResult:
	"""Decode a model response into an Outline without raising."""
	try:
		data = json.loads(clean_json(raw))
	except json.JSONDecodeError as e:
		return OutlineDecodeResult(error=f'Outline is not valid JSON: {e.msg}')

	if not isinstance(data, dict):
		return OutlineDecodeResult(error='Outline must be a JSON object')

	raw_sections = data.get('sections')
	if not isinstance(raw_sections, list) or not raw_sections:
		return OutlineDecodeResult(error='Outline has no sections')

	try:
		sections = [_decode_section(s, i) for i, s in enumerate(raw_sections)]
	except ValueError as e:
		return OutlineDecodeResult(error=f'Invalid outline: {e}')

	if sections[-1].kind != SectionKind.CONCLUSION:
		return OutlineDecodeResult(
			error=f'The last outline section must be a conclusion, got {sections[-1].kind.value!r}'
		)

	keywords = data.get('keywords') or []
	total_length = data.get('estimatedTotalLength')

	outline = Outline(
		sections=sections,
		estimated_total_length=total_length if isinstance(total_length, int) else None,
		estimated_reading_time=_optional_str(data.get('estimatedReadingTime')),
		target_audience=_optional_str(data.get('targetAudience')),
		keywords=[str(k) for k in keywords] if isinstance(keywords, list) else [],
	)
	return OutlineDecodeResult(outline=outline)


def validate_outline(raw: str) -> Outline:
	result = decode_outline(raw)
	if not result.ok:
		raise ValidationError(result.error)
	return result.outline


def _optional_str(value: Any) -> str | None:
	if value is None:
		return None
	return str(value)
