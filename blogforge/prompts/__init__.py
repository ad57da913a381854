from .builder import (
	PrecedingSections,
	SectionPosition,
	build_conclusion_messages,
	build_consistency_messages,
	build_contextual_section_messages,
	build_introduction_messages,
	build_main_section_messages,
	build_outline_messages,
	build_paragraph_fix_messages,
	build_resize_messages,
	build_section_messages,
	build_title_messages,
	format_preceding_sections,
	section_position,
)


__all__ = [
	'PrecedingSections',
	'SectionPosition',
	'build_conclusion_messages',
	'build_consistency_messages',
	'build_contextual_section_messages',
	'build_introduction_messages',
	'build_main_section_messages',
	'build_outline_messages',
	'build_paragraph_fix_messages',
	'build_resize_messages',
	'build_section_messages',
	'build_title_messages',
	'format_preceding_sections',
	'section_position',
]
