DEFAULT_TONE = 'casual'

TONE_DESCRIPTIONS = {
	'casual': 'friendly and conversational, addressing the reader directly',
	'business': 'polite, concise and professional',
	'academic': 'precise and objective, with careful definitions',
}

VALID_TONES = list(TONE_DESCRIPTIONS)


# Paragraphs must end with one of these characters
SENTENCE_TERMINATORS = ('。', '．', '！', '？', '.', '!', '?', '」', '』')

LIST_MARKERS = ('- ', '* ', '+ ', '・')
CODE_FENCE_MARKERS = ('```', '~~~')
HEADING_MARKER = '#'


MAX_TITLE_LENGTH = 30
REQUIRED_TITLE_COUNT = 3

TITLE_TEMPERATURE = 0.8
TITLE_MAX_TOKENS = 500


DEFAULT_INTRODUCTION_TITLE = 'Introduction'
DEFAULT_CONCLUSION_TITLE = 'Conclusion'

DEFAULT_INTRODUCTION_LENGTH = {'min': 300, 'max': 600}
DEFAULT_CONCLUSION_LENGTH = {'min': 300, 'max': 600}
