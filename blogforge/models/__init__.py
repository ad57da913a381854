from .article import (
	ArticleSection,
	ArticleStructure,
	GeneratedArticle,
	LengthRange,
	Outline,
	OutlineSection,
	SectionKind,
)
from .completion import (
	CompletionFailure,
	CompletionOptions,
	CompletionRequest,
	CompletionResult,
	FailureKind,
	Message,
	Role,
)
from .session import (
	EventType,
	GenerationMode,
	SectionSlot,
	SectionStatus,
	SessionEvent,
)
from .validation import (
	IssueType,
	Severity,
	ValidationIssue,
)


__all__ = [
	'ArticleSection',
	'ArticleStructure',
	'GeneratedArticle',
	'LengthRange',
	'Outline',
	'OutlineSection',
	'SectionKind',
	'CompletionFailure',
	'CompletionOptions',
	'CompletionRequest',
	'CompletionResult',
	'FailureKind',
	'Message',
	'Role',
	'EventType',
	'GenerationMode',
	'SectionSlot',
	'SectionStatus',
	'SessionEvent',
	'IssueType',
	'Severity',
	'ValidationIssue',
]
