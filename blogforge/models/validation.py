from dataclasses import dataclass
from enum import Enum


class IssueType(Enum):
	LENGTH = 'length'
	PARAGRAPH_ENDING = 'paragraph_ending'


class Severity(Enum):
	CRITICAL = 'critical'
	WARNING = 'warning'
	INFO = 'info'


@dataclass(frozen=True)
class ValidationIssue:
	issue_type: IssueType
	severity: Severity
	message: str
	suggestion: str | None = None
