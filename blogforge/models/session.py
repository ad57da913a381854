from dataclasses import dataclass
from enum import Enum


class SectionStatus(Enum):
	IDLE = 'idle'
	GENERATING = 'generating'
	ABORTING = 'aborting'
	DONE = 'done'
	ERROR = 'error'


class GenerationMode(Enum):
	SIMPLE = 'simple'
	CONTEXTUAL = 'contextual'


@dataclass
class SectionSlot:
	index: int
	title: str
	content: str = ''
	status: SectionStatus = SectionStatus.IDLE
	error: str | None = None

	def clear(self):
		self.content = ''
		self.status = SectionStatus.IDLE
		self.error = None


class EventType(Enum):
	STATUS_CHANGED = 'status_changed'
	CANCEL_REQUESTED = 'cancel_requested'
	MODE_CHANGED = 'mode_changed'


@dataclass(frozen=True)
class SessionEvent:
	type: EventType
	index: int | None = None
	status: SectionStatus | None = None
	mode: GenerationMode | None = None
