from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class Role(Enum):
	SYSTEM = 'system'
	USER = 'user'
	ASSISTANT = 'assistant'


@dataclass(frozen=True)
class Message:
	role: Role
	content: str

	def to_dict(self) -> dict[str, str]:
		return {'role': self.role.value, 'content': self.content}

	@classmethod
	def system(cls, content: str) -> 'Message':
		return cls(Role.SYSTEM, content)

	@classmethod
	def user(cls, content: str) -> 'Message':
		return cls(Role.USER, content)

	@classmethod
	def assistant(cls, content: str) -> 'Message':
		return cls(Role.ASSISTANT, content)


@dataclass(frozen=True)
class CompletionOptions:
	max_output_tokens: int | None = None
	temperature: float | None = None
	presence_penalty: float | None = None
	frequency_penalty: float | None = None

	def merged_with(self, defaults: 'CompletionOptions') -> 'CompletionOptions':
		"""Fill absent values from ``defaults``."""
		values = {
			key: value if value is not None else getattr(defaults, key) for key, value in asdict(self).items()
		}
		return CompletionOptions(**values)

	def to_payload(self) -> dict[str, Any]:
		names = {
			'max_output_tokens': 'max_tokens',
			'temperature': 'temperature',
			'presence_penalty': 'presence_penalty',
			'frequency_penalty': 'frequency_penalty',
		}
		return {names[key]: value for key, value in asdict(self).items() if value is not None}


@dataclass(frozen=True)
class CompletionRequest:
	messages: list[Message]
	options: CompletionOptions = field(default_factory=CompletionOptions)

	def to_payload(self) -> dict[str, Any]:
		payload: dict[str, Any] = {'messages': [m.to_dict() for m in self.messages]}
		payload.update(self.options.to_payload())
		return payload


class FailureKind(Enum):
	RATE_LIMITED = 'rate_limited'
	TRANSIENT = 'transient'
	FATAL = 'fatal'
	MALFORMED = 'malformed'


@dataclass(frozen=True)
class CompletionFailure:
	kind: FailureKind
	message: str
	retryable: bool
	code: str | None = None


@dataclass(frozen=True)
class CompletionResult:
	text: str | None = None
	failure: CompletionFailure | None = None
	input_tokens: int = 0
	output_tokens: int = 0

	@property
	def ok(self) -> bool:
		return self.failure is None

	@classmethod
	def success(cls, text: str, input_tokens: int = 0, output_tokens: int = 0) -> 'CompletionResult':
		return cls(text=text, input_tokens=input_tokens, output_tokens=output_tokens)

	@classmethod
	def error(cls, kind: FailureKind, message: str, code: str | None = None) -> 'CompletionResult':
		retryable = kind in (FailureKind.RATE_LIMITED, FailureKind.TRANSIENT)
		return cls(failure=CompletionFailure(kind=kind, message=message, retryable=retryable, code=code))
