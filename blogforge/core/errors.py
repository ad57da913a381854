from blogforge.models import CompletionFailure, FailureKind


class GenerationError(Exception):
	"""Base class for every error the engine raises."""


class CompletionError(GenerationError):
	kind = FailureKind.TRANSIENT
	retryable = True

	def __init__(self, message: str, code: str | None = None):
		super().__init__(message)
		self.message = message
		self.code = code

	def __str__(self) -> str:
		if self.code:
			return f'[{self.kind.value}:{self.code}] {self.message}'
		return f'[{self.kind.value}] {self.message}'


class RateLimitedError(CompletionError):
	kind = FailureKind.RATE_LIMITED
	retryable = True


class TransientServiceError(CompletionError):
	kind = FailureKind.TRANSIENT
	retryable = True


class FatalServiceError(CompletionError):
	kind = FailureKind.FATAL
	retryable = False


class MalformedResponseError(CompletionError):
	kind = FailureKind.MALFORMED
	retryable = False


class ValidationError(GenerationError):
	def __init__(self, reason: str, count: int | None = None):
		super().__init__(reason)
		self.reason = reason
		self.count = count


class SectionOrderError(GenerationError):
	pass


class GenerationCancelled(GenerationError):
	"""Raised at a poll point once the caller has requested cancellation."""

	def __init__(self, message: str = 'Generation cancelled'):
		super().__init__(message)


_ERRORS_BY_KIND: dict[FailureKind, type[CompletionError]] = {
	FailureKind.RATE_LIMITED: RateLimitedError,
	FailureKind.TRANSIENT: TransientServiceError,
	FailureKind.FATAL: FatalServiceError,
	FailureKind.MALFORMED: MalformedResponseError,
}


def error_from_failure(failure: CompletionFailure) -> CompletionError:
	return _ERRORS_BY_KIND[failure.kind](failure.message, code=failure.code)
