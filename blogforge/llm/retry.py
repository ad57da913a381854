from collections.abc import Awaitable, Callable

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt, wait_exponential

from blogforge.core.cancellation import CancellationToken

SleepFunc = Callable[[CancellationToken, float], Awaitable[None]]


async def cancellable_sleep(token: CancellationToken, seconds: float):
	await token.sleep(seconds)


def backoff_retrying(
	max_retries: int,
	base_delay: float,
	token: CancellationToken,
	should_retry: Callable[[BaseException], bool],
	sleep: SleepFunc | None = None,
	before_sleep: Callable[[RetryCallState], None] | None = None,
) -> AsyncRetrying:
	"""
	Retry up to ``max_retries`` times; the delay before retry n (0-indexed) is
	``base_delay * 2**n``. Delays run through the token, so cancelling during a
	backoff raises GenerationCancelled out of the retry loop at once.
	"""
	sleep = sleep or cancellable_sleep
	return AsyncRetrying(
		stop=stop_after_attempt(max_retries + 1),
		wait=wait_exponential(multiplier=base_delay, min=0),
		retry=retry_if_exception(should_retry),
		sleep=lambda seconds: sleep(token, seconds),
		before_sleep=before_sleep,
		reraise=True,
	)
