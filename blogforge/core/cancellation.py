"""
Cooperative cancellation.

A token is a shared flag backed by an ``asyncio.Event``. The engine polls it
before every completion call, right after every response and at the top of
every refinement step. Delays go through ``CancellationToken.sleep`` so a
pending backoff or pacing delay ends as soon as the token is set.
"""

import asyncio

from blogforge.core.errors import GenerationCancelled


class CancellationToken:
	def __init__(self):
		self._event = asyncio.Event()

	@property
	def cancelled(self) -> bool:
		return self._event.is_set()

	def cancel(self):
		self._event.set()

	def raise_if_cancelled(self):
		if self._event.is_set():
			raise GenerationCancelled()

	async def sleep(self, seconds: float):
		"""Wait ``seconds`` unless the token is set first."""
		self.raise_if_cancelled()
		if seconds <= 0:
			return

		try:
			await asyncio.wait_for(self._event.wait(), timeout=seconds)
		except asyncio.TimeoutError:
			return

		raise GenerationCancelled()

	async def wait(self):
		await self._event.wait()


def ensure_token(token: CancellationToken | None) -> CancellationToken:
	return token if token is not None else CancellationToken()
