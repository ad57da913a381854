"""
Per-section generation state.

Each section slot moves idle -> generating -> done | error, or through
aborting back to idle when cancelled. Cancellation tokens and tasks are keyed
by section index, so at most one generation runs per slot.
"""

import asyncio
from collections.abc import Callable, Sequence
from typing import Any

from blogforge.config.defaults import DEFAULT_TONE
from blogforge.core.cancellation import CancellationToken
from blogforge.core.errors import GenerationCancelled, GenerationError, SectionOrderError
from blogforge.generators import GeneratorFactory
from blogforge.models import (
	EventType,
	GenerationMode,
	LengthRange,
	SectionSlot,
	SectionStatus,
	SessionEvent,
)
from blogforge.utils.logger import logger

Listener = Callable[[SessionEvent], None]


class GenerationSessionManager:
	def __init__(
		self,
		factory: GeneratorFactory,
		theme: str,
		section_titles: Sequence[str],
		tone: str = DEFAULT_TONE,
		mode: GenerationMode = GenerationMode.SIMPLE,
		targets: Sequence[LengthRange | None] | None = None,
	):
		self.factory = factory
		self.theme = theme
		self.tone = tone
		self.mode = mode
		self.slots = [SectionSlot(index=i, title=title) for i, title in enumerate(section_titles)]
		self._targets = list(targets) if targets is not None else [None] * len(self.slots)

		self._tokens: dict[int, CancellationToken] = {}
		self._tasks: dict[int, asyncio.Task] = {}
		self._listeners: list[Listener] = []

		# Contextual chains stop before this index
		self._halt_from: int | None = None
		self._chain_active = False

	def subscribe(self, listener: Listener):
		self._listeners.append(listener)

	def _emit(self, event: SessionEvent):
		for listener in self._listeners:
			listener(event)

	def _set_status(self, slot: SectionSlot, status: SectionStatus):
		slot.status = status
		self._emit(SessionEvent(EventType.STATUS_CHANGED, index=slot.index, status=status))

	def _slot(self, index: int) -> SectionSlot:
		if not 0 <= index < len(self.slots):
			raise IndexError(f'No section at index {index}')
		return self.slots[index]

	def is_generating(self, index: int | None = None) -> bool:
		if index is None:
			return bool(self._tasks)
		return index in self._tasks

	async def generate_section(self, index: int) -> str | None:
		"""
		Generate one section. Returns the text, or None when cancelled.

		Raises:
			SectionOrderError: contextual mode and an earlier section has no content.
			GenerationError: the generation failed; the slot is left in the error state.
		"""
		self._slot(index)
		await self.cancel_and_wait(index)

		if self.mode == GenerationMode.CONTEXTUAL:
			missing = [s.index for s in self.slots[:index] if not s.content.strip()]
			if missing:
				raise SectionOrderError(f'Section {index} needs sections {missing} to be generated first')

		token = CancellationToken()
		self._tokens[index] = token
		task = asyncio.ensure_future(self._run_section(index, self.mode, token))
		self._tasks[index] = task
		return await task

	async def _run_section(self, index: int, mode: GenerationMode, token: CancellationToken) -> str | None:
		slot = self.slots[index]
		slot.error = None
		self._set_status(slot, SectionStatus.GENERATING)
		logger.info(f'Generating section {index} "{slot.title}" ({mode.value})')

		try:
			text = await self._dispatch(index, mode, token)
		except GenerationCancelled:
			logger.info(f'Generation cancelled for section {index} "{slot.title}"')
			self._discard_from(index, mode)
			return None
		except GenerationError as e:
			logger.error(f'Failed to generate section {index} "{slot.title}": {e}')
			slot.error = str(e)
			self._set_status(slot, SectionStatus.ERROR)
			raise
		finally:
			# Deregister before the task completes so waiters see a settled section
			if self._tokens.get(index) is token:
				del self._tokens[index]
			if self._tasks.get(index) is asyncio.current_task():
				del self._tasks[index]

		if token.cancelled:
			self._discard_from(index, mode)
			return None

		slot.content = text
		self._set_status(slot, SectionStatus.DONE)
		return text

	async def _dispatch(self, index: int, mode: GenerationMode, token: CancellationToken) -> str:
		generator: Any = self.factory.get_section_generator(mode)
		slot = self.slots[index]
		target = self._targets[index]

		if mode == GenerationMode.SIMPLE:
			return await generator.generate(
				self.theme, slot.title, cancellation_token=token, tone=self.tone, target=target
			)

		preceding = [(s.title, s.content) for s in self.slots[:index]]
		return await generator.generate(
			self.theme,
			slot.title,
			preceding,
			index == len(self.slots) - 1,
			cancellation_token=token,
			tone=self.tone,
			target=target,
		)

	def _discard_from(self, index: int, mode: GenerationMode):
		# A contextual chain with a gap is invalid, so everything downstream goes too
		end = len(self.slots) if mode == GenerationMode.CONTEXTUAL else index + 1
		for i in range(index, end):
			token = self._tokens.get(i)
			if token is not None:
				token.cancel()
			self._clear_slot(i)

	def _clear_slot(self, index: int):
		self.slots[index].clear()
		self._emit(SessionEvent(EventType.STATUS_CHANGED, index=index, status=SectionStatus.IDLE))

	async def generate_all(self) -> list[str]:
		if self.mode == GenerationMode.CONTEXTUAL:
			await self._generate_chain()
		else:
			await self._generate_independent()
		return [slot.content for slot in self.slots]

	async def _generate_chain(self):
		# Strictly left to right; each prompt depends on the previous output
		self._halt_from = None
		self._chain_active = True
		try:
			for index in range(len(self.slots)):
				if self._halt_from is not None and index >= self._halt_from:
					self._discard_from(index, GenerationMode.CONTEXTUAL)
					break
				if await self.generate_section(index) is None:
					if self._halt_from is not None and self._halt_from < index:
						self._discard_from(self._halt_from, GenerationMode.CONTEXTUAL)
					break
		finally:
			self._chain_active = False
			self._halt_from = None

	async def _generate_independent(self):
		results = await asyncio.gather(
			*(self.generate_section(i) for i in range(len(self.slots))), return_exceptions=True
		)
		errors = [r for r in results if isinstance(r, BaseException)]
		for error in errors:
			if not isinstance(error, GenerationError):
				raise error
		if errors:
			raise errors[0]

	def cancel(self, index: int) -> bool:
		"""Request cancellation; returns False when nothing was running for that section."""
		self._slot(index)

		if self.mode == GenerationMode.CONTEXTUAL:
			indices = range(index, len(self.slots))
			if self._chain_active:
				self._halt_from = index if self._halt_from is None else min(self._halt_from, index)
		else:
			indices = [index]

		requested = False
		for i in indices:
			token = self._tokens.get(i)
			if token is None or token.cancelled:
				continue
			token.cancel()
			self._emit(SessionEvent(EventType.CANCEL_REQUESTED, index=i))
			self._set_status(self.slots[i], SectionStatus.ABORTING)
			requested = True

		contextual = self.mode == GenerationMode.CONTEXTUAL
		if contextual and (requested or self._chain_active):
			# Settled sections downstream of the cancel point lose their content too
			for i in indices:
				if i not in self._tokens:
					self._clear_slot(i)

		if requested:
			logger.info(f'Cancellation requested from section {index}')
		return requested or (contextual and self._chain_active)

	async def cancel_and_wait(self, index: int):
		tasks = [t for i, t in self._tasks.items() if i == index or (self.mode == GenerationMode.CONTEXTUAL and i > index)]
		if not tasks:
			return
		self.cancel(index)
		await asyncio.wait(tasks)

	async def cancel_all(self):
		tasks = list(self._tasks.values())
		for index in sorted(self._tasks):
			self.cancel(index)
		if tasks:
			await asyncio.wait(tasks)

	async def switch_mode(self, mode: GenerationMode):
		"""Settle every in-flight generation before the new mode takes effect."""
		if mode == self.mode:
			return

		if self._tasks:
			logger.info(f'Cancelling {len(self._tasks)} in-flight generation(s) before switching to {mode.value}')
			await self.cancel_all()

		self.mode = mode
		self._emit(SessionEvent(EventType.MODE_CHANGED, mode=mode))
		logger.info(f'Generation mode switched to {mode.value}')

	async def discard(self):
		await self.cancel_all()
		for slot in self.slots:
			slot.clear()
		self._listeners.clear()

	def get_progress(self) -> dict[str, Any]:
		total = len(self.slots)
		done = sum(1 for s in self.slots if s.status == SectionStatus.DONE)
		failed = sum(1 for s in self.slots if s.status == SectionStatus.ERROR)
		generating = [s.index for s in self.slots if s.status in (SectionStatus.GENERATING, SectionStatus.ABORTING)]

		return {
			'total_sections': total,
			'completed': done,
			'failed': failed,
			'remaining': total - done - failed,
			'progress_percentage': (done / total * 100) if total > 0 else 0,
			'generating': generating,
			'mode': self.mode.value,
		}
