"""Commit concurrently dispatched chat turns in the order they were issued."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Set


class TurnSequencer:
	"""Hand out tickets at dispatch time and admit commits in ticket order.

	A caller takes a ticket before its request goes out and enters
	``turn(ticket)`` once the answer is back. The body of ``turn`` only runs
	after every earlier ticket has finished or been abandoned, so two turns
	never interleave their transcript appends.
	"""

	def __init__(self) -> None:
		self._next_ticket = 0
		self._serving = 0
		self._finished: Set[int] = set()
		self._gates: Dict[int, asyncio.Event] = {}

	def take(self) -> int:
		ticket = self._next_ticket
		self._next_ticket += 1
		return ticket

	@property
	def pending(self) -> int:
		"""Number of tickets handed out but not yet finished."""
		return self._next_ticket - self._serving - len(self._finished)

	def _gate(self, ticket: int) -> asyncio.Event:
		gate = self._gates.get(ticket)
		if gate is None:
			gate = self._gates[ticket] = asyncio.Event()
		return gate

	def finish(self, ticket: int) -> None:
		"""Mark ``ticket`` done and wake the next ticket in line."""
		if ticket < self._serving or ticket in self._finished:
			return
		self._finished.add(ticket)
		self._gates.pop(ticket, None)
		while self._serving in self._finished:
			self._finished.discard(self._serving)
			self._serving += 1
		self._gate(self._serving).set()

	abandon = finish

	@asynccontextmanager
	async def turn(self, ticket: int) -> AsyncIterator[None]:
		"""Wait until every earlier ticket is done, then hold the turn."""
		try:
			if ticket != self._serving:
				await self._gate(ticket).wait()
			yield
		finally:
			self.finish(ticket)
