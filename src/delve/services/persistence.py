"""Serialised write-through of in-memory mutations to the persistence gateway.

Every change to the character or its items is applied in memory first and
then handed to :class:`CharacterWriter`. Writes run strictly in submission
order. When the gateway raises :class:`PersistenceError` the writer logs it,
runs the command's compensating action so memory matches what the store last
accepted, and reports a :class:`PersistenceFailedEvent`.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Mapping, Sequence

from delve.domain.entities import Character, Item
from delve.services.collaborators import PersistenceGateway
from delve.services.errors import PersistenceError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PersistenceFailedEvent:
    operation: str
    message: str


@dataclass(slots=True)
class WriteCommand:
    operation: str
    persist: Callable[[], None]
    compensate: Callable[[], None]


class CharacterWriter:
    """Single writer for one character's record and items."""

    def __init__(self, gateway: PersistenceGateway, character_id: str) -> None:
        self._gateway = gateway
        self._character_id = character_id
        self._queue: Deque[WriteCommand] = deque()
        self._draining = False

    @property
    def character_id(self) -> str:
        return self._character_id

    def submit(
        self,
        operation: str,
        persist: Callable[[], None],
        compensate: Callable[[], None],
    ) -> List[PersistenceFailedEvent]:
        """Queue a write whose in-memory effect has already been applied."""
        self._queue.append(WriteCommand(operation=operation, persist=persist, compensate=compensate))
        if self._draining:
            # The outer drain reports failures for commands queued from a callback.
            return []
        return self._drain()

    def _drain(self) -> List[PersistenceFailedEvent]:
        failures: List[PersistenceFailedEvent] = []
        self._draining = True
        try:
            while self._queue:
                command = self._queue.popleft()
                try:
                    command.persist()
                except PersistenceError as exc:
                    logger.warning(
                        "Persisting %s for character %s failed: %s",
                        command.operation,
                        self._character_id,
                        exc,
                    )
                    command.compensate()
                    failures.append(PersistenceFailedEvent(operation=command.operation, message=str(exc)))
        finally:
            self._draining = False
        return failures

    # ------------------------------------------------------------ Helpers
    def update_character(
        self,
        character: Character,
        updates: Mapping[str, int],
        *,
        operation: str = "update_character",
    ) -> List[PersistenceFailedEvent]:
        """Apply ``updates`` to ``character`` and persist the resulting columns."""
        if not updates:
            return []
        keys = tuple(updates)
        previous = character.snapshot(keys)
        character.apply(dict(updates))
        persisted = character.snapshot(keys)
        return self.submit(
            operation,
            lambda: self._gateway.update_character(self._character_id, persisted),
            lambda: character.apply(previous),
        )

    def insert_items(
        self,
        owned: List[Item],
        new_items: Sequence[Item],
        *,
        operation: str = "insert_items",
    ) -> List[PersistenceFailedEvent]:
        if not new_items:
            return []
        added = list(new_items)
        owned.extend(added)

        def compensate() -> None:
            added_ids = {item.id for item in added}
            owned[:] = [item for item in owned if item.id not in added_ids]

        return self.submit(
            operation,
            lambda: self._gateway.insert_items([item.to_row() for item in added]),
            compensate,
        )

    def delete_items(
        self,
        owned: List[Item],
        doomed: Sequence[Item],
        *,
        operation: str = "delete_items",
    ) -> List[PersistenceFailedEvent]:
        if not doomed:
            return []
        before = list(owned)
        doomed_ids = [item.id for item in doomed]
        owned[:] = [item for item in owned if item.id not in set(doomed_ids)]

        def compensate() -> None:
            owned[:] = before

        return self.submit(operation, lambda: self._gateway.delete_items(doomed_ids), compensate)

    def update_items(
        self,
        changed: Sequence[Item],
        compensate: Callable[[], None],
        *,
        operation: str = "update_items",
    ) -> List[PersistenceFailedEvent]:
        """Persist the equip flags of ``changed``; ``compensate`` restores them."""
        if not changed:
            return []
        payload: Dict[str, Dict[str, object]] = {
            item.id: {"equipped": item.equipped, "equipped_slot": item.equipped_slot} for item in changed
        }
        return self.submit(operation, lambda: self._gateway.update_items(payload), compensate)
