"""Common data bus: broadcasts finished results to waiting stations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import MutableSequence

from .entry import RobEntry
from .registers import NO_TAG, OperandSource
from .stations import ReservationStations

BROADCAST_WIDTH = 2


@dataclass
class CommonDataBus:
    """Queue of results keyed by reorder buffer index, oldest first."""

    stations: ReservationStations
    entries: MutableSequence[RobEntry]
    pending: dict[int, int] = field(default_factory=dict)

    def add(self, index: int, data: int) -> None:
        """Queue a result; an index already queued keeps its first value."""
        self.pending.setdefault(index, data)

    def execute(self) -> None:
        """Broadcast up to two queued results, lowest indices first."""
        for index in sorted(self.pending)[:BROADCAST_WIDTH]:
            self.broadcast(index, self.pending.pop(index))

    def broadcast(self, index: int, value: int) -> None:
        """Hand ``value`` to every busy station waiting on entry ``index``."""
        for slot in self.stations.slots:
            if not slot.busy:
                continue
            if slot.vj == -1 and slot.qj == index:
                slot.qj = NO_TAG
                slot.vj = value
                self._forward(slot.pj, slot.dest, value)
            if slot.vk == -1 and slot.qk == index:
                slot.qk = NO_TAG
                slot.vk = value
                self._forward(slot.pk, slot.dest, value)

    def _forward(self, source: OperandSource, dest: int, value: int) -> None:
        if source is OperandSource.RS1:
            self.entries[dest].rs1_val = value