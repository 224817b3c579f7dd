"""
DispatchCursor — mutation-tolerant traversal of one hook's entries.

The cursor never copies the table. It remembers where it is as
``(priority, last_seq)`` and asks the live table for the next entry on
every step, so callbacks may add and remove entries of the hook being
dispatched while the walk is in progress:

  - an entry removed before the cursor reaches it never fires
  - removing the running entry, or one already visited, changes nothing
  - an entry added at a priority the cursor has not reached yet fires
    in its turn; one added at a priority already passed waits for the
    next dispatch
  - an entry added to the bucket being walked waits for the next
    dispatch (``ceiling`` is fixed when the cursor enters a bucket), so a
    callback that removes and re-adds itself still fires once per pass
"""

from __future__ import annotations

from collections.abc import Iterator

from .domain import Entry
from .table import PriorityTable


class DispatchCursor:
    def __init__(self, table: PriorityTable, hook_name: str) -> None:
        self._table = table
        self._hook_name = hook_name
        self.priority: int | None = None
        self.last_seq = 0
        self.ceiling = 0
        self.exhausted = False

    def __iter__(self) -> Iterator[Entry]:
        return self

    def __next__(self) -> Entry:
        while not self.exhausted:
            if self.priority is not None:
                entry = self._table.next_entry(
                    self._hook_name, self.priority, self.last_seq, self.ceiling
                )
                if entry is not None:
                    self.last_seq = entry.seq
                    return entry

            following = self._table.next_priority(self._hook_name, self.priority)
            if following is None:
                self.exhausted = True
                break
            self.priority = following
            self.last_seq = 0
            self.ceiling = self._table.seq
        raise StopIteration

    def __repr__(self) -> str:
        return (
            f"DispatchCursor({self._hook_name!r}, priority={self.priority}, "
            f"last_seq={self.last_seq}, exhausted={self.exhausted})"
        )
