"""
PriorityTable — the registry's core data structure.

    hook name → priority → identity key → Entry

Buckets are plain dicts, so insertion order inside a bucket is preserved
for free. Priorities are kept in ascending order lazily: any add or remove
for a hook name marks it unsorted, and the next read that needs ordering
re-sorts that one hook's priorities.

The table never calls callbacks and holds no lock; the engine serialises
access to it.
"""

from __future__ import annotations

from bisect import bisect_right

from loguru import logger

from .domain import CallbackIdentity, Entry, HookCallback


Bucket = dict[str, Entry]


class PriorityTable:
    def __init__(self) -> None:
        self._hooks: dict[str, dict[int, Bucket]] = {}
        self._sorted: set[str] = set()
        # Per-bucket entries in seq order, rebuilt after an insert or removal.
        self._ordered: dict[tuple[str, int], list[Entry]] = {}
        self._seq = 0

    @property
    def seq(self) -> int:
        """Sequence number of the most recently inserted entry."""
        return self._seq

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(
        self,
        hook_name: str,
        identity: CallbackIdentity,
        callback: HookCallback,
        priority: int,
        accepted_args: int,
    ) -> Entry:
        """
        Insert a callback, or overwrite the existing entry with the same
        identity at the same priority (keeping its place in the bucket).
        """
        bucket = self._hooks.setdefault(hook_name, {}).setdefault(priority, {})
        entry = bucket.get(identity.key)
        if entry is None:
            self._seq += 1
            entry = Entry(identity, callback, accepted_args, self._seq)
            bucket[identity.key] = entry
            self._ordered.pop((hook_name, priority), None)
        else:
            entry.callback = callback
            entry.accepted_args = accepted_args
        self._sorted.discard(hook_name)
        return entry

    def remove(self, hook_name: str, identity: CallbackIdentity, priority: int) -> bool:
        buckets = self._hooks.get(hook_name)
        if not buckets or priority not in buckets:
            return False
        bucket = buckets[priority]
        if bucket.pop(identity.key, None) is None:
            return False
        self._ordered.pop((hook_name, priority), None)
        if not bucket:
            del buckets[priority]
        if not buckets:
            del self._hooks[hook_name]
        self._sorted.discard(hook_name)
        return True

    def clear(self, hook_name: str = "", priority: int | None = None) -> None:
        """
        Drop one bucket, or every bucket of one hook. An empty
        ``hook_name`` drops the whole table.
        """
        if not hook_name:
            self._hooks.clear()
            self._sorted.clear()
            self._ordered.clear()
            return

        buckets = self._hooks.get(hook_name)
        if buckets is None:
            return
        if priority is None:
            del self._hooks[hook_name]
            for key in [key for key in self._ordered if key[0] == hook_name]:
                del self._ordered[key]
        else:
            buckets.pop(priority, None)
            self._ordered.pop((hook_name, priority), None)
            if not buckets:
                del self._hooks[hook_name]
        self._sorted.discard(hook_name)

    def reset(self) -> None:
        self._hooks = {}
        self._sorted = set()
        self._ordered = {}
        self._seq = 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def __contains__(self, hook_name: object) -> bool:
        return bool(self._hooks.get(hook_name))  # type: ignore[arg-type]

    def hook_names(self) -> list[str]:
        return list(self._hooks)

    def find(self, hook_name: str, identity: CallbackIdentity) -> int | None:
        """Priority at which ``identity`` is registered, or None."""
        for priority in self.priorities(hook_name):
            if identity.key in self._hooks[hook_name][priority]:
                return priority
        return None

    def snapshot(self, hook_name: str, priority: int) -> list[Entry]:
        return list(self._hooks.get(hook_name, {}).get(priority, {}).values())

    def priorities(self, hook_name: str) -> list[int]:
        """Live priorities of ``hook_name`` in ascending order."""
        buckets = self._hooks.get(hook_name)
        if not buckets:
            return []
        if hook_name not in self._sorted:
            self._hooks[hook_name] = dict(sorted(buckets.items()))
            self._sorted.add(hook_name)
            logger.trace("Sorted priorities of {!r}", hook_name)
        return list(self._hooks[hook_name])

    def next_priority(self, hook_name: str, after: int | None) -> int | None:
        """Smallest live priority strictly greater than ``after``."""
        priorities = self.priorities(hook_name)
        if not priorities:
            return None
        if after is None:
            return priorities[0]
        index = bisect_right(priorities, after)
        return priorities[index] if index < len(priorities) else None

    def next_entry(
        self, hook_name: str, priority: int, after_seq: int, ceiling: int
    ) -> Entry | None:
        """
        First live entry of one bucket inserted after ``after_seq`` and no
        later than ``ceiling``. Bucket order is insertion order, which is
        ascending ``seq`` order, so the lookup bisects on ``seq``.
        """
        bucket = self._hooks.get(hook_name, {}).get(priority)
        if not bucket:
            return None
        key = (hook_name, priority)
        ordered = self._ordered.get(key)
        if ordered is None:
            ordered = self._ordered[key] = list(bucket.values())
        index = bisect_right(ordered, after_seq, key=lambda entry: entry.seq)
        if index < len(ordered) and ordered[index].seq <= ceiling:
            return ordered[index]
        return None
