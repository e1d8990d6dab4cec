"""Dependency graph between named nodes, with recalculation ordering."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from cellgraph._errors import CircularDependencyError


class DependencyGraph:
    """A set of ordered pairs ``(s, t)`` meaning "t depends on s".

    *s* is a dependee of *t* and *t* is a dependent of *s*. Both directions
    are indexed and every mutation keeps the two indices consistent::

        g = DependencyGraph()
        g.add_dependency("A1", "B1")     # B1 reads A1
        g.get_dependents("A1")           # {'B1'}
        g.get_dependees("B1")            # {'A1'}
    """

    __slots__ = ("_dependents", "_dependees", "_size")

    def __init__(self) -> None:
        # s -> set of t with (s, t) in the graph
        self._dependents: dict[str, set[str]] = {}
        # t -> set of s with (s, t) in the graph
        self._dependees: dict[str, set[str]] = {}
        self._size = 0

    @property
    def size(self) -> int:
        """Number of distinct pairs."""
        return self._size

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, t: str) -> int:
        return self.dependee_count(t)

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        s, t = pair
        return t in self._dependents.get(s, ())

    def dependee_count(self, t: str) -> int:
        return len(self._dependees.get(t, ()))

    def has_dependents(self, s: str) -> bool:
        return s in self._dependents

    def has_dependees(self, t: str) -> bool:
        return t in self._dependees

    def get_dependents(self, s: str) -> set[str]:
        return set(self._dependents.get(s, ()))

    def get_dependees(self, t: str) -> set[str]:
        return set(self._dependees.get(t, ()))

    def pairs(self) -> Iterator[tuple[str, str]]:
        """Iterate over every stored ``(s, t)`` pair."""
        for s, targets in self._dependents.items():
            for t in targets:
                yield s, t

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_dependency(self, s: str, t: str) -> None:
        """Add ``(s, t)``; no-op if already present."""
        targets = self._dependents.setdefault(s, set())
        if t in targets:
            return
        targets.add(t)
        self._dependees.setdefault(t, set()).add(s)
        self._size += 1

    def remove_dependency(self, s: str, t: str) -> None:
        """Remove ``(s, t)``; no-op if absent."""
        targets = self._dependents.get(s)
        if targets is None or t not in targets:
            return
        _discard(self._dependents, s, t)
        _discard(self._dependees, t, s)
        self._size -= 1

    def replace_dependents(self, s: str, new_dependents: Iterable[str]) -> None:
        """Replace every ``(s, *)`` pair with ``(s, t)`` for each *t* in *new_dependents*."""
        new_targets = set(new_dependents)
        for t in self._dependents.pop(s, ()):
            _discard(self._dependees, t, s)
            self._size -= 1
        for t in new_targets:
            self.add_dependency(s, t)

    def replace_dependees(self, t: str, new_dependees: Iterable[str]) -> None:
        """Replace every ``(*, t)`` pair with ``(s, t)`` for each *s* in *new_dependees*."""
        new_sources = set(new_dependees)
        for s in self._dependees.pop(t, ()):
            _discard(self._dependents, s, t)
            self._size -= 1
        for s in new_sources:
            self.add_dependency(s, t)

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def recalculation_order(self, start: str) -> list[str]:
        """*start* followed by everything that transitively depends on it.

        Each node appears after every node it depends on within the result
        (reverse post-order of a depth-first walk over dependents). Raises
        :class:`CircularDependencyError` if the walk finds a cycle.
        """
        visited: set[str] = {start}
        on_path: set[str] = {start}
        finished: list[str] = []
        stack: list[tuple[str, Iterator[str]]] = [(start, self._sorted_dependents(start))]

        while stack:
            node, children = stack[-1]
            for child in children:
                if child in on_path:
                    raise CircularDependencyError(start)
                if child not in visited:
                    visited.add(child)
                    on_path.add(child)
                    stack.append((child, self._sorted_dependents(child)))
                    break
            else:
                stack.pop()
                on_path.discard(node)
                finished.append(node)

        finished.reverse()
        return finished

    def _sorted_dependents(self, s: str) -> Iterator[str]:
        return iter(sorted(self._dependents.get(s, ())))

    def __repr__(self) -> str:
        return f"<DependencyGraph pairs={self._size}>"


def _discard(index: dict[str, set[str]], key: str, member: str) -> None:
    """Remove *member* from ``index[key]``, dropping the key once its set is empty."""
    members = index.get(key)
    if members is None:
        return
    members.discard(member)
    if not members:
        del index[key]
