"""Objects updated in dependency order by a managing superior."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque


class ObjectManagerError(Exception):
    """Raised on inconsistent registration requests."""


class CycleError(ObjectManagerError):
    """Raised when a dependency would close a cycle."""


class ManagedObject(ABC):
    """An object registered with an optional managing superior."""

    def __init__(self, superior: ObjectManager | None = None) -> None:
        self._superior = superior
        if superior is not None:
            superior.register_subordinate(self)

    @property
    def superior(self) -> ObjectManager | None:
        return self._superior

    @abstractmethod
    def update(self) -> None:
        """Advance this object by one step."""

    def depend(self, dependency: ManagedObject) -> None:
        """Have ``dependency`` update before this object."""
        if self._superior is not None:
            self._superior.register_dependency(self, dependency)

    def undepend(self, dependency: ManagedObject) -> None:
        if self._superior is not None:
            self._superior.unregister_dependency(self, dependency)

    def close(self) -> None:
        """Leave the superior; safe to call more than once."""
        if self._superior is not None:
            superior, self._superior = self._superior, None
            superior.unregister_subordinate(self)


class ObjectManager:
    """Keeps subordinates and updates them in topological order."""

    def __init__(self) -> None:
        # Maps each object to the set of objects that depend on it.
        self._dependents: dict[ManagedObject, set[ManagedObject]] = {}
        # Number of dependencies each object waits for.
        self._counts: dict[ManagedObject, int] = {}

    def register_subordinate(self, subordinate: ManagedObject) -> None:
        self._dependents[subordinate] = set()
        self._counts[subordinate] = 0

    def unregister_subordinate(self, subordinate: ManagedObject) -> None:
        if subordinate not in self._dependents:
            raise ObjectManagerError("Subordinate not found")
        for dependent in self._dependents.pop(subordinate):
            self._counts[dependent] -= 1
        del self._counts[subordinate]
        for dependents in self._dependents.values():
            dependents.discard(subordinate)

    def register_dependency(
        self, subordinate: ManagedObject, dependency: ManagedObject
    ) -> None:
        """Record that ``subordinate`` depends on ``dependency``.

        A dependency that is not managed here is ignored.
        """
        if dependency not in self._dependents:
            return
        if subordinate not in self._counts:
            raise ObjectManagerError("Subordinate not found")
        dependents = self._dependents[dependency]
        if subordinate in dependents:
            return
        dependents.add(subordinate)
        self._counts[subordinate] += 1
        if self.has_cycle():
            dependents.discard(subordinate)
            self._counts[subordinate] -= 1
            raise CycleError("Cycle dependency detected")

    def unregister_dependency(
        self, subordinate: ManagedObject, dependency: ManagedObject
    ) -> None:
        if dependency not in self._dependents:
            raise ObjectManagerError("Dependency not found")
        dependents = self._dependents[dependency]
        if subordinate in dependents:
            dependents.discard(subordinate)
            self._counts[subordinate] -= 1

    def has_cycle(self) -> bool:
        """True if the dependency graph contains a cycle."""
        done: set[ManagedObject] = set()
        for root in self._dependents:
            if root in done:
                continue
            on_path = {root}
            stack = [(root, iter(self._dependents[root]))]
            while stack:
                node, children = stack[-1]
                child = next(children, None)
                if child is None:
                    stack.pop()
                    on_path.discard(node)
                    done.add(node)
                elif child in on_path:
                    return True
                elif child not in done:
                    on_path.add(child)
                    stack.append((child, iter(self._dependents.get(child, ()))))
        return False

    def update_subordinates(self) -> None:
        """Update every subordinate after all of its dependencies."""
        counts = dict(self._counts)
        pending = deque(obj for obj, count in counts.items() if count == 0)
        while pending:
            obj = pending.popleft()
            obj.update()
            for dependent in self._dependents.get(obj, ()):
                counts[dependent] -= 1
                if counts[dependent] == 0:
                    pending.append(dependent)

    def subordinates(self) -> set[ManagedObject]:
        return set(self._dependents)