"""Per-execution view of one declared spec.

A `SpecRun` is created fresh every time the driver executes a spec
declaration. It records the spec's name, the failure messages raised while it
ran, and its path: the root spec's name followed by the zero-based sibling
index at every nesting level below the root.

Sibling indices come from a counter owned by the parent run. The counter is
incremented once per child constructed against that parent instance, so all
siblings of one execution must be built against the *same* parent object.
Building siblings against distinct parent instances yields colliding paths;
this is not detected here.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple, Union

# Root name followed by sibling indices, e.g. ("RootSpec", 0, 1)
SpecPath = Tuple[Union[str, int], ...]


class SpecRun:
    """One spec as seen during a single execution of its declaration.

    Attributes:
        name: Display name of the spec.
        parent: The run that declared this spec in the same execution, or None
            for a root.
        errors: Failure messages attributed to this spec in this execution,
            in the order they were recorded.
        path: Identity of the spec across executions. Frozen at construction.
    """

    __slots__ = ("name", "parent", "errors", "path", "_child_count")

    def __init__(
        self,
        name: str,
        errors: Optional[Iterable[str]] = None,
        parent: Optional[SpecRun] = None,
        path: Optional[SpecPath] = None,
    ) -> None:
        """Create a run and freeze its path.

        Args:
            name: Display name of the spec.
            errors: Initial failure messages, if any.
            parent: Shared parent run for this execution. When given and
                `path` is omitted, the path is the parent's path extended by
                the parent's next child index.
            path: Explicit path, used when reconstructing runs outside a live
                execution.
        """
        self.name = name
        self.parent = parent
        self.errors: List[str] = list(errors) if errors is not None else []
        self._child_count = 0

        if path is not None:
            self.path: SpecPath = tuple(path)
        elif parent is not None:
            self.path = parent.path + (parent._next_child_index(),)
        else:
            self.path = (name,)

    def _next_child_index(self) -> int:
        index = self._child_count
        self._child_count += 1
        return index

    @property
    def parent_path(self) -> SpecPath:
        """Path of the declaring spec; empty for a root."""
        return self.path[:-1]

    @property
    def is_root(self) -> bool:
        return len(self.path) == 1

    def add_error(self, message: str) -> None:
        """Attribute one failure message to this run."""
        self.errors.append(message)

    def __repr__(self) -> str:
        return (
            f"SpecRun(name={self.name!r}, path={self.path!r}, "
            f"errors={len(self.errors)})"
        )
