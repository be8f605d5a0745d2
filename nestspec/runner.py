"""Execution driver for nested spec declarations.

A root spec is a function taking a `Context`. Inside it, `Context.specify`
declares nested specs as zero-argument callables, which usually close over
state set up by the enclosing spec::

    def stack_spec(c):
        stack = []

        def when_pushed():
            stack.append(1)
            c.expect(len(stack)).equals(1)

        c.specify("When an item is pushed", when_pushed)
        c.specify("When empty", lambda: c.expect(stack).equals([]))

    runner = Runner()
    runner.add_spec("Stack", stack_spec)
    runner.run()

Each leaf spec runs in isolation: the root declaration is executed once per
leaf path. An execution enters every spec on its target path and, below the
target, only the first child declared at each level. Later siblings are
postponed and become the targets of later executions. Every spec that was
entered is folded into the runner's `ResultCollector` when its body returns.

Declarations must declare children in the same order on every execution;
otherwise sibling indices, and therefore paths, do not line up.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional, Set

from nestspec.config import RUNNER_CONFIG, RunnerConfig
from nestspec.logging import get_logger, set_global_log_level
from nestspec.results.collector import ResultCollector
from nestspec.spec_run import SpecPath, SpecRun

logger = get_logger(__name__)

SpecFunc = Callable[["Context"], None]


class Expectation:
    """Assertion on one value, recording failures on the running spec."""

    def __init__(self, context: Context, actual: Any) -> None:
        self._context = context
        self._actual = actual

    def equals(self, expected: Any) -> bool:
        """Record ``Expected '<expected>' but was '<actual>'`` unless equal."""
        if self._actual == expected:
            return True
        self._context.fail(f"Expected '{expected}' but was '{self._actual}'")
        return False

    def is_true(self) -> bool:
        """Record a failure unless the value is truthy."""
        if self._actual:
            return True
        self._context.fail(f"Expected 'True' but was '{self._actual}'")
        return False


class Context:
    """Handle passed to spec functions during one execution.

    Args:
        target: Path this execution must reach.
        results: Collector receiving every entered spec.
        catch_exceptions: Record exceptions escaping a spec body as failures
            instead of propagating them.
    """

    def __init__(
        self,
        target: SpecPath,
        results: ResultCollector,
        catch_exceptions: bool = True,
    ) -> None:
        self._target = target
        self._results = results
        self._catch_exceptions = catch_exceptions
        self._current: Optional[SpecRun] = None
        # Parents that already entered their one child past the target
        self._entered: Set[SpecPath] = set()
        self.postponed: List[SpecPath] = []

    def run_root(self, name: str, fn: SpecFunc) -> None:
        """Execute the root declaration `fn` under this context."""
        self._execute(SpecRun(name), lambda: fn(self))

    def specify(self, name: str, body: Callable[[], None]) -> None:
        """Declare a nested spec under the spec currently running.

        Raises:
            TypeError: If `body` is not callable.
            RuntimeError: If no spec is running.
        """
        if not callable(body):
            raise TypeError(f"Body of spec {name!r} must be callable")
        parent = self._require_current("specify")
        run = SpecRun(name, parent=parent)

        if self._should_enter(run.path):
            self._execute(run, body)
        elif len(run.path) > len(self._target):
            self.postponed.append(run.path)

    def expect(self, actual: Any) -> Expectation:
        """Start an assertion about `actual` in the spec currently running."""
        self._require_current("expect")
        return Expectation(self, actual)

    def fail(self, message: str) -> None:
        """Record `message` as a failure of the spec currently running."""
        self._require_current("fail").add_error(message)

    def _require_current(self, operation: str) -> SpecRun:
        if self._current is None:
            raise RuntimeError(f"Context.{operation}() called outside a running spec")
        return self._current

    def _should_enter(self, path: SpecPath) -> bool:
        depth = len(path)
        if depth <= len(self._target):
            return path == self._target[:depth]
        parent_path = path[:-1]
        if parent_path in self._entered:
            return False
        self._entered.add(parent_path)
        return True

    def _execute(self, run: SpecRun, body: Callable[[], None]) -> None:
        previous = self._current
        self._current = run
        try:
            body()
        except Exception as exc:
            if not self._catch_exceptions:
                raise
            logger.debug("Spec %r at %s raised %r", run.name, run.path, exc)
            run.add_error(f"{type(exc).__name__}: {exc}")
        finally:
            self._current = previous
        self._results.update(run)


class Runner:
    """Runs registered root specs and collects their results.

    Args:
        config: Driver configuration; defaults to `RUNNER_CONFIG`.
    """

    def __init__(self, config: Optional[RunnerConfig] = None) -> None:
        self.config = config if config is not None else RUNNER_CONFIG
        self._specs: Dict[str, SpecFunc] = {}
        self._results = ResultCollector()

    def add_spec(self, name: str, fn: SpecFunc) -> None:
        """Register a root spec.

        Raises:
            TypeError: If `fn` is not callable.
            ValueError: If a root spec with this name is already registered.
        """
        if not callable(fn):
            raise TypeError(f"Root spec {name!r} must be callable")
        if name in self._specs:
            logger.error("Duplicate root spec name: %r", name)
            raise ValueError(f"Root spec {name!r} is already registered")
        self._specs[name] = fn

    def run(self) -> ResultCollector:
        """Execute every registered root spec once per leaf path.

        Returns:
            The collector holding the merged results.

        Raises:
            RuntimeError: If a root spec needs more executions than
                `config.max_runs_per_spec`.
        """
        set_global_log_level(self.config.log_level)
        for name, fn in self._specs.items():
            self._run_spec(name, fn)
        logger.info(
            "Ran %d root spec(s): %d specs, %d failures",
            len(self._specs),
            self._results.total_specs,
            self._results.total_failures,
        )
        return self._results

    def _run_spec(self, name: str, fn: SpecFunc) -> None:
        root: SpecPath = (name,)
        pending: Deque[SpecPath] = deque([root])
        scheduled: Set[SpecPath] = {root}
        executions = 0

        while pending:
            target = pending.popleft()
            if executions >= self.config.max_runs_per_spec:
                logger.error(
                    "Spec %r exceeded %d executions; %d path(s) still pending",
                    name,
                    self.config.max_runs_per_spec,
                    len(pending) + 1,
                )
                raise RuntimeError(
                    f"Spec {name!r} exceeded max_runs_per_spec="
                    f"{self.config.max_runs_per_spec}"
                )
            executions += 1

            logger.debug("Executing %r towards %s", name, target)
            context = Context(
                target, self._results, catch_exceptions=self.config.catch_exceptions
            )
            context.run_root(name, fn)

            for path in context.postponed:
                if path not in scheduled:
                    scheduled.add(path)
                    pending.append(path)

        logger.debug("Spec %r finished after %d execution(s)", name, executions)

    def results(self) -> ResultCollector:
        return self._results
