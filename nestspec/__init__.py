"""nestspec: result aggregation for nested, repeatedly executed specs.

A spec declaration is executed once per leaf path. Every execution reports
the specs it visited; nestspec folds those reports into one canonical tree,
merges failure messages without duplicates, and prints a text report.

Primary API:
    Runner, Context - Execute root specs once per leaf path
    ResultCollector - Canonical result tree fed by `update()`
    SpecRun - One spec as seen during a single execution
    Printer, SimplePrintFormat, render_report - Text report

Example:
    from nestspec import Runner, render_report

    def root(c):
        c.specify("Child A", lambda: c.expect(1 + 1).equals(2))
        c.specify("Child B", lambda: c.expect(2 + 2).equals(5))

    runner = Runner()
    runner.add_spec("Arithmetic", root)
    print(render_report(runner.run()), end="")
"""

from __future__ import annotations

from nestspec import logging
from nestspec.config import RUNNER_CONFIG, RunnerConfig, load_runner_config
from nestspec.printer import PrintFormat, Printer, SimplePrintFormat, render_report
from nestspec.results import ResultCollector, ResultVisitor, SpecResult, merge_errors
from nestspec.runner import Context, Expectation, Runner
from nestspec.spec_run import SpecPath, SpecRun

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Model
    "SpecRun",
    "SpecPath",
    "SpecResult",
    # Collector
    "ResultCollector",
    "ResultVisitor",
    "merge_errors",
    # Printing
    "PrintFormat",
    "SimplePrintFormat",
    "Printer",
    "render_report",
    # Driver
    "Runner",
    "Context",
    "Expectation",
    # Configuration
    "RunnerConfig",
    "RUNNER_CONFIG",
    "load_runner_config",
    # Logging
    "logging",
]
