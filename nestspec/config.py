"""Configuration classes for nestspec components."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from importlib import resources
from typing import Any, Dict

import jsonschema

from nestspec.logging import get_logger
from nestspec.utils.yaml_utils import load_yaml_mapping

logger = get_logger(__name__)

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class RunnerConfig:
    """Configuration for the spec execution driver."""

    # Upper bound on executions of one root spec's declaration. A declaration
    # whose shape keeps changing between executions would otherwise never end.
    max_runs_per_spec: int = 10000

    # Record exceptions escaping a spec body as failures instead of raising
    catch_exceptions: bool = True

    # Level applied to the package logger by Runner.run()
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not isinstance(self.max_runs_per_spec, int) or self.max_runs_per_spec < 1:
            logger.error(
                "RunnerConfig.max_runs_per_spec must be a positive int: %r",
                self.max_runs_per_spec,
            )
            raise ValueError("RunnerConfig.max_runs_per_spec must be a positive int")
        self.log_level = str(self.log_level).upper()
        if self.log_level not in _LOG_LEVELS:
            logger.error(
                "RunnerConfig.log_level is not a level name: %r", self.log_level
            )
            raise ValueError(
                f"RunnerConfig.log_level must be one of {sorted(_LOG_LEVELS)}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RunnerConfig:
        """Build a config from a plain mapping, rejecting unknown keys."""
        _check_known_keys(data)
        return cls(**data)


def _check_known_keys(data: Dict[str, Any]) -> None:
    known = {f.name for f in fields(RunnerConfig)}
    extra = set(data) - known
    if extra:
        raise ValueError(
            f"Unrecognized runner config key(s): {', '.join(sorted(extra))}. "
            f"Allowed keys are {sorted(known)}"
        )


def _runner_config_schema() -> Dict[str, Any]:
    with (
        resources.files("nestspec.schemas")
        .joinpath("runner_config.json")
        .open("r", encoding="utf-8")
    ) as f:
        return json.load(f)


def load_runner_config(yaml_str: str) -> RunnerConfig:
    """Load, normalize, and validate a runner configuration YAML string.

    Example:
        ```yaml
        max_runs_per_spec: 500
        catch_exceptions: false
        log_level: DEBUG
        ```

    Args:
        yaml_str: YAML text. An empty document yields the defaults.

    Returns:
        The validated configuration.

    Raises:
        ValueError: If the document is not a mapping or has unknown keys.
        jsonschema.ValidationError: If a value has the wrong type or range.
    """
    data = load_yaml_mapping(yaml_str)
    if isinstance(data.get("log_level"), str):
        data["log_level"] = data["log_level"].upper()

    # Unknown keys first, for a clearer message than the schema error
    _check_known_keys(data)

    jsonschema.validate(data, _runner_config_schema())
    return RunnerConfig.from_dict(data)


# Global configuration instance
RUNNER_CONFIG = RunnerConfig()
