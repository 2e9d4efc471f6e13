"""Configuration loading and validation for sweeper simulations."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from configs import schema
from core.schema_validator import validate_params
from network.neural_net import NetworkTopology


@dataclass(frozen=True)
class SweeperConfig:
    """Validated, immutable simulation configuration.

    One instance is passed explicitly to every component that needs it;
    there is no shared global settings block.
    """

    num_inputs: int = 4
    num_outputs: int = 2
    num_hidden_layers: int = 1
    neurons_per_hidden_layer: int = 6
    activation_response: float = 1.0
    bias: float = -1.0
    max_turn_rate: float = 0.3
    max_speed: float = 2.0
    num_sweepers: int = 30
    num_targets: int = 40
    ticks_per_generation: int = 2000
    crossover_rate: float = 0.7
    mutation_rate: float = 0.1
    max_perturbation: float = 0.3
    elite_count: int = 4
    elite_copies: int = 1
    arena_width: float = 400.0
    arena_height: float = 400.0
    target_capture_scale: float = 2.0
    generations: int = 100
    seed: int = 0

    def network_topology(self) -> NetworkTopology:
        return NetworkTopology(
            num_inputs=self.num_inputs,
            num_outputs=self.num_outputs,
            num_hidden_layers=self.num_hidden_layers,
            neurons_per_hidden_layer=self.neurons_per_hidden_layer,
            activation_response=self.activation_response,
            bias=self.bias,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a full dictionary view of the configuration."""
        return dataclasses.asdict(self)

    def with_overrides(self, **overrides: Any) -> "SweeperConfig":
        """Return a validated copy with ``overrides`` applied."""
        payload = self.to_dict()
        payload.update({key: value for key, value in overrides.items() if value is not None})
        return _validate_and_build(payload)


class ConfigLoader:
    """Load and validate simulation configuration files (YAML or JSON)."""

    @staticmethod
    def load(path: str | Path) -> SweeperConfig:
        """Load a single config mapping from ``path``."""
        payload = _read_config_payload(path)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError("Single config file must contain a mapping object.")
        return _validate_and_build(payload)

    @staticmethod
    def load_many(path: str | Path) -> list[SweeperConfig]:
        """Load one or many configs from ``path``.

        Supports:
            - top-level mapping for a single run
            - top-level list of mappings
            - top-level mapping with an ``experiments`` list
        """
        payload = _read_config_payload(path)

        if isinstance(payload, list):
            return [_validate_and_build(item) for item in payload]

        if isinstance(payload, Mapping) and "experiments" in payload:
            experiments = payload["experiments"]
            if not isinstance(experiments, list):
                raise ValueError("'experiments' must be a list of mappings.")
            return [_validate_and_build(item) for item in experiments]

        if isinstance(payload, Mapping):
            return [_validate_and_build(payload)]

        raise ValueError("Unsupported config file structure.")

    @staticmethod
    def from_mapping(payload: Mapping[str, Any]) -> SweeperConfig:
        return _validate_and_build(payload)


def _read_config_payload(path: str | Path) -> Any:
    """Read raw config payload from JSON or YAML file."""
    config_path = Path(path)
    suffix = config_path.suffix.lower()
    content = config_path.read_text(encoding="utf-8")

    if suffix == ".json":
        return json.loads(content)

    if suffix in {".yaml", ".yml"}:
        return yaml.safe_load(content)

    raise ValueError(f"Unsupported config extension: {suffix}")


def _validate_and_build(payload: Mapping[str, Any]) -> SweeperConfig:
    """Validate raw mapping and build ``SweeperConfig``."""
    if not isinstance(payload, Mapping):
        raise ValueError("Config entry must be a mapping object.")

    params = validate_params(payload, schema)
    config = SweeperConfig(**params)

    for key in ("num_inputs", "num_sweepers", "num_targets", "ticks_per_generation"):
        if getattr(config, key) <= 0:
            raise ValueError(f"{key} must be > 0")
    if config.num_outputs < 2:
        raise ValueError("num_outputs must be >= 2 (left and right track)")
    if config.num_hidden_layers < 0:
        raise ValueError("num_hidden_layers must be >= 0")
    if config.num_hidden_layers > 0 and config.neurons_per_hidden_layer <= 0:
        raise ValueError("neurons_per_hidden_layer must be > 0 when hidden layers are used")
    if config.activation_response <= 0:
        raise ValueError("activation_response must be > 0")
    for key in ("crossover_rate", "mutation_rate"):
        if not 0.0 <= getattr(config, key) <= 1.0:
            raise ValueError(f"{key} must be in [0.0, 1.0]")
    if config.max_perturbation < 0 or config.max_turn_rate < 0:
        raise ValueError("max_perturbation and max_turn_rate must be >= 0")
    if config.elite_count < 0 or config.elite_copies < 0:
        raise ValueError("elite_count and elite_copies must be >= 0")
    if config.arena_width <= 0 or config.arena_height <= 0:
        raise ValueError("arena_width and arena_height must be > 0")
    if config.generations < 0:
        raise ValueError("generations must be >= 0")

    return config
