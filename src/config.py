"""
Experiment and scenario configuration loading and validation utilities.
"""

from dataclasses import fields
from pathlib import Path
from typing import Any

from src.io import read_yaml
from src.scoring import FitnessWeights


PROJECT_ROOT = Path(__file__).resolve().parents[1]  # Project root directory.
DEFAULT_CONFIG_DIR = PROJECT_ROOT / "configs"       # Default configuration directory.


def resolve_config_path(name_or_path: str | Path) -> Path:
    """
    Resolve a YAML config file path: an existing path as is, otherwise a file
    of the default config directory (".yaml" may be omitted).
    """
    p = Path(name_or_path)
    if p.exists():
        return p
    if not p.suffix:
        candidate = DEFAULT_CONFIG_DIR / f"{p.name}.yaml"
        if candidate.exists():
            return candidate
    candidate = DEFAULT_CONFIG_DIR / p.name
    if candidate.exists():
        return candidate
    raise FileNotFoundError(f"Config not found: {name_or_path}")


def load_yaml_config(name_or_path: str | Path) -> dict:
    path = resolve_config_path(name_or_path)
    cfg = read_yaml(path)
    if not isinstance(cfg, dict):
        raise ValueError(f"Invalid YAML at {path}")
    return cfg


def load_scenario(name_or_path: str | Path) -> dict:
    """
    Load a scenario YAML config file content.
    """
    cfg = load_yaml_config(name_or_path)
    _validate_scenario(cfg)
    return cfg


def load_experiment(name_or_path: str | Path = "experiment_main.yaml") -> dict:
    """
    Load an experiment YAML config file content.
    """
    cfg = load_yaml_config(name_or_path)
    _validate_experiment(cfg)
    return cfg


def fitness_weights_from_config(cfg: dict[str, Any]) -> FitnessWeights:
    """
    Build the fitness weights from the optional `fitness` section of a config.
    Missing weights keep their default value.
    """
    section = cfg.get("fitness") or {}
    if not isinstance(section, dict):
        raise ValueError("fitness must be a mapping")
    known = {f.name for f in fields(FitnessWeights)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ValueError(f"unknown fitness weights: {', '.join(unknown)}")
    return FitnessWeights(**{k: float(v) for k, v in section.items()})


def _validate_scenario(cfg: dict[str, Any]) -> None:
    """
    Validate a scenario YAML config file content. Requires:
        - grid: positive rows and columns.
        - fleet: non-negative n_vehicles.
        - rides: non-negative n_rides; slack_min <= slack_max, both
          positive; tight_share (optional) within [0, 1].
        - bonus and n_steps: non-negative ints.
    """
    required_top = ["grid", "fleet", "rides", "bonus", "n_steps"]
    for k in required_top:
        if k not in cfg:
            raise ValueError(f"scenario missing key: {k}")
    g = cfg["grid"]
    for kk in ["rows", "columns"]:
        if not isinstance(g.get(kk), int) or g[kk] <= 0:
            raise ValueError(f"grid.{kk} must be a positive int")
    f = cfg["fleet"]
    if not isinstance(f.get("n_vehicles"), int) or f["n_vehicles"] < 0:
        raise ValueError("fleet.n_vehicles must be a non-negative int")
    r = cfg["rides"]
    if not isinstance(r.get("n_rides"), int) or r["n_rides"] < 0:
        raise ValueError("rides.n_rides must be a non-negative int")
    for kk in ["slack_min", "slack_max"]:
        if not isinstance(r.get(kk), int) or r[kk] <= 0:
            raise ValueError(f"rides.{kk} must be a positive int")
    if r["slack_min"] > r["slack_max"]:
        raise ValueError("rides.slack_min must not exceed rides.slack_max")
    if not 0.0 <= float(r.get("tight_share", 0.0)) <= 1.0:
        raise ValueError("rides.tight_share must be within [0, 1]")
    for kk in ["bonus", "n_steps"]:
        if not isinstance(cfg[kk], int) or cfg[kk] < 0:
            raise ValueError(f"{kk} must be a non-negative int")


def _validate_experiment(cfg: dict[str, Any]) -> None:
    """
    Validate an experiment YAML config file content. Requires:
        - scenarios (with seeds) or inputs: something to solve.
        - seeds: non-empty list when scenarios are given.
        - fitness (optional): known weights only.
    """
    scenarios = cfg.get("scenarios") or []
    inputs = cfg.get("inputs") or []
    if not scenarios and not inputs:
        raise ValueError("experiment must define scenarios or inputs")
    if scenarios and not cfg.get("seeds"):
        raise ValueError("experiment.seeds must be non-empty")
    fitness_weights_from_config(cfg)
