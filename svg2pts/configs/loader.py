"""Configuration loader for conversion runs.

Loads ``defaults.yaml`` (or a user file with the same layout) into typed,
frozen dataclasses, applies command-line overrides, and validates the
result before any document is read.

Precedence: command-line override > YAML value > built-in default.

Usage::

    from svg2pts.configs.loader import load_config
    cfg = load_config()                              # shipped defaults
    cfg = load_config("my.yaml", {"distance": 0.5})  # file + overrides
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from svg2pts.output.point_sink import DEFAULT_CAPACITY, MAX_POINT_BYTES
from svg2pts.resample.policies import ResampleMode
from svg2pts.utils.fs import load_yaml

logger = logging.getLogger(__name__)

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"

PASSTHROUGH_ACCURACY = 0.05
"""Default curve accuracy when resampling is disabled."""

ACCURACY_DIVISOR = 25.0
"""Default curve accuracy is ``distance / ACCURACY_DIVISOR`` otherwise."""

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


# ---------------------------------------------------------------------------
# Dataclasses -- mirror the YAML structure
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoggingConfig:
    """Logging destination and format."""

    level: str = "WARNING"
    json: bool = False
    file: str | None = None


@dataclass(frozen=True)
class ConversionConfig:
    """Immutable settings for one conversion run.

    Parameters
    ----------
    distance : float
        Target spacing between emitted points; ``0`` disables resampling.
    accuracy : float | None
        Maximum curve flattening deviation.  ``None`` resolves to the
        default for the effective distance (see ``resolve_accuracy``).
    points : int
        Desired point count; ``> 0`` derives ``distance`` from the
        estimated path length and overrides ``distance``.
    mode : ResampleMode
        Resampling policy when ``distance > 0``.
    buffer_size : int
        Output buffer capacity in bytes.
    logging : LoggingConfig
        Logging settings.
    """

    distance: float = 0.0
    accuracy: float | None = None
    points: int = 0
    mode: ResampleMode = ResampleMode.EXACT
    buffer_size: int = DEFAULT_CAPACITY
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def resolve_accuracy(distance: float, accuracy: float | None) -> float:
    """Effective flattening accuracy for a resolved distance.

    ``0.05`` for passthrough, ``distance / 25`` otherwise, unless the
    caller gave an explicit value.
    """
    if accuracy is not None:
        return accuracy
    if distance == 0.0:
        return PASSTHROUGH_ACCURACY
    return distance / ACCURACY_DIVISOR


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _finite(name: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value for {name}: {value!r}") from exc
    if not math.isfinite(number):
        raise ConfigError(f"{name} must be finite, got {value!r}")
    return number


def _count(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError as exc:
            raise ConfigError(f"Invalid value for {name}: {value!r}") from exc
    if not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    return value


def _validate_config(cfg: ConversionConfig) -> None:
    """Range checks on a fully built config.

    Raises
    ------
    ConfigError
        On any out-of-range value.
    """
    if cfg.distance < 0.0:
        raise ConfigError(f"distance is out of range, distance >= 0 (got {cfg.distance})")
    if cfg.accuracy is not None and cfg.accuracy <= 0.0:
        raise ConfigError(f"accuracy is out of range, accuracy > 0 (got {cfg.accuracy})")
    if cfg.points < 0:
        raise ConfigError(f"points is out of range, points >= 0 (got {cfg.points})")
    if cfg.buffer_size < MAX_POINT_BYTES:
        raise ConfigError(
            f"buffer_size must be >= {MAX_POINT_BYTES} bytes (got {cfg.buffer_size})"
        )
    if cfg.logging.level not in LOG_LEVELS:
        raise ConfigError(
            f"Unknown log level {cfg.logging.level!r}, use one of {', '.join(LOG_LEVELS)}"
        )


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"Section '{key}' must be a mapping, got {type(value).__name__}")
    return value


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> ConversionConfig:
    """Load, override and validate conversion settings.

    Parameters
    ----------
    path : str | Path | None
        YAML file.  ``None`` loads ``defaults.yaml`` shipped alongside
        this module.
    overrides : dict | None
        Flat overrides, typically from the command line.  Recognised
        keys: ``distance``, ``accuracy``, ``points``, ``mode``,
        ``buffer_size``, ``log_level``, ``log_json``, ``log_file``.
        ``None`` values are ignored.

    Returns
    -------
    ConversionConfig
        Validated, frozen configuration.

    Raises
    ------
    ConfigError
        If the file is malformed or any value fails validation.
    FileNotFoundError
        If *path* does not exist.
    """
    path = DEFAULTS_PATH if path is None else Path(path)
    logger.debug("Loading configuration from %s", path)

    try:
        data = load_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(str(exc)) from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root must be a mapping: {path}")

    rs = _section(data, "resample")
    out = _section(data, "output")
    lg = _section(data, "logging")
    ov = {k: v for k, v in (overrides or {}).items() if v is not None}

    accuracy = ov.get("accuracy", rs.get("accuracy"))
    mode = ov.get("mode", rs.get("mode", ResampleMode.EXACT.value))
    try:
        mode = ResampleMode(mode)
    except ValueError as exc:
        choices = ", ".join(m.value for m in ResampleMode)
        raise ConfigError(f"Unknown resample mode {mode!r}, use one of {choices}") from exc

    log_file = ov.get("log_file", lg.get("file"))
    config = ConversionConfig(
        distance=_finite("distance", ov.get("distance", rs.get("distance", 0.0))),
        accuracy=None if accuracy is None else _finite("accuracy", accuracy),
        points=_count("points", ov.get("points", rs.get("points", 0))),
        mode=mode,
        buffer_size=_count(
            "buffer_size", ov.get("buffer_size", out.get("buffer_size", DEFAULT_CAPACITY))
        ),
        logging=LoggingConfig(
            level=str(ov.get("log_level", lg.get("level", "WARNING"))).upper(),
            json=bool(ov.get("log_json", lg.get("json", False))),
            file=None if log_file is None else str(log_file),
        ),
    )

    _validate_config(config)
    logger.debug("Configuration loaded: %s", config)
    return config
