"""Configuration for building a scheduler, with .env defaults."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path

from .constants import (
    BOOST_INTERVAL,
    DEFAULT_NUM_LEVELS,
    DEFAULT_TICK,
    DEFAULT_TIME_QUANTA,
    DispatchOrder,
    LowestTierPolicy,
)

DEFAULT_ENV_FILE = ".env"
_TRUE_VALUES = {"1", "true", "yes", "on", "y"}
_FALSE_VALUES = {"0", "false", "no", "off", "n"}


@dataclass(frozen=True, slots=True)
class SchedulerConfig:
    """Tier table and policies for one MLFQ scheduler."""

    num_levels: int = DEFAULT_NUM_LEVELS
    time_quanta: tuple[int, ...] = field(default=DEFAULT_TIME_QUANTA)
    boost_interval: int = BOOST_INTERVAL
    dispatch_order: DispatchOrder = DispatchOrder.LIFO
    lowest_tier_policy: LowestTierPolicy = LowestTierPolicy.DROP
    tick: int = DEFAULT_TICK

    def validate(self) -> None:
        """Raise ValueError when the tier table cannot build a scheduler."""
        if self.num_levels < 1:
            raise ValueError(f"num_levels must be >= 1, got {self.num_levels}")
        if len(self.time_quanta) != self.num_levels:
            raise ValueError(
                f"time_quanta has {len(self.time_quanta)} entries, "
                f"expected {self.num_levels} (one per tier)"
            )
        for index, quantum in enumerate(self.time_quanta):
            if quantum < 0:
                raise ValueError(f"time_quanta[{index}] must be >= 0, got {quantum}")
        if self.boost_interval < 1:
            raise ValueError(f"boost_interval must be >= 1, got {self.boost_interval}")
        if self.tick < 0:
            raise ValueError(f"tick must be >= 0, got {self.tick}")


def parse_quanta(raw: str) -> tuple[int, ...]:
    """Parse a comma-separated quantum table such as ``"2,4,8"``."""
    parts = [part.strip() for part in raw.split(",") if part.strip()]
    if not parts:
        raise ValueError("time quanta list is empty")
    try:
        return tuple(int(part) for part in parts)
    except ValueError as exc:
        raise ValueError(f"time quanta must be integers, got {raw!r}") from exc


def load_env_file(path: str) -> dict[str, str]:
    """Load simple KEY=VALUE settings from an env file."""
    env_path = Path(path)
    if not env_path.exists():
        return {}

    env: dict[str, str] = {}
    for lineno, line in enumerate(env_path.read_text(encoding="utf-8").splitlines(), start=1):
        text = line.strip()
        if not text or text.startswith("#"):
            continue
        if text.startswith("export "):
            text = text[7:].strip()
        if "=" not in text:
            _warn_env(f"Ignoring invalid env line {lineno} in {path!r}: {line!r}")
            continue
        key, value = text.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            _warn_env(f"Ignoring empty key on env line {lineno} in {path!r}")
            continue
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
            value = value[1:-1]
        env[key] = value
    return env


def config_from_env(env: dict[str, str]) -> SchedulerConfig:
    """Build a SchedulerConfig from env values, falling back per key."""
    num_levels = env_int(env, "LEVELS", default=DEFAULT_NUM_LEVELS)

    time_quanta = DEFAULT_TIME_QUANTA
    raw_quanta = env.get("QUANTA")
    if raw_quanta:
        try:
            time_quanta = parse_quanta(raw_quanta)
        except ValueError as exc:
            _warn_env(f"QUANTA: {exc}. Using {','.join(map(str, DEFAULT_TIME_QUANTA))}.")
    if len(time_quanta) != num_levels:
        if raw_quanta:
            _warn_env(
                f"QUANTA has {len(time_quanta)} entries but LEVELS={num_levels}. "
                f"Using QUANTA length."
            )
        else:
            _warn_env(
                f"LEVELS={num_levels} needs QUANTA with {num_levels} entries. "
                f"Using {len(time_quanta)} levels from the default quanta."
            )
        num_levels = len(time_quanta)

    return SchedulerConfig(
        num_levels=num_levels,
        time_quanta=time_quanta,
        boost_interval=env_int(env, "BOOST_INTERVAL", default=BOOST_INTERVAL),
        dispatch_order=_env_enum(env, "DISPATCH_ORDER", DispatchOrder, DispatchOrder.LIFO),
        lowest_tier_policy=_env_enum(
            env, "LOWEST_TIER", LowestTierPolicy, LowestTierPolicy.DROP
        ),
        tick=env_int(env, "TICK", default=DEFAULT_TICK, minimum=0),
    )


def load_scheduler_config(env_file: str = DEFAULT_ENV_FILE) -> SchedulerConfig:
    return config_from_env(load_env_file(env_file))


def env_int(env: dict[str, str], key: str, default: int, minimum: int = 1) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        _warn_env(f"{key} must be an integer, got {raw!r}. Using {default}.")
        return default
    if value < minimum:
        _warn_env(f"{key} must be >= {minimum}, got {value}. Using {default}.")
        return default
    return value


def env_opt_int(env: dict[str, str], key: str, default: int | None) -> int | None:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        _warn_env(f"{key} must be an integer, got {raw!r}. Using {default}.")
        return default


def env_bool(env: dict[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    _warn_env(
        f"{key} must be one of {sorted(_TRUE_VALUES | _FALSE_VALUES)}, got {raw!r}. "
        f"Using {default}."
    )
    return default


def _env_enum(env: dict[str, str], key: str, enum_type: type, default):
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return enum_type(raw.strip().lower())
    except ValueError:
        options = [member.value for member in enum_type]
        _warn_env(f"{key} must be one of {options}, got {raw!r}. Using {default.value}.")
        return default


def _warn_env(msg: str) -> None:
    print(f"Warning: {msg}", file=sys.stderr)
