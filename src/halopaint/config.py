from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace

from .errors import InvalidArgument

STRATEGIES = ("reduce", "sorted")

# Environment overrides read by `PaintConfig.from_env`.
ENV_NSIDE = "HALOPAINT_NSIDE"
ENV_CHUNK_SIZE = "HALOPAINT_CHUNK_SIZE"
ENV_NUM_THREADS = "HALOPAINT_NUM_THREADS"
ENV_STRATEGY = "HALOPAINT_STRATEGY"
ENV_PROGRESS = "HALOPAINT_PROGRESS"


def default_n_workers() -> int:
    try:
        return len(os.sched_getaffinity(0))
    except AttributeError:
        return int(os.cpu_count() or 1)


def env_flag(name: str) -> bool:
    return str(os.environ.get(name, "")).strip().lower() not in ("", "0", "false", "no")


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidArgument(f"{name} must be an integer; got {raw!r}.") from e


@dataclass(frozen=True)
class PaintConfig:
    """Run parameters for a painting pass.

    `n_workers=None` means one worker per CPU available to this process.
    """

    nside: int = 512
    chunk_size: int = 4096
    n_workers: int | None = None
    strategy: str = "reduce"
    progress: bool = False

    def __post_init__(self) -> None:
        if int(self.nside) <= 0:
            raise InvalidArgument("nside must be positive.")
        if int(self.chunk_size) <= 0:
            raise InvalidArgument("chunk_size must be positive.")
        if self.n_workers is not None and int(self.n_workers) <= 0:
            raise InvalidArgument("n_workers must be positive when given.")
        if self.strategy not in STRATEGIES:
            raise InvalidArgument(f"Unsupported strategy: {self.strategy!r} (expected one of {STRATEGIES}).")

    @property
    def workers(self) -> int:
        return int(self.n_workers) if self.n_workers is not None else default_n_workers()

    @classmethod
    def from_env(cls, **overrides) -> "PaintConfig":
        """Build a config from HALOPAINT_* environment variables; keyword overrides win."""
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise InvalidArgument(f"Unknown PaintConfig fields: {sorted(unknown)}.")

        cfg = cls()
        env: dict = {}
        nside = _env_int(ENV_NSIDE)
        if nside is not None:
            env["nside"] = nside
        chunk_size = _env_int(ENV_CHUNK_SIZE)
        if chunk_size is not None:
            env["chunk_size"] = chunk_size
        n_workers = _env_int(ENV_NUM_THREADS)
        if n_workers is not None:
            env["n_workers"] = n_workers
        strategy = os.environ.get(ENV_STRATEGY, "").strip().lower()
        if strategy:
            env["strategy"] = strategy
        if env_flag(ENV_PROGRESS):
            env["progress"] = True
        env.update(overrides)
        return replace(cfg, **env)
