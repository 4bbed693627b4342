"""Run configuration — environment defaults, overridden by CLI flags."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass, replace

DEFAULT_GIT_REMOTES = ("origin", "upstream")
DEFAULT_CONFIDENCE_THRESHOLD = 0.9
DEFAULT_WORKERS = 4


@dataclass(frozen=True)
class Settings:
    """Knobs for one run.

    Passed explicitly into the grouper, resolver and report builder so calls
    never depend on process-wide state.
    """

    git_remotes: tuple[str, ...] = DEFAULT_GIT_REMOTES
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    workers: int = DEFAULT_WORKERS
    # Directories where upward searches for license files / .git stop.
    stop_dirs: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError(
                f"confidence threshold must be within [0, 1], got {self.confidence_threshold}"
            )
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from GOLICENSES_* environment variables.

        GOLICENSES_GIT_REMOTES           comma separated (default: origin,upstream)
        GOLICENSES_CONFIDENCE_THRESHOLD  float in [0, 1] (default: 0.9)
        GOLICENSES_WORKERS               int >= 1 (default: 4)
        GOLICENSES_STOP_DIRS             os.pathsep separated directories
        """
        remotes_env = os.environ.get("GOLICENSES_GIT_REMOTES")
        remotes = (
            tuple(r.strip() for r in remotes_env.split(",") if r.strip())
            if remotes_env
            else DEFAULT_GIT_REMOTES
        )
        try:
            threshold = float(
                os.environ.get("GOLICENSES_CONFIDENCE_THRESHOLD", DEFAULT_CONFIDENCE_THRESHOLD)
            )
            workers = int(os.environ.get("GOLICENSES_WORKERS", DEFAULT_WORKERS))
        except ValueError as e:
            raise ValueError(f"invalid GOLICENSES_* setting: {e}") from e
        stop_env = os.environ.get("GOLICENSES_STOP_DIRS", "")
        stop_dirs = tuple(d for d in stop_env.split(os.pathsep) if d)
        return cls(
            git_remotes=remotes,
            confidence_threshold=threshold,
            workers=workers,
            stop_dirs=stop_dirs,
        )

    def with_overrides(self, **overrides: object) -> Settings:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)  # type: ignore[arg-type]

    def with_stop_dirs(self, extra: Iterable[str]) -> Settings:
        """Return a copy whose stop_dirs also hold *extra*, without duplicates."""
        merged = dict.fromkeys(os.path.normpath(d) for d in (*self.stop_dirs, *extra) if d)
        return replace(self, stop_dirs=tuple(merged))
