from __future__ import annotations
from datetime import datetime
from pathlib import Path


def get_outdir(outdir: str | Path) -> Path:
    """Return outdir as a Path, creating it if missing. Used verbatim, never re-prefixed."""
    p = Path(outdir)
    p.mkdir(parents=True, exist_ok=True)
    return p


def ts_prefix(now: datetime | None = None) -> str:
    """Timestamp 'yyyymmdd_HHMMSS' used to keep repeated plot outputs apart."""
    return (now or datetime.now()).strftime("%Y%m%d_%H%M%S")


def stamped_path(outdir: str | Path, suffix: str, now: datetime | None = None) -> Path:
    """
    stamped_path('results', 'geometry.html') -> results/20251004_222628_geometry.html
    """
    return get_outdir(outdir) / f"{ts_prefix(now)}_{suffix}"
