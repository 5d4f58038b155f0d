"""
Optional MLflow tracking for arena runs.

MLflow is only imported when tracking is requested, so the core game keeps no
hard dependency on it. Tracking failures never abort a run.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional

_active = False


@contextmanager
def maybe_mlflow_run(enabled: bool, run_name: str, log_dir: Optional[Path] = None) -> Iterator[bool]:
    """Yield True while an MLflow run is open, False when tracking is off."""
    global _active
    if not enabled:
        yield False
        return
    try:
        import mlflow  # type: ignore
    except ImportError:
        logging.warning("mlflow is not installed; continuing without tracking")
        yield False
        return

    if log_dir is not None:
        mlflow.set_tracking_uri((Path(log_dir).resolve() / "mlruns").as_uri())
    with mlflow.start_run(run_name=run_name):
        _active = True
        try:
            yield True
        finally:
            _active = False


def log_params(params: Dict[str, object]) -> None:
    if not _active:
        return
    try:
        import mlflow  # type: ignore

        mlflow.log_params(params)
    except Exception as exc:
        logging.warning("mlflow log_params failed: %s", exc)


def log_metrics(metrics: Dict[str, float]) -> None:
    if not _active:
        return
    try:
        import mlflow  # type: ignore

        mlflow.log_metrics(metrics)
    except Exception as exc:
        logging.warning("mlflow log_metrics failed: %s", exc)
