"""Path helpers for script inputs and outputs."""

from __future__ import annotations

from pathlib import Path


def ensure_output_dir(output_dir: str | None) -> Path:
    """Return the output directory, creating it when needed; defaults to the cwd."""
    target = Path(output_dir) if output_dir else Path.cwd()
    target.mkdir(parents=True, exist_ok=True)
    return target


def resolve_output_path(file_name: str, output_dir: str | None = None) -> Path:
    return ensure_output_dir(output_dir) / file_name


def resolve_input_path(raw_path: str, *, description: str) -> Path:
    """Resolve an input file path, failing fast with a readable message when absent."""
    path = Path(raw_path).expanduser()
    if not path.is_file():
        raise ValueError(f"Missing {description}: {path}")
    return path
