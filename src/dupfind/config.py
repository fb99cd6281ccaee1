"""Configuration loading, merging, and interactive creation."""

from __future__ import annotations

import logging
import os
import pathlib
import tomllib


logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.toml"

OUTPUT_MODES = ("human", "machine")

_DEFAULTS: dict[str, object] = {
    "output": "human",
    "progress": True,
    "chunk_size": 8192,
}


def _config_dir() -> pathlib.Path:
    """Return the dupfind config directory."""
    base = pathlib.Path(os.environ.get("XDG_CONFIG_HOME", "~/.config")).expanduser()
    return base / "dupfind"


def load_config(config_dir: pathlib.Path | None = None) -> dict:
    """Load config.toml and return its contents as a dict.

    Returns {} if no file exists or on parse error.
    """
    if config_dir is None:
        config_dir = _config_dir()
    path = config_dir / CONFIG_FILENAME
    if not path.exists():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, ValueError) as exc:
        logger.warning(f"ignoring unreadable config {path}: {exc}")
        return {}


def _valid_chunk_size(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def merge_config_into_args(args, config: dict) -> None:
    """Three-layer merge: CLI > config > hardcoded defaults.

    Mutates *args* in place. Invalid config values fall back to the default.
    """
    if getattr(args, "output", None) is None:
        cfg_val = config.get("output")
        args.output = cfg_val if cfg_val in OUTPUT_MODES else _DEFAULTS["output"]

    if getattr(args, "progress", None) is None:
        cfg_val = config.get("progress")
        args.progress = cfg_val if isinstance(cfg_val, bool) else _DEFAULTS["progress"]

    if getattr(args, "chunk_size", None) is None:
        cfg_val = config.get("chunk_size")
        args.chunk_size = cfg_val if _valid_chunk_size(cfg_val) else _DEFAULTS["chunk_size"]


def create_config_interactive(
    config_dir: pathlib.Path | None = None,
    input_fn=input,
    print_fn=print,
) -> pathlib.Path:
    """Interactively create or update config.toml.

    Returns the path to the written config file.
    """
    if config_dir is None:
        config_dir = _config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    existing = load_config(config_dir)

    output_default = str(existing.get("output", _DEFAULTS["output"]))
    value = input_fn(f"  Output mode (human/machine) [{output_default}]: ").strip().lower()
    output = value or output_default
    if output not in OUTPUT_MODES:
        print_fn(f"  Unknown output mode {output!r}, using {_DEFAULTS['output']}")
        output = _DEFAULTS["output"]

    progress_default = str(existing.get("progress", _DEFAULTS["progress"])).lower()
    value = input_fn(f"  Show progress bars (true/false) [{progress_default}]: ").strip().lower()
    progress = (value or progress_default) in ("true", "1", "yes")

    chunk_default = existing.get("chunk_size", _DEFAULTS["chunk_size"])
    value = input_fn(f"  Read chunk size in bytes [{chunk_default}]: ").strip()
    try:
        chunk_size = int(value) if value else int(chunk_default)
    except ValueError:
        chunk_size = 0
    if not _valid_chunk_size(chunk_size):
        print_fn(f"  Invalid chunk size, using {_DEFAULTS['chunk_size']}")
        chunk_size = _DEFAULTS["chunk_size"]

    result: dict[str, object] = {
        "output": output,
        "progress": progress,
        "chunk_size": chunk_size,
    }

    path = config_dir / CONFIG_FILENAME
    path.write_text(_to_toml(result))
    print_fn(f"Configuration saved to {path}")
    return path


def _to_toml(data: dict) -> str:
    """Serialize a flat dict to TOML format."""
    lines: list[str] = []
    for key, value in data.items():
        if isinstance(value, bool):
            lines.append(f"{key} = {str(value).lower()}")
        elif isinstance(value, str):
            lines.append(f'{key} = "{value}"')
        elif value is None:
            continue
        else:
            lines.append(f"{key} = {value}")
    return "\n".join(lines) + "\n" if lines else ""
