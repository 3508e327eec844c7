"""
config.py
---------

Configuration system for kti.

Supports:
- Default settings
- Persistent config stored in ~/.config/kti/kti.json (or --config-dir)
- CLI overrides
- Interactive review of settings with questionary
- Validation and normalization of paths
"""

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .diagnostics import LEVELS
from .errors import ConfigError

CONFIG_FILE = "kti.json"


# ------------------------------------------------------------
# Default settings
# ------------------------------------------------------------
DEFAULTS = {
    # Target
    "TARGET_PATH": ".",
    "SINGLE_FILE": "",

    # Traversal
    "MAX_DEPTH": None,
    "SHOW_HIDDEN": False,
    "FOLLOW_LINKS": False,

    # Modes
    "DRY_RUN": False,

    # Output
    "SILENT": False,
    "ONLY_DIFFERENT": False,
    "COLOR": False,
    "DIAGNOSTIC_LEVEL": 1,  # 1=Standard, 2=Deep, 3=Forensic

    # Logging
    "LOG_FILE": "",
    "LOG_TO_CONSOLE": False,
    "LOG_FORMAT": "text",  # "text" or "jsonl"

    # Interactive review
    "INTERACTIVE_MODE": False,
}

# Settings that describe a single run and are never persisted;
# a saved DRY_RUN would silently disable renaming in every later run
RUN_ONLY_KEYS = ("TARGET_PATH", "SINGLE_FILE", "DRY_RUN", "INTERACTIVE_MODE")


# ------------------------------------------------------------
# Persistent config
# ------------------------------------------------------------
def get_config_dir() -> Path:
    """Return the default config directory (~/.config/kti)."""
    if os.name == "nt":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "kti"


def load_persistent_config(
    config_name: str = CONFIG_FILE, config_dir: Optional[Path] = None
) -> Dict[str, Any]:
    """Load a JSON config file; missing or unreadable files give {}."""

    base_dir = Path(config_dir) if config_dir else get_config_dir()
    config_path = base_dir / config_name

    if not config_path.exists():
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, UnicodeDecodeError, ValueError, TypeError):
        return {}


def save_persistent_config(
    config: Dict[str, Any],
    config_name: str = CONFIG_FILE,
    *,
    config_dir: Optional[Path] = None,
) -> bool:
    """Persist the reusable part of a settings dict."""

    base_dir = Path(config_dir) if config_dir else get_config_dir()
    config_path = base_dir / config_name
    data = {k: v for k, v in config.items() if k in DEFAULTS and k not in RUN_ONLY_KEYS}

    try:
        base_dir.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        return True
    except (OSError, UnicodeEncodeError, ValueError, TypeError):
        return False


# ------------------------------------------------------------
# Merge settings
# ------------------------------------------------------------
def merge_settings(
    *,
    defaults: Optional[Dict[str, Any]] = None,
    persistent: Optional[Dict[str, Any]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Merge defaults + persistent + overrides (overrides win, None is ignored)."""

    merged: Dict[str, Any] = {}

    if defaults:
        merged.update(defaults)

    if persistent:
        merged.update(persistent)

    if overrides:
        for key, value in overrides.items():
            if value is not None:
                merged[key] = value

    return merged


def validate_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Normalize paths and reject invalid values with ConfigError."""

    if settings.get("SINGLE_FILE"):
        single = os.path.normpath(settings["SINGLE_FILE"])
        if not os.path.isfile(single):
            raise ConfigError(f"Not a file: {single}")
        settings["TARGET_PATH"] = single

    settings["TARGET_PATH"] = os.path.normpath(settings.get("TARGET_PATH") or ".")

    depth = settings.get("MAX_DEPTH")
    if depth is not None:
        try:
            depth = int(depth)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"MAX_DEPTH must be an integer, got {depth!r}") from e
        if depth < 0:
            raise ConfigError(f"MAX_DEPTH must be >= 0, got {depth}")
        settings["MAX_DEPTH"] = depth

    level = settings.get("DIAGNOSTIC_LEVEL", 1)
    if level not in LEVELS:
        raise ConfigError(f"DIAGNOSTIC_LEVEL must be one of {LEVELS}, got {level!r}")

    log_format = (settings.get("LOG_FORMAT") or "text").lower()
    if log_format not in ("text", "jsonl"):
        raise ConfigError(f"LOG_FORMAT must be 'text' or 'jsonl', got {log_format!r}")
    settings["LOG_FORMAT"] = log_format

    if settings.get("LOG_FILE"):
        settings["LOG_FILE"] = os.path.normpath(settings["LOG_FILE"])

    return settings


# ------------------------------------------------------------
# Interactive review (questionary)
# ------------------------------------------------------------
def _ask(question):
    answer = question.ask()
    if answer is None:
        # Ctrl+C inside a questionary prompt
        raise KeyboardInterrupt
    return answer


def _valid_depth(text):
    text = text.strip()
    if not text or text.isdigit():
        return True
    return "Enter a whole number or leave empty"


def interactive_update(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Let the user review the merged settings before the run."""
    if not settings.get("INTERACTIVE_MODE"):
        return settings

    import questionary

    settings["TARGET_PATH"] = _ask(
        questionary.path("File or directory to check:", default=str(settings["TARGET_PATH"]))
    )

    settings["DRY_RUN"] = _ask(
        questionary.confirm("Dry run only (no renames)?", default=bool(settings["DRY_RUN"]))
    )

    depth = _ask(
        questionary.text(
            "Max depth (empty = unlimited):",
            default="" if settings["MAX_DEPTH"] is None else str(settings["MAX_DEPTH"]),
            validate=_valid_depth,
        )
    ).strip()
    settings["MAX_DEPTH"] = int(depth) if depth else None

    settings["SHOW_HIDDEN"] = _ask(
        questionary.confirm("Include hidden files?", default=bool(settings["SHOW_HIDDEN"]))
    )

    settings["ONLY_DIFFERENT"] = _ask(
        questionary.confirm("Only show mismatching files?", default=bool(settings["ONLY_DIFFERENT"]))
    )

    levels = [
        questionary.Choice("Standard", value=1),
        questionary.Choice("Deep", value=2),
        questionary.Choice("Forensic", value=3),
    ]
    current = next((c for c in levels if c.value == settings["DIAGNOSTIC_LEVEL"]), levels[0])
    settings["DIAGNOSTIC_LEVEL"] = _ask(
        questionary.select("Diagnostic level:", choices=levels, default=current)
    )

    return settings


def build_settings(
    overrides: Optional[Dict[str, Any]] = None,
    config_name: str = CONFIG_FILE,
    *,
    config_dir: Optional[Path] = None,
    defaults: Optional[Dict[str, Any]] = None,
    interactive_fn: Optional[Callable[[Dict[str, Any]], Dict[str, Any]]] = interactive_update,
) -> Dict[str, Any]:
    """
    Build settings by loading persistence, applying defaults, and merging overrides,
    then run the interactive review (if enabled) and validation.
    """

    persistent = load_persistent_config(config_name=config_name, config_dir=config_dir)

    merged = merge_settings(
        defaults=DEFAULTS if defaults is None else defaults,
        persistent=persistent,
        overrides=overrides or {},
    )

    if callable(interactive_fn):
        merged = interactive_fn(merged)

    return validate_settings(merged)
