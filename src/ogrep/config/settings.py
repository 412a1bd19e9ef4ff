#!/usr/bin/env python3
"""
OGREP SETTINGS - Layered Defaults
---------------------------------
Collects the defaults that sit underneath the command line:

    built-in  <  YAML config file  <  OGREP_OPTIONS  <  argv

The config file is a flat YAML mapping whose keys are the CLI option
names in snake_case, plus the branch vocabulary which has no flag:

    ellipsis: true
    tab_width: 8
    preprocessor: context
    branch_markers: [else, elif, case, default, rescue]

Author: ogrep Team
Date: 2026-10-17
"""

import logging
import os
import shlex
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ruamel.yaml import YAML, YAMLError

from ogrep.core.errors import InvalidOptions
from ogrep.core.models import FilenameMode, PreprocessorMode

logger = logging.getLogger("ogrep.config")

CONFIG_ENV = "OGREP_CONFIG"
OPTIONS_ENV = "OGREP_OPTIONS"
DEFAULT_CONFIG_PATH = Path("~/.config/ogrep/config.yaml")

CHOICES = {
    "preprocessor": [m.value for m in PreprocessorMode],
    "print_filename": [m.value for m in FilenameMode],
    "color": ["always", "auto", "never"],
    "color_scheme": ["grey", "colored"],
}

# Window sizes stay on the command line, where --context/--before/--after
# conflicts can be reported against what the user actually typed.
CONFIG_TYPES: Dict[str, type] = {
    "regex": bool,
    "ignore_case": bool,
    "whole_word": bool,
    "children": bool,
    "breaks": bool,
    "ellipsis": bool,
    "smart_branches": bool,
    "use_git_grep": bool,
    "pager": bool,
    "tab_width": int,
    "preprocessor": str,
    "print_filename": str,
    "color": str,
    "color_scheme": str,
    "branch_openers": list,
    "branch_markers": list,
}


def locate_config(explicit: Optional[str] = None,
                  environ: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """
    Resolves which config file applies. An explicit or $OGREP_CONFIG path
    must exist; the per-user default is optional.
    """
    environ = os.environ if environ is None else environ
    candidate = explicit or environ.get(CONFIG_ENV)
    if candidate:
        path = Path(candidate).expanduser()
        if not path.is_file():
            raise InvalidOptions(f"config file not found: {path}")
        return path

    default = DEFAULT_CONFIG_PATH.expanduser()
    return default if default.is_file() else None


def _check_value(key: str, value: Any, path: Path) -> Any:
    expected = CONFIG_TYPES[key]
    # bool is an int subclass; a 'tab_width: true' typo must not slip through.
    if expected is int and isinstance(value, bool) or not isinstance(value, expected):
        raise InvalidOptions(f"{path}: '{key}' must be of type {expected.__name__}")

    if key in CHOICES and value not in CHOICES[key]:
        raise InvalidOptions(f"{path}: '{key}' must be one of {', '.join(CHOICES[key])}")

    if expected is list:
        if not all(isinstance(item, str) for item in value):
            raise InvalidOptions(f"{path}: '{key}' must be a list of strings")
        return tuple(value)
    return value


def load_config(path: Path) -> Dict[str, Any]:
    """Parses and validates one config file into argparse defaults."""
    yaml = YAML(typ='safe')
    try:
        data = yaml.load(path.read_text(encoding='utf-8'))
    except (OSError, YAMLError) as e:
        raise InvalidOptions(f"cannot read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidOptions(f"{path}: expected a mapping of option names to values")

    settings = {}
    for key, value in data.items():
        if key not in CONFIG_TYPES:
            raise InvalidOptions(f"{path}: unknown option '{key}'")
        settings[key] = _check_value(key, value, path)

    logger.info("Loaded %d setting(s) from %s", len(settings), path)
    return settings


def env_arguments(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """Extra argv words from $OGREP_OPTIONS, split with shell quoting rules."""
    environ = os.environ if environ is None else environ
    raw = environ.get(OPTIONS_ENV, "")
    try:
        return shlex.split(raw)
    except ValueError as e:
        raise InvalidOptions(f"{OPTIONS_ENV} cannot be parsed: {e}") from e
