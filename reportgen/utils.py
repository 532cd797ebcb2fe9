from __future__ import annotations

import os
import re
import time
from pathlib import Path
from typing import Any, Dict, Mapping, Union


def deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """Deep-merge two dict-like mappings. Values in overlay win.

    - Dict vs dict: merge recursively
    - List vs list: overlay replaces base entirely (simple and predictable)
    - Other types: overlay replaces base
    """
    result: Dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = deep_merge(result[k], v)
        else:
            result[k] = v
    return result


_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def substitute_env_vars(value: Any) -> Any:
    """Recursively substitute ${VAR} in strings using environment variables.

    If an environment variable is missing, leave the pattern unchanged
    to allow upstream validation to catch it.
    """
    if isinstance(value, str):
        def repl(match: re.Match[str]) -> str:
            name = match.group(1)
            return os.environ.get(name, match.group(0))

        return _ENV_PATTERN.sub(repl, value)
    if isinstance(value, list):
        return [substitute_env_vars(v) for v in value]
    if isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    return value


def ensure_dir(path: Union[str, Path]) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def elapsed_ms(start: float) -> float:
    """Milliseconds since a ``time.perf_counter()`` reading."""
    return (time.perf_counter() - start) * 1000.0
