from __future__ import annotations

import os

# CURVEGEOM_DEBUG=1 turns logging on for library callers that never touch the CLI.
_verbose = os.environ.get("CURVEGEOM_DEBUG", "") not in ("", "0")


def set_verbose(enabled: bool) -> None:
    global _verbose
    _verbose = enabled


def is_verbose() -> bool:
    return _verbose


def log(message: str, tag: str | None = None) -> None:
    if _verbose:
        print(message if tag is None else f"[{tag}] {message}")
