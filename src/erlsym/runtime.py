"""Locate the Erlang runtime's library root by asking ``erl``."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from erlsym.errors import RuntimeDiscoveryError

_LIB_DIR_EXPR = 'io:format("~s", [code:lib_dir()]), halt().'


def find_erl() -> str | None:
    """Search PATH for the erl executable."""
    return shutil.which("erl")


def find_otp_lib_dir(erl: str | None = None, *, timeout: float = 10) -> Path:
    """Return ``code:lib_dir()`` of the installed runtime.

    Raises RuntimeDiscoveryError if erl is missing or misbehaves.
    """
    exe = erl or find_erl()
    if exe is None:
        raise RuntimeDiscoveryError(
            "no erl executable found on PATH",
            notes=["set runtime.lib_dir in erlsym.toml or pass --lib-dir"],
        )

    try:
        result = subprocess.run(
            [exe, "-noshell", "-eval", _LIB_DIR_EXPR],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        raise RuntimeDiscoveryError(f"erl executable '{exe}' not found") from None
    except subprocess.TimeoutExpired:
        raise RuntimeDiscoveryError(f"'{exe}' did not answer within {timeout}s") from None

    out = result.stdout.strip()
    if result.returncode != 0 or not out:
        raise RuntimeDiscoveryError(
            f"'{exe}' failed to report its library directory (exit {result.returncode})",
            notes=[line for line in result.stderr.splitlines() if line.strip()][:5],
        )
    return Path(out)
