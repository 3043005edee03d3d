"""Versión del backend y firma del build."""

from __future__ import annotations

import os
import subprocess
from datetime import datetime, timezone
from pathlib import Path

# Mantener en sync con ``project.version`` de pyproject.toml.
VERSION = "0.1.0"
RELEASE_NAME = f"Portafolio Dashboard v{VERSION}"


def _git_short_hash(root: Path) -> str:
    try:
        return subprocess.check_output(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=root,
            stderr=subprocess.DEVNULL,
            text=True,
        ).strip()
    except (OSError, subprocess.SubprocessError):
        return ""


def resolve_build_signature(env: dict[str, str] | None = None) -> str:
    """``DASHBOARD_BUILD_SIGNATURE`` si está definida, si no el hash de git o un timestamp."""

    source = os.environ if env is None else env
    explicit = source.get("DASHBOARD_BUILD_SIGNATURE")
    if explicit:
        return explicit
    return _git_short_hash(Path(__file__).resolve().parents[1]) or datetime.now(
        timezone.utc
    ).strftime("ts-%Y%m%d%H%M%S")


__version__ = VERSION
__build_signature__ = resolve_build_signature()


def get_version_info() -> dict[str, str]:
    return {
        "version": __version__,
        "release_name": RELEASE_NAME,
        "build_signature": __build_signature__,
    }


__all__ = [
    "RELEASE_NAME",
    "VERSION",
    "__build_signature__",
    "__version__",
    "get_version_info",
    "resolve_build_signature",
]
