from __future__ import annotations

import tomllib
from pathlib import Path

from shared import version


def test_version_matches_pyproject() -> None:
    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    data = tomllib.loads(pyproject.read_text(encoding="utf-8"))

    assert data["project"]["version"] == version.__version__


def test_build_signature_prefers_environment() -> None:
    assert version.resolve_build_signature({"DASHBOARD_BUILD_SIGNATURE": "abc123"}) == "abc123"


def test_version_info_shape() -> None:
    info = version.get_version_info()

    assert info["version"] == version.VERSION
    assert info["release_name"].endswith(version.VERSION)
    assert info["build_signature"]
