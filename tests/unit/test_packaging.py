"""
Tests for the declared package dependencies.
"""
import tomllib
from pathlib import Path

PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _project() -> dict:
    with PYPROJECT.open("rb") as f:
        return tomllib.load(f)["project"]


def _names(requirements) -> set:
    return {req.split(">")[0].split("[")[0].strip() for req in requirements}


def test_httpx_is_a_test_only_dependency():
    project = _project()

    assert "httpx" not in _names(project["dependencies"])
    assert "httpx" in _names(project["optional-dependencies"]["test"])
