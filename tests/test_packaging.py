"""Checks on the package metadata in pyproject.toml."""
from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).parent.parent


@pytest.fixture(scope="module")
def pyproject():
    with (ROOT / "pyproject.toml").open("rb") as f:
        return tomllib.load(f)


def test_readme_is_not_the_design_ledger(pyproject):
    readme = pyproject["project"].get("readme")
    assert readme is None or (ROOT / readme).is_file() and readme != "DESIGN.md"


def test_declared_modules_exist(pyproject):
    setuptools_cfg = pyproject["tool"]["setuptools"]
    src = ROOT / setuptools_cfg["package-dir"][""]
    for module in setuptools_cfg["py-modules"]:
        assert (src / f"{module}.py").is_file(), module
    for package in setuptools_cfg["packages"]:
        assert (src / package).is_dir(), package
