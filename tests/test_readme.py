"""Tests for repository-level metadata and documentation."""

from pathlib import Path


def test_readme_exists(project_root: Path) -> None:
    readme = project_root / "README.md"
    assert readme.exists(), "README.md should exist at the project root"
    assert "staffplan" in readme.read_text(encoding="utf-8")


def test_pyproject_declares_console_script(project_root: Path) -> None:
    text = (project_root / "pyproject.toml").read_text(encoding="utf-8")
    assert 'staffplan = "staffplan.main:main"' in text
