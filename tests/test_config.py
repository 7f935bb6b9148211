"""Tests for [tool.tiertrace] settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from tiertrace.config import Settings, load_settings


def _write(tmp_path: Path, body: str) -> Path:
    p = tmp_path / "pyproject.toml"
    p.write_text(body, encoding="utf-8")
    return p


def test_missing_file_gives_defaults(tmp_path: Path):
    assert load_settings(tmp_path / "absent.toml") == Settings()


def test_missing_section_gives_defaults(tmp_path: Path):
    p = _write(tmp_path, '[project]\nname = "x"\n')
    assert load_settings(p) == Settings()


def test_section_values(tmp_path: Path):
    p = _write(
        tmp_path,
        '[tool.tiertrace]\ncore_name = "llm-core"\nlog_level = "debug"\nstrict = true\nextra = 1\n',
    )
    settings = load_settings(p)
    assert settings == Settings(core_name="llm-core", log_level="DEBUG", strict=True)


def test_default_path_is_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _write(tmp_path, '[tool.tiertrace]\ncore_name = "cwd-core"\n')
    monkeypatch.chdir(tmp_path)
    assert load_settings().core_name == "cwd-core"


@pytest.mark.parametrize(
    "body",
    [
        '[tool.tiertrace]\nstrict = "yes"\n',
        '[tool.tiertrace]\ncore_name = 3\n',
        '[tool.tiertrace]\nlog_level = "LOUD"\n',
    ],
)
def test_bad_values_rejected(tmp_path: Path, body: str):
    with pytest.raises(ValueError):
        load_settings(_write(tmp_path, body))
