"""Tests for configuration loading."""

import pytest

from prreview_core.config import MAX_PAGE_SIZE, load_config


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["format"] == "pretty"
    assert config["page_size"] == 100
    assert config["truncate"] == 80
    assert config["color"] is True
    assert config["include_conversation"] is False


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".prreview.yml"
    cfg.write_text("format: plain\ntruncate: 120\n")
    config = load_config(config_path=str(cfg))
    assert config["format"] == "plain"
    assert config["truncate"] == 120


def test_empty_config_file_uses_defaults(tmp_path):
    cfg = tmp_path / ".prreview.yml"
    cfg.write_text("")
    config = load_config(config_path=str(cfg))
    assert config["format"] == "pretty"


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".prreview.yml"
    cfg.write_text("format: plain\n")
    config = load_config(config_path=str(cfg), cli_overrides={"format": "json"})
    assert config["format"] == "json"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".prreview.yml"
    cfg.write_text("format: plain\n")
    config = load_config(config_path=str(cfg), cli_overrides={"format": None})
    assert config["format"] == "plain"


def test_unknown_format_rejected(tmp_path):
    cfg = tmp_path / ".prreview.yml"
    cfg.write_text("format: xml\n")
    with pytest.raises(ValueError, match="xml"):
        load_config(config_path=str(cfg))


def test_page_size_capped_at_api_maximum(tmp_path):
    cfg = tmp_path / ".prreview.yml"
    cfg.write_text("page_size: 500\n")
    config = load_config(config_path=str(cfg))
    assert config["page_size"] == MAX_PAGE_SIZE


def test_page_size_can_be_lowered(tmp_path):
    cfg = tmp_path / ".prreview.yml"
    cfg.write_text("page_size: 25\n")
    config = load_config(config_path=str(cfg))
    assert config["page_size"] == 25


def test_github_token_read_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["github_token"] == "gh-token"


def test_github_token_none_when_unset(monkeypatch, tmp_path):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["github_token"] is None


def test_truncate_must_be_numeric(tmp_path):
    cfg = tmp_path / ".prreview.yml"
    cfg.write_text("truncate: wide\n")
    with pytest.raises(ValueError, match="truncate"):
        load_config(config_path=str(cfg))


def test_truncate_must_be_positive(tmp_path):
    cfg = tmp_path / ".prreview.yml"
    cfg.write_text("truncate: 0\n")
    with pytest.raises(ValueError, match="truncate"):
        load_config(config_path=str(cfg))


def test_numeric_string_truncate_coerced(tmp_path):
    cfg = tmp_path / ".prreview.yml"
    cfg.write_text('truncate: "40"\n')
    assert load_config(config_path=str(cfg))["truncate"] == 40


@pytest.mark.parametrize("raw, expected", [("false", False), ('"false"', False), ('"off"', False), ('"yes"', True)])
def test_color_coerced_to_bool(tmp_path, raw, expected):
    cfg = tmp_path / ".prreview.yml"
    cfg.write_text(f"color: {raw}\n")
    assert load_config(config_path=str(cfg))["color"] is expected


def test_unrecognised_color_rejected(tmp_path):
    cfg = tmp_path / ".prreview.yml"
    cfg.write_text("color: sometimes\n")
    with pytest.raises(ValueError, match="color"):
        load_config(config_path=str(cfg))


def test_non_numeric_page_size_rejected(tmp_path):
    cfg = tmp_path / ".prreview.yml"
    cfg.write_text("page_size: lots\n")
    with pytest.raises(ValueError, match="page_size"):
        load_config(config_path=str(cfg))
