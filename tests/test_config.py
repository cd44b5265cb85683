import pytest

from homepage.config import load_config


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("SITE_URL", raising=False)
    path = tmp_path / "config.yml"
    path.write_text("author: Ada\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg["site_title"] == "Ada"
    assert cfg["site_url"] == ""
    assert cfg["content_dir"] == tmp_path / "content"
    assert cfg["output_dir"] == tmp_path / "dist"
    assert cfg["staging_dir"] == tmp_path / "out"
    assert cfg["port"] == 3000
    assert cfg["host"] == ""
    assert cfg["posts"] == {}
    assert cfg["include_drafts"] is False


def test_posts_normalized(cfg):
    assert cfg["posts"]["charts"] == {"title": "Charts & things", "date": "2024-10-06"}
    assert cfg["posts"]["draft"]["date"] is None


def test_extra_head_accepts_single_string(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text('extra_head: "<meta name=x>"\n', encoding="utf-8")
    assert load_config(path)["extra_head"] == ["<meta name=x>"]


def test_missing_config_exits(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        load_config(tmp_path / "nope.yml")
    assert exc.value.code == 1
    assert "Config file not found" in capsys.readouterr().err


def test_post_without_title(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("posts:\n  broken:\n    date: 2024-01-01\n", encoding="utf-8")
    with pytest.raises(ValueError, match="'broken' has no title"):
        load_config(path)


@pytest.mark.parametrize("value", ["2024-10-06", "2024-10-06 12:00:00", "2024-10-06 12:00", '"2024-10-06"', "2024-10-06T12:00:00Z"])
def test_post_dates_normalized(tmp_path, value):
    path = tmp_path / "config.yml"
    path.write_text(f"posts:\n  p:\n    title: P\n    date: {value}\n", encoding="utf-8")
    assert load_config(path)["posts"]["p"]["date"] == "2024-10-06"


def test_post_with_invalid_date(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("posts:\n  p:\n    title: P\n    date: next week\n", encoding="utf-8")
    with pytest.raises(ValueError, match="'p' has an invalid date: 'next week'"):
        load_config(path)
