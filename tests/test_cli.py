import os, sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from iconhost import cli
from iconhost.core.config import settings


@pytest.fixture
def icons_root(monkeypatch, tmp_path):
    root = tmp_path / "icons"
    monkeypatch.setattr(settings, "icons_dir", str(root))
    monkeypatch.setattr(settings, "repo_owner", "owner")
    monkeypatch.setattr(settings, "repo_name", "repo")
    monkeypatch.setattr(settings, "branch", "main")
    monkeypatch.setattr(settings, "url_mode", "cdn")
    monkeypatch.setattr(settings, "github_token", None)
    return root


def test_cli_init_creates_default_categories_success(icons_root, capsys):
    assert cli.main(["init"]) == 0
    for category in settings.default_categories:
        assert (icons_root / category / ".gitkeep").exists()
    assert "Repository structure initialized." in capsys.readouterr().out


def test_cli_upload_list_delete_success(icons_root, tmp_path, capsys):
    src = tmp_path / "Star Icon.svg"
    src.write_bytes(b"<svg/>")

    assert cli.main(["upload", str(src), "--category", "custom", "--custom-folder", "Space"]) == 0
    out = capsys.readouterr().out
    assert "custom/space/star-icon.svg" in out
    assert "https://cdn.jsdelivr.net/gh/owner/repo@main/icons/custom/space/star-icon.svg" in out

    assert cli.main(["list"]) == 0
    assert "CUSTOM/SPACE (1 icons):" in capsys.readouterr().out

    assert cli.main(["delete", "custom/space", "star-icon.svg"]) == 0
    assert "deleted successfully" in capsys.readouterr().out


def test_cli_upload_duplicate_failure(icons_root, tmp_path, capsys):
    src = tmp_path / "a.svg"
    src.write_bytes(b"<svg/>")
    assert cli.main(["upload", str(src), "--category", "ui"]) == 0
    assert cli.main(["upload", str(src), "--category", "ui"]) == 1
    assert "already exists" in capsys.readouterr().err


def test_cli_url_success(icons_root, capsys):
    assert cli.main(["url", "social", "github.svg"]) == 0
    assert capsys.readouterr().out.strip() == "https://cdn.jsdelivr.net/gh/owner/repo@main/icons/social/github.svg"


def test_cli_validate_success_and_failure(icons_root, tmp_path, monkeypatch, capsys):
    good = tmp_path / "ok.png"
    good.write_bytes(b"x" * 20)
    bad = tmp_path / "bad.gif"
    bad.write_bytes(b"GIF89a")

    assert cli.main(["validate", str(good)]) == 0
    assert cli.main(["validate", str(bad)]) == 1
    assert "Unsupported format: .gif" in capsys.readouterr().err

    monkeypatch.setattr(settings, "max_file_size", 10)
    assert cli.main(["validate", str(good)]) == 1
    assert "File too large" in capsys.readouterr().err


def test_cli_examples_success(icons_root, capsys):
    assert cli.main(["examples", "social", "github.svg"]) == 0
    out = capsys.readouterr().out
    assert '<img src="https://cdn.jsdelivr.net/gh/owner/repo@main/icons/social/github.svg" alt="github">' in out
    assert "background-image" in out

    assert cli.main(["examples", "social", "github.png"]) == 0
    assert "background-image" not in capsys.readouterr().out
