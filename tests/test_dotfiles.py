from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from barbs_installer.errors import SubprocessFailed
from barbs_installer.lib import dotfiles
from barbs_installer.lib.dotfiles import VIM_PLUG_URL, deploy_dotfiles, install_nvim_plugins


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    work = tmp_path / "barbs-dotfiles-x"
    work.mkdir()
    monkeypatch.setattr(dotfiles.tempfile, "mkdtemp", lambda prefix: str(work))
    return work


class TestDeployDotfiles:
    def test_copies_checkout_and_removes_workdir(self, runner, workdir, tmp_path: Path):
        home = tmp_path / "home" / "alice"
        deploy_dotfiles(runner, "https://example.com/dots.git", home, user="alice", group="wheel")

        assert runner.find("git")[0].user == "alice"
        assert runner.find("cp", "-rfT")[0].argv[-1] == str(home)
        assert runner.find("rm", "-rf", str(workdir)) == []
        assert runner.find("rm", "-rf", str(home / ".git"))
        assert not workdir.exists()

    def test_failed_clone_still_removes_workdir(self, runner, workdir, tmp_path: Path):
        runner.on("git", returncode=128, stderr="repository not found")
        with pytest.raises(SubprocessFailed):
            deploy_dotfiles(runner, "https://example.com/dots.git", tmp_path / "home", user="alice", group="wheel")

        assert runner.find("cp") == []
        assert not workdir.exists()


class TestNvimPlugins:
    def test_downloads_vim_plug(self, runner, tmp_path: Path):
        response = Mock()
        response.text = "\" vim-plug\n"
        response.raise_for_status = Mock()

        with patch("barbs_installer.lib.dotfiles.requests.get", return_value=response) as get:
            assert install_nvim_plugins(runner, tmp_path, user="alice", group="wheel") is True

        assert get.call_args[0][0] == VIM_PLUG_URL
        plug = tmp_path / ".config" / "nvim" / "autoload" / "plug.vim"
        assert plug.read_text(encoding="utf-8") == "\" vim-plug\n"
        assert runner.find("nvim")[0].user == "alice"

    def test_dry_run_does_not_download(self, runner, tmp_path: Path):
        with patch("barbs_installer.lib.dotfiles.requests.get") as get:
            assert install_nvim_plugins(runner, tmp_path, user="alice", group="wheel", dry_run=True) is True

        get.assert_not_called()
        assert not (tmp_path / ".config" / "nvim" / "autoload" / "plug.vim").exists()

    def test_already_present(self, runner, tmp_path: Path):
        plug = tmp_path / ".config" / "nvim" / "autoload" / "plug.vim"
        plug.parent.mkdir(parents=True)
        plug.write_text("", encoding="utf-8")
        with patch("barbs_installer.lib.dotfiles.requests.get") as get:
            assert install_nvim_plugins(runner, tmp_path, user="alice", group="wheel") is False
        get.assert_not_called()
        assert runner.calls == []
