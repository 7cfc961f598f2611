from __future__ import annotations

import json
from pathlib import Path

import pytest

from barbs_installer import main as main_mod
from barbs_installer.errors import ManifestUnavailable
from barbs_installer.main import run
from tests.conftest import FakeDialog


def write_manifest(tmp_path: Path) -> Path:
    manifest = tmp_path / "programs.csv"
    manifest.write_text(
        '#TAG,NAME IN REPO (or git url),PURPOSE\n'
        ',htop,"process viewer"\n'
        'G,https://example.com/foo.git,builds from source\n',
        encoding="utf-8",
    )
    return manifest


def prepare_home(tmp_paths) -> None:
    plug = Path(tmp_paths.home_root) / "alice" / ".config" / "nvim" / "autoload" / "plug.vim"
    plug.parent.mkdir(parents=True)
    plug.write_text("", encoding="utf-8")


def test_full_run(runner, tmp_paths, tmp_path):
    prepare_home(tmp_paths)
    runner.on("dbus-uuidgen", stdout="0123abcd\n")
    dialog = FakeDialog(texts=["alice"], secrets=["pw", "pw"])

    state = run(
        state_path=tmp_paths.state_default,
        log_path=tmp_paths.log_default,
        overrides={"programs_manifest": str(write_manifest(tmp_path)), "manifest_cache": tmp_paths.manifest_cache},
        runner=runner,
        dialog=dialog,
        paths=tmp_paths,
    )

    assert state["execution"]["install_summary"]["installed"] == ["htop", "https://example.com/foo.git"]
    assert state["execution"]["summary"]["ran_steps"][-1] == "90_finale"
    assert runner.find("pacman", "--noconfirm", "-S", "archlinux-keyring")
    assert "ILoveCandy" in Path(tmp_paths.pacman_conf).read_text(encoding="utf-8")
    assert Path(tmp_paths.dbus_machine_id).read_text(encoding="utf-8") == "0123abcd\n"
    assert not Path(tmp_paths.sudoers_temp).exists()

    saved = json.loads(Path(tmp_paths.state_default).read_text(encoding="utf-8"))
    assert "secrets" not in saved
    assert "pw" not in Path(tmp_paths.state_default).read_text(encoding="utf-8")


def test_resume_skips_completed_steps(runner, tmp_paths, tmp_path):
    prepare_home(tmp_paths)
    kwargs = dict(
        state_path=tmp_paths.state_default,
        log_path=tmp_paths.log_default,
        overrides={"programs_manifest": str(write_manifest(tmp_path)), "manifest_cache": tmp_paths.manifest_cache},
        runner=runner,
        paths=tmp_paths,
    )
    run(dialog=FakeDialog(texts=["alice"], secrets=["pw", "pw"]), **kwargs)
    runner.calls.clear()

    # No scripted name or passphrase: any credential prompt would cancel the run.
    state = run(dialog=FakeDialog(), **kwargs)

    assert "50_install_programs" in state["execution"]["summary"]["skipped_steps"]
    assert state["config"]["user_name"] == state["execution"]["user"]["name"] == "alice"
    assert runner.find("useradd") == []
    assert runner.find("chpasswd") == []
    assert runner.find("make") == []


def test_fatal_error_recorded_and_sudo_revoked(runner, tmp_paths, tmp_path):
    dialog = FakeDialog(texts=["alice"], secrets=["pw", "pw"])
    with pytest.raises(ManifestUnavailable):
        run(
            state_path=tmp_paths.state_default,
            log_path=tmp_paths.log_default,
            overrides={"programs_manifest": str(tmp_path / "missing.csv")},
            runner=runner,
            dialog=dialog,
            paths=tmp_paths,
        )

    saved = json.loads(Path(tmp_paths.state_default).read_text(encoding="utf-8"))
    assert saved["execution"]["errors"][-1]["step"] == "50_install_programs"
    assert not Path(tmp_paths.sudoers_temp).exists()


def test_main_exits_nonzero_on_cancel(monkeypatch, tmp_path):
    monkeypatch.setattr(main_mod, "make_dialog", lambda **kw: FakeDialog())
    code = main_mod.main(
        ["--dry-run", "--state", str(tmp_path / "state.json"), "--log", str(tmp_path / "barbs.log")]
    )
    assert code == 1


def write_config(tmp_path: Path, text: str) -> str:
    cfg = tmp_path / "barbs.yaml"
    cfg.write_text(text, encoding="utf-8")
    return str(cfg)


def welcome_only(runner, tmp_paths, **kwargs):
    return run(
        state_path=tmp_paths.state_default,
        log_path=tmp_paths.log_default,
        stop_after="10_welcome",
        runner=runner,
        dialog=FakeDialog(),
        paths=tmp_paths,
        **kwargs,
    )


class TestConfigPrecedence:
    def test_config_file_beats_defaults(self, runner, tmp_paths, tmp_path):
        cfg = write_config(tmp_path, "dry_run: true\nstrict: true\naur_helper: paru\n")
        state = welcome_only(runner, tmp_paths, config_path=cfg, overrides={"dry_run": None, "strict": None})
        assert state["config"]["dry_run"] is True
        assert state["config"]["strict"] is True
        assert state["config"]["aur_helper"] == "paru"
        assert not Path(tmp_paths.sudoers_temp).exists()

    def test_cli_flag_beats_config_file(self, runner, tmp_paths, tmp_path):
        cfg = write_config(tmp_path, "aur_helper: paru\nprograms_manifest: /srv/a.csv\n")
        state = welcome_only(
            runner,
            tmp_paths,
            config_path=cfg,
            overrides={"aur_helper": "yay", "programs_manifest": None},
        )
        assert state["config"]["aur_helper"] == "yay"
        assert state["config"]["programs_manifest"] == "/srv/a.csv"

    def test_dry_run_not_inherited_from_saved_state(self, runner, tmp_paths):
        welcome_only(runner, tmp_paths, overrides={"dry_run": True, "strict": True})
        state = welcome_only(runner, tmp_paths, overrides={"dry_run": None, "strict": None})
        assert state["config"]["dry_run"] is False
        assert state["config"]["strict"] is False

    def test_main_leaves_dry_run_to_config_without_flag(self, monkeypatch, tmp_path):
        captured = []
        monkeypatch.setattr(main_mod, "make_dialog", lambda **kw: FakeDialog())
        monkeypatch.setattr(main_mod, "run", lambda **kw: captured.append(kw["overrides"]))
        common = ["--state", str(tmp_path / "state.json"), "--log", str(tmp_path / "barbs.log")]

        assert main_mod.main(["--config", write_config(tmp_path, "dry_run: true\n"), *common]) == 0
        assert main_mod.main(["--dry-run", *common]) == 0

        assert captured[0]["dry_run"] is None
        assert captured[0]["strict"] is None
        assert captured[1]["dry_run"] is True


def test_main_reports_missing_user(monkeypatch, tmp_path):
    dialog = FakeDialog()
    monkeypatch.setattr(main_mod, "make_dialog", lambda **kw: dialog)
    code = main_mod.main(
        [
            "--dry-run",
            "--start-at",
            "60_dotfiles",
            "--state",
            str(tmp_path / "state.json"),
            "--log",
            str(tmp_path / "barbs.log"),
        ]
    )
    assert code == 1
    assert "execution.user missing" in dialog.messages[-1]
