from __future__ import annotations

import argparse
import logging
import shutil
import signal
from typing import Any, Dict, Optional

from .errors import OperatorCancelled, ProvisionError
from .lib.command import CommandRunner, SubprocessRunner
from .lib.dialog import Dialog, make_dialog
from .lib.env import PATHS, Paths
from .lib.sysconf import temporary_sudo
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import run_pipeline
from .state_store import ensure_defaults, load_config, load_state, save_state
from .steps import (
    AddUserStep,
    AurHelperStep,
    ConfirmStep,
    CredentialsStep,
    DotfilesStep,
    FinaleStep,
    HomeLayoutStep,
    InstallProgramsStep,
    NvimPluginsStep,
    PackageTweaksStep,
    PrerequisitesStep,
    RefreshKeysStep,
    SystemTweaksStep,
    WelcomeStep,
)

logger = logging.getLogger(__name__)


DEFAULT_STATE_PATH = PATHS.state_default

# Decided per invocation by --config and the CLI, never inherited from saved state.
RUN_SCOPED_KEYS = ("dry_run", "strict")


def build_steps(runner: CommandRunner, dialog: Dialog, paths: Paths = PATHS):
    return [
        cls(runner, dialog, paths)
        for cls in (
            WelcomeStep,
            CredentialsStep,
            ConfirmStep,
            RefreshKeysStep,
            PrerequisitesStep,
            AddUserStep,
            PackageTweaksStep,
            AurHelperStep,
            InstallProgramsStep,
            DotfilesStep,
            NvimPluginsStep,
            SystemTweaksStep,
            HomeLayoutStep,
            FinaleStep,
        )
    ]


def _raise_exit(signum, frame) -> None:
    raise SystemExit(128 + signum)


def install_signal_handlers() -> None:
    """Turn termination signals into SystemExit so finally-blocks get to clean up."""

    for name in ("SIGHUP", "SIGTERM", "SIGQUIT", "SIGPWR"):
        sig = getattr(signal, name, None)
        if sig is not None:
            signal.signal(sig, _raise_exit)


def run(
    *,
    state_path: str = DEFAULT_STATE_PATH,
    log_path: str = DEFAULT_LOG_PATH,
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
    verbose: bool = False,
    runner: Optional[CommandRunner] = None,
    dialog: Optional[Dialog] = None,
    paths: Paths = PATHS,
) -> Dict[str, Any]:
    """Run the provisioning pipeline, persisting state for resume."""

    actual_log_path = configure_logging(log_path=log_path, also_console=verbose)

    state = load_state(state_path)
    cfg = state.setdefault("config", {})
    for key in RUN_SCOPED_KEYS:
        cfg.pop(key, None)
    if config_path:
        cfg.update(load_config(config_path))
    cfg.update({k: v for k, v in (overrides or {}).items() if v is not None})
    state = ensure_defaults(state)
    state["execution"].setdefault("paths", {})["log_path_requested"] = log_path
    state["execution"]["paths"]["log_path_actual"] = actual_log_path

    dry_run = bool(state["config"].get("dry_run", False))
    runner = runner or SubprocessRunner(dry_run=dry_run)
    dialog = dialog or make_dialog(whiptail_path=shutil.which("whiptail"))

    steps = build_steps(runner, dialog, paths)

    try:
        with temporary_sudo(paths.sudoers_temp, dry_run=dry_run):
            result = run_pipeline(
                state=state,
                steps=steps,
                start_at=start_at,
                stop_after=stop_after,
                force=force,
                checkpoint=lambda s: save_state(state_path, s),
            )
        state = result.state
        summary = state["execution"].setdefault("summary", {})
        summary["ran_steps"] = result.ran_steps
        summary["skipped_steps"] = result.skipped_steps
        return state
    except Exception as e:
        logger.exception("Installer failed")
        state["execution"].setdefault("errors", []).append(
            {
                "step": state["execution"].get("current_step"),
                "error": str(e),
            }
        )
        raise
    finally:
        save_state(state_path, state)


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(
        prog="barbs",
        description="Bootstrap an Arch/Artix desktop: user, programs, dotfiles and system tweaks.",
    )
    p.add_argument("--config", default=None, help="YAML/JSON file overlaid on the default config")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to installer state (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("--manifest", default=None, help="Program list: local path or URL")
    p.add_argument("--dotfiles", default=None, help="Dotfiles repository URL")
    p.add_argument("--branch", default=None, help="Dotfiles repository branch")
    p.add_argument("--aur-helper", default=None, help="AUR helper to bootstrap and use (default: yay)")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 50_install_programs)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--force", action="store_true", help="Re-run steps even if marked completed")
    p.add_argument("--dry-run", action="store_true", help="Log commands and file writes without executing them")
    p.add_argument("--strict", action="store_true", help="Abort on the first program that fails to install")
    p.add_argument("--plain", action="store_true", help="Use plain terminal prompts instead of whiptail")
    p.add_argument("--verbose", action="store_true", help="Also log to the console")

    args = p.parse_args(argv)

    overrides = {
        "programs_manifest": args.manifest,
        "dotfiles_repo": args.dotfiles,
        "dotfiles_branch": args.branch,
        "aur_helper": args.aur_helper,
        "dry_run": True if args.dry_run else None,
        "strict": True if args.strict else None,
    }
    dialog = make_dialog(plain=args.plain, whiptail_path=shutil.which("whiptail"))

    install_signal_handlers()
    try:
        run(
            state_path=args.state,
            log_path=args.log,
            config_path=args.config,
            overrides=overrides,
            start_at=args.start_at,
            stop_after=args.stop_after,
            force=bool(args.force),
            verbose=bool(args.verbose),
            dialog=dialog,
        )
    except OperatorCancelled as e:
        print(str(e))
        return 1
    except ProvisionError as e:
        dialog.message(f"{e}\n\nSee {args.log} for details.", title="BARBS failed")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
