from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import yaml

from .context import ProvisionCtx, default_search_path
from .lib.command import CommandExecutor, SubprocessExecutor
from .lib.manifests import load_manifest
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import RunReport, Step, run_pipeline
from .preflight import PreconditionDeclined, check_host
from .state_store import ensure_defaults, load_state, record_error, save_state
from .steps import (
    ConfigureZshStep,
    InstallNeovimStep,
    InstallOhMyZshStep,
    InstallPackagesStep,
    InstallRustStep,
    InstallTailscaleStep,
    InstallUvStep,
    SetupAliasesStep,
    UpdateSystemStep,
)

logger = logging.getLogger(__name__)

DEFAULT_STATE_PATH = "~/.local/state/pi-setup/state.json"

EXIT_OK = 0
EXIT_DECLINED = 1
EXIT_STEP_FAILED = 2
EXIT_USAGE = 3
EXIT_INTERRUPTED = 130

NEXT_STEPS = """\
==========================================
Installation complete!
==========================================

Next steps:
1. Restart your terminal or run: source ~/.zshrc
2. Authenticate Tailscale: sudo tailscale up
3. Restart your system to ensure all changes take effect
"""


def build_steps() -> List[Step]:
    # Order is dependency order: apt refreshed before installs, zsh before .zshrc edits.
    return [
        UpdateSystemStep(),
        InstallTailscaleStep(),
        InstallNeovimStep(),
        InstallOhMyZshStep(),
        ConfigureZshStep(),
        InstallRustStep(),
        InstallUvStep(),
        InstallPackagesStep(),
        SetupAliasesStep(),
    ]


def run(
    *,
    state_path: str = DEFAULT_STATE_PATH,
    manifest_path: Optional[str] = None,
    home: Optional[Path] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
    dry_run: bool = False,
    executor: Optional[CommandExecutor] = None,
    steps: Optional[Sequence[Step]] = None,
) -> RunReport:
    """Run the provisioning pipeline, persisting state for the next run."""

    home = home or Path.home()
    manifest = load_manifest(manifest_path)
    state = ensure_defaults(load_state(state_path))

    ctx = ProvisionCtx(
        executor=executor or SubprocessExecutor(dry_run=dry_run),
        manifest=manifest,
        home=home,
        state=state,
        search_path=default_search_path(home, manifest.search_path),
        sudo=os.geteuid() != 0,
        dry_run=dry_run,
    )

    try:
        return run_pipeline(
            ctx=ctx,
            steps=build_steps() if steps is None else steps,
            start_at=start_at,
            stop_after=stop_after,
            force=force,
        )
    except KeyboardInterrupt:
        record_error(state, (state.get("execution") or {}).get("current_step"), "interrupted")
        raise
    finally:
        if not dry_run:
            save_state(state_path, state)


def _print_report(report: RunReport) -> None:
    for r in report.results:
        print(f"  {r.outcome.value:<9} {r.step_id}")
    failed = report.failed_step
    if failed is not None:
        print(f"\nStep {failed.step_id} failed:\n{failed.reason}")
        print("Fix the problem and re-run; completed steps will be skipped.")


def main(argv: Optional[list[str]] = None, *, ask: Callable[[str], str] = input) -> int:
    p = argparse.ArgumentParser(prog="pi-setup", description="Provision a Raspberry Pi for development.")
    p.add_argument("--manifest", default=None, help="YAML manifest (default: bundled)")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to run state (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file")
    p.add_argument("-y", "--yes", action="store_true", help="Do not ask on non-Raspberry Pi hosts")
    p.add_argument("--dry-run", action="store_true", help="Log commands and writes without executing them")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 30_install_neovim)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--force", action="store_true", help="Run steps even if already satisfied")
    p.add_argument("--list-steps", action="store_true", help="Print step ids and exit")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = p.parse_args(argv)

    if args.list_steps:
        for step in build_steps():
            print(f"{step.step_id}\t{step.description}")
        return EXIT_OK

    known = [s.step_id for s in build_steps()]
    for flag, wanted in (("--start-at", args.start_at), ("--stop-after", args.stop_after)):
        if wanted is not None and wanted not in known:
            p.print_usage()
            print(f"pi-setup: {flag}: unknown step id {wanted!r} (see --list-steps)")
            return EXIT_USAGE

    state_path = os.path.expanduser(args.state)
    configure_logging(
        log_path=args.log,
        level=logging.DEBUG if args.verbose else logging.INFO,
        fallback_dir=os.path.dirname(state_path) or None,
    )

    try:
        check_host(assume_yes=bool(args.yes), ask=ask)
    except PreconditionDeclined as e:
        logger.error("%s", e)
        return EXIT_DECLINED

    try:
        report = run(
            state_path=state_path,
            manifest_path=args.manifest,
            start_at=args.start_at,
            stop_after=args.stop_after,
            force=bool(args.force),
            dry_run=bool(args.dry_run),
        )
    except (ValueError, FileNotFoundError, yaml.YAMLError) as e:
        # Bad manifest or state file: nothing has run yet.
        logger.error("Setup failed: %s", e)
        return EXIT_USAGE
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return EXIT_INTERRUPTED

    _print_report(report)
    if not report.ok:
        return EXIT_STEP_FAILED

    print()
    print(NEXT_STEPS)
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
