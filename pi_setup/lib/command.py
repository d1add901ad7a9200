from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str


class CommandError(RuntimeError):
    """An external command exited non-zero."""

    def __init__(self, result: CmdResult):
        self.result = result
        super().__init__(f"Command failed ({result.returncode}): {fmt_argv(result.argv)}\n{result.stderr}")


class CommandExecutor(Protocol):
    """Runs external commands on behalf of steps.

    Steps never call subprocess directly; tests substitute a recording double.
    """

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env: Mapping[str, str] | None = None,
        input_text: str | None = None,
    ) -> CmdResult:
        ...


def fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    dry_run: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Captures stdout/stderr; both are logged at DEBUG.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    logger.info("CMD %s", fmt_argv(argv_list))

    if dry_run:
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    p = subprocess.run(
        argv_list,
        input=input_text,
        text=True,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=cwd,
        env=dict(os.environ, **(env or {})),
    )

    if p.stdout:
        logger.debug("STDOUT %s", p.stdout.strip())
    if p.stderr:
        logger.debug("STDERR %s", p.stderr.strip())

    result = CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)
    if check and p.returncode != 0:
        raise CommandError(result)
    return result


@dataclass(frozen=True)
class SubprocessExecutor:
    """CommandExecutor backed by run_cmd."""

    dry_run: bool = False

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env: Mapping[str, str] | None = None,
        input_text: str | None = None,
    ) -> CmdResult:
        return run_cmd(argv, check=check, env=env, input_text=input_text, dry_run=self.dry_run)
