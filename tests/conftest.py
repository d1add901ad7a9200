from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence

import pytest

from pi_setup.context import ProvisionCtx
from pi_setup.lib.command import CmdResult, CommandError
from pi_setup.lib.manifests import load_manifest


class FakeExecutor:
    """Records argv lists instead of running them.

    ``fail_when(argv)`` returning True makes the call exit 1 (raising
    CommandError when check=True). ``effects`` run after a successful call so
    tests can simulate what an installer leaves behind.
    """

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.fail_when: Callable[[List[str]], bool] = lambda argv: False
        self.effects: List[Callable[[List[str]], None]] = []
        self.stdout: Dict[str, str] = {}

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env: Optional[Mapping[str, str]] = None,
        input_text: Optional[str] = None,
    ) -> CmdResult:
        argv_list = list(argv)
        self.calls.append(argv_list)
        if self.fail_when(argv_list):
            result = CmdResult(argv=argv_list, returncode=1, stdout="", stderr="E: simulated failure")
            if check:
                raise CommandError(result)
            return result
        # unprivileged curl -o DEST: materialize the download (sudo targets stay untouched)
        if argv_list[0] == "curl" and "-o" in argv_list:
            dest = Path(argv_list[argv_list.index("-o") + 1])
            if dest.parent.exists():
                dest.write_text("#!/bin/sh\n", encoding="utf-8")
        for effect in self.effects:
            effect(argv_list)
        stdout = self.stdout.get(Path(argv_list[0]).name, "")
        return CmdResult(argv=argv_list, returncode=0, stdout=stdout, stderr="")

    def commands(self) -> List[str]:
        return [" ".join(c) for c in self.calls]


def make_tool(bin_dir: Path, name: str) -> Path:
    bin_dir.mkdir(parents=True, exist_ok=True)
    p = bin_dir / name
    p.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    p.chmod(0o755)
    return p


def write_dpkg_status(path: Path, installed: Sequence[str]) -> None:
    stanzas = [f"Package: {name}\nStatus: install ok installed\nVersion: 1.0\n" for name in installed]
    path.write_text("\n".join(stanzas), encoding="utf-8")


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def home(tmp_path: Path) -> Path:
    h = tmp_path / "home"
    h.mkdir()
    return h


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    d = tmp_path / "bin"
    d.mkdir()
    return d


@pytest.fixture
def make_ctx(tmp_path: Path, home: Path, bin_dir: Path, executor: FakeExecutor):
    dpkg_status = tmp_path / "dpkg-status"
    os_release = tmp_path / "os-release"
    os_release.write_text('ID=debian\nVERSION_CODENAME="bookworm"\n', encoding="utf-8")

    def _make(**overrides) -> ProvisionCtx:
        kwargs = dict(
            executor=executor,
            manifest=load_manifest(),
            home=home,
            state={},
            search_path=[str(bin_dir)],
            dpkg_status_path=str(dpkg_status),
            os_release_path=str(os_release),
            sudo=True,
            clock=lambda: 1_000_000.0,
        )
        kwargs.update(overrides)
        return ProvisionCtx(**kwargs)

    return _make
