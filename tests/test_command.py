from __future__ import annotations

import sys

import pytest

from distpack.errors import ExternalToolFailure
from distpack.lib.command import NOT_FOUND_RC, ShellRunner, run_cmd


def test_captures_stdout() -> None:
    r = run_cmd([sys.executable, "-c", "print('hello')"])
    assert r.ok
    assert r.stdout.strip() == "hello"


def test_nonzero_exit_raises() -> None:
    with pytest.raises(ExternalToolFailure) as exc:
        run_cmd([sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"])
    assert exc.value.returncode == 3
    assert "bad" in exc.value.stderr


def test_nonzero_exit_unchecked() -> None:
    r = run_cmd([sys.executable, "-c", "raise SystemExit(2)"], check=False)
    assert r.returncode == 2
    assert not r.ok


def test_missing_executable() -> None:
    r = run_cmd(["distpack-no-such-tool"], check=False)
    assert r.returncode == NOT_FOUND_RC
    with pytest.raises(ExternalToolFailure):
        run_cmd(["distpack-no-such-tool"])


def test_dry_run_does_not_execute() -> None:
    r = ShellRunner(dry_run=True).run(["distpack-no-such-tool", "--flag"])
    assert r.returncode == 0
    assert r.argv == ["distpack-no-such-tool", "--flag"]


def test_cwd(tmp_path) -> None:
    r = ShellRunner().run([sys.executable, "-c", "import os; print(os.getcwd())"], cwd=str(tmp_path))
    assert r.stdout.strip() == str(tmp_path.resolve())
