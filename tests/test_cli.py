from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]


def _run(*args: str, env: dict[str, str] | None = None) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "tools/graphinate.py", *args],
        cwd=REPO_ROOT,
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )


def test_render_then_validate(tmp_path: Path) -> None:
    doc = tmp_path / "chart.md"
    doc.write_text("---\ntype: venn\nsets: [Alpha, Beta]\noverlap: Both\n---\n")
    out = tmp_path / "chart.svg"
    result = _run("render", str(doc), "--out", str(out), "--theme", "rp")
    assert result.returncode == 0, result.stdout + result.stderr
    assert "Both" in out.read_text()

    result = _run("validate", str(out), "--kind", "venn")
    assert result.returncode == 0, result.stdout + result.stderr
    assert json.loads(result.stdout)["status"] == "pass"


def test_render_reports_errors(tmp_path: Path) -> None:
    doc = tmp_path / "bad.md"
    doc.write_text("no front matter")
    result = _run("render", str(doc))
    assert result.returncode == 1
    assert "ERROR E1010_FRONT_MATTER_MISSING" in result.stderr
    assert "HINT:" in result.stderr


def test_themes_lists_all() -> None:
    result = _run("themes")
    assert result.returncode == 0, result.stderr
    ids = [line.split("\t")[0] for line in result.stdout.splitlines()]
    assert ids == ["default", "rp", "robotpony"]


def test_cli_runs_with_package_already_importable() -> None:
    # An editable install puts src on the path before the script runs.
    env = dict(os.environ)
    src = str(REPO_ROOT / "src")
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [src, env.get("PYTHONPATH")]))
    result = _run("themes", env=env)
    assert result.returncode == 0, result.stderr
    assert result.stdout.splitlines()[0].startswith("default\t")
