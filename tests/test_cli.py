import json

import pytest
from click.testing import CliRunner
from rich.console import Console

from deslop import __version__, cli


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.setattr(cli, "console", Console(width=200))
    return CliRunner()


@pytest.fixture
def repo(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.js").write_text("export function add(a, b) {\n  return a + b;\n}\n")
    return tmp_path


def test_info(runner):
    result = runner.invoke(cli.main, ["info"])
    assert result.exit_code == 0
    assert f"Version: {__version__}" in result.output


def test_version(runner):
    result = runner.invoke(cli.main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_rules_filtered(runner):
    result = runner.invoke(cli.main, ["rules", "--language", "python", "--severity", "high"])
    assert result.exit_code == 0
    assert "empty_except_py" in result.output
    assert "console_debugging" not in result.output


def test_rules_rejects_unknown_language(runner):
    result = runner.invoke(cli.main, ["rules", "--language", "cobol"])
    assert result.exit_code != 0


def test_scan_json(runner, repo):
    result = runner.invoke(cli.main, ["scan", str(repo), "-o", "json", "--no-history"])
    assert result.exit_code == 0
    report = json.loads(result.output)
    assert report["files_analyzed"] == 1
    assert report["error"] is None
    assert "shotgun_surgery" not in report["verdicts"]
    assert report["verdicts"]["over_engineering_metrics"] == "OK"


def test_scan_quick_json(runner, repo):
    (repo / "src" / "debug.js").write_text("console.log(1);\n")
    result = runner.invoke(cli.main, ["scan", str(repo), "--quick", "-o", "json", "--no-history"])
    report = json.loads(result.output)
    assert report["verdicts"] == {}
    assert "console_debugging" in [finding["rule"] for finding in report["findings"]]


def test_scan_writes_report_file(runner, repo, tmp_path):
    target = tmp_path / "report.json"
    result = runner.invoke(cli.main, ["scan", str(repo), "-o", "json", "-f", str(target), "--no-history"])
    assert result.exit_code == 0
    assert "Report saved to" in result.output
    assert json.loads(target.read_text())["root"] == str(repo)


def test_critical_finding_exit_code(runner, repo):
    (repo / "src" / "config.js").write_text('const password = "hunter2hunter2";\n')
    result = runner.invoke(cli.main, ["scan", str(repo), "--no-history"])
    assert result.exit_code == 2
    assert "hardcoded_secrets" in result.output


def test_max_findings(runner, repo):
    (repo / "src" / "debug.js").write_text("console.log(1);\nconsole.log(2);\nconsole.log(3);\n")
    result = runner.invoke(
        cli.main, ["scan", str(repo), "--quick", "-o", "json", "--max-findings", "1", "--no-history"]
    )
    report = json.loads(result.output)
    assert len(report["findings"]) == 1
    assert report["summary"]["total"] >= 3


def test_missing_path(runner, tmp_path):
    result = runner.invoke(cli.main, ["scan", str(tmp_path / "missing"), "--no-history"])
    assert result.exit_code == 1
    assert "Not a directory" in result.output
