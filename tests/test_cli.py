from __future__ import annotations

from pathlib import Path

import yaml
from click.testing import CliRunner

from providerci.cli import cli
from providerci.errors import GeneratorError
from providerci.provider import PROVIDER_FILE_PATHS
from providerci.writer import HEADER, render
from providerci.workflows import build_workflow


def test_generate_writes_every_file(providers_dir: Path, tmp_path: Path) -> None:
    out = tmp_path / "out"
    result = CliRunner().invoke(
        cli,
        ["generate", "widget", "--providers-dir", str(providers_dir), "--out-dir", str(out), "--check"],
    )
    assert result.exit_code == 0, result.output
    for rel in PROVIDER_FILE_PATHS:
        target = out / "widget" / rel
        assert target.is_file(), rel
        text = target.read_text(encoding="utf-8")
        assert text.startswith(HEADER)
        assert isinstance(yaml.safe_load(text), dict)
    assert "widget: SUCCESS" in result.output


def test_generate_defaults_to_repo_dir(providers_dir: Path) -> None:
    result = CliRunner().invoke(cli, ["generate", "kubernetes", "--providers-dir", str(providers_dir)])
    assert result.exit_code == 0, result.output
    doc = yaml.safe_load(
        (providers_dir / "kubernetes" / "repo" / ".github/workflows/run-acceptance-tests.yml").read_text(encoding="utf-8")
    )
    assert doc["jobs"]["sentinel"]["needs"] == ["test", "lint", "teardown-cluster"]


def test_generate_all(providers_dir: Path, tmp_path: Path) -> None:
    out = tmp_path / "out"
    result = CliRunner().invoke(
        cli, ["generate", "--all", "--providers-dir", str(providers_dir), "--out-dir", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert (out / "kubernetes" / ".goreleaser.yml").is_file()
    assert (out / "widget" / ".goreleaser.yml").is_file()


def test_unknown_provider_fails(providers_dir: Path, tmp_path: Path) -> None:
    result = CliRunner().invoke(
        cli,
        ["generate", "widget", "missing", "--providers-dir", str(providers_dir), "--out-dir", str(tmp_path)],
    )
    assert result.exit_code == 1
    assert "missing: FAILED" in result.output
    assert "widget: SUCCESS" in result.output


def test_invalid_config_fails(providers_dir: Path, tmp_path: Path) -> None:
    bad = providers_dir / "bad"
    bad.mkdir()
    (bad / "config.yaml").write_text("provider: bad\nparallel: lots\n", encoding="utf-8")
    result = CliRunner().invoke(
        cli, ["generate", "bad", "--providers-dir", str(providers_dir), "--out-dir", str(tmp_path)]
    )
    assert result.exit_code == 1
    assert "bad: FAILED" in result.output
    assert "parallel" in result.output
    assert not (tmp_path / "bad").exists()


def test_generate_requires_a_provider(providers_dir: Path) -> None:
    result = CliRunner().invoke(cli, ["generate", "--providers-dir", str(providers_dir)])
    assert result.exit_code == 2


def test_names_and_all_conflict(providers_dir: Path) -> None:
    result = CliRunner().invoke(cli, ["generate", "widget", "--all", "--providers-dir", str(providers_dir)])
    assert result.exit_code == 2


def test_list(providers_dir: Path) -> None:
    result = CliRunner().invoke(cli, ["list", "--providers-dir", str(providers_dir)])
    assert result.exit_code == 0
    assert result.output.split() == ["kubernetes", "widget"]


def test_render_uses_literal_blocks_for_scripts(widget_opts) -> None:
    text = render(build_workflow("build", widget_opts))
    assert "run: |" in text
    doc = yaml.safe_load(text)
    assert list(doc) == ["name", "on", "env", "jobs"]
    assert list(doc["jobs"])[0] == "prerequisites"


def test_debug_prints_traceback_for_generator_errors(providers_dir: Path, tmp_path: Path, monkeypatch) -> None:
    def broken(name, providers_dir):
        raise GeneratorError(kind="dependency_cycle", provider=name, message="job dependencies form a cycle")

    monkeypatch.setattr("providerci.cli.build_provider_files", broken)
    args = ["generate", "widget", "--providers-dir", str(providers_dir), "--out-dir", str(tmp_path)]

    quiet = CliRunner().invoke(cli, args)
    assert quiet.exit_code == 1
    assert "Traceback" not in quiet.output

    loud = CliRunner().invoke(cli, ["--debug", *args])
    assert loud.exit_code == 1
    assert "dependency_cycle: job dependencies form a cycle" in loud.output
    assert "Traceback" in loud.output
