import logging

import pytest

from phasekit import cli

DEFINITIONS = """\
lifecycles:
  - id: release
    phases:
      - name: stage
      - name: publish
        goal: org.example:release-plugin:1.0:publish
        links:
          - after: stage
"""


@pytest.fixture(autouse=True)
def _reset_phasekit_logger():
    yield
    logger = logging.getLogger("phasekit")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_cli_lists_builtin_lifecycles(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("PHASEKIT_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)

    rc = cli.main(["lifecycles"])

    assert rc == 0
    out = capsys.readouterr().out
    assert out.splitlines() == ["clean\ttree", "default\ttree", "site\ttree", "wrapper\ttree"]


def test_cli_prints_computed_phases(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("PHASEKIT_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)

    rc = cli.main(["phases", "clean"])

    assert rc == 0
    assert capsys.readouterr().out.splitlines() == ["pre-clean", "clean", "post-clean"]


def test_cli_uses_config_definitions_and_prints_bindings(tmp_path, capsys):
    (tmp_path / "release.yaml").write_text(DEFINITIONS, encoding="utf-8")
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "lifecycles:\n  include_builtins: false\n  definitions: [release.yaml]\nlogging:\n  level: WARNING\n",
        encoding="utf-8",
    )

    rc = cli.main(["--config", str(config_path), "bindings", "release"])

    assert rc == 0
    assert capsys.readouterr().out.splitlines() == ["publish: org.example:release-plugin:1.0:publish"]


def test_cli_reports_structural_errors(tmp_path, capsys):
    (tmp_path / "dup.yaml").write_text(
        "lifecycles:\n  - id: dup\n    phases:\n      - name: compile\n      - name: compile\n",
        encoding="utf-8",
    )
    config_path = tmp_path / "config.yaml"
    config_path.write_text("lifecycles:\n  definitions: [dup.yaml]\n", encoding="utf-8")

    rc = cli.main(["--config", str(config_path), "lifecycles"])

    assert rc == 2
    assert "Found duplicated phase 'compile' in 'dup' lifecycle" in capsys.readouterr().err


def test_cli_unknown_lifecycle_exits_with_error(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("PHASEKIT_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)

    rc = cli.main(["phases", "nope"])

    assert rc == 2
    assert "Unknown lifecycle id: nope" in capsys.readouterr().err


def test_cli_discovers_repo_config_and_local_overlay(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("PHASEKIT_CONFIG", raising=False)
    config_dir = tmp_path / "config"
    (config_dir / "lifecycles").mkdir(parents=True)
    (config_dir / "lifecycles" / "release.yaml").write_text(DEFINITIONS, encoding="utf-8")
    (config_dir / "config.yaml").write_text(
        "lifecycles:\n  include_builtins: true\n  definitions: []\n",
        encoding="utf-8",
    )
    (config_dir / "config.local.yaml").write_text(
        "lifecycles:\n  include_builtins: false\n  definitions: [lifecycles/release.yaml]\n",
        encoding="utf-8",
    )
    workdir = tmp_path / "src"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    rc = cli.main(["lifecycles"])

    assert rc == 0
    assert capsys.readouterr().out.splitlines() == ["release\ttree"]
