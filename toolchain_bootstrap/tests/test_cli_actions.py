import json

from click.testing import CliRunner

from toolchain_bootstrap.core.cli import cli


def test_cli_run(fake_home, serve_installer, tmp_path):
    serve_installer()
    report = tmp_path / "report.json"
    result = CliRunner().invoke(cli, ['run', '--installer-arg', '-y', '--report', str(report)])
    assert result.exit_code == 0, result.output
    assert "source-env" in result.output
    assert json.loads(report.read_text())["exit_status"] == 0
    assert (fake_home / "installer-args.txt").read_text().split() == ["-y"]


def test_cli_run_network_failure_exit_status(fake_home, network_down):
    result = CliRunner().invoke(cli, ['run'])
    # the sourcing step decides the exit status, not the failed download
    assert result.exit_code == 1


def test_cli_run_strict(fake_home, network_down):
    result = CliRunner().invoke(cli, ['run', '--strict'])
    assert result.exit_code == 6
    assert "SKIPPED" in result.output


def test_cli_install_http_error(fake_home, serve_installer):
    serve_installer(b"", status_code=500)
    result = CliRunner().invoke(cli, ['install'])
    assert result.exit_code == 22


def test_cli_source_prints_exports(fake_home):
    env_file = fake_home / "tool.env"
    env_file.write_text("export TB_CLI_VAR='a b'\n")
    result = CliRunner().invoke(cli, ['source', str(env_file)])
    assert result.exit_code == 0
    assert "export TB_CLI_VAR='a b'" in result.output


def test_cli_source_missing_file(fake_home):
    result = CliRunner().invoke(cli, ['source', str(fake_home / "missing.env")])
    assert result.exit_code == 1
    assert "No such file" in result.output


def test_cli_uses_config_file(fake_home, serve_installer, tmp_path):
    calls = serve_installer()
    config = tmp_path / "bootstrap.yaml"
    config.write_text("bootstrap:\n  url: https://example.test/install.sh\n  installer_args: [-y, --no-modify-path]\n")
    result = CliRunner().invoke(cli, ['--config', str(config), 'run'])
    assert result.exit_code == 0, result.output
    assert calls == ["https://example.test/install.sh"]
    assert (fake_home / "installer-args.txt").read_text().split() == ["-y", "--no-modify-path"]


def test_cli_bad_config(tmp_path):
    config = tmp_path / "bootstrap.yaml"
    config.write_text("bootstrap:\n  colour: blue\n")
    result = CliRunner().invoke(cli, ['--config', str(config), 'run'])
    assert result.exit_code != 0
    assert "Unknown config keys" in result.output


def test_cli_rejects_non_positive_timeout(fake_home, serve_installer):
    calls = serve_installer()
    for timeout in ('0', '-5'):
        result = CliRunner().invoke(cli, ['run', '--timeout', timeout])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "timeout must be positive" in result.output
    assert calls == []


def test_cli_rejects_unknown_log_level(fake_home):
    env_file = fake_home / "tool.env"
    env_file.write_text("export TB_CLI_VAR=1\n")
    result = CliRunner().invoke(cli, ['--log-level', 'LOUD', 'source', str(env_file)])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Unknown log level" in result.output
