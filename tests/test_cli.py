from typer.testing import CliRunner

from fchat import fchat_cli

runner = CliRunner()

ENV = {
    "FCHAT_ACCOUNT_NAME": "account",
    "FCHAT_ACCOUNT_PASSWORD": "s3cret",
    "FCHAT_CHARACTER_NAME": "Example Bot",
}


def test_show_config_masks_password():
    result = runner.invoke(fchat_cli.app, ["show-config"], env=ENV)

    assert result.exit_code == 0
    assert "Example Bot" in result.output
    assert "s3cret" not in result.output


def test_run_without_credentials_exits_with_config_error():
    result = runner.invoke(fchat_cli.app, ["run"])

    assert result.exit_code == 2
    assert "Missing required config" in result.output


def test_run_passes_options_through_and_returns_bot_status(monkeypatch):
    seen = {}

    async def fake_run_bot(config):
        seen["config"] = config
        return 1

    monkeypatch.setattr(fchat_cli, "run_bot", fake_run_bot)
    monkeypatch.setattr(fchat_cli, "configure_root_logging", lambda level: None)

    result = runner.invoke(
        fchat_cli.app,
        ["run", "-c", "Frontpage", "-c", "Sandbox", "--chat-url", "ws://127.0.0.1:1", "--continue-on-handler-error"],
        env=ENV,
    )

    assert result.exit_code == 1
    config = seen["config"]
    assert config.channels == ["Frontpage", "Sandbox"]
    assert config.chat_url == "ws://127.0.0.1:1"
    assert config.handler_error_policy == "continue"


def test_run_reads_yaml_config(monkeypatch, tmp_path):
    seen = {}

    async def fake_run_bot(config):
        seen["config"] = config
        return 0

    monkeypatch.setattr(fchat_cli, "run_bot", fake_run_bot)
    monkeypatch.setattr(fchat_cli, "configure_root_logging", lambda level: None)
    path = tmp_path / "bot.yaml"
    path.write_text("channels: [Development, Frontpage]\n")

    result = runner.invoke(fchat_cli.app, ["run", "--config", str(path)], env=ENV)

    assert result.exit_code == 0
    assert seen["config"].channels == ["Development", "Frontpage"]
    assert seen["config"].handler_error_policy == "abort"
