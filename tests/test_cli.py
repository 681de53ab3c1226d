import os
from unittest.mock import MagicMock

import pytest

from promptcanvas.api import cli
from promptcanvas.core.errors import ApiError, ConfigurationError
from promptcanvas.core.types import AspectRatio
from promptcanvas.image.client import ClientCache


@pytest.fixture
def session(tmp_path, fake_client):
    return cli.Session("key", clients=ClientCache(factory=lambda key: fake_client), output_dir=str(tmp_path))


def test_plain_text_generates_and_saves_image(session, fake_client, tmp_path):
    output = session.handle("a red fox in snow")

    assert output == f"Image saved to {os.path.join(str(tmp_path), 'a_red_fox_in_snow.png')}"
    assert os.path.exists(os.path.join(str(tmp_path), "a_red_fox_in_snow.png"))
    assert fake_client.predict_images.call_args.args[2] == "1:1"


def test_ratio_command_changes_request_ratio(session, fake_client):
    assert session.handle("/ratio 16:9") == "Aspect ratio set to 16:9 (Widescreen)."
    session.handle("lighthouse")

    assert session.aspect_ratio is AspectRatio.WIDESCREEN
    assert fake_client.predict_images.call_args.args[2] == "16:9"


def test_invalid_ratio_reports_error(session):
    assert session.handle("/ratio 5:4").startswith("Error: Unsupported aspect ratio")
    assert session.aspect_ratio is AspectRatio.SQUARE


def test_ratio_listing_marks_active(session):
    assert "1:1  Square (active)" in session.handle("/ratio")


def test_describe_command(session, fake_client):
    assert session.handle("/describe a red fox") == "A fox curled in fresh snow."
    fake_client.predict_images.assert_not_called()


def test_describe_without_prompt(session, fake_client):
    assert session.handle("/describe") == "Error: Please enter a prompt."
    fake_client.generate_content.assert_not_called()


def test_errors_are_rendered_verbatim(session, fake_client):
    fake_client.predict_images.side_effect = ApiError("API key not valid. Please pass a valid API key.")

    output = session.handle("fox")

    assert output.startswith("Error: Authentication Error")


def test_exit_and_help(session):
    assert session.handle("exit") is None
    assert session.handle("QUIT") is None
    assert "/describe" in session.handle("/help")


def test_prompt_for_key_retries_on_blank_input(capsys):
    read = MagicMock(side_effect=["  ", "typed-key "])

    assert cli.prompt_for_key(read) == "typed-key"
    assert "Please enter a valid API key." in capsys.readouterr().out


def test_session_credential_prefers_environment(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    read = MagicMock()

    assert cli.resolve_session_credential(read) == "env-key"
    read.assert_not_called()


def test_session_credential_asks_user_when_missing():
    assert cli.resolve_session_credential(MagicMock(return_value="typed")) == "typed"


def test_placeholder_user_key_is_rejected():
    with pytest.raises(ConfigurationError):
        cli.resolve_session_credential(MagicMock(return_value="YOUR_API_KEY_HERE"))


def test_main_runs_loop_until_exit(monkeypatch, fake_client, tmp_path, capsys):
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    monkeypatch.setattr(cli, "ClientCache", lambda: ClientCache(factory=lambda key: fake_client))
    inputs = iter(["", "/ratio 9:16", "exit"])
    monkeypatch.setattr("builtins.input", lambda _: next(inputs))

    assert cli.main() == 0

    out = capsys.readouterr().out
    assert "Aspect ratio set to 9:16 (Portrait)." in out
    assert "Shutting down." in out


def test_main_aborts_on_placeholder_key(monkeypatch, capsys):
    monkeypatch.setattr(cli.getpass, "getpass", lambda _: "your-api-key")

    assert cli.main() == 1
    assert "API key is missing" in capsys.readouterr().out


def test_malformed_image_payload_is_reported(session, fake_client):
    fake_client.predict_images.return_value = [{"bytesBase64Encoded": "abc", "mimeType": "image/png"}]

    output = session.handle("fox")

    assert output.startswith("Error: An unexpected error occurred: Could not save the image")


def test_unwritable_output_dir_is_reported(tmp_path, fake_client):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    session = cli.Session("key", clients=ClientCache(factory=lambda key: fake_client), output_dir=str(blocker))

    output = session.handle("fox")

    assert output.startswith("Error: An unexpected error occurred: Could not save the image")


def test_main_loop_continues_after_save_failure(monkeypatch, fake_client, tmp_path, capsys):
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    fake_client.predict_images.return_value = [{"bytesBase64Encoded": "abc"}]
    monkeypatch.setattr(cli, "ClientCache", lambda: ClientCache(factory=lambda key: fake_client))
    inputs = iter(["fox", "/ratio 4:3", "exit"])
    monkeypatch.setattr("builtins.input", lambda _: next(inputs))

    assert cli.main() == 0

    out = capsys.readouterr().out
    assert "Could not save the image" in out
    assert "Aspect ratio set to 4:3 (Landscape)." in out
