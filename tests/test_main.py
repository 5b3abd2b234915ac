"""Tests for the main entry point: startup failures and exit codes."""

import logging

import pytest
from prompt_toolkit.application import create_app_session
from prompt_toolkit.output import DummyOutput

import main
from core.events import FatalError, RequestQuit


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point XDG dirs at tmp_path, silence printing, restore root logging."""
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level

    with create_app_session(output=DummyOutput()):
        yield

    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


@pytest.fixture
def wordbank(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("cat\n")
    return path


class UnreachableApp:
    """Stands in for TerminalApp where the UI must never start."""

    def __init__(self, session, settings):
        raise AssertionError("terminal UI started")


def scripted_app(*events):
    """TerminalApp replacement that feeds events and returns the snapshot."""

    class ScriptedApp:
        def __init__(self, session, settings):
            self.session = session

        def run(self):
            for event in events:
                self.session.handle(event)
            return self.session.snapshot()

    return ScriptedApp


class TestStartupFailures:
    """Startup failures exit with status 1 before the UI starts."""

    @pytest.fixture(autouse=True)
    def no_ui(self, monkeypatch):
        monkeypatch.setattr(main, "TerminalApp", UnreachableApp)

    def test_missing_word_bank(self, tmp_path):
        assert main.main(["--wordbank", str(tmp_path / "missing.txt")]) == 1

    def test_invalid_word_count(self, wordbank):
        assert main.main(["--wordbank", str(wordbank), "--words", "0"]) == 1

    def test_unusable_config_db_path(self, tmp_path, wordbank, capsys):
        """A settings path below a regular file reports instead of crashing."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        code = main.main(
            ["--wordbank", str(wordbank), "--config-db", str(blocker / "settings.db")]
        )

        assert code == 1
        assert "Cannot open settings database" in capsys.readouterr().err


class TestExitCodes:
    """Exit status after the UI has closed."""

    def test_quit_returns_zero(self, monkeypatch, wordbank):
        monkeypatch.setattr(main, "TerminalApp", scripted_app(RequestQuit()))
        assert main.main(["--wordbank", str(wordbank), "--seed", "1"]) == 0

    def test_fatal_error_returns_one(self, monkeypatch, wordbank):
        monkeypatch.setattr(
            main, "TerminalApp", scripted_app(FatalError(RuntimeError("boom"), "Broken: "))
        )
        assert main.main(["--wordbank", str(wordbank), "--seed", "1"]) == 1

    def test_log_file_written_under_state_dir(self, monkeypatch, tmp_path, wordbank):
        monkeypatch.setattr(main, "TerminalApp", scripted_app(RequestQuit()))
        main.main(["--wordbank", str(wordbank), "--seed", "1"])

        log_file = tmp_path / "state" / "typetester" / "typetester.log"
        assert log_file.exists()
        assert "Starting TypeTester" in log_file.read_text()
