"""Tests for CLI line handling and action dispatch."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from noticore.config import NotiConfig
from noticore.lifecycle.loop import LifecycleLoop
from noticore.lifecycle.notification import CloseReason
from noticore.lifecycle.queues import NotificationQueues
from noticore.main import _handle_line, _run_check


@pytest.fixture
def config(tmp_path):
    return NotiConfig(default_timeout=6.0, show_age_threshold=-1, log_dir=tmp_path)


@pytest.fixture
def loop():
    loop = MagicMock()
    loop.submit.return_value = 2
    return loop


class TestHandleLine:
    def test_notification_is_submitted(self, loop, config):
        _handle_line('{"summary": "Hello"}', loop, config)
        loop.submit.assert_called_once()
        assert loop.submit.call_args.args[0].summary == "Hello"

    def test_malformed_json_ignored(self, loop, config, caplog):
        _handle_line("{not json", loop, config)
        loop.submit.assert_not_called()
        assert "Ignoring malformed record" in caplog.text

    @pytest.mark.parametrize("line", ["[1, 2]", '"x"', "42", "null"])
    def test_non_object_ignored(self, loop, config, caplog, line):
        _handle_line(line, loop, config)
        loop.submit.assert_not_called()
        assert "not a JSON object" in caplog.text

    def test_invalid_notification_ignored(self, loop, config, caplog):
        _handle_line('{"summary": "x", "urgency": "extreme"}', loop, config)
        loop.submit.assert_not_called()
        assert "Ignoring invalid notification" in caplog.text

    def test_bad_timeout_ignored(self, loop, config, caplog):
        _handle_line('{"summary": "x", "timeout": "soon"}', loop, config)
        loop.submit.assert_not_called()
        assert "Ignoring invalid notification" in caplog.text

    def test_bad_close_id_ignored(self, loop, config, caplog):
        _handle_line('{"action": "close", "id": "abc"}', loop, config)
        loop.close.assert_not_called()
        assert "Ignoring invalid action" in caplog.text

    @pytest.mark.parametrize("line,method,args", [
        ('{"action": "close", "id": 4}', "close", (4, CloseReason.SIGNALED)),
        ('{"action": "close_all"}', "close_all", ()),
        ('{"action": "history_pop"}', "history_pop", ()),
        ('{"action": "pause"}', "set_paused", (True,)),
        ('{"action": "resume"}', "set_paused", (False,)),
    ])
    def test_actions(self, loop, config, line, method, args):
        _handle_line(line, loop, config)
        getattr(loop, method).assert_called_once_with(*args)

    def test_unknown_action(self, loop, config, caplog):
        _handle_line('{"action": "explode"}', loop, config)
        assert "Ignoring invalid action" in caplog.text


class TestEndToEnd:
    def test_string_timeout_still_expires(self, config):
        """A numeric string timeout is coerced, so ticking keeps working."""
        now = [100.0]
        queues = NotificationQueues(config, clock=lambda: now[0])
        loop = LifecycleLoop(queues, config=config)

        _handle_line('{"summary": "a", "timeout": "5"}', loop, config)
        assert loop.tick() == pytest.approx(5.0)

        now[0] += 6
        loop.tick()
        assert queues.length_displayed() == 0
        assert queues.length_history() == 1


class TestRunCheck:
    def test_reports_log_file(self, capsys):
        _run_check(NotiConfig(log_dir=Path("/var/log/nc")))
        out = capsys.readouterr().out
        assert "Log file: /var/log/nc/noticore.log" in out
        assert "history_length" in out

    def test_reports_disabled_file_log(self, capsys):
        _run_check(NotiConfig(log_backup_days=0))
        assert "Log file: disabled" in capsys.readouterr().out
