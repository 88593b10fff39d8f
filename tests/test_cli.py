from unittest.mock import patch

import pytest

from misesetup.cli.cli import parse_args, run_cli


class TestCli:
    def test_default_command_is_run(self):
        assert parse_args([]).command == "run"
        assert parse_args(["save"]).command == "save"

    def test_unknown_command(self):
        with pytest.raises(SystemExit):
            parse_args(["deploy"])

    def test_version(self, capsys):
        run_cli(["--version"])

        assert capsys.readouterr().out.startswith("mise-setup v")

    @patch("misesetup.cli.cli.run_action")
    def test_run_failure_exits_non_zero(self, mock_run_action):
        mock_run_action.side_effect = lambda context, manager: context.set_failed("boom")

        with pytest.raises(SystemExit) as exc_info:
            run_cli(["run"])

        assert exc_info.value.code == 1

    @patch("misesetup.cli.cli.save_mise_cache")
    def test_save(self, mock_save):
        run_cli(["save"])

        mock_save.assert_called_once()
