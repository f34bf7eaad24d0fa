"""
Unit tests for CLI module.
"""

import os
import unittest
from unittest.mock import MagicMock, patch

import cli
from cli import build_parser, main
from errors import ConfigError, TerminalFailureError
from models import MigrationResult

ENV = {
    "NF_API_TOKEN": "nf-secret-token",
    "NF_PROJECT_ID": "project-1",
    "NF_SOURCE_ADDON_ID": "source-addon",
    "NF_TARGET_ADDON_ID": "target-addon",
}


class TestCLI(unittest.TestCase):
    """Test CLI argument parsing and entry point."""

    def test_build_parser_defaults(self):
        """Test parser works with no arguments (environment driven)."""
        args = build_parser().parse_args([])

        self.assertIsNone(args.project)
        self.assertIsNone(args.addon_wait)
        self.assertEqual(args.poll_interval, 30)
        self.assertFalse(args.verbose)

    def test_parser_with_all_options(self):
        """Test parser handles all command-line options."""
        args = build_parser().parse_args(
            [
                "--host",
                "https://api.example.com",
                "--api-token",
                "tok",
                "--project",
                "project-1",
                "--source-addon",
                "src",
                "--target-addon",
                "dst",
                "--addon-wait",
                "5",
                "--backup-wait",
                "20",
                "--poll-interval",
                "10",
                "--report",
                "report.json",
                "--log-file",
                "migrate.log",
                "--verbose",
            ]
        )

        self.assertEqual(args.host, "https://api.example.com")
        self.assertEqual(args.api_token, "tok")
        self.assertEqual(args.project, "project-1")
        self.assertEqual(args.source_addon, "src")
        self.assertEqual(args.target_addon, "dst")
        self.assertEqual(args.addon_wait, "5")
        self.assertEqual(args.backup_wait, "20")
        self.assertEqual(args.poll_interval, 10)
        self.assertEqual(args.report, "report.json")
        self.assertEqual(args.log_file, "migrate.log")
        self.assertTrue(args.verbose)

    @patch("cli.BackupMigration")
    @patch("cli.setup_logging")
    @patch("cli.load_dotenv")
    def test_main_runs_migration(self, mock_dotenv, mock_logging, mock_migration):
        """Test main builds config from the environment and runs."""
        runner = MagicMock()
        runner.run.return_value = MigrationResult(status="no_backup")
        mock_migration.return_value = runner

        with patch.dict(os.environ, ENV, clear=True):
            rc = main(["--backup-wait", "20"])

        self.assertEqual(rc, 0)
        mock_dotenv.assert_called_once()
        mock_logging.assert_called_once_with(verbose=False, log_file=None)
        config = mock_migration.call_args[0][0]
        self.assertEqual(config.project_id, "project-1")
        self.assertEqual(config.backup_wait_minutes, 20)
        self.assertEqual(
            mock_migration.call_args.kwargs["run_timestamp_ms"], cli.PROCESS_START_MS
        )
        runner.run.assert_called_once()

    @patch("cli.BackupMigration")
    @patch("cli.setup_logging")
    @patch("cli.load_dotenv")
    def test_main_invalid_wait_fails_before_run(
        self, mock_dotenv, mock_logging, mock_migration
    ):
        """Test a bad wait duration aborts before any client is built."""
        with patch.dict(os.environ, dict(ENV, ADDON_WAIT_DURATION="abc"), clear=True):
            with self.assertRaises(ConfigError):
                main([])

        mock_migration.assert_not_called()

    @patch("cli.BackupMigration")
    @patch("cli.setup_logging")
    @patch("cli.load_dotenv")
    def test_main_negative_poll_interval_fails_before_run(
        self, mock_dotenv, mock_logging, mock_migration
    ):
        """Test a negative poll interval is a config error, not a sleep error."""
        with patch.dict(os.environ, ENV, clear=True):
            with self.assertRaises(ConfigError):
                main(["--poll-interval", "-1"])

        mock_migration.assert_not_called()

    @patch("cli.BackupMigration")
    @patch("cli.setup_logging")
    @patch("cli.load_dotenv")
    def test_main_propagates_migration_errors(
        self, mock_dotenv, mock_logging, mock_migration
    ):
        """Test errors from the run reach the process boundary."""
        mock_migration.return_value.run.side_effect = TerminalFailureError(
            "Backup i1 could not be successfully imported", "i1", "failed"
        )

        with patch.dict(os.environ, ENV, clear=True):
            with self.assertRaises(TerminalFailureError):
                main([])


if __name__ == "__main__":
    unittest.main()
