"""
Unit tests for configuration.
"""

import unittest
from argparse import Namespace

from config import MigrationConfig, parse_positive_int
from errors import ConfigError

ENV = {
    "NF_HOST": "https://api.example.com",
    "NF_API_TOKEN": "nf-secret-token",
    "NF_PROJECT_ID": "project-1",
    "NF_SOURCE_ADDON_ID": "source-addon",
    "NF_TARGET_ADDON_ID": "target-addon",
}


def make_args(**overrides):
    values = dict(
        host=None,
        api_token=None,
        project=None,
        source_addon=None,
        target_addon=None,
        addon_wait=None,
        backup_wait=None,
        poll_interval=30,
        report=None,
        verbose=False,
    )
    values.update(overrides)
    return Namespace(**values)


class TestMigrationConfig(unittest.TestCase):
    """Test MigrationConfig data model."""

    def test_config_defaults(self):
        """Test default configuration values."""
        config = MigrationConfig(
            api_token="t",
            project_id="p",
            source_addon_id="s",
            target_addon_id="d",
        )
        self.assertEqual(config.host, "https://api.northflank.com")
        self.assertEqual(config.addon_wait_minutes, 3)
        self.assertEqual(config.backup_wait_minutes, 15)
        self.assertEqual(config.poll_interval, 30)
        self.assertIsNone(config.report_path)
        self.assertFalse(config.verbose)

    def test_from_env(self):
        config = MigrationConfig.from_env(ENV)

        self.assertEqual(config.host, "https://api.example.com")
        self.assertEqual(config.api_token, "nf-secret-token")
        self.assertEqual(config.project_id, "project-1")
        self.assertEqual(config.source_addon_id, "source-addon")
        self.assertEqual(config.target_addon_id, "target-addon")
        self.assertEqual(config.addon_wait_minutes, 3)
        self.assertEqual(config.backup_wait_minutes, 15)

    def test_from_env_wait_overrides(self):
        env = dict(ENV, ADDON_WAIT_DURATION="5", BACKUP_WAIT_DURATION="30")

        config = MigrationConfig.from_env(env)

        self.assertEqual(config.addon_wait_minutes, 5)
        self.assertEqual(config.backup_wait_minutes, 30)

    def test_from_env_default_host(self):
        env = {k: v for k, v in ENV.items() if k != "NF_HOST"}

        self.assertEqual(
            MigrationConfig.from_env(env).host, "https://api.northflank.com"
        )

    def test_from_env_missing_required(self):
        for name in (
            "NF_API_TOKEN",
            "NF_PROJECT_ID",
            "NF_SOURCE_ADDON_ID",
            "NF_TARGET_ADDON_ID",
        ):
            with self.subTest(name=name):
                env = {k: v for k, v in ENV.items() if k != name}
                with self.assertRaises(ConfigError) as ctx:
                    MigrationConfig.from_env(env)
                self.assertIn(name, str(ctx.exception))

    def test_from_env_invalid_wait_duration(self):
        for raw in ("abc", "2.5", "0", "-1"):
            with self.subTest(raw=raw):
                with self.assertRaises(ConfigError):
                    MigrationConfig.from_env(dict(ENV, ADDON_WAIT_DURATION=raw))
                with self.assertRaises(ConfigError):
                    MigrationConfig.from_env(dict(ENV, BACKUP_WAIT_DURATION=raw))

    def test_from_args_overrides_env(self):
        args = make_args(
            project="project-2",
            target_addon="other-target",
            addon_wait="4",
            poll_interval=10,
            report="report.json",
            verbose=True,
        )

        config = MigrationConfig.from_args(args, ENV)

        self.assertEqual(config.project_id, "project-2")
        self.assertEqual(config.source_addon_id, "source-addon")
        self.assertEqual(config.target_addon_id, "other-target")
        self.assertEqual(config.addon_wait_minutes, 4)
        self.assertEqual(config.backup_wait_minutes, 15)
        self.assertEqual(config.poll_interval, 10)
        self.assertEqual(config.report_path, "report.json")
        self.assertTrue(config.verbose)

    def test_from_args_invalid_wait_duration(self):
        with self.assertRaises(ConfigError):
            MigrationConfig.from_args(make_args(backup_wait="soon"), ENV)

    def test_from_args_rejects_non_positive_poll_interval(self):
        for raw in (0, -1, "soon"):
            with self.subTest(raw=raw):
                with self.assertRaises(ConfigError):
                    MigrationConfig.from_args(make_args(poll_interval=raw), ENV)

    def test_describe_masks_token(self):
        described = MigrationConfig.from_env(ENV).describe()

        self.assertEqual(described["api_token"], "nf-s****")
        self.assertNotIn("nf-secret-token", str(described))
        self.assertEqual(described["project_id"], "project-1")

    def test_parse_positive_int(self):
        self.assertEqual(parse_positive_int("X", "7"), 7)
        self.assertEqual(parse_positive_int("X", 7), 7)


if __name__ == "__main__":
    unittest.main()
