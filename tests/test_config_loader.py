import json
import tempfile
import unittest
from pathlib import Path

from plm_helper.config.loader import (
    CONFIG_FILE_NAME,
    ConfigError,
    PlmConfig,
    get_config_path,
    get_enabled_features,
    is_feature_enabled,
    load_config,
    save_config,
)


class TestConfigLoader(unittest.TestCase):
    """Tests for the configuration loader."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / CONFIG_FILE_NAME

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_file_gives_defaults(self) -> None:
        config = load_config(self.path)
        self.assertEqual(config, PlmConfig())
        self.assertEqual(config.profile, "standard")
        self.assertEqual(config.ai_provider, "none")
        self.assertFalse(config.ai_enabled)

    def test_load_camel_case_keys(self) -> None:
        self.path.write_text(
            json.dumps(
                {
                    "profile": "expert",
                    "language": "tr",
                    "conventionalCommit": True,
                    "aiProvider": "groq",
                    "aiApiKey": "gsk_123",
                    "aiEnabled": True,
                    "aliases": {"s": "status"},
                    "somethingElse": 42,
                }
            )
        )
        config = load_config(self.path)
        self.assertEqual(config.profile, "expert")
        self.assertEqual(config.language, "tr")
        self.assertTrue(config.conventional_commit)
        self.assertEqual(config.ai_provider, "groq")
        self.assertEqual(config.ai_api_key, "gsk_123")
        self.assertTrue(config.ai_enabled)
        self.assertEqual(config.aliases, {"s": "status"})

    def test_null_values_keep_defaults(self) -> None:
        self.path.write_text(json.dumps({"aiModel": None, "theme": None}))
        config = load_config(self.path)
        self.assertIsNone(config.ai_model)
        self.assertEqual(config.theme, "default")

    def test_invalid_files(self) -> None:
        cases = [
            "{invalid}",
            "[1, 2, 3]",
            json.dumps({"aiEnabled": "yes"}),
            json.dumps({"customFeatures": "tag"}),
            json.dumps({"profile": "wizard"}),
            json.dumps({"aiProvider": "skynet"}),
        ]
        for content in cases:
            with self.subTest(content=content):
                self.path.write_text(content)
                with self.assertRaises(ConfigError):
                    load_config(self.path)

    def test_save_writes_camel_case_json(self) -> None:
        config = PlmConfig(profile="custom", custom_features=["tag"], ai_enabled=True)
        written = save_config(config, config_path=self.path)
        self.assertEqual(written, self.path)
        data = json.loads(self.path.read_text())
        self.assertEqual(data["profile"], "custom")
        self.assertEqual(data["customFeatures"], ["tag"])
        self.assertTrue(data["aiEnabled"])
        self.assertNotIn("custom_features", data)
        self.assertEqual(load_config(self.path), config)

    def test_save_failure_raises_config_error(self) -> None:
        missing_dir = Path(self._tmp.name) / "nope" / CONFIG_FILE_NAME
        with self.assertRaises(ConfigError):
            save_config(PlmConfig(), config_path=missing_dir)


class TestFeatures(unittest.TestCase):
    def test_profiles(self) -> None:
        standard = get_enabled_features(PlmConfig())
        expert = get_enabled_features(PlmConfig(profile="expert"))
        custom = get_enabled_features(PlmConfig(profile="custom", custom_features=["tag", "security"]))
        self.assertIn("commit", standard)
        self.assertNotIn("tag", standard)
        self.assertIn("tag", expert)
        self.assertIn("merge", expert)
        self.assertEqual(custom[-2:], ["tag", "security"])

    def test_is_feature_enabled(self) -> None:
        self.assertTrue(is_feature_enabled("push", PlmConfig()))
        self.assertFalse(is_feature_enabled("security", PlmConfig()))
        self.assertTrue(is_feature_enabled("security", PlmConfig(profile="expert")))


def test_local_config_wins(tmp_path):
    home_file = Path.home() / CONFIG_FILE_NAME
    local_file = Path.cwd() / CONFIG_FILE_NAME
    assert get_config_path() == home_file
    local_file.write_text("{}")
    assert get_config_path() == local_file


def test_save_global_and_local(tmp_path):
    home_path = save_config(PlmConfig(theme="dark"))
    local_path = save_config(PlmConfig(theme="ocean"), global_=False)
    assert home_path == Path.home() / CONFIG_FILE_NAME
    assert local_path == Path.cwd() / CONFIG_FILE_NAME
    assert load_config().theme == "ocean"


if __name__ == "__main__":
    unittest.main()
