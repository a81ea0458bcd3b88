# rumble/test_config.py
import os
import tempfile
import unittest
from unittest import mock

from rumble.config import DEFAULT_PORT, ConfigError, load_config

NO_ENV_FILE = ["--env-file", "/nonexistent/.env"]


class TestLoadConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = load_config(NO_ENV_FILE, environ={})
        self.assertEqual(cfg.host, "0.0.0.0")
        self.assertEqual(cfg.port, DEFAULT_PORT)
        self.assertEqual(cfg.log_level, "INFO")
        self.assertIsNone(cfg.log_file)

    def test_environment(self):
        env = {"RUMBLE_HOST": "127.0.0.1", "RUMBLE_PORT": "9200",
               "RUMBLE_READ_TIMEOUT": "2.5", "RUMBLE_LOG_LEVEL": "debug"}
        cfg = load_config(NO_ENV_FILE, environ=env)
        self.assertEqual((cfg.host, cfg.port, cfg.read_timeout_s, cfg.log_level),
                         ("127.0.0.1", 9200, 2.5, "DEBUG"))

    def test_cli_wins_over_environment(self):
        cfg = load_config(["--port", "9300", "--host", "::1"] + NO_ENV_FILE,
                          environ={"RUMBLE_PORT": "9200", "RUMBLE_HOST": "127.0.0.1"})
        self.assertEqual((cfg.host, cfg.port), ("::1", 9300))

    def test_invalid_values(self):
        for argv in (["--port", "abc"], ["--port", "70000"], ["--port", "-1"],
                     ["--read-timeout", "0"], ["--read-timeout", "x"], ["--log-level", "LOUD"]):
            with self.assertRaises(ConfigError, msg=argv):
                load_config(argv + NO_ENV_FILE, environ={})

    def test_dotenv_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, ".env")
            with open(path, "w", encoding="utf-8") as f:
                f.write("RUMBLE_PORT=9400\nRUMBLE_LOG_FILE=/tmp/rumble.log\n")
            with mock.patch.dict(os.environ, {}, clear=False):
                os.environ.pop("RUMBLE_PORT", None)
                os.environ.pop("RUMBLE_LOG_FILE", None)
                cfg = load_config(["--env-file", path])
        self.assertEqual(cfg.port, 9400)
        self.assertEqual(cfg.log_file, "/tmp/rumble.log")


if __name__ == "__main__":
    unittest.main()
