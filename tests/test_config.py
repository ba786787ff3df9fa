# tests/test_config.py
"""Test configuration loading"""

from pathlib import Path

import pytest

from youtube_tracks.core.config import (
    DEFAULT_API_URL,
    DEFAULT_BASE_URL,
    DEFAULT_RETRIES,
    load_config,
)
from youtube_tracks.core.exceptions import ConfigError


VALID_CONFIG = """
youtube:
  api_key: "file-key"
  base_url: "https://www.youtube.com/"
  ids_per_request: 25
download:
  retries: 3
logging:
  level: "debug"
"""


@pytest.fixture
def workdir(tmp_path, monkeypatch, no_dotenv):
    """Empty working directory with no .env or API key in the environment"""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_config(directory: Path, content: str) -> Path:
    config_path = directory / "config.yaml"
    config_path.write_text(content, encoding="utf-8")
    return config_path


class TestLoadConfig:
    """Test load_config()"""

    def test_valid_file(self, workdir):
        write_config(workdir, VALID_CONFIG)

        config = load_config()

        assert config.youtube.api_key == "file-key"
        assert config.youtube.base_url == "https://www.youtube.com"
        assert config.youtube.api_url == DEFAULT_API_URL
        assert config.youtube.ids_per_request == 25
        assert config.download.retries == 3
        assert config.download.cookie_file is None
        assert config.logging.level == "DEBUG"
        assert config.logging.directory is None

    def test_explicit_path(self, workdir):
        config_dir = workdir / "elsewhere"
        config_dir.mkdir()
        config_path = write_config(config_dir, VALID_CONFIG)

        assert load_config(config_path).youtube.api_key == "file-key"

    def test_environment_overrides_file(self, workdir, monkeypatch):
        write_config(workdir, VALID_CONFIG)
        monkeypatch.setenv("YOUTUBE_API_KEY", "env-key")

        assert load_config().youtube.api_key == "env-key"

    def test_environment_only(self, workdir, monkeypatch):
        """Without config.yaml every field but the key has a default"""
        monkeypatch.setenv("YOUTUBE_API_KEY", "env-key")

        config = load_config()

        assert config.youtube.api_key == "env-key"
        assert config.youtube.base_url == DEFAULT_BASE_URL
        assert config.youtube.ids_per_request == 50
        assert config.download.retries == DEFAULT_RETRIES
        assert config.logging.level == "INFO"

    def test_missing_api_key(self, workdir):
        with pytest.raises(ConfigError) as exc_info:
            load_config()
        assert exc_info.value.details["field"] == "youtube.api_key"

    def test_missing_explicit_file(self, workdir):
        with pytest.raises(ConfigError):
            load_config(workdir / "missing.yaml")

    def test_invalid_yaml(self, workdir):
        write_config(workdir, "youtube: [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            load_config()
        assert "Invalid YAML" in exc_info.value.message

    def test_not_a_dictionary(self, workdir):
        write_config(workdir, "- just\n- a list\n")

        with pytest.raises(ConfigError):
            load_config()

    @pytest.mark.parametrize("content, field", [
        ("youtube: {api_key: k}\ndownload: {retries: -1}\n", "download.retries"),
        ("youtube: {api_key: k}\ndownload: {retries: many}\n", "download.retries"),
        ("youtube: {api_key: k, ids_per_request: 51}\n", "youtube.ids_per_request"),
        ("youtube: {api_key: k, timeout: 0}\n", "youtube.timeout"),
        ("youtube: {api_key: k, base_url: 'youtube.com'}\n", "youtube.base_url"),
        ("youtube: {api_key: k}\nlogging: {level: LOUD}\n", "logging.level"),
    ])
    def test_invalid_fields(self, workdir, content, field):
        write_config(workdir, content)

        with pytest.raises(ConfigError) as exc_info:
            load_config()
        assert exc_info.value.details["field"] == field

    def test_missing_cookie_file(self, workdir):
        write_config(workdir, "youtube: {api_key: k}\ndownload: {cookie_file: nope.txt}\n")

        with pytest.raises(ConfigError):
            load_config()

    def test_cookie_file_and_log_directory(self, workdir):
        (workdir / "cookies.txt").write_text("# Netscape HTTP Cookie File\n")
        write_config(
            workdir,
            "youtube: {api_key: k}\n"
            "download: {cookie_file: cookies.txt}\n"
            "logging: {directory: logs}\n"
        )

        config = load_config()

        assert config.download.cookie_file == (workdir / "cookies.txt").resolve()
        assert config.logging.directory == (workdir / "logs").resolve()

    def test_config_is_frozen(self, workdir, monkeypatch):
        monkeypatch.setenv("YOUTUBE_API_KEY", "env-key")
        config = load_config()

        with pytest.raises(AttributeError):
            config.youtube.api_key = "other"
