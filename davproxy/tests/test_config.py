import os.path

from configparser import ConfigParser

from davproxy.config import AuthConfig, CacheConfig, Config, RemoteConfig
from davproxy.constants import DEFAULT_REMOTE_URL


def test_cache_config_defaults():
    parser = ConfigParser()
    parser.read_string("[cache]")

    cfg = CacheConfig.load(parser["cache"])

    assert cfg.path == os.path.expanduser("~/.davproxy/cache")


def test_cache_config_load():
    parser = ConfigParser()
    parser.read_string(
        """
        [cache]
        path = ~/test
        """
    )

    cfg = CacheConfig.load(parser["cache"])

    assert cfg.path == os.path.expanduser("~/test")


def test_remote_config_load():
    parser = ConfigParser()
    parser.read_string(
        """
        [remote]
        url = https://example.com/dav
        username = user
        password = secret
        timeout = 12.5
        """
    )

    cfg = RemoteConfig.load(parser["remote"])

    assert cfg.url == "https://example.com/dav"
    assert cfg.username == "user"
    assert cfg.password == "secret"
    assert cfg.timeout == 12.5


def test_remote_password_hidden():
    cfg = RemoteConfig(password="secret")

    assert "secret" not in repr(cfg)


def test_auth_config_validity():
    assert AuthConfig().is_valid()
    assert not AuthConfig(enabled=True).is_valid()
    assert not AuthConfig(enabled=True, username="user").is_valid()
    assert AuthConfig(enabled=True, username="user", password="pass").is_valid()


def test_config_defaults(tmpdir):
    cfg = Config.load(str(tmpdir / "nonexistent"))

    assert cfg.remote.url == DEFAULT_REMOTE_URL
    assert cfg.server.port == 8080
    assert not cfg.auth.enabled


def test_config_load(tmp_path):
    (tmp_path / "config").write_text(
        """
        [cache]
        path = ~/test

        [server]
        host = 127.0.0.1
        port = 9000

        [auth]
        enabled = yes
        username = user
        password = pass
        """
    )

    cfg = Config.load(str(tmp_path / "config"))

    assert cfg.cache.path == os.path.expanduser("~/test")
    assert cfg.server.host == "127.0.0.1"
    assert cfg.server.port == 9000
    assert cfg.auth.enabled
    assert cfg.auth.username == "user"
    assert cfg.remote.url == DEFAULT_REMOTE_URL


def test_config_load_failure_nonfatal(tmp_path):
    (tmp_path / "config").write_text("blabla")

    cfg = Config.load(str(tmp_path / "config"))

    assert cfg == Config()


def test_config_invalid_value_nonfatal(tmp_path):
    (tmp_path / "config").write_text("[server]\nport = abc\n")

    cfg = Config.load(str(tmp_path / "config"))

    assert cfg.server.port == 8080
