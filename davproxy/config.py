"""Module for configuration variables with defaults that are overridable by a file."""

from __future__ import annotations

from configparser import ConfigParser, SectionProxy
from dataclasses import dataclass, field
import os

from davproxy.constants import DEFAULT_REMOTE_URL
from davproxy.logger import log


@dataclass
class CacheConfig:
    """Configuration variables related to the local cache directory."""

    path: str = os.path.expanduser("~/.davproxy/cache")

    @staticmethod
    def load(section: SectionProxy) -> CacheConfig:
        """Load overridden variables from a section within a config file."""
        config = CacheConfig()

        config.path = os.path.expanduser(section.get("path", fallback=config.path))

        return config


@dataclass
class RemoteConfig:
    """Configuration variables related to the remote WebDAV server."""

    url: str = DEFAULT_REMOTE_URL
    username: str = ""
    password: str = field(default="", repr=False)

    timeout: float = 30.0

    @staticmethod
    def load(section: SectionProxy) -> RemoteConfig:
        """Load overridden variables from a section within a config file."""
        config = RemoteConfig()

        config.url = section.get("url", fallback=config.url)
        config.username = section.get("username", fallback=config.username)
        config.password = section.get("password", fallback=config.password)

        config.timeout = section.getfloat("timeout", fallback=config.timeout)

        return config


@dataclass
class ServerConfig:
    """Configuration variables related to the WebDAV server exposed by the proxy."""

    host: str = "0.0.0.0"
    port: int = 8080

    @staticmethod
    def load(section: SectionProxy) -> ServerConfig:
        """Load overridden variables from a section within a config file."""
        config = ServerConfig()

        config.host = section.get("host", fallback=config.host)
        config.port = section.getint("port", fallback=config.port)

        return config


@dataclass
class AuthConfig:
    """Configuration variables related to authentication of clients of the proxy."""

    enabled: bool = False
    username: str = ""
    password: str = field(default="", repr=False)

    @staticmethod
    def load(section: SectionProxy) -> AuthConfig:
        """Load overridden variables from a section within a config file."""
        config = AuthConfig()

        config.enabled = section.getboolean("enabled", fallback=config.enabled)
        config.username = section.get("username", fallback=config.username)
        config.password = section.get("password", fallback=config.password)

        return config

    def is_valid(self) -> bool:
        """Check that credentials are configured if authentication is enabled."""
        return not self.enabled or bool(self.username and self.password)


@dataclass
class Config:
    """Configuration variables."""

    cache: CacheConfig = field(default_factory=CacheConfig)
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)

    @staticmethod
    def load(filename: str) -> Config:
        """Load overridden configuration variables from a config file."""
        parser = ConfigParser()

        config = Config()

        try:
            with open(filename, "r") as f:
                parser.read_string(f.read(), filename)

            if "cache" in parser:
                config.cache = CacheConfig.load(parser["cache"])
            if "remote" in parser:
                config.remote = RemoteConfig.load(parser["remote"])
            if "server" in parser:
                config.server = ServerConfig.load(parser["server"])
            if "auth" in parser:
                config.auth = AuthConfig.load(parser["auth"])
        except FileNotFoundError:
            log.info(f"no config file at {filename}")
        except Exception as e:
            # An unreadable config file is not considered a fatal error since we can
            # fall back to defaults.
            log.error(f"failed to read config file {filename}: {e}")
            config = Config()
        else:
            log.info(f"loaded config: {config}")

        return config
