import os
import logging
from typing import Dict, List
from dotenv import load_dotenv
from pathlib import Path
from .exceptions import ConfigError
from .logging_config import DEFAULT_FORMAT
from .paths import get_config_path

logger = logging.getLogger(__name__)

# Seven minutes, generous enough to cover a server's PING interval
DEFAULT_READ_TIMEOUT = 7 * 60

TRUE_VALUES = ('true', 'yes', 'on', '1')
FALSE_VALUES = ('false', 'no', 'off', '0')

class BotConfig:
    """Settings read from a key=value file, plus environment overrides"""

    def __init__(self, path):
        load_dotenv(get_config_path('.env'))
        self.path = Path(path)
        self._load_config(self._read_pairs())
        self._load_environment()

    def _read_pairs(self) -> Dict[str, str]:
        """Read key=value pairs, skipping blank lines and # comments"""
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                lines = f.read().splitlines()
        except OSError as e:
            raise ConfigError(f"error reading file: {self.path}: {e}")
        except UnicodeDecodeError as e:
            raise ConfigError(f"error decoding file: {self.path}: {e}")

        pairs = {}
        for raw in lines:
            text = raw.strip()
            if not text or text.startswith('#'):
                continue

            if '=' not in text:
                raise ConfigError(f"malformed line: {text}")
            key, value = text.split('=', 1)
            key = key.strip()
            value = value.strip()

            if not key:
                raise ConfigError(f"key is blank: {text}")

            # Blank values are allowed here; required keys are checked later
            if key in pairs:
                raise ConfigError(f"duplicate key: {key}")

            pairs[key] = value

        return pairs

    def _load_config(self, pairs: Dict[str, str]):
        """Validate the parsed pairs and populate settings"""
        self.CHANNELS = self._parse_channels(pairs.get('channels', ''))

        self.NICK = pairs.get('nick', '')
        if not self.NICK:
            raise ConfigError("you must specify a nick")

        self.SERVER_HOST = pairs.get('server-host', '')
        if not self.SERVER_HOST:
            raise ConfigError("you must specify a server-host")

        try:
            self.SERVER_PORT = int(pairs.get('server-port', ''))
        except ValueError:
            raise ConfigError(f"invalid server-port: {pairs.get('server-port', '')!r}")
        if not 0 < self.SERVER_PORT < 65536:
            raise ConfigError(f"server-port out of range: {self.SERVER_PORT}")

        self.USE_TLS = self._parse_bool('tls', pairs.get('tls', 'true'))

    def _load_environment(self):
        """Ambient settings come from the environment (or .env)"""
        raw_timeout = os.getenv('IRC_READ_TIMEOUT', str(DEFAULT_READ_TIMEOUT))
        try:
            self.READ_TIMEOUT = float(raw_timeout)
        except ValueError:
            raise ConfigError(f"invalid IRC_READ_TIMEOUT: {raw_timeout!r}")
        if self.READ_TIMEOUT <= 0:
            raise ConfigError(f"IRC_READ_TIMEOUT must be positive: {raw_timeout!r}")

        # Logging configuration
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.LOG_FORMAT = os.getenv('LOG_FORMAT', DEFAULT_FORMAT)
        self.LOG_TO_FILE = os.getenv('LOG_TO_FILE', 'false').lower() == 'true'

    @staticmethod
    def _parse_channels(raw: str) -> List[str]:
        channels = []
        for channel in raw.split(','):
            channel = channel.strip()
            if not channel:
                continue
            if not channel.startswith('#'):
                raise ConfigError(f"malformed channel name: {channel}")
            channels.append(channel)

        if not channels:
            raise ConfigError("you must specify at least one channel")
        return channels

    @staticmethod
    def _parse_bool(key: str, raw: str) -> bool:
        value = raw.lower()
        if value in TRUE_VALUES:
            return True
        if value in FALSE_VALUES:
            return False
        raise ConfigError(f"invalid {key}: {raw!r}")

    def describe(self) -> str:
        """One line summary, safe to log"""
        scheme = "ircs" if self.USE_TLS else "irc"
        return (f"{self.NICK} on {scheme}://{self.SERVER_HOST}:{self.SERVER_PORT} "
                f"in {', '.join(self.CHANNELS)}")

def load_config(path) -> BotConfig:
    """Load and validate the configuration file at path"""
    config = BotConfig(path)
    logger.debug(f"Loaded configuration from {config.path}: {config.describe()}")
    return config
