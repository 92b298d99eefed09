"""
Configuration Factory for TriviaDuel

Typed, validated settings read from environment variables, with a single
process-wide factory so every service sees the same values.
"""

import os
import logging
from typing import Any, Callable, Dict, Optional, Tuple
from enum import Enum
from dataclasses import dataclass, fields

DEFAULT_SECRET_KEY = 'dev-secret-key-change-in-production'


class Environment(Enum):
    """Deployment environments"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class ConfigError(Exception):
    """Raised for missing or invalid configuration"""
    pass


@dataclass
class AppConfig:
    """Application settings, validated on construction"""

    # Flask
    secret_key: str = DEFAULT_SECRET_KEY
    debug: bool = False
    flask_env: str = 'development'

    # Server
    host: str = '0.0.0.0'
    port: int = 5000

    # Trivia API
    trivia_api_url: str = 'https://the-trivia-api.com/v2'
    trivia_api_timeout: float = 10.0  # seconds per request
    questions_per_difficulty: int = 2

    # Game rules
    easy_points: int = 10
    medium_points: int = 15
    hard_points: int = 20
    max_player_name_length: int = 20
    strict_transitions: bool = False  # raise instead of ignoring out-of-turn commands

    # Gunicorn
    worker_connections: int = 1000
    timeout: int = 30
    keepalive: int = 2
    log_level: str = 'info'

    environment: Environment = Environment.DEVELOPMENT

    def __post_init__(self):
        self._validate()

    def _validate(self):
        if not 1 <= self.port <= 65535:
            raise ConfigError(f"Invalid port number: {self.port}")

        if not self.trivia_api_url.startswith(('http://', 'https://')):
            raise ConfigError(f"Invalid trivia_api_url: {self.trivia_api_url}")

        if not 0 < self.trivia_api_timeout <= 120:
            raise ConfigError(f"Invalid trivia_api_timeout: {self.trivia_api_timeout}")

        if not 1 <= self.questions_per_difficulty <= 50:
            raise ConfigError(f"Invalid questions_per_difficulty: {self.questions_per_difficulty}")

        for name in ('easy_points', 'medium_points', 'hard_points'):
            value = getattr(self, name)
            if not 0 <= value <= 1000:
                raise ConfigError(f"Invalid {name}: {value}")

        if not 1 <= self.max_player_name_length <= 100:
            raise ConfigError(f"Invalid max_player_name_length: {self.max_player_name_length}")

        if self.environment == Environment.PRODUCTION and self.secret_key == DEFAULT_SECRET_KEY:
            raise ConfigError("Production environment requires a secure SECRET_KEY")

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING


def _parse_bool(value: str) -> bool:
    return value.lower() in ('true', '1', 'yes', 'on')


# AppConfig field -> (environment variable, parser). Defaults come from AppConfig.
ENV_FIELDS: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    'secret_key': ('SECRET_KEY', str),
    'host': ('HOST', str),
    'port': ('PORT', int),
    'trivia_api_url': ('TRIVIA_API_URL', str),
    'trivia_api_timeout': ('TRIVIA_API_TIMEOUT', float),
    'questions_per_difficulty': ('QUESTIONS_PER_DIFFICULTY', int),
    'easy_points': ('EASY_POINTS', int),
    'medium_points': ('MEDIUM_POINTS', int),
    'hard_points': ('HARD_POINTS', int),
    'max_player_name_length': ('MAX_PLAYER_NAME_LENGTH', int),
    'strict_transitions': ('STRICT_TRANSITIONS', _parse_bool),
    'worker_connections': ('WORKER_CONNECTIONS', int),
    'timeout': ('TIMEOUT', int),
    'keepalive': ('KEEPALIVE', int),
    'log_level': ('LOG_LEVEL', str),
}


class ConfigurationFactory:
    """
    Process-wide holder of the active AppConfig.

    Configuration is loaded from the environment; reset() drops it again.
    """

    _instance: Optional['ConfigurationFactory'] = None
    _config: Optional[AppConfig] = None

    def __new__(cls) -> 'ConfigurationFactory':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not hasattr(self, '_initialized'):
            self._logger = logging.getLogger(__name__)
            self._initialized = True

    def _read_env(self, env_prefix: str, key: str, parser: Callable[[str], Any]) -> Any:
        """Parsed value of an environment variable, or None when unset or unparseable."""
        env_key = f"{env_prefix}{key}"
        raw = os.environ.get(env_key)
        if raw is None:
            return None
        try:
            return parser(raw)
        except ValueError:
            self._logger.warning(f"Ignoring invalid value for {env_key}: {raw}")
            return None

    def load_from_environment(self, env_prefix: str = '') -> AppConfig:
        """
        Load configuration from environment variables.

        Args:
            env_prefix: Optional prefix for every variable (e.g. 'TRIVIADUEL_')

        Returns:
            The new active AppConfig

        Raises:
            ConfigError: If a value fails validation
        """
        flask_env = self._read_env(env_prefix, 'FLASK_ENV', str) or 'development'
        try:
            environment = Environment(flask_env)
        except ValueError:
            environment = Environment.PRODUCTION

        values: Dict[str, Any] = {
            'flask_env': flask_env,
            'environment': environment,
            'debug': environment != Environment.PRODUCTION,
        }
        debug = self._read_env(env_prefix, 'DEBUG', _parse_bool)
        if debug is not None:
            values['debug'] = debug

        for name, (key, parser) in ENV_FIELDS.items():
            value = self._read_env(env_prefix, key, parser)
            if value is not None:
                values[name] = value

        self._config = AppConfig(**values)
        self._logger.info(f"Configuration loaded for environment: {environment.value}")
        return self._config

    def get_config(self) -> AppConfig:
        if self._config is None:
            raise ConfigError("Configuration not loaded. Call load_from_environment() first.")
        return self._config

    def reset(self) -> 'ConfigurationFactory':
        self._config = None
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict of the active config, with the environment as its string value."""
        config = self.get_config()
        result = {f.name: getattr(config, f.name) for f in fields(config)}
        result['environment'] = config.environment.value
        return result

    def get_flask_config(self) -> Dict[str, Any]:
        """Values for Flask's app.config.update()."""
        config = self.get_config()
        return {
            'SECRET_KEY': config.secret_key,
            'DEBUG': config.debug,
            'ENV': config.flask_env,
            'TRIVIA_API_URL': config.trivia_api_url,
            'QUESTIONS_PER_DIFFICULTY': config.questions_per_difficulty,
            'MAX_PLAYER_NAME_LENGTH': config.max_player_name_length,
        }


_config_factory = ConfigurationFactory()


def get_config() -> AppConfig:
    return _config_factory.get_config()


def load_config(env_prefix: str = '') -> AppConfig:
    return _config_factory.load_from_environment(env_prefix)


def reset_config() -> ConfigurationFactory:
    return _config_factory.reset()
