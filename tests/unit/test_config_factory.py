"""
Configuration Factory Tests
Tests for the centralized configuration management system.
"""

import os
from unittest.mock import patch

import pytest

from config_factory import (
    ConfigurationFactory, AppConfig, Environment, ConfigError,
    load_config, get_config, reset_config
)
from src.config.game_settings import GameSettings, get_game_settings, reset_game_settings
from src.core.game_phases import Difficulty


class TestAppConfig:
    """Test AppConfig dataclass"""

    def test_config_initialization_with_defaults(self):
        config = AppConfig()

        assert config.secret_key == 'dev-secret-key-change-in-production'
        assert config.debug is False
        assert config.port == 5000
        assert config.trivia_api_url == 'https://the-trivia-api.com/v2'
        assert config.trivia_api_timeout == 10.0
        assert config.questions_per_difficulty == 2
        assert (config.easy_points, config.medium_points, config.hard_points) == (10, 15, 20)
        assert config.max_player_name_length == 20
        assert config.strict_transitions is False
        assert config.environment == Environment.DEVELOPMENT

    def test_config_validation_invalid_port(self):
        with pytest.raises(ConfigError, match="Invalid port number"):
            AppConfig(port=0)

        with pytest.raises(ConfigError, match="Invalid port number"):
            AppConfig(port=70000)

    def test_config_validation_trivia_api_url(self):
        with pytest.raises(ConfigError, match="Invalid trivia_api_url"):
            AppConfig(trivia_api_url='ftp://example.com')

    def test_config_validation_trivia_api_timeout(self):
        with pytest.raises(ConfigError, match="Invalid trivia_api_timeout"):
            AppConfig(trivia_api_timeout=0)

        with pytest.raises(ConfigError, match="Invalid trivia_api_timeout"):
            AppConfig(trivia_api_timeout=500)

    def test_config_validation_questions_per_difficulty(self):
        assert AppConfig(questions_per_difficulty=5).questions_per_difficulty == 5

        with pytest.raises(ConfigError, match="Invalid questions_per_difficulty"):
            AppConfig(questions_per_difficulty=0)

        with pytest.raises(ConfigError, match="Invalid questions_per_difficulty"):
            AppConfig(questions_per_difficulty=51)

    def test_config_validation_points(self):
        with pytest.raises(ConfigError, match="Invalid medium_points"):
            AppConfig(medium_points=-1)

    def test_config_validation_production_secret_key(self):
        with pytest.raises(ConfigError, match="Production environment requires a secure SECRET_KEY"):
            AppConfig(
                environment=Environment.PRODUCTION,
                secret_key='dev-secret-key-change-in-production'
            )

    def test_environment_properties(self):
        dev_config = AppConfig(environment=Environment.DEVELOPMENT)
        assert dev_config.is_development is True
        assert dev_config.is_production is False

        prod_config = AppConfig(environment=Environment.PRODUCTION, secret_key='secure-key')
        assert prod_config.is_production is True

        test_config = AppConfig(environment=Environment.TESTING)
        assert test_config.is_testing is True


class TestConfigurationFactory:
    """Test ConfigurationFactory loading"""

    def setup_method(self):
        self.factory = ConfigurationFactory()
        self.factory.reset()

    def teardown_method(self):
        self.factory.reset()

    def test_singleton(self):
        assert ConfigurationFactory() is self.factory

    def test_get_config_before_load_raises(self):
        with pytest.raises(ConfigError, match="Configuration not loaded"):
            self.factory.get_config()

    def test_load_from_environment_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = self.factory.load_from_environment()

        assert config.environment == Environment.DEVELOPMENT
        assert config.debug is True
        assert config.trivia_api_url == 'https://the-trivia-api.com/v2'

    def test_load_from_environment_trivia_settings(self):
        env = {
            'TRIVIA_API_URL': 'http://localhost:9000/v2',
            'TRIVIA_API_TIMEOUT': '2.5',
            'QUESTIONS_PER_DIFFICULTY': '3',
            'MEDIUM_POINTS': '25',
            'STRICT_TRANSITIONS': 'true'
        }
        with patch.dict(os.environ, env, clear=True):
            config = self.factory.load_from_environment()

        assert config.trivia_api_url == 'http://localhost:9000/v2'
        assert config.trivia_api_timeout == 2.5
        assert config.questions_per_difficulty == 3
        assert config.medium_points == 25
        assert config.strict_transitions is True

    def test_invalid_numbers_fall_back_to_defaults(self):
        env = {'PORT': 'abc', 'TRIVIA_API_TIMEOUT': 'slow'}
        with patch.dict(os.environ, env, clear=True):
            config = self.factory.load_from_environment()

        assert config.port == 5000
        assert config.trivia_api_timeout == 10.0

    def test_env_prefix(self):
        with patch.dict(os.environ, {'TRIVIADUEL_HARD_POINTS': '40'}, clear=True):
            config = self.factory.load_from_environment('TRIVIADUEL_')
        assert config.hard_points == 40

    def test_production_environment(self):
        env = {'FLASK_ENV': 'production', 'SECRET_KEY': 'really-secret'}
        with patch.dict(os.environ, env, clear=True):
            config = self.factory.load_from_environment()

        assert config.is_production is True
        assert config.debug is False

    def test_production_without_secret_fails(self):
        with patch.dict(os.environ, {'FLASK_ENV': 'production'}, clear=True):
            with pytest.raises(ConfigError):
                self.factory.load_from_environment()

    def test_testing_environment(self):
        with patch.dict(os.environ, {'FLASK_ENV': 'testing', 'PORT': '8080'}, clear=True):
            config = self.factory.load_from_environment()

        assert config.port == 8080
        assert config.environment == Environment.TESTING
        assert config.debug is True

    def test_invalid_value_fails_validation(self):
        with patch.dict(os.environ, {'QUESTIONS_PER_DIFFICULTY': '0'}, clear=True):
            with pytest.raises(ConfigError, match="Invalid questions_per_difficulty"):
                self.factory.load_from_environment()

    def test_reset_drops_config(self):
        with patch.dict(os.environ, {}, clear=True):
            self.factory.load_from_environment()
        self.factory.reset()

        with pytest.raises(ConfigError):
            self.factory.get_config()

    def test_to_dict_serializes_environment(self):
        with patch.dict(os.environ, {'FLASK_ENV': 'testing'}, clear=True):
            self.factory.load_from_environment()
        config_dict = self.factory.to_dict()

        assert config_dict['environment'] == 'testing'
        assert config_dict['trivia_api_timeout'] == 10.0

    def test_flask_config(self):
        with patch.dict(os.environ, {'SECRET_KEY': 'abc'}, clear=True):
            self.factory.load_from_environment()
        flask_config = self.factory.get_flask_config()

        assert flask_config['SECRET_KEY'] == 'abc'
        assert flask_config['TRIVIA_API_URL'] == 'https://the-trivia-api.com/v2'


class TestGlobalConfigFunctions:

    def teardown_method(self):
        reset_config()

    def test_load_and_get(self):
        with patch.dict(os.environ, {'PORT': '6000'}, clear=True):
            load_config()
        assert get_config().port == 6000


class TestGameSettings:

    def teardown_method(self):
        reset_game_settings()
        reset_config()

    def test_reads_from_app_config(self):
        settings = GameSettings(AppConfig(easy_points=1, medium_points=2, hard_points=3,
                                          questions_per_difficulty=4))

        assert settings.difficulty_points == {
            Difficulty.EASY: 1, Difficulty.MEDIUM: 2, Difficulty.HARD: 3
        }
        assert settings.questions_per_difficulty == 4
        assert settings.difficulties == [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD]

    def test_defaults_without_loaded_config(self):
        reset_config()
        settings = GameSettings()

        assert settings.difficulty_points[Difficulty.MEDIUM] == 15
        assert settings.trivia_api_url == 'https://the-trivia-api.com/v2'
        assert settings.trivia_api_timeout == 10.0
        assert settings.strict_transitions is False

    def test_get_game_settings_is_cached(self):
        reset_game_settings()
        assert get_game_settings() is get_game_settings()
