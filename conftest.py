"""
Global pytest configuration and fixtures.
Provides service fixtures for proper dependency injection in tests.
"""

import os

import pytest
from flask import Flask
from flask_socketio import SocketIO

# Ensure testing environment
os.environ['TESTING'] = '1'


@pytest.fixture(scope="function", autouse=True)
def reset_global_container():
    """Reset the global container and settings cache before each test."""
    from container import reset_container, configure_container
    from config_factory import ConfigurationFactory
    from src.config.game_settings import reset_game_settings

    reset_container()
    reset_game_settings()

    try:
        from app import socketio as app_socketio
        config_factory = ConfigurationFactory()
        config_factory.load_from_environment()
        configure_container(socketio=app_socketio, config=config_factory.to_dict())
    except (ImportError, Exception):
        # Unit tests that don't need the app still run without it
        pass

    yield


@pytest.fixture(scope="session")
def app():
    """Create Flask app for testing."""
    from app import app as flask_app
    return flask_app


@pytest.fixture(scope="session")
def socketio():
    """Create SocketIO instance for testing."""
    from app import socketio as socketio_instance
    return socketio_instance


@pytest.fixture(scope="function")
def fake_trivia_client():
    """In-memory trivia source with three categories and plenty of questions."""
    from tests.factories.trivia_factory import FakeTriviaClient
    return FakeTriviaClient()


@pytest.fixture(scope="function")
def container(fake_trivia_client):
    """Service container whose trivia source is the in-memory fake."""
    from container import configure_container
    from config_factory import ConfigurationFactory

    test_app = Flask(__name__)
    test_socketio = SocketIO(test_app, async_mode='eventlet')

    config = ConfigurationFactory().to_dict()
    test_container = configure_container(socketio=None, config=config)
    test_container.set_external_dependency('socketio', test_socketio)
    test_container.set_external_dependency('TriviaApiClient', fake_trivia_client)

    test_container.get('GameManager').add_state_listener(
        test_container.get('BroadcastService').broadcast_game_state
    )
    return test_container


@pytest.fixture(scope="function")
def game_store(container):
    """Provide GameStore through dependency injection."""
    return container.get('GameStore')


@pytest.fixture(scope="function")
def game_manager(container):
    """Provide GameManager through dependency injection."""
    return container.get('GameManager')


@pytest.fixture(scope="function")
def session_service(container):
    """Provide SessionService through dependency injection."""
    return container.get('SessionService')


@pytest.fixture(scope="function")
def broadcast_service(container):
    """Provide BroadcastService through dependency injection."""
    return container.get('BroadcastService')


@pytest.fixture(scope="function")
def validation_service(container):
    """Provide ValidationService through dependency injection."""
    return container.get('ValidationService')


@pytest.fixture(scope="function")
def error_response_factory(container):
    """Provide ErrorResponseFactory through dependency injection."""
    return container.get('ErrorResponseFactory')
