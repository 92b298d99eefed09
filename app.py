"""
TriviaDuel - A two-player, turn-based trivia quiz backed by the Trivia API.
Main Flask application entry point focusing on app creation, dependency injection, and service wiring.
"""

from flask import Flask
from flask_socketio import SocketIO
import os
import logging
import atexit

from container import configure_container
from config_factory import load_config, ConfigurationFactory

# Initialize Flask app
app = Flask(__name__)

# Load and apply configuration
app_config = load_config()
config_factory = ConfigurationFactory()
app.config.update(config_factory.get_flask_config())

# Initialize Socket.IO with environment-aware CORS
# In production, restrict to explicitly allowed origins from env var SOCKETIO_CORS_ALLOWED_ORIGINS (comma-separated)
allowed_origins_env = os.environ.get('SOCKETIO_CORS_ALLOWED_ORIGINS', '')
if app_config.is_production:
    _cors_allowed = [o.strip() for o in allowed_origins_env.split(',') if o.strip()]
    socketio = SocketIO(app, cors_allowed_origins=_cors_allowed or [], async_mode='eventlet')
else:
    socketio = SocketIO(app, cors_allowed_origins="*", async_mode='eventlet')

# Configure logging
logging.basicConfig(level=getattr(logging, app_config.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# Configure service container; this also subscribes broadcasts to game transitions
container = configure_container(socketio=socketio, config=config_factory.to_dict())

services = {
    'game_manager': container.get('GameManager'),
    'game_state_presenter': container.get('GameStatePresenter'),
    'session_service': container.get('SessionService'),
    'broadcast_service': container.get('BroadcastService'),
    'trivia_client': container.get('TriviaApiClient')
}

# Register REST endpoints
from src.routes.api import create_api_blueprint
app.register_blueprint(create_api_blueprint(services))

# Register Socket.IO handlers
from src.handlers.socket_handlers import register_socket_handlers
register_socket_handlers(socketio)


def cleanup_on_exit():
    """Clean up resources on application exit."""
    logger.info("Shutting down TriviaDuel server...")
    services['trivia_client'].close()


atexit.register(cleanup_on_exit)

if __name__ == '__main__':
    logger.info(f"Starting TriviaDuel server on {app_config.host}:{app_config.port}")
    try:
        socketio.run(app, host=app_config.host, port=app_config.port, debug=app_config.debug)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
