"""
Gunicorn configuration for TriviaDuel.
Tuned for Socket.IO with eventlet workers.
"""

import logging
import sys

from config_factory import ConfigError, load_config


def on_starting(server):
    """
    Runs in the master before workers are forked.
    Refuses to start when the configuration is invalid.
    """
    logger = logging.getLogger(__name__)
    try:
        config = load_config()
    except ConfigError as e:
        logger.critical(f"FATAL: Invalid configuration. Server shutting down. Error: {e}")
        sys.exit(1)
    logger.info(
        f"TriviaDuel starting ({config.environment.value}), trivia source {config.trivia_api_url}, "
        f"{config.questions_per_difficulty} questions per difficulty"
    )


# Load configuration (renamed to avoid conflicts with gunicorn's internal 'config')
app_config = load_config()

# Server socket
bind = f"{app_config.host}:{app_config.port}"
backlog = 2048

# Worker processes
workers = 1  # Must be 1: game sessions live in process memory
worker_class = "eventlet"
worker_connections = app_config.worker_connections
timeout = app_config.timeout
keepalive = app_config.keepalive

max_requests = 2000
max_requests_jitter = 100

# Logging
accesslog = "-"
errorlog = "-"
loglevel = app_config.log_level
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'

proc_name = "triviaduel"

# Server mechanics
preload_app = False  # Don't preload for Socket.IO
daemon = False
pidfile = None
