#!/usr/bin/env python3
"""
Development server runner using Gunicorn with eventlet workers.
Socket.IO behaves better under eventlet than under Flask's development server.
"""

import logging
import os
import subprocess
import sys

logger = logging.getLogger(__name__)


def main():
    """Run the development server with Gunicorn."""
    logging.basicConfig(level=logging.INFO, format='%(message)s')

    os.environ.setdefault('FLASK_ENV', 'development')
    os.environ.setdefault('PORT', '8000')

    try:
        from config_factory import load_config
        config = load_config()
        server_url = f"http://{config.host}:{config.port}"
        trivia_api_url = config.trivia_api_url
    except Exception as e:
        logger.warning(f"Could not load configuration ({e}), showing defaults")
        server_url = f"http://localhost:{os.environ.get('PORT', 8000)}"
        trivia_api_url = os.environ.get('TRIVIA_API_URL', 'https://the-trivia-api.com/v2')

    cmd = [
        'gunicorn',
        '--config', 'gunicorn.conf.py',
        '--reload',
        '--log-level', 'info',
        'wsgi:app'
    ]

    logger.info("Starting TriviaDuel development server with Gunicorn...")
    logger.info(f"Server will be available at: {server_url}")
    logger.info(f"Questions come from: {trivia_api_url}")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Shutting down development server...")
    except subprocess.CalledProcessError as e:
        logger.error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
