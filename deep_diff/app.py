"""
Deep Diff Flask Application
===========================
Application factory mounting the deep diff API.

Run locally with: python -m deep_diff.app
"""

import os
from typing import Optional

from flask import Flask

from config_logging import get_config, get_logger, DeepDiffConfig, APP_NAME
from .routes import dd_blueprint

logger = get_logger('deep_diff.app')

API_PREFIX = '/api/deep-diff'
MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # Revision chains are plain text


def create_app(config: Optional[DeepDiffConfig] = None) -> Flask:
    """Create the Flask app with the deep diff blueprint registered."""
    config = config or get_config()

    is_valid, errors = config.validate()
    if not is_valid:
        for error in errors:
            logger.warning(f"Configuration problem: {error}")

    app = Flask(APP_NAME)
    app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH
    app.register_blueprint(dd_blueprint, url_prefix=API_PREFIX)
    return app


if __name__ == '__main__':
    host = os.environ.get('DEEPDIFF_HOST', '127.0.0.1')
    port = int(os.environ.get('DEEPDIFF_PORT', '5050'))
    create_app().run(host=host, port=port)
