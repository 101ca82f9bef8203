from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from dotenv import load_dotenv
from flask import Flask, jsonify

load_dotenv(Path.cwd() / ".env")

from .config import get_config
from .extensions import init_extensions
from .utils.json import ORJSONProvider
from .utils.logging import configure_logging


def create_app(config_name: str | None = None, config_overrides: Mapping[str, Any] | None = None) -> Flask:
    config_class = get_config(config_name)
    app = Flask(__name__)
    app.config.from_object(config_class)
    if config_overrides:
        app.config.update(config_overrides)

    app.json = ORJSONProvider(app)

    configure_logging(app)
    init_extensions(app)

    from .api import register_blueprints
    register_blueprints(app)

    register_error_handlers(app)

    app.logger.info(f"Report template configured at {app.config['TEMPLATE_PATH']}")
    return app


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(413)
    def handle_too_large(error):
        return jsonify({"error": "Request body too large"}), 413

    @app.errorhandler(500)
    def handle_server_error(error):
        app.logger.exception("Unhandled server error")
        return jsonify({"error": "Internal server error"}), 500
