"""Application factory and app-wide configuration."""

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from millennium.app.api.routes import api_bp
from millennium.core.advisor import ProjectionAdvisor
from millennium.core.config import AppSettings, get_settings


def create_app(
    settings: Optional[AppSettings] = None,
    advisor: Optional[ProjectionAdvisor] = None,
) -> Flask:
    """Build the Flask app instance."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    app.extensions["advisor"] = advisor or ProjectionAdvisor(settings)

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.cors_origin_list}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
