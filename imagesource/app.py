"""
Main Flask application for the Remote Image Source.
Serves images from remote URLs or uploaded payloads through feature blueprints.
"""
import os
import time
import uuid
from typing import Optional
from flask import Flask, request, g
from flask_cors import CORS
from flask_compress import Compress
from flask_talisman import Talisman

# Initialize logging service FIRST (before other imports)
from imagesource.services.system.logger_service import get_logger, log_request
logger = get_logger(__name__)

from imagesource.config.env_config import load_env_file, get_source_config
from imagesource.features.sources.domain.source_config import SourceConfig
from imagesource.features.sources.index import build_registry, build_sources_blueprint
from imagesource.features.system.index import build_system_blueprint
from imagesource.services.system.security import configure_limiter


def _resolve_allowed_origins():
    raw_origins = os.getenv('CORS_ORIGINS')
    if not raw_origins or raw_origins.strip() == '*':
        return '*'

    origins = [origin.strip() for origin in raw_origins.split(',') if origin.strip()]
    return origins or '*'


def create_app(source_config: Optional[SourceConfig] = None) -> Flask:
    """
    Build the Flask application.

    Args:
        source_config: Image source configuration; read from the environment when omitted
    """
    if source_config is None:
        load_env_file()
        source_config = get_source_config()

    app = Flask(__name__)

    @app.before_request
    def _log_request_start():
        g.request_start = time.time()
        g.request_id = uuid.uuid4().hex

    @app.after_request
    def _log_request_end(response):
        duration_ms = None
        if hasattr(g, 'request_start'):
            duration_ms = round((time.time() - g.request_start) * 1000, 2)

        log_request(
            logger,
            request.method,
            request.path,
            status=response.status_code,
            request_id=getattr(g, 'request_id', None),
            request_query=request.query_string.decode('utf-8', errors='ignore') if request.query_string else '',
            request_duration_ms=duration_ms,
            remote_addr=request.headers.get('X-Forwarded-For', request.remote_addr),
        )
        return response

    is_production = os.getenv('ENVIRONMENT') == 'production'

    # Images and JSON only; block framing and foreign resources
    csp = {
        'default-src': ["'self'"],
        'frame-ancestors': ["'none'"],
        'form-action': ["'self'"],
    }

    Talisman(
        app,
        force_https=is_production,
        content_security_policy=csp,
        strict_transport_security=is_production,
        session_cookie_secure=is_production,
        session_cookie_http_only=True
    )

    configure_limiter(app)

    Compress(app)

    CORS(
        app,
        resources={r"/*": {"origins": _resolve_allowed_origins()}},
        expose_headers='*',
        allow_headers='*',
        methods=['GET', 'POST', 'PUT', 'OPTIONS']
    )

    registry = build_registry(source_config)
    app.register_blueprint(build_sources_blueprint(registry))
    app.register_blueprint(build_system_blueprint(registry, source_config))

    return app


if __name__ == '__main__':
    host = os.getenv('HOST', '0.0.0.0')
    port = int(os.getenv('PORT', '5000'))

    logger.info(
        "Starting Flask server",
        extra={
            'host': host,
            'port': port,
            'environment': os.getenv('ENVIRONMENT', 'development'),
        }
    )

    create_app().run(debug=False, host=host, port=port, threaded=True)
