from flask import Blueprint
from imagesource.features.sources.domain.source_config import SourceConfig
from imagesource.features.sources.service.image_source import SourceRegistry
from imagesource.features.system.controller.health_controller import HealthController
from imagesource.features.system.service.health_service import HealthService


def build_system_blueprint(registry: SourceRegistry, source_config: SourceConfig) -> Blueprint:
    health_service = HealthService(registry, source_config)
    health_controller = HealthController(health_service)

    system_bp = Blueprint('system', __name__)

    # Health Routes
    system_bp.add_url_rule('/health', view_func=health_controller.health_check, methods=['GET'])
    system_bp.add_url_rule('/api/health', view_func=health_controller.health_check, methods=['GET'])

    return system_bp
