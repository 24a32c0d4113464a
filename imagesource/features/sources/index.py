from flask import Blueprint
from imagesource.features.sources.controller.image_controller import ImageController
from imagesource.features.sources.domain.source_config import SourceConfig
from imagesource.features.sources.service.body_image_source import BodyImageSource
from imagesource.features.sources.service.http_image_source import HttpImageSource
from imagesource.features.sources.service.image_source import SourceRegistry


def build_registry(source_config: SourceConfig) -> SourceRegistry:
    # Order matters: a POST carrying ?url= is served from the remote URL
    return SourceRegistry([
        HttpImageSource(source_config),
        BodyImageSource(source_config),
    ])


def build_sources_blueprint(registry: SourceRegistry) -> Blueprint:
    image_controller = ImageController(registry)

    sources_bp = Blueprint('sources', __name__)

    # Image Routes
    sources_bp.add_url_rule('/api/image', view_func=image_controller.get_image, methods=['GET', 'POST', 'PUT'])

    return sources_bp
