from imagesource.common.base.base_controller import BaseController
from imagesource.features.system.service.health_service import HealthService
from imagesource.services.system.logger_service import get_logger

logger = get_logger(__name__)

class HealthController(BaseController):
    def __init__(self, health_service: HealthService):
        self.health_service = health_service

    def health_check(self):
        try:
            data = self.health_service.get_health_data()
            logger.debug("Health check", extra={"sources": data.get('sources')})
            return self.handle_response(data)
        except Exception as e:
            return self.handle_error(f"Health check failed: {e}", 500)
