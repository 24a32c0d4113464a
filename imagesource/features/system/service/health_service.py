from datetime import datetime, timezone, timedelta
from imagesource.common.base.base_service import BaseService
from imagesource.features.sources.domain.source_config import SourceConfig
from imagesource.features.sources.service.image_source import SourceRegistry
from imagesource.services.system.logger_service import get_logger

logger = get_logger(__name__)

class HealthService(BaseService):
    def __init__(self, registry: SourceRegistry, source_config: SourceConfig):
        self.registry = registry
        self.source_config = source_config
        self.startup_time = self.now()

    def _get_server_time_payload(self):
        localized = datetime.now(timezone.utc).astimezone()
        offset = localized.utcoffset() or timedelta(0)

        tzinfo = localized.tzinfo
        tz_label = getattr(tzinfo, 'key', None) if tzinfo else None
        if not tz_label and tzinfo:
            tz_label = tzinfo.tzname(localized)

        return {
            'timestamp': localized.isoformat(),
            'timezone': tz_label or 'UTC',
            'utc_offset_minutes': int(offset.total_seconds() // 60)
        }

    def get_health_data(self):
        uptime_duration = self.now() - self.startup_time

        return {
            'status': 'healthy',
            **self._get_server_time_payload(),
            'uptime_seconds': round(uptime_duration.total_seconds(), 2),
            'sources': list(self.registry.names),
            'allowed_origins': len(self.source_config.allowed_origins),
            'max_response_bytes': self.source_config.max_response_bytes,
            'timeout': self.source_config.timeout,
        }
