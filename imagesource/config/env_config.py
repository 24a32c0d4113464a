"""
Environment configuration loader for the Remote Image Source
Loads source settings from the .env file and process environment
"""

import os
from typing import Optional

from dotenv import load_dotenv

from imagesource.features.sources.domain.source_config import SourceConfig
from imagesource.services.system.logger_service import get_logger, log_error

logger = get_logger(__name__)


def _project_root() -> str:
    # imagesource/config/ -> project root
    script_dir = os.path.dirname(os.path.abspath(__file__))
    return os.path.dirname(os.path.dirname(script_dir))


def load_env_file(env_path: str = None) -> bool:
    """
    Load environment variables from .env file

    Variables already present in the process environment win over the file.

    Args:
        env_path: Path to .env file (default: .env in project root)

    Returns:
        True if a .env file was found and loaded
    """
    if env_path is None:
        env_path = os.path.join(_project_root(), '.env')

    if not os.path.exists(env_path):
        logger.debug("No .env file found", extra={"path": str(env_path)})
        return False

    loaded = load_dotenv(env_path, override=False)
    logger.info("Loaded .env file", extra={"path": str(env_path)})
    return loaded


def _optional_int(name: str) -> Optional[int]:
    raw = (os.getenv(name) or '').strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer number of bytes, got {raw!r}")


def _optional_float(name: str) -> Optional[float]:
    raw = (os.getenv(name) or '').strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}")


def get_source_config() -> SourceConfig:
    """
    Build the image source configuration from the environment

    ALLOWED_ORIGINS is a comma separated list of scheme://host[:port] entries.
    An empty or absent list leaves origins unrestricted.

    Returns:
        Immutable SourceConfig

    Raises:
        ValueError: If an origin or a numeric setting is malformed
    """
    raw_origins = os.getenv('ALLOWED_ORIGINS', '')
    origins = [origin.strip() for origin in raw_origins.split(',') if origin.strip()]

    config = SourceConfig.from_origins(
        origins,
        max_response_bytes=_optional_int('HTTP_SOURCE_MAX_BYTES'),
        timeout=_optional_float('HTTP_SOURCE_TIMEOUT'),
    )

    if config.restricts_origins:
        logger.info("Remote origins restricted", extra={"allowed_origins": [str(o) for o in config.allowed_origins]})
    else:
        logger.warning("ALLOWED_ORIGINS not set - remote images may be fetched from any origin")

    if config.timeout is None:
        logger.warning("HTTP_SOURCE_TIMEOUT not set - remote fetches have no deadline")

    return config


def create_env_template():
    """Create .env file from template if it doesn't exist"""
    project_root = _project_root()
    env_path = os.path.join(project_root, '.env')
    template_path = os.path.join(project_root, '.env.template')

    if not os.path.exists(env_path) and os.path.exists(template_path):
        try:
            with open(template_path, 'r', encoding='utf-8') as template:
                content = template.read()
            with open(env_path, 'w', encoding='utf-8') as env_file:
                env_file.write(content)
            logger.info("Created .env file", extra={"path": str(env_path)})
        except OSError as e:
            log_error(logger, e, {"context": "Error creating .env file"})


if __name__ == "__main__":
    import sys

    if len(sys.argv) > 1 and sys.argv[1] == 'create':
        create_env_template()
    else:
        load_env_file()
        config = get_source_config()
        logger.info("Environment configuration loaded", extra={"config": str(config)})
