"""
Base Controller Class.
Provides standardized response handling for all controllers.
"""
from typing import Any, Tuple
from flask import jsonify, Response
from imagesource.services.system.logger_service import get_logger

logger = get_logger(__name__)

class BaseController:
    """
    Abstract base class for all controllers.
    Enforces standardized response format.
    """

    def handle_response(self, data: Any, status: int = 200) -> Tuple[Response, int]:
        """
        Standardized success response.
        :param data: The payload to return.
        :param status: HTTP status code (default 200).
        :return: Flask JSON response.
        """
        # Payloads that already carry a `success` flag are returned unchanged
        if isinstance(data, dict) and 'success' in data:
            return jsonify(data), status

        return jsonify({'success': True, 'data': data}), status

    def handle_error(self, message: str, status: int = 500) -> Tuple[Response, int]:
        """
        Standardized error response.
        """
        if status >= 500:
            logger.error(f"Controller error ({status}): {message}")
        else:
            logger.warning(f"Controller error ({status}): {message}")
        return jsonify({'success': False, 'error': message}), status
