import hmac
from functools import wraps
from flask import request

from jdc_portal.config.settings import Settings
from jdc_portal.middleware.error_middleware import ErrorHandler


class ApiKeyMiddleware:
    """Shared-secret check for endpoints called by the scheduler"""

    @staticmethod
    def require_api_key(f):
        """Decorator checking the X-API-Key header when SCHEDULED_TASKS_API_KEY is set"""
        @wraps(f)
        def decorated_function(*args, **kwargs):
            expected = Settings.SCHEDULED_TASKS_API_KEY
            if expected:
                provided = request.headers.get("X-API-Key") or ""
                if not hmac.compare_digest(provided, expected):
                    return ErrorHandler.handle_authentication_error("Unauthorized")
            return f(*args, **kwargs)

        return decorated_function
