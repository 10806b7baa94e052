import logging

from rest_framework import permissions
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class IsEmployer(permissions.BasePermission):
    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return hasattr(request.user, 'employer')


class IsWorker(permissions.BasePermission):
    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return hasattr(request.user, 'worker')


def api_exception_handler(exc, context):
    """Render every API failure as {"error": ..., "code": ...}."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    detail = getattr(exc, 'detail', None)
    codes = exc.get_codes() if hasattr(exc, 'get_codes') else None
    if isinstance(detail, list) and len(detail) == 1:
        error = str(detail[0])
        code = codes[0] if isinstance(codes, list) and codes else 'invalid'
    elif isinstance(detail, (dict, list)):
        error = detail
        code = codes if isinstance(codes, str) else 'invalid'
    else:
        error = str(detail) if detail is not None else str(exc)
        code = codes if isinstance(codes, str) else getattr(exc, 'default_code', 'error')

    view = context.get('view')
    logger.info(
        f"{view.__class__.__name__ if view else 'API'} failed with "
        f"{response.status_code}: {error}"
    )
    response.data = {'error': error, 'code': code}
    return response
