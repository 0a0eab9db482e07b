"""
API exception handler.

Every error leaves the API in the {success, message, errors?} envelope.
"""
import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .permissions import get_required_permission

logger = logging.getLogger(__name__)


def _message(detail):
    if isinstance(detail, dict):
        detail = detail.get("detail", detail)
    if isinstance(detail, (list, dict)):
        return None
    return str(detail)


def api_exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER.

    Serializer validation errors become 422 with field errors; anything DRF
    does not know how to handle is logged and answered with a 500 envelope.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception(
            "Unhandled API error view=%s error=%s",
            view.__class__.__name__ if view else "-", exc,
        )
        return Response(
            {"success": False, "message": "Internal server error."},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    payload = {"success": False}

    if isinstance(exc, exceptions.ValidationError):
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        payload["message"] = "The given data was invalid."
        payload["errors"] = response.data
    elif isinstance(exc, exceptions.PermissionDenied):
        payload["message"] = _message(exc.detail)
        request, view = context.get("request"), context.get("view")
        permission = get_required_permission(request, view) if request and view else None
        if permission:
            payload["errors"] = {"required_permission": permission}
    else:
        payload["message"] = _message(response.data) or "Error occurred."
        if isinstance(response.data, dict) and "messages" in response.data:
            payload["errors"] = response.data["messages"]

    response.data = payload
    return response
