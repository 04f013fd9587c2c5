"""
exceptions.py
-------------
Project-wide DRF exception handler. Every API error leaves as {"error": "..."}.

Mapping:
- ValidationError   -> 400 {"error": "Validation failed", "details": {field: [msgs]}}
- Http404/NotFound  -> 404 {"error": view.not_found_message}
- ParseError        -> 400 {"error": "Invalid JSON body"}
- ProtectedError    -> 409 {"error": view.protected_message}
- other APIException -> its status, {"error": detail}
- anything else     -> 500 {"error": view.failure_messages[action]}, logged with traceback

Views opt in to friendlier messages through class attributes
(not_found_message, protected_message, failure_messages / failure_message).
"""

import logging

from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Internal server error"
INVALID_BODY_MESSAGE = "Invalid JSON body"


def _failure_message(view):
    if view is None:
        return DEFAULT_FAILURE_MESSAGE
    messages = getattr(view, "failure_messages", None) or {}
    action = getattr(view, "action", None)
    if action in messages:
        return messages[action]
    return getattr(view, "failure_message", DEFAULT_FAILURE_MESSAGE)


def api_exception_handler(exc, context):
    view = context.get("view")

    if isinstance(exc, ProtectedError):
        set_rollback()
        message = getattr(view, "protected_message", "Resource is still referenced and cannot be deleted.")
        return Response({"error": message}, status=status.HTTP_409_CONFLICT)

    response = exception_handler(exc, context)

    if response is None:
        logger.exception(
            "Unhandled API error in %s (action=%s)",
            view.__class__.__name__ if view is not None else "unknown view",
            getattr(view, "action", None),
        )
        set_rollback()
        return Response({"error": _failure_message(view)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, exceptions.ValidationError):
        details = response.data
        if not isinstance(details, dict):
            details = {"non_field_errors": details}
        response.data = {"error": "Validation failed", "details": details}
        return response

    if isinstance(exc, exceptions.ParseError):
        # decoder messages stay in the log
        logger.info("Rejected unparseable request body: %s", exc.detail)
        response.data = {"error": INVALID_BODY_MESSAGE}
        return response

    if isinstance(exc, (Http404, exceptions.NotFound)):
        response.data = {"error": getattr(view, "not_found_message", "Not found")}
        return response

    detail = response.data.get("detail") if isinstance(response.data, dict) else response.data
    response.data = {"error": str(detail)}
    return response
