from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class GameError(APIException):
    """Base class for failures the game reports to clients."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code = "game_error"


class ValidationFailed(GameError):
    default_detail = "Missing or invalid fields."
    default_code = "validation_failed"


class NotFound(GameError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class NodeNotFound(NotFound):
    default_detail = "Node not found."
    default_code = "node_not_found"


class TeamNotFound(NotFound):
    default_detail = "Team not found."
    default_code = "team_not_found"


class CredentialRejected(GameError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Invalid secret key."
    default_code = "forbidden"


class DomainConflict(GameError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Node state changed, please try again."
    default_code = "conflict"


class AlreadyOwned(DomainConflict):
    default_detail = "This node is already secured by your team."
    default_code = "already_owned"


class NotOwned(DomainConflict):
    default_detail = "This node is not controlled by your team."
    default_code = "not_owned"


class GameInactive(DomainConflict):
    default_detail = "The game is not active."
    default_code = "game_inactive"


class StaleDecision(Exception):
    """Raised inside a transaction when the node changed after it was read."""


def game_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception("Unhandled error in %s", view.__class__.__name__ if view else "view", exc_info=exc)
        return Response(
            {"success": False, "error": "Internal Server Error", "code": "internal_error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    detail = response.data.get("detail") if isinstance(response.data, dict) else None
    if detail is None:
        # Serializer field errors
        response.data = {
            "success": False,
            "error": "Missing or invalid fields.",
            "code": ValidationFailed.default_code,
            "fields": response.data,
        }
        return response
    response.data = {
        "success": False,
        "error": str(detail),
        "code": getattr(detail, "code", None) or getattr(exc, "default_code", "error"),
    }
    return response
