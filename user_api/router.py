"""
Request router for API Gateway events.
======================================
Maps the HTTP method of an incoming API Gateway event to one
:class:`~user_api.service.UserService` operation and turns the result (or
the named error) into an API Gateway proxy response.

Both event payload formats are accepted:
- REST API (v1):  event['httpMethod']
- HTTP API (v2):  event['requestContext']['http']['method']

Routes:
- GET    /users              all users
- GET    /users?email=<e>    one user (empty fields if absent)
- POST   /users              create, body {"email", "firstName", "lastName"}
- PUT    /users              update (full replacement), same body
- DELETE /users?email=<e>    delete
"""

import base64
import binascii
import json
from http import HTTPStatus
from typing import Any, Dict, Optional

from aws_lambda_powertools import Logger

from user_api.config import SERVICE_NAME
from user_api.errors import InvalidUserData, UserApiError
from user_api.service import UserService

logger = Logger(service=SERVICE_NAME, child=True)

ERROR_METHOD_NOT_ALLOWED = "method not allowed"

JSON_HEADERS = {"Content-Type": "application/json"}


def api_response(status: int, body: Any = None) -> Dict[str, Any]:
    """Build an API Gateway proxy response; ``None`` gives an empty body."""
    return {
        "statusCode": int(status),
        "headers": dict(JSON_HEADERS),
        "body": "" if body is None else json.dumps(body),
    }


def error_response(status: int, message: str) -> Dict[str, Any]:
    return api_response(status, {"error": message})


def unhandled_method() -> Dict[str, Any]:
    return error_response(HTTPStatus.METHOD_NOT_ALLOWED, ERROR_METHOD_NOT_ALLOWED)


def get_http_method(event: Dict[str, Any]) -> str:
    method = event.get("httpMethod")
    if not method:
        method = ((event.get("requestContext") or {}).get("http") or {}).get("method") or ""
    return method.upper()


def get_query_param(event: Dict[str, Any], name: str) -> Optional[str]:
    # API Gateway sends null rather than {} when there is no query string
    params = event.get("queryStringParameters") or {}
    return params.get(name)


def get_body(event: Dict[str, Any]) -> Optional[str]:
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise InvalidUserData() from exc
    return body


class RequestRouter:
    def __init__(self, service: UserService):
        self._service = service
        self._routes = {
            "GET": self._get,
            "POST": self._post,
            "PUT": self._put,
            "DELETE": self._delete,
        }

    def handle(self, event: Dict[str, Any]) -> Dict[str, Any]:
        """
        Dispatch one API Gateway event and return its proxy response.

        Every :class:`UserApiError` becomes a 400 with ``{"error": message}``.
        Methods other than GET, POST, PUT and DELETE get a fixed 405 without
        touching the service.
        """
        method = get_http_method(event)
        route = self._routes.get(method)
        if route is None:
            logger.info("Unhandled HTTP method", extra={"method": method})
            return unhandled_method()

        logger.info("Handling request", extra={"method": method})
        try:
            return route(event)
        except UserApiError as exc:
            logger.warning("Request failed", extra={"method": method, "error_kind": type(exc).__name__})
            return error_response(HTTPStatus.BAD_REQUEST, str(exc))

    def _get(self, event):
        email = get_query_param(event, "email")
        if email:
            user = self._service.fetch_user(email)
            return api_response(HTTPStatus.OK, user.model_dump())
        users = self._service.fetch_users()
        return api_response(HTTPStatus.OK, [user.model_dump() for user in users])

    def _post(self, event):
        user = self._service.create_user(get_body(event))
        return api_response(HTTPStatus.CREATED, user.model_dump())

    def _put(self, event):
        user = self._service.update_user(get_body(event))
        return api_response(HTTPStatus.OK, user.model_dump())

    def _delete(self, event):
        self._service.delete_user(get_query_param(event, "email") or "")
        return api_response(HTTPStatus.OK)
