"""
AWS Lambda entry point for the Serverless User API
==================================================
API Gateway invokes :func:`lambda_handler` once per HTTP request.  The
DynamoDB resource, the table handle and the service built on top of them
are created on the first invocation and reused by every later invocation
in the same Lambda process.

Environment variables: see :mod:`user_api.config` (TABLE_NAME is required).
Handler string: ``user_api.handler.lambda_handler``.
"""

from functools import lru_cache

import boto3
from aws_lambda_powertools import Logger

from user_api.config import SERVICE_NAME, Settings
from user_api.router import RequestRouter
from user_api.service import UserService
from user_api.storage import UserTable

logger = Logger(service=SERVICE_NAME)


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    return Settings.from_env()


@lru_cache(maxsize=None)
def get_router() -> RequestRouter:
    """Build the process-wide router (and its DynamoDB table handle) once."""
    settings = get_settings()
    dynamodb = boto3.resource(
        "dynamodb",
        region_name=settings.region,
        endpoint_url=settings.endpoint_url,
    )
    table = dynamodb.Table(settings.table_name)
    logger.info("DynamoDB table handle created", extra={"table": settings.table_name, "region": settings.region})
    service = UserService(UserTable(table), lookup_failure_policy=settings.lookup_failure_policy)
    return RequestRouter(service)


@logger.inject_lambda_context
def lambda_handler(event, context):
    """
    Main Lambda handler function - entry point for all API Gateway requests.

    Parameters:
        event (dict): API Gateway proxy event (REST v1 or HTTP API v2)
        context: Lambda runtime context

    Returns:
        dict: API Gateway proxy response with statusCode, headers and a
              JSON string body
    """
    router = get_router()
    if get_settings().log_event:
        logger.info("Event received", extra={"event": event})
    return router.handle(event)
