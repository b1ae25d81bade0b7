"""
DynamoDB storage adapter for the users table.
=============================================
Wraps the four table operations the API needs (get, scan, put, delete).
Every botocore failure is converted right here into one of the named
errors from :mod:`user_api.errors`, so nothing above this layer has to
know about boto3.

The table is keyed by a single string attribute, ``email``.
"""

from typing import List

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from user_api.config import SERVICE_NAME
from user_api.errors import DeleteFailure, FetchFailure, UserAlreadyExists, WriteFailure
from user_api.models import User

logger = Logger(service=SERVICE_NAME, child=True)

KEY_ATTRIBUTE = "email"


class UserTable:
    """Thin adapter over a boto3 ``dynamodb.Table`` resource."""

    def __init__(self, table):
        self._table = table

    @property
    def name(self):
        return self._table.name

    def get(self, email: str) -> User:
        """
        Point lookup by email.

        Returns an empty :class:`User` if no item is stored under ``email``.
        Raises :class:`FetchFailure` if DynamoDB cannot be reached or rejects
        the request, :class:`DecodeFailure` if the stored item is not a user.
        """
        try:
            response = self._table.get_item(Key={KEY_ATTRIBUTE: email})
        except (BotoCoreError, ClientError) as exc:
            logger.exception("GetItem failed", extra={"table": self.name})
            raise FetchFailure() from exc
        return User.from_item(response.get("Item"))

    def scan_all(self) -> List[User]:
        """
        Read every item in the table.

        DynamoDB returns at most 1 MB per Scan call, so pages are followed via
        ``LastEvaluatedKey`` until the table is exhausted.  The result is not
        paginated for the caller.
        """
        items = []
        scan_kwargs = {}
        try:
            while True:
                response = self._table.scan(**scan_kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Scan failed", extra={"table": self.name})
            raise FetchFailure() from exc
        return [User.from_item(item) for item in items]

    def put(self, user: User, only_if_absent: bool = False) -> None:
        """
        Write ``user``, replacing any item with the same email.

        With ``only_if_absent`` the write is conditional on no item existing
        under that key, and a lost race raises :class:`UserAlreadyExists`.
        """
        put_kwargs = {"Item": user.to_item()}
        if only_if_absent:
            put_kwargs["ConditionExpression"] = Attr(KEY_ATTRIBUTE).not_exists()
        try:
            self._table.put_item(**put_kwargs)
        except ClientError as exc:
            if only_if_absent and _error_code(exc) == "ConditionalCheckFailedException":
                logger.info("Conditional put rejected, item already present")
                raise UserAlreadyExists() from exc
            logger.exception("PutItem failed", extra={"table": self.name})
            raise WriteFailure() from exc
        except BotoCoreError as exc:
            logger.exception("PutItem failed", extra={"table": self.name})
            raise WriteFailure() from exc

    def delete(self, email: str) -> None:
        # no existence check: deleting an absent key succeeds
        try:
            self._table.delete_item(Key={KEY_ATTRIBUTE: email})
        except (BotoCoreError, ClientError) as exc:
            logger.exception("DeleteItem failed", extra={"table": self.name})
            raise DeleteFailure() from exc


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")
