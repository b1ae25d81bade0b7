from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import pytest
from botocore.exceptions import ClientError

from user_api.service import UserService
from user_api.router import RequestRouter
from user_api.storage import UserTable


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"{code} (test)"}}, operation)


class FakeDynamoTable:
    """In-memory stand-in for a boto3 ``dynamodb.Table`` keyed by ``email``."""

    def __init__(self, name: str = "users-test", page_size: int = 100) -> None:
        self.name = name
        self.page_size = page_size
        self.items: Dict[str, Dict[str, Any]] = {}
        self.calls: List[str] = []
        self.failures: Dict[str, str] = {}

    def fail(self, operation: str, code: str = "InternalServerError") -> None:
        self.failures[operation] = code

    def writes(self) -> int:
        return self.calls.count("put_item")

    def _enter(self, operation: str, api_name: str) -> None:
        self.calls.append(operation)
        if operation in self.failures:
            raise client_error(self.failures[operation], api_name)

    @staticmethod
    def _key(key: Dict[str, Any], api_name: str) -> str:
        email = key.get("email")
        if not isinstance(email, str) or not email:
            raise client_error("ValidationException", api_name)
        return email

    def get_item(self, Key: Dict[str, Any]) -> Dict[str, Any]:
        self._enter("get_item", "GetItem")
        item = self.items.get(self._key(Key, "GetItem"))
        return {} if item is None else {"Item": copy.deepcopy(item)}

    def put_item(self, Item: Dict[str, Any], ConditionExpression: Optional[Any] = None) -> Dict[str, Any]:
        self._enter("put_item", "PutItem")
        email = self._key(Item, "PutItem")
        if ConditionExpression is not None:
            expression = ConditionExpression.get_expression()
            assert expression["operator"] == "attribute_not_exists"
            assert expression["values"][0].name == "email"
            if email in self.items:
                raise client_error("ConditionalCheckFailedException", "PutItem")
        self.items[email] = copy.deepcopy(Item)
        return {}

    def delete_item(self, Key: Dict[str, Any]) -> Dict[str, Any]:
        self._enter("delete_item", "DeleteItem")
        self.items.pop(self._key(Key, "DeleteItem"), None)
        return {}

    def scan(self, ExclusiveStartKey: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        self._enter("scan", "Scan")
        keys = sorted(self.items)
        if ExclusiveStartKey is not None:
            keys = [key for key in keys if key > ExclusiveStartKey["email"]]
        page = keys[: self.page_size]
        response: Dict[str, Any] = {
            "Items": [copy.deepcopy(self.items[key]) for key in page],
            "Count": len(page),
        }
        if len(keys) > self.page_size:
            response["LastEvaluatedKey"] = {"email": page[-1]}
        return response


@dataclass
class FakeLambdaContext:
    function_name: str = "user-api"
    function_version: str = "$LATEST"
    memory_limit_in_mb: int = 128
    invoked_function_arn: str = "arn:aws:lambda:us-east-1:123456789012:function:user-api"
    aws_request_id: str = "52fdfc07-2182-154f-163f-5f0f9a621d72"
    log_group_name: str = "/aws/lambda/user-api"
    log_stream_name: str = "2026/10/19/[$LATEST]abcdef"


@pytest.fixture()
def dynamo_table() -> FakeDynamoTable:
    return FakeDynamoTable()


@pytest.fixture()
def user_table(dynamo_table: FakeDynamoTable) -> UserTable:
    return UserTable(dynamo_table)


@pytest.fixture()
def service(user_table: UserTable) -> UserService:
    return UserService(user_table)


@pytest.fixture()
def router(service: UserService) -> RequestRouter:
    return RequestRouter(service)


@pytest.fixture()
def lambda_context() -> FakeLambdaContext:
    return FakeLambdaContext()
