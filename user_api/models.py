"""The User record and its conversions to and from JSON and DynamoDB items."""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError, field_validator
from pydantic_core import PydanticSerializationError

from user_api.errors import DecodeFailure, EncodeFailure, InvalidUserData


class User(BaseModel):
    """
    A single user as stored in the users table.

    ``email`` is the partition key.  All fields default to the empty string,
    so a ``User()`` is the "zero value" returned when a lookup finds nothing.
    """

    model_config = ConfigDict(extra="ignore")

    email: StrictStr = ""
    firstName: StrictStr = ""
    lastName: StrictStr = ""

    @field_validator("email", "firstName", "lastName", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def exists(self) -> bool:
        return bool(self.email)

    @classmethod
    def from_json(cls, body: Optional[Union[str, bytes]]) -> "User":
        """Parse a request body; raises :class:`InvalidUserData` if malformed."""
        if not body:
            raise InvalidUserData()
        try:
            return cls.model_validate_json(body)
        except ValidationError as exc:
            raise InvalidUserData() from exc

    @classmethod
    def from_item(cls, item: Optional[Dict[str, Any]]) -> "User":
        """Build a User from a DynamoDB item; a missing item gives an empty User."""
        if item is None:
            return cls()
        try:
            return cls.model_validate(item)
        except ValidationError as exc:
            raise DecodeFailure() from exc

    def to_item(self) -> Dict[str, str]:
        try:
            # cannot fail for three StrictStr fields
            return self.model_dump()
        except PydanticSerializationError as exc:
            raise EncodeFailure() from exc
