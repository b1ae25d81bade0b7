"""
User service: the business rules on top of the users table.

Uniqueness is enforced on create, existence on update.  Each method is a
single request/response; the service keeps no state between calls.
"""

from typing import List, Optional, Union

from aws_lambda_powertools import Logger

from user_api.config import LOOKUP_ABORT, LOOKUP_FAILURE_POLICIES, LOOKUP_IGNORE, SERVICE_NAME
from user_api.errors import DecodeFailure, FetchFailure, InvalidEmail, UserAlreadyExists, UserDoesNotExist
from user_api.models import User
from user_api.storage import UserTable
from user_api.validators import is_email_valid

logger = Logger(service=SERVICE_NAME, child=True)

Body = Optional[Union[str, bytes]]


class UserService:
    def __init__(self, table: UserTable, lookup_failure_policy: str = LOOKUP_IGNORE):
        if lookup_failure_policy not in LOOKUP_FAILURE_POLICIES:
            raise ValueError(f"Unknown lookup failure policy: {lookup_failure_policy!r}")
        self._table = table
        self._lookup_failure_policy = lookup_failure_policy

    def fetch_user(self, email: str) -> User:
        return self._table.get(email)

    def fetch_users(self) -> List[User]:
        return self._table.scan_all()

    def create_user(self, body: Body) -> User:
        """
        Create a user from a JSON request body.

        Raises:
            InvalidUserData: body is not a user object
            InvalidEmail: email fails validation
            UserAlreadyExists: a user with this email is already stored
            EncodeFailure, WriteFailure: the item could not be written
        """
        user = User.from_json(body)
        if not is_email_valid(user.email):
            raise InvalidEmail()

        current = self._lookup(user.email)
        if current is not None and current.exists:
            raise UserAlreadyExists()

        # conditional on the key being absent, so a concurrent create cannot be overwritten
        self._table.put(user, only_if_absent=True)
        logger.info("User created", extra={"email": user.email})
        return user

    def update_user(self, body: Body) -> User:
        """
        Replace an existing user with the one in the request body.

        Fields missing from the body are stored as empty strings; there is
        no merge with the previous record.

        Raises:
            InvalidUserData: body is not a user object
            InvalidEmail: email fails validation
            UserDoesNotExist: nothing is stored under this email
            EncodeFailure, WriteFailure: the item could not be written
        """
        user = User.from_json(body)
        if not is_email_valid(user.email):
            raise InvalidEmail()

        current = self._lookup(user.email)
        if current is not None and not current.exists:
            raise UserDoesNotExist()

        self._table.put(user)
        logger.info("User updated", extra={"email": user.email})
        return user

    def delete_user(self, email: str) -> None:
        self._table.delete(email)
        logger.info("User deleted", extra={"email": email})

    def _lookup(self, email: str) -> Optional[User]:
        """
        Existence check for create/update.

        Returns None when the lookup itself failed and the policy is to
        ignore such failures; the caller then proceeds with the write.
        """
        try:
            return self._table.get(email)
        except (FetchFailure, DecodeFailure) as exc:
            if self._lookup_failure_policy == LOOKUP_ABORT:
                raise
            logger.warning("Ignoring failed existence lookup", extra={"error": str(exc)})
            return None
