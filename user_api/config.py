"""
Runtime configuration.
======================
Settings are read from environment variables (set on the Lambda function
by the deployment) exactly once per process.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from user_api.errors import ConfigurationError

SERVICE_NAME = "user-api"
DEFAULT_REGION = "us-east-1"

# How create/update treat a failed existence lookup.
LOOKUP_IGNORE = "ignore"  # swallow the failure and go ahead with the write
LOOKUP_ABORT = "abort"  # raise the lookup failure, write nothing
LOOKUP_FAILURE_POLICIES = (LOOKUP_IGNORE, LOOKUP_ABORT)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    table_name: str
    region: str = DEFAULT_REGION
    endpoint_url: Optional[str] = None
    lookup_failure_policy: str = LOOKUP_IGNORE
    log_event: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from the process environment (or ``environ`` if given).

        Raises:
            ConfigurationError: if TABLE_NAME is missing or
                LOOKUP_FAILURE_POLICY is not a known policy.
        """
        env = os.environ if environ is None else environ

        table_name = env.get("TABLE_NAME", "").strip()
        if not table_name:
            raise ConfigurationError("TABLE_NAME env var is not set")

        policy = env.get("LOOKUP_FAILURE_POLICY", LOOKUP_IGNORE).strip().lower() or LOOKUP_IGNORE
        if policy not in LOOKUP_FAILURE_POLICIES:
            raise ConfigurationError(
                f"LOOKUP_FAILURE_POLICY must be one of {', '.join(LOOKUP_FAILURE_POLICIES)}, got {policy!r}"
            )

        return cls(
            table_name=table_name,
            region=env.get("AWS_REGION") or DEFAULT_REGION,
            endpoint_url=env.get("DYNAMODB_ENDPOINT_URL") or None,
            lookup_failure_policy=policy,
            log_event=env.get("LOG_EVENT", "").strip().lower() in _TRUTHY,
        )
