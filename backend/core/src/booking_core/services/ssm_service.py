"""Secrets from AWS SSM Parameter Store (the Stripe secret key).

Values are decrypted on read and kept for the lifetime of the service
instance; get_ssm_service() shares one instance per process.
"""

import logging
from functools import lru_cache
from typing import Any

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class SSMServiceError(Exception):
    """A parameter could not be read."""


class SSMService:
    """Read-through cache over SecureString parameters."""

    def __init__(self, client: Any | None = None) -> None:
        self._client = client or boto3.client("ssm")
        self._values: dict[str, str] = {}

    def get_parameter(self, name: str) -> str:
        """Decrypted value of a parameter, fetched once per instance.

        Raises:
            SSMServiceError: Parameter missing, access denied or SSM error
        """
        if name in self._values:
            return self._values[name]

        logger.info("Fetching SSM parameter: %s", name)
        try:
            response = self._client.get_parameter(Name=name, WithDecryption=True)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            if code == "ParameterNotFound":
                reason = "not found"
            elif code == "AccessDeniedException":
                reason = "access denied (check ssm:GetParameter permissions)"
            else:
                reason = str(e)
            raise SSMServiceError(f"SSM parameter {name}: {reason}") from e

        self._values[name] = response["Parameter"]["Value"]
        return self._values[name]


@lru_cache(maxsize=1)
def get_ssm_service() -> SSMService:
    """Shared SSMService instance."""
    return SSMService()
