"""Secret Manager Client - Imperative Shell.

Reads the classification service credential (and any other ``${secret:...}``
config placeholder) from Google Cloud Secret Manager. All I/O is contained
here.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from google.api_core import exceptions as google_exceptions
from google.cloud import secretmanager


logger = logging.getLogger(__name__)


SECRET_PREFIX = "secret:"


@dataclass
class SecretManagerConfig:
    """Configuration for Secret Manager client.

    Attributes:
        project_id: GCP project ID (None disables lookups)
        version: Secret version to read
    """
    project_id: Optional[str] = None
    version: str = "latest"


class SecretManagerClient:
    """Reads secrets and expands config placeholders.

    Values are cached per client, so a secret referenced by several config
    entries is fetched once.
    """

    def __init__(self, config: Optional[SecretManagerConfig] = None) -> None:
        self.config = config or SecretManagerConfig()
        self._client: Optional[secretmanager.SecretManagerServiceClient] = None
        self._cache: dict[str, str] = {}

    @property
    def client(self) -> secretmanager.SecretManagerServiceClient:
        """Lazy initialization of Secret Manager client."""
        if self._client is None:
            self._client = secretmanager.SecretManagerServiceClient()
        return self._client

    def secret_path(self, secret_name: str) -> str:
        return (
            f"projects/{self.config.project_id}/secrets/{secret_name}"
            f"/versions/{self.config.version}"
        )

    def get_secret(self, secret_name: str) -> Optional[str]:
        """Fetch a secret value.

        This method performs I/O.

        Args:
            secret_name: Name of the secret (not the full resource path)

        Returns:
            Secret value, or None if it cannot be read
        """
        if not self.config.project_id:
            logger.error("No project ID configured for Secret Manager")
            return None

        if secret_name in self._cache:
            return self._cache[secret_name]

        try:
            logger.info("Fetching secret: %s", secret_name)
            response = self.client.access_secret_version(
                request={"name": self.secret_path(secret_name)}
            )
        except google_exceptions.NotFound:
            logger.warning("Secret %s not found", secret_name)
            return None
        except google_exceptions.GoogleAPIError as e:
            logger.error("Failed to fetch secret %s: %s", secret_name, str(e))
            return None

        value = response.payload.data.decode("UTF-8")
        self._cache[secret_name] = value
        return value

    def resolve(self, value: str) -> str:
        """Expand a ``${secret:name}`` or ``${ENV_VAR}`` placeholder.

        Anything else, and any placeholder that cannot be resolved, is
        returned unchanged so config validation can flag it.
        """
        if not (value.startswith("${") and value.endswith("}")):
            return value

        reference = value[2:-1]
        if reference.startswith(SECRET_PREFIX):
            return self.get_secret(reference[len(SECRET_PREFIX):]) or value

        env_value = os.environ.get(reference)
        if env_value:
            return env_value

        logger.warning("Environment variable %s not set", reference)
        return value
