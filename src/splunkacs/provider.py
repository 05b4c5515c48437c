"""Provider: resolve credentials and hand out configured handlers.

Credential precedence, per attribute:
1. Explicit settings (config file or SPLUNKACS_* variables)
2. SPLUNK_DEPLOYMENT_NAME / SPLUNK_AUTH_TOKEN
"""

from __future__ import annotations

import os
from collections.abc import Mapping

import httpx
import structlog

from splunkacs.client import AcsClient
from splunkacs.contracts import ProviderConfigurationError
from splunkacs.core.config import SplunkAcsSettings
from splunkacs.resources import (
    HecTokenDataSource,
    HecTokenResource,
    IndexDataSource,
    IndexResource,
    StackStatusDataSource,
)

logger = structlog.get_logger(__name__)

DEPLOYMENT_NAME_ENV = "SPLUNK_DEPLOYMENT_NAME"
AUTH_TOKEN_ENV = "SPLUNK_AUTH_TOKEN"


class AcsProvider:
    """Entry point for resource operations against one Splunk Cloud stack.

    Example:
        provider = AcsProvider(load_settings(Path("splunkacs.yaml")))
        provider.configure()
        token = provider.hec_tokens().create(spec)
    """

    def __init__(
        self,
        settings: SplunkAcsSettings,
        *,
        environ: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self._environ = environ if environ is not None else os.environ
        self._transport = transport
        self._client: AcsClient | None = None

    def configure(self) -> AcsClient:
        """Build the ACS client.

        Raises:
            ProviderConfigurationError: deployment name and/or token missing
        """
        deployment_name = self.settings.deployment_name or self._environ.get(DEPLOYMENT_NAME_ENV, "")
        token = self.settings.token or self._environ.get(AUTH_TOKEN_ENV, "")

        missing = []
        if not deployment_name:
            missing.append("deployment_name")
        if not token:
            missing.append("token")
        if missing:
            raise ProviderConfigurationError(missing)

        self._client = AcsClient(
            deployment_name,
            token,
            api_base_url=self.settings.api_base_url,
            timeout=self.settings.request_timeout_seconds,
            transport=self._transport,
        )
        logger.debug("Configured ACS client", url=self._client.url)
        return self._client

    @property
    def client(self) -> AcsClient:
        if self._client is None:
            return self.configure()
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def hec_tokens(self) -> HecTokenResource:
        return HecTokenResource(self.client, self.settings.propagation)

    def indexes(self) -> IndexResource:
        return IndexResource(self.client, self.settings.propagation)

    def hec_token_data_source(self) -> HecTokenDataSource:
        return HecTokenDataSource(self.client, self.settings.propagation)

    def index_data_source(self) -> IndexDataSource:
        return IndexDataSource(self.client, self.settings.propagation)

    def stack_status_data_source(self) -> StackStatusDataSource:
        return StackStatusDataSource(self.client, self.settings.propagation)
