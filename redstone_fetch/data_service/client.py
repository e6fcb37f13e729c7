"""
RedStone data service client.

This module fetches signed data packages from a RedStone gateway and
assembles them into payloads ready for on-chain submission.
"""

from typing import Any, Optional

import logging

import httpx
from pydantic import ValidationError

from redstone_fetch._version import SDK_VERSION
from redstone_fetch.data_service.config import GatewayConfig, RequestConfig, get_config
from redstone_fetch.data_service.exceptions import ExternalServiceError, InsufficientSignersError
from redstone_fetch.data_service.models import SignedDataPackage
from redstone_fetch.data_service.payload import prepare_payload


class DataServiceClient:
    """Client for the RedStone gateway data package endpoints."""

    def __init__(self, config: Optional[GatewayConfig] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the client with configuration.

        Args:
            config: Gateway configuration (loaded from environment if not provided)
            transport: Optional httpx transport, used to plug in a mock gateway
        """
        self.config = config if config is not None else get_config()
        self.gateway_url = self.config.gateway_url
        self.headers = {
            "X-SDK-Version": f"redstone-fetch/{SDK_VERSION}",
            "User-Agent": f"redstone-fetch/{SDK_VERSION}",
        }
        self._transport = transport

        self.logger = logging.getLogger(f"redstone_fetch.{self.__class__.__name__}")

    def _get_endpoint_url(self, path: str) -> str:
        """
        Get the full URL for a gateway endpoint.

        Args:
            path: Endpoint path (without leading slash)

        Returns:
            Full URL for the endpoint
        """
        # Ensure path doesn't start with a slash
        if path.startswith("/"):
            path = path[1:]

        # Ensure gateway URL doesn't end with a slash
        base_url = self.gateway_url
        if base_url.endswith("/"):
            base_url = base_url[:-1]

        return f"{base_url}/{path}"

    @staticmethod
    def _data_packages_endpoint(request: RequestConfig) -> str:
        if request.is_historical:
            return f"data-packages/historical/{request.data_service_id}/{request.historical_timestamp_ms}"
        return f"data-packages/latest/{request.data_service_id}"

    def _handle_response(self, response: httpx.Response, error_msg: str = "Gateway request failed") -> Any:
        """
        Handle gateway response, raising exceptions for errors.

        Args:
            response: HTTP response from the gateway
            error_msg: Error message prefix for exceptions

        Returns:
            Parsed JSON response
        """
        if not response.is_success:
            self.logger.error(f"{error_msg}: HTTP {response.status_code} {response.text}")
            raise ExternalServiceError(f"{error_msg}: HTTP {response.status_code}", status_code=response.status_code)

        try:
            data: Any = response.json()
        except ValueError as e:
            self.logger.error(f"Failed to parse JSON response: {response.text}")
            raise ExternalServiceError(f"{error_msg}: Invalid JSON response", status_code=response.status_code) from e

        return data

    async def _get(self, endpoint: str, params: Optional[dict[str, Any]] = None) -> Any:
        """
        Make an async GET request to the gateway.

        Args:
            endpoint: Endpoint path
            params: Optional query parameters

        Returns:
            Parsed JSON response
        """
        url = self._get_endpoint_url(endpoint)
        self.logger.debug(f"GET {url} with params: {params}")

        try:
            async with httpx.AsyncClient(
                headers=self.headers, timeout=self.config.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"GET {endpoint} failed: {e}") from e

        return self._handle_response(response, f"GET {endpoint} failed")

    def _select_packages(self, data: Any, request: RequestConfig) -> list[SignedDataPackage]:
        """Pick one package per distinct signer for every requested feed."""
        if not isinstance(data, dict):
            raise ExternalServiceError(f"Unexpected gateway response type: {type(data).__name__}")

        selected: list[SignedDataPackage] = []
        for data_feed_id in request.data_feed_ids:
            raw_packages = data.get(data_feed_id)
            if not raw_packages:
                raise InsufficientSignersError(
                    f"Requested data package {data_feed_id!r} is not available in {request.data_service_id!r}"
                )
            if not isinstance(raw_packages, list):
                raise ExternalServiceError(f"Malformed data packages for {data_feed_id!r}")

            try:
                packages = [SignedDataPackage.model_validate(raw) for raw in raw_packages]
            except ValidationError as e:
                raise ExternalServiceError(f"Malformed data package for {data_feed_id!r}: {e}") from e

            seen_signers: set[str] = set()
            for_feed: list[SignedDataPackage] = []
            for package in packages:
                # Packages without a signer address are counted by their signature
                signer = (package.signer_address or package.signature).lower()
                if signer in seen_signers:
                    continue
                seen_signers.add(signer)
                for_feed.append(package)
                if len(for_feed) == request.unique_signers_count:
                    break

            if len(for_feed) < request.unique_signers_count:
                raise InsufficientSignersError(
                    f"Requested {request.unique_signers_count} unique signers for {data_feed_id!r}, "
                    f"only {len(for_feed)} available"
                )

            self.logger.debug(
                f"Selected {len(for_feed)} data packages for {data_feed_id}: "
                f"{[package.signer_address for package in for_feed]}"
            )
            selected.extend(for_feed)

        return selected

    async def get_data_packages(self, request: RequestConfig) -> list[SignedDataPackage]:
        """
        Get signed data packages for the requested feeds asynchronously.

        Args:
            request: Request configuration

        Returns:
            unique_signers_count packages per requested feed

        Raises:
            ExternalServiceError: If the gateway fails or returns malformed data
            InsufficientSignersError: If too few distinct signers are available
        """
        response_data = await self._get(self._data_packages_endpoint(request))
        return self._select_packages(response_data, request)

    async def get_payload(self, request: RequestConfig) -> str:
        """
        Get a submission-ready RedStone payload asynchronously.

        Args:
            request: Request configuration

        Returns:
            Payload hex string without the 0x prefix
        """
        packages = await self.get_data_packages(request)
        unsigned_metadata = self.config.unsigned_metadata or f"{SDK_VERSION}#{request.data_service_id}"
        return prepare_payload(packages, unsigned_metadata)
