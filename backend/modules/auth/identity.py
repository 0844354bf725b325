"""
Identity provider client (Huawei Account Kit).

Exchanges an authorization code for an access token, then resolves the
access token to the user's stable union ID via the token-info endpoint.
"""

import logging
from typing import Any, Optional

import httpx

from shared.config import Settings
from .models import IdentityInfo
from .exceptions import IdentityProviderError

logger = logging.getLogger(__name__)


class HuaweiIdentityClient:
    """
    HTTP client for the Huawei OAuth endpoints.

    Args:
        client_id: OAuth client ID
        client_secret: OAuth client secret
        token_url: Authorization code exchange endpoint
        token_info_url: Token-info endpoint returning union_id/open_id
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    PROVIDER = "huawei"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        token_url: str,
        token_info_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_url = token_url
        self._token_info_url = token_info_url
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "HuaweiIdentityClient":
        return cls(
            client_id=settings.identity_client_id,
            client_secret=settings.identity_client_secret,
            token_url=settings.identity_token_url,
            token_info_url=settings.identity_token_info_url,
            timeout=settings.identity_timeout,
        )

    async def exchange_code(self, code: str) -> dict[str, Any]:
        """
        Exchange an authorization code for tokens.

        Returns:
            The provider's token response; always contains `access_token`

        Raises:
            IdentityProviderError: Non-2xx response or no access token
        """
        response = await self._post(
            self._token_url,
            {
                "grant_type": "authorization_code",
                "code": code,
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "supportAlg": "PS256",
            },
        )
        data = _json_or_none(response)

        if response.is_error:
            logger.warning("Identity provider token exchange failed: HTTP %s", response.status_code)
            raise IdentityProviderError(
                "Identity provider token exchange failed",
                status_code=response.status_code,
            )
        if not data or not data.get("access_token"):
            raise IdentityProviderError("Identity provider returned no access token")
        return data

    async def get_token_info(self, access_token: str) -> IdentityInfo:
        """
        Resolve an access token to the user's identifiers.

        The endpoint may answer 200 even on failure; errors are signalled
        through the NSP_STATUS header or an `error` field in the body.

        Raises:
            IdentityProviderError: If the provider reports an error
        """
        response = await self._post(
            self._token_info_url,
            {"access_token": access_token, "open_id": "OPENID"},
        )
        data = _json_or_none(response)

        nsp_status = response.headers.get("NSP_STATUS")
        if nsp_status or response.is_error or (data and data.get("error")):
            message = str(data.get("error")) if data and data.get("error") else "Token info lookup failed"
            logger.warning("Identity provider token info failed: %s", message)
            raise IdentityProviderError(message, status_code=_status_code(nsp_status, response))
        if data is None:
            raise IdentityProviderError("Identity provider returned an unreadable token info response")

        return IdentityInfo(
            union_id=data.get("union_id"),
            open_id=data.get("open_id"),
            scope=data.get("scope"),
        )

    async def _post(self, url: str, form: dict[str, str]) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                return await client.post(url, data=form)
        except httpx.HTTPError as e:
            logger.warning("Identity provider request failed: %s", e)
            raise IdentityProviderError(f"Identity provider unreachable: {e}") from e


def _json_or_none(response: httpx.Response) -> Optional[dict[str, Any]]:
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _status_code(nsp_status: Optional[str], response: httpx.Response) -> int:
    if nsp_status and nsp_status.isdigit():
        return int(nsp_status)
    return response.status_code if response.is_error else 400
