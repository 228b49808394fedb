"""OpenID Connect identity provider client."""

from typing import Any, Dict

import httpx

from lp.config import get_settings


class IdentityProviderClient:
    """Client for the identity provider's userinfo endpoint."""

    def __init__(self):
        self.settings = get_settings()
        self.userinfo_url = self.settings.identity_userinfo_url
        self.timeout = httpx.Timeout(self.settings.identity_timeout)

    async def get_userinfo(self, access_token: str) -> Dict[str, Any]:
        """Resolve the profile behind a provider access token."""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(
                self.userinfo_url,
                headers=self._get_headers(access_token),
            )
            response.raise_for_status()
            return response.json()

    def _get_headers(self, access_token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }
