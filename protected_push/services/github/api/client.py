"""
GitHub API client for making authenticated requests.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from protected_push.common.config.config import GITHUB_API_URL
from protected_push.common.exception.exceptions import AuthError, GitHubAPIError

logger = logging.getLogger(__name__)


class GitHubAPIClient:
    """Base client for GitHub REST API interactions."""

    API_VERSION = "2022-11-28"

    def __init__(self, token: str, base_url: Optional[str] = None, timeout: float = 30.0):
        """Initialize GitHub API client.

        Args:
            token: Token sent as a bearer credential
            base_url: API root (defaults to GITHUB_API_URL)
            timeout: Request timeout in seconds
        """
        self.token = token
        self.base_url = (base_url or GITHUB_API_URL).rstrip("/")
        self.timeout = timeout

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.API_VERSION,
        }

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Make a GitHub API request.

        Args:
            method: HTTP method (GET, DELETE)
            path: API path (without base URL)
            params: Query parameters

        Returns:
            Decoded JSON body, or an empty dict for empty responses

        Raises:
            AuthError: If the token is rejected
            GitHubAPIError: For any other failed request
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = self._get_headers()

        try:
            timeout_config = httpx.Timeout(self.timeout, connect=10.0)
            async with httpx.AsyncClient(timeout=timeout_config) as client:
                response = await client.request(
                    method.upper(), url, params=params, headers=headers
                )
        except httpx.RequestError as e:
            error_msg = f"GitHub API request error: {e}"
            logger.error(error_msg)
            raise GitHubAPIError(error_msg, url=url)

        return self._process_response(response, method, url)

    def _process_response(
        self, response: httpx.Response, method: str, url: str
    ) -> Dict[str, Any]:
        """Process HTTP response and extract data.

        Args:
            response: HTTP response object
            method: HTTP method used
            url: Request URL

        Returns:
            Response data as dict or empty dict
        """
        if 200 <= response.status_code < 300:
            logger.debug(
                f"GitHub API {method} {url} succeeded (status: {response.status_code})"
            )
            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError:
                return {}

        error_msg = f"GitHub API {method} {url} failed (status {response.status_code}): {response.text}"
        if response.status_code == 401:
            raise AuthError(error_msg, status_code=401, url=url)
        raise GitHubAPIError(error_msg, status_code=response.status_code, url=url)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self.request("GET", path, params=params)

    async def delete(self, path: str) -> Dict[str, Any]:
        return await self.request("DELETE", path)
