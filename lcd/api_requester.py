"""
API Requester
Shared HTTP dispatcher for the node's REST gateway (LCD)
"""

import asyncio
import json
from typing import Any, Dict, Optional, Tuple

import aiohttp
from loguru import logger

from core.errors import TransportError


class APIRequester:
    """
    Sends requests to the LCD and decodes JSON replies

    One instance is shared by every module accessor of a client. Its only
    state is the reused aiohttp session and request counters. GET requests
    are idempotent and are retried on transient failures; POST requests
    (simulate, broadcast) are sent exactly once.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_backoff: float = 0.5,
        headers: Optional[Dict[str, str]] = None
    ):
        """
        Initialize API Requester

        Args:
            base_url: LCD endpoint URL
            timeout: Total timeout per request in seconds
            max_retries: Attempts for GET requests
            retry_backoff: Base delay between GET attempts in seconds
            headers: Extra headers sent with every request
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.max_retries = max(1, max_retries)
        self.retry_backoff = retry_backoff
        self.headers = headers or {}

        self._session: Optional[aiohttp.ClientSession] = None

        self.stats = {
            'requests': 0,
            'failures': 0,
            'retries': 0
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers=self.headers)
        return self._session

    async def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict:
        """
        GET a JSON document

        Args:
            endpoint: Path below the base URL, e.g. "/cosmos/auth/v1beta1/params"
            params: Query parameters (None values are dropped)

        Returns:
            Decoded JSON body
        """
        query = _encode_params(params)

        for attempt in range(self.max_retries):
            try:
                return await self._request('GET', endpoint, params=query)
            except TransportError as e:
                transient = e.status is None or e.status >= 500
                if not transient or attempt == self.max_retries - 1:
                    raise

                self.stats['retries'] += 1
                delay = self.retry_backoff * (attempt + 1)
                logger.warning(f"GET {endpoint} failed ({e}), retrying in {delay:.2f}s")
                await asyncio.sleep(delay)

        raise TransportError("No attempt made", endpoint=endpoint)

    async def post(self, endpoint: str, data: Optional[Dict[str, Any]] = None) -> Dict:
        """POST a JSON body and decode the JSON reply (never retried)"""
        return await self._request('POST', endpoint, body=data or {})

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None
    ) -> Dict:
        url = f"{self.base_url}{endpoint}"
        session = await self._get_session()

        self.stats['requests'] += 1
        logger.debug(f"{method} {url}")

        try:
            async with session.request(method, url, params=params, json=body) as response:
                text = await response.text()
                status = response.status
        except asyncio.TimeoutError as e:
            self.stats['failures'] += 1
            raise TransportError("Request timed out", endpoint=endpoint) from e
        except aiohttp.ClientError as e:
            self.stats['failures'] += 1
            raise TransportError(f"Connection error: {e}", endpoint=endpoint) from e

        if status < 200 or status >= 300:
            self.stats['failures'] += 1
            message, code = parse_error_body(text)
            raise TransportError(message, status=status, code=code, endpoint=endpoint)

        try:
            return json.loads(text) if text else {}
        except ValueError as e:
            raise TransportError(
                f"Invalid JSON reply: {text[:200]}", status=status, endpoint=endpoint
            ) from e

    async def close(self):
        """Close the underlying HTTP session"""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None


def parse_error_body(text: str) -> Tuple[str, Optional[int]]:
    """
    Normalize a node error body to (message, code)

    The gateway answers either ``{"code": 3, "message": "..."}``, a legacy
    ``{"error": "..."}`` or plain text.
    """
    try:
        data = json.loads(text)
    except ValueError:
        return (text.strip() or 'Empty error body', None)

    if not isinstance(data, dict):
        return (text.strip(), None)

    message = data.get('message') or data.get('error') or text.strip()
    code = data.get('code')

    try:
        code = int(code) if code is not None else None
    except (TypeError, ValueError):
        code = None

    return (str(message), code)


def _encode_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, str]]:
    if not params:
        return None

    encoded = {}
    for name, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[name] = 'true' if value else 'false'
        else:
            encoded[name] = str(value)
    return encoded
