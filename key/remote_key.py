"""
Remote Key
Signing proxy that forwards sign requests to a remote signer over HTTP
"""

import asyncio
import base64
from typing import Dict, Optional

import aiohttp
from loguru import logger

from core.errors import KeyUnavailableError
from .key import DEFAULT_PREFIX, Key


class RemoteKey(Key):
    """
    Key whose private material lives behind a signing service

    The service receives ``{"address", "sign_bytes"}`` (base64) on
    ``POST <url>`` and answers ``{"signature"}`` (base64, 64 bytes).
    """

    def __init__(
        self,
        url: str,
        public_key: bytes,
        prefix: str = DEFAULT_PREFIX,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 10.0
    ):
        """
        Initialize Remote Key

        Args:
            url: Signing endpoint
            public_key: Compressed public key of the remote account
            prefix: Bech32 address prefix
            headers: Extra request headers (e.g. authorization)
            timeout: Total timeout per sign request in seconds
        """
        super().__init__(public_key, prefix)
        self.url = url
        self.headers = headers or {}
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def sign(self, payload: bytes) -> bytes:
        request = {
            'address': self.address,
            'sign_bytes': base64.b64encode(payload).decode()
        }

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(self.url, json=request, headers=self.headers) as response:
                    if response.status != 200:
                        text = await response.text()
                        raise KeyUnavailableError(
                            f"Remote signer returned {response.status}: {text}",
                            address=self.address
                        )
                    data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Remote signer unreachable for {self.address}: {e}")
            raise KeyUnavailableError(
                f"Remote signer unreachable: {e}", address=self.address
            ) from e

        try:
            signature = base64.b64decode(data['signature'])
        except (KeyError, TypeError, ValueError) as e:
            raise KeyUnavailableError(
                "Remote signer reply has no valid signature", address=self.address
            ) from e

        if len(signature) != 64:
            raise KeyUnavailableError(
                f"Remote signer returned {len(signature)}-byte signature", address=self.address
            )

        return signature
