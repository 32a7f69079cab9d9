"""
Tests for signing keys
"""

import base64

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer
from eth_keys import keys
from web3 import Web3

from conftest import PRIVATE_KEY_A, verify_signature
from core.errors import KeyUnavailableError, SigningError
from key import Key, MnemonicKey, RawKey, RemoteKey, address_to_bytes


HARDHAT_MNEMONIC = 'test test test test test test test test test test test junk'
HARDHAT_ADDRESS_0 = '0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266'


async def start_signer(handler) -> TestServer:
    app = web.Application()
    app.router.add_post('/sign', handler)
    server = TestServer(app)
    await server.start_server()
    return server


class TestRawKey:
    """In-memory keys"""

    def test_address_is_deterministic(self):
        assert RawKey(PRIVATE_KEY_A).address == RawKey(PRIVATE_KEY_A).address

    def test_address_encodes_eth_address(self):
        key = RawKey(PRIVATE_KEY_A)
        expected = keys.PrivateKey(bytes.fromhex('11' * 32)).public_key.to_canonical_address()

        assert key.address.startswith('init1')
        assert address_to_bytes(key.address) == expected
        assert key.eth_address == Web3.to_checksum_address(expected)

    def test_custom_prefix(self):
        assert RawKey(PRIVATE_KEY_A, prefix='cosmos').address.startswith('cosmos1')

    def test_public_key_is_compressed(self):
        key = RawKey(PRIVATE_KEY_A)
        assert len(key.public_key) == 33
        assert key.public_key[0] in (2, 3)

    def test_accepts_bytes(self):
        assert RawKey(bytes.fromhex('11' * 32)).address == RawKey(PRIVATE_KEY_A).address

    def test_invalid_private_key(self):
        with pytest.raises(ValueError):
            RawKey(b'\x00' * 31)

    @pytest.mark.asyncio
    async def test_sign_verifies(self):
        key = RawKey(PRIVATE_KEY_A)
        payload = b'sign doc bytes'

        signature = await key.sign(payload)

        assert len(signature) == 64
        assert verify_signature(signature, payload, key.public_key)

    @pytest.mark.asyncio
    async def test_sign_is_deterministic(self):
        key = RawKey(PRIVATE_KEY_A)
        assert await key.sign(b'payload') == await key.sign(b'payload')

    def test_is_a_key(self):
        assert isinstance(RawKey(PRIVATE_KEY_A), Key)


class TestMnemonicKey:
    """BIP-39 / BIP-44 derivation"""

    def test_known_derivation(self):
        key = MnemonicKey(HARDHAT_MNEMONIC)
        assert key.hd_path == "m/44'/60'/0'/0/0"
        assert key.eth_address == HARDHAT_ADDRESS_0

    def test_index_changes_address(self):
        assert MnemonicKey(HARDHAT_MNEMONIC, index=1).address != MnemonicKey(HARDHAT_MNEMONIC).address

    def test_generates_mnemonic(self):
        key = MnemonicKey()
        assert len(key.mnemonic.split()) == 24
        assert MnemonicKey(key.mnemonic).address == key.address


class TestRemoteKey:
    """Remote signer proxy"""

    @pytest.mark.asyncio
    async def test_signature_from_remote_signer(self):
        local = RawKey(PRIVATE_KEY_A)
        received = {}

        async def handler(request):
            body = await request.json()
            received.update(body)
            signature = local.sign_sync(base64.b64decode(body['sign_bytes']))
            return web.json_response({'signature': base64.b64encode(signature).decode()})

        server = await start_signer(handler)
        try:
            remote = RemoteKey(f"http://{server.host}:{server.port}/sign", local.public_key)
            signature = await remote.sign(b'payload')
        finally:
            await server.close()

        assert remote.address == local.address
        assert received['address'] == local.address
        assert verify_signature(signature, b'payload', local.public_key)

    @pytest.mark.asyncio
    async def test_signer_error_status(self):
        async def handler(request):
            return web.Response(status=503, text='device locked')

        server = await start_signer(handler)
        try:
            remote = RemoteKey(f"http://{server.host}:{server.port}/sign", RawKey(PRIVATE_KEY_A).public_key)
            with pytest.raises(KeyUnavailableError) as exc_info:
                await remote.sign(b'payload')
        finally:
            await server.close()

        assert 'device locked' in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_malformed_reply(self):
        async def handler(request):
            return web.json_response({'signature': base64.b64encode(b'short').decode()})

        server = await start_signer(handler)
        try:
            remote = RemoteKey(f"http://{server.host}:{server.port}/sign", RawKey(PRIVATE_KEY_A).public_key)
            with pytest.raises(KeyUnavailableError):
                await remote.sign(b'payload')
        finally:
            await server.close()

    @pytest.mark.asyncio
    async def test_unreachable_signer(self):
        remote = RemoteKey('http://127.0.0.1:1/sign', RawKey(PRIVATE_KEY_A).public_key, timeout=2)

        with pytest.raises(KeyUnavailableError) as exc_info:
            await remote.sign(b'payload')

        # builder callers may catch the broader signing error
        assert isinstance(exc_info.value, SigningError)
