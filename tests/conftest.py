"""
Shared fixtures: deterministic keys and an in-memory LCD
"""

import asyncio
from typing import Dict, Optional, Tuple

import pytest
from eth_keys import keys
from web3 import Web3

from core.errors import TransportError
from core.tx import Msg
from key.raw_key import RawKey


PRIVATE_KEY_A = '0x' + '11' * 32
PRIVATE_KEY_B = '0x' + '22' * 32
PRIVATE_KEY_C = '0x' + '33' * 32

CHAIN_ID = 'initiation-2'


class FakeRequester:
    """
    Stand-in for APIRequester answering auth, node info, simulate and
    broadcast endpoints from memory; every call is recorded
    """

    base_url = 'http://lcd.test'

    def __init__(
        self,
        accounts: Optional[Dict[str, Tuple[int, int]]] = None,
        gas_used: int = 100000,
        chain_id: str = CHAIN_ID,
        simulate_error: Optional[Exception] = None,
        tx_response: Optional[Dict] = None
    ):
        self.accounts = accounts or {}
        self.gas_used = gas_used
        self.chain_id = chain_id
        self.simulate_error = simulate_error
        self.tx_response = tx_response
        self.calls = []
        self.broadcasts = []

    async def get(self, endpoint: str, params: Optional[Dict] = None) -> Dict:
        self.calls.append(('GET', endpoint))
        # let concurrent pipelines interleave
        await asyncio.sleep(0)

        if endpoint.startswith('/cosmos/auth/v1beta1/accounts/'):
            address = endpoint.rsplit('/', 1)[1]
            if address not in self.accounts:
                raise TransportError('account not found', status=404, code=5, endpoint=endpoint)
            number, sequence = self.accounts[address]
            return {
                'account': {
                    '@type': '/cosmos.auth.v1beta1.BaseAccount',
                    'address': address,
                    'pub_key': None,
                    'account_number': str(number),
                    'sequence': str(sequence)
                }
            }

        if endpoint == '/cosmos/base/tendermint/v1beta1/node_info':
            return {'default_node_info': {'network': self.chain_id}}

        raise TransportError('Not Implemented', status=501, endpoint=endpoint)

    async def post(self, endpoint: str, data: Optional[Dict] = None) -> Dict:
        self.calls.append(('POST', endpoint))
        await asyncio.sleep(0)

        if endpoint == '/cosmos/tx/v1beta1/simulate':
            if self.simulate_error is not None:
                raise self.simulate_error
            return {'gas_info': {'gas_wanted': '0', 'gas_used': str(self.gas_used)}}

        if endpoint == '/cosmos/tx/v1beta1/txs':
            self.broadcasts.append(data)
            return {'tx_response': self.tx_response or {
                'height': '0',
                'txhash': 'ABCDEF',
                'codespace': '',
                'code': 0,
                'raw_log': ''
            }}

        raise TransportError('Not Implemented', status=501, endpoint=endpoint)

    async def close(self):
        pass

    def count(self, method: str, endpoint: Optional[str] = None) -> int:
        return sum(
            1 for m, e in self.calls
            if m == method and (endpoint is None or e == endpoint)
        )


def verify_signature(signature: bytes, payload: bytes, public_key: bytes) -> bool:
    """Check a 64-byte r||s signature over keccak256(payload)"""
    msg_hash = bytes(Web3.keccak(payload))
    pub = keys.PublicKey.from_compressed_bytes(public_key)
    return any(
        keys.Signature(signature_bytes=signature + bytes([v])).verify_msg_hash(msg_hash, pub)
        for v in (0, 1)
    )


@pytest.fixture
def key_a():
    return RawKey(PRIVATE_KEY_A)


@pytest.fixture
def key_b():
    return RawKey(PRIVATE_KEY_B)


@pytest.fixture
def key_c():
    return RawKey(PRIVATE_KEY_C)


@pytest.fixture
def send_msg():
    """Opaque bank send payload"""
    return Msg('/cosmos.bank.v1beta1.MsgSend', b'\x0a\x04test')
