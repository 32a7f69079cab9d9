"""
Tests for the client façade and wallets
"""

import asyncio

import pytest

from conftest import CHAIN_ID, FakeRequester, verify_signature
from core.coins import Coins
from core.errors import SequenceConflictError
from core.tx import SignDoc, UnsignedTx
from lcd import CreateTxOptions, LCDClient, LCDClientConfig, Signer
from lcd.api import AuthAPI, BankAPI, TendermintAPI, TxAPI
from lcd.api.tx import BROADCAST_MODE_SYNC


SIMULATE = '/cosmos/tx/v1beta1/simulate'
BROADCAST = '/cosmos/tx/v1beta1/txs'


def make_client(requester, **config):
    return LCDClient('http://lcd.test', LCDClientConfig(chain_id=CHAIN_ID, **config), requester)


class TestConstruction:
    """Façade wiring"""

    def test_accessors_share_one_requester(self):
        requester = FakeRequester()
        lcd = make_client(requester)

        assert set(lcd.apis) == {'auth', 'bank', 'tendermint', 'tx'}
        assert all(api.requester is requester for api in lcd.apis.values())
        assert lcd.estimator.tx_api is lcd.tx
        assert lcd.builder.auth_api is lcd.auth

    def test_typed_accessors(self):
        lcd = make_client(FakeRequester())
        assert isinstance(lcd.auth, AuthAPI)
        assert isinstance(lcd.bank, BankAPI)
        assert isinstance(lcd.tendermint, TendermintAPI)
        assert isinstance(lcd.tx, TxAPI)

    def test_accessor_table_is_read_only(self):
        lcd = make_client(FakeRequester())
        with pytest.raises(TypeError):
            lcd.apis['bank'] = None

    def test_default_config_resolution(self):
        lcd = LCDClient('http://lcd.test', LCDClientConfig(chain_id='testnet'), FakeRequester())
        assert lcd.config.gas_prices == Coins({'uinit': 0.15})
        assert lcd.config.gas_adjustment == '1.75'

    def test_creates_requester_from_url(self):
        lcd = LCDClient('http://lcd.test/')
        assert lcd.requester.base_url == 'http://lcd.test'

    def test_wallet_factory(self, key_a):
        lcd = make_client(FakeRequester())
        wallet = lcd.wallet(key_a)
        assert wallet.lcd is lcd
        assert wallet.address == key_a.address


class TestWallet:
    """Estimate, sign and submit through a wallet"""

    @pytest.mark.asyncio
    async def test_create_and_sign_tx(self, key_a, send_msg):
        requester = FakeRequester(accounts={key_a.address: (12, 4)}, gas_used=100000)
        wallet = make_client(requester).wallet(key_a)

        signed = await wallet.create_and_sign_tx(CreateTxOptions(msgs=[send_msg], memo='memo'))

        assert signed.fee.gas_limit == 175000
        assert signed.fee.amount == Coins({'uinit': 26250})
        assert signed.signer_infos[0].account_number == 12
        assert signed.signer_infos[0].sequence == 4
        # one account lookup shared by estimation and signing
        assert requester.count('GET') == 1
        assert requester.count('POST', SIMULATE) == 1

        doc = SignDoc(signed.body_bytes, signed.auth_info_bytes, CHAIN_ID, 12)
        assert verify_signature(signed.signatures[0].signature, doc.to_bytes(), key_a.public_key)

    @pytest.mark.asyncio
    async def test_fully_offline_tx(self, key_a, send_msg):
        requester = FakeRequester()
        wallet = make_client(requester).wallet(key_a)

        signed = await wallet.create_and_sign_tx(CreateTxOptions(
            msgs=[send_msg], gas=150000, fee={'uinit': 22500}, account_number=1, sequence=0
        ))

        assert requester.calls == []
        assert signed.fee.gas_limit == 150000

    @pytest.mark.asyncio
    async def test_submit(self, key_a, send_msg):
        requester = FakeRequester(accounts={key_a.address: (1, 0)})
        wallet = make_client(requester).wallet(key_a)

        signed = await wallet.create_and_sign_tx(CreateTxOptions(msgs=[send_msg]))
        result = await wallet.submit(signed)

        assert result.is_success
        assert result.txhash == 'ABCDEF'
        assert requester.broadcasts == [{'tx_bytes': signed.to_base64(), 'mode': BROADCAST_MODE_SYNC}]

    @pytest.mark.asyncio
    async def test_rejected_tx_is_returned(self, key_a, send_msg):
        requester = FakeRequester(
            accounts={key_a.address: (1, 0)},
            tx_response={'txhash': 'FF', 'code': 5, 'codespace': 'sdk', 'raw_log': 'insufficient funds'}
        )
        result = await make_client(requester).wallet(key_a).create_and_submit(
            CreateTxOptions(msgs=[send_msg])
        )

        assert not result.is_success
        assert result.code == 5
        assert result.raw_log == 'insufficient funds'

    @pytest.mark.asyncio
    async def test_sequence_conflict_is_raised_not_retried(self, key_a, send_msg):
        requester = FakeRequester(
            accounts={key_a.address: (1, 3)},
            tx_response={
                'txhash': 'AA',
                'code': 32,
                'codespace': 'sdk',
                'raw_log': 'account sequence mismatch, expected 4, got 3: incorrect account sequence'
            }
        )
        wallet = make_client(requester).wallet(key_a)

        with pytest.raises(SequenceConflictError) as exc_info:
            await wallet.create_and_submit(CreateTxOptions(msgs=[send_msg]))

        assert exc_info.value.txhash == 'AA'
        assert requester.count('POST', BROADCAST) == 1


class TestConcurrency:
    """Wallets sharing one client"""

    @pytest.mark.asyncio
    async def test_wallets_never_share_account_state(self, key_a, key_b, send_msg):
        accounts = {key_a.address: (10, 5), key_b.address: (20, 9)}
        lcd = make_client(FakeRequester(accounts=accounts))
        wallet_a, wallet_b = lcd.wallet(key_a), lcd.wallet(key_b)
        options = CreateTxOptions(msgs=[send_msg])

        results = await asyncio.gather(*(
            wallet.create_and_sign_tx(options)
            for _ in range(5)
            for wallet in (wallet_a, wallet_b)
        ))

        for index, signed in enumerate(results):
            key = key_a if index % 2 == 0 else key_b
            account_number, sequence = accounts[key.address]
            info = signed.signer_infos[0]

            assert info.address == key.address
            assert (info.account_number, info.sequence) == (account_number, sequence)

            doc = SignDoc(signed.body_bytes, signed.auth_info_bytes, CHAIN_ID, account_number)
            assert verify_signature(signed.signatures[0].signature, doc.to_bytes(), key.public_key)

    @pytest.mark.asyncio
    async def test_multi_signer_build_through_facade(self, key_a, key_b, send_msg):
        requester = FakeRequester(accounts={key_a.address: (1, 1), key_b.address: (2, 2)})
        lcd = make_client(requester)
        tx = UnsignedTx(msgs=[send_msg])
        signers = [Signer(key_a), Signer(key_b)]

        infos = await lcd.builder.resolve_signer_infos(signers)
        fee = await lcd.estimate(tx, infos)
        signed = await lcd.build(tx, fee, signers, infos)

        assert [entry.public_key for entry in signed.signatures] == [key_a.public_key, key_b.public_key]
