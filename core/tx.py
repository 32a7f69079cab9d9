"""
Transactions
Messages, unsigned drafts, sign documents and signed envelopes

Encoding follows SIGN_MODE_DIRECT: the body (messages, memo, timeout height)
and the auth info (fee, signer keys and sequences) are serialized once and
every signer signs ``SignDoc(body, auth_info, chain_id, account_number)``.
"""

import base64
import hashlib
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from google.protobuf.any_pb2 import Any
from google.protobuf.message import Message
from cosmpy.protos.cosmos.crypto.secp256k1.keys_pb2 import PubKey
from cosmpy.protos.cosmos.tx.signing.v1beta1.signing_pb2 import SignMode
from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import (
    AuthInfo,
    ModeInfo,
    SignDoc as SignDocProto,
    SignerInfo,
    TxBody,
    TxRaw,
)

from .fee import Fee


@dataclass(frozen=True)
class Msg:
    """Opaque message payload tagged with its type url"""

    type_url: str
    value: bytes

    @classmethod
    def from_proto(cls, message: Message) -> 'Msg':
        return cls('/' + message.DESCRIPTOR.full_name, message.SerializeToString())

    def to_any(self) -> Any:
        return Any(type_url=self.type_url, value=self.value)


@dataclass(frozen=True)
class UnsignedTx:
    """Draft transaction content shared by every signer"""

    msgs: Tuple[Msg, ...]
    memo: str = ''
    timeout_height: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'msgs', tuple(self.msgs))
        if not self.msgs:
            raise ValueError("Transaction must contain at least one message")
        if self.timeout_height < 0:
            raise ValueError("Timeout height must be non-negative")

    def to_body(self) -> TxBody:
        return TxBody(
            messages=[msg.to_any() for msg in self.msgs],
            memo=self.memo,
            timeout_height=self.timeout_height
        )

    def body_bytes(self) -> bytes:
        return self.to_body().SerializeToString()


@dataclass(frozen=True)
class SignerData:
    """Public key and account state of one signer"""

    address: str
    public_key: bytes
    public_key_type_url: str
    account_number: int
    sequence: int

    def public_key_any(self) -> Any:
        return Any(
            type_url=self.public_key_type_url,
            value=PubKey(key=self.public_key).SerializeToString()
        )

    def to_signer_info(self) -> SignerInfo:
        return SignerInfo(
            public_key=self.public_key_any(),
            mode_info=ModeInfo(single=ModeInfo.Single(mode=SignMode.SIGN_MODE_DIRECT)),
            sequence=self.sequence
        )


def auth_info_bytes(fee: Fee, signer_infos: Sequence[SignerData]) -> bytes:
    """Serialize fee and signer infos, keeping signer order"""
    auth_info = AuthInfo(
        signer_infos=[signer.to_signer_info() for signer in signer_infos],
        fee=fee.to_proto()
    )
    return auth_info.SerializeToString()


@dataclass(frozen=True)
class SignDoc:
    """Exactly the content one signer signs over"""

    body_bytes: bytes
    auth_info_bytes: bytes
    chain_id: str
    account_number: int

    def to_bytes(self) -> bytes:
        return SignDocProto(
            body_bytes=self.body_bytes,
            auth_info_bytes=self.auth_info_bytes,
            chain_id=self.chain_id,
            account_number=self.account_number
        ).SerializeToString()


@dataclass(frozen=True)
class SignatureEntry:
    public_key: bytes
    signature: bytes


@dataclass(frozen=True)
class SignedTx:
    """Broadcast-ready transaction with one signature per signer, in signer order"""

    tx: UnsignedTx
    fee: Fee
    signer_infos: Tuple[SignerData, ...]
    signatures: Tuple[SignatureEntry, ...]
    body_bytes: bytes
    auth_info_bytes: bytes

    def to_proto(self) -> TxRaw:
        return TxRaw(
            body_bytes=self.body_bytes,
            auth_info_bytes=self.auth_info_bytes,
            signatures=[entry.signature for entry in self.signatures]
        )

    def to_bytes(self) -> bytes:
        return self.to_proto().SerializeToString()

    def to_base64(self) -> str:
        return base64.b64encode(self.to_bytes()).decode()

    def hash(self) -> str:
        """Transaction hash as reported by the node"""
        return hashlib.sha256(self.to_bytes()).hexdigest().upper()


def encode_for_simulation(tx: UnsignedTx, fee: Fee, signer_infos: List[SignerData]) -> str:
    """
    Base64 tx bytes for the simulate endpoint

    The node runs simulation without verifying signatures, so every
    signature slot is left empty.
    """
    raw = TxRaw(
        body_bytes=tx.body_bytes(),
        auth_info_bytes=auth_info_bytes(fee, signer_infos),
        signatures=[b'' for _ in signer_infos]
    )
    return base64.b64encode(raw.SerializeToString()).decode()
