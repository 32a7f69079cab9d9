"""
Module Query Accessors
One accessor per chain module, all sharing the client's requester
"""

from .base import BaseAPI
from .auth import AuthAPI, AccountInfo
from .bank import BankAPI
from .tendermint import TendermintAPI
from .tx import TxAPI, BroadcastResult, BROADCAST_MODE_SYNC, BROADCAST_MODE_ASYNC

API_CLASSES = (AuthAPI, BankAPI, TendermintAPI, TxAPI)

__all__ = [
    'BaseAPI',
    'AuthAPI',
    'AccountInfo',
    'BankAPI',
    'TendermintAPI',
    'TxAPI',
    'BroadcastResult',
    'BROADCAST_MODE_SYNC',
    'BROADCAST_MODE_ASYNC',
    'API_CLASSES'
]
