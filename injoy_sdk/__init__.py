"""
InJoy SDK - fund an account and register it for a custom coin.
"""
from .account import LocalAccount
from .account_address import AccountAddress
from .client import RestClient
from .coin_client import CoinClient
from .config import AptosConfig, Profile
from .exceptions import (
    ClockError,
    ConfigError,
    EnvelopeError,
    ExecutionError,
    FundingError,
    InJoyError,
    NetworkError,
    ProtocolError,
    TransactionTimeoutError,
    ValidationError,
)
from .faucet import FaucetClient
from .models import PendingTransaction, TransactionRecord, TransactionStatus
from .register import RegistrationResult, register_coin, run
from .signer import SignedTransaction, sign_transaction
from .transactions import (
    EntryFunction,
    ModuleId,
    RawTransaction,
    TransactionBuilder,
    TransactionPayload,
    build_transaction,
)
from .type_tag import StructTag, TypeTag
from .version import __version__

__all__ = [
    "AccountAddress",
    "AptosConfig",
    "ClockError",
    "CoinClient",
    "ConfigError",
    "EntryFunction",
    "EnvelopeError",
    "ExecutionError",
    "FaucetClient",
    "FundingError",
    "InJoyError",
    "LocalAccount",
    "ModuleId",
    "NetworkError",
    "PendingTransaction",
    "Profile",
    "ProtocolError",
    "RawTransaction",
    "RegistrationResult",
    "RestClient",
    "SignedTransaction",
    "StructTag",
    "TransactionBuilder",
    "TransactionPayload",
    "TransactionRecord",
    "TransactionStatus",
    "TransactionTimeoutError",
    "TypeTag",
    "ValidationError",
    "build_transaction",
    "register_coin",
    "run",
    "sign_transaction",
    "__version__",
]
