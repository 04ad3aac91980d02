"""
Coin registration flow.

Funds an account through the faucet and registers it for the account's own
``injoy_coin::InJoyCoin`` by calling ``0x1::managed_coin::register``.
Every step runs strictly in sequence; one transaction is in flight at a time.
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .account import LocalAccount
from .account_address import AccountAddress
from .client import RestClient
from .coin_client import CoinClient
from .config import Profile
from .exceptions import ConfigError, EnvelopeError, FundingError
from .faucet import FaucetClient
from .models import TransactionRecord
from .signer import sign_transaction
from .transactions import EntryFunction, ModuleId, build_transaction
from .type_tag import TypeTag

logger = logging.getLogger(__name__)

DEFAULT_FUND_AMOUNT = 100_000_000
DEFAULT_MAX_GAS_AMOUNT = 10_000
COIN_MODULE = "injoy_coin"
COIN_STRUCT = "InJoyCoin"


@dataclass(frozen=True)
class RegistrationResult:
    """Outcome of a successful registration"""
    address: AccountAddress
    coin_type: str
    record: TransactionRecord
    sequence_number: int


def coin_type_for(address: AccountAddress) -> str:
    return f"{address.to_hex_literal()}::{COIN_MODULE}::{COIN_STRUCT}"


def register_payload(coin_type: str) -> EntryFunction:
    """
    ``0x1::managed_coin::register<coin_type>()``

    Raises:
        ConfigError: If coin_type is not a valid struct type
    """
    try:
        tag = TypeTag.from_str(coin_type)
    except ValueError as e:
        raise ConfigError(f"Invalid coin type {coin_type!r}: {e}") from e
    return EntryFunction(ModuleId(AccountAddress.ONE, "managed_coin"), "register", (tag,), ())


def register_coin(
    owner: LocalAccount,
    client: RestClient,
    coin_type: Optional[str] = None,
    max_gas_amount: int = DEFAULT_MAX_GAS_AMOUNT,
    timeout: Optional[float] = None,
    poll_interval: Optional[float] = None,
    clock: Callable[[], float] = time.time
) -> RegistrationResult:
    """
    Register ``owner`` for a coin type.

    Args:
        owner: Account sending the transaction; its sequence number must match the chain
        client: Node client
        coin_type: Coin type to register (defaults to the owner's InJoyCoin)
        max_gas_amount: Gas budget for the transaction
        timeout: Confirmation timeout in seconds
        poll_interval: Seconds between confirmation polls
        clock: Wall clock used for the expiration timestamp

    Returns:
        RegistrationResult with the committed record

    Raises:
        NetworkError, ProtocolError: If chain context cannot be resolved
        EnvelopeError: If the gas budget or chain context cannot form a valid envelope
        ValidationError: If the node rejects the transaction
        TransactionTimeoutError: If the transaction is not committed in time
        ExecutionError: If the transaction aborted on-chain
    """
    coin_type = coin_type or coin_type_for(owner.address())
    logger.debug(f"coin type: {coin_type}")
    payload = register_payload(coin_type)

    chain_id = client.resolve_chain_id()
    gas_unit_price = client.estimate_gas_price()

    try:
        raw_txn = build_transaction(
            payload,
            chain_id=chain_id,
            sender=owner.address(),
            sequence_number=owner.sequence_number(),
            max_gas_amount=max_gas_amount,
            gas_unit_price=gas_unit_price,
            clock=clock
        )
    except ValueError as e:
        raise EnvelopeError(f"Cannot build transaction: {e}") from e
    signed_txn = sign_transaction(raw_txn, owner)
    logger.debug(f"transaction: {signed_txn.hash()} {raw_txn}")

    pending = client.submit(signed_txn)
    record = client.wait_for_confirmation(pending, timeout=timeout, poll_interval=poll_interval)

    # Committed transactions consume the sequence number even when they abort
    owner.increment_sequence_number()
    logger.debug(f"transaction record: {record}")
    record.raise_for_status()

    logger.info(f"Registered {owner.address()} for {coin_type} in {record.hash}")
    return RegistrationResult(owner.address(), coin_type, record, owner.sequence_number())


def fund_account(
    client: RestClient,
    faucet_url: str,
    address: AccountAddress,
    amount: int = DEFAULT_FUND_AMOUNT,
    timeout: Optional[float] = None
) -> int:
    """
    Fund an account and verify the credit landed.

    Returns:
        Balance after funding

    Raises:
        FundingError: If the faucet fails or the balance is still zero afterwards
    """
    FaucetClient(faucet_url, client).fund(address, amount, wait_timeout=timeout)
    balance = CoinClient(client).get_account_balance(address)
    logger.info(f"Owner: {balance}")
    if balance <= 0:
        raise FundingError(f"Account {address} still has zero balance after funding")
    return balance


def run(
    profile: Profile,
    amount: int = DEFAULT_FUND_AMOUNT,
    max_gas_amount: int = DEFAULT_MAX_GAS_AMOUNT,
    timeout: Optional[float] = None,
    fund: bool = True,
    client: Optional[RestClient] = None
) -> RegistrationResult:
    """
    Full flow from a loaded profile: fund, sync sequence number, register.

    Raises:
        ConfigError: If a required profile field is missing or malformed
        InJoyError: Any failure from funding, submission or confirmation
    """
    if isinstance(max_gas_amount, bool) or not isinstance(max_gas_amount, int) or max_gas_amount <= 0:
        raise ConfigError(f"Maximum gas amount must be a positive integer, got {max_gas_amount!r}")

    rest_url = profile.require("rest_url")
    faucet_url = profile.require("faucet_url") if fund else None
    private_key = profile.require("private_key")
    address = profile.require("account")

    # Validate key material before any network traffic
    owner = LocalAccount(address, private_key)
    logger.debug(f"owner: {owner!r}")
    logger.info(f"owner address: {owner.address().to_hex_literal()}")

    owns_client = client is None
    if client is None:
        try:
            client = RestClient(rest_url)
        except ValueError as e:
            raise ConfigError(str(e)) from e
    logger.debug(f"client: {client!r}")

    try:
        if fund:
            try:
                fund_account(client, faucet_url, owner.address(), amount, timeout=timeout)
            except ValueError as e:
                raise ConfigError(str(e)) from e

        sequence_number = client.account_sequence_number(owner.address())
        owner = LocalAccount(owner.address(), private_key, sequence_number)
        return register_coin(owner, client, max_gas_amount=max_gas_amount, timeout=timeout)
    finally:
        if owns_client:
            client.close()
