"""
RestClient - client for a ledger node's REST API.

This client handles:
1. Resolving chain context (chain id, gas price estimate)
2. Reading account state (sequence number, view functions)
3. Submitting signed transactions
4. Waiting for submitted transactions to reach a terminal state
"""
import logging
import time
import urllib.parse
from typing import Any, Callable, List, Optional, Tuple, Type, TypeVar, Union

import requests
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ._rate_limited_log import rate_limited_log
from .account_address import AccountAddress
from .exceptions import NetworkError, ProtocolError, TransactionTimeoutError, ValidationError
from .models import AccountInfo, GasEstimation, LedgerInfo, PendingTransaction, TransactionRecord
from .signer import SignedTransaction
from .version import user_agent

M = TypeVar('M', bound=BaseModel)

API_VERSION_PATH = "/v1"
BCS_SIGNED_TRANSACTION = "application/x.aptos.signed_transaction+bcs"
LEDGER_TIMESTAMP_HEADER = "X-Aptos-Ledger-TimestampUsec"

DEFAULT_WAIT_TIMEOUT = 60
DEFAULT_POLL_INTERVAL = 0.5


def validate_url(url_name: str, url: str) -> str:
    """
    Require https except for local development endpoints.

    Raises:
        ValueError: If the URL is malformed or uses plain http to a remote host
    """
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"{url_name} is not a valid http(s) URL: {url!r}")
    host = parsed.hostname or ''
    is_local = host in ('localhost', '127.0.0.1')
    if parsed.scheme != 'https' and not is_local:
        raise ValueError(f"{url_name} must use https:// for security (got: {parsed.scheme}://)")
    return url


def build_session(retry_count: int = 0) -> requests.Session:
    """
    Create an HTTP session.

    Only idempotent GETs are ever retried, and none are by default.
    Every request carries the SDK User-Agent.
    """
    session = requests.Session()
    session.headers["User-Agent"] = user_agent()
    retries = Retry(
        total=retry_count,
        connect=retry_count,
        read=retry_count,
        backoff_factor=0.5,
        status_forcelist=[500, 502, 503, 504],
        allowed_methods=["GET"],
        raise_on_status=False
    )
    session.mount("http://", HTTPAdapter(max_retries=retries))
    session.mount("https://", HTTPAdapter(max_retries=retries))
    return session


class RestClient:
    """
    Client for a ledger node.

    To use this client, you'll need the node's REST URL, e.g.
    ``https://fullnode.devnet.aptoslabs.com``. The ``/v1`` API prefix is
    appended when missing.
    """

    def __init__(
        self,
        base_url: str,
        retry_count: int = 0,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
        clock: Optional[Callable[[], float]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the RestClient

        Args:
            base_url: Node REST endpoint
            retry_count: Retries for idempotent GET requests (0 disables retries)
            timeout: Timeout for each HTTP request in seconds
            session: Optional pre-configured requests session
            clock: Monotonic clock used for confirmation deadlines
            logger: Optional logger instance

        Raises:
            ValueError: If the URL is invalid or not https for a remote host
        """
        validate_url("rest_url", base_url)
        base_url = base_url.rstrip('/')
        if not base_url.endswith(API_VERSION_PATH):
            base_url += API_VERSION_PATH
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or build_session(retry_count)
        self.clock = clock or time.monotonic
        self.logger = logger or logging.getLogger(__name__)

    def __repr__(self) -> str:
        return f"RestClient(base_url={self.base_url!r}, timeout={self.timeout})"

    def __enter__(self) -> "RestClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, operation: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            self.logger.error(f"{operation} request failed: {e}")
            raise NetworkError(f"{operation} failed: {str(e)}") from e

        if response.status_code >= 500:
            raise NetworkError(
                f"{operation} failed: HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code
            )
        return response

    def _json(self, response: requests.Response, operation: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ProtocolError(f"{operation} returned invalid JSON: {str(e)}") from e

    def _parse(self, model: Type[M], data: Any, operation: str) -> M:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ProtocolError(f"{operation} returned a malformed response: {e}") from e

    def _get(self, path: str, operation: str, **kwargs) -> Any:
        response = self._request("GET", path, operation, **kwargs)
        if response.status_code >= 400:
            message, _, _ = _error_detail(response)
            raise ProtocolError(f"{operation} failed: HTTP {response.status_code}: {message}")
        return self._json(response, operation)

    # ------------------------------------------------------------------
    # Chain context
    # ------------------------------------------------------------------

    def ledger_info(self) -> LedgerInfo:
        return self._parse(LedgerInfo, self._get("/", "get_index"), "get_index")

    def resolve_chain_id(self) -> int:
        """
        Get the chain identifier of the connected network.

        Raises:
            NetworkError: If the node is unreachable
            ProtocolError: If the response is malformed
        """
        chain_id = self.ledger_info().chain_id
        self.logger.debug(f"Resolved chain id: {chain_id}")
        return chain_id

    def estimate_gas_price(self) -> int:
        """
        Get the node's current gas unit price estimate. Not cached.

        Raises:
            NetworkError: If the node is unreachable
            ProtocolError: If the response is malformed
        """
        data = self._get("/estimate_gas_price", "estimate_gas_price")
        estimate = self._parse(GasEstimation, data, "estimate_gas_price").gas_estimate
        self.logger.debug(f"Estimated gas price: {estimate}")
        return estimate

    # ------------------------------------------------------------------
    # Account state
    # ------------------------------------------------------------------

    def account(self, address: AccountAddress) -> AccountInfo:
        data = self._get(f"/accounts/{address.to_hex_literal()}", "get_account")
        return self._parse(AccountInfo, data, "get_account")

    def account_sequence_number(self, address: AccountAddress) -> int:
        return self.account(address).sequence_number

    def view(
        self,
        function: str,
        type_arguments: Optional[List[str]] = None,
        arguments: Optional[List[Any]] = None
    ) -> List[Any]:
        """
        Call a view function.

        Args:
            function: Fully-qualified function, e.g. ``0x1::coin::balance``
            type_arguments: Type argument strings
            arguments: JSON-encoded value arguments

        Returns:
            List of return values
        """
        body = {
            "function": function,
            "type_arguments": type_arguments or [],
            "arguments": arguments or [],
        }
        response = self._request("POST", "/view", "view", json=body)
        if response.status_code >= 400:
            message, _, _ = _error_detail(response)
            raise ProtocolError(f"view {function} failed: HTTP {response.status_code}: {message}")
        result = self._json(response, "view")
        if not isinstance(result, list):
            raise ProtocolError(f"view {function} returned {type(result).__name__}, expected list")
        return result

    # ------------------------------------------------------------------
    # Submission & confirmation
    # ------------------------------------------------------------------

    def submit(self, signed_txn: SignedTransaction) -> PendingTransaction:
        """
        Submit a signed transaction.

        Args:
            signed_txn: Transaction to submit

        Returns:
            Reference to the pending transaction

        Raises:
            NetworkError: On connectivity problems or server errors
            ValidationError: If the node rejects the transaction
            ProtocolError: If the acceptance response is malformed
        """
        response = self._request(
            "POST",
            "/transactions",
            "submit_transaction",
            data=signed_txn.bytes(),
            headers={"Content-Type": BCS_SIGNED_TRANSACTION}
        )
        if response.status_code >= 400:
            message, error_code, vm_error_code = _error_detail(response)
            self.logger.error(f"Transaction rejected: {message}")
            raise ValidationError(
                f"submit_transaction rejected: {message}",
                error_code=error_code,
                vm_error_code=vm_error_code,
                status_code=response.status_code
            )

        pending = self._parse(
            PendingTransaction, self._json(response, "submit_transaction"), "submit_transaction"
        )
        self.logger.info(f"Transaction sent: {pending.hash}")
        return pending

    def transaction_by_hash(self, tx_hash: str) -> Optional[TransactionRecord]:
        """
        Look up a transaction.

        Returns:
            The record, or None if the node does not know the hash yet
        """
        record, _ = self._fetch_transaction(tx_hash)
        return record

    def _fetch_transaction(self, tx_hash: str) -> Tuple[Optional[TransactionRecord], Optional[int]]:
        response = self._request("GET", f"/transactions/by_hash/{tx_hash}", "get_transaction")
        ledger_timestamp = _ledger_timestamp(response)
        if response.status_code == 404:
            return None, ledger_timestamp
        if response.status_code >= 400:
            message, _, _ = _error_detail(response)
            raise ProtocolError(f"get_transaction failed: HTTP {response.status_code}: {message}")
        data = self._json(response, "get_transaction")
        return self._parse(TransactionRecord, data, "get_transaction"), ledger_timestamp

    def wait_for_confirmation(
        self,
        pending: Union[PendingTransaction, str],
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None
    ) -> TransactionRecord:
        """
        Poll until a submitted transaction is committed.

        A committed record is returned whether or not its execution succeeded;
        use ``record.raise_for_status()`` to turn an on-chain abort into an
        ExecutionError.

        Args:
            pending: Pending transaction reference (or bare hash)
            timeout: Seconds to wait before giving up (default 60)
            poll_interval: Seconds between polls (default 0.5)

        Returns:
            Committed transaction record

        Raises:
            TransactionTimeoutError: If no terminal state is reached before the deadline
            ValidationError: If the transaction expired before inclusion
            NetworkError: On connectivity problems
        """
        if isinstance(pending, PendingTransaction):
            tx_hash = pending.hash
            expiration = pending.expiration_timestamp_secs
        else:
            tx_hash, expiration = pending, None

        timeout = DEFAULT_WAIT_TIMEOUT if timeout is None else timeout
        poll_interval = DEFAULT_POLL_INTERVAL if poll_interval is None else poll_interval
        deadline = self.clock() + timeout
        polls = 0

        while True:
            record, ledger_timestamp = self._fetch_transaction(tx_hash)
            polls += 1

            if record is not None and not record.is_pending:
                self.logger.info(
                    f"Transaction {tx_hash} committed at version {record.version}: {record.vm_status}"
                )
                return record

            if (
                record is None
                and expiration is not None
                and ledger_timestamp is not None
                and expiration <= ledger_timestamp // 1_000_000
            ):
                raise ValidationError(
                    f"Transaction {tx_hash} expired at {expiration} before it was committed",
                    error_code="transaction_expired"
                )

            if self.clock() >= deadline:
                raise TransactionTimeoutError(
                    f"Transaction {tx_hash} not committed after {timeout}s ({polls} polls)",
                    tx_hash=tx_hash
                )

            rate_limited_log(
                f"Waiting for transaction {tx_hash}",
                level="info",
                logger_instance=self.logger
            )
            time.sleep(poll_interval)

    def submit_and_wait(
        self,
        signed_txn: SignedTransaction,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None
    ) -> TransactionRecord:
        pending = self.submit(signed_txn)
        return self.wait_for_confirmation(pending, timeout=timeout, poll_interval=poll_interval)


def _ledger_timestamp(response: requests.Response) -> Optional[int]:
    value = response.headers.get(LEDGER_TIMESTAMP_HEADER)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _error_detail(response: requests.Response) -> Tuple[str, Optional[str], Optional[int]]:
    """Extract (message, error_code, vm_error_code) from an error response"""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}", None, None
    if not isinstance(body, dict):
        return str(body)[:200], None, None
    return (
        str(body.get("message", body)),
        body.get("error_code"),
        body.get("vm_error_code"),
    )
