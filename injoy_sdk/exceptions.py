"""
Exceptions for the InJoy SDK.
"""
from typing import Optional


class InJoyError(Exception):
    """Base exception for all InJoy SDK errors."""
    pass


class ConfigError(InJoyError):
    """Raised when a required configuration field or key material is missing or malformed."""
    pass


class NetworkError(InJoyError):
    """Raised when the node or faucet cannot be reached or answers with a server error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ProtocolError(InJoyError):
    """Raised when a response from the node is malformed."""
    pass


class ValidationError(InJoyError):
    """Raised when the node rejects a transaction or the transaction expires."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        vm_error_code: Optional[int] = None,
        status_code: Optional[int] = None
    ):
        self.error_code = error_code
        self.vm_error_code = vm_error_code
        self.status_code = status_code
        super().__init__(message)


class ExecutionError(InJoyError):
    """Raised when a committed transaction aborted on-chain."""

    def __init__(self, message: str, vm_status: Optional[str] = None, tx_hash: Optional[str] = None):
        self.vm_status = vm_status
        self.tx_hash = tx_hash
        super().__init__(message)


class TransactionTimeoutError(InJoyError, TimeoutError):
    """Raised when a transaction does not reach a terminal state before the deadline."""

    def __init__(self, message: str, tx_hash: Optional[str] = None):
        self.tx_hash = tx_hash
        super().__init__(message)


class ClockError(InJoyError):
    """Raised when the wall clock cannot be read while building a transaction."""
    pass


class EnvelopeError(InJoyError):
    """Raised when a transaction envelope is incomplete or cannot be signed."""
    pass


class FundingError(InJoyError):
    """Raised when funding an account through the faucet fails."""
    pass
