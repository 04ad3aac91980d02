"""
Data models for responses from the node's REST API.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .exceptions import ExecutionError


class LedgerInfo(BaseModel):
    """Response of the ledger index endpoint"""
    chain_id: int = Field(..., ge=0, le=255)
    epoch: Optional[int] = None
    ledger_version: int
    ledger_timestamp: int  # microseconds
    block_height: Optional[int] = None


class GasEstimation(BaseModel):
    """Response of the gas estimation endpoint"""
    gas_estimate: int = Field(..., gt=0)
    deprioritized_gas_estimate: Optional[int] = None
    prioritized_gas_estimate: Optional[int] = None


class AccountInfo(BaseModel):
    """On-chain account resource"""
    sequence_number: int
    authentication_key: str


class PendingTransaction(BaseModel):
    """Reference to a transaction accepted into the mempool"""
    hash: str
    sender: str
    sequence_number: int
    expiration_timestamp_secs: int


class TransactionStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    EXECUTION_FAILED = "execution_failed"


class TransactionRecord(BaseModel):
    """A transaction as reported by the node"""
    hash: str
    tx_type: str = Field(..., alias="type")
    version: Optional[int] = None
    success: Optional[bool] = None
    vm_status: Optional[str] = None
    gas_used: Optional[int] = None
    sender: Optional[str] = None
    sequence_number: Optional[int] = None

    class Config:
        populate_by_name = True

    @property
    def is_pending(self) -> bool:
        return self.tx_type == "pending_transaction"

    @property
    def status(self) -> TransactionStatus:
        if self.is_pending:
            return TransactionStatus.PENDING
        if self.success:
            return TransactionStatus.SUCCESS
        return TransactionStatus.EXECUTION_FAILED

    def raise_for_status(self) -> "TransactionRecord":
        """
        Raise if the transaction committed but aborted on-chain.

        Returns:
            self, for chaining

        Raises:
            ExecutionError: If the committed transaction did not succeed
        """
        if self.status == TransactionStatus.EXECUTION_FAILED:
            raise ExecutionError(
                f"Transaction {self.hash} failed on-chain: {self.vm_status}",
                vm_status=self.vm_status,
                tx_hash=self.hash
            )
        return self
