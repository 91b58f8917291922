from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
import hashlib


@dataclass
class Transaction:
    id: str  # bank reference number, or checksum of the raw record
    user_id: str
    amount: Decimal  # always non-negative
    beneficiary_name: Optional[str] = None
    beneficiary_account: Optional[str] = None
    remark: Optional[str] = None
    transaction_time: Optional[datetime] = None
    category: Optional[str] = None
    is_user_labeled: bool = False

    @classmethod
    def create_with_checksum(
        cls,
        raw_data: str,
        user_id: str,
        amount: Decimal,
        beneficiary_name: Optional[str] = None,
        beneficiary_account: Optional[str] = None,
        remark: Optional[str] = None,
        transaction_time: Optional[datetime] = None,
    ) -> "Transaction":
        """Create a Transaction with auto-generated checksum ID."""
        transaction_id = hashlib.sha256(raw_data.encode("utf-8")).hexdigest()
        return cls(
            id=transaction_id,
            user_id=user_id,
            amount=amount,
            beneficiary_name=beneficiary_name,
            beneficiary_account=beneficiary_account,
            remark=remark,
            transaction_time=transaction_time,
        )

    @classmethod
    def from_record(cls, record: dict, user_id: str) -> "Transaction":
        """Build a Transaction from a structured record of the email extractor.

        The record uses the extractor's field names (``beneficiaryName``,
        ``referenceNumber``...). Records without a reference number get a
        checksum ID over their raw content.
        """
        time_value = record.get("transactionTime")
        amount = Decimal(str(record.get("amount", 0)))
        if amount < 0:
            raise ValueError(f"Transaction amount must be non-negative: {amount}")

        raw = "|".join(
            str(record.get(key) or "")
            for key in (
                "transactionTime",
                "amount",
                "beneficiaryName",
                "beneficiaryAccount",
                "remark",
            )
        )
        transaction = cls.create_with_checksum(
            raw_data=raw,
            user_id=user_id,
            amount=amount,
            beneficiary_name=record.get("beneficiaryName"),
            beneficiary_account=record.get("beneficiaryAccount"),
            remark=record.get("remark"),
            transaction_time=datetime.fromisoformat(time_value) if time_value else None,
        )
        if record.get("referenceNumber"):
            transaction.id = str(record["referenceNumber"])
        return transaction
