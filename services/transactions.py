"""Transaction service for database operations."""

from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from models.transaction import Transaction

# SQL Query Constants
_TRANSACTION_FIELDS = """id, user_id, transaction_time, amount, beneficiary_name,
    beneficiary_account, remark, category, is_user_labeled"""

# Automatically generate placeholders from field count
_TRANSACTION_INSERT_PLACEHOLDERS = (
    f"({', '.join(['?'] * len(_TRANSACTION_FIELDS.split(',')))})"
)


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db_manager):
        """Initialize the transaction service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def create(self, transaction: Transaction) -> Transaction:
        """Create a single transaction in the database.

        Args:
            transaction: Transaction object to insert.

        Returns:
            The same Transaction object.

        Raises:
            sqlite3.IntegrityError: If a transaction with the same ID exists.
        """
        with self.db_manager.connect() as conn:
            conn.execute(
                f"""
                INSERT INTO transactions ({_TRANSACTION_FIELDS})
                VALUES {_TRANSACTION_INSERT_PLACEHOLDERS}
                """,
                self._transaction_to_row(transaction),
            )
            conn.commit()

        return transaction

    def bulk_create(self, transactions: List[Transaction]) -> int:
        """Create multiple transactions, skipping IDs that already exist.

        Args:
            transactions: List of Transaction objects to insert.

        Returns:
            Number of transactions inserted.
        """
        if not transactions:
            return 0

        with self.db_manager.connect() as conn:
            before = conn.total_changes
            conn.executemany(
                f"""
                INSERT OR IGNORE INTO transactions ({_TRANSACTION_FIELDS})
                VALUES {_TRANSACTION_INSERT_PLACEHOLDERS}
                """,
                [self._transaction_to_row(t) for t in transactions],
            )
            conn.commit()
            return conn.total_changes - before

    def exists(self, transaction_id: str) -> bool:
        """Check whether a transaction ID is already stored."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT 1 FROM transactions WHERE id = ?", (transaction_id,)
            )
            return cursor.fetchone() is not None

    def find(self, transaction_id: str) -> Optional[Transaction]:
        """Get a single transaction by ID.

        Args:
            transaction_id: The transaction ID.

        Returns:
            Transaction object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_TRANSACTION_FIELDS} FROM transactions WHERE id = ?",
                (transaction_id,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_transaction(row)
            return None

    def find_by_user(
        self, user_id: str, *, category: Optional[str] = None
    ) -> List[Transaction]:
        """Get all transactions of a user.

        Args:
            user_id: Owner of the transactions.
            category: Optional category name to filter by.

        Returns:
            List of Transaction objects, newest first.
        """
        query = f"SELECT {_TRANSACTION_FIELDS} FROM transactions WHERE user_id = ?"
        params = [user_id]

        if category is not None:
            query += " AND category = ?"
            params.append(category)

        query += " ORDER BY transaction_time DESC, id"

        with self.db_manager.connect() as conn:
            cursor = conn.execute(query, params)
            return [self._row_to_transaction(row) for row in cursor.fetchall()]

    def set_category(
        self, transaction_id: str, category: str, user_labeled: bool = True
    ) -> bool:
        """Set the category of a stored transaction.

        Args:
            transaction_id: The transaction ID.
            category: New category name.
            user_labeled: Whether the category was chosen by the user.

        Returns:
            True if a transaction was updated, False if not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                UPDATE transactions
                SET category = ?, is_user_labeled = ?
                WHERE id = ?
                """,
                (category, int(user_labeled), transaction_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def _transaction_to_row(self, t: Transaction) -> tuple:
        """Convert a Transaction to a tuple in _TRANSACTION_FIELDS order."""
        return (
            t.id,
            t.user_id,
            t.transaction_time.isoformat() if t.transaction_time else None,
            str(t.amount),
            t.beneficiary_name,
            t.beneficiary_account,
            t.remark,
            t.category,
            int(t.is_user_labeled),
        )

    def _row_to_transaction(self, row: tuple) -> Transaction:
        """Convert a database row to a Transaction object."""
        return Transaction(
            id=row[0],
            user_id=row[1],
            transaction_time=datetime.fromisoformat(row[2]) if row[2] else None,
            amount=Decimal(row[3]),
            beneficiary_name=row[4],
            beneficiary_account=row[5],
            remark=row[6],
            category=row[7],
            is_user_labeled=bool(row[8]),
        )
