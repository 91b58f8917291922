"""Pattern store: learned keyword weights per category."""

from typing import List, Optional
from models.category import Pattern

# Applied to an existing (category, keyword) pattern on every repeated observation
WEIGHT_INCREMENT = 0.1
INITIAL_WEIGHT = 1.0


class PatternService:
    """Service for reading and reinforcing learned category patterns."""

    def __init__(self, db_manager):
        """Initialize the pattern service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def list(self, user_id: str, category_id: Optional[int] = None) -> List[Pattern]:
        """List a user's patterns, optionally restricted to one category.

        Args:
            user_id: Owner of the categories the patterns belong to.
            category_id: Optional category ID to filter by.

        Returns:
            List of Pattern objects ordered by weight (highest first).
        """
        query = """
            SELECT p.id, p.category_id, p.keyword, p.weight, p.occurrences
            FROM category_patterns p
            JOIN categories c ON c.id = p.category_id
            WHERE c.user_id = ?
        """
        params = [user_id]

        if category_id is not None:
            query += " AND p.category_id = ?"
            params.append(category_id)

        query += " ORDER BY p.weight DESC, p.id"

        with self.db_manager.connect() as conn:
            cursor = conn.execute(query, params)
            return [
                Pattern(
                    id=row[0],
                    category_id=row[1],
                    keyword=row[2],
                    weight=row[3],
                    occurrences=row[4],
                )
                for row in cursor.fetchall()
            ]

    def upsert(self, category_id: int, keyword: str) -> Pattern:
        """Record one observation of a keyword for a category.

        Creates the pattern at weight 1.0 with one occurrence, or adds one
        occurrence and 0.1 weight to the existing pattern. The increment is
        done by a single statement so concurrent observations are not lost.

        Args:
            category_id: The category the keyword was observed for.
            keyword: Normalized keyword.

        Returns:
            The pattern as stored after the update.

        Raises:
            sqlite3.IntegrityError: If the category does not exist.
        """
        with self.db_manager.connect() as conn:
            conn.execute(
                """
                INSERT INTO category_patterns (category_id, keyword, weight, occurrences)
                VALUES (?, ?, ?, 1)
                ON CONFLICT (category_id, keyword) DO UPDATE SET
                    weight = weight + ?,
                    occurrences = occurrences + 1,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (category_id, keyword, INITIAL_WEIGHT, WEIGHT_INCREMENT),
            )
            cursor = conn.execute(
                """
                SELECT id, category_id, keyword, weight, occurrences
                FROM category_patterns
                WHERE category_id = ? AND keyword = ?
                """,
                (category_id, keyword),
            )
            row = cursor.fetchone()
            conn.commit()

        return Pattern(
            id=row[0],
            category_id=row[1],
            keyword=row[2],
            weight=row[3],
            occurrences=row[4],
        )

    def count(self, category_id: int) -> int:
        """Count the patterns learned for a category."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT COUNT(*) FROM category_patterns WHERE category_id = ?",
                (category_id,),
            )
            return cursor.fetchone()[0]
