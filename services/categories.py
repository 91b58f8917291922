"""Category service for database operations."""

import json
from typing import List, Optional
from config import get_seed_dir
from models.category import Category, Pattern, DEFAULT_ICON, DEFAULT_COLOR

_CATEGORY_SELECT_FIELDS = "id, user_id, name, icon, color, is_default"


class CategoryService:
    """Service for managing per-user categories."""

    def __init__(self, db_manager):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self, user_id: str) -> List[Category]:
        """Get all categories of a user.

        Args:
            user_id: Owner of the categories.

        Returns:
            List of Category objects, default categories first, then by name.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_CATEGORY_SELECT_FIELDS}
                FROM categories
                WHERE user_id = ?
                ORDER BY is_default DESC, name
                """,
                (user_id,),
            )
            return [self._row_to_category(row) for row in cursor.fetchall()]

    def find_all_with_patterns(self, user_id: str) -> List[Category]:
        """Get all categories of a user with their learned patterns attached.

        Patterns of each category are ordered by weight (highest first).

        Args:
            user_id: Owner of the categories.

        Returns:
            List of Category objects with ``patterns`` populated.
        """
        # One statement, so categories and patterns come from the same snapshot
        # even while other connections are learning
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                SELECT c.id, c.user_id, c.name, c.icon, c.color, c.is_default,
                       p.id, p.keyword, p.weight, p.occurrences
                FROM categories c
                LEFT JOIN category_patterns p ON p.category_id = c.id
                WHERE c.user_id = ?
                ORDER BY c.is_default DESC, c.name, p.weight DESC, p.id
                """,
                (user_id,),
            )
            rows = cursor.fetchall()

        by_id = {}
        for row in rows:
            category = by_id.get(row[0])
            if category is None:
                category = by_id[row[0]] = self._row_to_category(row[:6])
            if row[6] is not None:
                category.patterns.append(
                    Pattern(
                        id=row[6],
                        category_id=row[0],
                        keyword=row[7],
                        weight=row[8],
                        occurrences=row[9],
                    )
                )

        return list(by_id.values())

    def find(self, category_id: int) -> Optional[Category]:
        """Get a single category by ID.

        Args:
            category_id: The category ID to find.

        Returns:
            Category object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories WHERE id = ?",
                (category_id,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_category(row)
            return None

    def find_by_name(self, user_id: str, name: str) -> Optional[Category]:
        """Get a user's category by name (case-sensitive).

        Args:
            user_id: Owner of the category.
            name: The category name to find.

        Returns:
            Category object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_CATEGORY_SELECT_FIELDS}
                FROM categories
                WHERE user_id = ? AND name = ?
                """,
                (user_id, name),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_category(row)
            return None

    def create(
        self,
        user_id: str,
        name: str,
        icon: str = DEFAULT_ICON,
        color: str = DEFAULT_COLOR,
        is_default: bool = False,
    ) -> Category:
        """Create a new category.

        Args:
            user_id: Owner of the category.
            name: Category name (must be unique for the user).
            icon: Display icon.
            color: Display color.
            is_default: Whether this is part of the default category set.

        Returns:
            The created Category object with id populated.

        Raises:
            sqlite3.IntegrityError: If the user already has a category with this name.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO categories (user_id, name, icon, color, is_default)
                VALUES (?, ?, ?, ?, ?)
                """,
                (user_id, name, icon, color, int(is_default)),
            )
            conn.commit()

            return Category(
                id=cursor.lastrowid,
                user_id=user_id,
                name=name,
                icon=icon,
                color=color,
                is_default=is_default,
            )

    def find_or_create(self, user_id: str, name: str) -> Category:
        """Get a user's category by name, creating it with default looks if absent.

        Concurrent callers creating the same category converge on one row.

        Args:
            user_id: Owner of the category.
            name: Category name.

        Returns:
            The existing or newly created Category.
        """
        with self.db_manager.connect() as conn:
            conn.execute(
                """
                INSERT OR IGNORE INTO categories (user_id, name, icon, color, is_default)
                VALUES (?, ?, ?, ?, 0)
                """,
                (user_id, name, DEFAULT_ICON, DEFAULT_COLOR),
            )
            conn.commit()

        return self.find_by_name(user_id, name)

    def ensure_defaults(self, user_id: str) -> List[Category]:
        """Create the default category set for a user that has no categories.

        Args:
            user_id: Owner of the categories.

        Returns:
            All categories of the user after seeding.
        """
        existing = self.find_all(user_id)
        if existing:
            return existing

        with self.db_manager.connect() as conn:
            conn.executemany(
                """
                INSERT OR IGNORE INTO categories (user_id, name, icon, color, is_default)
                VALUES (?, ?, ?, ?, 1)
                """,
                [
                    (user_id, item["name"], item["icon"], item["color"])
                    for item in load_default_categories()
                ],
            )
            conn.commit()

        return self.find_all(user_id)

    def update(
        self, category_id: int, name: str, icon: str, color: str
    ) -> Category:
        """Update an existing category.

        Args:
            category_id: The category ID to update.
            name: New category name.
            icon: New display icon.
            color: New display color.

        Returns:
            The updated Category object.

        Raises:
            Exception: If category not found or update fails.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "UPDATE categories SET name = ?, icon = ?, color = ? WHERE id = ?",
                (name, icon, color, category_id),
            )
            conn.commit()

            if cursor.rowcount == 0:
                raise Exception(f"Category with ID {category_id} not found")

        return self.find(category_id)

    def delete(self, category_id: int) -> bool:
        """Delete a category and all of its learned patterns.

        Args:
            category_id: The category ID to delete.

        Returns:
            True if category was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            conn.execute(
                "DELETE FROM category_patterns WHERE category_id = ?", (category_id,)
            )
            cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            conn.commit()
            return cursor.rowcount > 0

    def _row_to_category(self, row: tuple) -> Category:
        """Convert a database row to a Category object."""
        return Category(
            id=row[0],
            user_id=row[1],
            name=row[2],
            icon=row[3],
            color=row[4],
            is_default=bool(row[5]),
        )


def load_default_categories() -> List[dict]:
    """Load the default category set from db/seed/categories.json."""
    with open(get_seed_dir() / "categories.json", "r", encoding="utf-8") as f:
        return json.load(f)
