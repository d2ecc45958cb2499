"""
Product Database

SQLite-backed relational store for users and products.

Features:
- Tables created on startup if missing
- Image path lists stored as JSON arrays
- Thread-safe operations with Lock
- Equality / range / substring filters for product listing
"""

import json
import logging
import sqlite3
from threading import Lock
from typing import Any, List, Optional

from .models import NewProduct, Product, ProductFilters, User

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    product_name TEXT NOT NULL,
    product_description TEXT NOT NULL DEFAULT '',
    product_images TEXT NOT NULL DEFAULT '[]',
    compressed_product_images TEXT NOT NULL DEFAULT '[]',
    product_price REAL NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_products_user_id ON products (user_id);
"""


class ProductDatabase:
    """
    Manages database operations for users and products.

    Usage:
        db = ProductDatabase("catalog.db")
        product = db.create_product(NewProduct(...))
        db.close()
    """

    def __init__(self, db_path: str = "catalog.db"):
        """
        Initialize ProductDatabase

        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        self.db_path = db_path
        self._lock = Lock()
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._create_tables()
        logger.info(f"[Database] Using {db_path}")

    def _create_tables(self) -> None:
        """Create tables if they don't exist"""
        with self._lock:
            self.conn.executescript(SCHEMA)
            self.conn.commit()

    def close(self) -> None:
        with self._lock:
            self.conn.close()

    @staticmethod
    def _product_from_row(row: sqlite3.Row) -> Product:
        return Product(
            id=row["id"],
            user_id=row["user_id"],
            product_name=row["product_name"],
            product_description=row["product_description"],
            product_images=json.loads(row["product_images"] or "[]"),
            compressed_product_images=json.loads(row["compressed_product_images"] or "[]"),
            product_price=row["product_price"],
        )

    # =========================================================================
    # USER OPERATIONS
    # =========================================================================

    def create_user(self, name: str) -> User:
        with self._lock:
            cursor = self.conn.execute("INSERT INTO users (name) VALUES (?)", (name,))
            self.conn.commit()
            return User(id=cursor.lastrowid, name=name)

    def get_user(self, user_id: int) -> Optional[User]:
        with self._lock:
            row = self.conn.execute(
                "SELECT id, name FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        if not row:
            return None
        return User(id=row["id"], name=row["name"])

    # =========================================================================
    # PRODUCT OPERATIONS
    # =========================================================================

    def create_product(self, product: NewProduct) -> Product:
        """
        Insert a product.

        Returns:
            The stored product, with its assigned ID.
        """
        with self._lock:
            cursor = self.conn.execute(
                """
                INSERT INTO products (
                    user_id, product_name, product_description,
                    product_images, compressed_product_images, product_price
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    product.user_id,
                    product.product_name,
                    product.product_description,
                    json.dumps(product.product_images),
                    json.dumps(product.compressed_product_images),
                    product.product_price,
                ),
            )
            self.conn.commit()
            product_id = cursor.lastrowid

        return Product(id=product_id, **product.model_dump())

    def get_product(self, product_id: int) -> Optional[Product]:
        """Get product by ID"""
        with self._lock:
            row = self.conn.execute(
                "SELECT * FROM products WHERE id = ?", (product_id,)
            ).fetchone()
        return self._product_from_row(row) if row else None

    def list_products(self, filters: Optional[ProductFilters] = None) -> List[Product]:
        """
        List products matching every given filter.

        ``product_name`` matches case-insensitively as a substring.
        """
        filters = filters or ProductFilters()
        clauses: List[str] = []
        params: List[Any] = []

        if filters.user_id is not None:
            clauses.append("user_id = ?")
            params.append(filters.user_id)
        if filters.min_price is not None:
            clauses.append("product_price >= ?")
            params.append(filters.min_price)
        if filters.max_price is not None:
            clauses.append("product_price <= ?")
            params.append(filters.max_price)
        if filters.product_name:
            clauses.append("LOWER(product_name) LIKE ?")
            params.append(f"%{filters.product_name.lower()}%")

        query = "SELECT * FROM products"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY id"

        with self._lock:
            rows = self.conn.execute(query, params).fetchall()
        return [self._product_from_row(row) for row in rows]
