import sqlite3
from pathlib import Path
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from translation_desk.config import settings


class Base(DeclarativeBase):
    pass


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(db_path: Path | None = None):
    path = db_path or settings.db_path
    engine = create_engine(
        f"sqlite:///{path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


engine = get_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


SCHEMA_SQL = """\
-- ============================================================
-- STAFF ACCOUNTS
-- ============================================================
CREATE TABLE IF NOT EXISTS staff_accounts (
    id            TEXT PRIMARY KEY,
    email         TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    name          TEXT NOT NULL,
    role          TEXT NOT NULL DEFAULT 'ADMIN'
                  CHECK(role IN ('ADMIN','SUPER_ADMIN')),
    created_at    TEXT NOT NULL
);

-- ============================================================
-- AUTH THROTTLE
-- ============================================================
CREATE TABLE IF NOT EXISTS auth_throttle (
    key             TEXT PRIMARY KEY,
    failed_attempts INTEGER NOT NULL,
    last_failed_at  REAL NOT NULL
);

-- ============================================================
-- ORDERS
-- ============================================================
CREATE TABLE IF NOT EXISTS orders (
    id                 TEXT PRIMARY KEY,
    customer_name      TEXT NOT NULL,
    customer_email     TEXT NOT NULL,
    customer_phone     TEXT,
    customer_address   TEXT,
    source_language    TEXT NOT NULL,
    target_language    TEXT NOT NULL,
    document_type      TEXT NOT NULL
                       CHECK(document_type IN ('LEGAL','MEDICAL','TECHNICAL','BUSINESS',
                                               'ACADEMIC','PERSONAL','CERTIFIED','OTHER')),
    urgency            TEXT NOT NULL DEFAULT 'STANDARD'
                       CHECK(urgency IN ('STANDARD','NEXT_DAY','SAME_DAY')),
    hard_copy          INTEGER NOT NULL DEFAULT 0,
    specialization     TEXT,
    additional_notes   TEXT,
    number_of_pages    TEXT NOT NULL,
    original_file_name TEXT NOT NULL,
    file_url           TEXT NOT NULL,
    file_size          INTEGER NOT NULL,
    file_type          TEXT NOT NULL,
    status             TEXT NOT NULL DEFAULT 'PENDING'
                       CHECK(status IN ('PENDING','UNDER_REVIEW','QUOTE_SENT','APPROVED',
                                        'IN_PROGRESS','COMPLETED','DELIVERED','CANCELLED',
                                        'ON_HOLD')),
    estimated_price    REAL,
    final_price        REAL,
    estimated_delivery TEXT,
    actual_delivery    TEXT,
    admin_notes        TEXT,
    assigned_to        TEXT,
    version            INTEGER NOT NULL DEFAULT 1,
    created_at         TEXT NOT NULL,
    updated_at         TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_orders_status ON orders(status);
CREATE INDEX IF NOT EXISTS idx_orders_created ON orders(created_at);
CREATE INDEX IF NOT EXISTS idx_orders_customer ON orders(customer_name);

-- ============================================================
-- STATUS HISTORY
-- ============================================================
-- No ON DELETE CASCADE: history rows are removed explicitly before their order.
CREATE TABLE IF NOT EXISTS status_history (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    order_id   TEXT NOT NULL REFERENCES orders(id),
    status     TEXT NOT NULL
               CHECK(status IN ('PENDING','UNDER_REVIEW','QUOTE_SENT','APPROVED',
                                'IN_PROGRESS','COMPLETED','DELIVERED','CANCELLED',
                                'ON_HOLD')),
    notes      TEXT,
    changed_by TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_status_history_order ON status_history(order_id);
"""


MIGRATIONS = [
    # v0.2: hard copy option
    "ALTER TABLE orders ADD COLUMN hard_copy INTEGER NOT NULL DEFAULT 0",
    # v0.3: optimistic concurrency token
    "ALTER TABLE orders ADD COLUMN version INTEGER NOT NULL DEFAULT 1",
]


def init_db(db_path: Path | None = None):
    path = db_path or settings.db_path
    conn = sqlite3.connect(str(path))
    conn.executescript(SCHEMA_SQL)
    # Run migrations idempotently (ALTER TABLE fails if the column exists)
    for migration in MIGRATIONS:
        try:
            conn.execute(migration)
            conn.commit()
        except sqlite3.OperationalError:
            pass  # column already exists
    conn.close()
