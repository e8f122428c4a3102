import os
import oracledb
import logging
from typing import Dict, Optional

from config import settings

logger = logging.getLogger(__name__)

# Role -> (settings attribute holding the pool max, purpose)
POOL_ROLES = {
    "read": ("DB_READ_POOL_MAX", "paginated corpus scans"),
    "write": ("DB_WRITE_POOL_MAX", "batched updates/deletes"),
}


class DatabaseManager:
    _pools: Dict[str, "oracledb.ConnectionPool"] = {}

    @staticmethod
    def _wallet_location() -> Optional[str]:
        if settings.DB_WALLET_DIR:
            return settings.DB_WALLET_DIR
        backend_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        wallet = os.path.join(backend_dir, "wallet")
        return wallet if os.path.isdir(wallet) else None

    @classmethod
    def _create_pool(cls, max_size: int):
        wallet = cls._wallet_location()
        wallet_args = {}
        if wallet:
            wallet_args = {
                "config_dir": wallet,
                "wallet_location": wallet,
                "wallet_password": settings.DB_PASSWORD,
            }
        return oracledb.create_pool(
            user=settings.DB_USER,
            password=settings.DB_PASSWORD,
            dsn=settings.DB_DSN,
            min=max(1, settings.DB_POOL_MIN // len(POOL_ROLES)),
            max=max_size,
            increment=1,
            getmode=oracledb.POOL_GETMODE_WAIT,
            **wallet_args,
        )

    @classmethod
    def init_pool(cls):
        """
        Opens one pool per role: READ for corpus scans, WRITE for apply
        batches.
        """
        if cls._pools:
            logger.warning("Database pools already initialized.")
            return

        if not settings.DB_PASSWORD:
            raise ValueError("CRITICAL: DB_PASSWORD is missing from environment variables.")

        logger.info(f"Initializing Database Pools (Read/Write) for user: {settings.DB_USER}")
        try:
            for role, (max_attr, purpose) in POOL_ROLES.items():
                max_size = getattr(settings, max_attr)
                cls._pools[role] = cls._create_pool(max_size)
                logger.info(f"✓ {role.upper()} pool ready ({purpose}), max={max_size}")
        except Exception as e:
            logger.error(f"Failed to initialize Database Pools: {e}")
            cls.close_pool()
            raise

    @classmethod
    def close_pool(cls):
        for role, pool in list(cls._pools.items()):
            try:
                pool.close()
            except oracledb.Error as e:
                logger.warning(f"Error closing {role} pool: {e}")
        cls._pools = {}
        logger.info("Database Pools (Read/Write) closed.")

    @classmethod
    def _acquire(cls, role: str):
        if role not in cls._pools:
            cls.init_pool()
        try:
            return cls._pools[role].acquire()
        except oracledb.Error as e:
            if "timeout" in str(e).lower():
                logger.error(f"Database {role.upper()} pool exhausted")
                raise RuntimeError(f"Database {role.upper()} temporarily unavailable (pool exhausted)") from e
            raise

    @classmethod
    def get_read_connection(cls):
        """Acquires a connection from the READ pool."""
        return cls._acquire("read")

    @classmethod
    def get_write_connection(cls):
        """Acquires a connection from the WRITE pool."""
        return cls._acquire("write")

    @classmethod
    def get_pool_stats(cls):
        stats = {}
        for role, (max_attr, _) in POOL_ROLES.items():
            pool = cls._pools.get(role)
            stats[role] = {
                "active": pool.busy if pool else 0,
                "opened": pool.opened if pool else 0,
                "max": getattr(settings, max_attr),
            }
        return stats


def _read_lob_chunks(read_fn, max_chars: int, chunk_size: int) -> str:
    # Oracle LOB offsets are 1-based
    parts = []
    offset = 1
    remaining = max_chars
    while remaining > 0:
        piece = read_fn(offset, min(chunk_size, remaining))
        if not piece:
            break
        piece = str(piece)[:remaining]
        parts.append(piece)
        remaining -= len(piece)
        offset += len(piece)
    return "".join(parts)


def _read_stream_chunks(read_fn, max_chars: int, chunk_size: int) -> str:
    parts = []
    remaining = max_chars
    while remaining > 0:
        piece = read_fn(min(chunk_size, remaining))
        if not piece:
            break
        piece = str(piece)[:remaining]
        parts.append(piece)
        remaining -= len(piece)
    return "".join(parts)


def safe_read_clob(clob_obj, max_chars: int = 10_000_000, chunk_size: int = 65_536) -> str:
    """
    Read a CLOB column value into a str, capped at max_chars.

    Accepts plain strings, Oracle LOBs (read(offset, amount)), file-like
    readers (read(size)) and read-all objects (read()).
    """
    if clob_obj is None:
        return ""
    if isinstance(clob_obj, str):
        return clob_obj[:max_chars]

    read_fn = getattr(clob_obj, "read", None)
    if not callable(read_fn):
        return str(clob_obj)[:max_chars]

    for reader in (_read_lob_chunks, _read_stream_chunks):
        try:
            text = reader(read_fn, max_chars, chunk_size)
        except TypeError:
            continue
        if text:
            return text

    text = read_fn()
    return "" if text is None else str(text)[:max_chars]
