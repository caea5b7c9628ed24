"""MySQL connection management and repositories for users and transactions."""

import re
from contextlib import closing
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl

import pymysql

from mms import config, logger
from mms.transaction import Transaction
from mms.user import User

SCHEMA_PATH = Path("internal", "infrastructure", "persistence", "migration", "schema.sql")

_DEFAULT_HOST = "127.0.0.1"
_DEFAULT_PORT = 3306
_ADDRESS = re.compile(r"^(\w*)(?:\((.*)\))?$")
_HOST_PORT = re.compile(r"^(?:\[([^\]]*)\]|([^:]*))(?::(.*))?$")

_db: Optional[Any] = None


class DatabaseError(Exception):
    """Raised when the database cannot be reached, set up or addressed."""


class RecordNotFoundError(DatabaseError, LookupError):
    """Raised when a lookup matches no row."""

    def __init__(self, message: str = "no rows in result set"):
        super().__init__(message)


def build_dsn(db_config: config.DatabaseConfig) -> str:
    """Return the configured DSN, or one built from host, port, user and name."""
    if db_config.dsn:
        return db_config.dsn
    return (
        f"{db_config.user}:{db_config.password}@tcp({db_config.host}:{db_config.port})"
        f"/{db_config.name}?parseTime=true&loc=Local"
    )


def _split_host_port(addr: str):
    match = _HOST_PORT.match(addr)
    if match is None:
        # several colons without brackets: a bare IPv6 address
        return addr, _DEFAULT_PORT
    host = match.group(1) if match.group(1) is not None else match.group(2)
    port_text = match.group(3) or ""
    if port_text and not port_text.isdigit():
        raise DatabaseError(f"invalid DSN: bad port {port_text!r}")
    return host or _DEFAULT_HOST, int(port_text) if port_text else _DEFAULT_PORT


def parse_dsn(dsn: str) -> Dict[str, Any]:
    """Turn a ``user:password@net(addr)/dbname?params`` DSN into connection arguments."""
    head, slash, tail = dsn.rpartition("/")
    if not slash:
        raise DatabaseError("invalid DSN: missing the slash separating the database name")
    database, _, query = tail.partition("?")
    credentials, at, address = head.rpartition("@")
    login = credentials.partition(":") if at else (str(), str(), str())

    match = _ADDRESS.match(address)
    if match is None:
        raise DatabaseError(f"invalid DSN: malformed network address {address!r}")
    net, addr = match.group(1), match.group(2) or ""

    params: Dict[str, Any] = {"user": login[0], "password": login[2], "database": database}
    if net == "unix":
        params["unix_socket"] = addr
    elif net in ("", "tcp", "tcp4", "tcp6"):
        params["host"], params["port"] = _split_host_port(addr)
    else:
        raise DatabaseError(f"invalid DSN: unknown network {net!r}")

    charset = dict(parse_qsl(query, keep_blank_values=True)).get("charset")
    if charset is not None:
        params["charset"] = charset.split(",")[0]
    return params


def connect():
    """Open the database named by the loaded configuration and run migrations."""
    global _db
    cfg = config.get()
    if cfg is None:
        raise DatabaseError("config is not loaded")
    params = parse_dsn(build_dsn(cfg.database))
    try:
        conn = pymysql.connect(**params, autocommit=True)
        conn.ping(reconnect=False)
    except pymysql.MySQLError as exc:
        raise DatabaseError(f"failed to connect DB: {exc}") from exc
    logger.get().info("[DB] Connected to MySQL successfully")

    try:
        run_migrations(conn)
    except DatabaseError as exc:
        conn.close()
        raise DatabaseError(f"failed to run migrations: {exc}") from exc
    _db = conn
    return conn


def get():
    """Return the shared connection opened by connect(), or None."""
    return _db


def close() -> None:
    """Close the shared connection if one is open."""
    global _db
    conn, _db = _db, None
    if conn is not None:
        conn.close()


def run_migrations(conn, schema_path=None) -> None:
    """Execute every statement of the schema file against the connection."""
    log = logger.get()
    log.info("[DB] Running migrations...")
    try:
        schema = Path(schema_path or SCHEMA_PATH).read_text(encoding="utf-8")
    except OSError as exc:
        raise DatabaseError(f"failed to read schema file: {exc}") from exc
    try:
        with closing(conn.cursor()) as cur:
            for statement in filter(None, (part.strip() for part in schema.split(";"))):
                cur.execute(statement)
        conn.commit()
    except Exception as exc:
        raise DatabaseError(f"failed to execute schema: {exc}") from exc
    log.info("[DB] Migrations completed successfully")


def _to_datetime(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, bytes):
        value = value.decode("utf-8")
    return datetime.fromisoformat(str(value))


class _Repo:
    _db: Any
    _placeholder: str

    def _run(self, query: str, params, fetch=None):
        with closing(self._db.cursor()) as cur:
            cur.execute(query.replace("?", self._placeholder), tuple(params))
            if fetch == "one":
                row = cur.fetchone()
                if row is None:
                    raise RecordNotFoundError()
                return row
            if fetch == "all":
                return list(cur.fetchall())
            last_id = cur.lastrowid
        self._db.commit()
        return last_id


_TX_COLUMNS = "id, user_id, amount, description, type, created_at, updated_at"


def _row_to_transaction(row) -> Transaction:
    id_, user_id, amount, description, tx_type, created_at, updated_at = row
    return Transaction(
        id=int(id_),
        user_id=int(user_id),
        amount=float(amount),
        description=description,
        type=tx_type,
        created_at=_to_datetime(created_at),
        updated_at=_to_datetime(updated_at),
    )


class TxRepo(_Repo):
    """Stores transactions in the ``transactions`` table."""

    def __init__(self, db, placeholder="%s"):
        self._db = db
        self._placeholder = placeholder

    def create(self, t: Transaction) -> None:
        t.id = self._run(
            "INSERT INTO transactions (user_id, amount, description, type, created_at, "
            "updated_at) VALUES (?, ?, ?, ?, ?, ?)",
            (t.user_id, t.amount, t.description, t.type, t.created_at, t.updated_at),
        )

    def find_by_id(self, id: int) -> Transaction:
        query = f"SELECT {_TX_COLUMNS} FROM transactions WHERE id = ? LIMIT 1"
        return _row_to_transaction(self._run(query, (id,), "one"))

    def find_by_user_id(self, user_id: int) -> List[Transaction]:
        query = (
            f"SELECT {_TX_COLUMNS} FROM transactions WHERE user_id = ? ORDER BY created_at DESC"
        )
        return [_row_to_transaction(row) for row in self._run(query, (user_id,), "all")]

    def update(self, t: Transaction) -> None:
        self._run(
            "UPDATE transactions SET amount = ?, description = ?, type = ?, updated_at = ? "
            "WHERE id = ?",
            (t.amount, t.description, t.type, t.updated_at, t.id),
        )

    def delete(self, id: int) -> None:
        self._run("DELETE FROM transactions WHERE id = ?", (id,))


_USER_COLUMNS = "id, name, email, password, created_at"


def _row_to_user(row) -> User:
    id_, name, email, hashed, created_at = row
    return User(
        id=int(id_), name=name, email=email, password=hashed, created_at=_to_datetime(created_at)
    )


class UserRepo(_Repo):
    """Stores users in the ``users`` table."""

    def __init__(self, db, placeholder="%s"):
        self._db = db
        self._placeholder = placeholder

    def create(self, u: User) -> None:
        u.id = self._run(
            "INSERT INTO users (name, email, password, created_at) VALUES (?, ?, ?, ?)",
            (u.name, u.email, u.password, u.created_at),
        )

    def find_by_email(self, email: str) -> User:
        query = f"SELECT {_USER_COLUMNS} FROM users WHERE email = ? LIMIT 1"
        return _row_to_user(self._run(query, (email,), "one"))

    def find_by_id(self, id: int) -> User:
        query = f"SELECT {_USER_COLUMNS} FROM users WHERE id = ? LIMIT 1"
        return _row_to_user(self._run(query, (id,), "one"))