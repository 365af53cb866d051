"""Relational store access: engine, transaction boundary and error translation."""
from contextlib import contextmanager
from typing import Iterator, Optional, Union

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.pool import StaticPool

from kea_config.config import settings
from kea_config.logger import get_logger
from kea_config.models.tables import metadata
from kea_config.services.errors import (
    DuplicateEntity,
    KeaConfigError,
    StorageUnavailable,
    TransactionFailed,
)

logger = get_logger("services.store")

Store = Union[Engine, Connection]

MYSQL_DUPLICATE_ENTRY = 1062


def create_store(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """Create an engine for the configuration store.

    Args:
        url: SQLAlchemy database URL, defaults to settings.database_url
        echo: Log every statement, defaults to settings.database_echo

    Returns:
        Engine; no connection is opened until first use
    """
    url = url or settings.database_url
    echo = settings.database_echo if echo is None else echo

    if url.startswith("sqlite") and (url == "sqlite://" or ":memory:" in url):
        # One shared connection, otherwise every checkout sees an empty database
        return create_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    return create_engine(url, echo=echo, pool_pre_ping=True)


def init_schema(engine: Engine) -> None:
    """Create missing configuration tables."""
    try:
        metadata.create_all(engine)
    except SQLAlchemyError as e:
        raise translate_error(e) from e


def _is_duplicate(exc: IntegrityError) -> bool:
    orig = exc.orig
    args = getattr(orig, "args", ())
    if args and args[0] == MYSQL_DUPLICATE_ENTRY:
        return True
    message = str(orig).lower()
    return "unique constraint" in message or "duplicate" in message


def translate_error(exc: SQLAlchemyError) -> KeaConfigError:
    """Map a driver error to the configuration error taxonomy."""
    if isinstance(exc, IntegrityError) and _is_duplicate(exc):
        return DuplicateEntity(str(exc.orig))
    if isinstance(exc, (OperationalError, InterfaceError, DisconnectionError)):
        return StorageUnavailable(str(getattr(exc, "orig", None) or exc))
    if getattr(exc, "connection_invalidated", False):
        return StorageUnavailable(str(exc))
    return TransactionFailed(str(getattr(exc, "orig", None) or exc))


@contextmanager
def connect(store: Store) -> Iterator[Connection]:
    """Yield a connection for read queries.

    An open connection is used as is; an engine is checked out and
    returned to its pool afterwards.
    """
    if isinstance(store, Connection):
        try:
            yield store
        except SQLAlchemyError as e:
            raise translate_error(e) from e
        return

    try:
        conn = store.connect()
    except SQLAlchemyError as e:
        raise translate_error(e) from e

    try:
        yield conn
    except SQLAlchemyError as e:
        raise translate_error(e) from e
    finally:
        conn.close()


@contextmanager
def transaction(engine: Engine) -> Iterator[Connection]:
    """Run the block in one transaction.

    Commits when the block returns. Any exception rolls the transaction
    back before it propagates; driver errors are translated first.
    """
    with connect(engine) as conn:
        try:
            tx = conn.begin()
        except SQLAlchemyError as e:
            raise translate_error(e) from e

        try:
            yield conn
        except SQLAlchemyError as e:
            tx.rollback()
            logger.debug("Transaction rolled back: %s", e)
            raise translate_error(e) from e
        except BaseException:
            tx.rollback()
            raise

        try:
            tx.commit()
        except SQLAlchemyError as e:
            if tx.is_active:
                tx.rollback()
            raise translate_error(e) from e


_engine: Optional[Engine] = None


def get_store() -> Engine:
    """Process-wide engine built from settings, created on first use."""
    global _engine
    if _engine is None:
        _engine = create_store()
    return _engine
