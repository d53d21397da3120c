from __future__ import annotations

import logging
import time
from collections.abc import Callable, Generator, Iterator
from contextlib import AbstractContextManager, contextmanager
from functools import lru_cache

from fastapi import Depends
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from hrms.db.gateway import ProcedureGateway, SqlProcedureGateway
from hrms.settings import get_settings

logger = logging.getLogger(__name__)

GatewayFactory = Callable[[], AbstractContextManager[ProcedureGateway]]


@lru_cache
def get_engine() -> Engine:
    settings = get_settings()
    return create_engine(
        settings.db_url,
        pool_size=settings.db_pool_size,
        pool_pre_ping=True,
        connect_args={"connect_timeout": settings.db_connect_timeout}
        if settings.db_url.startswith("mysql")
        else {},
    )


@contextmanager
def gateway_scope(engine: Engine | None = None) -> Iterator[ProcedureGateway]:
    """
    Check out one pooled connection, wrap it in a gateway, always give it back.
    """

    connection = (engine or get_engine()).raw_connection()
    try:
        yield SqlProcedureGateway(connection)
    finally:
        connection.close()


def get_gateway_factory() -> GatewayFactory:
    """
    Dependency for code that opens connections itself (lazy role lookups,
    the dashboard fan-out where each branch needs its own connection).
    """

    return gateway_scope


def get_gateway(
    factory: GatewayFactory = Depends(get_gateway_factory),
) -> Generator[ProcedureGateway, None, None]:
    """
    Main DB dependency: one pooled connection per request, released in `finally`.
    """

    with factory() as gateway:
        yield gateway


def verify_connection(
    engine: Engine | None = None,
    *,
    retries: int = 5,
    base_delay: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """
    Startup connectivity probe with fixed-attempt exponential backoff.

    Returns False (after logging) when every attempt fails; the app keeps
    starting so callers can surface DB absence per request.
    """

    engine = engine or get_engine()
    for attempt in range(1, retries + 1):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Connected to the database")
            return True
        except Exception as exc:
            logger.error("Database connection attempt %d failed: %s", attempt, exc)
            if attempt < retries:
                delay = base_delay * (2 ** (attempt - 1))
                logger.info("Retrying in %.1fs", delay)
                sleep(delay)

    logger.error("All database connection attempts failed; continuing without an active DB connection")
    return False
