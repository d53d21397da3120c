"""
Tests for the startup connectivity probe and the per-request connection scope.

Uses an in-memory SQLite engine; no MySQL needed.
"""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine

from hrms.db.gateway import SqlProcedureGateway
from hrms.db.session import gateway_scope, verify_connection


def test_verify_connection_succeeds_first_try():
    engine = create_engine("sqlite:///:memory:")
    sleeps: list[float] = []
    assert verify_connection(engine, retries=3, base_delay=0.5, sleep=sleeps.append) is True
    assert sleeps == []


def test_verify_connection_exponential_backoff_then_gives_up():
    engine = MagicMock()
    engine.connect.side_effect = ConnectionError("refused")
    sleeps: list[float] = []

    assert verify_connection(engine, retries=5, base_delay=2.0, sleep=sleeps.append) is False
    assert engine.connect.call_count == 5
    assert sleeps == [2.0, 4.0, 8.0, 16.0]


def test_verify_connection_recovers():
    good = create_engine("sqlite:///:memory:")
    engine = MagicMock()
    engine.connect.side_effect = [ConnectionError("refused"), good.connect()]
    sleeps: list[float] = []

    assert verify_connection(engine, retries=5, base_delay=1.0, sleep=sleeps.append) is True
    assert sleeps == [1.0]


def test_gateway_scope_releases_connection():
    engine = MagicMock()
    raw = engine.raw_connection.return_value

    with gateway_scope(engine) as gateway:
        assert isinstance(gateway, SqlProcedureGateway)
        raw.close.assert_not_called()
    raw.close.assert_called_once()


def test_gateway_scope_releases_connection_on_error():
    engine = MagicMock()
    raw = engine.raw_connection.return_value

    with pytest.raises(RuntimeError):
        with gateway_scope(engine):
            raise RuntimeError("handler failed")
    raw.close.assert_called_once()
