"""Tests for role lookups and the optional TTL cache."""

from hrms.db.gateway import ProcedureResult
from hrms.security.roles import RoleResolver


class CountingGateway:
    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    def call(self, name, params=()):
        self.calls.append((name, list(params)))
        return ProcedureResult.of(self.rows)


def test_resolves_role_from_first_row():
    gateway = CountingGateway([{"role": "hr"}])
    assert RoleResolver().resolve(gateway, "uid-1") == "hr"
    assert gateway.calls == [("sp_get_user_role", ["uid-1"])]


def test_no_row_means_no_role():
    assert RoleResolver().resolve(CountingGateway([]), "uid-1") is None


def test_no_cache_by_default():
    gateway = CountingGateway([{"role": "admin"}])
    resolver = RoleResolver()
    resolver.resolve(gateway, "uid-1")
    resolver.resolve(gateway, "uid-1")
    assert len(gateway.calls) == 2


def test_ttl_cache_reuses_answer_until_invalidated():
    gateway = CountingGateway([{"role": "admin"}])
    resolver = RoleResolver(ttl_seconds=60)
    resolver.resolve(gateway, "uid-1")
    resolver.resolve(gateway, "uid-1")
    assert len(gateway.calls) == 1

    resolver.invalidate("uid-1")
    resolver.resolve(gateway, "uid-1")
    assert len(gateway.calls) == 2
