"""Unit tests for TokenStore: validation, revocation and expiry."""

import threading
from datetime import UTC, datetime

import pytest

from kpopapi.services.auth import (
    Identity,
    InvalidTokenError,
    Role,
    TokenError,
    TokenExpiredError,
    TokenIssuer,
    TokenRevokedError,
)
from kpopapi.services.token_store import TokenStore

ALICE = Identity(username="alice", role=Role.USER)


@pytest.fixture
def issuer(clock) -> TokenIssuer:
    return TokenIssuer("k" * 64, ttl_seconds=3600, clock=clock)


@pytest.fixture
def store(issuer, clock) -> TokenStore:
    return TokenStore(issuer, clock=clock)


class TestValidate:
    def test_fresh_token_validates_to_issued_identity(self, store, issuer):
        issued = issuer.issue(ALICE)
        claims = store.validate(issued.token)
        assert claims.identity == ALICE

    def test_expired_token_fails_without_revoke(self, store, issuer, clock):
        issued = issuer.issue(ALICE)
        clock.advance(3601)
        with pytest.raises(TokenExpiredError):
            store.validate(issued.token)

    def test_malformed_token_fails(self, store):
        with pytest.raises(InvalidTokenError):
            store.validate("abc.def.ghi")


class TestRevoke:
    def test_revoked_token_fails(self, store, issuer):
        issued = issuer.issue(ALICE)
        store.revoke(issued.token, issued.expires_at)
        with pytest.raises(TokenRevokedError):
            store.validate(issued.token)

    def test_revoke_is_idempotent(self, store, issuer):
        issued = issuer.issue(ALICE)
        for _ in range(3):
            store.revoke(issued.token, issued.expires_at)
        assert len(store) == 1
        with pytest.raises(TokenRevokedError):
            store.validate(issued.token)

    def test_revoking_one_token_leaves_others_valid(self, store, issuer):
        first = issuer.issue(ALICE)
        second = issuer.issue(ALICE)
        store.revoke(first.token, first.expires_at)
        assert store.validate(second.token).username == "alice"

    def test_revoked_token_still_fails_after_expiry(self, store, issuer, clock):
        issued = issuer.issue(ALICE)
        store.revoke(issued.token, issued.expires_at)
        clock.advance(3600)
        # Entry is gone but the token itself is dead
        assert store.is_revoked(issued.token) is False
        with pytest.raises(TokenError):
            store.validate(issued.token)

    def test_revoking_expired_token_is_noop(self, store, clock):
        past = datetime.fromtimestamp(clock.now - 10, tz=UTC)
        store.revoke("whatever", past)
        assert len(store) == 0

    def test_expired_entry_dropped_lazily(self, store, issuer, clock):
        issued = issuer.issue(ALICE)
        store.revoke(issued.token, issued.expires_at)
        assert len(store) == 1
        clock.advance(3600)
        store.is_revoked(issued.token)
        assert len(store) == 0


class TestPurge:
    def test_purge_removes_only_expired(self, store, issuer, clock):
        old = issuer.issue(ALICE)
        store.revoke(old.token, old.expires_at)
        clock.advance(1800)
        new = issuer.issue(ALICE)
        store.revoke(new.token, new.expires_at)

        clock.advance(1800)
        assert store.purge_expired() == 1
        assert len(store) == 1
        assert store.is_revoked(new.token) is True

    def test_purge_empty_store(self, store):
        assert store.purge_expired() == 0


class TestConcurrency:
    def test_concurrent_validates_never_fail(self, store, issuer):
        issued = issuer.issue(ALICE)
        failures: list[Exception] = []
        start = threading.Barrier(16)

        def worker():
            start.wait()
            for _ in range(500):
                try:
                    store.validate(issued.token)
                except Exception as e:
                    failures.append(e)

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert failures == []

    def test_revoke_visible_to_later_validates_under_load(self, store, issuer):
        tokens = [issuer.issue(ALICE) for _ in range(50)]
        start = threading.Barrier(9)

        def reader():
            start.wait()
            for _ in range(20):
                for issued in tokens:
                    try:
                        store.validate(issued.token)
                    except TokenRevokedError:
                        pass

        def writer():
            start.wait()
            for issued in tokens:
                store.revoke(issued.token, issued.expires_at)

        threads = [threading.Thread(target=reader) for _ in range(8)]
        threads.append(threading.Thread(target=writer))
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        for issued in tokens:
            with pytest.raises(TokenRevokedError):
                store.validate(issued.token)
