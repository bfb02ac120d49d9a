"""
Unit tests for MemoryTokenStore.
"""

import pytest
from datetime import timedelta
from shelf_auth.domain.refresh_token import RefreshToken


def make_token(clock, lookup_key, user_id="usr_1", ttl=timedelta(days=7)):
    return RefreshToken.create(user_id, lookup_key, ttl, now=clock())


def test_save_duplicate_key(token_store, clock):
    """Test lookup keys are unique."""
    token_store.save(make_token(clock, "key-1"))

    with pytest.raises(ValueError):
        token_store.save(make_token(clock, "key-1"))


def test_list_by_user_drops_expired(token_store, clock):
    """Test expired records leave the store once the owner's records are listed."""
    token_store.save(make_token(clock, "short", ttl=timedelta(hours=1)))
    token_store.save(make_token(clock, "long"))
    clock.advance(hours=2)

    listed = token_store.list_by_user("usr_1")

    assert [t.lookup_key for t in listed] == ["long"]
    assert token_store.find_by_lookup_key("short") is None
    assert token_store.find_by_lookup_key("long") is not None


def test_revoke_all_drops_expired(token_store, clock):
    """Test bulk revocation skips and evicts expired records."""
    token_store.save(make_token(clock, "short", ttl=timedelta(hours=1)))
    token_store.save(make_token(clock, "long"))
    clock.advance(hours=2)

    assert token_store.revoke_all_for_user("usr_1", clock()) == 1
    assert token_store.find_by_lookup_key("short") is None
    assert token_store.find_by_lookup_key("long").is_revoked()


def test_index_does_not_grow_past_expiry(token_store, clock):
    """Test a long-lived process does not keep every key ever issued."""
    for i in range(50):
        token_store.save(make_token(clock, f"key-{i}", ttl=timedelta(minutes=1)))
    clock.advance(minutes=2)

    assert token_store.list_by_user("usr_1") == []
    assert token_store.revoke_all_for_user("usr_1", clock()) == 0

    token_store.save(make_token(clock, "fresh"))
    assert [t.lookup_key for t in token_store.list_by_user("usr_1")] == ["fresh"]


def test_revoked_records_kept_until_expiry(token_store, clock):
    """Test a revoked record stays visible as REVOKED while unexpired."""
    token_store.save(make_token(clock, "key-1"))
    token_store.revoke("key-1", clock())

    listed = token_store.list_by_user("usr_1")

    assert len(listed) == 1
    assert listed[0].is_revoked()
