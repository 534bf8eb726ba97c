import threading

import pytest

from conftest import FakeClock
from padsync.locks.manager import LockManager, LockStatus
from padsync.locks.store import MemoryLockStore

ALICE, BOB, CAROL = 1, 2, 3
NAMES = {ALICE: "Alice", BOB: "Bob"}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def content():
    return {"scratchpad": "hello"}


@pytest.fixture
def manager(clock, content):
    return LockManager(
        MemoryLockStore(),
        owner_name=lambda uid: NAMES.get(uid, "Another user"),
        read_content=lambda key: content.get(key, ""),
        ttl_sec=30,
        clock=clock,
    )


class TestEvaluate:
    def test_idle_caller_on_free_pad_gets_free(self, manager):
        assert manager.evaluate("scratchpad", ALICE, False).status == LockStatus.FREE
        assert manager.current("scratchpad") is None

    def test_editing_caller_acquires(self, manager, clock):
        verdict = manager.evaluate("scratchpad", ALICE, True)
        assert verdict.status == LockStatus.OWNED
        assert verdict.owner_name is None
        rec = manager.current("scratchpad")
        assert rec.holder_id == ALICE
        assert rec.acquired_at == clock.now

    def test_other_caller_is_locked_out_with_owner_and_content(self, manager):
        manager.evaluate("scratchpad", ALICE, True)
        verdict = manager.evaluate("scratchpad", BOB, True)
        assert verdict.status == LockStatus.LOCKED
        assert verdict.owner_name == "Alice"
        assert verdict.content == "hello"
        # the locked-out poll does not touch the record
        assert manager.current("scratchpad").holder_id == ALICE

    def test_unknown_holder_name_falls_back(self, manager):
        manager.evaluate("scratchpad", CAROL, True)
        assert manager.evaluate("scratchpad", BOB, False).owner_name == "Another user"

    def test_renew_is_idempotent_and_moves_acquired_at(self, manager, clock):
        for _ in range(5):
            assert manager.evaluate("scratchpad", ALICE, True).status == LockStatus.OWNED
            assert manager.current("scratchpad").acquired_at == clock.now
            clock.advance(15)
        # still alive long after the first TTL because of renewals
        assert manager.current("scratchpad").holder_id == ALICE

    def test_idle_holder_gets_free_but_lock_stays_until_ttl(self, manager, clock):
        manager.evaluate("scratchpad", ALICE, True)
        clock.advance(10)
        assert manager.evaluate("scratchpad", ALICE, False).status == LockStatus.FREE
        assert manager.evaluate("scratchpad", BOB, True).status == LockStatus.LOCKED

    def test_lock_expires_after_ttl(self, manager, clock):
        manager.evaluate("scratchpad", ALICE, True)
        clock.advance(30)
        assert manager.evaluate("scratchpad", BOB, True).status == LockStatus.LOCKED
        clock.advance(1)
        assert manager.evaluate("scratchpad", BOB, True).status == LockStatus.OWNED
        assert manager.current("scratchpad").holder_id == BOB

    def test_expired_lock_lets_idle_poll_see_free(self, manager, clock):
        manager.evaluate("scratchpad", ALICE, True)
        clock.advance(31)
        assert manager.evaluate("scratchpad", BOB, False).status == LockStatus.FREE

    def test_pads_lock_independently(self, manager):
        manager.evaluate("scratchpad", ALICE, True)
        assert manager.evaluate("agenda", BOB, True).status == LockStatus.OWNED


class TestMutualExclusion:
    def test_alternating_polls_never_both_owned(self, manager, clock):
        owned_at = {}
        for step in range(20):
            for caller in (ALICE, BOB):
                if manager.evaluate("scratchpad", caller, True).status == LockStatus.OWNED:
                    owned_at.setdefault(step, set()).add(caller)
            clock.advance(5)
        assert all(len(owners) == 1 for owners in owned_at.values())
        # the first acquirer keeps renewing, so never hands off
        assert all(owners == {ALICE} for owners in owned_at.values())

    def test_concurrent_first_polls_grant_exactly_one(self, manager):
        results = []
        barrier = threading.Barrier(12)

        def poll(caller):
            barrier.wait()
            results.append((caller, manager.evaluate("scratchpad", caller, True).status))

        threads = [threading.Thread(target=poll, args=(100 + i,)) for i in range(12)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        owners = [caller for caller, status in results if status == LockStatus.OWNED]
        assert len(owners) == 1
        assert manager.current("scratchpad").holder_id == owners[0]


class TestWritable:
    def test_no_lock_is_writable(self, manager):
        assert manager.check_writable("scratchpad", BOB) is True

    def test_holder_is_writable(self, manager):
        manager.evaluate("scratchpad", ALICE, True)
        assert manager.check_writable("scratchpad", ALICE) is True

    def test_non_holder_is_not_writable(self, manager):
        manager.evaluate("scratchpad", ALICE, True)
        assert manager.check_writable("scratchpad", BOB) is False

    def test_writable_again_after_expiry(self, manager, clock):
        manager.evaluate("scratchpad", ALICE, True)
        clock.advance(31)
        assert manager.check_writable("scratchpad", BOB) is True

    def test_writable_context_matches_check(self, manager):
        manager.evaluate("scratchpad", ALICE, True)
        with manager.writable("scratchpad", BOB) as ok:
            assert ok is False
        with manager.writable("scratchpad", ALICE) as ok:
            assert ok is True
