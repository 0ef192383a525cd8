"""
Tests for the single-instance lock.
"""
import pytest

from securenotes.core.exceptions import InstanceLockError
from securenotes.core.instance_lock import InstanceLock


class TestInstanceLock:
    """Exclusive ownership of the data directory."""

    def test_second_holder_is_rejected(self, tmp_path):
        path = tmp_path / ".instance.lock"
        with InstanceLock(path) as first:
            assert first.held
            with pytest.raises(InstanceLockError):
                InstanceLock(path).acquire()

    def test_released_lock_can_be_taken_again(self, tmp_path):
        path = tmp_path / ".instance.lock"
        lock = InstanceLock(path)
        lock.acquire()
        lock.release()
        assert not lock.held

        other = InstanceLock(path)
        other.acquire()
        assert other.held
        other.release()

    def test_acquire_is_idempotent(self, tmp_path):
        lock = InstanceLock(tmp_path / ".instance.lock")
        lock.acquire()
        lock.acquire()
        assert lock.held
        lock.release()
