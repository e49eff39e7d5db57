import threading
import time

import pytest

from core.locks import KeyedLocks


def test_registry_is_empty_after_release():
    locks = KeyedLocks()
    for i in range(1000):
        with locks.hold(f"invoice:{i}"):
            assert len(locks) == 1
    assert len(locks) == 0


def test_registry_is_empty_after_an_error():
    locks = KeyedLocks()
    with pytest.raises(RuntimeError):
        with locks.hold("invoice:1"):
            raise RuntimeError("boom")
    assert len(locks) == 0


def test_same_key_is_serialized():
    locks = KeyedLocks()
    inside = []
    overlaps = []

    def work():
        with locks.hold("invoice:1"):
            if inside:
                overlaps.append(True)
            inside.append(True)
            time.sleep(0.01)
            inside.pop()

    threads = [threading.Thread(target=work) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert overlaps == []
    assert len(locks) == 0
