import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from inflector.exceptions import InvalidPattern, LockPoisoned
from inflector.inflector import Inflector
from inflector.locks import ReadWriteLock


def test_readers_do_not_block_each_other():
    lock = ReadWriteLock('test')
    barrier = threading.Barrier(3, timeout=5)

    def read():
        with lock.read():
            barrier.wait()  # all three readers hold the lock at the same time
        return True

    with ThreadPoolExecutor(3) as executor:
        assert all(executor.map(lambda _: read(), range(3)))


def test_writer_excludes_readers():
    lock = ReadWriteLock('test')
    events = []
    writer_has_lock = threading.Event()

    def write():
        with lock.write():
            writer_has_lock.set()
            events.append('write start')
            threading.Event().wait(0.1)
            events.append('write end')

    def read():
        writer_has_lock.wait(5)
        with lock.read():
            events.append('read')

    threads = [threading.Thread(target=write), threading.Thread(target=read)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(5)

    assert events == ['write start', 'write end', 'read']


def test_unexpected_error_poisons_lock():
    lock = ReadWriteLock('test')
    with pytest.raises(ZeroDivisionError):
        with lock.write():
            1 / 0

    assert lock.poisoned
    with pytest.raises(LockPoisoned):
        with lock.read():
            pass
    with pytest.raises(LockPoisoned):
        with lock.write():
            pass


def test_inflector_error_does_not_poison_lock():
    lock = ReadWriteLock('test')
    with pytest.raises(InvalidPattern):
        with lock.write():
            raise InvalidPattern('bad rule')

    assert not lock.poisoned
    with lock.read():
        pass


def test_lookups_during_mutations():
    inflector = Inflector()
    words = {'person': 'people', 'Bus': 'Buses', 'QUIZ': 'QUIZZES', 'fish': 'fish', 'city': 'cities'}
    stop = threading.Event()

    def lookups():
        n = 0
        while not stop.is_set() or n < 100:
            for word, expected in words.items():
                assert inflector.plural(word) == expected
                assert inflector.singular(expected) == word
            n += 1
        return n

    def mutations():
        for i in range(50):
            inflector.add_plural(f'zz{i}$', f'yy{i}')
            inflector.add_irregular(f'foo{i}', f'bar{i}')
            inflector.add_uncountable(f'baz{i}')
        stop.set()

    with ThreadPoolExecutor(5) as executor:
        readers = [executor.submit(lookups) for _ in range(4)]
        executor.submit(mutations).result(timeout=60)
        for reader in readers:
            assert reader.result(timeout=60) >= 100

    assert len(inflector.get_uncountable()) == 28 + 50
    assert inflector.plural('foo49') == 'bar49'
    assert inflector.plural('zz0') == 'yy0'
