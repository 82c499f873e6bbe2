import threading
from contextlib import contextmanager

from .exceptions import InflectorError, LockPoisoned


class ReadWriteLock:
    """
    Lock shared by any number of readers or held by one writer.

    Waiting writers block new readers, so a steady stream of readers cannot starve
    a writer. The lock is not re-entrant.

    When an exception escapes the writer section the protected state may be half
    updated, so the lock is poisoned and every later ``read()`` or ``write()``
    raises ``LockPoisoned``. ``InflectorError`` exceptions do not poison the lock:
    they are raised before the protected state is touched.
    """

    def __init__(self, name=''):
        self.name = name
        self.poisoned = False
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def _check_poisoned(self):
        if self.poisoned:
            raise LockPoisoned(f'Lock "{self.name}" is poisoned by an error raised while it was held for writing')

    @contextmanager
    def read(self):
        with self._condition:
            self._check_poisoned()
            while self._writer or self._waiting_writers:
                self._condition.wait()
                self._check_poisoned()
            self._readers += 1

        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if not self._readers:
                    self._condition.notify_all()

    @contextmanager
    def write(self):
        with self._condition:
            self._check_poisoned()
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._condition.wait()
                    self._check_poisoned()
            finally:
                self._waiting_writers -= 1
            self._writer = True

        try:
            yield
        except InflectorError:
            raise
        except BaseException:
            self.poisoned = True
            raise
        finally:
            with self._condition:
                self._writer = False
                self._condition.notify_all()

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.name} readers={self._readers} writer={self._writer}>'
