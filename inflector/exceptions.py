class InflectorError(Exception):
    pass


class InvalidPattern(InflectorError):
    pass


class LockPoisoned(InflectorError):
    pass
