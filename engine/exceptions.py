# engine/exceptions.py

class EngineError(Exception):
    pass


class InvalidTimestamp(EngineError, ValueError):
    pass


class InvalidHour(InvalidTimestamp):
    pass


class InvalidDate(InvalidTimestamp):
    pass


class SummarizerError(EngineError):
    pass


class SummarizerNotConfigured(SummarizerError):
    pass


class SummarizerUnavailable(SummarizerError):
    pass
