# loaders/exceptions.py

class LogFormatError(Exception):
    pass


class EmptyLog(LogFormatError):
    pass


class MissingColumns(LogFormatError):
    pass


class UnsupportedSource(LogFormatError):
    pass
