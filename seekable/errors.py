class SeekableError(Exception):
    pass


class ConfigurationError(SeekableError):
    pass


class SourceError(SeekableError):
    pass
