from enum import Enum


class StrEnum(str, Enum):
    def __str__(self) -> str:
        return str(self.value)


class Interfaces(StrEnum):
    ASGI = 'asgi'
    RSGI = 'rsgi'


class RangeKinds(StrEnum):
    absent = 'absent'
    satisfiable = 'satisfiable'
    unsatisfiable = 'unsatisfiable'
    malformed = 'malformed'
    multi = 'multi'


class MultiRangePolicies(StrEnum):
    reject = 'reject'
    ignore = 'ignore'


CHUNK_SIZE = 64 * 1024
