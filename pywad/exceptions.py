from enum import Enum, auto


class ErrorKind(Enum):
    '''The closed set of failures the library can report.'''
    NOT_FOUND         = auto()
    READ_FAILURE      = auto()
    LUMP_INIT_FAILURE = auto()
    WRITE_FAILURE     = auto()
    USAGE_FAULT       = auto()


class WadException(Exception):
    '''Base class to throw exception in pywad.

    There are no subclasses: the caller dispatches on "kind". The underlying
    error, when there is one, is chained with "raise ... from" and it's
    available also as "cause".
    '''

    def __init__(self, kind, message=''):
        self.kind = kind
        self.message = message
        super().__init__(kind, message)

    def __str__(self):
        return '%s: %s' % (self.kind.name, self.message)

    @property
    def cause(self):
        return self.__cause__


def usage_fault(message):
    '''A caller broke a precondition: it's a programming error, not something to retry.'''
    return WadException(ErrorKind.USAGE_FAULT, message)
