"""
A Field is "fundamental" datatype from the format point of view: it knows
how many bytes it takes and how to get/put its value from/into a ByteCursor.

All the integers of the format are little endian, the cursor takes care of that.
"""
import logging

from .exceptions import usage_fault
from .names import NAME_LENGTH, normalize_name


class Field(object):
    """Base class to subclass from"""

    size = 0

    def __init__(self, default=None):
        self.logger = logging.getLogger(__name__)
        self.name = None
        self.default = default

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self.name)

    def contribute_to_record(self, cls, name):
        if name in [_ for _, __ in cls._meta.fields]:
            raise AttributeError(f'field {name} is already present in class {cls.__name__}')

        self.name = name
        cls._meta.fields.append((name, self))

    def value_from_default(self):
        return self.default

    def unpack(self, cursor):
        raise NotImplementedError(f"method {self.__class__.__name__}.unpack() not implemented")

    def pack(self, cursor, value):
        raise NotImplementedError(f"method {self.__class__.__name__}.pack() not implemented")


class Int32Field(Field):
    """Signed 32 bits: offsets, sizes and counts."""

    size = 4

    def __init__(self, default=0):
        super().__init__(default=default)

    def unpack(self, cursor):
        return cursor.get_i32()

    def pack(self, cursor, value):
        cursor.put_i32(value)


class MagicField(Field):
    '''Raw bytes with a fixed length.'''

    def __init__(self, n, default=None):
        self.size = n
        super().__init__(default=default if default is not None else b'\x00' * n)

    def unpack(self, cursor):
        return cursor.get_bytes(self.size)

    def pack(self, cursor, value):
        if len(value) != self.size:
            raise usage_fault(f"field '{self.name}' can only accept binary strings of length {self.size}")

        cursor.put_bytes(value)


class NameField(Field):
    '''Fixed-width name: on unpacking the padding is retained, on packing
    the value is normalized first.'''

    size = NAME_LENGTH

    def __init__(self, default=''):
        super().__init__(default=default)

    def unpack(self, cursor):
        return cursor.get_fixed_name()

    def pack(self, cursor, value):
        cursor.put_fixed_name(normalize_name(value))
