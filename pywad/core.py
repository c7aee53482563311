"""
Core module for the records of the format.

A Record is a fixed-layout sequence of fields: the fields are declared as
class attributes, in the order they appear on disk, like

    class Entry(Record):
        filepos = fields.Int32Field()
        size    = fields.Int32Field()
        name    = fields.NameField()

Unpacking an instance reads the fields one after the other from a ByteCursor,
packing does the opposite.
"""
import logging
from typing import Dict, List, Tuple

from .meta import MetaRecord
from .streams import ByteCursor


class Record(object, metaclass=MetaRecord):

    def __init__(self, **kwargs):
        self.logger = logging.getLogger(__name__)

        for name, field in self.get_fields():
            setattr(self, name, kwargs.pop(name, field.value_from_default()))

        if kwargs:
            raise TypeError('unknown fields for %s: %s' % (self.__class__.__name__, ', '.join(kwargs)))

    @classmethod
    def get_fields(cls) -> List[Tuple[str, "Field"]]:
        '''It returns a list of couples (name, field) in order of declaration.'''
        return list(cls._meta.fields)

    @classmethod
    def get_size(cls) -> int:
        return cls._meta.size

    @classmethod
    def get_layout(cls) -> Dict[str, Tuple[int, int]]:
        result = {}
        offset = 0
        for name, field in cls.get_fields():
            result[name] = (offset, field.size)
            offset += field.size

        return result

    def __repr__(self):
        msg = []
        for field_name, _ in self.get_fields():
            msg.append('%s=%r' % (field_name, getattr(self, field_name)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented

        return all(getattr(self, _) == getattr(other, _) for _, __ in self.get_fields())

    @classmethod
    def unpack(cls, cursor, offset=None):
        '''Read an instance starting at "offset" (or the actual position of the cursor).'''
        if offset is not None:
            cursor.position = offset

        values = {}
        for field_name, field in cls.get_fields():
            values[field_name] = field.unpack(cursor)

        record = cls(**values)
        record.logger.debug('unpacked %r' % record)

        return record

    def pack(self, cursor=None, offset=None):
        '''Write the fields into the cursor, a new one is created if not passed.'''
        cursor = ByteCursor(self.get_size()) if cursor is None else cursor

        if offset is not None:
            cursor.position = offset

        for field_name, field in self.get_fields():
            self.logger.debug('packing %s.%s at %08x' % (self.__class__.__name__, field_name, cursor.position))
            field.pack(cursor, getattr(self, field_name))

        return cursor

    @property
    def raw(self) -> bytes:
        return self.pack().getvalue()
