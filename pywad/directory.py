'''
# The directory

It's a contiguous run of 16 bytes entries, one for each lump

  .----------------------------.
  | filepos (int32)            |
  | size    (int32)            |
  | name    (8 bytes, padded)  |
  '----------------------------'

The format allows lumps to be anywhere (also overlapping), on writing instead
the lumps are laid out one after the other, right after the directory, in the
order of the directory itself.
'''
import logging
from typing import List

from . import fields
from .core import Record
from .exceptions import ErrorKind, WadException
from .lump import Lump, LazySource
from .streams import ByteCursor


logger = logging.getLogger(__name__)


class DirectoryEntry(Record):
    filepos = fields.Int32Field()
    size    = fields.Int32Field()
    name    = fields.NameField()


ENTRY_SIZE = DirectoryEntry.get_size()


def decode_directory(cursor, count, backing) -> List[Lump]:
    '''Build the lumps from the entries, their data remains into the backing file.

    Nothing is checked against the real size of the file, an invalid
    range will fail only when read.'''
    lumps = []

    for index in range(count):
        entry = DirectoryEntry.unpack(cursor)

        try:
            lump = Lump(entry.name, entry.size, LazySource(backing, entry.filepos))
        except WadException as e:
            raise WadException(ErrorKind.LUMP_INIT_FAILURE, 'entry #%d is invalid: %s' % (index, e.message)) from e

        lumps.append(lump)

    logger.debug('decoded %d entries' % len(lumps))

    return lumps


def layout_lumps(lumps, start) -> List[DirectoryEntry]:
    '''Compute the entries for the lumps packed right after a directory placed at "start".'''
    entries = []
    offset = start + ENTRY_SIZE * len(lumps)

    for lump in lumps:
        entries.append(DirectoryEntry(filepos=offset, size=lump.size, name=lump.name))
        offset += lump.size

    return entries


def encode_directory(lumps, start) -> ByteCursor:
    cursor = ByteCursor(ENTRY_SIZE * len(lumps))

    for entry in layout_lumps(lumps, start):
        entry.pack(cursor)

    return cursor
