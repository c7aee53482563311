"""
# pywad: the WAD container format.

A WAD file is made of three parts:

 1. a 12 bytes header: identification ('IWAD' or 'PWAD'), number of lumps and
    offset of the directory
 2. the directory: one 16 bytes entry (offset, size, name) for each lump
 3. the lumps: opaque blobs of bytes, wherever the directory says

Two basic operations are defined:

 1. open(): parse header and directory; the lumps are not read, each one
    keeps a reference to the file and the data is read on demand.

 2. write()/serialize(): rebuild the file from the list of lumps, placing the
    directory right after the header and the lumps, packed, after it.

A container goes through the following phases

 1. CREATED (empty) or OPENED
 2. MUTATED
 3. SERIALIZED
 4. RELEASED

"""
from .enum import Compliant, WadPhase
from .exceptions import ErrorKind, WadException
from .lump import Lump, LazySource, OwnedSource
from .names import normalize_name, trim_name
from .streams import ByteCursor, BackingFile
from .wad import Wad, WadHeader


__version__ = '0.0.1'


def open(source, compliant=Compliant.NONE):
    return Wad.open(source, compliant=compliant)
