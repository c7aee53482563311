'''
# WAD

Container made of a fixed header, a directory and the data of the lumps

  .-----------------------------.
  | identification (4 bytes)    |
  | numlumps       (int32)      |
  | infotableofs   (int32)      |
  |-----------------------------|
  | lumps data ...              |
  |-----------------------------|
  | directory (numlumps x 16)   |  <- infotableofs
  '-----------------------------'

Opening a file parses header and directory immediately, the data of the lumps
is read only when needed. Writing rebuilds everything: the directory is placed
right after the header and the lumps are packed after it.
'''
import io
import logging
import os

from . import fields
from .core import Record
from .directory import ENTRY_SIZE, decode_directory, encode_directory
from .enum import Compliant, WadPhase
from .exceptions import ErrorKind, WadException, usage_fault
from .lump import Lump
from .names import normalize_name, trim_name
from .streams import BackingFile, ByteCursor


IDENTIFIERS = (b'IWAD', b'PWAD')


class WadHeader(Record):
    identification = fields.MagicField(4, default=b'PWAD')
    numlumps       = fields.Int32Field()
    infotableofs   = fields.Int32Field()


HEADER_SIZE = WadHeader.get_size()


class Wad(object):
    '''The ordered lumps of a WAD file.

    The list of lumps is never handed out: "lumps" is a snapshot and the only
    way to change it is add_lump().'''

    def __init__(self, identifier=b'PWAD'):
        self.logger = logging.getLogger(__name__)
        self._backing = None
        self._lumps = []
        self._phase = WadPhase.CREATED

        if isinstance(identifier, str):
            identifier = identifier.encode('latin1')

        if len(identifier) != 4:
            raise usage_fault('identifier must be 4 bytes, not %r' % (identifier,))

        self._identifier = bytes(identifier)

    def __repr__(self):
        return '<%s(%r, lumps=%d, phase=%s)>' % (
            self.__class__.__name__, self._identifier, len(self._lumps), self._phase.name)

    def __del__(self):
        # __init__ could have failed before setting the phase
        if getattr(self, '_phase', WadPhase.RELEASED) != WadPhase.RELEASED:
            self._release()

    def __enter__(self):
        self._check_usable()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if self._phase != WadPhase.RELEASED:
            self.close()

    @classmethod
    def open(cls, source, compliant=Compliant.NONE):
        '''Parse header and directory from a path, some bytes or a binary file object.'''
        backing = BackingFile(source)

        try:
            wad = cls._from_backing(backing, compliant)
        except BaseException:
            backing.close()
            raise

        return wad

    @classmethod
    def _from_backing(cls, backing, compliant):
        logger = logging.getLogger(__name__)
        logger.debug('opening %r' % backing)

        header = WadHeader.unpack(ByteCursor.read_region(backing, HEADER_SIZE, 0))

        if header.identification not in IDENTIFIERS:
            if compliant & Compliant.MAGIC:
                raise WadException(ErrorKind.READ_FAILURE, 'bad identifier %r' % header.identification)
            logger.warning('identifier %r is not one of %r' % (header.identification, IDENTIFIERS))

        if header.numlumps < 0 or header.infotableofs < 0:
            raise WadException(
                ErrorKind.READ_FAILURE,
                'corrupted header: %d lumps at offset %d' % (header.numlumps, header.infotableofs))

        directory = ByteCursor.read_region(backing, header.numlumps * ENTRY_SIZE, header.infotableofs)

        try:
            lumps = decode_directory(directory, header.numlumps, backing)
            if compliant & Compliant.BOUNDS:
                cls._check_bounds(lumps, backing.size())
        except WadException as e:
            if e.kind != ErrorKind.LUMP_INIT_FAILURE:
                raise
            raise WadException(ErrorKind.READ_FAILURE, 'a lump in the WAD file could not be initialized') from e

        wad = cls(identifier=header.identification)
        wad._backing = backing
        wad._lumps = lumps
        wad._phase = WadPhase.OPENED

        logger.debug('opened %r' % wad)

        return wad

    @staticmethod
    def _check_bounds(lumps, file_size):
        for index, lump in enumerate(lumps):
            # markers like F_START take no space, their offset is meaningless
            if lump.size == 0:
                continue
            end = lump.source.offset + lump.size
            if end > file_size:
                raise WadException(
                    ErrorKind.LUMP_INIT_FAILURE,
                    'lump #%d \'%s\' ends at %d beyond the end of file (%d)' % (index, lump.name, end, file_size))

    def _check_usable(self):
        if self._phase == WadPhase.RELEASED:
            raise usage_fault('the container has been released')

    @property
    def phase(self):
        return self._phase

    @property
    def backing(self):
        self._check_usable()
        return self._backing

    @property
    def identifier(self) -> bytes:
        self._check_usable()
        return self._identifier

    @property
    def lump_count(self) -> int:
        self._check_usable()
        return len(self._lumps)

    @property
    def lumps(self):
        '''Snapshot of the lumps in directory order.'''
        self._check_usable()
        return tuple(self._lumps)

    def __len__(self):
        return self.lump_count

    def __iter__(self):
        return iter(self.lumps)

    def __getitem__(self, index):
        return self.lumps[index]

    def find(self, name):
        '''Return the first lump with the given name, None otherwise.'''
        wanted = trim_name(normalize_name(name))
        for lump in self.lumps:
            if trim_name(normalize_name(lump.name)) == wanted:
                return lump

        return None

    def add_lump(self, lump):
        self._check_usable()
        if not isinstance(lump, Lump):
            raise usage_fault('%r is not a lump' % (lump,))

        self._lumps.append(lump)
        self._phase = WadPhase.MUTATED

        self.logger.debug('added %r' % lump)

        return True

    def write(self, sink):
        '''Rebuild the whole file into a path or a binary file object,
        it returns the number of bytes written.

        Nothing is rolled back: if this fails the sink could contain
        only part of the file.

        NOTE: a path is truncated before the lumps are read, so writing
        over the file backing this container destroys the data of its lazy
        lumps; use save() for that.'''
        self._check_usable()

        if isinstance(sink, (str, os.PathLike)):
            try:
                f = open(sink, 'wb')
            except OSError as e:
                raise WadException(ErrorKind.WRITE_FAILURE, 'cannot open \'%s\' for writing' % sink) from e
            with f:
                return self.write(f)

        lumps = list(self._lumps)

        try:
            header = WadHeader(
                identification=self._identifier,
                numlumps=len(lumps),
                infotableofs=HEADER_SIZE,
            ).pack()
            directory = encode_directory(lumps, HEADER_SIZE)

            size = header.write_region(sink)
            size += directory.write_region(sink)

            for lump in lumps:
                self.logger.debug('writing %r' % lump)
                size += ByteCursor.from_bytes(lump.read()).write_region(sink)
        except WadException as e:
            if e.kind == ErrorKind.WRITE_FAILURE:
                raise
            raise WadException(ErrorKind.WRITE_FAILURE, 'cannot serialize the container: %s' % e.message) from e

        self._phase = WadPhase.SERIALIZED
        self.logger.debug('serialized %d lumps into %d bytes' % (len(lumps), size))

        return size

    def serialize(self) -> bytes:
        stream = io.BytesIO()
        self.write(stream)

        return stream.getvalue()

    def save(self, path):
        '''Write into a temporary file beside "path" and rename it on success.'''
        self._check_usable()
        path = os.fspath(path)
        tmp_path = '%s.tmp' % path

        done = False
        try:
            size = self.write(tmp_path)
            os.replace(tmp_path, path)
            done = True
        except OSError as e:
            raise WadException(ErrorKind.WRITE_FAILURE, 'cannot move \'%s\' to \'%s\'' % (tmp_path, path)) from e
        finally:
            if not done and os.path.exists(tmp_path):
                os.remove(tmp_path)

        return size

    def _release(self):
        if self._backing is not None:
            self._backing.close()
            self._backing = None
        self._phase = WadPhase.RELEASED

    def close(self):
        self._check_usable()
        self.logger.debug('releasing %r' % self)
        self._release()
