'''
A lump is a named, sized, opaque blob of bytes.

Its data comes from one of two sources:

 1. LazySource: a reference (backing file, offset) into the file the lump was
    read from, resolved only when the bytes are needed
 2. OwnedSource: the bytes themselves, for lumps created in memory

The lazy source keeps only a weak reference to the backing file: the file
belongs to the container and once it's released the lump cannot be read anymore.
'''
import logging
import weakref

from .exceptions import ErrorKind, WadException
from .names import trim_name
from .streams import ByteCursor


logger = logging.getLogger(__name__)


class LazySource(object):

    def __init__(self, backing, offset):
        self._backing = weakref.ref(backing)
        self.offset = offset

    def __repr__(self):
        return '<%s(%r, 0x%x)>' % (self.__class__.__name__, self._backing(), self.offset)

    @property
    def backing(self):
        return self._backing()

    def resolve(self, size) -> bytes:
        backing = self.backing
        if backing is None or backing.closed:
            raise WadException(
                ErrorKind.READ_FAILURE,
                'the backing file of the lump has been released',
            ) from ValueError('I/O operation on closed file')

        # the handle is shared by all the lumps so we don't move it under the feet of anyone
        backing.save()
        try:
            return ByteCursor.read_region(backing, size, self.offset).getvalue()
        finally:
            backing.restore()


class OwnedSource(object):

    def __init__(self, data):
        self.data = bytes(data)

    def __repr__(self):
        return '<%s(%d bytes)>' % (self.__class__.__name__, len(self.data))

    def resolve(self, size) -> bytes:
        return self.data


class Lump(object):
    """Entry of the directory with its data source."""

    def __init__(self, name, size, source):
        if not isinstance(source, (LazySource, OwnedSource)):
            raise WadException(ErrorKind.LUMP_INIT_FAILURE, 'unknown data source %r' % (source,))

        if size < 0:
            raise WadException(ErrorKind.LUMP_INIT_FAILURE, 'lump \'%s\' has negative size %d' % (name, size))

        if isinstance(source, OwnedSource) and len(source.data) != size:
            raise WadException(
                ErrorKind.LUMP_INIT_FAILURE,
                'lump \'%s\' declares %d bytes but owns %d' % (name, size, len(source.data)))

        if isinstance(source, LazySource) and source.offset < 0:
            raise WadException(
                ErrorKind.LUMP_INIT_FAILURE,
                'lump \'%s\' has negative offset %d' % (name, source.offset))

        self.name = trim_name(name)
        self.size = size
        self.source = source

    def __repr__(self):
        return '<%s(name=%r, size=%d, source=%r)>' % (self.__class__.__name__, self.name, self.size, self.source)

    def __len__(self):
        return self.size

    @classmethod
    def from_bytes(cls, name, data):
        return cls(name, len(data), OwnedSource(data))

    @classmethod
    def from_file(cls, name, size, backing, offset):
        return cls(name, size, LazySource(backing, offset))

    @property
    def is_lazy(self) -> bool:
        return isinstance(self.source, LazySource)

    def read(self) -> bytes:
        logger.debug('reading %d bytes of lump \'%s\'' % (self.size, self.name))
        return self.source.resolve(self.size)

    def detach(self):
        '''Return a copy owning its bytes, independent of any backing file.'''
        return Lump.from_bytes(self.name, self.read())

    def export(self, path):
        '''Dump the data of the lump into a file on its own.'''
        data = self.read()
        try:
            with open(path, 'wb') as f:
                f.write(data)
        except OSError as e:
            raise WadException(ErrorKind.WRITE_FAILURE, 'cannot export lump \'%s\' to \'%s\'' % (self.name, path)) from e

        logger.debug('exported lump \'%s\' to \'%s\'' % (self.name, path))

        return len(data)
