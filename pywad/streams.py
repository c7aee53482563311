import io
import os
import logging

from bitstring import BitStream, Bits, CreationError, ReadError

from .exceptions import ErrorKind, WadException, usage_fault
from .names import NAME_LENGTH


logger = logging.getLogger(__name__)


class BackingFile(object):
    '''This is a simple wrapper around path/bytes/file objects to
    uniform their properties: the container needs something it can seek()
    and read() from and that it can close exactly once.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self.obj = obj
        self.name = getattr(obj, 'name', None)
        self._owned = True  # we close only what we opened
        self.history = []

        if isinstance(obj, os.PathLike):
            self.obj = os.fspath(obj)

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, self.init_file)

        init_method()

    def __getattr__(self, name):
        return getattr(self.obj, name)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self.name if self.name is not None else self._type.__name__)

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        self.name = self.obj
        try:
            self.obj = open(self.obj, 'rb')
        except FileNotFoundError as e:
            raise WadException(ErrorKind.NOT_FOUND, 'no such file \'%s\'' % self.name) from e
        except OSError as e:
            raise WadException(ErrorKind.READ_FAILURE, 'cannot open \'%s\'' % self.name) from e

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def init_bytearray(self):
        self.obj = io.BytesIO(bytes(self.obj))

    def init_file(self):
        '''Anything else must already behave like a binary file: the caller keeps the ownership'''
        for method in ('seek', 'read', 'tell'):
            if not callable(getattr(self.obj, method, None)):
                raise usage_fault('\'%s\' is the wrong kind of source to use' % self._type.__name__)

        if isinstance(self.obj, io.TextIOBase):
            raise usage_fault('\'%s\' must be opened in binary mode' % self._type.__name__)

        try:
            empty = self.obj.read(0)
        except (OSError, ValueError) as e:
            raise WadException(ErrorKind.READ_FAILURE, 'cannot read from %r' % self.obj) from e

        if not isinstance(empty, bytes):
            raise usage_fault('\'%s\' doesn\'t return bytes' % self._type.__name__)

        self._owned = False

    @property
    def closed(self):
        return self.obj.closed

    def size(self) -> int:
        self.save()
        try:
            return self.obj.seek(0, io.SEEK_END)
        finally:
            self.restore()

    def close(self):
        if self._owned and not self.obj.closed:
            logger.debug('closing %r' % self)
            self.obj.close()

    # TODO: create contextmanager
    def save(self):
        self.history.append(self.obj.tell())

    def restore(self):
        old_seek = self.history.pop()
        self.obj.seek(old_seek)


class ByteCursor(object):
    '''A little-endian byte window with a read/write position.

    It's used both as a read view over a region of a file and as
    a buffer assembled before being written out. The storage is a
    BitStream with the position always at a byte boundary.

    "capacity" is the size of the storage, "length" is how far the buffer
    has been filled: for a read view they coincide, for a write buffer
    the length is the high-water mark of the puts.
    '''

    def __init__(self, capacity=0):
        if capacity < 0:
            raise usage_fault('negative capacity %d' % capacity)
        self._bits = BitStream(bytes=bytes(capacity))
        self._length = 0
        self.history = []

    def __repr__(self):
        return '<%s(position=%d, length=%d, capacity=%d)>' % (
            self.__class__.__name__, self.position, self._length, self.capacity)

    def __len__(self):
        return self._length

    @classmethod
    def from_bytes(cls, data):
        cursor = cls()
        cursor._bits = BitStream(bytes=bytes(data))
        cursor._length = len(data)

        return cursor

    @classmethod
    def read_region(cls, source, length=None, start_offset=0):
        '''Read "length" bytes (the remainder of the source if not indicated)
        starting at "start_offset".'''
        try:
            end = source.seek(0, io.SEEK_END)
            if length is None:
                length = end - start_offset
            if length < 0 or start_offset < 0:
                raise ValueError('invalid range of %d bytes at offset %d' % (length, start_offset))
            # nothing to read, wherever it points
            if length == 0:
                return cls()
            # the range comes from the file itself, check it before reading
            if start_offset + length > end:
                raise EOFError('the source ends at offset %d' % end)
            source.seek(start_offset)
            data = source.read(length)
        except (OSError, ValueError, EOFError) as e:
            raise WadException(
                ErrorKind.READ_FAILURE,
                'cannot read %s bytes at offset %d' % (length, start_offset)) from e

        if len(data) != length:
            raise WadException(
                ErrorKind.READ_FAILURE,
                'cannot read %d bytes at offset %d' % (length, start_offset),
            ) from EOFError('got %d bytes' % len(data))

        logger.debug('read region [%08x, %08x)' % (start_offset, start_offset + length))

        return cls.from_bytes(data)

    @property
    def position(self) -> int:
        return self._bits.bytepos

    @position.setter
    def position(self, index):
        if index < 0 or index > self.capacity:
            raise usage_fault('position %d out of bounds [0, %d]' % (index, self.capacity))
        self._bits.bytepos = index

    @property
    def length(self) -> int:
        return self._length

    @property
    def capacity(self) -> int:
        return len(self._bits) // 8

    @property
    def remaining(self) -> int:
        return self.capacity - self.position

    def has_remaining(self) -> bool:
        return self.remaining > 0

    def save(self):
        self.history.append(self.position)

    def restore(self):
        self.position = self.history.pop()

    def getvalue(self) -> bytes:
        return self._bits[:self._length * 8].tobytes()

    def _read(self, fmt, size, at):
        start = self.position if at is None else at
        if start < 0 or start + size > self.capacity:
            raise WadException(
                ErrorKind.READ_FAILURE,
                'cannot read %d bytes at position %d' % (size, start),
            ) from EOFError('the buffer ends at %d' % self.capacity)

        self.position = start

        if size == 0:
            return b''

        try:
            return self._bits.read(fmt)
        except ReadError as e:
            raise WadException(ErrorKind.READ_FAILURE, 'cannot read \'%s\'' % fmt) from e

    # NOTE: an explicit index moves the position right after the value read
    def get_u8(self, at=None) -> int:
        return self._read('uint:8', 1, at)

    def get_u16(self, at=None) -> int:
        return self._read('uintle:16', 2, at)

    def get_i32(self, at=None) -> int:
        return self._read('intle:32', 4, at)

    def get_bytes(self, n, at=None) -> bytes:
        return self._read('bytes:%d' % n, n, at)

    def get_fixed_name(self, at=None) -> str:
        '''Every byte is a character, no trimming at all.'''
        return self.get_bytes(NAME_LENGTH, at=at).decode('latin1')

    def slice(self, offset, length):
        '''Extract a sub-range as a new cursor, our position is left untouched.'''
        if offset < 0 or length < 0 or offset + length > self.capacity:
            raise WadException(
                ErrorKind.READ_FAILURE,
                'range [%d, %d) out of bounds' % (offset, offset + length))

        return ByteCursor.from_bytes(self._bits[offset * 8:(offset + length) * 8].tobytes())

    def _write(self, bits, at):
        if at is not None:
            self.position = at

        size = len(bits) // 8
        if size == 0:
            return self

        end = self.position + size
        if end > self.capacity:
            raise usage_fault('buffer overflow: writing %d bytes at %d with capacity %d' % (
                size, self.position, self.capacity))

        self._bits.overwrite(bits, self.position * 8)
        self._bits.bytepos = end
        self._length = max(self._length, end)

        return self

    def _make(self, **kw):
        try:
            return Bits(**kw)
        except (CreationError, ValueError) as e:
            raise usage_fault('cannot encode %r' % (kw,)) from e

    def put_u8(self, value, at=None):
        return self._write(self._make(uint=value, length=8), at)

    def put_u16(self, value, at=None):
        return self._write(self._make(uintle=value, length=16), at)

    def put_i32(self, value, at=None):
        return self._write(self._make(intle=value, length=32), at)

    def put_bytes(self, data, at=None):
        return self._write(Bits(bytes=bytes(data)), at)

    def put_cursor(self, other, at=None):
        return self.put_bytes(other.getvalue(), at=at)

    def put_fixed_name(self, value, at=None):
        try:
            raw = value.encode('latin1')
        except UnicodeEncodeError as e:
            raise usage_fault('name %r is not made of single-byte characters' % value) from e

        if len(raw) != NAME_LENGTH:
            raise usage_fault('name %r must be exactly %d characters' % (value, NAME_LENGTH))

        return self.put_bytes(raw, at=at)

    def write_region(self, sink, at_offset=None):
        '''Write the whole content (from zero to length) into the sink.'''
        self.save()
        try:
            if at_offset is not None:
                sink.seek(at_offset)
            sink.write(self.getvalue())
        except (OSError, ValueError) as e:
            raise WadException(ErrorKind.WRITE_FAILURE, 'cannot write %d bytes' % self._length) from e
        finally:
            self.restore()

        return self._length

    def resize(self, new_capacity):
        if new_capacity < 0:
            raise usage_fault('negative capacity %d' % new_capacity)

        position = self.position
        data = self._bits.tobytes()[:new_capacity]

        self._bits = BitStream(bytes=data.ljust(new_capacity, b'\x00'))
        self._length = min(self._length, new_capacity)
        self._bits.bytepos = min(position, new_capacity)

        logger.debug('resized to %d bytes' % new_capacity)

        return self
