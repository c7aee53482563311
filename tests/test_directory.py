import io
import struct

import pytest

from pywad.directory import ENTRY_SIZE, decode_directory, encode_directory, layout_lumps
from pywad.exceptions import ErrorKind, WadException
from pywad.lump import Lump
from pywad.streams import BackingFile, ByteCursor


def _directory(*entries):
    return ByteCursor.from_bytes(b''.join(struct.pack('<ii8s', *_) for _ in entries))


def test_entry_size():
    assert ENTRY_SIZE == 16


def test_decode_directory():
    backing = BackingFile(b'\x00' * 64)
    cursor = _directory(
        (40, 4, b'THINGS\x00\x00'),
        (12, 0, b'MAP01\x00\x00\x00'),
        (12, 28, b'PLAYPAL\x00'),
    )

    lumps = decode_directory(cursor, 3, backing)

    assert [_.name for _ in lumps] == ['THINGS', 'MAP01', 'PLAYPAL']
    assert [_.size for _ in lumps] == [4, 0, 28]
    assert [_.source.offset for _ in lumps] == [40, 12, 12]
    assert all(_.is_lazy for _ in lumps)
    assert all(_.source.backing is backing for _ in lumps)


def test_decode_directory_does_not_check_bounds():
    backing = BackingFile(b'\x00' * 16)
    cursor = _directory((1000, 8, b'FAR\x00\x00\x00\x00\x00'))

    lump, = decode_directory(cursor, 1, backing)

    assert lump.size == 8

    with pytest.raises(WadException) as e:
        lump.read()

    assert e.value.kind == ErrorKind.READ_FAILURE


def test_decode_directory_invalid_entry():
    backing = BackingFile(b'\x00' * 16)
    cursor = _directory(
        (12, 4, b'GOOD\x00\x00\x00\x00'),
        (12, -4, b'BAD\x00\x00\x00\x00\x00'),
    )

    with pytest.raises(WadException) as e:
        decode_directory(cursor, 2, backing)

    assert e.value.kind == ErrorKind.LUMP_INIT_FAILURE
    assert e.value.cause.kind == ErrorKind.LUMP_INIT_FAILURE


def test_decode_directory_truncated():
    backing = BackingFile(b'')
    cursor = _directory((12, 4, b'GOOD\x00\x00\x00\x00'))

    with pytest.raises(WadException) as e:
        decode_directory(cursor, 2, backing)

    assert e.value.kind == ErrorKind.READ_FAILURE


def test_layout_lumps():
    lumps = [
        Lump.from_bytes('a', b'\x01\x02'),
        Lump.from_bytes('empty', b''),
        Lump.from_bytes('c', b'\x03' * 5),
    ]

    entries = layout_lumps(lumps, 12)

    assert [(_.filepos, _.size, _.name) for _ in entries] == [
        (60, 2, 'a'),
        (62, 0, 'empty'),
        (62, 5, 'c'),
    ]


def test_encode_directory_discards_original_offsets():
    backing = BackingFile(io.BytesIO(b'\x00' * 1024))
    lumps = [
        Lump.from_file('second', 3, backing, 900),
        Lump.from_file('first', 7, backing, 100),
    ]

    cursor = encode_directory(lumps, 12)

    assert cursor.length == 2 * ENTRY_SIZE
    assert cursor.getvalue() == (
        struct.pack('<ii8s', 44, 3, b'SECOND') +
        struct.pack('<ii8s', 47, 7, b'FIRST')
    )


def test_encode_empty_directory():
    cursor = encode_directory([], 12)

    assert cursor.length == 0
    assert cursor.getvalue() == b''
