import logging
import os
import struct

import pytest


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)


def build_wad(lumps, identification=b'IWAD', directory_first=False):
    '''Assemble a WAD by hand: "lumps" is a list of (name, data).

    By default the data comes right after the header and the directory
    is at the end, like the id tools do.'''
    names = [name.ljust(8, b'\x00') for name, _ in lumps]
    blob = b''.join(data for _, data in lumps)
    directory_size = 16 * len(lumps)

    if directory_first:
        directory_offset = 12
        data_offset = 12 + directory_size
    else:
        directory_offset = 12 + len(blob)
        data_offset = 12

    directory = b''
    offset = data_offset
    for name, (_, data) in zip(names, lumps):
        directory += struct.pack('<ii8s', offset, len(data), name)
        offset += len(data)

    header = struct.pack('<4sii', identification, len(lumps), directory_offset)

    if directory_first:
        return header + directory + blob

    return header + blob + directory


SAMPLE_LUMPS = [
    (b'MAP01', b''),
    (b'THINGS', b'\x01\x02\x03\x04\x05\x06\x07\x08\x09\x0a'),
    (b'LINEDEFS', b'\xff' * 14),
    (b'PLAYPAL', bytes(range(256)) * 3),
]


@pytest.fixture
def sample_bytes():
    return build_wad(SAMPLE_LUMPS)


@pytest.fixture
def sample_path(tmp_path, sample_bytes):
    path = tmp_path / 'sample.wad'
    path.write_bytes(sample_bytes)

    return path


@pytest.fixture
def make_wad():
    return build_wad
