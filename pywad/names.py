'''
Lump names are stored as 8 single-byte characters, padded with NUL when shorter.

Only a restricted charset is written out, everything else becomes a dash.
'''
import re


NAME_LENGTH = 8

_ILLEGAL = re.compile(r'[^A-Z0-9\[\]\-_\\\x00]')


def normalize_name(value) -> str:
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode('latin1')

    name = value[:NAME_LENGTH].ljust(NAME_LENGTH, '\x00')
    # upper() can expand some characters (e.g. 'ß' -> 'SS') so re-cut
    name = name.upper()[:NAME_LENGTH]

    return _ILLEGAL.sub('-', name)


def trim_name(raw: str) -> str:
    '''Drop the padding: the name ends at the first NUL.'''
    return raw.split('\x00', 1)[0]
