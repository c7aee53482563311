from enum import Enum, Flag, auto


class Compliant(Flag):
    '''It indicates which degree of compliantness the data must reflect the format'''
    NONE   = 0
    MAGIC  = 1 << 0  # identifier must be one of IWAD/PWAD
    BOUNDS = 1 << 1  # every lump must lie inside the file


class WadPhase(Enum):
    '''Enum to state the actual phase of a container'''
    CREATED    = 0
    OPENED     = auto()
    MUTATED    = auto()
    SERIALIZED = auto()
    RELEASED   = auto()
