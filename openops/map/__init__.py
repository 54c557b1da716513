"""
Mappers: ops that apply an element op to every element of an image.

Sequential and threaded variants are registered under the "map" name; the
threaded ones rank higher and split the image into contiguous chunks.
"""

from openops.map.chunker import chunk, run_chunks
from openops.map.mappers import (BinaryMapper, InplaceMapper, Mapper, ThreadedBinaryMapper,
                                 ThreadedInplaceMapper, ThreadedMapper)

__all__ = [
    'chunk',
    'run_chunks',
    'Mapper',
    'ThreadedMapper',
    'InplaceMapper',
    'ThreadedInplaceMapper',
    'BinaryMapper',
    'ThreadedBinaryMapper',
]
