# This library is free software; you can redistribute it and/or modify
# it under the terms of the GNU Lesser General Public License as
# published by the Free Software Foundation; either version 3 of the
# License, or (at your option) any later version.
#
# This library is distributed in the hope that it will be useful, but
# WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this library; if not, see
# <http://www.gnu.org/licenses/>.



"""
Utility module for unpacking shapes of big-endian binary data from
an in-memory buffer.

:author: Christopher O'Brien <obriencj@gmail.com>
:license: LGPL v.3
"""


from contextlib import contextmanager
from struct import Struct

from .errors import UnpackException


__all__ = (
    "compile_struct", "unpack",
    "BufferUnpacker", "UnpackException",
)


# pylint: disable=C0103
_struct_cache = dict()


def compile_struct(fmt, cache=None):
    """
    returns a struct.Struct instance compiled from fmt. If fmt has
    already been compiled, it will return the previously compiled
    Struct instance from the cache.
    """

    if cache is None:
        cache = _struct_cache

    sfmt = cache.get(fmt, None)
    if not sfmt:
        sfmt = Struct(fmt)
        cache[fmt] = sfmt
    return sfmt


class BufferUnpacker(object):
    """
    Sequential reader over bytes or a memoryview. Every read advances
    the offset, and a read wanting more data than remains raises an
    UnpackException rather than returning a short result.

    Adheres to the context management protocol, so may be used in
    conjunction with the 'with' keyword
    """

    def __init__(self, data, offset=0):
        self.data = data
        self.offset = offset


    def __enter__(self):
        return self


    def __exit__(self, exc_type, _exc_val, _exc_tb):
        self.close()
        return False


    def remaining(self):
        """
        count of bytes not yet read
        """

        if self.data is None:
            return 0
        return len(self.data) - self.offset


    def _advance(self, fmt, size):
        offset = self.offset
        avail = self.remaining()

        if avail < size:
            raise UnpackException(fmt, size, avail)

        self.offset = offset + size
        return offset


    def unpack(self, fmt):
        """
        unpacks the given fmt from the underlying buffer and returns the
        results. Will raise an UnpackException if there is not enough
        data to satisfy the fmt
        """

        return self.unpack_struct(compile_struct(fmt))


    def unpack_struct(self, struct):
        """
        unpacks the given struct from the underlying buffer and returns
        the results. Will raise an UnpackException if there is not
        enough data to satisfy the format of the structure
        """

        offset = self._advance(struct.format, struct.size)
        return struct.unpack_from(self.data, offset)


    def read(self, count):
        """
        read count bytes from the underlying buffer and return them.
        Raises an UnpackException if there is not enough data in the
        underlying buffer.
        """

        offset = self._advance(None, count)
        return bytes(self.data[offset:self.offset])


    def skip(self, count):
        """
        advance past count bytes without returning them
        """

        self._advance(None, count)


    def read_u1(self):
        return self.unpack_struct(_B)[0]


    def read_u2(self):
        return self.unpack_struct(_H)[0]


    def read_u4(self):
        return self.unpack_struct(_I)[0]


    def read_u8(self):
        return self.unpack_struct(_Q)[0]


    def read_s1(self):
        return self.unpack_struct(_b)[0]


    def read_s2(self):
        return self.unpack_struct(_h)[0]


    def read_s4(self):
        return self.unpack_struct(_i)[0]


    def unpack_array(self, fmt):
        """
        reads a count from the unpacker, and unpacks fmt count
        times. Yields a sequence of the unpacked data tuples
        """

        return self.unpack_struct_array(compile_struct(fmt))


    def unpack_struct_array(self, struct):
        """
        reads a count from the unpacker, and unpacks the precompiled
        struct count times. Yields a sequence of the unpacked data
        tuples
        """

        (count,) = self.unpack_struct(_H)
        for _i in range(count):
            yield self.unpack_struct(struct)


    def unpack_objects(self, atype, *params, **kwds):
        """
        reads a count from the unpacker, and instanciates that many calls
        to atype, with the given params and kwds passed along. Each
        instance then has its unpack method called with this unpacker
        instance passed along. Yields a squence of the unpacked
        instances
        """

        (count,) = self.unpack_struct(_H)
        for _i in range(count):
            obj = atype(*params, **kwds)
            obj.unpack(self)
            yield obj


    @contextmanager
    def step(self, name):
        """
        context in which any UnpackException not already attributed to
        a step is tagged with name before propagating
        """

        try:
            yield self
        except UnpackException as ue:
            if ue.step is None:
                ue.step = name
            raise


    def close(self):
        """
        release the underlying buffer
        """

        self.data = None
        self.offset = 0


def unpack(data, offset=0):
    """
    returns a BufferUnpacker instance over data. The unpacker
    supports the managed context interface, so may be used eg:
    `with unpack(my_data) as unpacker:`
    """

    if isinstance(data, (bytes, bytearray, memoryview)):
        return BufferUnpacker(data, offset)

    else:
        raise TypeError("unpack requires bytes, bytearray, or memoryview")


# We use these a lot, so let's not bother calling compile_struct
# over and over to get them.
_B = compile_struct(">B")
_H = compile_struct(">H")
_I = compile_struct(">I")
_Q = compile_struct(">Q")
_b = compile_struct(">b")
_h = compile_struct(">h")
_i = compile_struct(">i")


#
# The end.
