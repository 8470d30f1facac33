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
Exceptions raised while unpacking, resolving, and disassembling a
class file.

Errors at the structural level of the class (bad magic, truncated
header tables, unknown constant types) are fatal for the whole
file. The rest are contained by the renderer to the method or
attribute they occurred in.

:author: Christopher O'Brien  <obriencj@gmail.com>
:license: LGPL v.3
"""


__all__ = (
    "ClassfileError", "UnpackException",
    "ClassUnpackException", "BadMagicException",
    "Unimplemented",
    "ConstPoolIndexException", "ConstTypeException",
    "AttributeLengthException", "AttributeFormatException",
    "UnknownOpcodeException", "BadDescriptorException",
)


class ClassfileError(Exception):
    """
    common base for every error raised by this package
    """

    pass


class UnpackException(ClassfileError):
    """
    raised when there is not enough data to unpack the expected
    structures. The step attribute names the part of the class file
    being read when the data ran out, if known.
    """

    template = "format %r requires %i bytes, only %i present"


    def __init__(self, fmt, wanted, present, step=None):
        msg = self.template % (fmt, wanted, present)
        super(UnpackException, self).__init__(msg)

        self.format = fmt
        self.bytes_wanted = wanted
        self.bytes_present = present
        self.step = step


    def __str__(self):
        msg = super(UnpackException, self).__str__()
        if self.step:
            msg = "unexpected end of input during %s: %s" % (self.step, msg)
        return msg


class ClassUnpackException(ClassfileError):
    """
    raised when a class couldn't be unpacked
    """

    pass


class BadMagicException(ClassUnpackException):
    """
    raised when the data does not begin with 0xCAFEBABE
    """

    def __init__(self, magic):
        super(BadMagicException, self).__init__(
            "Not a Java class file, bad magic %s" %
            "".join("%02X" % b for b in magic))
        self.magic = magic


class Unimplemented(ClassfileError):
    """
    raised when something unexpected happens, which usually indicates
    part of the classfile specification that wasn't implemented in
    this module yet
    """

    pass


class ConstPoolIndexException(ClassfileError, IndexError):
    """
    raised when a constant pool index is zero, out of range, or
    refers to the unusable slot following a long or double
    """

    def __init__(self, index, reason):
        super(ConstPoolIndexException, self).__init__(
            "invalid constant #%i: %s" % (index, reason))
        self.index = index
        self.reason = reason


class ConstTypeException(ClassfileError):
    """
    raised when a constant pool index is valid, but the constant it
    refers to is not of the type the reference requires
    """

    def __init__(self, index, wanted, found):
        super(ConstTypeException, self).__init__(
            "invalid constant #%i: expected %s, found %s" %
            (index, wanted, found))
        self.index = index
        self.wanted = wanted
        self.found = found


class AttributeLengthException(ClassfileError):
    """
    raised when a recognized attribute's declared length disagrees
    with the number of bytes its structure consumed
    """

    def __init__(self, name, declared, consumed):
        super(AttributeLengthException, self).__init__(
            "attribute %s declares %i bytes, but %i were consumed" %
            (name, declared, consumed))
        self.name = name
        self.declared = declared
        self.consumed = consumed


class AttributeFormatException(ClassfileError):
    """
    raised when a recognized attribute's payload holds a value its
    structure doesn't allow, such as an unknown tag
    """

    pass


class UnknownOpcodeException(ClassfileError):
    """
    raised when a byte in a method's code is not a known opcode
    """

    def __init__(self, code, offset, wide=False):
        prefix = "wide " if wide else ""
        super(UnknownOpcodeException, self).__init__(
            "unknown %sopcode 0x%02x at offset %i" % (prefix, code, offset))
        self.code = code
        self.offset = offset
        self.wide = wide


class BadDescriptorException(ClassfileError):
    """
    raised when a field or method descriptor can't be parsed
    """

    def __init__(self, descriptor):
        super(BadDescriptorException, self).__init__(
            "malformed descriptor %r" % (descriptor, ))
        self.descriptor = descriptor


#
# The end.
