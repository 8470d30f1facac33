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
The constants pool of a Java class file, and the functions for
turning its entries into the text javap would show for them.

The pool is held as a flat tuple of (tag, value) pairs addressed by
their original index. Slot 0, and the slot following every Long or
Double entry, hold (None, None) and can't be requested.

reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.4

:author: Christopher O'Brien  <obriencj@gmail.com>
:license: LGPL v.3
"""  # noqa


from decimal import Decimal
from logging import getLogger
from math import copysign, isinf, isnan

from .errors import ConstPoolIndexException, ConstTypeException
from .errors import Unimplemented
from .pack import compile_struct


__all__ = (
    "JavaConstantPool",
    "CONST_Utf8", "CONST_Integer", "CONST_Float",
    "CONST_Long", "CONST_Double", "CONST_Class",
    "CONST_String", "CONST_Fieldref", "CONST_Methodref",
    "CONST_InterfaceMethodref", "CONST_NameAndType",
    "CONST_MethodHandle", "CONST_MethodType",
    "CONST_Dynamic", "CONST_InvokeDynamic",
    "CONST_Module", "CONST_Package",
    "const_type_name", "reference_kind_name",
    "decode_modified_utf8", "escape_string", "java_float_str",
)


_log = getLogger(__name__)


# The constant pool types
# pylint: disable=C0103
CONST_Utf8 = 1
CONST_Integer = 3
CONST_Float = 4
CONST_Long = 5
CONST_Double = 6
CONST_Class = 7
CONST_String = 8
CONST_Fieldref = 9
CONST_Methodref = 10
CONST_InterfaceMethodref = 11
CONST_NameAndType = 12
CONST_MethodHandle = 15
CONST_MethodType = 16
CONST_Dynamic = 17
CONST_InvokeDynamic = 18
CONST_Module = 19
CONST_Package = 20


# the names javap uses in its constant pool listing
_CONST_NAMES = {
    CONST_Utf8: "Utf8",
    CONST_Integer: "Integer",
    CONST_Float: "Float",
    CONST_Long: "Long",
    CONST_Double: "Double",
    CONST_Class: "Class",
    CONST_String: "String",
    CONST_Fieldref: "Fieldref",
    CONST_Methodref: "Methodref",
    CONST_InterfaceMethodref: "InterfaceMethodref",
    CONST_NameAndType: "NameAndType",
    CONST_MethodHandle: "MethodHandle",
    CONST_MethodType: "MethodType",
    CONST_Dynamic: "Dynamic",
    CONST_InvokeDynamic: "InvokeDynamic",
    CONST_Module: "Module",
    CONST_Package: "Package",
}


# the names javap uses when commenting on an instruction's operand
_COMMENT_NAMES = {
    CONST_Utf8: "Utf8",
    CONST_Integer: "int",
    CONST_Float: "float",
    CONST_Long: "long",
    CONST_Double: "double",
    CONST_Class: "class",
    CONST_String: "String",
    CONST_Fieldref: "Field",
    CONST_Methodref: "Method",
    CONST_InterfaceMethodref: "InterfaceMethod",
    CONST_NameAndType: "NameAndType",
    CONST_MethodHandle: "MethodHandle",
    CONST_MethodType: "MethodType",
    CONST_Dynamic: "Dynamic",
    CONST_InvokeDynamic: "InvokeDynamic",
    CONST_Module: "Module",
    CONST_Package: "Package",
}


_REFERENCE_KINDS = {
    1: "REF_getField",
    2: "REF_getStatic",
    3: "REF_putField",
    4: "REF_putStatic",
    5: "REF_invokeVirtual",
    6: "REF_invokeStatic",
    7: "REF_invokeSpecial",
    8: "REF_newInvokeSpecial",
    9: "REF_invokeInterface",
}


_MEMBER_REFS = (CONST_Fieldref, CONST_Methodref, CONST_InterfaceMethodref)


# commonly re-occurring struct formats
_B = compile_struct(">B")
_BH = compile_struct(">BH")
_H = compile_struct(">H")
_HH = compile_struct(">HH")
_i = compile_struct(">i")
_f = compile_struct(">f")
_q = compile_struct(">q")
_d = compile_struct(">d")


def const_type_name(tag):
    """
    the javap name for a constant pool tag
    """

    return _CONST_NAMES.get(tag, "Unknown(%r)" % tag)


def reference_kind_name(kind):
    """
    the javap name for a MethodHandle reference kind
    """

    return _REFERENCE_KINDS.get(kind, "REF_unknown(%i)" % kind)


class JavaConstantPool(object):
    """
    A constants pool

    reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.4
    """  # noqa

    def __init__(self):
        self.consts = ((None, None), )


    def __eq__(self, other):
        return (isinstance(other, JavaConstantPool) and
                (self.consts == other.consts))


    def __ne__(self, other):
        return not self.__eq__(other)


    def __len__(self):
        return len(self.consts)


    def unpack(self, unpacker):
        """
        Unpacks the constant pool from an unpacker stream
        """

        (count, ) = unpacker.unpack_struct(_H)

        # first item is never present in the actual data buffer, but
        # the count number acts like it would be.
        items = [(None, None), ]
        count -= 1

        # Long and Double const types will "consume" an item count,
        # but not data
        hackpass = False

        for _i in range(0, count):

            if hackpass:
                # previous item was a long or double
                hackpass = False
                items.append((None, None))

            else:
                item = _unpack_const_item(unpacker)
                items.append(item)

                # if this item was a long or double, skip the next
                # counter.
                if item[0] in (CONST_Long, CONST_Double):
                    hackpass = True

        _log.debug("unpacked %i constant pool slots", len(items))
        self.consts = tuple(items)


    def get_const(self, index):
        """
        returns the type and value of the constant at index. Raises a
        ConstPoolIndexException for index 0, indexes past the end of
        the pool, and the unusable slot after a long or double.
        """

        if not index:
            raise ConstPoolIndexException(index, "index 0 is unused")

        if index < 0 or index >= len(self.consts):
            raise ConstPoolIndexException(
                index, "pool has %i entries" % len(self.consts))

        t, v = self.consts[index]
        if t is None:
            raise ConstPoolIndexException(
                index, "second slot of a long or double")

        return t, v


    def get_tag(self, index):
        """
        the tag of the constant at index
        """

        return self.get_const(index)[0]


    def _typed(self, index, *tags):
        t, v = self.get_const(index)
        if t not in tags:
            wanted = "/".join(const_type_name(x) for x in tags)
            raise ConstTypeException(index, wanted, const_type_name(t))
        return t, v


    def utf8(self, index):
        """
        the string value of the Utf8 constant at index
        """

        return self._typed(index, CONST_Utf8)[1]


    def class_name(self, index):
        """
        the internal name of the Class constant at index
        """

        return self.utf8(self._typed(index, CONST_Class)[1])


    def module_name(self, index):
        """
        the name of the Module constant at index
        """

        return self.utf8(self._typed(index, CONST_Module)[1])


    def package_name(self, index):
        """
        the internal name of the Package constant at index
        """

        return self.utf8(self._typed(index, CONST_Package)[1])


    def name_and_type(self, index):
        """
        (name, descriptor) of the NameAndType constant at index
        """

        name, desc = self._typed(index, CONST_NameAndType)[1]
        return self.utf8(name), self.utf8(desc)


    def member_ref(self, index):
        """
        (owning class name, member name, descriptor) of the Fieldref,
        Methodref, or InterfaceMethodref constant at index
        """

        cref, ntref = self._typed(index, *_MEMBER_REFS)[1]
        name, desc = self.name_and_type(ntref)
        return self.class_name(cref), name, desc


    def deref_const(self, index):
        """
        returns the dereferenced value from the const pool. For simple
        types, this will be a single value indicating the constant.
        For more complex types, such as fieldref, methodref, etc, this
        will return a tuple.
        """

        t, v = self.get_const(index)

        if t in (CONST_Utf8, CONST_Integer, CONST_Float,
                 CONST_Long, CONST_Double):
            return v

        elif t == CONST_Class:
            return self.class_name(index)

        elif t in (CONST_String, CONST_MethodType,
                   CONST_Module, CONST_Package):
            return self.utf8(v)

        elif t in _MEMBER_REFS:
            return self.member_ref(index)

        elif t == CONST_NameAndType:
            return self.name_and_type(index)

        elif t == CONST_MethodHandle:
            kind, ref = v
            return (kind, self.member_ref(ref))

        elif t in (CONST_Dynamic, CONST_InvokeDynamic):
            # the bootstrap index refers to the BootstrapMethods
            # attribute, not to the pool
            return (v[0], self.name_and_type(v[1]))

        else:
            raise Unimplemented("Unknown constant pool type %r" % t)


    def constants(self):
        """
        sequence of tuples (index, type, dereferenced value) of the
        constant pool entries.
        """

        for i in range(1, len(self.consts)):
            t, _v = self.consts[i]
            if t:
                yield (i, t, self.deref_const(i))


    def pretty_constants(self):
        """
        the sequence of tuples (index, pretty type, value) of the constant
        pool entries.
        """

        for i in range(1, len(self.consts)):
            t, v = self.pretty_const(i)
            if t:
                yield (i, t, v)


    def pretty_const(self, index):
        """
        a tuple of the pretty type and val, or (None, None) for invalid
        indexes (such as the second part of a long or double value)
        """

        if index <= 0 or index >= len(self.consts):
            return None, None

        t, v = self.consts[index]
        if not t:
            return None, None
        else:
            return _pretty_const_type_val(t, v)


    def pretty_deref_const(self, index):
        """
        A string representation of the end-value of a constant.  This will
        deref the constant index, and if it is a compound type, will
        continue dereferencing until it can compose the full value
        (eg: a CONST_Methodref will be composed of its class, name,
        and value derefenced constants). This is the text javap shows
        in the comment beside a constant.
        """

        t, v = self.get_const(index)

        if t == CONST_Utf8:
            result = v

        elif t == CONST_String:
            result = escape_string(self.utf8(v))

        elif t in (CONST_Integer, CONST_Float, CONST_Long, CONST_Double):
            result = _pretty_const_type_val(t, v)[1]

        elif t == CONST_Class:
            result = _quote_name(self.class_name(index))

        elif t in _MEMBER_REFS:
            result = self._pretty_member(index)

        elif t == CONST_NameAndType:
            n, d = self.name_and_type(index)
            result = "%s:%s" % (_quote_name(n), d)

        elif t == CONST_MethodHandle:
            kind, ref = v
            result = "%s %s" % (reference_kind_name(kind),
                                self._pretty_member(ref))

        elif t == CONST_MethodType:
            result = self.utf8(v)

        elif t in (CONST_Dynamic, CONST_InvokeDynamic):
            n, d = self.name_and_type(v[1])
            result = "#%i:%s:%s" % (v[0], _quote_name(n), d)

        elif t in (CONST_Module, CONST_Package):
            result = self.utf8(v)

        else:
            raise Unimplemented("No pretty for const type %r" % t)

        return result


    def pretty_const_comment(self, index):
        """
        the type-prefixed text javap shows after an instruction that
        refers to the constant at index, eg. "Method
        java/lang/Object."<init>":()V"
        """

        t = self.get_tag(index)
        return "%s %s" % (_COMMENT_NAMES[t], self.pretty_deref_const(index))


    def _pretty_member(self, index):
        c, n, d = self.member_ref(index)
        return "%s.%s:%s" % (_quote_name(c), _quote_name(n), d)


# -----
# Utility functions for the constants pool


def decode_modified_utf8(data):
    """
    decode the "modified UTF-8" Java uses in class files, where NUL
    is encoded as C0 80 and supplementary characters are stored as
    a pair of encoded surrogates
    """

    try:
        return data.decode("utf8")
    except UnicodeDecodeError:
        pass

    data = data.replace(b"\xC0\x80", b"\x00")
    try:
        text = data.decode("utf8", "surrogatepass")
    except UnicodeDecodeError:
        _log.warning("undecodable Utf8 constant %r", data)
        return data.decode("utf8", "replace")

    # recombine any surrogate pairs into their real code points
    return text.encode("utf-16-be", "surrogatepass").decode(
        "utf-16-be", "replace")


def _unpack_const_item(unpacker):
    """
    unpack a constant pool item, which will consist of a type byte
    (see the CONST_ values in this module) and a value of the
    appropriate type
    """

    (typecode,) = unpacker.unpack_struct(_B)

    if typecode == CONST_Utf8:
        (slen,) = unpacker.unpack_struct(_H)
        val = decode_modified_utf8(unpacker.read(slen))

    elif typecode == CONST_Integer:
        (val,) = unpacker.unpack_struct(_i)

    elif typecode == CONST_Float:
        (val,) = unpacker.unpack_struct(_f)

    elif typecode == CONST_Long:
        (val,) = unpacker.unpack_struct(_q)

    elif typecode == CONST_Double:
        (val,) = unpacker.unpack_struct(_d)

    elif typecode in (CONST_Class, CONST_String, CONST_MethodType,
                      CONST_Module, CONST_Package):
        (val,) = unpacker.unpack_struct(_H)

    elif typecode in (CONST_Fieldref, CONST_Methodref,
                      CONST_InterfaceMethodref, CONST_NameAndType,
                      CONST_Dynamic, CONST_InvokeDynamic):
        val = unpacker.unpack_struct(_HH)

    elif typecode == CONST_MethodHandle:
        val = unpacker.unpack_struct(_BH)

    else:
        raise Unimplemented("unknown constant type %r" % typecode)

    return typecode, val


def _pretty_const_type_val(typecode, val):
    """
    given a typecode and a value, returns the appropriate pretty
    version of that value (not the dereferenced data)
    """

    typestr = const_type_name(typecode)

    if typecode == CONST_Utf8:
        val = escape_string(val)
    elif typecode == CONST_Integer:
        val = "%i" % val
    elif typecode == CONST_Float:
        val = java_float_str(val, single=True) + "f"
    elif typecode == CONST_Long:
        val = "%il" % val
    elif typecode == CONST_Double:
        val = java_float_str(val) + "d"
    elif typecode in (CONST_Class, CONST_String, CONST_MethodType,
                      CONST_Module, CONST_Package):
        val = "#%i" % val
    elif typecode in _MEMBER_REFS:
        val = "#%i.#%i" % val
    elif typecode == CONST_NameAndType:
        val = "#%i:#%i" % val
    elif typecode == CONST_MethodHandle:
        val = "%i:#%i" % val
    elif typecode in (CONST_Dynamic, CONST_InvokeDynamic):
        val = "#%i:#%i" % val
    else:
        raise Unimplemented("unknown constant type %r" % typecode)

    return typestr, val


def java_float_str(val, single=False):
    """
    format a float or double the way Java's toString does, using the
    shortest digits which read back as the same value. Magnitudes
    from 10^-3 up to 10^7 are written plainly, others in computerized
    scientific notation.
    """

    if isnan(val):
        return "NaN"
    elif isinf(val):
        return "Infinity" if val > 0 else "-Infinity"
    elif val == 0:
        return "-0.0" if copysign(1.0, val) < 0 else "0.0"

    if single:
        # find the shortest text that survives a round trip through
        # a 32-bit float
        for prec in range(1, 10):
            text = "%.*e" % (prec - 1, val)
            if _f.unpack(_f.pack(float(text)))[0] == val:
                break
    else:
        text = repr(val)

    digits, exponent = _shortest_digits(text)
    if len(digits) == 1:
        # a single digit is widened to the closest two digit decimal,
        # as Java does
        digits, exponent = _shortest_digits("%.1e" % val)

    sign = "-" if val < 0 else ""

    # the power of ten of the leading digit
    point = len(digits) + exponent - 1

    if -3 <= point < 7:
        if point >= 0:
            whole = digits[:point + 1].ljust(point + 1, "0")
            frac = digits[point + 1:] or "0"
        else:
            whole = "0"
            frac = "0" * (-point - 1) + digits
        return "%s%s.%s" % (sign, whole, frac)

    else:
        return "%s%s.%sE%i" % (sign, digits[0], digits[1:] or "0", point)


def _shortest_digits(text):
    """
    the significant digits of the decimal text, without trailing
    zeros, and the power of ten of the last of them
    """

    _sign, digits, exponent = Decimal(text).as_tuple()
    digits = list(digits)
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1

    return "".join(str(d) for d in digits), exponent


_ESCAPES = {
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
    "\\": "\\\\",
    "\"": "\\\"",
}


def escape_string(s):
    """
    escapes control characters in s the way javap does when showing
    string constants. Anything else which can't be printed, including
    an unpaired surrogate, is written as its UTF-16 \\u escapes.
    """

    result = []
    for c in s:
        if c in _ESCAPES:
            result.append(_ESCAPES[c])
        elif c.isprintable():
            result.append(c)
        else:
            code = ord(c)
            if code > 0xffff:
                code -= 0x10000
                result.append("\\u%04x\\u%04x" % (0xd800 + (code >> 10),
                                                  0xdc00 + (code & 0x3ff)))
            else:
                result.append("\\u%04x" % code)
    return "".join(result)


def _quote_name(name):
    """
    javap quotes special names like <init> and array class names
    """

    if name[:1] in ("<", "["):
        return "\"%s\"" % name
    return name


#
# The end.
