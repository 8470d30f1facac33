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
Attribute tables, as found on classes, fields, methods, and Code
attributes.

Every attribute is read as its name index and length-prefixed
payload. The payloads of the attribute kinds listed in
_ATTRIBUTE_UNPACKERS are decoded immediately into a structured value;
any other kind keeps only its raw payload. A recognized payload which
can't be decoded, or which decodes without consuming exactly its
declared length, keeps the error on the attribute instead of failing
the class.

reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7

:author: Christopher O'Brien  <obriencj@gmail.com>
:license: LGPL v.3
"""  # noqa


from logging import getLogger

from .constants import decode_modified_utf8
from .errors import AttributeFormatException, AttributeLengthException
from .errors import ClassfileError
from .errors import UnknownOpcodeException, UnpackException
from .opcodes import disassemble
from .pack import compile_struct, unpack


__all__ = (
    "JavaAttributes", "JavaAttributeInfo",
    "JavaCodeInfo", "JavaExceptionInfo", "JavaInnerClassInfo",
    "JavaBootstrapMethod", "JavaElementValue", "JavaAnnotation",
    "JavaTypeAnnotation", "JavaStackMapFrame", "JavaModuleInfo",
    "JavaRecordComponent",
    "TYPE_ANNOTATION_TARGETS", "TYPE_PATH_KINDS",
    "is_recognized_attribute",
)


_log = getLogger(__name__)


# commonly re-occurring struct formats
_H = compile_struct(">H")
_HH = compile_struct(">HH")
_HI = compile_struct(">HI")
_HHI = compile_struct(">HHI")
_HHH = compile_struct(">HHH")
_HHHH = compile_struct(">HHHH")
_HHHHH = compile_struct(">HHHHH")


class JavaAttributes(list):
    """
    attributes table, as used in class, member, and code
    structures. An ordered list of JavaAttributeInfo, which requires
    access to a JavaConstantPool instance to resolve the attribute
    names.
    """

    def __init__(self, cpool):
        list.__init__(self)
        self.cpool = cpool


    def unpack(self, unpacker):
        """
        Unpack an attributes table from an unpacker stream.  Modifies the
        structure of this instance.
        """

        self.extend(unpacker.unpack_objects(JavaAttributeInfo, self.cpool))


    def get(self, name, default=None):
        """
        the first JavaAttributeInfo with the given name, or default
        """

        for attr in self:
            if attr.name == name:
                return attr
        return default


    def get_value(self, name):
        """
        the decoded value of the named attribute, or None if there is
        no such attribute. Raises the attribute's error if its
        payload couldn't be decoded.
        """

        attr = self.get(name)
        if attr is None:
            return None

        if attr.error is not None:
            raise attr.error

        return attr.value


class JavaAttributeInfo(object):
    """
    A single attribute. The name is resolved when unpacked; value is
    the decoded payload for recognized attribute kinds, and error is
    the exception encountered decoding either the name or payload.
    """

    def __init__(self, cpool):
        self.cpool = cpool
        self.name_ref = 0
        self.name = None
        self.data = b""
        self.value = None
        self.error = None


    def unpack(self, unpacker):
        """
        unpacks the name index and payload of an attribute, then
        decodes the payload if it is of a recognized kind
        """

        (self.name_ref, size) = unpacker.unpack_struct(_HI)
        self.data = unpacker.read(size)

        try:
            self.name = self.cpool.utf8(self.name_ref)
        except ClassfileError as ce:
            _log.debug("attribute name #%i unresolved: %s",
                       self.name_ref, ce)
            self.error = ce
            return

        unpack_fn = _ATTRIBUTE_UNPACKERS.get(self.name)
        if unpack_fn is None:
            return

        try:
            self.value = _unpack_payload(self.name, unpack_fn,
                                         self.data, self.cpool)
        except (UnpackException, AttributeLengthException,
                AttributeFormatException) as err:
            _log.debug("attribute %s not decoded: %s", self.name, err)
            self.error = err


    def is_recognized(self):
        """
        whether this attribute is of a kind whose payload is decoded
        """

        return is_recognized_attribute(self.name)


    def __len__(self):
        return len(self.data)


    def __repr__(self):
        return "<JavaAttributeInfo %s (%i bytes)>" % (self.name,
                                                      len(self.data))


class JavaCodeInfo(object):
    """
    The 'Code' attribue of a method member of a java class

    reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.3
    """  # noqa

    def __init__(self, cpool):
        self.cpool = cpool
        self.attribs = JavaAttributes(cpool)
        self.max_stack = 0
        self.max_locals = 0
        self.code = b""
        self.exceptions = tuple()

        # cache of disassembled code, and the error which stopped
        # the disassembly if any
        self._dis_code = None
        self._dis_error = None


    def get_attribute(self, name):
        """
        get an attribute by name
        """

        return self.attribs.get(name)


    def unpack(self, unpacker):
        """
        unpacks a code block from a buffer. Updates the internal structure
        of this instance
        """

        (a, b, c) = unpacker.unpack_struct(_HHI)

        self.max_stack = a
        self.max_locals = b
        self.code = unpacker.read(c)

        uobjs = unpacker.unpack_objects
        self.exceptions = tuple(uobjs(JavaExceptionInfo, self))

        self.attribs.unpack(unpacker)


    def get_linenumbertable(self):
        """
        a sequence of (code_offset, line_number) pairs.

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.12
        """  # noqa

        return self.attribs.get_value("LineNumberTable") or tuple()


    def get_relativelinenumbertable(self):
        """
        a sequence of (code_offset, line_number) pairs. Similar to the
        get_linenumbertable method, but the line numbers start at 0
        (they are relative to the method, not to the class file)
        """

        lnt = self.get_linenumbertable()
        if lnt:
            lineoff = lnt[0][1]
            return tuple((o, l - lineoff) for (o, l) in lnt)
        else:
            return tuple()


    def get_localvariabletable(self):
        """
        a sequence of (code_offset, length, name_index, desc_index, index)
        tuples

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.13
        """  # noqa

        return self.attribs.get_value("LocalVariableTable") or tuple()


    def get_localvariabletypetable(self):
        """
        a sequence of (code_offset, length, name_index, signature_index,
        index) tuples

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.14
        """  # noqa

        return self.attribs.get_value("LocalVariableTypeTable") or tuple()


    def get_stackmaptable(self):
        """
        the sequence of JavaStackMapFrame of the StackMapTable
        attribute, as compressed in the class file
        """

        return self.attribs.get_value("StackMapTable") or tuple()


    def _disassemble(self):
        if self._dis_code is None:
            dis = list()
            try:
                dis.extend(disassemble(self.code))
            except (UnknownOpcodeException, UnpackException) as err:
                _log.debug("disassembly stopped: %s", err)
                self._dis_error = err
            self._dis_code = tuple(dis)

        return self._dis_code, self._dis_error


    def disassemble(self):
        """
        disassembles the underlying bytecode instructions and returns a
        tuple of Instruction. Raises the decoding error if the code
        could not be fully disassembled.
        """

        dis, err = self._disassemble()
        if err is not None:
            raise err
        return dis


    def disassemble_partial(self):
        """
        tuple of the instructions decoded before any error, and the
        error which stopped decoding (or None)
        """

        return self._disassemble()


class JavaExceptionInfo(object):
    """
    Information about an exception handler entry in an exception table
    """

    def __init__(self, code):
        self.code = code
        self.cpool = code.cpool

        self.start_pc = 0
        self.end_pc = 0
        self.handler_pc = 0
        self.catch_type_ref = 0


    def unpack(self, unpacker):
        """
        unpacks an exception handler entry in an exception table. Updates
        the internal structure of this instance
        """

        (a, b, c, d) = unpacker.unpack_struct(_HHHH)

        self.start_pc = a
        self.end_pc = b
        self.handler_pc = c
        self.catch_type_ref = d


    def get_catch_type(self):
        """
        dereferences the catch_type_ref to its class name, or None if the
        catch type is unspecified
        """

        if self.catch_type_ref:
            return self.cpool.class_name(self.catch_type_ref)
        else:
            return None


    def pretty_catch_type(self):
        """
        pretty version of `get_catch_type()`

        If the catch type isn't specified, returns "any". Otherwise
        prefixes the class name with the text "Class ". This is done
        to emulate the javap output for exceptions caught in a body
        of code.
        """

        ct = self.get_catch_type()
        if ct:
            return "Class " + ct
        else:
            return "any"


    def info(self):
        """
        tuple of the start_pc, end_pc, handler_pc and catch_type_ref
        """

        return (self.start_pc, self.end_pc,
                self.handler_pc, self.catch_type_ref)


    def __eq__(self, other):
        return (isinstance(other, JavaExceptionInfo) and
                (self.info() == other.info()))


    def __ne__(self, other):
        return not self.__eq__(other)


    def __repr__(self):
        return "<JavaExceptionInfo %r>" % (self.info(), )


class JavaInnerClassInfo(object):
    """
    Information about an inner class

    reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.6
    """  # noqa

    def __init__(self, cpool):
        self.cpool = cpool

        self.inner_info_ref = 0
        self.outer_info_ref = 0
        self.name_ref = 0
        self.access_flags = 0


    def unpack(self, unpacker):
        """
        unpack this instance with data from unpacker
        """

        (a, b, c, d) = unpacker.unpack_struct(_HHHH)

        self.inner_info_ref = a
        self.outer_info_ref = b
        self.name_ref = c
        self.access_flags = d


    def get_name(self):
        """
        the simple name of this inner-class, or None if it is anonymous
        """

        if self.name_ref:
            return self.cpool.utf8(self.name_ref)
        return None


    def get_inner_class(self):
        return self.cpool.class_name(self.inner_info_ref)


    def get_outer_class(self):
        if self.outer_info_ref:
            return self.cpool.class_name(self.outer_info_ref)
        return None


class JavaBootstrapMethod(object):
    """
    An entry in the BootstrapMethods attribute, referenced by index
    from Dynamic and InvokeDynamic constants

    reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.23
    """  # noqa

    def __init__(self, cpool):
        self.cpool = cpool
        self.method_ref = 0
        self.arguments = tuple()


    def unpack(self, unpacker):
        (self.method_ref, ) = unpacker.unpack_struct(_H)
        self.arguments = tuple(a for (a, ) in
                               unpacker.unpack_struct_array(_H))


# the element value tags whose value is a single constant pool index
_CONST_ELEMENT_TAGS = "BCDFIJSZs"


class JavaElementValue(object):
    """
    An annotation element value. tag is the single character type
    code. value is the constant pool index for the constant tags
    (BCDFIJSZs), a (type_name_ref, const_name_ref) pair for enums (e),
    the Utf8 index of a return descriptor for classes (c), a
    JavaAnnotation for nested annotations (@), or a tuple of
    JavaElementValue for arrays ([).

    reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.16.1
    """  # noqa

    def __init__(self, cpool):
        self.cpool = cpool
        self.tag = None
        self.value = None


    def unpack(self, unpacker):
        tag = chr(unpacker.read_u1())

        if tag in _CONST_ELEMENT_TAGS or tag == "c":
            value = unpacker.read_u2()
        elif tag == "e":
            value = unpacker.unpack_struct(_HH)
        elif tag == "@":
            value = JavaAnnotation(self.cpool)
            value.unpack(unpacker)
        elif tag == "[":
            value = tuple(unpacker.unpack_objects(JavaElementValue,
                                                  self.cpool))
        else:
            raise AttributeFormatException(
                "unknown element value tag %r" % tag)

        self.tag = tag
        self.value = value


class JavaAnnotation(object):
    """
    An annotation, as found in the Runtime*Annotations attributes and
    nested in element values. elements is a tuple of
    (name_ref, JavaElementValue) pairs.

    reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.16
    """  # noqa

    def __init__(self, cpool):
        self.cpool = cpool
        self.type_ref = 0
        self.elements = tuple()


    def unpack(self, unpacker):
        (self.type_ref, ) = unpacker.unpack_struct(_H)
        self.elements = tuple(self._unpack_elements(unpacker))


    def _unpack_elements(self, unpacker):
        (count, ) = unpacker.unpack_struct(_H)
        for _i in range(count):
            (name_ref, ) = unpacker.unpack_struct(_H)
            value = JavaElementValue(self.cpool)
            value.unpack(unpacker)
            yield (name_ref, value)


    def get_type(self):
        """
        the field descriptor of the annotation interface
        """

        return self.cpool.utf8(self.type_ref)


    def get_element_names(self):
        return tuple(self.cpool.utf8(n) for (n, _v) in self.elements)


# type annotation target kinds, by target_type, as javap names them
TYPE_ANNOTATION_TARGETS = {
    0x00: "CLASS_TYPE_PARAMETER",
    0x01: "METHOD_TYPE_PARAMETER",
    0x10: "CLASS_EXTENDS",
    0x11: "CLASS_TYPE_PARAMETER_BOUND",
    0x12: "METHOD_TYPE_PARAMETER_BOUND",
    0x13: "FIELD",
    0x14: "METHOD_RETURN",
    0x15: "METHOD_RECEIVER",
    0x16: "METHOD_FORMAL_PARAMETER",
    0x17: "THROWS",
    0x40: "LOCAL_VARIABLE",
    0x41: "RESOURCE_VARIABLE",
    0x42: "EXCEPTION_PARAMETER",
    0x43: "INSTANCEOF",
    0x44: "NEW",
    0x45: "CONSTRUCTOR_REFERENCE",
    0x46: "METHOD_REFERENCE",
    0x47: "CAST",
    0x48: "CONSTRUCTOR_INVOCATION_TYPE_ARGUMENT",
    0x49: "METHOD_INVOCATION_TYPE_ARGUMENT",
    0x4A: "CONSTRUCTOR_REFERENCE_TYPE_ARGUMENT",
    0x4B: "METHOD_REFERENCE_TYPE_ARGUMENT",
}


# type_path_kind values
TYPE_PATH_KINDS = ("ARRAY", "INNER_TYPE", "WILDCARD", "TYPE_ARGUMENT")


class JavaTypeAnnotation(JavaAnnotation):
    """
    An annotation on a use of a type. target_info is a tuple of
    (name, value) pairs whose names depend on the target_type, and
    type_path is a tuple of (kind, type_argument_index) pairs locating
    the annotated part of a compound type.

    reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.20
    """  # noqa

    def __init__(self, cpool):
        super(JavaTypeAnnotation, self).__init__(cpool)
        self.target_type = 0
        self.target_info = tuple()
        self.type_path = tuple()


    def unpack(self, unpacker):
        tt = unpacker.read_u1()

        if tt in (0x00, 0x01):
            info = (("param_index", unpacker.read_u1()), )
        elif tt == 0x10:
            info = (("type_index", unpacker.read_u2()), )
        elif tt in (0x11, 0x12):
            info = (("param_index", unpacker.read_u1()),
                    ("bound_index", unpacker.read_u1()))
        elif tt in (0x13, 0x14, 0x15):
            info = ()
        elif tt == 0x16:
            info = (("param_index", unpacker.read_u1()), )
        elif tt == 0x17:
            info = (("type_index", unpacker.read_u2()), )
        elif tt in (0x40, 0x41):
            table = tuple(unpacker.unpack_struct_array(_HHH))
            info = (("lvarOffset", table), )
        elif tt == 0x42:
            info = (("exception_index", unpacker.read_u2()), )
        elif 0x43 <= tt <= 0x46:
            info = (("offset", unpacker.read_u2()), )
        elif 0x47 <= tt <= 0x4B:
            info = (("offset", unpacker.read_u2()),
                    ("type_index", unpacker.read_u1()))
        else:
            raise AttributeFormatException(
                "unknown type annotation target 0x%02x" % tt)

        path = list()
        for _i in range(unpacker.read_u1()):
            kind = unpacker.read_u1()
            if kind >= len(TYPE_PATH_KINDS):
                raise AttributeFormatException(
                    "unknown type path kind %i" % kind)
            path.append((kind, unpacker.read_u1()))

        self.target_type = tt
        self.target_info = info
        self.type_path = tuple(path)

        super(JavaTypeAnnotation, self).unpack(unpacker)


    def pretty_target(self):
        """
        the javap name of the target_type
        """

        return TYPE_ANNOTATION_TARGETS[self.target_type]


# verification_type_info tags
VT_TOP = 0
VT_INTEGER = 1
VT_FLOAT = 2
VT_DOUBLE = 3
VT_LONG = 4
VT_NULL = 5
VT_UNINITIALIZED_THIS = 6
VT_OBJECT = 7
VT_UNINITIALIZED = 8


class JavaStackMapFrame(object):
    """
    A frame of the StackMapTable attribute. The compressed frame forms
    are kept as read, so locals holds only the appended locals of an
    append frame and chopped the count removed by a chop frame. Each
    verification type is a (tag, index_or_offset) pair, the second
    value only meaningful for VT_OBJECT and VT_UNINITIALIZED.

    reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.4
    """  # noqa

    def __init__(self):
        self.frame_type = 0
        self.offset_delta = 0
        self.locals = tuple()
        self.stack = tuple()
        self.chopped = 0


    def unpack(self, unpacker):
        ft = unpacker.read_u1()
        self.frame_type = ft

        if ft < 64:
            self.offset_delta = ft

        elif ft < 128:
            self.offset_delta = ft - 64
            self.stack = (_unpack_verification_type(unpacker), )

        elif ft < 247:
            raise AttributeFormatException(
                "reserved stack map frame type %i" % ft)

        elif ft == 247:
            self.offset_delta = unpacker.read_u2()
            self.stack = (_unpack_verification_type(unpacker), )

        elif ft < 251:
            self.offset_delta = unpacker.read_u2()
            self.chopped = 251 - ft

        elif ft == 251:
            self.offset_delta = unpacker.read_u2()

        elif ft < 255:
            self.offset_delta = unpacker.read_u2()
            self.locals = tuple(_unpack_verification_type(unpacker)
                                for _i in range(ft - 251))

        else:
            self.offset_delta = unpacker.read_u2()
            self.locals = _unpack_verification_types(unpacker)
            self.stack = _unpack_verification_types(unpacker)


    def get_kind(self):
        """
        the javap name of this frame's form
        """

        ft = self.frame_type
        if ft < 64:
            return "same"
        elif ft < 128:
            return "same_locals_1_stack_item"
        elif ft == 247:
            return "same_locals_1_stack_item_frame_extended"
        elif ft < 251:
            return "chop"
        elif ft == 251:
            return "same_frame_extended"
        elif ft < 255:
            return "append"
        else:
            return "full_frame"


def _unpack_verification_type(unpacker):
    tag = unpacker.read_u1()
    if tag in (VT_OBJECT, VT_UNINITIALIZED):
        return (tag, unpacker.read_u2())
    elif tag > VT_UNINITIALIZED:
        raise AttributeFormatException(
            "unknown verification type %i" % tag)
    return (tag, 0)


def _unpack_verification_types(unpacker):
    (count, ) = unpacker.unpack_struct(_H)
    return tuple(_unpack_verification_type(unpacker) for _i in range(count))


class JavaModuleInfo(object):
    """
    The Module attribute of a module-info class.

    requires is a tuple of (module_ref, flags, version_ref); exports
    and opens are tuples of (package_ref, flags, to_module_refs); uses
    is a tuple of class refs; provides is a tuple of (class_ref,
    with_class_refs).

    reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.25
    """  # noqa

    def __init__(self, cpool):
        self.cpool = cpool
        self.name_ref = 0
        self.flags = 0
        self.version_ref = 0
        self.requires = tuple()
        self.exports = tuple()
        self.opens = tuple()
        self.uses = tuple()
        self.provides = tuple()


    def unpack(self, unpacker):
        (self.name_ref, self.flags, self.version_ref) = \
            unpacker.unpack_struct(_HHH)

        self.requires = tuple(unpacker.unpack_struct_array(_HHH))
        self.exports = self._unpack_targeted(unpacker)
        self.opens = self._unpack_targeted(unpacker)
        self.uses = tuple(i for (i, ) in unpacker.unpack_struct_array(_H))

        provides = list()
        for _i in range(unpacker.read_u2()):
            ref = unpacker.read_u2()
            impls = tuple(i for (i, ) in unpacker.unpack_struct_array(_H))
            provides.append((ref, impls))
        self.provides = tuple(provides)


    @staticmethod
    def _unpack_targeted(unpacker):
        result = list()
        for _i in range(unpacker.read_u2()):
            ref, flags = unpacker.unpack_struct(_HH)
            to = tuple(i for (i, ) in unpacker.unpack_struct_array(_H))
            result.append((ref, flags, to))
        return tuple(result)


    def get_name(self):
        return self.cpool.module_name(self.name_ref)


    def get_version(self):
        """
        the module version string, or None if it isn't recorded
        """

        if self.version_ref:
            return self.cpool.utf8(self.version_ref)
        return None


    def get_requires(self):
        """
        tuple of (module name, flags, version or None)
        """

        cpool = self.cpool
        return tuple((cpool.module_name(m), f,
                      (cpool.utf8(v) if v else None))
                     for (m, f, v) in self.requires)


    def get_exports(self):
        """
        tuple of (package name, flags, tuple of target module names)
        """

        return self._pretty_targeted(self.exports)


    def get_opens(self):
        return self._pretty_targeted(self.opens)


    def _pretty_targeted(self, entries):
        cpool = self.cpool
        return tuple((cpool.package_name(p), f,
                      tuple(cpool.module_name(t) for t in to))
                     for (p, f, to) in entries)


    def get_uses(self):
        return tuple(self.cpool.class_name(c) for c in self.uses)


    def get_provides(self):
        """
        tuple of (service class name, tuple of implementation names)
        """

        cpool = self.cpool
        return tuple((cpool.class_name(s),
                      tuple(cpool.class_name(i) for i in impls))
                     for (s, impls) in self.provides)


class JavaRecordComponent(object):
    """
    A component of a record class, with its own attributes table

    reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.30
    """  # noqa

    def __init__(self, cpool):
        self.cpool = cpool
        self.name_ref = 0
        self.descriptor_ref = 0
        self.attribs = JavaAttributes(cpool)


    def unpack(self, unpacker):
        (self.name_ref, self.descriptor_ref) = unpacker.unpack_struct(_HH)
        self.attribs.unpack(unpacker)


    def get_name(self):
        return self.cpool.utf8(self.name_ref)


    def get_descriptor(self):
        return self.cpool.utf8(self.descriptor_ref)


    def get_signature(self):
        sig = self.attribs.get_value("Signature")
        if sig is None:
            return None
        return self.cpool.utf8(sig)


# -----
# Payload decoders for the recognized attribute kinds. Each takes an
# unpacker positioned at the start of the payload, and the constant
# pool of the owning class.


def _unpack_index(up, _cpool):
    (index, ) = up.unpack_struct(_H)
    return index


def _unpack_index_table(up, _cpool):
    return tuple(i for (i, ) in up.unpack_struct_array(_H))


def _unpack_marker(_up, _cpool):
    return True


def _unpack_code(up, cpool):
    code = JavaCodeInfo(cpool)
    code.unpack(up)
    return code


def _unpack_linenumbertable(up, _cpool):
    return tuple(up.unpack_struct_array(_HH))


def _unpack_localvariabletable(up, _cpool):
    return tuple(up.unpack_struct_array(_HHHHH))


def _unpack_innerclasses(up, cpool):
    return tuple(up.unpack_objects(JavaInnerClassInfo, cpool))


def _unpack_enclosingmethod(up, _cpool):
    return up.unpack_struct(_HH)


def _unpack_bootstrapmethods(up, cpool):
    return tuple(up.unpack_objects(JavaBootstrapMethod, cpool))


def _unpack_methodparameters(up, _cpool):
    # unlike most tables, the count here is a single byte
    count = up.read_u1()
    return tuple(up.unpack_struct(_HH) for _i in range(count))


def _unpack_sourcedebugextension(up, _cpool):
    return decode_modified_utf8(up.read(up.remaining()))


def _unpack_annotations(up, cpool):
    return tuple(up.unpack_objects(JavaAnnotation, cpool))


def _unpack_parameter_annotations(up, cpool):
    # one annotations table per parameter, with a single byte count
    count = up.read_u1()
    return tuple(tuple(up.unpack_objects(JavaAnnotation, cpool))
                 for _i in range(count))


def _unpack_type_annotations(up, cpool):
    return tuple(up.unpack_objects(JavaTypeAnnotation, cpool))


def _unpack_annotationdefault(up, cpool):
    value = JavaElementValue(cpool)
    value.unpack(up)
    return value


def _unpack_stackmaptable(up, _cpool):
    return tuple(up.unpack_objects(JavaStackMapFrame))


def _unpack_module(up, cpool):
    module = JavaModuleInfo(cpool)
    module.unpack(up)
    return module


def _unpack_record(up, cpool):
    return tuple(up.unpack_objects(JavaRecordComponent, cpool))


_ATTRIBUTE_UNPACKERS = {
    "AnnotationDefault": _unpack_annotationdefault,
    "BootstrapMethods": _unpack_bootstrapmethods,
    "Code": _unpack_code,
    "ConstantValue": _unpack_index,
    "Deprecated": _unpack_marker,
    "EnclosingMethod": _unpack_enclosingmethod,
    "Exceptions": _unpack_index_table,
    "InnerClasses": _unpack_innerclasses,
    "LineNumberTable": _unpack_linenumbertable,
    "LocalVariableTable": _unpack_localvariabletable,
    "LocalVariableTypeTable": _unpack_localvariabletable,
    "MethodParameters": _unpack_methodparameters,
    "Module": _unpack_module,
    "ModuleMainClass": _unpack_index,
    "ModulePackages": _unpack_index_table,
    "NestHost": _unpack_index,
    "NestMembers": _unpack_index_table,
    "PermittedSubclasses": _unpack_index_table,
    "Record": _unpack_record,
    "RuntimeInvisibleAnnotations": _unpack_annotations,
    "RuntimeInvisibleParameterAnnotations": _unpack_parameter_annotations,
    "RuntimeInvisibleTypeAnnotations": _unpack_type_annotations,
    "RuntimeVisibleAnnotations": _unpack_annotations,
    "RuntimeVisibleParameterAnnotations": _unpack_parameter_annotations,
    "RuntimeVisibleTypeAnnotations": _unpack_type_annotations,
    "Signature": _unpack_index,
    "SourceDebugExtension": _unpack_sourcedebugextension,
    "SourceFile": _unpack_index,
    "StackMapTable": _unpack_stackmaptable,
    "Synthetic": _unpack_marker,
}


def is_recognized_attribute(name):
    """
    whether attributes of the given name have their payload decoded
    """

    return name in _ATTRIBUTE_UNPACKERS


def _unpack_payload(name, unpack_fn, data, cpool):
    """
    decode an attribute payload, checking that the decoder consumed
    exactly the declared length
    """

    with unpack(data) as up:
        value = unpack_fn(up, cpool)
        if up.remaining():
            raise AttributeLengthException(name, len(data), up.offset)

    return value


#
# The end.
