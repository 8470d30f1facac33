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
Simple Java Classfile unpacking module. Can be made to act an
awful lot like the javap utility included with most Java SDKs.

The class file is unpacked eagerly from an in-memory buffer into a
JavaClassInfo. Structural problems (bad magic, truncated tables)
raise immediately. Problems local to a single attribute or method
body are kept on that attribute, and only raise when the broken
value is requested.

References
----------
* https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html
* http://en.wikipedia.org/wiki/Class_(file_format)

:author: Christopher O'Brien  <obriencj@gmail.com>
:license: LGPL
"""  # noqa


from logging import getLogger

from .attributes import JavaAttributes, JavaAttributeInfo
from .attributes import JavaCodeInfo, JavaExceptionInfo
from .attributes import JavaInnerClassInfo, JavaBootstrapMethod
from .attributes import JavaAnnotation, JavaElementValue
from .attributes import JavaTypeAnnotation, JavaStackMapFrame
from .attributes import JavaModuleInfo, JavaRecordComponent
from .constants import JavaConstantPool
from .constants import (
    CONST_Utf8, CONST_Integer, CONST_Float, CONST_Long, CONST_Double,
    CONST_Class, CONST_String, CONST_Fieldref, CONST_Methodref,
    CONST_InterfaceMethodref, CONST_NameAndType, CONST_MethodHandle,
    CONST_MethodType, CONST_Dynamic, CONST_InvokeDynamic,
    CONST_Module, CONST_Package, )
from .errors import (
    ClassfileError, UnpackException, ClassUnpackException,
    BadMagicException, Unimplemented, ConstPoolIndexException,
    ConstTypeException, AttributeLengthException, AttributeFormatException,
    UnknownOpcodeException, BadDescriptorException, )
from .pack import compile_struct, unpack


__all__ = (
    "JavaClassInfo", "JavaConstantPool", "JavaMemberInfo",
    "JavaAttributes", "JavaAttributeInfo",
    "JavaCodeInfo", "JavaExceptionInfo", "JavaInnerClassInfo",
    "JavaBootstrapMethod", "JavaAnnotation", "JavaElementValue",
    "JavaTypeAnnotation", "JavaStackMapFrame", "JavaModuleInfo",
    "JavaRecordComponent",
    "ClassfileError", "UnpackException", "ClassUnpackException",
    "BadMagicException", "Unimplemented", "ConstPoolIndexException",
    "ConstTypeException", "AttributeLengthException",
    "AttributeFormatException",
    "UnknownOpcodeException", "BadDescriptorException",
    "platform_from_version", "flag_names", "pretty_type_descriptor",
    "is_class", "is_class_file",
    "unpack_class", "unpack_classfile", "parse",
    "CONST_Utf8", "CONST_Integer", "CONST_Float",
    "CONST_Long", "CONST_Double", "CONST_Class",
    "CONST_String", "CONST_Fieldref", "CONST_Methodref",
    "CONST_InterfaceMethodref", "CONST_NameAndType",
    "CONST_MethodHandle", "CONST_MethodType",
    "CONST_Dynamic", "CONST_InvokeDynamic",
    "CONST_Module", "CONST_Package",
    "ACC_PUBLIC", "ACC_PRIVATE", "ACC_PROTECTED",
    "ACC_STATIC", "ACC_FINAL", "ACC_SYNCHRONIZED",
    "ACC_SUPER", "ACC_VOLATILE", "ACC_BRIDGE",
    "ACC_TRANSIENT", "ACC_VARARGS", "ACC_NATIVE",
    "ACC_INTERFACE", "ACC_ABSTRACT", "ACC_STRICT",
    "ACC_SYNTHETIC", "ACC_ANNOTATION", "ACC_ENUM",
    "ACC_MODULE", "ACC_MANDATED",
    "ACC_OPEN", "ACC_TRANSITIVE", "ACC_STATIC_PHASE",
    "CLASS_FLAGS", "FIELD_FLAGS", "METHOD_FLAGS",
    "INNER_CLASS_FLAGS", "PARAMETER_FLAGS",
    "MODULE_FLAGS", "REQUIRES_FLAGS", "EXPORTS_FLAGS",
)


_log = getLogger(__name__)


# the four bytes at the start of every class file
JAVA_CLASS_MAGIC = (0xCA, 0xFE, 0xBA, 0xBE)


# class and member flags
ACC_PUBLIC = 0x0001
ACC_PRIVATE = 0x0002
ACC_PROTECTED = 0x0004
ACC_STATIC = 0x0008
ACC_FINAL = 0x0010
ACC_SYNCHRONIZED = 0x0020
ACC_SUPER = 0x0020
ACC_VOLATILE = 0x0040
ACC_BRIDGE = 0x0040
ACC_TRANSIENT = 0x0080
ACC_VARARGS = 0x0080
ACC_NATIVE = 0x0100
ACC_INTERFACE = 0x0200
ACC_ABSTRACT = 0x0400
ACC_STRICT = 0x0800
ACC_SYNTHETIC = 0x1000
ACC_ANNOTATION = 0x2000
ACC_ENUM = 0x4000
ACC_MODULE = 0x8000
ACC_MANDATED = 0x8000

# module, requires, exports, and opens flags
ACC_OPEN = 0x0020
ACC_TRANSITIVE = 0x0020
ACC_STATIC_PHASE = 0x0040


# The flag names, in the order javap lists them, for each kind of
# structure that carries access flags. The same bit means different
# things depending on where it appears.
CLASS_FLAGS = (
    (ACC_PUBLIC, "ACC_PUBLIC"),
    (ACC_FINAL, "ACC_FINAL"),
    (ACC_SUPER, "ACC_SUPER"),
    (ACC_INTERFACE, "ACC_INTERFACE"),
    (ACC_ABSTRACT, "ACC_ABSTRACT"),
    (ACC_SYNTHETIC, "ACC_SYNTHETIC"),
    (ACC_ANNOTATION, "ACC_ANNOTATION"),
    (ACC_ENUM, "ACC_ENUM"),
    (ACC_MODULE, "ACC_MODULE"),
)

FIELD_FLAGS = (
    (ACC_PUBLIC, "ACC_PUBLIC"),
    (ACC_PRIVATE, "ACC_PRIVATE"),
    (ACC_PROTECTED, "ACC_PROTECTED"),
    (ACC_STATIC, "ACC_STATIC"),
    (ACC_FINAL, "ACC_FINAL"),
    (ACC_VOLATILE, "ACC_VOLATILE"),
    (ACC_TRANSIENT, "ACC_TRANSIENT"),
    (ACC_SYNTHETIC, "ACC_SYNTHETIC"),
    (ACC_ENUM, "ACC_ENUM"),
)

METHOD_FLAGS = (
    (ACC_PUBLIC, "ACC_PUBLIC"),
    (ACC_PRIVATE, "ACC_PRIVATE"),
    (ACC_PROTECTED, "ACC_PROTECTED"),
    (ACC_STATIC, "ACC_STATIC"),
    (ACC_FINAL, "ACC_FINAL"),
    (ACC_SYNCHRONIZED, "ACC_SYNCHRONIZED"),
    (ACC_BRIDGE, "ACC_BRIDGE"),
    (ACC_VARARGS, "ACC_VARARGS"),
    (ACC_NATIVE, "ACC_NATIVE"),
    (ACC_ABSTRACT, "ACC_ABSTRACT"),
    (ACC_STRICT, "ACC_STRICT"),
    (ACC_SYNTHETIC, "ACC_SYNTHETIC"),
)

INNER_CLASS_FLAGS = (
    (ACC_PUBLIC, "ACC_PUBLIC"),
    (ACC_PRIVATE, "ACC_PRIVATE"),
    (ACC_PROTECTED, "ACC_PROTECTED"),
    (ACC_STATIC, "ACC_STATIC"),
    (ACC_FINAL, "ACC_FINAL"),
    (ACC_INTERFACE, "ACC_INTERFACE"),
    (ACC_ABSTRACT, "ACC_ABSTRACT"),
    (ACC_SYNTHETIC, "ACC_SYNTHETIC"),
    (ACC_ANNOTATION, "ACC_ANNOTATION"),
    (ACC_ENUM, "ACC_ENUM"),
)

PARAMETER_FLAGS = (
    (ACC_FINAL, "ACC_FINAL"),
    (ACC_SYNTHETIC, "ACC_SYNTHETIC"),
    (ACC_MANDATED, "ACC_MANDATED"),
)

MODULE_FLAGS = (
    (ACC_OPEN, "ACC_OPEN"),
    (ACC_SYNTHETIC, "ACC_SYNTHETIC"),
    (ACC_MANDATED, "ACC_MANDATED"),
)

REQUIRES_FLAGS = (
    (ACC_TRANSITIVE, "ACC_TRANSITIVE"),
    (ACC_STATIC_PHASE, "ACC_STATIC_PHASE"),
    (ACC_SYNTHETIC, "ACC_SYNTHETIC"),
    (ACC_MANDATED, "ACC_MANDATED"),
)

# exports and opens share the same flags
EXPORTS_FLAGS = (
    (ACC_SYNTHETIC, "ACC_SYNTHETIC"),
    (ACC_MANDATED, "ACC_MANDATED"),
)


# commonly re-occurring struct formats
_BBBB = compile_struct(">BBBB")
_H = compile_struct(">H")
_HH = compile_struct(">HH")
_HHH = compile_struct(">HHH")


def flag_names(flags, table):
    """
    the ACC_ names from table which are set in flags
    """

    return [name for (bit, name) in table if flags & bit]


class JavaClassInfo(object):
    """
    Information from a disassembled Java class file.

    reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html
    """  # noqa

    def __init__(self):
        self.cpool = JavaConstantPool()
        self.attribs = JavaAttributes(self.cpool)

        self.magic = JAVA_CLASS_MAGIC
        self.version = (0, 0)
        self.access_flags = 0
        self.this_ref = 0
        self.super_ref = 0
        self.interfaces = tuple()
        self.fields = tuple()
        self.methods = tuple()
        self.warnings = tuple()


    def deref_const(self, index):
        """
        dereference a value from the parent constant pool
        """

        return self.cpool.deref_const(index)


    def get_attribute(self, name):
        """
        get an attribute by name
        """

        return self.attribs.get(name)


    def unpack(self, unpacker):
        """
        Unpacks a Java class from an unpacker stream. Updates the
        structure of this instance.
        """

        warnings = list()

        with unpacker.step("magic"):
            magic = unpacker.unpack_struct(_BBBB)

        if magic != JAVA_CLASS_MAGIC:
            raise BadMagicException(magic)

        self.magic = magic

        # unpack (minor, major), store as (major, minor)
        with unpacker.step("version"):
            self.version = unpacker.unpack_struct(_HH)[::-1]

        if platform_from_version(*self.version) is None:
            warnings.append("unsupported major version %i.%i" %
                            self.version)

        with unpacker.step("constant pool"):
            self.cpool.unpack(unpacker)

        with unpacker.step("class header"):
            (a, b, c) = unpacker.unpack_struct(_HHH)
            self.access_flags = a
            self.this_ref = b
            self.super_ref = c

        with unpacker.step("interfaces"):
            (count,) = unpacker.unpack_struct(_H)
            self.interfaces = unpacker.unpack(">%iH" % count)

        uobjs = unpacker.unpack_objects

        with unpacker.step("fields"):
            self.fields = tuple(uobjs(JavaMemberInfo, self.cpool,
                                      is_method=False, owner=self))

        with unpacker.step("methods"):
            self.methods = tuple(uobjs(JavaMemberInfo, self.cpool,
                                       is_method=True, owner=self))

        with unpacker.step("attributes"):
            self.attribs.unpack(unpacker)

        trailing = unpacker.remaining()
        if trailing:
            warnings.append("%i trailing bytes after class data" % trailing)

        for warning in warnings:
            _log.warning(warning)

        self.warnings = tuple(warnings)

        _log.debug("unpacked class with %i fields, %i methods",
                   len(self.fields), len(self.methods))


    def get_field_by_name(self, name):
        """
        the field member matching name, or None if no such field is found
        """

        for f in self.fields:
            if f.get_name() == name:
                return f
        return None


    def get_methods_by_name(self, name):
        """
        generator of methods matching name. This will include any bridges
        present.
        """

        return (m for m in self.methods if m.get_name() == name)


    def get_method(self, name, arg_types=()):
        """
        searches for the method matching the name and having argument type
        descriptors matching those in arg_types.

        Parameters
        ==========
        arg_types : sequence of strings
          each string is a parameter type, in the non-pretty format.

        Returns
        =======
        method : `JavaMemberInfo` or `None`
          the single matching, non-bridging method of matching name
          and parameter types.
        """

        # ensure any lists or iterables are converted to tuple for
        # comparison against get_arg_type_descriptors()
        arg_types = tuple(arg_types)

        for m in self.get_methods_by_name(name):
            if (((not m.is_bridge()) and
                 m.get_arg_type_descriptors() == arg_types)):
                return m
        return None


    def get_version(self):
        """
        the (major, minor) version of Java required by this Java class
        """

        return self.version


    def get_platform(self):
        """
        The platform as a string, derived from the major and minor version
        number
        """

        return platform_from_version(*self.version)


    def is_public(self):
        """
        is this class public
        """

        return self.access_flags & ACC_PUBLIC


    def is_final(self):
        """
        is this class final
        """

        return self.access_flags & ACC_FINAL


    def is_super(self):
        """
        class has the Super flag set.

        This flag is used by the JVM to differentiate the behavior in
        the method resolution order of the class.
        """

        return self.access_flags & ACC_SUPER


    def is_interface(self):
        """
        is this an interface
        """

        return self.access_flags & ACC_INTERFACE


    def is_abstract(self):
        """
        is this an abstract class
        """

        return self.access_flags & ACC_ABSTRACT


    def is_annotation(self):
        """
        is this an annotation class
        """

        return self.access_flags & ACC_ANNOTATION


    def is_enum(self):
        """
        is this an enum class
        """

        return self.access_flags & ACC_ENUM


    def is_module(self):
        """
        is this a module-info class
        """

        return self.access_flags & ACC_MODULE


    def is_deprecated(self):
        """
        is this class deprecated

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.15
        """  # noqa

        return self.attribs.get("Deprecated") is not None


    def get_this(self):
        """
        the name of this class
        """

        return self.cpool.class_name(self.this_ref)


    def get_super(self):
        """
        get the parent class that this extends
        """

        return self.cpool.class_name(self.super_ref) if self.super_ref else ""


    def get_interfaces(self):
        """
        tuple of interfaces that this class implements
        """

        return tuple(self.cpool.class_name(i) for i in self.interfaces)


    def _get_utf8_attribute(self, name):
        index = self.attribs.get_value(name)
        if index is None:
            return None
        return self.cpool.utf8(index)


    def get_sourcefile(self):
        """
        the name of thie file this class was compiled from, or None if not
        indicated

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.10
        """  # noqa

        return self._get_utf8_attribute("SourceFile")


    def get_source_debug_extension(self):
        """
        reference:
        https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.11
        """  # noqa

        return self.attribs.get_value("SourceDebugExtension")


    def get_innerclasses(self):
        """
        sequence of JavaInnerClassInfo instances describing the inner
        classes of this class definition

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.6
        """  # noqa

        return self.attribs.get_value("InnerClasses") or tuple()


    def get_signature(self):
        """
        the generics class signature

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.9
        """  # noqa

        return self._get_utf8_attribute("Signature")


    def get_enclosingmethod(self):
        """
        the class.method or class (if the definition is not from within a
        method) that encloses the definition of this class. Returns
        None if this was not an inner class.

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.7
        """  # noqa

        value = self.attribs.get_value("EnclosingMethod")
        if value is None:
            return None

        ci, mi = value
        enc_class = self.cpool.class_name(ci)

        if mi:
            enc_meth, enc_type = self.cpool.name_and_type(mi)
            return "%s.%s%s" % (enc_class, enc_meth, enc_type)
        else:
            return enc_class


    def get_nesthost(self):
        """
        the host class of the nest this class belongs to, or None

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.28
        """  # noqa

        index = self.attribs.get_value("NestHost")
        if index is None:
            return None
        return self.cpool.class_name(index)


    def get_nestmembers(self):
        """
        tuple of the classes nested in this nest host
        """

        members = self.attribs.get_value("NestMembers") or ()
        return tuple(self.cpool.class_name(i) for i in members)


    def get_permittedsubclasses(self):
        """
        tuple of the classes permitted to extend this sealed class
        """

        permitted = self.attribs.get_value("PermittedSubclasses") or ()
        return tuple(self.cpool.class_name(i) for i in permitted)


    def get_bootstrapmethods(self):
        """
        tuple of JavaBootstrapMethod, as referenced by index from the
        Dynamic and InvokeDynamic constants
        """

        return self.attribs.get_value("BootstrapMethods") or tuple()


    def get_annotations(self, visible=True):
        """
        tuple of the JavaAnnotation on this class from the
        RuntimeVisibleAnnotations attribute, or from
        RuntimeInvisibleAnnotations when visible is False
        """

        return _get_annotations(self.attribs, visible)


    def get_module(self):
        """
        the JavaModuleInfo of a module-info class, or None
        """

        return self.attribs.get_value("Module")


    def get_modulepackages(self):
        """
        tuple of the internal names of the packages in this module

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.26
        """  # noqa

        packages = self.attribs.get_value("ModulePackages") or ()
        return tuple(self.cpool.package_name(p) for p in packages)


    def get_modulemainclass(self):
        """
        the internal name of this module's main class, or None

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.27
        """  # noqa

        main = self.attribs.get_value("ModuleMainClass")
        if main is None:
            return None
        return self.cpool.class_name(main)


    def get_record_components(self):
        """
        tuple of JavaRecordComponent for a record class, empty for
        any other class
        """

        return self.attribs.get_value("Record") or tuple()


    def pretty_access_flags(self):
        """
        generator of the pretty access flag names, as used in the class
        declaration
        """

        if self.is_public():
            yield "public"
        if self.is_interface():
            return
        if self.is_abstract():
            yield "abstract"
        if self.is_final():
            yield "final"


    def pretty_flag_names(self):
        """
        list of the ACC_ names for the class access flags
        """

        return flag_names(self.access_flags, CLASS_FLAGS)


    def pretty_this(self):
        """
        the pretty version of this class name
        """

        return _pretty_class(self.get_this())


    def pretty_super(self):
        """
        the pretty version of the parent class name
        """

        return _pretty_class(self.get_super())


    def pretty_interfaces(self):
        """
        the pretty versions of any interfaces this class implements
        """

        return (_pretty_class(t) for t in self.get_interfaces())


    def pretty_descriptor(self):
        """
        get the class or interface name, its accessor flags, its parent
        class, and any interfaces it implements
        """

        if self.is_module():
            return self._pretty_module_descriptor()

        words = list(self.pretty_access_flags())

        if self.is_interface():
            words.append("interface")
        else:
            words.append("class")

        words.append(self.pretty_this())

        sup = self.get_super()
        if sup and sup != "java/lang/Object" and not self.is_interface():
            words.append("extends")
            words.append(_pretty_class(sup))

        i = ", ".join(self.pretty_interfaces())
        if i:
            words.append("extends" if self.is_interface() else "implements")
            words.append(i)

        return " ".join(words)


    def _pretty_module_descriptor(self):
        module = self.get_module()
        if module is None:
            return "module %s" % self.pretty_this()

        name = module.get_name()
        version = module.get_version()
        if version:
            name = "%s@%s" % (name, version)

        if module.flags & ACC_OPEN:
            return "open module %s" % name
        return "module %s" % name


class JavaMemberInfo(object):
    """
    A field or method of a java class
    """

    def __init__(self, cpool, is_method=False, owner=None):
        self.cpool = cpool
        self.attribs = JavaAttributes(cpool)
        self.access_flags = 0
        self.name_ref = 0
        self.descriptor_ref = 0
        self.is_method = is_method
        self.owner = owner


    def deref_const(self, index):
        """
        Dereference a constant in the parent constant pool
        """

        return self.cpool.deref_const(index)


    def get_attribute(self, name):
        """
        Get an attribute by name
        """

        return self.attribs.get(name)


    def unpack(self, unpacker):
        """
        unpack the contents of this instance from the values in unpacker
        """

        (a, b, c) = unpacker.unpack_struct(_HHH)

        self.access_flags = a
        self.name_ref = b
        self.descriptor_ref = c
        self.attribs.unpack(unpacker)


    def get_name(self):
        """
        the name of this member
        """

        return self.cpool.utf8(self.name_ref)


    def get_descriptor(self):
        """
        the descriptor of this member
        """

        return self.cpool.utf8(self.descriptor_ref)


    def get_signature(self):
        """
        the Signature attribute
        """

        index = self.attribs.get_value("Signature")
        if index is None:
            return None
        return self.cpool.utf8(index)


    def is_public(self):
        """
        is this member public
        """

        return self.access_flags & ACC_PUBLIC


    def is_private(self):
        """
        is this member private
        """

        return self.access_flags & ACC_PRIVATE


    def is_protected(self):
        """
        is this member protected
        """

        return self.access_flags & ACC_PROTECTED


    def is_static(self):
        """
        is this member static
        """

        return self.access_flags & ACC_STATIC


    def is_final(self):
        """
        is this member final
        """

        return self.access_flags & ACC_FINAL


    def is_synchronized(self):
        """
        is this member synchronized
        """

        return self.is_method and (self.access_flags & ACC_SYNCHRONIZED)


    def is_native(self):
        """
        is this member native
        """

        return self.access_flags & ACC_NATIVE


    def is_abstract(self):
        """
        is this member abstract
        """

        return self.access_flags & ACC_ABSTRACT


    def is_strict(self):
        """
        is this member strict
        """

        return self.access_flags & ACC_STRICT


    def is_volatile(self):
        """
        is this member volatile
        """

        return (not self.is_method) and (self.access_flags & ACC_VOLATILE)


    def is_transient(self):
        """
        is this member transient
        """

        return (not self.is_method) and (self.access_flags & ACC_TRANSIENT)


    def is_bridge(self):
        """
        is this method a bridge to another method
        """

        return self.is_method and (self.access_flags & ACC_BRIDGE)


    def is_varargs(self):
        """
        is this a varargs method
        """

        return self.is_method and (self.access_flags & ACC_VARARGS)


    def is_synthetic(self):
        """
        is this a synthetic method

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.8
        """  # noqa

        return ((self.access_flags & ACC_SYNTHETIC) or
                self.attribs.get("Synthetic") is not None)


    def is_enum(self):
        """
        it this member an enum
        """

        return self.access_flags & ACC_ENUM


    def is_deprecated(self):
        """
        is this member deprecated

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.15
        """  # noqa

        return self.attribs.get("Deprecated") is not None


    def get_code(self):
        """
        the JavaCodeInfo of this member if it is a non-abstract method,
        None otherwise. Raises the error from the Code attribute if it
        could not be decoded.

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.3
        """  # noqa

        return self.attribs.get_value("Code")


    def get_exceptions(self):
        """
        a tuple of class names for the exception types this method may
        raise, or an empty tuple if none are declared

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.5
        """  # noqa

        refs = self.attribs.get_value("Exceptions") or ()
        return tuple(self.cpool.class_name(e) for e in refs)


    def get_constantvalue(self):
        """
        the constant pool index for this field, or None if this is not a
        contant field

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.2
        """  # noqa

        return self.attribs.get_value("ConstantValue")


    def deref_constantvalue(self):
        """
        the value in the constant pool at the get_constantvalue() index
        """

        index = self.get_constantvalue()
        if index is None:
            return None
        else:
            return self.deref_const(index)


    def get_methodparameters(self):
        """
        tuple of (name, access_flags) for each parameter recorded in the
        MethodParameters attribute. The name is None for parameters
        recorded without one.

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.24
        """  # noqa

        params = self.attribs.get_value("MethodParameters") or ()
        return tuple(((self.cpool.utf8(n) if n else None), f)
                     for (n, f) in params)


    def get_annotations(self, visible=True):
        """
        tuple of the JavaAnnotation on this member from the
        RuntimeVisibleAnnotations attribute, or from
        RuntimeInvisibleAnnotations when visible is False
        """

        return _get_annotations(self.attribs, visible)


    def get_parameter_annotations(self, visible=True):
        """
        tuple holding a tuple of JavaAnnotation for each parameter of
        this method
        """

        name = ("RuntimeVisibleParameterAnnotations" if visible else
                "RuntimeInvisibleParameterAnnotations")
        return self.attribs.get_value(name) or tuple()


    def get_annotationdefault(self):
        """
        the JavaElementValue default of an annotation interface
        method, or None

        reference: https://docs.oracle.com/javase/specs/jvms/se17/html/jvms-4.html#jvms-4.7.22
        """  # noqa

        return self.attribs.get_value("AnnotationDefault")


    def _descriptor_parts(self):
        """
        the descriptor split into its type parts, checked to be a
        single type for fields, or a parenthesized argument list and
        return type for methods
        """

        desc = self.get_descriptor()
        tp = _typeseq(desc)

        if self.is_method:
            ok = (len(tp) == 2 and tp[0][0] == "(" and tp[1][0] != "(")
        else:
            ok = (len(tp) == 1 and tp[0][0] not in "(V")

        if not ok:
            raise BadDescriptorException(desc)
        return tp


    def get_type_descriptor(self):
        """
        the type descriptor for a field, or the return type descriptor for
        a method. Type descriptors are shorthand identifiers for the
        builtin java types.
        """

        return self._descriptor_parts()[-1]


    def get_arg_type_descriptors(self):
        """
        The parameter type descriptor list for a method, or None for a
        field.  Type descriptors are shorthand identifiers for the
        builtin java types.
        """

        if not self.is_method:
            return tuple()

        args = self._descriptor_parts()[0]
        tp = _typeseq(args[1:-1])
        if any(t == "V" or t[0] == "(" for t in tp):
            raise BadDescriptorException(self.get_descriptor())

        return tp


    def get_arg_count(self):
        """
        the number of stack slots holding the arguments to this method,
        counting the implicit this of non-static methods, and two
        slots for each long or double
        """

        count = 0 if self.is_static() else 1
        for t in self.get_arg_type_descriptors():
            count += 2 if t in ("J", "D") else 1
        return count


    def pretty_type(self):
        """
        The pretty version of get_type_descriptor.
        """

        return _pretty_type(self.get_type_descriptor())


    def pretty_arg_types(self):
        """
        Sequence of pretty argument types.
        """

        if not self.is_method:
            return tuple()

        types = [_pretty_type(t) for t in self.get_arg_type_descriptors()]
        if types and self.is_varargs() and types[-1].endswith("[]"):
            types[-1] = types[-1][:-2] + "..."
        return types


    def pretty_descriptor(self):
        """
        assemble a long member name from access flags, type, argument
        types, exceptions as applicable
        """

        n = self.get_name()

        if n == "<clinit>":
            # javap shows static initializers without a name
            return "static {}"

        f = " ".join(self.pretty_access_flags())
        p = self.pretty_type()
        t = ", ".join(self.pretty_exceptions())

        if n == "<init>":
            # we pretend that there's no return type, even though it's
            # V for constructors
            p = None
            if self.owner is not None:
                n = self.owner.pretty_this()

        if self.is_method:
            # stick the name and args together so there's no space
            n = "%s(%s)" % (n, ", ".join(self.pretty_arg_types()))

        if t:
            # assemble any throws as necessary
            t = "throws " + t

        return " ".join(z for z in (f, p, n, t) if z)


    def _pretty_access_flags_gen(self):

        if self.is_public():
            yield "public"
        if self.is_private():
            yield "private"
        if self.is_protected():
            yield "protected"
        if self.is_static():
            yield "static"
        if self.is_final():
            yield "final"

        if self.is_method:
            if self.is_synchronized():
                yield "synchronized"
            if self.is_native():
                yield "native"
            if self.is_abstract():
                yield "abstract"
            if self.is_strict():
                yield "strictfp"

        else:
            if self.is_volatile():
                yield "volatile"
            if self.is_transient():
                yield "transient"


    def pretty_access_flags(self):
        """
        generator of the keywords determined from the access flags
        """

        return self._pretty_access_flags_gen()


    def pretty_flag_names(self):
        """
        list of the ACC_ names for the access flags
        """

        table = METHOD_FLAGS if self.is_method else FIELD_FLAGS
        return flag_names(self.access_flags, table)


    def pretty_exceptions(self):
        """
        sequence of pretty names for get_exceptions()
        """

        return (_pretty_class(e) for e in self.get_exceptions())


# -----
# Utility functions for turning major/minor versions into JVM releases
# Each entry is a tuple of minimum version and maxiumum version,
# inclusive, and the string of the platform version.


_platforms = (
    ((45, 0), (45, 3), "1.0.2"),
    ((45, 4), (45, 65535), "1.1"),
    ((46, 0), (46, 65535), "1.2"),
    ((47, 0), (47, 65535), "1.3"),
    ((48, 0), (48, 65535), "1.4"),
    ((49, 0), (49, 65535), "1.5"),
    ((50, 0), (50, 65535), "1.6"),
    ((51, 0), (51, 65535), "1.7"),
    ((52, 0), (52, 65535), "1.8"),
    ((53, 0), (53, 65535), "9"),
    ((54, 0), (54, 65535), "10"),
    ((55, 0), (55, 65535), "11"),
    ((56, 0), (56, 65535), "12"),
    ((57, 0), (57, 65535), "13"),
    ((58, 0), (58, 65535), "14"),
    ((59, 0), (59, 65535), "15"),
    ((60, 0), (60, 65535), "16"),
    ((61, 0), (61, 65535), "17"),
    ((62, 0), (62, 65535), "18"),
    ((63, 0), (63, 65535), "19"),
    ((64, 0), (64, 65535), "20"),
    ((65, 0), (65, 65535), "21"),
    ((66, 0), (66, 65535), "22"),
    ((67, 0), (67, 65535), "23"),
    ((68, 0), (68, 65535), "24"),
    ((69, 0), (69, 65535), "25"),
    ((70, 0), (70, 65535), "26"),
    ((71, 0), (71, 65535), "27"), )


def platform_from_version(major, minor):
    """
    returns the minimum platform version that can load the given class
    version indicated by major.minor or None if no known platforms
    match the given version
    """

    v = (major, minor)
    for low, high, name in _platforms:
        if low <= v <= high:
            return name
    return None


def _get_annotations(attribs, visible):
    name = ("RuntimeVisibleAnnotations" if visible else
            "RuntimeInvisibleAnnotations")
    return attribs.get_value(name) or tuple()


# -----
# Utility functions for dealing with exploding internal type
# signatures into sequences, and converting type signatures into
# "pretty" strings


def _next_argsig(s):
    """
    given a string, find the next complete argument signature and
    return it and a new string advanced past that point
    """

    c = s[0]

    if c in "BCDFIJSVZ":
        result = (c, s[1:])

    elif c == "[":
        if len(s) < 2 or s[1] in "(V":
            raise BadDescriptorException(s)
        d, s = _next_argsig(s[1:])
        result = (c + d, s)

    elif c == "L":
        i = s.find(';') + 1
        if i < 3:
            raise BadDescriptorException(s)
        result = (s[:i], s[i:])

    elif c == "(":
        i = s.find(')') + 1
        if not i:
            raise BadDescriptorException(s)
        result = (s[:i], s[i:])

    else:
        raise BadDescriptorException(s)

    return result


def _typeseq_iter(s):
    """
    iterate through all of the type signatures in a sequence
    """

    original = s
    try:
        while s:
            t, s = _next_argsig(s)
            yield t

    except BadDescriptorException:
        raise BadDescriptorException(original)


def _typeseq(type_s):
    """
    tuple version of _typeseq_iter
    """

    return tuple(_typeseq_iter(type_s))


def _pretty_typeseq(type_s):
    """
    iterator of pretty versions of _typeseq_iter
    """

    return (_pretty_type(t) for t in _typeseq(type_s))


_PRIMITIVES = {
    "V": "void",
    "Z": "boolean",
    "C": "char",
    "B": "byte",
    "S": "short",
    "I": "int",
    "J": "long",
    "D": "double",
    "F": "float",
}


def _pretty_type(s, offset=0):
    """
    returns the pretty version of a type code
    """

    if offset >= len(s):
        raise BadDescriptorException(s)

    tc = s[offset]

    if tc in _PRIMITIVES:
        return _PRIMITIVES[tc]

    elif tc == "L":
        return _pretty_class(s[offset + 1:-1])

    elif tc == "[":
        return "%s[]" % _pretty_type(s, offset + 1)

    elif tc == "(":
        return "(%s)" % ", ".join(_pretty_typeseq(s[offset + 1:-1]))

    else:
        raise BadDescriptorException(s)


def pretty_type_descriptor(desc):
    """
    the source-like spelling of a field type descriptor, eg.
    "[Ljava/lang/String;" becomes "java.lang.String[]"
    """

    tp = _typeseq(desc)
    if len(tp) != 1:
        raise BadDescriptorException(desc)
    return _pretty_type(tp[0])


def _pretty_class(s):
    """
    convert the internal class name representation into what users
    expect to see. Currently that just means swapping '/' for '.'
    """

    # well that's easy.
    return s.replace("/", ".")


# -----
# Functions for dealing with buffers and files


def is_class(data):
    """
    checks that the data (which is bytes or a buffer) has the magic
    numbers indicating it is a Java class file. Returns False if the
    magic numbers do not match, or for any errors.
    """

    try:
        with unpack(data) as up:
            magic = up.unpack_struct(_BBBB)

        return magic == JAVA_CLASS_MAGIC

    except UnpackException:
        return False


def is_class_file(filename):
    """
    checks whether the given file is a Java class file, by opening it
    and checking for the magic header
    """

    with open(filename, "rb") as fd:
        c = fd.read(len(JAVA_CLASS_MAGIC))
        return tuple(c) == JAVA_CLASS_MAGIC


def unpack_class(data):
    """
    unpacks a Java class from data, which can be bytes or a buffer.
    Returns a populated JavaClassInfo instance.

    Raises a BadMagicException, an UnpackException, or Unimplemented
    if the class data is structurally malformed.
    """

    with unpack(data) as up:
        o = JavaClassInfo()
        o.unpack(up)

    return o


# the name the rest of the pipeline knows this step by
parse = unpack_class


def unpack_classfile(filename):
    """
    returns a newly allocated JavaClassInfo object populated with the
    data unpacked from the specified file. Raises an UnpackException
    if the class data is malformed
    """

    with open(filename, "rb") as fd:
        return unpack_class(fd.read())


#
# The end.
