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
unit tests for unpacking class files with classdump

author: Christopher O'Brien  <obriencj@gmail.com>
license: LGPL v.3
"""


import os

from struct import pack
from tempfile import NamedTemporaryFile
from unittest import TestCase

import classdump as cd

from classdump.errors import (
    BadDescriptorException, BadMagicException, UnpackException,
    Unimplemented, )

from .classbuilder import ClassBuilder, hello_class


def utf8_entry(text):
    data = text.encode("utf8")
    return pack(">BH", 1, len(data)) + data


class StructureTest(TestCase):


    def test_bad_magic(self):
        # only the magic is present, so reading anything past it would
        # fail differently
        try:
            cd.unpack_class(b"\xca\xfe\xba\xbf")
        except BadMagicException as bme:
            self.assertEqual(bme.magic, (0xca, 0xfe, 0xba, 0xbf))
        else:
            self.fail("bad magic was accepted")

        self.assertFalse(cd.is_class(b"\xca\xfe\xba\xbf"))
        self.assertFalse(cd.is_class(b"\xca\xfe"))
        self.assertTrue(cd.is_class(hello_class().build()))


    def test_truncated_magic(self):
        try:
            cd.unpack_class(b"\xca\xfe")
        except UnpackException as ue:
            self.assertEqual(ue.step, "magic")
        else:
            self.fail("short magic was accepted")


    def test_truncated_version(self):
        try:
            cd.unpack_class(b"\xca\xfe\xba\xbe\x00\x00\x00")
        except UnpackException as ue:
            self.assertEqual(ue.step, "version")
        else:
            self.fail("short version was accepted")


    def test_truncated_pool(self):
        data = (b"\xca\xfe\xba\xbe" + pack(">HHH", 0, 52, 10) +
                utf8_entry("one") + utf8_entry("two") + utf8_entry("three"))

        try:
            cd.unpack_class(data)
        except UnpackException as ue:
            self.assertEqual(ue.step, "constant pool")
            self.assertTrue("constant pool" in str(ue))
        else:
            self.fail("short constant pool was accepted")


    def test_truncated_members(self):
        data = hello_class().build()

        # chop into the middle of the methods table
        try:
            cd.unpack_class(data[:-40])
        except UnpackException as ue:
            self.assertEqual(ue.step, "methods")
        else:
            self.fail("short methods table was accepted")


    def test_unknown_tag(self):
        data = b"\xca\xfe\xba\xbe" + pack(">HHHB", 0, 52, 2, 2)
        self.assertRaises(Unimplemented, lambda: cd.unpack_class(data))


    def test_unsupported_version(self):
        cb = hello_class()
        cb.version = (99, 0)

        with self.assertLogs("classdump", "WARNING"):
            info = cd.unpack_class(cb.build())

        self.assertEqual(info.version, (99, 0))
        self.assertEqual(info.get_platform(), None)
        self.assertEqual(info.warnings,
                         ("unsupported major version 99.0", ))

        # everything else still unpacked
        self.assertEqual(info.get_this(), "Hello")


    def test_trailing_bytes(self):
        with self.assertLogs("classdump", "WARNING"):
            info = cd.unpack_class(hello_class().build() + b"\x00\x00")

        self.assertEqual(info.warnings,
                         ("2 trailing bytes after class data", ))


    def test_buffers(self):
        data = hello_class().build()

        a = cd.unpack_class(data)
        b = cd.unpack_class(memoryview(data))
        c = cd.parse(bytearray(data))

        self.assertEqual(a.cpool, b.cpool)
        self.assertEqual(a.cpool, c.cpool)
        self.assertEqual(a.warnings, ())


    def test_classfile(self):
        data = hello_class().build()

        with NamedTemporaryFile(suffix=".class", delete=False) as tmp:
            tmp.write(data)

        try:
            self.assertTrue(cd.is_class_file(tmp.name))
            info = cd.unpack_classfile(tmp.name)
            self.assertEqual(info.get_this(), "Hello")
        finally:
            os.unlink(tmp.name)


class ClassInfoTest(TestCase):


    def setUp(self):
        self.info = cd.unpack_class(hello_class().build())


    def test_classinfo(self):
        ci = self.info

        self.assertEqual(type(ci), cd.JavaClassInfo)
        self.assertEqual(ci.magic, (0xca, 0xfe, 0xba, 0xbe))
        self.assertEqual(ci.get_version(), (52, 0))
        self.assertEqual(ci.get_platform(), "1.8")

        self.assertEqual(ci.get_this(), "Hello")
        self.assertEqual(ci.pretty_this(), "Hello")
        self.assertEqual(ci.get_super(), "java/lang/Object")
        self.assertEqual(ci.pretty_super(), "java.lang.Object")
        self.assertEqual(ci.get_interfaces(), ())
        self.assertEqual(ci.get_sourcefile(), "Hello.java")
        self.assertEqual(ci.get_signature(), None)
        self.assertEqual(ci.get_enclosingmethod(), None)
        self.assertEqual(ci.get_innerclasses(), ())

        self.assertTrue(ci.is_public())
        self.assertTrue(ci.is_super())
        self.assertFalse(ci.is_final())
        self.assertFalse(ci.is_interface())
        self.assertFalse(ci.is_abstract())
        self.assertFalse(ci.is_deprecated())

        self.assertEqual(ci.pretty_descriptor(), "public class Hello")
        self.assertEqual(ci.pretty_flag_names(),
                         ["ACC_PUBLIC", "ACC_SUPER"])


    def test_field(self):
        fi = self.info.get_field_by_name("ANSWER")

        self.assertEqual(type(fi), cd.JavaMemberInfo)
        self.assertFalse(fi.is_method)
        self.assertEqual(fi.get_descriptor(), "I")
        self.assertEqual(fi.pretty_type(), "int")
        self.assertEqual(fi.pretty_descriptor(),
                         "public static final int ANSWER")
        self.assertEqual(fi.deref_constantvalue(), 42)
        self.assertEqual(fi.get_arg_type_descriptors(), ())

        fi = self.info.get_field_by_name("name")
        self.assertEqual(fi.pretty_descriptor(),
                         "private java.lang.String name")
        self.assertEqual(fi.get_constantvalue(), None)

        self.assertEqual(self.info.get_field_by_name("nope"), None)


    def test_methods(self):
        init = self.info.get_method("<init>")
        self.assertEqual(init.pretty_descriptor(), "public Hello()")
        self.assertEqual(init.get_arg_count(), 1)

        main = self.info.get_method("main", ["[Ljava/lang/String;"])
        self.assertTrue(main.is_method)
        self.assertTrue(main.is_static())
        self.assertEqual(main.get_arg_type_descriptors(),
                         ("[Ljava/lang/String;", ))
        self.assertEqual(main.get_type_descriptor(), "V")
        self.assertEqual(main.pretty_descriptor(),
                         "public static void main(java.lang.String[])")
        self.assertEqual(main.pretty_flag_names(),
                         ["ACC_PUBLIC", "ACC_STATIC"])

        self.assertEqual(self.info.get_method("main"), None)
        self.assertEqual(len(list(self.info.get_methods_by_name("secret"))),
                         1)


class DescriptorTest(TestCase):


    def member(self, access, name, desc, owner="Sample"):
        cb = ClassBuilder(owner)
        cb.add_method(access, name, desc)
        return cd.unpack_class(cb.build()).methods[0]


    def test_varargs(self):
        m = self.member(0x0081, "format", "(Ljava/lang/String;[I)[[J")
        self.assertEqual(m.pretty_descriptor(),
                         "public long[][] format(java.lang.String, int...)")


    def test_static_init(self):
        m = self.member(0x0008, "<clinit>", "()V")
        self.assertEqual(m.pretty_descriptor(), "static {}")


    def test_inner_constructor(self):
        m = self.member(0x0001, "<init>", "(LOuter;)V", owner="pkg/Outer$In")
        self.assertEqual(m.pretty_descriptor(), "public pkg.Outer$In(Outer)")


    def test_bad_descriptor(self):
        m = self.member(0x0001, "broken", "(Ljava/lang/String")
        self.assertRaises(BadDescriptorException, m.pretty_descriptor)

        m = self.member(0x0001, "broken", "(Q)V")
        self.assertRaises(BadDescriptorException, m.get_arg_type_descriptors)


    def test_malformed_method_descriptors(self):
        m = self.member(0x0001, "broken", "")
        self.assertRaises(BadDescriptorException, m.get_type_descriptor)
        self.assertRaises(BadDescriptorException, m.get_arg_type_descriptors)
        self.assertRaises(BadDescriptorException, m.get_arg_count)
        self.assertRaises(BadDescriptorException, m.pretty_descriptor)

        for desc in ("()", "V", "()[V", "(I)V(I)V", "(I)(I)"):
            m = self.member(0x0001, "broken", desc)
            self.assertRaises(BadDescriptorException, m.get_type_descriptor)
            self.assertRaises(BadDescriptorException, m.pretty_type)

        m = self.member(0x0001, "broken", "(V)V")
        self.assertEqual(m.get_type_descriptor(), "V")
        self.assertRaises(BadDescriptorException, m.get_arg_type_descriptors)


    def test_malformed_field_descriptors(self):
        cb = ClassBuilder()
        for desc in ("", "V", "(I)V", "II"):
            cb.add_field(0x0001, "f%i" % len(cb.fields), desc)
        cb.add_field(0x0001, "fine", "[J")

        info = cd.unpack_class(cb.build())
        for field in info.fields[:-1]:
            self.assertRaises(BadDescriptorException, field.pretty_descriptor)

        self.assertEqual(info.fields[-1].pretty_descriptor(),
                         "public long[] fine")
        self.assertEqual(cd.pretty_type_descriptor("[J"), "long[]")
        self.assertRaises(BadDescriptorException,
                          cd.pretty_type_descriptor, "")


class PlatformTest(TestCase):


    def test_platforms(self):
        self.assertEqual(cd.platform_from_version(45, 3), "1.0.2")
        self.assertEqual(cd.platform_from_version(45, 4), "1.1")
        self.assertEqual(cd.platform_from_version(49, 0), "1.5")
        self.assertEqual(cd.platform_from_version(61, 0), "17")
        self.assertEqual(cd.platform_from_version(65, 0), "21")
        self.assertEqual(cd.platform_from_version(71, 0), "27")
        self.assertEqual(cd.platform_from_version(72, 0), None)
        self.assertEqual(cd.platform_from_version(44, 0), None)


#
# The end.
