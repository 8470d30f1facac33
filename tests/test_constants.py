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
unit tests for classdump.constants

author: Christopher O'Brien  <obriencj@gmail.com>
license: LGPL v.3
"""


from struct import pack
from unittest import TestCase

import classdump as cd

from classdump.constants import (
    decode_modified_utf8, escape_string, java_float_str, )
from classdump.errors import ConstPoolIndexException, ConstTypeException

from .classbuilder import ClassBuilder


class ConstantPoolTest(TestCase):


    def setUp(self):
        cb = ClassBuilder("Pool")

        self.long_ref = cb.long_(123)
        self.after_long = cb.utf8("after")
        self.double_ref = cb.double(2.0)
        self.float_ref = cb.float_(1.5)
        self.int_ref = cb.integer(-7)
        self.string_ref = cb.string("tab\there")
        self.init_ref = cb.methodref("java/lang/Object", "<init>", "()V")
        self.iface_ref = cb.interface_methodref("java/util/List", "size",
                                                "()I")
        self.array_ref = cb.class_ref("[Ljava/lang/String;")
        self.handle_ref = cb.raw_const(pack(">BBH", 15, 6, self.init_ref))
        self.count = cb.next_index

        self.cpool = cd.unpack_class(cb.build()).cpool


    def test_slots(self):
        self.assertEqual(len(self.cpool), self.count)

        # slot 0 is never usable
        self.assertRaises(ConstPoolIndexException,
                          lambda: self.cpool.get_const(0))
        self.assertRaises(IndexError,
                          lambda: self.cpool.deref_const(0))

        # nor anything past the end
        self.assertRaises(ConstPoolIndexException,
                          lambda: self.cpool.get_const(self.count))


    def test_phantom_slot(self):
        self.assertEqual(self.cpool.get_const(self.long_ref),
                         (cd.CONST_Long, 123))

        # the slot after a long is unusable, but the numbering of the
        # entries following it is preserved
        try:
            self.cpool.get_const(self.long_ref + 1)
        except ConstPoolIndexException as cpie:
            self.assertTrue(isinstance(cpie, IndexError))
            self.assertEqual(cpie.index, self.long_ref + 1)
        else:
            self.fail("phantom slot was resolved")

        self.assertEqual(self.after_long, self.long_ref + 2)
        self.assertEqual(self.cpool.utf8(self.after_long), "after")

        self.assertRaises(ConstPoolIndexException,
                          lambda: self.cpool.get_const(self.double_ref + 1))

        # the phantom slots are skipped when listing
        indexes = [i for (i, _t, _v) in self.cpool.pretty_constants()]
        self.assertFalse((self.long_ref + 1) in indexes)
        self.assertTrue(self.after_long in indexes)


    def test_type_mismatch(self):
        try:
            self.cpool.utf8(self.init_ref)
        except ConstTypeException as cte:
            self.assertEqual(cte.index, self.init_ref)
            self.assertEqual(cte.wanted, "Utf8")
            self.assertEqual(cte.found, "Methodref")
        else:
            self.fail("Methodref resolved as Utf8")

        self.assertRaises(ConstTypeException,
                          lambda: self.cpool.class_name(self.int_ref))


    def test_deref(self):
        cpool = self.cpool

        self.assertEqual(cpool.deref_const(self.int_ref), -7)
        self.assertEqual(cpool.deref_const(self.string_ref), "tab\there")
        self.assertEqual(cpool.deref_const(self.init_ref),
                         ("java/lang/Object", "<init>", "()V"))
        self.assertEqual(cpool.member_ref(self.iface_ref),
                         ("java/util/List", "size", "()I"))
        self.assertEqual(cpool.deref_const(self.handle_ref),
                         (6, ("java/lang/Object", "<init>", "()V")))


    def test_pretty_const(self):
        cpool = self.cpool

        self.assertEqual(cpool.pretty_const(self.long_ref),
                         ("Long", "123l"))
        self.assertEqual(cpool.pretty_const(self.double_ref),
                         ("Double", "2.0d"))
        self.assertEqual(cpool.pretty_const(self.float_ref),
                         ("Float", "1.5f"))
        self.assertEqual(cpool.pretty_const(self.int_ref),
                         ("Integer", "-7"))
        self.assertEqual(cpool.pretty_const(self.long_ref + 1),
                         (None, None))
        self.assertEqual(cpool.pretty_const(0), (None, None))

        t, v = cpool.pretty_const(self.init_ref)
        self.assertEqual(t, "Methodref")
        self.assertTrue(v.startswith("#"))


    def test_pretty_deref(self):
        cpool = self.cpool

        self.assertEqual(cpool.pretty_deref_const(self.init_ref),
                         "java/lang/Object.\"<init>\":()V")
        self.assertEqual(cpool.pretty_deref_const(self.string_ref),
                         "tab\\there")
        self.assertEqual(cpool.pretty_deref_const(self.array_ref),
                         "\"[Ljava/lang/String;\"")
        self.assertEqual(cpool.pretty_deref_const(self.handle_ref),
                         "REF_invokeStatic java/lang/Object."
                         "\"<init>\":()V")

        self.assertEqual(cpool.pretty_const_comment(self.init_ref),
                         "Method java/lang/Object.\"<init>\":()V")
        self.assertEqual(cpool.pretty_const_comment(self.iface_ref),
                         "InterfaceMethod java/util/List.size:()I")
        self.assertEqual(cpool.pretty_const_comment(self.int_ref),
                         "int -7")


class FormattingTest(TestCase):


    def test_modified_utf8(self):
        self.assertEqual(decode_modified_utf8(b"plain"), "plain")

        # NUL is encoded in two bytes
        self.assertEqual(decode_modified_utf8(b"a\xc0\x80b"), "a\x00b")

        # supplementary characters are a pair of encoded surrogates
        self.assertEqual(decode_modified_utf8(b"\xed\xa0\xbd\xed\xb8\x80"),
                         u"\U0001F600")


    def test_escape(self):
        self.assertEqual(escape_string("a\nb\"c\\"), "a\\nb\\\"c\\\\")
        self.assertEqual(escape_string("\x01"), "\\u0001")
        self.assertEqual(escape_string(u"café"), u"café")

        # lone surrogates and other unprintables are always escaped, so
        # the text can be written as UTF-8
        self.assertEqual(escape_string("\ud800"), "\\ud800")
        self.assertEqual(escape_string("a\udfffb"), "a\\udfffb")
        self.assertEqual(escape_string("\x7f\u2028"), "\\u007f\\u2028")
        escape_string("\ud800\udc00").encode("utf-8")

        # supplementary characters which aren't printable are written
        # as their surrogate pair
        self.assertEqual(escape_string("\U000e0001"), "\\udb40\\udc01")
        self.assertEqual(escape_string("\U0001F600"), "\U0001F600")


    def test_float_text(self):
        self.assertEqual(java_float_str(1.0), "1.0")
        self.assertEqual(java_float_str(100.0), "100.0")
        self.assertEqual(java_float_str(-2.5), "-2.5")
        self.assertEqual(java_float_str(0.001), "0.001")
        self.assertEqual(java_float_str(1e-4), "1.0E-4")
        self.assertEqual(java_float_str(1e10), "1.0E10")
        self.assertEqual(java_float_str(12345678.0), "1.2345678E7")
        self.assertEqual(java_float_str(-0.0), "-0.0")
        self.assertEqual(java_float_str(float("nan")), "NaN")
        self.assertEqual(java_float_str(float("-inf")), "-Infinity")

        # 0.1 is not exact as a 32-bit float, but its shortest text
        # is still 0.1
        single = 0.10000000149011612
        self.assertEqual(java_float_str(single, single=True), "0.1")
        self.assertEqual(java_float_str(single), "0.10000000149011612")

        # a lone significant digit is widened to two, as Java does for
        # the smallest denormals
        self.assertEqual(java_float_str(1.401298464324817e-45, single=True),
                         "1.4E-45")
        self.assertEqual(java_float_str(5e-324), "4.9E-324")
        self.assertEqual(java_float_str(2.0, single=True), "2.0")


#
# The end.
