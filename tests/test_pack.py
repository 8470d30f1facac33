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
unit tests for classdump.pack

author: Christopher O'Brien  <obriencj@gmail.com>
license: LGPL v.3
"""


from unittest import TestCase

from classdump.pack import *


class BufferTest(TestCase):


    def test_type(self):
        data = b"\x05\x04\x03\x02\x01"
        self.assertEqual(type(unpack(data)), BufferUnpacker)
        self.assertEqual(type(unpack(bytearray(data))), BufferUnpacker)
        self.assertEqual(type(unpack(memoryview(data))), BufferUnpacker)


    def test_nope(self):
        self.assertRaises(TypeError, lambda: unpack(5))
        self.assertRaises(TypeError, lambda: unpack(u"text"))


    def test_basics(self):
        data = b"\x05\x04\x03\x02\x01"

        with unpack(data) as up:

            col = up.read(1)
            self.assertEqual(col, b"\x05")

            col = up.unpack(">H")
            self.assertEqual(col, (0x0403,))

            _H = compile_struct(">H")
            col = up.unpack_struct(_H)
            self.assertEqual(col, (0x0201,))

            self.assertEqual(up.remaining(), 0)

            self.assertRaises(UnpackException, lambda: up.read(1))
            self.assertRaises(UnpackException, lambda: up.unpack(">H"))
            self.assertRaises(UnpackException, lambda: up.unpack_struct(_H))

        up = unpack(data)
        up.close()

        self.assertRaises(UnpackException, lambda: up.read(1))


    def test_widths(self):
        data = (b"\xff\xff\xfe\xff\xff\xff\xfd"
                b"\x80\x00\x00\x00\x00\x00\x00\x01")

        with unpack(data) as up:
            self.assertEqual(up.read_s1(), -1)
            self.assertEqual(up.read_s2(), -2)
            self.assertEqual(up.read_s4(), -3)
            self.assertEqual(up.read_u8(), 0x8000000000000001)

        with unpack(data) as up:
            self.assertEqual(up.read_u1(), 0xff)
            self.assertEqual(up.read_u2(), 0xfffe)
            self.assertEqual(up.read_u4(), 0xfffffffd)


    def test_short_read(self):
        with unpack(b"\x00\x01\x02") as up:
            up.skip(1)
            try:
                up.read_u4()
            except UnpackException as ue:
                self.assertEqual(ue.bytes_wanted, 4)
                self.assertEqual(ue.bytes_present, 2)
                self.assertEqual(ue.step, None)
            else:
                self.fail("read past the end of the buffer")

            # the failed read doesn't move the offset
            self.assertEqual(up.offset, 1)
            self.assertEqual(up.read_u2(), 0x0102)


    def test_step(self):
        with unpack(b"\x00") as up:
            try:
                with up.step("outer"):
                    with up.step("inner"):
                        up.read_u2()
            except UnpackException as ue:
                self.assertEqual(ue.step, "inner")
                self.assertTrue(str(ue).startswith(
                    "unexpected end of input during inner"))
            else:
                self.fail("read past the end of the buffer")


    def test_array(self):
        data = b"\x00\x02AB"

        self.assertEqual(len(data), 4)

        with unpack(data) as up:
            count, a, b = up.unpack(">HBB")
            self.assertEqual(count, 2)
            self.assertEqual(a, 65)
            self.assertEqual(b, 66)

        with unpack(data) as up:
            a, b = up.unpack_array(">B")
            self.assertEqual(a, (65,))
            self.assertEqual(b, (66,))

        _B = compile_struct(">B")
        with unpack(data) as up:
            a, b = up.unpack_struct_array(_B)
            self.assertEqual(a, (65,))
            self.assertEqual(b, (66,))


    def test_objects(self):

        class Pair(object):
            def __init__(self, scale):
                self.scale = scale

            def unpack(self, up):
                self.value = up.read_u1() * self.scale

        with unpack(b"\x00\x02\x03\x04") as up:
            objs = list(up.unpack_objects(Pair, 10))

        self.assertEqual([o.value for o in objs], [30, 40])


    def test_struct_cache(self):
        self.assertTrue(compile_struct(">HI") is compile_struct(">HI"))

        cache = dict()
        s = compile_struct(">HI", cache)
        self.assertTrue(cache[">HI"] is s)


#
# The end.
