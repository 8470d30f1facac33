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
unit tests for the classdump command line

author: Christopher O'Brien  <obriencj@gmail.com>
license: LGPL v.3
"""


import json
import os

from contextlib import redirect_stderr, redirect_stdout
from hashlib import sha256
from io import StringIO
from shutil import rmtree
from tempfile import mkdtemp
from unittest import TestCase

from classdump.classinfo import create_optparser, main
from classdump.javap import SHOW_PACKAGE, SHOW_PRIVATE, SHOW_PUBLIC

from .classbuilder import ClassBuilder, hello_class, ACC_PUBLIC


class ClassinfoTest(TestCase):


    def setUp(self):
        self.tmpdir = mkdtemp()

        self.data = hello_class().build()
        self.hello = self.write("Hello.class", self.data)


    def tearDown(self):
        rmtree(self.tmpdir)


    def write(self, name, data):
        path = os.path.join(self.tmpdir, name)
        with open(path, "wb") as fd:
            fd.write(data)
        return path


    def run_main(self, *args):
        out = StringIO()
        err = StringIO()

        with redirect_stdout(out), redirect_stderr(err):
            result = main(["classdump"] + list(args))

        return result, out.getvalue().splitlines(), err.getvalue()


    def test_options_accepted(self):
        parser = create_optparser("classdump")

        options = parser.parse_args([self.hello])
        self.assertEqual(options.show, SHOW_PACKAGE)
        self.assertFalse(options.verbose)

        options = parser.parse_args(["-p", "-c", "-l", "-s", self.hello])
        self.assertEqual(options.show, SHOW_PRIVATE)
        self.assertTrue(options.disassemble)
        self.assertTrue(options.lines)
        self.assertTrue(options.sigs)

        options = parser.parse_args(["--public", "--constants", self.hello])
        self.assertEqual(options.show, SHOW_PUBLIC)
        self.assertTrue(options.constants)


    def test_default(self):
        result, out, err = self.run_main(self.hello)

        self.assertEqual(result, 0)
        self.assertEqual(err, "")
        self.assertEqual(out[:2], ["Compiled from \"Hello.java\"",
                                   "public class Hello {"])
        self.assertFalse("  private void secret();" in out)


    def test_private(self):
        result, out, _err = self.run_main("-p", self.hello)

        self.assertEqual(result, 0)
        self.assertTrue("  private void secret();" in out)


    def test_verbose(self):
        result, out, _err = self.run_main("-v", self.hello)

        self.assertEqual(result, 0)
        self.assertTrue("Constant pool:" in out)
        self.assertTrue("    Code:" in out)
        self.assertTrue("      LineNumberTable:" in out)
        self.assertTrue("      LocalVariableTable:" in out)


    def test_lines_bring_locals(self):
        result, out, _err = self.run_main("-l", self.hello)

        self.assertEqual(result, 0)
        self.assertTrue("      LineNumberTable:" in out)
        self.assertTrue("      LocalVariableTable:" in out)


    def test_sysinfo(self):
        result, out, _err = self.run_main("--sysinfo", self.hello)

        self.assertEqual(result, 0)
        self.assertEqual(out[0], "Classfile %s" % self.hello)
        self.assertTrue(out[1].startswith("  Last modified "))
        self.assertTrue(out[1].endswith("; size %i bytes" % len(self.data)))
        self.assertEqual(out[2], "  SHA-256 checksum %s" %
                         sha256(self.data).hexdigest())
        self.assertEqual(out[3], "Compiled from \"Hello.java\"")


    def test_json(self):
        result, out, _err = self.run_main("--json", self.hello)

        self.assertEqual(result, 0)
        data = json.loads("\n".join(out))

        self.assertEqual(data["name"], "Hello")
        self.assertEqual(data["extends"], "java.lang.Object")
        self.assertEqual(data["source_file"], "Hello.java")
        self.assertEqual(data["platform"], "1.8")
        self.assertEqual([f["name"] for f in data["fields"]], ["ANSWER"])
        self.assertEqual([m["name"] for m in data["methods"]],
                         ["<init>", "main"])
        self.assertEqual(data["fields"][0]["constant_value"],
                         ["Integer", "42"])


    def test_json_contains_errors(self):
        cb = ClassBuilder("Broken")
        cb.add_method(ACC_PUBLIC, "broken", "")
        cb.add_method(ACC_PUBLIC, "fine", "()V")
        cb.add_attribute(cb.attribute("SourceFile", b"\x00\x01\x02"))
        broken = self.write("Broken.class", cb.build())

        result, out, err = self.run_main("--json", broken)

        self.assertEqual(result, 0)
        self.assertEqual(err, "")
        data = json.loads("\n".join(out))

        self.assertEqual(data["name"], "Broken")
        self.assertEqual(data["source_file"], None)
        self.assertEqual(data["errors"], [
            "attribute SourceFile: attribute SourceFile declares 3 bytes,"
            " but 2 were consumed",
        ])

        broken, fine = data["methods"]
        self.assertEqual(broken["name"], "broken")
        self.assertEqual(broken["type"], None)
        self.assertTrue("malformed descriptor ''" in broken["errors"])
        self.assertEqual(fine["type"], "void")
        self.assertEqual(fine["arg_types"], [])
        self.assertFalse("errors" in fine)


    def test_failures(self):
        bad = self.write("Bad.class", b"\xde\xad\xbe\xef")
        missing = os.path.join(self.tmpdir, "Missing.class")

        result, out, err = self.run_main(bad, missing, self.hello)

        # the good class is still shown
        self.assertEqual(result, 1)
        self.assertTrue("public class Hello {" in out)

        err = err.splitlines()
        self.assertTrue(err[0].startswith("Error: %s: " % bad))
        self.assertTrue("DEADBEEF" in err[0])
        self.assertTrue(err[1].startswith("Error: %s: " % missing))


    def test_truncated(self):
        short = self.write("Short.class", self.data[:20])

        result, _out, err = self.run_main(short)

        self.assertEqual(result, 1)
        self.assertTrue("unexpected end of input during constant pool"
                        in err)


#
# The end.
