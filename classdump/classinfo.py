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
Utility script and module for inspecting binary java class files

Let's pretend to be the javap tool shipped with many Java SDKs

:author: Christopher O'Brien  <obriencj@gmail.com>
:license: LGPL
"""


import logging
import sys

from argparse import ArgumentParser
from hashlib import sha256
from json import dump
from os import stat
from time import localtime, strftime

from . import platform_from_version, unpack_class
from .errors import ClassfileError
from .javap import (
    SHOW_PUBLIC, SHOW_PROTECTED, SHOW_PACKAGE, SHOW_PRIVATE,
    JavapOptions, render, should_show, )


__all__ = (
    "main", "cli", "add_classinfo_optgroup", "create_optparser",
    "cli_options", "cli_sysinfo",
    "cli_json_class", "cli_print_class",
    "cli_simplify_classinfo",
    "cli_simplify_field", "cli_simplify_fields",
    "cli_simplify_method", "cli_simplify_methods",
)


_log = logging.getLogger(__name__)


def cli_options(options):
    """
    the JavapOptions matching the parsed command line options
    """

    return JavapOptions(verbose=options.verbose,
                        lines=options.lines,
                        locals=options.locals,
                        show=options.show,
                        constants=options.constants,
                        disassemble=options.disassemble,
                        sigs=options.sigs)


def cli_sysinfo(filename, data):
    """
    the lines javap -sysinfo shows ahead of a class
    """

    st = stat(filename)
    modified = strftime("%b %d, %Y", localtime(st.st_mtime))

    return ["Classfile %s" % filename,
            "  Last modified %s; size %i bytes" % (modified, len(data)),
            "  SHA-256 checksum %s" % sha256(data).hexdigest()]


def cli_print_class(options, filename, data, out=None):
    if out is None:
        out = sys.stdout

    info = unpack_class(data)

    lines = list()
    if options.sysinfo:
        lines.extend(cli_sysinfo(filename, data))
    lines.extend(render(info, cli_options(options)))

    for line in lines:
        print(line, file=out)


def cli_attribute_errors(attribs, errors):
    """
    collect a message for each attribute which couldn't be decoded
    """

    for attr in attribs:
        if attr.error is not None:
            name = attr.name or ("#%i" % attr.name_ref)
            errors.append("attribute %s: %s" % (name, attr.error))


def cli_guard(errors, attribs, fn, *args):
    """
    call fn, returning its result. If it raises a ClassfileError the
    message is collected into errors and None is returned instead. The
    stored error of a broken attribute is only collected once, by
    cli_attribute_errors.
    """

    try:
        return fn(*args)
    except ClassfileError as ce:
        if not any(ce is attr.error for attr in attribs):
            errors.append(str(ce))
        return None


def cli_simplify_field(field, data=None):
    if data is None:
        data = dict()

    errors = list()
    cli_attribute_errors(field.attribs, errors)

    def guard(fn, *args):
        return cli_guard(errors, field.attribs, fn, *args)

    data["name"] = guard(field.get_name)
    data["type"] = guard(field.pretty_type)
    data["access_flags"] = tuple(field.pretty_access_flags())

    ifonly(data, "signature", guard(field.get_signature))
    ifonly(data, "deprecated", field.is_deprecated())

    cv = guard(field.get_constantvalue)
    if cv is not None:
        t, v = field.cpool.pretty_const(cv)
        if t:
            data["constant_value"] = (t, v)

    ifonly(data, "errors", errors)
    return data


def cli_simplify_method(method, data=None):
    if data is None:
        data = dict()

    errors = list()
    cli_attribute_errors(method.attribs, errors)

    def guard(fn, *args):
        return cli_guard(errors, method.attribs, fn, *args)

    data["name"] = guard(method.get_name)
    data["type"] = guard(method.pretty_type)
    data["access_flags"] = tuple(method.pretty_access_flags())
    data["arg_types"] = guard(lambda: tuple(method.pretty_arg_types()))

    ifonly(data, "signature", guard(method.get_signature))
    ifonly(data, "deprecated", method.is_deprecated())
    ifonly(data, "exceptions",
           guard(lambda: tuple(method.pretty_exceptions())))

    ifonly(data, "errors", errors)
    return data


def cli_simplify_fields(options, info):
    fields = list()
    for field in info.fields:
        if should_show(options, field):
            fields.append(cli_simplify_field(field))
    return fields


def cli_simplify_methods(options, info):
    methods = list()
    for method in info.methods:
        if should_show(options, method):
            methods.append(cli_simplify_method(method))
    return methods


def cli_simplify_classinfo(options, info, data=None):
    if data is None:
        data = dict()

    errors = list()
    cli_attribute_errors(info.attribs, errors)

    def guard(fn, *args):
        return cli_guard(errors, info.attribs, fn, *args)

    data["name"] = guard(info.pretty_this)
    data["extends"] = guard(info.pretty_super)
    data["implements"] = guard(lambda: tuple(info.pretty_interfaces()))
    data["source_file"] = guard(info.get_sourcefile)

    ifonly(data, "signature", guard(info.get_signature))
    ifonly(data, "enclosing_method", guard(info.get_enclosingmethod))
    ifonly(data, "warnings", info.warnings)

    data["version"] = info.get_version()
    data["platform"] = platform_from_version(*info.version)

    if options.verbose:
        data["constants_pool"] = tuple(info.cpool.pretty_constants())

    data["fields"] = cli_simplify_fields(options, info)
    data["methods"] = cli_simplify_methods(options, info)

    ifonly(data, "errors", errors)
    return data


def ifonly(data, key, val):

    """ utility function to set data[key] to val, but only if val has
    a truthy value """

    if val:
        data[key] = val


def cli_json_class(options, filename, data, out=None):
    if out is None:
        out = sys.stdout

    info = unpack_class(data)
    simple = cli_simplify_classinfo(options, info)
    if options.sysinfo:
        simple["sysinfo"] = cli_sysinfo(filename, data)
    dump(simple, out, sort_keys=True, indent=2)
    print(file=out)


def cli(options, out=None, err=None):
    """
    process each of the class files named in options. Returns 1 if any
    of them could not be read or unpacked, 0 otherwise.
    """

    if out is None:
        out = sys.stdout
    if err is None:
        err = sys.stderr

    logging.basicConfig(
        level=(logging.DEBUG if options.debug else logging.WARNING),
        format="%(levelname)s: %(name)s: %(message)s")

    if options.verbose:
        # verbose also sets all of the following options
        options.lines = True
        options.locals = True
        options.disassemble = True
        options.sigs = True

    # -l brings the local variable tables along, as with javap
    options.locals = getattr(options, "locals", False) or options.lines

    style = cli_print_class
    if options.json:
        style = cli_json_class

    result = 0

    for filename in options.classfile:
        try:
            with open(filename, "rb") as fd:
                data = fd.read()
        except (IOError, OSError) as ioe:
            print("Error: %s: %s" % (filename, ioe.strerror or ioe),
                  file=err)
            result = 1
            continue

        _log.debug("read %i bytes from %s", len(data), filename)

        try:
            style(options, filename, data, out=out)
        except ClassfileError as ce:
            print("Error: %s: %s" % (filename, ce), file=err)
            result = 1

    return result


def add_classinfo_optgroup(parser):
    g = parser.add_argument_group("Class Info Options")

    g.add_argument("--public", dest="show",
                   action="store_const", default=SHOW_PACKAGE,
                   const=SHOW_PUBLIC,
                   help="show only public classes and members")

    g.add_argument("--protected", dest="show",
                   action="store_const", const=SHOW_PROTECTED,
                   help="show protected/public classes and members")

    g.add_argument("--package", dest="show",
                   action="store_const", const=SHOW_PACKAGE,
                   help="show package/protected/public classes and"
                   " members (default)")

    g.add_argument("-p", "--private", dest="show",
                   action="store_const", const=SHOW_PRIVATE,
                   help="show all classes and members")

    g.add_argument("-l", dest="lines", action="store_true",
                   help="print line number and local variable tables")

    g.add_argument("-c", dest="disassemble", action="store_true",
                   help="disassemble the code")

    g.add_argument("-s", dest="sigs", action="store_true",
                   help="print internal type signatures")

    g.add_argument("--constants", dest="constants", action="store_true",
                   help="show final constants")

    g.add_argument("--sysinfo", dest="sysinfo", action="store_true",
                   help="show system info (path, size, date, SHA-256 hash)"
                   " of class being processed")

    g.add_argument("-v", "--verbose", dest="verbose", action="store_true",
                   help="print additional information")


def create_optparser(progname):
    parser = ArgumentParser(prog=progname)
    parser.add_argument("classfile", nargs="+",
                        help="Java class file(s) to inspect")
    parser.add_argument("--json", action="store_true", default=False,
                        help="output JSON")
    parser.add_argument("--debug", action="store_true", default=False,
                        help="log parsing details")

    add_classinfo_optgroup(parser)

    return parser


def main(args=sys.argv):
    parser = create_optparser(args[0])
    return cli(parser.parse_args(args[1:]))


#
# The end.
