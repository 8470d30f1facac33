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
Render an unpacked class the way the javap utility would.

render() is a pure function of the JavaClassInfo and a JavapOptions,
returning the output as a list of lines. Any constant which can't be
resolved shows as an "<invalid constant ...>" placeholder, any method
whose code can't be fully disassembled shows the instructions decoded
before the failure followed by an "Error:" line, and any attribute
which couldn't be decoded shows an "Error: attribute" line. None of
these stop the rest of the class from rendering.

:author: Christopher O'Brien  <obriencj@gmail.com>
:license: LGPL
"""


import sys

from . import opcodes
from . import (
    CLASS_FLAGS, PARAMETER_FLAGS, MODULE_FLAGS, REQUIRES_FLAGS, EXPORTS_FLAGS,
    ACC_STATIC_PHASE, ACC_TRANSITIVE, flag_names, pretty_type_descriptor, )
from .attributes import TYPE_PATH_KINDS, VT_OBJECT, VT_UNINITIALIZED
from .constants import (
    CONST_Integer, CONST_Float, CONST_Long, CONST_Double, CONST_String,
    escape_string, java_float_str, )
from .errors import ClassfileError


__all__ = (
    "SHOW_PUBLIC", "SHOW_PROTECTED", "SHOW_PACKAGE", "SHOW_PRIVATE",
    "JavapOptions", "should_show", "render", "print_class",
)


# the access levels, each showing everything the one before it does
SHOW_PUBLIC = 1
SHOW_PROTECTED = 3
SHOW_PACKAGE = 7
SHOW_PRIVATE = 15


# column at which trailing "//" comments start, relative to the
# indentation of the line
_COMMENT_COLUMN = 40


class JavapOptions(object):
    """
    The output modes of the renderer, named after the javap flags
    which enable them. Every mode is independent of the others,
    except that verbose implies disassemble, lines, locals, and sigs.
    """

    def __init__(self, verbose=False, lines=False, locals=False,
                 show=SHOW_PACKAGE, constants=False, disassemble=False,
                 sigs=False):

        self.verbose = verbose
        self.lines = lines or verbose
        self.locals = locals or verbose
        self.show = show
        self.constants = constants
        self.disassemble = disassemble or verbose
        self.sigs = sigs or verbose


    def details(self):
        """
        whether any per-member sections are enabled, in which case
        members are separated by blank lines
        """

        return (self.verbose or self.lines or self.locals or
                self.disassemble or self.sigs)


def should_show(options, member):
    """
    whether to show a member by its access flags and the show
    option
    """

    show = options.show
    if show >= SHOW_PRIVATE:
        return True
    elif show >= SHOW_PACKAGE:
        return not member.is_private()
    elif show >= SHOW_PROTECTED:
        return bool(member.is_public() or member.is_protected())
    else:
        return bool(member.is_public())


def _placeholder(err):
    return "<%s>" % err


def _with_comment(text, comment):
    pad = max(1, _COMMENT_COLUMN - len(text))
    return "%s%s// %s" % (text, " " * pad, comment)


def _resolve(fn, *args):
    """
    call fn, returning its result or the placeholder text for the
    ClassfileError it raised
    """

    try:
        return fn(*args)
    except ClassfileError as err:
        return _placeholder(err)


def _const_comment(cpool, index):
    return _resolve(cpool.pretty_const_comment, index)


def _attribute_errors(out, attribs, indent):
    """
    emit a line for each attribute whose name or payload couldn't be
    decoded
    """

    for attr in attribs:
        if attr.error is not None:
            name = attr.name or ("#%i" % attr.name_ref)
            out.append("%sError: attribute %s: %s" %
                       (indent, name, attr.error))


def _value(attribs, name):
    """
    the decoded value of the named attribute, or None if it's absent
    or broken. Broken attributes are reported by _attribute_errors.
    """

    attr = attribs.get(name)
    if attr is None or attr.error is not None:
        return None
    return attr.value


# -----
# Constant pool


def _render_constant_pool(out, cpool):
    out.append("Constant pool:")

    width = len(str(len(cpool) - 1)) + 3

    for index, tag, val in cpool.pretty_constants():
        text = "%s = %-18s %s" % (("#%i" % index).rjust(width), tag, val)

        if tag in ("Utf8", "Integer", "Float", "Long", "Double"):
            out.append(text)
        else:
            comment = _resolve(cpool.pretty_deref_const, index)
            out.append(_with_comment(text.ljust(width + 35), comment))


# -----
# Instructions


def _render_switch(out, indent, instr):
    default = instr.args[0]

    if instr.code == opcodes.OP_tableswitch:
        low, high, offsets = instr.args[1:]
        out.append("%s%4i: %-13s { // %i to %i" %
                   (indent, instr.offset, instr.name, low, high))
        for match, delta in enumerate(offsets, low):
            out.append("%s%24i: %i" % (indent, match, instr.offset + delta))

    else:
        pairs = instr.args[1]
        out.append("%s%4i: %-13s { // %i" %
                   (indent, instr.offset, instr.name, len(pairs)))
        for match, delta in pairs:
            out.append("%s%24i: %i" % (indent, match, instr.offset + delta))

    out.append("%s%24s: %i" % (indent, "default", instr.offset + default))
    out.append("%s      }" % indent)


def _instruction_text(cpool, instr):
    """
    the operand text and optional comment for an instruction
    """

    code = instr.code
    args = instr.args

    if not args:
        return "", None

    if opcodes.has_const_arg(code):
        comment = _const_comment(cpool, args[0])
        if code in (opcodes.OP_invokeinterface, opcodes.OP_invokedynamic,
                    opcodes.OP_multianewarray):
            return "#%i,  %i" % (args[0], args[1]), comment
        else:
            return "#%i" % args[0], comment

    elif opcodes.is_branch(code):
        return "%i" % (instr.offset + args[0]), None

    elif code == opcodes.OP_newarray:
        return opcodes.get_array_type_name(args[0]), None

    else:
        return ", ".join(str(a) for a in args), None


def _render_instruction(out, indent, cpool, instr):
    if instr.code in (opcodes.OP_tableswitch, opcodes.OP_lookupswitch):
        _render_switch(out, indent, instr)
        return

    operands, comment = _instruction_text(cpool, instr)
    if operands:
        text = "%4i: %-13s %s" % (instr.offset, instr.name, operands)
    else:
        text = "%4i: %s" % (instr.offset, instr.name)

    if comment:
        text = _with_comment(text, comment)

    out.append(indent + text)


# -----
# Annotations


def _element_text(ev):
    """
    the index form of an element value, as javap shows it before the
    resolved annotation
    """

    tag = ev.tag
    if tag == "e":
        return "e#%i.#%i" % ev.value
    elif tag == "@":
        return "@%s" % _annotation_text(ev.value)
    elif tag == "[":
        return "[%s]" % ",".join(_element_text(v) for v in ev.value)
    else:
        return "%s#%i" % (tag, ev.value)


def _annotation_text(ann):
    elements = ",".join("#%i=%s" % (n, _element_text(v))
                        for (n, v) in ann.elements)
    return "#%i(%s)" % (ann.type_ref, elements)


def _element_value(cpool, ev):
    """
    the source-like text of an element value
    """

    tag = ev.tag
    val = ev.value

    if tag == "s":
        return "\"%s\"" % escape_string(cpool.utf8(val))

    elif tag == "e":
        type_ref, const_ref = val
        return "%s.%s" % (pretty_type_descriptor(cpool.utf8(type_ref)),
                          cpool.utf8(const_ref))

    elif tag == "c":
        return "%s.class" % pretty_type_descriptor(cpool.utf8(val))

    elif tag == "@":
        return "@%s" % "".join(_annotation_lines(cpool, val, nested=True))

    elif tag == "[":
        return "[%s]" % ",".join(_element_value(cpool, v) for v in val)

    _t, num = cpool.get_const(val)
    if tag == "Z":
        return "true" if num else "false"
    elif tag == "C":
        return "'%s'" % escape_string(chr(num & 0xffff))
    elif tag == "J":
        return "%il" % num
    elif tag == "F":
        return java_float_str(num, single=True) + "f"
    elif tag == "D":
        return java_float_str(num) + "d"
    else:
        return "%i" % num


def _annotation_lines(cpool, ann, nested=False):
    """
    the resolved form of an annotation, one element per line unless
    nested within an element value
    """

    name = pretty_type_descriptor(ann.get_type())
    if not ann.elements:
        return [name]

    pairs = ["%s=%s" % (cpool.utf8(n), _element_value(cpool, v))
             for (n, v) in ann.elements]

    if nested:
        return ["%s(%s)" % (name, ",".join(pairs))]

    lines = [name + "("]
    lines.extend("  " + p for p in pairs)
    lines.append(")")
    return lines


def _render_annotation(out, cpool, index, ann, indent, target=None):
    head = "%s%i: %s" % (indent, index, _annotation_text(ann))
    if target:
        head = "%s: %s" % (head, target)
    out.append(head)

    try:
        lines = _annotation_lines(cpool, ann)
    except ClassfileError as err:
        lines = [_placeholder(err)]

    for line in lines:
        out.append("%s  %s" % (indent, line))


def _type_target_text(ann):
    parts = [ann.pretty_target()]

    for key, val in ann.target_info:
        if key == "lvarOffset":
            ranges = "; ".join("{start_pc=%i, length=%i, index=%i}" % r
                               for r in val)
            parts.append(ranges)
        else:
            parts.append("%s=%i" % (key, val))

    if ann.type_path:
        path = []
        for kind, arg in ann.type_path:
            name = TYPE_PATH_KINDS[kind]
            if name == "TYPE_ARGUMENT":
                name = "%s(%i)" % (name, arg)
            path.append(name)
        parts.append("location=[%s]" % ", ".join(path))

    return ", ".join(parts)


_ANNOTATIONS = ("RuntimeVisibleAnnotations", "RuntimeInvisibleAnnotations")

_PARAMETER_ANNOTATIONS = ("RuntimeVisibleParameterAnnotations",
                          "RuntimeInvisibleParameterAnnotations")

_TYPE_ANNOTATIONS = ("RuntimeVisibleTypeAnnotations",
                     "RuntimeInvisibleTypeAnnotations")


def _render_annotations(out, cpool, attribs, indent):
    """
    the annotation tables of a class, member, record component, or
    Code attribute
    """

    inner = indent + "  "

    for name in _ANNOTATIONS:
        anns = _value(attribs, name)
        if anns:
            out.append("%s%s:" % (indent, name))
            for index, ann in enumerate(anns):
                _render_annotation(out, cpool, index, ann, inner)

    for name in _PARAMETER_ANNOTATIONS:
        params = _value(attribs, name)
        if params:
            out.append("%s%s:" % (indent, name))
            for param, anns in enumerate(params):
                out.append("%sparameter %i:" % (inner, param))
                for index, ann in enumerate(anns):
                    _render_annotation(out, cpool, index, ann,
                                       inner + "  ")

    for name in _TYPE_ANNOTATIONS:
        anns = _value(attribs, name)
        if anns:
            out.append("%s%s:" % (indent, name))
            for index, ann in enumerate(anns):
                _render_annotation(out, cpool, index, ann, inner,
                                   _type_target_text(ann))


# -----
# Stack maps


_VERIFICATION_TYPES = ("top", "int", "float", "double", "long", "null",
                       "this")


def _verification_text(cpool, vtype):
    tag, arg = vtype

    if tag == VT_OBJECT:
        name = _resolve(cpool.class_name, arg)
        if name.startswith("["):
            name = "\"%s\"" % name
        return "class %s" % name

    elif tag == VT_UNINITIALIZED:
        return "uninitialized %i" % arg

    else:
        return _VERIFICATION_TYPES[tag]


def _verification_list(cpool, vtypes):
    if not vtypes:
        return "[]"
    return "[ %s ]" % ", ".join(_verification_text(cpool, v) for v in vtypes)


def _render_stackmap(out, cpool, frames, indent):
    out.append("%sStackMapTable: number_of_entries = %i" %
               (indent, len(frames)))

    inner = indent + "  "
    for frame in frames:
        kind = frame.get_kind()
        out.append("%sframe_type = %i /* %s */" %
                   (inner, frame.frame_type, kind))

        if kind == "same":
            continue
        if kind != "same_locals_1_stack_item":
            out.append("%s  offset_delta = %i" % (inner, frame.offset_delta))

        if frame.locals or kind == "full_frame":
            out.append("%s  locals = %s" %
                       (inner, _verification_list(cpool, frame.locals)))
        if frame.stack or kind == "full_frame":
            out.append("%s  stack = %s" %
                       (inner, _verification_list(cpool, frame.stack)))


# -----
# Members


def _render_code(out, options, method, code, indent):
    cpool = code.cpool

    out.append("%sCode:" % indent)
    inner = indent + "  "

    if options.verbose:
        args_size = _resolve(method.get_arg_count)
        out.append("%sstack=%i, locals=%i, args_size=%s" %
                   (inner, code.max_stack, code.max_locals, args_size))

    if options.disassemble:
        # javap shifts the instructions right when verbose
        at = inner if options.verbose else indent

        instructions, err = code.disassemble_partial()
        for instr in instructions:
            _render_instruction(out, at, cpool, instr)
        if err is not None:
            out.append("%sError: %s" % (inner, err))

        if code.exceptions:
            out.append("%sException table:" % inner)
            out.append("%s   from    to  target type" % inner)
            for exc in code.exceptions:
                out.append("%s  %5i %5i %5i   %s" %
                           (inner, exc.start_pc, exc.end_pc, exc.handler_pc,
                            _resolve(exc.pretty_catch_type)))

    _attribute_errors(out, code.attribs, inner)

    if options.lines:
        lnt = _value(code.attribs, "LineNumberTable")
        if lnt:
            out.append("%sLineNumberTable:" % inner)
            for offset, line in lnt:
                out.append("%s  line %i: %i" % (inner, line, offset))

    if options.locals:
        for name in ("LocalVariableTable", "LocalVariableTypeTable"):
            table = _value(code.attribs, name)
            if not table:
                continue

            out.append("%s%s:" % (inner, name))
            out.append("%s  Start  Length  Slot  Name   Signature" % inner)
            for start, length, n, d, slot in table:
                out.append("%s  %5i  %6i  %4i  %5s   %s" %
                           (inner, start, length, slot,
                            _resolve(cpool.utf8, n),
                            _resolve(cpool.utf8, d)))

    if options.verbose:
        frames = _value(code.attribs, "StackMapTable")
        if frames:
            _render_stackmap(out, cpool, frames, inner)
        _render_annotations(out, cpool, code.attribs, inner)


def _constant_value_text(field):
    """
    the source-like text for a final field's constant value, as
    shown by javap --constants
    """

    cpool = field.cpool
    tag, val = cpool.get_const(field.get_constantvalue())
    desc = field.get_descriptor()

    if tag == CONST_String:
        return "\"%s\"" % escape_string(cpool.utf8(val))

    elif tag == CONST_Integer:
        if desc == "Z":
            return "true" if val else "false"
        elif desc == "C":
            return "'%s'" % escape_string(chr(val & 0xffff))
        else:
            return "%i" % val

    elif tag == CONST_Long:
        return "%il" % val

    elif tag == CONST_Float:
        return java_float_str(val, single=True) + "f"

    elif tag == CONST_Double:
        return java_float_str(val) + "d"

    else:
        return _placeholder("constant value of type %i" % tag)


def _member_declaration(options, member):
    try:
        decl = member.pretty_descriptor()
    except ClassfileError as err:
        return "%s;" % _placeholder(err)

    if (options.constants and not member.is_method and
            member.is_final() and
            _value(member.attribs, "ConstantValue") is not None):
        decl = "%s = %s" % (decl, _resolve(_constant_value_text, member))

    return "%s;" % decl


def _render_member(out, options, member):
    indent = "    "

    out.append("  " + _member_declaration(options, member))

    if options.sigs:
        out.append("%sdescriptor: %s" %
                   (indent, _resolve(member.get_descriptor)))

    if options.verbose:
        out.append("%sflags: (0x%04x) %s" %
                   (indent, member.access_flags,
                    ", ".join(member.pretty_flag_names())))

    _attribute_errors(out, member.attribs, indent)

    if options.verbose:
        cv = _value(member.attribs, "ConstantValue")
        if cv is not None:
            out.append("%sConstantValue: %s" %
                       (indent, _const_comment(member.cpool, cv)))

    code = _value(member.attribs, "Code")
    if code is not None and (options.disassemble or options.lines or
                             options.locals):
        _render_code(out, options, member, code, indent)

    if options.verbose:
        _render_member_attributes(out, member, indent)


def _render_member_attributes(out, member, indent):
    cpool = member.cpool

    exceptions = _value(member.attribs, "Exceptions")
    if exceptions:
        out.append("%sExceptions:" % indent)
        names = (_resolve(cpool.class_name, e).replace("/", ".")
                 for e in exceptions)
        out.append("%s  throws %s" % (indent, ", ".join(names)))

    sig = _value(member.attribs, "Signature")
    if sig is not None:
        out.append(_with_comment("%sSignature: #%i" % (indent, sig),
                                 _resolve(cpool.utf8, sig)))

    params = _value(member.attribs, "MethodParameters")
    if params:
        out.append("%sMethodParameters:" % indent)
        out.append("%s  %-30s Flags" % (indent, "Name"))
        for n, f in params:
            name = _resolve(cpool.utf8, n) if n else "<no name>"
            flags = " ".join(x[4:].lower()
                             for x in flag_names(f, PARAMETER_FLAGS))
            out.append(("%s  %-30s %s" % (indent, name, flags)).rstrip())

    default = _value(member.attribs, "AnnotationDefault")
    if default is not None:
        out.append("%sAnnotationDefault:" % indent)
        out.append("%s  default_value: %s" % (indent, _element_text(default)))
        out.append("%s    %s" % (indent,
                                 _resolve(_element_value, cpool, default)))

    _render_annotations(out, cpool, member.attribs, indent)

    if member.attribs.get("Deprecated") is not None:
        out.append("%sDeprecated: true" % indent)

    if member.attribs.get("Synthetic") is not None:
        out.append("%sSynthetic: true" % indent)

    for attr in member.attribs:
        if attr.name and not attr.is_recognized():
            out.append("%s%s: length = 0x%X" % (indent, attr.name, len(attr)))


# -----
# Class


def _render_header(out, info):
    cpool = info.cpool
    major, minor = info.version

    out.append("  minor version: %i" % minor)
    out.append("  major version: %i" % major)
    out.append("  flags: (0x%04x) %s" %
               (info.access_flags,
                ", ".join(flag_names(info.access_flags, CLASS_FLAGS))))

    out.append(_with_comment("  this_class: #%i" % info.this_ref,
                             _resolve(cpool.class_name, info.this_ref)))

    if info.super_ref:
        out.append(_with_comment("  super_class: #%i" % info.super_ref,
                                 _resolve(cpool.class_name, info.super_ref)))
    else:
        out.append("  super_class: #0")

    out.append("  interfaces: %i, fields: %i, methods: %i, attributes: %i" %
               (len(info.interfaces), len(info.fields),
                len(info.methods), len(info.attribs)))


def _render_class_attributes(out, info):
    cpool = info.cpool
    attribs = info.attribs

    sourcefile = _value(attribs, "SourceFile")
    if sourcefile is not None:
        out.append("SourceFile: \"%s\"" % _resolve(cpool.utf8, sourcefile))

    sig = _value(attribs, "Signature")
    if sig is not None:
        out.append(_with_comment("Signature: #%i" % sig,
                                 _resolve(cpool.utf8, sig)))

    enclosing = _value(attribs, "EnclosingMethod")
    if enclosing is not None:
        text = "EnclosingMethod: #%i.#%i" % enclosing
        out.append(_with_comment(text, _resolve(info.get_enclosingmethod)))

    inners = _value(attribs, "InnerClasses")
    if inners:
        out.append("InnerClasses:")
        for inner in inners:
            out.append("  " + _inner_class_text(cpool, inner))

    host = _value(attribs, "NestHost")
    if host is not None:
        out.append("NestHost: class %s" % _resolve(cpool.class_name, host))

    for name in ("NestMembers", "PermittedSubclasses"):
        members = _value(attribs, name)
        if members:
            out.append("%s:" % name)
            for m in members:
                out.append("  %s" % _resolve(cpool.class_name, m))

    bootstraps = _value(attribs, "BootstrapMethods")
    if bootstraps:
        out.append("BootstrapMethods:")
        for index, bsm in enumerate(bootstraps):
            out.append("  %i: #%i %s" %
                       (index, bsm.method_ref,
                        _resolve(cpool.pretty_deref_const, bsm.method_ref)))
            out.append("    Method arguments:")
            for arg in bsm.arguments:
                out.append("      #%i %s" %
                           (arg, _resolve(cpool.pretty_deref_const, arg)))

    ext = _value(attribs, "SourceDebugExtension")
    if ext is not None:
        out.append("SourceDebugExtension:")
        for line in ext.splitlines():
            out.append("  %s" % line)

    module = _value(attribs, "Module")
    if module is not None:
        _render_module(out, cpool, module)

    packages = _value(attribs, "ModulePackages")
    if packages:
        out.append("ModulePackages:")
        for p in packages:
            out.append(_with_comment("  #%i" % p,
                                     _resolve(cpool.package_name, p)))

    main = _value(attribs, "ModuleMainClass")
    if main is not None:
        out.append(_with_comment("ModuleMainClass: #%i" % main,
                                 _resolve(cpool.class_name, main)))

    components = _value(attribs, "Record")
    if components:
        _render_record(out, cpool, components)

    _render_annotations(out, cpool, attribs, "")

    if attribs.get("Deprecated") is not None:
        out.append("Deprecated: true")

    if attribs.get("Synthetic") is not None:
        out.append("Synthetic: true")

    for attr in attribs:
        if attr.name and not attr.is_recognized():
            out.append("%s: length = 0x%X" % (attr.name, len(attr)))


def _module_entry(indent, ref, flags, name, table):
    comment = "\"%s\"" % name
    names = flag_names(flags, table)
    if names:
        comment = "%s %s" % (comment, " ".join(names))
    return _with_comment("%s#%i,%x" % (indent, ref, flags), comment)


def _module_version(out, cpool, indent, ref):
    if ref:
        out.append(_with_comment("%s#%i" % (indent, ref),
                                 _resolve(cpool.utf8, ref)))
    else:
        out.append("%s0" % indent)


def _render_module(out, cpool, module):
    out.append("Module:")
    out.append(_module_entry("  ", module.name_ref, module.flags,
                             _resolve(cpool.module_name, module.name_ref),
                             MODULE_FLAGS))
    _module_version(out, cpool, "  ", module.version_ref)

    out.append(_with_comment("  %i" % len(module.requires), "requires"))
    for ref, flags, version in module.requires:
        out.append(_module_entry("    ", ref, flags,
                                 _resolve(cpool.module_name, ref),
                                 REQUIRES_FLAGS))
        _module_version(out, cpool, "    ", version)

    for label, entries in (("exports", module.exports),
                           ("opens", module.opens)):
        out.append(_with_comment("  %i" % len(entries), label))
        for ref, flags, to in entries:
            out.append(_module_entry("    ", ref, flags,
                                     _resolve(cpool.package_name, ref),
                                     EXPORTS_FLAGS))
            if to:
                out.append(_with_comment("    %i" % len(to), "to"))
                for t in to:
                    out.append(_with_comment(
                        "      #%i" % t, _resolve(cpool.module_name, t)))

    out.append(_with_comment("  %i" % len(module.uses), "uses"))
    for ref in module.uses:
        out.append(_with_comment("    #%i" % ref,
                                 _resolve(cpool.class_name, ref)))

    out.append(_with_comment("  %i" % len(module.provides), "provides"))
    for ref, impls in module.provides:
        out.append(_with_comment("    #%i" % ref,
                                 _resolve(cpool.class_name, ref)))
        out.append(_with_comment("    %i" % len(impls), "with"))
        for i in impls:
            out.append(_with_comment("      #%i" % i,
                                     _resolve(cpool.class_name, i)))


def _module_directives(module):
    """
    the source-like directives of a module declaration
    """

    lines = list()

    for name, flags, _version in module.get_requires():
        words = ["requires"]
        if flags & ACC_TRANSITIVE:
            words.append("transitive")
        if flags & ACC_STATIC_PHASE:
            words.append("static")
        words.append(name)
        lines.append("%s;" % " ".join(words))

    for keyword, entries in (("exports", module.get_exports()),
                             ("opens", module.get_opens())):
        for package, _flags, to in entries:
            text = "%s %s" % (keyword, package.replace("/", "."))
            if to:
                text = "%s to %s" % (text, ", ".join(to))
            lines.append("%s;" % text)

    for service in module.get_uses():
        lines.append("uses %s;" % service.replace("/", "."))

    for service, impls in module.get_provides():
        lines.append("provides %s with %s;" %
                     (service.replace("/", "."),
                      ", ".join(i.replace("/", ".") for i in impls)))

    return lines


def _render_record(out, cpool, components):
    out.append("Record:")
    for comp in components:
        try:
            decl = "%s %s;" % (pretty_type_descriptor(comp.get_descriptor()),
                               comp.get_name())
        except ClassfileError as err:
            decl = "%s;" % _placeholder(err)

        out.append("  %s" % decl)
        out.append("    descriptor: %s" %
                   _resolve(cpool.utf8, comp.descriptor_ref))

        _attribute_errors(out, comp.attribs, "    ")

        sig = _value(comp.attribs, "Signature")
        if sig is not None:
            out.append(_with_comment("    Signature: #%i" % sig,
                                     _resolve(cpool.utf8, sig)))

        _render_annotations(out, cpool, comp.attribs, "    ")
        out.append("")


def _inner_class_text(cpool, inner):
    flags = " ".join(x[4:].lower() for x in flag_names(
        inner.access_flags, _INNER_KEYWORDS))

    if inner.name_ref and inner.outer_info_ref:
        text = "#%i= #%i of #%i;" % (inner.name_ref, inner.inner_info_ref,
                                     inner.outer_info_ref)
        comment = "%s=class %s of class %s" % (
            _resolve(cpool.utf8, inner.name_ref),
            _resolve(cpool.class_name, inner.inner_info_ref),
            _resolve(cpool.class_name, inner.outer_info_ref))
    else:
        text = "#%i;" % inner.inner_info_ref
        comment = "class %s" % _resolve(cpool.class_name,
                                        inner.inner_info_ref)

    if flags:
        text = "%s %s" % (flags, text)

    return _with_comment(text, comment)


# the inner class flags javap shows as keywords
_INNER_KEYWORDS = (
    (0x0001, "ACC_PUBLIC"),
    (0x0002, "ACC_PRIVATE"),
    (0x0004, "ACC_PROTECTED"),
    (0x0008, "ACC_STATIC"),
    (0x0010, "ACC_FINAL"),
    (0x0400, "ACC_ABSTRACT"),
)


def _class_declaration(info):
    try:
        return info.pretty_descriptor()
    except ClassfileError as err:
        return "class %s" % _placeholder(err)


def render(info, options=None):
    """
    the javap output for the given JavaClassInfo as a list of lines,
    without line terminators
    """

    if options is None:
        options = JavapOptions()

    out = list()

    for warning in info.warnings:
        out.append("Warning: %s" % warning)

    sourcefile = _value(info.attribs, "SourceFile")
    if sourcefile is not None:
        out.append("Compiled from \"%s\"" %
                   _resolve(info.cpool.utf8, sourcefile))

    decl = _class_declaration(info)

    if options.verbose:
        out.append(decl)
        _render_header(out, info)
        _render_constant_pool(out, info.cpool)
        out.append("{")
    else:
        out.append(decl + " {")

    _attribute_errors(out, info.attribs, "  ")

    module = _value(info.attribs, "Module")
    if module is not None:
        try:
            directives = _module_directives(module)
        except ClassfileError as err:
            directives = [_placeholder(err)]
        for line in directives:
            out.append("  %s" % line)

    shown = [m for m in info.fields if should_show(options, m)]
    shown.extend(m for m in info.methods if should_show(options, m))

    for index, member in enumerate(shown):
        if index and options.details():
            out.append("")
        _render_member(out, options, member)

    out.append("}")

    if options.verbose:
        _render_class_attributes(out, info)

    return out


def print_class(info, options=None, out=None):
    """
    write the rendered lines of info to out, or stdout by default
    """

    if out is None:
        out = sys.stdout

    for line in render(info, options):
        print(line, file=out)


#
# The end.
