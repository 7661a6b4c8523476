"""
Converter emitter: renders Go functions that copy binapi structs into the
generated proto messages.

Each value conversion follows the proto type chosen by ``proto_type()``, so
a field always converts to exactly the type declared in the .proto file.
"""

import os
import re
from typing import Dict, List, Optional, Tuple

from .config import Config, ResourceMapping
from .proto_emitter import DEFAULT_GO_PACKAGE, proto_field_name
from .scanner import UNKNOWN_TYPE, SourceField, SourceType
from .types import REPEATED, SPECIAL_TYPES, proto_type, pluralize, to_go_field_name

CONVERTERS_FILENAME = "converters_gen.go"
DEFAULT_BINAPI_IMPORT = "go.fd.io/govpp/binapi"
DEFAULT_GO_PACKAGE_NAME = "handler"

# proto scalar type → Go type generated by protoc-gen-go.
PROTO_GO_TYPES = {
    "uint32": "uint32",
    "int32":  "int32",
    "bool":   "bool",
    "string": "string",
    "double": "float64",
    "float":  "float32",
}

# Domain types that are rendered to text through their String() method.
STRINGER_TYPES = [needle for needle, mapped in SPECIAL_TYPES if mapped == "string"]

GO_BUILTIN_TYPES = {
    "bool", "byte", "rune", "string", "error", "any",
    "int", "int8", "int16", "int32", "int64",
    "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
    "float32", "float64", "complex64", "complex128",
}

_RE_SIMPLE_TYPE = re.compile(r"^[A-Za-z_]\w*(\.[A-Za-z_]\w*)?$")


def _go_ident(type_name: str) -> str:
    """ip_types.Address -> IpTypesAddress."""
    parts = re.split(r"[^A-Za-z0-9]+", type_name)
    return "".join(p[:1].upper() + p[1:] for p in parts if p)


class ConverterEmitter:
    """
    Renders one converters file.

    Tracks the imports and slice helpers the rendered functions need so they
    can be written once, after all resources have been visited.
    """

    def __init__(self, binapi_import: str = DEFAULT_BINAPI_IMPORT):
        self.binapi_import = binapi_import.rstrip("/")
        self.imports: Dict[str, str] = {}   # alias -> import path
        self.helpers: Dict[str, str] = {}   # helper name -> source
        self.uses_fmt = False

    # ── Imports ──────────────────────────────────────────────────────

    def _import_source(self, source_type: SourceType):
        rel_dir = os.path.dirname(source_type.path).replace(os.sep, "/")
        path = f"{self.binapi_import}/{rel_dir}" if rel_dir else self.binapi_import
        self.imports.setdefault(source_type.package, path)

    def _qualify(self, go_type: str, package: str) -> str:
        """Qualify a simple type name declared in the binapi package itself."""
        if "." in go_type:
            alias = go_type.split(".", 1)[0]
            self.imports.setdefault(alias, f"{self.binapi_import}/{alias}")
            return go_type
        if go_type in GO_BUILTIN_TYPES:
            return go_type
        return f"{package}.{go_type}"

    # ── Value expressions ────────────────────────────────────────────

    def scalar_expr(self, go_type: str, proto_t: str, value: str) -> str:
        dst = PROTO_GO_TYPES[proto_t]
        if go_type == dst:
            return value
        if proto_t == "string":
            if (not go_type.startswith("[]")
                    and any(needle in go_type for needle in STRINGER_TYPES)):
                return f"{value}.String()"
            self.uses_fmt = True
            return f"fmt.Sprint({value})"
        return f"{dst}({value})"

    def _slice_helper(self, elem_type: str, proto_elem: str) -> str:
        dst = PROTO_GO_TYPES[proto_elem]
        name = f"convert{_go_ident(elem_type)}SliceTo{_go_ident(dst)}"
        if name not in self.helpers:
            body = self.scalar_expr(elem_type, proto_elem, "v")
            self.helpers[name] = "\n".join([
                f"func {name}(in []{elem_type}) []{dst} {{",
                f"\tout := make([]{dst}, len(in))",
                "\tfor i, v := range in {",
                f"\t\tout[i] = {body}",
                "\t}",
                "\treturn out",
                "}",
            ])
        return name

    def value_expr(self, field: SourceField, resource: ResourceMapping,
                   package: str) -> Optional[str]:
        """Go expression converting ``in.<field>``, or None if there is none."""
        value = f"in.{field.name}"
        mapping = resource.find_field(field.name)
        if mapping is not None and mapping.converter:
            return f"{mapping.converter}({value})"

        proto_t = proto_type(field.type)
        if not proto_t.startswith(REPEATED):
            return self.scalar_expr(field.type, proto_t, value)

        proto_elem = proto_t[len(REPEATED):]
        elem_type = field.type[2:]
        if (proto_elem not in PROTO_GO_TYPES or elem_type == UNKNOWN_TYPE
                or not _RE_SIMPLE_TYPE.match(elem_type)):
            return None
        if elem_type == PROTO_GO_TYPES[proto_elem]:
            return f"{value}[:]"
        helper = self._slice_helper(self._qualify(elem_type, package), proto_elem)
        return f"{helper}({value}[:])"

    # ── Functions ────────────────────────────────────────────────────

    def emit_converter(self, source_type: SourceType, resource: ResourceMapping) -> str:
        self._import_source(source_type)
        pkg = source_type.package
        src = f"{pkg}.{source_type.name}"
        dst = f"pb.{resource.proto_message}"
        func = f"Convert{source_type.name}"

        lines = [
            f"// {func} converts {src} to {dst}.",
            f"func {func}(in *{src}) *{dst} {{",
            "\tif in == nil {",
            "\t\treturn nil",
            "\t}",
            f"\treturn &{dst}{{",
        ]
        for field in source_type.fields:
            go_name = to_go_field_name(proto_field_name(field.name, resource))
            expr = self.value_expr(field, resource, pkg)
            if expr is None:
                lines.append(f"\t\t// {go_name}: no conversion for {field.type}")
            else:
                lines.append(f"\t\t{go_name}: {expr},")
        lines.append("\t}")
        lines.append("}")
        lines.append("")

        if resource.list_message:
            list_dst = f"pb.{resource.list_message}"
            items = to_go_field_name(pluralize(resource.name))
            lines.extend([
                f"// {func}List wraps converted {src} messages in {list_dst}.",
                f"func {func}List(in []*{src}) *{list_dst} {{",
                f"\tout := &{list_dst}{{{items}: make([]*{dst}, 0, len(in))}}",
                "\tfor _, item := range in {",
                f"\t\tout.{items} = append(out.{items}, {func}(item))",
                "\t}",
                "\treturn out",
                "}",
                "",
            ])

        return "\n".join(lines) + "\n"

    def emit(self, types: Dict[str, SourceType], config: Config,
             go_package: str = DEFAULT_GO_PACKAGE,
             package_name: str = DEFAULT_GO_PACKAGE_NAME) -> str:
        """Render the complete converters file for ``config`` in order."""
        bodies: List[str] = []
        for resource in config.resources:
            if not resource.binapi_message:
                continue
            source_type = types.get(resource.binapi_message)
            if source_type is None:
                continue
            bodies.append(self.emit_converter(source_type, resource))

        out = [
            "// Code generated by protogen. DO NOT EDIT.",
            "",
            f"package {package_name}",
            "",
            "import (",
        ]
        if self.uses_fmt:
            out.append('\t"fmt"')
            out.append("")
        imports: List[Tuple[str, str]] = [("pb", go_package)]
        imports.extend(sorted(self.imports.items(), key=lambda kv: kv[1]))
        for alias, path in imports:
            out.append(f'\t{alias} "{path}"')
        out.append(")")
        out.append("")

        text = "\n".join(out) + "\n" + "".join(bodies)
        for name in sorted(self.helpers):
            text += self.helpers[name] + "\n\n"
        return text.rstrip("\n") + "\n"


def emit_converters(types: Dict[str, SourceType], config: Config,
                    go_package: str = DEFAULT_GO_PACKAGE,
                    binapi_import: str = DEFAULT_BINAPI_IMPORT,
                    package_name: str = DEFAULT_GO_PACKAGE_NAME) -> str:
    return ConverterEmitter(binapi_import).emit(types, config, go_package, package_name)


def write_converters(types: Dict[str, SourceType], config: Config, output_path: str,
                     go_package: str = DEFAULT_GO_PACKAGE,
                     binapi_import: str = DEFAULT_BINAPI_IMPORT) -> str:
    """Write the converters file to ``output_path`` and return the path."""
    os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
    code = emit_converters(types, config, go_package, binapi_import)
    with open(output_path, "w", encoding="utf-8", newline="\n") as f:
        f.write(code)
    return output_path
