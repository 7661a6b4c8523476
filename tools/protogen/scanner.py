"""
Scanner: walks a binapi source tree and extracts the configured message structs.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Iterator, List

from .config import Config
from .lexer import tokenize
from .parser import (
    ArrayType,
    MapType,
    NamedType,
    Parser,
    QualifiedType,
    StructType,
    TypeExpr,
)

BINAPI_SUFFIX = ".ba.go"
MESSAGE_SUFFIXES = ("Details", "Reply")
UNKNOWN_TYPE = "unknown"


@dataclass
class SourceField:
    name: str        # "SwIfIndex"
    type: str        # "interface_types.InterfaceIndex"
    tag: str = ""    # raw struct tag, backquotes included
    json_name: str = ""


@dataclass
class SourceType:
    name: str        # "SwInterfaceDetails"
    package: str     # "interfaces"
    fields: List[SourceField] = field(default_factory=list)
    is_details: bool = False
    is_reply: bool = False
    path: str = ""   # source file, relative to the binapi root


def type_string(expr: TypeExpr) -> str:
    """Render a type expression the way the type mapper expects it."""
    if isinstance(expr, NamedType):
        return expr.name
    if isinstance(expr, QualifiedType):
        return f"{expr.package}.{expr.name}"
    if isinstance(expr, ArrayType):
        # Fixed-size arrays and slices render alike.
        return f"[]{type_string(expr.elem)}"
    if isinstance(expr, MapType):
        return f"map[{type_string(expr.key)}]{type_string(expr.value)}"
    return UNKNOWN_TYPE


def json_name(tag: str) -> str:
    """
    Extract the JSON field name from a struct tag.

    `binapi:"u32,name=mtu" json:"mtu,omitempty"` -> "mtu". Returns an empty
    string when there is no json key.
    """
    for part in tag.strip("`").split(" "):
        if part.startswith("json:"):
            return part[len("json:"):].strip('"').split(",")[0]
    return ""


def extract_fields(struct: StructType) -> List[SourceField]:
    """Named fields in declaration order. Embedded fields are skipped."""
    fields: List[SourceField] = []
    for f in struct.fields:
        if not f.names:
            continue
        tag = f.tag or ""
        fields.append(SourceField(
            name=f.names[0],
            type=type_string(f.type),
            tag=tag,
            json_name=json_name(tag) if tag else "",
        ))
    return fields


def scan_file(text: str, config: Config, path: str = "") -> List[SourceType]:
    """
    Parse one binapi file and return the configured message structs in it.

    Raises SyntaxError if the file cannot be tokenized or parsed.
    """
    go_file = Parser(tokenize(text)).parse()

    found: List[SourceType] = []
    for spec in go_file.types:
        if not isinstance(spec.type, StructType):
            continue
        if not spec.name.endswith(MESSAGE_SUFFIXES):
            continue
        if config.find_resource_by_binapi(spec.name) is None:
            continue
        found.append(SourceType(
            name=spec.name,
            package=go_file.package,
            fields=extract_fields(spec.type),
            is_details=spec.name.endswith("Details"),
            is_reply=spec.name.endswith("Reply"),
            path=path,
        ))
    return found


def walk_files(path: str) -> Iterator[str]:
    """
    Yield every file under ``path`` in lexical order.

    Files and subdirectories of one directory are ordered together by name
    and each subdirectory is walked in place, so ``a/x.ba.go`` comes before
    ``z.ba.go``. A ``path`` that is not a directory yields itself.
    """
    if not os.path.isdir(path):
        yield path
        return
    with os.scandir(path) as it:
        entries = sorted(it, key=lambda entry: entry.name)
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            yield from walk_files(entry.path)
        else:
            yield entry.path


def scan_binapi(binapi_dir: str, config: Config) -> Dict[str, SourceType]:
    """
    Walk ``binapi_dir`` and collect configured structs keyed by name.

    ``binapi_dir`` may also name a single file. Files that cannot be read or
    parsed are skipped silently; a struct name seen twice keeps the one from
    the file walked last. Directory walk errors propagate.
    """
    types: Dict[str, SourceType] = {}

    for path in walk_files(binapi_dir):
        if not path.endswith(BINAPI_SUFFIX):
            continue
        if path == binapi_dir:
            rel_path = os.path.basename(path)
        else:
            rel_path = os.path.relpath(path, binapi_dir)
        try:
            with open(path, encoding="utf-8") as f:
                text = f.read()
            found = scan_file(text, config, rel_path)
        except (OSError, UnicodeDecodeError, SyntaxError):
            continue
        for source_type in found:
            types[source_type.name] = source_type

    return types
