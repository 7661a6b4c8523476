"""
Proto emitter: renders proto3 message definitions for the configured resources.
"""

import os
import sys
from typing import Dict, List

from .config import Config, ResourceMapping
from .scanner import SourceType
from .types import proto_type, to_snake_case, pluralize

PROTO_FILENAME = "agent_generated.proto"
# Hand-maintained schema that may need the generated messages merged in.
MANUAL_PROTO_FILENAME = "agent.proto"

DEFAULT_PROTO_PACKAGE = "tnc.agent"
DEFAULT_GO_PACKAGE = "esba-tnc-api/proto"


def proto_field_name(field_name: str, resource: ResourceMapping) -> str:
    mapping = resource.find_field(field_name)
    if mapping is not None:
        return mapping.proto_field
    return to_snake_case(field_name)


def emit_message(source_type: SourceType, resource: ResourceMapping) -> str:
    lines = [f"// {resource.name} messages"]
    lines.append(f"message {resource.proto_message} {{")
    for num, field in enumerate(source_type.fields, start=1):
        name = proto_field_name(field.name, resource)
        lines.append(f"  {proto_type(field.type)} {name} = {num};")
    lines.append("}")
    lines.append("")
    return "\n".join(lines) + "\n"


def emit_list_message(resource: ResourceMapping) -> str:
    lines = [
        f"message {resource.list_message} {{",
        f"  repeated {resource.proto_message} {pluralize(resource.name)} = 1;",
        "}",
        "",
    ]
    return "\n".join(lines) + "\n"


def emit_proto(types: Dict[str, SourceType], config: Config,
               proto_package: str = DEFAULT_PROTO_PACKAGE,
               go_package: str = DEFAULT_GO_PACKAGE) -> str:
    """
    Render the complete generated .proto file.

    Resources are emitted in configuration order. A resource without a
    binapi message, or whose message was not found by the scanner, produces
    nothing.
    """
    parts: List[str] = [
        'syntax = "proto3";\n\n',
        f"package {proto_package};\n\n",
        f'option go_package = "{go_package}";\n\n',
        "// Auto-generated proto message definitions\n",
        "// Source: binapi Details/Reply messages\n\n",
    ]

    for resource in config.resources:
        if not resource.binapi_message:
            continue
        source_type = types.get(resource.binapi_message)
        if source_type is None:
            continue
        parts.append(emit_message(source_type, resource))
        if resource.list_message:
            parts.append(emit_list_message(resource))

    parts.append("\n// Auto-generated -- DO NOT EDIT by hand.\n")
    parts.append("// Regenerate with: python3 -m tools.protogen\n")
    return "".join(parts)


def write_proto(types: Dict[str, SourceType], config: Config, output_dir: str,
                proto_package: str = DEFAULT_PROTO_PACKAGE,
                go_package: str = DEFAULT_GO_PACKAGE) -> str:
    """Write ``agent_generated.proto`` into ``output_dir`` and return its path."""
    os.makedirs(output_dir, exist_ok=True)

    path = os.path.join(output_dir, PROTO_FILENAME)
    with open(path, "w", encoding="utf-8", newline="\n") as f:
        f.write(emit_proto(types, config, proto_package, go_package))

    manual = os.path.join(output_dir, MANUAL_PROTO_FILENAME)
    if os.path.exists(manual):
        print(f"\nWarning: hand-maintained proto file {manual} exists.",
              file=sys.stderr)
        print(f"  generated: {path}", file=sys.stderr)
        print("  Merge the generated messages into it manually if needed.",
              file=sys.stderr)

    return path
