"""
Type system: Go-to-proto type mapping and field/message naming helpers.
"""

# Go type spelling → proto type spelling.
# proto3 has no 8/16-bit integers, so narrow widths collapse to 32 bits.
TYPE_MAP = {
    "uint32":   "uint32",
    "uint16":   "uint32",
    "uint8":    "uint32",
    "int32":    "int32",
    "int16":    "int32",
    "int8":     "int32",
    "bool":     "bool",
    "string":   "string",
    "float64":  "double",
    "float32":  "float",
    "[]uint32": "repeated uint32",
    "[]string": "repeated string",
}

# Known binapi domain types, matched by substring in this order.
SPECIAL_TYPES = [
    ("interface_types.InterfaceIndex", "uint32"),
    ("interface_types.IfStatusFlags",  "uint32"),
    ("ethernet_types.MacAddress",      "string"),  # rendered via .String()
    ("ip_types.Address",               "string"),  # rendered via .String()
]

REPEATED = "repeated "
FALLBACK_TYPE = "string"


def proto_type(go_type: str) -> str:
    """
    Map a Go type string (as produced by the scanner) to a proto type.

    Rules are applied in order: direct table, domain substrings, sequences,
    then the ``string`` fallback. Unknown types are never an error.
    """
    if go_type in TYPE_MAP:
        return TYPE_MAP[go_type]

    for needle, mapped in SPECIAL_TYPES:
        if needle in go_type:
            return mapped

    if go_type.startswith("[]"):
        return REPEATED + proto_type(go_type[2:])

    return FALLBACK_TYPE


def to_snake_case(name: str) -> str:
    """SwIfIndex -> sw_if_index. Every capital after the first gets an underscore."""
    out = []
    for i, ch in enumerate(name):
        if i > 0 and "A" <= ch <= "Z":
            out.append("_")
        out.append(ch)
    return "".join(out).lower()


def pluralize(word: str) -> str:
    if word.endswith("y"):
        return word[:-1] + "ies"
    if word.endswith("s") or word.endswith("x"):
        return word + "es"
    return word + "s"


def to_go_field_name(proto_field: str) -> str:
    """
    Name protoc-gen-go gives a proto field in the generated Go struct.

    Each run of lowercase letters starts with a capital and an underscore
    before a lowercase letter is dropped: sw_if_index -> SwIfIndex,
    i_d -> ID, ip4_addr -> Ip4Addr. A leading underscore becomes ``X``.
    """
    out = []
    i = 0
    n = len(proto_field)
    while i < n:
        ch = proto_field[i]
        if ch == "_" and i == 0:
            out.append("X")
        elif ch == "_" and i + 1 < n and _is_lower(proto_field[i + 1]):
            pass
        elif "0" <= ch <= "9":
            out.append(ch)
        else:
            out.append(ch.upper() if _is_lower(ch) else ch)
            while i + 1 < n and _is_lower(proto_field[i + 1]):
                i += 1
                out.append(proto_field[i])
        i += 1
    return "".join(out)


def _is_lower(ch: str) -> bool:
    return "a" <= ch <= "z"
