"""
YAML resource configuration for protogen.

A configuration lists the resources to generate, in output order. Each
resource ties one binapi message to a proto message and, optionally, a
list-wrapper message. When no configuration file is present the built-in
``default_config()`` is used instead.
"""

import yaml
from dataclasses import dataclass, field
from typing import Optional, Tuple


class ValidationError(Exception):
    """Raised when a configuration file fails validation."""
    pass


@dataclass(frozen=True)
class FieldMapping:
    """Override of the proto field name generated for one binapi field."""
    binapi_field: str
    proto_field: str
    converter: str = ""


@dataclass(frozen=True)
class ResourceMapping:
    """One resource: binapi message → proto message (+ optional list)."""
    name: str
    binapi_message: str = ""   # empty: schema-only, nothing is generated
    proto_message: str = ""
    list_message: str = ""
    fields: Tuple[FieldMapping, ...] = ()

    def find_field(self, binapi_field: str) -> Optional[FieldMapping]:
        for mapping in self.fields:
            if mapping.binapi_field == binapi_field:
                return mapping
        return None


@dataclass(frozen=True)
class Config:
    resources: Tuple[ResourceMapping, ...] = field(default_factory=tuple)

    def find_resource(self, name: str) -> Optional[ResourceMapping]:
        for resource in self.resources:
            if resource.name == name:
                return resource
        return None

    def find_resource_by_binapi(self, binapi_message: str) -> Optional[ResourceMapping]:
        for resource in self.resources:
            if resource.binapi_message == binapi_message:
                return resource
        return None


def _require(data: dict, key: str, context: str) -> object:
    """Require a key in a dict, raising ValidationError if missing."""
    if key not in data or data[key] is None:
        raise ValidationError(
            f"Missing required field '{key}' in {context}"
        )
    return data[key]


def _optional_str(data: dict, key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _parse_field_mapping(data: object, context: str) -> FieldMapping:
    if not isinstance(data, dict):
        raise ValidationError(f"{context} must be a mapping")
    return FieldMapping(
        binapi_field=str(_require(data, "binapi_field", context)),
        proto_field=str(_require(data, "proto_field", context)),
        converter=_optional_str(data, "converter"),
    )


def _parse_resource(data: object, index: int) -> ResourceMapping:
    context = f"resources[{index}]"
    if not isinstance(data, dict):
        raise ValidationError(f"{context} must be a mapping")

    name = str(_require(data, "name", context))

    fields_section = data.get("fields")
    if fields_section is None:
        fields_section = []
    if not isinstance(fields_section, list):
        raise ValidationError(f"'fields' in resource '{name}' must be a list")

    fields = tuple(
        _parse_field_mapping(item, f"resource '{name}' fields[{i}]")
        for i, item in enumerate(fields_section)
    )

    return ResourceMapping(
        name=name,
        binapi_message=_optional_str(data, "binapi_message"),
        proto_message=_optional_str(data, "proto_message"),
        list_message=_optional_str(data, "list_message"),
        fields=fields,
    )


def parse_config_yaml(yaml_str: str) -> Config:
    """Parse a YAML configuration string into a Config.

    Args:
        yaml_str: YAML string with a top-level ``resources`` list.

    Returns:
        Config with resources in file order. An empty document yields a
        Config with no resources.

    Raises:
        ValidationError: If the YAML is malformed, a resource lacks a name,
            or two resources share a name.
    """
    try:
        data = yaml.safe_load(yaml_str)
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML: {e}")

    if data is None:
        return Config()

    if not isinstance(data, dict):
        raise ValidationError("YAML root must be a mapping")

    resources_section = data.get("resources")
    if resources_section is None:
        return Config()
    if not isinstance(resources_section, list):
        raise ValidationError("'resources' must be a list")

    resources = []
    seen = set()
    for index, item in enumerate(resources_section):
        resource = _parse_resource(item, index)
        if resource.name in seen:
            raise ValidationError(f"Duplicate resource name '{resource.name}'")
        seen.add(resource.name)
        resources.append(resource)

    return Config(resources=tuple(resources))


def load_config(path: str) -> Config:
    """Load a configuration file. FileNotFoundError propagates to the caller."""
    with open(path, encoding="utf-8") as f:
        yaml_str = f.read()
    return parse_config_yaml(yaml_str)


def default_config() -> Config:
    """Built-in resource list used when no configuration file exists."""
    return Config(resources=(
        ResourceMapping("interfaces", "SwInterfaceDetails", "Interface", "InterfaceList"),
        ResourceMapping("neighbors", "IPNeighborDetails", "Neighbor", "NeighborList"),
        ResourceMapping("fib", "IPRouteV2Details", "FIBEntry", "FIBList"),
        ResourceMapping("acl", "ACLDetails", "ACLEntry", "ACLList"),
        ResourceMapping("memif", "MemifDetails", "MemifEntry", "MemifList"),
        ResourceMapping("srv6", "SrLocalsidDetails", "SRv6Entry", "SRv6List"),
        ResourceMapping("version", "ShowVersionReply", "VersionInfo", ""),
        ResourceMapping("hardware", "", "HardwareInfo", ""),
        ResourceMapping("ip_addresses", "IPAddressDetails", "IPAddressEntry", "IPAddressList"),
        ResourceMapping("l2_fib", "L2FibTableDetails", "L2FIBEntry", "L2FIBList"),
        ResourceMapping("bridge_domains", "BridgeDomainDetails", "BridgeDomainEntry", "BridgeDomainList"),
        ResourceMapping("vxlan", "VxlanTunnelDetails", "VXLANEntry", "VXLANList"),
    ))
