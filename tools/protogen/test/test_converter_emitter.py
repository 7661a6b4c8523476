"""Tests for the Go converter emitter."""

import os

import pytest

from tools.protogen.config import Config, FieldMapping, ResourceMapping
from tools.protogen.converter_emitter import (
    ConverterEmitter,
    emit_converters,
    write_converters,
)
from tools.protogen.scanner import SourceField, SourceType, scan_binapi


@pytest.fixture
def types(binapi_tree, config):
    return scan_binapi(str(binapi_tree), config)


def make_type(*fields, name="FooDetails", package="foo"):
    return SourceType(
        name=name,
        package=package,
        fields=[SourceField(n, t) for n, t in fields],
        is_details=True,
        path=os.path.join("foo", "foo.ba.go"),
    )


FOO = ResourceMapping("foo", "FooDetails", "Foo")


def render(source_type, resource=FOO):
    return emit_converters({source_type.name: source_type},
                           Config(resources=(resource,)))


# -- File layout ------------------------------------------------------------

class TestConvertersFile:
    def test_generated_header(self, types, config):
        code = emit_converters(types, config)
        assert code.startswith("// Code generated by protogen. DO NOT EDIT.\n")

    def test_package_clause(self, types, config):
        assert "\npackage handler\n" in emit_converters(types, config)

    def test_imports(self, types, config):
        code = emit_converters(types, config)
        assert '\t"fmt"\n' in code
        assert '\tpb "esba-tnc-api/proto"\n' in code
        assert '\tinterfaces "go.fd.io/govpp/binapi/interface"\n' in code
        assert '\tvpe "go.fd.io/govpp/binapi/vpe"\n' in code

    def test_custom_import_paths(self, types, config):
        code = emit_converters(types, config, go_package="example.com/pb",
                               binapi_import="example.com/binapi/")
        assert '\tpb "example.com/pb"\n' in code
        assert '\tvpe "example.com/binapi/vpe"\n' in code

    def test_no_fmt_when_unused(self):
        code = render(make_type(("Count", "uint32")))
        assert '"fmt"' not in code

    def test_configuration_order_and_skips(self, types, config):
        code = emit_converters(types, config)
        assert code.index("func ConvertSwInterfaceDetails(") < \
            code.index("func ConvertShowVersionReply(")
        assert "HardwareInfo" not in code
        assert "Neighbor" not in code

    def test_deterministic(self, types, config):
        assert emit_converters(types, config) == emit_converters(types, config)


# -- Functions --------------------------------------------------------------

class TestConverterFunctions:
    def test_signature(self, types, config):
        code = emit_converters(types, config)
        assert ("func ConvertSwInterfaceDetails(in *interfaces.SwInterfaceDetails) "
                "*pb.Interface {") in code

    def test_nil_guard(self, types, config):
        assert "\tif in == nil {\n\t\treturn nil\n\t}\n" in emit_converters(types, config)

    def test_field_conversions(self, types, config):
        code = emit_converters(types, config)
        assert "\t\tIndex: uint32(in.SwIfIndex),\n" in code
        assert "\t\tSupSwIfIndex: in.SupSwIfIndex,\n" in code
        assert "\t\tMacAddress: macToString(in.L2Address),\n" in code
        assert "\t\tFlags: uint32(in.Flags),\n" in code
        assert "\t\tLinkDuplex: fmt.Sprint(in.LinkDuplex),\n" in code
        assert "\t\tLinkMtu: uint32(in.LinkMtu),\n" in code
        assert "\t\tMtu: in.Mtu[:],\n" in code
        assert "\t\tInterfaceName: in.InterfaceName,\n" in code

    def test_list_function(self, types, config):
        code = emit_converters(types, config)
        assert ("func ConvertSwInterfaceDetailsList(in []*interfaces.SwInterfaceDetails) "
                "*pb.InterfaceList {") in code
        assert "out := &pb.InterfaceList{Interfaceses: make([]*pb.Interface, 0, len(in))}" in code
        assert "out.Interfaceses = append(out.Interfaceses, ConvertSwInterfaceDetails(item))" in code

    def test_no_list_function_without_list_message(self, types, config):
        assert "ConvertShowVersionReplyList" not in emit_converters(types, config)


class TestValueExpressions:
    def test_stringer_types(self):
        code = render(make_type(("Mac", "ethernet_types.MacAddress"),
                                ("Addr", "ip_types.Address")))
        assert "Mac: in.Mac.String()," in code
        assert "Addr: in.Addr.String()," in code

    def test_float_cast(self):
        code = render(make_type(("Rate", "float64"), ("Small", "float32")))
        assert "Rate: in.Rate," in code
        assert "Small: in.Small," in code

    def test_int64_goes_through_fmt(self):
        code = render(make_type(("Packets", "uint64")))
        assert "Packets: fmt.Sprint(in.Packets)," in code
        assert '\t"fmt"\n' in code

    def test_slice_of_addresses_uses_fmt(self):
        code = render(make_type(("Addrs", "[]ip_types.Address")))
        assert "Addrs: fmt.Sprint(in.Addrs)," in code

    def test_byte_array_helper(self):
        code = render(make_type(("Data", "[]uint8"), ("More", "[]uint8")))
        assert "Data: convertUint8SliceToUint32(in.Data[:])," in code
        assert "More: convertUint8SliceToUint32(in.More[:])," in code
        assert code.count("func convertUint8SliceToUint32(in []uint8) []uint32 {") == 1
        assert "\t\tout[i] = uint32(v)\n" in code

    def test_local_type_helper_is_qualified(self):
        code = render(make_type(("Modes", "[]Mode")))
        assert "func convertFooModeSliceToString(in []foo.Mode) []string {" in code
        assert "\t\tout[i] = fmt.Sprint(v)\n" in code

    def test_qualified_helper_imports_package(self):
        code = render(make_type(("Prefixes", "[]ip_types.Prefix")))
        assert "func convertIpTypesPrefixSliceToString(in []ip_types.Prefix) []string {" in code
        assert '\tip_types "go.fd.io/govpp/binapi/ip_types"\n' in code

    def test_nested_sequence_not_converted(self):
        code = render(make_type(("Grid", "[][]uint8")))
        assert "\t\t// Grid: no conversion for [][]uint8\n" in code

    def test_slice_of_unknown_not_converted(self):
        code = render(make_type(("Ptrs", "[]unknown")))
        assert "// Ptrs: no conversion for []unknown" in code

    def test_pointer_field_uses_fmt(self):
        code = render(make_type(("Ptr", "unknown")))
        assert "Ptr: fmt.Sprint(in.Ptr)," in code

    def test_configured_converter_wins(self):
        resource = ResourceMapping("foo", "FooDetails", "Foo", fields=(
            FieldMapping("Data", "payload", "bytesToHex"),))
        code = render(make_type(("Data", "[]uint8")), resource)
        assert "Payload: bytesToHex(in.Data)," in code
        assert "convertUint8Slice" not in code

    def test_rename_without_converter(self):
        resource = ResourceMapping("foo", "FooDetails", "Foo", fields=(
            FieldMapping("SwIfIndex", "if_index"),))
        code = render(make_type(("SwIfIndex", "uint32")), resource)
        assert "IfIndex: in.SwIfIndex," in code


class TestConverterEmitterState:
    def test_package_at_binapi_root(self):
        emitter = ConverterEmitter("example.com/binapi")
        source_type = SourceType("FooDetails", "foo", path="foo.ba.go")
        emitter.emit({"FooDetails": source_type}, Config(resources=(FOO,)))
        assert emitter.imports == {"foo": "example.com/binapi"}


class TestWriteConverters:
    def test_creates_parent_dir(self, tmp_path, types, config):
        out = tmp_path / "agent" / "handler" / "converters_gen.go"
        path = write_converters(types, config, str(out))
        assert path == str(out)
        assert out.read_text() == emit_converters(types, config)
