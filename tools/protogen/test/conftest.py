"""Shared fixtures for protogen tests."""

import pytest
import sys
import os

# Add the project root to sys.path so 'tools.protogen' is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "..", ".."))

from tools.protogen.config import parse_config_yaml


INTERFACE_BA_GO = """\
// Code generated by GoVPP's binapi-generator. DO NOT EDIT.

// Package interfaces contains generated bindings for API file interface.api.
package interfaces

import (
	"strconv"

	api "go.fd.io/govpp/api"
	ethernet_types "go.fd.io/govpp/binapi/ethernet_types"
	interface_types "go.fd.io/govpp/binapi/interface_types"
	codec "go.fd.io/govpp/codec"
)

// This is a compile-time assertion to ensure that this generated file
// is compatible with the GoVPP api package it is being compiled against.
const _ = api.GoVppAPIPackageIsVersion2

const (
	APIFile    = "interface"
	APIVersion = "3.2.2"
	VersionCrc = 0xf3e1b1c9
)

type (
	// LinkDuplex defines enum 'link_duplex'.
	LinkDuplex uint32
	MtuProto   uint32
)

var LinkDuplex_name = map[uint32]string{
	0: "LINK_DUPLEX_API_UNKNOWN",
	1: "LINK_DUPLEX_API_HALF",
}

func (x LinkDuplex) String() string {
	s, ok := LinkDuplex_name[uint32(x)]
	if ok {
		return s
	}
	return "LinkDuplex(" + strconv.Itoa(int(x)) + ")"
}

// SwInterfaceDetails defines message 'sw_interface_details'.
type SwInterfaceDetails struct {
	SwIfIndex        interface_types.InterfaceIndex `binapi:"interface_index,name=sw_if_index" json:"sw_if_index,omitempty"`
	SupSwIfIndex     uint32                         `binapi:"u32,name=sup_sw_if_index" json:"sup_sw_if_index,omitempty"`
	L2Address        ethernet_types.MacAddress      `binapi:"mac_address,name=l2_address" json:"l2_address,omitempty"`
	Flags            interface_types.IfStatusFlags  `binapi:"if_status_flags,name=flags" json:"flags,omitempty"`
	LinkDuplex       LinkDuplex                     `binapi:"link_duplex,name=link_duplex" json:"link_duplex,omitempty"`
	LinkMtu          uint16                         `binapi:"u16,name=link_mtu" json:"link_mtu,omitempty"`
	Mtu              []uint32                       `binapi:"u32[4],name=mtu" json:"mtu,omitempty"`
	SubNumberOfTags  uint8                          `binapi:"u8,name=sub_number_of_tags" json:"sub_number_of_tags,omitempty"`
	InterfaceName    string                         `binapi:"string[64],name=interface_name" json:"interface_name,omitempty"`
	Tag              string                         `binapi:"string[64],name=tag" json:"tag,omitempty"`
}

func (m *SwInterfaceDetails) Reset()               { *m = SwInterfaceDetails{} }
func (*SwInterfaceDetails) GetMessageName() string { return "sw_interface_details" }

func (m *SwInterfaceDetails) Size() (size int) {
	if m == nil {
		return 0
	}
	size += 4     // m.SwIfIndex
	size += 1 * 6 // m.L2Address
	size += 4 * 4 // m.Mtu
	return size
}

func (m *SwInterfaceDetails) Unmarshal(b []byte) error {
	buf := codec.NewBuffer(b)
	m.SwIfIndex = interface_types.InterfaceIndex(buf.DecodeUint32())
	copy(m.L2Address[:], buf.DecodeBytes(6))
	m.Mtu = make([]uint32, 4)
	for i := 0; i < len(m.Mtu); i++ {
		m.Mtu[i] = buf.DecodeUint32()
	}
	m.InterfaceName = buf.DecodeString(64)
	return nil
}

// SwInterfaceDump defines message 'sw_interface_dump'.
type SwInterfaceDump struct {
	SwIfIndex interface_types.InterfaceIndex `binapi:"interface_index,name=sw_if_index,default=4294967295" json:"sw_if_index,omitempty"`
}

// SwInterfaceSetFlagsReply defines message 'sw_interface_set_flags_reply'.
type SwInterfaceSetFlagsReply struct {
	Retval int32 `binapi:"i32,name=retval" json:"retval,omitempty"`
}

func init() { file_interfaces_binapi_init() }
func file_interfaces_binapi_init() {
	api.RegisterMessage((*SwInterfaceDetails)(nil), "sw_interface_details_6c221fc7")
}
"""


VPE_BA_GO = """\
package vpe

// ShowVersionReply defines message 'show_version_reply'.
type ShowVersionReply struct {
	Retval         int32  `binapi:"i32,name=retval" json:"retval,omitempty"`
	Program        string `binapi:"string[32],name=program" json:"program,omitempty"`
	Version        string `binapi:"string[32],name=version" json:"version,omitempty"`
	BuildDate      string `binapi:"string[32],name=build_date" json:"build_date,omitempty"`
	BuildDirectory string `binapi:"string[256],name=build_directory" json:"build_directory,omitempty"`
}
"""


CONFIG_YAML = """\
resources:
  - name: interfaces
    binapi_message: SwInterfaceDetails
    proto_message: Interface
    list_message: InterfaceList
    fields:
      - binapi_field: SwIfIndex
        proto_field: index
      - binapi_field: L2Address
        proto_field: mac_address
        converter: macToString
  - name: version
    binapi_message: ShowVersionReply
    proto_message: VersionInfo
  - name: hardware
    proto_message: HardwareInfo
  - name: neighbors
    binapi_message: IPNeighborDetails
    proto_message: Neighbor
    list_message: NeighborList
"""


@pytest.fixture
def interface_source():
    """binapi interface.ba.go excerpt."""
    return INTERFACE_BA_GO


@pytest.fixture
def config():
    """Parsed CONFIG_YAML."""
    return parse_config_yaml(CONFIG_YAML)


@pytest.fixture
def config_yaml():
    return CONFIG_YAML


@pytest.fixture
def binapi_tree(tmp_path):
    """A binapi tree with two packages, a non-binapi file and a broken file."""
    root = tmp_path / "binapi"
    (root / "interface").mkdir(parents=True)
    (root / "vpe").mkdir()
    (root / "broken").mkdir()
    (root / "interface" / "interface.ba.go").write_text(INTERFACE_BA_GO)
    (root / "vpe" / "vpe.ba.go").write_text(VPE_BA_GO)
    (root / "vpe" / "vpe_rpc.go").write_text(
        "package vpe\n\ntype ShowVersionReply struct { Other uint8 }\n")
    (root / "broken" / "broken.ba.go").write_text(
        "package broken\n\ntype IPNeighborDetails struct {\n\tAge uint32 `json:\"age\"\n")
    return root
