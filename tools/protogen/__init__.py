"""
protogen: proto schema generator for VPP binapi bindings.

Scans GoVPP-generated binapi sources (*.ba.go), picks the Details/Reply
message structs listed in the resource configuration, and emits matching
proto3 messages plus optional Go converter functions.
"""
