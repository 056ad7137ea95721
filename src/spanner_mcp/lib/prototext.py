"""Protobuf helpers shared by the tools.

Spanner client libraries return proto-plus wrappers; text formatting and
descriptor handling need the underlying protobuf messages.
"""

import proto
from google.protobuf import text_format
from google.protobuf.descriptor_pb2 import FileDescriptorSet
from google.protobuf.message import DecodeError, Message

from spanner_mcp.models.error_types import MCPError


def to_pb(message) -> Message:
    """Return the raw protobuf message behind a proto-plus wrapper."""
    if isinstance(message, proto.Message):
        return type(message).pb(message)
    return message


def format_message(message) -> str:
    """Render a message in protobuf text format."""
    return text_format.MessageToString(to_pb(message))


def decode_file_descriptor_set(data: bytes) -> FileDescriptorSet:
    """Decode serialized proto descriptors, as returned with a database's DDL.

    Raises:
        MCPError: If the bytes are not a valid FileDescriptorSet
    """
    fds = FileDescriptorSet()
    try:
        fds.ParseFromString(data or b'')
    except DecodeError as e:
        raise MCPError(f"Failed to decode proto descriptors: {e}", recoverable=False)
    return fds
