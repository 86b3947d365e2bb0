import struct


# Container (.arc) layout, little endian
# header: entry_table_offset u16, entry_stride u16, reserved u32, file_count u32
ARC_HEADER_STRUCT = struct.Struct("<HHII")
# pointer row: relative_offset u32, size u32
ARC_POINTER_STRUCT = struct.Struct("<II")

ARC_HEADER_SIZE = ARC_HEADER_STRUCT.size  # 12
ARC_ENTRY_TABLE_OFFSET = ARC_HEADER_SIZE
ARC_ENTRY_STRIDE = ARC_POINTER_STRUCT.size  # 8
ARC_RESERVED = 0

# Type sniffer
SNIFF_WINDOW = 4
TAG_BINARY = "bin"


# Text section layout, little endian
TEXT_MAGIC = b"TEXT"
# header: magic[4], count u32
TEXT_HEADER_STRUCT = struct.Struct("<4sI")
# row: length i32, absolute_offset i32
TEXT_ROW_STRUCT = struct.Struct("<ii")
TEXT_TERMINATOR = b"\x00"

# Code points at or above this value are reported as unmapped
UNMAPPED_THRESHOLD = 128
