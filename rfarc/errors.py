class RfarcError(Exception):
    """Base class for rfarc-specific errors."""


# Container related
class ArchiveError(RfarcError):
    pass


class TruncatedHeader(ArchiveError):
    def __init__(self, buffer_len: int):
        self.buffer_len = buffer_len
        super().__init__(f"Archive header truncated: {buffer_len} bytes, need 12")


class UnsupportedStride(ArchiveError):
    def __init__(self, stride: int):
        self.stride = stride
        super().__init__(f"Unsupported pointer table stride {stride} (only 8 is known)")


class CorruptArchive(ArchiveError):
    def __init__(self, index: int, offset: int, size: int, buffer_len: int):
        self.index = index
        self.offset = offset
        self.size = size
        self.buffer_len = buffer_len
        super().__init__(
            f"Pointer {index} out of range: offset=0x{offset:X} size={size} "
            f"exceeds buffer of {buffer_len} bytes"
        )


# Text section related
class TextSectionError(RfarcError):
    pass


class InvalidMagic(TextSectionError):
    def __init__(self, magic: bytes):
        self.magic = bytes(magic)
        super().__init__(f"Expected 'TEXT' magic at beginning of text section, got {self.magic!r}")


class CorruptTextSection(TextSectionError):
    def __init__(self, index: int, offset: int, length: int):
        self.index = index
        self.offset = offset
        self.length = length
        super().__init__(f"Text row {index} out of range: offset={offset} length={length}")


class Utf8DecodeError(TextSectionError):
    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Text row {index} is not valid UTF-8")


# Shell verification
class RoundTripMismatch(RfarcError):
    def __init__(self, offset: int, expected: int, actual: int):
        self.offset = offset
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Actual differs from expected @ 0x{offset:X}: E: 0x{expected:X} != A: 0x{actual:X}"
        )


class RoundTripLengthMismatch(RfarcError):
    def __init__(self, expected_len: int, actual_len: int):
        self.expected_len = expected_len
        self.actual_len = actual_len
        super().__init__(
            f"Expected length and actual length differ: Expected = {expected_len}b, Actual = {actual_len}b"
        )
