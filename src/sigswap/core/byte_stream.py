"""
Methods for reading fixed-width fields from byte streams
"""
from io import BytesIO
from typing import Union, Optional

from .exceptions import ReadError

__all__ = ["SERIALIZED", "get_stream", "read_stream", "expect_end"]

SERIALIZED = Union[bytes, BytesIO]


def get_stream(byte_stream: SERIALIZED):
    """Convert bytes or BytesIO to BytesIO stream"""
    if isinstance(byte_stream, (bytes, bytearray)):
        return BytesIO(bytes(byte_stream))
    elif isinstance(byte_stream, BytesIO):
        return byte_stream
    else:
        raise TypeError(f"Expected bytes or BytesIO but received: {type(byte_stream)}")


def read_stream(stream: BytesIO, length: int, data_type: Optional[str] = None) -> bytes:
    """Read exact number of bytes from stream with error checking"""
    data = stream.read(length)

    if len(data) != length:
        if data_type:
            raise ReadError(f"Error reading stream. Insufficient data. Data type: {data_type}")
        else:
            raise ReadError("Error reading stream. Insufficient data.")

    return data


def expect_end(stream: BytesIO, data_type: Optional[str] = None):
    """Raise a ReadError if the stream still holds data"""
    if stream.read(1):
        suffix = f" Data type: {data_type}" if data_type else ""
        raise ReadError(f"Error reading stream. Trailing data.{suffix}")
