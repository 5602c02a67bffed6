import zlib
import logging
from collections import namedtuple

from .constants import (
    CASP_NAME_OFFSET,
    UNKNOWN_NAME,
    COMPRESSION_NONE,
    COMPRESSION_ZLIB,
    COMPRESSION_INTERNAL,
    COMPRESSION_STREAMABLE,
)
from .errors import DecodeError

logger = logging.getLogger("CaspXml")


class DecodeResult(namedtuple('DecodeResult', ['name', 'error'])):
    __slots__ = ()

    @property
    def ok(self):
        return self.error is None


def _failed(reason):
    return DecodeResult(UNKNOWN_NAME, reason)


def extract_name(buffer):
    """UTF-16LE text at CASP_NAME_OFFSET up to the first NUL code unit"""
    raw = buffer[CASP_NAME_OFFSET:]
    # drop a dangling odd byte, it can't form a code unit
    raw = raw[:len(raw) - (len(raw) % 2)]
    text = raw.decode('utf-16-le', 'replace')
    return text.split('\x00', 1)[0]


def decode_name(payload):
    """
    Inflate a zlib compressed CASP payload and pull the embedded name.

    Returns DecodeResult(name, None) on success and
    DecodeResult("UNKNOWN", reason) when the payload doesn't inflate.
    A buffer shorter than the name offset gives an empty name.
    """
    try:
        buffer = zlib.decompress(payload)
    except zlib.error as e:
        logger.warning(f"Could not decompress payload ({len(payload)} bytes): {e}")
        return _failed(str(e))
    return DecodeResult(extract_name(buffer), None)


def inflate_payload(record):
    """Raw resource bytes for a record, by its compression type"""
    if record.compression == COMPRESSION_NONE:
        return record.payload
    if record.compression == COMPRESSION_ZLIB:
        try:
            return zlib.decompress(record.payload)
        except zlib.error as e:
            raise DecodeError(f"zlib error in {record.instance:016X}: {e}")
    if record.compression in (COMPRESSION_INTERNAL, COMPRESSION_STREAMABLE):
        raise DecodeError(f"RefPack compressed resource {record.instance:016X} is not supported")
    raise DecodeError(
        f"Unsupported compression {record.compression:#06x} in {record.instance:016X}"
    )


def decode_record_name(record):
    try:
        buffer = inflate_payload(record)
    except DecodeError as e:
        logger.warning(str(e))
        return _failed(str(e))
    return DecodeResult(extract_name(buffer), None)
