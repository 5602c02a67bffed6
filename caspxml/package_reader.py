"""
package_reader.py

Minimal reader for Sims 4 .package (DBPF 2.x) containers.

Header (96 bytes, little endian):
  00 : magic "DBPF"
  04 : major version (2)
  08 : minor version (1)
  24 : index entry count
  28 : index offset (legacy, only used when 40 is zero)
  2C : index size
  40 : index position

Index:
  u32 flags. bit 0 = type constant, bit 1 = group constant,
  bit 2 = instance high constant. The constant values follow in that order.

  Per entry, the non constant fields of (type, group, instance_hi), then
  instance_lo, position, file_size, mem_size. When bit 31 of file_size is set
  the entry is extended and carries u16 compression + u16 committed.

Only reading is supported, nothing here writes packages.
"""

import os
import struct
import logging
from collections import namedtuple
from dataclasses import dataclass

from .constants import (
    CASP_RESOURCE_TYPE,
    COMPRESSION_NONE,
    COMPRESSION_DELETED,
)
from .errors import PackageError

logger = logging.getLogger("CaspXml")

HEADER_SIZE = 96
DBPF_MAGIC = b"DBPF"

ResourceKey = namedtuple('ResourceKey', ['type', 'group', 'instance'])


@dataclass(frozen=True)
class ResourceRecord:
    key: ResourceKey
    payload: bytes
    compression: int = COMPRESSION_NONE
    size_decompressed: int = 0

    @property
    def type(self):
        return self.key.type

    @property
    def group(self):
        return self.key.group

    @property
    def instance(self):
        return self.key.instance


class _Cursor:
    def __init__(self, data, offset, end):
        self.data = data
        self.offset = offset
        self.end = end

    def u32(self):
        if self.offset + 4 > self.end:
            raise PackageError(f"Index truncated at offset {self.offset:#x}")
        value = struct.unpack_from('<I', self.data, self.offset)[0]
        self.offset += 4
        return value

    def u16(self):
        if self.offset + 2 > self.end:
            raise PackageError(f"Index truncated at offset {self.offset:#x}")
        value = struct.unpack_from('<H', self.data, self.offset)[0]
        self.offset += 2
        return value


def _read_header(data):
    if len(data) < HEADER_SIZE:
        raise PackageError(f"File too small for a DBPF header ({len(data)} bytes)")
    if data[:4] != DBPF_MAGIC:
        raise PackageError(f"Bad magic {data[:4]!r}, not a DBPF package")

    major, minor = struct.unpack_from('<II', data, 4)
    if major != 2:
        raise PackageError(f"Unsupported DBPF version {major}.{minor}")

    entry_count = struct.unpack_from('<I', data, 0x24)[0]
    legacy_offset = struct.unpack_from('<I', data, 0x28)[0]
    index_size = struct.unpack_from('<I', data, 0x2C)[0]
    index_position = struct.unpack_from('<I', data, 0x40)[0]
    if index_position == 0:
        index_position = legacy_offset

    return entry_count, index_position, index_size


def parse_package(data):
    """Parse a whole package held in memory into a list of ResourceRecord"""
    entry_count, index_position, index_size = _read_header(data)
    if entry_count == 0:
        return []

    index_end = index_position + index_size
    if index_position < HEADER_SIZE or index_end > len(data):
        raise PackageError(
            f"Index at {index_position:#x} (+{index_size}) lies outside the file ({len(data)} bytes)"
        )

    cur = _Cursor(data, index_position, index_end)
    flags = cur.u32()
    const_type = cur.u32() if flags & 0x1 else None
    const_group = cur.u32() if flags & 0x2 else None
    const_inst_hi = cur.u32() if flags & 0x4 else None

    records = []
    for _ in range(entry_count):
        res_type = const_type if const_type is not None else cur.u32()
        group = const_group if const_group is not None else cur.u32()
        inst_hi = const_inst_hi if const_inst_hi is not None else cur.u32()
        inst_lo = cur.u32()
        position = cur.u32()
        file_size = cur.u32()
        mem_size = cur.u32()

        compression = COMPRESSION_NONE
        if file_size & 0x80000000:
            compression = cur.u16()
            cur.u16()  # committed
            file_size &= 0x7FFFFFFF

        if compression == COMPRESSION_DELETED:
            continue

        if position + file_size > len(data):
            raise PackageError(
                f"Resource {res_type:08X}:{group:08X}:{inst_hi:08X}{inst_lo:08X} runs past end of file"
            )

        key = ResourceKey(res_type, group, (inst_hi << 32) | inst_lo)
        records.append(ResourceRecord(
            key=key,
            payload=bytes(data[position:position + file_size]),
            compression=compression,
            size_decompressed=mem_size,
        ))

    return records


def read_package(path):
    with open(path, 'rb') as f:
        data = f.read()
    records = parse_package(data)
    logger.debug(f"{os.path.basename(path)}: {len(records)} resource(s)")
    return records


def iter_cas_parts(records):
    for record in records:
        if record.type == CASP_RESOURCE_TYPE:
            yield record
