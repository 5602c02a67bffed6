import struct
import zlib

import pytest

CASP = 0x034AEECB
ZLIB = 0x5A42


def casp_payload(name, tail=b'\x01\x02\x03\x04'):
    """Uncompressed CASP body: 12 header bytes then the UTF-16LE name"""
    return b'\x2c\x00\x00\x00' + b'\x00' * 8 + name.encode('utf-16-le') + b'\x00\x00' + tail


def build_package(entries, const_type=None, const_group=None, const_inst_hi=None, legacy_offset=False):
    """
    entries: (type, group, instance, raw_bytes, compress)
    Returns bytes of a DBPF 2.1 package with the index at the end.
    The const_* values are written once in the index header and left out of
    every entry. legacy_offset puts the index position in 0x28 instead of 0x40.
    """
    body = bytearray()
    index_rows = []
    pos = 96
    for res_type, group, instance, raw, compress in entries:
        stored = zlib.compress(raw) if compress else raw
        index_rows.append((res_type, group, instance, pos, len(stored), len(raw), ZLIB if compress else 0))
        body += stored
        pos += len(stored)

    flags = 0
    constants = bytearray()
    for bit, value in ((0x1, const_type), (0x2, const_group), (0x4, const_inst_hi)):
        if value is not None:
            flags |= bit
            constants += struct.pack('<I', value)
    index = bytearray(struct.pack('<I', flags)) + constants
    for res_type, group, instance, position, size, mem_size, compression in index_rows:
        if const_type is None:
            index += struct.pack('<I', res_type)
        if const_group is None:
            index += struct.pack('<I', group)
        if const_inst_hi is None:
            index += struct.pack('<I', instance >> 32)
        index += struct.pack('<I', instance & 0xFFFFFFFF)
        index += struct.pack('<IIIHH', position, size | 0x80000000, mem_size, compression, 1)

    header = bytearray(96)
    header[0:4] = b'DBPF'
    struct.pack_into('<II', header, 4, 2, 1)
    struct.pack_into('<I', header, 0x24, len(entries))
    struct.pack_into('<I', header, 0x2C, len(index))
    struct.pack_into('<I', header, 0x3C, 3)
    struct.pack_into('<I', header, 0x28 if legacy_offset else 0x40, pos)
    return bytes(header) + bytes(body) + bytes(index)


def casp_package(*parts):
    """parts: (instance, name) pairs, all zlib compressed CASPs"""
    return build_package([(CASP, 0x80000000, inst, casp_payload(name), True) for inst, name in parts])


@pytest.fixture
def dirs(tmp_path):
    input_dir = tmp_path / "in"
    output_dir = tmp_path / "out"
    input_dir.mkdir()
    return input_dir, output_dir


@pytest.fixture
def write_package(dirs):
    input_dir, _ = dirs

    def _write(filename, *parts):
        path = input_dir / filename
        path.write_bytes(casp_package(*parts))
        return path

    return _write
