# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
"""
Packet encoding and decoding for the Dynamixel CommV1 protocol
Protocol 1.0 reference - http://support.robotis.com/en/product/actuator/dynamixel/dxl_communication.htm

Instruction packet: FF FF id len instruction params... checksum
Status packet:      FF FF id len error params... checksum
"""

# pylint: disable=too-few-public-methods

import logging
from collections import namedtuple, OrderedDict

import numpy as np

from dxldriver.utils import Instructions, HEADER, BROADCAST_ID, MAX_ID, u16_to_bytes, bytes_to_u16
from dxldriver.dxl_exceptions import (
    DynamixelDriverError,
    ChecksumError,
    HeaderError,
    DecodingError,
    StatusFault)


def calc_checksum(payload):
    """Computes the Protocol 1.0 checksum.

    Args:
        payload: The packet bytes from the id up to the last parameter (header
            and checksum excluded)

    Returns:
        An integer in [0, 255]: the inverted low byte of the payload sum
    """
    return ~(sum(payload) % 256) % 256


def as_instruction_packet(dxl_id, instruction, *params):
    """Constructs instruction packet for sending a command.

    Args:
        dxl_id: An integer representing the DXL ID number (254 for broadcast)
        instruction: Hex code representing instruction types for DXL command packet (e.g., Read, Write, Ping, etc.)
        *params: Depending on the instruction, start address of data to be read, length of data, data to write, etc.

    Returns:
        A bytes object holding the complete instruction packet
    """
    if not 0 <= dxl_id <= BROADCAST_ID:
        raise ValueError('invalid dxl id {}'.format(dxl_id))
    packet = bytearray(HEADER)
    packet.extend((dxl_id, len(params) + 2, instruction))
    packet.extend(params)
    packet.append(calc_checksum(packet[2:]))
    return bytes(packet)


def packet_ping(dxl_id):
    """Create an instruction packet that asks a DXL to answer with an empty status."""
    return as_instruction_packet(dxl_id, Instructions.Ping)


def packet_read(dxl_id, reg0, num_bytes):
    """Create an instruction packet to read data from the DXL control table.

    Args:
        dxl_id: An integer representing the DXL ID number
        reg0: An integer representing the register address in the control table
        num_bytes: An integer representing the number of bytes to read starting at reg0

    Returns:
        A bytes object holding the read data instruction packet
    """
    return as_instruction_packet(dxl_id, Instructions.ReadData, reg0, num_bytes)


def packet_write8(dxl_id, reg0, value):
    """Create an instruction packet writing one byte to the DXL control table."""
    return as_instruction_packet(dxl_id, Instructions.WriteData, reg0, value)


def packet_write16(dxl_id, reg0, value):
    """Create an instruction packet writing a 16 bit value (little-endian) to the DXL control table."""
    if not 0 <= value <= 0xffff:
        raise ValueError('value {} does not fit 2 bytes'.format(value))
    return as_instruction_packet(dxl_id, Instructions.WriteData, reg0, *u16_to_bytes(value))


SyncCommand = namedtuple('SyncCommand', ['dxl_id', 'value'])
SyncCommandFloat = namedtuple('SyncCommandFloat', ['dxl_id', 'value'])


def packet_sync_write(reg0, width, commands):
    """Create a broadcast SYNC_WRITE packet carrying one value per DXL.

    Args:
        reg0: An integer specifying the register to write (on every dynamixel)
        width: Number of bytes written per DXL, 1 or 2
        commands: A sequence of SyncCommand (or (id, value) pairs). Values are
            truncated to `width` bytes and sent little-endian.

    Returns:
        A bytes object holding the sync write instruction packet

    Raises:
        DecodingError: if width is not 1 or 2, or the packet is too long for
            the length field
    """
    #pylint: disable=invalid-name
    if width not in (1, 2):
        raise DecodingError('sync write only supports 1 or 2 byte values, got {}'.format(width))
    commands = [SyncCommand(*command) for command in commands]
    L = (width + 1) * len(commands) + 4
    if L > 0xff:
        raise DecodingError('sync write for {} dxls does not fit one packet'.format(len(commands)))

    # FF FF FE len instr reg0 N
    # id0 id0-byte0 [id0-byte1]
    # id1 id1-byte0 [id1-byte1]
    # ...
    # chksum
    data_rows = np.zeros((len(commands), width + 1), dtype=np.uint8)
    for row, (dxl_id, value) in zip(data_rows, commands):
        if not 0 <= dxl_id <= MAX_ID:
            raise ValueError('invalid dxl id {} in sync write'.format(dxl_id))
        value = int(value)
        row[0] = dxl_id
        row[1] = value & 0xff
        if width == 2:
            row[2] = (value >> 8) & 0xff

    packet = bytearray(HEADER)
    packet.extend((BROADCAST_ID, L, Instructions.SyncWrite, reg0, width))
    packet.extend(data_rows.tobytes())
    packet.append(calc_checksum(packet[2:]))
    return bytes(packet)


ERROR_BITS = OrderedDict([
    ('input_voltage', 1 << 0),
    ('angle_limit', 1 << 1),
    ('overheating', 1 << 2),
    ('range', 1 << 3),
    ('checksum', 1 << 4),
    ('overload', 1 << 5),
    ('instruction', 1 << 6),
])


class StatusErrorFlags(namedtuple('StatusErrorFlags', list(ERROR_BITS))):
    """The fault bits of a status packet error byte, one bool per fault.

    The usage is the following:
        StatusErrorFlags.from_byte(0b100).overheating -> True
        str(StatusErrorFlags.from_byte(0b100100)) -> 'overheating, overload'
    """
    __slots__ = ()

    @classmethod
    def from_byte(cls, flag):
        return cls(*(bool(flag & bit) for bit in ERROR_BITS.values()))

    def to_byte(self):
        rval = 0
        for fired, bit in zip(self, ERROR_BITS.values()):
            if fired:
                rval |= bit
        return rval

    def __str__(self):
        return ', '.join(name for name, fired in zip(self._fields, self) if fired) or 'ok'


class Status(object):
    """Class representing status packets coming back from Dynamixel.

    Only constructed by StatusDecoder for packets whose checksum matched and
    whose error byte was zero.
    """

    def __init__(self, dxl_id, params):
        self.dxl_id = dxl_id
        self.params = bytes(params)

    def __eq__(self, other):
        if not isinstance(other, Status):
            return NotImplemented
        return self.dxl_id == other.dxl_id and self.params == other.params

    def __repr__(self):
        return 'Status(dxl_id={}, params={})'.format(self.dxl_id, list(self.params))

    def as_u8(self):
        if len(self.params) < 1:
            raise DecodingError('failed unpacking u8 from {} bytes'.format(len(self.params)))
        return self.params[0]

    def as_u16(self):
        if len(self.params) < 2:
            raise DecodingError('failed unpacking u16 from {} bytes'.format(len(self.params)))
        return bytes_to_u16(self.params[0], self.params[1])


class StatusDecoder(object):
    """Incremental status packet decoder.

    `decode` is called with the receive buffer each time more bytes arrived.
    It consumes bytes from the front of the buffer and either returns None
    (more input needed, or the buffer was resynchronized onto the next header),
    returns a Status, or raises a MalformedStatus/StatusFault subclass. Every
    error consumes at least one byte, so repeated calls always terminate.
    """

    def decode(self, buf):
        """Decodes at most one status packet from the front of `buf`.

        Args:
            buf: A bytearray receive buffer, modified in place

        Returns:
            A Status, or None if no complete packet is available yet
        """
        if len(buf) < 4:
            return None

        if buf[0] != 0xff or buf[1] != 0xff:
            start = buf.find(HEADER, 1)
            if start == -1:
                # a trailing 0xff may be the first half of the next header
                start = len(buf) - 1 if buf[-1] == 0xff else len(buf)
            logging.debug("Resynchronizing, dropping {} bytes: {}".format(start, bytes(buf[:start])))
            del buf[:start]
            return None

        length = buf[3]
        if length < 2:
            del buf[:1]
            raise HeaderError('invalid payload length ({})'.format(length))

        if len(buf) < 4 + length:
            return None

        frame = bytes(buf[:4 + length])
        chksum = calc_checksum(frame[2:-1])
        if chksum != frame[-1]:
            del buf[:1]
            raise ChecksumError('chksum fail, expected {:#04x} got {:#04x}'.format(chksum, frame[-1]))

        del buf[:4 + length]
        logging.debug("Received status packet: {}".format(frame))
        if frame[4]:
            raise StatusFault(StatusErrorFlags.from_byte(frame[4]))
        return Status(frame[2], frame[5:-1])

    def decode_all(self, buf):
        """Yields every Status or driver error found in `buf` until no more progress can be made."""
        while True:
            n_buffered = len(buf)
            try:
                status = self.decode(buf)
            except DynamixelDriverError as e:
                yield e
                continue
            if status is not None:
                yield status
            elif len(buf) == n_buffered:
                return
