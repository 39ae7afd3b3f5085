# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
from enum import IntEnum

Bits8 = (0, (1 << 8) - 1)
Bits10 = (0, (1 << 10) - 1)
Bits16 = (0, (1 << 16) - 1)

HEADER = b'\xff\xff'
BROADCAST_ID = 0xFE
MAX_ID = 0xFD


class Instructions(IntEnum):
    """Instruction types for dynamixel command packets."""

    Ping = 0x01
    ReadData = 0x02
    WriteData = 0x03
    RegWrite = 0x04
    Action = 0x05
    Reset = 0x06
    SyncWrite = 0x83


def u16_to_bytes(value):
    """Splits a 16 bit integer into its (low, high) bytes."""
    return value & 0xff, (value >> 8) & 0xff


def bytes_to_u16(low, high):
    return low | (high << 8)
