# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
"""Register table."""

#pylint: disable=too-many-arguments,invalid-name,unused-argument

from .dxl_exceptions import DecodingError
from .dxl_unit_conv import RawValue
from .utils import Bits8, Bits16, bytes_to_u16


class Reg(object):
    """A class representing Dynamixel Register.

    A register is a logical, not physical register.

    Attributes:
        name: A string (semantics of the register)
        offset: An integer representing the address of the register in the DXL control table
        width: An integer representing number of bytes (1 byte or 2)
        x_lim: A tuple of lower and upper limits on the integer value
            a register can take
        unit: A unit_conversion that translates integer register values
            into physical quantities (degrees, volts, etc.)
        read_only: True for registers the servo does not accept writes to
    """

    def __init__(self, name, offset, width=1, x_lim=None, unit=None, read_only=False):
        if width not in (1, 2):
            raise ValueError('register {} has unsupported width {}'.format(name, width))
        self.name = name
        self.offset = offset
        self.width = width
        self.x_lim = x_lim if x_lim is not None else (Bits8 if width == 1 else Bits16)
        self.unit = unit if unit is not None else RawValue()
        self.read_only = read_only

    def __repr__(self):
        return 'Reg({!r}, offset={}, width={})'.format(self.name, self.offset, self.width)

    def check_raw(self, x):
        """Raises ValueError if `x` is outside the register's raw range."""
        low, high = self.x_lim
        if not low <= x <= high:
            raise ValueError('{} out of range for {} ({}, {})'.format(x, self.name, low, high))
        return x


class ControlTable(object):
    """Static lookup table of the registers of one servo model.

    Registers are kept in address order. Gaps between registers are allowed;
    overlapping registers are not.
    """

    def __init__(self, model, *regs):
        self.model = model
        self._regs = tuple(sorted(regs, key=lambda reg: reg.offset))
        if not self._regs:
            raise ValueError('empty register sequence for {}'.format(model))
        self._by_name = {}
        for prev, reg in zip((None,) + self._regs, self._regs):
            if reg.name in self._by_name:
                raise ValueError('duplicate register {}'.format(reg.name))
            if prev is not None and prev.offset + prev.width > reg.offset:
                raise ValueError('register {} overlaps {}'.format(reg.name, prev.name))
            self._by_name[reg.name] = reg
        self.offset = self._regs[0].offset
        self.width = self._regs[-1].offset + self._regs[-1].width - self.offset

    def __str__(self):
        return 'ControlTable{%s}' % self.model

    def __iter__(self):
        return iter(self._regs)

    def __len__(self):
        return len(self._regs)

    def __contains__(self, key):
        return key in self._by_name

    def __getitem__(self, key):
        if isinstance(key, str):
            try:
                return self._by_name[key]
            except KeyError:
                raise KeyError("{} is not a valid register name".format(key))
        elif isinstance(key, int):
            return self._regs[key]
        raise TypeError(key)

    def subblock(self, first, last):
        """Selects the registers from `first` to `last` (inclusive) as a new table.

        The servo can only read one address range per instruction, so a block
        read covers every byte from the first register to the end of the last.
        """
        start = self[first]
        stop = self[last]
        if stop.offset < start.offset:
            raise KeyError('{} comes before {}'.format(last, first))
        regs = [reg for reg in self._regs if start.offset <= reg.offset <= stop.offset]
        return ControlTable(self.model, *regs)

    def vals_from_data(self, data):
        """Parses raw bytes read from `self.offset` into a dict of raw register values."""
        if len(data) < self.width:
            raise DecodingError('expected {} bytes, got {}'.format(self.width, len(data)))
        vals = {}
        for reg in self._regs:
            pos = reg.offset - self.offset
            if reg.width == 1:
                vals[reg.name] = data[pos]
            else:
                vals[reg.name] = bytes_to_u16(data[pos], data[pos + 1])
        return vals
