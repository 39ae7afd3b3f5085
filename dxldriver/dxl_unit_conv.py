# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
"""
Unit conversion

Position: 0-1023 ticks cover 0-300 degrees (3.41 ticks per degree).
Voltage: tenths of a volt.
Max torque: fraction of full torque, raw / 2013.
"""
#pylint: disable=too-many-arguments,invalid-name,unused-argument
#pylint: disable=missing-docstring

import math

import numpy as np

from .dxl_exceptions import UnitConversionNotImplemented

TICKS_PER_DEGREE = 3.41
POSITION_TICKS = (0, 1023)
VOLTS_PER_TICK = 0.1
TORQUE_FULL_SCALE = 2013.0
TORQUE_TICKS = (0, 1023)


def ticks_to_degrees(x):
    return x / TICKS_PER_DEGREE


def degrees_to_ticks(y):
    return int(round(y * TICKS_PER_DEGREE))


def ticks_to_rad(x):
    return math.radians(ticks_to_degrees(x))


def rad_to_ticks(y):
    return degrees_to_ticks(math.degrees(y))


def clamp_ticks(x, x_lim=POSITION_TICKS):
    """Clips a raw register value into the (low, high) register range."""
    low, high = x_lim
    return int(np.clip(x, low, high))


def raw_to_volts(x):
    return x / 10.0


def volts_to_raw(y):
    return int(round(y / VOLTS_PER_TICK))


def raw_to_torque_fraction(x):
    return x / TORQUE_FULL_SCALE


def torque_fraction_to_raw(y):
    """Fraction of full torque to the max torque register value, clipped to its 10 bit range."""
    return clamp_ticks(round(y * TORQUE_FULL_SCALE), TORQUE_TICKS)


class UnitConversion(object):
    """Base class for converting values to physics metrics.

    `fwd` maps a raw register value to physical units, `inv` maps back.

    Attributes:
        y_min: A float representing lower limit of the converted value
        y_max: A float representing upper limit of the converted value
    """

    def __init__(self):
        self.y_min = None
        self.y_max = None

    @staticmethod
    def fwd(x):
        raise UnitConversionNotImplemented()

    @staticmethod
    def inv(y):
        raise UnitConversionNotImplemented()


class PositionDegrees(UnitConversion):
    """Goal and present position registers in degrees."""

    def __init__(self):
        UnitConversion.__init__(self)
        self.y_min = ticks_to_degrees(POSITION_TICKS[0])
        self.y_max = ticks_to_degrees(POSITION_TICKS[1])

    @staticmethod
    def fwd(x):
        return ticks_to_degrees(x)

    @staticmethod
    def inv(y):
        return clamp_ticks(degrees_to_ticks(y))


class Voltage(UnitConversion):
    """Present voltage register in volts."""

    def __init__(self):
        UnitConversion.__init__(self)
        self.y_min = 0.
        self.y_max = 25.5

    @staticmethod
    def fwd(x):
        return raw_to_volts(x)

    @staticmethod
    def inv(y):
        return volts_to_raw(y)


class TorqueFraction(UnitConversion):
    """Max torque register as a fraction of full torque."""

    def __init__(self):
        UnitConversion.__init__(self)
        self.y_min = 0.
        self.y_max = raw_to_torque_fraction(TORQUE_TICKS[1])

    @staticmethod
    def fwd(x):
        return raw_to_torque_fraction(x)

    @staticmethod
    def inv(y):
        return torque_fraction_to_raw(y)


class BaudConversion(UnitConversion):
    """Baud rate register: baud = 2000000 / (code + 1)."""

    def __init__(self):
        UnitConversion.__init__(self)
        self.y_min = 2000000 / 256.
        self.y_max = 1000000

    @staticmethod
    def fwd(x):
        return 2000000. / (x + 1)

    @staticmethod
    def inv(y):
        if y <= 0:
            raise ValueError(y)
        code = int(round(2000000. / y)) - 1
        if not 0 <= code <= 254:
            raise ValueError('unsupported baud rate {}'.format(y))
        return code


class BooleanFlag(UnitConversion):
    """Represents unit conversion for boolean flags (e.g. torque_enable)."""

    @staticmethod
    def fwd(x):
        return bool(x)

    @staticmethod
    def inv(y):
        return int(bool(y))


class ComplianceSlope(UnitConversion):
    """Represents unit conversion for slope compliance registers.

    The servo only honours powers of two, values are snapped down to one.
    """

    @staticmethod
    def fwd(x):
        return x

    @staticmethod
    def inv(y):
        thresh = 128
        while thresh > 2:
            if y >= thresh:
                return thresh
            thresh >>= 1
        return thresh


class RawValue(UnitConversion):
    """Represents dummy unit conversion object that is a pass-through."""

    @staticmethod
    def fwd(x):
        return x

    @staticmethod
    def inv(y):
        return y
