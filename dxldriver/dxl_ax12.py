# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
"""
AX-12 definitions

EEPROM area: addresses 0-23, persisted by the servo.
RAM area: addresses 24-49, reset at power up.
"""

#pylint: disable=invalid-name

from .dxl_unit_conv import (
    PositionDegrees,
    Voltage,
    TorqueFraction,
    BaudConversion,
    BooleanFlag,
    ComplianceSlope)
from .dxl_reg import Reg, ControlTable
from .utils import MAX_ID

EightBits = (0, 255)
TenBits = (0, 1023)

# EEPROM table
MODEL_NUMBER = 0
FIRMWARE_VERSION = 2
ID = 3
BAUD_RATE = 4
MAX_TORQUE = 14

# RAM table
TORQUE_ENABLED = 24
CW_COMPLIANCE_SLOPE = 28
CCW_COMPLIANCE_SLOPE = 29
GOAL_POSITION = 30
MOVING_SPEED = 32
PRESENT_POSITION = 36
PRESENT_VOLTAGE = 42
PRESENT_TEMPERATURE = 43


AX12 = ControlTable(
    'AX12',
    Reg('model_number', MODEL_NUMBER, 2, read_only=True),
    Reg('firmware', FIRMWARE_VERSION, read_only=True),
    Reg('id', ID, x_lim=(0, MAX_ID)),
    Reg('baud_rate', BAUD_RATE, x_lim=(0, 254), unit=BaudConversion()),
    Reg('return_delay_time', 5),
    Reg('cw_angle_limit', 6, 2, x_lim=TenBits, unit=PositionDegrees()),
    Reg('ccw_angle_limit', 8, 2, x_lim=TenBits, unit=PositionDegrees()),
    Reg('temperature_limit', 11),
    Reg('min_voltage_limit', 12, unit=Voltage()),
    Reg('max_voltage_limit', 13, unit=Voltage()),
    Reg('max_torque', MAX_TORQUE, 2, x_lim=TenBits, unit=TorqueFraction()),
    Reg('status_return_level', 16, x_lim=(0, 2)),
    Reg('alarm_led', 17),
    Reg('alarm_shutdown', 18),
    Reg('torque_enable', TORQUE_ENABLED, x_lim=(0, 1), unit=BooleanFlag()),
    Reg('led', 25, x_lim=(0, 1), unit=BooleanFlag()),
    Reg('cw_compliance_margin', 26),
    Reg('ccw_compliance_margin', 27),
    Reg('cw_compliance_slope', CW_COMPLIANCE_SLOPE, unit=ComplianceSlope()),
    Reg('ccw_compliance_slope', CCW_COMPLIANCE_SLOPE, unit=ComplianceSlope()),
    Reg('goal_position', GOAL_POSITION, 2, x_lim=TenBits, unit=PositionDegrees()),
    Reg('moving_speed', MOVING_SPEED, 2, x_lim=(0, 2047)),
    Reg('torque_limit', 34, 2, x_lim=TenBits, unit=TorqueFraction()),
    Reg('present_position', PRESENT_POSITION, 2, x_lim=TenBits, unit=PositionDegrees(), read_only=True),
    Reg('present_speed', 38, 2, x_lim=(0, 2047), read_only=True),
    Reg('present_load', 40, 2, x_lim=(0, 2047), read_only=True),
    Reg('present_voltage', PRESENT_VOLTAGE, unit=Voltage(), read_only=True),
    Reg('present_temperature', PRESENT_TEMPERATURE, read_only=True),
    Reg('registered', 44, read_only=True),
    Reg('moving', 46, read_only=True),
    Reg('lock', 47, x_lim=(0, 1)),
    Reg('punch', 48, 2, x_lim=(0x20, 0x3FF)))
