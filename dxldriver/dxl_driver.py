# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
"""
Register level driver for Dynamixel Protocol 1.0 servos.

First create a driver:

driver = DynamixelDriver.new('/dev/ttyUSB0')

Then use its methods to talk to servos on the bus:

driver.ping(1)
driver.write_torque(1, True)
driver.write_position_degrees(1, 150.0)
driver.read_position_degrees(1)

Broadcast to several servos at once with one packet:

driver.sync_write_position_degrees([(1, 90.0), (2, 210.0)])

Every call returns a value or raises a dxl_exceptions error.
dxl_exceptions.is_recoverable(e) tells whether retrying the call may succeed;
DynamixelDriver(..., retries=n) does that automatically.
"""

import logging
from threading import Lock

from dxldriver import dxl_commv1, dxl_config
from dxldriver.dxl_ax12 import (
    AX12,
    MODEL_NUMBER,
    FIRMWARE_VERSION,
    ID,
    MAX_TORQUE,
    TORQUE_ENABLED,
    CW_COMPLIANCE_SLOPE,
    CCW_COMPLIANCE_SLOPE,
    GOAL_POSITION,
    MOVING_SPEED,
    PRESENT_POSITION,
    PRESENT_VOLTAGE,
    PRESENT_TEMPERATURE)
from dxldriver.dxl_commv1 import Status, SyncCommand
from dxldriver.dxl_exceptions import CommTimeout, DecodingError, IdMismatchError, RECOVERABLE_ERRORS
from dxldriver.dxl_transport import FramedSerialDriver
from dxldriver.dxl_unit_conv import (
    ticks_to_degrees,
    ticks_to_rad,
    degrees_to_ticks,
    rad_to_ticks,
    clamp_ticks,
    raw_to_volts,
    raw_to_torque_fraction,
    torque_fraction_to_raw)
from dxldriver.utils import BROADCAST_ID


class DynamixelDriver(object):
    """Request/response driver for the servos sharing one bus.

    The driver exclusively owns its FramedDriver. A lock serializes callers so
    that exactly one request is in flight and its reply is consumed (or timed
    out) before the next instruction goes out.
    """

    def __init__(self, framed_driver, retries=dxl_config.DEFAULT_RETRIES, control_table=AX12):
        """Inits the driver.

        Args:
            framed_driver: A dxl_transport.FramedDriver
            retries: An integer, how many times a logical operation is repeated
                after a recoverable error before the error is raised
            control_table: A dxl_reg.ControlTable used for register name lookups
        """
        self._framed = framed_driver
        self.retries = retries
        self.control_table = control_table
        self._bus_lock = Lock()

    @classmethod
    def new(cls, port_str=None, **kwargs):
        return cls.with_baud_rate(port_str, dxl_config.DEFAULT_BAUDRATE, **kwargs)

    @classmethod
    def with_baud_rate(cls, port_str, baudrate, timeout=dxl_config.DEFAULT_TIMEOUT, **kwargs):
        return cls(FramedSerialDriver.open(port_str, baudrate, timeout), **kwargs)

    @classmethod
    def from_setup(cls, name='default'):
        """Opens a driver using a named setup from dxl_config.SETUPS."""
        setup = dxl_config.SETUPS[name]
        return cls.with_baud_rate(setup['port_str'], setup['baudrate'],
                                  timeout=setup['timeout'], retries=setup['retries'])

    def close(self):
        with self._bus_lock:
            self._framed.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # ========== request/response cycle ==========

    def _transact(self, dxl_id, instruction, decode=None, reply_ids=None):
        """Sends one instruction and returns the payload of the matching Status.

        Args:
            dxl_id: The id the instruction is addressed to
            instruction: A serialized instruction packet
            decode: An optional callable applied to the Status
            reply_ids: Ids accepted in the reply, defaults to (dxl_id,)
        """
        reply_ids = reply_ids or (dxl_id,)
        with self._bus_lock:
            self._framed.send(instruction)
            status = self._framed.receive()
            mismatch = None
            n_stale = 0
            while status.dxl_id not in reply_ids:
                # a late reply to an earlier request, the answer may still follow
                mismatch = mismatch or IdMismatchError(dxl_id, status.dxl_id)
                if n_stale >= dxl_config.STALE_REPLY_LIMIT:
                    raise mismatch
                n_stale += 1
                logging.debug("Skipping reply from id {} while waiting for id {}".format(status.dxl_id, dxl_id))
                try:
                    status = self._framed.receive()
                except CommTimeout:
                    raise mismatch from None
        return decode(status) if decode else status

    def _request(self, dxl_id, instruction, decode=None, reply_ids=None):
        """Runs one request/response cycle, repeating it on recoverable errors up to `retries` times."""
        attempt = 0
        while True:
            try:
                return self._transact(dxl_id, instruction, decode, reply_ids)
            except RECOVERABLE_ERRORS as e:
                if attempt >= self.retries:
                    raise
                attempt += 1
                logging.warning("Request to id {} failed ({}: {}), retry {} of {}".format(
                    dxl_id, type(e).__name__, e, attempt, self.retries))
                self.clear_io_buffers()

    def _broadcast(self, instruction):
        with self._bus_lock:
            self._framed.send(instruction)

    def _write(self, dxl_id, instruction):
        if dxl_id == BROADCAST_ID:
            self._broadcast(instruction)
        else:
            self._request(dxl_id, instruction)

    # ========== raw primitives ==========

    def ping(self, dxl_id):
        """Raises unless servo `dxl_id` answers a ping."""
        self._request(dxl_id, dxl_commv1.packet_ping(dxl_id))

    def read_u8(self, dxl_id, addr):
        return self._request(dxl_id, dxl_commv1.packet_read(dxl_id, addr, 1), Status.as_u8)

    def read_u16(self, dxl_id, addr):
        return self._request(dxl_id, dxl_commv1.packet_read(dxl_id, addr, 2), Status.as_u16)

    def read_bytes(self, dxl_id, addr, num_bytes):
        """Reads `num_bytes` consecutive bytes of the control table starting at `addr`."""
        def params(status):
            if len(status.params) < num_bytes:
                raise DecodingError('expected {} bytes, got {}'.format(num_bytes, len(status.params)))
            return status.params[:num_bytes]
        return self._request(dxl_id, dxl_commv1.packet_read(dxl_id, addr, num_bytes), params)

    def write_u8(self, dxl_id, addr, value):
        self._write(dxl_id, dxl_commv1.packet_write8(dxl_id, addr, value))

    def write_u16(self, dxl_id, addr, value):
        self._write(dxl_id, dxl_commv1.packet_write16(dxl_id, addr, value))

    def sync_write_u8(self, addr, commands):
        self._broadcast(dxl_commv1.packet_sync_write(addr, 1, commands))

    def sync_write_u16(self, addr, commands):
        self._broadcast(dxl_commv1.packet_sync_write(addr, 2, commands))

    def clear_io_buffers(self):
        """Discards stale bytes, call after abandoning a request."""
        with self._bus_lock:
            self._framed.clear_buffers()

    # ========== named registers ==========

    def read_register(self, dxl_id, reg_name):
        """Reads the raw value of a register from the control table."""
        reg = self.control_table[reg_name]
        if reg.width == 1:
            return self.read_u8(dxl_id, reg.offset)
        return self.read_u16(dxl_id, reg.offset)

    def write_register(self, dxl_id, reg_name, value):
        """Writes a raw value to a register of the control table."""
        reg = self.control_table[reg_name]
        if reg.read_only:
            raise ValueError('{} is read only'.format(reg_name))
        reg.check_raw(value)
        if reg.width == 1:
            self.write_u8(dxl_id, reg.offset, value)
        else:
            self.write_u16(dxl_id, reg.offset, value)

    def read_register_value(self, dxl_id, reg_name):
        """Reads a register and converts it to physical units."""
        return self.control_table[reg_name].unit.fwd(self.read_register(dxl_id, reg_name))

    def write_register_value(self, dxl_id, reg_name, value):
        """Converts a physical value to register units and writes it."""
        self.write_register(dxl_id, reg_name, self.control_table[reg_name].unit.inv(value))

    def read_block(self, dxl_id, first, last):
        """Reads the registers from `first` to `last` (inclusive) with one instruction.

        Returns:
            A dictionary containing register names and their raw values
        """
        block = self.control_table.subblock(first, last)
        return block.vals_from_data(self.read_bytes(dxl_id, block.offset, block.width))

    # ========== identity ==========

    def read_model_number(self, dxl_id):
        return self.read_u16(dxl_id, MODEL_NUMBER)

    def read_firmware_version(self, dxl_id):
        return self.read_u8(dxl_id, FIRMWARE_VERSION)

    def write_id(self, dxl_id, new_id):
        """Changes a servo's id number. The reply already carries the new id."""
        self.control_table['id'].check_raw(new_id)
        instruction = dxl_commv1.packet_write8(dxl_id, ID, new_id)
        if dxl_id == BROADCAST_ID:
            self._broadcast(instruction)
        else:
            self._request(dxl_id, instruction, reply_ids=(dxl_id, new_id))

    def write_baud_rate(self, dxl_id, baudrate):
        """Sets the baud rate of a servo. Reopen the port at the new rate afterwards."""
        self.write_register_value(dxl_id, 'baud_rate', baudrate)

    def read_baud_rate(self, dxl_id):
        return self.read_register_value(dxl_id, 'baud_rate')

    # ========== torque ==========

    def write_torque(self, dxl_id, enabled):
        self.write_u8(dxl_id, TORQUE_ENABLED, int(bool(enabled)))

    def sync_write_torque(self, commands):
        self.sync_write_u8(TORQUE_ENABLED, [(dxl_id, int(bool(enabled))) for dxl_id, enabled in commands])

    def write_max_torque(self, dxl_id, torque):
        """Sets the max torque as a fraction of full torque."""
        self.write_u16(dxl_id, MAX_TORQUE, torque_fraction_to_raw(torque))

    def read_max_torque(self, dxl_id):
        return raw_to_torque_fraction(self.read_u16(dxl_id, MAX_TORQUE))

    # ========== compliance ==========

    def write_compliance_slope_cw(self, dxl_id, compliance):
        self.write_u8(dxl_id, CW_COMPLIANCE_SLOPE, compliance)

    def write_compliance_slope_ccw(self, dxl_id, compliance):
        self.write_u8(dxl_id, CCW_COMPLIANCE_SLOPE, compliance)

    def write_compliance_slope_both(self, dxl_id, compliance):
        self.write_compliance_slope_cw(dxl_id, compliance)
        self.write_compliance_slope_ccw(dxl_id, compliance)

    def sync_write_compliance_both(self, commands):
        commands = list(commands)
        self.sync_write_u8(CW_COMPLIANCE_SLOPE, commands)
        self.sync_write_u8(CCW_COMPLIANCE_SLOPE, commands)

    # ========== position ==========

    def write_position(self, dxl_id, pos):
        """Writes the goal position in raw ticks (0-1023)."""
        self.write_u16(dxl_id, GOAL_POSITION, clamp_ticks(pos))

    def write_position_degrees(self, dxl_id, pos):
        self.write_position(dxl_id, degrees_to_ticks(pos))

    def write_position_rad(self, dxl_id, pos):
        self.write_position(dxl_id, rad_to_ticks(pos))

    def read_position(self, dxl_id):
        return self.read_u16(dxl_id, PRESENT_POSITION)

    def read_position_degrees(self, dxl_id):
        return ticks_to_degrees(self.read_position(dxl_id))

    def read_position_rad(self, dxl_id):
        return ticks_to_rad(self.read_position(dxl_id))

    def sync_write_position(self, commands):
        self.sync_write_u16(GOAL_POSITION, [(dxl_id, clamp_ticks(pos)) for dxl_id, pos in commands])

    def sync_write_position_degrees(self, commands):
        self.sync_write_position([SyncCommand(dxl_id, degrees_to_ticks(pos)) for dxl_id, pos in commands])

    def sync_write_position_rad(self, commands):
        self.sync_write_position([SyncCommand(dxl_id, rad_to_ticks(pos)) for dxl_id, pos in commands])

    # ========== speed ==========

    def write_moving_speed(self, dxl_id, speed):
        self.write_u16(dxl_id, MOVING_SPEED, speed)

    def sync_write_moving_speed(self, commands):
        self.sync_write_u16(MOVING_SPEED, commands)

    # ========== telemetry ==========

    def read_temperature(self, dxl_id):
        """Internal temperature in degrees Celsius."""
        return self.read_u8(dxl_id, PRESENT_TEMPERATURE)

    def read_voltage(self, dxl_id):
        """Supply voltage in volts."""
        return raw_to_volts(self.read_u8(dxl_id, PRESENT_VOLTAGE))

    # ========== discovery ==========

    def scan(self, ids):
        """Pings every id in `ids` in turn and returns the ones that answered.

        A recoverable error counts as absence. The bus is shared, so servos
        are pinged one at a time.
        """
        found = []
        for dxl_id in ids:
            try:
                self._transact(dxl_id, dxl_commv1.packet_ping(dxl_id))
            except RECOVERABLE_ERRORS as e:
                logging.debug("No servo at id {}: {}".format(dxl_id, type(e).__name__))
                continue
            logging.info("Found servo at id {}".format(dxl_id))
            found.append(dxl_id)
        return found

    def search_all(self):
        """Pings ids 1-253 and returns the ids present on the bus."""
        return self.scan(dxl_config.SEARCH_IDS)
