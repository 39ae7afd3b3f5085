# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
"""
Framed transport for the Dynamixel CommV1 protocol.

A FramedDriver sends already serialized instruction packets and receives
decoded status packets. FramedSerialDriver implements it on top of a pyserial
port; tests substitute a scripted double.
"""

import sys
import glob
import time
import logging
from abc import ABC, abstractmethod

import serial

from dxldriver import dxl_config
from dxldriver.dxl_commv1 import StatusDecoder
from dxldriver.utils import BROADCAST_ID
from dxldriver.dxl_exceptions import (
    CommError,
    CommTimeout,
    FailedOpeningTransport,
    ReadingError,
    RECOVERABLE_ERRORS)


def find_port(platform=sys.platform):
    """Returns the first usb serial adapter found for this platform.

    Raises:
        FailedOpeningTransport: if the platform is unknown or no device matches
    """
    if platform.startswith('linux'):
        platform = 'linux'
    for pattern in dxl_config.PORT_PATTERNS.get(platform, []):
        matches = sorted(glob.glob(pattern))
        if matches:
            return matches[0]
    raise FailedOpeningTransport('No serial port found on platform {}'.format(platform))


def make_connection(port_str=None, baudrate=dxl_config.DEFAULT_BAUDRATE, timeout=dxl_config.DEFAULT_TIMEOUT):
    """Establishes a serial connection with the dxl bus.

    Args:
        port_str: A string containing the serial port address (e.g., /dev/ttyACM0 or /dev/ttyUSB0 on linux).
            If None, the first usb serial adapter found is used.
        baudrate: an integer representing a baudrate to connect at
        timeout: a float representing the read timeout in seconds

    Returns:
        An instance of Serial (i.e., an open serial port)

    Raises:
        FailedOpeningTransport: if the port can not be opened
    """
    if port_str is None:
        port_str = find_port()
    try:
        port = serial.Serial(port=port_str,
                             baudrate=baudrate,
                             bytesize=serial.EIGHTBITS,
                             parity=serial.PARITY_NONE,
                             stopbits=serial.STOPBITS_ONE,
                             timeout=timeout,
                             xonxoff=False,
                             rtscts=False,
                             dsrdtr=False)
    except (serial.SerialException, ValueError) as e:
        raise FailedOpeningTransport('Failed to open {} at {} baud'.format(port_str, baudrate)) from e
    logging.info("Opened {} at {} baud".format(port_str, baudrate))
    return port


class FramedDriver(ABC):
    """Packet level access to a half-duplex dxl bus.

    Only one request may be in flight: a caller sends one instruction and, unless
    it was a broadcast, receives exactly one status before sending the next.
    """

    @abstractmethod
    def send(self, instruction):
        """Writes one serialized instruction packet."""

    @abstractmethod
    def receive(self):
        """Returns the next valid Status or raises a dxl_exceptions error."""

    @abstractmethod
    def clear_buffers(self):
        """Discards every byte still pending in either direction."""

    def close(self):
        """Releases the underlying channel."""


class FramedSerialDriver(FramedDriver):
    """FramedDriver over a pyserial port.

    Attributes:
        timeout: A float, seconds `receive` waits for a complete status packet
    """

    def __init__(self, port, timeout=dxl_config.DEFAULT_TIMEOUT):
        """Wraps an already open port.

        Args:
            port: An open serial.Serial (or an object with the same read/write/reset interface)
            timeout: A float representing the response timeout in seconds
        """
        self._port = port
        self.timeout = timeout
        self._buffer = bytearray()
        self._decoder = StatusDecoder()

    @classmethod
    def open(cls, port_str=None, baudrate=dxl_config.DEFAULT_BAUDRATE, timeout=dxl_config.DEFAULT_TIMEOUT):
        return cls(make_connection(port_str, baudrate, timeout), timeout)

    def send(self, instruction):
        """Writes one instruction packet.

        Unless the packet is a broadcast, everything still buffered is dropped
        first: a reply can only belong to the request sent last.
        """
        logging.debug("Sending packet: {}".format(bytes(instruction)))
        try:
            if instruction[2] != BROADCAST_ID:
                self._discard_input()
            n_written = self._port.write(instruction)
            self._port.flush()
        except (serial.SerialException, OSError) as e:
            raise CommError('Error writing to serial port') from e
        if n_written is not None and n_written != len(instruction):
            raise CommError('Short write: {} of {} bytes'.format(n_written, len(instruction)))

    def receive(self):
        """Waits for the next status packet.

        Bytes left after the returned packet stay buffered for the next call.

        Raises:
            CommTimeout: if no complete packet arrived within `timeout` seconds
            ReadingError: if the port was closed or disconnected
            MalformedStatus, StatusFault: as raised by the decoder
        """
        deadline = time.monotonic() + self.timeout
        while True:
            n_buffered = len(self._buffer)
            status = self._decoder.decode(self._buffer)
            if status is not None:
                return status
            if len(self._buffer) != n_buffered:
                # resynchronized, the rest of the buffer may hold a packet
                continue
            if time.monotonic() >= deadline:
                raise CommTimeout('No status packet within {} s'.format(self.timeout))
            self._buffer.extend(self._read(deadline))

    def _read(self, deadline):
        if not self._port.is_open:
            raise ReadingError('Serial port is closed')
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return b''
        try:
            # a blocking read must not outlive the receive deadline
            self._port.timeout = remaining
            return self._port.read(max(1, self._port.in_waiting))
        except (serial.SerialException, OSError) as e:
            raise ReadingError('Error reading from serial port') from e

    def _discard_input(self):
        if self._buffer:
            logging.debug("Dropping {} stale bytes: {}".format(len(self._buffer), bytes(self._buffer)))
        self._buffer.clear()
        self._port.reset_input_buffer()

    def clear_buffers(self):
        """Flushes output, drops all pending input and drains a reply still in flight."""
        try:
            self._port.flush()
            self._port.reset_output_buffer()
            self._discard_input()
        except (serial.SerialException, OSError) as e:
            raise CommError('Error clearing serial port buffers') from e
        try:
            stale = self.receive()
            logging.debug("Discarded stale status packet: {}".format(stale))
        except RECOVERABLE_ERRORS as e:
            logging.debug("Nothing left to discard: {}".format(e))
        self._buffer.clear()

    def close(self):
        """Closes the serial port."""
        self._port.close()
