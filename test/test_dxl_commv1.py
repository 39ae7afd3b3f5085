# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
import random
import unittest

from dxldriver.dxl_commv1 import (
    as_instruction_packet,
    calc_checksum,
    packet_ping,
    packet_read,
    packet_write8,
    packet_write16,
    packet_sync_write,
    Status,
    StatusDecoder,
    StatusErrorFlags,
    SyncCommand)
from dxldriver.dxl_exceptions import (
    ChecksumError,
    DecodingError,
    DynamixelDriverError,
    HeaderError,
    StatusFault)

VALID_FRAME = bytes([0xFF, 0xFF, 0x01, 0x03, 0x00, 0x20, 0xDB])


def status_frame(dxl_id, error, params):
    body = bytearray((dxl_id, len(params) + 2, error))
    body.extend(params)
    return b'\xff\xff' + bytes(body) + bytes([calc_checksum(body)])


class TestChecksum(unittest.TestCase):

    def test_checksum_is_inverted_sum(self):
        rand = random.Random(3)
        for _ in range(200):
            payload = bytes(rand.randrange(256) for _ in range(rand.randrange(1, 40)))
            self.assertEqual(calc_checksum(payload), (~sum(payload)) % 256)
            self.assertTrue(0 <= calc_checksum(payload) <= 255)

    def test_checksum_of_ping(self):
        self.assertEqual(calc_checksum([0x01, 0x02, 0x01]), 0xFB)


class TestInstructionPackets(unittest.TestCase):

    def test_ping(self):
        self.assertEqual(packet_ping(1), bytes([0xFF, 0xFF, 0x01, 0x02, 0x01, 0xFB]))

    def test_read(self):
        self.assertEqual(packet_read(1, 43, 1),
                         bytes([0xFF, 0xFF, 0x01, 0x04, 0x02, 0x2B, 0x01, 0xCC]))

    def test_write8_broadcast(self):
        self.assertEqual(packet_write8(0xFE, 0x03, 1),
                         bytes([0xFF, 0xFF, 0xFE, 0x04, 0x03, 0x03, 0x01, 0xF6]))

    def test_write16_is_little_endian(self):
        packet = packet_write16(1, 30, 0x0302)
        self.assertEqual(packet[:8], bytes([0xFF, 0xFF, 0x01, 0x05, 0x03, 30, 0x02, 0x03]))
        self.assertEqual(packet[-1], calc_checksum(packet[2:-1]))

    def test_write16_rejects_large_values(self):
        with self.assertRaises(ValueError):
            packet_write16(1, 30, 0x10000)

    def test_length_field_and_checksum(self):
        for packet in (packet_ping(7), packet_read(7, 36, 2), packet_write8(7, 24, 1),
                       packet_write16(7, 30, 512)):
            self.assertEqual(packet[3], len(packet) - 4)
            self.assertEqual(packet[-1], calc_checksum(packet[2:-1]))

    def test_packets_are_immutable(self):
        self.assertIsInstance(packet_ping(1), bytes)

    def test_invalid_id(self):
        with self.assertRaises(ValueError):
            packet_ping(255)

    def test_sync_write(self):
        packet = packet_sync_write(30, 2, [SyncCommand(1, 10), SyncCommand(2, 10)])
        self.assertEqual(packet, bytes([255, 255, 254, 10, 131, 30, 2, 1, 10, 0, 2, 10, 0, 61]))

    def test_sync_write_accepts_tuples(self):
        self.assertEqual(packet_sync_write(30, 2, [(1, 10), (2, 10)]),
                         packet_sync_write(30, 2, [SyncCommand(1, 10), SyncCommand(2, 10)]))

    def test_sync_write_one_byte_truncates(self):
        packet = packet_sync_write(24, 1, [(1, 1), (2, 0x101)])
        self.assertEqual(packet[3], (1 + 1) * 2 + 4)
        self.assertEqual(packet[5:11], bytes([24, 1, 1, 1, 2, 1]))
        self.assertEqual(packet[-1], calc_checksum(packet[2:-1]))

    def test_sync_write_bad_width(self):
        for width in (0, 3, 4):
            with self.assertRaises(DecodingError):
                packet_sync_write(30, width, [(1, 10)])

    def test_sync_write_too_long(self):
        with self.assertRaises(DecodingError):
            packet_sync_write(30, 2, [(i % 200, 0) for i in range(100)])


class TestStatus(unittest.TestCase):

    def test_as_u8(self):
        self.assertEqual(Status(1, [0x20]).as_u8(), 0x20)

    def test_as_u16_little_endian(self):
        self.assertEqual(Status(0, [10, 20]).as_u16(), 20 * 256 + 10)

    def test_short_params(self):
        with self.assertRaises(DecodingError):
            Status(1, []).as_u8()
        with self.assertRaises(DecodingError):
            Status(1, [0x01]).as_u16()

    def test_error_flags(self):
        flags = StatusErrorFlags.from_byte(0b0100100)
        self.assertTrue(flags.overheating)
        self.assertTrue(flags.overload)
        self.assertFalse(flags.input_voltage)
        self.assertEqual(flags.to_byte(), 0b0100100)
        self.assertEqual(str(flags), 'overheating, overload')
        self.assertEqual(str(StatusErrorFlags.from_byte(0)), 'ok')


class TestStatusDecoder(unittest.TestCase):

    def setUp(self):
        self.decoder = StatusDecoder()

    def test_decode(self):
        buf = bytearray(VALID_FRAME)
        self.assertEqual(self.decoder.decode(buf), Status(1, [0x20]))
        self.assertEqual(buf, bytearray())

    def test_incomplete(self):
        for n in range(len(VALID_FRAME)):
            buf = bytearray(VALID_FRAME[:n])
            self.assertIsNone(self.decoder.decode(buf))
            self.assertEqual(len(buf), n)

    def test_leaves_following_bytes(self):
        buf = bytearray(VALID_FRAME + b'\xff\xff\x02')
        self.assertEqual(self.decoder.decode(buf), Status(1, [0x20]))
        self.assertEqual(buf, bytearray(b'\xff\xff\x02'))

    def test_seek_and_decode(self):
        buf = bytearray([0xFF, 0x12, 0x21]) + VALID_FRAME
        self.assertIsNone(self.decoder.decode(buf))
        self.assertEqual(buf, bytearray(VALID_FRAME))
        self.assertEqual(self.decoder.decode(buf), Status(1, [0x20]))

    def test_no_header_discards_buffer(self):
        buf = bytearray([0x01, 0x02, 0x03, 0x04, 0x05])
        self.assertIsNone(self.decoder.decode(buf))
        self.assertEqual(buf, bytearray())

    def test_trailing_header_byte_is_kept(self):
        buf = bytearray([0x01, 0x02, 0x03, 0xFF])
        self.assertIsNone(self.decoder.decode(buf))
        self.assertEqual(buf, bytearray([0xFF]))

    def test_skip_header_error_and_decode(self):
        buf = bytearray([0xFF, 0x12, 0x21, 0xFF, 0xFF, 0x01, 0x01]) + VALID_FRAME
        self.assertIsNone(self.decoder.decode(buf))
        with self.assertRaises(HeaderError):
            self.decoder.decode(buf)
        self.assertIsNone(self.decoder.decode(buf))
        self.assertEqual(self.decoder.decode(buf), Status(1, [0x20]))

    def test_length_below_two_is_header_error(self):
        for length in (0, 1):
            buf = bytearray([0xFF, 0xFF, 0x01, length, 0x00, 0x00])
            with self.assertRaises(HeaderError):
                self.decoder.decode(buf)
            self.assertEqual(len(buf), 5)

    def test_skip_checksum_error_and_decode(self):
        buf = bytearray([0xFF, 0xFF, 0xFF, 0x04, 0x03, 0x00, 0x20, 0xD8])
        with self.assertRaises(ChecksumError):
            self.decoder.decode(buf)
        self.assertEqual(len(buf), 7)
        self.assertEqual(self.decoder.decode(buf), Status(4, [0x20]))

    def test_input_voltage_error(self):
        buf = bytearray([0xFF, 0xFF, 0x01, 0x03, 0b00000001, 0x20, 0xDA])
        with self.assertRaises(StatusFault) as cm:
            self.decoder.decode(buf)
        flags = cm.exception.flags
        self.assertTrue(flags.input_voltage)
        self.assertFalse(any(flags[1:]))
        # a fault reply is consumed
        self.assertEqual(buf, bytearray())

    def test_each_fault_bit(self):
        names = ['input_voltage', 'angle_limit', 'overheating', 'range', 'checksum', 'overload', 'instruction']
        for bit, name in enumerate(names):
            buf = bytearray(status_frame(1, 1 << bit, [0x20]))
            with self.assertRaises(StatusFault) as cm:
                self.decoder.decode(buf)
            flags = cm.exception.flags
            self.assertTrue(getattr(flags, name))
            self.assertEqual([n for n in names if getattr(flags, n)], [name])

    def test_instruction_shaped_round_trip(self):
        rand = random.Random(5)
        for _ in range(50):
            dxl_id = rand.randrange(0xFE)
            params = [rand.randrange(256) for _ in range(rand.randrange(0, 20))]
            # an instruction packet with instruction byte 0 reads as a fault-free status
            buf = bytearray(as_instruction_packet(dxl_id, 0, *params))
            self.assertEqual(self.decoder.decode(buf), Status(dxl_id, params))

    @staticmethod
    def _resyncs_cleanly(buf, n_garbage):
        """False if a header candidate inside the garbage would wait for bytes that never come or would validate."""
        for i in range(n_garbage):
            if buf[i] != 0xFF or buf[i + 1] != 0xFF:
                continue
            length = buf[i + 3]
            if length < 2:
                continue
            end = i + 4 + length
            if end > len(buf) or calc_checksum(buf[i + 2:end - 1]) == buf[end - 1]:
                return False
        return True

    def test_resynchronization_consumes_garbage(self):
        rand = random.Random(7)
        n_checked = 0
        while n_checked < 300:
            n_garbage = rand.randrange(0, 30)
            garbage = bytes(rand.choice([0xFF, 0xFF, rand.randrange(256)]) for _ in range(n_garbage))
            buf = bytearray(garbage + VALID_FRAME)
            if not self._resyncs_cleanly(buf, n_garbage):
                continue
            n_checked += 1
            consumed = 0
            for _ in range(len(buf) + 1):
                before = len(buf)
                try:
                    status = self.decoder.decode(buf)
                except DynamixelDriverError:
                    status = None
                if status is not None:
                    break
                consumed += before - len(buf)
            else:
                self.fail('decoder did not converge on {}'.format(garbage))
            self.assertEqual(consumed, n_garbage, garbage)
            self.assertEqual(status, Status(1, [0x20]))

    def test_trailing_header_bytes_in_garbage(self):
        for garbage in (b'\x01\xff', b'\xff', b'\xff\xff\x00\x01', b'\xff\xff\x01\x01', b'\x12\xff\xff\x07\x00'):
            buf = bytearray(garbage + VALID_FRAME)
            results = list(self.decoder.decode_all(buf))
            self.assertEqual(results[-1], Status(1, [0x20]), garbage)
            self.assertEqual(buf, bytearray())

    def test_resynchronization_with_header_bytes_in_garbage(self):
        buf = bytearray([0xFF, 0x01, 0xFF]) + VALID_FRAME
        results = list(self.decoder.decode_all(buf))
        self.assertIsInstance(results[0], HeaderError)
        self.assertEqual(results[-1], Status(1, [0x20]))
        self.assertEqual(buf, bytearray())

    def test_errors_always_make_progress(self):
        rand = random.Random(11)
        for _ in range(300):
            buf = bytearray(rand.choice([0xFF, 0xFF, 0x00, 0x01, 0x02, rand.randrange(256)])
                            for _ in range(rand.randrange(4, 40)))
            for _ in range(len(buf) + 1):
                before = len(buf)
                try:
                    status = self.decoder.decode(buf)
                except DynamixelDriverError:
                    self.assertLess(len(buf), before)
                    continue
                if status is None and len(buf) == before:
                    break
            else:
                self.fail('decoder did not converge on {}'.format(buf))

    def test_decode_all(self):
        buf = bytearray(VALID_FRAME + status_frame(2, 0, [1, 2]) + status_frame(3, 0b100, []))
        results = list(self.decoder.decode_all(buf))
        self.assertEqual(results[:2], [Status(1, [0x20]), Status(2, [1, 2])])
        self.assertIsInstance(results[2], StatusFault)


if __name__ == '__main__':
    unittest.main(buffer=True)
