# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
"""Exceptions raised by DXL device interface code.

Device-reported faults (`StatusFault`) and transport/protocol faults share the
`DynamixelDriverError` base. `is_recoverable` tells whether retrying the same
logical operation can succeed.
"""


class DynamixelDriverError(Exception):
    """Base class of every error raised by the driver."""


class CommTimeout(DynamixelDriverError):
    """No complete status packet arrived within the response timeout."""


class StatusFault(DynamixelDriverError):
    """The servo answered with one or more fault bits set.

    Attributes:
        flags: A dxl_commv1.StatusErrorFlags naming the bits that fired
    """

    def __init__(self, flags):
        super(StatusFault, self).__init__('servo reported fault: {}'.format(flags))
        self.flags = flags


class MalformedStatus(DynamixelDriverError):
    """Internal Exception for bus retry."""


class ChecksumError(MalformedStatus):
    """Status packet checksum does not match its content."""


class HeaderError(MalformedStatus):
    """Status packet header or length field is invalid."""


class ReadingError(DynamixelDriverError):
    """The byte stream was closed while waiting for a reply."""


class DecodingError(DynamixelDriverError):
    """Packet parameters could not be built or extracted.

    Attributes:
        reason: A string describing what failed
    """

    def __init__(self, reason):
        super(DecodingError, self).__init__(reason)
        self.reason = reason


class IdMismatchError(DynamixelDriverError):
    """A reply came from a different servo than the one addressed."""

    def __init__(self, expected, actual):
        super(IdMismatchError, self).__init__(
            'expected reply from id {} but got id {}'.format(expected, actual))
        self.expected = expected
        self.actual = actual


class FailedOpeningTransport(DynamixelDriverError):
    """The serial port could not be found or opened."""


class CommError(DynamixelDriverError):
    """An unexpected communication error occurred."""


class UnitConversionNotImplemented(Exception):
    """Unit Conversion not set for given registers."""


RECOVERABLE_ERRORS = (
    CommTimeout,
    StatusFault,
    MalformedStatus,
    ReadingError,
    DecodingError,
    IdMismatchError,
)


def is_recoverable(error):
    """Returns True iff retrying the logical operation that raised `error` may succeed."""
    return isinstance(error, RECOVERABLE_ERRORS)
