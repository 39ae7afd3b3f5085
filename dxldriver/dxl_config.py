# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
from .utils import MAX_ID

DEFAULT_BAUDRATE = 1000000
# seconds to wait for a complete status packet
DEFAULT_TIMEOUT = 0.1
DEFAULT_RETRIES = 0
# replies from other ids skipped while waiting for the addressed servo
STALE_REPLY_LIMIT = 2

SEARCH_IDS = range(1, MAX_ID + 1)
# searched in order when no port_str is given
PORT_PATTERNS = {
    'darwin': ['/dev/tty.usb*'],
    'linux': ['/dev/ttyUSB*', '/dev/ttyACM*'],
}

SETUPS = \
    {
    'default':
        {
            'port_str'  : None,
            'baudrate'  : DEFAULT_BAUDRATE,
            'timeout'   : DEFAULT_TIMEOUT,
            'retries'   : DEFAULT_RETRIES,
        },
    'usb2ax':
        {
            'port_str'  : '/dev/ttyACM0',
            'baudrate'  : DEFAULT_BAUDRATE,
            'timeout'   : DEFAULT_TIMEOUT,
            'retries'   : 2,
        },
    'u2d2_57600':
        {
            'port_str'  : '/dev/ttyUSB0',
            'baudrate'  : 57600,
            'timeout'   : 0.25,
            'retries'   : 2,
        },
    }
