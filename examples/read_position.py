#!/usr/bin/env python
# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
"""Polls the present position of one servo until interrupted."""

import time

from helper import make_parser, open_driver
from dxldriver.dxl_exceptions import RECOVERABLE_ERRORS


def main():
    parser = make_parser(__doc__)
    parser.add_argument("--id", default=1, type=int)
    parser.add_argument("--period", default=0.05, type=float, help="seconds between reads")
    args = parser.parse_args()

    with open_driver(args) as driver:
        try:
            while True:
                try:
                    position = driver.read_position(args.id)
                    print("servo {} has position of {} ({:.1f} degrees)".format(
                        args.id, position, driver.read_position_degrees(args.id)))
                except RECOVERABLE_ERRORS as e:
                    print("read failed: {}".format(e))
                    driver.clear_io_buffers()
                time.sleep(args.period)
        except KeyboardInterrupt:
            pass


if __name__ == '__main__':
    main()
