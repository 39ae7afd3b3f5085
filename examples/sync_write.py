#!/usr/bin/env python
# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
"""Moves several servos between both position limits with one sync write per move."""

import time

from dxldriver import SyncCommand
from helper import make_parser, open_driver


def main():
    parser = make_parser(__doc__)
    parser.add_argument("--ids", default=[1, 2], type=int, nargs='+')
    parser.add_argument("--pause", default=2., type=float, help="seconds between moves")
    args = parser.parse_args()

    with open_driver(args) as driver:
        driver.sync_write_torque([(dxl_id, True) for dxl_id in args.ids])
        for goal in (1023, 0, 512):
            driver.sync_write_position([SyncCommand(dxl_id, goal) for dxl_id in args.ids])
            time.sleep(args.pause)
            for dxl_id in args.ids:
                print("servo {} at {}".format(dxl_id, driver.read_position(dxl_id)))
        driver.sync_write_torque([(dxl_id, False) for dxl_id in args.ids])


if __name__ == '__main__':
    main()
