#!/usr/bin/env python
# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
"""Moves one servo back and forth, polling its position until each goal is reached."""

import time

from helper import make_parser, open_driver


def move_to(driver, dxl_id, goal, tolerance, timeout):
    """Commands `goal` degrees and waits until the servo is within `tolerance` of it.

    Returns:
        The last measured position in degrees
    """
    driver.write_position_degrees(dxl_id, goal)
    deadline = time.monotonic() + timeout
    position = driver.read_position_degrees(dxl_id)
    while abs(position - goal) > tolerance and time.monotonic() < deadline:
        position = driver.read_position_degrees(dxl_id)
    return position


def main():
    parser = make_parser(__doc__)
    parser.add_argument("--id", default=1, type=int)
    parser.add_argument("--low", default=100., type=float, help="degrees")
    parser.add_argument("--high", default=200., type=float, help="degrees")
    parser.add_argument("--tolerance", default=1., type=float, help="degrees")
    parser.add_argument("--cycles", default=5, type=int)
    parser.add_argument("--move_timeout", default=3., type=float, help="seconds per move")
    args = parser.parse_args()

    with open_driver(args) as driver:
        driver.write_torque(args.id, True)
        try:
            for _ in range(args.cycles):
                for goal in (args.low, args.high):
                    position = move_to(driver, args.id, goal, args.tolerance, args.move_timeout)
                    print("goal {:.1f} reached {:.1f} degrees".format(goal, position))
        finally:
            driver.write_torque(args.id, False)


if __name__ == '__main__':
    main()
