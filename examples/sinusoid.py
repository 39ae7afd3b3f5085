#!/usr/bin/env python
# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
"""Sweeps one servo along a sine wave around 150 degrees.

With --plot the commanded and measured positions are plotted at the end
(needs matplotlib, `pip install dxldriver[examples]`).
"""

import time

import numpy as np

from helper import make_parser, open_driver


def run(driver, dxl_id, duration, period, amplitude, center):
    """Commands the sweep and records (time, commanded, measured) rows."""
    driver.write_torque(dxl_id, True)
    start = time.time()
    rows = []
    t = 0.
    while t < duration:
        command = np.sin(t) * amplitude + center
        driver.write_position_degrees(dxl_id, command)
        rows.append((t, command, driver.read_position_degrees(dxl_id)))
        time.sleep(period)
        t = time.time() - start
    return np.array(rows)


def main():
    parser = make_parser(__doc__)
    parser.add_argument("--id", default=1, type=int)
    parser.add_argument("--duration", default=10., type=float, help="seconds")
    parser.add_argument("--period", default=0.1, type=float, help="seconds between commands")
    parser.add_argument("--amplitude", default=90., type=float, help="degrees")
    parser.add_argument("--center", default=150., type=float, help="degrees")
    parser.add_argument("--plot", action="store_true")
    args = parser.parse_args()

    with open_driver(args) as driver:
        try:
            rows = run(driver, args.id, args.duration, args.period, args.amplitude, args.center)
        finally:
            driver.write_torque(args.id, False)

    error = rows[:, 1] - rows[:, 2]
    print("mean abs tracking error {:.2f} degrees".format(np.mean(np.abs(error))))
    if args.plot:
        import matplotlib.pyplot as plt
        plt.figure()
        plt.plot(rows[:, 0], rows[:, 1], label='commanded')
        plt.plot(rows[:, 0], rows[:, 2], label='measured')
        plt.xlabel('time [s]')
        plt.ylabel('position [degrees]')
        plt.legend()
        plt.show()


if __name__ == '__main__':
    main()
