#!/usr/bin/env python
# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
"""Scans low ids and prints model, temperature, voltage and position of each servo."""

from dxldriver.dxl_exceptions import RECOVERABLE_ERRORS
from helper import make_parser, open_driver


def print_info(driver, dxl_id):
    print("Servo id: {}".format(dxl_id))
    print("   model {} firmware {}".format(driver.read_model_number(dxl_id),
                                           driver.read_firmware_version(dxl_id)))
    print("   temperature {} C".format(driver.read_temperature(dxl_id)))
    print("   voltage {:.1f} V".format(driver.read_voltage(dxl_id)))
    print("   position {:.2f} degrees".format(driver.read_position_degrees(dxl_id)))


def main():
    parser = make_parser(__doc__)
    parser.add_argument("--max_id", default=20, type=int)
    args = parser.parse_args()

    with open_driver(args) as driver:
        for dxl_id in driver.scan(range(args.max_id)):
            try:
                print_info(driver, dxl_id)
            except RECOVERABLE_ERRORS as e:
                print("   read failed: {}".format(e))
                driver.clear_io_buffers()


if __name__ == '__main__':
    main()
