#!/usr/bin/env python
# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
"""Prints the temperature of every servo answering on the low ids."""

from dxldriver.dxl_exceptions import RECOVERABLE_ERRORS
from helper import make_parser, open_driver


def main():
    parser = make_parser(__doc__)
    parser.add_argument("--max_id", default=20, type=int)
    args = parser.parse_args()

    with open_driver(args) as driver:
        for dxl_id in range(args.max_id):
            try:
                print("servo {} has temperature of {} C".format(dxl_id, driver.read_temperature(dxl_id)))
            except RECOVERABLE_ERRORS:
                pass


if __name__ == '__main__':
    main()
