#!/usr/bin/env python
# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
"""Pings every id on the bus and reports the servos that answer."""

from helper import make_parser, open_driver


def main():
    parser = make_parser(__doc__)
    parser.add_argument("--first", default=0, type=int)
    parser.add_argument("--last", default=253, type=int)
    args = parser.parse_args()

    with open_driver(args) as driver:
        found = driver.scan(range(args.first, args.last + 1))
    if found:
        print("Found servos at ids: {}".format(", ".join(str(i) for i in found)))
    else:
        print("No servos found")


if __name__ == '__main__':
    main()
