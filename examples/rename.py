#!/usr/bin/env python
# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
"""Changes the id of a servo. The new id is stored in EEPROM."""

import sys

from helper import make_parser, open_driver


def main():
    parser = make_parser(__doc__)
    parser.add_argument("old_id", type=int)
    parser.add_argument("new_id", type=int)
    args = parser.parse_args()

    with open_driver(args) as driver:
        if args.new_id in driver.scan([args.new_id]):
            print("id {} is already taken".format(args.new_id))
            sys.exit(1)
        driver.write_id(args.old_id, args.new_id)
        driver.ping(args.new_id)
    print("Servo {} renamed to {}".format(args.old_id, args.new_id))


if __name__ == '__main__':
    main()
