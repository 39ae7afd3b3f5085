# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
import argparse
import logging

from dxldriver import DynamixelDriver
from dxldriver import dxl_config


def make_parser(description):
    """Returns an ArgumentParser with the connection options shared by the examples."""
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--port", default=None, help="serial port, e.g. /dev/ttyUSB0 (autodetected if omitted)")
    parser.add_argument("--baud", default=dxl_config.DEFAULT_BAUDRATE, type=int)
    parser.add_argument("--timeout", default=dxl_config.DEFAULT_TIMEOUT, type=float)
    parser.add_argument("--retries", default=dxl_config.DEFAULT_RETRIES, type=int)
    parser.add_argument("-v", "--verbose", action="store_true", help="log every packet")
    return parser


def open_driver(args):
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(levelname)s %(message)s')
    return DynamixelDriver.with_baud_rate(args.port, args.baud, timeout=args.timeout, retries=args.retries)
