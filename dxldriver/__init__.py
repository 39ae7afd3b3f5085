# Copyright (c) 2018, The SenseAct Authors.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
from dxldriver.dxl_commv1 import SyncCommand, SyncCommandFloat, Status, StatusErrorFlags
from dxldriver.dxl_driver import DynamixelDriver
from dxldriver.dxl_transport import FramedDriver, FramedSerialDriver, make_connection

__version__ = '0.1.0'
