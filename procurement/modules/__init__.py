# Copyright 2022 Cartesi Pte. Ltd.
#
# SPDX-License-Identifier: Apache-2.0
# Licensed under the Apache License, Version 2.0 (the "License"); you may not use
# this file except in compliance with the License. You may obtain a copy of the
# License at http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software distributed
# under the License is distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR
# CONDITIONS OF ANY KIND, either express or implied. See the License for the
# specific language governing permissions and limitations under the License.

from procurement.modules.log import Logger
from procurement.modules.convertions import Convertions
from procurement.modules.codec import BidCodec
from procurement.modules.countdown import CountdownCalculator, CountdownStyle
from procurement.modules.models import Bid, BidLedger, NO_BIDS, Action, ActionStatus
from procurement.modules.contract import ProcurementContract, ProcurementFactory, Web3Wallet
from procurement.modules.outputs import Notice, Report, StatusReporter
