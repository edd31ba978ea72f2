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

from enum import Enum

CLOSED_COLON = "00:00:00"


class CountdownStyle(Enum):
    LETTERS = "letters"
    COLON = "colon"


class CountdownCalculator:
    @staticmethod
    def remaining(end_timestamp: int, now: int) -> int:
        return max(0, int(end_timestamp) - int(now))

    @staticmethod
    def format(duration: int, style: CountdownStyle = CountdownStyle.LETTERS) -> str:
        hours = duration // 3600
        minutes = (duration % 3600) // 60
        seconds = duration % 60
        if style == CountdownStyle.COLON:
            return f"{hours}:{minutes}:{seconds}"
        return f"{hours}h {minutes}m {seconds}s"

    @classmethod
    def countdown(cls, end_timestamp: int, now: int, style: CountdownStyle = CountdownStyle.LETTERS) -> str:
        """Renders the time left in the bidding window.

        The owner view shows the padded literal once the end time has passed,
        while an end time equal to now still goes through ``format``.
        """
        if style == CountdownStyle.COLON and int(end_timestamp) < int(now):
            return CLOSED_COLON
        return cls.format(cls.remaining(end_timestamp, now), style)

    @classmethod
    def is_closed(cls, end_timestamp: int, now: int) -> bool:
        return cls.remaining(end_timestamp, now) == 0
