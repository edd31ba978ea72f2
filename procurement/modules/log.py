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

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Logger:
    logger = None

    def __init__(self, level="INFO", name=__name__):
        logging.basicConfig(level=level, format=LOG_FORMAT)
        self.logger = logging.getLogger(name)
        Logger.logger = self.logger

    @staticmethod
    def set_level(level):
        """Applies a configured level to every logger of the package."""
        logging.getLogger("procurement").setLevel(level)
