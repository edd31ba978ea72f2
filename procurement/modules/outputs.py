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

import asyncio
import requests

from procurement.modules.log import Logger

LOGGER = Logger(level="INFO", name=__name__).logger


class Base:
    def __init__(self, status_server=None, timeout: float = 5):
        self.status_server = status_server
        self.timeout = timeout

    def send_request(self, endpoint, json_data):
        if not self.status_server:
            return
        try:
            response = requests.post(f"{self.status_server}/{endpoint}", json=json_data, timeout=self.timeout)
            LOGGER.info(f"/{endpoint}: Received response status {response.status_code} body {response.content}")
        except requests.exceptions.RequestException as e:
            LOGGER.info(f"Failed to send request to /{endpoint}: {e}")


class Notice(Base):
    def send(self, json_data: dict):
        LOGGER.info(f"Sending notice {json_data}")
        self.send_request("notice", json_data)


class Report(Base):
    def send(self, json_data: dict):
        LOGGER.info(f"Sending report {json_data}")
        self.send_request("report", json_data)


class StatusReporter:
    """Publishes the pending / confirmed / failed outcome of each session action."""

    def __init__(self, status_server=None):
        self.notice = Notice(status_server=status_server)
        self.report = Report(status_server=status_server)

    async def _post(self, sender, action, status, message):
        await asyncio.to_thread(sender.send, {"action": action, "status": status, "message": message})

    async def pending(self, action: str, message: str):
        await self._post(self.notice, action, "pending", message)

    async def confirmed(self, action: str, message: str):
        await self._post(self.notice, action, "confirmed", message)

    async def failed(self, action: str, message: str):
        await self._post(self.report, action, "failed", message)
