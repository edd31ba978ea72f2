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

import json
from os import environ
from pathlib import Path

NETWORKS_FILE = Path(__file__).parent / "networks.json"


class Config:
    def __init__(self, network: str, provider_url: str, factory_address: str, status_server_url=None, log_level: str = "INFO"):
        self.network = network
        self.provider_url = provider_url
        self.factory_address = factory_address
        self.status_server_url = status_server_url
        self.log_level = log_level

    def __repr__(self) -> str:
        return f"network: {self.network}, provider: {self.provider_url}, factory: {self.factory_address}, status server: {self.status_server_url}"


def load_networks(path=NETWORKS_FILE) -> dict:
    with open(path) as networks_file:
        return json.load(networks_file)


def load_config(env=environ, networks=None) -> Config:
    networks = networks if networks is not None else load_networks()
    network = env.get("NETWORK", "localhost")
    if network not in networks:
        raise ValueError(f"Unknown network {network}, expected one of {sorted(networks)}")

    return Config(
        network=network,
        provider_url=env.get("PROVIDER_URL", networks[network]["PROVIDER_URL"]),
        factory_address=env.get("FACTORY_ADDRESS", networks[network]["FACTORY_ADDRESS"]).lower(),
        status_server_url=env.get("STATUS_SERVER_URL") or None,
        log_level=env.get("LOG_LEVEL", "INFO"),
    )
