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

class ProcurementError(Exception):
    """Base class of every failure raised by the procurement client."""


class ValidationError(ProcurementError, ValueError):
    """Local check failed; no boundary call was made."""


class InvalidAddress(ValidationError):
    pass


class InvalidAmount(ValidationError):
    pass


class InvalidDuration(ValidationError):
    pass


class NotWhitelisted(ValidationError):
    pass


class BiddingClosed(ValidationError):
    pass


class NotOwner(ValidationError):
    pass


class SessionNotLoaded(ValidationError):
    pass


class MalformedPayload(ProcurementError, ValueError):
    """A single contract payload could not be decoded."""


class BoundaryError(ProcurementError):
    pass


class BoundaryUnavailable(BoundaryError):
    """Wallet or provider missing or unreachable."""


class BoundaryRejected(BoundaryError):
    """The contract call reverted or the signer declined it."""
