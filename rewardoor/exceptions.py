"""Exceptions shared across rewardoor."""


class RewardoorError(Exception):
    """Base error for rewardoor."""


class UpstreamError(RewardoorError):
    """An upstream beacon or execution endpoint failed."""


class UpstreamUnavailableError(UpstreamError):
    """Upstream could not be reached, timed out, or answered with an error."""


class UpstreamDecodeError(UpstreamError):
    """Upstream answered with a payload we could not decode."""


class SlotNotFoundError(RewardoorError):
    """No block was proposed for the slot."""

    def __init__(self, slot: int):
        self.slot = slot
        super().__init__(f"Block not found for slot {slot}")


class FutureSlotError(RewardoorError):
    """Requested slot is ahead of the current head."""

    def __init__(self, slot: int, current_slot: int):
        self.slot = slot
        self.current_slot = current_slot
        super().__init__(f"Slot {slot} is in the future (head is {current_slot})")


class InvalidSlotError(RewardoorError):
    """Slot identifier is not a non-negative integer."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid slot number: {value!r}")
