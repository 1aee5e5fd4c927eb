"""Execution JSON-RPC types."""

import re

from ..exceptions import UpstreamUnavailableError

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")

BLOCK_TAGS = ("latest", "earliest", "pending", "safe", "finalized")


class ExecutionAPIError(UpstreamUnavailableError):
    """Error member of a JSON-RPC response."""

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(f"Execution API error {code}: {message}")


def is_address(value: str) -> bool:
    """Check that value is a 0x-prefixed 20-byte hex address."""
    return isinstance(value, str) and bool(ADDRESS_PATTERN.match(value))


def to_block_param(block) -> str:
    """Convert a block number or tag to a JSON-RPC block parameter."""
    if isinstance(block, int):
        return hex(block)
    if block in BLOCK_TAGS:
        return block
    raise ValueError(f"Invalid block parameter: {block!r}")
