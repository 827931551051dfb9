"""
Asset identifiers for the pricing core.

An asset is an ERC-6909 coin id living in a token contract. The hub asset
(ETH) is id 0 at the zero address; every non-hub pool is paired against it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from eth_utils import is_address, to_checksum_address

if TYPE_CHECKING:
    from .pools import PoolKey


# Type aliases
Address = str  # checksummed 20-byte hex address
AssetId = int  # ERC-6909 coin id (uint256)
Amount = int  # Non-negative integer in smallest units (arbitrary precision)

UINT256_MAX = (1 << 256) - 1

ZERO_ADDRESS: Address = "0x0000000000000000000000000000000000000000"
HUB_ASSET_ID: AssetId = 0

# ERC-6909 Coins contract holding every launched coin.
COINS_ADDRESS: Address = to_checksum_address("0x0000000000009710cd229bf635c4500029651ee8")


def require_uint256(name: str, value: int) -> int:
    """Reject non-ints, bools and values outside the on-chain uint256 domain."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0 or value > UINT256_MAX:
        raise ValueError(f"{name} must be in [0, 2**256 - 1]: {value}")
    return value


def normalize_address(address: str) -> Address:
    if not isinstance(address, str) or not is_address(address):
        raise ValueError(f"invalid address: {address!r}")
    return to_checksum_address(address)


@dataclass(frozen=True)
class Token:
    """
    A tradable asset.

    Attributes:
        id: Coin id inside `address` (0 for the hub asset)
        address: Token contract (zero address for the hub asset)
        decimals: Display decimals; only the UI boundary uses this
        symbol: Ticker, informational only
        is_custom_pool: Pool key/id are fixed externally instead of derived
        pool_key: Override key for custom pools
        pool_id: Override id for custom pools
        fee_bps: Pool fee override (None means the protocol default)
    """

    id: AssetId
    address: Address = COINS_ADDRESS
    decimals: int = 18
    symbol: str = ""
    is_custom_pool: bool = False
    pool_key: Optional["PoolKey"] = None
    pool_id: Optional[int] = None
    fee_bps: Optional[int] = None

    def __post_init__(self) -> None:
        require_uint256("id", self.id)
        object.__setattr__(self, "address", normalize_address(self.address))
        if not isinstance(self.decimals, int) or isinstance(self.decimals, bool) or not (0 <= self.decimals <= 77):
            raise ValueError(f"decimals must be an int in [0, 77]: {self.decimals}")
        if self.fee_bps is not None:
            if not isinstance(self.fee_bps, int) or isinstance(self.fee_bps, bool):
                raise TypeError("fee_bps must be an int")
            if not (0 <= self.fee_bps < 10_000):
                raise ValueError(f"fee_bps must be in [0, 10000): {self.fee_bps}")
        if self.pool_id is not None:
            require_uint256("pool_id", self.pool_id)

    @property
    def is_hub(self) -> bool:
        return self.id == HUB_ASSET_ID and self.address == ZERO_ADDRESS

    def sort_key(self) -> Tuple[int, int, int, int]:
        # Hub first, then fewer set bits in the address, then lower address,
        # then lower coin id within one contract.
        address = int(self.address, 16)
        return (0 if self.is_hub else 1, bin(address).count("1"), address, self.id)

    def same_asset(self, other: "Token") -> bool:
        return self.id == other.id and self.address == other.address


HUB_TOKEN = Token(id=HUB_ASSET_ID, address=ZERO_ADDRESS, symbol="ETH")
