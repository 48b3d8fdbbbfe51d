"""
Domain: 值物件 (Value Objects)。
時間序列資料點、資產參照與加密貨幣目錄項目，皆為不可變的純資料。
"""

from __future__ import annotations

from dataclasses import dataclass

from domain.enums import AssetKind


@dataclass(frozen=True)
class Point:
    """時間序列中的單一資料點。"""

    time: int  # unix seconds
    value: float

    def to_dict(self) -> dict:
        return {"time": self.time, "value": self.value}


@dataclass(frozen=True)
class AssetRef:
    """
    已分類的資產參照。
    法幣只有 symbol；加密貨幣另帶 CoinGecko id（resolved_id）。
    """

    kind: AssetKind
    symbol: str
    resolved_id: str | None = None

    @classmethod
    def fiat(cls, symbol: str) -> AssetRef:
        return cls(kind=AssetKind.FIAT, symbol=symbol)

    @classmethod
    def crypto(cls, symbol: str, resolved_id: str) -> AssetRef:
        return cls(kind=AssetKind.CRYPTO, symbol=symbol, resolved_id=resolved_id)

    @property
    def is_fiat(self) -> bool:
        return self.kind == AssetKind.FIAT


@dataclass(frozen=True)
class CoinListing:
    """加密貨幣目錄中的單一項目（CoinGecko /coins/markets）。"""

    id: str
    symbol: str  # uppercased
    name: str
    image: str | None = None
    market_cap_rank: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "name": self.name,
            "image": self.image,
            "type": AssetKind.CRYPTO.value,
        }
