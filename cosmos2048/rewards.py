import logging
import math
import random
import string
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

logger = logging.getLogger(__name__)

MINT_BADGE = "MINT_BADGE"
NOTHING = "NOTHING"

BASE_TOKEN_URI = "https://api.cosmos2048.com/metadata/"
COLLECTION_NAME = "Cosmos 2048 Game Badges"


@dataclass(frozen=True)
class Prize:
    id: str
    name: str
    emoji: str
    color: str
    probability: float
    rarity: str


PRIZES: list[Prize] = [
    Prize("common_badge", "Common Badge", "🥉", "#9CA3AF", 0.4, "common"),
    Prize("uncommon_badge", "Uncommon Badge", "🥈", "#10B981", 0.3, "uncommon"),
    Prize("rare_badge", "Rare Badge", "🥇", "#3B82F6", 0.15, "rare"),
    Prize("epic_badge", "Epic Badge", "💎", "#8B5CF6", 0.1, "epic"),
    Prize("legendary_badge", "Legendary Badge", "👑", "#F59E0B", 0.04, "legendary"),
    Prize("nothing", "Try Again", "😅", "#EF4444", 0.01, "none"),
]


class MintError(ValueError):
    pass


def prize_by_id(prize_id: str) -> Prize | None:
    for prize in PRIZES:
        if prize.id == prize_id:
            return prize
    return None


def select_prize(rng: random.Random | None = None) -> Prize:
    """Pick a wheel segment by cumulative probability."""
    draw = (rng or random).random()
    cumulative = 0.0
    for prize in PRIZES:
        cumulative += prize.probability
        if draw <= cumulative:
            return prize
    return PRIZES[-1]


def seeded_draw(seed: float) -> float:
    x = math.sin(seed) * 10000
    return x - math.floor(x)


def spin_outcome(
    seed: float | None = None, chance: float = 0.1, rng: random.Random | None = None
) -> str:
    """
    Server-side wheel spin. A non-zero seed makes the draw deterministic.
    """

    draw = seeded_draw(seed) if seed else (rng or random).random()
    return MINT_BADGE if draw < chance else NOTHING


def token_id(address: str, timestamp: int, score: int) -> str:
    return f"c2048-{address[-6:]}-{str(timestamp)[-6:]}-{score:08d}"


def badge_metadata(
    address: str, score: int, max_tile: int, timestamp: int, prize: Prize
) -> dict[str, Any]:
    """NFT metadata for a badge; `timestamp` is in milliseconds."""
    earned = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
    return {
        "name": f"Cosmos 2048 {prize.name}",
        "description": (
            f"A {prize.rarity} game badge earned by achieving {score:,} points "
            f"and reaching the {max_tile} tile in Cosmos 2048. {prize.emoji}"
        ),
        "image": f"{BASE_TOKEN_URI}images/{prize.rarity}-{max_tile}.png",
        "external_url": "https://cosmos2048.com",
        "attributes": [
            {"trait_type": "Game", "value": "Cosmos 2048"},
            {"trait_type": "Score", "value": score, "display_type": "number"},
            {"trait_type": "Max Tile", "value": max_tile, "display_type": "number"},
            {"trait_type": "Rarity", "value": prize.rarity},
            {"trait_type": "Prize Type", "value": prize.name},
            {"trait_type": "Player Address", "value": address},
            {
                "trait_type": "Date Earned",
                "value": earned.isoformat(),
                "display_type": "date",
            },
            {"trait_type": "Game Session", "value": f"{timestamp}-{address[-6:]}"},
        ],
        "properties": {
            "rarity": prize.rarity,
            "game_score": score,
            "max_tile": max_tile,
            "wheel_prize": prize.id,
            "minted_at": timestamp,
            "player": address,
        },
    }


@dataclass
class MintRequest:
    recipient: str
    minter: str
    prize: Prize
    score: int = 0
    max_tile: int = 0


@dataclass
class MintResult:
    ok: bool
    tx_hash: str
    token_id: str
    recipient: str
    minter: str
    timestamp: str
    metadata: dict[str, Any] = field(default_factory=dict)


class BadgeMinter(Protocol):
    def mint(self, request: MintRequest) -> MintResult: ...

    def owned_badges(self, address: str) -> list[MintResult]: ...


class StubMinter:
    """Minter that fabricates transaction hashes instead of talking to a chain."""

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()
        self._minted: dict[str, list[MintResult]] = {}
        self._lock = threading.Lock()

    def _suffix(self) -> str:
        alphabet = string.ascii_lowercase + string.digits
        return "".join(self.rng.choice(alphabet) for _ in range(6))

    def mint(self, request: MintRequest) -> MintResult:
        if not request.recipient:
            raise MintError("Recipient address is required")
        if request.prize.rarity == "none":
            raise MintError("No NFT to mint for this prize")

        now_ms = int(time.time() * 1000)
        metadata = badge_metadata(
            request.recipient, request.score, request.max_tile, now_ms, request.prize
        )
        metadata["collection"] = COLLECTION_NAME
        metadata["token_id"] = token_id(request.recipient, now_ms, request.score)
        result = MintResult(
            ok=True,
            tx_hash=f"stub-tx-{now_ms}-{self._suffix()}",
            token_id=f"badge-{now_ms}",
            recipient=request.recipient,
            minter=request.minter,
            timestamp=datetime.now(timezone.utc).isoformat(),
            metadata=metadata,
        )
        with self._lock:
            self._minted.setdefault(request.recipient, []).append(result)
        logger.info("stub minted %s for %s", result.token_id, request.recipient)
        return result

    def owned_badges(self, address: str) -> list[MintResult]:
        with self._lock:
            return list(self._minted.get(address, []))
