from dataclasses import dataclass


@dataclass(frozen=True)
class Token:
    name: str
    emoji: str
    color: str
    description: str
    special: bool = False


TOKENS: dict[int, Token] = {
    2: Token("ATOM", "⚛️", "#00D4FF", "Cosmos Hub native token"),
    4: Token("OSMO", "🧪", "#9945FF", "Osmosis DEX token"),
    8: Token("JUNO", "🌀", "#FF6B9D", "Juno smart contracts"),
    16: Token("STARS", "⭐", "#FF0080", "Stargaze NFT hub"),
    32: Token("SCRT", "🔐", "#4FD1C7", "Secret Network privacy"),
    64: Token("EVMOS", "🚀", "#FF4E50", "Evmos EVM compatibility"),
    128: Token("AKT", "☁️", "#4FC3F7", "Akash cloud computing"),
    256: Token("REGEN", "🌱", "#4ADE80", "Regen regenerative economy"),
    512: Token("CRO", "💎", "#3B82F6", "Crypto.com Chain"),
    1024: Token("KAVA", "🔥", "#FFB347", "Kava DeFi platform"),
    2048: Token("COSMOS", "🌌", "#A855F7", "Internet of Blockchains", special=True),
    4096: Token("INFINITY", "♾️", "#FF10F0", "Beyond the cosmos!", special=True),
}

EMPTY_COLOR = "#D1D5DB"


def tile_data(value: int) -> Token:
    """Token shown for a tile value, with a generic fallback past the known range."""
    token = TOKENS.get(value)
    if token is None:
        return Token(str(value), "✨", "#6B7280", "Unknown token")
    return token


def tile_rarity(max_tile: int) -> str:
    if max_tile >= 4096:
        return "legendary"
    if max_tile >= 2048:
        return "epic"
    if max_tile >= 1024:
        return "rare"
    if max_tile >= 512:
        return "uncommon"
    return "common"
