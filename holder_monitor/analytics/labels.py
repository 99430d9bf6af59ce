"""Known-entity lookup: exchange hot wallets and DEX contracts.

The table is passed explicitly to the whale classifier, so tests and callers
can swap in their own. Keys are lower-cased addresses.
"""

from collections.abc import Mapping
from types import MappingProxyType

from holder_monitor.models.holder import EntityLabel

KnownEntities = Mapping[str, EntityLabel]


def _cex(label: str, slug: str) -> EntityLabel:
    return EntityLabel(
        label=label,
        type="exchange",
        confidence="high",
        tags=frozenset({"exchange", "cex", slug}),
    )


def _dex(label: str, slug: str, kind: str) -> EntityLabel:
    return EntityLabel(
        label=label,
        type="dex",
        confidence="high",
        tags=frozenset({"dex", "contract", slug, kind}),
    )


_ENTRIES: dict[str, EntityLabel] = {
    # Binance
    "0x3f5ce5fbfe3e9af3971dd833d26ba9b5c936f0be": _cex("Binance", "binance"),
    "0xd551234ae421e3bcba99a0da6d736074f22192ff": _cex("Binance", "binance"),
    "0x564286362092d8e7936f0549571a803b203aaced": _cex("Binance", "binance"),
    "0x0681d8db095565fe8a346fa0277bffde9c0edbbf": _cex("Binance", "binance"),
    "0xfe9e8709d3215310075d67e3ed32a380ccf451c8": _cex("Binance", "binance"),
    "0x47ac0fb4f2d84898e4d9e7b4dab3c24507a6d503": _cex("Binance", "binance"),
    "0xbe0eb53f46cd790cd13851d5eff43d12404d33e8": _cex("Binance", "binance"),
    "0xf977814e90da44bfa03b6295a0616a897441acec": _cex("Binance", "binance"),
    "0x28c6c06298d514db089934071355e5743bf21d60": _cex("Binance US", "binance"),
    # Coinbase
    "0xa910f92acdaf488fa6ef02174fb86208ad7722ba": _cex("Coinbase", "coinbase"),
    "0x503828976d22510aad0201ac7ec88293211d23da": _cex("Coinbase", "coinbase"),
    "0xddfabcdc4d8ffc6d5beaf154f18b778f892a0740": _cex("Coinbase", "coinbase"),
    "0x71660c4005ba85c37ccec55d0c4493e66fe775d3": _cex("Coinbase", "coinbase"),
    "0x267be1c1d684f78cb4f6a176c4911b741e4ffdc0": _cex("Coinbase", "coinbase"),
    "0xf6874c88757721a02f47592140905c4336dfbc61": _cex("Coinbase", "coinbase"),
    "0x7c195d981abfdc3ddecd2ca0fed0958430488e34": _cex("Coinbase", "coinbase"),
    # Kraken
    "0x6b76f8b1e9e59913bfe758821887311ba1805cab": _cex("Kraken", "kraken"),
    "0xae2d4617c862309a3d75a0ffb358c7a5009c673f": _cex("Kraken", "kraken"),
    "0x53d284357ec70ce289d6d64134dfac8e511c8a3d": _cex("Kraken", "kraken"),
    "0x89e51fa8ca5d66cd220baed62ed01e8951aa7c40": _cex("Kraken", "kraken"),
    "0x0a869d79a7052c7f1b55a8ebabbea3420f0d1e13": _cex("Kraken", "kraken"),
    "0xe853c56864a2ebe4576a807d26fdc4a0ada51919": _cex("Kraken", "kraken"),
    "0x2910543af39aba0cd09dbb2d50200b3e800a63d2": _cex("Kraken", "kraken"),
    # Bitfinex
    "0x94a1b5cdb22c43faab4abeb5c74999895464ddaf": _cex("Bitfinex", "bitfinex"),
    "0xcafb10ee663f465f9d10588ac44ed20ed608c11e": _cex("Bitfinex", "bitfinex"),
    "0x742d35cc6634c0532925a3b844bc454e4438f44e": _cex("Bitfinex", "bitfinex"),
    "0x876eabf441b2ee5b5b0554fd502a8e0600950cfa": _cex("Bitfinex", "bitfinex"),
    "0x0eee3e3828a45f7601d5f54bf49bb01d1a9df5ea": _cex("Bitfinex", "bitfinex"),
    # OKX
    "0x236f9f97e0e62388479bf9e5ba4889e46b0273c3": _cex("OKX", "okx"),
    "0xa7efae728d2936e78bda97dc267687568dd593f3": _cex("OKX", "okx"),
    "0x98ec059dc3adfbdd63429454aeb0c990fba4a128": _cex("OKX", "okx"),
    # Bybit
    "0xf89d7b9c864f589bbf53a82105107622b35eaa40": _cex("Bybit", "bybit"),
    "0xee5b5b923ffce93a870b3104b7ca09c3db80047a": _cex("Bybit", "bybit"),
    # Gate.io
    "0x0d0707963952f2fba59dd06f2b425ace40b492fe": _cex("Gate.io", "gate"),
    "0x1c4b70a3968436b9a0a9cf5205c787eb81bb558c": _cex("Gate.io", "gate"),
    # Huobi/HTX
    "0x5c985e89dde482efe97ea9f1950ad149eb73829b": _cex("Huobi", "huobi"),
    "0x6748f50f686bfbca6fe8ad62b22228b87f31ff2b": _cex("Huobi", "huobi"),
    "0xeee28d484628d41a82d01e21d12e2e78d69920da": _cex("Huobi", "huobi"),
    # KuCoin
    "0x2b5634c42055806a59e9107ed44d43c426e58258": _cex("KuCoin", "kucoin"),
    "0x689c56aef474df92d44a1b70850f808488f9769c": _cex("KuCoin", "kucoin"),
    "0xd6216fc19db775df9774a6e33526131da7d19a2c": _cex("KuCoin", "kucoin"),
    # Gemini
    "0x5f65f7b609678448494de4c87521cdf6cef1e932": _cex("Gemini", "gemini"),
    "0xd24400ae8bfebb18ca49be86258a3c749cf46853": _cex("Gemini", "gemini"),
    "0x61edcdf5bb737adffe5043706e7c5bb1f1a56eea": _cex("Gemini", "gemini"),
    # DEX routers and pools
    "0x68b3465833fb72a70ecdf485e0e4c7bd8665fc45": _dex("Uniswap Router", "uniswap", "router"),
    "0x7a250d5630b4cf539739df2c5dacb4c659f2488d": _dex("Uniswap V2 Router", "uniswap", "router"),
    "0xe592427a0aece92de3edee1f18e0157c05861564": _dex("Uniswap V3 Router", "uniswap", "router"),
    "0xd9e1ce17f2641f24ae83637ab66a2cca9c378b9f": _dex("Sushiswap Router", "sushiswap", "router"),
    "0xbabe61887f1de2713c6f97e567623453d3c79f67": _dex("Curve", "curve", "pool"),
}


def build_known_entities(entries: Mapping[str, EntityLabel]) -> KnownEntities:
    """Read-only lookup table with lower-cased keys."""
    return MappingProxyType({addr.lower(): label for addr, label in entries.items()})


DEFAULT_KNOWN_ENTITIES: KnownEntities = build_known_entities(_ENTRIES)


def lookup_entity(address: str, known_entities: KnownEntities) -> EntityLabel | None:
    return known_entities.get(address.lower())


def is_exchange(address: str, known_entities: KnownEntities) -> bool:
    entity = lookup_entity(address, known_entities)
    return entity is not None and "exchange" in entity.tags


def is_dex(address: str, known_entities: KnownEntities) -> bool:
    entity = lookup_entity(address, known_entities)
    return entity is not None and entity.type == "dex"


def detect_wallet_type(
    balance: float,
    total_supply: float,
    transfer_count: int | None = None,
) -> str:
    """Rough wallet role from share of supply and transfer count.

    Returns one of "team_founder", "bot", "whale", "large_holder", "retail".
    """
    pct = balance / total_supply * 100 if total_supply > 0 else 0.0

    # Big bag that barely moves, typical team/founder allocation
    if pct > 10 and transfer_count is not None and transfer_count < 5:
        return "team_founder"
    if transfer_count is not None and transfer_count > 1000:
        return "bot"
    if pct > 1:
        return "whale"
    if pct > 0.1:
        return "large_holder"
    return "retail"
