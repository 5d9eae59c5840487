"""Explorer links for the networks that provenance sources report."""

from __future__ import annotations

from collections.abc import Mapping

# Network name (lower-case) -> URL template ending in "/{address}".
# Supporting a new network only means adding a row here.
EXPLORER_TEMPLATES: dict[str, str] = {
    "ethereum": "https://etherscan.io/address/{address}",
    "base": "https://basescan.org/address/{address}",
    "polygon": "https://polygonscan.com/address/{address}",
    "arbitrum": "https://arbiscan.io/address/{address}",
    "optimism": "https://optimistic.etherscan.io/address/{address}",
    "avalanche": "https://snowtrace.io/address/{address}",
    "bsc": "https://bscscan.com/address/{address}",
    "fantom": "https://ftmscan.com/address/{address}",
    "gnosis": "https://gnosisscan.io/address/{address}",
    "linea": "https://lineascan.build/address/{address}",
    "zksync": "https://explorer.zksync.io/address/{address}",
    "scroll": "https://scrollscan.com/address/{address}",
    "celo": "https://celoscan.io/address/{address}",
    "solana": "https://solscan.io/account/{address}",
    "tezos": "https://tzkt.io/{address}",
    "flow": "https://www.flowscan.io/account/{address}",
    "ipfs": "https://gateway.pinata.cloud/ipfs/{address}",
}


class NetworkLinkResolver:
    """Case-insensitive lookup of network name to explorer URL template."""

    def __init__(self, templates: Mapping[str, str] | None = None) -> None:
        source = EXPLORER_TEMPLATES if templates is None else templates
        self._templates = {name.strip().lower(): url for name, url in source.items()}

    def resolve(self, network: str) -> str | None:
        """Return the URL template for *network*, or None if unknown."""
        if not isinstance(network, str):
            return None
        return self._templates.get(network.strip().lower())

    def link(self, network: str, address: str) -> str | None:
        """Return the explorer URL for *address* on *network*, or None."""
        template = self.resolve(network)
        if template is None or not isinstance(address, str) or not address:
            return None
        return template.replace("{address}", address)

    @property
    def networks(self) -> list[str]:
        return sorted(self._templates)
