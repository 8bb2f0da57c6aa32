"""
Network persistence helpers.

Networks are stored as readable JSON: the serialized network record
under "network", plus optional free-form metadata under "meta".
"""

import json
import logging
import os
import numpy as np

from evograph.network.network import Network

logger = logging.getLogger(__name__)

def save_network_json(network: Network, path: str, meta: dict | None = None) -> None:
    """Save a network (and optional metadata) as indented JSON."""
    payload = {"network": network.to_dict(), "meta": meta or {}}
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    logger.info("Saved network to %s", path)

def load_network_json(path: str, rng: np.random.Generator | None = None) -> Network:
    """Load a network saved by save_network_json (a bare network record is accepted too)."""
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    return Network.from_dict(payload.get("network", payload), rng)
