"""Static seed tier: fixed entries available with no remote store."""

import json
import logging
from typing import Dict, Optional


# Built-in entries; always resolvable, never written to at runtime.
DEFAULT_SEED: Dict[str, str] = {
    "github": "https://github.com",
    "pydocs": "https://docs.python.org/3/",
    "fastapi": "https://fastapi.tiangolo.com/",
    "redis": "https://redis.io/docs/",
}


def load_seed(
    seed_file: Optional[str] = None,
    include_defaults: bool = True,
    logger: Optional[logging.Logger] = None,
) -> Dict[str, str]:
    """Build the static seed table.

    Args:
        seed_file: Optional JSON file holding an object of {key: url}
        include_defaults: Whether to start from DEFAULT_SEED
        logger: Optional logger

    Returns:
        Mapping of seed keys to destination URLs

    Raises:
        ValueError: If the seed file is not a JSON object of strings
    """
    logger = logger or logging.getLogger(__name__)
    seed = dict(DEFAULT_SEED) if include_defaults else {}

    if not seed_file:
        return seed

    with open(seed_file, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Seed file {seed_file} must contain a JSON object")

    for key, url in data.items():
        if not isinstance(url, str) or not key:
            raise ValueError(f"Seed entry {key!r} must map a non-empty key to a URL string")
        seed[key] = url

    logger.info(f"Loaded {len(data)} seed entries from {seed_file}")
    return seed
