"""Content checksums for workbook states"""

import hashlib
import json
from typing import Any, Mapping


def state_checksum(state: Mapping[str, Any]) -> str:
    """
    Stable SHA-256 of an address -> value map

    Key order does not matter, so a state read back from storage hashes the
    same as the one that was written.
    """
    payload = json.dumps(dict(state), sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
