from typing import Dict, Set

# Fields that legitimately differ between two reads of the same invoice
VOLATILE_KEYS = {"updated_at"}


def exclude_keys(data: Dict, keys: Set[str]) -> Dict:
    return {k: v for k, v in data.items() if k not in keys}
