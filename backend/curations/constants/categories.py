# FILE: curations/constants/categories.py
from typing import Dict, List

# key stored on each item <-> label shown in the UI, in display order
CATEGORIES: List[Dict[str, str]] = [
    {"key": "clothing",    "label": "Clothing"},
    {"key": "accessories", "label": "Accessories"},
    {"key": "home",        "label": "Home"},
]

CATEGORY_KEYS = [c["key"] for c in CATEGORIES]
LABEL_BY_KEY = {c["key"]: c["label"] for c in CATEGORIES}
