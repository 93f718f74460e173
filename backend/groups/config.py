from __future__ import annotations

import os
import string
from dataclasses import dataclass, field


@dataclass(frozen=True)
class GroupConfig:
    max_members: int = field(default_factory=lambda: int(os.getenv("GROUP_MAX_MEMBERS", "10")))
    join_code_length: int = 6
    join_code_alphabet: str = string.ascii_uppercase + string.digits


DEFAULT_GROUP_CONFIG = GroupConfig()
