# Policy Registry - Insurance Policy Records API
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Core infrastructure components for the Policy Registry."""

from .config import get_settings
from .database import Database, PostgresPolicyStore
from .security import Security
from .store import PolicyStore, StoreError

__all__ = [
    "get_settings",
    "Database",
    "PostgresPolicyStore",
    "PolicyStore",
    "Security",
    "StoreError",
]
