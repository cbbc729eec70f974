# Policy Registry - Insurance Policy Records API
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""FastAPI API layer for the Policy Registry.

This package provides the RESTful endpoints for managing insurance
policy records.
"""

__all__: list[str] = []
