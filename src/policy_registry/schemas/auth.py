# Policy Registry - Insurance Policy Records API
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, Field


class CurrentUser(BaseModel):
    """Current authenticated user information."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    user_id: str = Field(..., description="Unique user identifier (token subject)")
    email: str | None = Field(default=None, description="User email")
    role: str | None = Field(default=None, description="Role claim from the token")
