# Policy Registry - Insurance Policy Records API
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Derived charges computed when a policy is created."""

from decimal import Decimal
from typing import Final

from attrs import field, frozen
from beartype import beartype

DEFAULT_AUTH_FEE: Final = Decimal("50.40")
DOC_STAMPS_RATE: Final = Decimal("0.125")
E_VAT_RATE: Final = Decimal("0.12")
LGT_RATE: Final = Decimal("0.005")


@frozen
class PremiumBreakdown:
    """Inputs and derived charges for one policy."""

    premium: Decimal = field()
    other_charges: Decimal = field()
    auth_fee: Decimal = field()
    doc_stamps: Decimal = field()
    e_vat: Decimal = field()
    lgt: Decimal = field()
    total_premium: Decimal = field()


class PremiumCalculator:
    """Fixed-rate tax and fee computation on the basic premium."""

    @beartype
    @staticmethod
    def calculate(
        premium: Decimal,
        other_charges: Decimal = Decimal("0"),
        auth_fee: Decimal = DEFAULT_AUTH_FEE,
    ) -> PremiumBreakdown:
        """Compute documentary stamps, e-VAT, LGT and the total premium.

        Args:
            premium: Basic premium
            other_charges: Charges added as-is to the total
            auth_fee: Authentication fee added as-is to the total

        Returns:
            PremiumBreakdown with unrounded values
        """
        doc_stamps = premium * DOC_STAMPS_RATE
        e_vat = premium * E_VAT_RATE
        lgt = premium * LGT_RATE
        total = premium + other_charges + doc_stamps + e_vat + lgt + auth_fee

        return PremiumBreakdown(
            premium=premium,
            other_charges=other_charges,
            auth_fee=auth_fee,
            doc_stamps=doc_stamps,
            e_vat=e_vat,
            lgt=lgt,
            total_premium=total,
        )
