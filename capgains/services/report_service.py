"""CSV export of a capital-gains calculation."""

from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import List, Optional

from capgains.models.schemas import CapitalGainsResult, ExemptionStrategy, PropertyDetails
from capgains.services.temporal_service import financial_year_label


def _num(value: float) -> str:
    """Plain number without a trailing ``.0``."""
    return f"{value:.2f}".rstrip("0").rstrip(".")


def build_csv_report(
    prop: PropertyDetails,
    gains: CapitalGainsResult,
    exemptions: Optional[List[ExemptionStrategy]] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    """Render property details, the gains computation and exemptions as CSV."""
    generated_at = generated_at or datetime.now()
    period = gains.holdingPeriod

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(["Real Estate Capital Gains Calculator Report"])
    writer.writerow([f"Generated: {generated_at:%d/%m/%Y %H:%M:%S}"])
    writer.writerow([])

    writer.writerow(["PROPERTY DETAILS"])
    writer.writerow(["Property Type", prop.propertyType])
    writer.writerow(["Purchase Date", prop.purchaseDate])
    writer.writerow(["Purchase Price", _num(prop.purchasePrice)])
    writer.writerow(["Stamp Duty", _num(prop.stampDuty)])
    if prop.improvementCost > 0:
        writer.writerow(["Improvement Cost", _num(prop.improvementCost)])
        writer.writerow(["Improvement Date", prop.improvementDate])
    writer.writerow(["Sale Date", prop.saleDate])
    writer.writerow(["Sale Price", _num(prop.salePrice)])
    writer.writerow(["Brokerage", _num(prop.brokerage)])
    writer.writerow(["Legal Fees", _num(prop.legalFees)])
    writer.writerow([])

    writer.writerow(["CAPITAL GAINS CALCULATION"])
    writer.writerow(["Holding Period", f"{period.years} years {period.remainingMonths} months"])
    writer.writerow(["Type", "Long-Term" if period.isLongTerm else "Short-Term"])
    cii_years = (
        f"CII (FY {financial_year_label(prop.purchase_date)} -> "
        f"FY {financial_year_label(prop.sale_date)})"
    )
    writer.writerow([cii_years, f"{gains.purchaseCII} -> {gains.saleCII}"])
    writer.writerow(["Indexed Cost", _num(gains.totalIndexedCost)])
    writer.writerow(["Capital Gain", _num(gains.capitalGain)])
    writer.writerow(["Tax Rate", f"{gains.taxRate:g}%"])
    writer.writerow(["Total Tax", _num(gains.totalTax)])
    writer.writerow(["Net Proceeds", _num(gains.netProceeds)])

    if exemptions:
        writer.writerow([])
        writer.writerow(["TAX EXEMPTION OPTIONS"])
        writer.writerow(["Section", "Strategy", "Investment", "Tax Saved", "Deadline"])
        for strategy in exemptions:
            writer.writerow([
                strategy.section,
                strategy.name,
                _num(strategy.investmentRequired),
                _num(strategy.taxSaved),
                strategy.deadline,
            ])

    return buf.getvalue()
