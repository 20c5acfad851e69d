"""Pydantic request / response schemas for the planner.

Field names are camelCase to match the persisted browser state:
  - PropertyDetails       → the user-entered sale transaction
  - CapitalGainsResult    → derived on every input change
  - ExemptionStrategy     → one per eligible section (54 / 54EC / 54F)
  - AllocationResult      → split of the net proceeds across vehicles
"""

from __future__ import annotations
from datetime import date
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from capgains.config import settings
from capgains.utils.helpers import normalise_date_str, parse_date

Regime = Literal["new", "old"]
PropertyType = Literal["residential", "commercial", "land"]


class PropertyDetails(BaseModel):
    """Facts about a single property sale."""
    propertyType: PropertyType = "residential"
    purchaseDate: str = Field(..., description="Purchase date (YYYY-MM-DD)")
    purchasePrice: float = Field(..., ge=0, description="Purchase price in INR")
    stampDuty: float = Field(0.0, ge=0)
    improvementCost: float = Field(0.0, ge=0)
    improvementDate: str = Field("", description="Date of improvement, blank if none")
    saleDate: str = Field(..., description="Sale date (YYYY-MM-DD)")
    salePrice: float = Field(..., ge=0, description="Sale price in INR")
    brokerage: float = Field(0.0, ge=0)
    legalFees: float = Field(0.0, ge=0)

    @model_validator(mode="after")
    def _normalise_dates(self) -> "PropertyDetails":
        self.purchaseDate = normalise_date_str(self.purchaseDate)
        self.saleDate = normalise_date_str(self.saleDate)
        if self.improvementDate and self.improvementDate.strip():
            self.improvementDate = normalise_date_str(self.improvementDate)
        else:
            self.improvementDate = ""
        if parse_date(self.saleDate) < parse_date(self.purchaseDate):
            raise ValueError("saleDate must not be earlier than purchaseDate")
        return self

    @property
    def purchase_date(self) -> date:
        return parse_date(self.purchaseDate)

    @property
    def sale_date(self) -> date:
        return parse_date(self.saleDate)

    @property
    def improvement_date(self) -> Optional[date]:
        return parse_date(self.improvementDate) if self.improvementDate else None


# ── 1. Capital gains ─────────────────────────────────────────────────────

class HoldingPeriod(BaseModel):
    days: int
    months: int = Field(..., description="Total elapsed months")
    years: int
    remainingMonths: int = Field(..., description="months % 12")
    isLongTerm: bool

class RegimeValues(BaseModel):
    """Gain, tax and proceeds under one LTCG regime."""
    capitalGain: float
    taxRate: float = Field(..., description="Rate in percent (20 / 12.5 / 30)")
    totalTax: float
    netProceeds: float

class ActiveRegime(RegimeValues):
    """Values of the regime the caller has settled on."""
    regime: Regime

class CapitalGainsResult(BaseModel):
    holdingPeriod: HoldingPeriod
    purchaseCII: int
    saleCII: int
    indexedPurchaseCost: float
    indexedImprovementCost: float
    totalIndexedCost: float
    transferExpenses: float
    netSaleConsideration: float
    capitalGain: float
    taxRate: float
    taxBeforeCess: float
    cess: float
    totalTax: float
    netProceeds: float
    useNewRegime: bool
    mustUseNewRegime: bool
    canChooseRegime: bool
    oldRegime: Optional[RegimeValues] = None
    newRegime: Optional[RegimeValues] = None
    recommendedRegime: Optional[Regime] = None


# ── 2. Split-bracket tax ─────────────────────────────────────────────────

class BracketSlice(BaseModel):
    rate: float = Field(..., description="Bracket rate in percent")
    amount: float = Field(..., description="Income falling in this bracket")
    tax: float

class SplitBracketRequest(BaseModel):
    additionalIncome: float
    currentTaxableIncome: float = Field(0.0, ge=0)
    regime: Regime = "new"
    includeCess: bool = True

class SplitBracketResult(BaseModel):
    tax: float
    breakdown: List[BracketSlice] = Field(default_factory=list)
    effectiveRate: float = Field(..., description="tax / additionalIncome, percent")


# ── 3. Salary bridge ─────────────────────────────────────────────────────

class SalaryDataForCalc(BaseModel):
    """Salary context that replaces the flat slab with real brackets."""
    taxableIncome: float = Field(..., ge=0)
    regime: Regime = "new"

class SalaryRecord(BaseModel):
    """Raw state persisted by the salary calculator."""
    model_config = ConfigDict(extra="allow")

    ctc: float = 0.0
    taxRegime: Regime = "new"
    userModified: bool = False

class SalaryBridgeStatus(BaseModel):
    available: bool
    ctc: float = 0.0
    taxableIncome: float = 0.0
    marginalRate: float = 30.0
    nextBracketRate: float = 30.0
    roomInBracket: Optional[float] = Field(
        0.0, description="Income left before the next bracket; null in the top bracket"
    )
    regime: Regime = "new"
    currentTax: float = Field(0.0, description="Slab tax on taxableIncome, cess included")


# ── 4. Exemption strategies ──────────────────────────────────────────────

class Section54ProjectionState(BaseModel):
    """User-tunable assumptions for reinvestment projections."""
    appreciationRate: float = Field(settings.DEFAULT_APPRECIATION_RATE, description="Annual appreciation, percent")
    enableRental: bool = False
    monthlyRent: float = Field(settings.DEFAULT_MONTHLY_RENT, ge=0)
    rentStartMonth: int = Field(0, ge=0, description="Months after purchase before rent starts")
    taxSlab: float = Field(settings.DEFAULT_TAX_SLAB, ge=0, le=30, description="Flat income-tax slab, percent")

class BondDetails(BaseModel):
    interestRate: float
    lockInYears: int
    totalInterest: float
    maturityValue: float
    taxOnInterest: float
    netMaturityValue: float

class FDComparison(BaseModel):
    """Pay the tax now and park the rest in a fixed deposit."""
    taxPaid: float
    investedAmount: float
    fdRate: float
    grossReturns: float
    taxOnFDReturns: float
    netFDReturns: float

class PropertyProjection(BaseModel):
    originalPropertyCAGR: Optional[float] = None
    investment: float
    lockInYears: int
    appreciationRate: float
    projectedPropertyValue: float
    capitalAppreciation: float
    rentalEnabled: bool
    monthlyRent: float
    rentStartMonth: int
    rentMonths: int
    totalRentalIncome: float
    totalReturns: float
    annualizedReturn: float
    taxSlab: float
    taxOnRentalIncome: float
    taxOnAppreciation: float
    totalTaxOnReturns: float
    netCashInHand: float
    comparisonWithoutExemption: Optional[FDComparison] = None

class ExemptionStrategy(BaseModel):
    section: str
    name: str
    description: str
    maxExemption: float
    investmentRequired: float
    taxSaved: float
    deadline: str
    lockInYears: int
    isEligible: bool = True
    notes: List[str] = Field(default_factory=list)
    bondDetails: Optional[BondDetails] = None
    propertyProjection: Optional[PropertyProjection] = None


# ── 5. Reinvestment allocation ───────────────────────────────────────────

class PersonalUseBucket(BaseModel):
    enabled: bool = True
    amount: float = Field(0.0, ge=0)

class BondsBucket(BaseModel):
    enabled: bool = False
    amount: float = Field(0.0, ge=0)

class RealEstateBucket(BaseModel):
    """Absorbs whatever personal use and bonds leave over."""
    enabled: bool = False
    appreciationRate: float = settings.DEFAULT_APPRECIATION_RATE
    enableRental: bool = False
    monthlyRent: float = Field(settings.DEFAULT_MONTHLY_RENT, ge=0)
    rentStartMonth: int = Field(0, ge=0)

class ReinvestmentAllocation(BaseModel):
    personalUse: PersonalUseBucket = Field(default_factory=PersonalUseBucket)
    bonds: BondsBucket = Field(default_factory=BondsBucket)
    realEstate: RealEstateBucket = Field(default_factory=RealEstateBucket)

class AllocationResult(BaseModel):
    netProceeds: float
    maxBondAmount: float
    personalUseAmount: float
    bondsAmount: float
    realEstateAmount: float
    unallocated: float
    remainingAfterPersonalAndBonds: float
    bonds: BondDetails
    realEstate: PropertyProjection
    bondNetValue: float
    realEstateNetValue: float
    totalProjectedValue: float
    lockInHorizons: Dict[str, int] = Field(
        ...,
        description="Years until each bucket's value is available",
    )


# ── 6. Persisted state ───────────────────────────────────────────────────

ActiveTab = Literal["calculate", "exemptions", "compare"]

class RealEstateState(BaseModel):
    property: PropertyDetails
    activeTab: ActiveTab = "calculate"


# ── 7. Endpoint envelopes ────────────────────────────────────────────────

class GainsRequest(BaseModel):
    property: PropertyDetails
    selectedRegime: Optional[Regime] = None

class GainsResponse(BaseModel):
    result: CapitalGainsResult
    active: ActiveRegime

class ExemptionsRequest(BaseModel):
    property: PropertyDetails
    projection: Optional[Section54ProjectionState] = Field(
        None, description="Omit to default the appreciation rate to the sold property's CAGR"
    )
    useSalaryBracket: bool = False
    salaryData: Optional[SalaryDataForCalc] = Field(
        None, description="Explicit salary context; read from the salary state when omitted"
    )

class ExemptionsResponse(BaseModel):
    gains: CapitalGainsResult
    projection: Section54ProjectionState
    salaryInUse: Optional[SalaryDataForCalc] = None
    exemptions: List[ExemptionStrategy]

class AllocationRequest(ExemptionsRequest):
    selectedRegime: Optional[Regime] = None
    allocation: ReinvestmentAllocation = Field(default_factory=ReinvestmentAllocation)
