"""Scheme domain entities."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

OWNER_VALUES = frozenset({"yes", "true", "owner", "own", "owned", "landowner"})

DEFAULT_DOCUMENTS = ("Aadhaar card", "Bank passbook", "Passport size photos")
DEFAULT_APPLICATION_PROCESS = (
    "Visit the official scheme portal or nearest agriculture office",
    "Submit application with documents",
    "Verification by officials",
    "Approval and benefit disbursement",
)


@dataclass(frozen=True)
class SchemeQuery:
    """方案目录的抓取目标（数据源链的 target）。"""

    query: str = ""

    def __str__(self) -> str:
        return f"schemes[{self.query or 'all'}]"


class SchemeEligibility(BaseModel):
    """资格条件（原文描述，由 EligibilityChecker 解析）。"""

    model_config = ConfigDict(frozen=True)

    land_ownership: str = Field(default="No", description="是否要求土地所有权 Yes/No")
    farm_size: str = Field(default="Any size", description="如 'Minimum 2 acres'")
    income_limit: str = Field(default="No limit", description="如 'Annual income < ₹8 lakhs'")
    location: str = Field(default="All India")
    crop_type: str = Field(default="All crops")


class ContactInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    helpline: str = "1800-180-1551"
    website: str | None = None
    email: str | None = None


class Scheme(BaseModel):
    """政府方案。

    列表字段来自目录快照；详情字段（eligibility 等）在详情查询时补齐。
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="方案ID（目录内唯一）")
    name: str = Field(..., description="方案名称")
    description: str = Field(default="", description="简介")
    category: str = Field(default="General", description="类别")
    status: str = Field(default="Active", description="状态")
    url: str | None = Field(default=None, description="原文链接")
    source: str = Field(default="", description="数据来源")

    short_name: str | None = None
    eligibility: SchemeEligibility | None = None
    benefits: list[str] | None = None
    documents: list[str] | None = None
    application_process: list[str] | None = None
    contact_info: ContactInfo | None = None
    deadline: str | None = None

    def with_default_details(self) -> "Scheme":
        """补齐缺失的详情字段（抓取到的列表记录通常只有列表字段）。"""
        return self.model_copy(
            update={
                "eligibility": self.eligibility or SchemeEligibility(),
                "benefits": self.benefits
                or [self.description or "Refer to the official scheme guidelines"],
                "documents": self.documents or list(DEFAULT_DOCUMENTS),
                "application_process": self.application_process
                or list(DEFAULT_APPLICATION_PROCESS),
                "contact_info": self.contact_info or ContactInfo(website=self.url),
                "deadline": self.deadline or "Ongoing",
            }
        )


class FarmerProfile(BaseModel):
    """农户资料（资格检查输入）。

    land_ownership 可以是布尔值，也可以是 "owner" / "tenant" 之类的描述。
    """

    land_ownership: bool | str | None = None
    farm_size: float | None = Field(default=None, ge=0, description="英亩")
    annual_income: float | None = Field(default=None, ge=0, description="卢比/年")
    state: str | None = None

    @property
    def owns_land(self) -> bool:
        if isinstance(self.land_ownership, bool):
            return self.land_ownership
        if not self.land_ownership:
            return False
        return self.land_ownership.strip().lower() in OWNER_VALUES


class EligibilityResult(BaseModel):
    scheme_id: str
    scheme_name: str
    is_eligible: bool
    reasons: list[str] = Field(default_factory=list)
    requirements: list[str] = Field(default_factory=list)


class ApplicationGuide(BaseModel):
    scheme_id: str
    scheme_name: str
    documents: list[str]
    process: list[str]
    contact_info: ContactInfo
    tips: list[str]


def unique_schemes(schemes: list[Scheme]) -> list[Scheme]:
    """按 id 去重，保留首次出现的记录和原有顺序。"""
    seen: set[str] = set()
    unique: list[Scheme] = []
    for scheme in schemes:
        if scheme.id in seen:
            continue
        seen.add(scheme.id)
        unique.append(scheme)
    return unique
