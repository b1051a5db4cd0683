"""Scheme API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class SchemeResponse(BaseModel):
    """Scheme listing response."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="方案ID")
    name: str = Field(..., description="方案名称")
    description: str = Field(..., description="简介")
    category: str = Field(..., description="类别")
    status: str = Field(..., description="状态")
    url: str | None = Field(None, description="原文链接")
    source: str = Field(..., description="数据来源")


class EligibilitySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    land_ownership: str
    farm_size: str
    income_limit: str
    location: str
    crop_type: str


class ContactInfoSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    helpline: str
    website: str | None = None
    email: str | None = None


class SchemeDetailResponse(SchemeResponse):
    """Scheme detail response."""

    short_name: str | None = None
    eligibility: EligibilitySchema
    benefits: list[str]
    documents: list[str]
    application_process: list[str]
    contact_info: ContactInfoSchema
    deadline: str


class CategoryResponse(BaseModel):
    name: str = Field(..., description="类别名称")
    count: int = Field(..., description="方案数")


class EligibilityRequest(BaseModel):
    """Farmer profile for eligibility check."""

    land_ownership: bool | str | None = Field(
        None, description="是否拥有土地（true/false 或 owner/tenant）"
    )
    farm_size: float | None = Field(None, ge=0, description="农场面积（英亩）")
    annual_income: float | None = Field(None, ge=0, description="年收入（卢比）")
    state: str | None = Field(None, description="所在邦")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "land_ownership": "tenant",
                "farm_size": 1.5,
                "annual_income": 250000,
                "state": "Karnataka",
            }
        }
    )


class EligibilityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    scheme_id: str
    scheme_name: str
    is_eligible: bool
    reasons: list[str]
    requirements: list[str]


class ApplicationGuideResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    scheme_id: str
    scheme_name: str
    documents: list[str]
    process: list[str]
    contact_info: ContactInfoSchema
    tips: list[str]
