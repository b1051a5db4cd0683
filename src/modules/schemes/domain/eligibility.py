"""方案资格检查与申请指引。

资格规则：
1. 土地所有权：eligibility.land_ownership 为 Yes，或方案名称含 "land" 时必须拥有土地
2. 农场面积：解析 "Minimum N acres"
3. 收入上限：解析 "< ₹N lakhs"（1 lakh = 100000 卢比）

所有规则都会执行，原因和要求按规则顺序累积。
"""

import re

from src.modules.schemes.domain.entities import (
    ApplicationGuide,
    ContactInfo,
    EligibilityResult,
    FarmerProfile,
    Scheme,
    SchemeEligibility,
)

LAKH = 100_000

_MIN_ACRES_PATTERN = re.compile(r"minimum\s+(\d+(?:\.\d+)?)\s*acres?", re.IGNORECASE)
_INCOME_LAKHS_PATTERN = re.compile(r"(\d+(?:\.\d+)?)\s*lakhs?", re.IGNORECASE)

BASE_TIPS = (
    "Ensure all documents are properly attested",
    "Keep photocopies of all submitted documents",
    "Follow up with the office after submission",
    "Maintain records of all communications",
)

CATEGORY_TIPS: dict[str, tuple[str, ...]] = {
    "Equipment": (
        "Compare prices from multiple vendors before purchase",
        "Ensure equipment is from approved manufacturers list",
    ),
    "Irrigation": (
        "Get technical consultation before installation",
        "Plan irrigation system based on crop requirements",
    ),
}


def parse_min_acres(text: str | None) -> float | None:
    if not text:
        return None
    match = _MIN_ACRES_PATTERN.search(text)
    return float(match.group(1)) if match else None


def parse_income_limit(text: str | None) -> float | None:
    """返回收入上限（卢比），无上限返回 None。"""
    if not text or text.strip().lower() == "no limit":
        return None
    match = _INCOME_LAKHS_PATTERN.search(text)
    return float(match.group(1)) * LAKH if match else None


def requires_land(scheme: Scheme) -> bool:
    eligibility = scheme.eligibility or SchemeEligibility()
    if eligibility.land_ownership.strip().lower() == "yes":
        return True
    return "land" in scheme.name.lower()


class EligibilityChecker:
    """根据方案资格条件检查农户资料。"""

    def check(self, scheme: Scheme, profile: FarmerProfile) -> EligibilityResult:
        eligibility = scheme.eligibility or SchemeEligibility()
        reasons: list[str] = []
        requirements: list[str] = []

        if requires_land(scheme) and not profile.owns_land:
            reasons.append("Land ownership required")
            requirements.append("Provide land ownership documents")

        min_acres = parse_min_acres(eligibility.farm_size)
        if (
            min_acres is not None
            and profile.farm_size is not None
            and profile.farm_size < min_acres
        ):
            reasons.append("Minimum farm size requirement not met")
            requirements.append(f"Farm size must be at least {min_acres:g} acres")

        income_limit = parse_income_limit(eligibility.income_limit)
        if (
            income_limit is not None
            and profile.annual_income is not None
            and profile.annual_income >= income_limit
        ):
            reasons.append("Income exceeds limit")
            requirements.append(
                f"Annual income must be less than ₹{income_limit / LAKH:g} lakhs"
            )

        return EligibilityResult(
            scheme_id=scheme.id,
            scheme_name=scheme.name,
            is_eligible=not reasons,
            reasons=reasons,
            requirements=requirements,
        )


def application_tips(scheme: Scheme) -> list[str]:
    return [*BASE_TIPS, *CATEGORY_TIPS.get(scheme.category, ())]


def build_application_guide(scheme: Scheme) -> ApplicationGuide:
    return ApplicationGuide(
        scheme_id=scheme.id,
        scheme_name=scheme.name,
        documents=list(scheme.documents or []),
        process=list(scheme.application_process or []),
        contact_info=scheme.contact_info or ContactInfo(),
        tips=application_tips(scheme),
    )
