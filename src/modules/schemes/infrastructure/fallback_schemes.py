"""内置方案集。

数据源全部不可用时作为方案目录快照；详情查询在快照中找不到 id 时也会回退到这里。
"""

from src.modules.schemes.domain.entities import (
    ContactInfo,
    Scheme,
    SchemeEligibility,
    SchemeQuery,
)

FALLBACK_SOURCE_NAME = "builtin"
AGRI_HELPLINE = "1800-180-1551"

_BASIC_DOCUMENTS = ["Aadhaar card", "Bank passbook", "Passport size photos"]

FALLBACK_SCHEMES: tuple[Scheme, ...] = (
    Scheme(
        id="pmksy",
        name="PM Krishi Sinchai Yojana",
        short_name="PMKSY",
        category="Irrigation",
        description=(
            "50% subsidy on drip irrigation equipment for water conservation "
            "and efficient water use."
        ),
        url="https://pmksy.gov.in",
        eligibility=SchemeEligibility(land_ownership="Yes"),
        benefits=[
            "50% subsidy on drip irrigation equipment",
            "Technical support and training",
            "Water conservation benefits",
            "Increased crop yield",
        ],
        documents=[
            "Land ownership documents",
            "Aadhaar card",
            "Bank passbook",
            "Passport size photos",
            "Soil test report",
        ],
        application_process=[
            "Visit nearest agriculture office",
            "Submit application with documents",
            "Field verification by officials",
            "Approval and subsidy disbursement",
        ],
        contact_info=ContactInfo(
            helpline=AGRI_HELPLINE,
            website="https://pmksy.gov.in",
            email="pmksy@gov.in",
        ),
        deadline="2024-12-31",
    ),
    Scheme(
        id="soil-health",
        name="Soil Health Card Scheme",
        short_name="SHC",
        category="Soil Management",
        description=(
            "Free soil testing and personalized fertilizer recommendations for "
            "optimal crop production."
        ),
        url="https://soilhealth.dac.gov.in",
        eligibility=SchemeEligibility(land_ownership="Yes"),
        benefits=[
            "Free soil testing",
            "Personalized fertilizer recommendations",
            "Crop-specific advice",
            "Improved soil fertility",
        ],
        documents=[
            "Land ownership documents",
            "Aadhaar card",
            "Previous soil test reports (if any)",
        ],
        application_process=[
            "Visit nearest Krishi Vigyan Kendra",
            "Submit application form",
            "Soil sample collection",
            "Receive soil health card",
        ],
        contact_info=ContactInfo(
            helpline=AGRI_HELPLINE,
            website="https://soilhealth.dac.gov.in",
            email="soilhealth@gov.in",
        ),
        deadline="Ongoing",
    ),
    Scheme(
        id="farm-mechanization",
        name="Farm Mechanization Subsidy",
        short_name="FMS",
        category="Equipment",
        description=(
            "40% subsidy on farm equipment purchase to increase productivity "
            "and reduce manual labor."
        ),
        url="https://farmmechanization.gov.in",
        eligibility=SchemeEligibility(
            land_ownership="Yes",
            farm_size="Minimum 2 acres",
            income_limit="Annual income < ₹8 lakhs",
        ),
        benefits=[
            "40% subsidy on farm equipment",
            "Loans at reduced interest rates",
            "Training on equipment usage",
            "Maintenance support",
        ],
        documents=[
            "Land ownership documents",
            "Income certificate",
            "Aadhaar card",
            "Bank statements",
            "Equipment quotation",
        ],
        application_process=[
            "Select equipment from approved list",
            "Submit application with documents",
            "Bank approval and loan disbursement",
            "Equipment purchase and subsidy claim",
        ],
        contact_info=ContactInfo(
            helpline=AGRI_HELPLINE,
            website="https://farmmechanization.gov.in",
            email="fms@gov.in",
        ),
        deadline="2024-03-31",
    ),
    Scheme(
        id="pm-kisan",
        name="PM Kisan Samman Nidhi",
        short_name="PM-KISAN",
        category="Income Support",
        description=(
            "Direct income support of ₹6,000 per year paid in three equal "
            "instalments to landholding farmer families."
        ),
        url="https://pmkisan.gov.in",
        eligibility=SchemeEligibility(
            land_ownership="Yes",
            income_limit="Income tax payers excluded",
        ),
        benefits=[
            "₹6,000 per year in three instalments",
            "Direct benefit transfer to bank account",
        ],
        documents=["Land ownership documents", *_BASIC_DOCUMENTS],
        application_process=[
            "Register on the PM-KISAN portal or at a Common Service Centre",
            "Complete e-KYC",
            "Land record verification by the state",
            "Instalments credited to the linked bank account",
        ],
        contact_info=ContactInfo(
            helpline="155261",
            website="https://pmkisan.gov.in",
            email="pmkisan-ict@gov.in",
        ),
        deadline="Ongoing",
    ),
    Scheme(
        id="pmfby",
        name="Pradhan Mantri Fasal Bima Yojana",
        short_name="PMFBY",
        category="Crop Insurance",
        description=(
            "Crop insurance against yield loss from natural calamities, pests "
            "and diseases at low farmer premiums."
        ),
        url="https://pmfby.gov.in",
        eligibility=SchemeEligibility(land_ownership="No"),
        benefits=[
            "Premium of 2% for Kharif and 1.5% for Rabi crops",
            "Coverage for prevented sowing and post-harvest losses",
            "Claims settled directly to bank account",
        ],
        documents=[
            "Aadhaar card",
            "Bank passbook",
            "Land records or tenancy agreement",
            "Sowing certificate",
        ],
        application_process=[
            "Apply through bank, CSC or the PMFBY portal before the cut-off date",
            "Pay the farmer share of premium",
            "Report crop loss within 72 hours of the event",
        ],
        contact_info=ContactInfo(
            helpline="14447",
            website="https://pmfby.gov.in",
            email="help.agri-insurance@gov.in",
        ),
        deadline="Seasonal",
    ),
    Scheme(
        id="kcc",
        name="Kisan Credit Card",
        short_name="KCC",
        category="Credit",
        description=(
            "Short-term crop loans at concessional interest for cultivation, "
            "post-harvest and allied activities."
        ),
        url="https://www.myscheme.gov.in/schemes/kcc",
        eligibility=SchemeEligibility(land_ownership="No"),
        benefits=[
            "Interest subvention on loans up to ₹3 lakhs",
            "Flexible repayment aligned with harvest",
            "Accident insurance cover",
        ],
        documents=[*_BASIC_DOCUMENTS, "Land records or tenancy proof"],
        application_process=[
            "Visit a commercial, cooperative or regional rural bank",
            "Fill the KCC application form",
            "Bank assessment of credit limit",
            "Card issued within 14 days",
        ],
        contact_info=ContactInfo(helpline=AGRI_HELPLINE),
        deadline="Ongoing",
    ),
    Scheme(
        id="pkvy",
        name="Paramparagat Krishi Vikas Yojana",
        short_name="PKVY",
        category="Organic Farming",
        description=(
            "Cluster-based support for organic farming including certification "
            "and marketing assistance."
        ),
        url="https://pgsindia-ncof.gov.in",
        eligibility=SchemeEligibility(
            land_ownership="Yes",
            farm_size="Part of a 20 hectare cluster",
        ),
        benefits=[
            "₹50,000 per hectare over three years",
            "PGS organic certification",
            "Marketing and branding support",
        ],
        documents=["Land ownership documents", *_BASIC_DOCUMENTS],
        application_process=[
            "Join a farmer cluster through the district agriculture office",
            "Submit application with documents",
            "Training and conversion to organic practices",
        ],
        contact_info=ContactInfo(
            helpline=AGRI_HELPLINE,
            website="https://pgsindia-ncof.gov.in",
        ),
        deadline="Ongoing",
    ),
    Scheme(
        id="enam",
        name="National Agriculture Market",
        short_name="e-NAM",
        category="Marketing",
        description=(
            "Online trading platform linking APMC mandis for transparent price "
            "discovery of agricultural produce."
        ),
        url="https://enam.gov.in",
        eligibility=SchemeEligibility(land_ownership="No"),
        benefits=[
            "Access to buyers across integrated mandis",
            "Online payment directly to bank account",
            "Quality assaying of produce",
        ],
        documents=_BASIC_DOCUMENTS.copy(),
        application_process=[
            "Register on the e-NAM portal or at the mandi",
            "Upload KYC documents",
            "Receive login credentials after approval",
        ],
        contact_info=ContactInfo(
            helpline="1800-270-0224",
            website="https://enam.gov.in",
        ),
        deadline="Ongoing",
    ),
    Scheme(
        id="pm-kusum",
        name="PM Kusum Solar Pump Scheme",
        short_name="PM-KUSUM",
        category="Irrigation",
        description=(
            "Subsidy for standalone solar pumps and solarisation of grid "
            "connected agricultural pumps for irrigation."
        ),
        url="https://pmkusum.mnre.gov.in",
        eligibility=SchemeEligibility(land_ownership="Yes"),
        benefits=[
            "Up to 60% subsidy on solar pumps",
            "Income from surplus solar power",
            "Reduced diesel costs",
        ],
        documents=[
            "Land ownership documents",
            *_BASIC_DOCUMENTS,
            "Water source details",
        ],
        application_process=[
            "Apply on the state nodal agency portal",
            "Pay the farmer share after approval",
            "Pump installation by an empanelled vendor",
        ],
        contact_info=ContactInfo(
            helpline="1800-180-3333",
            website="https://pmkusum.mnre.gov.in",
        ),
        deadline="2026-03-31",
    ),
    Scheme(
        id="dilrmp",
        name="Digital India Land Records Modernization Programme",
        short_name="DILRMP",
        category="Land Records",
        description=(
            "Computerisation of land records and registration to provide "
            "conclusive titles to landholders."
        ),
        url="https://dilrmp.gov.in",
        eligibility=SchemeEligibility(land_ownership="No"),
        benefits=[
            "Digitised records of rights",
            "Online mutation and registration",
            "Reduced land disputes",
        ],
        documents=["Existing land records", "Aadhaar card"],
        application_process=[
            "Visit the state land records portal or tehsil office",
            "Submit details for record verification",
            "Download the digitised record of rights",
        ],
        contact_info=ContactInfo(helpline=AGRI_HELPLINE, website="https://dilrmp.gov.in"),
        deadline="Ongoing",
    ),
    Scheme(
        id="aif",
        name="Agriculture Infrastructure Fund",
        short_name="AIF",
        category="Infrastructure",
        description=(
            "Medium to long term financing with interest subvention for "
            "post-harvest management infrastructure."
        ),
        url="https://agriinfra.dac.gov.in",
        eligibility=SchemeEligibility(land_ownership="No"),
        benefits=[
            "3% interest subvention on loans up to ₹2 crore",
            "Credit guarantee coverage",
        ],
        documents=[*_BASIC_DOCUMENTS, "Detailed project report"],
        application_process=[
            "Submit project on the AIF portal",
            "Lending institution appraisal",
            "Loan sanction and subvention claim",
        ],
        contact_info=ContactInfo(
            helpline=AGRI_HELPLINE,
            website="https://agriinfra.dac.gov.in",
        ),
        deadline="2032-03-31",
    ),
    Scheme(
        id="smam",
        name="Sub-Mission on Agricultural Mechanization",
        short_name="SMAM",
        category="Equipment",
        description=(
            "Assistance for custom hiring centres and purchase of farm "
            "machinery by small and marginal farmers."
        ),
        url="https://agrimachinery.nic.in",
        eligibility=SchemeEligibility(
            land_ownership="Yes",
            income_limit="Annual income < ₹5 lakhs",
        ),
        benefits=[
            "40-50% subsidy on farm machinery",
            "Support for custom hiring centres",
        ],
        documents=[
            "Land ownership documents",
            "Income certificate",
            *_BASIC_DOCUMENTS,
        ],
        application_process=[
            "Register on the agricultural machinery portal",
            "Select machinery and dealer",
            "Verification and subsidy release",
        ],
        contact_info=ContactInfo(
            helpline=AGRI_HELPLINE,
            website="https://agrimachinery.nic.in",
        ),
        deadline="Ongoing",
    ),
)


def fallback_schemes(target: SchemeQuery | None = None) -> list[Scheme]:
    """返回完整的内置方案集（过滤交给分页器）。"""
    return [
        scheme.model_copy(update={"source": FALLBACK_SOURCE_NAME})
        for scheme in FALLBACK_SCHEMES
    ]


def find_fallback_scheme(scheme_id: str) -> Scheme | None:
    for scheme in FALLBACK_SCHEMES:
        if scheme.id == scheme_id:
            return scheme.model_copy(update={"source": FALLBACK_SOURCE_NAME})
    return None
