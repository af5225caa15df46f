"""Option catalogues offered by the draft wizard.

The enums define what the data model accepts; the plain tuples are
suggestions shown next to free-text tag inputs and are not enforced.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class CalendarSystem(StrEnum):
    """Date systems a posting can be entered in (Gregorian and Bikram Sambat)."""

    AD = "AD"
    BS = "BS"


class AnnouncementType(StrEnum):
    NEWSPAPER = "newspaper"
    ONLINE = "online"
    AGENCY_BOARD = "agency_board"
    RADIO = "radio"
    TELEVISION = "television"
    SOCIAL_MEDIA = "social_media"


class Currency(StrEnum):
    AED = "AED"
    SAR = "SAR"
    QAR = "QAR"
    KWD = "KWD"
    OMR = "OMR"
    BHD = "BHD"
    MYR = "MYR"
    USD = "USD"


class OvertimePolicy(StrEnum):
    AS_PER_COMPANY_POLICY = "as_per_company_policy"
    PAID = "paid"
    UNPAID = "unpaid"
    NOT_APPLICABLE = "not_applicable"


class Provision(StrEnum):
    """How food, accommodation or transport is provided."""

    FREE = "free"
    PAID = "paid"
    NOT_PROVIDED = "not_provided"


class ExpenseType(StrEnum):
    MEDICAL = "medical"
    INSURANCE = "insurance"
    TRAVEL = "travel"
    VISA = "visa"
    TRAINING = "training"
    WELFARE = "welfare"


class ExpensePayer(StrEnum):
    COMPANY = "company"
    WORKER = "worker"
    SHARED = "shared"
    NOT_APPLICABLE = "not_applicable"
    AGENCY = "agency"


ANNOUNCEMENT_TYPE_LABELS: Final[dict[AnnouncementType, str]] = {
    AnnouncementType.NEWSPAPER: "Newspaper",
    AnnouncementType.ONLINE: "Online",
    AnnouncementType.AGENCY_BOARD: "Agency Board",
    AnnouncementType.RADIO: "Radio",
    AnnouncementType.TELEVISION: "Television",
    AnnouncementType.SOCIAL_MEDIA: "Social Media",
}

EXPENSE_TYPE_LABELS: Final[dict[ExpenseType, str]] = {
    ExpenseType.MEDICAL: "Medical",
    ExpenseType.INSURANCE: "Insurance",
    ExpenseType.TRAVEL: "Travel",
    ExpenseType.VISA: "Visa/Permit",
    ExpenseType.TRAINING: "Training",
    ExpenseType.WELFARE: "Welfare/Service",
}

PREDEFINED_SKILLS: Final[tuple[str, ...]] = (
    "Cooking",
    "Customer Service",
    "Security",
    "Surveillance",
    "English Communication",
    "Arabic Communication",
    "Driving",
    "Cleaning",
    "Maintenance",
    "Electrical Work",
    "Plumbing",
    "Construction",
    "Welding",
    "Carpentry",
    "Painting",
    "Hospitality",
    "Food Preparation",
    "Housekeeping",
    "Laundry",
    "Gardening",
    "Computer Skills",
    "First Aid",
    "Leadership",
    "Team Work",
    "Problem Solving",
    "Time Management",
)

EDUCATION_LEVELS: Final[tuple[str, ...]] = (
    "No formal education",
    "Primary School",
    "Class 5",
    "Class 8",
    "Class 10",
    "SLC/SEE",
    "High School",
    "+2/Intermediate",
    "Diploma",
    "Vocational Training",
    "Bachelor's Degree",
    "Master's Degree",
    "Technical Certification",
    "Trade School",
)

EXPERIENCE_DOMAINS: Final[tuple[str, ...]] = (
    "Hospitality",
    "Culinary",
    "Security",
    "Construction",
    "Maintenance",
    "Transportation",
    "Housekeeping",
    "Food Service",
    "Healthcare",
    "Retail",
    "Manufacturing",
    "Agriculture",
    "Education",
    "Office Work",
    "Sales",
    "Customer Service",
    "Technical Support",
    "Guard Duty",
    "Surveillance",
)

# (id, name, category)
CANONICAL_TITLES: Final[tuple[tuple[int, str, str], ...]] = (
    (1, "Security Guard", "Security"),
    (2, "Cook", "Food Service"),
    (3, "Driver", "Transportation"),
    (4, "Cleaner", "Housekeeping"),
    (5, "Security Officer", "Security"),
    (6, "Waiter", "Food Service"),
    (7, "Construction Worker", "Construction"),
    (8, "Watchman", "Security"),
    (9, "Electrician", "Maintenance"),
    (10, "Plumber", "Maintenance"),
)

REQUIRED_DOCUMENTS: Final[tuple[str, ...]] = (
    "Passport",
    "Resume/CV",
    "Educational Certificates",
    "Experience Certificates",
    "Medical Certificate",
    "Police Clearance",
    "Driving License",
    "Skills Certificate",
    "Photographs",
    "Birth Certificate",
    "Marriage Certificate",
    "Bank Statement",
    "Reference Letters",
    "Training Certificates",
    "Language Proficiency Certificate",
    "Professional License",
    "Insurance Documents",
    "Visa Documents",
)
