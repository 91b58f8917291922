"""Static keyword rules for categorizing transactions without learned data.

Rules are an ordered list of (category, predicate) pairs; the first rule whose
predicate accepts the text wins. Brand and keyword lists cover the Vietnamese
market the bank notifications come from, with and without diacritics.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional

FOOD_AND_DINING = "Food & Dining"
TRANSPORT = "Transport"
SHOPPING = "Shopping"
BILLS_AND_UTILITIES = "Bills & Utilities"
ENTERTAINMENT = "Entertainment"
HEALTH = "Health"
EDUCATION = "Education"
TRANSFER = "Transfer"
INCOME = "Income"
OTHER = "Other"

# Vocabulary offered to the remote classifier, same order as the default set
EXPENSE_CATEGORIES = [
    FOOD_AND_DINING,
    TRANSPORT,
    SHOPPING,
    BILLS_AND_UTILITIES,
    ENTERTAINMENT,
    HEALTH,
    EDUCATION,
    TRANSFER,
    INCOME,
    OTHER,
]


@dataclass(frozen=True)
class Rule:
    """A static categorization rule."""

    category: str
    matches: Callable[[str], bool]


def keyword_rule(category: str, keywords: List[str]) -> Rule:
    """Build a rule matching any of the given regex fragments.

    Each fragment must start at a word boundary, so "highland" matches
    "Highlands Coffee" but short brand names do not fire inside longer words.
    """
    pattern = re.compile(
        r"(?<!\w)(?:" + "|".join(keywords) + ")", re.IGNORECASE | re.UNICODE
    )
    return Rule(category=category, matches=lambda text: pattern.search(text) is not None)


RULES: List[Rule] = [
    keyword_rule(
        FOOD_AND_DINING,
        [
            r"grab\s*food",
            r"shopee\s*food",
            r"baemin",
            r"circle\s*k",
            r"ministop",
            r"family\s*mart",
            r"7-?eleven",
            r"highland",
            r"starbucks",
            r"phuc\s*long",
            r"phúc\s*long",
            r"the\s*coffee",
            r"coffee",
            r"trà\s*sữa",
            r"tra\s*sua",
            r"cà\s*phê",
            r"ca\s*phe",
            r"nhà\s*hàng",
            r"nha\s*hang",
            r"quán\s*ăn",
            r"quan\s*an",
            r"cơm\b",
            r"com\s+(?:tam|ga|suon)",
            r"bún\b",
            r"phở\b",
            r"pho\s+bo\b",
            r"bánh\s*mì",
            r"banh\s*mi",
            r"pizza",
            r"burger",
            r"kfc",
            r"lotteria",
            r"jollibee",
            r"mcdonald",
        ],
    ),
    keyword_rule(
        TRANSPORT,
        [
            r"grab\b",
            r"be\b",
            r"gojek",
            r"xanh\s*sm",
            r"taxi",
            r"uber",
            r"xăng",
            r"xang\s*dau",
            r"petrolimex",
            r"pvoil",
            r"shell",
            r"caltex",
            r"vé\s*xe",
            r"ve\s*xe",
            r"vexere",
            r"vietjet",
            r"vietnam\s*airlines",
            r"bamboo\s*airways",
            r"pacific\s*airlines",
        ],
    ),
    keyword_rule(
        SHOPPING,
        [
            r"shopee",
            r"lazada",
            r"tiki\b",
            r"sendo",
            r"amazon",
            r"thegioididong",
            r"thế\s*giới\s*di\s*động",
            r"dienmayxanh",
            r"điện\s*máy\s*xanh",
            r"fpt\s*shop",
            r"cellphones?",
            r"nguyen\s*kim",
            r"big\s*c\b",
            r"go!?\s*mart",
            r"aeon",
            r"lotte\s*mart",
            r"vinmart",
            r"winmart",
            r"co\.?op\s*mart",
            r"coopmart",
            r"bach\s*hoa\s*xanh",
            r"bách\s*hóa\s*xanh",
        ],
    ),
    keyword_rule(
        BILLS_AND_UTILITIES,
        [
            r"tiền\s*điện",
            r"tien\s*dien",
            r"evn",
            r"tiền\s*nước",
            r"tien\s*nuoc",
            r"cấp\s*nước",
            r"internet",
            r"viettel",
            r"vinaphone",
            r"mobifone",
            r"vnpt",
            r"fpt\s*telecom",
            r"sctv",
            r"truyền\s*hình",
            r"truyen\s*hinh",
            r"icloud",
            r"google\s*one",
        ],
    ),
    keyword_rule(
        ENTERTAINMENT,
        [
            r"cgv",
            r"lotte\s*cinema",
            r"galaxy\s*cinema",
            r"bhd",
            r"netflix",
            r"spotify",
            r"youtube",
            r"steam",
            r"playstation",
            r"xbox",
            r"game",
            r"karaoke",
            r"massage",
            r"spa\b",
        ],
    ),
    keyword_rule(
        HEALTH,
        [
            r"bệnh\s*viện",
            r"benh\s*vien",
            r"phòng\s*khám",
            r"phong\s*kham",
            r"nha\s*khoa",
            r"thuốc",
            r"nha\s*thuoc",
            r"pharmacy",
            r"pharmacity",
            r"long\s*ch[aâ]u",
            r"an\s*khang",
            r"medicare",
            r"bảo\s*hiểm",
            r"bao\s*hiem",
            r"gym",
            r"fitness",
            r"yoga",
        ],
    ),
    keyword_rule(
        EDUCATION,
        [
            r"học\s*phí",
            r"hoc\s*phi",
            r"trường",
            r"school",
            r"university",
            r"đại\s*học",
            r"dai\s*hoc",
            r"cao\s*đẳng",
            r"khóa\s*học",
            r"khoa\s*hoc",
            r"course",
            r"udemy",
            r"coursera",
            r"ielts",
            r"toeic",
            r"sách",
            r"books?\b",
        ],
    ),
    keyword_rule(
        INCOME,
        [
            r"lương",
            r"luong",
            r"salary",
            r"thưởng",
            r"bonus",
            r"hoàn\s*tiền",
            r"hoan\s*tien",
            r"cashback",
            r"nhận\s*tiền",
            r"nhan\s*tien",
            r"receive",
        ],
    ),
    keyword_rule(
        TRANSFER,
        [
            r"chuyển\s*tiền",
            r"chuyen\s*tien",
            r"chuyển\s*khoản",
            r"chuyen\s*khoan",
            r"transfer",
        ],
    ),
]


def classify_by_rule(
    beneficiary_name: Optional[str],
    remark: Optional[str],
    rules: Optional[List[Rule]] = None,
) -> str:
    """Categorize a transaction with the static keyword rules.

    Args:
        beneficiary_name: Beneficiary name of the transaction, if any.
        remark: Transaction remark, if any.
        rules: Rules to evaluate in order. Defaults to RULES.

    Returns:
        Category name of the first matching rule, or "Other".
    """
    text = f"{beneficiary_name or ''} {remark or ''}".lower()

    for rule in rules if rules is not None else RULES:
        if rule.matches(text):
            return rule.category

    return OTHER
