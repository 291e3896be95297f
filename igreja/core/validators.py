"""Form-level validation and normalization helpers (Brazilian documents, names, dates)."""

import re
import unicodedata
from datetime import date

NAME_PREPOSITIONS = {"de", "da", "do", "dos", "das", "e"}
MIN_REASONABLE_DATE = date(1900, 1, 1)
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def only_digits(value: str) -> str:
    return re.sub(r"\D", "", value or "")


def _cpf_check_digit(digits: str, weight_start: int) -> int:
    total = sum(int(d) * (weight_start - i) for i, d in enumerate(digits))
    check = 11 - (total % 11)
    return 0 if check >= 10 else check


def is_valid_cpf(cpf: str) -> bool:
    """Validate a CPF (11 digits, two mod-11 check digits). Punctuation is ignored."""
    digits = only_digits(cpf)
    if len(digits) != 11 or digits == digits[0] * 11:
        return False
    if _cpf_check_digit(digits[:9], 10) != int(digits[9]):
        return False
    return _cpf_check_digit(digits[:10], 11) == int(digits[10])


def format_cpf(value: str) -> str:
    digits = only_digits(value)[:11]
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"{digits[:3]}.{digits[3:]}"
    if len(digits) <= 9:
        return f"{digits[:3]}.{digits[3:6]}.{digits[6:]}"
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def _cnpj_check_digit(digits: str, weights: list[int]) -> int:
    remainder = sum(int(d) * w for d, w in zip(digits, weights)) % 11
    return 0 if remainder < 2 else 11 - remainder


def is_valid_cnpj(cnpj: str) -> bool:
    """Validate a CNPJ (14 digits, two weighted mod-11 check digits)."""
    digits = only_digits(cnpj)
    if len(digits) != 14 or digits == digits[0] * 14:
        return False
    weights1 = [5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2]
    weights2 = [6] + weights1
    if _cnpj_check_digit(digits[:12], weights1) != int(digits[12]):
        return False
    return _cnpj_check_digit(digits[:13], weights2) == int(digits[13])


def format_cnpj(value: str) -> str:
    digits = only_digits(value)[:14]
    if len(digits) != 14:
        return digits
    return f"{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:]}"


def format_phone(value: str) -> str:
    """
    Format a Brazilian phone number progressively.

    "11987654321" -> "(11) 98765-4321", "1134567890" -> "(11) 3456-7890"
    """
    digits = only_digits(value)[:11]
    if len(digits) <= 2:
        return f"({digits}" if digits else ""
    if len(digits) <= 7:
        return f"({digits[:2]}) {digits[2:]}"
    if len(digits) <= 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"


def normalize_name(name: str) -> str:
    """
    Title-case a person's name, keeping Portuguese prepositions lower-case.

    Example: "JOÃO DA SILVA" -> "João da Silva"
    """
    if not name:
        return ""
    words = name.strip().lower().split()
    result = []
    for index, word in enumerate(words):
        if index > 0 and word in NAME_PREPOSITIONS:
            result.append(word)
        else:
            result.append(word[:1].upper() + word[1:])
    return " ".join(result)


def calculate_age(birth_date: date, today: date | None = None) -> int:
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def calculate_age_group(birth_date: date, today: date | None = None) -> str:
    """Bucket a birth date into the age groups used for rooms and reports"""
    age = calculate_age(birth_date, today)
    if age < 4:
        return "Bebê"
    if age < 12:
        return "Criança"
    if age < 18:
        return "Adolescente"
    if age < 30:
        return "Jovem"
    if age < 60:
        return "Adulto"
    return "Idoso"


def is_reasonable_date(value: date, today: date | None = None) -> bool:
    """True for dates between 1900-01-01 and today (inclusive)"""
    return MIN_REASONABLE_DATE <= value <= (today or date.today())


def generate_slug(name: str) -> str:
    """Derive a URL slug from a church name: "Igreja Batista Central" -> "igreja-batista-central" """
    ascii_name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode()
    return re.sub(r"[^a-z0-9]+", "-", ascii_name.lower()).strip("-")


def is_valid_slug(slug: str) -> bool:
    return bool(SLUG_PATTERN.match(slug or ""))
