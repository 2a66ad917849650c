from __future__ import annotations


CROP_DETAILS_SYSTEM_PROMPT = (
    "You are an experienced market gardener helping small farms plan their beds. "
    "Generate detailed farming information for a crop including spacing, soil "
    "requirements, maturity time, and care instructions."
)


def build_crop_details_prompt(name: str, category: str) -> str:
    return (
        f'Generate detailed farming information for a {category} crop named "{name}". '
        "Provide all fields with practical advice. For spacing and pH fields, give "
        'ranges in the format "min-max" (e.g., "24-36"). For daysToMaturity, '
        "provide just a whole number of days."
    )
