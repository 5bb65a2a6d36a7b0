"""Property-type keywords with Vietnamese and English synonyms.

Order matters: when a query mentions keywords of several types, the first
entry that matches wins. "nhà nguyên căn" is listed under both homestay and
villa, so it always resolves to homestay.
"""

TYPE_KEYWORDS = [
    {
        "type_code": 0,
        "label": "Hotel",
        "synonyms": ["khách sạn", "hotel", "khach san", "ks"],
    },
    {
        "type_code": 1,
        "label": "Homestay",
        "synonyms": ["homestay", "căn hộ", "nhà", "nhà nguyên căn", "can ho"],
    },
    {
        "type_code": 2,
        "label": "Villa",
        "synonyms": ["villa", "biệt thự", "nhà nguyên căn"],
    },
]

# Integer followed by the Vietnamese star unit, applied to normalized text
STAR_RATING_PATTERN = r"(\d+)\s*sao"
