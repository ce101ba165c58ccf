# Cấu trúc danh mục cố định của cửa hàng kính
PARENT_CATEGORIES = {
    "sunglasses": {
        "name_ar": "نظارات شمسية",
        "name_en": "Sunglasses",
        "description_ar": "أفضل التصاميم وأفضل جودة",
        "description_en": "Best designs and best quality",
    },
    "optical_glasses": {
        "name_ar": "نظارات طبية",
        "name_en": "Optical Glasses",
        "description_ar": "أفضل التصاميم وأفضل جودة",
        "description_en": "Best designs and best quality",
    },
}

SUBCATEGORIES = {
    "man": {"name_ar": "رجالي", "name_en": "Men"},
    "woman": {"name_ar": "نسائي", "name_en": "Women"},
    "child": {"name_ar": "أطفال", "name_en": "Children"},
}

PARENT_SUBCATEGORY_MAP = {
    "sunglasses": ["man", "woman"],
    "optical_glasses": ["man", "woman", "child"],
}

ORDER_STATUSES = ("pending", "confirmed", "processing", "shipped", "delivered", "cancelled")
