"""Static lookup tables used for scoring, fallback sections and budget hints."""

# Budget label by catalog price level (0=free, 5=luxury)
BUDGET_LABELS: dict[int, str] = {
    0: "Бесплатно",
    1: "2–5k ₸",
    2: "5–10k ₸",
    3: "10–15k ₸",
    4: "15–25k ₸",
    5: "25k+ ₸",
}

# Declared interest -> implied catalog tags
INTEREST_TAG_MAP: dict[str, tuple[str, ...]] = {
    "food": ("food", "restaurant", "cafe", "coffee", "dinner", "breakfast", "street food", "kazakh", "traditional", "local"),
    "culture": ("culture", "history", "museum", "art", "architecture", "education", "landmark"),
    "nightlife": ("nightlife", "bar", "club", "lounge", "entertainment", "date", "evening"),
    "nature": ("nature", "outdoor", "park", "mountain", "lake", "hiking", "river", "garden"),
    "adventure": ("adventure", "hiking", "mountain", "ski", "active", "outdoor", "sports", "extreme"),
    "shopping": ("shopping", "mall", "market", "bazaar", "entertainment", "cinema", "souvenirs"),
    "photography": ("view", "photo", "landmark", "sunset", "scenic", "instagram", "panorama"),
    "wellness": ("wellness", "spa", "fitness", "relax", "yoga", "massage", "health"),
    "family": ("family", "park", "education", "museum", "zoo", "indoor", "kids", "playground"),
    "budget": ("budget", "street food", "free", "park", "local", "affordable"),
    "luxury": ("luxury", "fine dining", "premium", "spa", "five star", "rooftop", "gourmet"),
    "local": ("local", "traditional", "kazakh", "authentic", "hidden gem", "vibe", "community"),
}

# Intent keyword (or stem) -> implied catalog tags
PROMPT_TAG_MAP: dict[str, tuple[str, ...]] = {
    # English
    "coffee": ("coffee", "cafe", "cozy", "breakfast", "wifi"),
    "cafe": ("coffee", "cafe", "cozy", "breakfast"),
    "food": ("food", "restaurant", "dinner", "kazakh", "traditional", "local"),
    "eat": ("food", "restaurant", "dinner", "local"),
    "restaurant": ("food", "restaurant", "dinner", "kazakh", "luxury"),
    "date": ("romantic", "date", "view", "sunset", "dinner"),
    "romantic": ("romantic", "date", "view", "sunset"),
    "view": ("view", "sunset", "landmark", "photo", "outdoor"),
    "photo": ("view", "photo", "landmark", "sunset"),
    "nature": ("nature", "outdoor", "hiking", "park", "mountain", "lake"),
    "park": ("park", "outdoor", "nature", "relax", "river"),
    "walk": ("walking", "outdoor", "park", "center", "vibe"),
    "culture": ("culture", "history", "architecture", "museum", "art"),
    "museum": ("museum", "education", "culture", "indoor"),
    "shop": ("shopping", "entertainment", "cinema", "indoor"),
    "sport": ("sports", "ski", "hiking", "active", "outdoor"),
    "adventure": ("hiking", "mountain", "outdoor", "lake"),
    "night": ("date", "dinner", "view", "entertainment", "nightlife"),
    "quiet": ("cozy", "cafe", "quiet", "relax"),
    "budget": ("budget", "street food", "free", "park", "local", "affordable"),
    "luxury": ("luxury", "fine dining", "premium", "spa", "rooftop", "gourmet"),
    "premium": ("luxury", "fine dining", "premium", "rooftop", "gourmet"),
    "indoor": ("indoor", "museum", "cafe", "mall", "cinema"),
    "rain": ("indoor", "museum", "cafe", "mall", "cinema", "cozy"),
    "healthy": ("healthy", "fitness", "outdoor", "park", "sports"),
    "solo": ("cozy", "cafe", "quiet", "relax", "wifi"),
    "business": ("restaurant", "quiet", "lounge", "premium", "dinner"),
    # Russian
    "кофе": ("coffee", "cafe", "cozy", "wifi", "breakfast"),
    "кафе": ("coffee", "cafe", "cozy", "breakfast", "trendy"),
    "еда": ("food", "restaurant", "dinner", "local", "kazakh"),
    "поесть": ("food", "restaurant", "dinner", "local"),
    "ресторан": ("food", "restaurant", "dinner", "kazakh", "luxury"),
    "свидан": ("romantic", "date", "view", "sunset"),
    "романтик": ("romantic", "date", "view", "sunset"),
    "годовщин": ("romantic", "date", "view", "premium", "luxury", "fine dining"),
    "вечер": ("date", "dinner", "view", "sunset", "entertainment"),
    "природ": ("nature", "outdoor", "hiking", "park", "mountain"),
    "гулять": ("walking", "outdoor", "park", "center", "vibe"),
    "прогулк": ("walking", "outdoor", "park", "river"),
    "парк": ("park", "outdoor", "nature", "relax"),
    "культур": ("culture", "history", "architecture", "museum"),
    "музей": ("museum", "education", "culture"),
    "магазин": ("shopping", "entertainment", "cinema"),
    "горы": ("mountain", "hiking", "outdoor", "ski"),
    "фото": ("view", "photo", "landmark", "sunset"),
    "завтрак": ("breakfast", "cafe", "coffee", "trendy"),
    "уютн": ("cozy", "cafe", "coffee"),
    # Context: trip purpose, mood, company, schedule
    "командировк": ("restaurant", "quiet", "lounge", "premium", "dinner"),
    "работ": ("restaurant", "quiet", "lounge", "premium"),
    "бизнес": ("restaurant", "quiet", "lounge", "premium", "dinner"),
    "студент": ("budget", "street food", "cafe", "affordable", "cozy"),
    "бюджет": ("budget", "street food", "free", "park", "local", "affordable"),
    "дешев": ("budget", "street food", "free", "affordable"),
    "дождь": ("indoor", "museum", "cafe", "mall", "cinema", "cozy"),
    "плох": ("indoor", "museum", "cafe", "mall", "cinema"),
    "здоров": ("healthy", "fitness", "outdoor", "park", "sports"),
    "актив": ("sports", "hiking", "active", "outdoor", "fitness"),
    "спорт": ("sports", "hiking", "active", "outdoor", "fitness"),
    "ноч": ("nightlife", "bar", "club", "lounge", "entertainment", "late"),
    "после 23": ("nightlife", "bar", "club", "lounge", "late"),
    "тусов": ("nightlife", "bar", "club", "entertainment"),
    "интроверт": ("cozy", "cafe", "quiet", "relax", "wifi"),
    "один": ("cozy", "cafe", "quiet", "relax", "wifi"),
    "побыть": ("cozy", "cafe", "quiet", "relax"),
    "спокойн": ("quiet", "cozy", "calm", "relax", "cafe"),
    "тих": ("quiet", "cozy", "calm", "relax"),
    "без толп": ("quiet", "cozy", "calm"),
    "без шум": ("quiet", "cozy", "calm"),
    "толп": ("quiet", "calm"),
    "дорог": ("luxury", "fine dining", "premium", "rooftop", "gourmet"),
    "премиум": ("luxury", "fine dining", "premium", "rooftop", "gourmet"),
    "необычн": ("unique", "hidden gem", "premium", "authentic"),
    "запомн": ("unique", "hidden gem", "premium", "luxury"),
    "инстаграм": ("instagram", "view", "photo", "trendy", "panorama"),
    "красив": ("view", "photo", "instagram", "panorama", "sunset"),
    "лаунж": ("lounge", "bar", "quiet", "premium"),
    "кальян": ("lounge", "bar", "evening"),
    "пиво": ("bar", "restaurant", "casual"),
    "вино": ("bar", "restaurant", "premium", "rooftop"),
    "стейк": ("restaurant", "food", "premium", "dinner"),
    "поужинать": ("food", "restaurant", "dinner", "evening"),
    "обед": ("food", "restaurant", "lunch", "cafe"),
    "семь": ("family", "park", "kids", "zoo", "museum"),
    "ребенк": ("family", "kids", "park", "playground", "indoor"),
    "дет": ("family", "kids", "park", "playground"),
    "встреч": ("restaurant", "quiet", "lounge", "premium", "cafe"),
    "свобод": ("park", "cafe", "restaurant", "walking", "outdoor", "museum"),
    "отдохн": ("relax", "cozy", "cafe", "spa", "park", "quiet"),
    "отдых": ("relax", "cozy", "cafe", "spa", "park", "quiet"),
    "релакс": ("relax", "spa", "cozy", "quiet", "wellness"),
    "суета": ("quiet", "cozy", "calm", "relax"),
    "устал": ("relax", "cozy", "cafe", "quiet", "spa"),
    "40": ("premium", "restaurant", "lounge", "quiet"),
    "драйв": ("nightlife", "bar", "entertainment", "club"),
    "потанцев": ("nightlife", "club", "bar", "entertainment"),
    "коктейл": ("bar", "lounge", "rooftop", "premium"),
    "утр": ("breakfast", "cafe", "coffee", "park", "walking"),
}

# Lowercased place type -> (emoji, section title) for fallback plans
CATEGORY_SECTIONS: dict[str, tuple[str, str]] = {
    "cafe": ("☕", "Кофе и завтрак"),
    "coffee": ("☕", "Кофе и завтрак"),
    "restaurant": ("🍽", "Обед / Ужин"),
    "food": ("🍽", "Где поесть"),
    "park": ("🌿", "Прогулка"),
    "nature": ("🌿", "На природу"),
    "museum": ("🏛", "Культура"),
    "culture": ("🏛", "Культура"),
    "bar": ("🍸", "Вечер"),
    "nightlife": ("🌙", "Ночная жизнь"),
    "entertainment": ("🎭", "Развлечения"),
    "shopping": ("🛍", "Шоппинг"),
}


def budget_label(price_level: int | None) -> str:
    """Budget hint for a price level; unknown levels read as free."""
    return BUDGET_LABELS.get(price_level or 0, BUDGET_LABELS[0])
