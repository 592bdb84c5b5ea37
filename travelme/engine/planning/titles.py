"""Keyword-based plan titles for when the model gives none."""

# (any of these stems, title template); first match wins
_TITLE_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("командировк",), "Командировка — {city}"),
    (("date", "romantic", "свидан", "романтик", "годовщин"), "Романтический вечер — {city}"),
    (("coffee", "cafe", "кофе", "кафе"), "Кофейни — {city}"),
    (("food", "eat", "еда", "поесть", "ресторан", "поужинать"), "Где поесть — {city}"),
    (("view", "фото", "вид"), "Лучшие виды — {city}"),
    (("culture", "культур", "музей"), "Культура — {city}"),
    (("nature", "природ", "горы", "парк"), "На природу — {city}"),
    (("walk", "гулять", "прогулк"), "Прогулка по {city}"),
    (("night", "вечер", "ноч"), "Вечер в {city}"),
    (("shop", "магазин"), "Шоппинг — {city}"),
    (("бизнес", "работ"), "Бизнес-вечер — {city}"),
    (("студент", "бюджет"), "Бюджетный план — {city}"),
    (("дождь",), "Что делать в дождь — {city}"),
    (("семь", "ребенк", "дет"), "С семьёй — {city}"),
    (("отдохн", "отдых", "релакс"), "Отдых — {city}"),
)

_WORK_STEMS = ("командировк", "работ", "бизнес")


def guess_title(intent: str, city: str) -> str:
    """Pick a plan title from keywords in the request."""
    lower = intent.lower()

    if "встреч" in lower and any(stem in lower for stem in _WORK_STEMS):
        return f"Бизнес-план — {city}"
    # Working trip with free time
    if "работ" in lower and "свобод" in lower:
        return f"Командировка — {city}"

    for stems, template in _TITLE_RULES:
        if any(stem in lower for stem in stems):
            return template.format(city=city)
    return f"Рекомендации — {city}"
