"""Rule templates for the keyword suggestion engine.

Keywords mix Polish and English on purpose; the families using HomeHQ title
their events in either language. Matching is a plain lowercase substring
test, so keywords should be written in lowercase.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Iterator, Optional, Tuple

from ..domain import SpecialRule


@dataclass(frozen=True, slots=True)
class SuggestionTemplate:
    id: str
    keywords: FrozenSet[str]
    title: str
    days_before_event: int
    description: str = ""
    admin_only: bool = False
    special_rule: Optional[SpecialRule] = None

    def __post_init__(self) -> None:
        if self.days_before_event < 0:
            raise ValueError(f"Template {self.id!r} has a negative day offset.")
        if not self.keywords:
            raise ValueError(f"Template {self.id!r} has no keywords.")


def _template(
    template_id: str,
    keywords: Iterable[str],
    title: str,
    days_before: int,
    description: str,
    *,
    admin_only: bool = False,
    special_rule: Optional[SpecialRule] = None,
) -> SuggestionTemplate:
    return SuggestionTemplate(
        id=template_id,
        keywords=frozenset(keyword.lower() for keyword in keywords),
        title=title,
        days_before_event=days_before,
        description=description,
        admin_only=admin_only,
        special_rule=special_rule,
    )


_BIRTHDAY = ("urodziny", "birthday", "bday", "b-day", "urodzinki")
_SCHOOL_TRIP = ("wycieczka", "school trip", "field trip", "wycieczka szkolna")
_SCHOOL_YEAR_START = ("początek roku", "rozpoczęcie roku", "first day", "back to school", "szkoła")
_CHRISTMAS = ("wigilia", "boże narodzenie", "christmas", "święta")


DEFAULT_TEMPLATES: Tuple[SuggestionTemplate, ...] = (
    # birthdays
    _template(
        "birthday_invitations", _BIRTHDAY,
        "Wysłać zaproszenia / Send invitations", 14,
        "Przygotować i wysłać zaproszenia na urodziny",
    ),
    _template(
        "birthday_cake", _BIRTHDAY,
        "Zamówić tort / Order cake", 7,
        "Zamówić tort urodzinowy",
    ),
    _template(
        "birthday_gifts", _BIRTHDAY,
        "Kupić prezenty i dekoracje / Buy gifts", 14,
        "Purchase birthday presents and decorations",
    ),
    # school
    _template(
        "parent_teacher_meeting",
        ("wywiadówka", "zebranie", "spotkanie z nauczycielem", "parent-teacher", "school meeting"),
        "Przejrzeć zeszyty dziecka / Review notebooks", 1,
        "Przejrzeć zeszyty i prace dziecka przed wywiadówką",
    ),
    _template(
        "school_trip_food", _SCHOOL_TRIP,
        "Przygotować drugie śniadanie / Pack lunch", 1,
        "Przygotować drugie śniadanie i napój na wycieczkę",
    ),
    _template(
        "school_trip_clothes", _SCHOOL_TRIP,
        "Spakować ubrania / Pack clothes", 2,
        "Sprawdzić prognozę pogody i spakować odpowiednie ubrania",
    ),
    _template(
        "end_of_school_year_gift",
        ("koniec roku", "zakończenie roku", "end of school year", "last day of school"),
        "Prezent dla nauczyciela / Teacher gift", 7,
        "Kupić prezent dla nauczyciela na zakończenie roku",
    ),
    _template(
        "school_year_start_supplies", _SCHOOL_YEAR_START,
        "Kupić przybory szkolne / Buy school supplies", 14,
        "Zakupić wszystkie przybory szkolne z listy",
    ),
    _template(
        "school_year_start_books", _SCHOOL_YEAR_START,
        "Podpisać podręczniki / Label textbooks", 7,
        "Podpisać wszystkie podręczniki i zeszyty",
    ),
    _template(
        "semester_end_celebration",
        ("świadectwo", "koniec semestru", "report card", "semester end", "półrocze"),
        "Zaplanować świętowanie / Plan celebration", 1,
        "Zaplanować rodzinne świętowanie zakończenia semestru",
    ),
    _template(
        "school_performance",
        ("przedstawienie", "akademia", "jasełka", "performance", "school play", "recital"),
        "Przygotować strój / Prepare costume", 7,
        "Przygotować strój dla dziecka na przedstawienie",
    ),
    _template(
        "school_break_activities",
        ("ferie", "wakacje", "summer break", "winter break", "holiday", "półkolonie"),
        "Zapisać na zajęcia / Register for activities", 60,
        "Zapisać dzieci na półkolonie lub zajęcia wakacyjne",
    ),
    # date night / outing
    _template(
        "date_night_babysitter",
        ("cinema", "date", "dinner", "movie", "restaurant", "kino", "randka", "wyjście", "wyjscie", "kolacja"),
        "Umówić opiekunkę / Book babysitter", 3,
        "Arrange childcare for the event",
        admin_only=True,
        special_rule=SpecialRule.NEEDS_BABYSITTER,
    ),
    _template(
        "date_night_reservation",
        ("randka", "kolacja", "dinner", "date night", "restaurant", "restauracja"),
        "Zarezerwować stolik / Reserve table", 3,
        "Zarezerwować stolik w restauracji",
    ),
    # health
    _template(
        "health_documents",
        (
            "doctor", "dentist", "clinic", "checkup", "medical", "appointment",
            "lekarz", "dentysta", "pediatra", "wizyta",
        ),
        "Przygotować dokumenty / Prepare documents", 1,
        "Gather insurance cards, vaccination records and medical history",
    ),
    # travel
    _template(
        "travel_pack",
        ("flight", "trip", "vacation", "holiday", "travel", "airport", "lot", "wyjazd", "urlop"),
        "Spakować walizki / Pack bags", 2,
        "Prepare luggage and travel essentials",
    ),
    _template(
        "travel_documents",
        ("wakacje", "vacation", "holiday", "trip", "urlop", "wyjazd", "family vacation"),
        "Sprawdzić dokumenty / Check documents", 30,
        "Sprawdzić ważność dowodów osobistych i paszportów dzieci",
    ),
    # holidays
    _template(
        "christmas_gifts", _CHRISTMAS + ("xmas", "gwiazdka"),
        "Kupić prezenty / Buy presents", 30,
        "Kupić prezenty świąteczne dla dzieci",
    ),
    _template(
        "christmas_outfits", _CHRISTMAS + ("choinka",),
        "Przygotować stroje / Prepare outfits", 7,
        "Przygotować odświętne stroje na Wigilię",
    ),
    # costume parties
    _template(
        "costume_party",
        ("bal", "przebieraniec", "halloween", "costume", "przebranie", "kostium", "andrzejki", "karnawał"),
        "Przygotować kostium / Prepare costume", 14,
        "Przygotować lub kupić kostium na bal",
    ),
    # sports
    _template(
        "swimming_bag",
        ("basen", "swimming", "pool", "pływalnia", "zajęcia sportowe", "sport", "trening"),
        "Spakować torbę / Pack sports bag", 1,
        "Spakować torbę z kostiumem, ręcznikiem i przyborami",
    ),
)


@dataclass(frozen=True)
class SuggestionCatalog:
    """Immutable, ordered set of templates handed to the matcher."""

    templates: Tuple[SuggestionTemplate, ...]

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for template in self.templates:
            if template.id in seen:
                raise ValueError(f"Duplicate suggestion template id: {template.id!r}")
            seen.add(template.id)

    def __iter__(self) -> Iterator[SuggestionTemplate]:
        return iter(self.templates)

    def __len__(self) -> int:
        return len(self.templates)

    @property
    def ids(self) -> FrozenSet[str]:
        return frozenset(template.id for template in self.templates)


DEFAULT_CATALOG = SuggestionCatalog(DEFAULT_TEMPLATES)

# Older clients still send the coarse rule names.
LEGACY_SUGGESTION_IDS: FrozenSet[str] = frozenset({"birthday", "health", "outing", "travel"})

SUGGESTION_IDS: FrozenSet[str] = DEFAULT_CATALOG.ids | LEGACY_SUGGESTION_IDS


__all__ = [
    "DEFAULT_CATALOG",
    "DEFAULT_TEMPLATES",
    "LEGACY_SUGGESTION_IDS",
    "SUGGESTION_IDS",
    "SuggestionCatalog",
    "SuggestionTemplate",
]
