"""Medal table aggregation."""

from __future__ import annotations

from dataclasses import dataclass

from django.db.models import Count, Q

from olympics.models import Country, Medal


@dataclass(frozen=True)
class StandingRow:
    """Medal counts for a single country."""

    country_id: int
    name: str
    code: str
    flag_url: str
    gold: int
    silver: int
    bronze: int
    rank: int = 0

    @property
    def total(self) -> int:
        return self.gold + self.silver + self.bronze

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return (self.gold, self.silver, self.bronze)


def _medal_counts(olympics_id: int | None = None, country_id: int | None = None):
    medals = Medal.objects.all()
    if olympics_id is not None:
        medals = medals.filter(medal_event__olympics_id=olympics_id)
    if country_id is not None:
        medals = medals.filter(country_id=country_id)
    return (
        medals.values("country_id", "country__name", "country__code", "country__flag_url")
        .annotate(
            gold=Count("pk", filter=Q(medal_type=Medal.MedalType.GOLD)),
            silver=Count("pk", filter=Q(medal_type=Medal.MedalType.SILVER)),
            bronze=Count("pk", filter=Q(medal_type=Medal.MedalType.BRONZE)),
        )
        .order_by("country_id")
    )


def rank_rows(rows: list[StandingRow]) -> list[StandingRow]:
    """Order rows gold, silver, bronze descending and assign competition ranks.

    Country name is not a key. Rows with identical counts keep
    their incoming order and share a rank (1, 1, 3).
    """

    ordered = sorted(rows, key=lambda row: row.sort_key, reverse=True)
    ranked: list[StandingRow] = []
    previous_key = None
    rank = 0
    for position, row in enumerate(ordered, start=1):
        if row.sort_key != previous_key:
            rank = position
            previous_key = row.sort_key
        ranked.append(
            StandingRow(
                country_id=row.country_id,
                name=row.name,
                code=row.code,
                flag_url=row.flag_url,
                gold=row.gold,
                silver=row.silver,
                bronze=row.bronze,
                rank=rank,
            )
        )
    return ranked


def standings(olympics_id: int | None = None, *, limit: int | None = None) -> list[StandingRow]:
    """Return the medal table, optionally scoped to one Olympics.

    Countries without a medal never appear.
    """

    rows = [
        StandingRow(
            country_id=item["country_id"],
            name=item["country__name"],
            code=item["country__code"],
            flag_url=item["country__flag_url"] or "",
            gold=item["gold"],
            silver=item["silver"],
            bronze=item["bronze"],
        )
        for item in _medal_counts(olympics_id)
    ]
    ranked = [row for row in rank_rows(rows) if row.total > 0]
    if limit is not None:
        ranked = ranked[: max(0, limit)]
    return ranked


def country_medals(country: Country, olympics_id: int | None = None) -> dict[str, int]:
    """Medal counts for one country; zeros when it has not medalled."""

    item = _medal_counts(olympics_id, country_id=country.pk).first()
    gold = item["gold"] if item else 0
    silver = item["silver"] if item else 0
    bronze = item["bronze"] if item else 0
    return {"gold": gold, "silver": silver, "bronze": bronze, "total": gold + silver + bronze}
