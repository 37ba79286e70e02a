from collections.abc import Iterable

from rtd_relay.matching.models import RouteCategory
from rtd_relay.matching.normalizers import normalize_route_id


class RouteCatalog:
    """Ordered set of route categories, each with its own allow-set.

    Classification is the single place route IDs are compared, so call
    sites work with category keys instead of re-testing string patterns.
    The first category whose allow-set contains the ID wins.
    """

    def __init__(self, categories: Iterable[RouteCategory]):
        self._categories = list(categories)

    def classify(self, route_id: str | None) -> RouteCategory | None:
        """Return the category a route ID belongs to, or None.

        Examples (default catalog):
            "117N" -> rail
            "15L" -> bus_colfax_limited
            "n" -> None (membership is case-sensitive)
        """
        normalized = normalize_route_id(route_id)
        if not normalized:
            return None
        for category in self._categories:
            if normalized in category.route_ids:
                return category
        return None

    def accepted_route_ids(self, keys: Iterable[str] | None = None) -> frozenset[str]:
        """Union of allow-sets for the given category keys (all when None)."""
        wanted = set(keys) if keys is not None else None
        route_ids: set[str] = set()
        for category in self._categories:
            if wanted is None or category.key in wanted:
                route_ids |= category.route_ids
        return frozenset(route_ids)

    def label_for(self, route_id: str | None) -> str:
        """Human label for a route ID, falling back to the raw ID."""
        category = self.classify(route_id)
        if category is not None:
            return category.label
        return route_id or "Unknown"
