def normalize_route_id(route_id: str | None) -> str:
    """Trim surrounding whitespace from a route ID.

    Route membership stays case-sensitive: "N" and "n" are different
    upstream identifiers.
    """
    if route_id is None:
        return ""
    return route_id.strip()


def normalize_stop_id(stop_id: str | None, fold_case: bool = True) -> str:
    """Normalize a stop ID for comparison.

    Rail stop IDs are compared case-insensitively. Bus stop IDs are purely
    numeric, so callers pass fold_case=False and get an exact comparison
    after trimming.

    Examples:
        " 25287 " -> "25287"
        "Union-A" -> "union-a"
        "Union-A" (fold_case=False) -> "Union-A"
    """
    if stop_id is None:
        return ""
    result = stop_id.strip()
    if fold_case:
        result = result.casefold()
    return result
