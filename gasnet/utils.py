"""
Design (utils.py)
- Purpose: Reusable helpers for the UI: input parsing with bounds, single-line text cleanup
           and row formatting for the Treeviews.
- Inputs: Raw widget text, records.
- Outputs: Parsed values (or ValueError with a user-facing message), display tuples.
- Side effects: None.
- Thread-safety: Stateless; safe to call from any thread.
"""

from .models import Pipe, Station


def _bounds_hint(minimum, maximum) -> str:
    if minimum is not None and maximum is not None:
        return f" (min: {minimum}, max: {maximum})"
    if minimum is not None:
        return f" (min: {minimum})"
    if maximum is not None:
        return f" (max: {maximum})"
    return ""


def parse_float(raw: str, minimum: float | None = None, maximum: float | None = None) -> float:
    """
    Purpose: Parse a decimal number typed by the user and check its bounds (inclusive).
    Outputs: The float.
    Raises: ValueError with a message naming the accepted range.
    """
    text = (raw or "").strip().replace(",", ".")
    try:
        value = float(text)
    except ValueError:
        raise ValueError(f"Enter a number{_bounds_hint(minimum, maximum)}") from None
    if value != value or (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
        raise ValueError(f"Enter a number{_bounds_hint(minimum, maximum)}")
    return value


def parse_int(raw: str, minimum: int | None = None, maximum: int | None = None) -> int:
    """Whole-number counterpart of parse_float()."""
    text = (raw or "").strip()
    try:
        value = int(text)
    except ValueError:
        raise ValueError(f"Enter a whole number{_bounds_hint(minimum, maximum)}") from None
    if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
        raise ValueError(f"Enter a whole number{_bounds_hint(minimum, maximum)}")
    return value


def parse_id_list(raw: str) -> list[int]:
    """Parse '1, 4 7' style id lists. Raises ValueError on anything that is not a whole number."""
    ids = []
    for token in (raw or "").replace(",", " ").split():
        ids.append(parse_int(token, minimum=1))
    return ids


def clean_text(raw: str) -> str:
    """Names and classifications are stored one per line, so line breaks are folded into spaces."""
    return " ".join((raw or "").splitlines()).strip()


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"


def format_pipe_row(pipe_id: int, pipe: Pipe) -> tuple:
    return (
        pipe_id,
        pipe.name,
        f"{pipe.length_km:g}",
        pipe.diameter_mm,
        "Yes" if pipe.under_repair else "No",
    )


def format_station_row(station_id: int, station: Station) -> tuple:
    return (
        station_id,
        station.name,
        f"{station.working_workshops}/{station.total_workshops}",
        format_percentage(station.unused_percentage),
        station.classification,
    )
