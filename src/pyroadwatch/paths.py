"""Built-in simulation corridors along Highway 401."""

from __future__ import annotations

from pyroadwatch.models.location import Position, SimPath

HWY401_PROVIDED_EAST = SimPath(
    id="401_provided_east",
    name="HWY 401: Provided A → B (Eastbound)",
    start=Position(lat=43.721393, lon=-79.485637),
    end=Position(lat=43.918912, lon=-78.958862),
)

HWY401_PROVIDED_WEST = SimPath(
    id="401_provided_west",
    name="HWY 401: Provided B → A (Westbound)",
    start=Position(lat=43.918912, lon=-78.958862),
    end=Position(lat=43.721393, lon=-79.485637),
)

# Approximate coordinates around the Keele and Hwy 412 interchanges.
HWY401_KEELE_TO_412_EAST = SimPath(
    id="401_keele_to_412_east",
    name="HWY 401: Keele → 412 (Eastbound)",
    start=Position(lat=43.7265, lon=-79.4687),
    end=Position(lat=43.8873, lon=-78.942),
)

HWY401_412_TO_KEELE_WEST = SimPath(
    id="401_412_to_keele_west",
    name="HWY 401: 412 → Keele (Westbound)",
    start=Position(lat=43.8873, lon=-78.942),
    end=Position(lat=43.7265, lon=-79.4687),
)

DEFAULT_SIM_PATHS: tuple[SimPath, ...] = (
    HWY401_PROVIDED_EAST,
    HWY401_PROVIDED_WEST,
    HWY401_KEELE_TO_412_EAST,
    HWY401_412_TO_KEELE_WEST,
)


def find_path(path_id: str, paths: tuple[SimPath, ...] = DEFAULT_SIM_PATHS) -> SimPath | None:
    """Return the path with *path_id*, or ``None``."""
    for path in paths:
        if path.id == path_id:
            return path
    return None
