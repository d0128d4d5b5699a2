"""Club list and artifact naming."""

import re
from dataclasses import dataclass

_NON_ALNUM = re.compile(r"[^a-z0-9]")


@dataclass(frozen=True)
class ClubSpec:
    """A club to generate a logo for."""

    name: str
    color: str  # color theme injected into the prompt

    @property
    def slug(self) -> str:
        return slugify(self.name)


CLUBS: tuple[ClubSpec, ...] = (
    ClubSpec("Man United Club", "red"),
    ClubSpec("Chelsea FC", "royal blue"),
    ClubSpec("Everton Club", "deep blue"),
    ClubSpec("Fulham Town", "white and black"),
    ClubSpec("Burnley Club", "claret and sky blue"),
    ClubSpec("Liverpool FC", "red and white"),
    ClubSpec("Wolves United", "gold and black"),
    ClubSpec("Tottenham Club", "navy and white"),
    ClubSpec("Man City FC", "sky blue"),
    ClubSpec("Leeds United FC", "yellow and blue"),
    ClubSpec("Newcastle Club", "black and white"),
    ClubSpec("Sunderland FC", "red and white"),
    ClubSpec("West Ham Club", "claret and blue"),
    ClubSpec("Nottingham FC", "red and white"),
    ClubSpec("Crystal Palace FC", "blue and red"),
    ClubSpec("Aston Villa Club", "claret and sky blue"),
    ClubSpec("Brighton Club", "blue and white"),
    ClubSpec("Bournemouth Club", "red and black"),
    ClubSpec("Brentford Club", "red and white"),
)


def slugify(name: str) -> str:
    """Build a filesystem-safe slug from a club name.

    Lowercases, then replaces every character outside [a-z0-9] with an
    underscore (one per character, no collapsing).

    Example:
        "Chelsea FC" -> "chelsea_fc"
    """
    return _NON_ALNUM.sub("_", name.lower())


def build_raw_filename(club: ClubSpec) -> str:
    """Filename for the generated image without text: {slug}.jpg"""
    return f"{club.slug}.jpg"


def build_final_filename(club: ClubSpec) -> str:
    """Filename for the image with the club name overlaid: {slug}_new.jpg"""
    return f"{club.slug}_new.jpg"
