"""Tests for club list and artifact naming."""

import pytest

from club_logos.clubs import (
    CLUBS,
    ClubSpec,
    build_final_filename,
    build_raw_filename,
    slugify,
)


class TestSlugify:

    def test_basic(self):
        assert slugify("Chelsea FC") == "chelsea_fc"

    def test_every_non_alnum_becomes_underscore(self):
        assert slugify("Brighton & Hove") == "brighton___hove"
        assert slugify("Bodø/Glimt") == "bod__glimt"

    def test_digits_kept(self):
        assert slugify("Schalke 04") == "schalke_04"

    @pytest.mark.parametrize("club", CLUBS, ids=lambda c: c.name)
    def test_idempotent_for_all_clubs(self, club):
        once = slugify(club.name)
        assert slugify(once) == once

    def test_slugs_are_unique(self):
        slugs = [c.slug for c in CLUBS]
        assert len(set(slugs)) == len(slugs)


class TestFilenames:

    def test_raw_and_final(self):
        club = ClubSpec("Man City FC", "sky blue")
        assert build_raw_filename(club) == "man_city_fc.jpg"
        assert build_final_filename(club) == "man_city_fc_new.jpg"

    def test_club_list(self):
        assert len(CLUBS) == 19
        assert CLUBS[1] == ClubSpec("Chelsea FC", "royal blue")
