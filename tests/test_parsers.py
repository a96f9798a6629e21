"""Tests for UFCStats page parsers."""

from datetime import date

import pytest

from conftest import FIGHT1_URL, FIGHT2_URL, soup_fixture
from ufc_stats.scraper import StructuralError
from ufc_stats.scraper.client import make_soup
from ufc_stats.scraper.models import StatBlock, StrikePair
from ufc_stats.scraper.parsers import (
    TARGET_COLUMNS,
    TOTALS_COLUMNS,
    _parse_date,
    assemble_rounds,
    extract_details,
    extract_fighters,
    extract_method,
    extract_referee,
    extract_round,
    extract_round_stats,
    extract_time,
    extract_time_format,
    extract_winner,
    parse_event_details,
    parse_events_list,
    parse_fight_details,
    parse_stat_row,
)


def _details_page(*paragraphs: str) -> str:
    body = "".join(f'<p class="b-fight-details__text">{p}</p>' for p in paragraphs)
    return (
        '<div class="b-fight-details__fight"><div class="b-fight-details__content">'
        f"{body}</div></div>"
    )


class TestParseDate:
    """Test date parsing."""

    def test_long_and_short_month(self):
        assert _parse_date("February 01, 2025") == date(2025, 2, 1)
        assert _parse_date("Apr 13, 2024") == date(2024, 4, 13)

    def test_malformed_date_is_none(self):
        assert _parse_date("not a date") is None
        assert _parse_date("--") is None
        assert _parse_date("") is None


class TestEventsList:
    """Test the completed events listing parser."""

    def test_parse_events_list(self):
        events = parse_events_list(soup_fixture("events.html"))

        assert [e.name for e in events] == [
            "UFC 300: Pereira vs. Hill",
            "UFC Fight Night: Adesanya vs. Imavov",
            "UFC 299: O'Malley vs. Vera 2",
        ]
        first = events[0]
        assert first.url == "http://ufcstats.com/event-details/aaa111"
        assert first.date_text == "April 13, 2024"
        assert first.location_text == "Las Vegas, Nevada, USA"

    def test_raw_text_kept_without_parsing(self):
        events = parse_events_list(soup_fixture("events.html"))
        # Malformed date and missing location do not drop the event
        assert events[2].date_text == "not a date"
        assert events[2].location_text == ""

    def test_empty_page(self):
        assert parse_events_list(make_soup("<html><body></body></html>")) == []


class TestEventDetails:
    """Test the event details parser."""

    def test_event_metadata(self):
        event = parse_event_details(soup_fixture("event.html"))

        assert event.name == "UFC Fight Night: Adesanya vs. Imavov"
        assert event.date == date(2025, 2, 1)
        assert event.location == "Riyadh, Riyadh, Saudi Arabia"

    def test_fight_rows(self):
        event = parse_event_details(soup_fixture("event.html"))

        assert len(event.fights) == 2
        first, second = event.fights
        assert first.fighter1 == "Nassourdine Imavov"
        assert first.fighter2 == "Israel Adesanya"
        assert first.winner == "Nassourdine Imavov"
        assert first.weight_class == "Middleweight"
        assert first.method == "KO/TKO Punches"
        assert first.round == 2
        assert first.time == "0:30"
        assert first.fight_url == FIGHT1_URL
        assert first.detail is None

        assert second.fight_url == FIGHT2_URL
        assert second.winner is None  # draw
        assert second.method == "S-DEC"

    def test_empty_weight_class_defaults_to_unknown(self):
        html = (
            '<h2 class="b-content__title"><span class="b-content__title-highlight">UFC X</span></h2>'
            "<table><tr class=\"b-fight-details__table-row\" data-link=\"http://ufcstats.com/fight-details/x\">"
            '<td class="b-fight-details__table-col"></td>'
            '<td class="b-fight-details__table-col"><a class="b-link">A</a><a class="b-link">B</a></td>'
            + '<td class="b-fight-details__table-col"></td>' * 8
            + "</tr></table>"
        )
        event = parse_event_details(make_soup(html))
        assert event.fights[0].weight_class == "Unknown"
        assert event.date is None
        assert event.location is None

    def test_not_an_event_page(self):
        with pytest.raises(StructuralError):
            parse_event_details(make_soup("<html><body><h1>Page not found</h1></body></html>"))


class TestFightLabels:
    """Test the individual fight detail label extractors."""

    def test_fight_page_labels(self):
        soup = soup_fixture("fight_1.html")

        assert extract_fighters(soup) == ("Nassourdine Imavov", "Israel Adesanya")
        assert extract_winner(soup) == "Nassourdine Imavov"
        assert extract_method(soup) == "KO/TKO"
        assert extract_round(soup) == 2
        assert extract_time(soup) == "0:30"
        assert extract_time_format(soup) == "5 Rnd (5-5-5-5-5)"
        assert extract_referee(soup) == "Herb Dean"
        assert extract_details(soup) == "Punches to Head At Distance"

    def test_draw_has_no_winner(self):
        assert extract_winner(soup_fixture("fight_2.html")) is None

    def test_judge_details(self):
        details = extract_details(soup_fixture("fight_2.html"))
        assert details == "Sal D'Amato 29 - 28. Derek Cleary 28 - 29. Mike Bell 28 - 28."

    def test_time_ignores_time_format_label(self):
        soup = make_soup(_details_page("Time format: 3 Rnd (5-5-5) Referee: Marc Goddard"))
        assert extract_time(soup) is None
        assert extract_time_format(soup) == "3 Rnd (5-5-5)"

    def test_time_format_without_referee(self):
        soup = make_soup(_details_page("Round: 3 Time: 5:00 Time format: 3 Rnd (5-5-5)"))
        assert extract_time_format(soup) == "3 Rnd (5-5-5)"
        assert extract_referee(soup) is None

    def test_method_collapses_whitespace(self):
        soup = make_soup(_details_page("Method:\n   Decision  -\n  Unanimous\n  Round:\n 3"))
        assert extract_method(soup) == "Decision - Unanimous"

    def test_referee_stops_at_next_label(self):
        soup = make_soup(_details_page("Referee: Keith Peterson Details: something"))
        assert extract_referee(soup) == "Keith Peterson"

    def test_judge_scores_fallback_without_details_label(self):
        soup = make_soup(
            _details_page(
                "Method: Decision - Unanimous Round: 3 Time: 5:00 Time format: 3 Rnd (5-5-5)",
                "Chris Lee 30 - 27.",
                "Junichiro Kamijo 29 - 28.",
            )
        )
        assert extract_details(soup) == "Chris Lee 30 - 27. Junichiro Kamijo 29 - 28."

    def test_missing_labels_are_none(self):
        soup = make_soup(_details_page("Round: 1"))
        assert extract_method(soup) is None
        assert extract_time(soup) is None
        assert extract_referee(soup) is None
        assert extract_details(soup) is None
        assert extract_round(soup) == 1


class TestFightDetails:
    """Test the full fight detail parser."""

    def test_parse_fight_details(self):
        detail = parse_fight_details(soup_fixture("fight_1.html"))

        assert detail.fighter1 == "Nassourdine Imavov"
        assert detail.fighter2 == "Israel Adesanya"
        assert detail.winner == "Nassourdine Imavov"
        assert detail.method == "KO/TKO"
        assert detail.round == 2
        assert detail.referee == "Herb Dean"
        assert len(detail.rounds) == 2
        assert detail.missing_fields() == []

    def test_partial_page_keeps_other_fields(self):
        detail = parse_fight_details(make_soup(_details_page("Round: 2 Time: 1:15")))

        assert detail.round == 2
        assert detail.time == "1:15"
        assert detail.fighter1 is None
        assert detail.rounds == []
        assert "fighter1" in detail.missing_fields()
        assert "rounds" in detail.missing_fields()

    def test_not_a_fight_page(self):
        with pytest.raises(StructuralError):
            parse_fight_details(make_soup("<html><body><p>Oops</p></body></html>"))


class TestRoundStats:
    """Test per-round statistics assembly."""

    def test_round_one_totals(self):
        rounds = extract_round_stats(soup_fixture("fight_1.html"))

        assert [r.round for r in rounds] == [1, 2]
        imavov = rounds[0].fighter1_stats
        assert imavov.knockdowns == 0
        assert imavov.significant_strikes == StrikePair(11, 23)
        assert imavov.total_strikes == StrikePair(13, 25)
        assert imavov.takedowns == StrikePair(1, 2)
        assert imavov.submission_attempts == 0
        assert imavov.reversals == 0
        assert imavov.control_time_seconds == 69

        adesanya = rounds[0].fighter2_stats
        assert adesanya.significant_strikes == StrikePair(9, 30)
        assert adesanya.takedowns == StrikePair(0, 0)
        assert adesanya.control_time_seconds == 0

    def test_target_breakdown_merged_by_round(self):
        rounds = extract_round_stats(soup_fixture("fight_1.html"))

        assert rounds[0].fighter1_stats.head_strikes == StrikePair(6, 15)
        assert rounds[0].fighter1_stats.clinch_strikes == StrikePair(2, 3)
        assert rounds[0].fighter2_stats.head_strikes == StrikePair(4, 20)
        assert rounds[1].fighter1_stats.knockdowns == 1
        assert rounds[1].fighter1_stats.ground_strikes == StrikePair(3, 4)
        assert rounds[1].fighter2_stats.reversals == 1

    def test_without_target_table(self):
        rounds = extract_round_stats(soup_fixture("fight_2.html"))

        assert [r.round for r in rounds] == [1, 2, 3]
        assert rounds[0].fighter1_stats.submission_attempts == 1
        assert rounds[0].fighter2_stats.control_time_seconds == 135
        assert rounds[2].fighter1_stats.control_time_seconds == 220
        assert rounds[2].fighter2_stats.control_time_seconds == 0
        assert rounds[0].fighter1_stats.head_strikes == StrikePair()

    def test_no_per_round_section(self):
        assert extract_round_stats(make_soup(_details_page("Round: 1"))) == []


class TestAssembleRounds:
    """Test merging of parsed table rows."""

    def _totals(self, sig_landed):
        cells = ["A\nB", "0\n0", f"{sig_landed} of 10\n1 of 10", "", "", "", "", "", "", "0:10\n0:00"]
        return parse_stat_row(cells, TOTALS_COLUMNS)

    def _targets(self, head_landed):
        cells = ["A\nB", "", "", f"{head_landed} of 5\n0 of 5", "", "", "", "", ""]
        return parse_stat_row(cells, TARGET_COLUMNS)

    def test_rounds_contiguous_and_sorted(self):
        rounds = assemble_rounds([self._totals(5), self._totals(3), self._totals(7)])

        assert [r.round for r in rounds] == [1, 2, 3]
        assert [r.fighter1_stats.significant_strikes.landed for r in rounds] == [5, 3, 7]

    def test_missing_cells_default_to_zero(self):
        rounds = assemble_rounds([parse_stat_row(["A\nB"], TOTALS_COLUMNS)])
        assert rounds[0].fighter1_stats == StatBlock()
        assert rounds[0].fighter2_stats == StatBlock()

    def test_short_target_table_keeps_defaults(self):
        rounds = assemble_rounds([self._totals(5), self._totals(3)], [self._targets(4)])

        assert rounds[0].fighter1_stats.head_strikes == StrikePair(4, 5)
        assert rounds[1].fighter1_stats.head_strikes == StrikePair()
        assert rounds[1].fighter1_stats.significant_strikes == StrikePair(3, 10)

    def test_extra_target_rows_dropped(self):
        rounds = assemble_rounds([self._totals(5)], [self._targets(4), self._targets(2)])

        assert len(rounds) == 1
        assert rounds[0].fighter1_stats.head_strikes == StrikePair(4, 5)
