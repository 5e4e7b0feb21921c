"""
Unit tests for .nfg savefiles.

Tests verify:
1. Exact text of written files, including quoting and number formatting
2. Tree games are written through their reduced strategic form
3. Reading accepts labels or counts, payoff or outcome format
4. Malformed files raise NFGParseError with a line number
"""

from fractions import Fraction
from io import StringIO

import pytest

from stratspace.data import (
    format_number, from_nfg_string, iter_payoff_rows, parse_number, quote_string, read_nfg,
    to_nfg_string, write_nfg,
)
from stratspace.exceptions import NFGParseError
from stratspace.games import TableGame, centipede, kuhn_poker, prisoners_dilemma


PRISONERS_DILEMMA_NFG = """\
NFG 1 R "Prisoner's dilemma" { "Row" "Column" }

{ { "Cooperate" "Defect" }
{ "Cooperate" "Defect" }
}
""

3 3
5 0
0 5
1 1
"""


class TestWriting:
    """Tests for write_nfg and its helpers."""

    def test_prisoners_dilemma(self):
        assert prisoners_dilemma().to_nfg_string() == PRISONERS_DILEMMA_NFG

    def test_write_to_stream(self):
        stream = StringIO()
        write_nfg(prisoners_dilemma(), stream)
        assert stream.getvalue() == PRISONERS_DILEMMA_NFG

    def test_write_with_progress(self, tmp_path):
        path = tmp_path / "pd.nfg"
        with open(path, "w") as f:
            prisoners_dilemma().write_nfg(f, show_progress=True)
        assert path.read_text() == PRISONERS_DILEMMA_NFG

    def test_tree_game(self):
        text = to_nfg_string(centipede(1))
        assert text == (
            'NFG 1 R "Centipede (1 rounds)" { "Player 1" "Player 2" }\n'
            '\n'
            '{ { "1" "2" }\n'
            '{ "*" }\n'
            '}\n'
            '""\n'
            '\n'
            '4 1\n'
            '2 2\n'
        )

    def test_tree_game_row_count(self):
        rows = list(iter_payoff_rows(kuhn_poker()))
        assert len(rows) == 27 * 64
        assert all(len(row) == 2 for row in rows)

    def test_comment_and_quoting(self):
        game = TableGame([1, 1], title='A "quoted" \\ title')
        game.comment = "Line one"
        game.player(1).label = 'He said "no"'
        text = game.to_nfg_string()
        assert text.startswith('NFG 1 R "A \\"quoted\\" \\\\ title" { "He said \\"no\\"" "" }')
        assert '"Line one"\n' in text

    def test_quote_string(self):
        assert quote_string("plain") == '"plain"'
        assert quote_string('a"b') == '"a\\"b"'
        assert quote_string("a\\b") == '"a\\\\b"'
        assert quote_string("") == '""'

    @pytest.mark.parametrize("value,text", [
        (3, "3"),
        (Fraction(-4), "-4"),
        (Fraction(5, 2), "2.5"),
        (Fraction(-1, 8), "-0.125"),
        (Fraction(1, 20), "0.05"),
        (Fraction(1, 3), "1/3"),
        (Fraction(-7, 6), "-7/6"),
        (2.0, "2"),
        (0.1, "0.1"),
    ])
    def test_format_number(self, value, text):
        assert format_number(value) == text

    def test_parse_number(self):
        assert parse_number("2.5") == Fraction(5, 2)
        assert parse_number("-1/3") == Fraction(-1, 3)
        with pytest.raises(NFGParseError):
            parse_number("x")


class TestReading:
    """Tests for from_nfg_string and read_nfg."""

    def test_round_trip(self):
        game = TableGame.from_arrays(
            [[1, Fraction(1, 3)], [Fraction(-5, 2), 0]],
            [[0, 2], [7, Fraction(2, 3)]],
            title='Round "trip"',
        )
        game.comment = "exact payoffs"
        game.player(2).strategy(2).label = "Right"

        copy = from_nfg_string(game.to_nfg_string())
        assert copy.title == 'Round "trip"'
        assert copy.comment == "exact payoffs"
        assert copy.shape == (2, 2)
        assert copy.player(2).strategy(2).label == "Right"
        for profile in game.contingencies():
            numbers = [s.number for s in profile.strategies]
            for player in (1, 2):
                assert copy.get_payoff(numbers, player) == profile.payoff(player)
        assert copy.to_nfg_string() == game.to_nfg_string()

    def test_read_from_stream(self):
        game = read_nfg(StringIO(PRISONERS_DILEMMA_NFG))
        assert [p.label for p in game.players] == ["Row", "Column"]
        assert game.get_payoff((2, 1), 1) == 5
        assert game.get_payoff((2, 1), 2) == 0

    def test_strategy_counts(self):
        game = from_nfg_string(
            'NFG 1 R "Counts" { "A" "B" } { 2 2 }\n'
            '\n'
            '1 2 3 4 5 6 7 8\n'
        )
        assert game.comment == ""
        assert [s.label for s in game.player(1).strategies] == ["1", "2"]
        assert game.get_payoff((1, 1), 1) == 1
        assert game.get_payoff((2, 1), 1) == 3
        assert game.get_payoff((1, 2), 2) == 6
        assert game.get_payoff((2, 2), 2) == 8

    def test_outcome_format(self):
        game = from_nfg_string(
            'NFG 1 R "Outcomes" { "P1" "P2" }\n'
            '\n'
            '{ { "a" "b" }\n'
            '{ "c" "d" }\n'
            '}\n'
            '""\n'
            '\n'
            '{\n'
            '{ "o1" 1, -1 }\n'
            '{ "o2" 2.5 0 }\n'
            '}\n'
            '1 0 2 1\n'
        )
        assert game.get_payoff((1, 1), 1) == 1
        assert game.get_payoff((1, 1), 2) == -1
        assert game.get_payoff((2, 1), 1) == 0
        assert game.get_payoff((1, 2), 1) == Fraction(5, 2)
        assert game.get_payoff((2, 2), 2) == -1

    def test_read_game_is_editable(self):
        game = from_nfg_string(PRISONERS_DILEMMA_NFG)
        version = game.version
        game.player(1).new_strategy("Tit for tat")
        assert game.version == version + 1
        assert game.get_payoff((2, 2), 1) == 1


class TestParseErrors:
    """Malformed files are rejected."""

    @pytest.mark.parametrize("text", [
        "",
        'EFG 2 R "x" { "A" }',
        'NFG 2 R "x" { "A" }',
        'NFG 1 Q "x" { "A" }',
        'NFG 1 R "x" { }',
        'NFG 1 R "x" { "A" "B" } { { "1" } { } }',
        'NFG 1 R "x" { "A" } { 0 }',
        'NFG 1 R "x" { "A" } { 2 } "" 1',
        'NFG 1 R "x" { "A" } { 2 } "" 1 2 3',
        'NFG 1 R "x" { "A" } { 2 } "" { { "o" 1 } } 1 2',
        'NFG 1 R "unterminated { "A" }',
    ])
    def test_rejected(self, text):
        with pytest.raises(NFGParseError):
            from_nfg_string(text)

    def test_line_number(self):
        text = PRISONERS_DILEMMA_NFG.replace("0 5", "0 five")
        with pytest.raises(NFGParseError) as excinfo:
            from_nfg_string(text)
        assert excinfo.value.line == 10
        assert "line 10" in str(excinfo.value)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            from_nfg_string("NFG")
