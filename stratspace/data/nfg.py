"""
Reading and writing .nfg strategic-form savefiles.

Games are written in payoff format:

    NFG 1 R "<title>" { "<player>" ... }

    { { "<strategy>" ... }
    { "<strategy>" ... }
    }
    "<comment>"

    <payoff of player 1> <payoff of player 2> ...

with one payoff line per pure strategy profile, player 1's strategy
varying fastest. Inside quoted strings, '"' and '\\' are escaped with a
backslash. Tree games are written through their reduced strategic form,
with chance-expected payoffs.

The reader also accepts strategy counts instead of labels, and the
outcome format (a list of outcomes followed by one outcome number per
profile, 0 meaning all-zero payoffs).
"""

import logging
import re
from fractions import Fraction
from io import StringIO
from typing import Iterable, Iterator, List, TextIO, Tuple

from tqdm import tqdm

from ..exceptions import NFGParseError
from ..games.table import TableGame

logger = logging.getLogger(__name__)


def quote_string(text: str) -> str:
    """Double-quote a string, escaping quotes and backslashes."""
    return '"' + text.replace('\\', '\\\\').replace('"', '\\"') + '"'


def format_list(labels: Iterable[str]) -> str:
    return "{" + "".join(" " + quote_string(label) for label in labels) + " }"


def format_number(value) -> str:
    """
    Decimal text of a payoff.

    Integers print without a decimal point and terminating rationals as
    exact decimals; other rationals fall back to 'p/q'.
    """
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    value = Fraction(value)
    if value.denominator == 1:
        return str(value.numerator)

    denominator = value.denominator
    twos = fives = 0
    while denominator % 2 == 0:
        denominator //= 2
        twos += 1
    while denominator % 5 == 0:
        denominator //= 5
        fives += 1
    if denominator != 1:
        return f"{value.numerator}/{value.denominator}"

    places = max(twos, fives)
    scaled = abs(value) * 10 ** places
    digits = str(scaled.numerator).rjust(places + 1, "0")
    sign = "-" if value < 0 else ""
    return f"{sign}{digits[:-places]}.{digits[-places:]}"


def parse_number(token: str, line: int = 0) -> Fraction:
    try:
        return Fraction(token)
    except (ValueError, ZeroDivisionError):
        raise NFGParseError(f"Expected a number, got {token!r}", line) from None


def iter_payoff_rows(game, support=None, show_progress: bool = False) -> Iterator[List[str]]:
    """
    Enumerate all pure strategy profiles with their payoffs as text.

    Yields:
        For each profile (player 1 varying fastest), each player's payoff
    """
    players = game.players
    contingencies = game.contingencies(support)
    if show_progress:
        total = 1
        for player in players:
            total *= player.num_strategies
        contingencies = tqdm(contingencies, total=total, desc="Contingencies")
    for profile in contingencies:
        yield [format_number(profile.payoff(player)) for player in players]


def write_nfg(game, stream: TextIO, show_progress: bool = False) -> None:
    """Write a game's strategic form in .nfg payoff format."""
    players = game.players
    stream.write(f"NFG 1 R {quote_string(game.title)} {format_list(p.label for p in players)}\n\n")
    stream.write("{ ")
    for player in players:
        stream.write(format_list(s.label for s in player.strategies) + "\n")
    stream.write("}\n")
    stream.write(quote_string(game.comment) + "\n\n")
    for row in iter_payoff_rows(game, show_progress=show_progress):
        stream.write(" ".join(row) + "\n")


def to_nfg_string(game) -> str:
    stream = StringIO()
    write_nfg(game, stream)
    return stream.getvalue()


# ----------------------------------------------------------------------
# Reading

_TOKEN = re.compile(r'[{}]|"(?:[^"\\]|\\.)*"|"|[^\s{}",]+', re.DOTALL)
_UNESCAPE = re.compile(r'\\(.)', re.DOTALL)

Token = Tuple[str, str, int]  # kind ('{', '}', 'string', 'word'), text, line


def _tokenize(text: str) -> List[Token]:
    tokens = []
    line, position = 1, 0
    for match in _TOKEN.finditer(text):
        line += text.count("\n", position, match.start())
        position = match.start()
        lexeme = match.group()
        if lexeme in "{}":
            tokens.append((lexeme, lexeme, line))
        elif lexeme == '"':
            raise NFGParseError("Unterminated string", line)
        elif lexeme.startswith('"'):
            tokens.append(("string", _UNESCAPE.sub(r"\1", lexeme[1:-1]), line))
        else:
            tokens.append(("word", lexeme, line))
    return tokens


class _Parser:
    def __init__(self, text: str):
        self._tokens = _tokenize(text)
        self._position = 0

    def peek(self) -> Token:
        if self._position >= len(self._tokens):
            return ("eof", "", self._tokens[-1][2] if self._tokens else 0)
        return self._tokens[self._position]

    def next(self, kind: str) -> Token:
        token = self.peek()
        if token[0] != kind:
            expected = "a string" if kind == "string" else repr(kind)
            found = "end of file" if token[0] == "eof" else repr(token[1])
            raise NFGParseError(f"Expected {expected}, found {found}", token[2])
        self._position += 1
        return token

    def at(self, kind: str) -> bool:
        return self.peek()[0] == kind

    def number(self) -> Fraction:
        _, text, line = self.next("word")
        return parse_number(text, line)

    def count(self) -> int:
        _, text, line = self.next("word")
        if not text.isdigit() or int(text) < 1:
            raise NFGParseError(f"Expected a positive strategy count, got {text!r}", line)
        return int(text)

    def strings(self) -> List[str]:
        self.next("{")
        values = []
        while self.at("string"):
            values.append(self.next("string")[1])
        self.next("}")
        return values


def from_nfg_string(text: str) -> TableGame:
    """Parse .nfg text into a table game."""
    parser = _Parser(text)

    _, magic, line = parser.next("word")
    if magic != "NFG":
        raise NFGParseError(f"Not an .nfg file: starts with {magic!r}", line)
    _, version, line = parser.next("word")
    if version != "1":
        raise NFGParseError(f"Unsupported .nfg version {version!r}", line)
    _, kind, line = parser.next("word")
    if kind not in ("R", "D"):
        raise NFGParseError(f"Unsupported number kind {kind!r}", line)

    title = parser.next("string")[1]
    player_labels = parser.strings()
    if not player_labels:
        raise NFGParseError("Game has no players", line)

    parser.next("{")
    if parser.at("{"):
        strategy_labels = []
        for _ in player_labels:
            labels = parser.strings()
            if not labels:
                raise NFGParseError("Player has no strategies", parser.peek()[2])
            strategy_labels.append(labels)
    else:
        strategy_labels = [[str(st) for st in range(1, parser.count() + 1)]
                           for _ in player_labels]
    parser.next("}")
    comment = parser.next("string")[1] if parser.at("string") else ""

    game = TableGame([len(labels) for labels in strategy_labels], title=title)
    game.comment = comment
    for player, label, labels in zip(game.players, player_labels, strategy_labels):
        player.label = label
        for strategy, strategy_label in zip(player.strategies, labels):
            strategy.label = strategy_label

    num_players = len(player_labels)
    profiles = list(game.contingencies())
    if parser.at("{"):
        rows = _read_outcome_rows(parser, num_players, len(profiles))
    else:
        rows = [[parser.number() for _ in range(num_players)] for _ in profiles]
    if not parser.at("eof"):
        _, text, line = parser.peek()
        raise NFGParseError(f"Unexpected {text!r} after the last payoff", line)

    for profile, row in zip(profiles, rows):
        for player, value in zip(game.players, row):
            game._payoffs[(player.number - 1,) + tuple(s._offset for s in profile.strategies)] = value
    logger.debug("Read .nfg game '%s' with shape %s", title, game.shape)
    return game


def _read_outcome_rows(parser: _Parser, num_players: int, num_profiles: int) -> List[List[Fraction]]:
    outcomes = [[Fraction(0)] * num_players]
    parser.next("{")
    while parser.at("{"):
        parser.next("{")
        parser.next("string")
        outcomes.append([parser.number() for _ in range(num_players)])
        parser.next("}")
    parser.next("}")

    rows = []
    for _ in range(num_profiles):
        _, text, line = parser.next("word")
        if not text.isdigit() or int(text) >= len(outcomes):
            raise NFGParseError(f"No outcome numbered {text!r}", line)
        rows.append(outcomes[int(text)])
    return rows


def read_nfg(stream: TextIO) -> TableGame:
    """Read a table game from an .nfg savefile."""
    return from_nfg_string(stream.read())
