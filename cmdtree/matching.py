"""
Name matching for command resolution.

Two strategies are used by the parser:
- prefix scoring, which decides what the user meant (the input must be a
  literal prefix of a command name, or the name itself);
- edit distance, which only feeds “did you mean” suggestions once prefix
  matching has failed.

All functions are pure and work on plain strings; the `key` parameters let the
parser pass command nodes directly.
"""
import sys

# Score of an exact match; greater than any prefix length.
PERFECT = sys.maxsize
# Score of an input that is not a prefix of the candidate.
NOMATCH = -1

# Suggestions are offered for names strictly closer than this.
FUZZINESS = 3


def _identity(object, /):
    return object


def prefix_score(candidate, input, /):
    """
    Score `input` as a prefix of `candidate`.

    Returns
    - PERFECT when both strings are identical.
    - the number of matched characters when `input` is a proper prefix.
    - NOMATCH when `input` is longer than `candidate` or differs anywhere.

    Examples
    - prefix_score("status", "stat")   -> 4
    - prefix_score("status", "status") -> PERFECT
    - prefix_score("status", "stop")   -> NOMATCH
    """
    for index, char in enumerate(candidate):
        if index == len(input):
            return index
        if char != input[index]:
            return NOMATCH
    return PERFECT if len(candidate) == len(input) else NOMATCH


def best_matches(candidates, input, /, key=_identity):
    """
    Return the candidates sharing the best prefix score for `input`.

    The running maximum starts at zero, so candidates scoring NOMATCH are never
    kept. A strictly better score replaces the retained set, a tie extends it.
    The result keeps declaration order:
    - []             no candidate matched,
    - [one]          resolved,
    - [many, ...]    ambiguous.
    """
    best = 0
    matches = []
    for candidate in candidates:
        score = prefix_score(key(candidate), input)
        if score > best:
            best = score
            matches = [candidate]
        elif score == best:
            matches.append(candidate)
    return matches


def edit_distance(a, b, /):
    """
    Levenshtein distance between `a` and `b` (insert/delete/substitute cost 1).

    Uses a single row of the dynamic-programming table.
    """
    column = list(range(len(a) + 1))
    for x in range(1, len(b) + 1):
        column[0], diagonal = x, x - 1
        for y in range(1, len(a) + 1):
            previous = column[y]
            column[y] = min(
                column[y] + 1,
                column[y - 1] + 1,
                diagonal + (a[y - 1] != b[x - 1]),
            )
            diagonal = previous
    return column[len(a)]


def suggestions(candidates, input, /, fuzziness=FUZZINESS, key=_identity):
    """
    Return the candidates whose edit distance to `input` is below `fuzziness`.
    """
    return [candidate for candidate in candidates if edit_distance(key(candidate), input) < fuzziness]


__all__ = (
    "PERFECT",
    "NOMATCH",
    "FUZZINESS",
    "prefix_score",
    "best_matches",
    "edit_distance",
    "suggestions",
)
