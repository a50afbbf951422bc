"""How long to wait between restoring the clipboard and sending paste.

Some applications need time to take in multi-representation data (images,
rich text) before a paste lands reliably, while plain text can be pasted
almost immediately. The policy scales the configured base delay by the
flavor mix of the snapshot being restored.
"""

from typing import Callable, FrozenSet, Iterable, NamedTuple, Tuple

from stackclip.clipboard.flavors import PLAIN_TEXT, has_rich


class DelayRule(NamedTuple):
    name: str
    matches: Callable[[FrozenSet[str]], bool]
    factor: float


# Evaluated top to bottom, first match wins.
PASTE_DELAY_POLICY: Tuple[DelayRule, ...] = (
    DelayRule("plain text only", lambda t: t == frozenset({PLAIN_TEXT}), 0.5),
    DelayRule("rich with at most two flavors", lambda t: has_rich(t) and len(t) <= 2, 1.0),
    DelayRule("more than two flavors", lambda t: len(t) > 2, 2.0),
    DelayRule("anything else", lambda t: True, 2.0),
)


def match_rule(flavors: Iterable[str]) -> DelayRule:
    types = frozenset(flavors)
    for rule in PASTE_DELAY_POLICY:
        if rule.matches(types):
            return rule
    return PASTE_DELAY_POLICY[-1]


def paste_delay(flavors: Iterable[str], base_delay: float) -> float:
    return base_delay * match_rule(flavors).factor
