import re

EXIT = "exit"
LOAD = "load"
SAVE = "save"
INVENTORY = "inventory"
MOVE = "move"
TAKE = "take"
USE = "use"
UNKNOWN = "unknown"


class Action:
    """
    A structured command. `noun` carries the direction or item name,
    `second` the feature name for `use`.
    """
    def __init__(self, verb, noun=None, second=None):
        self.verb = verb
        self.noun = noun
        self.second = second

    def __eq__(self, other):
        if not isinstance(other, Action):
            return NotImplemented
        return (self.verb, self.noun, self.second) == (other.verb, other.noun, other.second)

    def __hash__(self):
        return hash((self.verb, self.noun, self.second))

    def __repr__(self):
        args = [a for a in (self.noun, self.second) if a is not None]
        if not args:
            return f"Action({self.verb!r})"
        return f"Action({self.verb!r}, {', '.join(repr(a) for a in args)})"


# A keyword or captured word must end at whitespace or end of input.
_END = r"(?=\s|$)"
_WORD = r"([a-z]+)" + _END


def _keyword(*words):
    return re.compile(r"^(?:" + "|".join(words) + r")" + _END, re.IGNORECASE)


def _verb_noun(*words):
    return re.compile(r"^(?:" + "|".join(words) + r")\s+" + _WORD, re.IGNORECASE)


# Ordered (pattern, builder) pairs. The first pattern that matches wins.
MATCHERS = [
    (_keyword("exit", "quit"), lambda m: Action(EXIT)),
    (_keyword("load"), lambda m: Action(LOAD)),
    (_keyword("save"), lambda m: Action(SAVE)),
    (_keyword("inventory", "inv"), lambda m: Action(INVENTORY)),
    (_verb_noun("move", "go"), lambda m: Action(MOVE, m.group(1).lower())),
    (_verb_noun("take", "get"), lambda m: Action(TAKE, m.group(1).lower())),
    (re.compile(r"^use\s+" + _WORD + r"\s+on\s+" + _WORD, re.IGNORECASE),
     lambda m: Action(USE, m.group(1).lower(), m.group(2).lower())),
]


def parse(user_input):
    """
    Maps raw player input to an Action. Never raises: anything that no
    matcher recognises becomes an `unknown` action.
    """
    text = user_input.strip()
    for pattern, build in MATCHERS:
        match = pattern.match(text)
        if match:
            return build(match)
    return Action(UNKNOWN)
