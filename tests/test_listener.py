import unittest

from adventure import listener
from adventure.listener import Action, parse


class TestParse(unittest.TestCase):
    def test_simple_commands(self):
        self.assertEqual(parse("exit"), Action(listener.EXIT))
        self.assertEqual(parse("quit"), Action(listener.EXIT))
        self.assertEqual(parse("load"), Action(listener.LOAD))
        self.assertEqual(parse("save"), Action(listener.SAVE))
        self.assertEqual(parse("inventory"), Action(listener.INVENTORY))
        self.assertEqual(parse("inv"), Action(listener.INVENTORY))

    def test_move_is_case_insensitive_and_lowercased(self):
        for text in ["GO north", "go North", "Go NORTH", "move north", "  MOVE north  "]:
            self.assertEqual(parse(text), Action(listener.MOVE, "north"), text)

    def test_take_means_take(self):
        self.assertEqual(parse("take key"), Action(listener.TAKE, "key"))
        self.assertEqual(parse("Get Tinderbox"), Action(listener.TAKE, "tinderbox"))

    def test_use_on(self):
        self.assertEqual(parse("use key on grate"), Action(listener.USE, "key", "grate"))
        self.assertEqual(parse("USE Key ON Grate"), Action(listener.USE, "key", "grate"))

    def test_unknown(self):
        for text in ["", "   ", "dance", "go", "take", "use key", "use key with grate",
                     "go north2", "investigate", "exitnow", "saved"]:
            self.assertEqual(parse(text), Action(listener.UNKNOWN), text)

    def test_trailing_text_is_ignored(self):
        self.assertEqual(parse("save game"), Action(listener.SAVE))
        self.assertEqual(parse("go north quickly"), Action(listener.MOVE, "north"))
        self.assertEqual(parse("exit now"), Action(listener.EXIT))

    def test_earlier_matcher_wins(self):
        self.assertEqual(parse("exit save"), Action(listener.EXIT))
        self.assertEqual(parse("load save"), Action(listener.LOAD))
        self.assertEqual(parse("save inventory"), Action(listener.SAVE))
        self.assertEqual(parse("inv go north"), Action(listener.INVENTORY))

    def test_deterministic(self):
        for text in ["go north", "take key", "use key on grate", "nonsense", "quit"]:
            self.assertEqual(parse(text), parse(text))

    def test_action_repr(self):
        self.assertEqual(repr(Action(listener.MOVE, "north")), "Action('move', 'north')")
        self.assertEqual(repr(Action(listener.EXIT)), "Action('exit')")


if __name__ == '__main__':
    unittest.main()
