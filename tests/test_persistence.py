import json
import os
import shutil
import tempfile
import unittest
from unittest import mock

from adventure.builder import build_world
from adventure.errors import PersistenceError
from adventure.persistence import load_world, save_world, world_to_state

ROOMS = [
    {"id": "A", "description": "This is A", "items": ["Stick", "Stone"],
     "exits": {"north": "B", "west": "c"}},
    {"id": "B", "description": "This is B", "features": ["Lever"], "exits": {"south": "A"}},
    {"id": "C", "description": "This is C", "exits": {"east": "A"}},
]


def observe(world):
    state = world_to_state(world)
    state.pop('title')
    return state


class TestSaveLoad(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.save_file = os.path.join(self.tmpdir, "savegame.json")
        self.world = build_world(ROOMS, "a", player_name="Ada")

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_round_trip_with_cycles(self):
        self.world.take_item("stick")
        self.world.move_player("north")

        save_world(self.world, self.save_file)
        restored = load_world(self.save_file)

        self.assertEqual(observe(restored), observe(self.world))
        self.assertEqual(restored.player_location, "b")
        self.assertEqual(restored.rooms["a"].exits, {"north": "b", "west": "c"})
        self.assertEqual(restored.rooms["b"].exits, {"south": "a"})
        self.assertEqual(restored.list_inventory(), "Stick\n")
        restored.move_player("south")
        restored.move_player("north")
        self.assertEqual(restored.player_location, "b")

    def test_snapshot_is_readable_json(self):
        save_world(self.world, self.save_file)
        with open(self.save_file) as f:
            state = json.load(f)
        self.assertEqual(state['format'], "adventure-snapshot")
        self.assertEqual(state['player'], {"name": "Ada", "inventory": []})
        self.assertEqual([r['id'] for r in state['rooms']], ["a", "b", "c"])

    def test_save_leaves_no_temp_files(self):
        save_world(self.world, self.save_file)
        save_world(self.world, self.save_file)
        self.assertEqual(os.listdir(self.tmpdir), ["savegame.json"])

    def test_failed_write_keeps_previous_snapshot(self):
        save_world(self.world, self.save_file)
        with open(self.save_file) as f:
            original = f.read()

        self.world.take_item("stone")
        with mock.patch("adventure.persistence.os.replace", side_effect=OSError(28, "No space left")):
            with self.assertRaises(PersistenceError):
                save_world(self.world, self.save_file)

        with open(self.save_file) as f:
            self.assertEqual(f.read(), original)
        self.assertEqual(os.listdir(self.tmpdir), ["savegame.json"])

    def test_save_into_missing_directory(self):
        with self.assertRaises(PersistenceError):
            save_world(self.world, os.path.join(self.tmpdir, "nope", "save.json"))

    def test_missing_file(self):
        with self.assertRaises(PersistenceError) as ctx:
            load_world(self.save_file)
        self.assertIn("No save file", ctx.exception.message)

    def test_truncated_file(self):
        save_world(self.world, self.save_file)
        with open(self.save_file) as f:
            text = f.read()
        with open(self.save_file, "w") as f:
            f.write(text[: len(text) // 2])
        with self.assertRaises(PersistenceError) as ctx:
            load_world(self.save_file)
        self.assertIn("corrupted", ctx.exception.message)

    def test_deeply_nested_file(self):
        with open(self.save_file, "w") as f:
            f.write("[" * 200000)
        with self.assertRaises(PersistenceError) as ctx:
            load_world(self.save_file)
        self.assertIn("corrupted", ctx.exception.message)

    def _write_state(self, mutate):
        state = world_to_state(self.world)
        mutate(state)
        with open(self.save_file, "w") as f:
            json.dump(state, f)

    def test_exit_to_unknown_room_is_rejected(self):
        self._write_state(lambda s: s['rooms'][0]['exits'].update({"down": "pit"}))
        with self.assertRaises(PersistenceError) as ctx:
            load_world(self.save_file)
        self.assertIn("pit", ctx.exception.message)

    def test_unknown_location_is_rejected(self):
        self._write_state(lambda s: s.update({"player_location": "z"}))
        with self.assertRaises(PersistenceError):
            load_world(self.save_file)

    def test_structural_errors(self):
        mutations = [
            lambda s: s.pop('rooms'),
            lambda s: s.pop('player'),
            lambda s: s.update({"format": "something-else"}),
            lambda s: s.update({"version": 99}),
            lambda s: s['rooms'].append(dict(s['rooms'][0])),
            lambda s: s['rooms'][1].update({"items": "Stick"}),
            lambda s: s['player'].update({"inventory": [1, 2]}),
            lambda s: s['rooms'][2].pop('description'),
        ]
        for mutate in mutations:
            self._write_state(mutate)
            with self.assertRaises(PersistenceError):
                load_world(self.save_file)

    def test_top_level_not_an_object(self):
        with open(self.save_file, "w") as f:
            json.dump(["not", "a", "world"], f)
        with self.assertRaises(PersistenceError):
            load_world(self.save_file)


if __name__ == '__main__':
    unittest.main()
