class Entity:
    def __init__(self, name):
        self.name = name

    @property
    def key(self):
        return self.name.lower()

    def match_name(self, name):
        return self.key == name.lower()

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash((type(self).__name__, self.key))

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


class Item(Entity):
    """A portable object. Items with the same name are interchangeable."""


class Feature(Entity):
    """A fixed, interactive part of a room (a door, a lever, a grate)."""


def _find(entities, name):
    for index, ent in enumerate(entities):
        if ent.match_name(name):
            return index
    return None


class Room:
    def __init__(self, id, description):
        self.id = id.lower()
        self.description = description
        self.exits = {}  # direction -> room id
        self.items = []
        self.features = []

    def add_exit(self, direction, destination_id):
        self.exits[direction.lower()] = destination_id.lower()

    def get_exits(self):
        return list(self.exits)

    def has_exit(self, direction):
        return direction.lower() in self.exits

    def add_item(self, item):
        self.items.append(item)

    def find_item(self, name):
        index = _find(self.items, name)
        return None if index is None else self.items[index]

    def remove_item(self, name):
        """Removes and returns the first item matching name, or None."""
        index = _find(self.items, name)
        if index is None:
            return None
        return self.items.pop(index)

    def add_feature(self, feature):
        self.features.append(feature)

    def find_feature(self, name):
        index = _find(self.features, name)
        return None if index is None else self.features[index]

    def has_feature(self, name):
        return _find(self.features, name) is not None

    def remove_feature(self, name):
        index = _find(self.features, name)
        if index is None:
            return None
        return self.features.pop(index)

    def get_full_description(self):
        lines = [self.description]
        lines.append("Exits are " + ", ".join(self.get_exits()))
        if self.features:
            lines.append("There is " + ", ".join(f.name for f in self.features))
        if self.items:
            lines.append("Items are " + ", ".join(i.name for i in self.items))
        return "\n".join(lines)

    def to_state(self):
        return {
            'id': self.id,
            'description': self.description,
            'exits': dict(self.exits),
            'items': [i.name for i in self.items],
            'features': [f.name for f in self.features],
        }

    def load_state(self, state):
        self.description = state['description']
        self.exits = dict(state['exits'])
        self.items = [Item(name) for name in state['items']]
        self.features = [Feature(name) for name in state['features']]

    def __repr__(self):
        return f"Room({self.id!r})"


class Player:
    def __init__(self, name="Player"):
        self.name = name
        self.inventory = []

    def add_item(self, item):
        self.inventory.append(item)

    def has_item(self, name):
        return _find(self.inventory, name) is not None

    def find_item(self, name):
        index = _find(self.inventory, name)
        return None if index is None else self.inventory[index]

    def remove_item(self, name):
        index = _find(self.inventory, name)
        if index is None:
            return None
        return self.inventory.pop(index)

    def list_inventory(self):
        """One item name per line, oldest first. Empty inventory gives ''."""
        return "".join(f"{item.name}\n" for item in self.inventory)

    def to_state(self):
        return {
            'name': self.name,
            'inventory': [i.name for i in self.inventory],
        }

    def load_state(self, state):
        self.name = state['name']
        self.inventory = [Item(name) for name in state['inventory']]
