"""Commit records, lanes and rows used by the graph layout"""
import collections
import json

# Synthetic commit that represents uncommitted changes in the worktree.
UNCOMMITTED = 'uncommitted'

Point = collections.namedtuple('Point', 'x y')

Line = collections.namedtuple(
    'Line',
    [
        'from_column',
        'from_row',
        'to_column',
        'to_row',
        'is_committed',
        'color',
        'locked_first',
        'is_merge_preview',
    ],
)


class Commit:
    """A commit as seen by the layout: an oid and its declared parents"""

    __slots__ = ('oid', 'parent_oids', 'stash')

    def __init__(self, oid, parent_oids=None, stash=False):
        self.oid = oid
        self.parent_oids = list(parent_oids or [])
        self.stash = stash

    @classmethod
    def create(cls, value):
        """Accept Commit objects or dicts using snake_case or camelCase keys"""
        if isinstance(value, cls):
            return value
        if isinstance(value, dict):
            parent_oids = value.get('parent_oids', value.get('parentOids'))
            return cls(
                value['oid'], parent_oids=parent_oids, stash=bool(value.get('stash'))
            )
        return cls(
            value.oid,
            parent_oids=getattr(value, 'parent_oids', None),
            stash=bool(getattr(value, 'stash', False)),
        )

    def is_merge(self):
        return len(self.parent_oids) > 1

    def data(self):
        return {
            'oid': self.oid,
            'parent_oids': self.parent_oids,
            'stash': self.stash,
        }

    def __str__(self):
        return self.oid

    def __repr__(self):
        return json.dumps(self.data(), sort_keys=True, indent=4)


def create_commits(values):
    """Return a list of Commit objects from commits or dicts"""
    return [Commit.create(value) for value in values]


def build_commit_lookup(commits):
    """Map each commit oid onto its row"""
    lookup = {}
    for idx, commit in enumerate(commits):
        lookup[Commit.create(commit).oid] = idx
    return lookup


class Branch:
    """A single visual lane and the line segments drawn in it"""

    __slots__ = ('_colour', '_index', '_end', '_lines', '_uncommitted')

    def __init__(self, colour, index=0):
        self._colour = colour
        self._index = index
        self._end = 0
        self._lines = []
        self._uncommitted = 0

    def add_line(self, p1, p2, is_committed, locked_first, is_merge_preview=False):
        if not is_committed and self._uncommitted == len(self._lines):
            self._uncommitted += 1
        self._lines.append(
            Line(
                p1.x,
                p1.y,
                p2.x,
                p2.y,
                is_committed,
                self._colour,
                locked_first,
                is_merge_preview,
            )
        )

    def get_colour(self):
        return self._colour

    def get_index(self):
        return self._index

    def get_end(self):
        return self._end

    def set_end(self, end):
        self._end = end

    def get_lines(self):
        return self._lines

    def get_uncommitted_count(self):
        """Return the number of leading lines drawn for uncommitted changes"""
        return self._uncommitted


class Reservations:
    """Columns claimed by lines passing through each row

    A claim records the row the line is heading towards and the branch it
    belongs to. The first claim on a column wins. Claimed columns need not
    be contiguous: a lane keeps its column after lanes to its left end.
    """

    def __init__(self):
        self._rows = {}

    def next_column(self, row):
        """Return the first column that is free at the row"""
        claims = self._rows.get(row, {})
        column = 0
        while column in claims:
            column += 1
        return column

    def is_free(self, row, column):
        return column not in self._rows.get(row, {})

    def width(self, row):
        """Return the number of columns needed to draw the row"""
        claims = self._rows.get(row)
        if not claims:
            return 0
        return max(claims) + 1

    def reserve(self, row, column, target, branch_index):
        """Claim the column unless it is already claimed at the row"""
        claims = self._rows.setdefault(row, {})
        if column not in claims:
            claims[column] = (target, branch_index)

    def column_connecting_to(self, row, target, branch_index):
        """Return the claimed column heading towards target on the branch"""
        claims = self._rows.get(row, {})
        for column in sorted(claims):
            if claims[column] == (target, branch_index):
                return column
        return None

    def clear(self):
        self._rows.clear()


class Vertex:
    """A row in the graph"""

    __slots__ = (
        'id',
        'is_stash',
        'declared_parents',
        '_parents',
        '_children',
        '_next_parent',
        '_column',
        '_branch_index',
        '_colour',
        '_committed',
        '_current',
        '_reservations',
    )

    def __init__(self, vertex_id, is_stash=False, declared_parents=0, reservations=None):
        self.id = vertex_id
        self.is_stash = is_stash
        self.declared_parents = declared_parents
        self._parents = []
        self._children = []
        self._next_parent = 0
        self._column = 0
        self._branch_index = None
        self._colour = 0
        self._committed = True
        self._current = False
        if reservations is None:
            reservations = Reservations()
        self._reservations = reservations

    # Parents and children

    def add_child(self, vertex):
        self._children.append(vertex)

    def get_children(self):
        return self._children

    def add_parent(self, vertex):
        self._parents.append(vertex)

    def get_parents(self):
        return self._parents

    def has_parents(self):
        return len(self._parents) > 0

    def has_children(self):
        return len(self._children) > 0

    def is_merge(self):
        """Is this a merge? Parents outside of the loaded window still count"""
        return max(self.declared_parents, len(self._parents)) > 1

    def get_next_parent(self):
        if self._next_parent < len(self._parents):
            return self._parents[self._next_parent]
        return None

    def get_last_parent(self):
        if self._next_parent < 1:
            return None
        return self._parents[self._next_parent - 1]

    def get_next_parent_position(self):
        """Return the position of the next parent in parent order"""
        return self._next_parent

    def register_parent_processed(self):
        self._next_parent += 1

    # Branch membership

    def add_to_branch(self, branch, column):
        """Bind the vertex to a branch; the first binding wins"""
        if self._branch_index is None:
            self._branch_index = branch.get_index()
            self._colour = branch.get_colour()
            self._column = column

    def is_not_on_branch(self):
        return self._branch_index is None

    def is_on_this_branch(self, branch):
        return self._branch_index is not None and self._branch_index == (
            branch.get_index()
        )

    def get_branch_index(self):
        return self._branch_index

    def get_column(self):
        return self._column

    def get_colour(self):
        return self._colour

    # Points

    def get_point(self):
        return Point(self._column, self.id)

    def get_next_point(self):
        return Point(self._reservations.next_column(self.id), self.id)

    def get_point_at(self, column):
        """Return the point at column when it is free, else the next free point"""
        if self._reservations.is_free(self.id, column):
            return Point(column, self.id)
        return self.get_next_point()

    def get_width(self):
        """Return the number of columns claimed up to the right-most claim"""
        return self._reservations.width(self.id)

    def get_point_connecting_to(self, vertex, branch):
        """Return the point on this row already heading towards vertex"""
        target = vertex.id if vertex is not None else None
        column = self._reservations.column_connecting_to(
            self.id, target, branch.get_index()
        )
        if column is None:
            return None
        return Point(column, self.id)

    def register_unavailable_point(self, column, vertex, branch):
        target = vertex.id if vertex is not None else None
        self._reservations.reserve(self.id, column, target, branch.get_index())

    # State

    def is_committed(self):
        return self._committed

    def set_not_committed(self):
        self._committed = False

    def is_current(self):
        return self._current

    def set_current(self, current=True):
        self._current = current

    def __repr__(self):
        return 'Vertex(%d, column=%d, branch=%r)' % (
            self.id,
            self._column,
            self._branch_index,
        )
