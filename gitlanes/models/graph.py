"""Lane layout for a window of commits

The layout is computed by a single greedy pass over the rows in order. Each
path starts at a row that still has an unprocessed parent (or that is not yet
on a branch) and walks downwards one row at a time, taking the first free
column on every row it crosses, until it reaches the parent. Reaching a parent
that is not yet on a branch pulls it into the current branch and the walk
continues with that parent's first parent. The same input always yields the
same layout.
"""
import collections
import time

from .. import core
from . import dag
from . import prefs


GIT_LANES_TRACE = core.getenv('GIT_LANES_TRACE', '')

VertexData = collections.namedtuple(
    'VertexData',
    [
        'column',
        'color',
        'is_committed',
        'is_current',
        'is_merge',
        'has_children',
        'has_parents',
        'parent_columns',
    ],
)

# Identifies the row whose details are expanded inline below it.
ExpandedCommit = collections.namedtuple('ExpandedCommit', 'index')


class Graph:
    """Computes and answers queries about the layout of a commit window"""

    def __init__(self, config=None, mute_config=None):
        if config is None:
            config = prefs.GraphConfig()
        if mute_config is None:
            mute_config = prefs.MuteCommitsConfig()
        self.config = config
        self.mute_config = mute_config
        self.max_width = -1
        self._reset()

    def _reset(self):
        self.commits = []
        self.vertices = []
        self.branches = []
        self.lookup = {}
        self.head_oid = None
        self.only_follow_first_parent = False
        self._reservations = dag.Reservations()
        self._next_colour = 0
        self._column_map = {}
        self._max_columns = 0

    def load_commits(self, commits, head_oid, lookup=None, only_follow_first_parent=False):
        """Replace the current layout with the layout of the given commits

        `lookup` maps oids onto rows. Parents that are missing from it belong
        to history outside of the loaded window and are not drawn.
        """
        start_time = time.time()
        self._reset()
        self.commits = dag.create_commits(commits)
        if lookup is None:
            lookup = dag.build_commit_lookup(self.commits)
        self.lookup = lookup
        self.head_oid = head_oid
        self.only_follow_first_parent = only_follow_first_parent

        if self.commits:
            self._create_vertices()
            self._assign_branches()
        self._update_column_map()

        lanes_trace = GIT_LANES_TRACE
        if lanes_trace:
            elapsed_time = abs(time.time() - start_time)
            core.print_stderr(
                '# %.3fs: load_commits: %d commits, %d branches'
                % (elapsed_time, len(self.commits), len(self.branches))
            )
            if lanes_trace == 'full':
                for branch in self.branches:
                    core.print_stderr(
                        '#   branch %d: colour=%d end=%d lines=%d'
                        % (
                            branch.get_index(),
                            branch.get_colour(),
                            branch.get_end(),
                            len(branch.get_lines()),
                        )
                    )

    def _followed_parents(self, commit):
        if self.only_follow_first_parent:
            return commit.parent_oids[:1]
        return commit.parent_oids

    def _create_vertices(self):
        vertices = self.vertices
        lookup = self.lookup
        for idx, commit in enumerate(self.commits):
            vertices.append(
                dag.Vertex(
                    idx,
                    is_stash=commit.stash,
                    declared_parents=len(commit.parent_oids),
                    reservations=self._reservations,
                )
            )

        count = len(vertices)
        for idx, commit in enumerate(self.commits):
            vertex = vertices[idx]
            for parent_oid in self._followed_parents(commit):
                row = lookup.get(parent_oid)
                # Parents must be below their children. Anything else is
                # outside of the loaded window and is treated as a root.
                if row is None or row <= idx or row >= count:
                    continue
                parent = vertices[row]
                vertex.add_parent(parent)
                parent.add_child(vertex)

        if self.commits[0].oid == dag.UNCOMMITTED:
            vertices[0].set_not_committed()

        self.set_head(self.head_oid)

    def set_head(self, head_oid):
        """Mark the vertex of head_oid as the current commit"""
        self.head_oid = head_oid
        head_row = self.get_commit_index(head_oid)
        for vertex in self.vertices:
            vertex.set_current(vertex.id == head_row)

    def _assign_branches(self):
        vertices = self.vertices
        idx = 0
        while idx < len(vertices):
            vertex = vertices[idx]
            if vertex.get_next_parent() is not None or vertex.is_not_on_branch():
                self._determine_path(idx)
            else:
                idx += 1

    def _new_branch(self):
        colour = self._next_colour % len(self.config.colours)
        self._next_colour += 1
        branch = dag.Branch(colour, index=len(self.branches))
        self.branches.append(branch)
        return branch

    @staticmethod
    def _is_merge_preview(vertex):
        """Non-first parents of the uncommitted row belong to a staged merge"""
        return not vertex.is_committed() and vertex.get_next_parent_position() > 0

    def _determine_path(self, start_at):
        vertex = self.vertices[start_at]
        parent = vertex.get_next_parent()
        if vertex.is_not_on_branch():
            last_point = vertex.get_next_point()
        else:
            last_point = vertex.get_point()

        if (
            parent is not None
            and vertex.is_merge()
            and not vertex.is_not_on_branch()
            and not parent.is_not_on_branch()
        ):
            self._determine_merge_path(start_at, vertex, parent, last_point)
        else:
            self._determine_branch_path(start_at, vertex, parent, last_point)

    def _determine_merge_path(self, start_at, vertex, parent, last_point):
        """Connect a merge to a parent when both are already on branches"""
        branch = self.branches[parent.get_branch_index()]
        is_merge_preview = self._is_merge_preview(vertex)
        for idx in range(start_at + 1, len(self.vertices)):
            current = self.vertices[idx]
            point = current.get_point_connecting_to(parent, branch)
            found = point is not None
            if not found:
                point = current.get_next_point()
            if found or current is parent:
                locked_first = True
            else:
                locked_first = last_point.x < point.x
            branch.add_line(
                last_point, point, vertex.is_committed(), locked_first, is_merge_preview
            )
            current.register_unavailable_point(point.x, parent, branch)
            last_point = point
            if found:
                break
        vertex.register_parent_processed()

    def _determine_branch_path(self, start_at, vertex, parent, last_point):
        """Open a new branch at the vertex and follow its first parents"""
        vertices = self.vertices
        branch = self._new_branch()
        vertex.add_to_branch(branch, last_point.x)
        vertex.register_unavailable_point(last_point.x, vertex, branch)

        idx = start_at
        if parent is not None:
            is_merge_preview = self._is_merge_preview(vertex)
            # First parents continue the lane in its column while it is free.
            keep_column = vertex.get_next_parent_position() == 0
            for idx in range(start_at + 1, len(vertices)):
                current = vertices[idx]
                if current is parent and not parent.is_not_on_branch():
                    point = current.get_point()
                elif keep_column:
                    point = current.get_point_at(last_point.x)
                else:
                    point = current.get_next_point()
                branch.add_line(
                    last_point,
                    point,
                    vertex.is_committed(),
                    last_point.x < point.x,
                    is_merge_preview,
                )
                current.register_unavailable_point(point.x, parent, branch)
                last_point = point

                if current is parent:
                    # Continue building the branch from the parent
                    vertex.register_parent_processed()
                    parent_on_branch = not parent.is_not_on_branch()
                    parent.add_to_branch(branch, point.x)
                    vertex = parent
                    parent = vertex.get_next_parent()
                    if parent is None or parent_on_branch:
                        break
                    is_merge_preview = self._is_merge_preview(vertex)
                    keep_column = True
            else:
                # The parent was never reached.
                vertex.register_parent_processed()

        branch.set_end(idx)

    # Queries

    def _vertex_at(self, row):
        if isinstance(row, int) and 0 <= row < len(self.vertices):
            return self.vertices[row]
        return None

    def get_commit_index(self, oid):
        """Return the row of the commit, or -1 when it is not loaded"""
        if oid is None:
            return -1
        row = self.lookup.get(oid)
        if row is None or not 0 <= row < len(self.vertices):
            return -1
        return row

    def get_vertex_colours(self):
        count = len(self.config.colours)
        return [vertex.get_colour() % count for vertex in self.vertices]

    def get_vertex_positions(self):
        return [
            dag.Point(self._map_column(vertex.get_column()), vertex.id)
            for vertex in self.vertices
        ]

    def get_vertex_data(self):
        count = len(self.config.colours)
        result = []
        for vertex in self.vertices:
            result.append(
                VertexData(
                    column=self._map_column(vertex.get_column()),
                    color=vertex.get_colour() % count,
                    is_committed=vertex.is_committed(),
                    is_current=vertex.is_current(),
                    is_merge=vertex.is_merge(),
                    has_children=vertex.has_children(),
                    has_parents=vertex.has_parents(),
                    parent_columns=[
                        self._map_column(parent.get_column())
                        for parent in vertex.get_parents()
                    ],
                )
            )
        return result

    def get_branch_lines(self):
        """Return the lines of every branch in branch creation order"""
        lines = []
        for branch in self.branches:
            for line in branch.get_lines():
                if self._column_map:
                    line = line._replace(
                        from_column=self._map_column(line.from_column),
                        to_column=self._map_column(line.to_column),
                    )
                lines.append(line)
        return lines

    # Sizing

    def _column_count(self):
        """Return the number of columns used by any row"""
        count = 0
        for vertex in self.vertices:
            count = max(count, vertex.get_width(), vertex.get_column() + 1)
        if count > 0:
            count = self._map_column(count - 1) + 1
        return count

    def get_content_width(self):
        if not self.vertices:
            return 0
        grid = self.config.grid
        width = 2 * grid.offset_x + (self._column_count() - 1) * grid.x
        if self.max_width >= 0:
            width = min(width, self.max_width)
        return width

    def get_height(self, expanded_commit=None):
        grid = self.config.grid
        height = len(self.vertices) * grid.y + grid.offset_y - grid.y / 2
        if expanded_commit is not None:
            height += grid.expand_y
        return height

    def get_widths_at_vertices(self):
        grid = self.config.grid
        widths = []
        for vertex in self.vertices:
            columns = vertex.get_width()
            if columns > 0:
                columns = self._map_column(columns - 1) + 1
            width = grid.offset_x + columns * grid.x - 2
            if self.max_width >= 0:
                width = min(width, self.max_width)
            widths.append(width)
        return widths

    def limit_max_width(self, max_width):
        """Compress the columns reported by queries to fit max_width pixels

        None or a negative width removes the limit.
        """
        if max_width is None or max_width < 0:
            max_width = -1
        self.max_width = max_width
        self._update_column_map()

    def _used_columns(self):
        used = set()
        for vertex in self.vertices:
            used.add(vertex.get_column())
        for branch in self.branches:
            for line in branch.get_lines():
                used.add(line.from_column)
                used.add(line.to_column)
        return used

    def _update_column_map(self):
        self._column_map = {}
        self._max_columns = 0
        if self.max_width < 0 or not self.vertices:
            return
        grid = self.config.grid
        used = self._used_columns()
        natural_width = 2 * grid.offset_x + max(used) * grid.x
        if natural_width <= self.max_width:
            return
        max_columns = max(1, int((self.max_width - 2 * grid.offset_x) // grid.x) + 1)
        self._max_columns = max_columns
        # Drop unused columns first, then fold the overflow onto the last
        # visible column. Both steps keep the left-to-right order.
        for rank, column in enumerate(sorted(used)):
            self._column_map[column] = min(rank, max_columns - 1)

    def _map_column(self, column):
        if not self._column_map:
            return column
        try:
            return self._column_map[column]
        except KeyError:
            return min(column, self._max_columns - 1)

    # Topology

    def drop_commit_possible(self, row):
        """Can the commit be removed without reconnecting other commits?"""
        vertex = self._vertex_at(row)
        if vertex is None or not vertex.is_committed() or vertex.is_merge():
            return False
        if len(self.commits[row].parent_oids) != 1:
            return False
        parents = vertex.get_parents()
        if len(parents) != 1:
            return False
        children = parents[0].get_children()
        return len(children) == 1 and children[0] is vertex

    def get_muted_commits(self, head_oid=None, mute_config=None):
        """Return a list of flags marking the rows to de-emphasize"""
        if head_oid is None:
            head_oid = self.head_oid
        if mute_config is None:
            mute_config = self.mute_config
        muted = [False] * len(self.vertices)

        if mute_config.merge_commits:
            for vertex in self.vertices:
                if vertex.is_merge():
                    muted[vertex.id] = True

        if mute_config.commits_not_ancestors_of_head:
            head_row = self.get_commit_index(head_oid)
            if head_row >= 0:
                ancestors = self._ancestors(head_row)
                for vertex in self.vertices:
                    if vertex.id not in ancestors:
                        muted[vertex.id] = True
        return muted

    def _ancestors(self, row):
        """Return the rows reachable from row by following parents"""
        seen = {row}
        stack = [self.vertices[row]]
        while stack:
            vertex = stack.pop()
            for parent in vertex.get_parents():
                if parent.id not in seen:
                    seen.add(parent.id)
                    stack.append(parent)
        return seen

    def _parent_rows(self, row):
        if self._vertex_at(row) is None:
            return []
        return [self.get_commit_index(oid) for oid in self.commits[row].parent_oids]

    def get_first_parent_index(self, row):
        parent_rows = self._parent_rows(row)
        if not parent_rows:
            return -1
        return parent_rows[0]

    def get_alternative_parent_index(self, row):
        for parent_row in self._parent_rows(row)[1:]:
            if parent_row >= 0:
                return parent_row
        return -1

    def get_first_child_index(self, row):
        vertex = self._vertex_at(row)
        if vertex is None or not vertex.has_children():
            return -1
        return vertex.get_children()[0].id

    def get_alternative_child_index(self, row):
        vertex = self._vertex_at(row)
        if vertex is None or len(vertex.get_children()) < 2:
            return -1
        return vertex.get_children()[1].id

    # Presentation

    def render(self, expanded_commit=None):
        """Build the drawable items for the current layout"""
        # Qt is only needed when drawing.
        from ..widgets import graph as graph_widget

        return graph_widget.render_graph(self, expanded_commit)
