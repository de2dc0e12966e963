"""Per-row rendering records extracted from a Graph

Virtualized commit lists draw the graph one row at a time. Each row needs to
know its own node and every line segment that starts at, ends at, or passes
through it.
"""
import collections
import hashlib

from . import dag
from .graph import Graph


PassingLane = collections.namedtuple(
    'PassingLane',
    'column color is_committed is_merge_preview',
    defaults=(False,),
)

LineSegment = collections.namedtuple(
    'LineSegment',
    'from_column to_column from_row to_row color is_committed is_merge_preview',
    defaults=(False,),
)

RowGraphData = collections.namedtuple(
    'RowGraphData',
    [
        'column',
        'color',
        'is_committed',
        'is_current',
        'is_merge',
        'has_children',
        'has_parents',
        'passing_lanes',
        'incoming_lines',
        'outgoing_lines',
    ],
)


def commits_key(commits):
    """Return a digest of the full commit sequence and its parent links"""
    digest = hashlib.sha1()
    for commit in commits:
        digest.update(commit.oid.encode('utf-8'))
        digest.update(b'\0')
        for parent_oid in commit.parent_oids:
            digest.update(parent_oid.encode('utf-8'))
            digest.update(b' ')
        digest.update(b'\n')
    return digest.hexdigest()


class LayoutCache:
    """Reuse the last Graph while the same commits are being displayed"""

    def __init__(self):
        self.graph = None
        self.key = None
        self.hits = 0

    def reset(self):
        self.graph = None
        self.key = None

    def get(self, commits, head_oid, config=None):
        """Return a Graph loaded with the commits, reusing the cached one"""
        key = commits_key(commits)
        graph = self.graph
        if graph is not None and key == self.key and (
            config is None or config == graph.config
        ):
            self.hits += 1
            graph.set_head(head_oid)
            return graph
        graph = Graph(config)
        graph.load_commits(commits, head_oid, dag.build_commit_lookup(commits))
        self.graph = graph
        self.key = key
        return graph


def compute_graph_layout(commits, head_oid, config=None, cache=None):
    """Return one RowGraphData record per commit"""
    commits = dag.create_commits(commits)
    if not commits:
        return []
    if cache is not None:
        graph = cache.get(commits, head_oid, config=config)
    else:
        graph = Graph(config)
        graph.load_commits(commits, head_oid, dag.build_commit_lookup(commits))

    palette_size = len(graph.config.colours)
    row_count = len(commits)
    outgoing = [[] for _ in range(row_count)]
    incoming = [[] for _ in range(row_count)]
    passing = [[] for _ in range(row_count)]
    passing_columns = [set() for _ in range(row_count)]

    for line in graph.get_branch_lines():
        color = line.color % palette_size
        segment = LineSegment(
            line.from_column,
            line.to_column,
            line.from_row,
            line.to_row,
            color,
            line.is_committed,
            line.is_merge_preview,
        )
        if 0 <= line.from_row < row_count:
            outgoing[line.from_row].append(segment)
        if line.to_row != line.from_row and 0 <= line.to_row < row_count:
            incoming[line.to_row].append(segment)

        min_row = max(min(line.from_row, line.to_row) + 1, 0)
        max_row = min(max(line.from_row, line.to_row), row_count)
        for row in range(min_row, max_row):
            # Diagonal lines have already turned once they are past from_row.
            if line.from_row < row:
                column = line.to_column
            else:
                column = line.from_column
            if column in passing_columns[row]:
                continue
            passing_columns[row].add(column)
            passing[row].append(
                PassingLane(column, color, line.is_committed, line.is_merge_preview)
            )

    result = []
    for row, vertex in enumerate(graph.get_vertex_data()):
        result.append(
            RowGraphData(
                column=vertex.column,
                color=vertex.color,
                is_committed=vertex.is_committed,
                is_current=vertex.is_current,
                is_merge=vertex.is_merge,
                has_children=vertex.has_children,
                has_parents=vertex.has_parents,
                passing_lanes=[
                    lane for lane in passing[row] if lane.column != vertex.column
                ],
                incoming_lines=incoming[row],
                outgoing_lines=outgoing[row],
            )
        )
    return result


def get_max_columns(layout):
    """Return the number of columns needed to draw the layout"""
    max_column = 0
    for row in layout:
        max_column = max(max_column, row.column)
        for lane in row.passing_lanes:
            max_column = max(max_column, lane.column)
        for line in row.incoming_lines:
            max_column = max(max_column, line.from_column, line.to_column)
        for line in row.outgoing_lines:
            max_column = max(max_column, line.from_column, line.to_column)
    return max_column + 1
