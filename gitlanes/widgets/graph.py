"""Qt drawing primitives for a laid out commit graph"""
from qtpy.QtCore import Qt
from qtpy import QtCore
from qtpy import QtGui

from ..models import prefs


class Edge:
    """A branch line ready to be painted"""

    __slots__ = ('line', 'path', 'pen')

    def __init__(self, line, path, pen):
        self.line = line
        self.path = path
        self.pen = pen


class Node:
    """A commit marker ready to be painted"""

    __slots__ = ('row', 'center', 'radius', 'color', 'is_open', 'is_stash')

    def __init__(self, row, center, radius, color, is_open, is_stash):
        self.row = row
        self.center = center
        self.radius = radius
        self.color = color
        self.is_open = is_open
        self.is_stash = is_stash

    def path(self):
        path = QtGui.QPainterPath()
        path.addEllipse(self.center, self.radius, self.radius)
        if self.is_stash:
            inner = self.radius / 2.0
            path.addEllipse(self.center, inner, inner)
        return path


class RenderGroup:
    """Everything needed to paint one graph"""

    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.edges = []
        self.nodes = []

    def __len__(self):
        return len(self.edges) + len(self.nodes)

    def is_empty(self):
        return not self.edges and not self.nodes

    def bounding_rect(self):
        return QtCore.QRectF(0.0, 0.0, float(self.width), float(self.height))

    def paint(self, painter):
        """Paint the group using an active QPainter"""
        for edge in self.edges:
            painter.setPen(edge.pen)
            painter.setBrush(Qt.NoBrush)
            painter.drawPath(edge.path)
        for node in self.nodes:
            painter.setPen(QtGui.QPen(node.color, 1.0))
            if node.is_open:
                painter.setBrush(Qt.NoBrush)
            else:
                painter.setBrush(node.color)
            painter.drawPath(node.path())


class Geometry:
    """Map rows and columns onto pixel coordinates"""

    node_radius = 4.0

    def __init__(self, config, expanded_commit=None):
        self.config = config
        self.grid = config.grid
        if expanded_commit is None:
            self.expanded_index = None
        else:
            self.expanded_index = expanded_commit.index

    def x(self, column):
        return float(self.grid.offset_x + column * self.grid.x)

    def y(self, row):
        value = self.grid.offset_y + row * self.grid.y
        if self.expanded_index is not None and row > self.expanded_index:
            value += self.grid.expand_y
        return float(value)

    def point(self, column, row):
        return QtCore.QPointF(self.x(column), self.y(row))


def colour(config, index):
    return QtGui.QColor(config.colours[index % len(config.colours)])


def line_path(geometry, line):
    """Build the painter path for a single line segment"""
    config = geometry.config
    source = geometry.point(line.from_column, line.from_row)
    dest = geometry.point(line.to_column, line.to_row)

    path = QtGui.QPainterPath()
    path.moveTo(source)
    if source.x() == dest.x():
        path.lineTo(dest)
    elif config.style == prefs.GraphStyle.ANGULAR:
        # Turn near the end whose column is locked in place.
        offset = geometry.grid.y * 0.38
        if line.locked_first:
            path.lineTo(QtCore.QPointF(dest.x(), dest.y() - offset))
        else:
            path.lineTo(QtCore.QPointF(source.x(), source.y() + offset))
        path.lineTo(dest)
    else:
        curve = geometry.grid.y * 0.8
        path.cubicTo(
            QtCore.QPointF(source.x(), source.y() + curve),
            QtCore.QPointF(dest.x(), dest.y() - curve),
            dest,
        )
    return path


def line_pen(config, line):
    if line.is_merge_preview:
        style = Qt.DashDotLine
    elif line.is_committed:
        style = Qt.SolidLine
    else:
        style = Qt.DashLine
    return QtGui.QPen(colour(config, line.color), 2.0, style, Qt.SquareCap, Qt.RoundJoin)


def open_circle_row(graph):
    """Return the row drawn with an open circle, or -1"""
    config = graph.config
    if (
        config.uncommitted_changes
        == prefs.UncommittedChangesStyle.OPEN_CIRCLE_AT_UNCOMMITTED_CHANGES
        and graph.vertices
        and not graph.vertices[0].is_committed()
    ):
        return 0
    for vertex in graph.vertices:
        if vertex.is_current():
            return vertex.id
    return -1


def render_graph(graph, expanded_commit=None):
    """Build a RenderGroup from the graph's current layout"""
    config = graph.config
    geometry = Geometry(config, expanded_commit)
    group = RenderGroup(
        graph.get_content_width(), graph.get_height(expanded_commit)
    )

    for line in graph.get_branch_lines():
        group.edges.append(
            Edge(line, line_path(geometry, line), line_pen(config, line))
        )

    current_row = open_circle_row(graph)
    positions = graph.get_vertex_positions()
    colours = graph.get_vertex_colours()
    for vertex in graph.vertices:
        point = positions[vertex.id]
        is_open = vertex.id == current_row or not vertex.is_committed()
        group.nodes.append(
            Node(
                vertex.id,
                geometry.point(point.x, point.y),
                geometry.node_radius,
                colour(config, colours[vertex.id]),
                is_open,
                vertex.is_stash,
            )
        )
    return group
