"""Graph layout configuration and the git config keys that control it"""
import collections

from ..errors import GraphConfigError


COLOURS = 'lanes.colours'
EXPAND_Y = 'lanes.expandy'
FIRST_PARENT = 'lanes.firstparent'
GRID_X = 'lanes.gridx'
GRID_Y = 'lanes.gridy'
MUTE_MERGES = 'lanes.mutemerges'
MUTE_NON_ANCESTORS = 'lanes.mutenonancestors'
OFFSET_X = 'lanes.offsetx'
OFFSET_Y = 'lanes.offsety'
STYLE = 'lanes.style'
UNCOMMITTED_CHANGES = 'lanes.uncommittedchanges'


class GraphStyle:
    """How lines between columns are drawn"""

    ROUNDED = 0
    ANGULAR = 1

    names = {
        'rounded': ROUNDED,
        'angular': ANGULAR,
    }


class UncommittedChangesStyle:
    """Where the open "current" circle is drawn when the worktree is dirty"""

    OPEN_CIRCLE_AT_CHECKED_OUT_COMMIT = 0
    OPEN_CIRCLE_AT_UNCOMMITTED_CHANGES = 1

    names = {
        'checkedout': OPEN_CIRCLE_AT_CHECKED_OUT_COMMIT,
        'uncommitted': OPEN_CIRCLE_AT_UNCOMMITTED_CHANGES,
    }


class Defaults:
    """Read-only class for holding defaults that get overridden"""

    colours = (
        '#0085d9',
        '#d9008f',
        '#00d90a',
        '#d98500',
        '#a300d9',
        '#ff0000',
        '#00d9cc',
        '#e138e8',
        '#85d900',
        '#dc5b23',
        '#6f24d6',
        '#ffcc00',
    )
    style = 'rounded'
    grid_x = 16
    grid_y = 24
    offset_x = 16
    offset_y = 12
    expand_y = 250
    uncommitted_changes = 'checkedout'
    mute_merges = False
    mute_non_ancestors = False
    first_parent = False


Grid = collections.namedtuple('Grid', 'x y offset_x offset_y expand_y')


def default_grid():
    return Grid(
        Defaults.grid_x,
        Defaults.grid_y,
        Defaults.offset_x,
        Defaults.offset_y,
        Defaults.expand_y,
    )


MuteCommitsConfig = collections.namedtuple(
    'MuteCommitsConfig',
    'merge_commits commits_not_ancestors_of_head',
    defaults=(False, False),
)


class GraphConfig:
    """Immutable graph appearance settings"""

    __slots__ = ('colours', 'style', 'grid', 'uncommitted_changes')

    def __init__(
        self,
        colours=None,
        style=GraphStyle.ROUNDED,
        grid=None,
        uncommitted_changes=UncommittedChangesStyle.OPEN_CIRCLE_AT_CHECKED_OUT_COMMIT,
    ):
        if colours is None:
            colours = Defaults.colours
        colours = tuple(colours)
        if not colours:
            raise GraphConfigError(COLOURS, 'at least one colour is required')
        if style not in GraphStyle.names.values():
            raise GraphConfigError(STYLE, 'invalid graph style: %r' % (style,))
        if uncommitted_changes not in UncommittedChangesStyle.names.values():
            raise GraphConfigError(
                UNCOMMITTED_CHANGES,
                'invalid uncommitted changes style: %r' % (uncommitted_changes,),
            )
        if grid is None:
            grid = default_grid()
        if grid.x <= 0 or grid.y <= 0:
            raise GraphConfigError(GRID_X, 'grid sizes must be positive')

        object.__setattr__(self, 'colours', colours)
        object.__setattr__(self, 'style', style)
        object.__setattr__(self, 'grid', grid)
        object.__setattr__(self, 'uncommitted_changes', uncommitted_changes)

    def __setattr__(self, name, value):
        raise AttributeError('GraphConfig is read-only')

    def __eq__(self, other):
        if not isinstance(other, GraphConfig):
            return NotImplemented
        return (
            self.colours == other.colours
            and self.style == other.style
            and self.grid == other.grid
            and self.uncommitted_changes == other.uncommitted_changes
        )

    def __hash__(self):
        return hash((self.colours, self.style, self.grid, self.uncommitted_changes))


def _choice(cfg, key, choices, default):
    """Return a named choice from the config, also accepting its numeric value"""
    value = cfg.get(key, default=default)
    if isinstance(value, str):
        try:
            return choices[value.lower()]
        except KeyError:
            pass
    elif not isinstance(value, bool) and value in choices.values():
        return value
    raise GraphConfigError(key, 'invalid value for %s: %r' % (key, value))


def _positive_int(cfg, key, default, minimum=0):
    value = cfg.get(key, default=default)
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise GraphConfigError(key, 'invalid value for %s: %r' % (key, value))
    return value


def colours(cfg):
    """Return the configured colour palette"""
    return cfg.get_all(COLOURS) or list(Defaults.colours)


def style(cfg):
    """Return the configured GraphStyle"""
    return _choice(cfg, STYLE, GraphStyle.names, Defaults.style)


def uncommitted_changes(cfg):
    """Return the configured UncommittedChangesStyle"""
    return _choice(
        cfg,
        UNCOMMITTED_CHANGES,
        UncommittedChangesStyle.names,
        Defaults.uncommitted_changes,
    )


def grid(cfg):
    """Return the configured grid metrics"""
    return Grid(
        _positive_int(cfg, GRID_X, Defaults.grid_x, minimum=1),
        _positive_int(cfg, GRID_Y, Defaults.grid_y, minimum=1),
        _positive_int(cfg, OFFSET_X, Defaults.offset_x),
        _positive_int(cfg, OFFSET_Y, Defaults.offset_y),
        _positive_int(cfg, EXPAND_Y, Defaults.expand_y),
    )


def _empty_config():
    # gitcfg needs Qt, which the layout itself does not.
    from .. import gitcfg

    return gitcfg.create()


def graph_config(cfg=None):
    """Build a GraphConfig from a gitcfg.GitConfig

    Without a config object the defaults are used.
    """
    if cfg is None:
        cfg = _empty_config()
    return GraphConfig(
        colours=colours(cfg),
        style=style(cfg),
        grid=grid(cfg),
        uncommitted_changes=uncommitted_changes(cfg),
    )


def mute_config(cfg=None):
    """Build a MuteCommitsConfig from a gitcfg.GitConfig"""
    if cfg is None:
        cfg = _empty_config()
    return MuteCommitsConfig(
        merge_commits=bool(cfg.get(MUTE_MERGES, default=Defaults.mute_merges)),
        commits_not_ancestors_of_head=bool(
            cfg.get(MUTE_NON_ANCESTORS, default=Defaults.mute_non_ancestors)
        ),
    )


def only_follow_first_parent(cfg=None):
    """Should the graph only follow first parents?"""
    if cfg is None:
        cfg = _empty_config()
    return bool(cfg.get(FIRST_PARENT, default=Defaults.first_parent))
