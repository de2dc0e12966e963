"""Shared fixtures and commit window builders"""
from unittest.mock import patch  # noqa pylint: disable=unused-import

import pytest

from gitlanes.models import dag
from gitlanes.models import graph
from gitlanes.models import prefs


def commit(oid, *parent_oids, **kwargs):
    """Create a commit record with the given parents"""
    return dag.Commit(oid, parent_oids=list(parent_oids), stash=kwargs.get('stash', False))


def load(
    commits,
    head_oid=None,
    lookup=None,
    only_follow_first_parent=False,
    config=None,
    mute_config=None,
):
    """Return a Graph loaded with the given commits"""
    if lookup is None:
        lookup = dag.build_commit_lookup(commits)
    value = graph.Graph(config, mute_config)
    value.load_commits(commits, head_oid, lookup, only_follow_first_parent)
    return value


def columns(value):
    """Return the column of every row"""
    return [point.x for point in value.get_vertex_positions()]


def lines_from(value, row):
    """Return the lines that start at the row"""
    return [line for line in value.get_branch_lines() if line.from_row == row]


def segments(value):
    """Return (from_column, from_row, to_column, to_row) for every line"""
    return [
        (line.from_column, line.from_row, line.to_column, line.to_row)
        for line in value.get_branch_lines()
    ]


@pytest.fixture
def linear_commits():
    """C3 -> C2 -> C1"""
    return [commit('C3', 'C2'), commit('C2', 'C1'), commit('C1')]


@pytest.fixture
def merge_commits():
    """M merges P1 and P2, which both fork from B"""
    return [
        commit('M', 'P1', 'P2'),
        commit('P1', 'B'),
        commit('P2', 'B'),
        commit('B'),
    ]


@pytest.fixture
def fork_commits():
    """A and B both fork from C"""
    return [commit('A', 'C'), commit('B', 'C'), commit('C')]


@pytest.fixture
def merge_preview_commits():
    """Uncommitted changes with a merge in progress"""
    return [
        commit(dag.UNCOMMITTED, 'HEAD_OID', 'MERGE_HEAD_OID'),
        commit('HEAD_OID', 'BASE'),
        commit('MERGE_HEAD_OID', 'BASE'),
        commit('BASE'),
    ]


@pytest.fixture
def small_palette():
    """A GraphConfig with only two colours"""
    return prefs.GraphConfig(colours=['#ff0000', '#00ff00'])
