"""Typed access to git config values supplied by the caller"""
import collections
import copy
import fnmatch

from qtpy import QtCore
from qtpy.QtCore import Signal


def create(config_output='', null_terminated=True):
    """Create GitConfig instances"""
    cfg = GitConfig()
    if config_output:
        cfg.update(config_output, null_terminated=null_terminated)
    return cfg


def _config_to_python(value):
    """Convert a Git config string into a Python value"""
    if value in ('true', 'yes'):
        value = True
    elif value in ('false', 'no'):
        value = False
    else:
        try:
            value = int(value)
        except ValueError:
            pass
    return value


def _config_key_value(line, splitchar):
    """Split a config line into a (key, value) pair"""
    try:
        k, v = line.split(splitchar, 1)
    except ValueError:
        # the user has an empty entry in their git config,
        # which Git interprets as meaning "true"
        k = line
        v = 'true'
    return k, _config_to_python(v)


def _read_config_from_null_list(config_output):
    """Parse the "git config --list -z" records"""
    for record in config_output.rstrip('\0').split('\0'):
        if not record:
            continue
        yield _config_key_value(record, '\n')


def _read_config_from_lines(config_output):
    """Parse the "git config --list" lines"""
    for line in config_output.splitlines():
        if not line:
            continue
        yield _config_key_value(line, '=')


def python_to_git(value):
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    return value


class GitConfig(QtCore.QObject):
    """Encapsulate access to git-config values."""

    updated = Signal()

    def __init__(self):
        super().__init__()
        self._all = {}
        self._all_values = collections.defaultdict(list)
        self._renamed_keys = {}

    def reset(self):
        self._all.clear()
        self._all_values.clear()
        self._renamed_keys.clear()

    def all(self):
        return copy.deepcopy(self._all)

    def update(self, config_output, null_terminated=True):
        """Read `git config --list` output, replacing the current values"""
        self.reset()
        if null_terminated:
            records = _read_config_from_null_list(config_output)
        else:
            records = _read_config_from_lines(config_output)
        for key, value in records:
            self._store(key, value)
        # Send a notification that the configuration has been updated.
        self.updated.emit()

    def _store(self, key, value):
        # Section and variable names are case-insensitive.
        self._renamed_keys[key.lower()] = key
        self._all[key] = value
        self._all_values[key.lower()].append(value)

    def _get_value(self, key):
        """Return a value from the map"""
        try:
            return self._all[key]
        except KeyError:
            pass
        # Try the original key name.
        key = self._renamed_keys.get(key.lower(), key)
        return self._all[key]

    def get(self, key, default=None, func=None):
        """Return the value for a config key."""
        try:
            value = self._get_value(key)
        except KeyError:
            if func:
                value = func()
            else:
                value = default
        return value

    def get_all(self, key):
        """Return all values for a multi-valued key in the order they were read"""
        return list(self._all_values.get(key.lower(), []))

    def set(self, key, value):
        """Set a value and notify observers"""
        value = _config_to_python(python_to_git(value))
        lowered = key.lower()
        self._all_values.pop(lowered, None)
        self._renamed_keys.pop(lowered, None)
        for name in [name for name in self._all if name.lower() == lowered]:
            del self._all[name]
        self._store(key, value)
        self.updated.emit()

    def find(self, pat):
        """Return a dict of values for all keys matching the specified pattern"""
        pat = pat.lower()
        match = fnmatch.fnmatch
        result = {}
        for key, val in self._all.items():
            if match(key.lower(), pat):
                result[key] = val
        return result
