# Copyright 2022 Grabtaxi Holdings Pte Ltd (GRAB), All rights reserved.

# Use of this source code is governed by an MIT-style license that can be found in the LICENSE file

import itertools
import logging
import threading
from collections import namedtuple
from enum import Enum

from obdd_exceptions import InvalidNodeConfigurationError

logger = logging.getLogger(__name__)

_object_id_counter = itertools.count(1)

# terminal branch access is reported once per process
_terminal_warning_lock = threading.Lock()
_terminal_warning_logged = False

# transient result of an edge operation, the edge itself lives in the branch fields and parent maps
Edge = namedtuple('Edge', ['source', 'target', 'branch'])


class TruthValue(Enum):
    '''
    Label of a reverse edge: which branch of the parent leads to the child.
    UNKNOWN is used for the back reference from the graph to a freshly added node.
    '''
    TRUE = 'true'
    FALSE = 'false'
    UNKNOWN = 'unknown'

    @classmethod
    def from_branch(cls, branch):
        if isinstance(branch, TruthValue):
            return branch
        return cls.TRUE if branch else cls.FALSE


def _warn_terminal_branch_access():
    global _terminal_warning_logged
    with _terminal_warning_lock:
        if _terminal_warning_logged:
            return
        _terminal_warning_logged = True
    logger.warning('A terminal node has no branches')


def _structurally_equal(first, second):
    '''
    Compares two objects by their branches, recursively.
    Pairs already under comparison are assumed equal, so cyclic graphs terminate.
    '''
    pending = [(first, second)]
    seen = set()
    while len(pending) > 0:
        current_first, current_second = pending.pop()
        if current_first is current_second:
            continue
        if current_first is None or current_second is None:
            return False
        pair_key = (current_first.object_id, current_second.object_id)
        if pair_key in seen:
            continue
        seen.add(pair_key)
        if current_first._equality_key() != current_second._equality_key():
            return False
        pending.append((current_first._true_branch, current_second._true_branch))
        pending.append((current_first._false_branch, current_second._false_branch))
    return True


class GraphObject:
    '''
    Base for everything that can take a position in an obdd.

    Holds the forward edges (true branch, false branch) and the reverse edges (parents).
    The parent map is keyed by object id, a parent maps to the TruthValue of the branch
    through which it reaches this object.
    Equality and hashing only look at the branches, the object id is an ordering tie break.
    '''

    def __init__(self, parent=None, true_branch=None, false_branch=None):
        self.object_id = next(_object_id_counter)
        self._parents = {}
        self._parents_lock = threading.Lock()

        if true_branch is not None and true_branch is false_branch:
            raise InvalidNodeConfigurationError('True and false branch are the same node: ' + repr(true_branch))
        self._true_branch = true_branch
        self._false_branch = false_branch

        if parent is not None:
            self._check_not_branch(parent)
            self._parents[parent.object_id] = (parent, TruthValue.UNKNOWN)

    @property
    def true_branch(self):
        return self.get(True)

    @property
    def false_branch(self):
        return self.get(False)

    @property
    def branches(self):
        return [self._true_branch, self._false_branch]

    def get(self, branch):
        '''Returns the true or false branch, None when it is not set'''
        return self._true_branch if branch else self._false_branch

    def set(self, branch, node):
        '''
        Sets the true or false branch to node.
        The reverse edge is not touched, callers record it with add_parent on node.
        '''
        if node is None:
            raise InvalidNodeConfigurationError('Branch target of ' + repr(self) + ' must not be None')
        other_branch = self._false_branch if branch else self._true_branch
        if other_branch is node:
            raise InvalidNodeConfigurationError('No two identical objects can function as branches: ' + repr(node))
        if self.has_parent(node):
            raise InvalidNodeConfigurationError('A parent cannot also be a branch: ' + repr(node))

        if branch:
            self._true_branch = node
        else:
            self._false_branch = node
        return self

    def add_parent(self, parent, branch):
        self._check_not_branch(parent)
        with self._parents_lock:
            self._parents[parent.object_id] = (parent, TruthValue.from_branch(branch))

    def remove_parent(self, parent):
        with self._parents_lock:
            self._parents.pop(parent.object_id, None)

    def has_parent(self, parent):
        with self._parents_lock:
            entry = self._parents.get(parent.object_id)
        return entry is not None and entry[0] is parent

    def get_parent_label(self, parent):
        '''Returns the TruthValue recorded for parent, None if parent is not recorded'''
        with self._parents_lock:
            entry = self._parents.get(parent.object_id)
        if entry is None or entry[0] is not parent:
            return None
        return entry[1]

    @property
    def parents(self):
        '''Snapshot of the parent objects'''
        with self._parents_lock:
            return [parent for parent, _ in self._parents.values()]

    def parent_items(self):
        with self._parents_lock:
            return list(self._parents.values())

    def is_terminal(self):
        return False

    def _check_not_branch(self, node):
        if node is self._true_branch or node is self._false_branch:
            raise InvalidNodeConfigurationError('No two identical objects can function as branches or parents: ' + repr(node))

    def _equality_key(self):
        return (type(self),)

    def __eq__(self, other):
        if not isinstance(other, GraphObject):
            return NotImplemented
        return _structurally_equal(self, other)

    def __hash__(self):
        # one level deep so that hashing never recurses into a cycle
        shallow_branches = tuple(None if node is None else node._equality_key() for node in self.branches)
        return hash((self._equality_key(), shallow_branches))

    def __lt__(self, other):
        return self.object_id < other.object_id


class ObddNode(GraphObject):
    '''
    A node testing a decision variable. Nodes are ordered by variable.
    '''

    def __init__(self, variable, parent=None, true_branch=None, false_branch=None):
        super().__init__(parent, true_branch, false_branch)
        self.variable = variable

    @property
    def value(self):
        raise NotImplementedError

    def __lt__(self, other):
        if isinstance(other, ObddNode):
            return self.variable < other.variable
        return super().__lt__(other)

    def __repr__(self):
        return '{}({}, true_branch:{}, false_branch:{})'.format(
            type(self).__name__,
            self.variable,
            _branch_text(self._true_branch),
            _branch_text(self._false_branch))


def _branch_text(node):
    if isinstance(node, ObddNode):
        return str(node.variable)
    return "''"


class DecisionNode(ObddNode):
    '''Inner node, a walk continues through the selected branch'''

    @property
    def value(self):
        return False


class TerminalNode(ObddNode):
    '''
    Leaf node holding the final boolean value. It has no branches:
    reading a branch returns None and logs a warning, the first time only.
    '''

    def __init__(self, variable, parent=None, value=False):
        super().__init__(variable, parent)
        self._value = bool(value)

    @property
    def value(self):
        return self._value

    def is_terminal(self):
        return True

    def is_true(self):
        return self._value

    def is_false(self):
        return not self._value

    def get(self, branch):
        _warn_terminal_branch_access()
        return None

    def set(self, branch, node):
        raise InvalidNodeConfigurationError('Terminal node ' + repr(self) + ' cannot have branches')

    def _equality_key(self):
        return (type(self), self._value)

    def __repr__(self):
        return 'TerminalNode({}, value:{})'.format(self.variable, self._value)
