# Copyright 2022 Grabtaxi Holdings Pte Ltd (GRAB), All rights reserved.

# Use of this source code is governed by an MIT-style license that can be found in the LICENSE file

import logging

from obdd_comparator import ObddComparator
from obdd_exceptions import (
    GraphInitializedError,
    InvalidNodeConfigurationError,
    InvalidRootNodeError,
    NodeNotFoundError,
)
from obdd_nodes import DecisionNode, Edge, GraphObject, ObddNode, TerminalNode, TruthValue
from obdd_traversal import TraversalState, iterate_depth_first

logger = logging.getLogger(__name__)

# reserved variables of the two terminal nodes
TRUE_VARIABLE = -1
FALSE_VARIABLE = -2


class ObddGraph(GraphObject):
    '''
    Ordered binary decision diagram.

    The graph owns the true and false terminal nodes (its own true and false branch) and a
    unique table mapping each variable to its single decision node. Every node added is a
    child of the graph until an edge from another node replaces that back reference.

    Build the graph with add_node and set_edge_reference, then call init() once.
    init() resolves the root and rejects cyclic graphs, afterwards the graph cannot change.
    '''

    def __init__(self):
        super().__init__()
        self._true_branch = TerminalNode(TRUE_VARIABLE, self, True)
        self._false_branch = TerminalNode(FALSE_VARIABLE, self, False)
        self.unique_table = {}
        self.root = None
        self.initialized = False
        logger.info('ObddGraph initialized with true branch (%d) and false branch (%d)', TRUE_VARIABLE, FALSE_VARIABLE)

    @property
    def nodes(self):
        '''Decision nodes of the unique table, ordered by variable'''
        return sorted(self.unique_table.values())

    def __eq__(self, other):
        return self is other

    def __hash__(self):
        return hash(self.object_id)

    def __repr__(self):
        root_text = '' if self.root is None else str(self.root.variable)
        return 'ObddGraph(nodes:{}, root:{}, initialized:{})'.format(len(self.unique_table), root_text, self.initialized)

    def resolve_node(self, variable):
        '''Returns the node for variable, including the terminals, None if there is none'''
        if variable == TRUE_VARIABLE:
            return self._true_branch
        if variable == FALSE_VARIABLE:
            return self._false_branch
        return self.unique_table.get(variable)

    def _require_node(self, reference):
        if isinstance(reference, GraphObject):
            return reference
        node = self.resolve_node(reference)
        if node is None:
            raise NodeNotFoundError('Node with id ' + str(reference) + ' does not exist')
        return node

    def _canonical(self, node):
        if isinstance(node, ObddNode):
            return self.unique_table.get(node.variable, node)
        return node

    def _check_mutable(self):
        if self.initialized:
            raise GraphInitializedError('Graph is initialized, its structure cannot change anymore')

    def add_node(self, variable, true_branch=None, false_branch=None):
        '''
        Returns the decision node for variable, creating it on first use.

        A new node points to the true and false terminal unless other branches are given,
        the graph is recorded as its parent. For an existing variable the existing node is
        returned unchanged and the branches are ignored.
        '''
        existing_node = self.unique_table.get(variable)
        if existing_node is not None:
            logger.debug('Node for variable %s already exists', variable)
            return existing_node

        self._check_mutable()
        if variable in (TRUE_VARIABLE, FALSE_VARIABLE):
            raise InvalidNodeConfigurationError('Variable ' + str(variable) + ' is reserved for terminal nodes')

        true_branch = self._canonical(self._require_node(true_branch)) if true_branch is not None else self._true_branch
        false_branch = self._canonical(self._require_node(false_branch)) if false_branch is not None else self._false_branch

        logger.info('Creating new decision node for variable: %s', variable)
        node = DecisionNode(variable, self, true_branch, false_branch)
        for branch, child in ((True, true_branch), (False, false_branch)):
            if not child.is_terminal():
                self._link_parent(node, child, branch)
        self.unique_table[variable] = node
        return node

    def _link_parent(self, source, target, branch):
        if target.has_parent(self):
            self.remove_edge_reference(self, target)
        target.add_parent(source, branch)

    def set_edge_reference(self, source, target, branch):
        '''
        Points the branch of source at target and records source as parent of target.
        source and target are nodes or variables, target always resolves to the node the
        unique table holds for its variable.
        Returns the Edge(source, target, branch).
        '''
        self._check_mutable()
        source = self._require_node(source)
        target = self._canonical(self._require_node(target))

        previous_target = None if source.is_terminal() else source.get(branch)
        source.set(branch, target)
        # the replaced target no longer has an edge from source
        if previous_target is not None and previous_target is not target:
            previous_target.remove_parent(source)
        self._link_parent(source, target, branch)
        return Edge(source, target, bool(branch))

    def get_edge_reference(self, source, target):
        '''
        Returns True if target is reached through the true branch of source.
        Raises NodeNotFoundError if target does not record source as parent.
        '''
        source = self._require_node(source)
        target = self._require_node(target)
        label = target.get_parent_label(source)
        if label is None:
            raise NodeNotFoundError('No edge from ' + repr(source) + ' to ' + repr(target))
        return label is TruthValue.TRUE

    def remove_edge_reference(self, source, target):
        '''
        Removes source from the parents of target.
        The branch of source keeps pointing at target.
        '''
        source = self._require_node(source)
        target = self._require_node(target)
        if source is not self:
            self._check_mutable()
        target.remove_parent(source)

    def _find_root_candidates(self):
        candidates = []
        for node in self.nodes:
            if all(parent is self for parent in node.parents):
                candidates.append(node)
        return candidates

    def init(self):
        '''
        Validates the graph and fixes its root.

        Exactly one decision node may have no parent other than the graph, otherwise
        InvalidRootNodeError is raised. The walk from the root raises InvalidNodeReferenceError
        on a cycle. When no node qualifies as root and a cycle exists, the cycle is reported.
        '''
        if self.initialized:
            logger.debug('Graph already initialized with root %s', self.root)
            return self.root

        candidates = self._find_root_candidates()
        if len(candidates) != 1:
            if len(candidates) == 0:
                # every node has a parent, any cycle is found by walking from all of them
                state = TraversalState(None)
                for node in self.nodes:
                    for _ in iterate_depth_first(node, state):
                        pass
            raise InvalidRootNodeError(
                'Expected exactly one root node, found ' + str(len(candidates)) + ': ' + repr(candidates))

        root = candidates[0]
        reachable_count = 0
        for _ in iterate_depth_first(root):
            reachable_count += 1

        self.root = root
        self.initialized = True
        logger.info('Graph initialized with root %s, %d reachable nodes', root, reachable_count)
        return root

    def compare_to(self, other, comparator=None):
        if comparator is None:
            comparator = ObddComparator()
        return comparator.compare(self, other)
