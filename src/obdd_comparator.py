# Copyright 2022 Grabtaxi Holdings Pte Ltd (GRAB), All rights reserved.

# Use of this source code is governed by an MIT-style license that can be found in the LICENSE file

import functools
import logging

from obdd_exceptions import InvalidNodeReferenceError, NotInitializedError
from obdd_logical import Logical
from obdd_traversal import find_terminal

logger = logging.getLogger(__name__)


class ObddComparator:
    '''
    Compares initialized obdds. Holds no state, one instance serves any number of graphs.
    '''

    def compare(self, first, second):
        '''
        Ordering of two graphs: 0 when they are equivalent under AND,
        otherwise the graph with the smaller unique table comes first.
        Can be used with functools.cmp_to_key.
        '''
        if self.compare_with(first, second, Logical.AND):
            return 0
        first_size = len(first.unique_table)
        second_size = len(second.unique_table)
        return (first_size > second_size) - (first_size < second_size)

    def compare_with(self, first, second, logical):
        '''
        Walks both graphs from their root along the true branch only, and again along the false
        branch only. The two terminal values reached for a direction are combined with logical,
        the two directional outcomes are then combined with logical once more.

        This follows a single path per direction, it is not a full equivalence check.
        '''
        if not (first.initialized and second.initialized):
            raise NotInitializedError('One of the obdds is not initialized')

        true_outcome = self._compare_branch(first, second, logical, True)
        false_outcome = self._compare_branch(first, second, logical, False)
        result = logical.apply(true_outcome, false_outcome)
        logger.debug('Compared %r and %r with %s: true branch %s, false branch %s, result %s',
                     first, second, logical.name, true_outcome, false_outcome, result)
        return result

    def _compare_branch(self, first, second, logical, branch):
        first_terminal = self._reach_terminal(first, branch)
        second_terminal = self._reach_terminal(second, branch)
        return logical.apply(first_terminal.value, second_terminal.value)

    def _reach_terminal(self, graph, branch):
        terminal = find_terminal(graph.root, branch)
        if terminal is None:
            raise InvalidNodeReferenceError(
                'Walking the ' + str(branch).lower() + ' branches of ' + repr(graph) + ' did not reach a terminal node')
        return terminal

    def sort(self, graphs):
        '''Returns the graphs ordered by compare'''
        return sorted(graphs, key=functools.cmp_to_key(self.compare))
