# Copyright 2022 Grabtaxi Holdings Pte Ltd (GRAB), All rights reserved.

# Use of this source code is governed by an MIT-style license that can be found in the LICENSE file

import threading
from collections import deque

from obdd_exceptions import InvalidNodeReferenceError


class TraversalState:
    '''
    Cursor of a walk: the current node, an iterator over its successors that are still to be
    visited, and the visited nodes in visiting order.
    Cursors created with branch_off share the visited nodes of the walk.
    '''

    def __init__(self, start_node, visited=None, lock=None):
        self.current_node = start_node
        self.next_nodes_iterator = None
        # object id -> node, insertion ordered
        self.visited = visited if visited is not None else {}
        self._lock = lock if lock is not None else threading.Lock()

    def branch_off(self, node):
        '''Returns a cursor on node that shares the visited nodes of this one'''
        return TraversalState(node, self.visited, self._lock)

    def visit(self, node):
        '''
        Marks node as visited. Returns False if it was visited before.
        Checking and inserting is one step.
        '''
        with self._lock:
            if node.object_id in self.visited:
                return False
            self.visited[node.object_id] = node
            return True

    def visited_nodes(self):
        with self._lock:
            return list(self.visited.values())


def get_successors(node):
    '''
    Returns the branches of a decision node, true branch first.
    Terminal nodes have no successors, their branches are never read.
    '''
    if node.is_terminal():
        return []
    return [child for child in (node.get(True), node.get(False)) if child is not None]


def iterate_branch(start_node, branch):
    '''
    Lazily yields the nodes met when always following the same branch, starting at start_node.
    Stops after a terminal node, when a branch is missing, or when a node comes up a second time.
    '''
    state = TraversalState(start_node)
    while state.visit(state.current_node):
        current_node = state.current_node
        yield current_node

        if current_node.is_terminal():
            return
        next_node = current_node.get(branch)
        if next_node is None:
            return
        state.current_node = next_node


def find_terminal(start_node, branch):
    '''Returns the first terminal node met by iterate_branch, None if the walk dead ends'''
    for node in iterate_branch(start_node, branch):
        if node.is_terminal():
            return node
    return None


def iterate_depth_first(start_node, state=None):
    '''
    Lazily yields every node reachable from start_node once, in depth first pre order.
    A node reached twice through different paths is shared, not an error.
    A node reached again while it is still on the current path raises InvalidNodeReferenceError.
    Passing the state of an earlier walk skips everything that walk already covered.
    '''
    root_state = state.branch_off(start_node) if state is not None else TraversalState(start_node)
    if not root_state.visit(start_node):
        return
    yield start_node

    root_state.next_nodes_iterator = iter(get_successors(start_node))
    stack = deque([root_state])
    on_path = {start_node.object_id}

    while len(stack) > 0:
        current_state = stack[-1]
        next_node = next(current_state.next_nodes_iterator, None)
        if next_node is None:
            stack.pop()
            on_path.discard(current_state.current_node.object_id)
            continue

        if next_node.object_id in on_path:
            raise InvalidNodeReferenceError(
                'Cyclic reference from ' + repr(current_state.current_node) + ' back to ' + repr(next_node))

        child_state = current_state.branch_off(next_node)
        if not child_state.visit(next_node):
            # shared node, already expanded through another path
            continue
        yield next_node

        child_state.next_nodes_iterator = iter(get_successors(next_node))
        stack.append(child_state)
        on_path.add(next_node.object_id)
