# Copyright 2022 Grabtaxi Holdings Pte Ltd (GRAB), All rights reserved.

# Use of this source code is governed by an MIT-style license that can be found in the LICENSE file

import logging
from collections import deque, namedtuple

from toposort import CircularDependencyError, toposort

from obdd_exceptions import (
    InvalidNodeConfigurationError,
    InvalidNodeReferenceError,
    InvalidRootNodeError,
    NodeNotFoundError,
)
from obdd_graph import ObddGraph

logger = logging.getLogger(__name__)

# one node line of an obdd file, child_list is [lo, hi] for decision nodes and empty for T and F
NodeLine = namedtuple('NodeLine', ['node_id', 'node_type', 'variable', 'child_list'])


def create_obdd_node(node_detail_list):
    '''
    Input is a list containing details of node
    For example: ['7:', '3', '2', '5', '0'] --> [node id, variable, lo, hi, end of line]
    True and false nodes look like ['1:', 'T', '0']
    Conjunction nodes cannot be represented in an ObddGraph and are rejected
    '''
    # remove ':' for node id and the 0 that is used to indicate end of line
    try:
        node_id = int(node_detail_list[0].rstrip(':'))
    except ValueError as e:
        raise InvalidNodeConfigurationError('Malformed node id in line: ' + ' '.join(node_detail_list)) from e
    node_detail_list = node_detail_list[1:-1]
    if len(node_detail_list) == 0:
        raise InvalidNodeConfigurationError('Node ' + str(node_id) + ' has no type')

    current_node_type = node_detail_list[0]
    if current_node_type == 'T' or current_node_type == 'F':
        return NodeLine(node_id, current_node_type, None, [])
    if current_node_type == 'C':
        raise InvalidNodeConfigurationError('Conjunction node ' + str(node_id) + ' is not supported')

    try:
        variable = int(current_node_type)
        child_list = [int(x) for x in node_detail_list[1:]]
    except ValueError as e:
        raise InvalidNodeConfigurationError('Malformed decision node ' + str(node_id) + ': ' + ' '.join(node_detail_list)) from e
    if len(child_list) != 2:
        raise InvalidNodeConfigurationError('Decision node ' + str(node_id) + ' needs exactly a lo and a hi child')
    return NodeLine(node_id, 'D', variable, child_list)


def read_obdd_file(obdd_filename):
    '''
    Reads the header and node lines of an obdd file.
    The root node line is optional, without it the root is the last node in the file.
    Returns the variable order list, root node id and a dictionary of node id : NodeLine
    '''
    variable_order_list = []
    root_node_id = None
    node_lines = {}
    last_node_id = None

    with open(obdd_filename) as f:
        for line in f:
            current_line_list = line.split()
            if len(current_line_list) == 0:
                continue
            if line.startswith('Variable order:'):
                variable_order_list = current_line_list[2:]
            elif line.startswith('Number of nodes:'):
                continue
            elif line.startswith('Root node:'):
                try:
                    root_node_id = int(current_line_list[-1])
                except ValueError as e:
                    raise InvalidNodeConfigurationError('Malformed root node line: ' + line.strip()) from e
            else:
                node_line = create_obdd_node(current_line_list)
                node_lines[node_line.node_id] = node_line
                last_node_id = node_line.node_id

    if root_node_id is None:
        root_node_id = last_node_id
    return variable_order_list, root_node_id, node_lines


def clean_up_unused_nodes(node_lines, root_node_id):
    '''
    Returns the set of node ids reachable from root_node_id, all other nodes are left out of the graph
    '''
    reachable_set = set()
    traversal_stack = deque()
    traversal_stack.append(root_node_id)

    while len(traversal_stack) > 0:
        current_node_id = traversal_stack.pop()
        if current_node_id in reachable_set:
            continue
        if current_node_id not in node_lines:
            raise NodeNotFoundError('Node ' + str(current_node_id) + ' is referenced but not defined')
        reachable_set.add(current_node_id)
        for child_id in node_lines[current_node_id].child_list:
            traversal_stack.append(child_id)

    return reachable_set


def build_graph(node_lines, root_node_id):
    '''
    Creates the ObddGraph for the node lines reachable from root_node_id.
    Nodes are created children first, so every decision node gets its final branches on creation.
    Returns the initialized graph.
    '''
    reachable_set = clean_up_unused_nodes(node_lines, root_node_id)
    adj_dict = {node_id: set(node_lines[node_id].child_list) for node_id in reachable_set if node_lines[node_id].node_type == 'D'}
    try:
        sorted_list_set = list(toposort(adj_dict))
    except CircularDependencyError as e:
        raise InvalidNodeReferenceError('Cyclic reference between node lines') from e

    graph = ObddGraph()
    built_nodes = {}
    for layer in sorted_list_set:
        for node_id in sorted(layer):
            node_line = node_lines[node_id]
            if node_line.node_type == 'T':
                built_nodes[node_id] = graph.true_branch
            elif node_line.node_type == 'F':
                built_nodes[node_id] = graph.false_branch
            else:
                if node_line.variable in graph.unique_table:
                    raise InvalidNodeConfigurationError('Variable ' + str(node_line.variable) + ' appears on more than one node line')
                lo_id, hi_id = node_line.child_list
                built_nodes[node_id] = graph.add_node(node_line.variable, true_branch=built_nodes[hi_id], false_branch=built_nodes[lo_id])

    graph.init()
    if graph.root is not built_nodes[root_node_id]:
        raise InvalidRootNodeError('Declared root node ' + str(root_node_id) + ' is not the root of the graph')
    return graph


def parse_obdd(obdd_filename):
    '''
    This function takes in an obdd file, and parses it.

    Returns:
    list representing variable ordering
    initialized ObddGraph
    '''
    variable_order_list, root_node_id, node_lines = read_obdd_file(obdd_filename)
    if root_node_id is None:
        raise InvalidRootNodeError('No node lines in ' + str(obdd_filename))
    logger.info('Parsed %d node lines from %s, root node %d', len(node_lines), obdd_filename, root_node_id)
    return variable_order_list, build_graph(node_lines, root_node_id)
