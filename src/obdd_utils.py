# Copyright 2022 Grabtaxi Holdings Pte Ltd (GRAB), All rights reserved.

# Use of this source code is governed by an MIT-style license that can be found in the LICENSE file

from toposort import toposort

from obdd_exceptions import NotInitializedError
from obdd_graph import FALSE_VARIABLE, TRUE_VARIABLE
from obdd_traversal import get_successors, iterate_depth_first

END_LINE = '0\n'


def require_initialized(graph):
    if not graph.initialized:
        raise NotInitializedError(repr(graph) + ' is not initialized')


def parse_obdd_forwardedges(graph):
    '''
    Function to create the forward edges of the obdd, from top to bottom
    Only nodes reachable from the root are included
    Returns a dictionary of parent variable : set of child variables
    '''
    require_initialized(graph)
    adj_dict = dict()
    for node in iterate_depth_first(graph.root):
        if node.is_terminal():
            continue
        adj_dict[node.variable] = {child.variable for child in get_successors(node)}
    return adj_dict


def perform_toposort(graph):
    '''
    Performs toposort on the forward edges, so every layer only depends on the layers before it.
    Returns a list of sets of variables, the first layer holds the terminals, the last one the root.
    '''
    return list(toposort(parse_obdd_forwardedges(graph)))


def get_node_ids(graph):
    '''
    Assigns file node ids: false terminal 0, true terminal 1, then decision nodes bottom up.
    Returns a dictionary of variable : node id
    '''
    node_ids = {FALSE_VARIABLE: 0, TRUE_VARIABLE: 1}
    for layer in perform_toposort(graph):
        for variable in sorted(layer):
            if variable not in node_ids:
                node_ids[variable] = len(node_ids)
    return node_ids


def generate_node_string(node, node_ids):
    '''
    Function to generate string representation of node, to be written to file.
    '''
    node_string = str(node_ids[node.variable]) + ':' + '\t'
    if node.is_terminal():
        node_string += ('T' if node.value else 'F') + ' ' + END_LINE
        return node_string
    # decision node, lo child is the false branch, hi child the true branch
    lo_id = node_ids[node.get(False).variable]
    hi_id = node_ids[node.get(True).variable]
    node_string += str(node.variable) + ' ' + str(lo_id) + ' ' + str(hi_id) + ' ' + END_LINE
    return node_string


def write_obdd_to_file(graph, filename, variable_order_list=None):
    '''
    Writing an initialized obdd to file, with the line indicating which node is root node
    If no variable order is given, the variables of the written nodes in ascending order are used
    '''
    node_ids = get_node_ids(graph)
    ordered_variables = sorted(node_ids, key=node_ids.get)

    if variable_order_list is None:
        variable_order_list = sorted(variable for variable in ordered_variables if variable not in (TRUE_VARIABLE, FALSE_VARIABLE))

    with open(filename, 'w') as f:
        variable_order_string = 'Variable order:'
        for variable in variable_order_list:
            variable_order_string = variable_order_string + ' ' + str(variable)
        f.write(variable_order_string + '\n')

        f.write('Number of nodes: ' + str(len(node_ids)) + '\n')

        f.write('Root node: ' + str(node_ids[graph.root.variable]) + '\n')

        for variable in ordered_variables:
            f.write(generate_node_string(graph.resolve_node(variable), node_ids))
    return
