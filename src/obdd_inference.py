# Copyright 2022 Grabtaxi Holdings Pte Ltd (GRAB), All rights reserved.

# Use of this source code is governed by an MIT-style license that can be found in the LICENSE file

import numpy as np
from gmpy2 import mpq

from obdd_exceptions import InvalidNodeReferenceError
from obdd_graph import FALSE_VARIABLE, TRUE_VARIABLE
from obdd_utils import perform_toposort, require_initialized


def evaluate(graph, assignment):
    '''
    Function takes in:
    graph - initialized ObddGraph
    assignment - dictionary of variable : bool, only the variables on the path are read
    Returns the value of the terminal node the assignment leads to.
    A variable on the path that is missing from the assignment raises KeyError.
    '''
    require_initialized(graph)
    current_node = graph.root
    while not current_node.is_terminal():
        next_node = current_node.get(bool(assignment[current_node.variable]))
        if next_node is None:
            raise InvalidNodeReferenceError(repr(current_node) + ' has no branch to follow')
        current_node = next_node
    return current_node.value


def _get_weight(weights, variable, default):
    if weights is None or variable not in weights:
        return default
    return weights[variable]


def calculate_prob_hp(graph, weights=None):
    '''
    Function takes in:
    graph - initialized ObddGraph
    weights - dictionary of variable : probability that the variable is true, missing variables use 1/2
    Function returns the probability that the graph evaluates to true when every variable is
    assigned independently according to its weight.

    This method uses arbitrary precision math to prevent numerical underflow, returns mpq number
    '''
    prob_dict = {TRUE_VARIABLE: mpq(1), FALSE_VARIABLE: mpq(0)}

    # bottom up, children are always computed before their parents
    for layer in perform_toposort(graph):
        for variable in sorted(layer):
            if variable in prob_dict:
                continue
            node = graph.resolve_node(variable)
            hi_param = mpq(_get_weight(weights, variable, mpq(1, 2)))
            lo_param = 1 - hi_param
            prob_dict[variable] = hi_param * prob_dict[node.get(True).variable] + lo_param * prob_dict[node.get(False).variable]

    return prob_dict[graph.root.variable]


def calculate_logprob(graph, weights=None):
    '''
    Same as calculate_prob_hp, in log space with floating point numbers.
    Returns the log probability, -np.inf if the graph can never evaluate to true.
    '''
    joint_logprob_dict = {TRUE_VARIABLE: np.log(1.0), FALSE_VARIABLE: -np.inf}

    for layer in perform_toposort(graph):
        for variable in sorted(layer):
            if variable in joint_logprob_dict:
                continue
            node = graph.resolve_node(variable)
            hi_param = float(_get_weight(weights, variable, 0.5))
            # a weight of 0 or 1 makes one branch impossible, log(0) is -inf
            with np.errstate(divide='ignore'):
                lo_logprob, hi_logprob = np.log([1.0 - hi_param, hi_param])
            lo_jointprob = lo_logprob + joint_logprob_dict[node.get(False).variable]
            hi_jointprob = hi_logprob + joint_logprob_dict[node.get(True).variable]
            joint_logprob_dict[variable] = np.logaddexp(lo_jointprob, hi_jointprob)

    return float(joint_logprob_dict[graph.root.variable])


def count_models(graph):
    '''
    Returns the number of assignments over the variables reachable from the root
    for which the graph evaluates to true.
    '''
    num_variables = 0
    for layer in perform_toposort(graph):
        num_variables += len([variable for variable in layer if variable not in (TRUE_VARIABLE, FALSE_VARIABLE)])
    return int(calculate_prob_hp(graph) * (1 << num_variables))
