# Copyright 2022 Grabtaxi Holdings Pte Ltd (GRAB), All rights reserved.

# Use of this source code is governed by an MIT-style license that can be found in the LICENSE file

class ObddError(Exception):
    '''Base class of all errors raised while building or comparing obdds'''


class InvalidNodeConfigurationError(ObddError):
    '''
    Raised when the same node instance would appear twice among the parents and branches of a node,
    for example a decision node whose true and false branch are the same node
    '''


class NodeNotFoundError(ObddError):
    '''Raised when a variable or an edge is not present in the graph'''


class InvalidRootNodeError(ObddError):
    '''Raised when validation does not find exactly one node without incoming edges'''


class InvalidNodeReferenceError(ObddError):
    '''Raised when a traversal meets a node that is already on its current path'''


class NotInitializedError(ObddError):
    '''Raised when a graph is used before init() validated it'''


class GraphInitializedError(ObddError):
    '''Raised on structural changes to a graph that has already been validated'''
