import pytest

from obdd_graph import ObddGraph

AND_OBDD_TEXT = (
    'Variable order: 1 2\n'
    'Number of nodes: 4\n'
    'Root node: 3\n'
    '0:\tF 0\n'
    '1:\tT 0\n'
    '2:\t2 0 1 0\n'
    '3:\t1 0 2 0\n'
)


@pytest.fixture
def and_obdd_text():
    return AND_OBDD_TEXT


@pytest.fixture
def and_graph():
    '''x1 and x2: node 1 --true--> node 2'''
    graph = ObddGraph()
    node1 = graph.add_node(1)
    node2 = graph.add_node(2)
    graph.set_edge_reference(node1, node2, True)
    graph.init()
    return graph


@pytest.fixture
def or_graph():
    '''x1 or x2: node 1 --false--> node 2'''
    graph = ObddGraph()
    graph.add_node(2)
    graph.add_node(1, true_branch=graph.true_branch, false_branch=2)
    graph.init()
    return graph


@pytest.fixture
def write_obdd(tmp_path):
    def write(name, text):
        path = tmp_path / name
        path.write_text(text)
        return str(path)
    return write
