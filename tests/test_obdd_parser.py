'''Tests for reading and writing obdd files.'''

import pytest

from obdd_exceptions import (
    InvalidNodeConfigurationError,
    InvalidNodeReferenceError,
    InvalidRootNodeError,
    NodeNotFoundError,
)
from obdd_parser import create_obdd_node, parse_obdd
from obdd_utils import perform_toposort, write_obdd_to_file


class TestCreateObddNode:
    def test_decision_node(self):
        node_line = create_obdd_node(['7:', '3', '2', '5', '0'])
        assert node_line.node_id == 7
        assert node_line.node_type == 'D'
        assert node_line.variable == 3
        assert node_line.child_list == [2, 5]

    def test_terminal_node(self):
        node_line = create_obdd_node(['1:', 'T', '0'])
        assert node_line.node_type == 'T'
        assert node_line.child_list == []

    def test_conjunction_node_rejected(self):
        with pytest.raises(InvalidNodeConfigurationError):
            create_obdd_node(['19:', 'C', '14', '18', '0'])

    def test_non_integer_variable_rejected(self):
        with pytest.raises(InvalidNodeConfigurationError):
            create_obdd_node(['2:', 'x', '0', '1', '0'])

    def test_non_integer_child_rejected(self):
        with pytest.raises(InvalidNodeConfigurationError):
            create_obdd_node(['2:', '1', '0', 'one', '0'])

    def test_non_integer_node_id_rejected(self):
        with pytest.raises(InvalidNodeConfigurationError):
            create_obdd_node(['two:', '1', '0', '1', '0'])

    def test_missing_node_type_rejected(self):
        with pytest.raises(InvalidNodeConfigurationError):
            create_obdd_node(['2:', '0'])


class TestParseObdd:
    def test_root_is_last_line_without_root_line(self, write_obdd, and_obdd_text):
        text = and_obdd_text.replace('Root node: 3\n', '')
        variable_order_list, graph = parse_obdd(write_obdd('and.obdd', text))

        assert variable_order_list == ['1', '2']
        assert graph.initialized
        assert graph.root.variable == 1
        assert graph.root.get(True) is graph.resolve_node(2)
        assert graph.root.get(False) is graph.false_branch
        assert graph.get_edge_reference(1, 2)

    def test_unreachable_nodes_skipped(self, write_obdd, and_obdd_text):
        text = and_obdd_text + '4:\t5 0 1 0\n'
        _, graph = parse_obdd(write_obdd('and.obdd', text))
        assert sorted(graph.unique_table) == [1, 2]

    def test_duplicate_variable_rejected(self, write_obdd):
        text = (
            'Root node: 4\n'
            '0:\tF 0\n'
            '1:\tT 0\n'
            '2:\t2 0 1 0\n'
            '3:\t2 1 0 0\n'
            '4:\t1 2 3 0\n'
        )
        with pytest.raises(InvalidNodeConfigurationError):
            parse_obdd(write_obdd('duplicate.obdd', text))

    def test_cycle_rejected(self, write_obdd):
        text = (
            'Root node: 2\n'
            '0:\tF 0\n'
            '2:\t1 0 3 0\n'
            '3:\t2 0 2 0\n'
        )
        with pytest.raises(InvalidNodeReferenceError):
            parse_obdd(write_obdd('cycle.obdd', text))

    def test_missing_child_rejected(self, write_obdd):
        text = '0:\tF 0\n2:\t1 0 9 0\n'
        with pytest.raises(NodeNotFoundError):
            parse_obdd(write_obdd('missing.obdd', text))

    def test_constant_function_has_no_root(self, write_obdd):
        with pytest.raises(InvalidRootNodeError):
            parse_obdd(write_obdd('constant.obdd', '0:\tF 0\n1:\tT 0\n'))

    def test_malformed_root_line_rejected(self, write_obdd, and_obdd_text):
        obdd_file = write_obdd('bad_root.obdd', and_obdd_text + 'Root node: last\n')
        with pytest.raises(InvalidNodeConfigurationError):
            parse_obdd(obdd_file)

    def test_empty_file_has_no_root(self, write_obdd):
        with pytest.raises(InvalidRootNodeError):
            parse_obdd(write_obdd('empty.obdd', ''))


class TestWriteObdd:
    def test_toposort_layers(self, and_graph):
        assert perform_toposort(and_graph) == [{-1, -2}, {2}, {1}]

    def test_write(self, and_graph, and_obdd_text, tmp_path):
        path = tmp_path / 'out.obdd'
        write_obdd_to_file(and_graph, str(path))
        assert path.read_text() == and_obdd_text

    def test_written_file_parses_to_equal_graph(self, or_graph, tmp_path):
        path = tmp_path / 'or.obdd'
        write_obdd_to_file(or_graph, str(path), variable_order_list=[2, 1])
        variable_order_list, parsed = parse_obdd(str(path))
        assert variable_order_list == ['2', '1']
        assert parsed.root == or_graph.root
        assert parsed.root.variable == 1
