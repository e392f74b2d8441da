'''Tests for the node model.'''

import logging

import pytest

import obdd_nodes
from obdd_exceptions import InvalidNodeConfigurationError
from obdd_nodes import DecisionNode, GraphObject, TerminalNode, TruthValue


@pytest.fixture
def terminals():
    return TerminalNode(-1, value=True), TerminalNode(-2, value=False)


class TestConstruction:
    def test_identical_branches_rejected(self, terminals):
        true_node, _ = terminals
        with pytest.raises(InvalidNodeConfigurationError):
            DecisionNode(1, None, true_node, true_node)

    def test_unset_branches_allowed(self):
        node = DecisionNode(1)
        assert node.get(True) is None
        assert node.get(False) is None

    def test_object_ids_are_unique(self, terminals):
        true_node, false_node = terminals
        assert true_node.object_id != false_node.object_id

    def test_parent_recorded_as_unknown(self, terminals):
        true_node, false_node = terminals
        parent = GraphObject()
        node = DecisionNode(1, parent, true_node, false_node)
        assert node.get_parent_label(parent) is TruthValue.UNKNOWN

    def test_repr(self, terminals):
        true_node, false_node = terminals
        node = DecisionNode(1, None, true_node, false_node)
        assert repr(node) == 'DecisionNode(1, true_branch:-1, false_branch:-2)'


class TestEquality:
    def test_equality_ignores_id_and_variable(self, terminals):
        true_node, false_node = terminals
        first = DecisionNode(1, None, true_node, false_node)
        second = DecisionNode(2, None, true_node, false_node)
        assert first == second
        assert hash(first) == hash(second)
        assert first.object_id != second.object_id

    def test_terminals_compare_by_value(self):
        assert TerminalNode(-1, value=True) == TerminalNode(-5, value=True)
        assert TerminalNode(-1, value=True) != TerminalNode(-2, value=False)

    def test_equality_is_recursive(self, terminals):
        true_node, false_node = terminals
        first = DecisionNode(1, None, DecisionNode(2, None, true_node, false_node), false_node)
        second = DecisionNode(1, None, DecisionNode(2, None, false_node, true_node), false_node)
        assert first != second

    def test_cyclic_objects_compare_and_hash(self, terminals):
        true_node, false_node = terminals
        first = DecisionNode(1, None, true_node, false_node)
        second = DecisionNode(2, None, true_node, false_node)
        first.set(True, second)
        second.set(True, first)
        assert first == second
        assert isinstance(hash(first), int)

    def test_decision_node_differs_from_terminal(self):
        assert DecisionNode(1) != TerminalNode(1, value=False)


class TestOrdering:
    def test_nodes_order_by_variable(self):
        nodes = sorted([DecisionNode(3), DecisionNode(1), DecisionNode(2)])
        assert [node.variable for node in nodes] == [1, 2, 3]

    def test_graph_objects_order_by_id(self):
        first = GraphObject()
        second = GraphObject()
        assert first < second


class TestBranches:
    def test_set_rejects_node_that_is_the_other_branch(self, terminals):
        true_node, false_node = terminals
        node = DecisionNode(1, None, true_node, false_node)
        with pytest.raises(InvalidNodeConfigurationError):
            node.set(True, false_node)

    def test_set_rejects_parent(self, terminals):
        true_node, false_node = terminals
        parent = DecisionNode(2)
        node = DecisionNode(1, parent, true_node, false_node)
        with pytest.raises(InvalidNodeConfigurationError):
            node.set(True, parent)

    def test_set_rejects_none(self):
        with pytest.raises(InvalidNodeConfigurationError):
            DecisionNode(1).set(True, None)

    def test_set_replaces_branch(self, terminals):
        true_node, false_node = terminals
        node = DecisionNode(1, None, true_node, false_node)
        child = DecisionNode(2)
        node.set(True, child)
        assert node.true_branch is child
        assert node.false_branch is false_node


class TestParents:
    def test_add_and_remove_parent(self):
        child = DecisionNode(1)
        parent = DecisionNode(2)
        child.add_parent(parent, True)
        assert child.get_parent_label(parent) is TruthValue.TRUE
        assert child.parents == [parent]
        child.remove_parent(parent)
        assert child.get_parent_label(parent) is None
        child.remove_parent(parent)

    def test_add_parent_rejects_branch(self, terminals):
        true_node, false_node = terminals
        node = DecisionNode(1, None, true_node, false_node)
        with pytest.raises(InvalidNodeConfigurationError):
            node.add_parent(true_node, False)

    def test_structurally_equal_parents_are_distinct(self):
        child = DecisionNode(1)
        first_parent = DecisionNode(2)
        second_parent = DecisionNode(3)
        assert first_parent == second_parent
        child.add_parent(first_parent, False)
        assert child.has_parent(first_parent)
        assert not child.has_parent(second_parent)
        assert child.get_parent_label(first_parent) is TruthValue.FALSE

    def test_truth_value_from_branch(self):
        assert TruthValue.from_branch(True) is TruthValue.TRUE
        assert TruthValue.from_branch(False) is TruthValue.FALSE
        assert TruthValue.from_branch(TruthValue.UNKNOWN) is TruthValue.UNKNOWN


class TestTerminalNode:
    def test_value(self):
        true_node = TerminalNode(-1, value=True)
        assert true_node.value
        assert true_node.is_true()
        assert not true_node.is_false()
        assert true_node.is_terminal()
        assert not DecisionNode(1).value

    def test_branch_access_returns_none_and_warns_once(self, monkeypatch, caplog):
        monkeypatch.setattr(obdd_nodes, '_terminal_warning_logged', False)
        caplog.set_level(logging.WARNING, logger='obdd_nodes')
        terminal = TerminalNode(-1, value=True)

        assert terminal.get(True) is None
        assert terminal.get(False) is None
        assert terminal.true_branch is None
        assert terminal.false_branch is None

        warnings = [record for record in caplog.records if record.getMessage() == 'A terminal node has no branches']
        assert len(warnings) == 1

    def test_set_raises(self):
        terminal = TerminalNode(-1, value=True)
        with pytest.raises(InvalidNodeConfigurationError):
            terminal.set(True, DecisionNode(1))
