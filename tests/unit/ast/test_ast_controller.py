#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/ast/test_ast_controller.py
"""Unit tests for the visit controllers.

Tests cover:
- Hook order, skipping children and stopping
- Separator and argument hooks
- Replacing and removing the current node, and where traversal resumes
- Misuse of the mutation API
- Property: traversal of a mutated block matches a list model

"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from cssforge.ast import (
    BlockNode,
    CompositeValueNode,
    DeclarationBlock,
    DeclarationNode,
    FunctionNode,
    LiteralNode,
    MutatingVisitController,
    PropertyValue,
    RootNode,
    RulesetNode,
    SelectorList,
    SelectorNode,
    TreeVisitor,
    UniformVisitor,
    UnknownAtRule,
    VisitController,
    as_tree_visitor,
)
from cssforge.ast.visitors import NODE_HOOK_KINDS
from cssforge.exceptions import VisitControllerError


def _ruleset(tag: str, *declarations: DeclarationNode) -> RulesetNode:
    return RulesetNode(SelectorList([SelectorNode(tag)]), DeclarationBlock(list(declarations)))


def _tag(ruleset: RulesetNode) -> str:
    return ruleset.selectors.selectors[0].name


def _root(*children) -> RootNode:
    return RootNode(BlockNode(list(children)))


class RecordingVisitor(UniformVisitor):
    """Record every enter and leave as ``(event, kind)`` pairs."""

    def __init__(self):
        self.events = []

    def enter(self, node):
        self.events.append(("enter", node.visit_kind))

    def leave(self, node):
        self.events.append(("leave", node.visit_kind))


class RulesetVisitor(TreeVisitor):
    """Apply a callback to each ruleset and record which ones are entered and left."""

    def __init__(self, controller, on_enter=None, on_leave=None):
        self.controller = controller
        self.on_enter = on_enter
        self.on_leave = on_leave
        self.entered = []
        self.left = []

    def enter_ruleset(self, node):
        self.entered.append(_tag(node))
        if self.on_enter is not None:
            self.on_enter(self.controller, node)
        return False

    def leave_ruleset(self, node):
        self.left.append(_tag(node))
        if self.on_leave is not None:
            self.on_leave(self.controller, node)


@pytest.mark.unit
class TestTraversal:
    """Tests for read-only traversal."""

    def test_document_order(self):
        """Test that hooks fire depth-first in document order."""
        root = _root(_ruleset("a", DeclarationNode("color", PropertyValue([LiteralNode("red")]))))
        visitor = RecordingVisitor()
        VisitController(root).start_visit(as_tree_visitor(visitor))
        assert visitor.events == [
            ("enter", "tree"),
            ("enter", "import_block"),
            ("leave", "import_block"),
            ("enter", "block"),
            ("enter", "ruleset"),
            ("enter", "selector_block"),
            ("enter", "selector"),
            ("leave", "selector"),
            ("leave", "selector_block"),
            ("enter", "declaration_block"),
            ("enter", "declaration"),
            ("enter", "property_value"),
            ("enter", "value_node"),
            ("leave", "value_node"),
            ("leave", "property_value"),
            ("leave", "declaration"),
            ("leave", "declaration_block"),
            ("leave", "ruleset"),
            ("leave", "block"),
            ("leave", "tree"),
        ]

    def test_false_skips_children_but_not_leave(self):
        """Test that returning False from enter skips only the children."""
        root = _root(_ruleset("a", DeclarationNode("color")))
        visitor = RulesetVisitor(VisitController(root))
        visitor.controller.start_visit(visitor)
        assert visitor.entered == ["a"]
        assert visitor.left == ["a"]

    def test_stop_visit(self):
        """Test that stopping ends the traversal immediately."""
        root = _root(_ruleset("a"), _ruleset("b"), _ruleset("c"))
        controller = VisitController(root)

        def stop_at_b(controller, node):
            if _tag(node) == "b":
                controller.stop_visit()

        visitor = RulesetVisitor(controller, on_enter=stop_at_b)
        controller.start_visit(visitor)
        assert visitor.entered == ["a", "b"]
        assert visitor.left == ["a"]
        assert controller.is_stopped

    def test_subtree_traversal(self):
        """Test starting a traversal below the root."""
        ruleset = _ruleset("a")
        visitor = RecordingVisitor()
        VisitController(ruleset.declarations).start_visit(as_tree_visitor(visitor))
        assert visitor.events == [("enter", "declaration_block"), ("leave", "declaration_block")]

    def test_composite_operator_hook(self):
        """Test that the operator hook fires between composite members."""
        composite = CompositeValueNode([LiteralNode("a"), LiteralNode("b"), LiteralNode("c")], ",")
        events = []

        class Visitor(TreeVisitor):
            def enter_value_node(self, node):
                events.append(node.value)
                return True

            def enter_composite_value_node_operator(self, node):
                events.append(node.operator)
                return True

        VisitController(composite).start_visit(Visitor())
        assert events == ["a", ",", "b", ",", "c"]

    def test_media_delimiter_hook(self):
        """Test that the delimiter hook fires between at-rule parameters."""
        rule = UnknownAtRule([LiteralNode("screen"), LiteralNode("and")], BlockNode(), LiteralNode("media"))
        events = []

        class Visitor(TreeVisitor):
            def enter_value_node(self, node):
                events.append(node.value)
                return True

            def enter_media_type_list_delimiter(self, node):
                events.append("|")
                return True

        VisitController(rule).start_visit(Visitor())
        assert events == ["screen", "|", "and"]

    def test_function_arguments_use_argument_hook(self):
        """Test that function arguments fire the argument hook, except nested functions."""
        inner = FunctionNode("b", [LiteralNode("y")])
        outer = FunctionNode("a", [LiteralNode("x"), LiteralNode(","), inner])
        events = []

        class Visitor(TreeVisitor):
            def enter_function_node(self, node):
                events.append(("function", node.name))
                return True

            def enter_argument_node(self, node):
                events.append(("argument", node.value))
                return True

            def enter_value_node(self, node):
                events.append(("value", node.value))
                return True

        VisitController(outer).start_visit(Visitor())
        assert events == [
            ("function", "a"),
            ("argument", "x"),
            ("argument", ","),
            ("function", "b"),
            ("argument", "y"),
        ]

    def test_uniform_adapter_covers_every_kind(self):
        """Test that the adapter forwards every node hook."""
        adapter = as_tree_visitor(RecordingVisitor())
        for kind in NODE_HOOK_KINDS:
            assert getattr(adapter, f"enter_{kind}")(LiteralNode("x")) is True


@pytest.mark.unit
class TestMutation:
    """Tests for replacing and removing nodes during traversal."""

    def test_replace_and_visit(self):
        """Test that replacements are visited when requested."""
        root = _root(_ruleset("a"), _ruleset("b"))
        controller = MutatingVisitController(root)

        def expand_a(controller, node):
            if _tag(node) == "a":
                controller.replace_current_block_child_with([_ruleset("x"), _ruleset("y")], True)

        visitor = RulesetVisitor(controller, on_enter=expand_a)
        controller.start_visit(visitor)
        assert visitor.entered == ["a", "x", "y", "b"]
        assert visitor.left == ["x", "y", "b"]
        assert [_tag(n) for n in root.body.children] == ["x", "y", "b"]
        assert all(n.parent is root.body for n in root.body.children)

    def test_replace_without_visit(self):
        """Test that traversal resumes after the replacements otherwise."""
        root = _root(_ruleset("a"), _ruleset("b"))
        controller = MutatingVisitController(root)

        def replace_a(controller, node):
            if _tag(node) == "a":
                controller.replace_current_block_child_with([_ruleset("x")], False)

        visitor = RulesetVisitor(controller, on_enter=replace_a)
        controller.start_visit(visitor)
        assert visitor.entered == ["a", "b"]
        assert [_tag(n) for n in root.body.children] == ["x", "b"]

    def test_replace_with_nothing(self):
        """Test that an empty replacement behaves like a removal."""
        root = _root(_ruleset("a"), _ruleset("b"))
        controller = MutatingVisitController(root)

        def drop_a(controller, node):
            if _tag(node) == "a":
                controller.replace_current_block_child_with([], True)

        visitor = RulesetVisitor(controller, on_enter=drop_a)
        controller.start_visit(visitor)
        assert visitor.entered == ["a", "b"]
        assert [_tag(n) for n in root.body.children] == ["b"]

    def test_remove(self):
        """Test that the next sibling is visited after a removal."""
        first = _ruleset("a")
        root = _root(first, _ruleset("b"), _ruleset("c"))
        controller = MutatingVisitController(root)

        def remove_b(controller, node):
            if _tag(node) == "b":
                controller.remove_current_node()

        visitor = RulesetVisitor(controller, on_enter=remove_b)
        controller.start_visit(visitor)
        assert visitor.entered == ["a", "b", "c"]
        assert visitor.left == ["a", "c"]
        assert [_tag(n) for n in root.body.children] == ["a", "c"]

    def test_remove_from_leave_hook(self):
        """Test that a node may be removed after its children were visited."""
        root = _root(_ruleset("a"), _ruleset("b"))
        controller = MutatingVisitController(root)

        def remove_a(controller, node):
            if _tag(node) == "a":
                controller.remove_current_node()

        visitor = RulesetVisitor(controller, on_leave=remove_a)
        controller.start_visit(visitor)
        assert visitor.entered == ["a", "b"]
        assert [_tag(n) for n in root.body.children] == ["b"]

    def test_removed_node_is_detached(self):
        """Test that a removed node loses its parent."""
        doomed = _ruleset("a")
        root = _root(doomed)
        controller = MutatingVisitController(root)
        visitor = RulesetVisitor(controller, on_enter=lambda c, n: c.remove_current_node())
        controller.start_visit(visitor)
        assert doomed.parent is None
        assert root.body.is_empty()

    def test_replace_value_in_property(self):
        """Test replacing a value inside a property value list."""
        value = PropertyValue([LiteralNode("A"), LiteralNode("b")])
        controller = MutatingVisitController(value)

        class Visitor(TreeVisitor):
            def enter_value_node(self, node):
                if node.value == "A":
                    controller.replace_current_block_child_with([LiteralNode("1"), LiteralNode("2")], False)
                return True

        controller.start_visit(Visitor())
        assert [v.value for v in value.values] == ["1", "2", "b"]

    def test_current_node(self):
        """Test that the controller exposes the node being visited."""
        root = _root(_ruleset("a"))
        controller = MutatingVisitController(root)
        seen = []
        visitor = RulesetVisitor(controller, on_enter=lambda c, n: seen.append(c.current_node is n))
        controller.start_visit(visitor)
        assert seen == [True]
        assert controller.current_node is None


@pytest.mark.unit
class TestMutationErrors:
    """Tests for invalid use of the mutation API."""

    def test_single_slot_cannot_be_replaced(self):
        """Test that a node outside any child list cannot be replaced."""
        root = _root(_ruleset("a"))
        controller = MutatingVisitController(root)

        class Visitor(TreeVisitor):
            def enter_declaration_block(self, node):
                controller.replace_current_block_child_with([DeclarationBlock()], False)
                return True

        with pytest.raises(VisitControllerError, match="not held in a child list"):
            controller.start_visit(Visitor())

    def test_double_mutation(self):
        """Test that a node cannot be mutated twice."""
        root = _root(_ruleset("a"))
        controller = MutatingVisitController(root)

        def twice(controller, node):
            controller.remove_current_node()
            controller.remove_current_node()

        with pytest.raises(VisitControllerError, match="already been replaced or removed"):
            controller.start_visit(RulesetVisitor(controller, on_enter=twice))

    def test_outside_traversal(self):
        """Test that mutation needs a running traversal."""
        controller = MutatingVisitController(_root())
        with pytest.raises(VisitControllerError, match="outside of a traversal"):
            controller.remove_current_node()

    def test_during_separator(self):
        """Test that no node is current while a separator hook runs."""
        composite = CompositeValueNode([LiteralNode("a"), LiteralNode("b")], "/")
        holder = PropertyValue([composite])
        controller = MutatingVisitController(holder)

        class Visitor(TreeVisitor):
            def enter_composite_value_node_operator(self, node):
                controller.remove_current_node()
                return True

        with pytest.raises(VisitControllerError, match="no node is current"):
            controller.start_visit(Visitor())


_ACTIONS = st.one_of(
    st.just(("keep",)),
    st.just(("remove",)),
    st.tuples(st.just("replace"), st.integers(min_value=0, max_value=3), st.booleans()),
)


@pytest.mark.unit
class TestMutationModel:
    """Property-based comparison of traversal against a plain list model."""

    @given(st.lists(_ACTIONS, max_size=10))
    def test_block_mutations_match_model(self, actions):
        """Property: final children and visit order match the list model."""
        tags = [f"n{i}" for i in range(len(actions))]
        plan = dict(zip(tags, actions))
        root = _root(*[_ruleset(tag) for tag in tags])
        controller = MutatingVisitController(root)

        expected_entered = []
        expected_left = []
        expected_children = []
        for tag, action in zip(tags, actions):
            expected_entered.append(tag)
            if action[0] == "keep":
                expected_left.append(tag)
                expected_children.append(tag)
            elif action[0] == "replace":
                new_tags = [f"{tag}.{k}" for k in range(action[1])]
                expected_children.extend(new_tags)
                if action[2]:
                    expected_entered.extend(new_tags)
                    expected_left.extend(new_tags)

        def apply(controller, node):
            tag = _tag(node)
            action = plan.get(tag, ("keep",))
            if action[0] == "remove":
                controller.remove_current_node()
            elif action[0] == "replace":
                new_nodes = [_ruleset(f"{tag}.{k}") for k in range(action[1])]
                controller.replace_current_block_child_with(new_nodes, action[2])

        visitor = RulesetVisitor(controller, on_enter=apply)
        controller.start_visit(visitor)

        assert visitor.entered == expected_entered
        assert visitor.left == expected_left
        assert [_tag(n) for n in root.body.children] == expected_children
