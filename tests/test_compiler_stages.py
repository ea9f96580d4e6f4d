"""Tests for the individual compiler stages."""
import pytest

from conftest import link, node
from n8n_workflow_builder.compiler import (
    ConnectionSide,
    DuplicateNodeNameError,
    EmptyWorkflowError,
    InvalidPortIndexError,
    UnknownNodeReferenceError,
)
from n8n_workflow_builder.compiler.layout import (
    LAYOUT_ORIGIN,
    LAYOUT_STRIDE_X,
    assign_positions,
)
from n8n_workflow_builder.compiler.normalizer import (
    PortConnection,
    normalize_connections,
    normalize_port,
    port_errors,
)
from n8n_workflow_builder.compiler.resolver import (
    find_duplicate_names,
    first_node_ids,
    node_id_for,
    resolve_node_ids,
)
from n8n_workflow_builder.compiler.validator import (
    bind_connection,
    ensure_not_empty,
    validate_connections,
)


# =========================================================================
# Name Resolver
# =========================================================================

class TestResolver:

    def test_ids_follow_input_order(self):
        node_ids = resolve_node_ids([node("A"), node("B"), node("C")])

        assert list(node_ids) == ["A", "B", "C"]
        assert node_ids["A"] == node_id_for(0, "A")
        assert node_ids["C"] == node_id_for(2, "C")

    def test_ids_are_unique_and_deterministic(self):
        first = resolve_node_ids([node("A"), node("B")])
        second = resolve_node_ids([node("A"), node("B")])

        assert first == second
        assert len(set(first.values())) == 2

    def test_duplicate_raises_with_name(self):
        with pytest.raises(DuplicateNodeNameError) as exc_info:
            resolve_node_ids([node("A"), node("B"), node("B")])

        assert exc_info.value.name == "B"

    def test_find_duplicate_names(self):
        nodes = [node("A"), node("B"), node("A"), node("A"), node("B"), node("C")]

        assert find_duplicate_names(nodes) == ["A", "B"]
        assert find_duplicate_names([node("A"), node("a")]) == []

    def test_first_node_ids_keeps_first_occurrence(self):
        node_ids = first_node_ids([node("A"), node("A")])

        assert node_ids == {"A": node_id_for(0, "A")}


# =========================================================================
# Connection Normalizer
# =========================================================================

class TestNormalizer:

    def test_defaults_omitted_ports(self):
        result = normalize_connections([link("A", "B")])

        assert result == [PortConnection(0, "A", "B", 0, 0)]

    def test_keeps_order_without_grouping(self):
        result = normalize_connections([
            link("B", "C"),
            link("A", "B"),
            link("B", "D", sourceOutput=1),
        ])

        assert [(c.index, c.source, c.target) for c in result] == [
            (0, "B", "C"),
            (1, "A", "B"),
            (2, "B", "D"),
        ]

    def test_unknown_names_still_normalize(self):
        result = normalize_connections([link("Ghost", "Phantom", targetInput=2)])

        assert result[0].target_input == 2

    def test_negative_port_rejected(self):
        with pytest.raises(InvalidPortIndexError) as exc_info:
            normalize_connections([link("A", "B"), link("A", "B", sourceOutput=-1)])

        assert exc_info.value.connection_index == 1
        assert exc_info.value.field == "sourceOutput"
        assert exc_info.value.value == -1

    @pytest.mark.parametrize("value", [-1, True, "1", 0.5])
    def test_normalize_port_rejects(self, value):
        with pytest.raises(InvalidPortIndexError):
            normalize_port(value, 0, "targetInput")

    def test_normalize_port_accepts(self):
        assert normalize_port(None, 0, "sourceOutput") == 0
        assert normalize_port(0, 0, "sourceOutput") == 0
        assert normalize_port(4, 0, "sourceOutput") == 4

    def test_port_errors_lists_both_sides(self):
        errors = port_errors(3, link("A", "B", sourceOutput=-1, targetInput=-2))

        assert [e.field for e in errors] == ["sourceOutput", "targetInput"]
        assert all(e.connection_index == 3 for e in errors)


# =========================================================================
# Structural Validator
# =========================================================================

class TestValidator:

    @pytest.fixture
    def node_ids(self):
        return {"A": "id-a", "B": "id-b"}

    def test_empty_rejected(self):
        with pytest.raises(EmptyWorkflowError):
            ensure_not_empty([])

        ensure_not_empty([node("A")])

    def test_binds_identifiers(self, node_ids):
        conn = bind_connection(PortConnection(0, "A", "B", 1, 2), node_ids)

        assert conn.source_id == "id-a"
        assert conn.target_id == "id-b"
        assert conn.source_output == 1
        assert conn.target_input == 2
        assert conn.is_self_loop is False

    def test_source_and_target_sides_distinguished(self, node_ids):
        with pytest.raises(UnknownNodeReferenceError) as source_exc:
            bind_connection(PortConnection(4, "X", "B", 0, 0), node_ids)
        with pytest.raises(UnknownNodeReferenceError) as target_exc:
            bind_connection(PortConnection(5, "A", "Y", 0, 0), node_ids)

        assert source_exc.value.side == ConnectionSide.SOURCE
        assert source_exc.value.connection_index == 4
        assert target_exc.value.side == ConnectionSide.TARGET
        assert target_exc.value.name == "Y"
        assert str(source_exc.value) != str(target_exc.value)

    def test_both_unknown_reports_source_first(self, node_ids):
        with pytest.raises(UnknownNodeReferenceError) as exc_info:
            bind_connection(PortConnection(0, "X", "Y", 0, 0), node_ids)

        assert exc_info.value.side == ConnectionSide.SOURCE

    def test_self_loop_and_fan_out_allowed(self, node_ids):
        result = validate_connections(
            [
                PortConnection(0, "A", "A", 0, 0),
                PortConnection(1, "A", "B", 0, 0),
                PortConnection(2, "A", "B", 0, 1),
            ],
            node_ids,
        )

        assert [c.is_self_loop for c in result] == [True, False, False]


# =========================================================================
# Layout Assigner
# =========================================================================

class TestLayout:

    def test_default_positions_step_right(self):
        positions = assign_positions([node("A"), node("B"), node("C")])
        x, y = LAYOUT_ORIGIN

        assert positions == [
            (x, y),
            (x + LAYOUT_STRIDE_X, y),
            (x + 2 * LAYOUT_STRIDE_X, y),
        ]

    def test_explicit_position_untouched(self):
        positions = assign_positions([node("A"), node("B", position=(-40, 900)), node("C")])
        x, y = LAYOUT_ORIGIN

        assert positions[1] == (-40, 900)
        assert positions[2] == (x + 2 * LAYOUT_STRIDE_X, y)

    def test_no_nodes(self):
        assert assign_positions([]) == []
