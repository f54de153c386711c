"""Tests for the validation framework."""

from flowcheck.graph import ChatflowGraph
from flowcheck.validation.framework import (
    ValidationFramework,
    ValidationIssue,
    ValidationResult,
    ValidationRule,
    ValidationStatus,
    validate_chatflow,
)


class ExplodingRule(ValidationRule):
    @property
    def name(self) -> str:
        return "exploding"

    def validate(self, graph, config, result):
        raise RuntimeError("boom")


class CountingRule(ValidationRule):
    def __init__(self):
        self.calls = 0

    @property
    def name(self) -> str:
        return "counting"

    def validate(self, graph, config, result):
        self.calls += 1
        result.increment_counter("seen", len(graph.nodes))


class TestValidationResult:
    """Test ValidationResult class."""

    def test_initial_state(self):
        result = ValidationResult()

        assert result.status == ValidationStatus.PASS
        assert result.issues == []
        assert result.counters == {}
        assert result.valid is True
        assert result.exit_code == 0

    def test_warning_sets_warn_status(self):
        result = ValidationResult()
        result.add_warning("test_rule", "Test warning")

        assert result.status == ValidationStatus.WARN
        assert result.valid is True
        assert result.exit_code == 0
        assert result.warnings == ["Test warning"]

    def test_error_sets_fail_status(self):
        result = ValidationResult()
        result.add_error("test_rule", "Test error")

        assert result.status == ValidationStatus.FAIL
        assert result.valid is False
        assert result.exit_code == 1

    def test_fail_is_not_downgraded(self):
        result = ValidationResult()
        result.add_error("rule1", "Error")
        result.add_warning("rule2", "Warning")

        assert result.status == ValidationStatus.FAIL
        assert result.errors == ["Error"]
        assert result.warnings == ["Warning"]

    def test_counters(self):
        result = ValidationResult()
        result.increment_counter("nodes")
        result.increment_counter("nodes", 4)

        assert result.counters["nodes"] == 5

    def test_to_dict(self):
        result = ValidationResult()
        result.add_error("end_input", 'End node "Done" is not connected', node_id="e1")
        result.increment_counter("ends")

        data = result.to_dict()

        assert data["valid"] is False
        assert data["status"] == "fail"
        assert data["exit_code"] == 1
        assert data["errors"] == ['End node "Done" is not connected']
        assert data["warnings"] == []
        assert data["counters"] == {"ends": 1}
        assert data["issues"][0] == {
            "rule": "end_input",
            "severity": "fail",
            "message": 'End node "Done" is not connected',
            "node_id": "e1",
            "path": None,
        }


class TestValidationIssue:
    """Test ValidationIssue formatting."""

    def test_str_with_node(self):
        issue = ValidationIssue("end_input", ValidationStatus.FAIL, "not connected", node_id="e1")

        assert str(issue) == "[FAIL] end_input: not connected at node e1"

    def test_str_with_path(self):
        issue = ValidationIssue("screens", ValidationStatus.WARN, "no terminal", path="screens[0]")

        assert str(issue) == "[WARN] screens: no terminal at screens[0]"


class TestValidationFramework:
    """Test ValidationFramework class."""

    def test_rule_failure_becomes_an_issue(self, simple_flow, sample_config):
        nodes, edges = simple_flow
        framework = ValidationFramework(sample_config)
        counting = CountingRule()
        framework.add_rule(ExplodingRule())
        framework.add_rule(counting)

        result = framework.validate(nodes, edges)

        assert result.errors == ["Rule execution failed: boom"]
        assert result.issues[0].rule == "exploding"
        assert counting.calls == 1

    def test_empty_flow_skips_rules(self, sample_config):
        framework = ValidationFramework(sample_config)
        counting = CountingRule()
        framework.add_rule(counting)

        result = framework.validate([], [])

        assert counting.calls == 0
        assert result.errors == ["Flow must have at least one node"]
        assert result.issues[0].rule == "non_empty"

    def test_default_rules_order(self):
        framework = ValidationFramework()
        framework.create_default_rules()

        assert [rule.name for rule in framework.rules] == [
            "trigger_cardinality",
            "end_presence",
            "connectivity",
            "trigger_output",
            "end_input",
            "condition_branches",
            "circular_dependency",
            "node_config",
        ]

    def test_size_counters(self, simple_flow):
        nodes, edges = simple_flow

        result = validate_chatflow(nodes, edges)

        assert result.counters["nodes"] == 2
        assert result.counters["edges"] == 1

    def test_validate_graph(self, simple_flow):
        framework = ValidationFramework()
        framework.create_default_rules()

        result = framework.validate_graph(ChatflowGraph.build(*simple_flow))

        assert result.valid is True

    def test_accepts_iterators(self, simple_flow):
        nodes, edges = simple_flow

        result = validate_chatflow(iter(nodes), (e for e in edges))

        assert result.valid is True
        assert result.counters["edges"] == 1


class TestChatflowScenarios:
    """End-to-end behaviour of validate_chatflow."""

    def test_age_condition_scenario(self, node, edge):
        nodes = [
            node("t", "trigger", "Start", {"type": "manual"}),
            node("c", "condition", "Adult?", {"variable": "age", "value": 18}),
            node("e", "end", "Done"),
        ]
        edges = [edge("t", "c"), edge("c", "e")]

        result = validate_chatflow(nodes, edges)

        assert result.valid is True
        assert result.errors == []
        assert result.warnings == ['Condition "Adult?" should have 2 outputs (true/false paths)']

    def test_structural_before_semantic(self, node, edge):
        nodes = [
            node("t1", "trigger", "Start", {"type": "keyword"}),
            node("d1", "delay", "Pause"),
        ]
        edges = [edge("t1", "d1")]

        result = validate_chatflow(nodes, edges)

        assert result.errors == [
            "Flow must have at least one end node",
            'Trigger "Start" needs a keyword',
            'Delay "Pause" needs a valid duration',
        ]

    def test_validation_is_repeatable(self, node, edge):
        nodes = [
            node("t1", "trigger"),
            node("c1", "condition", "Check", {"variable": "x"}),
            node("e1", "end"),
            node("o1", "delay", "Orphan"),
        ]
        edges = [edge("t1", "c1"), edge("c1", "e1")]

        first = validate_chatflow(nodes, edges)
        second = validate_chatflow(nodes, edges)

        assert first == second
        assert first.errors == second.errors
        assert first.warnings == second.warnings

    def test_input_is_not_mutated(self, node, edge):
        nodes = [node("t1", "trigger"), node("g1", "guest_form", "Form", {"questions": []})]
        edges = [edge("t1", "g1"), edge("g1", "nowhere")]
        before = ([n.model_dump() for n in nodes], [e.model_dump() for e in edges])

        validate_chatflow(nodes, edges)

        assert ([n.model_dump() for n in nodes], [e.model_dump() for e in edges]) == before

    def test_valid_rsvp_document(self, rsvp_chatflow_document):
        from flowcheck.models.chatflow import Chatflow

        chatflow = Chatflow.from_dict(rsvp_chatflow_document)

        result = validate_chatflow(chatflow.nodes, chatflow.edges)

        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []
        assert result.counters["nodes_checked"] == 5
