"""Tests for rendering a CompiledWorkflow into n8n's JSON format."""
from conftest import link, node, workflow
from n8n_workflow_builder.models import DEFAULT_WORKFLOW_SETTINGS


def test_payload_shape(compiler):
    spec = workflow(
        [
            node("Webhook", "n8n-nodes-base.webhook", parameters={"path": "leads"}, typeVersion=2),
            node("Slack", "n8n-nodes-base.slack", credentials={"slackApi": {"id": "7", "name": "Slack"}}),
        ],
        [link("Webhook", "Slack")],
        name="Lead Alert",
    )

    payload = compiler.compile(spec).to_n8n()

    assert payload["name"] == "Lead Alert"
    assert payload["settings"] == DEFAULT_WORKFLOW_SETTINGS
    webhook, slack = payload["nodes"]
    assert webhook["type"] == "n8n-nodes-base.webhook"
    assert webhook["typeVersion"] == 2
    assert webhook["parameters"] == {"path": "leads"}
    assert webhook["position"] == [250, 300]
    assert "credentials" not in webhook
    assert slack["credentials"] == {"slackApi": {"id": "7", "name": "Slack"}}
    assert payload["connections"] == {
        "Webhook": {"main": [[{"node": "Slack", "type": "main", "index": 0}]]},
    }


def test_outputs_padded_and_fan_out_ordered(compiler):
    spec = workflow(
        [node("Switch"), node("Low"), node("High"), node("Merge")],
        [
            link("Switch", "High", sourceOutput=2),
            link("Switch", "Low"),
            link("Low", "Merge"),
            link("High", "Merge", targetInput=1),
            link("Switch", "Merge", sourceOutput=2),
        ],
    )

    connections = compiler.compile(spec).to_n8n()["connections"]

    assert list(connections) == ["Switch", "Low", "High"]
    assert connections["Switch"]["main"] == [
        [{"node": "Low", "type": "main", "index": 0}],
        [],
        [
            {"node": "High", "type": "main", "index": 0},
            {"node": "Merge", "type": "main", "index": 0},
        ],
    ]
    assert connections["High"]["main"] == [[{"node": "Merge", "type": "main", "index": 1}]]


def test_node_lookup_by_id(compiler):
    compiled = compiler.compile(workflow([node("A"), node("B")]))

    assert compiled.get_node(compiled.nodes[1].id).name == "B"
    assert compiled.get_node("missing") is None


def test_disconnected_nodes_have_empty_connections(compiler):
    payload = compiler.compile(workflow([node("A"), node("B")])).to_n8n()

    assert payload["connections"] == {}
    assert len(payload["nodes"]) == 2


def test_editing_payload_leaves_compiled_workflow_unchanged(compiler):
    spec = workflow([
        node("Fetch", "n8n-nodes-base.httpRequest", parameters={"options": {"timeout": 5}}),
        node("Slack", "n8n-nodes-base.slack", credentials={"slackApi": {"id": "7"}}),
    ])
    compiled = compiler.compile(spec)

    payload = compiled.to_n8n()
    payload["nodes"][0]["parameters"]["options"]["timeout"] = 99
    payload["nodes"][1]["credentials"]["slackApi"]["id"] = "8"

    assert compiled.nodes[0].parameters == {"options": {"timeout": 5}}
    assert compiled.nodes[1].credentials == {"slackApi": {"id": "7"}}
    assert compiled.to_n8n()["nodes"][0]["parameters"]["options"]["timeout"] == 5
