"""Tests for execution statistics and workflow list filtering."""
from n8n_workflow_builder.n8n.filters import DEFAULT_LIST_LIMIT, filter_workflows
from n8n_workflow_builder.n8n.stats import summarize_executions


class TestExecutionStats:

    def test_empty(self):
        stats = summarize_executions([])

        assert stats.to_dict() == {
            "total": 0,
            "succeeded": 0,
            "failed": 0,
            "waiting": 0,
            "avgExecutionTime": "0.00s",
        }

    def test_counts_and_average(self):
        executions = [
            {
                "finished": True,
                "status": "success",
                "startedAt": "2024-05-01T10:00:00.000Z",
                "stoppedAt": "2024-05-01T10:00:02.000Z",
            },
            {
                "finished": True,
                "status": "success",
                "startedAt": "2024-05-01T10:00:00.000Z",
                "stoppedAt": "2024-05-01T10:00:03.000Z",
            },
            {"finished": False, "status": "error", "mode": "manual"},
            {"finished": False, "status": "waiting"},
            {"finished": True, "mode": "error"},
        ]

        stats = summarize_executions(executions)

        assert stats.total == 5
        assert stats.succeeded == 2
        assert stats.failed == 2
        assert stats.waiting == 2
        assert stats.avg_execution_time == "2.50s"

    def test_finished_without_timestamps_not_averaged(self):
        stats = summarize_executions([{"finished": True, "startedAt": "2024-05-01T10:00:00Z"}])

        assert stats.succeeded == 1
        assert stats.avg_execution_time == "0.00s"


class TestFilterWorkflows:

    WORKFLOWS = [
        {"id": "1", "name": "Lead Enrichment", "active": True, "tags": [{"name": "sales"}]},
        {"id": "2", "name": "Daily Report", "active": False, "tags": ["ops"]},
        {"id": "3", "name": "Lead Scoring", "active": False, "tags": None},
        {"id": "4", "name": "Slack Alerts", "active": True, "tags": [{"name": "ops"}, {"name": "sales"}]},
    ]

    def ids(self, result):
        return [wf["id"] for wf in result["data"]]

    def test_no_filters(self):
        result = filter_workflows(self.WORKFLOWS)

        assert self.ids(result) == ["1", "2", "3", "4"]
        assert result["total"] == 4
        assert result["limit"] == DEFAULT_LIST_LIMIT

    def test_search_is_case_insensitive(self):
        assert self.ids(filter_workflows(self.WORKFLOWS, search="LEAD")) == ["1", "3"]

    def test_active_filter(self):
        assert self.ids(filter_workflows(self.WORKFLOWS, active=False)) == ["2", "3"]
        assert self.ids(filter_workflows(self.WORKFLOWS, active=True)) == ["1", "4"]

    def test_tags_match_strings_and_objects(self):
        assert self.ids(filter_workflows(self.WORKFLOWS, tags=["ops"])) == ["2", "4"]
        assert self.ids(filter_workflows(self.WORKFLOWS, tags=["sales", "missing"])) == ["1", "4"]

    def test_malformed_tag_entries_ignored(self):
        workflows = [{"id": "9", "name": "Odd", "tags": [None, 7, {"name": "ops"}]}]

        assert self.ids(filter_workflows(workflows, tags=["ops"])) == ["9"]

    def test_pagination_counts_total_before_slicing(self):
        result = filter_workflows(self.WORKFLOWS, offset=1, limit=2)

        assert self.ids(result) == ["2", "3"]
        assert result["count"] == 2
        assert result["total"] == 4
        assert result["offset"] == 1
