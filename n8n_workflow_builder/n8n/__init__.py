"""n8n integration modules."""
from n8n_workflow_builder.n8n.client import N8NClient, N8NClientError
from n8n_workflow_builder.n8n.filters import filter_workflows
from n8n_workflow_builder.n8n.stats import ExecutionStats, summarize_executions

__all__ = [
    "N8NClient",
    "N8NClientError",
    "filter_workflows",
    "ExecutionStats",
    "summarize_executions",
]
