"""n8n REST API client for workflow and execution management.

Handles:
- Creating, updating, deleting and fetching workflows
- Activating and deactivating workflows
- Listing, fetching and deleting executions
- Running workflows and retrying executions
"""
from typing import Any, Optional

import httpx
import structlog

from n8n_workflow_builder.config import get_settings

logger = structlog.get_logger()


class N8NClientError(Exception):
    """Exception for n8n API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None, response_body: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


def build_params(params: dict) -> dict:
    """Drop unset query parameters and render booleans the way n8n expects."""
    cleaned = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[key] = value
    return cleaned


class N8NClient:
    """Client for the n8n public REST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.n8n_host).rstrip("/")
        self.api_key = (api_key or settings.n8n_api_key).strip()
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.transport = transport

        if not self.api_key:
            raise ValueError("n8n API key not configured")

        self.headers = {
            "X-N8N-API-KEY": self.api_key,
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        endpoint: str,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Make an HTTP request to the n8n API."""

        url = f"{self.base_url}{endpoint}"

        async with httpx.AsyncClient(transport=self.transport) as client:
            try:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self.headers,
                    json=json,
                    params=build_params(params) if params else None,
                    timeout=self.timeout,
                )
            except httpx.HTTPError as e:
                logger.error("n8n_api_error", method=method, endpoint=endpoint, error=str(e))
                raise N8NClientError(f"HTTP error: {str(e)}") from e

        # Log request (without sensitive data)
        logger.debug(
            "n8n_api_request",
            method=method,
            endpoint=endpoint,
            status_code=response.status_code,
        )

        if response.status_code >= 400:
            error_body = _decode_body(response)
            logger.error(
                "n8n_api_error",
                method=method,
                endpoint=endpoint,
                status_code=response.status_code,
                response_body=error_body,
            )
            raise N8NClientError(
                f"n8n API error: {response.status_code}",
                status_code=response.status_code,
                response_body=error_body,
            )

        return _decode_body(response)

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    async def create_workflow(self, workflow_json: dict) -> dict:
        """Create a new workflow in n8n.

        Args:
            workflow_json: The compiled workflow JSON

        Returns:
            The created workflow data including the assigned ID
        """
        logger.info("create_workflow", name=workflow_json.get("name"))

        result = await self._request(
            method="POST",
            endpoint="/workflows",
            json=workflow_json,
        )

        logger.info(
            "workflow_created",
            workflow_id=result.get("id"),
            name=result.get("name"),
        )

        return result

    async def update_workflow(self, workflow_id: str, workflow_json: dict) -> dict:
        """Update an existing workflow.

        Args:
            workflow_id: The n8n workflow ID
            workflow_json: The updated workflow JSON

        Returns:
            The updated workflow data
        """
        logger.info("update_workflow", workflow_id=workflow_id)

        result = await self._request(
            method="PUT",
            endpoint=f"/workflows/{workflow_id}",
            json=workflow_json,
        )

        logger.info("workflow_updated", workflow_id=workflow_id)

        return result

    async def get_workflow(self, workflow_id: str) -> dict:
        """Get a workflow by ID."""
        logger.debug("get_workflow", workflow_id=workflow_id)

        return await self._request(
            method="GET",
            endpoint=f"/workflows/{workflow_id}",
        )

    async def list_workflows(
        self,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
        active: Optional[bool] = None,
        tags: Optional[list[str]] = None,
    ) -> dict:
        """List one page of workflows.

        Returns:
            ``{"data": [...], "nextCursor": ...}``
        """
        params = {
            "limit": limit,
            "cursor": cursor,
            "active": active,
            "tags": ",".join(tags) if tags else None,
        }

        return await self._request(
            method="GET",
            endpoint="/workflows",
            params=params,
        )

    async def list_all_workflows(self, page_size: int = 100) -> list[dict]:
        """List every workflow, following ``nextCursor`` until exhausted."""
        workflows: list[dict] = []
        cursor = None

        while True:
            page = await self.list_workflows(limit=page_size, cursor=cursor)
            # Older n8n versions return a bare list
            if isinstance(page, list):
                workflows.extend(page)
                break
            workflows.extend(page.get("data", []))
            cursor = page.get("nextCursor")
            if not cursor:
                break

        logger.debug("list_all_workflows", count=len(workflows))
        return workflows

    async def delete_workflow(self, workflow_id: str) -> dict:
        """Delete a workflow.

        Returns:
            The deleted workflow data as returned by n8n
        """
        logger.info("delete_workflow", workflow_id=workflow_id)

        return await self._request(
            method="DELETE",
            endpoint=f"/workflows/{workflow_id}",
        )

    async def activate_workflow(self, workflow_id: str) -> dict:
        """Activate a workflow (enable triggers)."""
        logger.info("activate_workflow", workflow_id=workflow_id)

        return await self._request(
            method="POST",
            endpoint=f"/workflows/{workflow_id}/activate",
        )

    async def deactivate_workflow(self, workflow_id: str) -> dict:
        """Deactivate a workflow (disable triggers)."""
        logger.info("deactivate_workflow", workflow_id=workflow_id)

        return await self._request(
            method="POST",
            endpoint=f"/workflows/{workflow_id}/deactivate",
        )

    # ------------------------------------------------------------------
    # Executions
    # ------------------------------------------------------------------

    async def list_executions(
        self,
        include_data: Optional[bool] = None,
        status: Optional[str] = None,
        workflow_id: Optional[str] = None,
        project_id: Optional[str] = None,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
    ) -> dict:
        """List executions with optional filters.

        Pagination is cursor based: pass the ``nextCursor`` of one response
        as ``cursor`` to get the next page, until no ``nextCursor`` comes back.

        Args:
            include_data: Whether to include full execution data
            status: Filter by status (error, success, waiting)
            workflow_id: Filter by workflow ID
            project_id: Filter by project ID
            limit: Maximum number of executions
            cursor: Pagination cursor

        Returns:
            ``{"data": [...], "nextCursor": ...}``
        """
        params = {
            "includeData": include_data,
            "status": status,
            "workflowId": workflow_id,
            "projectId": project_id,
            "limit": limit,
            "cursor": cursor,
        }

        logger.debug("list_executions", params=build_params(params))

        return await self._request(
            method="GET",
            endpoint="/executions",
            params=params,
        )

    async def get_execution(self, execution_id: int, include_data: bool = False) -> dict:
        """Get a specific execution by ID.

        Args:
            execution_id: The execution ID
            include_data: Whether to include full execution data (node outputs)

        Returns:
            Execution details including node outputs if include_data=True
        """
        logger.info(
            "get_execution_request",
            execution_id=execution_id,
            include_data=include_data,
        )

        result = await self._request(
            method="GET",
            endpoint=f"/executions/{execution_id}",
            params={"includeData": True} if include_data else None,
        )

        if include_data and result.get("data") is None:
            logger.warning(
                "execution_data_is_null",
                execution_id=execution_id,
                hint="Check n8n settings: Save Data on Success should be 'All', not 'None'",
            )

        return result

    async def delete_execution(self, execution_id: int) -> dict:
        """Delete an execution by ID."""
        logger.info("delete_execution", execution_id=execution_id)

        return await self._request(
            method="DELETE",
            endpoint=f"/executions/{execution_id}",
        )

    async def execute_workflow(
        self,
        workflow_id: str,
        input_data: Optional[dict] = None,
    ) -> dict:
        """Execute a workflow manually.

        Uses n8n's internal ``/workflows/run`` endpoint, which is not part of
        the documented public API and may change without notice. Input data,
        when given, is fed to the workflow's first node.

        Args:
            workflow_id: The n8n workflow ID
            input_data: Optional input data for manual trigger workflows

        Returns:
            Execution result
        """
        logger.info("execute_workflow", workflow_id=workflow_id)
        logger.warning("undocumented_endpoint", endpoint="/workflows/run")

        workflow = await self.get_workflow(workflow_id)

        run_data = None
        if input_data and workflow.get("nodes"):
            first_node = workflow["nodes"][0]["name"]
            run_data = {first_node: [{"json": input_data}]}

        return await self._request(
            method="POST",
            endpoint="/workflows/run",
            json=_run_payload(workflow, run_data),
        )

    async def retry_execution(self, execution_id: int) -> dict:
        """Re-run a failed execution's workflow with the execution's data.

        Raises:
            N8NClientError: if the execution has no workflow ID.
        """
        logger.info("retry_execution", execution_id=execution_id)

        execution = await self.get_execution(execution_id, include_data=True)

        workflow_id = execution.get("workflowId")
        if not workflow_id:
            raise N8NClientError("Cannot retry execution: missing workflow ID")

        workflow = await self.get_workflow(str(workflow_id))

        return await self._request(
            method="POST",
            endpoint="/workflows/run",
            json=_run_payload(workflow, execution.get("data")),
        )


def _run_payload(workflow: dict, run_data: Optional[Any]) -> dict:
    """Body for the manual run endpoint."""
    payload = {
        "workflowData": {
            "id": workflow.get("id"),
            "name": workflow.get("name"),
            "nodes": workflow.get("nodes", []),
            "connections": workflow.get("connections", {}),
            "active": workflow.get("active", False),
            "createdAt": workflow.get("createdAt"),
            "updatedAt": workflow.get("updatedAt"),
        },
    }
    if run_data:
        payload["runData"] = run_data
    return payload


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return {"message": response.text}
