"""API routes for run planning."""

from fastapi import APIRouter, HTTPException

from ..workflows.graph import WorkflowGraph
from .consolidation import consolidate_run_data_and_start_nodes
from .errors import GraphCycleError
from .schemas import RunPlanRequest, RunPlanResponse

router = APIRouter(prefix="/executions", tags=["Executions"])


@router.post("/run-plan", response_model=RunPlanResponse)
async def preview_run_plan(request: RunPlanRequest):
    """Preview which nodes a partial run would execute and which data it reuses."""
    graph = WorkflowGraph.from_workflow_data(request.workflow_data)

    if request.direct_parent_nodes is not None:
        direct_parent_nodes = request.direct_parent_nodes
    elif request.destination_node is not None:
        if graph.get_node(request.destination_node) is None:
            raise HTTPException(
                status_code=404,
                detail=f"Node '{request.destination_node}' not found in workflow",
            )
        direct_parent_nodes = graph.get_parent_nodes(request.destination_node)
    else:
        direct_parent_nodes = []

    try:
        plan = consolidate_run_data_and_start_nodes(
            direct_parent_nodes,
            request.run_data,
            request.workflow_data.pin_data,
            graph,
        )
    except GraphCycleError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())

    return RunPlanResponse(
        start_node_names=plan.start_node_names,
        run_data=plan.run_data,
        reused_nodes=list(plan.run_data or {}),
    )
