from typing import List

from fastapi import APIRouter, Depends, HTTPException

from backend.app.api.schemas import (
    InstructionsResponse,
    ToolCallRequest,
    ToolCallResponse,
    ToolDescription,
)
from backend.app.dependencies import get_tool_service
from backend.app.services.memory_tools import (
    MEMORY_TOOLS_INSTRUCTIONS,
    MemoryToolService,
)

router = APIRouter()


@router.get("/", response_model=List[ToolDescription])
def list_tools(service: MemoryToolService = Depends(get_tool_service)):
    return [
        ToolDescription(name=t.name, description=t.description)
        for t in service.list_tools()
    ]


@router.get("/instructions", response_model=InstructionsResponse)
def instructions():
    return InstructionsResponse(instructions=MEMORY_TOOLS_INSTRUCTIONS)


@router.post("/{tool_name}", response_model=ToolCallResponse)
def call_tool(
    tool_name: str,
    request: ToolCallRequest,
    service: MemoryToolService = Depends(get_tool_service),
):
    try:
        service.get(tool_name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown tool: {tool_name}")

    result = service.call(
        tool_name,
        request.arguments,
        session_id=request.session_id,
    )
    return ToolCallResponse(output=result.output, is_error=result.is_error)
