import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, HTTPException
from pydantic import BaseModel, ValidationError

from .config import get_settings
from .tools import ApiDocsService, UnknownToolError

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

app = FastAPI(title="API Docs Reader", version="1.0.0")

_service: Optional[ApiDocsService] = None


def get_service() -> ApiDocsService:
    """Eine Service-Instanz pro Prozess (Settings sind read-only)"""
    global _service
    if _service is None:
        _service = ApiDocsService(get_settings())
    return _service


# Pydantic Models
class TextContent(BaseModel):
    type: str = "text"
    text: str


class ToolResponse(BaseModel):
    content: List[TextContent]


# Health Check Endpoints
@app.get("/health/ready")
async def health_ready():
    return {"status": "ready", "timestamp": datetime.now().isoformat()}


@app.get("/health/live")
async def health_live():
    return {"status": "alive", "timestamp": datetime.now().isoformat()}


@app.get("/api/tools")
async def list_tools(service: ApiDocsService = Depends(get_service)):
    """Listet alle Tools mit Input-Schema"""
    return {"tools": service.list_tools()}


@app.post("/api/tools/{tool_name}", response_model=ToolResponse)
async def call_tool(
    tool_name: str,
    arguments: Optional[Dict[str, Any]] = Body(default=None),
    service: ApiDocsService = Depends(get_service),
):
    """
    Führt ein Tool aus.

    Dokument-Fehler kommen als normaler Text zurück; nur ein unbekannter
    Tool-Name (404) oder ungültige Argumente (422) sind HTTP-Fehler.
    """
    try:
        text = await service.call_tool(tool_name, arguments)
    except UnknownToolError as e:
        raise HTTPException(
            status_code=404,
            detail={"error": {"code": "UNKNOWN_TOOL", "message": str(e)}}
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": {"code": "INVALID_ARGUMENTS", "message": str(e)}}
        )

    return ToolResponse(content=[TextContent(text=text)])


@app.on_event("startup")
def startup_event():
    get_service()
    logger.info("✅ API Docs Reader started")


def run():
    import uvicorn
    host = os.getenv("API_DOCS_HOST", "0.0.0.0")
    port = int(os.getenv("API_DOCS_PORT", "8000"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
