# ============================================================
# LexRelay FastAPI App
# ------------------------------------------------------------
# This app wires everything together:
#   - Persona registry + prompt assembly for the legal tools
#   - Document extraction for uploaded attachments
#   - Upstream dispatch (Gemini or Echo client) with fallback
#   - CORS and per-IP rate limiting on /api/ routes
# ============================================================

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile as StarletteUploadFile
from typing import List, Optional, Dict, Any
import logging
import os

# --- Local imports ---
from lexrelay.settings import settings
from lexrelay.personas import ConversationRequest, PersonaRegistry
from lexrelay.personas.types import MODE_TOOLS
from lexrelay.generate import Dispatcher, EchoDevClient, ModelParams
from lexrelay.extract import UploadedFile, UploadLimitError
from lexrelay.limits import FixedWindowRateLimiter, rate_limit_mw
from lexrelay.pipeline import AskPipeline, InvalidRequest

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("lexrelay")

GENERIC_ERROR = "Sorry, the AI service is temporarily unavailable. Please try again later."
UPLOAD_FIELD = "files"

# ------------------------------------------------------------
# 🔧 Model client selection
# ------------------------------------------------------------
if settings.LLM_CLIENT == "echo":
    model_client = EchoDevClient()
elif settings.GEMINI_API_KEY:
    from lexrelay.generate.clients.gemini_client import GeminiClient
    model_client = GeminiClient(
        api_key=settings.GEMINI_API_KEY,
        url=settings.GEMINI_API_URL,
        timeout=settings.UPSTREAM_TIMEOUT_S,
    )
else:
    logger.error("GEMINI_API_KEY is not set; /api/ask will report the AI service as unavailable")
    model_client = None

registry = PersonaRegistry.from_yaml()
dispatcher = Dispatcher(
    model_client=model_client,
    params=ModelParams(temperature=settings.TEMPERATURE, max_tokens=settings.MAX_OUTPUT_TOKENS),
)
pipeline = AskPipeline(
    registry=registry,
    dispatcher=dispatcher,
    max_files=settings.MAX_UPLOAD_FILES,
    max_bytes=settings.MAX_UPLOAD_BYTES,
    ocr_lang=settings.OCR_LANG,
)


def get_pipeline() -> AskPipeline:
    return pipeline

# ------------------------------------------------------------
# 🚀 FastAPI init
# ------------------------------------------------------------
app = FastAPI(title="LexRelay API", version="1.0")
app.state.rate_limiter = FixedWindowRateLimiter(
    window_s=settings.RATE_LIMIT_WINDOW_MS / 1000.0,
    max_requests=settings.RATE_LIMIT_MAX,
)
app.middleware("http")(rate_limit_mw)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

if settings.STATIC_DIR and os.path.isdir(settings.STATIC_DIR):
    app.mount("/ui", StaticFiles(directory=settings.STATIC_DIR, html=True), name="ui")

# ------------------------------------------------------------
# 📦 Pydantic models
# ------------------------------------------------------------
class AskRequest(BaseModel):
    prompt: str = ""
    tool: Optional[str] = None
    context: Optional[str] = None
    reasoning: bool = False

class AskResponse(BaseModel):
    answer: str

class ToolInfo(BaseModel):
    key: str
    name: str
    description: str

class ToolsResponse(BaseModel):
    tools: List[ToolInfo]
    modes: List[str]

# ------------------------------------------------------------
# 📥 Request parsing
# ------------------------------------------------------------
def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)

async def _read_body(
    request: Request, max_files: int, max_bytes: int
) -> tuple[Dict[str, Any], List[UploadedFile]]:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data") or content_type.startswith(
        "application/x-www-form-urlencoded"
    ):
        form = await request.form()
        fields: Dict[str, Any] = {}
        files: List[UploadedFile] = []
        try:
            for key, value in form.multi_items():
                if isinstance(value, StarletteUploadFile):
                    if key != UPLOAD_FIELD:
                        continue
                    # limits are checked before any upload is read into memory
                    if len(files) >= max_files:
                        raise UploadLimitError(f"Too many files: at most {max_files} may be attached.", 400)
                    if value.size is not None and value.size > max_bytes:
                        raise UploadLimitError(
                            f"File '{value.filename}' exceeds the {max_bytes // (1024 * 1024)} MB limit.", 413
                        )
                    files.append(UploadedFile(
                        original_name=value.filename or "upload",
                        mime_type=value.content_type or "",
                        content=await value.read(),
                    ))
                elif value != "":
                    fields[key] = value
        finally:
            await form.close()
        return fields, files

    try:
        body = await request.json()
    except ValueError:
        raise InvalidRequest("Request body must be valid JSON.")
    if not isinstance(body, dict):
        raise InvalidRequest("Request body must be a JSON object.")
    return body, []

# ------------------------------------------------------------
# 💬 Main ask route
# ------------------------------------------------------------
@app.post("/api/ask", response_model=AskResponse)
async def ask(request: Request, pipeline: AskPipeline = Depends(get_pipeline)):
    try:
        fields, files = await _read_body(request, pipeline.max_files, pipeline.max_bytes)
        try:
            body = AskRequest.model_validate(fields)
        except ValidationError:
            raise InvalidRequest("Invalid request body.")

        conv = ConversationRequest(
            query=body.prompt,
            tool=body.tool,
            context=body.context,
            reasoning_enabled=body.reasoning,
        )
        result = await run_in_threadpool(pipeline.run, conv, files)
    except InvalidRequest as e:
        return _error(str(e), 400)
    except UploadLimitError as e:
        return _error(str(e), e.status_code)
    except Exception:
        logger.exception("Unexpected failure while handling /api/ask")
        return _error(GENERIC_ERROR, 500)

    if not result.ok:
        return _error(GENERIC_ERROR, 500)
    return AskResponse(answer=result.answer_text)

# ------------------------------------------------------------
# 🧰 Tools discovery
# ------------------------------------------------------------
@app.get("/api/tools", response_model=ToolsResponse)
def list_tools(pipeline: AskPipeline = Depends(get_pipeline)):
    tools = [
        ToolInfo(key=p.key, name=p.name, description=p.description)
        for p in pipeline.registry.tools()
    ]
    return ToolsResponse(tools=tools, modes=list(MODE_TOOLS))

# ------------------------------------------------------------
# 🧭 Health checks
# ------------------------------------------------------------
@app.get("/healthz")
def healthz(pipeline: AskPipeline = Depends(get_pipeline)):
    return {
        "ok": True,
        "env": settings.ENV,
        "debug": settings.DEBUG,
        "app": settings.app_name,
        "provider_configured": pipeline.dispatcher.configured,
    }

@app.get("/health")
def health():
    return {"status": "ok", "env": settings.ENV}

@app.get("/")
def hello():
    return {"message": "LexRelay service running."}
