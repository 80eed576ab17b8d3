"""FastAPI application exposing generation and payment endpoints under /api.

The app factory takes its collaborators explicitly so tests (and other
hosts) can inject doubles; anything not supplied is built from the config
and closed on shutdown.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Annotated, Any

import httpx
from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from coldreach import __version__
from coldreach.backends import JsonFileBackend
from coldreach.config import ColdReachConfig
from coldreach.entitlement_store import EntitlementStore
from coldreach.gemini_client import GeminiClient
from coldreach.razorpay_client import RazorpayClient, RazorpayError
from coldreach.tools.generation import (
    GenerationFailed,
    GenerationRequest,
    TextGenerator,
    generate_email_tool,
)
from coldreach.tools.payments import create_order_tool, get_user_tool, verify_payment_tool
from coldreach.tools.status import service_status_tool

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


def _loose_text(value: Any) -> Any:
    """Scalars become their string form; structured values are ignored."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return str(value)
    return None


LooseText = Annotated[str | None, BeforeValidator(_loose_text)]


class GenerateEmailBody(BaseModel):
    """Generation request. Every field is optional and loosely typed."""

    model_config = ConfigDict(populate_by_name=True)

    mode: LooseText = None
    email_type: LooseText = Field(default=None, alias="emailType")
    your_value: LooseText = Field(default=None, alias="yourValue")
    website_url: LooseText = Field(default=None, alias="websiteUrl")
    name: LooseText = None
    company: LooseText = None
    role: LooseText = None
    context: LooseText = None
    email: LooseText = None

    def to_request(self) -> GenerationRequest:
        return GenerationRequest(**self.model_dump())


class CreateOrderBody(BaseModel):
    amount: float = Field(gt=0, description="Amount in major currency units")
    plan: str
    email: str


class VerifyPaymentBody(BaseModel):
    razorpay_order_id: str = ""
    razorpay_payment_id: str = ""
    razorpay_signature: str = ""
    email: str
    plan: str


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

router = APIRouter(prefix="/api", tags=["coldreach"])


@router.post("/generate-email")
async def generate_email(body: GenerateEmailBody, request: Request):
    state = request.app.state
    config: ColdReachConfig = state.config
    try:
        return await generate_email_tool(
            state.store,
            state.generator,
            body.to_request(),
            http_client=state.http_client,
            max_output_tokens=config.gemini_max_output_tokens,
            temperature=config.gemini_temperature,
            enrichment_timeout=config.enrichment_timeout_secs,
        )
    except GenerationFailed as e:
        logger.error("Generation error: %s", e)
        message = str(e)
    except Exception as e:
        logger.exception("Unexpected generation error.")
        message = str(e)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": f"AI generation failed: {message}"},
    )


@router.post("/create-order")
async def create_order(body: CreateOrderBody, request: Request):
    state = request.app.state
    try:
        return await create_order_tool(
            state.razorpay,
            amount=body.amount,
            plan=body.plan,
            email=body.email,
            currency=state.config.razorpay_currency,
        )
    except RazorpayError as e:
        logger.warning("Order creation failed: %s", e)
        message = str(e)
    except Exception as e:
        logger.exception("Unexpected order creation error.")
        message = str(e)
    return JSONResponse(status_code=500, content={"success": False, "error": message})


@router.post("/verify-payment")
async def verify_payment(body: VerifyPaymentBody, request: Request):
    state = request.app.state
    try:
        result = await verify_payment_tool(
            state.store,
            secret=state.config.razorpay_key_secret or "",
            order_id=body.razorpay_order_id,
            payment_id=body.razorpay_payment_id,
            signature=body.razorpay_signature,
            email=body.email,
            plan=body.plan,
        )
    except Exception as e:
        logger.exception("Payment verification error.")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})
    if not result["success"]:
        return JSONResponse(status_code=400, content=result)
    return result


@router.get("/user/{email}")
async def get_user(email: str, request: Request):
    return await get_user_tool(request.app.state.store, email)


@router.get("/status")
async def status(request: Request):
    state = request.app.state
    return await service_status_tool(state.config, state.store)


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(
    config: ColdReachConfig | None = None,
    *,
    store: EntitlementStore | None = None,
    generator: TextGenerator | None = None,
    razorpay: RazorpayClient | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Build the FastAPI app. Collaborators default to production clients."""
    config = config or ColdReachConfig()
    owned: list[Any] = []

    if store is None:
        store = EntitlementStore(JsonFileBackend(config.users_file))
    if generator is None:
        generator = GeminiClient(config.gemini_api_key or "", model=config.gemini_model)
        owned.append(generator)
    if razorpay is None:
        razorpay = RazorpayClient(config.razorpay_key_id or "", config.razorpay_key_secret or "")
        owned.append(razorpay)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "ColdReach %s ready (model=%s, store=%s).",
            __version__, config.gemini_model, type(store.backend).__name__,
        )
        yield
        logger.info("Shutting down ColdReach.")
        for client in owned:
            await client.close()

    app = FastAPI(title="ColdReach", version=__version__, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.config = config
    app.state.store = store
    app.state.generator = generator
    app.state.razorpay = razorpay
    app.state.http_client = http_client
    app.include_router(router)
    return app


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def config_from_env(environ: dict[str, str] | None = None) -> ColdReachConfig:
    """Build a config from environment variables (see .env.example)."""
    env = os.environ if environ is None else environ
    defaults = ColdReachConfig()
    return ColdReachConfig(
        gemini_api_key=env.get("GEMINI_API_KEY") or None,
        gemini_model=env.get("GEMINI_MODEL", defaults.gemini_model),
        razorpay_key_id=env.get("RAZORPAY_KEY_ID") or None,
        razorpay_key_secret=env.get("RAZORPAY_KEY_SECRET") or None,
        razorpay_currency=env.get("RAZORPAY_CURRENCY", defaults.razorpay_currency),
        users_file=env.get("COLDREACH_USERS_FILE", defaults.users_file),
        host=env.get("HOST", defaults.host),
        port=int(env.get("PORT", defaults.port)),
    )


def main() -> None:
    import uvicorn

    load_dotenv()
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s"
    )
    config = config_from_env()
    uvicorn.run(create_app(config), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
