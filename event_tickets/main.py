"""
FastAPI backend for event registration tickets and wallet passes.
"""

import logging
from typing import Any, Dict

from dotenv import load_dotenv
from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from .config import EVENT_SHORT_NAME, Settings
from .services.errors import ErrorCode, InvalidInput, TicketError
from .services.models import TicketPayload
from .services.rate_limiter import RateLimiter
from .services.ticket_service import TicketService
from .services.wallet_passes import build_apple_pass_json, build_google_pass_object, build_google_save_claims

# Load environment variables from .env file
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Event Tickets API",
    description=f"Registration, QR tickets and wallet passes for {EVENT_SHORT_NAME}",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173"],  # Vite dev server
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

settings = Settings.from_env()
ticket_service = TicketService()
rate_limiter = RateLimiter(
    max_requests=settings.rate_limit_requests,
    window_seconds=settings.rate_limit_window,
)

ERROR_STATUS = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.REGISTRATION_NOT_FOUND: 404,
    ErrorCode.PAYLOAD_TOO_LARGE: 413,
    ErrorCode.CHECKSUM_UNAVAILABLE: 500,
}


def get_client_ip(request: Request) -> str:
    """Extract client IP address from request"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _ticket_from_body(body: Dict[str, Any]) -> TicketPayload:
    ticket_data = body.get("ticketData") if isinstance(body, dict) else None
    if not ticket_data:
        raise InvalidInput("Missing required field: ticketData")
    return TicketPayload.from_dict(ticket_data)


@app.exception_handler(TicketError)
async def ticket_error_handler(request: Request, exc: TicketError):
    status_code = ERROR_STATUS.get(exc.code, 500)
    if status_code >= 500:
        logger.error(f"Ticket generation failed on {request.url.path}: {exc}")
    else:
        logger.warning(f"Rejected request on {request.url.path}: {exc}")
    return JSONResponse(status_code=status_code, content={"ok": False, "error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()))
        message = f"{location}: {errors[0].get('msg', 'invalid value')}"
    else:
        message = "Invalid request body"
    logger.warning(f"Rejected request on {request.url.path}: {message}")
    return JSONResponse(status_code=400, content={"ok": False, "error": message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"ok": False, "error": "Internal server error. Please try again later."}
    )


@app.get("/")
async def root():
    """Health check endpoint"""
    return {"status": "healthy", "service": "Event Tickets API"}


@app.get("/api/health")
async def health_check():
    """Detailed health check"""
    return {
        "status": "healthy",
        "services": {
            "registrations": ticket_service.store is not None,
            "google_wallet": settings.google_configured,
        }
    }


@app.post("/api/registrations")
async def create_registration(request: Request, form_data: Dict[str, Any] = Body(...)):
    """
    Register an attendee and issue the ticket.

    Returns:
        ok flag, registration id, ticket payload and QR data URL
    """
    client_ip = get_client_ip(request)
    if not rate_limiter.is_allowed(client_ip):
        logger.warning(f"Rate limit exceeded for IP: {client_ip}")
        return JSONResponse(
            status_code=429,
            content={
                "ok": False,
                "error": "Too many requests. Please try again later.",
                "reset_time": rate_limiter.reset_time(client_ip),
            }
        )

    issued = ticket_service.register(form_data)
    return {"ok": True, **issued.to_response()}


@app.post("/api/tickets")
async def create_ticket(body: Dict[str, Any] = Body(...)):
    """Re-issue the ticket for a stored registration from its stored fields"""
    registration_id = body.get("registrationId")
    if not registration_id:
        raise InvalidInput("Missing required field: registrationId")

    issued = ticket_service.issue_ticket(str(registration_id))
    return {"ok": True, **issued.to_response()}


@app.post("/api/wallet/apple")
async def apple_wallet_pass(body: Dict[str, Any] = Body(...)):
    """Unsigned pass.json for the signing service"""
    ticket = _ticket_from_body(body)
    return build_apple_pass_json(ticket, settings)


@app.post("/api/wallet/google")
async def google_wallet_pass(body: Dict[str, Any] = Body(...)):
    """Event ticket object and unsigned save claims for the signing service"""
    ticket = _ticket_from_body(body)
    return {
        "ok": True,
        "object": build_google_pass_object(ticket, settings.google_issuer_id),
        "claims": build_google_save_claims(ticket, settings),
    }


if __name__ == "__main__":
    uvicorn.run(
        "event_tickets.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
