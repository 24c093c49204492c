import structlog
from fastapi import APIRouter, Depends, HTTPException, Request

from src.webhooks.auth import read_webhook_body, verify_github_signature
from src.webhooks.dispatcher import WebhookDispatcher, get_dispatcher
from src.webhooks.models import WebhookResponse
from src.webhooks.results import WebhookResult

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/github", summary="Endpoint for all GitHub webhooks", response_model=WebhookResponse)
async def github_webhook_endpoint(
    request: Request,
    is_verified: bool = Depends(verify_github_signature),
    body: bytes = Depends(read_webhook_body),
    dispatcher_instance: WebhookDispatcher = Depends(get_dispatcher),
) -> WebhookResponse:
    """
    This endpoint receives all events from a configured GitHub App.

    - Configuration, body and signature are checked by the dependencies.
    - The raw body is passed to the dispatcher under the X-GitHub-Event key.
    - Every handler outcome is returned as one line of the response.
    """
    event_name = request.headers.get("X-GitHub-Event")
    if not event_name:
        raise HTTPException(status_code=400, detail="Missing X-GitHub-Event header")

    log = logger.bind(event_type=event_name, delivery_id=request.headers.get("X-GitHub-Delivery"))
    log.info("webhook_validated")

    try:
        raw_body = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise HTTPException(status_code=400, detail="Webhook payload is not UTF-8.") from e

    result = WebhookResult()
    await dispatcher_instance.process(event_name, raw_body, result)

    log.info("webhook_processed", messages=len(result.messages), action_performed=result.action_performed)
    return result.to_response(event_type=event_name)
