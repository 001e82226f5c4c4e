"""Webhook pipeline — from a payment notification to delivered tickets.

State Machine (one pass per request, strictly sequential):
    RECEIVED → VALIDATED → CORRELATION_DECODED → ORDER_CONFIRM_ATTEMPTED
        → ORDER_FETCH_ATTEMPTED → NOTIFICATION_ATTEMPTED → RESPONDED

Every request ends in exactly one RESPONDED transition. Validation failures
answer 400 before any external call. Everything after validation answers
200 so the gateway stops redelivering: a malformed correlation token is
acknowledged, the order, ticket and notification stages are allowed to fail
independently, and an unexpected error is downgraded to ACKNOWLEDGED with
the delivery left retryable.

Each transition goes through ``_transition``, which writes one audit entry
and one log line.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

from shared.correlation import decode
from shared.errors import ErrorCode

from notifications.dispatch import NotificationDispatcher
from reconciliation.audit.sink import AuditSink
from reconciliation.delivery.ledger import DeliveryLedger
from reconciliation.orders.reconciler import OrderReconciler
from reconciliation.utils.logging import add_context, clear_context
from reconciliation.webhook.payload import PaymentEvent, parse_envelope
from reconciliation.webhook.validation import validate

logger = structlog.get_logger(__name__)

DEFAULT_CUSTOMER_NAME = "Customer"


class PipelineState(Enum):
    RECEIVED = "Received"
    VALIDATED = "Validated"
    CORRELATION_DECODED = "CorrelationDecoded"
    ORDER_CONFIRM_ATTEMPTED = "OrderConfirmAttempted"
    ORDER_FETCH_ATTEMPTED = "OrderFetchAttempted"
    NOTIFICATION_ATTEMPTED = "NotificationAttempted"
    RESPONDED = "Responded"


class StageStatus(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"
    NOT_ATTEMPTED = "not_attempted"


@dataclass(frozen=True)
class StageOutcome:
    status: StageStatus = StageStatus.NOT_ATTEMPTED
    error_code: ErrorCode | None = None
    detail: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == StageStatus.SUCCEEDED

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "error_code": self.error_code.value if self.error_code else None,
            "detail": self.detail,
        }


@dataclass(frozen=True)
class PipelineOutcome:
    code: ErrorCode
    message: str
    http_status: int
    data: dict = field(default_factory=dict)
    transaction_id: str | None = None
    order_code: str | None = None
    order_id: str | None = None
    event_id: str | None = None
    order_confirmation: StageOutcome = field(default_factory=StageOutcome)
    ticket_retrieval: StageOutcome = field(default_factory=StageOutcome)
    notification: StageOutcome = field(default_factory=StageOutcome)
    states: tuple[PipelineState, ...] = ()

    def body(self) -> dict:
        """The JSON body answered to the gateway."""
        body = {"code": self.code.value, "message": self.message}
        if self.data:
            body["data"] = self.data
        return body


@dataclass
class _Run:
    """Mutable per-request bookkeeping; never shared between requests."""

    states: list[PipelineState] = field(default_factory=list)
    transaction_id: str | None = None
    order_code: str | None = None
    order_id: str | None = None
    event_id: str | None = None
    claimed: bool = False
    order_confirmation: StageOutcome = field(default_factory=StageOutcome)
    ticket_retrieval: StageOutcome = field(default_factory=StageOutcome)
    notification: StageOutcome = field(default_factory=StageOutcome)


def _failed(result) -> StageOutcome:
    return StageOutcome(status=StageStatus.FAILED, error_code=result.error_code, detail=result.message)


class WebhookPipeline:
    def __init__(
        self,
        reconciler: OrderReconciler,
        dispatcher: NotificationDispatcher,
        ledger: DeliveryLedger,
        audit_sink: AuditSink,
        expected_event_type: int | None = None,
    ):
        self.reconciler = reconciler
        self.dispatcher = dispatcher
        self.ledger = ledger
        self.audit_sink = audit_sink
        self.expected_event_type = expected_event_type

    # -------------------------------------------------------------------
    # Emission point
    # -------------------------------------------------------------------
    def _transition(self, run: _Run, state: PipelineState, phase: str, data: dict | None = None) -> None:
        run.states.append(state)
        data = dict(data or {})
        try:
            self.audit_sink.write(phase, data, transaction_id=run.transaction_id)
        except Exception as exc:
            logger.error("Audit sink raised", phase=phase, error=str(exc))
        logger.info("Webhook pipeline transition", state=state.value, phase=phase, data=data)

    def _respond(
        self,
        run: _Run,
        code: ErrorCode,
        message: str,
        http_status: int,
        phase: str = "responded",
        data: dict | None = None,
        details: dict | None = None,
    ) -> PipelineOutcome:
        outcome = PipelineOutcome(
            code=code,
            message=message,
            http_status=http_status,
            data=data or {},
            transaction_id=run.transaction_id,
            order_code=run.order_code,
            order_id=run.order_id,
            event_id=run.event_id,
            order_confirmation=run.order_confirmation,
            ticket_retrieval=run.ticket_retrieval,
            notification=run.notification,
            states=tuple(run.states) + (PipelineState.RESPONDED,),
        )
        self._transition(
            run,
            PipelineState.RESPONDED,
            phase,
            {
                "code": code.value,
                "message": message,
                "http_status": http_status,
                "order_confirmation": run.order_confirmation.to_dict(),
                "ticket_retrieval": run.ticket_retrieval.to_dict(),
                "notification": run.notification.to_dict(),
                **(details or {}),
            },
        )
        return outcome

    # -------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------
    def handle(self, raw: Any) -> PipelineOutcome:
        """Run one webhook delivery through the pipeline. Never raises."""
        run = _Run()
        try:
            return self._handle(run, raw)
        finally:
            clear_context()

    def _handle(self, run: _Run, raw: Any) -> PipelineOutcome:
        self._transition(
            run,
            PipelineState.RECEIVED,
            "webhook_received",
            {"event_type_id": raw.get("EventTypeId") if isinstance(raw, dict) else None},
        )

        validation = validate(parse_envelope(raw), self.expected_event_type)
        if not validation.success:
            return self._respond(
                run,
                validation.error_code,
                validation.message,
                400,
                phase="webhook_rejected",
                details={"validation": validation.details},
            )

        event = validation.event
        run.transaction_id = event.transaction_id
        run.order_code = event.order_code
        add_context(transaction_id=event.transaction_id, order_code=event.order_code)
        self._transition(run, PipelineState.VALIDATED, "webhook_validated", event.summary())

        try:
            return self._process(run, event)
        except Exception as exc:
            logger.exception("Webhook processing failed", error=str(exc))
            if run.claimed:
                try:
                    self.ledger.fail(
                        event.transaction_id,
                        f"{type(exc).__name__}: {exc}",
                        notification_sent=run.notification.succeeded,
                    )
                except Exception as ledger_exc:
                    logger.error("Could not mark delivery failed", error=str(ledger_exc))
            return self._respond(
                run,
                ErrorCode.ACKNOWLEDGED,
                "Webhook received",
                200,
                phase="webhook_processing_error",
                details={"error": f"{type(exc).__name__}: {exc}"},
            )

    def _process(self, run: _Run, event: PaymentEvent) -> PipelineOutcome:
        claim = self.ledger.claim(event.transaction_id, event.order_code)
        if not claim.acquired:
            return self._respond(
                run,
                ErrorCode.DUPLICATE_DELIVERY,
                "Webhook already processed" if claim.reason == "completed" else "Webhook is being processed",
                200,
                phase="duplicate_delivery",
                details={"reason": claim.reason},
            )
        run.claimed = True

        decoded = decode(event.merchant_trns)
        if not decoded.success:
            run.order_id = decoded.order_id
            self.ledger.complete(event.transaction_id, decoded.error_code.value)
            return self._respond(
                run,
                decoded.error_code,
                decoded.message,
                200,
                phase="correlation_failed",
                details={"merchant_trns": event.merchant_trns},
            )

        run.order_id = decoded.order_id
        run.event_id = decoded.event_id
        self.ledger.record_correlation(event.transaction_id, decoded.order_id, decoded.event_id)
        self._transition(
            run,
            PipelineState.CORRELATION_DECODED,
            "correlation_decoded",
            {"order_id": decoded.order_id, "event_id": decoded.event_id},
        )

        self._confirm_order(run)
        tickets = self._fetch_tickets(run)
        self._notify(run, event, tickets, already_sent=claim.notification_already_sent)

        self.ledger.complete(
            event.transaction_id,
            ErrorCode.SUCCESS.value,
            order_confirmed=run.order_confirmation.succeeded,
            tickets_retrieved=run.ticket_retrieval.succeeded,
            notification_sent=run.notification.succeeded,
        )
        return self._respond(
            run,
            ErrorCode.SUCCESS,
            "Webhook processed successfully",
            200,
            data={
                "orderCode": event.order_code,
                "transactionId": event.transaction_id,
                "amount": float(event.amount),
                "currencyCode": event.currency_code,
                "merchantId": event.merchant_id,
                "orderId": run.order_id,
                "eventId": run.event_id,
            },
        )

    # -------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------
    def _confirm_order(self, run: _Run) -> None:
        result = self.reconciler.confirm(run.event_id, run.order_id)
        if result.success:
            confirmation = result.value
            run.order_confirmation = StageOutcome(status=StageStatus.SUCCEEDED)
            self._transition(
                run,
                PipelineState.ORDER_CONFIRM_ATTEMPTED,
                "order_confirmed",
                {
                    "order_number": confirmation.order_number,
                    "event_id": confirmation.event_id,
                    "status": confirmation.status,
                    "tickets_quantity": confirmation.tickets_quantity,
                    "ticket_count": len(confirmation.tickets),
                },
            )
        else:
            run.order_confirmation = _failed(result)
            self._transition(
                run,
                PipelineState.ORDER_CONFIRM_ATTEMPTED,
                "order_confirm_failed",
                {"error_code": result.error_code.value, "message": result.message, **result.details},
            )

    def _fetch_tickets(self, run: _Run) -> list:
        result = self.reconciler.fetch(run.event_id, run.order_id)
        if not result.success:
            run.ticket_retrieval = _failed(result)
            self._transition(
                run,
                PipelineState.ORDER_FETCH_ATTEMPTED,
                "ticket_retrieval_failed",
                {"error_code": result.error_code.value, "message": result.message, **result.details},
            )
            return []

        run.ticket_retrieval = StageOutcome(status=StageStatus.SUCCEEDED)
        self._transition(
            run,
            PipelineState.ORDER_FETCH_ATTEMPTED,
            "tickets_retrieved",
            {"tickets": [ticket.to_dict() for ticket in result.value]},
        )
        return result.value

    def _notify(self, run: _Run, event: PaymentEvent, tickets: list, already_sent: bool) -> None:
        artifact_url = tickets[0].artifact_url if tickets else ""

        skip_reason = None
        if already_sent:
            skip_reason = "Notification already sent for this transaction"
        elif not artifact_url:
            skip_reason = "No ticket download URL available"
        elif not event.customer_email:
            skip_reason = "No customer email on the payment"

        if skip_reason:
            run.notification = StageOutcome(status=StageStatus.SKIPPED, detail=skip_reason)
            self._transition(
                run,
                PipelineState.NOTIFICATION_ATTEMPTED,
                "notification_skipped",
                {"reason": skip_reason},
            )
            return

        result = self.dispatcher.dispatch(
            event.customer_name or DEFAULT_CUSTOMER_NAME,
            event.customer_email,
            artifact_url,
        )
        if result.success:
            run.notification = StageOutcome(status=StageStatus.SUCCEEDED)
            self._transition(
                run,
                PipelineState.NOTIFICATION_ATTEMPTED,
                "notification_sent",
                {
                    "email": event.customer_email,
                    "contact_id": result.receipt.contact_id,
                    "message_id": result.receipt.message_id,
                    "download_url": artifact_url,
                },
            )
        else:
            run.notification = _failed(result)
            self._transition(
                run,
                PipelineState.NOTIFICATION_ATTEMPTED,
                "notification_failed",
                {"email": event.customer_email, "error_code": result.error_code.value, "message": result.message},
            )


def create_pipeline(audit_sink: AuditSink | None = None) -> WebhookPipeline:
    """Wire a pipeline from the configured adapters."""
    from notifications.channel import get_contact_service
    from reconciliation.audit.sink import RepositoryAuditSink
    from reconciliation.orders import get_order_service

    return WebhookPipeline(
        reconciler=OrderReconciler(get_order_service()),
        dispatcher=NotificationDispatcher(get_contact_service()),
        ledger=DeliveryLedger(),
        audit_sink=audit_sink or RepositoryAuditSink(),
    )
