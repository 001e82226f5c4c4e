"""Template registry — maps template ids to template classes.

The configured TICKET_EMAIL_TEMPLATE_ID may name a template owned by the
contact service; unknown ids fall back to the ticket delivery template when
rendered locally.
"""

from notifications.templates.ticket_delivery import TicketDeliveryTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    TicketDeliveryTemplate.template_id: TicketDeliveryTemplate,
}


def get_template(template_id: str):
    """Look up a template class by id."""
    return TEMPLATE_REGISTRY.get(template_id, TicketDeliveryTemplate)
