"""Ticket delivery template — sent once tickets are confirmed."""


class TicketDeliveryTemplate:
    template_id = "ticket_delivery"
    variables = ("DOWNLOAD_URL", "SITE_URL")

    @staticmethod
    def render(context: dict) -> dict:
        name = context.get("CONTACT_NAME") or "there"
        download_url = context.get("DOWNLOAD_URL", "")
        site_url = context.get("SITE_URL", "")
        return {
            "subject": "Your tickets are ready",
            "body": (
                f"Hi {name},\n\n"
                "Thank you for your purchase. Your payment was received and your "
                "tickets are confirmed.\n\n"
                f"Download your tickets: {download_url}\n\n"
                f"See you at the event! {site_url}"
            ),
        }
