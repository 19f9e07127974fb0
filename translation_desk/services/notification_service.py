import logging
import smtplib
from email.message import EmailMessage

from translation_desk.config import settings
from translation_desk.models.order import Order

logger = logging.getLogger(__name__)


class Notifier:
    """Sends order e-mails over SMTP.

    Sending errors propagate; the intake workflow decides that they are not
    fatal. Without ``smtp_host`` configured every send is skipped.
    """

    def _send(self, to: str, subject: str, body: str) -> None:
        if not settings.smtp_host:
            logger.info("SMTP not configured, skipping mail to %s: %s", to, subject)
            return
        msg = EmailMessage()
        msg["From"] = settings.mail_from
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(body)
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as smtp:
            smtp.starttls()
            if settings.smtp_user and settings.smtp_password:
                smtp.login(settings.smtp_user, settings.smtp_password)
            smtp.send_message(msg)

    def send_request_confirmation(self, order: Order) -> None:
        body = (
            f"Dear {order.customer_name},\n\n"
            "Your translation request has been received.\n\n"
            f"Request ID: {order.id}\n"
            f"Languages: {order.source_language} -> {order.target_language}\n"
            f"Pages: {order.number_of_pages}\n"
            f"Delivery: {order.urgency}\n"
            f"Estimated price: {order.estimated_price:g} AED (excluding VAT)\n\n"
            "Our team will review your document and send you a detailed quote within 24 hours.\n"
        )
        self._send(order.customer_email, "Translation Request Confirmation", body)

    def send_admin_notification(self, order: Order) -> None:
        if not settings.admin_email:
            logger.info("No admin_email configured, skipping staff alert for %s", order.id)
            return
        lines = [
            f"Request ID: {order.id}",
            f"Customer: {order.customer_name} <{order.customer_email}>",
            f"Phone: {order.customer_phone or '-'}",
            f"Languages: {order.source_language} -> {order.target_language}",
            f"Document type: {order.document_type}",
            f"Delivery: {order.urgency}{' + hard copy' if order.hard_copy else ''}",
            f"Pages: {order.number_of_pages}",
            f"Estimated price: {order.estimated_price:g} AED",
            f"File: {order.original_file_name}",
        ]
        self._send(settings.admin_email, f"New Translation Request - {order.customer_name}", "\n".join(lines))
