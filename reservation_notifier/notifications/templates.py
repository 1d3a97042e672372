"""Template rendering for reservation notification emails using Jinja2.

Each notification type maps to a subject line plus an HTML and a plain text
template in the reservation_notifier.notifications.email_templates package.
StrictUndefined is used so a template referring to a variable the renderer
does not supply fails loudly instead of rendering an empty string.
"""

import logging
from typing import Dict, NamedTuple, Optional, Union

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError, select_autoescape
from pydantic import BaseModel, ConfigDict

from reservation_notifier.config.models import DEFAULT_APP_NAME, DEFAULT_SUPPORT_EMAIL
from reservation_notifier.domain.models import NotificationType
from reservation_notifier.utils.timestamps import utc_now

from .models import NotificationTemplateError, RenderedEmail, UnknownTemplateType

logger = logging.getLogger(__name__)


class ReservationEmailData(BaseModel):
    """Reservation details available to the email templates.

    Optional fields render their line only when present.
    """

    model_config = ConfigDict(frozen=True)

    user_email: str
    reservation_id: str
    user_id: Optional[str] = None
    device_name: Optional[str] = None
    reserved_at: Optional[str] = None
    expires_at: Optional[str] = None
    collected_at: Optional[str] = None
    return_due_at: Optional[str] = None
    returned_at: Optional[str] = None


class EmailTemplate(NamedTuple):
    subject: str
    html_template: str
    text_template: str


TEMPLATES: Dict[NotificationType, EmailTemplate] = {
    NotificationType.RESERVATION_CREATED: EmailTemplate(
        "Your reservation is confirmed",
        "reservation_created.html.j2",
        "reservation_created.txt.j2",
    ),
    NotificationType.RESERVATION_COLLECTED: EmailTemplate(
        "Device collected successfully",
        "reservation_collected.html.j2",
        "reservation_collected.txt.j2",
    ),
    NotificationType.RESERVATION_RETURNED: EmailTemplate(
        "Device returned - Thank you!",
        "reservation_returned.html.j2",
        "reservation_returned.txt.j2",
    ),
    NotificationType.RESERVATION_CANCELLED: EmailTemplate(
        "Reservation cancelled",
        "reservation_cancelled.html.j2",
        "reservation_cancelled.txt.j2",
    ),
    NotificationType.RESERVATION_EXPIRED: EmailTemplate(
        "Reservation expired",
        "reservation_expired.html.j2",
        "reservation_expired.txt.j2",
    ),
    NotificationType.RESERVATION_OVERDUE: EmailTemplate(
        "⚠️ URGENT: Device return overdue",
        "reservation_overdue.html.j2",
        "reservation_overdue.txt.j2",
    ),
}


class TemplateRenderer:
    """Renders reservation emails using Jinja2.

    Templates are loaded once per environment and cached by Jinja2 for reuse
    across invocations.
    """

    def __init__(
        self,
        app_name: str = DEFAULT_APP_NAME,
        support_email: str = DEFAULT_SUPPORT_EMAIL,
        template_dir: str = "email_templates",
    ):
        """Initialize template renderer with Jinja2 environment.

        Args:
            app_name: Product name used in subjects, headers and footers
            support_email: Contact address printed in every email
            template_dir: Directory name within the notifications package
        """
        self.app_name = app_name
        self.support_email = support_email

        self.env = Environment(
            loader=PackageLoader("reservation_notifier.notifications", template_dir),
            autoescape=select_autoescape(enabled_extensions=("html.j2",), default=False),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

        logger.debug(f"Initialized TemplateRenderer with templates from {template_dir}")

    def render(
        self,
        notification_type: Union[NotificationType, str],
        data: ReservationEmailData,
    ) -> RenderedEmail:
        """Render subject, HTML body and text body for a notification type.

        Raises:
            UnknownTemplateType: If no template exists for the type
            NotificationTemplateError: If template rendering fails
        """
        template = _lookup(notification_type)

        context = data.model_dump()
        context.update(
            app_name=self.app_name,
            support_email=self.support_email,
            year=utc_now().year,
        )

        try:
            html_body = self.env.get_template(template.html_template).render(context)
            text_body = self.env.get_template(template.text_template).render(context)
        except TemplateError as e:
            error_msg = f"Template rendering failed: {e}"
            logger.error(error_msg, exc_info=True)
            raise NotificationTemplateError(error_msg) from e

        logger.debug(f"Rendered {template.html_template} for reservation {data.reservation_id}")

        return RenderedEmail(
            subject=f"{self.app_name} - {template.subject}",
            html_body=html_body,
            text_body=text_body,
        )


def _lookup(notification_type: Union[NotificationType, str]) -> EmailTemplate:
    try:
        return TEMPLATES[NotificationType(notification_type)]
    except (ValueError, KeyError):
        raise UnknownTemplateType(notification_type) from None


def select_template(
    notification_type: Union[NotificationType, str],
    data: ReservationEmailData,
) -> RenderedEmail:
    """Render a notification with the default branding.

    Builds a fresh TemplateRenderer per call; long-lived callers should hold
    their own renderer instead.

    Example:
        >>> data = ReservationEmailData(user_email="a@b.edu", reservation_id="R1")
        >>> select_template(NotificationType.RESERVATION_CANCELLED, data).subject
        'Device Loan System - Reservation cancelled'
    """
    return TemplateRenderer().render(notification_type, data)
