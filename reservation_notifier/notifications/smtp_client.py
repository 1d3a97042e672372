"""SMTP email transport.

This module provides the EmailSender contract the orchestrator depends on,
a thin wrapper around Python's smtplib with support for TLS/SSL,
authentication and connection lifecycle management, and the SMTPEmailSender
that joins the two.
"""

import logging
import smtplib
import ssl
from abc import ABC, abstractmethod
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Callable, List, Optional

from reservation_notifier.config.environment import EnvironmentConfig
from reservation_notifier.logging import get_logger

from .models import EmailContent, EmailSendResult, EmailTransportError, SMTPDeliveryError

logger = get_logger(__name__, component="smtp")


class EmailSender(ABC):
    """Delivers a single email.

    Implementations report ordinary delivery failures through
    EmailSendResult(success=False) and raise only for faults they cannot
    classify.
    """

    @abstractmethod
    def send(self, content: EmailContent) -> EmailSendResult:
        """Attempt delivery of one email."""


class SMTPClient:
    """Wrapper around smtplib for sending email messages.

    Handles connection lifecycle, TLS/SSL negotiation and authentication.
    Designed to be easily mockable for testing.
    """

    def __init__(
        self,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
    ):
        """Initialize SMTP client with optional factory injection.

        Args:
            smtp_factory: Factory function for creating SMTP instances (for mocking)
            smtp_ssl_factory: Factory function for creating SMTP_SSL instances (for mocking)
        """
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL

    def send(
        self,
        message: EmailMessage,
        env_config: EnvironmentConfig,
        use_tls: bool = True,
        to_addrs: Optional[List[str]] = None,
    ) -> None:
        """Send an email message via SMTP.

        Args:
            message: Fully constructed EmailMessage to send
            env_config: Environment configuration with SMTP settings
            use_tls: Whether to upgrade plain connections with STARTTLS
            to_addrs: Envelope recipients (parsed from the To header if None)

        Raises:
            SMTPDeliveryError: If the server rejects the message
            EmailTransportError: If the server cannot be reached
        """
        smtp = None
        try:
            if env_config.smtp_port == 465:
                # Port 465: Implicit TLS (SMTP_SSL)
                logger.debug(
                    f"Connecting to {env_config.smtp_host}:{env_config.smtp_port} with implicit TLS"
                )
                context = ssl.create_default_context()
                smtp = self.smtp_ssl_factory(
                    env_config.smtp_host, env_config.smtp_port, context=context
                )
            else:
                logger.debug(f"Connecting to {env_config.smtp_host}:{env_config.smtp_port}")
                smtp = self.smtp_factory(env_config.smtp_host, env_config.smtp_port)

                if use_tls:
                    logger.debug("Upgrading connection with STARTTLS")
                    context = ssl.create_default_context()
                    smtp.starttls(context=context)

            if env_config.smtp_user and env_config.smtp_pass:
                logger.debug(f"Authenticating as {env_config.smtp_user}")
                smtp.login(env_config.smtp_user, env_config.smtp_pass)
            else:
                logger.debug("No authentication credentials provided, proceeding without auth")

            smtp.send_message(message, to_addrs=to_addrs)
            logger.debug(f"Message sent successfully to {message['To']}")

        except smtplib.SMTPException as e:
            error_msg = f"SMTP error during message delivery: {e}"
            logger.error(error_msg)
            raise SMTPDeliveryError(error_msg) from e
        except OSError as e:
            error_msg = f"Network error during SMTP connection: {e}"
            logger.error(error_msg)
            raise EmailTransportError(error_msg) from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except (smtplib.SMTPException, OSError) as e:
                    logger.warning(f"Error closing SMTP connection: {e}")


def build_sender_address(env_config: EnvironmentConfig) -> str:
    """Build the 'From' address for outgoing emails.

    Returns:
        Formatted sender address (e.g., "Device Loan System <noreply@deviceloan.edu>")
    """
    return f"{env_config.smtp_sender_name} <{env_config.sender_address}>"


class SMTPEmailSender(EmailSender):
    """EmailSender that delivers through an SMTP server."""

    def __init__(
        self,
        env_config: EnvironmentConfig,
        use_tls: bool = True,
        smtp_client: Optional[SMTPClient] = None,
    ):
        self.env_config = env_config
        self.use_tls = use_tls
        self.smtp_client = smtp_client or SMTPClient()
        self.sender = build_sender_address(env_config)

    def build_message(self, content: EmailContent) -> EmailMessage:
        """Build a multipart message with a plain text part and an HTML alternative."""
        message = EmailMessage()
        message["Subject"] = content.subject
        message["From"] = self.sender
        message["To"] = content.to
        message["Message-ID"] = make_msgid(domain=self.env_config.sender_address.rpartition("@")[2])

        # Clients without HTML support fall back to the text part
        message.set_content(content.text_body or "")
        message.add_alternative(content.html_body, subtype="html")
        return message

    def send(self, content: EmailContent) -> EmailSendResult:
        message = self.build_message(content)
        message_id = message["Message-ID"]

        try:
            # The envelope carries exactly the stored address, never a re-parse of To
            self.smtp_client.send(message, self.env_config, self.use_tls, to_addrs=[content.to])
        except SMTPDeliveryError as e:
            return EmailSendResult(success=False, error=str(e))

        logger.info(
            f"Email accepted by SMTP server for {content.to}",
            extra={"event": "email.send.accepted", "message_id": message_id},
        )
        return EmailSendResult(success=True, message_id=message_id)
