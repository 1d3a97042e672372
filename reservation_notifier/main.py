"""Main entry point for the Reservation Notifier service."""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import IO, Any, List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from reservation_notifier.config.environment import EnvironmentConfig
from reservation_notifier.config.exceptions import ConfigurationError
from reservation_notifier.config.loader import load_config
from reservation_notifier.config.models import AppConfig
from reservation_notifier.domain.models import NotificationStatus
from reservation_notifier.events.handler import EventHandlingResult, ReservationEventHandler
from reservation_notifier.logging import get_logger
from reservation_notifier.logging.config import SERVICE_NAME, configure_logging
from reservation_notifier.notifications.service import NotificationService
from reservation_notifier.notifications.smtp_client import SMTPEmailSender
from reservation_notifier.notifications.templates import TemplateRenderer
from reservation_notifier.persistence.database import check_database, close_database, init_database
from reservation_notifier.persistence.exceptions import PersistenceError
from reservation_notifier.persistence.store import SqlNotificationStore
from reservation_notifier.utils.timestamps import format_timestamp, utc_now

logger = get_logger(__name__, component="cli")

# Commands that never send email can run without SMTP settings
SMTP_COMMANDS = frozenset({"handle-events"})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reservation-notifier",
        description="Reservation Notifier - Email notifications for device reservation events",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    handle_events = subparsers.add_parser(
        "handle-events",
        help="Send notifications for reservation events (one JSON event or a JSON array)",
    )
    handle_events.add_argument(
        "source",
        nargs="?",
        default="-",
        help="File containing the events, or '-' for stdin (default: -)",
    )

    list_parser = subparsers.add_parser(
        "list", help="Print stored notifications as JSON lines (Pending by default)"
    )
    list_parser.add_argument(
        "--status",
        choices=[status.value for status in NotificationStatus],
        default=None,
        help="Only notifications with this status",
    )
    list_parser.add_argument("--user", default=None, help="Only notifications for this user id")

    subparsers.add_parser("health", help="Check the notification store and report service health")

    return parser


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str], require_smtp: bool = True
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > Environment > Config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path, require_smtp=require_smtp)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def build_event_handler(
    app_config: AppConfig, env_config: EnvironmentConfig
) -> ReservationEventHandler:
    """Wire the event handler with its SMTP sender, store and templates."""
    notification_service = NotificationService(
        email_sender=SMTPEmailSender(env_config, use_tls=app_config.email.use_tls),
        notification_store=SqlNotificationStore(),
        template_renderer=TemplateRenderer(
            app_name=app_config.branding.app_name,
            support_email=app_config.branding.support_email,
        ),
    )
    return ReservationEventHandler(notification_service)


def read_events(source: str, stdin: Optional[IO[str]] = None) -> List[Any]:
    """
    Read one JSON event or a JSON array of events.

    Raises:
        ValueError: If the input is not valid JSON
        OSError: If the file cannot be read
    """
    if source == "-":
        raw = (stdin or sys.stdin).read()
    else:
        raw = Path(source).read_text(encoding="utf-8")

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {source if source != '-' else 'stdin'}: {e}") from e

    return payload if isinstance(payload, list) else [payload]


def _result_line(result: EventHandlingResult) -> str:
    return json.dumps(
        {
            "event_id": result.event_id,
            "outcome": result.outcome.value,
            "notification_type": result.notification_type.value if result.notification_type else None,
            "notification_id": result.notification_id,
            "error": result.error,
        },
        ensure_ascii=False,
    )


def run_handle_events(
    args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig
) -> int:
    try:
        payloads = read_events(args.source)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(f"Could not read events: {e}", extra={"event": "events.read_failed"})
        return 1

    handler = build_event_handler(app_config, env_config)
    for result in handler.handle_batch(payloads):
        print(_result_line(result))

    # Delivery failures are recorded in the store, not reported through the exit code
    return 0


def run_list(args: argparse.Namespace) -> int:
    store = SqlNotificationStore()

    try:
        if args.user:
            notifications = store.list_by_user_id(args.user)
            if args.status:
                notifications = [n for n in notifications if n.status.value == args.status]
        else:
            notifications = store.list_by_status(
                NotificationStatus(args.status or NotificationStatus.PENDING.value)
            )
    except PersistenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for notification in notifications:
        print(
            json.dumps(
                notification.model_dump(mode="json", exclude={"html_body", "text_body"}),
                ensure_ascii=False,
            )
        )

    return 0


def run_health(env_config: EnvironmentConfig) -> int:
    report = {
        "status": "healthy",
        "service": SERVICE_NAME,
        "timestamp": format_timestamp(utc_now()),
    }

    try:
        init_database(env_config.database_url)
        check_database()
    except PersistenceError as e:
        report["status"] = "unhealthy"
        report["error"] = str(e)

    print(json.dumps(report))
    return 0 if report["status"] == "healthy" else 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the Reservation Notifier.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config, env_config = load_runtime_config(
            args.config, args.log_level, require_smtp=args.command in SMTP_COMMANDS
        )

        environment = os.environ.get("ENVIRONMENT", "local")
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=environment,
        )

        logger.info(
            "Reservation Notifier starting",
            extra={
                "event": "service.starting",
                "command": args.command,
                "config_path": str(args.config) if args.config else None,
                "log_level": env_config.log_level,
            },
        )

        if args.command == "health":
            return run_health(env_config)

        init_database(env_config.database_url)

        if args.command == "handle-events":
            return run_handle_events(args, app_config, env_config)
        return run_list(args)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return 1
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error during startup",
            extra={
                "event": "service.startup.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1
    finally:
        close_database()


if __name__ == "__main__":
    sys.exit(main())
