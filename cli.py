#!/usr/bin/env python3
import argparse
import asyncio
import json
import logging
import sys
import time
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table

from sendivent.config import ConfigError, ConfigLoader
from sendivent.main import SendiventApp
from sendivent.providers.exceptions import DispatchError

SEND_MODES = ["wait", "background", "best-effort"]


class SendiventCLI:
    """CLI interface for the Sendivent SDK."""

    def __init__(self, config_file: str = "config.yaml", env_file: str = ".env"):
        self.console = Console()
        self.config_file = config_file
        self.env_file = env_file
        self.app: Optional[SendiventApp] = None

    def initialize(self):
        """Initialize the CLI with configuration and the client."""
        try:
            self._configure_cli_logging()

            self.app = SendiventApp(self.config_file, self.env_file)
            self.app.initialize(configure_logging=False)

            environment = self.app.client.environment.value.upper()
            self.console.print(f"✅ Client initialized ({environment})", style="green")

        except Exception as e:
            self.console.print(f"❌ Failed to initialize CLI: {e}", style="red")
            raise

    def _configure_cli_logging(self):
        """Keep library logging quiet unless something goes wrong."""
        logging.basicConfig(
            level=logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )
        for module in ["sendivent", "aiohttp", "asyncio"]:
            logging.getLogger(module).setLevel(logging.WARNING)

    @staticmethod
    def _parse_overrides(items: Optional[List[str]]) -> Dict[str, Any]:
        """Parse KEY=VALUE pairs; values are JSON-decoded when possible."""
        overrides: Dict[str, Any] = {}
        for item in items or []:
            if "=" not in item:
                raise ValueError(f"Override must be KEY=VALUE, got: {item}")
            key, value = item.split("=", 1)
            try:
                overrides[key.strip()] = json.loads(value)
            except json.JSONDecodeError:
                overrides[key.strip()] = value
        return overrides

    @staticmethod
    def _parse_recipients(items: Optional[List[str]]) -> Optional[Any]:
        """A single --to is sent as-is; several become a list. JSON objects are contacts."""
        if not items:
            return None

        recipients = []
        for item in items:
            text = item.strip()
            recipients.append(json.loads(text) if text.startswith("{") else text)

        return recipients[0] if len(recipients) == 1 else recipients

    async def send(
        self,
        event: str,
        to: Optional[List[str]] = None,
        payload: Optional[str] = None,
        channel: Optional[str] = None,
        language: Optional[str] = None,
        overrides: Optional[List[str]] = None,
        sender: Optional[str] = None,
        idempotency_key: Optional[str] = None,
        mode: str = "wait",
    ) -> bool:
        """Send one notification in the requested mode."""
        client = self.app.client

        try:
            client.event(event)
            recipients = self._parse_recipients(to)
            if recipients is not None:
                client.to(recipients)
            if payload:
                client.payload(json.loads(payload))
            if channel:
                client.channel(channel)
            if language:
                client.language(language)
            parsed_overrides = self._parse_overrides(overrides)
            if parsed_overrides:
                client.overrides(parsed_overrides)
            if sender:
                client.sender(json.loads(sender) if sender.strip().startswith("{") else sender)
            if idempotency_key:
                client.idempotency_key(idempotency_key)
        except (ValueError, ConfigError) as e:
            self.console.print(f"❌ Invalid request: {e}", style="red")
            return False

        request = client.build()
        self.console.print(f"📨 POST {client.base_url}{request.path}", style="blue")

        started = time.perf_counter()

        if mode == "best-effort":
            await client.send_best_effort()
            elapsed = time.perf_counter() - started
            self.console.print(
                f"🚀 Request written in {elapsed:.3f}s (no response read)", style="green"
            )
            return True

        try:
            if mode == "background":
                task = client.send_async()
                scheduled = time.perf_counter() - started
                self.console.print(f"🚀 Send scheduled in {scheduled:.3f}s", style="green")
                response = await task
            else:
                response = await client.send()
        except DispatchError as e:
            self.console.print(f"❌ {e}", style="red")
            if e.body:
                self.console.print(e.body, style="dim")
            return False

        elapsed = time.perf_counter() - started

        table = Table(title=f"Response ({elapsed:.3f}s)")
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="white")
        for key, value in response.to_dict().items():
            table.add_row(key, json.dumps(value) if not isinstance(value, str) else value)
        self.console.print(table)

        if response.is_success():
            self.console.print("✅ Notification accepted", style="green")
        else:
            self.console.print(f"❌ Notification rejected: {response.error}", style="red")
        return response.is_success()

    def config_show(self) -> bool:
        """Show the effective configuration with the API key masked."""
        config = self.app.config

        table = Table(title="Configuration")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="white")
        table.add_row("environment", config.environment)
        table.add_row("api_key", str(self.app.client.api_key) if config.api_key else "(not set)")
        table.add_row("base_url", self.app.client.base_url)
        table.add_row("dispatcher", f"{config.dispatcher.type} (enabled={config.dispatcher.enabled})")
        table.add_row("timeout_seconds", str(config.client.timeout_seconds))
        table.add_row("connect_timeout_seconds", str(config.client.connect_timeout_seconds))
        table.add_row("user_agent", config.client.user_agent)
        table.add_row("log_level", config.logging.level)
        self.console.print(table)
        return True


def config_validate(config_file: str, env_file: str) -> bool:
    """Validate configuration without creating a client."""
    console = Console()
    try:
        ConfigLoader(config_file, env_file).load()
    except ConfigError as e:
        console.print(f"❌ {e}", style="red")
        return False
    console.print("✅ Configuration is valid", style="green")
    return True


async def main():
    parser = argparse.ArgumentParser(
        description="Send notifications through the Sendivent API"
    )
    parser.add_argument(
        "--config", "-c", default="config.yaml", help="Configuration file"
    )
    parser.add_argument("--env", "-e", default=".env", help="Environment file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    send_parser = subparsers.add_parser("send", help="Send a notification")
    send_parser.add_argument("event", help="Event name")
    send_parser.add_argument(
        "--to", action="append", help="Recipient identifier or JSON contact (repeatable)"
    )
    send_parser.add_argument("--payload", help="Template payload as a JSON object")
    send_parser.add_argument("--channel", help="Force a channel (email, sms, slack, push)")
    send_parser.add_argument("--language", help="Language code, e.g. sv")
    send_parser.add_argument(
        "--override", action="append", help="Template override KEY=VALUE (repeatable)"
    )
    send_parser.add_argument("--from", dest="sender", help="Sender identifier or JSON contact")
    send_parser.add_argument("--idempotency-key", help="Idempotency key")
    send_parser.add_argument(
        "--mode", choices=SEND_MODES, default="wait", help="Dispatch mode (default: wait)"
    )

    config_parser = subparsers.add_parser("config", help="Configuration management")
    config_subparsers = config_parser.add_subparsers(dest="config_action")
    config_subparsers.add_parser("show", help="Show current configuration")
    config_subparsers.add_parser("validate", help="Validate configuration")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    if args.command == "config" and args.config_action == "validate":
        if not config_validate(args.config, args.env):
            sys.exit(1)
        return

    cli = SendiventCLI(args.config, args.env)

    try:
        cli.initialize()

        ok = True
        if args.command == "send":
            ok = await cli.send(
                args.event,
                to=args.to,
                payload=args.payload,
                channel=args.channel,
                language=args.language,
                overrides=args.override,
                sender=args.sender,
                idempotency_key=args.idempotency_key,
                mode=args.mode,
            )
        elif args.command == "config":
            if args.config_action == "show":
                ok = cli.config_show()
            else:
                config_parser.print_help()

        if not ok:
            sys.exit(1)

    except KeyboardInterrupt:
        cli.console.print("\n👋 Goodbye!", style="blue")
    except Exception as e:
        cli.console.print(f"❌ Fatal error: {e}", style="red")
        sys.exit(1)


def cli_entry_point():
    """Entry point for the installed sendivent command."""
    asyncio.run(main())


if __name__ == "__main__":
    asyncio.run(main())
