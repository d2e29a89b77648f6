#!/usr/bin/env python3
"""
SOC Portal CLI - Main Entry Point

Usage:
    soc-portal login                    # Login and store session cookies
    soc-portal status --path /user_dashboard
    soc-portal watch                    # Track activity until the session expires
    soc-portal logout
"""

import argparse
import asyncio
import sys
import threading

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt

from soc_cli.api_client import PortalClient
from soc_cli.auth_guard import AuthGuard, GuardState
from soc_cli.config import ClientConfig
from soc_cli.notifier import ConsoleNotifier
from soc_cli.session_tracker import SessionActivityTracker, EXPIRED_REDIRECT


console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI"""
    parser = argparse.ArgumentParser(
        prog="soc-portal",
        description="SOC Portal - session client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  soc-portal login                                  Login to the portal
  soc-portal status                                 Check the current session
  soc-portal status --path /admin_dashboard --role Admin --role "Super Admin"
  soc-portal watch                                  Keep the session alive while typing
  soc-portal logout                                 End the session
        """
    )

    parser.add_argument(
        "--server-url",
        type=str,
        default=None,
        help="Backend API URL (default: SOC_PORTAL_API_URL or http://localhost:8000/api/v1)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    login_parser = subparsers.add_parser("login", help="Login to SOC Portal")
    login_parser.add_argument("--email", "-e", help="Account email")

    status_parser = subparsers.add_parser("status", help="Run the auth guard for a page")
    status_parser.add_argument("--path", default="/user_dashboard", help="Page path to check")
    status_parser.add_argument(
        "--role", dest="roles", action="append", default=[],
        help="Required role (repeatable); none means any authenticated role"
    )

    subparsers.add_parser("watch", help="Track activity (one stdin line = one keypress) until expiry")
    subparsers.add_parser("logout", help="Logout from SOC Portal")

    return parser


async def run_login(client: PortalClient, config: ClientConfig, email: str = None) -> bool:
    console.print(Panel("[bold cyan]SOC Portal - Login[/bold cyan]", border_style="cyan"))
    email = email or Prompt.ask("Email")
    password = Prompt.ask("Password", password=True)

    response = await client.login(email, password)
    if not response.ok:
        console.print(f"[red]✗ Login failed: {response.message or response.status_code}[/red]")
        return False

    client.save_cookies(config.cookie_file)
    console.print(f"[green]✓ {response.message}[/green]")
    console.print(
        f"[bold]Role:[/bold] {response.data.get('role')}  "
        f"[bold]ID:[/bold] {response.data.get('socPortalId')}  "
        f"[bold]Home:[/bold] {response.data.get('redirectUrl')}"
    )
    return True


async def run_status(client: PortalClient, config: ClientConfig, path: str, roles) -> bool:
    guard = AuthGuard(
        client,
        required_roles=roles,
        path=path,
        notifier=ConsoleNotifier(console),
    )
    state = await guard.mount()
    client.save_cookies(config.cookie_file)

    if state == GuardState.AUTHORIZED:
        console.print(Panel(
            f"[green]Authorized[/green]\n\n"
            f"[bold]Path:[/bold] {guard.path}\n"
            f"[bold]Role:[/bold] {guard.role}\n"
            f"[bold]User type:[/bold] {guard.user_type}\n"
            f"[bold]SOC Portal ID:[/bold] {guard.soc_portal_id}",
            title="Session Status",
            border_style="green"
        ))
        return True

    console.print(Panel(
        f"[red]Not authorized[/red]\n\n"
        f"[bold]Path:[/bold] {guard.path}\n"
        f"[bold]Redirect:[/bold] {guard.redirect_to}",
        title="Session Status",
        border_style="red"
    ))
    return False


async def run_watch(client: PortalClient, config: ClientConfig) -> bool:
    expired = asyncio.Event()

    def navigate(url: str) -> None:
        console.print(f"[dim]→ {url}[/dim]")
        if url == EXPIRED_REDIRECT:
            expired.set()

    tracker = SessionActivityTracker(
        client.cookies,
        config.session_policy,
        client,
        ConsoleNotifier(console),
        navigate,
        poll_interval=config.poll_interval_seconds,
        debounce_seconds=config.debounce_seconds,
        lock_seconds=config.expiration_lock_seconds,
    )

    loop = asyncio.get_running_loop()
    stdin_closed = asyncio.Event()

    def read_input() -> None:
        # Daemon thread: a blocked readline must not hold up interpreter exit
        for _ in iter(sys.stdin.readline, ""):
            loop.call_soon_threadsafe(tracker.record_activity, "keydown")
        loop.call_soon_threadsafe(stdin_closed.set)

    console.print(
        f"[cyan]Watching session (timeout {config.session_timeout_minutes:g} min). "
        f"Press Enter to register activity, Ctrl+C to stop.[/cyan]"
    )
    teardown = tracker.start()
    threading.Thread(target=read_input, daemon=True).start()
    waiters = {
        asyncio.create_task(expired.wait()),
        asyncio.create_task(stdin_closed.wait()),
    }
    try:
        await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
    finally:
        teardown()
        for waiter in waiters:
            waiter.cancel()
        if expired.is_set():
            client.forget_cookies(config.cookie_file)
        else:
            client.save_cookies(config.cookie_file)
    return not expired.is_set()


async def run_logout(client: PortalClient, config: ClientConfig) -> bool:
    response = await client.logout()
    client.forget_cookies(config.cookie_file)
    if response.ok:
        console.print(f"[green]✓ {response.message}[/green]")
    else:
        console.print(f"[yellow]{response.message or 'Logout completed with some errors'}[/yellow]")
    return response.ok


async def dispatch(args, config: ClientConfig) -> bool:
    async with PortalClient(config.server_url, timeout=config.timeout) as client:
        client.load_cookies(config.cookie_file)

        if args.command == "login":
            return await run_login(client, config, args.email)
        if args.command == "status":
            return await run_status(client, config, args.path, args.roles)
        if args.command == "watch":
            return await run_watch(client, config)
        if args.command == "logout":
            return await run_logout(client, config)
    return False


def main():
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = ClientConfig.load_default()
    if args.server_url:
        config.server_url = args.server_url

    try:
        success = asyncio.run(dispatch(args, config))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except Exception as e:
        # httpx connection failures land here
        console.print(f"[red]Error: {e}[/red]")
        console.print("[dim]Is the backend server running?[/dim]")
        sys.exit(1)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
