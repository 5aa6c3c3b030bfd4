#!/usr/bin/env python3
"""Terminal chat client for a LangGraph agent."""

import asyncio
import json
import sys

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from agent_chat.clients.langgraph import LangGraphStreamChannel
from agent_chat.config import ClientConfig
from agent_chat.models.messages import Message
from agent_chat.services.error_reporting import ConsoleNotifier
from agent_chat.services.thread import ThreadController
from agent_chat.services.view_state import ViewMode, ViewState
from agent_chat.utils.logging import setup_logging


class ChatCLI:
    """Interactive chat driven by a ThreadController."""

    def __init__(self, config: ClientConfig):
        """Initialize chat CLI."""
        self.config = config
        self.console = Console()
        self.channel = LangGraphStreamChannel(config, on_thread_id=self._on_thread_id)
        self.controller = ThreadController(
            self.channel,
            notifier=ConsoleNotifier(self.console),
            full_screen_ui_name=config.full_screen_ui_name,
        )
        self.controller.add_view_listener(self._on_view_state)
        self.rendered_ids: set[str] = set()
        self.shown_full_screen: str | None = None

    async def start(self) -> None:
        """Start the interactive chat session."""
        self.console.print(
            Panel(
                f"[bold blue]Agent Chat[/bold blue]\n\n"
                f"Assistant [cyan]{self.config.assistant_id}[/cyan] at {self.config.api_url}\n"
                "Type [bold]/help[/bold] for commands.",
                border_style="blue",
            )
        )

        while True:
            try:
                user_input = await asyncio.to_thread(self.console.input, "[bold green]You[/bold green]: ")
            except (KeyboardInterrupt, EOFError):
                self.console.print("\n[yellow]👋 Goodbye![/yellow]")
                break

            command = user_input.strip().lower()
            if command in ("/quit", "/exit"):
                self.console.print("[yellow]👋 Goodbye![/yellow]")
                break
            if command == "/help":
                self._show_help()
                continue
            if command == "/new":
                await self._switch_thread(None)
                continue
            if command.startswith("/thread "):
                await self._switch_thread(user_input.split(maxsplit=1)[1].strip())
                continue
            if command == "/hide-tools":
                self.controller.hide_tool_calls = not self.controller.hide_tool_calls
                state = "hidden" if self.controller.hide_tool_calls else "shown"
                self.console.print(f"[cyan]Tool calls {state}[/cyan]")
                continue

            if self.controller.submit(user_input) is None:
                continue

            await self._wait_for_run()
            self._render_new_messages()

    async def _wait_for_run(self) -> None:
        """Wait for the run to settle; Ctrl+C stops it."""
        try:
            with self.console.status("Generating..."):
                await self.channel.wait()
        except (KeyboardInterrupt, asyncio.CancelledError):
            # asyncio.run delivers Ctrl+C as a cancellation of the main task
            task = asyncio.current_task()
            if task is not None:
                task.uncancel()
            self.controller.request_cancel()
            await self.channel.wait()
            self.console.print("[yellow]Cancelled[/yellow]")

    async def _switch_thread(self, thread_id: str | None) -> None:
        """Start a new thread, or load an existing one and show its history."""
        await self.controller.new_thread(thread_id)
        self.rendered_ids.clear()
        self.shown_full_screen = None
        if thread_id is None:
            self.console.print("[cyan]Started a new thread[/cyan]")
            return
        self.console.print(f"[cyan]Switched to thread {thread_id}[/cyan]")
        self._render_new_messages()

    def _on_thread_id(self, thread_id: str) -> None:
        self.console.print(f"[dim]Thread {thread_id}[/dim]")

    def _on_view_state(self, state: ViewState) -> None:
        if state.mode != ViewMode.FULL_SCREEN or state.full_screen is None:
            self.shown_full_screen = None
            return
        if state.full_screen.id == self.shown_full_screen:
            return
        self.shown_full_screen = state.full_screen.id
        self.console.print(
            Panel(
                json.dumps(state.full_screen.props, indent=2),
                title=f"[magenta]{state.full_screen.name}[/magenta]",
                border_style="magenta",
            )
        )

    def _render_new_messages(self) -> None:
        for message in self.controller.visible_messages():
            if message.id and message.id in self.rendered_ids:
                continue
            if message.id:
                self.rendered_ids.add(message.id)
            self._display_message(message)

    def _display_message(self, message: Message) -> None:
        """Display a message with nice formatting."""
        if message.type == "human":
            return
        if message.type == "tool":
            self.console.print(Panel(message.text, title=f"[dim]🔧 {message.name}[/dim]", border_style="dim"))
            return

        if message.text:
            self.console.print(Panel(Markdown(message.text), title="[bold green]🤖 Agent[/bold green]", border_style="green"))
        for tool_call in message.tool_calls:
            self.console.print(f"[dim]→ {tool_call.name}({json.dumps(tool_call.args)})[/dim]")

    def _show_help(self) -> None:
        """Show help information."""
        help_text = """
[bold]Available Commands:[/bold]
• /help - Show this help message
• /new - Start a new thread
• /thread <id> - Continue an existing thread
• /hide-tools - Toggle display of tool calls and results
• /quit or /exit - Exit the chat

Press Ctrl+C while the agent is generating to stop the run.
        """

        self.console.print(Panel(help_text.strip(), title="[cyan]❓ Help[/cyan]", border_style="cyan"))


def main():
    """Main entry point for the chat CLI."""
    config = ClientConfig.from_env()
    if len(sys.argv) > 1:
        config = config.model_copy(update={"api_url": sys.argv[1]})

    setup_logging(config.log_config().model_copy(update={"level": "WARNING"}))
    asyncio.run(ChatCLI(config).start())


if __name__ == "__main__":
    main()
