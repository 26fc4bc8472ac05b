#!/usr/bin/env python3
"""Interactive chat CLI running the agent in-process."""

import asyncio
import sys

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt

from familiar.config import Settings, get_settings
from familiar.factory import build_context
from familiar.models.events import MessageAppended, StatusChanged, TurnEvent
from familiar.services.orchestrator import Orchestrator
from familiar.utils.logging import LogConfig, setup_logging


class ChatCLI:
    """Interactive chat interface driving the orchestrator over its transport."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.console = Console()

    async def start(self) -> None:
        """Start the interactive chat session."""
        self.console.print(
            Panel.fit(
                f"[bold blue]{self.settings.persona_name} - Interactive Chat[/bold blue]\n"
                "Type your messages to chat with the agent.\n"
                "Commands: /help, /clear, /quit",
                border_style="blue",
            )
        )

        context = await build_context(self.settings)
        orchestrator = Orchestrator(context)
        transport = context.transport

        with transport.subscription() as events:
            await orchestrator.start()
            self._drain(events)

            task = asyncio.create_task(orchestrator.run())
            try:
                while True:
                    user_input = await asyncio.to_thread(Prompt.ask, "\n[bold cyan]You[/bold cyan]")

                    if user_input.lower() in ["/quit", "/exit", "quit", "exit"]:
                        break
                    elif user_input.lower() == "/help":
                        self._show_help()
                        continue
                    elif user_input.lower() == "/clear":
                        user_input = self.settings.reset_sentinel
                    elif user_input.strip() == "":
                        continue

                    await transport.send(user_input)
                    await self._wait_for_turn(events)

            except (KeyboardInterrupt, EOFError):
                pass
            finally:
                task.cancel()
                self.console.print("\n[yellow]Goodbye![/yellow]")

    async def _wait_for_turn(self, events: asyncio.Queue[TurnEvent]) -> None:
        """Display events until the orchestrator reports it is idle again."""
        while True:
            event = await events.get()
            self._display_event(event)
            if isinstance(event, StatusChanged) and not event.is_busy:
                return

    def _drain(self, events: asyncio.Queue[TurnEvent]) -> None:
        while not events.empty():
            self._display_event(events.get_nowait())

    def _display_event(self, event: TurnEvent) -> None:
        if isinstance(event, StatusChanged):
            style = "red" if event.label == "LLM Error" else "dim"
            label = f"{event.label}..." if event.is_busy else event.label
            self.console.print(f"[{style}]{label}[/{style}]")
            return

        if isinstance(event, MessageAppended) and event.role == "assistant":
            self.console.print(
                Panel(
                    Markdown(event.content),
                    title=f"[bold green]{self.settings.persona_name}[/bold green]",
                    border_style="green",
                    padding=(1, 2),
                )
            )
        else:
            self.console.print(f"[yellow]{event.content}[/yellow]")

    def _show_help(self) -> None:
        """Show help information."""
        help_text = """
[bold]Available Commands:[/bold]
• /help - Show this help message
• /clear - Clear the conversation history
• /quit or /exit - Exit the chat

[bold]Example Conversation:[/bold]
1. "What files are in the current directory?"
2. "Read README.md and summarize it"
3. "What is the title of https://example.com?"
        """

        self.console.print(Panel(help_text.strip(), title="[cyan]Help[/cyan]", border_style="cyan"))


def main():
    """Main entry point for the chat CLI."""
    settings = get_settings()
    if len(sys.argv) > 1:
        settings = settings.model_copy(update={"db_path": sys.argv[1]})

    setup_logging(LogConfig(level=settings.log_level))
    asyncio.run(ChatCLI(settings).start())


if __name__ == "__main__":
    main()
