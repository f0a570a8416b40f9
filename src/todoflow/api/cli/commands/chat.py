"""Chat command - Interactive chat mode."""

import asyncio

import typer

from todoflow.api.cli.output_formatter import TodoflowConsole
from todoflow.application.factory import TodoflowFactory
from todoflow.core.domain.models import ChatMessage

EXIT_WORDS = {"exit", "quit", "bye"}


def chat(ctx: typer.Context):
    """Start an interactive chat session with the todo agent.

    The conversation history is kept for the whole session and sent with
    every turn.

    Examples:
        todoflow chat
        todoflow --profile test --agent work chat
    """
    opts = ctx.obj or {}
    tf_console = TodoflowConsole(debug=opts.get("debug", False))
    tf_console.print_banner()
    tf_console.print_system_message(
        f"Profile: {opts.get('profile')} | Agent: {opts.get('agent_type')}", "info"
    )
    tf_console.print_system_message("Type 'exit', 'quit', or press Ctrl+C to end session", "info")
    tf_console.print_divider()

    service = TodoflowFactory(opts.get("config_dir", "configs")).create_chat_service(
        opts.get("profile", "dev")
    )
    agent_type = opts.get("agent_type", "default")

    async def run_chat_loop():
        history: list[ChatMessage] = []
        while True:
            try:
                user_input = tf_console.prompt()
            except (KeyboardInterrupt, EOFError):
                break

            if user_input.strip().lower() in EXIT_WORDS:
                break
            if not user_input.strip():
                continue

            response = await service.handle(user_input, agent_type, history)
            if not response.success:
                tf_console.print_error(response.error or "Failed to process message")
                continue

            history.append(response.user_message)
            history.append(response.message)
            tf_console.print_agent_message(response.message)

        tf_console.print_divider()
        tf_console.print_system_message("Goodbye!", "info")

    asyncio.run(run_chat_loop())
