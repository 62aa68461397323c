"""
Explicit command dispatch table for WebSocket text frames.

When enabled (WS_COMMANDS_ENABLED), a frame whose text matches a registered
command name is answered to the sender only instead of being broadcast.
"""

from typing import Awaitable, Callable

from potato_server.logging import logger

CommandHandlerType = Callable[[str], Awaitable[str]]


class CommandTable:
    """
    Registry mapping exact command names to async reply handlers.
    """

    def __init__(self) -> None:
        self.handlers_registry: dict[str, CommandHandlerType] = {}

    def register(self, *names: str) -> Callable[[CommandHandlerType], CommandHandlerType]:
        """
        Decorator registering a handler for one or more command names.

        Registering the same handler again is a no-op; registering a
        different handler under a taken name raises ValueError.

        Args:
            *names: Command names the handler answers to.

        Returns:
            A decorator that registers and returns the handler unchanged.
        """

        def decorator(func: CommandHandlerType) -> CommandHandlerType:
            for name in names:
                if name in self.handlers_registry:
                    if self.handlers_registry[name] is not func:
                        raise ValueError(
                            f"Different handler already registered for command {name!r}"
                        )
                    continue

                self.handlers_registry[name] = func
                logger.info(
                    f"Register {func.__module__}.{func.__name__} for command: {name}"
                )

            return func

        return decorator

    async def dispatch(self, text: str) -> str | None:
        """
        Run the handler registered for `text`.

        Args:
            text: The received frame text.

        Returns:
            The handler's reply, or None if `text` is not a command.
        """
        handler = self.handlers_registry.get(text.strip())
        if handler is None:
            return None
        return await handler(text)


command_table = CommandTable()


@command_table.register("command1")
async def command_one(text: str) -> str:
    return "Command 1 received and processed"


@command_table.register("command2")
async def command_two(text: str) -> str:
    return "Command 2 received and processed"
