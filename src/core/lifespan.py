"""Composable FastAPI lifespan.

Modules register their own startup/shutdown context with ``@manager.add``;
the yielded dicts are merged into the application state, which is how route
dependencies reach shared resources such as the activities HTTP client.
"""

from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any, AsyncIterator, Callable

from fastapi import FastAPI


class LifespanManager:
    """Runs every registered lifespan context and merges their states."""

    def __init__(self):
        self._lifespans: list[Callable] = []

    def add(self, lifespan: Callable) -> Callable:
        """Register a lifespan context factory.

        The factory may take the ``FastAPI`` app as its only argument or no
        argument at all.
        """
        self._lifespans.append(lifespan)
        return lifespan

    @asynccontextmanager
    async def __call__(self, app: FastAPI) -> AsyncIterator[dict[str, Any]]:
        async with AsyncExitStack() as stack:
            combined_state: dict[str, Any] = {}

            for lifespan_func in self._lifespans:
                try:
                    context = lifespan_func(app)
                except TypeError:
                    context = lifespan_func()

                state = await stack.enter_async_context(context)
                if state:
                    combined_state.update(state)

            yield combined_state


manager = LifespanManager()
