"""
Resilient session loop

Keeps one connection alive for the lifetime of the process. Failures are
recorded and retried instead of ending the process; the connection is only
abandoned (closed, then reconnected on the next tick) after a long silence
or when the server has closed the stream.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from .config import BotConfig
from .exceptions import BotError, EndOfStreamError, IRCConnectionError, ServerError
from .irc_message import REPLY_WELCOME
from .timezone_utils import rfc3339_timestamp

# Silence tolerated before we force a reconnect
WAIT_PERIOD = 15 * 60
POLL_INTERVAL = 1

logger = logging.getLogger(__name__)

@dataclass
class SessionState:
    last_activity_time: float = 0.0
    errors: List[str] = field(default_factory=list)

    def mark_activity(self, now: Optional[float] = None) -> None:
        self.last_activity_time = time.time() if now is None else now

    def add_error(self, fmt: str, *args) -> str:
        """Record a timestamped error for later replay to the channels"""
        message = fmt % args if args else fmt
        entry = f"{rfc3339_timestamp()}: {message}"
        logger.error(entry)
        self.errors.append(entry)
        return entry

    def should_give_up(self, now: Optional[float] = None) -> bool:
        if now is None:
            now = time.time()
        return now - self.last_activity_time > WAIT_PERIOD


class Session:
    """Connect, answer PINGs, replay errors, and never exit on its own."""

    def __init__(self, config: BotConfig, client, state: Optional[SessionState] = None) -> None:
        self.config = config
        self.client = client
        self.state = state if state is not None else SessionState()
        self.logger = logging.getLogger(f"bot.{config.SERVER_HOST}")

    async def run(self):
        """Main loop. Only returns if the task is cancelled."""
        self.logger.info(f"🚀 Starting session: {self.config.describe()}")
        while True:
            await asyncio.sleep(POLL_INTERVAL)
            await self.tick()

    async def tick(self):
        """One pass of the loop: (re)connect, or read and react to one message"""
        if not self.client.is_connected():
            try:
                await self.connect()
            except BotError as e:
                self.state.add_error("error connecting: %s", e)
                await self.client.close()
                return
            self.state.mark_activity()
            return

        try:
            message = await self.client.read_message()
        except BotError as e:
            self.state.add_error("error reading: %s", e)
            # After EOF every read fails the same way, so don't wait it out
            if self.state.should_give_up() or isinstance(e, EndOfStreamError):
                await self._give_up()
            return

        self.state.mark_activity()

        if message.command == "ERROR":
            self.state.add_error("got ERROR: %s", message)
            await self._give_up()
            return

        if message.command != "PING":
            return

        try:
            await self.client.pong(message)
        except BotError as e:
            self.state.add_error("error PONGing: %s", e)
            if self.state.should_give_up():
                await self._give_up()
            return

        self.state.mark_activity()

        try:
            await self.send_messages()
        except BotError as e:
            self.state.add_error("error messaging: %s", e)
            if self.state.should_give_up():
                await self._give_up()

    async def connect(self):
        """Connect, register, and join every channel, or raise"""
        await self.client.connect()
        await self.client.register()

        while True:
            message = await self.client.read_message()

            if message.command == REPLY_WELCOME:
                self.logger.info("✅ Received IRC welcome message (001)")
                self.client.set_registered()

                for channel in self.config.CHANNELS:
                    try:
                        await self.client.join(channel)
                    except BotError as e:
                        raise IRCConnectionError(
                            f"error joining channel: {channel}: {e}"
                        ) from e
                self.logger.info(f"Joined {', '.join(self.config.CHANNELS)}")
                return

            if message.command == "ERROR":
                raise ServerError(f"received ERROR: {message}")

            # Some servers hold back the welcome until their PING is answered
            if message.command == "PING":
                await self.client.pong(message)

    async def send_messages(self):
        """Replay queued errors to every channel.

        On failure the log keeps the entries from the failed one onward,
        so they are retried at the next opportunity.
        """
        for channel in self.config.CHANNELS:
            for i, entry in enumerate(self.state.errors):
                try:
                    await self.client.message(channel, entry)
                except BotError:
                    self.state.errors = self.state.errors[i:]
                    raise
                self.state.mark_activity()

        if self.state.errors:
            self.logger.info(f"Replayed {len(self.state.errors)} error(s) to channels")
        self.state.errors = []

    async def _give_up(self):
        self.logger.warning("Closing connection, will reconnect")
        await self.client.close()
