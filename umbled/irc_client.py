"""
Asyncio IRC client connection
Thin wrapper over a stream pair; every failure surfaces as a BotError
"""

import asyncio
import logging
import ssl
from typing import Optional

from .exceptions import EndOfStreamError, IRCConnectionError
from .irc_message import MAX_LINE_LENGTH, Message, parse_message

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5 * 60
CLOSE_TIMEOUT = 5

class IRCClient:
    """A single connection to an IRC server"""

    def __init__(self, nick: str, name: str, ident: str, host: str, port: int,
                 use_tls: bool = True) -> None:
        self.nick: str = nick
        self.name: str = name
        self.ident: str = ident
        self.host: str = host
        self.port: int = port
        self.use_tls: bool = use_tls

        self.timeout_time: float = DEFAULT_TIMEOUT
        self.registered: bool = False
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None

    def set_timeout_time(self, seconds: float) -> None:
        """How long any single connect or read may block"""
        self.timeout_time = seconds

    def is_connected(self) -> bool:
        return self.writer is not None

    def set_registered(self) -> None:
        self.registered = True

    async def connect(self) -> None:
        if self.is_connected():
            raise IRCConnectionError("already connected")

        ssl_context = ssl.create_default_context() if self.use_tls else None
        logger.info(f"Connecting to {self.host}:{self.port} (tls={self.use_tls})")
        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port, ssl=ssl_context),
                timeout=self.timeout_time
            )
        except asyncio.TimeoutError:
            raise IRCConnectionError(
                f"timed out connecting to {self.host}:{self.port}"
            )
        except (OSError, ValueError) as e:
            # UnicodeError (a ValueError) for host names IDNA cannot encode
            raise IRCConnectionError(f"failed to connect to {self.host}:{self.port}: {e}")

        self.registered = False
        logger.info("Connected successfully")

    async def close(self) -> None:
        """Close the connection. Safe to call when already closed."""
        writer = self.writer
        self.reader = None
        self.writer = None
        self.registered = False
        if writer is None:
            return

        writer.close()
        try:
            await asyncio.wait_for(writer.wait_closed(), timeout=CLOSE_TIMEOUT)
        except (OSError, asyncio.TimeoutError) as e:
            logger.debug(f"Error while closing connection: {e!r}")
        logger.info(f"Closed connection to {self.host}:{self.port}")

    async def read_message(self) -> Message:
        """Read the next non-blank line from the server and parse it"""
        if self.reader is None:
            raise IRCConnectionError("not connected")

        while True:
            try:
                data = await asyncio.wait_for(
                    self.reader.readline(), timeout=self.timeout_time
                )
            except asyncio.TimeoutError:
                raise IRCConnectionError(
                    f"no data from server in {self.timeout_time:g} seconds"
                )
            except (OSError, ValueError) as e:
                # ValueError comes from lines longer than the stream buffer
                raise IRCConnectionError(f"read failed: {e}")

            if not data:
                raise EndOfStreamError("connection closed by server")

            line = data.decode("utf-8", errors="replace").rstrip("\r\n")
            if not line.strip():
                continue

            logger.debug(f"← {line}")
            return parse_message(line)

    async def send(self, message: Message) -> None:
        if self.writer is None:
            raise IRCConnectionError("not connected")

        data = message.encode()
        try:
            self.writer.write(data)
            await asyncio.wait_for(self.writer.drain(), timeout=self.timeout_time)
        except asyncio.TimeoutError:
            raise IRCConnectionError(f"timed out sending {message.command}")
        except OSError as e:
            raise IRCConnectionError(f"write failed: {e}")
        logger.debug(f"→ {message}")

    async def register(self) -> None:
        await self.send(Message("NICK", [self.nick]))
        await self.send(Message("USER", [self.ident, "0", "*", self.name], trailing=True))

    async def pong(self, ping: Message) -> None:
        await self.send(Message("PONG", list(ping.params)))

    async def join(self, channel: str) -> None:
        await self.send(Message("JOIN", [channel]))

    async def message(self, target: str, text: str) -> None:
        """Send a PRIVMSG, flattened to one line and cut to the length limit"""
        text = " ".join(text.replace("\0", "").splitlines())
        await self.send(Message("PRIVMSG", [target, self._fit(target, text)],
                                trailing=True))

    @staticmethod
    def _fit(target: str, text: str) -> str:
        # Servers prefix our nick!user@host when relaying, so leave headroom
        overhead = len(f"PRIVMSG {target} :\r\n".encode("utf-8")) + 100
        budget = MAX_LINE_LENGTH - overhead
        encoded = text.encode("utf-8")
        if len(encoded) <= budget:
            return text
        return encoded[:budget].decode("utf-8", errors="ignore")
