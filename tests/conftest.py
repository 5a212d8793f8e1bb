"""Shared fixtures: a scripted stand-in for the IRC client and config files"""

from collections import deque

import pytest

from umbled.config import BotConfig
from umbled.exceptions import IRCConnectionError
from umbled.irc_message import parse_message

SAMPLE_CONFIG = """\
# presence bot
channels=#a,#b
nick=bot
server-host=irc.example.com
server-port=6667
"""

class FakeClient:
    """Records calls and replays scripted server lines or exceptions"""

    def __init__(self):
        self.connected = False
        self.registered = False
        self.inbound = deque()
        self.calls = []
        self.sent = []
        self.connect_error = None
        self.pong_error = None
        self.join_errors = {}
        # Fail the Nth PRIVMSG (0-based, counted across the client's lifetime)
        self.message_fail_at = None
        self.message_attempts = 0

    def feed(self, *items):
        for item in items:
            self.inbound.append(parse_message(item) if isinstance(item, str) else item)

    def is_connected(self):
        return self.connected

    async def connect(self):
        self.calls.append(("connect",))
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True

    async def register(self):
        self.calls.append(("register",))

    def set_registered(self):
        self.registered = True

    async def read_message(self):
        if not self.inbound:
            raise IRCConnectionError("no data from server")
        item = self.inbound.popleft()
        if isinstance(item, Exception):
            raise item
        return item

    async def pong(self, message):
        self.calls.append(("pong", tuple(message.params)))
        if self.pong_error is not None:
            raise self.pong_error

    async def join(self, channel):
        self.calls.append(("join", channel))
        if channel in self.join_errors:
            raise self.join_errors[channel]

    async def message(self, target, text):
        attempt = self.message_attempts
        self.message_attempts += 1
        if attempt == self.message_fail_at:
            raise IRCConnectionError("write failed: broken pipe")
        self.sent.append((target, text))

    async def close(self):
        self.calls.append(("close",))
        self.connected = False
        self.registered = False

@pytest.fixture
def fake_client():
    return FakeClient()

@pytest.fixture
def write_config(tmp_path):
    """Write config text to a file and return its path"""
    def _write(text, name="bot.conf"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write

@pytest.fixture
def config(write_config):
    return BotConfig(write_config(SAMPLE_CONFIG))
