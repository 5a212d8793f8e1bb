#!/usr/bin/env python3
"""
umbled - an IRC bot that sits in channels and keeps its connection open

It is more accepting of errors over the lifetime of a connection than most
bots: failures are logged, retried, and later replayed to the channels.
"""

import argparse
import asyncio
import logging
import sys

from umbled.config import load_config
from umbled.exceptions import ConfigError
from umbled.irc_client import IRCClient
from umbled.logging_config import setup_logging
from umbled.paths import log_path_configuration
from umbled.session import Session

def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Stay connected to an IRC server and sit in channels."
    )
    parser.add_argument("-c", "--conf", required=True, metavar="PATH",
                        help="Configuration file.")
    return parser.parse_args(argv)

def build_client(config) -> IRCClient:
    """Create the IRC client described by config"""
    client = IRCClient(config.NICK, config.NICK, config.NICK,
                       config.SERVER_HOST, config.SERVER_PORT, config.USE_TLS)
    client.set_timeout_time(config.READ_TIMEOUT)
    return client

def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)

    try:
        config = load_config(args.conf)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config.LOG_LEVEL, config.LOG_FORMAT, config.LOG_TO_FILE)
    logger = logging.getLogger("main")
    log_path_configuration()

    session = Session(config, build_client(config))

    try:
        asyncio.run(session.run())
    except KeyboardInterrupt:
        logger.info("🛑 Bot stopped by user")

if __name__ == "__main__":
    main()
