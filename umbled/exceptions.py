"""Custom exceptions for the presence bot"""

class BotError(Exception):
    """Base exception for bot-related errors"""
    pass

class ConfigError(BotError):
    """Raised when configuration is invalid or missing"""
    pass

class IRCConnectionError(BotError):
    """Raised when talking to the IRC server fails"""
    pass

class EndOfStreamError(IRCConnectionError):
    """Raised when the server has closed the connection"""
    pass

class ServerError(IRCConnectionError):
    """Raised when the server sends ERROR while we register"""
    pass

class MessageParseError(BotError):
    """Raised when a line from the server is not a valid IRC message"""
    pass

class MessageEncodeError(BotError):
    """Raised when a message cannot be put on the wire"""
    pass
