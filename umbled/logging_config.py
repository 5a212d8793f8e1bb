import logging
import logging.handlers
import sys
from datetime import datetime
from .paths import ensure_log_directory, get_log_path

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'

class RFC3339Formatter(logging.Formatter):
    """Formatter that renders record times as RFC 3339 local time"""
    
    def formatTime(self, record, datefmt=None):
        dt = datetime.fromtimestamp(record.created).astimezone()
        if datefmt:
            return dt.strftime(datefmt)
        else:
            return dt.isoformat(timespec='seconds')
    
class BotLogger:
    """Centralized logging configuration for the bot"""
    
    def __init__(self, log_level: str = "INFO", log_format: str = DEFAULT_FORMAT,
                 log_to_file: bool = False):
        self.log_level = getattr(logging, log_level.upper(), logging.INFO)
        self.log_format = log_format
        self.log_to_file = log_to_file
        self.setup_logging()
    
    def setup_logging(self):
        """Configure console output and, optionally, rotating log files"""
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)
        
        # Clear any existing handlers
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
        
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(RFC3339Formatter(self.log_format))
        root_logger.addHandler(console_handler)
        
        if not self.log_to_file:
            return
        
        ensure_log_directory()
        file_formatter = RFC3339Formatter(FILE_FORMAT)
        
        # File handler with rotation
        file_handler = logging.handlers.RotatingFileHandler(
            get_log_path("umbled.log"),
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)
        
        # Error file handler for errors and above
        error_handler = logging.handlers.RotatingFileHandler(
            get_log_path("umbled_errors.log"),
            maxBytes=5*1024*1024,  # 5MB
            backupCount=3
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(file_formatter)
        root_logger.addHandler(error_handler)

def setup_logging(log_level: str = "INFO", log_format: str = DEFAULT_FORMAT,
                  log_to_file: bool = False):
    """Setup logging for the bot"""
    return BotLogger(log_level, log_format, log_to_file)
