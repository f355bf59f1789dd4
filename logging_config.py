import logging
import os
import sys
from datetime import datetime

import config


def setup_logging(log_directory=None, level=None):
    """Sets up logging for chart rendering with proper Unicode support."""
    if log_directory is None:
        log_directory = config.log_directory
    if level is None:
        level = config.log_level

    handlers = []

    # An empty directory setting disables the file log
    if log_directory:
        if not os.path.exists(log_directory):
            os.makedirs(log_directory)

        # Create a unique log file name with timestamp
        log_filename = f"{log_directory}/table_graphs_{datetime.now().strftime('%Y-%m-%d_%H-%M-%S')}.log"
        handlers.append(logging.FileHandler(log_filename, encoding='utf-8'))

    # For console handler, handle encoding issues on Windows
    if sys.platform.startswith('win'):
        try:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.stream.reconfigure(encoding='utf-8')
        except (AttributeError, OSError):
            # Fallback: create a custom handler that handles encoding errors gracefully
            class SafeStreamHandler(logging.StreamHandler):
                def emit(self, record):
                    try:
                        super().emit(record)
                    except UnicodeEncodeError:
                        # Replace problematic characters and try again
                        msg = self.format(record)
                        safe_msg = msg.encode('ascii', errors='replace').decode('ascii')
                        print(safe_msg)
            console_handler = SafeStreamHandler(sys.stdout)
    else:
        # Chart output may go to stdout, so log lines go to stderr
        console_handler = logging.StreamHandler()
    handlers.append(console_handler)

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )
    logger = logging.getLogger('table_graphs')
    return logger
