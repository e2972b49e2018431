"""CLI entry point: `permafy [--debug]`."""

import os
import sys

from common.logging_config import setup_logging
from cli.repl import repl_loop

DEBUG_FLAG = '--debug'


def main() -> None:
    debug = DEBUG_FLAG in sys.argv
    if debug:
        sys.argv.remove(DEBUG_FLAG)

    # Quiet by default so log lines don't interleave with REPL output.
    logger = setup_logging('cli', log_level='DEBUG' if debug else os.getenv('LOG_LEVEL', 'WARNING'))
    logger.debug("CLI starting")

    try:
        repl_loop()
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        logger.debug("CLI exiting")


if __name__ == "__main__":
    main()
