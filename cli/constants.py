"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["add", "pin", "find", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#2E9E6B bold",
        "command": "#0088ff bold",
    }
)

GREEN = "\033[38;2;46;158;107m"
RED = "\033[38;2;220;50;47m"
RESET = "\033[0m"

LOGO = f"""{GREEN}
 ┌─┐┌─┐┬─┐┌┬┐┌─┐┌─┐┬ ┬
 ├─┘├┤ ├┬┘│││├─┤├┤ └┬┘
 ┴  └─┘┴└─┴ ┴┴ ┴└   ┴
{RESET}"""

WELCOME_TITLE = "Permafy CLI - permanent archival of IPFS content on Arweave"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "permafy> "

HELP_TEXT = """Available commands:
  add <path> [content-type]   Add a local file to IPFS and archive it on Arweave
  pin <cid> [<cid> ...]       Archive existing IPFS files (skips files already on Arweave)
  find <cid>                  Show the Arweave transaction holding a verified copy
  clear                       Clear screen and redisplay welcome message
  help                        Show this help
  exit                        Exit REPL

Files are limited to 10MiB.
Examples:
  add photos/cat.png image/png
  pin QmT78zSuBmuS4z925WZfrqQ1qHaJ56DQaTfyMUF7F8ff5o
  find QmT78zSuBmuS4z925WZfrqQ1qHaJ56DQaTfyMUF7F8ff5o"""
