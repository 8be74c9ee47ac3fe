"""Package entry point for ``python -m groq_discord_bot``.

WHY: Operators start the bot as ``python -m groq_discord_bot`` without
installing the console script.

HOW: Delegates to the CLI's main() function.
"""

import sys

if __name__ == "__main__":
    from groq_discord_bot.cli import main
    sys.exit(main())
