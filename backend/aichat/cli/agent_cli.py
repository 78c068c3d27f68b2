"""
aichat CLI - run the autonomous agent loop from the command line

Usage:
  aichat "count the python files in src"           # Run with defaults from .env
  aichat "summarize README.md" --max-turns 3        # Limit the number of turns
  aichat "find TODOs" --tool ask_human --verbose    # Offer registered tools
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from ..agent.core.runtime.agentic_agent import autonomous_conversation
from ..agent.core.runtime.models import AgentRunResult
from ..config import AgentSettings

logger = logging.getLogger(__name__)


class AgentCLI:
    """
    Main CLI class for the agent runner

    Parses arguments, builds settings from the environment and runs one
    autonomous conversation.
    """

    def __init__(self, settings: Optional[AgentSettings] = None):
        self.settings = settings

    def setup_logging(self, verbose: bool = False) -> None:
        log_level = logging.DEBUG if verbose else logging.INFO
        logging.basicConfig(
            level=log_level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    def create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog='aichat',
            description='Run a goal-directed agent conversation',
            epilog='Examples:\n'
                   '  aichat "count files"               # Run with defaults\n'
                   '  aichat "count files" --max-turns 3 # Limit turns\n'
                   '  aichat "count files" --tool NAME   # Offer a registered tool',
            formatter_class=argparse.RawDescriptionHelpFormatter
        )

        parser.add_argument(
            'goal',
            help='Goal for the agent to work toward'
        )

        parser.add_argument(
            '--model',
            help='Model id (default: AGENT_MODEL or gpt-4o-mini)'
        )

        parser.add_argument(
            '--max-turns',
            type=int,
            help='Maximum number of turns (default: AGENT_MAX_TURNS or 6)'
        )

        parser.add_argument(
            '--tool',
            action='append',
            default=[],
            dest='tools',
            metavar='NAME',
            help='Registered tool to offer the model (repeatable)'
        )

        parser.add_argument(
            '--verbose',
            action='store_true',
            help='Enable verbose output'
        )

        return parser

    def print_progress(self, step: str) -> None:
        print(step, flush=True)

    def print_result(self, result: AgentRunResult) -> None:
        if result.error:
            print(f"Error: {result.error_message}")
            return
        if result.final_text:
            print()
            print(result.final_text)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run the CLI with provided arguments

        Returns:
            Exit code (0 for a normal ending, 1 for error)
        """
        parser = self.create_parser()
        parsed_args = parser.parse_args(args)

        self.setup_logging(parsed_args.verbose)

        try:
            settings = self.settings or AgentSettings.from_env()
            result = asyncio.run(
                autonomous_conversation(
                    parsed_args.goal,
                    model_id=parsed_args.model,
                    tool_ids=parsed_args.tools,
                    max_turns=parsed_args.max_turns,
                    progress_callback=self.print_progress,
                    settings=settings,
                )
            )
            self.print_result(result)
            return 1 if result.error else 0

        except KeyboardInterrupt:
            print("\nOperation cancelled by user.")
            return 1
        except Exception as e:
            print(f"Error: {e}")
            if parsed_args.verbose:
                logger.exception("Agent run failed")
            return 1


def main() -> int:
    cli = AgentCLI()
    return cli.run()


if __name__ == '__main__':
    sys.exit(main())
