import logging
from typing import Optional

from vmcalc.compiler import compile
from vmcalc.config import Settings, get_settings
from vmcalc.diagnostics import Diagnostic
from vmcalc.vm import Vm

logger = logging.getLogger("vmcalc.repl")

GREEN = "\x1b[32m"
RED = "\x1b[31m"
RESET = "\x1b[0m"

HELP_TEXT = "\n".join(
    [
        "Operators: + - * / % and parentheses, unary + and -",
        "Example: -(1 + 2) * 3 / 4.5",
        "Commands:",
        "  history          show the results of previous lines",
        "  history write    save the history to the history file",
        "  history load     replace the history with the file's contents",
        "  help             show this message",
        "  quit             exit",
    ]
)


class QuitRepl(Exception):
    pass


class Repl:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.history: list[str] = []
        self.success = True

    @property
    def prompt(self) -> str:
        if not self.settings.color:
            return ">> "
        return f"{GREEN if self.success else RED}>>{RESET} "

    def handle_line(self, line: str) -> str:
        """Process one input line, returning the text to print; raises QuitRepl on 'quit'"""
        words = line.split()
        if words and words[0] == "quit":
            raise QuitRepl()
        elif words and words[0] == "history":
            return self._history_command(words[1] if len(words) > 1 else None)
        elif words and words[0] == "help":
            self.success = True
            return HELP_TEXT

        code = line.split("\n")[0]
        try:
            result = Vm(code, compile(code)).execute()
        except Diagnostic as e:
            self.success = False
            return str(e)
        self.success = True
        self.history.append(f"{code} = {result}")
        return result

    def _history_command(self, subcommand: Optional[str]) -> str:
        if subcommand is None:
            self.success = True
            return "\n".join(
                [
                    "---------HISTORY-----------",
                    *(f"{i + 1}: {entry}" for i, entry in enumerate(self.history)),
                    "---------------------------",
                ]
            )
        elif subcommand == "write":
            self.settings.history_file.write_text("\n".join(self.history))
            logger.info("Wrote %d history entries to %s", len(self.history), self.settings.history_file)
            self.success = True
            return "History written to file."
        elif subcommand == "load":
            try:
                contents = self.settings.history_file.read_text()
            except OSError as e:
                logger.info("Could not read history file: %s", e)
                self.success = False
                return f"Could not read {self.settings.history_file}"
            self.history = contents.splitlines()
            logger.info("Loaded %d history entries from %s", len(self.history), self.settings.history_file)
            self.success = True
            return "History loaded from file."
        else:
            self.success = False
            return "Unknown history subcommand."

    def run(self) -> None:
        while True:
            try:
                line = input(self.prompt)
            except EOFError:
                print()
                return
            try:
                output = self.handle_line(line)
            except QuitRepl:
                return
            if output:
                print(output)


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    Repl(settings).run()
