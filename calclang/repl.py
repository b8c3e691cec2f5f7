import argparse
import logging
from collections import deque
from typing import Optional

from calclang.parser import ParserError, parse_source
from calclang.runtime import CalcRuntimeError, Interpreter
from calclang.value import Unit

logger = logging.getLogger(__name__)

HISTORY_SIZE = 100
PROMPT = ">> "


class Repl:
    def __init__(self, history_size: int = HISTORY_SIZE) -> None:
        self.interpreter = Interpreter()
        self.history: deque[str] = deque(maxlen=history_size)

    def submit(self, line: str) -> Optional[str]:
        """Evaluate one line and return what should be printed for it, if anything"""
        if not line.strip():
            return None
        self.history.append(line)

        try:
            expression = parse_source(line)
        except ParserError as e:
            return str(e)
        except RecursionError:
            return "Error: expression is nested too deeply"
        logger.info("Parsed %r as %s", line, expression)

        try:
            value = self.interpreter.interpret(expression)
        except CalcRuntimeError as e:
            return f"Error: {e}"
        except RecursionError:
            return "Error: expression is nested too deeply"

        if isinstance(value, Unit):
            return None
        return str(value)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="calclang interactive interpreter")
    parser.add_argument("-v", action="count", default=0, help="increase log verbosity (can be repeated)")
    parser.add_argument("--history-size", type=int, default=HISTORY_SIZE, help="number of lines kept in history")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=[logging.WARNING, logging.INFO, logging.DEBUG][min(args.v, 2)],
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    repl = Repl(history_size=args.history_size)
    while True:
        try:
            line = input(PROMPT)
        except (EOFError, KeyboardInterrupt):
            print()
            print("Exiting...")
            return

        output = repl.submit(line)
        if output is not None:
            print(output)


if __name__ == "__main__":
    main()
