import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional

from calclang.builtins import BUILTIN_FUNCS
from calclang.parser import SyntaxScope
from calclang.value import Builtin, Value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyntaxRule:
    name: str
    pattern: str
    precedence: int
    scope: SyntaxScope


DEFAULT_SYNTAX_RULES = [
    SyntaxRule(name="FUNCTION", pattern="{name}({args})", precedence=1, scope=SyntaxScope.GLOBAL),
]


@dataclass
class Frame:
    bindings: dict[str, Value] = field(default_factory=dict)
    parent: Optional[int] = None
    syntax_rules: list[SyntaxRule] = field(default_factory=list)


class Environment:
    """A stack of scope frames; the last frame is the current scope.

    Frame 0 is the root, holding the builtins. Every other frame is pushed by
    ``child_scope`` and parents onto the frame that was current when it was
    pushed, so lookups from a function body fall back to the caller's scope.
    """

    def __init__(self) -> None:
        root = Frame(syntax_rules=list(DEFAULT_SYNTAX_RULES))
        for name in BUILTIN_FUNCS:
            root.bindings[name] = Builtin(name)
        self._frames: list[Frame] = [root]

    @property
    def current(self) -> Frame:
        return self._frames[-1]

    @property
    def depth(self) -> int:
        return len(self._frames)

    @property
    def syntax_rules(self) -> list[SyntaxRule]:
        return self.current.syntax_rules

    def lookup(self, name: str) -> Optional[Value]:
        frame_idx: Optional[int] = len(self._frames) - 1
        while frame_idx is not None:
            frame = self._frames[frame_idx]
            if name in frame.bindings:
                return frame.bindings[name]
            frame_idx = frame.parent
        return None

    def bind(self, name: str, value: Value) -> None:
        self.current.bindings[name] = value

    def add_syntax_rule(self, rule: SyntaxRule) -> None:
        self.current.syntax_rules.append(rule)

    @contextmanager
    def child_scope(self, bindings: dict[str, Value]) -> Iterator[Frame]:
        frame = Frame(
            bindings=dict(bindings),
            parent=len(self._frames) - 1,
            syntax_rules=list(self.current.syntax_rules),
        )
        self._frames.append(frame)
        logger.debug("Entered scope #%d with %s", len(self._frames) - 1, sorted(bindings))
        try:
            yield frame
        finally:
            self._frames.pop()
            logger.debug("Left scope #%d", len(self._frames))
