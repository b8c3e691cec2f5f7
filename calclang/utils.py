import enum


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


def render_pointer(pieces: list[str], idx: int) -> str:
    """Lay pieces out on one line separated by spaces, with a caret under piece ``idx`` on the next line.

    ``idx`` may equal ``len(pieces)``, pointing just past the end.
    """
    column = sum(len(p) + 1 for p in pieces[:idx])
    return "\n".join([" ".join(pieces), " " * column + "^"])
