"""Failure taxonomy for the highlighting and indentation layer

None of these are allowed to escape into the host editor. They are raised
close to where the problem is detected and caught at the next boundary
(span store, grammar adapter, mode dispatch) where they are logged and
degraded to "no highlighting" or "default indent".
"""


class ModeSitterError(Exception):
    """Base class for every error raised by this package"""


class ParseFailure(ModeSitterError):
    """The grammar backend could not produce a token stream or tree"""


class AdapterUnavailable(ModeSitterError):
    """The backing grammar support for an adapter failed to load"""

    def __init__(self, grammar: str, reason: str):
        super().__init__(f"Grammar {grammar!r} is unavailable: {reason}")
        self.grammar = grammar
        self.reason = reason


class InvalidSpanRange(ModeSitterError):
    """A span was given a start that is not before its end"""

    def __init__(self, start: int, end: int, face: str):
        super().__init__(f"Invalid span range [{start}, {end}) for face {face!r}")
        self.start = start
        self.end = end
        self.face = face


class UnknownMode(ModeSitterError):
    """A mode name was used that was never registered"""

    def __init__(self, name: str):
        super().__init__(f"No major mode named {name!r}")
        self.name = name


class HookFailure(ModeSitterError):
    """A mode init or after-change hook raised"""

    def __init__(self, mode: str, hook: str, cause: BaseException):
        super().__init__(f"{hook} hook of {mode!r} failed: {cause!r}")
        self.mode = mode
        self.hook = hook
        self.__cause__ = cause
