from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from stacc.errors import UndefinedValue, EmptyStack
from stacc.values import Value


@dataclass
class Frame:
    """One scope level: its variable bindings and its own operand stack."""
    variables: Dict[str, Value] = field(default_factory=dict)
    stack: List[Value] = field(default_factory=list)


class Environment:
    """Ordered list of frames; index 0 is the global frame.

    Lookups walk the frames from innermost to outermost. Assignments and
    stack operations only ever touch the innermost (current) frame, except
    `parent_pop`, which the call protocol uses to take arguments off the
    caller's stack.
    """
    def __init__(self):
        self.frames: List[Frame] = [Frame()]

    @property
    def depth(self) -> int:
        return len(self.frames) - 1

    @property
    def current(self) -> Frame:
        return self.frames[-1]

    @contextmanager
    def scope(self) -> Iterator[Frame]:
        """Enter a fresh frame for the duration of the block, on every exit path."""
        frame = Frame()
        self.frames.append(frame)
        try:
            yield frame
        finally:
            self.frames.pop()

    def get(self, name: str) -> Value:
        for frame in reversed(self.frames):
            if name in frame.variables:
                return frame.variables[name]
        raise UndefinedValue(name)

    def set(self, name: str, value: Value):
        self.current.variables[name] = value

    def push(self, value: Value):
        self.current.stack.append(value)

    def pop(self) -> Value:
        if not self.current.stack:
            raise EmptyStack()
        return self.current.stack.pop()

    def parent_pop(self) -> Value:
        if len(self.frames) < 2 or not self.frames[-2].stack:
            raise EmptyStack()
        return self.frames[-2].stack.pop()

    def dump(self) -> Tuple[Dict[str, Value], List[Value]]:
        """Copies of the global variables and global stack."""
        glob = self.frames[0]
        return dict(glob.variables), list(glob.stack)
