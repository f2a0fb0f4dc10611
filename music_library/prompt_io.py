from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol


class PromptIO(Protocol):
    def read_line(self) -> Optional[str]: ...

    def write(self, text: str) -> None: ...

    def write_line(self, text: str = "") -> None: ...


class ConsolePromptIO:
    def read_line(self) -> Optional[str]:
        try:
            return input()
        except EOFError:
            return None

    def write(self, text: str) -> None:
        print(text, end="", flush=True)

    def write_line(self, text: str = "") -> None:
        print(text)


@dataclass(slots=True)
class BufferPromptIO:
    inputs: List[Optional[str]] = field(default_factory=list)
    outputs: List[str] = field(default_factory=list)
    reads: int = 0

    def read_line(self) -> Optional[str]:
        self.reads += 1
        if not self.inputs:
            raise AssertionError("BufferPromptIO has no more inputs")
        return self.inputs.pop(0)

    def write(self, text: str) -> None:
        self.outputs.append(text)

    def write_line(self, text: str = "") -> None:
        self.outputs.append(f"{text}\n")

    def text(self) -> str:
        return "".join(self.outputs)
