import sys
from typing import List, Optional, TextIO


class StreamSink:
    """Writes program output to a text stream, ``sys.stdout`` by default.

    The stream is resolved at write time so that a replaced ``sys.stdout``
    (as under pytest's ``capsys``) is honoured.
    """
    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream
        self.at_line_start = True

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def write(self, text: str):
        if not text:
            return
        self.stream.write(text)
        self.at_line_start = text.endswith('\n')


class BufferSink:
    """Collects program output in memory."""
    def __init__(self):
        self.parts: List[str] = []

    @property
    def at_line_start(self) -> bool:
        return not self.parts or self.parts[-1].endswith('\n')

    def write(self, text: str):
        if text:
            self.parts.append(text)

    def getvalue(self) -> str:
        return ''.join(self.parts)
