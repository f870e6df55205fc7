"""
Arglet token stream: a forward-only cursor over the raw argument list.

The parser and every sub-command parser share one ArgStream, so a child that takes
over after a command name simply keeps pulling from where its parent stopped.
Tokens are handed out as the very objects that were passed in.
"""


class ArgStream:
    """
    Forward-only cursor over a sequence of argument strings.

    Usage
        stream = ArgStream(["-v", "file"])
        while stream.has_next():
            token = next(stream)

    It is also its own iterator, so "for token in stream" consumes it.
    """

    def __init__(self, tokens, /):
        self._tokens = tuple(tokens)
        for token in self._tokens:
            if not isinstance(token, str):
                raise TypeError("ArgStream() tokens must be strings")
        self._index = 0

    @property
    def position(self):
        """
        Index of the next token to be handed out.
        """
        return self._index

    def has_next(self):
        return self._index < len(self._tokens)

    def remaining(self):
        return len(self._tokens) - self._index

    def __iter__(self):
        return self

    def __next__(self):
        if self._index >= len(self._tokens):
            raise StopIteration
        token = self._tokens[self._index]
        self._index += 1
        return token

    def __repr__(self):
        return "ArgStream(position=%d, remaining=%d)" % (self._index, self.remaining())


__all__ = (
    "ArgStream",
)
