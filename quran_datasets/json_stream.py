# quran_datasets/json_stream.py
"""
Streaming access to the consolidated all_translations.json file.

The file is one JSON array of translation documents and is far too large to
build or parse in one go, so it is written a batch of documents at a time and
read back one top-level object at a time.

Layout produced by JsonArrayWriter:

    [
    {...document 1...},
    {...document 2...}
    ]

A run that stops before the final flush leaves the array unterminated. The
reader still yields every complete object in such a file and then reports
the truncation.
"""
import codecs
import json
import re
from pathlib import Path
from typing import Iterable, Iterator, List, Union

from colorama import Fore

DEFAULT_READ_CHUNK_SIZE = 1024 * 1024  # 1MB

# Scanner states
OUTSIDE = "outside"
IN_OBJECT = "in_object"
IN_STRING = "in_string"
IN_ESCAPE = "in_escape"

_OBJECT_TOKENS = re.compile(r'[{}"]')
_STRING_TOKENS = re.compile(r'["\\]')
_SEPARATORS = frozenset(' \t\r\n,[')


class JsonStreamError(ValueError):
    """Raised when the consolidated JSON stream cannot be written or read as expected."""


class JsonArrayWriter:
    """Appends documents to a JSON array file across several flushes."""

    def __init__(self, path: Union[str, Path], indent: int = 2):
        self.path = Path(path)
        self.indent = indent
        self.started = False
        self.closed = False
        self.count = 0

    def write(self, documents: Iterable[dict], final: bool = False) -> int:
        """
        Append `documents`; on the first call the file is truncated and the array opened.

        With `final=True` the array is closed after the documents. Every
        document after the first is preceded by ',\\n', so the last one in the
        file never carries a trailing comma, even when the final batch is empty.
        """
        if self.closed:
            raise JsonStreamError(f"{self.path} has already been closed")

        mode = 'a' if self.started else 'w'
        written = 0
        with open(self.path, mode, encoding='utf-8') as f:
            if not self.started:
                f.write('[\n')
                self.started = True
            for document in documents:
                text = json.dumps(document, ensure_ascii=False, indent=self.indent)
                f.write((',\n' if self.count else '') + text)
                self.count += 1
                written += 1
            if final:
                f.write('\n]' if self.count else ']')
                self.closed = True
        return written


class JsonObjectScanner:
    """
    Splits JSON array text into top-level object substrings.

    Text is fed in arbitrary pieces; a piece may end anywhere, including in
    the middle of a string literal or an escape sequence. The scanner keeps
    the unfinished object between calls and returns each object's text once
    its closing brace is seen. Braces inside strings are ignored.
    """

    def __init__(self):
        self.state = OUTSIDE
        self.depth = 0
        self.closed = False   # saw the array's closing ']'
        self.stray = 0        # unexpected characters between objects
        self._buffer = ""
        self._pos = 0

    @property
    def pending(self) -> int:
        """Number of characters belonging to an object that is not yet complete."""
        return 0 if self.state == OUTSIDE else len(self._buffer)

    def feed(self, text: str) -> List[str]:
        """Consume `text` and return the complete objects it finished, in order."""
        objects = []
        buf = self._buffer + text
        pos = self._pos
        n = len(buf)

        while pos < n:
            if self.state == OUTSIDE:
                ch = buf[pos]
                if ch == '{':
                    buf = buf[pos:]
                    n = len(buf)
                    pos = 1
                    self.state = IN_OBJECT
                    self.depth = 1
                    continue
                if ch == ']':
                    self.closed = True
                elif ch not in _SEPARATORS:
                    self.stray += 1
                pos += 1

            elif self.state == IN_OBJECT:
                match = _OBJECT_TOKENS.search(buf, pos)
                if match is None:
                    pos = n
                    break
                pos = match.end()
                token = match.group()
                if token == '"':
                    self.state = IN_STRING
                elif token == '{':
                    self.depth += 1
                else:
                    self.depth -= 1
                    if self.depth == 0:
                        objects.append(buf[:pos])
                        buf = buf[pos:]
                        n = len(buf)
                        pos = 0
                        self.state = OUTSIDE

            elif self.state == IN_STRING:
                match = _STRING_TOKENS.search(buf, pos)
                if match is None:
                    pos = n
                    break
                pos = match.end()
                self.state = IN_ESCAPE if match.group() == '\\' else IN_OBJECT

            else:  # IN_ESCAPE: the escaped character never ends the string
                pos += 1
                self.state = IN_STRING

        if self.state == OUTSIDE:
            buf = ""
            pos = 0
        self._buffer = buf
        self._pos = pos
        return objects


def read_json_array(path: Union[str, Path], chunk_size: int = DEFAULT_READ_CHUNK_SIZE,
                    strict: bool = False) -> Iterator[dict]:
    """
    Lazily yield the objects of a top-level JSON array file.

    The file is read `chunk_size` bytes at a time; memory use depends on the
    largest single object, not on the file size. An object that fails to
    parse is reported and skipped. If the file ends without its closing ']'
    (or with an incomplete object) a warning is printed, or JsonStreamError
    raised when `strict` is set.
    """
    path = Path(path)
    scanner = JsonObjectScanner()
    decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
    count = 0
    seen = 0

    def parse(texts: List[str]) -> Iterator[dict]:
        nonlocal count, seen
        for text in texts:
            seen += 1
            try:
                obj = json.loads(text)
            except json.JSONDecodeError as e:
                print(Fore.YELLOW + f"⚠ Error parsing JSON object #{seen} in {path.name}: {e}")
                continue
            count += 1
            yield obj

    with open(path, 'rb') as f:
        while True:
            raw = f.read(max(1, chunk_size))
            if not raw:
                break
            yield from parse(scanner.feed(decoder.decode(raw)))
        yield from parse(scanner.feed(decoder.decode(b'', final=True)))

    if scanner.pending or not scanner.closed:
        message = (f"{path.name} looks truncated: "
                   f"{scanner.pending} characters after the last complete object were not parsed"
                   if scanner.pending else f"{path.name} has no closing ']'")
        if strict:
            raise JsonStreamError(message)
        print(Fore.YELLOW + f"⚠ {message}")
    if scanner.stray:
        print(Fore.YELLOW + f"⚠ Ignored {scanner.stray} unexpected characters between objects in {path.name}")

    print(Fore.GREEN + f"✓ Processed {count} objects from {path.name}")
