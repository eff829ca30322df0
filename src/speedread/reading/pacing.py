"""Time-based pacing of a text in word, chunk or paragraph mode.

A PacingDriver holds a tokenized text and a cursor. While playing it keeps
one pending deadline; ``poll()`` performs every advance that is due at the
current clock reading. The interval before each advance follows a single
rate law::

    interval_ms = 60000 * unit_size / pace_wpm

where unit_size is 1 in word mode, the chunk size in chunk mode, and the
current paragraph's word count in paragraph mode.

The driver never sleeps on its own except inside ``run()``; UI loops and
tests drive it by calling ``poll()`` with their own clock.
"""

import logging
import re
import time
from dataclasses import dataclass
from typing import Callable, Optional, Union

from ..db.schemas import (
    MAX_CHUNK_SIZE,
    MAX_PACE_WPM,
    MIN_CHUNK_SIZE,
    MIN_PACE_WPM,
    ReadingMode,
)
from ..errors import InvalidInputError
from .metrics import MS_PER_MINUTE

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

WordsReadCallback = Callable[[int], None]
Clock = Callable[[], float]


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


@dataclass(frozen=True)
class ReadingUnit:
    """One displayable step: a word, a chunk of words, or a paragraph."""

    text: str
    word_count: int


def split_words(text: str) -> list[str]:
    """Split on whitespace, dropping empty tokens."""
    return text.split()


def split_chunks(words: list[str], chunk_size: int) -> list[list[str]]:
    """Group words into windows of ``chunk_size``; the last may be shorter."""
    return [words[i : i + chunk_size] for i in range(0, len(words), chunk_size)]


def split_paragraphs(text: str) -> list[str]:
    """Split on blank lines, dropping paragraphs with no content."""
    return [p for p in PARAGRAPH_BREAK.split(text) if p.strip()]


def tokenize(
    text: str, mode: Union[ReadingMode, str], chunk_size: Optional[int] = None
) -> list[ReadingUnit]:
    """Break text into the reading units of a mode."""
    mode = ReadingMode(mode)

    if mode == ReadingMode.WORD:
        return [ReadingUnit(word, 1) for word in split_words(text)]

    if mode == ReadingMode.CHUNK:
        if chunk_size is None:
            raise InvalidInputError("Chunk mode requires a chunk size")
        return [
            ReadingUnit(" ".join(chunk), len(chunk))
            for chunk in split_chunks(split_words(text), chunk_size)
        ]

    return [
        ReadingUnit(paragraph.strip(), len(split_words(paragraph)))
        for paragraph in split_paragraphs(text)
    ]


def _check_pace(pace_wpm: int) -> None:
    if not MIN_PACE_WPM <= pace_wpm <= MAX_PACE_WPM:
        raise InvalidInputError(
            f"Pace must be between {MIN_PACE_WPM} and {MAX_PACE_WPM} WPM"
        )


def _check_chunk_size(chunk_size: Optional[int]) -> None:
    if chunk_size is None or not MIN_CHUNK_SIZE <= chunk_size <= MAX_CHUNK_SIZE:
        raise InvalidInputError(
            f"Chunk size must be between {MIN_CHUNK_SIZE} and {MAX_CHUNK_SIZE} for chunk mode"
        )


class PacingDriver:
    """Advances a reading cursor over a text at a target pace."""

    def __init__(
        self,
        text: str,
        mode: Union[ReadingMode, str],
        pace_wpm: int,
        chunk_size: Optional[int] = None,
        on_words_read: Optional[WordsReadCallback] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize a paused driver positioned on the first unit.

        Args:
            text: Text to read
            mode: word, chunk or paragraph
            pace_wpm: Target pace, 100-1200 WPM
            chunk_size: Words per chunk (chunk mode only, 2-8)
            on_words_read: Called with the cumulative words read after every advance
            clock: Returns the current time in milliseconds (default: monotonic)
        """
        self.mode = ReadingMode(mode)
        _check_pace(pace_wpm)
        if self.mode == ReadingMode.CHUNK:
            _check_chunk_size(chunk_size)
        elif chunk_size is not None:
            raise InvalidInputError(
                f"Chunk size should not be specified for {self.mode.value} mode"
            )

        self.text = text
        self.pace_wpm = pace_wpm
        self.chunk_size = chunk_size
        self.units = tokenize(text, self.mode, chunk_size)
        self.total_words = sum(unit.word_count for unit in self.units)

        self.index = 0
        self.words_read = 0
        self._on_words_read = on_words_read
        self._clock = clock or _monotonic_ms
        self._deadline: Optional[float] = None
        self._finished = not self.units

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def is_playing(self) -> bool:
        return self._deadline is not None

    @property
    def is_complete(self) -> bool:
        """True once the final unit has been read, or for an empty text."""
        return self._finished

    @property
    def current_unit(self) -> Optional[ReadingUnit]:
        if not self.units:
            return None
        return self.units[self.index]

    @property
    def last_index(self) -> int:
        return max(0, len(self.units) - 1)

    @property
    def next_deadline(self) -> Optional[float]:
        """Clock reading at which the next advance fires, None when idle."""
        return self._deadline

    @property
    def interval_ms(self) -> float:
        """Time allotted to the current unit."""
        if self.mode == ReadingMode.WORD:
            unit_size = 1
        elif self.mode == ReadingMode.CHUNK:
            unit_size = self.chunk_size
        else:
            unit = self.current_unit
            unit_size = unit.word_count if unit else 0
        return MS_PER_MINUTE * unit_size / self.pace_wpm

    def words_through(self, count: int) -> int:
        """Words contained in the first ``count`` units, capped at the total."""
        return min(sum(unit.word_count for unit in self.units[:count]), self.total_words)

    def time_until_next(self) -> Optional[float]:
        """Milliseconds until the pending advance, None when idle."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    # -------------------------------------------------------------------------
    # Playback
    # -------------------------------------------------------------------------

    def resume(self) -> None:
        """Start or resume playback; the next deadline is measured from now."""
        if self._finished or self.is_playing:
            return
        self._deadline = self._clock() + self.interval_ms

    def pause(self) -> None:
        """Pause playback, keeping the current position."""
        self._deadline = None

    def stop(self) -> None:
        """Finish reading early. Cancels the pending advance for good."""
        self._deadline = None
        self._finished = True

    def poll(self) -> int:
        """Perform every advance that is due.

        Successive deadlines are chained from the previous deadline rather
        than from the poll time, so late polls do not slow the pace down.

        Returns:
            Number of advances performed
        """
        now = self._clock()
        advances = 0
        while self._deadline is not None and now >= self._deadline:
            deadline = self._deadline
            self._tick()
            advances += 1
            # The callback may have paused, stopped or rescheduled playback
            if self._finished or self._deadline != deadline:
                break
            self._deadline = deadline + self.interval_ms
        return advances

    def run(
        self,
        sleep: Callable[[float], None] = time.sleep,
        on_advance: Optional[Callable[[], None]] = None,
    ) -> int:
        """Block until playback pauses or the text is finished.

        Args:
            sleep: Called with seconds to wait before each due advance
            on_advance: Called after every poll that moved the cursor

        Returns:
            Final words-read count
        """
        self.resume()
        while self.is_playing:
            wait = self.time_until_next()
            if wait:
                sleep(wait / 1000)
            if self.poll() and on_advance:
                on_advance()
        return self.words_read

    def _tick(self) -> None:
        following = self.index + 1
        self._report(self.words_through(following))
        if following >= len(self.units):
            self._finished = True
            self._deadline = None
            logger.debug("Pacing finished after %d units", len(self.units))
        else:
            self.index = following

    def _report(self, words: int) -> None:
        self.words_read = min(words, self.total_words)
        if self._on_words_read:
            self._on_words_read(self.words_read)

    def _reschedule(self) -> None:
        if self.is_playing:
            self._deadline = self._clock() + self.interval_ms

    # -------------------------------------------------------------------------
    # Manual controls
    # -------------------------------------------------------------------------

    def _check_navigable(self) -> None:
        if self.mode == ReadingMode.CHUNK:
            raise InvalidInputError("Chunk mode does not support manual navigation")
        if self.mode == ReadingMode.WORD and self.is_playing:
            raise InvalidInputError("Pause before stepping through words")

    def _jump_to(self, index: int) -> None:
        self.index = index
        self._finished = False
        self._report(self.words_through(index + 1))
        self._reschedule()

    def previous(self) -> None:
        """Step back one unit (word and paragraph modes)."""
        self._check_navigable()
        if self.index > 0:
            self._jump_to(self.index - 1)

    def next(self) -> None:
        """Step forward one unit (word and paragraph modes)."""
        self._check_navigable()
        if self.index < self.last_index:
            self._jump_to(self.index + 1)

    def skip_to_end(self) -> None:
        """Jump to the last paragraph, counting the whole text as read."""
        if self.mode != ReadingMode.PARAGRAPH:
            raise InvalidInputError("Skip to end is only available in paragraph mode")
        if self.units:
            self._jump_to(self.last_index)

    def set_chunk_size(self, chunk_size: int) -> None:
        """Change the chunk size, keeping the reader's word position."""
        if self.mode != ReadingMode.CHUNK:
            raise InvalidInputError("Chunk size can only be changed in chunk mode")
        _check_chunk_size(chunk_size)
        if chunk_size == self.chunk_size:
            return

        position = self.index * self.chunk_size
        self.chunk_size = chunk_size
        self.units = tokenize(self.text, self.mode, chunk_size)
        self.index = min(position // chunk_size, self.last_index)
        if self._finished:
            # Finished drivers keep the count they ended with
            return
        self._report(self.words_through(self.index))
        self._reschedule()

    def set_pace(self, pace_wpm: int) -> None:
        """Change the target pace; a pending advance is rescheduled from now."""
        _check_pace(pace_wpm)
        self.pace_wpm = pace_wpm
        self._reschedule()


def start_pacing(
    text: str,
    mode: Union[ReadingMode, str],
    pace_wpm: int,
    chunk_size: Optional[int] = None,
    on_words_read: Optional[WordsReadCallback] = None,
    clock: Optional[Clock] = None,
) -> PacingDriver:
    """Create a driver for ``text`` and start playback immediately."""
    driver = PacingDriver(
        text,
        mode,
        pace_wpm,
        chunk_size=chunk_size,
        on_words_read=on_words_read,
        clock=clock,
    )
    driver.resume()
    return driver
