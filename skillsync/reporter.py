"""
Process-boundary encoding of synchronization results.

The core hands back a SyncOutcome. Only when the outcome crosses a process
boundary is it flattened into log text carrying `SKILLS_UPDATED=true` /
`SKILLS_BEHIND=true` marker lines, which readers detect by substring search
and strip before showing the text to a human.
"""

import re
from dataclasses import dataclass
from typing import Dict

from .git_sync.models import SyncOutcome, SyncSignal


SIGNAL_TOKENS: Dict[SyncSignal, str] = {
    SyncSignal.UPDATED: "SKILLS_UPDATED=true",
    SyncSignal.BEHIND: "SKILLS_BEHIND=true",
}

_TOKEN_PATTERN = re.compile("|".join(re.escape(token) + r"\n?" for token in SIGNAL_TOKENS.values()))


@dataclass
class ParsedOutput:
    """Signals and display text recovered from process output."""
    text: str
    updated: bool
    behind: bool


def format_outcome(outcome: SyncOutcome, include_signals: bool = True) -> str:
    """Render an outcome as log text, each signal token on its own line at most once."""
    lines = list(outcome.messages)
    if include_signals:
        for signal in (SyncSignal.UPDATED, SyncSignal.BEHIND):
            if signal in outcome.signals:
                lines.append(SIGNAL_TOKENS[signal])
    return "\n".join(lines)


def strip_signals(text: str) -> str:
    """Remove signal tokens from text destined for display."""
    return _TOKEN_PATTERN.sub("", text).strip()


def parse_output(text: str) -> ParsedOutput:
    """Detect signal tokens in process output and strip them from the display text."""
    return ParsedOutput(
        text=strip_signals(text),
        updated=SIGNAL_TOKENS[SyncSignal.UPDATED] in text,
        behind=SIGNAL_TOKENS[SyncSignal.BEHIND] in text
    )
