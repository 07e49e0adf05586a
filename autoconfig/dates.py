"""
Default layout and language guessing for date component fields. Layouts use
strftime directives.
"""

import re
from collections import Counter
from typing import Dict, List, Optional, Protocol, Tuple

from .models import CoveredDateParts

MONTHS: Dict[str, List[str]] = {
    'en': ['january', 'february', 'march', 'april', 'may', 'june', 'july',
           'august', 'september', 'october', 'november', 'december'],
    'de': ['januar', 'februar', 'märz', 'april', 'mai', 'juni', 'juli',
           'august', 'september', 'oktober', 'november', 'dezember'],
    'fr': ['janvier', 'février', 'mars', 'avril', 'mai', 'juin', 'juillet',
           'août', 'septembre', 'octobre', 'novembre', 'décembre'],
}

WEEKDAYS: Dict[str, List[str]] = {
    'en': ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday'],
    'de': ['montag', 'dienstag', 'mittwoch', 'donnerstag', 'freitag', 'samstag', 'sonntag'],
    'fr': ['lundi', 'mardi', 'mercredi', 'jeudi', 'vendredi', 'samedi', 'dimanche'],
}

DEFAULT_LANGUAGE = 'en'

TOKEN_RE = re.compile(r'\d{1,2}:\d{2}|\d+|[^\W\d_]+\.?|[\W_]+')
TIME_RE = re.compile(r'^\d{1,2}:\d{2}$')


class DateGuesser(Protocol):
    def guess(self, examples: List[str], covers: CoveredDateParts) -> Tuple[str, str]:
        """Return a layout and a language for the examples."""
        ...


def _word_kind(word: str) -> Optional[Tuple[str, str]]:
    """Return (directive, language) for a month or weekday name."""
    w = word.lower().rstrip('.')
    for lang, names in MONTHS.items():
        for name in names:
            if w == name:
                return '%B', lang
            if len(w) >= 3 and name.startswith(w):
                return '%b', lang
    for lang, names in WEEKDAYS.items():
        for name in names:
            if w == name:
                return '%A', lang
            if len(w) >= 2 and name.startswith(w):
                return '%a', lang
    return None


class SimpleDateGuesser:
    """Guesses layouts token by token from the covered date parts."""

    def guess(self, examples: List[str], covers: CoveredDateParts) -> Tuple[str, str]:
        layouts: Counter = Counter()
        languages: Counter = Counter()
        for ex in examples:
            layout, lang = self._guess_one(ex, covers)
            layouts[layout] += 1
            if lang:
                languages[lang] += 1
        layout = layouts.most_common(1)[0][0] if layouts else ''
        lang = languages.most_common(1)[0][0] if languages else DEFAULT_LANGUAGE
        return layout, lang

    def _guess_one(self, example: str, covers: CoveredDateParts) -> Tuple[str, Optional[str]]:
        parts = []
        lang = None
        have_day = have_month = False
        for tok in TOKEN_RE.findall(example):
            if TIME_RE.match(tok):
                parts.append('%H:%M' if covers.time else tok)
            elif tok.isdigit():
                if len(tok) == 4 and covers.year:
                    parts.append('%Y')
                elif covers.day and not have_day:
                    parts.append('%d')
                    have_day = True
                elif covers.month and not have_month:
                    parts.append('%m')
                    have_month = True
                else:
                    parts.append(tok)
            elif tok[0].isalpha():
                kind = _word_kind(tok)
                if kind is None:
                    parts.append(tok)
                    continue
                directive, word_lang = kind
                if directive in ('%B', '%b'):
                    have_month = True
                lang = lang or word_lang
                parts.append(directive + ('.' if tok.endswith('.') else ''))
            else:
                parts.append(tok)
        return ''.join(parts), lang
