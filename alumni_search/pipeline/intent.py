"""Rule-based intent extraction.

Order of checks:
  1. Name patterns ("who is X", "X's profile", bare two-word names).
     A hit short-circuits into a names-only intent.
  2. Closed vocabularies, in precedence order
     locations -> education -> companies -> roles -> skills.
     A span claimed by an earlier category is invisible to later ones.
  3. Requirement flags (help / seniority terms).
  4. Leftover keywords.
  5. Refinement of the previous intent for short location/company follow-ups.
"""

import logging
import re
from collections.abc import Iterable

from alumni_search.core.schemas import RequirementFlag, SearchIntent
from alumni_search.core.vocabulary import Vocabulary
from alumni_search.oracle.base import IntentOracle

logger = logging.getLogger(__name__)

_NAME_PATTERNS: list[re.Pattern[str]] = [
    re.compile(
        r"^(?:who is|who's|whos|tell me about|do you know|what about|"
        r"information (?:on|about)|details (?:about|of|on)|profile of|"
        r"contact (?:of|for)|about)\s+(?P<name>.+)$",
    ),
    re.compile(r"^(?P<name>.+?)'s profile$"),
    re.compile(r"^(?:find|search for|search|show|look up|lookup)\s+(?P<name>.+)$"),
]
_BARE_NAME = re.compile(r"^(?P<name>[a-z]+ [a-z]+)$")
_NAME_WORD = re.compile(r"^[a-z]+$")
_HONORIFICS = ("mr ", "mrs ", "ms ", "dr ", "prof ")

_REFINEMENT_MAX_TOKENS = 5
_CLAIMED = " | "
_TOKEN = re.compile(r"[\w][\w'&+#-]*")

# Category name on SearchIntent -> Vocabulary attribute, in precedence order.
_CATEGORY_ORDER: tuple[tuple[str, str], ...] = (
    ("locations", "locations"),
    ("education", "institutions"),
    ("companies", "companies"),
    ("roles", "roles"),
    ("skills", "skill_families"),
)


class RuleBasedIntentExtractor(IntentOracle):
    """Default IntentOracle: pattern rules over closed vocabularies."""

    def __init__(self, vocabulary: Vocabulary | None = None) -> None:
        self._vocab = vocabulary or Vocabulary()
        self._stop_words = {w.lower() for w in self._vocab.stop_words}
        self._help_terms = [t.lower() for t in self._vocab.help_terms]
        self._seniority_terms = [t.lower() for t in self._vocab.seniority_terms]
        self._follow_ups = {p.lower() for p in self._vocab.follow_up_phrases}
        self._not_names = (
            self._vocab.all_terms()
            | self._stop_words
            | {w for phrase in self._vocab.follow_up_phrases for w in phrase.split()}
            | {w for phrase in self._vocab.greetings for w in phrase.split()}
        )
        self._patterns = {
            category: _compile_table(getattr(self._vocab, attr))
            for category, attr in _CATEGORY_ORDER
        }

    @property
    def vocabulary(self) -> Vocabulary:
        return self._vocab

    async def extract(
        self,
        query: str,
        context: SearchIntent | None = None,
    ) -> SearchIntent:
        return self.extract_sync(query, context)

    def extract_sync(
        self,
        query: str,
        context: SearchIntent | None = None,
    ) -> SearchIntent:
        """Synchronous core of extract(); never raises on odd input."""
        query = " ".join(query.split())
        if not query:
            return SearchIntent()

        name = self.match_name(query)
        if name is not None:
            logger.debug("Name search detected: '%s'", name)
            return SearchIntent(names=[name])

        found: dict[str, list[str]] = {}
        remaining = query
        for category, _ in _CATEGORY_ORDER:
            hits, remaining = _scan(remaining, self._patterns[category])
            found[category] = hits

        flags = set()
        if _contains_any(query, self._help_terms):
            flags.add(RequirementFlag.NEEDS_PROFESSIONAL_HELP)
        if _contains_any(query, self._seniority_terms):
            flags.add(RequirementFlag.SENIOR_LEVEL)

        keywords = _unique(
            token
            for token in _TOKEN.findall(remaining)
            if len(token) > 2 and token not in self._stop_words
        )

        intent = SearchIntent(
            skills=found["skills"],
            locations=found["locations"],
            roles=found["roles"],
            companies=found["companies"],
            education=found["education"],
            keywords=keywords,
            requirement_flags=frozenset(flags),
        )

        if context is not None and self._is_refinement(query, intent, context):
            intent = _refine(context, intent)
            logger.debug("Refined previous intent: %s", intent.summary())

        return intent

    def match_name(self, query: str) -> str | None:
        """Return the person's name if the query is a name lookup."""
        if query in self._follow_ups:
            return None
        for pattern in _NAME_PATTERNS:
            match = pattern.match(query)
            if match and self._looks_like_name(match.group("name")):
                return _clean_name(match.group("name"))
        match = _BARE_NAME.match(query)
        if match and self._looks_like_name(match.group("name")):
            return _clean_name(match.group("name"))
        return None

    def _looks_like_name(self, candidate: str) -> bool:
        name = _clean_name(candidate)
        words = name.split()
        if not 1 <= len(words) <= 3 or not 2 < len(name) < 40:
            return False
        for word in words:
            if not _NAME_WORD.match(word):
                return False
            if self._collides(word):
                return False
        return True

    def _collides(self, word: str) -> bool:
        if word in self._not_names:
            return True
        for suffix in ("es", "s"):
            if word.endswith(suffix) and word[: -len(suffix)] in self._not_names:
                return True
        return False

    def _is_refinement(
        self,
        query: str,
        intent: SearchIntent,
        context: SearchIntent,
    ) -> bool:
        if context.is_name_search() or context.is_empty():
            return False
        if intent.names or intent.skills or intent.roles:
            return False
        has_signal = bool(
            intent.locations
            or intent.companies
            or intent.education
            or intent.requirement_flags
        )
        return has_signal and len(query.split()) <= _REFINEMENT_MAX_TOKENS


def _compile_table(table: dict[str, list[str]]) -> list[tuple[re.Pattern[str], list[str]]]:
    """Compile vocabulary keys, longest first, into whole-word patterns."""
    compiled = []
    for key in sorted(table, key=lambda k: (-len(k), k)):
        term = key.lower().strip()
        if not term:
            continue
        pattern = re.compile(rf"(?<![\w-]){re.escape(term)}(?:e?s)?(?![\w-])")
        expansions = _unique([term, *(v.lower().strip() for v in table[key] if v.strip())])
        compiled.append((pattern, expansions))
    return compiled


def _scan(
    text: str,
    patterns: list[tuple[re.Pattern[str], list[str]]],
) -> tuple[list[str], str]:
    """Find vocabulary hits and blank out the claimed spans."""
    positioned: list[tuple[int, list[str]]] = []
    for pattern, expansions in patterns:
        match = pattern.search(text)
        if match is None:
            continue
        positioned.append((match.start(), expansions))
        text = pattern.sub(_CLAIMED, text)
    positioned.sort(key=lambda item: item[0])
    hits = _unique(term for _, expansions in positioned for term in expansions)
    return hits, text


def _contains_any(text: str, terms: list[str]) -> bool:
    return any(
        re.search(rf"(?<![\w-]){re.escape(term)}(?![\w-])", text) for term in terms if term
    )


def _refine(context: SearchIntent, update: SearchIntent) -> SearchIntent:
    """Carry the previous search over, replacing the categories just given."""
    return SearchIntent(
        skills=context.skills,
        roles=context.roles,
        locations=update.locations or context.locations,
        companies=update.companies or context.companies,
        education=update.education or context.education,
        keywords=context.keywords,
        requirement_flags=context.requirement_flags | update.requirement_flags,
    )


def _clean_name(candidate: str) -> str:
    name = candidate.strip().rstrip("?").strip()
    for honorific in _HONORIFICS:
        if name.startswith(honorific):
            name = name[len(honorific):]
    return " ".join(name.split())


def _unique(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            result.append(item)
    return result
