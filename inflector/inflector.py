import logging
import re
from contextlib import ExitStack
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .exceptions import InvalidPattern, LockPoisoned
from .locks import ReadWriteLock
from .rules import RegexRule, IrregularPair, PLURALS, SINGULARS, IRREGULARS, UNCOUNTABLES
from .string_utils import titlecase, upper_pattern

logger = logging.getLogger('Inflector')


class Direction:
    ToPlural = 'TO_PLURAL'
    ToSingular = 'TO_SINGULAR'


class CompiledMatcher:
    def __init__(self, regex: re.Pattern, replace: str):
        self.regex = regex
        self.replace = replace

    def apply(self, word: str) -> Optional[str]:
        """Replace the first match in ``word``, or return ``None`` if there is no match."""
        match = self.regex.search(word)
        if match is None:
            return None
        return word[:match.start()] + match.expand(self.replace) + word[match.end():]

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.regex.pattern!r} -> {self.replace!r}>'


def compile_matcher(pattern: str, replace: str, flags=0) -> CompiledMatcher:
    try:
        regex = re.compile(pattern, flags)
        regex.sub(replace, '')  # parses the template, rejecting references to missing groups
    # IndexError: unknown group name in the template, OverflowError: repeat count too large
    except (re.error, IndexError, OverflowError) as e:
        logger.error('Invalid inflection rule %r -> %r: %s', pattern, replace, e)
        raise InvalidPattern(f'Invalid inflection rule "{pattern}" -> "{replace}": {e}') from e
    return CompiledMatcher(regex, replace)


def _literal(word: str) -> str:
    return word.replace('\\', r'\\')


def compile_uncountable(word: str) -> List[CompiledMatcher]:
    return [compile_matcher(f'^({re.escape(word)})$', r'\g<1>', re.IGNORECASE)]


def compile_irregular(source: str, target: str) -> List[CompiledMatcher]:
    """
    Compile the matchers replacing the irregular word ``source`` with ``target``.

    The patterns are anchored at the end only, so the irregular word can be the tail
    of a compound word, like "salesperson" -> "salespeople".
    """
    return [
        compile_matcher(re.escape(source.upper()) + '$', _literal(target.upper())),
        compile_matcher(re.escape(titlecase(source)) + '$', _literal(titlecase(target))),
        compile_matcher(re.escape(source) + '$', _literal(target)),
    ]


def compile_regex_rule(rule: RegexRule) -> List[CompiledMatcher]:
    """
    Compile the matchers for UPPERCASE, exact case and any other case.

    The case insensitive matcher relies on the groups in ``find`` to copy the
    original letters into the replacement, so "Bus" becomes "Buses".
    """
    return [
        compile_matcher(upper_pattern(rule.find), upper_pattern(rule.replace)),
        compile_matcher(rule.find, rule.replace),
        compile_matcher(rule.find, rule.replace, re.IGNORECASE),
    ]


def compile_direction(direction: str,
                      uncountables: Sequence[str],
                      irregulars: Sequence[IrregularPair],
                      rules: Sequence[RegexRule]) -> Tuple[CompiledMatcher, ...]:
    """
    Compile all the rules used in one direction.

    :param direction: ``Direction.ToPlural`` or ``Direction.ToSingular``.
    :param uncountables: Words with the same singular and plural form.
    :param irregulars: Irregular pairs, tried in the order they are listed.
    :param rules: Regex rules for this direction, tried in reverse order.
    :return: The matchers in the order they must be tried.
    :raises InvalidPattern: If any pattern or replacement template does not compile.
    """
    matchers = []
    for word in uncountables:
        matchers.extend(compile_uncountable(word))

    for pair in irregulars:
        if direction == Direction.ToPlural:
            matchers.extend(compile_irregular(pair.singular, pair.plural))
        else:
            matchers.extend(compile_irregular(pair.plural, pair.singular))

    # the last added rules are tried first, so user rules override the built-in ones
    for rule in reversed(rules):
        matchers.extend(compile_regex_rule(rule))

    return tuple(matchers)


class RuleStore:
    def __init__(self, name: str, items: Iterable = ()):
        self.name = name
        self.lock = ReadWriteLock(name)
        self.items = list(items)

    def snapshot(self) -> list:
        with self.lock.read():
            return list(self.items)

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.name} ({len(self.items)} items)>'


class CompiledCache:
    def __init__(self, direction: str):
        self.direction = direction
        self.lock = ReadWriteLock(f'{direction} cache')
        self.matchers: Tuple[CompiledMatcher, ...] = ()

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.direction} ({len(self.matchers)} matchers)>'


class Inflector:
    """
    Convert English nouns between singular and plural.

    The four rule stores are the source of truth. Every change to a store rebuilds
    the compiled matchers of the directions using it, so lookups always see matchers
    consistent with the stores.

    Locks are always acquired stores first, in the order uncountables, irregulars,
    plurals, singulars, then caches.
    """

    def __init__(self, plurals: Iterable = None, singulars: Iterable = None,
                 irregulars: Iterable = None, uncountables: Iterable[str] = None,
                 seed=True, log_matches=False):
        """
        :param plurals: Regex rules used to pluralize, as ``RegexRule`` or ``(find, replace)`` tuples.
        :param singulars: Regex rules used to singularize.
        :param irregulars: Irregular pairs, as ``IrregularPair`` or ``(singular, plural)`` tuples.
        :param uncountables: Words with the same singular and plural form.
        :param seed: Whether the stores that are not provided start with the built-in English rules.
        :param log_matches: Whether to log the matcher used by each lookup.
        :raises InvalidPattern: If any rule does not compile.
        """
        def initial(items, built_in):
            if items is not None:
                return items
            return built_in if seed else []

        self.log_matches = log_matches

        self._uncountables = RuleStore('uncountables', _words(initial(uncountables, UNCOUNTABLES)))
        self._irregulars = RuleStore('irregulars', [IrregularPair.of(p) for p in initial(irregulars, IRREGULARS)])
        self._plurals = RuleStore('plurals', [RegexRule.of(r) for r in initial(plurals, PLURALS)])
        self._singulars = RuleStore('singulars', [RegexRule.of(r) for r in initial(singulars, SINGULARS)])
        self._stores = (self._uncountables, self._irregulars, self._plurals, self._singulars)

        self._caches = {
            Direction.ToPlural:   CompiledCache(Direction.ToPlural),
            Direction.ToSingular: CompiledCache(Direction.ToSingular),
        }
        self._rules_by_direction = {
            Direction.ToPlural:   self._plurals,
            Direction.ToSingular: self._singulars,
        }

        for direction, cache in self._caches.items():
            cache.matchers = self._compile(direction, {})
            logger.debug('Compiled %d %s matchers', len(cache.matchers), direction)

    def _compile(self, direction: str, pending: Dict[RuleStore, list]) -> Tuple[CompiledMatcher, ...]:
        def items(store):
            return pending.get(store, store.items)

        return compile_direction(direction,
                                 items(self._uncountables),
                                 items(self._irregulars),
                                 items(self._rules_by_direction[direction]))

    def _stores_used_by(self, direction: str):
        return {self._uncountables, self._irregulars, self._rules_by_direction[direction]}

    def _mutate(self, store: RuleStore, change: Callable[[list], list], directions: Sequence[str]):
        """
        Replace the items of ``store`` with ``change(items)`` and rebuild the caches of ``directions``.

        The new items are compiled before they are stored, so an ``InvalidPattern``
        leaves both stores and caches untouched.
        """
        used = {store}
        for direction in directions:
            used |= self._stores_used_by(direction)

        with ExitStack() as stack:
            for s in self._stores:
                if s is store:
                    stack.enter_context(s.lock.write())
                elif s in used:
                    stack.enter_context(s.lock.read())

            items = change(store.items)
            compiled = {direction: self._compile(direction, {store: items}) for direction in directions}

            store.items = items
            for direction, matchers in compiled.items():
                cache = self._caches[direction]
                with cache.lock.write():
                    cache.matchers = matchers
                logger.debug('Recompiled %d %s matchers after changing %s', len(matchers), direction, store.name)

    def _snapshot(self, store: RuleStore, copy: Callable) -> list:
        try:
            items = store.snapshot()
        except LockPoisoned as e:
            logger.warning('Returning no %s: %s', store.name, e)
            return []
        return [copy(item) for item in items]

    def apply(self, word: str, direction: str) -> str:
        """
        Apply the first matching rule to ``word``.

        :param word: The word to inflect.
        :param direction: ``Direction.ToPlural`` or ``Direction.ToSingular``.
        :return: The inflected word, or ``word`` itself when no rule matches.

        Only the matched part of the word is replaced, the rest is copied as-is.
        """
        cache = self._caches[direction]
        try:
            with cache.lock.read():
                for matcher in cache.matchers:
                    result = matcher.apply(word)
                    if result is not None:
                        self._log_match(word, matcher, result)
                        return result
        except LockPoisoned as e:
            logger.warning('Returning "%s" unchanged: %s', word, e)

        return word

    def _log_match(self, word, matcher, result):
        if not self.log_matches:
            return

        logger.debug('%s -> %s (%r)', word, result, matcher.regex.pattern)

    def plural(self, word: str) -> str:
        return self.apply(word, Direction.ToPlural)

    def singular(self, word: str) -> str:
        return self.apply(word, Direction.ToSingular)

    def add_plural(self, find: str, replace: str):
        """Add a regex rule used to pluralize, tried before all the existing ones."""
        rule = RegexRule(find, replace)
        self._mutate(self._plurals, lambda items: items + [rule], [Direction.ToPlural])

    def add_singular(self, find: str, replace: str):
        """Add a regex rule used to singularize, tried before all the existing ones."""
        rule = RegexRule(find, replace)
        self._mutate(self._singulars, lambda items: items + [rule], [Direction.ToSingular])

    def add_irregular(self, singular: str, plural: str):
        pair = IrregularPair(singular, plural)
        self._mutate(self._irregulars, lambda items: items + [pair], list(self._caches))

    def add_uncountable(self, *words: str):
        words = _words(words)
        self._mutate(self._uncountables, lambda items: items + words, list(self._caches))

    def get_plural(self) -> List[RegexRule]:
        return self._snapshot(self._plurals, RegexRule.of)

    def get_singular(self) -> List[RegexRule]:
        return self._snapshot(self._singulars, RegexRule.of)

    def get_irregular(self) -> List[IrregularPair]:
        return self._snapshot(self._irregulars, IrregularPair.of)

    def get_uncountable(self) -> List[str]:
        return self._snapshot(self._uncountables, str)

    def set_plural(self, rules: Iterable):
        """
        Replace all the regex rules used to pluralize.

        :param rules: ``RegexRule`` objects or ``(find, replace)`` tuples, the last one is tried first.
        :raises InvalidPattern: If any rule does not compile. The current rules are kept.
        """
        rules = [RegexRule.of(r) for r in rules]
        self._mutate(self._plurals, lambda items: rules, list(self._caches))

    def set_singular(self, rules: Iterable):
        rules = [RegexRule.of(r) for r in rules]
        self._mutate(self._singulars, lambda items: rules, list(self._caches))

    def set_irregular(self, pairs: Iterable):
        pairs = [IrregularPair.of(p) for p in pairs]
        self._mutate(self._irregulars, lambda items: pairs, list(self._caches))

    def set_uncountable(self, words: Iterable[str]):
        words = _words(words)
        self._mutate(self._uncountables, lambda items: words, list(self._caches))

    def __repr__(self):
        counts = ', '.join(f'{store.name}={len(store.items)}' for store in self._stores)
        return f'<{self.__class__.__name__} {counts}>'


def _words(words: Iterable[str]) -> List[str]:
    words = list(words)
    for word in words:
        if not isinstance(word, str):
            raise TypeError(f'Uncountable words must be strings, got {word!r}')
    return words


default_inflector = Inflector()


def plural(word: str) -> str:
    """
    Convert a word to its plural form.

    :param word: The word to pluralize.
    :return: The plural form of the word, with the same case.

    >>> plural('person'), plural('Person'), plural('PERSON'), plural('FancyPerson')
    ('people', 'People', 'PEOPLE', 'FancyPeople')
    """
    return default_inflector.plural(word)


def singular(word: str) -> str:
    """
    Convert a word to its singular form.

    :param word: The word to singularize.
    :return: The singular form of the word, with the same case.

    >>> singular('buses'), singular('Buses'), singular('BUSES'), singular('FancyPeople')
    ('bus', 'Bus', 'BUS', 'FancyPerson')
    """
    return default_inflector.singular(word)


def add_plural(find: str, replace: str):
    default_inflector.add_plural(find, replace)


def add_singular(find: str, replace: str):
    default_inflector.add_singular(find, replace)


def add_irregular(singular: str, plural: str):
    default_inflector.add_irregular(singular, plural)


def add_uncountable(*words: str):
    default_inflector.add_uncountable(*words)


def get_plural() -> List[RegexRule]:
    return default_inflector.get_plural()


def get_singular() -> List[RegexRule]:
    return default_inflector.get_singular()


def get_irregular() -> List[IrregularPair]:
    return default_inflector.get_irregular()


def get_uncountable() -> List[str]:
    return default_inflector.get_uncountable()


def set_plural(rules: Iterable):
    default_inflector.set_plural(rules)


def set_singular(rules: Iterable):
    default_inflector.set_singular(rules)


def set_irregular(pairs: Iterable):
    default_inflector.set_irregular(pairs)


def set_uncountable(words: Iterable[str]):
    default_inflector.set_uncountable(words)
