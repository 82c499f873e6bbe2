from typing import List


class Rule:
    def __eq__(self, other):
        return type(self) is type(other) and tuple(self) == tuple(other)

    __hash__ = None

    def _check_strings(self):
        for value in self:
            if not isinstance(value, str):
                raise TypeError(f"{self.__class__.__name__} fields must be strings, got {value!r}")

    def __iter__(self):
        raise NotImplementedError

    def __repr__(self):
        return f'<{self.__class__.__name__} {" -> ".join(repr(v) for v in self)}>'


class RegexRule(Rule):
    """A ``find`` regular expression and the ``replace`` template substituted for its match."""

    def __init__(self, find: str, replace: str):
        self.find = find
        self.replace = replace
        self._check_strings()

    def __iter__(self):
        return iter((self.find, self.replace))

    @classmethod
    def of(cls, rule) -> 'RegexRule':
        if isinstance(rule, RegexRule):
            return RegexRule(rule.find, rule.replace)
        find, replace = rule
        return cls(find, replace)


class IrregularPair(Rule):
    """A singular and plural form that no regex rule can derive from each other."""

    def __init__(self, singular: str, plural: str):
        self.singular = singular
        self.plural = plural
        self._check_strings()

    def __iter__(self):
        return iter((self.singular, self.plural))

    @classmethod
    def of(cls, pair) -> 'IrregularPair':
        if isinstance(pair, IrregularPair):
            return IrregularPair(pair.singular, pair.plural)
        singular, plural = pair
        return cls(singular, plural)


# Built-in English rules. Regex rules are listed from the most generic to the most
# specific, the last one added is the first one tried.

PLURALS: List[RegexRule] = [RegexRule(find, replace) for find, replace in [
    (r'([a-z])$', r'\1s'),
    (r's$', r's'),
    (r'^(ax|test)is$', r'\1es'),
    (r'(octop|vir)us$', r'\1i'),
    (r'(octop|vir)i$', r'\1i'),
    (r'(alias|status|campus)$', r'\1es'),
    (r'(bu)s$', r'\1ses'),
    (r'(buffal|tomat)o$', r'\1oes'),
    (r'([ti])um$', r'\1a'),
    (r'([ti])a$', r'\1a'),
    (r'sis$', r'ses'),
    (r'(?:([^f])fe|([lr])f)$', r'\1\2ves'),
    (r'(hive)$', r'\1s'),
    (r'([^aeiouy]|qu)y$', r'\1ies'),
    (r'(x|ch|ss|sh)$', r'\1es'),
    (r'(matr|vert|ind)(?:ix|ex)$', r'\1ices'),
    (r'^(m|l)ouse$', r'\1ice'),
    (r'^(m|l)ice$', r'\1ice'),
    (r'^(ox)$', r'\1en'),
    (r'^(oxen)$', r'\1'),
    (r'(quiz)$', r'\1zes'),
    (r'(drive)$', r'\1s'),
]]

SINGULARS: List[RegexRule] = [RegexRule(find, replace) for find, replace in [
    (r's$', r''),
    (r'(ss)$', r'\1'),
    (r'(n)ews$', r'\1ews'),
    (r'([ti])a$', r'\1um'),
    (r'((a)naly|(b)a|(d)iagno|(p)arenthe|(p)rogno|(s)ynop|(t)he)(sis|ses)$', r'\1sis'),
    (r'(^analy)(sis|ses)$', r'\1sis'),
    (r'([^f])ves$', r'\1fe'),
    (r'(hive)s$', r'\1'),
    (r'(tive)s$', r'\1'),
    (r'([lr])ves$', r'\1f'),
    (r'([^aeiouy]|qu)ies$', r'\1y'),
    (r'(s)eries$', r'\1eries'),
    (r'(m)ovies$', r'\1ovie'),
    (r'(c)ookies$', r'\1ookie'),
    (r'(x|ch|ss|sh)es$', r'\1'),
    (r'^(m|l)ice$', r'\1ouse'),
    (r'(bus|campus)(es)?$', r'\1'),
    (r'(o)es$', r'\1'),
    (r'(shoe)s$', r'\1'),
    (r'(cris|test)(is|es)$', r'\1is'),
    (r'^(a)x[ie]s$', r'\1xis'),
    (r'(octop|vir)(us|i)$', r'\1us'),
    (r'(alias|status)(es)?$', r'\1'),
    (r'^(ox)en', r'\1'),
    (r'(vert|ind)ices$', r'\1ex'),
    (r'(matr)ices$', r'\1ix'),
    (r'(quiz)zes$', r'\1'),
    (r'(database)s$', r'\1'),
    (r'(drive)s$', r'\1'),
]]

IRREGULARS: List[IrregularPair] = [IrregularPair(singular, plural) for singular, plural in [
    ('person', 'people'),
    ('man', 'men'),
    ('child', 'children'),
    ('sex', 'sexes'),
    ('move', 'moves'),
    ('ombie', 'ombies'),  # matches the tail of zombie
    ('goose', 'geese'),
    ('foot', 'feet'),
    ('moose', 'moose'),
    ('tooth', 'teeth'),
]]

UNCOUNTABLES: List[str] = [
    'equipment', 'information', 'rice', 'money', 'species', 'series', 'fish',
    'sheep', 'jeans', 'police', 'milk', 'salt', 'time', 'water', 'paper', 'food',
    'art', 'cash', 'music', 'help', 'luck', 'oil', 'progress', 'rain',
    'research', 'shopping', 'software', 'traffic',
]
