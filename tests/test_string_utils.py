import re

from inflector.string_utils import titlecase, upper_pattern


def test_titlecase():
    assert titlecase('person') == 'Person'
    assert titlecase('PERSON') == 'Person'
    assert titlecase('fancyPerson') == 'Fancyperson'
    assert titlecase('node_child') == 'Node_child'
    assert titlecase('old news') == 'Old News'
    assert titlecase('  two   spaces ') == '  Two   Spaces '
    assert titlecase('') == ''


def test_upper_pattern():
    assert upper_pattern(r'([^aeiouy]|qu)y$') == r'([^AEIOUY]|QU)Y$'
    assert upper_pattern(r'\1ies') == r'\1IES'
    assert upper_pattern(r'\g<1>s') == r'\g<1>S'
    assert upper_pattern(r'(?:([^f])fe|([lr])f)$') == r'(?:([^F])FE|([LR])F)$'
    assert upper_pattern(r'\d+x') == r'\d+X'
    assert upper_pattern(r'(?i:ab)c') == r'(?i:AB)C'


def test_upper_pattern_named_groups():
    pattern = upper_pattern(r'(?P<stem>matr)ix$')
    template = upper_pattern(r'\g<stem>ices')
    assert pattern == r'(?P<STEM>MATR)IX$'
    assert re.sub(pattern, template, 'MATRIX') == 'MATRICES'
