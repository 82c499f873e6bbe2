import re

WORD = re.compile(r'\S+')


def titlecase(text: str) -> str:
    """
    Convert a string to titlecase.

    :param text: The string to convert.
    :return: The string with the first letter of each whitespace-delimited word
        uppercased and the remaining letters of the word lowercased.
    """
    return WORD.sub(lambda match: match.group(0)[:1].upper() + match.group(0)[1:].lower(), text)


def upper_pattern(text: str) -> str:
    """
    Convert a regular expression or a replacement template to uppercase.

    :param text: The pattern or template to convert.
    :return: The uppercase version of the pattern or template.

    The character following a backslash is copied as-is, so ``\\d`` stays a digit
    class and ``\\g<1>`` stays a group reference. The flag letters of inline groups
    like ``(?i)`` are copied as-is too. Group names are uppercased, both in
    ``(?P<name>...)`` and in ``\\g<name>``, so the pattern and the template still agree.
    """
    result = []
    i = 0
    while i < len(text):
        c = text[i]
        if c == '\\' and i + 1 < len(text):
            result.append(text[i:i + 2])
            i += 2
            continue

        if text.startswith('(?', i):
            result.append('(?')
            i += 2
            while i < len(text) and (text[i].isalpha() or text[i] == '-'):
                result.append(text[i])
                i += 1
            continue

        result.append(c.upper())
        i += 1

    return ''.join(result)
