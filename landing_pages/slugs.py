"""
URL-friendly slugs derived from resource titles.
"""
import re
import unicodedata

DEFAULT_MIN_LENGTH = 40
FALLBACK_SLUG = 'dataset'

TRANSLITERATION_MAP = {
    # German
    'ä': 'ae', 'ö': 'oe', 'ü': 'ue', 'Ä': 'Ae', 'Ö': 'Oe', 'Ü': 'Ue', 'ß': 'ss',
    # French
    'à': 'a', 'â': 'a', 'ç': 'c', 'é': 'e', 'è': 'e', 'ê': 'e', 'ë': 'e',
    'î': 'i', 'ï': 'i', 'ô': 'o', 'ù': 'u', 'û': 'u', 'ÿ': 'y',
    # Spanish / Portuguese
    'ñ': 'n', 'á': 'a', 'í': 'i', 'ó': 'o', 'ú': 'u', 'ã': 'a', 'õ': 'o',
    # Nordic
    'æ': 'ae', 'ø': 'o', 'å': 'a', 'Æ': 'Ae', 'Ø': 'O', 'Å': 'A',
    # Polish
    'ł': 'l', 'Ł': 'L', 'ź': 'z', 'ż': 'z', 'ć': 'c', 'ś': 's', 'ń': 'n',
    # Czech / Slovak
    'č': 'c', 'ř': 'r', 'š': 's', 'ž': 'z', 'ď': 'd', 'ť': 't', 'ň': 'n', 'ě': 'e', 'ů': 'u',
    # Typographic punctuation
    '–': '-', '—': '-',
    '‘': '', '’': '', '“': '', '”': '', '…': '',
}

_TRANSLATION_TABLE = str.maketrans(TRANSLITERATION_MAP)


def transliterate(text):
    """Map known special characters, then drop whatever NFKD cannot turn into ASCII."""
    text = text.translate(_TRANSLATION_TABLE)
    decomposed = unicodedata.normalize('NFKD', text)
    return decomposed.encode('ascii', 'ignore').decode('ascii')


def truncate_at_word_boundary(slug, min_length=DEFAULT_MIN_LENGTH):
    """Cut at the first hyphen found at or after ``min_length``."""
    if len(slug) <= min_length:
        return slug
    next_hyphen = slug.find('-', min_length)
    if next_hyphen == -1:
        return slug
    return slug[:next_hyphen]


def generate_slug(title, min_length=DEFAULT_MIN_LENGTH):
    """
    Generate a URL-friendly slug from a title.

    >>> generate_slug('Superconducting Gravimeter Data from Buchenbach')
    'superconducting-gravimeter-data-from-buchenbach'
    """
    slug = transliterate(title or '').lower()
    slug = re.sub(r'[\s_]+', '-', slug)
    slug = re.sub(r'[^a-z0-9-]', '', slug)
    slug = re.sub(r'-+', '-', slug).strip('-')
    slug = truncate_at_word_boundary(slug, min_length)
    return slug or FALLBACK_SLUG
