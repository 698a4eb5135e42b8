# tag_rules/matching.py


def parse_tags(value):
    """
    Split a comma-delimited tag string (or an iterable of tags) into a list
    of trimmed tags, dropping blanks and case-insensitive duplicates.
    """
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(',')

    tags = []
    seen = set()
    for tag in value:
        tag = str(tag).strip()
        key = tag.lower()
        if not tag or key in seen:
            continue
        seen.add(key)
        tags.append(tag)
    return tags


def format_tags(value):
    return ','.join(parse_tags(value))


def tag_set(value):
    return {tag.lower() for tag in parse_tags(value)}


def tags_match(candidate_tags, rule_tags):
    """True when any candidate tag is one of the rule's tags, ignoring case"""
    return bool(tag_set(candidate_tags) & tag_set(rule_tags))
