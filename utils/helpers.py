import uuid


def parse_uuid_list(values):
    """
    Flatten repeated and comma-separated query values into UUIDs.
    Values that are not valid UUIDs are dropped.
    """
    ids = []
    for value in values or []:
        for part in str(value).split(','):
            part = part.strip()
            if not part:
                continue
            try:
                ids.append(uuid.UUID(part))
            except ValueError:
                continue
    return ids


def query_param_list(params, name):
    """
    Read a list parameter from a QueryDict, accepting `q[name][]`,
    `q[name]` and plain `name` spellings.
    """
    values = []
    for key in (f"q[{name}][]", f"q[{name}]", name):
        values.extend(params.getlist(key))
    return values
