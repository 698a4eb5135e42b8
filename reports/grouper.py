# reports/grouper.py
from collections import OrderedDict


class OrderGrouper:
    """
    Turns line items into report rows.

    ``rules`` is an ordered list of dicts, one per grouping level:

    - ``group_by``: callable mapping a line item to its group key
    - ``sort_by`` (optional): callable mapping a group key to a sort key;
      without it groups keep the order their keys were first seen in
    - ``summary_columns`` (optional): callables appended as a summary row
      after each group at this level, each receiving the group's items

    ``columns`` are callables receiving the line items of one leaf group;
    every leaf group produces exactly one row.
    """

    def __init__(self, rules, columns):
        self.rules = list(rules)
        self.columns = list(columns)

    def table(self, items):
        items = list(items)
        rows = []
        if items:
            self._build_rows(items, 0, rows)
        return rows

    def _build_rows(self, items, depth, rows):
        if depth == len(self.rules):
            rows.append([column(items) for column in self.columns])
            return

        rule = self.rules[depth]
        groups = group_items(items, rule['group_by'])
        keys = list(groups.keys())
        if rule.get('sort_by'):
            keys.sort(key=rule['sort_by'])

        for key in keys:
            self._build_rows(groups[key], depth + 1, rows)
            if rule.get('summary_columns'):
                rows.append([column(groups[key]) for column in rule['summary_columns']])


def group_items(items, key_func):
    groups = OrderedDict()
    for item in items:
        groups.setdefault(key_func(item), []).append(item)
    return groups
