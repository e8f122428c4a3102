import re

from infrastructure.record_store import QUESTION_TABLES
from services.review_rules.base import FieldRewriteRule, apply_rewrites

# "예를 들어 사과는" -> "예를 들어, 사과는"; an existing comma (even after spaces) is left alone
COMMA_REWRITES = [
    (re.compile(r"예를 들어\s+(?=[^\s,，])"), "예를 들어, "),
]


def insert_example_comma(text: str) -> str:
    return apply_rewrites(text, COMMA_REWRITES)


class ExampleCommaRule(FieldRewriteRule):
    name = "example-commas"
    description = "Insert a comma after the connective '예를 들어' in explanations."
    fields_by_table = {table: ("explanation",) for table in QUESTION_TABLES}
    sample_limit = 20

    def rewrite(self, table, field_name, text):
        return insert_example_comma(text)
