from src.sanitization.domain.models import RuleSet
from src.sanitization.domain.rules import parse_ruleset

GLOBAL_UTM = {"urlPattern": r".*", "rules": [r"^utm_"]}


def ruleset(**providers: dict) -> RuleSet:
    return parse_ruleset({"providers": providers})
