"""Entity/domain tagging from a keyword table."""
from typing import List, Tuple

from config_loader import EntityRule


class EntityTagger:
    """Map keywords found in text to actor and transport-mode tags."""

    def __init__(self, rules: List[EntityRule]):
        # Empty keywords would match everything, empty tags are meaningless
        self.rules: List[Tuple[str, str]] = [
            (rule.keyword.lower(), rule.tag.strip())
            for rule in rules
            if rule.keyword.strip() and rule.tag.strip()
        ]

    def tag(self, text: str) -> List[str]:
        """
        Tag text by substring membership.

        Returns:
            Matched tags in table order, without duplicates (may be empty)
        """
        if not text:
            return []

        lowered = text.lower()
        tags: List[str] = []
        for keyword, tag in self.rules:
            if tag not in tags and keyword in lowered:
                tags.append(tag)
        return tags
