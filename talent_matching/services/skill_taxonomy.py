"""
Skill Synonym Taxonomy
Canonical skill name → alternative names a candidate profile may use.
Used by the skill scorer to credit equivalent skills.
"""
from typing import Dict, List, Set, Tuple

# =============================================================================
# SKILL SYNONYMS: canonical (lowercase) name to alternatives
# =============================================================================

SKILL_SYNONYMS: Dict[str, List[str]] = {
    # ── Languages & runtimes ──
    "javascript": ["js", "node.js", "nodejs", "es6", "typescript"],
    "typescript": ["ts", "typed javascript"],
    "node.js": ["nodejs", "node", "server-side javascript"],
    "python": ["django", "flask", "fastapi", "pandas", "numpy"],
    # ── Frontend ──
    "react": ["reactjs", "react.js", "nextjs", "next.js"],
    "angular": ["angularjs", "angular 2+"],
    "vue.js": ["vue", "vuejs"],
    "html": ["html5", "css", "frontend"],
    "css": ["scss", "sass", "less", "styling"],
    # ── Cloud & infrastructure ──
    "aws": ["amazon web services", "ec2", "s3", "lambda", "cloudformation"],
    "docker": ["containerization", "kubernetes", "k8s"],
    # ── Data stores ──
    "sql": ["mysql", "postgresql", "mongodb", "database"],
    "mongodb": ["mongo", "nosql"],
    "postgresql": ["postgres", "psql"],
    "redis": ["cache", "in-memory database"],
    "elasticsearch": ["elastic", "search engine"],
    # ── Practices ──
    "git": ["github", "gitlab", "version control"],
    "agile": ["scrum", "kanban", "sprint"],
    "api": ["rest", "graphql", "webservices"],
    "testing": ["jest", "cypress", "selenium", "unit testing"],
}


def normalize_skill(name: str) -> str:
    """Lowercase and collapse whitespace"""
    return " ".join((name or "").lower().split())


def _tokens(name: str) -> Set[str]:
    return set(name.split())


def match_skill_name(required: str, actual: str) -> Tuple[bool, bool]:
    """
    Compare a required skill name with a candidate skill name.

    Returns (matched, exact). A synonym matches when it equals the candidate
    name or when every word of one is a word of the other, so "javascript"
    matches "typed javascript" but "java" does not.
    """
    required_norm = normalize_skill(required)
    actual_norm = normalize_skill(actual)
    if not required_norm or not actual_norm:
        return (False, False)

    if required_norm == actual_norm:
        return (True, True)

    actual_tokens = _tokens(actual_norm)
    for synonym in SKILL_SYNONYMS.get(required_norm, []):
        synonym_tokens = _tokens(synonym)
        if synonym_tokens <= actual_tokens or actual_tokens <= synonym_tokens:
            return (True, False)

    return (False, False)
